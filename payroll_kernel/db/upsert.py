"""
Module: payroll_kernel.db.upsert
Responsibility: Build dialect-specific ``INSERT ... ON CONFLICT DO UPDATE``
    statements so ledger upserts are a single atomic statement keyed on a
    table's unique constraint.
Architecture position: Kernel > DB.  Used by the attendance and overtime
    services.  MUST NOT import from services/ or domain/.

Invariants enforced:
    - The store-level unique constraint is the source of truth for
      (employee, date) uniqueness.  There is never a separate
      SELECT-then-INSERT.

Failure modes:
    - NotImplementedError for dialects without ON CONFLICT support.
"""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session


def upsert_statement(
    session: Session,
    model: type,
    values: dict[str, Any],
    conflict_columns: list[str],
    update_values: dict[str, Any],
    where=None,
):
    """
    Return an ``INSERT ... ON CONFLICT (...) DO UPDATE ... RETURNING model``.

    Args:
        session: Session whose bind decides the SQL dialect.
        model: ORM class to insert into.
        values: Column values for the INSERT branch.
        conflict_columns: Columns of the unique constraint that triggers
            the UPDATE branch.
        update_values: Column values applied when the row already exists.
        where: Optional condition on the existing row.  When it is false
            the conflicting row is left untouched and no row is returned.

    Returns:
        An executable statement; run it with ``session.scalars(...)`` to
        receive the inserted or updated ORM instance, or nothing when
        ``where`` rejected the update.
    """
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        insert = postgresql.insert
    elif dialect == "sqlite":
        insert = sqlite.insert
    else:
        raise NotImplementedError(f"Upsert not supported for dialect {dialect!r}")

    stmt = insert(model).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=conflict_columns,
        set_=update_values,
        where=where,
    )
    return stmt.returning(model)
