"""
Module: payroll_kernel.models.employee
Responsibility: ORM persistence for employees -- the people who submit
    ledger records and receive payouts.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - username is unique (uq_employee_username).
    - Only active employees may submit records or be paid (enforced by
      the ledger services and PayrollService).

Audit relevance:
    password_hash is stored for the external authentication collaborator
    and is never copied into a DTO or a log line.
"""

from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import TrackedBase


class Employee(TrackedBase):
    """
    An employee (or administrator) known to the payroll kernel.

    Guarantees:
        - role is "admin" or "employee" (ck_employee_role).
        - base_salary, when present, is a monthly amount and non-negative.
          Employees without a base salary are skipped by payroll.
    """

    __tablename__ = "employees"

    __table_args__ = (
        UniqueConstraint("username", name="uq_employee_username"),
        CheckConstraint("role IN ('admin', 'employee')", name="ck_employee_role"),
        CheckConstraint(
            "base_salary IS NULL OR base_salary >= 0",
            name="ck_employee_base_salary",
        ),
        Index("idx_employee_active", "is_active"),
    )

    username: Mapped[str] = mapped_column(String(100), nullable=False)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[str] = mapped_column(String(20), nullable=False, default="employee")

    # Monthly base salary; NULL means "not on payroll"
    base_salary: Mapped[Decimal | None] = mapped_column(nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Employee {self.username} ({self.role}) active={self.is_active}>"
