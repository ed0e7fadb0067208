"""Database layer - engine, base classes, types, and upserts."""

from payroll_kernel.db.base import UUID, Base, TrackedBase, UUIDString
from payroll_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    session_scope,
)
from payroll_kernel.db.types import round_money, to_decimal

__all__ = [
    "get_engine",
    "get_session",
    "session_scope",
    "create_tables",
    "Base",
    "TrackedBase",
    "UUIDString",
    "UUID",
    "round_money",
    "to_decimal",
]
