"""
Module: payroll_kernel.models.overtime
Responsibility: ORM persistence for daily overtime claims.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - At most one claim per (employee_id, overtime_date)
      (uq_overtime_employee_date).  Re-submission overwrites hours and
      description through an ON CONFLICT upsert.
    - 0 < hours_worked <= 3 (ck_overtime_hours).
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import TrackedBase, UUIDString


class OvertimeRecord(TrackedBase):
    """One overtime claim per employee per calendar day."""

    __tablename__ = "overtime_records"

    __table_args__ = (
        UniqueConstraint(
            "employee_id", "overtime_date", name="uq_overtime_employee_date"
        ),
        CheckConstraint(
            "hours_worked > 0 AND hours_worked <= 3", name="ck_overtime_hours"
        ),
        Index("idx_overtime_employee_period", "employee_id", "period_id"),
        Index("idx_overtime_period", "period_id"),
    )

    employee_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("employees.id"), nullable=False
    )

    period_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("attendance_periods.id"), nullable=False
    )

    overtime_date: Mapped[date] = mapped_column(Date, nullable=False)

    hours_worked: Mapped[Decimal] = mapped_column(nullable=False)

    description: Mapped[str | None] = mapped_column(String(4000), nullable=True)

    source_ip: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<OvertimeRecord {self.employee_id} {self.overtime_date} "
            f"{self.hours_worked}h>"
        )
