"""
Module: payroll_kernel.models.attendance
Responsibility: ORM persistence for daily attendance (presence) records.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - At most one record per (employee_id, attendance_date)
      (uq_attendance_employee_date).  AttendanceService writes through an
      ON CONFLICT upsert keyed on this constraint.
"""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import TrackedBase, UUIDString


class AttendanceRecord(TrackedBase):
    """
    One presence entry per employee per calendar day.

    The first submission of a day sets check_in_time; later submissions
    on the same day set check_out_time.
    """

    __tablename__ = "attendance_records"

    __table_args__ = (
        UniqueConstraint(
            "employee_id", "attendance_date", name="uq_attendance_employee_date"
        ),
        Index("idx_attendance_employee_period", "employee_id", "period_id"),
        Index("idx_attendance_period", "period_id"),
    )

    employee_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("employees.id"), nullable=False
    )

    period_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("attendance_periods.id"), nullable=False
    )

    attendance_date: Mapped[date] = mapped_column(Date, nullable=False)

    check_in_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    check_out_time: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    is_present: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    source_ip: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<AttendanceRecord {self.employee_id} {self.attendance_date}>"
