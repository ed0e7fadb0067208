"""
Module: payroll_kernel.models.attendance_period
Responsibility: ORM persistence for attendance periods -- the date ranges
    that ledger records belong to and that payroll is computed over.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - end_date >= start_date (ck_period_date_range, also checked by
      PeriodService before any write).
    - processed flips false -> true exactly once, via the conditional
      UPDATE in PeriodService.mark_processed().  After that the period is
      immutable: no ledger writes, no second payroll run.

Failure modes:
    - InvalidPeriodRangeError on create with end < start.
    - AlreadyProcessedError on a second mark_processed().
    - PeriodProcessedError on a ledger write into a processed period.
"""

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import TrackedBase, UUIDString


class AttendancePeriod(TrackedBase):
    """
    Administrator-defined pay period.

    Guarantees:
        - processed_at and processed_by_id are NULL until processed is True.

    Non-goals:
        - Overlapping periods are not rejected; a (employee, date) record
          belongs to whichever period it was first submitted against.
    """

    __tablename__ = "attendance_periods"

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_period_date_range"),
        Index("idx_period_dates", "start_date", "end_date"),
        Index("idx_period_processed", "processed"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # Period boundaries (inclusive)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)

    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    processed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    processed_by_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<AttendancePeriod {self.name}: {self.start_date}..{self.end_date} "
            f"processed={self.processed}>"
        )

    def contains_date(self, check_date: date) -> bool:
        """Check if a date falls within this period."""
        return self.start_date <= check_date <= self.end_date
