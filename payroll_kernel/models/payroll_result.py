"""
Module: payroll_kernel.models.payroll_result
Responsibility: ORM persistence for per-employee payroll results of a
    processed period.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - At most one result per (employee_id, period_id)
      (uq_payroll_result_employee_period).  A duplicate insert is a
      second payout and aborts the whole run.
    - Rows are written only in the same transaction that flips the
      period to processed.

Audit relevance:
    base_salary and hourly_overtime_rate are snapshotted so a payslip can
    be re-derived after the employee's salary changes.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import TrackedBase, UUIDString


class PayrollResult(TrackedBase):
    """Computed payout for one employee in one processed period."""

    __tablename__ = "payroll_results"

    __table_args__ = (
        UniqueConstraint(
            "employee_id", "period_id", name="uq_payroll_result_employee_period"
        ),
        Index("idx_payroll_result_period", "period_id"),
    )

    employee_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("employees.id"), nullable=False
    )

    period_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("attendance_periods.id"), nullable=False
    )

    present_days: Mapped[int] = mapped_column(Integer, nullable=False)

    working_days: Mapped[int] = mapped_column(Integer, nullable=False)

    base_salary: Mapped[Decimal] = mapped_column(nullable=False)

    overtime_hours: Mapped[Decimal] = mapped_column(nullable=False)

    hourly_overtime_rate: Mapped[Decimal] = mapped_column(nullable=False)

    prorated_base: Mapped[Decimal] = mapped_column(nullable=False)

    overtime_pay: Mapped[Decimal] = mapped_column(nullable=False)

    reimbursement_total: Mapped[Decimal] = mapped_column(nullable=False)

    total_pay: Mapped[Decimal] = mapped_column(nullable=False)

    computed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __repr__(self) -> str:
        return f"<PayrollResult {self.employee_id} period={self.period_id} {self.total_pay}>"
