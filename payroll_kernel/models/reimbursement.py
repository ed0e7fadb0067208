"""
Module: payroll_kernel.models.reimbursement
Responsibility: ORM persistence for expense reimbursement claims.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - amount > 0 (ck_reimbursement_amount).
    - status is pending, approved or rejected (ck_reimbursement_status).
    - No uniqueness: every submission is an independent claim.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from payroll_kernel.db.base import TrackedBase, UUIDString


class ReimbursementRecord(TrackedBase):
    """An expense claim; only approved claims are paid out."""

    __tablename__ = "reimbursement_records"

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_reimbursement_amount"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_reimbursement_status",
        ),
        Index("idx_reimbursement_employee_period", "employee_id", "period_id"),
        Index("idx_reimbursement_period_status", "period_id", "status"),
    )

    employee_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("employees.id"), nullable=False
    )

    period_id: Mapped[UUID] = mapped_column(
        UUIDString(), ForeignKey("attendance_periods.id"), nullable=False
    )

    amount: Mapped[Decimal] = mapped_column(nullable=False)

    description: Mapped[str] = mapped_column(String(4000), nullable=False)

    receipt_reference: Mapped[str | None] = mapped_column(String(1000), nullable=True)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    source_ip: Mapped[str | None] = mapped_column(String(255), nullable=True)

    reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    reviewed_by_id: Mapped[UUID | None] = mapped_column(UUIDString(), nullable=True)

    def __repr__(self) -> str:
        return f"<ReimbursementRecord {self.employee_id} {self.amount} {self.status}>"
