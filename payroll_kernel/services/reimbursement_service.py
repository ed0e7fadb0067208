"""
ReimbursementService -- expense claims and their review.

Responsibility:
    Accepts reimbursement claims against an open period and lets an
    administrator approve or reject them while the period is still open.
    Only approved claims are paid by the payroll run.

Invariants enforced:
    - amount > 0 and description non-blank.
    - New claims start pending; a claim is reviewed at most once.
    - No submission or review lands in a processed period.
    - Flush-only: the caller owns commit/rollback.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from payroll_kernel.db.types import to_decimal
from payroll_kernel.domain.dtos import ReimbursementRecordInfo, ReimbursementStatus
from payroll_kernel.exceptions import (
    InvalidReimbursementError,
    InvalidReimbursementStatusError,
    ReimbursementNotFoundError,
)
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_kernel.models.reimbursement import ReimbursementRecord
from payroll_kernel.services.ledger import LedgerService

logger = get_logger("services.reimbursement")


class ReimbursementService(LedgerService[ReimbursementRecord]):
    """Service for reimbursement claims."""

    def submit(
        self,
        employee_id: UUID,
        period_id: UUID,
        amount: Decimal | int | str,
        description: str,
        receipt_reference: str | None = None,
        source_ip: str | None = None,
        *,
        actor_id: UUID | None = None,
    ) -> ReimbursementRecordInfo:
        """
        File a new pending claim.

        Every call creates a new row; there is no deduplication.

        Raises:
            InvalidReimbursementError: If amount <= 0 or description is blank.
            EmployeeNotFoundError, EmployeeInactiveError,
            UnknownPeriodError, PeriodProcessedError.
        """
        actor_id = actor_id or employee_id
        try:
            value = to_decimal(amount)
        except ValueError as exc:
            raise InvalidReimbursementError("amount", "must be a number") from exc
        if value <= 0:
            raise InvalidReimbursementError("amount", "must be greater than 0")
        if not description or not description.strip():
            raise InvalidReimbursementError("description", "is required")

        with LogContext.bind(employee_id=employee_id, period_id=period_id):
            self._require_active_employee(employee_id, "submit_reimbursement")
            self._open_period(period_id, "submit_reimbursement")

            record = ReimbursementRecord(
                employee_id=employee_id,
                period_id=period_id,
                amount=value,
                description=description,
                receipt_reference=receipt_reference,
                status=ReimbursementStatus.PENDING.value,
                source_ip=source_ip,
                created_by_id=actor_id,
            )
            with self._storage_errors("submit_reimbursement"):
                self.session.add(record)
                self.session.flush()

            logger.info(
                "reimbursement_submitted",
                extra={"reimbursement_id": str(record.id), "amount": str(value)},
            )
        return ReimbursementRecordInfo.from_model(record)

    def approve(self, reimbursement_id: UUID, actor_id: UUID) -> ReimbursementRecordInfo:
        """Move a pending claim to approved so the payroll run pays it."""
        return self._review(reimbursement_id, ReimbursementStatus.APPROVED, actor_id)

    def reject(self, reimbursement_id: UUID, actor_id: UUID) -> ReimbursementRecordInfo:
        """Move a pending claim to rejected."""
        return self._review(reimbursement_id, ReimbursementStatus.REJECTED, actor_id)

    def get_reimbursement(self, reimbursement_id: UUID) -> ReimbursementRecordInfo:
        with self._storage_errors("get_reimbursement"):
            record = self.session.get(ReimbursementRecord, reimbursement_id)
        if record is None:
            raise ReimbursementNotFoundError(reimbursement_id)
        return ReimbursementRecordInfo.from_model(record)

    def list_by_employee_and_period(
        self, employee_id: UUID, period_id: UUID
    ) -> list[ReimbursementRecordInfo]:
        """An employee's claims in a period, oldest first."""
        with self._storage_errors("list_reimbursements"):
            records = self.session.execute(
                select(ReimbursementRecord)
                .where(
                    ReimbursementRecord.employee_id == employee_id,
                    ReimbursementRecord.period_id == period_id,
                )
                .order_by(ReimbursementRecord.created_at, ReimbursementRecord.id)
            ).scalars().all()
        return [ReimbursementRecordInfo.from_model(r) for r in records]

    def _review(
        self,
        reimbursement_id: UUID,
        target: ReimbursementStatus,
        actor_id: UUID,
    ) -> ReimbursementRecordInfo:
        with self._storage_errors("review_reimbursement"):
            period_id = self.session.execute(
                select(ReimbursementRecord.period_id).where(
                    ReimbursementRecord.id == reimbursement_id
                )
            ).scalar_one_or_none()
        if period_id is None:
            raise ReimbursementNotFoundError(reimbursement_id)

        with LogContext.bind(period_id=period_id, actor_id=actor_id):
            # Period lock before the claim row
            self._open_period(period_id, f"{target.value}_reimbursement")

            with self._storage_errors("review_reimbursement"):
                record = self.session.execute(
                    select(ReimbursementRecord)
                    .where(ReimbursementRecord.id == reimbursement_id)
                    .with_for_update()
                    .execution_options(populate_existing=True)
                ).scalar_one()

            if record.status != ReimbursementStatus.PENDING.value:
                raise InvalidReimbursementStatusError(
                    reimbursement_id, record.status, target.value
                )

            record.status = target.value
            record.reviewed_at = self._clock.now()
            record.reviewed_by_id = actor_id
            record.updated_by_id = actor_id
            with self._storage_errors("review_reimbursement"):
                self.session.flush()

            logger.info(
                "reimbursement_reviewed",
                extra={
                    "reimbursement_id": str(reimbursement_id),
                    "status": target.value,
                },
            )
        return ReimbursementRecordInfo.from_model(record)
