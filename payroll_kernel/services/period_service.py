"""
PeriodService -- lifecycle of attendance periods.

Responsibility:
    Creates, lists and reads attendance periods, and owns the single
    processed transition that closes a period.

Architecture position:
    Kernel > Services -- imperative shell, owns transaction participation.

Invariants enforced:
    - end_date >= start_date on create.
    - processed flips false -> true at most once.  ``mark_processed`` is a
      conditional UPDATE (compare-and-set on ``processed = false``); of
      two concurrent callers exactly one sees a matched row.
    - Ledger writers take a shared lock on the period row
      (``lock_open_period``), so a ledger write either commits before the
      claim or observes ``processed = true``.

Failure modes:
    - InvalidPeriodRangeError on create with end < start.
    - PeriodNotFoundError for an unknown id.
    - AlreadyProcessedError when the period is already closed.

Audit relevance:
    processed_at and processed_by_id record who closed the period and when.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import select, update

from payroll_kernel.domain.dtos import AttendancePeriodInfo
from payroll_kernel.exceptions import (
    AlreadyProcessedError,
    InvalidPeriodRangeError,
    PeriodNotFoundError,
    PeriodProcessedError,
    UnknownPeriodError,
    ValidationError,
)
from payroll_kernel.logging_config import get_logger
from payroll_kernel.models.attendance_period import AttendancePeriod
from payroll_kernel.services.base import BaseService

logger = get_logger("services.period")


class PeriodService(BaseService[AttendancePeriod]):
    """Service for creating and closing attendance periods."""

    def create_period(
        self,
        name: str,
        start_date: date,
        end_date: date,
        actor_id: UUID,
        is_active: bool = True,
    ) -> AttendancePeriodInfo:
        """
        Create a new open period covering ``start_date..end_date`` inclusive.

        Overlap with existing periods is allowed.

        Raises:
            ValidationError: If name is blank.
            InvalidPeriodRangeError: If end_date < start_date.
        """
        if not name or not name.strip():
            raise ValidationError("Period name is required")
        if end_date < start_date:
            raise InvalidPeriodRangeError(str(start_date), str(end_date))

        period = AttendancePeriod(
            name=name,
            start_date=start_date,
            end_date=end_date,
            is_active=is_active,
            processed=False,
            created_at=self._clock.now(),
            created_by_id=actor_id,
        )
        with self._storage_errors("create_period"):
            self.session.add(period)
            self.session.flush()

        logger.info(
            "period_created",
            extra={
                "period_id": str(period.id),
                "start_date": str(start_date),
                "end_date": str(end_date),
            },
        )
        return AttendancePeriodInfo.from_model(period)

    def list_periods(self) -> list[AttendancePeriodInfo]:
        """All periods, most recently created first."""
        with self._storage_errors("list_periods"):
            periods = self.session.execute(
                select(AttendancePeriod).order_by(
                    AttendancePeriod.created_at.desc(),
                    AttendancePeriod.start_date.desc(),
                )
            ).scalars().all()
        return [AttendancePeriodInfo.from_model(p) for p in periods]

    def get_period(self, period_id: UUID) -> AttendancePeriodInfo:
        """
        Raises:
            PeriodNotFoundError: If the period does not exist.
        """
        with self._storage_errors("get_period"):
            period = self.session.get(AttendancePeriod, period_id)
        if period is None:
            raise PeriodNotFoundError(period_id)
        return AttendancePeriodInfo.from_model(period)

    def lock_open_period(self, period_id: UUID, operation: str) -> AttendancePeriod:
        """
        Take a shared lock on the period row and verify it is still open.

        Must be called inside the transaction that performs the ledger
        write.  The lock is held until that transaction ends, so a
        concurrent ``mark_processed`` waits for it.

        Raises:
            UnknownPeriodError: If the period does not exist.
            PeriodProcessedError: If the period is already processed.
        """
        with self._storage_errors(operation):
            period = self.session.execute(
                select(AttendancePeriod)
                .where(AttendancePeriod.id == period_id)
                .with_for_update(read=True)
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()

        if period is None:
            raise UnknownPeriodError(period_id)
        if period.processed:
            logger.warning(
                "ledger_write_rejected_period_processed",
                extra={"period_id": str(period_id), "operation": operation},
            )
            raise PeriodProcessedError(period_id, operation)
        return period

    def mark_processed(self, period_id: UUID, actor_id: UUID) -> AttendancePeriodInfo:
        """
        Atomically flip ``processed`` from false to true.

        Postconditions:
            processed is True, processed_at is the clock's now and
            processed_by_id is ``actor_id``.

        Raises:
            PeriodNotFoundError: If the period does not exist.
            AlreadyProcessedError: If another caller already closed it.
        """
        now = self._clock.now()
        with self._storage_errors("mark_processed"):
            result = self.session.execute(
                update(AttendancePeriod)
                .where(
                    AttendancePeriod.id == period_id,
                    AttendancePeriod.processed.is_(False),
                )
                .values(
                    processed=True,
                    processed_at=now,
                    processed_by_id=actor_id,
                    updated_at=now,
                    updated_by_id=actor_id,
                )
                .execution_options(synchronize_session=False)
            )

            if result.rowcount == 0:
                exists = self.session.execute(
                    select(AttendancePeriod.id).where(AttendancePeriod.id == period_id)
                ).scalar_one_or_none()
                if exists is None:
                    raise PeriodNotFoundError(period_id)
                logger.warning(
                    "period_already_processed",
                    extra={"period_id": str(period_id)},
                )
                raise AlreadyProcessedError(period_id)

            period = self.session.get(
                AttendancePeriod, period_id, populate_existing=True
            )

        logger.info(
            "period_marked_processed",
            extra={"period_id": str(period_id), "processed_by_id": str(actor_id)},
        )
        return AttendancePeriodInfo.from_model(period)
