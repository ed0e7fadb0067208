"""
OvertimeService -- per-day overtime claims.

Invariants enforced:
    - 0 < hours_worked <= max_overtime_hours_per_day (3 by default).
    - One row per (employee, date).  Resubmitting the same date overwrites
      hours_worked and description.
    - Weekend dates are allowed; the date must lie inside the period.
    - No write lands in a processed period, and a resubmission never
      updates a row owned by a different period.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from payroll_kernel.config import PayrollConfig
from payroll_kernel.db.types import to_decimal
from payroll_kernel.domain.clock import Clock
from payroll_kernel.domain.dtos import OvertimeRecordInfo
from payroll_kernel.exceptions import InvalidOvertimeHoursError
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_kernel.models.overtime import OvertimeRecord
from payroll_kernel.services.ledger import LedgerService

logger = get_logger("services.overtime")


class OvertimeService(LedgerService[OvertimeRecord]):
    """Service for submitting and reading overtime."""

    def __init__(
        self,
        session,
        config: PayrollConfig | None = None,
        clock: Clock | None = None,
    ):
        super().__init__(session, clock)
        self._config = config or PayrollConfig()

    def submit(
        self,
        employee_id: UUID,
        period_id: UUID,
        overtime_date: date,
        hours_worked: Decimal | int | str,
        description: str | None = None,
        source_ip: str | None = None,
        *,
        actor_id: UUID | None = None,
    ) -> OvertimeRecordInfo:
        """
        Claim overtime hours for one date.

        Raises:
            InvalidOvertimeHoursError: If hours are not in (0, max].
            DateOutsidePeriodError: If the date is outside the period.
            DateRecordedInOtherPeriodError: If another open period already
                holds this date.
            EmployeeNotFoundError, EmployeeInactiveError,
            UnknownPeriodError, PeriodProcessedError.
        """
        actor_id = actor_id or employee_id
        hours = self._validate_hours(hours_worked)

        with LogContext.bind(employee_id=employee_id, period_id=period_id):
            self._require_active_employee(employee_id, "submit_overtime")
            period = self._open_period(period_id, "submit_overtime")
            self._require_date_in_period(period, overtime_date)

            now = self._clock.now()
            record = self._upsert_in_period(
                OvertimeRecord,
                "overtime_date",
                values={
                    "employee_id": employee_id,
                    "period_id": period_id,
                    "overtime_date": overtime_date,
                    "hours_worked": hours,
                    "description": description,
                    "source_ip": source_ip,
                    "created_at": now,
                    "updated_at": now,
                    "created_by_id": actor_id,
                },
                update_values={
                    "hours_worked": hours,
                    "description": description,
                    "updated_at": now,
                    "updated_by_id": actor_id,
                },
                operation="submit_overtime",
            )

            logger.info(
                "overtime_submitted",
                extra={
                    "overtime_date": str(overtime_date),
                    "hours_worked": str(hours),
                },
            )
        return OvertimeRecordInfo.from_model(record)

    def list_by_employee_and_period(
        self, employee_id: UUID, period_id: UUID
    ) -> list[OvertimeRecordInfo]:
        with self._storage_errors("list_overtime"):
            records = self.session.execute(
                select(OvertimeRecord)
                .where(
                    OvertimeRecord.employee_id == employee_id,
                    OvertimeRecord.period_id == period_id,
                )
                .order_by(OvertimeRecord.overtime_date)
            ).scalars().all()
        return [OvertimeRecordInfo.from_model(r) for r in records]

    def _validate_hours(self, hours_worked) -> Decimal:
        max_hours = self._config.max_overtime_hours_per_day
        try:
            hours = to_decimal(hours_worked)
        except ValueError as exc:
            raise InvalidOvertimeHoursError(str(hours_worked), str(max_hours)) from exc
        if hours <= 0 or hours > max_hours:
            raise InvalidOvertimeHoursError(str(hours), str(max_hours))
        return hours
