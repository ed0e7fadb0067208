"""
LedgerService -- shared guards for the three employee ledgers.

Every ledger write (attendance, overtime, reimbursement) runs the same
checks inside the caller's transaction, in this order:

    1. the submitter exists and is active,
    2. the period exists and is open (row locked FOR SHARE),
    3. the record date, where there is one, lies inside the period.

Dated ledgers (attendance, overtime) then upsert on (employee, date); the
update branch only fires when the existing row belongs to the same period.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import select

from payroll_kernel.db.upsert import upsert_statement
from payroll_kernel.domain.clock import Clock
from payroll_kernel.exceptions import (
    DateOutsidePeriodError,
    DateRecordedInOtherPeriodError,
    EmployeeInactiveError,
    EmployeeNotFoundError,
)
from payroll_kernel.logging_config import get_logger
from payroll_kernel.models.attendance_period import AttendancePeriod
from payroll_kernel.models.employee import Employee
from payroll_kernel.services.base import BaseService, ModelType
from payroll_kernel.services.period_service import PeriodService

logger = get_logger("services.ledger")


class LedgerService(BaseService[ModelType]):
    """Base for services that write period-scoped employee records."""

    def __init__(self, session, clock: Clock | None = None):
        super().__init__(session, clock)
        self._periods = PeriodService(session, self._clock)

    def _require_active_employee(self, employee_id: UUID, operation: str) -> Employee:
        with self._storage_errors(operation):
            employee = self.session.get(Employee, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        if not employee.is_active:
            logger.warning(
                "ledger_write_rejected_inactive_employee",
                extra={"employee_id": str(employee_id), "operation": operation},
            )
            raise EmployeeInactiveError(employee_id)
        return employee

    def _open_period(self, period_id: UUID, operation: str) -> AttendancePeriod:
        return self._periods.lock_open_period(period_id, operation)

    @staticmethod
    def _require_date_in_period(period: AttendancePeriod, record_date: date) -> None:
        if not period.contains_date(record_date):
            raise DateOutsidePeriodError(
                period.id,
                str(record_date),
                str(period.start_date),
                str(period.end_date),
            )

    def _upsert_in_period(
        self,
        model,
        date_column: str,
        values: dict,
        update_values: dict,
        operation: str,
    ):
        """
        Insert or update the (employee, date) row, only within ``values["period_id"]``.

        The unique key spans periods, so the conflicting row may belong to
        another (possibly processed) period.  That row is never touched.

        Raises:
            PeriodProcessedError: If the owning period is processed.
            DateRecordedInOtherPeriodError: If the owning period is open.
        """
        period_id = values["period_id"]
        stmt = upsert_statement(
            self.session,
            model,
            values=values,
            conflict_columns=["employee_id", date_column],
            update_values=update_values,
            where=model.period_id == period_id,
        )
        with self._storage_errors(operation):
            record = self.session.scalars(
                stmt, execution_options={"populate_existing": True}
            ).one_or_none()
        if record is not None:
            return record

        record_date = values[date_column]
        with self._storage_errors(operation):
            owning_period_id = self.session.execute(
                select(model.period_id).where(
                    model.employee_id == values["employee_id"],
                    getattr(model, date_column) == record_date,
                )
            ).scalar_one()
        # Raises PeriodProcessedError when the owner is closed
        self._open_period(owning_period_id, operation)
        logger.warning(
            "ledger_write_rejected_other_period",
            extra={
                "operation": operation,
                "record_date": str(record_date),
                "owning_period_id": str(owning_period_id),
            },
        )
        raise DateRecordedInOtherPeriodError(period_id, str(record_date), owning_period_id)
