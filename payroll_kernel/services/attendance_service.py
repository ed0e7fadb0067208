"""
AttendanceService -- daily presence ledger.

Responsibility:
    Records one presence row per (employee, date).  The first submission
    for a date is the check-in; any later submission for the same date
    updates the check-out time on the same row.

Invariants enforced:
    - Weekend dates are rejected before anything else is looked at.
    - At most one row per (employee, date), guaranteed by the unique
      constraint and a single INSERT ... ON CONFLICT statement, so two
      concurrent submissions both succeed against one row.
    - No write lands in a processed period (shared period lock), and a
      resubmission never updates a row owned by a different period.
    - Flush-only: the caller owns commit/rollback.

Failure modes:
    - WeekendDateError, DateOutsidePeriodError,
      DateRecordedInOtherPeriodError.
    - EmployeeNotFoundError / EmployeeInactiveError.
    - UnknownPeriodError, PeriodProcessedError.
    - StorageFailureError on driver errors.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import select

from payroll_kernel.domain.calendar import is_weekend
from payroll_kernel.domain.dtos import AttendanceRecordInfo
from payroll_kernel.exceptions import WeekendDateError
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_kernel.models.attendance import AttendanceRecord
from payroll_kernel.services.ledger import LedgerService

logger = get_logger("services.attendance")


class AttendanceService(LedgerService[AttendanceRecord]):
    """Service for submitting and reading attendance."""

    def submit(
        self,
        employee_id: UUID,
        period_id: UUID,
        attendance_date: date,
        source_ip: str | None = None,
        *,
        actor_id: UUID | None = None,
    ) -> AttendanceRecordInfo:
        """
        Record presence for ``attendance_date``.

        Args:
            employee_id: The submitting employee.
            period_id: Open period the date belongs to.
            attendance_date: Calendar date (Mon-Fri).
            source_ip: Request origin, stored for audit.
            actor_id: Who performed the write; defaults to the employee.

        Returns:
            The created or updated record.
        """
        actor_id = actor_id or employee_id
        if is_weekend(attendance_date):
            raise WeekendDateError(str(attendance_date))

        with LogContext.bind(employee_id=employee_id, period_id=period_id):
            self._require_active_employee(employee_id, "submit_attendance")
            period = self._open_period(period_id, "submit_attendance")
            self._require_date_in_period(period, attendance_date)

            now = self._clock.now()
            record = self._upsert_in_period(
                AttendanceRecord,
                "attendance_date",
                values={
                    "employee_id": employee_id,
                    "period_id": period_id,
                    "attendance_date": attendance_date,
                    "check_in_time": now,
                    "is_present": True,
                    "source_ip": source_ip,
                    "created_at": now,
                    "updated_at": now,
                    "created_by_id": actor_id,
                },
                update_values={
                    "check_out_time": now,
                    "updated_at": now,
                    "updated_by_id": actor_id,
                },
                operation="submit_attendance",
            )

            logger.info(
                "attendance_submitted",
                extra={
                    "attendance_date": str(attendance_date),
                    "event": "check_out" if record.check_out_time else "check_in",
                },
            )
        return AttendanceRecordInfo.from_model(record)

    def list_by_employee_and_period(
        self, employee_id: UUID, period_id: UUID
    ) -> list[AttendanceRecordInfo]:
        """An employee's attendance in a period, oldest date first."""
        with self._storage_errors("list_attendance"):
            records = self.session.execute(
                select(AttendanceRecord)
                .where(
                    AttendanceRecord.employee_id == employee_id,
                    AttendanceRecord.period_id == period_id,
                )
                .order_by(AttendanceRecord.attendance_date)
            ).scalars().all()
        return [AttendanceRecordInfo.from_model(r) for r in records]
