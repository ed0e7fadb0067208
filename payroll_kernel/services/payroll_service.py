"""
PayrollService -- computes a period's payroll and closes the period.

Responsibility:
    Claims the period, aggregates the three ledgers per employee, computes
    each active employee's payout with the pure calculator, and persists
    one PayrollResult per employee.  Also serves payslip reads.

Architecture position:
    Kernel > Services -- imperative shell.  Unlike the ledger services it
    owns its transaction boundary (commit on success, rollback on any
    failure), so the claim and the results are one atomic unit.

Invariants enforced:
    - All-or-nothing: either processed = true together with every result
      row, or neither.  A failed run leaves the period open for a retry.
    - Exactly once: the claim is a conditional UPDATE, so a concurrent or
      repeated run fails with AlreadyProcessedError and writes nothing.
    - Once the claim succeeds no ledger write can land in the period;
      ledger writers hold a shared lock on the period row and re-check
      processed under it.
    - Only active employees with a base salary are paid; pending and
      rejected reimbursements are never paid.

Failure modes:
    - PeriodNotFoundError, AlreadyProcessedError.
    - StorageFailureError on any driver error, including the commit.
"""

import time
from collections import defaultdict
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import func, select

from payroll_kernel.config import PayrollConfig
from payroll_kernel.domain.calendar import count_working_days
from payroll_kernel.domain.clock import Clock
from payroll_kernel.domain.dtos import (
    PayrollResultInfo,
    PayrollRunSummary,
    ReimbursementStatus,
)
from payroll_kernel.domain.payroll_calculator import PayrollInputs, compute_payroll_line
from payroll_kernel.exceptions import PayrollResultNotFoundError
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_kernel.models.attendance import AttendanceRecord
from payroll_kernel.models.employee import Employee
from payroll_kernel.models.overtime import OvertimeRecord
from payroll_kernel.models.payroll_result import PayrollResult
from payroll_kernel.models.reimbursement import ReimbursementRecord
from payroll_kernel.services.base import BaseService
from payroll_kernel.services.period_service import PeriodService

logger = get_logger("services.payroll")

_ZERO = Decimal("0")


class PayrollService(BaseService[PayrollResult]):
    """
    Runs payroll for a period.

    Contract:
        ``compute_and_close`` commits on success and rolls back on failure
        when ``auto_commit`` is True (the default).  With
        ``auto_commit=False`` the caller owns the boundary and must commit
        or roll back the whole unit itself.
    """

    def __init__(
        self,
        session,
        config: PayrollConfig | None = None,
        clock: Clock | None = None,
        auto_commit: bool = True,
    ):
        super().__init__(session, clock)
        self._config = config or PayrollConfig()
        self._auto_commit = auto_commit
        self._periods = PeriodService(session, self._clock)

    def compute_and_close(self, period_id: UUID, actor_id: UUID) -> PayrollRunSummary:
        """
        Compute every active employee's payout and mark the period processed.

        Args:
            period_id: Period to close.
            actor_id: Administrator running payroll.

        Returns:
            PayrollRunSummary with the closed period and one result per
            paid employee.

        Raises:
            PeriodNotFoundError: If the period does not exist.
            AlreadyProcessedError: If the period was already processed.
            StorageFailureError: If the store fails; nothing is persisted.
        """
        with LogContext.bind(
            correlation_id=str(uuid4()),
            period_id=period_id,
            actor_id=actor_id,
        ):
            logger.info("payroll_run_started")
            t0 = time.monotonic()

            try:
                with self._storage_errors("compute_and_close"):
                    summary = self._do_compute_and_close(period_id, actor_id)
                    if self._auto_commit:
                        self.session.commit()
            except Exception:
                duration_ms = round((time.monotonic() - t0) * 1000, 2)
                if self._auto_commit:
                    self.session.rollback()
                logger.error(
                    "payroll_run_failed",
                    extra={"duration_ms": duration_ms},
                    exc_info=True,
                )
                raise

            duration_ms = round((time.monotonic() - t0) * 1000, 2)
            logger.info(
                "payroll_period_closed",
                extra={
                    "employee_count": summary.employee_count,
                    "skipped_count": len(summary.skipped_employee_ids),
                    "total_payout": str(summary.total_payout),
                    "duration_ms": duration_ms,
                },
            )
            return summary

    def list_results(self, period_id: UUID) -> list[PayrollResultInfo]:
        """All payroll results for a period, ordered by username."""
        with self._storage_errors("list_results"):
            results = self.session.execute(
                select(PayrollResult)
                .join(Employee, Employee.id == PayrollResult.employee_id)
                .where(PayrollResult.period_id == period_id)
                .order_by(Employee.username)
            ).scalars().all()
        return [PayrollResultInfo.from_model(r) for r in results]

    def get_payslip(self, employee_id: UUID, period_id: UUID) -> PayrollResultInfo:
        """
        One employee's payout for a processed period.

        Raises:
            PayrollResultNotFoundError: If payroll did not pay the employee
                in this period (not yet run, inactive, or no salary).
        """
        with self._storage_errors("get_payslip"):
            result = self.session.execute(
                select(PayrollResult).where(
                    PayrollResult.employee_id == employee_id,
                    PayrollResult.period_id == period_id,
                )
            ).scalar_one_or_none()
        if result is None:
            raise PayrollResultNotFoundError(employee_id, period_id)
        return PayrollResultInfo.from_model(result)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _do_compute_and_close(
        self, period_id: UUID, actor_id: UUID
    ) -> PayrollRunSummary:
        # Claim first: from here on no ledger writer can get past its check
        period = self._periods.mark_processed(period_id, actor_id)
        working_days = count_working_days(period.start_date, period.end_date)

        employees = self.session.execute(
            select(Employee)
            .where(Employee.is_active.is_(True))
            .order_by(Employee.username)
        ).scalars().all()
        if not employees:
            logger.info("payroll_no_active_employees")

        present_days = self._present_days(period_id)
        overtime_hours = self._overtime_hours(period_id)
        reimbursements = self._approved_reimbursements(period_id)

        computed_at = self._clock.now()
        results: list[PayrollResult] = []
        skipped: list[UUID] = []
        for employee in employees:
            if employee.base_salary is None:
                logger.warning(
                    "payroll_employee_skipped_no_salary",
                    extra={"employee_id": str(employee.id)},
                )
                skipped.append(employee.id)
                continue

            line = compute_payroll_line(
                PayrollInputs(
                    base_salary=employee.base_salary,
                    present_days=present_days.get(employee.id, 0),
                    working_days=working_days,
                    overtime_hours=overtime_hours.get(employee.id, _ZERO),
                    approved_reimbursements=reimbursements.get(employee.id, _ZERO),
                ),
                self._config,
            )
            logger.debug(
                "payroll_employee_computed",
                extra={
                    "employee_id": str(employee.id),
                    "present_days": line.present_days,
                    "total_pay": str(line.total_pay),
                },
            )
            results.append(
                PayrollResult(
                    employee_id=employee.id,
                    period_id=period_id,
                    present_days=line.present_days,
                    working_days=line.working_days,
                    base_salary=line.base_salary,
                    overtime_hours=line.overtime_hours,
                    hourly_overtime_rate=line.hourly_overtime_rate,
                    prorated_base=line.prorated_base,
                    overtime_pay=line.overtime_pay,
                    reimbursement_total=line.reimbursement_total,
                    total_pay=line.total_pay,
                    computed_at=computed_at,
                    created_by_id=actor_id,
                )
            )

        self._persist_results(results)

        logger.info(
            "payroll_results_computed",
            extra={"working_days": working_days, "result_count": len(results)},
        )
        return PayrollRunSummary(
            period=period,
            results=tuple(PayrollResultInfo.from_model(r) for r in results),
            skipped_employee_ids=tuple(skipped),
        )

    def _persist_results(self, results: list[PayrollResult]) -> None:
        self.session.add_all(results)
        self.session.flush()

    def _present_days(self, period_id: UUID) -> dict[UUID, int]:
        rows = self.session.execute(
            select(AttendanceRecord.employee_id, func.count(AttendanceRecord.id))
            .where(
                AttendanceRecord.period_id == period_id,
                AttendanceRecord.is_present.is_(True),
            )
            .group_by(AttendanceRecord.employee_id)
        ).all()
        return {employee_id: count for employee_id, count in rows}

    def _overtime_hours(self, period_id: UUID) -> dict[UUID, Decimal]:
        # Summed in Python so SQLite never turns Numeric into float
        totals: dict[UUID, Decimal] = defaultdict(lambda: _ZERO)
        rows = self.session.execute(
            select(OvertimeRecord.employee_id, OvertimeRecord.hours_worked).where(
                OvertimeRecord.period_id == period_id
            )
        ).all()
        for employee_id, hours in rows:
            totals[employee_id] += hours
        return totals

    def _approved_reimbursements(self, period_id: UUID) -> dict[UUID, Decimal]:
        totals: dict[UUID, Decimal] = defaultdict(lambda: _ZERO)
        rows = self.session.execute(
            select(ReimbursementRecord.employee_id, ReimbursementRecord.amount).where(
                ReimbursementRecord.period_id == period_id,
                ReimbursementRecord.status == ReimbursementStatus.APPROVED.value,
            )
        ).all()
        for employee_id, amount in rows:
            totals[employee_id] += amount
        return totals

