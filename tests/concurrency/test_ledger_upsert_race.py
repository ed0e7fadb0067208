"""
Per-day uniqueness under concurrent submissions.

Many threads submit attendance (or overtime) for the same employee and
date at once.  Every submission succeeds and exactly one row exists
afterwards.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal
from threading import Barrier
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from payroll_kernel.models.attendance import AttendanceRecord
from payroll_kernel.models.overtime import OvertimeRecord
from payroll_kernel.services import (
    AttendanceService,
    EmployeeService,
    OvertimeService,
    PeriodService,
)

pytestmark = [pytest.mark.slow_locks]

WORKDAY = date(2024, 1, 10)


@pytest.fixture
def committed_employee_and_period(session_factory):
    actor_id = uuid4()
    with session_factory() as setup_session:
        employee = EmployeeService(setup_session).create_employee(
            username="upsert-race",
            password_hash="hash",
            actor_id=actor_id,
            base_salary=Decimal("1000"),
        )
        period = PeriodService(setup_session).create_period(
            name="January 2024",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
            actor_id=actor_id,
        )
        setup_session.commit()
    return employee.id, period.id


def _run_concurrently(session_factory, num_threads, action):
    barrier = Barrier(num_threads)

    def worker(index):
        sess = session_factory()
        try:
            barrier.wait()
            action(sess, index)
            sess.commit()
            return True
        finally:
            sess.close()

    with ThreadPoolExecutor(max_workers=num_threads) as executor:
        return list(executor.map(worker, range(num_threads)))


class TestConcurrentUpserts:

    def test_attendance_single_row(self, session_factory, committed_employee_and_period):
        employee_id, period_id = committed_employee_and_period

        results = _run_concurrently(
            session_factory,
            10,
            lambda sess, _: AttendanceService(sess).submit(employee_id, period_id, WORKDAY),
        )
        assert all(results)

        with session_factory() as check:
            rows = check.execute(
                select(AttendanceRecord).where(
                    AttendanceRecord.employee_id == employee_id,
                    AttendanceRecord.attendance_date == WORKDAY,
                )
            ).scalars().all()
            assert len(rows) == 1
            assert rows[0].check_out_time is not None

    def test_overtime_single_row_last_write_wins(
        self, session_factory, committed_employee_and_period
    ):
        employee_id, period_id = committed_employee_and_period
        hours = [Decimal("1"), Decimal("1.5"), Decimal("2"), Decimal("2.5"), Decimal("3")]

        results = _run_concurrently(
            session_factory,
            len(hours),
            lambda sess, i: OvertimeService(sess).submit(
                employee_id, period_id, WORKDAY, hours[i], f"claim {i}"
            ),
        )
        assert all(results)

        with session_factory() as check:
            count = check.execute(
                select(func.count(OvertimeRecord.id)).where(
                    OvertimeRecord.employee_id == employee_id,
                    OvertimeRecord.overtime_date == WORKDAY,
                )
            ).scalar_one()
            assert count == 1
            record = OvertimeService(check).list_by_employee_and_period(
                employee_id, period_id
            )[0]
            assert record.hours_worked in hours
            assert record.description == f"claim {hours.index(record.hours_worked)}"
