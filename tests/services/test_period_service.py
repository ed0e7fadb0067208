"""Tests for attendance period creation, listing and the processed transition."""

from datetime import date
from uuid import uuid4

import pytest

from payroll_kernel.exceptions import (
    AlreadyProcessedError,
    InvalidPeriodRangeError,
    NotFoundError,
    PeriodNotFoundError,
    PeriodProcessedError,
    UnknownPeriodError,
    ValidationError,
)


class TestCreatePeriod:

    def test_create_open_period(self, period_service, test_actor_id, deterministic_clock):
        period = period_service.create_period(
            name="January 2024",
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 31),
            actor_id=test_actor_id,
        )
        assert period.is_open
        assert not period.processed
        assert period.processed_at is None
        assert period.created_by_id == test_actor_id
        assert period.created_at == deterministic_clock.now()

    def test_single_day_period_allowed(self, create_period):
        period = create_period(date(2024, 1, 2), date(2024, 1, 2))
        assert period.start_date == period.end_date

    def test_end_before_start_rejected(self, period_service, test_actor_id):
        with pytest.raises(InvalidPeriodRangeError) as exc_info:
            period_service.create_period(
                name="Backwards",
                start_date=date(2024, 2, 1),
                end_date=date(2024, 1, 31),
                actor_id=test_actor_id,
            )
        assert isinstance(exc_info.value, ValidationError)
        assert period_service.list_periods() == []

    def test_overlapping_periods_allowed(self, create_period):
        create_period(date(2024, 1, 1), date(2024, 1, 31))
        create_period(date(2024, 1, 15), date(2024, 2, 15))


class TestListAndGet:

    def test_newest_first(self, create_period, period_service, deterministic_clock):
        older = create_period(date(2024, 3, 1), date(2024, 3, 31), name="March")
        deterministic_clock.advance(60)
        newer = create_period(date(2024, 1, 1), date(2024, 1, 31), name="January")

        assert [p.id for p in period_service.list_periods()] == [newer.id, older.id]

    def test_get_unknown_period(self, period_service):
        with pytest.raises(PeriodNotFoundError) as exc_info:
            period_service.get_period(uuid4())
        assert isinstance(exc_info.value, NotFoundError)


class TestMarkProcessed:

    def test_first_claim_wins(
        self, period_service, open_period, test_actor_id, deterministic_clock
    ):
        deterministic_clock.advance(3600)
        closed = period_service.mark_processed(open_period.id, test_actor_id)
        assert closed.processed
        assert not closed.is_open
        assert closed.processed_by_id == test_actor_id
        assert closed.processed_at is not None

    def test_second_claim_rejected(self, period_service, open_period, test_actor_id):
        period_service.mark_processed(open_period.id, test_actor_id)
        with pytest.raises(AlreadyProcessedError) as exc_info:
            period_service.mark_processed(open_period.id, uuid4())
        assert exc_info.value.code == "ALREADY_PROCESSED"
        assert period_service.get_period(open_period.id).processed_by_id == test_actor_id

    def test_unknown_period(self, period_service, test_actor_id):
        with pytest.raises(PeriodNotFoundError):
            period_service.mark_processed(uuid4(), test_actor_id)

    def test_claim_visible_to_stale_session_read(
        self, session, period_service, open_period, test_actor_id
    ):
        from payroll_kernel.models.attendance_period import AttendancePeriod

        # Load the row into the identity map before the conditional UPDATE
        cached = session.get(AttendancePeriod, open_period.id)
        assert cached.processed is False

        period_service.mark_processed(open_period.id, test_actor_id)
        assert session.get(AttendancePeriod, open_period.id).processed is True


class TestLockOpenPeriod:

    def test_open_period_returned(self, period_service, open_period):
        locked = period_service.lock_open_period(open_period.id, "test")
        assert locked.id == open_period.id

    def test_unknown_period_is_validation_and_not_found(self, period_service):
        with pytest.raises(UnknownPeriodError) as exc_info:
            period_service.lock_open_period(uuid4(), "test")
        assert isinstance(exc_info.value, ValidationError)
        assert isinstance(exc_info.value, PeriodNotFoundError)

    def test_processed_period_rejected(
        self, period_service, open_period, test_actor_id, captured_logs
    ):
        period_service.mark_processed(open_period.id, test_actor_id)
        with pytest.raises(PeriodProcessedError) as exc_info:
            period_service.lock_open_period(open_period.id, "submit_attendance")
        assert isinstance(exc_info.value, AlreadyProcessedError)
        assert isinstance(exc_info.value, ValidationError)
        assert any(
            r["message"] == "ledger_write_rejected_period_processed"
            for r in captured_logs()
        )
