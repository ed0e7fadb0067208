"""Tests for reimbursement claims and their review."""

from decimal import Decimal
from uuid import uuid4

import pytest

from payroll_kernel.domain.dtos import ReimbursementStatus
from payroll_kernel.exceptions import (
    EmployeeNotFoundError,
    InvalidReimbursementError,
    InvalidReimbursementStatusError,
    PeriodProcessedError,
    ReimbursementNotFoundError,
    UnknownPeriodError,
    ValidationError,
)


@pytest.fixture
def claim(reimbursement_service, employee, open_period):
    return reimbursement_service.submit(
        employee.id, open_period.id, Decimal("150000"), "Taxi to client", "rcpt-001", "10.0.0.3"
    )


class TestSubmitReimbursement:

    def test_new_claim_is_pending(self, claim, employee):
        assert claim.status == ReimbursementStatus.PENDING
        assert claim.amount == Decimal("150000")
        assert claim.receipt_reference == "rcpt-001"
        assert claim.created_by_id == employee.id
        assert claim.reviewed_at is None

    def test_every_submission_is_a_new_claim(
        self, reimbursement_service, employee, open_period, claim
    ):
        reimbursement_service.submit(employee.id, open_period.id, "150000", "Taxi to client")
        claims = reimbursement_service.list_by_employee_and_period(employee.id, open_period.id)
        assert len(claims) == 2

    @pytest.mark.parametrize("amount", [0, "-5", "not-a-number"])
    def test_non_positive_amount_rejected(
        self, reimbursement_service, employee, open_period, amount
    ):
        with pytest.raises(InvalidReimbursementError) as exc_info:
            reimbursement_service.submit(employee.id, open_period.id, amount, "Lunch")
        assert exc_info.value.field == "amount"
        assert isinstance(exc_info.value, ValidationError)

    @pytest.mark.parametrize("description", ["", "   "])
    def test_blank_description_rejected(
        self, reimbursement_service, employee, open_period, description
    ):
        with pytest.raises(InvalidReimbursementError) as exc_info:
            reimbursement_service.submit(employee.id, open_period.id, 10, description)
        assert exc_info.value.field == "description"

    def test_unknown_period(self, reimbursement_service, employee):
        with pytest.raises(UnknownPeriodError):
            reimbursement_service.submit(employee.id, uuid4(), 10, "Lunch")

    def test_unknown_employee(self, reimbursement_service, open_period):
        with pytest.raises(EmployeeNotFoundError):
            reimbursement_service.submit(uuid4(), open_period.id, 10, "Lunch")

    def test_processed_period(
        self, reimbursement_service, period_service, employee, open_period, test_actor_id
    ):
        period_service.mark_processed(open_period.id, test_actor_id)
        with pytest.raises(PeriodProcessedError):
            reimbursement_service.submit(employee.id, open_period.id, 10, "Lunch")


class TestReview:

    def test_approve(self, reimbursement_service, claim, test_actor_id, deterministic_clock):
        approved = reimbursement_service.approve(claim.id, test_actor_id)
        assert approved.status == ReimbursementStatus.APPROVED
        assert approved.reviewed_by_id == test_actor_id
        assert approved.reviewed_at == deterministic_clock.now()

    def test_reject(self, reimbursement_service, claim, test_actor_id):
        rejected = reimbursement_service.reject(claim.id, test_actor_id)
        assert rejected.status == ReimbursementStatus.REJECTED
        assert reimbursement_service.get_reimbursement(claim.id).status == ReimbursementStatus.REJECTED

    def test_review_happens_once(self, reimbursement_service, claim, test_actor_id):
        reimbursement_service.approve(claim.id, test_actor_id)
        with pytest.raises(InvalidReimbursementStatusError) as exc_info:
            reimbursement_service.reject(claim.id, test_actor_id)
        assert exc_info.value.current_status == "approved"
        assert exc_info.value.target_status == "rejected"

    def test_unknown_claim(self, reimbursement_service, test_actor_id):
        with pytest.raises(ReimbursementNotFoundError):
            reimbursement_service.approve(uuid4(), test_actor_id)

    def test_review_blocked_after_processing(
        self, reimbursement_service, period_service, claim, open_period, test_actor_id
    ):
        period_service.mark_processed(open_period.id, test_actor_id)
        with pytest.raises(PeriodProcessedError):
            reimbursement_service.approve(claim.id, test_actor_id)
        assert reimbursement_service.get_reimbursement(claim.id).status == ReimbursementStatus.PENDING
