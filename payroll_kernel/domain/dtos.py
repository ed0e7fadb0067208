"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Immutable data structures returned to callers of the payroll kernel.
    Services never hand out ORM rows; every public method returns one of
    these frozen dataclasses.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    ``from_model()`` class methods are boundary converters invoked only
    from the service layer; they read attributes and never touch a session.

Invariants enforced:
    - Dates are ``date`` values, amounts and hours are ``Decimal``.
    - ``EmployeeInfo`` never carries the password hash.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class EmployeeRole(str, Enum):
    """Role of a registered user."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class ReimbursementStatus(str, Enum):
    """Review status of a reimbursement claim.

    Contract: PENDING -> APPROVED or PENDING -> REJECTED, once.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class EmployeeInfo:
    id: UUID
    username: str
    role: EmployeeRole
    base_salary: Decimal | None
    is_active: bool

    @classmethod
    def from_model(cls, employee) -> EmployeeInfo:
        return cls(
            id=employee.id,
            username=employee.username,
            role=EmployeeRole(employee.role),
            base_salary=employee.base_salary,
            is_active=employee.is_active,
        )


@dataclass(frozen=True)
class AttendancePeriodInfo:
    """
    Immutable snapshot of an attendance period.

    Non-goals:
        - Does NOT enforce immutability of processed periods (the services
          do that inside the write transaction).
    """

    id: UUID
    name: str
    start_date: date
    end_date: date
    is_active: bool
    processed: bool
    processed_at: datetime | None = None
    processed_by_id: UUID | None = None
    created_at: datetime | None = None
    created_by_id: UUID | None = None

    @property
    def is_open(self) -> bool:
        """Check if the period still accepts ledger writes."""
        return not self.processed

    @classmethod
    def from_model(cls, period) -> AttendancePeriodInfo:
        return cls(
            id=period.id,
            name=period.name,
            start_date=period.start_date,
            end_date=period.end_date,
            is_active=period.is_active,
            processed=period.processed,
            processed_at=period.processed_at,
            processed_by_id=period.processed_by_id,
            created_at=period.created_at,
            created_by_id=period.created_by_id,
        )


@dataclass(frozen=True)
class AttendanceRecordInfo:
    id: UUID
    employee_id: UUID
    period_id: UUID
    attendance_date: date
    check_in_time: datetime | None
    check_out_time: datetime | None
    is_present: bool
    source_ip: str | None
    created_by_id: UUID
    updated_by_id: UUID | None = None

    @classmethod
    def from_model(cls, record) -> AttendanceRecordInfo:
        return cls(
            id=record.id,
            employee_id=record.employee_id,
            period_id=record.period_id,
            attendance_date=record.attendance_date,
            check_in_time=record.check_in_time,
            check_out_time=record.check_out_time,
            is_present=record.is_present,
            source_ip=record.source_ip,
            created_by_id=record.created_by_id,
            updated_by_id=record.updated_by_id,
        )


@dataclass(frozen=True)
class OvertimeRecordInfo:
    id: UUID
    employee_id: UUID
    period_id: UUID
    overtime_date: date
    hours_worked: Decimal
    description: str | None
    source_ip: str | None
    created_by_id: UUID
    updated_by_id: UUID | None = None

    @classmethod
    def from_model(cls, record) -> OvertimeRecordInfo:
        return cls(
            id=record.id,
            employee_id=record.employee_id,
            period_id=record.period_id,
            overtime_date=record.overtime_date,
            hours_worked=record.hours_worked,
            description=record.description,
            source_ip=record.source_ip,
            created_by_id=record.created_by_id,
            updated_by_id=record.updated_by_id,
        )


@dataclass(frozen=True)
class ReimbursementRecordInfo:
    id: UUID
    employee_id: UUID
    period_id: UUID
    amount: Decimal
    description: str
    receipt_reference: str | None
    status: ReimbursementStatus
    source_ip: str | None
    created_by_id: UUID
    reviewed_at: datetime | None = None
    reviewed_by_id: UUID | None = None

    @classmethod
    def from_model(cls, record) -> ReimbursementRecordInfo:
        return cls(
            id=record.id,
            employee_id=record.employee_id,
            period_id=record.period_id,
            amount=record.amount,
            description=record.description,
            receipt_reference=record.receipt_reference,
            status=ReimbursementStatus(record.status),
            source_ip=record.source_ip,
            created_by_id=record.created_by_id,
            reviewed_at=record.reviewed_at,
            reviewed_by_id=record.reviewed_by_id,
        )


@dataclass(frozen=True)
class PayrollResultInfo:
    """One employee's payout for a processed period."""

    id: UUID
    employee_id: UUID
    period_id: UUID
    present_days: int
    working_days: int
    base_salary: Decimal
    overtime_hours: Decimal
    hourly_overtime_rate: Decimal
    prorated_base: Decimal
    overtime_pay: Decimal
    reimbursement_total: Decimal
    total_pay: Decimal
    computed_at: datetime

    @classmethod
    def from_model(cls, result) -> PayrollResultInfo:
        return cls(
            id=result.id,
            employee_id=result.employee_id,
            period_id=result.period_id,
            present_days=result.present_days,
            working_days=result.working_days,
            base_salary=result.base_salary,
            overtime_hours=result.overtime_hours,
            hourly_overtime_rate=result.hourly_overtime_rate,
            prorated_base=result.prorated_base,
            overtime_pay=result.overtime_pay,
            reimbursement_total=result.reimbursement_total,
            total_pay=result.total_pay,
            computed_at=result.computed_at,
        )


@dataclass(frozen=True)
class PayrollRunSummary:
    """Outcome of ``PayrollService.compute_and_close``."""

    period: AttendancePeriodInfo
    results: tuple[PayrollResultInfo, ...]
    skipped_employee_ids: tuple[UUID, ...] = ()

    @property
    def employee_count(self) -> int:
        return len(self.results)

    @property
    def total_payout(self) -> Decimal:
        return sum((r.total_pay for r in self.results), Decimal("0"))
