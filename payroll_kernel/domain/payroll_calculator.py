"""
Payroll Calculator -- pure payout arithmetic for one employee.

Responsibility:
    Turns ledger aggregates (present days, overtime hours, approved
    reimbursements) and a monthly base salary into a payout line.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Called by
    PayrollService after it has claimed the period and read the ledgers.

Formulas (per employee, period P, working-day count W):
    prorated_base       = base_salary * present_days / W
    overtime_pay        = overtime_hours * hourly_overtime_rate
    reimbursement_total = sum(approved reimbursement amounts)
    total_pay           = prorated_base + overtime_pay + reimbursement_total

Invariants enforced:
    - Decimal arithmetic only.  Each displayed component and total_pay is
      rounded once, with the configured mode, to currency precision.
      total_pay is rounded from the exact sum of the unrounded components.
    - W == 0 yields prorated_base == 0 instead of a division error.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from payroll_kernel.db.types import round_money

if TYPE_CHECKING:
    from payroll_kernel.config import PayrollConfig

_ZERO = Decimal("0")


@dataclass(frozen=True)
class PayrollInputs:
    """Ledger aggregates for one employee in one period."""

    base_salary: Decimal
    present_days: int
    working_days: int
    overtime_hours: Decimal = _ZERO
    approved_reimbursements: Decimal = _ZERO

    def __post_init__(self):
        if self.base_salary < 0:
            raise ValueError("base_salary cannot be negative")
        if self.present_days < 0:
            raise ValueError("present_days cannot be negative")
        if self.working_days < 0:
            raise ValueError("working_days cannot be negative")
        if self.overtime_hours < 0:
            raise ValueError("overtime_hours cannot be negative")
        if self.approved_reimbursements < 0:
            raise ValueError("approved_reimbursements cannot be negative")


@dataclass(frozen=True)
class PayrollLine:
    """Computed payout components, each rounded to currency precision."""

    present_days: int
    working_days: int
    base_salary: Decimal
    overtime_hours: Decimal
    hourly_overtime_rate: Decimal
    prorated_base: Decimal
    overtime_pay: Decimal
    reimbursement_total: Decimal
    total_pay: Decimal


def prorate_salary(base_salary: Decimal, present_days: int, working_days: int) -> Decimal:
    """Unrounded ``base_salary * present_days / working_days``."""
    if working_days == 0:
        return _ZERO
    return base_salary * Decimal(present_days) / Decimal(working_days)


def compute_payroll_line(inputs: PayrollInputs, config: PayrollConfig) -> PayrollLine:
    """
    Compute one employee's payout.

    Preconditions:
        - ``inputs`` passed its own validation.
    Postconditions:
        - ``total_pay`` is the exact component sum rounded once; it may
          differ from the sum of the rounded components by up to a cent
          per component.
        - Every money field has ``config.currency_decimal_places`` places.
    """

    def _round(value: Decimal) -> Decimal:
        return round_money(value, config.currency_decimal_places, config.rounding)

    rate = config.hourly_overtime_rate(inputs.base_salary)

    exact_base = prorate_salary(inputs.base_salary, inputs.present_days, inputs.working_days)
    exact_overtime = inputs.overtime_hours * rate

    prorated_base = _round(exact_base)
    overtime_pay = _round(exact_overtime)
    reimbursement_total = _round(inputs.approved_reimbursements)
    # Rounded once from the exact sum, not from the rounded components
    total_pay = _round(exact_base + exact_overtime + inputs.approved_reimbursements)

    return PayrollLine(
        present_days=inputs.present_days,
        working_days=inputs.working_days,
        base_salary=inputs.base_salary,
        overtime_hours=inputs.overtime_hours,
        hourly_overtime_rate=rate,
        prorated_base=prorated_base,
        overtime_pay=overtime_pay,
        reimbursement_total=reimbursement_total,
        total_pay=total_pay,
    )
