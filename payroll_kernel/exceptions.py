"""
Typed Exception Hierarchy for the Payroll Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (request handlers, scripts, tests) must be able to tell a
user-correctable input problem from a closed period or an unreachable
database without parsing message strings.  Every error therefore:

  1. Has a TYPED exception class (catch by type, not message)
  2. Has a CODE class attribute (machine-readable, API-safe)
  3. Carries structured DATA as attributes (period_id, employee_id, ...)

Example:

    try:
        attendance_service.submit(employee_id, period_id, day, source_ip)
    except AlreadyProcessedError as e:
        return {"error": e.code, "period_id": str(e.period_id)}
    except ValidationError as e:
        return {"error": e.code, "message": str(e)}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    PayrollKernelError (base)
    |
    +-- ValidationError
    |   +-- InvalidPeriodRangeError
    |   +-- WeekendDateError
    |   +-- DateOutsidePeriodError
    |   +-- DateRecordedInOtherPeriodError
    |   +-- InvalidOvertimeHoursError
    |   +-- InvalidReimbursementError
    |   +-- InvalidReimbursementStatusError
    |   +-- DuplicateUsernameError
    |
    +-- NotFoundError
    |   +-- PeriodNotFoundError
    |   |   +-- UnknownPeriodError          (also a ValidationError)
    |   +-- EmployeeNotFoundError           (also an UnauthorizedError)
    |   +-- ReimbursementNotFoundError
    |   +-- PayrollResultNotFoundError
    |
    +-- AlreadyProcessedError
    |   +-- PeriodProcessedError            (also a ValidationError)
    |
    +-- UnauthorizedError
    |   +-- EmployeeInactiveError
    |
    +-- StorageFailureError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category      | Code                          | When Raised
--------------|-------------------------------|---------------------------------------
Validation    | INVALID_PERIOD_RANGE          | end_date < start_date
              | WEEKEND_DATE                  | Attendance submitted on Sat/Sun
              | DATE_OUTSIDE_PERIOD           | Ledger date not in period range
              | DATE_RECORDED_IN_OTHER_PERIOD | Date already held by another open period
              | INVALID_OVERTIME_HOURS        | hours_worked not in (0, 3]
              | INVALID_REIMBURSEMENT         | amount <= 0 or empty description
              | INVALID_REIMBURSEMENT_STATUS  | Review of a non-pending claim
              | DUPLICATE_USERNAME            | Username already registered
--------------|-------------------------------|---------------------------------------
Not found     | PERIOD_NOT_FOUND              | Period id does not exist
              | UNKNOWN_PERIOD                | Ledger write names a missing period
              | EMPLOYEE_NOT_FOUND            | Employee id does not exist
              | REIMBURSEMENT_NOT_FOUND       | Reimbursement id does not exist
              | PAYROLL_RESULT_NOT_FOUND      | No payslip for employee/period
--------------|-------------------------------|---------------------------------------
Processed     | ALREADY_PROCESSED             | Payroll already ran for the period
              | PERIOD_PROCESSED              | Ledger write against processed period
--------------|-------------------------------|---------------------------------------
Unauthorized  | EMPLOYEE_INACTIVE             | Inactive employee submits a record
--------------|-------------------------------|---------------------------------------
Storage       | STORAGE_FAILURE               | Database unreachable / commit failed

===============================================================================
DESIGN DECISIONS
===============================================================================

1. Ledger submissions classify a missing or processed period as input
   errors AND as their generic category.  ``UnknownPeriodError`` and
   ``PeriodProcessedError`` use multiple inheritance so that
   ``except ValidationError`` and ``except AlreadyProcessedError`` /
   ``except NotFoundError`` both catch them.

2. ``StorageFailureError`` is always raised ``from`` the underlying
   SQLAlchemy exception so the driver error stays in the traceback.

3. Nothing in the kernel retries.  Retry policy belongs to the caller.

===============================================================================
"""


class PayrollKernelError(Exception):
    """
    Base exception for all payroll kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PAYROLL_KERNEL_ERROR"


# Validation errors


class ValidationError(PayrollKernelError):
    """Malformed or out-of-range input; always correctable by the caller."""

    code: str = "VALIDATION_ERROR"


class InvalidPeriodRangeError(ValidationError):
    """Period end date precedes its start date."""

    code: str = "INVALID_PERIOD_RANGE"

    def __init__(self, start_date: str, end_date: str):
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"end_date ({end_date}) cannot be before start_date ({start_date})"
        )


class WeekendDateError(ValidationError):
    """Attendance cannot be recorded on a weekend."""

    code: str = "WEEKEND_DATE"

    def __init__(self, record_date: str):
        self.record_date = record_date
        super().__init__(f"Cannot submit attendance on weekends: {record_date}")


class DateOutsidePeriodError(ValidationError):
    """Ledger date is outside the referenced period's range."""

    code: str = "DATE_OUTSIDE_PERIOD"

    def __init__(self, period_id, record_date: str, start_date: str, end_date: str):
        self.period_id = period_id
        self.record_date = record_date
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            f"Date {record_date} is outside period {period_id} "
            f"({start_date} to {end_date})"
        )


class DateRecordedInOtherPeriodError(ValidationError):
    """The (employee, date) slot is already held by a record of another period."""

    code: str = "DATE_RECORDED_IN_OTHER_PERIOD"

    def __init__(self, period_id, record_date: str, owning_period_id):
        self.period_id = period_id
        self.record_date = record_date
        self.owning_period_id = owning_period_id
        super().__init__(
            f"Date {record_date} is already recorded in period {owning_period_id}, "
            f"not {period_id}"
        )


class InvalidOvertimeHoursError(ValidationError):
    """Overtime hours are outside the allowed (0, max] range."""

    code: str = "INVALID_OVERTIME_HOURS"

    def __init__(self, hours_worked: str, max_hours: str):
        self.hours_worked = hours_worked
        self.max_hours = max_hours
        super().__init__(
            f"Overtime hours must be greater than 0 and at most {max_hours}, "
            f"got {hours_worked}"
        )


class InvalidReimbursementError(ValidationError):
    """Reimbursement claim has a non-positive amount or no description."""

    code: str = "INVALID_REIMBURSEMENT"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid reimbursement {field}: {reason}")


class InvalidReimbursementStatusError(ValidationError):
    """Reimbursement review attempted from a non-pending status."""

    code: str = "INVALID_REIMBURSEMENT_STATUS"

    def __init__(self, reimbursement_id, current_status: str, target_status: str):
        self.reimbursement_id = reimbursement_id
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Reimbursement {reimbursement_id} cannot move from "
            f"{current_status} to {target_status}"
        )


class DuplicateUsernameError(ValidationError):
    """Username is already registered."""

    code: str = "DUPLICATE_USERNAME"

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already exists: {username}")


# Not-found errors


class NotFoundError(PayrollKernelError):
    """Referenced entity does not exist."""

    code: str = "NOT_FOUND"


class PeriodNotFoundError(NotFoundError):
    """Attendance period with given ID was not found."""

    code: str = "PERIOD_NOT_FOUND"

    def __init__(self, period_id):
        self.period_id = period_id
        super().__init__(f"Attendance period not found: {period_id}")


class UnknownPeriodError(PeriodNotFoundError, ValidationError):
    """Ledger submission referenced a period that does not exist."""

    code: str = "UNKNOWN_PERIOD"


class UnauthorizedError(PayrollKernelError):
    """Caller is not allowed to operate (missing or inactive employee)."""

    code: str = "UNAUTHORIZED"


class EmployeeNotFoundError(NotFoundError, UnauthorizedError):
    """Employee with given ID was not found."""

    code: str = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id):
        self.employee_id = employee_id
        super().__init__(f"Employee not found: {employee_id}")


class EmployeeInactiveError(UnauthorizedError):
    """Employee is deactivated and may not submit records."""

    code: str = "EMPLOYEE_INACTIVE"

    def __init__(self, employee_id):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} is inactive")


class ReimbursementNotFoundError(NotFoundError):
    """Reimbursement with given ID was not found."""

    code: str = "REIMBURSEMENT_NOT_FOUND"

    def __init__(self, reimbursement_id):
        self.reimbursement_id = reimbursement_id
        super().__init__(f"Reimbursement not found: {reimbursement_id}")


class PayrollResultNotFoundError(NotFoundError):
    """No payroll result exists for the employee in the period."""

    code: str = "PAYROLL_RESULT_NOT_FOUND"

    def __init__(self, employee_id, period_id):
        self.employee_id = employee_id
        self.period_id = period_id
        super().__init__(
            f"No payroll result for employee {employee_id} in period {period_id}"
        )


# Processed-period errors


class AlreadyProcessedError(PayrollKernelError):
    """Payroll has already been computed for the period; it is closed."""

    code: str = "ALREADY_PROCESSED"

    def __init__(self, period_id):
        self.period_id = period_id
        super().__init__(f"Attendance period {period_id} is already processed")


class PeriodProcessedError(AlreadyProcessedError, ValidationError):
    """Ledger write attempted against a processed (immutable) period."""

    code: str = "PERIOD_PROCESSED"

    def __init__(self, period_id, operation: str):
        self.operation = operation
        super().__init__(period_id)


# Storage errors


class StorageFailureError(PayrollKernelError):
    """The durable store is unreachable or a commit could not complete."""

    code: str = "STORAGE_FAILURE"

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage failure during {operation}: {detail}")
