"""ORM models for the payroll kernel."""

from payroll_kernel.models.attendance import AttendanceRecord
from payroll_kernel.models.attendance_period import AttendancePeriod
from payroll_kernel.models.employee import Employee
from payroll_kernel.models.overtime import OvertimeRecord
from payroll_kernel.models.payroll_result import PayrollResult
from payroll_kernel.models.reimbursement import ReimbursementRecord

__all__ = [
    "Employee",
    "AttendancePeriod",
    "AttendanceRecord",
    "OvertimeRecord",
    "ReimbursementRecord",
    "PayrollResult",
]
