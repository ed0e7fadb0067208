"""Kernel services: the imperative shell over the payroll domain."""

from payroll_kernel.services.attendance_service import AttendanceService
from payroll_kernel.services.employee_service import EmployeeService
from payroll_kernel.services.overtime_service import OvertimeService
from payroll_kernel.services.payroll_service import PayrollService
from payroll_kernel.services.period_service import PeriodService
from payroll_kernel.services.reimbursement_service import ReimbursementService

__all__ = [
    "AttendanceService",
    "EmployeeService",
    "OvertimeService",
    "PayrollService",
    "PeriodService",
    "ReimbursementService",
]
