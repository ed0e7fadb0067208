"""
Payroll Kernel - attendance, overtime and reimbursement ledgers with
single-shot period payroll.

- Pay periods with an at-most-once processed transition
- Atomic upserts for daily attendance and overtime
- Prorated salary, overtime pay and approved reimbursements per period
- All-or-nothing payroll commit
"""

__version__ = "0.1.0"
