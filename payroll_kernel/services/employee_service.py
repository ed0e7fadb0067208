"""
EmployeeService -- registry of employees and their pay data.

Responsibility:
    Creates and reads employees, maintains the active flag and the monthly
    base salary.  Password hashing belongs to the authentication
    collaborator; this service only stores the hash it is given.

Invariants enforced:
    - username is unique (DuplicateUsernameError).
    - base_salary is non-negative when present.
    - Flush-only: never commits or rolls back the caller's transaction.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from payroll_kernel.db.types import to_decimal
from payroll_kernel.domain.dtos import EmployeeInfo, EmployeeRole
from payroll_kernel.exceptions import (
    DuplicateUsernameError,
    EmployeeNotFoundError,
    ValidationError,
)
from payroll_kernel.logging_config import get_logger
from payroll_kernel.models.employee import Employee
from payroll_kernel.services.base import BaseService

logger = get_logger("services.employee")


class EmployeeService(BaseService[Employee]):
    """Service for the employee registry."""

    def create_employee(
        self,
        username: str,
        password_hash: str,
        actor_id: UUID,
        role: EmployeeRole = EmployeeRole.EMPLOYEE,
        base_salary: Decimal | int | str | None = None,
        is_active: bool = True,
    ) -> EmployeeInfo:
        """
        Register a new employee.

        Raises:
            ValidationError: If username is blank or base_salary is negative.
            DuplicateUsernameError: If the username is taken.
        """
        if not username or not username.strip():
            raise ValidationError("username is required")
        salary = self._validate_salary(base_salary)

        employee = Employee(
            username=username,
            password_hash=password_hash,
            role=EmployeeRole(role).value,
            base_salary=salary,
            is_active=is_active,
            created_by_id=actor_id,
        )

        with self._storage_errors("create_employee"):
            existing = self.session.execute(
                select(Employee.id).where(Employee.username == username)
            ).scalar_one_or_none()
            if existing is not None:
                raise DuplicateUsernameError(username)
            try:
                with self.session.begin_nested():
                    self.session.add(employee)
                    self.session.flush()
            except IntegrityError:
                # Concurrent registration of the same username won the race
                raise DuplicateUsernameError(username)

        logger.info(
            "employee_created",
            extra={
                "employee_id": str(employee.id),
                "role": employee.role,
                "has_base_salary": salary is not None,
            },
        )
        return EmployeeInfo.from_model(employee)

    def get_employee(self, employee_id: UUID) -> EmployeeInfo:
        """
        Raises:
            EmployeeNotFoundError: If no employee has this id.
        """
        return EmployeeInfo.from_model(self._get_employee_orm(employee_id))

    def get_by_username(self, username: str) -> EmployeeInfo | None:
        with self._storage_errors("get_by_username"):
            employee = self.session.execute(
                select(Employee).where(Employee.username == username)
            ).scalar_one_or_none()
        return EmployeeInfo.from_model(employee) if employee else None

    def list_active_employees(self) -> list[EmployeeInfo]:
        with self._storage_errors("list_active_employees"):
            rows = self.session.execute(
                select(Employee)
                .where(Employee.is_active.is_(True))
                .order_by(Employee.username)
            ).scalars().all()
        return [EmployeeInfo.from_model(e) for e in rows]

    def deactivate_employee(self, employee_id: UUID, actor_id: UUID) -> EmployeeInfo:
        """Mark an employee inactive; they can no longer submit or be paid."""
        employee = self._get_employee_orm(employee_id)
        employee.is_active = False
        employee.updated_by_id = actor_id
        with self._storage_errors("deactivate_employee"):
            self.session.flush()

        logger.info("employee_deactivated", extra={"employee_id": str(employee_id)})
        return EmployeeInfo.from_model(employee)

    def set_base_salary(
        self,
        employee_id: UUID,
        base_salary: Decimal | int | str | None,
        actor_id: UUID,
    ) -> EmployeeInfo:
        """Change (or clear) the monthly base salary used by future payroll runs."""
        salary = self._validate_salary(base_salary)
        employee = self._get_employee_orm(employee_id)
        employee.base_salary = salary
        employee.updated_by_id = actor_id
        with self._storage_errors("set_base_salary"):
            self.session.flush()

        logger.info(
            "employee_salary_changed",
            extra={"employee_id": str(employee_id), "has_base_salary": salary is not None},
        )
        return EmployeeInfo.from_model(employee)

    def _get_employee_orm(self, employee_id: UUID) -> Employee:
        with self._storage_errors("get_employee"):
            employee = self.session.get(Employee, employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    @staticmethod
    def _validate_salary(base_salary) -> Decimal | None:
        if base_salary is None:
            return None
        try:
            salary = to_decimal(base_salary)
        except ValueError as exc:
            raise ValidationError(f"Invalid base_salary: {base_salary!r}") from exc
        if salary < 0:
            raise ValidationError("base_salary cannot be negative")
        return salary
