"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every service in the kernel layer, plus translation of driver errors
    into ``StorageFailureError``.

Invariants enforced:
    - Ledger, period and employee services flush within the caller's
      transaction and never commit or roll back.  The caller
      (``session_scope()``, a request handler, or a test) owns the
      boundary, so a record write and the processed check it depends on
      always share one transaction.
    - PayrollService is the single exception: it owns its transaction so
      the period claim and every result row commit together.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Generator, Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from payroll_kernel.db.base import Base
from payroll_kernel.domain.clock import Clock, SystemClock
from payroll_kernel.exceptions import StorageFailureError
from payroll_kernel.logging_config import get_logger

ModelType = TypeVar("ModelType", bound=Base)

logger = get_logger("services.base")


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all kernel services.

    Contract:
        Accepts a SQLAlchemy ``Session`` from the caller and an optional
        ``Clock``; uses ``session.flush()`` to persist changes within the
        active transaction.

    Non-goals:
        - Does NOT manage transaction lifecycle (commit/rollback).
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        self.session = session
        self._clock = clock or SystemClock()

    @contextmanager
    def _storage_errors(self, operation: str) -> Generator[None, None, None]:
        """Re-raise any SQLAlchemy error as ``StorageFailureError``."""
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error(
                "storage_failure",
                extra={"operation": operation, "error_type": type(exc).__name__},
            )
            raise StorageFailureError(operation, str(exc)) from exc
