"""
Payroll Configuration Schema.

Defines the pay-rate and rounding parameters the payroll engine needs,
with sensible defaults.  Actual values are supplied by the caller, either
constructed directly, from a dict, or from a YAML file:

    config = load_payroll_config("payroll.yaml")
    PayrollService(session, config=config).compute_and_close(period_id, actor_id)

The engine never reads configuration from process state; only
``get_database_url()`` consults the environment.
"""

import os
from dataclasses import dataclass, fields
from decimal import (
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
    Decimal,
)
from pathlib import Path
from typing import Any, Self

import yaml

from payroll_kernel.db.types import to_decimal
from payroll_kernel.logging_config import get_logger

logger = get_logger("config")

DEFAULT_DATABASE_URL = "sqlite:///payroll.db"

# Upper bound enforced by the overtime_records check constraint
MAX_OVERTIME_HOURS_PER_DAY = Decimal("3")

VALID_ROUNDING_MODES = {
    ROUND_HALF_UP,
    ROUND_HALF_EVEN,
    ROUND_HALF_DOWN,
    ROUND_UP,
    ROUND_DOWN,
    ROUND_CEILING,
    ROUND_FLOOR,
}

_DECIMAL_FIELDS = (
    "standard_monthly_hours",
    "overtime_multiplier",
    "fixed_overtime_rate",
    "max_overtime_hours_per_day",
)


@dataclass(frozen=True)
class PayrollConfig:
    """
    Configuration schema for the payroll engine.

    The hourly overtime rate is derived from the monthly base salary:

        rate = base_salary / standard_monthly_hours * overtime_multiplier

    unless ``fixed_overtime_rate`` is set, in which case every employee is
    paid that rate per overtime hour.
    """

    # Overtime rate derivation
    standard_monthly_hours: Decimal = Decimal("173")
    overtime_multiplier: Decimal = Decimal("1")
    fixed_overtime_rate: Decimal | None = None

    # Overtime claim bound (may tighten, never loosen, the stored constraint)
    max_overtime_hours_per_day: Decimal = MAX_OVERTIME_HOURS_PER_DAY

    # Currency rounding
    currency_decimal_places: int = 2
    rounding: str = ROUND_HALF_UP

    def __post_init__(self):
        if self.standard_monthly_hours <= 0:
            raise ValueError("standard_monthly_hours must be positive")
        if self.overtime_multiplier <= 0:
            raise ValueError("overtime_multiplier must be positive")
        if self.fixed_overtime_rate is not None and self.fixed_overtime_rate < 0:
            raise ValueError("fixed_overtime_rate cannot be negative")
        if self.max_overtime_hours_per_day <= 0:
            raise ValueError("max_overtime_hours_per_day must be positive")
        if self.max_overtime_hours_per_day > MAX_OVERTIME_HOURS_PER_DAY:
            raise ValueError(
                f"max_overtime_hours_per_day cannot exceed {MAX_OVERTIME_HOURS_PER_DAY}"
            )
        if not 0 <= self.currency_decimal_places <= 9:
            raise ValueError("currency_decimal_places must be between 0 and 9")
        if self.rounding not in VALID_ROUNDING_MODES:
            raise ValueError(
                f"rounding must be one of {sorted(VALID_ROUNDING_MODES)}, "
                f"got '{self.rounding}'"
            )

        logger.info(
            "payroll_config_initialized",
            extra={
                "standard_monthly_hours": str(self.standard_monthly_hours),
                "overtime_multiplier": str(self.overtime_multiplier),
                "fixed_overtime_rate": (
                    str(self.fixed_overtime_rate)
                    if self.fixed_overtime_rate is not None
                    else None
                ),
                "currency_decimal_places": self.currency_decimal_places,
                "rounding": self.rounding,
            },
        )

    def hourly_overtime_rate(self, base_salary: Decimal) -> Decimal:
        """Overtime pay per hour for an employee with this monthly salary."""
        if self.fixed_overtime_rate is not None:
            return self.fixed_overtime_rate
        return base_salary / self.standard_monthly_hours * self.overtime_multiplier

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with default values."""
        logger.info("payroll_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """
        Create config from a dictionary (e.g., parsed YAML).

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown payroll config keys: {unknown}")

        logger.info(
            "payroll_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        values = dict(data)
        for name in _DECIMAL_FIELDS:
            if values.get(name) is not None:
                values[name] = to_decimal(values[name])
        if "currency_decimal_places" in values:
            values["currency_decimal_places"] = int(values["currency_decimal_places"])
        return cls(**values)


def load_payroll_config(path: str | Path) -> PayrollConfig:
    """
    Load a PayrollConfig from a YAML file.

    The file may hold the settings at top level or under a ``payroll:`` key.
    An empty file yields the defaults.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: on unknown keys or invalid values.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Payroll config must be a mapping, got {type(data).__name__}")
    if "payroll" in data:
        data = data["payroll"] or {}
    return PayrollConfig.from_dict(data)


def get_database_url() -> str:
    """Database URL from ``DATABASE_URL``, or a local SQLite file."""
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)
