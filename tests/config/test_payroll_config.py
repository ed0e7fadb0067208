"""Tests for PayrollConfig validation and YAML loading."""

from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal

import pytest
import yaml

from payroll_kernel.config import (
    DEFAULT_DATABASE_URL,
    PayrollConfig,
    get_database_url,
    load_payroll_config,
)


class TestDefaults:

    def test_default_values(self):
        config = PayrollConfig.with_defaults()
        assert config.standard_monthly_hours == Decimal("173")
        assert config.overtime_multiplier == Decimal("1")
        assert config.fixed_overtime_rate is None
        assert config.max_overtime_hours_per_day == Decimal("3")
        assert config.currency_decimal_places == 2
        assert config.rounding == ROUND_HALF_UP

    def test_fixed_rate_overrides_salary(self):
        config = PayrollConfig(fixed_overtime_rate=Decimal("25000"))
        assert config.hourly_overtime_rate(Decimal("1")) == Decimal("25000")
        assert config.hourly_overtime_rate(Decimal("9999999")) == Decimal("25000")

    def test_initialization_is_logged(self, captured_logs):
        PayrollConfig()
        assert any(r["message"] == "payroll_config_initialized" for r in captured_logs())


class TestValidation:

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"standard_monthly_hours": Decimal("0")},
            {"overtime_multiplier": Decimal("-1")},
            {"fixed_overtime_rate": Decimal("-0.01")},
            {"max_overtime_hours_per_day": Decimal("0")},
            {"max_overtime_hours_per_day": Decimal("3.5")},
            {"currency_decimal_places": 10},
            {"rounding": "ROUND_SIDEWAYS"},
        ],
    )
    def test_invalid_settings_rejected(self, kwargs):
        with pytest.raises(ValueError):
            PayrollConfig(**kwargs)

    def test_max_hours_may_be_tightened(self):
        assert PayrollConfig(max_overtime_hours_per_day=Decimal("2")).max_overtime_hours_per_day == 2


class TestFromDict:

    def test_coerces_numbers(self):
        config = PayrollConfig.from_dict(
            {"standard_monthly_hours": 160, "overtime_multiplier": "1.5", "fixed_overtime_rate": None}
        )
        assert config.standard_monthly_hours == Decimal("160")
        assert config.overtime_multiplier == Decimal("1.5")
        assert config.fixed_overtime_rate is None

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValueError, match="overtime_rate"):
            PayrollConfig.from_dict({"overtime_rate": 10})


class TestLoadPayrollConfig:

    def test_nested_under_payroll_key(self, tmp_path):
        path = tmp_path / "payroll.yaml"
        path.write_text(
            yaml.safe_dump(
                {"payroll": {"fixed_overtime_rate": "25000", "rounding": ROUND_HALF_EVEN}}
            )
        )
        config = load_payroll_config(path)
        assert config.fixed_overtime_rate == Decimal("25000")
        assert config.rounding == ROUND_HALF_EVEN

    def test_top_level_keys(self, tmp_path):
        path = tmp_path / "payroll.yaml"
        path.write_text("standard_monthly_hours: 168\ncurrency_decimal_places: 0\n")
        config = load_payroll_config(path)
        assert config.standard_monthly_hours == Decimal("168")
        assert config.currency_decimal_places == 0

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "payroll.yaml"
        path.write_text("")
        assert load_payroll_config(path) == PayrollConfig()

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "payroll.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_payroll_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_payroll_config(tmp_path / "absent.yaml")


class TestDatabaseUrl:

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db/payroll")
        assert get_database_url() == "postgresql://u:p@db/payroll"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        assert get_database_url() == DEFAULT_DATABASE_URL
