"""Tests for withhold and config CLI commands.

Each test runs against an isolated config directory (HRTAX_CONFIG_PATH)
holding a default payroll config effective from 2025-01-01.
"""

import json
from datetime import date

import pytest
import yaml
from click.testing import CliRunner

from hrtax.cli.__main__ import cli
from hrtax.sdk import get_setting, write_default_payroll_config


AS_OF = ["--as-of", "2025-03-01"]


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Isolated config directory with no payroll config yet."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("HRTAX_CONFIG_PATH", str(config_dir))
    return {"config_dir": config_dir, "tmp_path": tmp_path}


@pytest.fixture
def configured_env(isolated_env):
    write_default_payroll_config(start_date=date(2025, 1, 1))
    return isolated_env


@pytest.fixture
def runner():
    return CliRunner()


# === withhold calc ===


class TestWithholdCalc:

    def test_reference_employee(self, runner, configured_env):
        result = runner.invoke(cli, ["withhold", "calc", "34500", "--sso-base", "15000", *AS_OF])

        assert result.exit_code == 0, result.output
        assert "Section 40(1)" in result.output
        assert "Withholding:       395.83" in result.output

    def test_freelancer(self, runner, configured_env):
        result = runner.invoke(cli, ["withhold", "calc", "20,000", "--no-sso", *AS_OF])

        assert result.exit_code == 0, result.output
        assert "Section 40(2)" in result.output
        assert "Withholding:       600.00" in result.output

    def test_no_withhold(self, runner, configured_env):
        result = runner.invoke(cli, ["withhold", "calc", "34500", "--no-withhold", *AS_OF])

        assert result.exit_code == 0, result.output
        assert "Not withheld" in result.output
        assert "Withholding:       0.00" in result.output

    def test_explain_shows_intermediates(self, runner, configured_env):
        result = runner.invoke(cli, ["withhold", "calc", "34500", "--sso-base", "15000", "--explain", *AS_OF])

        assert result.exit_code == 0, result.output
        assert "Taxable income:    245,000.00" in result.output
        assert "Annual tax:        4,750.00" in result.output

    def test_json_output(self, runner, configured_env):
        result = runner.invoke(cli, [
            "withhold", "calc", "34500", "--sso-base", "15000", "--format", "json", "--explain", *AS_OF,
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["withholding"] == "395.83"
        assert data["category"] == "40(1)"
        assert data["config_start_date"] == "2025-01-01"
        assert [b["min"] for b in data["brackets"]] == ["0.0", "150000.0"]

    def test_invalid_amount(self, runner, configured_env):
        result = runner.invoke(cli, ["withhold", "calc", "lots", *AS_OF])

        assert result.exit_code == 2
        assert "not a valid amount" in result.output

    @pytest.mark.parametrize("amount", ["nan", "Infinity", "sNaN"])
    def test_non_finite_amount_rejected(self, runner, configured_env, amount):
        result = runner.invoke(cli, ["withhold", "calc", amount, *AS_OF])

        assert result.exit_code == 2
        assert "not a finite amount" in result.output

    def test_non_finite_sso_base_rejected(self, runner, configured_env):
        result = runner.invoke(cli, ["withhold", "calc", "34500", "--sso-base", "nan", *AS_OF])

        assert result.exit_code == 2

    def test_missing_config(self, runner, isolated_env):
        result = runner.invoke(cli, ["withhold", "calc", "34500", *AS_OF])

        assert result.exit_code == 1
        assert "Payroll config not found" in result.output

    def test_no_effective_version(self, runner, configured_env):
        result = runner.invoke(cli, ["withhold", "calc", "34500", "--as-of", "2024-12-31"])

        assert result.exit_code == 1
        assert "No payroll config effective on 2024-12-31" in result.output


# === withhold run ===


class TestWithholdRun:

    @pytest.fixture
    def employees_file(self, configured_env):
        path = configured_env["tmp_path"] / "employees.yaml"
        path.write_text(yaml.safe_dump({"employees": [
            {"id": "E001", "name": "Somchai", "monthly_income": 34500,
             "withhold_tax": True, "sso_contribute": True, "sso_declared_wage": 15000},
            {"id": "F001", "name": "Malee", "monthly_income": 20000, "withhold_tax": True},
        ]}, sort_keys=False))
        return path

    def test_table(self, runner, employees_file):
        result = runner.invoke(cli, ["withhold", "run", str(employees_file), *AS_OF])

        assert result.exit_code == 0, result.output
        assert "E001" in result.output
        assert "Somchai" in result.output
        assert "995.83" in result.output

    def test_json(self, runner, employees_file):
        result = runner.invoke(cli, ["withhold", "run", str(employees_file), "--format", "json", *AS_OF])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert [line["withholding"] for line in data["lines"]] == ["395.83", "600.00"]
        assert data["total_withholding"] == "995.83"

    def test_empty_file(self, runner, configured_env):
        path = configured_env["tmp_path"] / "employees.yaml"
        path.write_text("employees: []\n")

        result = runner.invoke(cli, ["withhold", "run", str(path), *AS_OF])

        assert result.exit_code == 0, result.output
        assert "No employees in file." in result.output

    def test_invalid_employee(self, runner, configured_env):
        path = configured_env["tmp_path"] / "employees.yaml"
        path.write_text("employees:\n  - id: E001\n    monthly_income: abc\n")

        result = runner.invoke(cli, ["withhold", "run", str(path), *AS_OF])

        assert result.exit_code == 1
        assert "employees.0.monthly_income" in result.output


# === withhold brackets ===


class TestWithholdBrackets:

    def test_default_schedule(self, runner, configured_env):
        result = runner.invoke(cli, ["withhold", "brackets", "245000", *AS_OF])

        assert result.exit_code == 0, result.output
        assert "Annual tax: 4,750.00" in result.output

    def test_infinite_taxable_rejected(self, runner, configured_env):
        result = runner.invoke(cli, ["withhold", "brackets", "Infinity", *AS_OF])

        assert result.exit_code == 2
        assert "not a finite amount" in result.output

    def test_lower_bound_is_untaxed(self, runner, configured_env):
        result = runner.invoke(cli, ["withhold", "brackets", "150000", *AS_OF])

        assert result.exit_code == 0, result.output
        assert "Annual tax: 0.00" in result.output


# === config ===


class TestConfigCommands:

    def test_init_creates_file(self, runner, isolated_env):
        result = runner.invoke(cli, ["config", "init", "--start-date", "2025-01-01"])

        assert result.exit_code == 0, result.output
        assert (isolated_env["config_dir"] / "payroll.yaml").exists()
        assert "Created payroll config" in result.output

    def test_init_refuses_overwrite(self, runner, configured_env):
        result = runner.invoke(cli, ["config", "init"])

        assert result.exit_code == 1
        assert "--force" in result.output

    def test_init_force(self, runner, configured_env):
        result = runner.invoke(cli, ["config", "init", "--force", "--start-date", "2026-01-01"])

        assert result.exit_code == 0, result.output
        document = yaml.safe_load((configured_env["config_dir"] / "payroll.yaml").read_text())
        assert str(document["payroll_configs"][0]["start_date"]) == "2026-01-01"

    def test_show(self, runner, configured_env):
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0, result.output
        assert "Version 2025-01-01 -> open" in result.output
        assert "Service rate (40(2)): 3.00%" in result.output

    def test_validate_ok(self, runner, configured_env):
        result = runner.invoke(cli, ["config", "validate"])

        assert result.exit_code == 0, result.output
        assert "OK: 1 payroll config version(s)" in result.output

    def test_validate_reports_errors(self, runner, isolated_env):
        path = isolated_env["tmp_path"] / "bad.yaml"
        path.write_text(
            "payroll_configs:\n"
            "  - start_date: 2025-01-01\n"
            "    social_security:\n"
            "      rate_employee: 0.05\n"
            "    tax:\n"
            "      progressive_brackets:\n"
            "        - {min: 0, max: null, rate: 0.1}\n"
            "        - {min: 100, max: null, rate: 0.2}\n"
        )

        result = runner.invoke(cli, ["config", "validate", str(path)])

        assert result.exit_code == 1
        assert "only one bracket without max" in result.output

    def test_use_and_clear(self, runner, isolated_env):
        custom = isolated_env["tmp_path"] / "custom.yaml"
        write_default_payroll_config(custom, start_date=date(2025, 1, 1))

        result = runner.invoke(cli, ["config", "use", str(custom)])
        assert result.exit_code == 0, result.output
        assert get_setting("payroll_config") == str(custom.resolve())

        result = runner.invoke(cli, ["withhold", "calc", "20000", "--no-sso", *AS_OF])
        assert "600.00" in result.output

        result = runner.invoke(cli, ["config", "use", "--clear"])
        assert result.exit_code == 0, result.output
        assert "Cleared payroll_config setting." in result.output
        assert get_setting("payroll_config") is None

    def test_use_missing_file(self, runner, isolated_env):
        result = runner.invoke(cli, ["config", "use", str(isolated_env["tmp_path"] / "nope.yaml")])

        assert result.exit_code == 1
        assert "Not a file" in result.output


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "hrtax" in result.output
