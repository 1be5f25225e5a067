"""Tests for the MCP tool functions, called directly."""

import asyncio
import json
from datetime import date

import pytest

pytest.importorskip("mcp")

from hrtax.mcp.server import (  # noqa: E402
    calculate_progressive_tax,
    calculate_withholding,
    payroll_configs_resource,
)
from hrtax.sdk import write_default_payroll_config  # noqa: E402


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("HRTAX_CONFIG_PATH", str(config_dir))
    return config_dir


@pytest.fixture
def configured_env(isolated_env):
    write_default_payroll_config(start_date=date(2025, 1, 1))
    return isolated_env


def withholding(monthly_income, sso_contribute=True, withhold_tax=True, sso_base=None, as_of="2025-03-01"):
    return asyncio.run(calculate_withholding(
        monthly_income=monthly_income,
        sso_contribute=sso_contribute,
        withhold_tax=withhold_tax,
        sso_base=sso_base,
        as_of=as_of,
    ))


class TestCalculateWithholding:

    def test_reference_employee(self, configured_env):
        result = withholding("34500", sso_base="15000")
        assert result["withholding"] == "395.83"
        assert result["config_start_date"] == "2025-01-01"

    def test_flat_rate(self, configured_env):
        assert withholding("20000", sso_contribute=False)["withholding"] == "600.00"

    def test_invalid_income(self, configured_env):
        result = withholding("lots")
        assert result["withholding"] is None
        assert result["error"].startswith("Invalid input")

    def test_missing_config(self, isolated_env):
        result = withholding("34500")
        assert result["withholding"] is None
        assert "Payroll config not found" in result["error"]


class TestCalculateProgressiveTax:

    def test_breakdown(self, configured_env):
        result = asyncio.run(calculate_progressive_tax(taxable_income="245000", as_of="2025-03-01"))
        assert result["annual_tax"] == "4750.00"
        assert len(result["brackets"]) == 2

    def test_bad_date(self, configured_env):
        result = asyncio.run(calculate_progressive_tax(taxable_income="245000", as_of="March"))
        assert result["annual_tax"] is None


def test_payroll_configs_resource(configured_env):
    data = json.loads(asyncio.run(payroll_configs_resource()))
    assert data["payroll_configs"][0]["start_date"] == "2025-01-01"
