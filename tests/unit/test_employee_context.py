"""Tests for employee records and tax context resolution."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from hrtax.sdk import PayrollConfigError
from hrtax.sdk.employee import (
    EmployeeRecord,
    EmployeeRoster,
    load_employees,
    resolve_sso_base,
    resolve_tax_context,
)
from hrtax.sdk.taxes import FlatRateCategory, ProgressiveCategory, SocialSecurityRules


D = Decimal


@pytest.fixture
def social_security():
    return SocialSecurityRules(rate_employee=0.05, wage_cap=15000)


class TestEmployeeRecord:

    def test_defaults(self):
        record = EmployeeRecord(id="E001", monthly_income=34500)
        assert record.withhold_tax is False
        assert record.sso_contribute is False
        assert record.sso_declared_wage is None
        assert record.monthly_income == D("34500")

    def test_integer_id_coerced(self):
        assert EmployeeRecord(id=1001, monthly_income=1).id == "1001"

    def test_negative_declared_wage_rejected(self):
        with pytest.raises(ValidationError):
            EmployeeRecord(id="E001", monthly_income=1, sso_declared_wage=-1)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            EmployeeRecord(id="E001", monthly_income=1, salary=1)


class TestRoster:

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValidationError, match="duplicate employee id: E001"):
            EmployeeRoster(employees=[
                {"id": "E001", "monthly_income": 1000},
                {"id": "E001", "monthly_income": 2000},
            ])

    def test_empty_roster(self):
        assert EmployeeRoster().employees == []


class TestSsoBase:

    def test_declared_wage_used(self):
        record = EmployeeRecord(id="E001", monthly_income=34500, sso_declared_wage=12000)
        assert resolve_sso_base(record) == D("12000")

    @pytest.mark.parametrize("declared", [None, 0])
    def test_falls_back_to_monthly_income(self, declared):
        record = EmployeeRecord(id="E001", monthly_income=34500, sso_declared_wage=declared)
        assert resolve_sso_base(record) == D("34500")


class TestResolveTaxContext:

    def test_sso_enrolled_is_progressive(self, social_security):
        record = EmployeeRecord(id="E001", monthly_income=34500, withhold_tax=True, sso_contribute=True)
        context = resolve_tax_context(record, social_security)

        assert context.withhold_tax is True
        assert context.category == ProgressiveCategory(
            sso_rate_employee=D("0.05"),
            sso_wage_cap=D("15000"),
            sso_base=D("34500"),
        )

    def test_not_enrolled_is_flat_rate(self, social_security):
        record = EmployeeRecord(id="F001", monthly_income=20000, withhold_tax=True)
        context = resolve_tax_context(record, social_security)
        assert context.category == FlatRateCategory()

    def test_withhold_flag_carried(self, social_security):
        record = EmployeeRecord(id="E002", monthly_income=20000, sso_contribute=True)
        assert resolve_tax_context(record, social_security).withhold_tax is False


class TestLoadEmployees:

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "employees.yaml"
        path.write_text(
            "employees:\n"
            "  - id: 1001\n"
            "    name: Somchai\n"
            "    monthly_income: 34500\n"
            "    withhold_tax: true\n"
            "    sso_contribute: true\n"
            "    sso_declared_wage: 15000\n"
        )
        roster = load_employees(path)
        assert roster.employees[0].id == "1001"
        assert roster.employees[0].sso_declared_wage == D("15000")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_employees(tmp_path / "missing.yaml")

    def test_invalid_record_reports_location(self, tmp_path):
        path = tmp_path / "employees.yaml"
        path.write_text("employees:\n  - id: E001\n")
        with pytest.raises(PayrollConfigError, match="employees.0.monthly_income"):
            load_employees(path)
