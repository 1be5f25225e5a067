"""Employee tax context resolution.

Turns an employee record plus the payroll config's social-security settings
into the EmployeeTaxContext the engine consumes. This is the only place the
``sso_contribute`` flag is read; the engine sees the resulting category.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..config import PayrollConfigError, format_validation_error
from ..taxes.models import EmployeeTaxContext
from ..taxes.schemas import SocialSecurityRules
from .schemas import EmployeeRecord, EmployeeRoster

logger = logging.getLogger(__name__)


def resolve_sso_base(employee: EmployeeRecord):
    """SSO base: declared wage when set and positive, else monthly income."""
    if employee.sso_declared_wage:
        return employee.sso_declared_wage
    return employee.monthly_income


def resolve_tax_context(employee: EmployeeRecord, social_security: SocialSecurityRules) -> EmployeeTaxContext:
    """Build the withholding context for one employee.

    Args:
        employee: Validated employee record
        social_security: SSO settings of the effective payroll config

    Returns:
        EmployeeTaxContext with a FlatRateCategory or ProgressiveCategory
    """
    return EmployeeTaxContext.from_flags(
        withhold_tax=employee.withhold_tax,
        sso_contribute=employee.sso_contribute,
        sso_rate_employee=social_security.rate_employee,
        sso_wage_cap=social_security.wage_cap,
        sso_base=resolve_sso_base(employee),
    )


def load_employees(path: Path) -> EmployeeRoster:
    """Load and validate an employees YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        PayrollConfigError: If the file is not valid YAML or fails validation
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Employees file not found: {path}")

    try:
        with open(path, "r") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise PayrollConfigError(path, f"invalid YAML: {e}") from e

    try:
        roster = EmployeeRoster.model_validate(raw)
    except ValidationError as e:
        raise PayrollConfigError(path, "validation failed:\n" + format_validation_error(e)) from e

    logger.debug(f"loaded {len(roster.employees)} employee(s) from {path}")
    return roster
