"""taxes - Withholding tax calculation.

Scope:
- Progressive bracket evaluation (brackets.py)
- Monthly withholding dispatch, Section 40(1) / 40(2) (withholding.py)
- Engine value objects (models.py)
- Payroll config schemas and defaults (schemas.py, defaults.py)

Constraints:
- Pure calculation - no file access, no module-level config
- Decimal amounts, rounded half away from zero to cents at fixed points only
- Must match the reference calculate_withholding_tax procedure exactly

Usage:
    from hrtax.sdk.taxes import EmployeeTaxContext, default_tax_config, monthly_withholding

    context = EmployeeTaxContext.from_flags(
        withhold_tax=True, sso_contribute=True,
        sso_rate_employee="0.05", sso_wage_cap=15000, sso_base=15000,
    )
    tax = monthly_withholding(34500, context, default_tax_config())  # Decimal("395.83")
"""

# Value objects
from .models import (
    RateBracket,
    TaxConfig,
    FlatRateCategory,
    ProgressiveCategory,
    EmployeeTaxContext,
    BracketSlice,
    WithholdingBreakdown,
    SECTION_40_1,
    SECTION_40_2,
    NOT_WITHHELD,
)

# Calculations
from .brackets import round_cents, bracket_slices, progressive_tax
from .withholding import explain_withholding, monthly_withholding

# Config schemas and defaults
from .schemas import RateBracketRule, TaxRules, SocialSecurityRules, PayrollConfig, PayrollConfigFile
from .defaults import DEFAULT_PROGRESSIVE_BRACKETS, default_tax_config, default_payroll_config_document

__all__ = [
    # Models
    "RateBracket",
    "TaxConfig",
    "FlatRateCategory",
    "ProgressiveCategory",
    "EmployeeTaxContext",
    "BracketSlice",
    "WithholdingBreakdown",
    "SECTION_40_1",
    "SECTION_40_2",
    "NOT_WITHHELD",
    # Calculations
    "round_cents",
    "bracket_slices",
    "progressive_tax",
    "explain_withholding",
    "monthly_withholding",
    # Schemas
    "RateBracketRule",
    "TaxRules",
    "SocialSecurityRules",
    "PayrollConfig",
    "PayrollConfigFile",
    # Defaults
    "DEFAULT_PROGRESSIVE_BRACKETS",
    "default_tax_config",
    "default_payroll_config_document",
]
