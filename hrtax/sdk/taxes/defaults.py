"""Default Thai personal income tax parameters.

Used when a payroll config omits a tax field, and by ``hrtax config init``.
"""

from decimal import Decimal

from .models import RateBracket, TaxConfig

DEFAULT_STANDARD_EXPENSE_RATE = Decimal("0.50")
DEFAULT_STANDARD_EXPENSE_CAP = Decimal("100000.00")
DEFAULT_PERSONAL_ALLOWANCE_AMOUNT = Decimal("60000.00")
DEFAULT_WITHHOLDING_RATE_SERVICE = Decimal("0.03")
DEFAULT_SSO_WAGE_CAP = Decimal("15000.00")
DEFAULT_SSO_RATE_EMPLOYEE = Decimal("0.05")

# Format: (min, max, rate); max None = no cap
_DEFAULT_BRACKET_ROWS = (
    ("0", "150000", "0"),
    ("150000", "300000", "0.05"),
    ("300000", "500000", "0.10"),
    ("500000", "750000", "0.15"),
    ("750000", "1000000", "0.20"),
    ("1000000", "2000000", "0.25"),
    ("2000000", "5000000", "0.30"),
    ("5000000", None, "0.35"),
)

DEFAULT_PROGRESSIVE_BRACKETS = tuple(
    RateBracket(
        min=Decimal(lower),
        max=Decimal(upper) if upper is not None else None,
        rate=Decimal(rate),
    )
    for lower, upper, rate in _DEFAULT_BRACKET_ROWS
)


def default_tax_config() -> TaxConfig:
    """TaxConfig with every field at its default."""
    return TaxConfig(
        apply_standard_expense=True,
        standard_expense_rate=DEFAULT_STANDARD_EXPENSE_RATE,
        standard_expense_cap=DEFAULT_STANDARD_EXPENSE_CAP,
        apply_personal_allowance=True,
        personal_allowance_amount=DEFAULT_PERSONAL_ALLOWANCE_AMOUNT,
        progressive_brackets=DEFAULT_PROGRESSIVE_BRACKETS,
        withholding_rate_service=DEFAULT_WITHHOLDING_RATE_SERVICE,
    )


def default_payroll_config_document(start_date: str) -> dict:
    """Payroll config file content with one version at the defaults.

    Args:
        start_date: Effective date of the version (YYYY-MM-DD)

    Returns:
        Dict ready for yaml.safe_dump
    """
    return {
        "payroll_configs": [{
            "start_date": start_date,
            "social_security": {
                "rate_employee": float(DEFAULT_SSO_RATE_EMPLOYEE),
                "wage_cap": float(DEFAULT_SSO_WAGE_CAP),
            },
            "tax": {
                "apply_standard_expense": True,
                "standard_expense_rate": float(DEFAULT_STANDARD_EXPENSE_RATE),
                "standard_expense_cap": float(DEFAULT_STANDARD_EXPENSE_CAP),
                "apply_personal_allowance": True,
                "personal_allowance_amount": float(DEFAULT_PERSONAL_ALLOWANCE_AMOUNT),
                "progressive_brackets": [
                    {
                        "min": float(lower),
                        "max": float(upper) if upper is not None else None,
                        "rate": float(rate),
                    }
                    for lower, upper, rate in _DEFAULT_BRACKET_ROWS
                ],
                "withholding_rate_service": float(DEFAULT_WITHHOLDING_RATE_SERVICE),
            },
        }],
    }
