"""Monthly withholding tax.

Two strategies, picked by the employee's category:

- Section 40(2) (no social security): flat rate on the month's income.
- Section 40(1) (social security enrolled): annualize the month, deduct the
  standard expense, personal allowance and annual SSO contribution, run the
  progressive brackets, and spread the annual tax over 12 months.

Core logic used by the payroll run, CLI and MCP tools. Nothing here reads
module-level configuration; the TaxConfig is always passed in.
"""

from decimal import Decimal

from .brackets import progressive_tax, round_cents
from .models import (
    NOT_WITHHELD,
    ZERO,
    EmployeeTaxContext,
    FlatRateCategory,
    TaxConfig,
    WithholdingBreakdown,
    to_decimal,
)

MONTHS_PER_YEAR = 12


def explain_withholding(
    monthly_income,
    context: EmployeeTaxContext,
    config: TaxConfig,
) -> WithholdingBreakdown:
    """Calculate monthly withholding and keep every intermediate.

    Args:
        monthly_income: Total taxable income for the month
        context: Employee withholding switch and tax category
        config: Tax parameters for the payroll run

    Returns:
        WithholdingBreakdown whose ``withholding`` is the amount to deduct
    """
    income = to_decimal(monthly_income)

    if not context.withhold_tax or income <= 0:
        return WithholdingBreakdown(category=NOT_WITHHELD, monthly_income=income, withholding=ZERO)

    category = context.category
    if isinstance(category, FlatRateCategory):
        return WithholdingBreakdown(
            category=category.label,
            monthly_income=income,
            withholding=round_cents(income * to_decimal(config.withholding_rate_service)),
        )

    # 1. Monthly SSO contribution (deductible)
    sso_base = min(to_decimal(category.sso_base), to_decimal(category.sso_wage_cap))
    sso_monthly = sso_base * to_decimal(category.sso_rate_employee)

    # 2. Annualize
    annual_income = income * MONTHS_PER_YEAR

    # 3. Standard expense, capped
    expense = ZERO
    if config.apply_standard_expense:
        expense = min(
            annual_income * to_decimal(config.standard_expense_rate),
            to_decimal(config.standard_expense_cap),
        )

    # 4. Personal allowance
    allowance = ZERO
    if config.apply_personal_allowance:
        allowance = to_decimal(config.personal_allowance_amount)

    # 5. Taxable base
    sso_annual = sso_monthly * MONTHS_PER_YEAR
    taxable_income = max(annual_income - expense - allowance - sso_annual, ZERO)

    # 6. Annual tax, then per month
    annual_tax = progressive_tax(taxable_income, config.progressive_brackets)
    withholding = round_cents(annual_tax / MONTHS_PER_YEAR)

    return WithholdingBreakdown(
        category=category.label,
        monthly_income=income,
        withholding=withholding,
        sso_monthly=sso_monthly,
        annual_income=annual_income,
        expense=expense,
        allowance=allowance,
        sso_annual=sso_annual,
        taxable_income=taxable_income,
        annual_tax=annual_tax,
    )


def monthly_withholding(
    monthly_income,
    context: EmployeeTaxContext,
    config: TaxConfig,
) -> Decimal:
    """Calculate the tax to withhold from one employee for one month.

    Returns 0 when withholding is disabled or income is not positive.
    Never raises for in-range inputs.
    """
    return explain_withholding(monthly_income, context, config).withholding
