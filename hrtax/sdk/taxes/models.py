"""Value objects consumed and produced by the withholding engine.

Everything here is immutable and carries Decimal amounts. Instances are built
fresh for each calculation (usually from validated config, see schemas.py) and
never mutated by the engine.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Tuple, Union

ZERO = Decimal("0")

# Category labels used in breakdowns and CLI/MCP output
SECTION_40_1 = "40(1)"
SECTION_40_2 = "40(2)"
NOT_WITHHELD = "none"


def to_decimal(value) -> Decimal:
    """Coerce a number to Decimal.

    Floats go through their shortest repr so 0.05 becomes Decimal("0.05")
    rather than the binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True)
class RateBracket:
    """One row of a progressive schedule."""

    min: Decimal  # inclusive lower bound
    max: Optional[Decimal]  # None = unbounded
    rate: Decimal

    @property
    def unbounded(self) -> bool:
        return self.max is None


@dataclass(frozen=True)
class TaxConfig:
    """Tax parameters for one payroll run, resolved by the caller."""

    apply_standard_expense: bool
    standard_expense_rate: Decimal
    standard_expense_cap: Decimal
    apply_personal_allowance: bool
    personal_allowance_amount: Decimal
    progressive_brackets: Tuple[RateBracket, ...]
    withholding_rate_service: Decimal


@dataclass(frozen=True)
class FlatRateCategory:
    """Section 40(2): service/contract income without social security."""

    label: str = field(default=SECTION_40_2, init=False)


@dataclass(frozen=True)
class ProgressiveCategory:
    """Section 40(1): regular employment with social-security enrollment."""

    sso_rate_employee: Decimal
    sso_wage_cap: Decimal
    sso_base: Decimal
    label: str = field(default=SECTION_40_1, init=False)


TaxCategory = Union[FlatRateCategory, ProgressiveCategory]


@dataclass(frozen=True)
class EmployeeTaxContext:
    """Per-employee, per-month withholding inputs."""

    withhold_tax: bool
    category: TaxCategory

    @classmethod
    def from_flags(
        cls,
        withhold_tax: bool,
        sso_contribute: bool,
        sso_rate_employee=ZERO,
        sso_wage_cap=ZERO,
        sso_base=ZERO,
    ) -> "EmployeeTaxContext":
        """Build a context from the flat employee flags.

        ``sso_contribute`` picks the category; the SSO amounts are only kept
        for the progressive category.
        """
        if sso_contribute:
            category: TaxCategory = ProgressiveCategory(
                sso_rate_employee=to_decimal(sso_rate_employee),
                sso_wage_cap=to_decimal(sso_wage_cap),
                sso_base=to_decimal(sso_base),
            )
        else:
            category = FlatRateCategory()
        return cls(withhold_tax=withhold_tax, category=category)

    @property
    def sso_contribute(self) -> bool:
        return isinstance(self.category, ProgressiveCategory)


@dataclass(frozen=True)
class BracketSlice:
    """Portion of taxable income that falls inside one bracket."""

    bracket: RateBracket
    taxable_amount: Decimal
    tax: Decimal  # unrounded

    def to_dict(self) -> dict:
        return {
            "min": str(self.bracket.min),
            "max": str(self.bracket.max) if self.bracket.max is not None else None,
            "rate": str(self.bracket.rate),
            "taxable_amount": str(self.taxable_amount),
            "tax": str(self.tax),
        }


@dataclass(frozen=True)
class WithholdingBreakdown:
    """Every intermediate of one withholding calculation.

    Only ``annual_tax`` and ``withholding`` are rounded; the rest are exact.
    Fields that do not apply to the category stay at zero.
    """

    category: str
    monthly_income: Decimal
    withholding: Decimal
    sso_monthly: Decimal = ZERO
    annual_income: Decimal = ZERO
    expense: Decimal = ZERO
    allowance: Decimal = ZERO
    sso_annual: Decimal = ZERO
    taxable_income: Decimal = ZERO
    annual_tax: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "monthly_income": str(self.monthly_income),
            "sso_monthly": str(self.sso_monthly),
            "annual_income": str(self.annual_income),
            "expense": str(self.expense),
            "allowance": str(self.allowance),
            "sso_annual": str(self.sso_annual),
            "taxable_income": str(self.taxable_income),
            "annual_tax": str(self.annual_tax),
            "withholding": str(self.withholding),
        }
