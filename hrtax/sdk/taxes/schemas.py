"""Pydantic schemas for payroll config validation.

These schemas validate payroll config files (payroll.yaml) and convert them
into the engine's value objects. Validation lives here, at the file boundary;
the engine itself accepts whatever it is given.

Missing tax fields fall back to the defaults in defaults.py, and an empty
bracket table or non-positive SSO wage cap is replaced by its default before
the range checks run.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from .defaults import (
    DEFAULT_PERSONAL_ALLOWANCE_AMOUNT,
    DEFAULT_PROGRESSIVE_BRACKETS,
    DEFAULT_SSO_WAGE_CAP,
    DEFAULT_STANDARD_EXPENSE_CAP,
    DEFAULT_STANDARD_EXPENSE_RATE,
    DEFAULT_WITHHOLDING_RATE_SERVICE,
)
from .models import ZERO, RateBracket, TaxConfig, to_decimal


def _float_to_decimal(value):
    """YAML floats -> Decimal via repr (0.05 stays 0.05)."""
    if isinstance(value, float):
        return to_decimal(value)
    return value


Amount = Annotated[Decimal, BeforeValidator(_float_to_decimal)]


class RateBracketRule(BaseModel):
    """Single progressive bracket entry."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    min: Amount = Field(..., ge=0, description="Inclusive lower bound (annual taxable base)")
    max: Optional[Annotated[Amount, Field(ge=0)]] = Field(default=None, description="Upper bound (None if top bracket)")
    rate: Amount = Field(..., ge=0, le=1, description="Tax rate as decimal")

    @model_validator(mode="after")
    def check_bounds(self) -> "RateBracketRule":
        if self.max is not None and self.max <= self.min:
            raise ValueError(f"max ({self.max}) must be greater than min ({self.min})")
        return self

    def to_bracket(self) -> RateBracket:
        return RateBracket(min=self.min, max=self.max, rate=self.rate)


def _default_bracket_rules() -> List[RateBracketRule]:
    return [RateBracketRule(min=b.min, max=b.max, rate=b.rate) for b in DEFAULT_PROGRESSIVE_BRACKETS]


class TaxRules(BaseModel):
    """Withholding tax settings of a payroll config version."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    # Section 40(1) - regular employees
    apply_standard_expense: bool = True
    standard_expense_rate: Amount = Field(default=DEFAULT_STANDARD_EXPENSE_RATE, ge=0, le=1)
    standard_expense_cap: Amount = Field(default=DEFAULT_STANDARD_EXPENSE_CAP, ge=0)
    apply_personal_allowance: bool = True
    personal_allowance_amount: Amount = Field(default=DEFAULT_PERSONAL_ALLOWANCE_AMOUNT, ge=0)
    progressive_brackets: List[RateBracketRule] = Field(default_factory=_default_bracket_rules)
    # Section 40(2) - freelance/contract
    withholding_rate_service: Amount = Field(default=DEFAULT_WITHHOLDING_RATE_SERVICE, ge=0, le=1)

    @field_validator("progressive_brackets", mode="before")
    @classmethod
    def default_empty_brackets(cls, value):
        if not value:
            return _default_bracket_rules()
        return value

    @model_validator(mode="after")
    def check_unbounded_bracket(self) -> "TaxRules":
        """At most one open-ended bracket, and it must be the highest."""
        unbounded = [b for b in self.progressive_brackets if b.max is None]
        if len(unbounded) > 1:
            raise ValueError("progressive_brackets may contain only one bracket without max")
        if unbounded:
            top_min = max(b.min for b in self.progressive_brackets)
            if unbounded[0].min != top_min:
                raise ValueError("the bracket without max must have the highest min")
        return self

    def to_tax_config(self) -> TaxConfig:
        return TaxConfig(
            apply_standard_expense=self.apply_standard_expense,
            standard_expense_rate=self.standard_expense_rate,
            standard_expense_cap=self.standard_expense_cap,
            apply_personal_allowance=self.apply_personal_allowance,
            personal_allowance_amount=self.personal_allowance_amount,
            progressive_brackets=tuple(b.to_bracket() for b in self.progressive_brackets),
            withholding_rate_service=self.withholding_rate_service,
        )


class SocialSecurityRules(BaseModel):
    """Employee social-security contribution settings."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    rate_employee: Amount = Field(default=ZERO, ge=0, description="Employee contribution rate (0 = no contribution)")
    wage_cap: Amount = Field(default=DEFAULT_SSO_WAGE_CAP, gt=0, description="Monthly wage ceiling")

    @field_validator("wage_cap", mode="before")
    @classmethod
    def default_wage_cap(cls, value):
        if value is None or (isinstance(value, (int, float, Decimal)) and value <= 0):
            return DEFAULT_SSO_WAGE_CAP
        return value


class PayrollConfig(BaseModel):
    """One effective-dated payroll config version."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_date: date
    end_date: Optional[date] = None
    social_security: SocialSecurityRules
    tax: TaxRules = Field(default_factory=TaxRules)
    note: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self) -> "PayrollConfig":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError(f"end_date {self.end_date} is before start_date {self.start_date}")
        return self

    def is_effective(self, as_of: date) -> bool:
        if as_of < self.start_date:
            return False
        return self.end_date is None or as_of <= self.end_date


class PayrollConfigFile(BaseModel):
    """Complete payroll config file."""
    model_config = ConfigDict(extra="forbid")

    payroll_configs: List[PayrollConfig] = Field(..., min_length=1)
