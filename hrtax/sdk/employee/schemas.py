"""Pydantic schemas for employee withholding inputs.

An employees file is YAML with an ``employees:`` list. Only the fields the
withholding calculation needs are modeled.
"""

from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..taxes.schemas import Amount


class EmployeeRecord(BaseModel):
    """One employee's withholding inputs for a payroll month."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(..., description="Employee identifier")
    name: Optional[str] = None
    monthly_income: Amount = Field(..., description="Total taxable income for the month")
    withhold_tax: bool = Field(default=False, description="Withhold income tax at all")
    sso_contribute: bool = Field(
        default=False,
        description="Enrolled in social security (Section 40(1)); otherwise Section 40(2) flat rate",
    )
    sso_declared_wage: Optional[Annotated[Amount, Field(ge=0)]] = Field(
        default=None,
        description="Declared SSO wage; monthly income is used when unset or zero",
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value):
        # YAML reads bare employee numbers as ints
        if isinstance(value, int):
            return str(value)
        return value


class EmployeeRoster(BaseModel):
    """Employees file."""
    model_config = ConfigDict(extra="forbid")

    employees: List[EmployeeRecord] = Field(default_factory=list)

    @field_validator("employees")
    @classmethod
    def unique_ids(cls, value: List[EmployeeRecord]) -> List[EmployeeRecord]:
        seen = set()
        for employee in value:
            if employee.id in seen:
                raise ValueError(f"duplicate employee id: {employee.id}")
            seen.add(employee.id)
        return value
