"""Withholding for every employee of a payroll run.

One payroll config version is resolved for the run and used for every
employee, so all lines of a run are computed against the same schedule.
Only the withholding lines are totalled; gross/net pay is not handled here.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional

from .employee.context import resolve_tax_context
from .employee.schemas import EmployeeRecord
from .taxes.models import ZERO, WithholdingBreakdown
from .taxes.schemas import PayrollConfig
from .taxes.withholding import explain_withholding

logger = logging.getLogger(__name__)


@dataclass
class WithholdingLine:
    """Withholding result for one employee."""

    employee_id: str
    name: Optional[str]
    breakdown: WithholdingBreakdown

    @property
    def withholding(self) -> Decimal:
        return self.breakdown.withholding

    @property
    def category(self) -> str:
        return self.breakdown.category

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "name": self.name,
            **self.breakdown.to_dict(),
        }


@dataclass
class RunWithholding:
    """Withholding lines of a payroll run."""

    config_start_date: str
    lines: List[WithholdingLine] = field(default_factory=list)

    @property
    def total_withholding(self) -> Decimal:
        return sum((line.withholding for line in self.lines), ZERO)

    def to_dict(self) -> dict:
        return {
            "config_start_date": self.config_start_date,
            "lines": [line.to_dict() for line in self.lines],
            "total_withholding": str(self.total_withholding),
        }


def calc_run_withholding(
    employees: Iterable[EmployeeRecord],
    payroll_config: PayrollConfig,
) -> RunWithholding:
    """Calculate monthly withholding for each employee.

    Args:
        employees: Validated employee records for the month
        payroll_config: Payroll config version effective for the run

    Returns:
        RunWithholding with one line per employee, in input order
    """
    tax_config = payroll_config.tax.to_tax_config()
    run = RunWithholding(config_start_date=payroll_config.start_date.isoformat())

    for employee in employees:
        context = resolve_tax_context(employee, payroll_config.social_security)
        breakdown = explain_withholding(employee.monthly_income, context, tax_config)
        logger.debug(
            f"{employee.id}: category={breakdown.category} "
            f"income={breakdown.monthly_income} withholding={breakdown.withholding}"
        )
        run.lines.append(WithholdingLine(employee_id=employee.id, name=employee.name, breakdown=breakdown))

    logger.info(f"payroll run: {len(run.lines)} employee(s), total withholding {run.total_withholding}")
    return run
