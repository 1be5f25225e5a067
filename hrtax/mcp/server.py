"""hrtax MCP Server - FastMCP implementation for withholding tax tools."""

import json
import logging
from datetime import date
from decimal import InvalidOperation
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from hrtax.sdk import (
    ConfigNotFoundError,
    EmployeeTaxContext,
    PayrollConfigError,
    bracket_slices,
    explain_withholding,
    load_payroll_config_file,
    progressive_tax,
    resolve_payroll_config,
)
from hrtax.sdk.taxes.models import to_decimal

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("hrtax")


def _resolve(as_of: str | None):
    as_of_date = date.fromisoformat(as_of) if as_of else date.today()
    return resolve_payroll_config(as_of_date)


# --- Tools ---

@mcp.tool()
async def calculate_withholding(
    monthly_income: str = Field(description="Total taxable income for the month, e.g. '34500'"),
    sso_contribute: bool = Field(
        default=True,
        description="True for Section 40(1) employees enrolled in social security, False for 40(2) flat rate",
    ),
    withhold_tax: bool = Field(default=True, description="False if the employee has withholding switched off"),
    sso_base: str | None = Field(default=None, description="Declared SSO wage (defaults to monthly_income)"),
    as_of: str | None = Field(default=None, description="Payroll month date YYYY-MM-DD used to pick the config"),
) -> dict[str, Any]:
    """Calculate the monthly withholding tax for one employee. Returns the amount and every intermediate."""
    try:
        payroll_config = _resolve(as_of)
        income = to_decimal(monthly_income)
        base = to_decimal(sso_base) if sso_base else income

        context = EmployeeTaxContext.from_flags(
            withhold_tax=withhold_tax,
            sso_contribute=sso_contribute,
            sso_rate_employee=payroll_config.social_security.rate_employee,
            sso_wage_cap=payroll_config.social_security.wage_cap,
            sso_base=base,
        )
        breakdown = explain_withholding(income, context, payroll_config.tax.to_tax_config())

        result = breakdown.to_dict()
        result["config_start_date"] = payroll_config.start_date.isoformat()
        return result

    except (ConfigNotFoundError, PayrollConfigError) as e:
        logger.error(f"Error loading payroll config: {e}")
        return {"error": str(e), "withholding": None}
    except (InvalidOperation, ValueError) as e:
        return {"error": f"Invalid input: {e}", "withholding": None}


@mcp.tool()
async def calculate_progressive_tax(
    taxable_income: str = Field(description="Annualized taxable base after deductions, e.g. '245000'"),
    as_of: str | None = Field(default=None, description="Payroll month date YYYY-MM-DD used to pick the config"),
) -> dict[str, Any]:
    """Calculate annual progressive tax on a taxable base with a per-bracket breakdown."""
    try:
        payroll_config = _resolve(as_of)
        taxable = to_decimal(taxable_income)
        brackets = payroll_config.tax.to_tax_config().progressive_brackets

        return {
            "taxable_income": str(taxable),
            "annual_tax": str(progressive_tax(taxable, brackets)),
            "brackets": [s.to_dict() for s in bracket_slices(taxable, brackets)],
            "config_start_date": payroll_config.start_date.isoformat(),
        }

    except (ConfigNotFoundError, PayrollConfigError) as e:
        logger.error(f"Error loading payroll config: {e}")
        return {"error": str(e), "annual_tax": None}
    except (InvalidOperation, ValueError) as e:
        return {"error": f"Invalid input: {e}", "annual_tax": None}


# --- Resources ---

@mcp.resource("hrtax://payroll-configs")
async def payroll_configs_resource() -> str:
    """List payroll config versions with their effective windows."""
    try:
        config_file = load_payroll_config_file()
    except (ConfigNotFoundError, PayrollConfigError) as e:
        return json.dumps({"error": str(e)})

    versions = [
        {
            "start_date": v.start_date.isoformat(),
            "end_date": v.end_date.isoformat() if v.end_date else None,
            "note": v.note,
        }
        for v in config_file.payroll_configs
    ]
    return json.dumps({"payroll_configs": versions}, indent=2)


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
