"""Withholding tax commands."""

import json
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

import click

from hrtax.sdk import (
    ConfigNotFoundError,
    EmployeeTaxContext,
    PayrollConfigError,
    bracket_slices,
    calc_run_withholding,
    explain_withholding,
    load_employees,
    progressive_tax,
    resolve_payroll_config,
)
from hrtax.sdk.taxes import NOT_WITHHELD, SECTION_40_1, SECTION_40_2

CATEGORY_LABELS = {
    SECTION_40_1: "Section 40(1) - progressive",
    SECTION_40_2: "Section 40(2) - flat rate",
    NOT_WITHHELD: "Not withheld",
}


class DecimalType(click.ParamType):
    """Click parameter parsed straight into Decimal (no float round trip)."""

    name = "amount"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            amount = Decimal(str(value).replace(",", ""))
        except InvalidOperation:
            self.fail(f"'{value}' is not a valid amount", param, ctx)

        # NaN and Infinity parse fine but cannot be compared or rounded
        if not amount.is_finite():
            self.fail(f"'{value}' is not a finite amount", param, ctx)
        return amount


AMOUNT = DecimalType()


def fmt(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def load_effective_config(config_path, as_of):
    """Resolve the payroll config for the CLI, turning errors into ClickException."""
    as_of_date = as_of.date() if as_of else date.today()
    try:
        return resolve_payroll_config(as_of_date, Path(config_path) if config_path else None)
    except (ConfigNotFoundError, PayrollConfigError) as e:
        raise click.ClickException(str(e))


config_option = click.option(
    "--config", "config_path", type=click.Path(exists=True, dir_okay=False),
    help="Payroll config file (default: settings 'payroll_config' or ~/.config/hrtax/payroll.yaml)",
)
as_of_option = click.option(
    "--as-of", type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Payroll month date used to pick the config version (default: today)",
)
format_option = click.option(
    "--format", "output_format", type=click.Choice(["text", "json"]), default="text",
    help="Output format (default: text)",
)


@click.group()
def withhold():
    """Monthly withholding tax calculations."""
    pass


@withhold.command("calc")
@click.argument("income", type=AMOUNT)
@click.option("--sso/--no-sso", default=True,
              help="Social security enrolled: Section 40(1) progressive (default) or 40(2) flat rate")
@click.option("--no-withhold", is_flag=True, help="Employee has tax withholding switched off")
@click.option("--sso-base", type=AMOUNT, help="Declared SSO wage (default: INCOME)")
@config_option
@as_of_option
@click.option("--explain", is_flag=True, help="Show every intermediate and the bracket split")
@format_option
def withhold_calc(income, sso, no_withhold, sso_base, config_path, as_of, explain, output_format):
    """Calculate withholding for one employee and one month.

    INCOME is the employee's total taxable income for the month.

    Examples:
        hrtax withhold calc 34500 --sso-base 15000
        hrtax withhold calc 20000 --no-sso
    """
    payroll_config = load_effective_config(config_path, as_of)
    social_security = payroll_config.social_security
    tax_config = payroll_config.tax.to_tax_config()

    context = EmployeeTaxContext.from_flags(
        withhold_tax=not no_withhold,
        sso_contribute=sso,
        sso_rate_employee=social_security.rate_employee,
        sso_wage_cap=social_security.wage_cap,
        sso_base=sso_base if sso_base else income,
    )
    breakdown = explain_withholding(income, context, tax_config)

    if output_format == "json":
        result = breakdown.to_dict()
        result["config_start_date"] = payroll_config.start_date.isoformat()
        if explain:
            result["brackets"] = _slices_to_dicts(breakdown.taxable_income, tax_config.progressive_brackets)
        click.echo(json.dumps(result, indent=2))
        return

    click.echo(f"Config effective:  {payroll_config.start_date.isoformat()}")
    click.echo(f"Category:          {CATEGORY_LABELS[breakdown.category]}")
    click.echo(f"Monthly income:    {fmt(breakdown.monthly_income)}")

    if explain and breakdown.category == SECTION_40_1:
        click.echo()
        click.echo(f"  SSO per month:     {fmt(breakdown.sso_monthly)}")
        click.echo(f"  Annual income:     {fmt(breakdown.annual_income)}")
        click.echo(f"  Standard expense: -{fmt(breakdown.expense)}")
        click.echo(f"  Allowance:        -{fmt(breakdown.allowance)}")
        click.echo(f"  SSO per year:     -{fmt(breakdown.sso_annual)}")
        click.echo(f"  Taxable income:    {fmt(breakdown.taxable_income)}")
        _echo_slices(breakdown.taxable_income, tax_config.progressive_brackets, indent="    ")
        click.echo(f"  Annual tax:        {fmt(breakdown.annual_tax)}")
        click.echo()
    elif explain and breakdown.category == SECTION_40_2:
        click.echo(f"  Service rate:      {tax_config.withholding_rate_service * 100:.2f}%")

    click.echo(click.style(f"Withholding:       {fmt(breakdown.withholding)}", bold=True))


@withhold.command("run")
@click.argument("employees_file", type=click.Path(exists=True, dir_okay=False))
@config_option
@as_of_option
@format_option
def withhold_run(employees_file, config_path, as_of, output_format):
    """Calculate withholding for every employee in EMPLOYEES_FILE.

    EMPLOYEES_FILE is YAML with an 'employees' list; each entry has id,
    name, monthly_income, withhold_tax, sso_contribute and optionally
    sso_declared_wage.
    """
    payroll_config = load_effective_config(config_path, as_of)
    try:
        roster = load_employees(Path(employees_file))
    except PayrollConfigError as e:
        raise click.ClickException(str(e))

    run = calc_run_withholding(roster.employees, payroll_config)

    if output_format == "json":
        click.echo(json.dumps(run.to_dict(), indent=2))
        return

    if not run.lines:
        click.echo("No employees in file.")
        return

    click.echo(f"Config effective: {run.config_start_date}")
    click.echo()
    click.echo(f"{'ID':<10} {'Name':<24} {'Category':<8} {'Income':>14} {'Withholding':>12}")
    click.echo("-" * 72)
    for line in run.lines:
        name = (line.name or "")[:24]
        click.echo(
            f"{line.employee_id:<10} {name:<24} {line.category:<8} "
            f"{fmt(line.breakdown.monthly_income):>14} {fmt(line.withholding):>12}"
        )
    click.echo("-" * 72)
    click.echo(f"{'Total':<59} {fmt(run.total_withholding):>12}")


@withhold.command("brackets")
@click.argument("taxable", type=AMOUNT)
@config_option
@as_of_option
def withhold_brackets(taxable, config_path, as_of):
    """Show the annual progressive tax on TAXABLE, bracket by bracket.

    TAXABLE is the annualized taxable base (after deductions).
    """
    payroll_config = load_effective_config(config_path, as_of)
    brackets = payroll_config.tax.to_tax_config().progressive_brackets

    click.echo(f"Taxable income: {fmt(taxable)}")
    _echo_slices(taxable, brackets)
    click.echo(click.style(f"Annual tax: {fmt(progressive_tax(taxable, brackets))}", bold=True))


def _slices_to_dicts(taxable, brackets) -> list:
    return [s.to_dict() for s in bracket_slices(taxable, brackets)]


def _echo_slices(taxable, brackets, indent: str = "  "):
    for s in bracket_slices(taxable, brackets):
        upper = fmt(s.bracket.max) if s.bracket.max is not None else "and up"
        click.echo(
            f"{indent}{fmt(s.bracket.min):>14} - {upper:<14} @ {s.bracket.rate * 100:>5.2f}%: "
            f"{fmt(s.taxable_amount):>14} -> {fmt(s.tax)}"
        )
