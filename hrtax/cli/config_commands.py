"""Config CLI commands for hrtax.

Manages settings.json and the payroll config file (payroll.yaml).
"""

from pathlib import Path

import click

from hrtax.sdk import (
    ConfigNotFoundError,
    PayrollConfigError,
    clear_setting,
    get_payroll_config_path,
    get_settings_path,
    load_payroll_config_file,
    load_settings,
    set_setting,
    write_default_payroll_config,
)
from hrtax.sdk.config import PAYROLL_CONFIG_SETTING


@click.group()
def config():
    """Manage payroll config (payroll.yaml) and settings (settings.json)."""
    pass


@config.command("init")
@click.option("--force", is_flag=True, help="Overwrite an existing payroll config.")
@click.option("--start-date", type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Effective date of the default version (default: Jan 1 this year)")
def config_init(force, start_date):
    """Write a payroll config populated with the default Thai tax schedule."""
    try:
        path = write_default_payroll_config(
            start_date=start_date.date() if start_date else None,
            force=force,
        )
    except FileExistsError as e:
        raise click.ClickException(f"{e}\nUse --force to overwrite.")

    click.echo(f"Created payroll config: {path}")


@config.command("show")
def config_show():
    """Show config paths and the payroll config versions."""
    settings_path = get_settings_path()
    settings = load_settings()
    payroll_path = get_payroll_config_path()

    click.echo(f"Settings file: {settings_path} ({'exists' if settings_path.exists() else 'not found'})")
    for key, value in settings.items():
        click.echo(f"  {key}: {value}")
    click.echo(f"Payroll config: {payroll_path}")

    try:
        config_file = load_payroll_config_file()
    except (ConfigNotFoundError, PayrollConfigError) as e:
        click.echo()
        click.echo(str(e))
        return

    click.echo()
    for version in sorted(config_file.payroll_configs, key=lambda c: c.start_date):
        end = version.end_date.isoformat() if version.end_date else "open"
        tax = version.tax
        click.echo(f"Version {version.start_date.isoformat()} -> {end}")
        click.echo(f"  SSO: {version.social_security.rate_employee * 100:.2f}% "
                   f"capped at {version.social_security.wage_cap:,.2f}")
        expense = (f"{tax.standard_expense_rate * 100:.0f}% up to {tax.standard_expense_cap:,.2f}"
                   if tax.apply_standard_expense else "off")
        allowance = f"{tax.personal_allowance_amount:,.2f}" if tax.apply_personal_allowance else "off"
        click.echo(f"  Standard expense: {expense}")
        click.echo(f"  Personal allowance: {allowance}")
        click.echo(f"  Brackets: {len(tax.progressive_brackets)}")
        click.echo(f"  Service rate (40(2)): {tax.withholding_rate_service * 100:.2f}%")


@config.command("validate")
@click.argument("path", required=False, type=click.Path(dir_okay=False))
def config_validate(path):
    """Validate a payroll config file (default: the configured one)."""
    try:
        config_file = load_payroll_config_file(Path(path) if path else None)
    except (ConfigNotFoundError, PayrollConfigError) as e:
        raise click.ClickException(str(e))

    count = len(config_file.payroll_configs)
    click.echo(click.style(f"OK: {count} payroll config version(s)", fg="green"))


@config.command("use")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom payroll_config, revert to default")
def config_use(path, clear):
    """Point hrtax at a payroll config file.

    Examples:
        hrtax config use ~/payroll/payroll.yaml
        hrtax config use --clear
    """
    if clear:
        if clear_setting(PAYROLL_CONFIG_SETTING):
            click.echo("Cleared payroll_config setting.")
        else:
            click.echo("payroll_config was not set.")
        click.echo(f"Payroll config is now: {get_payroll_config_path()}")
        return

    if not path:
        click.echo(f"Payroll config: {get_payroll_config_path()}")
        return

    config_path = Path(path).expanduser().resolve()
    if not config_path.is_file():
        raise click.ClickException(f"Not a file: {config_path}")

    set_setting(PAYROLL_CONFIG_SETTING, str(config_path))
    click.echo(f"Set payroll_config: {config_path}")
    click.echo(f"Saved to: {get_settings_path()}")
