"""hrtax CLI - Command-line interface for monthly withholding tax."""

import logging
import os

import click

from hrtax import __version__

from .config_commands import config as config_group
from .withhold_commands import withhold as withhold_group


@click.group()
@click.version_option(version=__version__, prog_name="hrtax")
def cli():
    """hrtax - Monthly withholding tax for payroll runs.

    Computes Section 40(1) progressive and Section 40(2) flat-rate
    withholding from a payroll config file.

    Configuration is loaded from (in order):

    \b
    1. --config option on the command
    2. settings.json 'payroll_config' key (set via 'hrtax config use')
    3. ~/.config/hrtax/payroll.yaml (XDG default, or HRTAX_CONFIG_PATH)

    Run 'hrtax config init' to create a payroll config with the defaults.
    """
    pass


cli.add_command(config_group)
cli.add_command(withhold_group)


def main():
    """Entry point for the CLI."""
    # Configure logging based on LOG_LEVEL environment variable
    log_level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    cli()


if __name__ == "__main__":
    main()
