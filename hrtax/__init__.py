"""hrtax - Monthly withholding-tax engine for payroll runs."""

__version__ = "0.4.0"
