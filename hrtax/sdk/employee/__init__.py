"""employee - Per-employee withholding inputs.

Scope:
- Employee record / roster schemas (schemas.py)
- Resolution of EmployeeTaxContext from a record and SSO settings (context.py)

Constraints:
- The sso_contribute flag is turned into a tax category here, never in taxes/
- No calculation - taxes/ does the math

Usage:
    from hrtax.sdk.employee import load_employees, resolve_tax_context

    roster = load_employees(Path("employees.yaml"))
    context = resolve_tax_context(roster.employees[0], payroll_config.social_security)
"""

from .schemas import EmployeeRecord, EmployeeRoster
from .context import resolve_sso_base, resolve_tax_context, load_employees

__all__ = [
    "EmployeeRecord",
    "EmployeeRoster",
    "resolve_sso_base",
    "resolve_tax_context",
    "load_employees",
]
