"""hrtax SDK - Core functionality for monthly withholding tax."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    clear_setting,
    get_payroll_config_path,
    load_payroll_config_file,
    resolve_payroll_config,
    write_default_payroll_config,
    ConfigNotFoundError,
    PayrollConfigError,
)

from .taxes import (
    RateBracket,
    TaxConfig,
    FlatRateCategory,
    ProgressiveCategory,
    EmployeeTaxContext,
    BracketSlice,
    WithholdingBreakdown,
    round_cents,
    bracket_slices,
    progressive_tax,
    explain_withholding,
    monthly_withholding,
    PayrollConfig,
    PayrollConfigFile,
    TaxRules,
    SocialSecurityRules,
    default_tax_config,
)

from .employee import (
    EmployeeRecord,
    EmployeeRoster,
    resolve_tax_context,
    load_employees,
)

from .payroll_run import (
    WithholdingLine,
    RunWithholding,
    calc_run_withholding,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "clear_setting",
    "get_payroll_config_path",
    "load_payroll_config_file",
    "resolve_payroll_config",
    "write_default_payroll_config",
    "ConfigNotFoundError",
    "PayrollConfigError",
    # Engine
    "RateBracket",
    "TaxConfig",
    "FlatRateCategory",
    "ProgressiveCategory",
    "EmployeeTaxContext",
    "BracketSlice",
    "WithholdingBreakdown",
    "round_cents",
    "bracket_slices",
    "progressive_tax",
    "explain_withholding",
    "monthly_withholding",
    # Schemas
    "PayrollConfig",
    "PayrollConfigFile",
    "TaxRules",
    "SocialSecurityRules",
    "default_tax_config",
    # Employees
    "EmployeeRecord",
    "EmployeeRoster",
    "resolve_tax_context",
    "load_employees",
    # Payroll run
    "WithholdingLine",
    "RunWithholding",
    "calc_run_withholding",
]
