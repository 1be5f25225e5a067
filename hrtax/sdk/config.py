"""Configuration management for hrtax.

Configuration is split into two files:

1. settings.json - Machine-specific settings
   - payroll_config: path to the payroll config file (optional, if not colocated)

2. payroll.yaml - Payroll config versions
   - payroll_configs: effective-dated list of social security and tax settings

Config directory resolution:
1. HRTAX_CONFIG_PATH environment variable (if set)
2. ~/.config/hrtax/ (XDG_CONFIG_HOME fallback)

Payroll config resolution:
1. Explicit path argument (CLI --config)
2. settings.json "payroll_config" key (if set via CLI)
3. payroll.yaml in the config directory
"""

import json
import logging
import os
from datetime import date
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from .taxes.defaults import default_payroll_config_document
from .taxes.schemas import PayrollConfig, PayrollConfigFile

logger = logging.getLogger(__name__)

APP_NAME = "hrtax"
CONFIG_PATH_ENV = "HRTAX_CONFIG_PATH"
SETTINGS_FILENAME = "settings.json"
PAYROLL_CONFIG_FILENAME = "payroll.yaml"
PAYROLL_CONFIG_SETTING = "payroll_config"


class ConfigNotFoundError(Exception):
    """Raised when no payroll config is found, or none is effective."""
    pass


class PayrollConfigError(ValueError):
    """Raised when a payroll config file cannot be parsed or validated."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


def format_validation_error(error: ValidationError) -> str:
    """Flatten a pydantic ValidationError into 'loc: msg' lines."""
    lines = []
    for item in error.errors():
        loc = ".".join(str(part) for part in item["loc"])
        lines.append(f"  {loc}: {item['msg']}" if loc else f"  {item['msg']}")
    return "\n".join(lines)


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. HRTAX_CONFIG_PATH environment variable
    2. ~/.config/hrtax/ (XDG_CONFIG_HOME)

    Returns:
        Path to the configuration directory
    """
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    return load_settings().get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json."""
    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def clear_setting(key: str) -> bool:
    """Remove a setting. Returns True if it was set."""
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True


def get_payroll_config_path(path: Optional[Path] = None) -> Path:
    """Get the path to the payroll config file.

    Resolution order:
    1. Explicit path argument
    2. settings.json "payroll_config" key (if set)
    3. payroll.yaml in config directory

    Returns:
        Path to the payroll config file (may not exist)
    """
    if path is not None:
        return Path(path)

    custom = get_setting(PAYROLL_CONFIG_SETTING)
    if custom:
        return Path(custom).expanduser()

    return get_config_dir() / PAYROLL_CONFIG_FILENAME


def load_payroll_config_file(path: Optional[Path] = None) -> PayrollConfigFile:
    """Load and validate the payroll config file.

    Args:
        path: Optional explicit path (default: resolved via get_payroll_config_path)

    Returns:
        Validated PayrollConfigFile

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        PayrollConfigError: If the file is not valid YAML or fails validation
    """
    config_path = get_payroll_config_path(path)
    if not config_path.exists():
        raise ConfigNotFoundError(
            f"Payroll config not found: {config_path}\n\n"
            f"Create one with: hrtax config init\n"
            f"Or point at an existing file: hrtax config use /path/to/payroll.yaml"
        )

    logger.debug(f"loading payroll config from {config_path}")
    try:
        with open(config_path, "r") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise PayrollConfigError(config_path, f"invalid YAML: {e}") from e

    try:
        config_file = PayrollConfigFile.model_validate(raw)
    except ValidationError as e:
        raise PayrollConfigError(config_path, "validation failed:\n" + format_validation_error(e)) from e

    logger.debug(f"loaded {len(config_file.payroll_configs)} payroll config version(s)")
    return config_file


def resolve_payroll_config(as_of: date, path: Optional[Path] = None) -> PayrollConfig:
    """Resolve the payroll config version effective on a date.

    Versions are checked newest start_date first; the first one whose
    start/end window contains as_of wins.

    Raises:
        ConfigNotFoundError: If the file is missing or no version is effective
        PayrollConfigError: If the file is invalid
    """
    config_file = load_payroll_config_file(path)
    versions = sorted(config_file.payroll_configs, key=lambda c: c.start_date, reverse=True)

    for version in versions:
        if version.is_effective(as_of):
            logger.debug(f"payroll config effective {version.start_date} selected for {as_of}")
            return version

    raise ConfigNotFoundError(
        f"No payroll config effective on {as_of.isoformat()} in {get_payroll_config_path(path)}"
    )


def write_default_payroll_config(
    path: Optional[Path] = None,
    start_date: Optional[date] = None,
    force: bool = False,
) -> Path:
    """Write a payroll config file populated with the defaults.

    Args:
        path: Target path (default: resolved payroll config path)
        start_date: Effective date of the default version (default: Jan 1 this year)
        force: Overwrite an existing file

    Returns:
        Path to the written file

    Raises:
        FileExistsError: If the file exists and force is False
    """
    config_path = get_payroll_config_path(path)
    if config_path.exists() and not force:
        raise FileExistsError(f"Payroll config already exists: {config_path}")

    if start_date is None:
        start_date = date(date.today().year, 1, 1)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    document = default_payroll_config_document(start_date.isoformat())

    with open(config_path, "w") as f:
        yaml.safe_dump(document, f, default_flow_style=False, sort_keys=False)

    logger.info(f"wrote default payroll config to {config_path}")
    return config_path
