"""
================================================================================
Configuration Loader
================================================================================

YAML-based configuration with environment variable override support.

The suite reads ``config/config.yaml`` once at startup into an immutable
``UIConfig`` value that fixtures pass by reference to browser sessions and
page objects.

Features:
    - Dot notation path access over the YAML tree
    - Environment variable override (UI_BASE_URL overrides ui.base_url)
    - Override values converted to the type of the built-in default
    - Validation of URLs, waits and credentials before any browser starts

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml
from loguru import logger


# Default configuration file path
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "config" / "config.yaml"


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""
    pass


class ConfigLoader:
    """
    Configuration loader with YAML and environment variable support.

    Configuration hierarchy (highest to lowest priority):
        1. Environment variables (UI_BASE_URL)
        2. YAML configuration file
        3. Default values

    Usage:
        >>> loader = ConfigLoader(Path("config/config.yaml"))
        >>> loader.get("ui.base_url", "http://localhost")
        'https://opensource-demo.orangehrmlive.com'

    Environment Variable Mapping:
        - ui.base_url -> UI_BASE_URL
        - timeouts.explicit_wait -> TIMEOUTS_EXPLICIT_WAIT
        - credentials.default_password -> CREDENTIALS_DEFAULT_PASSWORD
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Initialize configuration loader.

        Args:
            config_path: Path to YAML configuration file.
                        Uses DEFAULT_CONFIG_PATH if not specified.
            environ: Environment mapping; ``os.environ`` if not specified

        Raises:
            ConfigurationError: File missing or not valid YAML
        """
        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._environ = os.environ if environ is None else environ
        self._config: Dict[str, Any] = {}
        self._load_config()

    @property
    def path(self) -> Path:
        return self._config_path

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        if not self._config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self._config_path}")

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
            logger.debug(f"Loaded configuration from: {self._config_path}")
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in configuration file: {e}"
            ) from e

        if not isinstance(self._config, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping: {self._config_path}"
            )

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation path.

        First checks environment variables, then YAML config, then default.

        Args:
            key: Dot-notation path (e.g., "ui.base_url")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        env_key = key.upper().replace(".", "_")
        env_value = self._environ.get(env_key)
        if env_value is not None:
            return self._convert_type(env_value, default)

        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict):
                value = value.get(part)
            else:
                value = None

            if value is None:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Get an entire configuration section, or an empty dict."""
        return self._config.get(section, {}) or {}

    def sections(self) -> Tuple[str, ...]:
        """Top-level section names present in the file."""
        return tuple(self._config)

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()
        logger.info(f"Configuration reloaded from: {self._config_path}")

    @staticmethod
    def _convert_type(value: str, reference: Any) -> Any:
        """
        Convert string value to match reference type.

        Used for environment variables which are always strings.
        """
        if reference is None:
            return value

        if isinstance(reference, bool):
            return value.lower() in ("true", "1", "yes", "on")
        if isinstance(reference, int):
            try:
                return int(value)
            except ValueError:
                return value
        if isinstance(reference, float):
            try:
                return float(value)
            except ValueError:
                return value
        if isinstance(reference, (list, tuple)):
            return tuple(item.strip() for item in value.split(",") if item.strip())

        return value


@dataclass(frozen=True)
class UIConfig:
    """
    Immutable run configuration shared by every browser session.

    Waits and timeouts are in seconds.
    """
    base_url: str = "https://opensource-demo.orangehrmlive.com"
    login_url: str = "https://opensource-demo.orangehrmlive.com/web/index.php/auth/login"
    dashboard_url: str = "https://opensource-demo.orangehrmlive.com/web/index.php/dashboard/index"
    browser: str = "chrome"
    headless: bool = True
    maximize_window: bool = True
    highlight_elements: bool = False
    run_live: bool = False

    explicit_wait: float = 30.0
    implicit_wait: float = 10.0
    page_load_timeout: float = 30.0
    poll_interval: float = 0.25

    retry_attempts: int = 3
    retry_delay: float = 0.5

    default_username: str = "Admin"
    default_password: str = "admin123"

    screenshot_on_failure: bool = True
    screenshot_path: str = "screenshots"
    report_path: str = "reports"
    report_title: str = "OrangeHRM Test Automation Report"
    report_sinks: Tuple[str, ...] = ("console", "html", "json", "allure")

    test_data_file: str = "test-data/TestData.xlsx"

    log_level: str = "INFO"
    log_file: str = ""
    log_rotation: str = "10 MB"
    log_retention: str = "7 days"

    extra: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def with_overrides(self, **changes: Any) -> "UIConfig":
        """Return a validated copy with some fields replaced."""
        return validate_config(replace(self, **changes))


# Field name -> dot-notation key in config.yaml
CONFIG_KEYS: Dict[str, str] = {
    "base_url": "ui.base_url",
    "login_url": "ui.login_url",
    "dashboard_url": "ui.dashboard_url",
    "browser": "ui.browser",
    "headless": "ui.headless",
    "maximize_window": "ui.maximize_window",
    "highlight_elements": "ui.highlight_elements",
    "run_live": "ui.run_live",
    "explicit_wait": "timeouts.explicit_wait",
    "implicit_wait": "timeouts.implicit_wait",
    "page_load_timeout": "timeouts.page_load_timeout",
    "poll_interval": "timeouts.poll_interval",
    "retry_attempts": "retry.attempts",
    "retry_delay": "retry.delay",
    "default_username": "credentials.default_username",
    "default_password": "credentials.default_password",
    "screenshot_on_failure": "reporting.screenshot_on_failure",
    "screenshot_path": "reporting.screenshot_path",
    "report_path": "reporting.report_path",
    "report_title": "reporting.report_title",
    "report_sinks": "reporting.sinks",
    "test_data_file": "test_data.file",
    "log_level": "logging.level",
    "log_file": "logging.file",
    "log_rotation": "logging.rotation",
    "log_retention": "logging.retention",
}


def validate_config(config: UIConfig) -> UIConfig:
    """
    Check the values a browser session cannot run without.

    Raises:
        ConfigurationError: Listing every invalid property
    """
    problems = []
    for name in ("base_url", "login_url", "dashboard_url"):
        if not str(getattr(config, name) or "").strip():
            problems.append(f"{name} is empty")
    for name in ("explicit_wait", "implicit_wait", "page_load_timeout", "poll_interval", "retry_delay"):
        value = getattr(config, name)
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            problems.append(f"{name} must be a positive number, got {value!r}")
    if not isinstance(config.retry_attempts, int) or config.retry_attempts < 1:
        problems.append(f"retry_attempts must be >= 1, got {config.retry_attempts!r}")
    if not str(config.default_username or "").strip():
        problems.append("default_username is empty")
    if not str(config.default_password or "").strip():
        problems.append("default_password is empty")
    if not str(config.browser or "").strip():
        problems.append("browser is empty")

    if problems:
        raise ConfigurationError("Invalid configuration: " + "; ".join(problems))
    return config


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> UIConfig:
    """
    Load and validate the run configuration.

    Args:
        config_path: YAML file; DEFAULT_CONFIG_PATH if not specified
        environ: Environment mapping for overrides; ``os.environ`` if None

    Returns:
        Validated UIConfig

    Raises:
        ConfigurationError: Missing file, bad YAML or invalid values
    """
    loader = ConfigLoader(config_path, environ)
    defaults = UIConfig()

    values: Dict[str, Any] = {}
    for name, key in CONFIG_KEYS.items():
        default = getattr(defaults, name)
        value = loader.get(key, default)
        if isinstance(default, float) and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        if isinstance(default, tuple) and isinstance(value, list):
            value = tuple(value)
        if isinstance(default, str) and value is not None and not isinstance(value, str):
            value = str(value)
        values[name] = value

    known_sections = {key.split(".")[0] for key in CONFIG_KEYS.values()}
    extra = {
        section: loader.get_section(section)
        for section in loader.sections()
        if section not in known_sections
    }

    config = validate_config(UIConfig(extra=extra, **values))
    logger.info(
        f"Configuration loaded: browser={config.browser}, headless={config.headless}, "
        f"base_url={config.base_url}"
    )
    return config


__all__ = [
    "CONFIG_KEYS",
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
    "UIConfig",
    "load_config",
    "validate_config",
]
