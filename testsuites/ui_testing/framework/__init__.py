"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework with wait-gated element actions.

Components:
    - exceptions: Failure taxonomy for element and browser operations
    - wait_policy: Timeout and poll interval shared by a session
    - smart_locator: Named element locators with fallback strategies
    - element_actions: Wait-gated element interactions and retry
    - browser_controls: Frames, windows, alerts, cookies, screenshots
    - page_base: Browser session and page object capability
    - browser_manager: Browser lifecycle management
    - config_loader: YAML configuration with environment overrides

Author: Automation Team
License: MIT
================================================================================
"""

from .exceptions import (
    ActionError,
    ElementNotFoundError,
    ElementNotInteractableError,
    InvalidArgumentError,
    OptionNotFoundError,
    StaleElementError,
    UnsupportedConfigurationError,
    WaitTimeoutError,
)
from .wait_policy import WaitPolicy
from .smart_locator import LocatorMap, LocatorSpec, SmartLocator
from .element_actions import ElementActions, RetryConfig, with_retry
from .browser_controls import BrowserControls
from .config_loader import ConfigurationError, UIConfig, load_config
from .page_base import PageObject, PageSession
from .browser_manager import BrowserManager

__all__ = [
    "ActionError",
    "ElementNotFoundError",
    "ElementNotInteractableError",
    "InvalidArgumentError",
    "OptionNotFoundError",
    "StaleElementError",
    "UnsupportedConfigurationError",
    "WaitTimeoutError",
    "WaitPolicy",
    "LocatorMap",
    "LocatorSpec",
    "SmartLocator",
    "ElementActions",
    "RetryConfig",
    "with_retry",
    "BrowserControls",
    "ConfigurationError",
    "UIConfig",
    "load_config",
    "PageObject",
    "PageSession",
    "BrowserManager",
]
