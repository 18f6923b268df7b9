"""
================================================================================
Action Layer Exceptions
================================================================================

Failure taxonomy for the wait-gated action layer.

Every driver-level failure surfaced by the framework is one of these classes,
so tests and page objects can catch a single family (``ActionError``) or a
precise condition (``StaleElementError``, ``OptionNotFoundError``, ...).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError


class ActionError(Exception):
    """Base class for all action layer failures."""
    pass


class WaitTimeoutError(ActionError, TimeoutError):
    """Wait condition never became true within the wait policy timeout."""
    pass


class StaleElementError(ActionError):
    """Element reference was detached from the DOM and cannot be re-resolved."""
    pass


class ElementNotInteractableError(ActionError):
    """Element is present but hidden, disabled or covered by another element."""
    pass


class OptionNotFoundError(ActionError):
    """Selection criterion matched no dropdown option."""
    pass


class ElementNotFoundError(ActionError):
    """No locator strategy is defined for a named element."""
    pass


class InvalidArgumentError(ActionError, ValueError):
    """Construction-time contract violation (e.g. missing page or session)."""
    pass


class UnsupportedConfigurationError(ActionError):
    """Unrecognized browser or target name requested at setup."""
    pass


# Substrings Playwright puts into actionability failures
_STALE_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "execution context was destroyed",
)
_NOT_INTERACTABLE_MARKERS = (
    "intercepts pointer events",
    "element is not visible",
    "element is not enabled",
    "element is disabled",
    "element is not editable",
    "outside of the viewport",
    "not an <input>",
)


def classify_driver_error(exc: BaseException, description: str = "") -> BaseException:
    """
    Map a Playwright error onto the action layer taxonomy.

    Errors that are already ``ActionError`` instances and errors that do not
    come from the driver are returned unchanged.

    Args:
        exc: Exception raised by the driver
        description: Human-readable target description for the message

    Returns:
        Exception instance to raise (chained by the caller)
    """
    if isinstance(exc, ActionError) or not isinstance(exc, PlaywrightError):
        return exc

    message = str(exc)
    lowered = message.lower()
    prefix = f"{description}: " if description else ""

    if any(marker in lowered for marker in _NOT_INTERACTABLE_MARKERS):
        return ElementNotInteractableError(f"{prefix}{message}")
    if any(marker in lowered for marker in _STALE_MARKERS):
        return StaleElementError(f"{prefix}{message}")
    if isinstance(exc, PlaywrightTimeoutError):
        return WaitTimeoutError(f"{prefix}{message}")
    return exc


def is_stale_error(exc: BaseException) -> bool:
    """Return True if the driver error means the node left the DOM."""
    if isinstance(exc, StaleElementError):
        return True
    if not isinstance(exc, PlaywrightError):
        return False
    lowered = str(exc).lower()
    return any(marker in lowered for marker in _STALE_MARKERS)


# Failures the retry helper is allowed to absorb
RETRYABLE_ERRORS = (
    PlaywrightError,
    WaitTimeoutError,
    StaleElementError,
    ElementNotInteractableError,
)


__all__ = [
    "ActionError",
    "WaitTimeoutError",
    "StaleElementError",
    "ElementNotInteractableError",
    "OptionNotFoundError",
    "ElementNotFoundError",
    "InvalidArgumentError",
    "UnsupportedConfigurationError",
    "RETRYABLE_ERRORS",
    "classify_driver_error",
    "is_stale_error",
]
