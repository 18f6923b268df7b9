"""
================================================================================
Page Session and Page Object Capability
================================================================================

Foundation for the Page Object Model.

Provides:
    - PageSession: one live page plus the wait policy, element actions and
      browser controls every page object on it shares
    - PageObject: the structural capability a page object offers
    - Navigation, URL and title helpers shared by all pages

Page objects hold a session rather than inheriting from a base page, so a
test can drive several page objects over the same browser tab.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, ClassVar, Mapping, Optional, Protocol, runtime_checkable

import allure
from loguru import logger

from .browser_controls import BrowserControls
from .config_loader import UIConfig
from .element_actions import ElementActions, RetryConfig
from .exceptions import InvalidArgumentError
from .smart_locator import LocatorMap
from .wait_policy import WaitPolicy


class PageSession:
    """
    A live browser tab and the operation layer bound to it.

    Usage:
        session = PageSession(page, config)
        session.navigate(config.login_url)
        session.actions.click("//button[@type='submit']")
    """

    def __init__(
        self,
        page: Any,
        config: UIConfig,
        policy: Optional[WaitPolicy] = None,
    ):
        """
        Initialize the session.

        Args:
            page: Playwright Page object
            config: Run configuration
            policy: Wait policy; built from the configuration if not given

        Raises:
            InvalidArgumentError: If ``page`` or ``config`` is None
        """
        if page is None:
            raise InvalidArgumentError("Cannot create a session without a page")
        if config is None:
            raise InvalidArgumentError("Cannot create a session without a configuration")

        self.config = config
        self.policy = policy or WaitPolicy(
            timeout=config.explicit_wait,
            poll_interval=config.poll_interval,
        )
        self.actions = ElementActions(
            page,
            self.policy,
            highlight=config.highlight_elements,
            retry_config=RetryConfig(
                max_attempts=config.retry_attempts,
                delay_seconds=config.retry_delay,
            ),
        )
        self.controls = BrowserControls(self.actions, screenshot_dir=config.screenshot_path)

    @property
    def page(self) -> Any:
        """Page currently driven (changes on window switches)."""
        return self.actions.page

    @property
    def context(self) -> Any:
        return self.page.context

    # =========================================================================
    # Navigation
    # =========================================================================

    def navigate(self, url: Optional[str] = None, wait_for: str = "load") -> None:
        """
        Open an absolute URL (the base URL if none is given).

        Args:
            url: Absolute URL
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'
        """
        target = url or self.config.base_url
        with allure.step(f"Navigate to {target}"):
            self.page.goto(target, wait_until=wait_for)
            logger.info(f"Navigated to: {target}")

    def navigate_to(self, path: str, wait_for: str = "load") -> None:
        """Open a path relative to the configured base URL."""
        full_url = f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"
        self.navigate(full_url, wait_for)

    def refresh(self) -> None:
        self.page.reload()
        logger.info("Page refreshed")

    def back(self) -> None:
        self.page.go_back()
        logger.info("Navigated back")

    def forward(self) -> None:
        self.page.go_forward()
        logger.info("Navigated forward")

    # =========================================================================
    # Page State
    # =========================================================================

    @property
    def current_url(self) -> str:
        return self.page.url

    @property
    def title(self) -> str:
        return self.page.title()

    @property
    def page_source(self) -> str:
        return self.page.content()

    def is_url_contains(self, fragment: str) -> bool:
        return fragment in self.current_url

    def is_title_contains(self, fragment: str) -> bool:
        return fragment in self.title

    def wait_for_url(self, fragment: str, timeout: Optional[float] = None) -> str:
        """
        Wait until the current URL contains ``fragment``.

        Raises:
            WaitTimeoutError: URL never matched
        """
        with allure.step(f"Wait for URL: {fragment}"):
            self.controls.wait_until(
                lambda: self.is_url_contains(fragment), timeout, f"URL containing '{fragment}'"
            )
            return self.current_url

    def close(self) -> None:
        """Close the session's browser context."""
        self.context.close()


@runtime_checkable
class PageObject(Protocol):
    """
    What every page object offers: a session and named, lazily
    resolved locators.
    """

    LOCATORS: ClassVar[Mapping[str, Any]]
    session: PageSession
    locators: LocatorMap


def require_session(session: Optional[PageSession], page_name: str) -> PageSession:
    """
    Validate the session handed to a page object.

    Raises:
        InvalidArgumentError: If ``session`` is None
    """
    if session is None:
        raise InvalidArgumentError(
            f"Session passed to {page_name} is None. "
            "Ensure the browser session is started before creating page objects."
        )
    return session


__all__ = [
    "PageObject",
    "PageSession",
    "require_session",
]
