"""
================================================================================
Login Page Object
================================================================================

Login screen of the OrangeHRM application.

Design goals:
  - Composed over a PageSession (no page base class)
  - Named locators with fallbacks, resolved on every access
  - ``login`` never raises when the dashboard does not appear; callers decide
    through the ``is_login_successful`` / ``verify_login_failure`` probes

================================================================================
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional

import allure
from loguru import logger

from testsuites.ui_testing.framework.exceptions import ActionError
from testsuites.ui_testing.framework.page_base import PageSession, require_session
from testsuites.ui_testing.framework.smart_locator import LocatorMap


class LoginPage:
    """Login page object."""

    LOCATORS: ClassVar[Dict[str, Any]] = {
        "username_input": ("input[name='username']", "//input[@placeholder='Username']"),
        "password_input": ("input[name='password']", "//input[@placeholder='Password']"),
        "login_button": ("//button[@type='submit']", "button:has-text('Login')"),
        "error_message": "//div[@class='oxd-alert-content oxd-alert-content--error']",
        "required_message": "//span[contains(@class, 'oxd-input-field-error-message')]",
        "dashboard_title": "//h6[text()='Dashboard']",
    }

    def __init__(self, session: PageSession):
        """
        Args:
            session: Live browser session

        Raises:
            InvalidArgumentError: If ``session`` is None
        """
        self.session = require_session(session, "LoginPage")
        self.locators = LocatorMap(self.LOCATORS)

    @property
    def actions(self):
        return self.session.actions

    @allure.step("Open login page")
    def open(self) -> "LoginPage":
        """Navigate to the login page and wait for the form."""
        self.session.navigate(self.session.config.login_url)
        self.actions.wait_visible(self.locators["username_input"])
        return self

    def enter_username(self, username: str) -> None:
        logger.debug(f"Entering username: {username}")
        self.actions.type_text(self.locators["username_input"], username, clear=True)

    def enter_password(self, password: str) -> None:
        logger.debug("Entering password")
        self.actions.type_text(self.locators["password_input"], password, clear=True)

    def click_login_button(self) -> None:
        logger.debug("Clicking login button")
        self.actions.click(self.locators["login_button"])

    @allure.step("Login (username={username})")
    def login(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Perform login.

        Args:
            username: Username to login. Defaults to the configured user.
            password: Password to login. Defaults to the configured password.
            timeout: How long to wait for the dashboard afterwards
        """
        config = self.session.config
        if username is None:
            username = config.default_username
        if password is None:
            password = config.default_password

        logger.info("=== Starting Login Process ===")
        logger.info(f"Username: {username}")
        self.enter_username(username)
        self.enter_password(password)
        self.click_login_button()

        try:
            self.actions.wait_visible(self.locators["dashboard_title"], timeout)
            logger.info("Login successful - Dashboard loaded")
        except ActionError as e:
            logger.error(f"Dashboard not found after login attempt: {e}")
        logger.info("=== Login Process Complete ===")

    # =========================================================================
    # Probes
    # =========================================================================

    def is_login_successful(self, timeout: Optional[float] = None) -> bool:
        """Wait for the dashboard title; False if it never shows."""
        return self.actions.is_displayed(
            self.locators["dashboard_title"],
            timeout=timeout if timeout is not None else self.session.policy.timeout,
        )

    def is_error_message_displayed(self) -> bool:
        return self.actions.is_displayed(self.locators["error_message"])

    def is_required_message_displayed(self) -> bool:
        """True if a field shows the 'Required' validation hint."""
        return self.actions.is_displayed(self.locators["required_message"])

    def get_error_message(self) -> str:
        """Text of the error alert, or an empty string if none is shown."""
        if not self.is_error_message_displayed():
            return ""
        try:
            return self.actions.get_text(self.locators["error_message"])
        except ActionError as e:
            logger.warning(f"Error getting error message: {e}")
            return ""

    @allure.step("Verify login succeeded")
    def verify_login_success(self, timeout: Optional[float] = None) -> bool:
        return self.is_login_successful(timeout)

    @allure.step("Verify login failed")
    def verify_login_failure(self, timeout: Optional[float] = None) -> bool:
        """True if an error alert or a required-field hint appears."""
        if timeout:
            return self.actions.is_displayed(self.locators["error_message"], timeout) or \
                self.is_required_message_displayed()
        return self.is_error_message_displayed() or self.is_required_message_displayed()

    def get_page_title(self) -> str:
        return self.session.title

    def get_current_url(self) -> str:
        return self.session.current_url

    def is_page_title_contains(self, expected_text: str) -> bool:
        return self.session.is_title_contains(expected_text)

    def is_url_contains(self, expected_text: str) -> bool:
        return self.session.is_url_contains(expected_text)


__all__ = ["LoginPage"]
