"""
================================================================================
Logout Page Object
================================================================================

User menu in the dashboard header and the logout flow behind it.

================================================================================
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional

import allure
from loguru import logger

from testsuites.ui_testing.framework.page_base import PageSession, require_session
from testsuites.ui_testing.framework.smart_locator import LocatorMap


class LogoutPage:
    """Logout flow page object."""

    LOCATORS: ClassVar[Dict[str, Any]] = {
        "user_profile_dropdown": "//span[@class='oxd-userdropdown-tab']",
        "logout_link": ("//a[text()='Logout']", "a[href*='logout']"),
    }

    def __init__(self, session: PageSession):
        self.session = require_session(session, "LogoutPage")
        self.locators = LocatorMap(self.LOCATORS)

    @property
    def actions(self):
        return self.session.actions

    def click_user_profile_dropdown(self) -> None:
        logger.info("Clicking user profile dropdown...")
        self.actions.click(self.locators["user_profile_dropdown"])

    def is_user_profile_dropdown_visible(self) -> bool:
        return self.actions.is_displayed(self.locators["user_profile_dropdown"])

    def click_logout(self) -> None:
        logger.info("Clicking Logout link...")
        self.actions.click(self.locators["logout_link"])

    @allure.step("Logout")
    def logout(self) -> None:
        """Open the user menu and choose Logout."""
        logger.info("=== Starting Logout Process ===")
        self.click_user_profile_dropdown()
        self.click_logout()
        logger.info("=== Logout Process Complete ===")

    def is_logout_successful(self, timeout: Optional[float] = None) -> bool:
        """
        True once the browser is back on the login route.

        Waits up to ``timeout`` seconds (no wait if None) for the redirect.
        """
        if timeout:
            try:
                self.session.wait_for_url("login", timeout)
            except TimeoutError as e:
                logger.debug(f"No redirect to login: {e}")
        current_url = self.session.current_url
        is_login_page = "login" in current_url
        if is_login_page:
            logger.info("Logout successful - redirected to login page")
        else:
            logger.warning(f"Logout failed - still on: {current_url}")
        return is_login_page

    def get_page_title(self) -> str:
        return self.session.title

    def get_current_url(self) -> str:
        return self.session.current_url

    def is_page_title_contains(self, expected_text: str) -> bool:
        return self.session.is_title_contains(expected_text)

    def is_url_contains(self, expected_text: str) -> bool:
        return self.session.is_url_contains(expected_text)


__all__ = ["LogoutPage"]
