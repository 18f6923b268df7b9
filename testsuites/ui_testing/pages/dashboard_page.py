"""
================================================================================
Dashboard Page Object
================================================================================

Landing page after login: header, side menu, widgets and quick-launch
shortcuts.

Highlights:
  - Menu and widget locators generated from their display names
  - Visibility checks are probes and never raise
  - ``verify_dashboard_functionality`` reports each area separately

================================================================================
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional, Tuple

import allure
from loguru import logger

from testsuites.ui_testing.framework.exceptions import ActionError, InvalidArgumentError
from testsuites.ui_testing.framework.page_base import PageSession, require_session
from testsuites.ui_testing.framework.smart_locator import LocatorMap


# Side menu entries: display name -> href fragment
MAIN_MENUS: Tuple[Tuple[str, str], ...] = (
    ("Admin", "admin"),
    ("PIM", "pim"),
    ("Leave", "leave"),
    ("Time", "time"),
    ("Recruitment", "recruitment"),
    ("Performance", "performance"),
    ("Dashboard", "dashboard"),
    ("Directory", "directory"),
    ("Maintenance", "maintenance"),
    ("Buzz", "buzz"),
)

WIDGETS: Tuple[str, ...] = (
    "Time at Work",
    "My Actions",
    "Quick Launch",
    "Employees on Leave Today",
    "Employee Distribution by Sub Unit",
    "Employee Distribution by Location",
)

QUICK_LAUNCH_BUTTONS: Tuple[str, ...] = (
    "Assign Leave",
    "Leave List",
    "Timesheets",
    "Apply Leave",
    "My Leave",
    "My Timesheet",
)


def _key(label: str) -> str:
    return label.lower().replace(" ", "_")


def _build_locators() -> Dict[str, Any]:
    locators: Dict[str, Any] = {
        "dashboard_title": "//h6[text()='Dashboard']",
        "user_profile_dropdown": "//span[@class='oxd-userdropdown-tab']",
        "search_box": "//input[@placeholder='Search']",
    }
    for label, href in MAIN_MENUS:
        locators[f"menu_{_key(label)}"] = f"//a[contains(@href, '{href}')]//span[text()='{label}']"
    for label in WIDGETS:
        locators[f"widget_{_key(label)}"] = f"//p[text()='{label}']"
    for label in QUICK_LAUNCH_BUTTONS:
        locators[f"quick_{_key(label)}"] = f"//button[@title='{label}']"
    return locators


class DashboardPage:
    """Dashboard page object."""

    LOCATORS: ClassVar[Dict[str, Any]] = _build_locators()

    def __init__(self, session: PageSession):
        self.session = require_session(session, "DashboardPage")
        self.locators = LocatorMap(self.LOCATORS)

    @property
    def actions(self):
        return self.session.actions

    @allure.step("Open dashboard")
    def open(self) -> "DashboardPage":
        """Navigate to dashboard."""
        self.session.navigate(self.session.config.dashboard_url)
        return self

    # =========================================================================
    # Header
    # =========================================================================

    def is_dashboard_title_visible(self, timeout: Optional[float] = None) -> bool:
        """Wait for the page heading; False if it never shows."""
        return self.actions.is_displayed(
            self.locators["dashboard_title"],
            timeout=timeout if timeout is not None else self.session.policy.timeout,
        )

    def get_dashboard_title(self) -> str:
        try:
            return self.actions.get_text(self.locators["dashboard_title"])
        except ActionError as e:
            logger.warning(f"Error getting dashboard title: {e}")
            return ""

    def is_user_profile_visible(self) -> bool:
        return self.actions.is_displayed(self.locators["user_profile_dropdown"])

    def click_user_profile_dropdown(self) -> None:
        self.actions.click(self.locators["user_profile_dropdown"])

    def is_search_box_visible(self) -> bool:
        return self.actions.is_displayed(self.locators["search_box"])

    @allure.step("Search menu for '{search_text}'")
    def enter_search_text(self, search_text: str) -> None:
        self.actions.type_text(self.locators["search_box"], search_text, clear=True)

    # =========================================================================
    # Menus
    # =========================================================================

    def are_all_main_menus_visible(self) -> bool:
        missing = [
            label for label, _ in MAIN_MENUS
            if not self.actions.is_displayed(self.locators[f"menu_{_key(label)}"])
        ]
        if missing:
            logger.warning(f"Main menus not visible: {missing}")
        return not missing

    @allure.step("Open menu: {menu_name}")
    def click_menu(self, menu_name: str) -> None:
        """
        Click a side menu entry by display name (case-insensitive).

        Raises:
            InvalidArgumentError: Unknown menu name
        """
        key = f"menu_{_key((menu_name or '').strip())}"
        if key not in self.locators:
            raise InvalidArgumentError(f"Unknown menu: {menu_name}")
        self.actions.click(self.locators[key])

    # =========================================================================
    # Widgets
    # =========================================================================

    def are_all_widgets_visible(self) -> bool:
        missing = [
            label for label in WIDGETS
            if not self.actions.is_displayed(self.locators[f"widget_{_key(label)}"])
        ]
        if missing:
            logger.warning(f"Widgets not visible: {missing}")
        return not missing

    def is_quick_launch_visible(self) -> bool:
        return self.actions.is_displayed(self.locators["widget_quick_launch"])

    def is_time_at_work_visible(self) -> bool:
        return self.actions.is_displayed(self.locators["widget_time_at_work"])

    # =========================================================================
    # Quick Launch
    # =========================================================================

    def click_quick_launch(self, label: str) -> None:
        """
        Click a quick-launch shortcut by its title.

        Raises:
            InvalidArgumentError: Unknown shortcut
        """
        key = f"quick_{_key(label)}"
        if key not in self.locators:
            raise InvalidArgumentError(f"Unknown quick launch button: {label}")
        self.actions.click(self.locators[key])

    def click_assign_leave(self) -> None:
        self.click_quick_launch("Assign Leave")

    def click_leave_list(self) -> None:
        self.click_quick_launch("Leave List")

    def click_timesheets(self) -> None:
        self.click_quick_launch("Timesheets")

    def click_apply_leave(self) -> None:
        self.click_quick_launch("Apply Leave")

    def click_my_leave(self) -> None:
        self.click_quick_launch("My Leave")

    def click_my_timesheet(self) -> None:
        self.click_quick_launch("My Timesheet")

    # =========================================================================
    # Verification
    # =========================================================================

    @allure.step("Verify dashboard functionality")
    def verify_dashboard_functionality(self) -> bool:
        """Check header, menus and widgets; log a line per area."""
        logger.info("=== Verifying Dashboard Functionality ===")
        checks = {
            "Dashboard Title": self.is_dashboard_title_visible(),
            "User Profile": self.is_user_profile_visible(),
            "Search Box": self.is_search_box_visible(),
            "Main Menus": self.are_all_main_menus_visible(),
            "Widgets": self.are_all_widgets_visible(),
        }
        for area, ok in checks.items():
            logger.info(f"{area}: {'OK' if ok else 'MISSING'}")
        return all(checks.values())

    def get_page_title(self) -> str:
        return self.session.title

    def get_current_url(self) -> str:
        return self.session.current_url

    def is_page_title_contains(self, expected_text: str) -> bool:
        return self.session.is_title_contains(expected_text)

    def is_url_contains(self, expected_text: str) -> bool:
        return self.session.is_url_contains(expected_text)


__all__ = [
    "DashboardPage",
    "MAIN_MENUS",
    "QUICK_LAUNCH_BUTTONS",
    "WIDGETS",
]
