"""
================================================================================
UI Testing Pytest Configuration
================================================================================

This module provides fixtures for browser management, page objects and
authenticated sessions.

Key Features:
- One browser process per test session (per xdist worker)
- A fresh, isolated context and page for every test
- Page Object fixtures for all pages
- Pre-authenticated session for dashboard and logout tests

================================================================================
"""

from typing import Generator

import pytest
from loguru import logger
from playwright.sync_api import Error as PlaywrightError

from testsuites.ui_testing.framework.browser_manager import BrowserManager
from testsuites.ui_testing.framework.config_loader import UIConfig
from testsuites.ui_testing.framework.page_base import PageSession
from testsuites.ui_testing.pages.dashboard_page import DashboardPage
from testsuites.ui_testing.pages.login_page import LoginPage
from testsuites.ui_testing.pages.logout_page import LogoutPage


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def browser_manager(ui_config: UIConfig) -> Generator[BrowserManager, None, None]:
    """
    Session-scoped browser manager fixture.

    Provides a single browser instance for all tests in the session,
    reducing browser launch overhead.
    """
    manager = BrowserManager(ui_config)
    manager.start()
    yield manager
    manager.close()


@pytest.fixture(scope="function")
def browser_session(browser_manager: BrowserManager) -> Generator[PageSession, None, None]:
    """
    Function-scoped browser session fixture.

    Creates a new browser context and page for each test, providing isolation.
    """
    session = browser_manager.new_session()
    yield session
    try:
        session.close()
    except PlaywrightError as e:
        logger.debug(f"Session already closed: {e}")


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(browser_session: PageSession) -> LoginPage:
    """Provides LoginPage instance, opened on the login URL."""
    return LoginPage(browser_session).open()


@pytest.fixture
def dashboard_page(browser_session: PageSession) -> DashboardPage:
    """Provides DashboardPage instance (does not navigate)."""
    return DashboardPage(browser_session)


@pytest.fixture
def logout_page(browser_session: PageSession) -> LogoutPage:
    """Provides LogoutPage instance (does not navigate)."""
    return LogoutPage(browser_session)


# ================================================================================
# Authentication Fixtures
# ================================================================================

@pytest.fixture
def authenticated_session(
    browser_session: PageSession,
    login_page: LoginPage,
) -> PageSession:
    """
    Provides a session logged in with the configured default credentials.

    Fails the test at setup if the dashboard never appears.
    """
    login_page.login()
    if not login_page.is_login_successful():
        pytest.fail("Could not log in with the configured default credentials")
    return browser_session


@pytest.fixture
def authenticated_dashboard(
    authenticated_session: PageSession,
    dashboard_page: DashboardPage,
) -> DashboardPage:
    """Provides DashboardPage with authenticated session."""
    return dashboard_page
