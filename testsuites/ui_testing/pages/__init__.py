"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for OrangeHRM pages.

Each page class encapsulates:
    - Element locators
    - Page-specific actions
    - Verification probes

Author: Automation Team
License: MIT
================================================================================
"""

from .login_page import LoginPage
from .dashboard_page import DashboardPage
from .logout_page import LogoutPage

__all__ = [
    "LoginPage",
    "DashboardPage",
    "LogoutPage",
]
