"""
Repository-level pytest configuration.

Why this exists:
  - Register the command line switches the test runner passes through
  - Expose the repository root to fixtures and data providers

The switches override ``config/config.yaml`` (and its environment variable
overrides) for a single run.
"""

from __future__ import annotations

from pathlib import Path

import pytest


def pytest_addoption(parser):
    """Register UI run options."""
    group = parser.getgroup("hrm-ui", "OrangeHRM UI automation")
    group.addoption(
        "--ui-browser",
        action="store",
        default=None,
        help="Browser to run UI tests in (chrome, chromium, edge, firefox, safari, webkit)",
    )
    group.addoption(
        "--ui-headed",
        action="store_true",
        default=False,
        help="Show the browser window",
    )
    group.addoption(
        "--ui-live",
        action="store_true",
        default=False,
        help="Run the tests that drive the live OrangeHRM demo site",
    )
    group.addoption(
        "--ui-config",
        action="store",
        default=None,
        help="Path to an alternative config.yaml",
    )


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent
