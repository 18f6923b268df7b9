"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.

Responsibilities:
- Register markers
- Load the run configuration once and initialize logging
- Tag collected tests (ui / unit / live) and skip live tests unless enabled
- Parametrize data-driven login tests from the test data workbook
- Turn test outcomes into report events for the configured sinks

================================================================================
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import pytest
from loguru import logger
from playwright.sync_api import Error as PlaywrightError

from hrm_test_tools.common import init_logger
from hrm_test_tools.data_generator import ExcelDataReader
from hrm_test_tools.report_tools import (
    ReportDispatcher,
    ReportEvent,
    ReportKind,
    attach_page_state,
    build_sinks,
    default_system_info,
)
from testsuites.ui_testing.framework.config_loader import UIConfig, load_config


UI_CONFIG_KEY = pytest.StashKey[UIConfig]()
DISPATCHER_KEY = pytest.StashKey[ReportDispatcher]()
# Outcome of each phase of the running test, keyed by "setup" / "call" / "teardown"
PHASES_KEY = pytest.StashKey[Dict[str, Dict[str, Any]]]()

# Markers that describe how a test runs rather than what it covers
_INTERNAL_MARKERS = {"parametrize", "skip", "skipif", "xfail", "usefixtures", "filterwarnings"}


def _resolve(config, path: str) -> Path:
    """Resolve a configured path against the repository root."""
    resolved = Path(path)
    return resolved if resolved.is_absolute() else Path(config.rootpath) / resolved


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )
    config.addinivalue_line(
        "markers", "data_driven: Tests parametrized from the test data workbook"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "ui: UI-specific tests"
    )
    config.addinivalue_line(
        "markers", "unit: Browser-free tests of the framework and tools"
    )
    config.addinivalue_line(
        "markers", "live: Tests that drive the live OrangeHRM demo site"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "auth: Tests related to login and logout"
    )
    config.addinivalue_line(
        "markers", "dashboard: Tests related to the dashboard"
    )

    # Run configuration
    config_path = config.getoption("--ui-config", default=None) or os.getenv("UI_CONFIG_PATH")
    ui_config = load_config(config_path)

    overrides = {}
    if config.getoption("--ui-browser", default=None):
        overrides["browser"] = config.getoption("--ui-browser")
    if config.getoption("--ui-headed", default=False):
        overrides["headless"] = False
    if config.getoption("--ui-live", default=False):
        overrides["run_live"] = True
    if overrides:
        ui_config = ui_config.with_overrides(**overrides)
    config.stash[UI_CONFIG_KEY] = ui_config

    init_logger(
        level=ui_config.log_level,
        log_file=str(_resolve(config, ui_config.log_file)) if ui_config.log_file else None,
        rotation=ui_config.log_rotation,
        retention=ui_config.log_retention,
    )


def pytest_collection_modifyitems(config, items):
    """
    Tag tests by location and skip live tests unless enabled.
    """
    run_live = config.stash[UI_CONFIG_KEY].run_live
    skip_live = pytest.mark.skip(
        reason="Live OrangeHRM tests are disabled (set UI_RUN_LIVE=true or pass --ui-live)"
    )

    for item in items:
        parts = Path(str(item.path)).parts

        if "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)
            item.add_marker(pytest.mark.live)
            if not run_live:
                item.add_marker(skip_live)

        if "unit" in parts:
            item.add_marker(pytest.mark.unit)


def pytest_generate_tests(metafunc):
    """Feed login rows from the workbook (or its built-in fallback)."""
    wanted = [name for name in ("valid_login", "invalid_login") if name in metafunc.fixturenames]
    if not wanted:
        return

    ui_config = metafunc.config.stash[UI_CONFIG_KEY]
    reader = ExcelDataReader(_resolve(metafunc.config, ui_config.test_data_file))

    for name in wanted:
        rows = reader.get_valid_login_data() if name == "valid_login" else reader.get_invalid_login_data()
        ids = [f"{row.username or 'empty'}-{row.expected_result or 'none'}" for row in rows]
        metafunc.parametrize(name, rows, ids=ids)


@pytest.fixture(scope="session")
def ui_config(pytestconfig) -> UIConfig:
    """Run configuration loaded at startup."""
    return pytestconfig.stash[UI_CONFIG_KEY]


# ================================================================================
# Reporting
# ================================================================================

def pytest_sessionstart(session):
    """Create the report dispatcher for this process."""
    config = session.config
    ui_config = config.stash[UI_CONFIG_KEY]

    report_dir = _resolve(config, ui_config.report_path)
    worker_id = getattr(config, "workerinput", {}).get("workerid")
    if worker_id:
        report_dir = report_dir / worker_id

    sinks = build_sinks(
        ui_config.report_sinks,
        report_dir,
        title=ui_config.report_title,
        system_info=default_system_info(ui_config.browser),
    )
    config.stash[DISPATCHER_KEY] = ReportDispatcher(sinks)


def _categories(item) -> Tuple[str, ...]:
    names = []
    for marker in item.iter_markers():
        if marker.name not in _INTERNAL_MARKERS and marker.name not in names:
            names.append(marker.name)
    return tuple(names)


def _skip_reason(report) -> str:
    if isinstance(report.longrepr, tuple) and len(report.longrepr) == 3:
        return str(report.longrepr[2])
    return str(report.longrepr or "")


def _failure_artifacts(item) -> Optional[str]:
    """Best-effort screenshot and page state of the test's browser session."""
    ui_config = item.config.stash[UI_CONFIG_KEY]
    session = getattr(item, "funcargs", {}).get("browser_session")
    if session is None or not ui_config.screenshot_on_failure:
        return None
    path = session.controls.capture_failure_screenshot(item.name)
    try:
        attach_page_state(session.current_url, session.title, session.controls.get_console_logs())
    except PlaywrightError as e:
        logger.warning(f"Could not capture page state for {item.name}: {e}")
    return str(path) if path else None


def _phase_record(report, call, screenshot: Optional[str] = None) -> Dict[str, Any]:
    message = ""
    if report.skipped and hasattr(report, "wasxfail"):
        message = f"xfail: {report.wasxfail}"
    elif report.skipped:
        message = _skip_reason(report)
    elif report.failed:
        detail = str(call.excinfo.value) if call.excinfo else report.longreprtext
        message = f"[{report.when}] {detail}"
    return {
        "outcome": report.outcome,
        "message": message,
        "duration": report.duration,
        "screenshot": screenshot,
    }


def terminal_event(phases: Dict[str, Dict[str, Any]], **base: Any) -> ReportEvent:
    """
    Collapse the setup/call/teardown records of one test into its outcome.

    The first failed phase wins, then a skip, otherwise the test passed.
    """
    duration = sum(record["duration"] for record in phases.values())
    for when in ("setup", "call", "teardown"):
        record = phases.get(when)
        if record and record["outcome"] == "failed":
            return ReportEvent(
                ReportKind.FAIL,
                message=record["message"],
                duration=duration,
                screenshot_path=record["screenshot"],
                **base,
            )
    for when in ("setup", "call"):
        record = phases.get(when)
        if record and record["outcome"] == "skipped":
            return ReportEvent(ReportKind.SKIP, message=record["message"], duration=duration, **base)
    return ReportEvent(ReportKind.PASS, duration=duration, **base)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Emit START after setup and one PASS/FAIL/SKIP event after teardown.

    Failed UI tests get a screenshot when ``screenshot_on_failure`` is set.
    """
    outcome = yield
    report = outcome.get_result()

    dispatcher = item.config.stash.get(DISPATCHER_KEY, None)
    if dispatcher is None:
        return

    base = {
        "test_name": item.name,
        "class_name": item.cls.__name__ if getattr(item, "cls", None) else item.module.__name__,
        "categories": _categories(item),
    }

    if report.when == "setup" and not report.skipped:
        dispatcher.emit(ReportEvent(ReportKind.START, **base))

    screenshot = _failure_artifacts(item) if report.failed and report.when == "call" else None
    phases = item.stash.setdefault(PHASES_KEY, {})
    phases[report.when] = _phase_record(report, call, screenshot)

    if report.when == "teardown":
        dispatcher.emit(terminal_event(phases, **base))


def pytest_sessionfinish(session, exitstatus):
    """Flush every sink."""
    dispatcher = session.config.stash.get(DISPATCHER_KEY, None)
    if dispatcher is None:
        return
    summary = dispatcher.summary
    dispatcher.emit(ReportEvent(
        ReportKind.FINISH,
        message=(
            f"{summary.total} tests: {summary.passed} passed, "
            f"{summary.failed} failed, {summary.skipped} skipped"
        ),
    ))
    dispatcher.close()
    logger.debug(f"Report sinks closed (exit status {exitstatus})")


def pytest_report_header(config):
    """Add custom header to pytest output."""
    ui_config = config.stash.get(UI_CONFIG_KEY, None)
    lines = [
        "",
        "=" * 60,
        "OrangeHRM UI Automation Suite",
    ]
    if ui_config is not None:
        lines.append(
            f"browser={ui_config.browser} headless={ui_config.headless} "
            f"live={ui_config.run_live} base_url={ui_config.base_url}"
        )
    lines.extend(["=" * 60, ""])
    return lines
