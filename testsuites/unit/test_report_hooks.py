from types import SimpleNamespace

import pytest

from hrm_test_tools.report_tools import ReportDispatcher, ReportKind
from testsuites.conftest import (
    DISPATCHER_KEY,
    UI_CONFIG_KEY,
    pytest_runtest_makereport,
    terminal_event,
)
from testsuites.ui_testing.framework.config_loader import UIConfig


class RecordingSink:
    def __init__(self):
        self.events = []

    def emit(self, event):
        self.events.append(event)

    def close(self):
        pass


class Outcome:
    def __init__(self, report):
        self.report = report

    def get_result(self):
        return self.report


def make_item():
    config = SimpleNamespace(stash=pytest.Stash())
    config.stash[UI_CONFIG_KEY] = UIConfig()
    sink = RecordingSink()
    config.stash[DISPATCHER_KEY] = ReportDispatcher([sink])
    item = SimpleNamespace(
        name="test_widgets",
        cls=None,
        module=SimpleNamespace(__name__="test_dashboard"),
        iter_markers=lambda: iter([SimpleNamespace(name="P1"), SimpleNamespace(name="parametrize")]),
        funcargs={},
        stash=pytest.Stash(),
        config=config,
    )
    return item, sink


def make_report(when, outcome, longrepr=None, duration=0.1):
    return SimpleNamespace(
        when=when,
        outcome=outcome,
        passed=outcome == "passed",
        failed=outcome == "failed",
        skipped=outcome == "skipped",
        longrepr=longrepr,
        longreprtext=str(longrepr or ""),
        duration=duration,
    )


def run_phase(item, report, error=None):
    call = SimpleNamespace(excinfo=SimpleNamespace(value=error) if error else None)
    hook = pytest_runtest_makereport(item, call)
    next(hook)
    with pytest.raises(StopIteration):
        hook.send(Outcome(report))


def test_teardown_failure_after_passing_call_reports_one_failure():
    item, sink = make_item()

    run_phase(item, make_report("setup", "passed"))
    run_phase(item, make_report("call", "passed", duration=1.0))
    run_phase(item, make_report("teardown", "failed"), RuntimeError("cleanup broke"))

    assert [event.kind for event in sink.events] == [ReportKind.START, ReportKind.FAIL]
    failure = sink.events[1]
    assert failure.message == "[teardown] cleanup broke"
    assert failure.categories == ("P1",)
    assert failure.class_name == "test_dashboard"
    summary = item.config.stash[DISPATCHER_KEY].summary
    assert (summary.total, summary.passed, summary.failed) == (1, 0, 1)


def test_passing_test_reports_once_after_teardown():
    item, sink = make_item()

    run_phase(item, make_report("setup", "passed"))
    run_phase(item, make_report("call", "passed"))
    assert [event.kind for event in sink.events] == [ReportKind.START]

    run_phase(item, make_report("teardown", "passed"))

    assert [event.kind for event in sink.events] == [ReportKind.START, ReportKind.PASS]
    assert sink.events[1].duration == pytest.approx(0.3)


def test_skipped_setup_reports_skip_without_start():
    item, sink = make_item()

    run_phase(item, make_report("setup", "skipped", longrepr=("t.py", 3, "Skipped: live tests disabled")))
    run_phase(item, make_report("teardown", "passed"))

    assert [event.kind for event in sink.events] == [ReportKind.SKIP]
    assert sink.events[0].message == "Skipped: live tests disabled"


def test_setup_failure_wins_over_teardown_failure():
    item, sink = make_item()

    run_phase(item, make_report("setup", "failed"), ValueError("no browser"))
    run_phase(item, make_report("teardown", "failed"), RuntimeError("cleanup broke"))

    assert [event.kind for event in sink.events] == [ReportKind.START, ReportKind.FAIL]
    assert sink.events[1].message == "[setup] no browser"


def test_terminal_event_prefers_failure_then_skip():
    passed = {"outcome": "passed", "message": "", "duration": 0.5, "screenshot": None}
    failed = {"outcome": "failed", "message": "[call] boom", "duration": 0.5, "screenshot": "shot.png"}
    skipped = {"outcome": "skipped", "message": "not today", "duration": 0.0, "screenshot": None}

    event = terminal_event({"setup": passed, "call": failed, "teardown": passed}, test_name="t")
    assert event.kind is ReportKind.FAIL
    assert event.screenshot_path == "shot.png"
    assert event.duration == 1.5

    assert terminal_event({"setup": passed, "call": skipped, "teardown": passed}).kind is ReportKind.SKIP
    assert terminal_event({"setup": passed, "call": passed, "teardown": passed}).kind is ReportKind.PASS
