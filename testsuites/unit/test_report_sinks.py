import json

import pytest

from hrm_test_tools.common import ensure_directory, safe_json_serialize
from hrm_test_tools.report_tools import (
    ConsoleReportSink,
    HtmlReportSink,
    JsonReportSink,
    ReportDispatcher,
    ReportEvent,
    ReportKind,
    build_sinks,
    default_system_info,
)
from hrm_test_tools.report_tools.allure_utils import AllureReportProcessor
from hrm_test_tools.report_tools.report_sinks import AllureReportSink, RunSummary


class RecordingSink:
    def __init__(self):
        self.events = []
        self.closed = False

    def emit(self, event):
        self.events.append(event)

    def close(self):
        self.closed = True


class ExplodingSink:
    def emit(self, event):
        raise RuntimeError("disk full")

    def close(self):
        raise RuntimeError("disk full")


def run_events():
    return [
        ReportEvent(ReportKind.START, test_name="test_valid_login", class_name="TestLogin"),
        ReportEvent(ReportKind.PASS, test_name="test_valid_login", class_name="TestLogin",
                    categories=("P0", "smoke"), duration=1.5),
        ReportEvent(ReportKind.FAIL, test_name="test_widgets", class_name="TestDashboard",
                    message="<script>alert(1)</script> not visible", duration=0.5),
        ReportEvent(ReportKind.SKIP, test_name="test_logout", message="live tests disabled"),
        ReportEvent(ReportKind.FINISH, message="3 tests"),
    ]


def test_dispatcher_isolates_failing_sinks():
    recorder = RecordingSink()
    dispatcher = ReportDispatcher([ExplodingSink(), recorder])

    for event in run_events():
        dispatcher.emit(event)
    dispatcher.close()

    assert len(recorder.events) == 5
    assert recorder.closed
    assert (dispatcher.summary.passed, dispatcher.summary.failed, dispatcher.summary.skipped) == (1, 1, 1)


def test_run_summary():
    summary = RunSummary()
    for event in run_events():
        summary.add(event)

    assert summary.total == 3
    assert summary.duration == 2.0
    assert summary.to_dict()["pass_rate"] == "33.33%"
    assert RunSummary().pass_rate == 0.0


def test_json_sink_writes_summary_and_results(tmp_path):
    sink = JsonReportSink(tmp_path, timestamp="2024.01.02.03.04.05", system_info={"Browser": "chrome"})
    for event in run_events():
        sink.emit(event)
    sink.close()

    assert sink.path == tmp_path / "HRM_TestReport_2024.01.02.03.04.05.json"
    payload = json.loads(sink.path.read_text(encoding="utf-8"))
    assert payload["summary"]["total"] == 3
    assert payload["system_info"] == {"Browser": "chrome"}
    assert [result["kind"] for result in payload["results"]] == ["pass", "fail", "skip"]
    assert payload["results"][0]["categories"] == ["P0", "smoke"]


def test_html_sink_escapes_messages(tmp_path):
    sink = HtmlReportSink(tmp_path / "html", title="Nightly <run>", timestamp="2024.01.02.03.04.05")
    for event in run_events():
        sink.emit(event)
    sink.close()

    page = sink.path.read_text(encoding="utf-8")
    assert sink.path.name == "HRM_TestReport_2024.01.02.03.04.05.html"
    assert "<script>alert(1)</script>" not in page
    assert "&lt;script&gt;" in page
    assert "Nightly &lt;run&gt;" in page
    assert page.count("<pre>") == 3


def test_console_and_allure_sinks_accept_every_kind(tmp_path):
    screenshot = tmp_path / "FAILED_test.png"
    screenshot.write_bytes(b"\x89PNG")
    events = run_events() + [
        ReportEvent(ReportKind.FAIL, test_name="t", message="boom", screenshot_path=str(screenshot)),
    ]

    for sink in (ConsoleReportSink(), AllureReportSink()):
        for event in events:
            sink.emit(event)
        sink.close()


def test_build_sinks_by_name(tmp_path):
    sinks = build_sinks(["Console", "html", "json", "allure"], tmp_path, system_info=default_system_info("firefox"))

    assert [type(sink).__name__ for sink in sinks] == [
        "ConsoleReportSink", "HtmlReportSink", "JsonReportSink", "AllureReportSink",
    ]
    assert sinks[1].timestamp == sinks[2].timestamp
    assert sinks[1].system_info["Browser"] == "firefox"

    with pytest.raises(ValueError):
        build_sinks(["extent"], tmp_path)


def test_event_to_dict():
    data = ReportEvent(ReportKind.PASS, test_name="t", categories=("P1",)).to_dict()

    assert data["kind"] == "pass"
    assert data["categories"] == ["P1"]


def test_common_helpers(tmp_path):
    created = ensure_directory(tmp_path / "a" / "b")

    assert created.is_dir()
    assert safe_json_serialize(created) == str(created)
    assert safe_json_serialize((1, 2)) == [1, 2]
    assert safe_json_serialize(b"abc") == "abc"


def test_allure_results_summary(tmp_path):
    results = tmp_path / "allure-results"
    results.mkdir()
    for index, status in enumerate(["passed", "passed", "failed", "skipped", "broken"]):
        (results / f"{index}-result.json").write_text(
            json.dumps({"status": status, "start": 1000, "stop": 1500}), encoding="utf-8"
        )
    (results / "bad-result.json").write_text("{", encoding="utf-8")

    summary = AllureReportProcessor(results).generate_summary()

    assert (summary.total, summary.passed, summary.failed, summary.skipped, summary.broken) == (5, 2, 1, 1, 1)
    assert summary.duration_ms == 2500
    assert summary.to_dict()["pass_rate"] == "40.00%"
