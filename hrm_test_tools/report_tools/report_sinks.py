"""
================================================================================
Report Sinks
================================================================================

Test lifecycle events fanned out to pluggable report writers.

The pytest hooks turn every test outcome into a ``ReportEvent`` and hand it to
a ``ReportDispatcher``. Each sink decides what to do with it:

- ConsoleReportSink: one log line per event (loguru)
- JsonReportSink: machine-readable run summary
- HtmlReportSink: self-contained, timestamped HTML page
- AllureReportSink: failure details attached to the running Allure test

A sink that fails never breaks the run or the other sinks; the dispatcher
logs a warning and moves on.

================================================================================
"""

import html
import json
import platform
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

from loguru import logger

from hrm_test_tools.common import ensure_directory, safe_json_serialize

from .allure_utils import attach_screenshot, attach_text


REPORT_PREFIX = "HRM_TestReport_"
TIMESTAMP_FORMAT = "%Y.%m.%d.%H.%M.%S"


class ReportKind(str, Enum):
    """Lifecycle event types."""
    START = "start"
    PASS = "pass"
    FAIL = "fail"
    SKIP = "skip"
    FINISH = "finish"


@dataclass(frozen=True)
class ReportEvent:
    """
    One test lifecycle event.

    Attributes:
        kind: Event type
        test_name: Test function name (empty for run-level events)
        class_name: Test module/class the test belongs to
        categories: Markers of the test (P0, smoke, ...)
        message: Failure/skip reason or free text
        duration: Test duration in seconds
        screenshot_path: Screenshot taken for a failed test
    """
    kind: ReportKind
    test_name: str = ""
    class_name: str = ""
    categories: Tuple[str, ...] = ()
    message: str = ""
    duration: float = 0.0
    screenshot_path: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        data["categories"] = list(self.categories)
        return data


class ReportSink(Protocol):
    """Destination for report events."""

    def emit(self, event: ReportEvent) -> None:
        ...

    def close(self) -> None:
        ...


@dataclass
class RunSummary:
    """Counts of test outcomes for one run."""
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    duration: float = 0.0

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.skipped

    @property
    def pass_rate(self) -> float:
        """Calculate pass rate percentage."""
        if self.total == 0:
            return 0.0
        return (self.passed / self.total) * 100

    def add(self, event: ReportEvent) -> None:
        if event.kind is ReportKind.PASS:
            self.passed += 1
        elif event.kind is ReportKind.FAIL:
            self.failed += 1
        elif event.kind is ReportKind.SKIP:
            self.skipped += 1
        else:
            return
        self.duration += event.duration

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "pass_rate": f"{self.pass_rate:.2f}%",
            "duration_seconds": round(self.duration, 3),
        }


def default_system_info(browser: str = "") -> Dict[str, str]:
    """Environment details shown in report headers."""
    info = {
        "Application": "OrangeHRM",
        "Framework": "Playwright + pytest",
        "Python Version": platform.python_version(),
        "OS": platform.system(),
    }
    if browser:
        info["Browser"] = browser
    return info


# ================================================================================
# Sinks
# ================================================================================

class ConsoleReportSink:
    """Writes one log line per event."""

    def emit(self, event: ReportEvent) -> None:
        if event.kind is ReportKind.START:
            logger.info(f"Test started: {event.class_name}::{event.test_name}")
        elif event.kind is ReportKind.PASS:
            logger.info(f"Test passed: {event.test_name} ({event.duration:.2f}s)")
        elif event.kind is ReportKind.FAIL:
            logger.error(f"Test failed: {event.test_name} - {event.message}")
        elif event.kind is ReportKind.SKIP:
            logger.warning(f"Test skipped: {event.test_name} - {event.message}")
        else:
            logger.info(f"Test run finished: {event.message}")

    def close(self) -> None:
        pass


class _CollectingSink:
    """Keeps events in memory and writes a file on close."""

    extension = ""

    def __init__(self, report_dir: Any, timestamp: Optional[str] = None):
        self.report_dir = Path(report_dir)
        self.timestamp = timestamp or datetime.now().strftime(TIMESTAMP_FORMAT)
        self.events: List[ReportEvent] = []
        self.summary = RunSummary()
        self.path: Optional[Path] = None

    @property
    def file_name(self) -> str:
        return f"{REPORT_PREFIX}{self.timestamp}.{self.extension}"

    def emit(self, event: ReportEvent) -> None:
        self.events.append(event)
        self.summary.add(event)

    def close(self) -> None:
        ensure_directory(self.report_dir)
        self.path = self.report_dir / self.file_name
        self.path.write_text(self.render(), encoding="utf-8")
        logger.info(f"Report written: {self.path}")

    def render(self) -> str:
        raise NotImplementedError


class JsonReportSink(_CollectingSink):
    """Run summary plus every pass/fail/skip event as JSON."""

    extension = "json"

    def __init__(self, report_dir: Any, timestamp: Optional[str] = None, system_info: Optional[Dict[str, str]] = None):
        super().__init__(report_dir, timestamp)
        self.system_info = system_info or {}

    def render(self) -> str:
        results = [
            event.to_dict() for event in self.events
            if event.kind in (ReportKind.PASS, ReportKind.FAIL, ReportKind.SKIP)
        ]
        payload = {
            "generated_at": datetime.now().isoformat(timespec="seconds"),
            "system_info": self.system_info,
            "summary": self.summary.to_dict(),
            "results": results,
        }
        return json.dumps(payload, indent=2, default=safe_json_serialize)


_STATUS_STYLE = {
    ReportKind.PASS: ("PASS", "#2e7d32"),
    ReportKind.FAIL: ("FAIL", "#c62828"),
    ReportKind.SKIP: ("SKIP", "#ef6c00"),
}


class HtmlReportSink(_CollectingSink):
    """Self-contained HTML page, one row per test."""

    extension = "html"

    def __init__(
        self,
        report_dir: Any,
        title: str = "OrangeHRM Test Automation Report",
        timestamp: Optional[str] = None,
        system_info: Optional[Dict[str, str]] = None,
    ):
        super().__init__(report_dir, timestamp)
        self.title = title
        self.system_info = system_info or {}

    def _row(self, event: ReportEvent) -> str:
        label, color = _STATUS_STYLE[event.kind]
        screenshot = ""
        if event.screenshot_path:
            src = html.escape(Path(event.screenshot_path).as_posix(), quote=True)
            screenshot = f'<a href="file://{src}">screenshot</a>'
        return (
            "<tr>"
            f"<td>{html.escape(event.class_name)}</td>"
            f"<td>{html.escape(event.test_name)}</td>"
            f"<td>{html.escape(', '.join(event.categories))}</td>"
            f'<td style="color:{color};font-weight:bold">{label}</td>'
            f"<td>{event.duration:.2f}s</td>"
            f"<td><pre>{html.escape(event.message)}</pre>{screenshot}</td>"
            "</tr>"
        )

    def render(self) -> str:
        rows = "\n".join(
            self._row(event) for event in self.events if event.kind in _STATUS_STYLE
        )
        info = "\n".join(
            f"<tr><th>{html.escape(k)}</th><td>{html.escape(str(v))}</td></tr>"
            for k, v in self.system_info.items()
        )
        summary = self.summary
        title = html.escape(self.title)
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ font-family: Arial, sans-serif; margin: 24px; }}
table {{ border-collapse: collapse; width: 100%; margin-bottom: 24px; }}
th, td {{ border: 1px solid #ccc; padding: 6px 10px; text-align: left; vertical-align: top; }}
th {{ background: #f5f5f5; }}
pre {{ margin: 0; white-space: pre-wrap; }}
</style>
</head>
<body>
<h1>{title}</h1>
<p>Generated {html.escape(self.timestamp)}</p>
<table>{info}</table>
<table>
<tr><th>Total</th><th>Passed</th><th>Failed</th><th>Skipped</th><th>Pass Rate</th><th>Duration</th></tr>
<tr><td>{summary.total}</td><td>{summary.passed}</td><td>{summary.failed}</td>
<td>{summary.skipped}</td><td>{summary.pass_rate:.2f}%</td><td>{summary.duration:.2f}s</td></tr>
</table>
<table>
<tr><th>Class</th><th>Test</th><th>Categories</th><th>Status</th><th>Duration</th><th>Details</th></tr>
{rows}
</table>
</body>
</html>
"""


class AllureReportSink:
    """Adds failure details to the Allure result of the running test."""

    def emit(self, event: ReportEvent) -> None:
        if event.kind is not ReportKind.FAIL:
            return
        if event.message:
            attach_text(event.message, name="Failure Reason")
        if event.screenshot_path and Path(event.screenshot_path).exists():
            attach_screenshot(event.screenshot_path)

    def close(self) -> None:
        pass


# ================================================================================
# Dispatcher
# ================================================================================

class ReportDispatcher:
    """
    Fans events out to every sink.

    Usage:
        dispatcher = ReportDispatcher([ConsoleReportSink(), HtmlReportSink("reports")])
        dispatcher.emit(ReportEvent(ReportKind.PASS, test_name="test_login"))
        dispatcher.close()
    """

    def __init__(self, sinks: Iterable[ReportSink] = ()):
        self.sinks: List[ReportSink] = list(sinks)
        self.summary = RunSummary()

    def emit(self, event: ReportEvent) -> None:
        self.summary.add(event)
        for sink in self.sinks:
            try:
                sink.emit(event)
            except Exception as e:
                logger.warning(f"Report sink {type(sink).__name__} failed on {event.kind.value}: {e}")

    def close(self) -> None:
        for sink in self.sinks:
            try:
                sink.close()
            except Exception as e:
                logger.warning(f"Report sink {type(sink).__name__} failed to close: {e}")


SINK_NAMES = ("console", "html", "json", "allure")


def build_sinks(
    names: Sequence[str],
    report_dir: Any,
    title: str = "OrangeHRM Test Automation Report",
    system_info: Optional[Dict[str, str]] = None,
) -> List[ReportSink]:
    """
    Create sinks by name.

    Raises:
        ValueError: Unknown sink name
    """
    timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
    sinks: List[ReportSink] = []
    for name in names:
        key = name.strip().lower()
        if key == "console":
            sinks.append(ConsoleReportSink())
        elif key == "html":
            sinks.append(HtmlReportSink(report_dir, title, timestamp, system_info))
        elif key == "json":
            sinks.append(JsonReportSink(report_dir, timestamp, system_info))
        elif key == "allure":
            sinks.append(AllureReportSink())
        else:
            raise ValueError(f"Unknown report sink: {name!r}. Choose from {SINK_NAMES}")
    return sinks


__all__ = [
    "AllureReportSink",
    "ConsoleReportSink",
    "HtmlReportSink",
    "JsonReportSink",
    "ReportDispatcher",
    "ReportEvent",
    "ReportKind",
    "ReportSink",
    "RunSummary",
    "SINK_NAMES",
    "build_sinks",
    "default_system_info",
]
