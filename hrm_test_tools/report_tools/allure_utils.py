"""
================================================================================
Allure Report Utilities
================================================================================

Attachments for failed UI tests, plus the post-run step that turns
``allure-results`` into an HTML report and keeps trend history between runs.

================================================================================
"""

import json
import shutil
import subprocess
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import allure
from loguru import logger


# Console messages kept on a failed test
CONSOLE_TAIL = 50


# ================================================================================
# Attachments
# ================================================================================

def attach_text(text: str, name: str) -> None:
    allure.attach(text, name=name, attachment_type=allure.attachment_type.TEXT)


def attach_json(data: Any, name: str) -> None:
    allure.attach(
        json.dumps(data, indent=2, default=str),
        name=name,
        attachment_type=allure.attachment_type.JSON,
    )


def attach_screenshot(path: Any, name: str = "failure_screenshot") -> None:
    """Attach a PNG written by the browser controls."""
    allure.attach.file(str(path), name=name, attachment_type=allure.attachment_type.PNG)


def attach_page_state(url: str, title: str, console_logs: Optional[List[Dict[str, str]]] = None) -> None:
    """
    Attach where the browser was when a UI test failed.

    Args:
        url: Current page URL
        title: Current page title
        console_logs: Console messages collected by the session; only the
            last ``CONSOLE_TAIL`` are kept
    """
    attach_text(f"{title}\n{url}", name="Page State")
    if console_logs:
        attach_json(console_logs[-CONSOLE_TAIL:], name="Browser Console")


# ================================================================================
# Post-run Report
# ================================================================================

@dataclass
class TestResultSummary:
    """Outcome counts read back from allure-results."""
    __test__ = False

    counts: Counter = field(default_factory=Counter)
    duration_ms: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def passed(self) -> int:
        return self.counts["passed"]

    @property
    def failed(self) -> int:
        return self.counts["failed"]

    @property
    def broken(self) -> int:
        return self.counts["broken"]

    @property
    def skipped(self) -> int:
        return self.counts["skipped"]

    @property
    def pass_rate(self) -> float:
        return (self.passed / self.total) * 100 if self.total else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            **{status: self.counts[status] for status in ("passed", "failed", "broken", "skipped")},
            "pass_rate": f"{self.pass_rate:.2f}%",
            "duration_ms": self.duration_ms,
            "timestamp": self.timestamp,
        }


class AllureReportProcessor:
    """
    Builds the HTML report for one results directory.

    ``<report>/history`` is copied into the results before generation so
    Allure can draw trends, and saved under ``history_dir`` afterwards.
    """

    def __init__(
        self,
        results_dir: Path,
        report_dir: Optional[Path] = None,
        history_dir: Optional[Path] = None,
    ):
        self.results_dir = Path(results_dir)
        self.report_dir = Path(report_dir or self.results_dir.parent / "allure-report")
        self.history_dir = Path(history_dir or self.results_dir.parent / "allure-history")

    def generate_summary(self) -> TestResultSummary:
        """Count result statuses; unreadable result files are skipped."""
        summary = TestResultSummary()
        for result_file in sorted(self.results_dir.glob("*-result.json")):
            try:
                result = json.loads(result_file.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Skipping unreadable Allure result {result_file.name}: {e}")
                continue
            summary.counts[result.get("status", "unknown")] += 1
            summary.duration_ms += result.get("stop", 0) - result.get("start", 0)
        return summary

    def _replace_tree(self, source: Path, dest: Path) -> None:
        if dest.exists():
            shutil.rmtree(dest)
        shutil.copytree(source, dest)

    def generate_report(self) -> bool:
        """
        Run ``allure generate``.

        Returns:
            False when the CLI is missing or fails
        """
        previous = self.report_dir / "history"
        if previous.exists():
            self._replace_tree(previous, self.results_dir / "history")

        try:
            result = subprocess.run(
                ["allure", "generate", str(self.results_dir), "-o", str(self.report_dir), "--clean"],
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            logger.warning("Allure CLI not found; install allure-commandline to build the HTML report")
            return False

        if result.returncode != 0:
            logger.error(f"Allure report generation failed: {result.stderr.strip()}")
            return False
        logger.info(f"Allure report generated at {self.report_dir}")
        return True

    def save_history(self) -> None:
        """Keep a timestamped copy of the report history plus ``current``."""
        source = self.report_dir / "history"
        if not source.exists():
            return
        self.history_dir.mkdir(parents=True, exist_ok=True)
        shutil.copytree(source, self.history_dir / datetime.now().strftime("%Y%m%d_%H%M%S"))
        self._replace_tree(source, self.history_dir / "current")

    def log_summary(self) -> None:
        summary = self.generate_summary()
        logger.info(
            f"Allure results: {summary.total} total, {summary.passed} passed, "
            f"{summary.failed} failed, {summary.broken} broken, {summary.skipped} skipped "
            f"({summary.pass_rate:.2f}% pass, {summary.duration_ms / 1000:.2f}s)"
        )


def generate_allure_report(
    results_dir: str,
    output_dir: Optional[str] = None,
    open_report: bool = False,
) -> bool:
    """
    Generate the Allure report, log its summary and save history.

    Returns:
        True if the report was generated
    """
    processor = AllureReportProcessor(Path(results_dir), Path(output_dir) if output_dir else None)
    if not processor.generate_report():
        return False

    processor.log_summary()
    processor.save_history()
    if open_report:
        subprocess.run(["allure", "open", str(processor.report_dir)])
    return True


__all__ = [
    "AllureReportProcessor",
    "TestResultSummary",
    "attach_json",
    "attach_page_state",
    "attach_screenshot",
    "attach_text",
    "generate_allure_report",
]
