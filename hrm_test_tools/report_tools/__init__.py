"""
================================================================================
Report Tools
================================================================================

Allure helpers and the report sink layer used by the pytest hooks.

================================================================================
"""

from .allure_utils import (
    AllureReportProcessor,
    attach_page_state,
    attach_screenshot,
    generate_allure_report,
)
from .report_sinks import (
    AllureReportSink,
    ConsoleReportSink,
    HtmlReportSink,
    JsonReportSink,
    ReportDispatcher,
    ReportEvent,
    ReportKind,
    ReportSink,
    build_sinks,
    default_system_info,
)

__all__ = [
    "AllureReportProcessor",
    "AllureReportSink",
    "ConsoleReportSink",
    "HtmlReportSink",
    "JsonReportSink",
    "ReportDispatcher",
    "ReportEvent",
    "ReportKind",
    "ReportSink",
    "attach_page_state",
    "attach_screenshot",
    "build_sinks",
    "default_system_info",
    "generate_allure_report",
]
