"""Reporters for outputting aggregated audit reports in various formats."""

from .base import Reporter
from .console import ConsoleReporter
from .html_reporter import (
    REPORT_JAVASCRIPT_PLACEHOLDER,
    REPORT_JSON_PLACEHOLDER,
    HTMLReporter,
    ReportEmbedder,
    render_html,
    sanitize_json,
    sanitize_script,
    serialize_report,
)
from .json_reporter import JSONReporter
from .registry import (
    ReporterNotFoundError,
    ReporterRegistry,
    create_reporter,
    get_registry,
)

__all__ = [
    "Reporter",
    "ConsoleReporter",
    "HTMLReporter",
    "JSONReporter",
    "ReportEmbedder",
    "REPORT_JAVASCRIPT_PLACEHOLDER",
    "REPORT_JSON_PLACEHOLDER",
    "render_html",
    "sanitize_json",
    "sanitize_script",
    "serialize_report",
    "ReporterRegistry",
    "ReporterNotFoundError",
    "create_reporter",
    "get_registry",
]
