"""Loaders for report configuration, audit results and report assets."""

from auditrollup.loader.assets import ReportAssets, load_report_assets
from auditrollup.loader.loader import ReportLoader, find_missing_results
from auditrollup.loader.parser import YAMLParser

__all__ = [
    "ReportAssets",
    "ReportLoader",
    "YAMLParser",
    "find_missing_results",
    "load_report_assets",
]
