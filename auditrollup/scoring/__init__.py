"""Score aggregation for audit results."""

from .aggregator import (
    ScoreAggregator,
    audit_score,
    build_report,
    to_number,
    weighted_mean,
)
from .models import (
    AuditDefinition,
    AuditEntry,
    AuditResult,
    CategoryDefinition,
    CategoryReport,
    Report,
    ReportConfig,
)

__all__ = [
    "ScoreAggregator",
    "audit_score",
    "build_report",
    "to_number",
    "weighted_mean",
    "AuditDefinition",
    "AuditEntry",
    "AuditResult",
    "CategoryDefinition",
    "CategoryReport",
    "Report",
    "ReportConfig",
]
