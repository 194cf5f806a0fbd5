"""Score aggregation for audit results."""

import math
import numbers
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from auditrollup.core.exceptions import MissingAuditResultError
from auditrollup.core.logging import get_logger

from .models import (
    AuditEntry,
    AuditResult,
    CategoryReport,
    Report,
    ReportConfig,
)

logger = get_logger(__name__)

# Score given to audits whose result is a boolean
PASSING_SCORE = 100.0
FAILING_SCORE = 0.0


# Radix prefixes accepted in numeric strings, as in JavaScript's Number()
_RADIX_PREFIXES = ("0x", "0o", "0b")


def _parse_number_text(value: str) -> float | int | None:
    text = value.strip()
    if not text or "_" in text:
        return None
    try:
        if text[:2].lower() in _RADIX_PREFIXES:
            return int(text, 0)
        return float(text)
    except ValueError:
        return None


def to_number(value: Any) -> float:
    """
    Coerce a loosely typed score or weight to a finite float.

    Never raises. Booleans count as 1/0, numeric strings (including
    ``0x``/``0o``/``0b`` literals) are parsed, and everything else that is
    not a finite number (None, NaN, infinities, integers too large for a
    float, unparsable strings, containers, arbitrary objects) becomes 0.

    Args:
        value: Raw score or weight.

    Returns:
        Finite float.
    """
    if value is None:
        return 0.0

    if isinstance(value, bool):
        return 1.0 if value else 0.0

    if isinstance(value, str):
        value = _parse_number_text(value)
        if value is None:
            return 0.0

    if isinstance(value, Decimal):
        if not value.is_finite():
            return 0.0
    elif not isinstance(value, numbers.Real):
        return 0.0

    try:
        number = float(value)
    except OverflowError:
        return 0.0

    return number if math.isfinite(number) else 0.0


def audit_score(raw_score: Any) -> float:
    """
    Normalize an audit result score.

    Boolean results map to 100 (pass) or 0 (fail); anything else goes
    through to_number.
    """
    if isinstance(raw_score, bool):
        return PASSING_SCORE if raw_score else FAILING_SCORE
    return to_number(raw_score)


def _read_field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def weighted_mean(items: Iterable[Any]) -> float:
    """
    Compute the weighted arithmetic mean of scored items.

    Only the ``score`` and ``weight`` fields of each item are read; items may
    be mappings or objects with those attributes.

        mean = Σ(score_i × weight_i) / Σ(weight_i)

    Args:
        items: Scored items.

    Returns:
        The weighted mean, or 0 when the total weight is 0 (including
        for an empty sequence).
    """
    total_weight = 0.0
    weighted_sum = 0.0

    for item in items:
        score = to_number(_read_field(item, "score"))
        weight = to_number(_read_field(item, "weight"))
        total_weight += weight
        weighted_sum += score * weight

    if total_weight == 0:
        return 0.0

    mean = weighted_sum / total_weight
    return mean if math.isfinite(mean) else 0.0


class ScoreAggregator:
    """
    Rolls audit results up into a scored report.

    Scores are computed bottom-up:
    - audit: the result score (booleans map to 100/0)
    - category: weighted mean of its audit scores by audit weight
    - report: weighted mean of the category scores by category weight

    The report layout comes entirely from the configuration; results only
    supply scores.
    """

    def __init__(self, config: ReportConfig | Mapping[str, Any]) -> None:
        """
        Initialize the score aggregator.

        Args:
            config: Category configuration, either a ReportConfig or a
                mapping that validates into one.
        """
        if isinstance(config, ReportConfig):
            self.config = config
        else:
            self.config = ReportConfig.model_validate(config)

    def score_category(
        self,
        category_id: str,
        results_by_audit_id: Mapping[str, AuditResult | Mapping[str, Any]],
    ) -> CategoryReport:
        """
        Score a single configured category.

        Args:
            category_id: Category identifier from the configuration.
            results_by_audit_id: Audit results keyed by audit id.

        Returns:
            CategoryReport with scored audits.

        Raises:
            KeyError: If the category is not configured.
            MissingAuditResultError: If a configured audit has no result.
        """
        category = self.config.categories[category_id]

        audits: list[AuditEntry] = []
        for audit in category.audits:
            result = self._resolve_result(
                audit.id, category_id, results_by_audit_id
            )
            entry = {
                **audit.model_dump(exclude_unset=True),
                "result": result,
                "score": audit_score(result.score),
            }
            audits.append(AuditEntry.model_validate(entry))

        fields = {
            **category.model_dump(exclude={"audits"}, exclude_unset=True),
            "id": category_id,
            "audits": audits,
            "score": weighted_mean(audits),
        }
        return CategoryReport.model_validate(fields)

    def build_report(
        self,
        results_by_audit_id: Mapping[str, AuditResult | Mapping[str, Any]],
    ) -> Report:
        """
        Build the full report tree from audit results.

        Args:
            results_by_audit_id: Audit results keyed by audit id. Must contain
                an entry for every audit referenced by the configuration.

        Returns:
            Report with the overall score and every configured category.

        Raises:
            MissingAuditResultError: If a configured audit has no result.
        """
        categories = [
            self.score_category(category_id, results_by_audit_id)
            for category_id in self.config.categories
        ]
        report = Report(score=weighted_mean(categories), categories=categories)

        logger.debug(
            "report_built",
            categories=len(categories),
            audits=self.config.audit_count,
            score=report.score,
        )
        return report

    def _resolve_result(
        self,
        audit_id: str,
        category_id: str,
        results_by_audit_id: Mapping[str, AuditResult | Mapping[str, Any]],
    ) -> AuditResult:
        result = results_by_audit_id.get(audit_id)
        if result is None:
            raise MissingAuditResultError(audit_id, category_id)
        if isinstance(result, AuditResult):
            return result
        return AuditResult.model_validate(result)


def build_report(
    config: ReportConfig | Mapping[str, Any],
    results_by_audit_id: Mapping[str, AuditResult | Mapping[str, Any]],
) -> Report:
    """
    Build a scored report from a category configuration and audit results.

    Args:
        config: Category configuration.
        results_by_audit_id: Audit results keyed by audit id.

    Returns:
        Report with computed scores.

    Raises:
        MissingAuditResultError: If a configured audit has no result.
    """
    return ScoreAggregator(config).build_report(results_by_audit_id)
