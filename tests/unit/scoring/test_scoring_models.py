"""Unit tests for scoring models."""

from typing import Any

import pytest
from pydantic import ValidationError

from auditrollup.scoring.aggregator import build_report
from auditrollup.scoring.models import (
    AuditDefinition,
    AuditResult,
    CategoryDefinition,
    Report,
    ReportConfig,
)


class TestAuditDefinition:
    """Tests for AuditDefinition."""

    def test_extra_fields_preserved(self) -> None:
        audit = AuditDefinition(id="a", weight=2, title="Title", group="metrics")
        assert audit.model_dump() == {
            "id": "a",
            "weight": 2,
            "title": "Title",
            "group": "metrics",
        }

    def test_weight_defaults_to_none(self) -> None:
        assert AuditDefinition(id="a").weight is None

    def test_id_required(self) -> None:
        with pytest.raises(ValidationError):
            AuditDefinition.model_validate({"weight": 1})

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AuditDefinition(id="")


class TestAuditResult:
    """Tests for AuditResult."""

    @pytest.mark.parametrize("score", [10, 0.5, True, None, "87", [1]])
    def test_score_kept_verbatim(self, score: Any) -> None:
        assert AuditResult(score=score).score == score

    def test_extra_fields_preserved(self) -> None:
        result = AuditResult.model_validate({"score": 1, "details": {"items": []}})
        assert result.model_extra == {"details": {"items": []}}


class TestReportConfig:
    """Tests for ReportConfig."""

    def test_category_order_preserved(self) -> None:
        config = ReportConfig.model_validate(
            {"categories": {"z": {}, "a": {}, "m": {}}}
        )
        assert list(config.categories) == ["z", "a", "m"]

    def test_audit_count(self, sample_config: dict[str, Any]) -> None:
        assert ReportConfig.model_validate(sample_config).audit_count == 4

    def test_empty(self) -> None:
        config = ReportConfig()
        assert config.categories == {}
        assert config.audit_count == 0

    def test_invalid_audits_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ReportConfig.model_validate({"categories": {"c": {"audits": [{}]}}})

    def test_category_definition_defaults(self) -> None:
        category = CategoryDefinition()
        assert category.audits == []
        assert category.weight is None


class TestReport:
    """Tests for the Report output model."""

    @pytest.fixture
    def report(
        self, sample_config: dict[str, Any], sample_results: dict[str, Any]
    ) -> Report:
        return build_report(sample_config, sample_results)

    def test_whole_scores_serialize_as_integers(self, report: Report) -> None:
        data = report.to_dict()

        assert data["score"] == 60
        assert isinstance(data["score"], int)
        assert isinstance(data["categories"][0]["score"], int)
        assert isinstance(data["categories"][0]["audits"][0]["score"], int)

    def test_fractional_scores_stay_floats(self) -> None:
        config = {
            "categories": {
                "c": {
                    "weight": 1,
                    "audits": [{"id": "a", "weight": 1}, {"id": "b", "weight": 2}],
                }
            }
        }
        report = build_report(config, {"a": {"score": 100}, "b": {"score": 0}})
        data = report.to_dict()

        assert data["score"] == pytest.approx(33.333333)
        assert isinstance(data["score"], float)
        assert isinstance(data["categories"][0]["audits"][0]["score"], int)

    def test_model_attributes_stay_floats(self, report: Report) -> None:
        assert isinstance(report.score, float)
        assert isinstance(report.categories[0].score, float)

    def test_to_dict_shape(self, report: Report) -> None:
        data = report.to_dict()

        assert set(data) == {"score", "categories"}
        performance = data["categories"][0]
        assert performance["id"] == "performance"
        assert performance["name"] == "Performance"
        assert performance["score"] == pytest.approx(70.0)

        first_paint = performance["audits"][0]
        assert first_paint == {
            "id": "first-paint",
            "weight": 3,
            "title": "First paint",
            "result": {"score": 80, "rawValue": 1200},
            "score": 80.0,
        }
