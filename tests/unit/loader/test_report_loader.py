"""Tests for the report configuration and results loader."""

from pathlib import Path

import pytest

from auditrollup.core.exceptions import ParseError, ValidationError
from auditrollup.loader import ReportLoader, find_missing_results
from auditrollup.scoring.models import AuditResult, ReportConfig


class TestLoadConfig:
    """Tests for loading category configurations."""

    @pytest.fixture
    def loader(self) -> ReportLoader:
        return ReportLoader()

    def test_load_config_file(self, loader: ReportLoader, reports_dir: Path) -> None:
        config = loader.load_config(reports_dir / "categories.yaml")

        assert isinstance(config, ReportConfig)
        assert list(config.categories) == ["performance", "accessibility"]
        assert config.audit_count == 4

        performance = config.categories["performance"]
        assert performance.weight == 1
        assert [a.id for a in performance.audits] == ["first-paint", "interactive"]
        assert performance.model_extra == {
            "name": "Performance",
            "description": "How quickly the page becomes usable.",
        }

    def test_load_config_string(self, loader: ReportLoader) -> None:
        config = loader.load_config_string(
            "categories:\n  seo:\n    audits:\n      - id: title\n        weight: 2\n"
        )
        assert config.categories["seo"].audits[0].weight == 2

    def test_empty_categories(self, loader: ReportLoader) -> None:
        assert loader.load_config_string("categories: {}").categories == {}

    def test_non_mapping_document(self, loader: ReportLoader) -> None:
        with pytest.raises(ValidationError, match="must be a mapping"):
            loader.load_config_string("- a\n- b\n")

    def test_audit_without_id(self, loader: ReportLoader) -> None:
        with pytest.raises(ValidationError) as exc_info:
            loader.load_config_string(
                "categories:\n  seo:\n    audits:\n      - weight: 1\n"
            )
        assert "categories.seo.audits.0.id" in str(exc_info.value)

    def test_file_path_in_error(self, loader: ReportLoader, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("[1, 2]\n", encoding="utf-8")

        with pytest.raises(ValidationError) as exc_info:
            loader.load_config(path)
        assert exc_info.value.file_path == str(path)
        assert str(exc_info.value).startswith(f"File: {path}")

    def test_malformed_config(self, loader: ReportLoader, reports_dir: Path) -> None:
        with pytest.raises(ParseError):
            loader.load_config(reports_dir / "invalid.yaml")


class TestLoadResults:
    """Tests for loading audit results."""

    @pytest.fixture
    def loader(self) -> ReportLoader:
        return ReportLoader()

    def test_load_results_file(self, loader: ReportLoader, reports_dir: Path) -> None:
        results = loader.load_results(reports_dir / "results.json")

        assert list(results) == [
            "first-paint",
            "interactive",
            "color-contrast",
            "image-alt",
        ]
        assert all(isinstance(r, AuditResult) for r in results.values())
        assert results["first-paint"].score == 80
        assert results["first-paint"].model_extra == {"rawValue": 1200}
        assert results["color-contrast"].score is True

    def test_result_without_score(self, loader: ReportLoader) -> None:
        results = loader.load_results_string('{"a": {"details": []}}')
        assert results["a"].score is None

    def test_keys_become_strings(self, loader: ReportLoader) -> None:
        results = loader.load_results_string("404:\n  score: 1\n")
        assert list(results) == ["404"]

    def test_non_mapping_document(self, loader: ReportLoader) -> None:
        with pytest.raises(ValidationError, match="mapping of audit id"):
            loader.load_results_string("[1, 2, 3]")

    def test_non_mapping_entries_collected(self, loader: ReportLoader) -> None:
        with pytest.raises(ValidationError) as exc_info:
            loader.load_results_string('{"a": 1, "b": {"score": 2}, "c": null}')

        message = str(exc_info.value)
        assert "a: result must be a mapping" in message
        assert "c: result must be a mapping" in message
        assert "b:" not in message


class TestFindMissingResults:
    """Tests for find_missing_results."""

    def test_none_missing(self, sample_config: dict, sample_results: dict) -> None:
        config = ReportConfig.model_validate(sample_config)
        assert find_missing_results(config, sample_results) == []

    def test_missing_in_config_order(self, sample_config: dict) -> None:
        config = ReportConfig.model_validate(sample_config)
        results = {"interactive": {"score": 1}, "color-contrast": {"score": 1}}

        assert find_missing_results(config, results) == [
            ("performance", "first-paint"),
            ("accessibility", "image-alt"),
        ]

    def test_shared_audit_reported_per_category(self) -> None:
        config = ReportConfig.model_validate(
            {
                "categories": {
                    "a": {"audits": [{"id": "shared"}]},
                    "b": {"audits": [{"id": "shared"}]},
                }
            }
        )
        assert find_missing_results(config, {}) == [("a", "shared"), ("b", "shared")]
