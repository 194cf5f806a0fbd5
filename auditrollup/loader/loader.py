"""Loader for category configurations and audit results."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from auditrollup.core.exceptions import ValidationError
from auditrollup.core.logging import get_logger
from auditrollup.loader.parser import YAMLParser
from auditrollup.scoring.models import AuditResult, ReportConfig

logger = get_logger(__name__)


def _format_pydantic_errors(title: str, error: PydanticValidationError) -> str:
    errors = []
    for item in error.errors():
        loc = ".".join(str(x) for x in item["loc"])
        errors.append(f"{loc}: {item['msg']}")
    return f"{title}:\n  " + "\n  ".join(errors)


class ReportLoader:
    """Load and validate report inputs from YAML or JSON documents."""

    def __init__(self) -> None:
        self.parser = YAMLParser()

    def load_config(self, file_path: str | Path) -> ReportConfig:
        """Load a category configuration file.

        Args:
            file_path: Path to the configuration document

        Returns:
            Validated ReportConfig

        Raises:
            ParseError: If parsing fails
            ValidationError: If the document is not a valid configuration
        """
        data = self.parser.parse_file(file_path)
        config = self._build_config(data, str(file_path))
        logger.debug(
            "config_loaded",
            path=str(file_path),
            categories=len(config.categories),
            audits=config.audit_count,
        )
        return config

    def load_config_string(self, content: str) -> ReportConfig:
        """Load a category configuration from a string."""
        return self._build_config(self.parser.parse_string(content), None)

    def load_results(self, file_path: str | Path) -> dict[str, AuditResult]:
        """Load audit results keyed by audit id.

        Args:
            file_path: Path to the results document

        Returns:
            Mapping of audit id to AuditResult, in document order

        Raises:
            ParseError: If parsing fails
            ValidationError: If the document is not a mapping of results
        """
        data = self.parser.parse_file(file_path)
        results = self._build_results(data, str(file_path))
        logger.debug("results_loaded", path=str(file_path), results=len(results))
        return results

    def load_results_string(self, content: str) -> dict[str, AuditResult]:
        """Load audit results from a string."""
        return self._build_results(self.parser.parse_string(content), None)

    def _build_config(self, data: Any, file_path: str | None) -> ReportConfig:
        if not isinstance(data, Mapping):
            raise ValidationError(
                "Configuration must be a mapping with a 'categories' key",
                file_path=file_path,
            )

        try:
            return ReportConfig.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(
                _format_pydantic_errors("Configuration validation failed", e),
                file_path=file_path,
            ) from e

    def _build_results(
        self, data: Any, file_path: str | None
    ) -> dict[str, AuditResult]:
        if not isinstance(data, Mapping):
            raise ValidationError(
                "Results must be a mapping of audit id to result",
                file_path=file_path,
            )

        results: dict[str, AuditResult] = {}
        errors = []
        for audit_id, raw in data.items():
            if not isinstance(raw, Mapping):
                errors.append(f"{audit_id}: result must be a mapping")
                continue
            results[str(audit_id)] = AuditResult.model_validate(raw)

        if errors:
            raise ValidationError(
                "Results validation failed:\n  " + "\n  ".join(errors),
                file_path=file_path,
            )

        return results


def find_missing_results(
    config: ReportConfig, results: Mapping[str, Any]
) -> list[tuple[str, str]]:
    """List configured audits that have no result.

    Args:
        config: Category configuration.
        results: Audit results keyed by audit id.

    Returns:
        (category_id, audit_id) pairs in configuration order.
    """
    missing = []
    for category_id, category in config.categories.items():
        for audit in category.audits:
            if results.get(audit.id) is None:
                missing.append((category_id, audit.id))
    return missing
