"""Data models for scoring.

Definitions and results accept arbitrary extra fields (titles, descriptions,
raw audit output, ...) and carry them through to the report unchanged.
Scores and weights are loosely typed on input; the aggregator normalizes
them to finite floats.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class AuditDefinition(BaseModel):
    """Static metadata for one audit within a category."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Audit identifier", min_length=1)
    weight: Any = Field(
        None, description="Weight within the category (missing or invalid -> 0)"
    )


class AuditResult(BaseModel):
    """Result produced by the audit runner for a single audit."""

    model_config = ConfigDict(extra="allow")

    score: Any = Field(
        None,
        description="Raw score: number, boolean, numeric string or null",
    )


class CategoryDefinition(BaseModel):
    """Named, weighted group of audits."""

    model_config = ConfigDict(extra="allow")

    audits: list[AuditDefinition] = Field(
        default_factory=list, description="Audits in display order"
    )
    weight: Any = Field(
        None, description="Weight within the report (missing or invalid -> 0)"
    )


class ReportConfig(BaseModel):
    """Category configuration: category id -> definition, in display order."""

    model_config = ConfigDict(extra="allow")

    categories: dict[str, CategoryDefinition] = Field(
        default_factory=dict, description="Categories keyed by id"
    )

    @property
    def audit_count(self) -> int:
        """Total number of audit references across all categories."""
        return sum(len(c.audits) for c in self.categories.values())


def _json_number(score: float) -> float | int:
    # Whole-number scores are written as integers, e.g. 100 rather than 100.0
    return int(score) if score.is_integer() else score


class AuditEntry(AuditDefinition):
    """An audit definition combined with its raw result and computed score."""

    result: AuditResult = Field(..., description="Raw audit result")
    score: float = Field(..., description="Normalized audit score")

    @field_serializer("score")
    def serialize_score(self, score: float) -> float | int:
        return _json_number(score)


class CategoryReport(CategoryDefinition):
    """A category definition with its scored audits and computed score."""

    id: str = Field(..., description="Category identifier")
    audits: list[AuditEntry] = Field(
        default_factory=list, description="Scored audits in display order"
    )
    score: float = Field(..., description="Weighted mean of the audit scores")

    @field_serializer("score")
    def serialize_score(self, score: float) -> float | int:
        return _json_number(score)


class Report(BaseModel):
    """Aggregated report: overall score plus scored categories."""

    score: float = Field(..., description="Weighted mean of the category scores")
    categories: list[CategoryReport] = Field(
        default_factory=list, description="Categories in configuration order"
    )

    @field_serializer("score")
    def serialize_score(self, score: float) -> float | int:
        return _json_number(score)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary.

        Definition and result fields that were never given are left out
        rather than written as null.
        """
        return self.model_dump(mode="json", exclude_unset=True)
