"""Common interface for report output formats."""

from abc import ABC, abstractmethod

from auditrollup.scoring.models import Report


class Reporter(ABC):
    """Writes a scored :class:`Report` somewhere in some format."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Format name the reporter is registered under."""

    @abstractmethod
    def report(self, report: Report) -> None:
        """Emit ``report``."""

    def _format_score(self, score: float | None) -> str:
        # Scores are shown out of 100 with one decimal.
        return "N/A" if score is None else f"{score:.1f}/100"
