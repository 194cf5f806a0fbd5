"""Console reporter for terminal output."""

import sys
from io import StringIO
from typing import TextIO

from auditrollup.reporters.base import Reporter
from auditrollup.scoring.models import CategoryReport, Report

PASS_THRESHOLD = 90.0
AVERAGE_THRESHOLD = 50.0


class Colors:
    """ANSI color codes."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    GRAY = "\033[90m"


class ConsoleReporter(Reporter):
    """Reporter that prints category scores to the terminal."""

    def __init__(
        self,
        output: TextIO | None = None,
        use_colors: bool = True,
        verbose: bool = False,
    ) -> None:
        """Initialize the console reporter.

        Args:
            output: Output stream (defaults to sys.stdout).
            use_colors: Whether to use ANSI color codes.
            verbose: Whether to list every audit under its category.
        """
        self._output = output or sys.stdout
        self._use_colors = use_colors and self._supports_color()
        self._verbose = verbose

    @property
    def name(self) -> str:
        """Return the reporter name."""
        return "console"

    def _supports_color(self) -> bool:
        """Check if the output stream supports ANSI colors."""
        if isinstance(self._output, StringIO):
            return True
        if not hasattr(self._output, "isatty"):
            return False
        return self._output.isatty()

    def _color(self, text: str, color_code: str) -> str:
        if not self._use_colors:
            return text
        return f"{color_code}{text}{Colors.RESET}"

    def _score_color(self, score: float) -> str:
        if score >= PASS_THRESHOLD:
            return Colors.GREEN
        elif score >= AVERAGE_THRESHOLD:
            return Colors.YELLOW
        return Colors.RED

    def _colored_score(self, score: float) -> str:
        return self._color(self._format_score(score), self._score_color(score))

    def report(self, report: Report) -> None:
        """Print the report summary.

        Args:
            report: Aggregated report to output.
        """
        lines = [
            self._color("Audit Report", Colors.BOLD),
            f"Overall score: {self._colored_score(report.score)}",
            "",
        ]

        for category in report.categories:
            lines.extend(self._format_category(category))

        self._output.write("\n".join(lines) + "\n")

    def _format_category(self, category: CategoryReport) -> list[str]:
        title = getattr(category, "name", None) or category.id
        lines = [f"  {title}: {self._colored_score(category.score)}"]

        if self._verbose:
            for audit in category.audits:
                audit_title = getattr(audit, "title", None) or audit.id
                lines.append(
                    f"    - {audit_title}: {self._colored_score(audit.score)}"
                )

        return lines
