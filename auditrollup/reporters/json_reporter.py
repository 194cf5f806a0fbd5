"""Machine-readable report output."""

import sys
from datetime import datetime
from pathlib import Path
from typing import Any, TextIO

from auditrollup.reporters.base import Reporter
from auditrollup.reporters.html_reporter import serialize_report
from auditrollup.scoring.models import Report


class JSONReporter(Reporter):
    """Write the report tree as JSON for CI pipelines and other tools.

    The tree is wrapped as ``{"version", "generated_at", "report"}`` so
    consumers can detect format changes.
    """

    FORMAT_VERSION = "1.0"

    def __init__(
        self,
        output_file: Path | str | None = None,
        output: TextIO | None = None,
        indent: int | None = 2,
    ) -> None:
        """
        Args:
            output_file: Destination file; wins over ``output`` when both are set.
            output: Destination stream, stdout by default.
            indent: Indentation width, or None for a single line.
        """
        self._output_file = Path(output_file) if output_file else None
        self._output = output
        self._indent = indent

    @property
    def name(self) -> str:
        return "json"

    def report(self, report: Report) -> None:
        text = serialize_report(self._envelope(report), indent=self._indent) + "\n"

        if self._output_file is None:
            (self._output or sys.stdout).write(text)
            return

        self._output_file.parent.mkdir(parents=True, exist_ok=True)
        self._output_file.write_text(text, encoding="utf-8")

    def _envelope(self, report: Report) -> dict[str, Any]:
        return {
            "version": self.FORMAT_VERSION,
            "generated_at": datetime.now().isoformat(),
            "report": report.to_dict(),
        }
