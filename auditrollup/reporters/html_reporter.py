"""HTML reporter: inlines report data and renderer script into a template.

The report JSON and the renderer script end up inside ``<script>`` elements,
so both are escaped before substitution:

- every ``<`` in the JSON text becomes the JSON escape ``\\u003c``; the
  parsed value is unchanged, but no tag can open or close inside the data.
- every ``</`` in the renderer script becomes ``\\u003c/``; the script is
  trusted source, so only closing-tag sequences are neutralized and bare
  ``<`` comparison operators are left alone.
"""

import json
import re
import sys
from pathlib import Path
from typing import Any, TextIO

from pydantic import BaseModel

from auditrollup.core.exceptions import TemplateError
from auditrollup.core.logging import get_logger
from auditrollup.loader.assets import ReportAssets, load_report_assets
from auditrollup.reporters.base import Reporter
from auditrollup.scoring.models import Report

logger = get_logger(__name__)

REPORT_JSON_PLACEHOLDER = "%%LIGHTHOUSE_JSON%%"
REPORT_JAVASCRIPT_PLACEHOLDER = "%%LIGHTHOUSE_JAVASCRIPT%%"

_PLACEHOLDER_RE = re.compile(
    "|".join(
        re.escape(token)
        for token in (REPORT_JSON_PLACEHOLDER, REPORT_JAVASCRIPT_PLACEHOLDER)
    )
)


def serialize_report(report: Report | Any, indent: int | None = None) -> str:
    """Serialize a report to JSON text.

    Pydantic models are dumped in JSON mode first; anything else is handed
    to ``json.dumps`` as is. Non-ASCII text is kept, NaN and infinities are
    rejected.

    Raises:
        TypeError: If the report contains values JSON cannot represent.
        ValueError: On circular references or non-finite floats.
    """
    if isinstance(report, BaseModel):
        report = report.model_dump(mode="json", exclude_unset=True)

    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(
        report,
        indent=indent,
        separators=separators,
        ensure_ascii=False,
        allow_nan=False,
    )


def sanitize_json(json_text: str) -> str:
    """Escape every ``<`` in JSON text for embedding inside a script element."""
    return json_text.replace("<", "\\u003c")


def sanitize_script(script: str) -> str:
    """Escape every ``</`` in script text for embedding inside a script element."""
    return script.replace("</", "\\u003c/")


def _substitute_placeholders(template: str, replacements: dict[str, str]) -> str:
    # Single pass: inserted text is never rescanned, and only the first
    # occurrence of each token is replaced.
    seen: set[str] = set()

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if token in seen:
            return token
        seen.add(token)
        return replacements[token]

    return _PLACEHOLDER_RE.sub(_replace, template)


def render_html(report: Report | Any, template: str, renderer_script: str) -> str:
    """Render a self-contained HTML report.

    Args:
        report: Report model or JSON-serializable report data.
        template: HTML template containing the JSON and JavaScript placeholders.
        renderer_script: JavaScript source that renders the report data.

    Returns:
        The template with the sanitized report JSON and renderer script
        substituted for the first occurrence of each placeholder.

    Raises:
        TypeError, ValueError: If the report cannot be serialized.
    """
    sanitized_json = sanitize_json(serialize_report(report))
    sanitized_script = sanitize_script(renderer_script)
    return _substitute_placeholders(
        template,
        {
            REPORT_JSON_PLACEHOLDER: sanitized_json,
            REPORT_JAVASCRIPT_PLACEHOLDER: sanitized_script,
        },
    )


class ReportEmbedder:
    """Renders reports into a fixed template and renderer script.

    The template and script are supplied once at construction and never
    re-read, so one embedder can be shared across any number of renders.
    """

    def __init__(self, template: str, renderer_script: str) -> None:
        """Initialize the embedder.

        Args:
            template: HTML template text.
            renderer_script: JavaScript renderer source text.

        Raises:
            TemplateError: If the template lacks either placeholder.
        """
        missing = [
            token
            for token in (REPORT_JSON_PLACEHOLDER, REPORT_JAVASCRIPT_PLACEHOLDER)
            if token not in template
        ]
        if missing:
            raise TemplateError(
                f"Report template is missing placeholder(s): {', '.join(missing)}"
            )

        self._template = template
        self._renderer_script = renderer_script

    @classmethod
    def from_assets(cls, assets: ReportAssets) -> "ReportEmbedder":
        """Create an embedder from loaded report assets."""
        return cls(assets.template, assets.renderer_script)

    @property
    def template(self) -> str:
        return self._template

    @property
    def renderer_script(self) -> str:
        return self._renderer_script

    def render(self, report: Report | Any) -> str:
        """Render a report into the template. See :func:`render_html`."""
        html_content = render_html(report, self._template, self._renderer_script)
        logger.debug("report_rendered", size=len(html_content))
        return html_content


class HTMLReporter(Reporter):
    """Reporter that outputs a single-file HTML report."""

    def __init__(
        self,
        embedder: ReportEmbedder | None = None,
        output_file: Path | str | None = None,
        output: TextIO | None = None,
    ) -> None:
        """Initialize the HTML reporter.

        Args:
            embedder: Embedder to render with. Defaults to one built from the
                bundled template and renderer.
            output_file: Path to write HTML file (takes precedence over output).
            output: Output stream (defaults to stdout if no file specified).
        """
        self._embedder = embedder or ReportEmbedder.from_assets(load_report_assets())
        self._output_file = Path(output_file) if output_file else None
        self._output = output

    @property
    def name(self) -> str:
        """Return the reporter name."""
        return "html"

    def report(self, report: Report) -> None:
        """Render and write the HTML report.

        Args:
            report: Aggregated report.
        """
        html_content = self._embedder.render(report)

        if self._output_file:
            self._output_file.parent.mkdir(parents=True, exist_ok=True)
            self._output_file.write_text(html_content, encoding="utf-8")
            logger.info(
                "report_written",
                path=str(self._output_file),
                score=self._format_score(report.score),
            )
        else:
            output = self._output or sys.stdout
            output.write(html_content)
