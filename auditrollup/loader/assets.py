"""Loading of the report template and renderer script."""

from dataclasses import dataclass
from importlib import resources
from pathlib import Path

from auditrollup.core.exceptions import AssetError

TEMPLATE_RESOURCE = "report-template.html"
RENDERER_RESOURCE = "report-renderer.js"


@dataclass(frozen=True)
class ReportAssets:
    """Template and renderer text, loaded once and shared read-only."""

    template: str
    renderer_script: str


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise AssetError(f"Cannot read report asset {path}: {e}") from e


def _read_bundled(name: str) -> str:
    try:
        return (
            resources.files("auditrollup.templates")
            .joinpath(name)
            .read_text(encoding="utf-8")
        )
    except (OSError, ModuleNotFoundError) as e:
        raise AssetError(f"Cannot read bundled report asset {name}: {e}") from e


def load_report_assets(
    template_path: str | Path | None = None,
    renderer_path: str | Path | None = None,
) -> ReportAssets:
    """Read the report template and renderer script.

    Args:
        template_path: HTML template file. Defaults to the bundled template.
        renderer_path: JavaScript renderer file. Defaults to the bundled one.

    Returns:
        ReportAssets holding both texts.

    Raises:
        AssetError: If a file cannot be read.
    """
    template = (
        _read_text(Path(template_path))
        if template_path
        else _read_bundled(TEMPLATE_RESOURCE)
    )
    renderer_script = (
        _read_text(Path(renderer_path))
        if renderer_path
        else _read_bundled(RENDERER_RESOURCE)
    )
    return ReportAssets(template=template, renderer_script=renderer_script)
