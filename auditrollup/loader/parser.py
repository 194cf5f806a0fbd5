"""YAML/JSON parser built on ruamel.yaml with line number reporting."""

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError, YAMLError

from auditrollup.core.exceptions import ParseError


class YAMLParser:
    """Parse YAML documents into plain Python data.

    JSON is a subset of YAML, so results exported as JSON are read by the
    same parser. Mapping order is preserved.
    """

    def __init__(self) -> None:
        self.yaml = YAML(typ="safe", pure=True)

    def parse_file(self, file_path: str | Path) -> Any:
        """Parse a YAML or JSON file.

        Args:
            file_path: Path to the document

        Returns:
            Parsed data

        Raises:
            ParseError: If the file is missing, unreadable, empty or malformed
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(f"Failed to read file {file_path}: {e}") from e

        data = self._load(content, source=str(file_path))
        if data is None:
            raise ParseError(f"Empty document: {file_path}")
        return data

    def parse_string(self, content: str) -> Any:
        """Parse YAML or JSON from a string.

        Raises:
            ParseError: If the content is empty or malformed
        """
        data = self._load(content, source="<string>")
        if data is None:
            raise ParseError("Empty document")
        return data

    def _load(self, content: str, source: str) -> Any:
        try:
            return self.yaml.load(content)
        except MarkedYAMLError as e:
            line = e.problem_mark.line + 1 if e.problem_mark else None
            column = e.problem_mark.column + 1 if e.problem_mark else None
            raise ParseError(
                f"Parsing error in {source} at line {line}, column {column}: "
                f"{e.problem}"
            ) from e
        except YAMLError as e:
            raise ParseError(f"Failed to parse {source}: {e}") from e
