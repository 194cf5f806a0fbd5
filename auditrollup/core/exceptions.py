"""auditrollup exceptions."""


class AuditRollupError(Exception):
    """Base exception for all auditrollup errors."""


class ScoringError(AuditRollupError):
    """Base exception for score aggregation errors."""


class MissingAuditResultError(ScoringError):
    """A configured audit has no entry in the results mapping.

    The results mapping must contain an entry for every audit id referenced
    by the category configuration. Audits that errored upstream are expected
    to carry an explicit sentinel result rather than being left out.
    """

    def __init__(self, audit_id: str, category_id: str | None = None):
        self.audit_id = audit_id
        self.category_id = category_id

        if category_id is not None:
            message = (
                f"No result for audit '{audit_id}' "
                f"(referenced by category '{category_id}')"
            )
        else:
            message = f"No result for audit '{audit_id}'"

        super().__init__(message)


class LoaderError(AuditRollupError):
    """Base exception for loader errors."""


class ValidationError(LoaderError):
    """Validation error with line number information."""

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        file_path: str | None = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.file_path = file_path

        location_parts = []
        if file_path:
            location_parts.append(f"File: {file_path}")
        if line is not None:
            location_parts.append(f"Line: {line}")
        if column is not None:
            location_parts.append(f"Column: {column}")

        if location_parts:
            full_message = f"{', '.join(location_parts)}: {message}"
        else:
            full_message = message

        super().__init__(full_message)


class ParseError(LoaderError):
    """YAML/JSON parsing error."""


class AssetError(LoaderError):
    """Report template or renderer script could not be read."""


class ReportError(AuditRollupError):
    """Base exception for report output errors."""


class TemplateError(ReportError):
    """Report template is missing a required placeholder."""
