"""auditrollup - roll audit results up into a scored, self-contained HTML report."""

__version__ = "1.0.0"
