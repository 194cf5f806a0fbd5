"""Lookup of output formats by name.

Each format is registered with a factory that turns a plain option mapping
(as assembled by the CLI) into a ready-to-use reporter. Unknown options are
ignored, so one mapping can be passed to any format.
"""

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from .base import Reporter
from .console import ConsoleReporter
from .html_reporter import HTMLReporter
from .json_reporter import JSONReporter

ReporterFactory = Callable[[Mapping[str, Any]], Reporter]


class ReporterNotFoundError(Exception):
    """No reporter is registered under the requested format name."""

    def __init__(self, reporter_type: str) -> None:
        self.reporter_type = reporter_type
        super().__init__(f"Reporter type not found: {reporter_type}")


def _output_path(options: Mapping[str, Any]) -> Path | None:
    value = options.get("output_file")
    return Path(value) if value else None


def _console(options: Mapping[str, Any]) -> Reporter:
    return ConsoleReporter(
        output=options.get("output"),
        use_colors=options.get("use_colors", True),
        verbose=options.get("verbose", False),
    )


def _html(options: Mapping[str, Any]) -> Reporter:
    return HTMLReporter(
        embedder=options.get("embedder"),
        output_file=_output_path(options),
        output=options.get("output"),
    )


def _json(options: Mapping[str, Any]) -> Reporter:
    return JSONReporter(
        output_file=_output_path(options),
        output=options.get("output"),
        indent=options.get("indent", 2),
    )


class ReporterRegistry:
    """Maps format names to reporter classes and their factories."""

    def __init__(self) -> None:
        self._classes: dict[str, type[Reporter]] = {}
        self._factories: dict[str, ReporterFactory] = {}

        self.register("console", ConsoleReporter, _console)
        self.register("html", HTMLReporter, _html)
        self.register("json", JSONReporter, _json)

    def register(
        self,
        reporter_type: str,
        reporter_class: type[Reporter],
        factory: ReporterFactory | None = None,
    ) -> None:
        """Register a format.

        Args:
            reporter_type: Format name, e.g. ``"html"``.
            reporter_class: Reporter implementation.
            factory: Builds the reporter from an option mapping. Defaults to
                calling ``reporter_class()`` without arguments.
        """
        self._classes[reporter_type] = reporter_class
        self._factories[reporter_type] = factory or (lambda _: reporter_class())

    def unregister(self, reporter_type: str) -> bool:
        """Remove a format. Returns False if it was not registered."""
        self._factories.pop(reporter_type, None)
        return self._classes.pop(reporter_type, None) is not None

    def get_reporter_class(self, reporter_type: str) -> type[Reporter]:
        try:
            return self._classes[reporter_type]
        except KeyError:
            raise ReporterNotFoundError(reporter_type) from None

    def create(
        self, reporter_type: str, config: Mapping[str, Any] | None = None
    ) -> Reporter:
        """Build a reporter for ``reporter_type``.

        Recognized options: ``output_file``, ``output``, ``embedder`` (html),
        ``indent`` (json), ``use_colors`` and ``verbose`` (console).

        Raises:
            ReporterNotFoundError: If the format is not registered.
        """
        if reporter_type not in self._factories:
            raise ReporterNotFoundError(reporter_type)
        return self._factories[reporter_type](config or {})

    def list_reporters(self) -> list[str]:
        return list(self._classes)

    def is_registered(self, reporter_type: str) -> bool:
        return reporter_type in self._classes


_default_registry: ReporterRegistry | None = None


def get_registry() -> ReporterRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry
    if _default_registry is None:
        _default_registry = ReporterRegistry()
    return _default_registry


def create_reporter(
    reporter_type: str, config: Mapping[str, Any] | None = None
) -> Reporter:
    """Build a reporter from the process-wide registry."""
    return get_registry().create(reporter_type, config)
