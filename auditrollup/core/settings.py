"""Runtime settings for auditrollup.

Values are resolved in this order, first match wins:

1. keyword overrides passed to :func:`get_settings` (the CLI uses these)
2. ``AUDITROLLUP_*`` environment variables, ``__`` for nesting
   (``AUDITROLLUP_LOGGING__LEVEL=DEBUG``)
3. ``auditrollup.config.yaml`` / ``.yml`` in the working directory or the
   nearest parent that has one, or an explicit ``--config`` file
4. field defaults
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ["auditrollup.config.yaml", "auditrollup.config.yml"]

OUTPUT_FORMATS = ("html", "json", "console")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# How many directories above the working directory are searched
_MAX_SEARCH_DEPTH = 10


def _find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest settings file at or above ``start_dir`` (default: cwd)."""
    directory = start_dir or Path.cwd()
    for candidate_dir in [directory, *directory.parents][:_MAX_SEARCH_DEPTH]:
        for filename in CONFIG_FILE_NAMES:
            candidate = candidate_dir / filename
            if candidate.exists():
                return candidate
    return None


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Read a settings file. A file that cannot be used counts as empty."""
    try:
        content = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read config file %s: %s", config_path, e)
        return {}
    except yaml.YAMLError as e:
        logger.warning("Failed to parse config file %s: %s", config_path, e)
        return {}

    if not isinstance(content, dict):
        if content is not None:
            logger.warning("Ignoring config file %s: not a mapping", config_path)
        return {}
    return content


def _merge(file_values: dict[str, Any], explicit: dict[str, Any]) -> dict[str, Any]:
    # Explicit values win; the nested logging section is merged key by key.
    merged = {**file_values, **explicit}
    file_logging = file_values.get("logging")
    explicit_logging = explicit.get("logging")
    if isinstance(file_logging, dict) and isinstance(explicit_logging, dict):
        merged["logging"] = {**file_logging, **explicit_logging}
    return merged


class LoggingSettings(BaseSettings):
    """The ``logging`` section."""

    level: str = Field(default="WARNING", description="Minimum log level")
    json_output: bool = Field(
        default=False, description="Emit JSON lines instead of console output"
    )
    file: str | None = Field(default=None, description="Also log to this file")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Must be one of {_LOG_LEVELS}")
        return level


class AuditRollupSettings(BaseSettings):
    """Top-level auditrollup settings.

    Pass ``_skip_file_loading=True`` to ignore settings files, which tests do
    to stay independent of the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUDITROLLUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    template_path: Path | None = Field(
        default=None, description="HTML template; the bundled one when unset"
    )
    renderer_path: Path | None = Field(
        default=None, description="Renderer script; the bundled one when unset"
    )
    output_format: str = Field(
        default="html", description=f"Report format, one of {OUTPUT_FORMATS}"
    )
    fail_under: float | None = Field(
        default=None,
        ge=0.0,
        le=100.0,
        description="Minimum acceptable overall score",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        output_format = v.lower()
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output format: {v}. Must be one of {OUTPUT_FORMATS}"
            )
        return output_format

    @model_validator(mode="before")
    @classmethod
    def load_from_config_file(cls, data: dict[str, Any]) -> dict[str, Any]:
        if data.pop("_skip_file_loading", False):
            return data

        config_path = _find_config_file()
        if config_path is None:
            return data

        file_values = _load_yaml_config(config_path)
        if file_values:
            logger.debug("Loaded configuration from %s", config_path)
        return _merge(file_values, data)


def get_settings(
    config_file: Path | None = None, **overrides: Any
) -> AuditRollupSettings:
    """Build settings, optionally from an explicit settings file.

    An explicit ``config_file`` replaces directory discovery.
    """
    if config_file is not None and config_file.exists():
        values = _merge(_load_yaml_config(config_file), overrides)
        return AuditRollupSettings(**values, _skip_file_loading=True)
    return AuditRollupSettings(**overrides)


@lru_cache
def get_cached_settings() -> AuditRollupSettings:
    """Settings resolved once per process; ``cache_clear()`` resets them."""
    return get_settings()


EXAMPLE_CONFIG = """\
# auditrollup settings
# Any value can be overridden from the environment, e.g. AUDITROLLUP_FAIL_UNDER=90

output_format: html          # html, json or console
# fail_under: 90             # exit with status 1 below this overall score

# Report assets; the bundled ones are used when unset
# template_path: ./report-template.html
# renderer_path: ./report-renderer.js

# logging:
#   level: WARNING
#   json_output: false
#   file: null
"""


def generate_example_config(output_path: Path | None = None) -> str:
    """Return the example settings file, writing it to ``output_path`` if given."""
    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(EXAMPLE_CONFIG, encoding="utf-8")
        logger.info("Generated example config at %s", output_path)
    return EXAMPLE_CONFIG
