"""Tests for auditrollup settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from auditrollup.core.settings import (
    AuditRollupSettings,
    LoggingSettings,
    _find_config_file,
    generate_example_config,
    get_settings,
)


class TestAuditRollupSettings:
    """Tests for field defaults and validation."""

    def test_defaults(self) -> None:
        settings = AuditRollupSettings(_skip_file_loading=True)

        assert settings.output_format == "html"
        assert settings.fail_under is None
        assert settings.template_path is None
        assert settings.renderer_path is None
        assert settings.logging.level == "WARNING"
        assert settings.logging.json_output is False

    def test_output_format_normalized(self) -> None:
        settings = AuditRollupSettings(_skip_file_loading=True, output_format="JSON")
        assert settings.output_format == "json"

    def test_invalid_output_format(self) -> None:
        with pytest.raises(ValidationError):
            AuditRollupSettings(_skip_file_loading=True, output_format="pdf")

    @pytest.mark.parametrize("value", [-1, 100.5])
    def test_fail_under_range(self, value: float) -> None:
        with pytest.raises(ValidationError):
            AuditRollupSettings(_skip_file_loading=True, fail_under=value)

    def test_log_level_normalized(self) -> None:
        assert LoggingSettings(level="debug").level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingSettings(level="LOUD")


class TestEnvironment:
    """Tests for environment variable overrides."""

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUDITROLLUP_FAIL_UNDER", "80")
        monkeypatch.setenv("AUDITROLLUP_OUTPUT_FORMAT", "console")

        settings = get_settings(_skip_file_loading=True)
        assert settings.fail_under == 80.0
        assert settings.output_format == "console"

    def test_nested_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AUDITROLLUP_LOGGING__LEVEL", "info")
        settings = get_settings(_skip_file_loading=True)
        assert settings.logging.level == "INFO"


class TestConfigFiles:
    """Tests for YAML configuration files."""

    def test_explicit_config_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text(
            "output_format: json\nfail_under: 75\nlogging:\n  level: ERROR\n",
            encoding="utf-8",
        )

        settings = get_settings(config_file=config_file)
        assert settings.output_format == "json"
        assert settings.fail_under == 75.0
        assert settings.logging.level == "ERROR"

    def test_overrides_beat_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("output_format: json\n", encoding="utf-8")

        settings = get_settings(config_file=config_file, output_format="console")
        assert settings.output_format == "console"

    def test_discovered_config_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "auditrollup.config.yaml").write_text(
            "fail_under: 90\n", encoding="utf-8"
        )
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        assert _find_config_file() == tmp_path / "auditrollup.config.yaml"
        assert AuditRollupSettings().fail_under == 90.0

    def test_malformed_config_file_ignored(self, tmp_path: Path) -> None:
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("output_format: [json\n", encoding="utf-8")

        settings = get_settings(config_file=config_file)
        assert settings.output_format == "html"

    def test_generate_example_config(self, tmp_path: Path) -> None:
        output = tmp_path / "conf" / "auditrollup.config.yaml"
        example = generate_example_config(output)

        assert output.read_text() == example
        settings = get_settings(config_file=output)
        assert settings.output_format == "html"
