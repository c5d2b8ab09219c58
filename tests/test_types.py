"""Pydantic model tests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sitebuild_core import BuildResult, BuildSettings, LogContext


class TestBuildSettings:
    """Tests for BuildSettings."""

    def test_defaults(self):
        settings = BuildSettings()

        assert settings.config_file == "config.yaml"
        assert settings.output_dir == "build"
        assert settings.static_dir == "static"
        assert settings.static_link == "static"
        assert settings.source_dir == "."
        assert settings.link_static is True
        assert settings.log_level == "info"

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            BuildSettings(unknown="x")

    def test_log_level_validated(self):
        with pytest.raises(ValidationError):
            BuildSettings(log_level="verbose")

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SITEBUILD_CONFIG", "site.yaml")
        monkeypatch.setenv("SITEBUILD_OUTPUT_DIR", "dist")
        monkeypatch.delenv("SITEBUILD_LOG_LEVEL", raising=False)

        settings = BuildSettings.from_env()

        assert settings.config_file == "site.yaml"
        assert settings.output_dir == "dist"
        assert settings.log_level == "info"

    def test_overrides_win_over_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SITEBUILD_OUTPUT_DIR", "dist")

        settings = BuildSettings.from_env(output_dir="public", static_dir=None)

        assert settings.output_dir == "public"
        assert settings.static_dir == "static"


class TestBuildResult:
    """Tests for BuildResult."""

    def test_defaults(self):
        result = BuildResult(source_id="config.yaml", output_dir="build")

        assert result.pages == []
        assert result.static_link is None
        assert result.elapsed_ms == 0

    def test_serialization(self):
        result = BuildResult(
            source_id="config.yaml", output_dir="build", pages=["build/index.html"]
        )

        assert result.model_dump()["pages"] == ["build/index.html"]


class TestLogContext:
    """Tests for LogContext."""

    def test_all_optional(self):
        assert LogContext().model_dump() == {
            "source_id": None,
            "type_tag": None,
            "path": None,
            "operation": None,
        }
