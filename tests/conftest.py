"""pytest configuration and fixtures for sitebuild_core tests.

This module provides shared fixtures for testing the resolver, the
builder and the CLI, including a fresh TypeRegistry / ConfigResolver and
a small on-disk site.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from sitebuild_core import BuildEvents, ConfigResolver, TypeRegistry


SITE_CONFIG = """\
prettyHTML: false
globalParameters:
  siteName: Example
pages:
  index.html:
    type: jinja-template
    template: templates/page.html
    parameters:
      title: Home
  blog/index.html:
    type: jinja-template
    template: templates/page.html
    parameters:
      title: Blog
"""

PAGE_TEMPLATE = """\
<html>
<head><title>{{ title }} - {{ global.siteName }}</title></head>
<body><h1>{{ title }}</h1></body>
</html>
"""


@pytest.fixture(scope="session")
def sitebuild_core_module():
    """Provide the sitebuild_core module as a fixture."""
    import sitebuild_core

    return sitebuild_core


@pytest.fixture
def type_registry() -> TypeRegistry:
    """Provide an empty TypeRegistry."""
    from sitebuild_core import TypeRegistry

    return TypeRegistry()


@pytest.fixture
def resolver(type_registry: TypeRegistry) -> ConfigResolver:
    """Provide a ConfigResolver over the type_registry fixture."""
    from sitebuild_core import ConfigResolver

    return ConfigResolver(type_registry)


@pytest.fixture
def build_events() -> Generator[BuildEvents, None, None]:
    """Provide a started BuildEvents bus, stopped after the test."""
    from sitebuild_core import BuildEvents

    BuildEvents.reset_instance()
    events = BuildEvents.instance()
    events.start()
    yield events
    events.stop()
    BuildEvents.reset_instance()


@pytest.fixture
def site_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Provide a minimal site (config, template, static dir) as the cwd."""
    (tmp_path / "templates").mkdir()
    (tmp_path / "templates" / "page.html").write_text(PAGE_TEMPLATE)
    (tmp_path / "static").mkdir()
    (tmp_path / "static" / "style.css").write_text("body { margin: 0; }\n")
    (tmp_path / "config.yaml").write_text(SITE_CONFIG)

    for env_var in (
        "SITEBUILD_CONFIG",
        "SITEBUILD_OUTPUT_DIR",
        "SITEBUILD_STATIC_DIR",
        "SITEBUILD_SOURCE_DIR",
        "SITEBUILD_LOG_LEVEL",
    ):
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
