"""Site build pass.

A build reads the site document, resolves it, writes every entry of the
resolved ``pages`` mapping to the output directory and links the static
asset directory next to the pages.

Example:
    >>> from sitebuild_core import BuildSettings, run_build
    >>>
    >>> result = run_build(BuildSettings(config_file="config.yaml"))
    >>> print(result.pages)
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .events import BuildEventNames, BuildEvents
from .exceptions import ConfigurationError
from .handlers import TemplateHandler
from .logging import log_error, log_info, log_warn
from .output import link_static, write_page
from .reader import DocumentReader
from .resolver import ConfigResolver
from .types import BuildResult, BuildSettings

PAGES_FIELD = "pages"


class SiteBuilder:
    """Runs build passes for one site.

    Args:
        settings: Build settings; read from the environment when omitted.
        resolver: Resolver to use. A ``jinja-template`` handler is
            registered on it unless one is already present.
        events: Event bus; the shared instance when omitted. Events are
            only published while the bus is active.
        reader: Document reader; a YAML reader when omitted.
    """

    def __init__(
        self,
        settings: BuildSettings | None = None,
        resolver: ConfigResolver | None = None,
        events: BuildEvents | None = None,
        reader: DocumentReader | None = None,
    ) -> None:
        self.settings = settings if settings is not None else BuildSettings.from_env()
        self.resolver = resolver if resolver is not None else ConfigResolver()
        self.events = events if events is not None else BuildEvents.instance()
        self.reader = reader if reader is not None else DocumentReader()
        self._register_default_types()

    def _register_default_types(self) -> None:
        if not self.resolver.registry.has(TemplateHandler.type_tag):
            self.resolver.register_type(
                TemplateHandler.type_tag, TemplateHandler(self.settings.source_dir)
            )

    async def build(self) -> BuildResult:
        """Run one build pass.

        Returns:
            BuildResult describing what was written.

        Raises:
            SiteBuildError: For structural, read and output failures.
            Exception: Handler errors propagate unchanged.
        """
        started = time.monotonic()
        self._publish(BuildEventNames.BUILD_STARTED, self.settings)
        try:
            result = await self._build(started)
        except Exception as e:
            log_error(
                f"Build failed: {e}",
                {"source_id": self.settings.config_file, "error_type": type(e).__name__},
            )
            self._publish(BuildEventNames.BUILD_FAILED, e)
            raise

        log_info(
            "Build completed",
            {"pages": len(result.pages), "elapsed_ms": result.elapsed_ms},
        )
        self._publish(BuildEventNames.BUILD_COMPLETED, result)
        return result

    async def _build(self, started: float) -> BuildResult:
        settings = self.settings
        self.resolver.reset()

        root, source_id = await self.reader.read(settings.config_file)
        self._publish(BuildEventNames.DOCUMENT_LOADED, source_id)

        resolved = await self.resolver.process(root, (), root, source_id)
        pages = self._pages(resolved, source_id)

        output_dir = Path(settings.output_dir)
        written = await asyncio.gather(
            *(self._write(output_dir, url, content) for url, content in pages.items())
        )

        static_link: Path | None = None
        if settings.link_static:
            static_dir = Path(settings.static_dir)
            if static_dir.is_dir():
                static_link = await link_static(static_dir, output_dir / settings.static_link)
                self._publish(BuildEventNames.STATIC_LINKED, static_link)
            else:
                log_warn(f"Static directory not found, skipping link: {static_dir}")

        return BuildResult(
            source_id=source_id,
            output_dir=str(output_dir),
            pages=[str(path) for path in written],
            static_link=str(static_link) if static_link is not None else None,
            elapsed_ms=int((time.monotonic() - started) * 1000),
        )

    async def _write(self, output_dir: Path, url: str, content: Any) -> Path:
        path = await write_page(output_dir, url, content)
        log_info(f"Wrote page {url}", {"path": path})
        self._publish(BuildEventNames.PAGE_WRITTEN, url, path)
        return path

    @staticmethod
    def _pages(resolved: Any, source_id: str) -> Mapping[str, Any]:
        if not isinstance(resolved, Mapping) or PAGES_FIELD not in resolved:
            raise ConfigurationError(
                f'Document {source_id} must contain a "{PAGES_FIELD}" mapping',
                metadata={"source_id": source_id},
            )
        pages = resolved[PAGES_FIELD]
        if not isinstance(pages, Mapping):
            raise ConfigurationError(
                f'"{PAGES_FIELD}" in {source_id} must be a mapping of url to content, '
                f"got {type(pages).__name__}",
                metadata={"source_id": source_id},
            )
        return pages

    def _publish(self, event: str, *args: Any) -> None:
        if self.events.is_active:
            self.events.publish(event, *args)


def run_build(
    settings: BuildSettings | None = None,
    *,
    events: BuildEvents | None = None,
) -> BuildResult:
    """Run a build pass on a fresh event loop.

    Example:
        >>> result = run_build(BuildSettings(output_dir="dist"))
    """
    builder = SiteBuilder(settings, events=events)
    return asyncio.run(builder.build())


__all__ = ["PAGES_FIELD", "SiteBuilder", "run_build"]
