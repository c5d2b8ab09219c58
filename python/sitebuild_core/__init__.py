"""
sitebuild-core

A type-directed tree resolver and the static site builder built on it.
A YAML document is parsed into a tree of mappings, sequences and scalars;
the resolver walks it concurrently, resolves each node once, and hands
every map carrying a registered ``type`` tag to its handler.

Example:
    >>> import asyncio
    >>> from sitebuild_core import ConfigResolver
    >>>
    >>> resolver = ConfigResolver()
    >>> resolver.register_type("double", lambda node, *_: node["value"] * 2)
    >>>
    >>> async def main():
    ...     return await resolver.process({"items": [{"type": "double", "value": 21}]})
    >>> asyncio.run(main())
    {'items': [42]}

    >>> # Build a site from config.yaml
    >>> from sitebuild_core import BuildSettings, run_build
    >>> result = run_build(BuildSettings(output_dir="build"))
"""

from __future__ import annotations

from sitebuild_core.builder import SiteBuilder, run_build
from sitebuild_core.events import BuildEventNames, BuildEvents
from sitebuild_core.exceptions import (
    ConfigurationError,
    DocumentReadError,
    HandlerRegistrationError,
    MissingFieldError,
    OutputError,
    SiteBuildError,
)
from sitebuild_core.handlers import TemplateHandler
from sitebuild_core.logging import (
    configure_logging,
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)
from sitebuild_core.nodes import NodeKind, NodePath, format_path, is_container, node_kind
from sitebuild_core.output import link_static, write_page
from sitebuild_core.reader import DocumentReader
from sitebuild_core.registry import (
    FunctionTypeHandler,
    TypeHandler,
    TypeRegistry,
    require_field,
)
from sitebuild_core.resolver import ConfigResolver, ResolutionCache
from sitebuild_core.types import BuildResult, BuildSettings, LogContext

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Resolver core
    "ConfigResolver",
    "ResolutionCache",
    "TypeRegistry",
    "TypeHandler",
    "FunctionTypeHandler",
    "require_field",
    # Node model
    "NodeKind",
    "NodePath",
    "node_kind",
    "is_container",
    "format_path",
    # Collaborators
    "DocumentReader",
    "TemplateHandler",
    "write_page",
    "link_static",
    "SiteBuilder",
    "run_build",
    # Events
    "BuildEvents",
    "BuildEventNames",
    # Models
    "BuildSettings",
    "BuildResult",
    "LogContext",
    # Exceptions
    "SiteBuildError",
    "MissingFieldError",
    "HandlerRegistrationError",
    "DocumentReadError",
    "OutputError",
    "ConfigurationError",
    # Logging
    "configure_logging",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
