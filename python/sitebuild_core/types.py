"""Pydantic models for sitebuild-core.

This module provides the validated settings, logging context and build
result models shared by the builder, the CLI and the logging helpers.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field

# Environment variables read by BuildSettings.from_env(), keyed by field name.
ENV_VARS = {
    "config_file": "SITEBUILD_CONFIG",
    "output_dir": "SITEBUILD_OUTPUT_DIR",
    "static_dir": "SITEBUILD_STATIC_DIR",
    "source_dir": "SITEBUILD_SOURCE_DIR",
    "log_level": "SITEBUILD_LOG_LEVEL",
}


class BuildSettings(BaseModel):
    """Configuration for a single build pass.

    Relative paths are resolved against the current working directory at
    build time.

    Example:
        >>> settings = BuildSettings(config_file="site.yaml", output_dir="dist")
        >>> result = run_build(settings)
    """

    config_file: str = Field(
        default="config.yaml",
        description="Path to the YAML document describing the site.",
    )
    output_dir: str = Field(
        default="build",
        description="Directory pages are written into.",
    )
    static_dir: str = Field(
        default="static",
        description="Directory of static assets linked into the output.",
    )
    static_link: str = Field(
        default="static",
        description="Name of the static link inside output_dir.",
    )
    source_dir: str = Field(
        default=".",
        description="Directory templates are loaded from.",
    )
    link_static: bool = Field(
        default=True,
        description="Whether to link static_dir into the output.",
    )
    log_level: str = Field(
        default="info",
        pattern="^(trace|debug|info|warn|error)$",
        description="Log level (trace, debug, info, warn, error).",
    )

    model_config = {"extra": "forbid"}

    @classmethod
    def from_env(cls, **overrides: Any) -> BuildSettings:
        """Build settings from SITEBUILD_* environment variables.

        Explicit keyword overrides win over the environment; overrides
        whose value is None are ignored.

        Example:
            >>> settings = BuildSettings.from_env(output_dir="dist")
        """
        values: dict[str, Any] = {}
        for field_name, env_var in ENV_VARS.items():
            env_value = os.environ.get(env_var)
            if env_value:
                values[field_name] = env_value
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class BuildResult(BaseModel):
    """Result of a completed build pass.

    Example:
        >>> result = run_build()
        >>> print(f"Wrote {len(result.pages)} pages")
    """

    source_id: str = Field(description="Identifier of the document that was built.")
    output_dir: str = Field(description="Directory the pages were written into.")
    pages: list[str] = Field(
        default_factory=list,
        description="Paths of the written pages, in document order.",
    )
    static_link: str | None = Field(
        default=None,
        description="Path of the static directory link, if one was created.",
    )
    elapsed_ms: int = Field(
        default=0,
        description="Wall-clock duration of the build in milliseconds.",
    )


class LogContext(BaseModel):
    """Context fields for structured logging.

    Example:
        >>> context = LogContext(source_id="config.yaml", type_tag="jinja-template")
        >>> log_info("Rendering template", context)
    """

    source_id: str | None = Field(
        default=None,
        description="Identifier of the document being resolved.",
    )
    type_tag: str | None = Field(
        default=None,
        description="Type tag of the node being handled.",
    )
    path: str | None = Field(
        default=None,
        description="JSON rendering of the node path.",
    )
    operation: str | None = Field(
        default=None,
        description="Current operation name.",
    )


__all__ = [
    "ENV_VARS",
    "BuildSettings",
    "BuildResult",
    "LogContext",
]
