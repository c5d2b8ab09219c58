"""Custom exceptions for sitebuild-core.

This module provides the exception hierarchy raised by the resolver and
its collaborators. Errors raised by a type handler's own logic (for
example a template rendering failure) are not wrapped: they propagate to
the caller of ``ConfigResolver.process`` unchanged.
"""

from __future__ import annotations

from typing import Any

from .nodes import NodePath, describe_source, format_path


class SiteBuildError(Exception):
    """Base exception for all sitebuild-core errors.

    Attributes:
        message: Human-readable error message
        metadata: Additional error context

    Example:
        >>> try:
        ...     run_build()
        ... except SiteBuildError as e:
        ...     print(f"Build error: {e}")
    """

    def __init__(self, message: str, *, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging and reporting.

        Returns:
            Dictionary with error details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "metadata": self.metadata,
        }


class MissingFieldError(SiteBuildError):
    """Raised when a typed node lacks a field its handler requires.

    The message names the type tag, the node path and the source
    document (or a JSON dump of the root when no source is known).

    Example:
        >>> raise MissingFieldError(
        ...     type_tag="jinja-template",
        ...     field="template",
        ...     path=("pages", "index.html"),
        ...     source_id="config.yaml",
        ... )
    """

    def __init__(
        self,
        *,
        type_tag: str,
        field: str,
        path: NodePath,
        source_id: str | None = None,
        root: Any = None,
    ) -> None:
        message = (
            f'Config object with type "{type_tag}" must contain "{field}" field.\n'
            f"Error found at {format_path(path)} of {describe_source(source_id, root)}"
        )
        super().__init__(
            message,
            metadata={
                "type_tag": type_tag,
                "field": field,
                "path": list(path),
                "source_id": source_id,
            },
        )
        self.type_tag = type_tag
        self.field = field
        self.path = tuple(path)
        self.source_id = source_id


class HandlerRegistrationError(SiteBuildError):
    """Raised when a type handler cannot be registered."""

    pass


class DocumentReadError(SiteBuildError):
    """Raised when a source document cannot be read or parsed.

    Attributes:
        source_id: Identifier of the document that failed.
    """

    def __init__(self, message: str, *, source_id: str | None = None) -> None:
        super().__init__(message, metadata={"source_id": source_id})
        self.source_id = source_id


class OutputError(SiteBuildError):
    """Raised when a page or static link cannot be written."""

    pass


class ConfigurationError(SiteBuildError):
    """Raised when a resolved document does not describe a buildable site."""

    pass


__all__ = [
    "SiteBuildError",
    "MissingFieldError",
    "HandlerRegistrationError",
    "DocumentReadError",
    "OutputError",
    "ConfigurationError",
]
