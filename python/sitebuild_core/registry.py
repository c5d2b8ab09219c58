"""Type handler base class and registry.

A map node that carries a ``type`` field is handed, after all of its
fields have been resolved, to the handler registered under that tag.
The handler's return value replaces the whole map in the resolved tree.

Handlers can be written as TypeHandler subclasses or as plain functions
(sync or async) with the same signature as ``TypeHandler.resolve``.

Example:
    >>> from sitebuild_core import ConfigResolver, TypeHandler
    >>>
    >>> class DoubleHandler(TypeHandler):
    ...     type_tag = "double"
    ...
    ...     def resolve(self, resolved, path, root, source_id, resolver):
    ...         self.require(resolved, "value", path, root, source_id)
    ...         return resolved["value"] * 2
    ...
    >>> resolver = ConfigResolver()
    >>> resolver.register_type("double", DoubleHandler)
    >>>
    >>> # Plain functions work too
    >>> async def shout(resolved, path, root, source_id, resolver):
    ...     return resolved["text"].upper()
    >>> resolver.register_type("shout", shout)
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Union

from .exceptions import HandlerRegistrationError, MissingFieldError
from .logging import log_debug, log_info, log_warn
from .nodes import TYPE_FIELD

if TYPE_CHECKING:
    from .nodes import NodePath
    from .resolver import ConfigResolver

HandlerResult = Union[Any, Awaitable[Any]]
HandlerFn = Callable[
    [dict[str, Any], "NodePath", Any, Union[str, None], "ConfigResolver"], HandlerResult
]


def require_field(
    obj: dict[str, Any],
    field: str,
    *,
    type_tag: str,
    path: NodePath,
    root: Any,
    source_id: str | None,
) -> Any:
    """Return ``obj[field]`` or raise a MissingFieldError describing the node.

    Example:
        >>> template = require_field(
        ...     resolved, "template",
        ...     type_tag="jinja-template", path=path, root=root, source_id=source_id,
        ... )
    """
    if field not in obj:
        raise MissingFieldError(
            type_tag=type_tag,
            field=field,
            path=path,
            source_id=source_id,
            root=root,
        )
    return obj[field]


class TypeHandler(ABC):
    """Abstract base class for type handlers.

    Class Attributes:
        type_tag: Tag this handler is usually registered under. The
            registry key is what actually selects the handler.
    """

    type_tag: str = ""

    @abstractmethod
    def resolve(
        self,
        resolved: dict[str, Any],
        path: NodePath,
        root: Any,
        source_id: str | None,
        resolver: ConfigResolver,
    ) -> HandlerResult:
        """Produce the replacement value for a typed map node.

        May be a coroutine function. Any exception propagates unchanged to
        the caller of ``ConfigResolver.process``.

        Args:
            resolved: The node's map with every field already resolved.
            path: Path of the node from the document root.
            root: The unresolved document root. Handlers may pass parts of
                it back to ``resolver.process``.
            source_id: Identifier of the document, for diagnostics.
            resolver: The resolver running this pass.

        Returns:
            The replacement value, or an awaitable of it.
        """
        ...

    @property
    def name(self) -> str:
        """Return the handler's tag, or the class name if not set."""
        return self.type_tag or self.__class__.__name__

    def require(
        self,
        resolved: dict[str, Any],
        field: str,
        path: NodePath,
        root: Any,
        source_id: str | None,
    ) -> Any:
        """Return a required field, raising MissingFieldError when absent.

        The error names the tag the node was dispatched under, falling back
        to ``name`` for maps without one.
        """
        tag = resolved.get(TYPE_FIELD)
        return require_field(
            resolved,
            field,
            type_tag=tag if isinstance(tag, str) and tag else self.name,
            path=path,
            root=root,
            source_id=source_id,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(type_tag={self.name!r})"


class FunctionTypeHandler(TypeHandler):
    """Adapter registering a plain (sync or async) function as a handler."""

    def __init__(self, type_tag: str, func: HandlerFn) -> None:
        self.type_tag = type_tag
        self._func = func

    @property
    def func(self) -> HandlerFn:
        return self._func

    def resolve(
        self,
        resolved: dict[str, Any],
        path: NodePath,
        root: Any,
        source_id: str | None,
        resolver: ConfigResolver,
    ) -> HandlerResult:
        return self._func(resolved, path, root, source_id, resolver)

    def __repr__(self) -> str:
        func_name = getattr(self._func, "__name__", repr(self._func))
        return f"FunctionTypeHandler(type_tag={self.type_tag!r}, func={func_name})"


class TypeRegistry:
    """Mapping from type tag to handler.

    Registration order does not matter; registering a tag twice replaces
    the earlier handler.

    Supports registering:
    - TypeHandler instances (stored directly)
    - TypeHandler subclasses (instantiated without arguments)
    - Plain functions or coroutine functions (wrapped in FunctionTypeHandler)

    Example:
        >>> registry = TypeRegistry()
        >>> registry.register("double", lambda n, *_: n["value"] * 2)
        >>> registry.has("double")
        True
    """

    def __init__(self) -> None:
        self._handlers: dict[str, TypeHandler] = {}
        self._lock = threading.RLock()

    def register(self, type_tag: str, handler: TypeHandler | type[TypeHandler] | HandlerFn) -> None:
        """Register a handler under a type tag.

        Args:
            type_tag: Value of the ``type`` field that selects the handler.
            handler: Handler instance, handler class, or function.

        Raises:
            HandlerRegistrationError: If the tag is empty or the handler
                is not usable.
        """
        if not isinstance(type_tag, str) or not type_tag:
            raise HandlerRegistrationError(f"type tag must be a non-empty string, got {type_tag!r}")

        entry = self._coerce(type_tag, handler)

        with self._lock:
            if type_tag in self._handlers:
                log_warn(f"Overwriting existing type handler: {type_tag}")
            self._handlers[type_tag] = entry
        log_info(f"Registered type handler: {type_tag} -> {entry!r}")

    def unregister(self, type_tag: str) -> bool:
        """Remove a handler.

        Returns:
            True if a handler was removed, False if the tag was unknown.
        """
        with self._lock:
            if type_tag in self._handlers:
                del self._handlers[type_tag]
                log_debug(f"Unregistered type handler: {type_tag}")
                return True
            return False

    def has(self, type_tag: Any) -> bool:
        """Check whether a handler is registered for a tag.

        Non-string tags are never registered.
        """
        return isinstance(type_tag, str) and type_tag in self._handlers

    def get(self, type_tag: str) -> TypeHandler | None:
        """Return the handler for a tag, or None."""
        return self._handlers.get(type_tag)

    def list_types(self) -> list[str]:
        """Return all registered tags."""
        return list(self._handlers.keys())

    def clear(self) -> None:
        """Remove every handler."""
        with self._lock:
            self._handlers.clear()
        log_debug("Cleared type registry")

    def __contains__(self, type_tag: object) -> bool:
        return self.has(type_tag)

    def __len__(self) -> int:
        return len(self._handlers)

    @staticmethod
    def _coerce(type_tag: str, handler: Any) -> TypeHandler:
        if isinstance(handler, TypeHandler):
            return handler

        if isinstance(handler, type):
            if not issubclass(handler, TypeHandler):
                raise HandlerRegistrationError(
                    f"handler class must be a TypeHandler subclass, got {handler}"
                )
            try:
                return handler()
            except TypeError as e:
                raise HandlerRegistrationError(
                    f"Failed to instantiate handler {handler.__name__} for '{type_tag}': {e}"
                ) from e

        if callable(handler):
            return FunctionTypeHandler(type_tag, handler)

        raise HandlerRegistrationError(
            f"handler for '{type_tag}' must be a TypeHandler or callable, got {handler!r}"
        )


__all__ = [
    "HandlerFn",
    "HandlerResult",
    "require_field",
    "TypeHandler",
    "FunctionTypeHandler",
    "TypeRegistry",
]
