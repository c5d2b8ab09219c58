"""In-process event bus for build progress.

This module provides the BuildEvents class that wraps pyee's EventEmitter
so the CLI (or any embedding application) can follow a build without the
builder knowing who is listening.

Example:
    >>> from sitebuild_core import BuildEvents, BuildEventNames
    >>>
    >>> events = BuildEvents.instance()
    >>> events.start()
    >>>
    >>> def on_page(url, path):
    ...     print(f"Wrote {url} -> {path}")
    ...
    >>> events.subscribe(BuildEventNames.PAGE_WRITTEN, on_page)
    >>> run_build()
    >>>
    >>> events.stop()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pyee.base import EventEmitter

from .logging import log_debug, log_info, log_warn


class BuildEventNames:
    """Constants for event names published during a build.

    Attributes:
        BUILD_STARTED: Emitted before the document is read (settings).
        DOCUMENT_LOADED: Emitted once the document is parsed (source_id).
        PAGE_WRITTEN: Emitted after each page is written (url, path).
        STATIC_LINKED: Emitted after the static directory is linked (path).
        BUILD_COMPLETED: Emitted with the final result (BuildResult).
        BUILD_FAILED: Emitted when the build raises (Exception).
    """

    BUILD_STARTED = "build.started"
    DOCUMENT_LOADED = "document.loaded"
    PAGE_WRITTEN = "page.written"
    STATIC_LINKED = "static.linked"
    BUILD_COMPLETED = "build.completed"
    BUILD_FAILED = "build.failed"


class BuildEvents:
    """Pub/sub bus for build lifecycle events.

    Events are only delivered while the bus is active.
    """

    _instance: BuildEvents | None = None

    def __init__(self) -> None:
        self._emitter = EventEmitter()
        self._active = False

    @classmethod
    def instance(cls) -> BuildEvents:
        """Get the shared BuildEvents instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Stop and drop the shared instance.

        This is primarily for testing to ensure a clean state between tests.
        """
        if cls._instance is not None:
            cls._instance.stop()
        cls._instance = None

    def start(self) -> None:
        """Activate the bus. Calling start() twice is a no-op."""
        if self._active:
            return
        self._active = True
        log_info("BuildEvents started")

    def stop(self) -> None:
        """Deactivate the bus and remove all listeners."""
        if not self._active:
            return
        self._active = False
        self._emitter.remove_all_listeners()
        log_info("BuildEvents stopped")

    def subscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Subscribe to an event."""
        self._emitter.on(event, handler)
        handler_name = getattr(handler, "__name__", str(handler))
        log_debug(f"Subscribed to {event}: {handler_name}")

    def subscribe_once(self, event: str, handler: Callable[..., Any]) -> None:
        """Subscribe to the next occurrence of an event only."""
        self._emitter.once(event, handler)
        handler_name = getattr(handler, "__name__", str(handler))
        log_debug(f"Subscribed once to {event}: {handler_name}")

    def unsubscribe(self, event: str, handler: Callable[..., Any]) -> None:
        """Unsubscribe from an event."""
        self._emitter.remove_listener(event, handler)
        handler_name = getattr(handler, "__name__", str(handler))
        log_debug(f"Unsubscribed from {event}: {handler_name}")

    def publish(self, event: str, *args: Any, **kwargs: Any) -> None:
        """Publish an event to all subscribers.

        If the bus is not active, a warning is logged and the event is
        dropped.
        """
        if not self._active:
            log_warn(f"BuildEvents not active, dropping event: {event}")
            return

        log_debug(f"Publishing event: {event}")
        self._emitter.emit(event, *args, **kwargs)

    def listener_count(self, event: str) -> int:
        return len(self._emitter.listeners(event))

    @property
    def is_active(self) -> bool:
        return self._active


__all__ = ["BuildEvents", "BuildEventNames"]
