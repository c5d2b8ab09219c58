"""Recursive, memoized, concurrent resolution of a node tree.

The resolver walks a tree of mappings, sequences and scalars and returns
the same shape with every typed map replaced by its handler's output.

Resolution Contract:
1. Every mapping or sequence instance is resolved at most once per pass.
   The first ``process`` call schedules a task and stores it in the cache
   before returning, so every later caller (including a handler calling
   back in while the node is still in flight) awaits the same task.
2. Children of a container are all started before any is awaited.
3. A map's handler runs only after all of the map's fields resolved.
4. Maps whose ``type`` is missing or unregistered pass through unchanged.
5. The first failure anywhere fails the whole pass. In-flight siblings
   are not cancelled; their results are discarded.

Example:
    >>> resolver = ConfigResolver()
    >>> resolver.register_type("double", lambda n, *_: n["value"] * 2)
    >>>
    >>> async def main():
    ...     return await resolver.process({"answer": {"type": "double", "value": 21}})
    >>> asyncio.run(main())
    {'answer': 42}
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .logging import log_debug, log_trace
from .nodes import ROOT_PATH, TYPE_FIELD, NodeKind, NodePath, child_path, format_path, node_kind
from .registry import TypeRegistry

if TYPE_CHECKING:
    from .reader import DocumentReader
    from .registry import HandlerFn, TypeHandler


class ResolutionCache:
    """Identity-keyed memo of in-flight and finished resolutions.

    Entries hold a reference to the node so its ``id()`` cannot be reused
    by another object while the pass is running.
    """

    def __init__(self) -> None:
        self._entries: dict[int, tuple[Any, asyncio.Future[Any]]] = {}

    def get(self, node: Any) -> asyncio.Future[Any] | None:
        """Return the future for this exact node instance, if any."""
        entry = self._entries.get(id(node))
        if entry is None:
            return None
        return entry[1]

    def install(self, node: Any, future: asyncio.Future[Any]) -> None:
        self._entries[id(node)] = (node, future)

    def reset(self) -> None:
        """Forget every entry."""
        self._entries.clear()

    def __contains__(self, node: object) -> bool:
        return id(node) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class ConfigResolver:
    """Resolves node trees, dispatching typed maps to registered handlers.

    One resolver serves one resolution pass; call ``reset()`` before
    reusing it for an unrelated pass.

    Attributes:
        registry: Type tag to handler mapping.
        cache: Per-pass identity memo.
    """

    def __init__(self, registry: TypeRegistry | None = None) -> None:
        self._registry = registry if registry is not None else TypeRegistry()
        self._cache = ResolutionCache()

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    def register_type(
        self, type_tag: str, handler: TypeHandler | type[TypeHandler] | HandlerFn
    ) -> None:
        """Register a handler for a type tag (last registration wins)."""
        self._registry.register(type_tag, handler)

    def reset(self) -> None:
        """Clear the cache so the resolver can run another pass."""
        self._cache.reset()

    def process(
        self,
        node: Any,
        path: NodePath = ROOT_PATH,
        root: Any = None,
        source_id: str | None = None,
    ) -> asyncio.Future[Any]:
        """Resolve a node.

        This is a plain method returning a future, not a coroutine
        function: the cache entry for a container is installed before it
        returns. It must be called while an event loop is running.

        Args:
            node: Node to resolve.
            path: Path of the node from the root, for diagnostics.
            root: Document root handed to handlers. Defaults to ``node``.
            source_id: Identifier of the document, for diagnostics.

        Returns:
            A future of the resolved value. Repeated calls for the same
            container instance return the same future.
        """
        path = tuple(path)
        if root is None:
            root = node

        kind = node_kind(node)
        if kind is NodeKind.SCALAR:
            future = asyncio.get_running_loop().create_future()
            future.set_result(node)
            return future

        cached = self._cache.get(node)
        if cached is not None:
            log_trace("Cache hit", {"path": format_path(path), "done": cached.done()})
            return cached

        if kind is NodeKind.SEQUENCE:
            coro = self._resolve_sequence(node, path, root, source_id)
        else:
            coro = self._resolve_mapping(node, path, root, source_id)
        task = asyncio.ensure_future(coro)
        self._cache.install(node, task)
        return task

    async def read(
        self,
        source: str,
        reader: DocumentReader | None = None,
    ) -> Any:
        """Load a document and resolve it from its root.

        Args:
            source: Identifier handed to the reader (a file path by default).
            reader: Document reader; a YAML file reader when omitted.

        Returns:
            The fully resolved document.
        """
        if reader is None:
            from .reader import DocumentReader

            reader = DocumentReader()
        root, source_id = await reader.read(source)
        return await self.process(root, ROOT_PATH, root, source_id)

    async def _resolve_sequence(
        self,
        node: list[Any] | tuple[Any, ...],
        path: NodePath,
        root: Any,
        source_id: str | None,
    ) -> list[Any]:
        pending = [
            self.process(value, child_path(path, index), root, source_id)
            for index, value in enumerate(node)
        ]
        return list(await asyncio.gather(*pending))

    async def _resolve_mapping(
        self,
        node: Mapping[str, Any],
        path: NodePath,
        root: Any,
        source_id: str | None,
    ) -> Any:
        keys = list(node.keys())
        pending = [self.process(node[key], child_path(path, key), root, source_id) for key in keys]
        values = await asyncio.gather(*pending)
        resolved = dict(zip(keys, values))

        if TYPE_FIELD not in resolved:
            return resolved

        type_tag = resolved[TYPE_FIELD]
        handler = self._registry.get(type_tag) if self._registry.has(type_tag) else None
        if handler is None:
            log_debug(
                "No handler registered for type, passing through",
                {"type_tag": type_tag, "path": format_path(path), "source_id": source_id},
            )
            return resolved

        log_debug(
            "Dispatching typed node",
            {"type_tag": type_tag, "path": format_path(path), "source_id": source_id},
        )
        result = handler.resolve(resolved, path, root, source_id, self)
        if inspect.isawaitable(result):
            result = await result
        return result


__all__ = ["TYPE_FIELD", "ResolutionCache", "ConfigResolver"]
