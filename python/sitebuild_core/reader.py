"""YAML document reader.

Loads a document from disk and parses it into a plain node tree of
dicts, lists and scalars for the resolver.

Example:
    >>> reader = DocumentReader()
    >>> root, source_id = await reader.read("config.yaml")
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import yaml

from .exceptions import DocumentReadError
from .logging import log_debug, log_info


class DocumentReader:
    """Reads YAML documents into node trees.

    Args:
        encoding: Text encoding of source documents.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    async def read(self, source: str | Path) -> tuple[Any, str]:
        """Read and parse a document.

        The file is read off the event loop thread.

        Args:
            source: Path of the document.

        Returns:
            Tuple of (root node, source identifier).

        Raises:
            DocumentReadError: If the file cannot be read or parsed.
        """
        source_id = str(source)
        try:
            data = await asyncio.to_thread(Path(source).read_bytes)
        except OSError as e:
            raise DocumentReadError(
                f"Failed to read {source_id}: {e}", source_id=source_id
            ) from e

        log_debug(f"Read {len(data)} bytes", {"source_id": source_id})

        try:
            text = data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise DocumentReadError(
                f"Failed to decode {source_id} as {self.encoding}: {e}", source_id=source_id
            ) from e

        root = self.parse(text, source_id)
        log_info("Document loaded", {"source_id": source_id})
        return root, source_id

    def parse(self, text: str, source_id: str | None = None) -> Any:
        """Parse YAML text into a node tree.

        An empty document parses to an empty mapping.

        Raises:
            DocumentReadError: If the text is not valid YAML.
        """
        try:
            root = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DocumentReadError(
                f"Failed to parse {source_id or '<string>'}: {e}", source_id=source_id
            ) from e
        return {} if root is None else root


__all__ = ["DocumentReader"]
