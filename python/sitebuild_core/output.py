"""Writing resolved pages and linking static assets into the build output."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from .exceptions import OutputError
from .logging import log_debug


async def write_page(output_dir: str | Path, url: str, content: str | bytes) -> Path:
    """Write one page under the output directory.

    Parent directories are created as needed.

    Args:
        output_dir: Build output directory.
        url: Page path relative to ``output_dir`` (e.g. ``blog/index.html``).
        content: Page body; text is written as UTF-8.

    Returns:
        Path of the written file.

    Raises:
        OutputError: If the page would land outside ``output_dir`` or the
            content is neither text nor bytes.
    """
    base = Path(output_dir).resolve()
    target = (base / str(url).lstrip("/")).resolve()
    if target == base or base not in target.parents:
        raise OutputError(f"Page path escapes the output directory: {url!r}")

    if isinstance(content, str):
        data = content.encode("utf-8")
    elif isinstance(content, bytes):
        data = content
    else:
        raise OutputError(
            f"Page {url!r} resolved to {type(content).__name__}, expected text",
            metadata={"url": url},
        )

    def _write() -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    try:
        await asyncio.to_thread(_write)
    except OSError as e:
        raise OutputError(f"Failed to write page {url!r}: {e}", metadata={"url": url}) from e

    log_debug(f"Wrote {len(data)} bytes", {"url": url, "target": target})
    return target


async def link_static(source: str | Path, target: str | Path, *, replace: bool = True) -> Path:
    """Symlink a static asset directory into the build output.

    Args:
        source: Existing static directory.
        target: Link to create.
        replace: Replace whatever is at ``target``, including a directory.

    Returns:
        Path of the link.

    Raises:
        OutputError: If the source is not a directory or the target is
            occupied and cannot be replaced.
    """
    source_path = Path(source).resolve()
    target_path = Path(target)
    if not source_path.is_dir():
        raise OutputError(f"Static directory does not exist: {source}")

    def _link() -> None:
        if target_path.is_symlink() or target_path.exists():
            if not replace:
                raise OutputError(f"Target already exists: {target_path}")
            if target_path.is_symlink() or target_path.is_file():
                target_path.unlink()
            elif target_path.resolve() in (source_path, *source_path.parents):
                raise OutputError(
                    f"Refusing to replace {target_path}: it holds the static directory"
                )
            else:
                shutil.rmtree(target_path)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        target_path.symlink_to(source_path, target_is_directory=True)

    try:
        await asyncio.to_thread(_link)
    except OSError as e:
        raise OutputError(f"Failed to link {source} to {target}: {e}") from e

    log_debug("Linked static directory", {"source": source_path, "target": target_path})
    return target_path


__all__ = ["write_page", "link_static"]
