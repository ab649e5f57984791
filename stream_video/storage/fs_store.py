"""Filesystem-backed, read-only store for media assets.

Layout: <root>/<relative path as requested by clients>

The store never writes. Blocking filesystem calls run in a worker thread so
the event loop keeps serving other streams.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from stream_video.reader.types import FileDescriptor
from stream_video.storage.mime import sniff_mime_type


logger = logging.getLogger(__name__)


class PathOutsideRootError(ValueError):
    """Raised when a relative path resolves to a location outside the storage root."""


class FileSystemMediaStore:
    def __init__(self, root_dir: str) -> None:
        """Initialize the store with a root directory path.

        Args:
            root_dir: Directory holding the media files, outside the public document root
        """
        self.root = Path(os.path.realpath(root_dir))
        if not self.root.is_dir():
            logger.warning(f"Storage root {self.root} does not exist or is not a directory")

    def locate(self, relative_path: str) -> Path:
        """Return the canonical absolute path for a sanitized relative path.

        Args:
            relative_path: Path with a single leading separator, e.g. "/movies/a.mov"

        Raises:
            PathOutsideRootError: if symlinks or leftover traversal segments escape the root,
                or the OS rejects the path outright (NUL byte, overlong component)
        """
        composed = str(self.root) + relative_path
        try:
            resolved = Path(os.path.realpath(composed))
        except (OSError, ValueError) as e:
            raise PathOutsideRootError(f"{relative_path!r} cannot name a file under the storage root: {e}") from e
        if resolved != self.root and self.root not in resolved.parents:
            raise PathOutsideRootError(f"{relative_path!r} resolves outside the storage root")
        return resolved

    async def is_file(self, path: Path) -> bool:
        # os.path.isfile reports False for NUL bytes and ENAMETOOLONG instead of raising
        return await asyncio.to_thread(os.path.isfile, path)

    async def probe(self, relative_path: str, path: Path) -> FileDescriptor:
        """Collect size, modification time and sniffed MIME type for ``path``.

        Raises:
            OSError: if the file disappears or becomes unreadable while probing
        """

        def _probe() -> FileDescriptor:
            stat = path.stat()
            return FileDescriptor(
                relative_path=relative_path,
                absolute_path=str(path),
                name=path.name,
                mime_type=sniff_mime_type(path),
                modified_at=stat.st_mtime,
                size=stat.st_size,
            )

        return await asyncio.to_thread(_probe)
