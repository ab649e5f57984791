from __future__ import annotations

import logging
from typing import Any
from typing import AsyncGenerator

import aiofiles

from stream_video.api.errors import InternalError


logger = logging.getLogger(__name__)

DEFAULT_READ_BUFFER_SIZE = 64 * 1024


class ShortReadError(IOError):
    """The source ended before the planned window was fully copied."""


async def open_source(absolute_path: str) -> Any:
    """Open the media file for reading before any response header is committed.

    Raises:
        InternalError: the file was removed or became unreadable after validation
    """
    try:
        return await aiofiles.open(absolute_path, mode="rb")
    except OSError as e:
        logger.error(f"Cannot open {absolute_path} for streaming: {e}")
        raise InternalError(f"Cannot open source file: {e}") from e


async def stream_window(
    source: Any,
    start: int,
    length: int,
    *,
    buffer_size: int = DEFAULT_READ_BUFFER_SIZE,
) -> AsyncGenerator[bytes, None]:
    """Yield exactly ``length`` bytes of ``source`` starting at ``start``.

    The source is closed on every exit path, including a client disconnect
    that cancels the generator. Errors are not retried; the response is
    aborted and the client issues a new ranged request.
    """
    try:
        await source.seek(start)
        remaining = length
        while remaining > 0:
            chunk = await source.read(min(buffer_size, remaining))
            if not chunk:
                raise ShortReadError(f"Source ended with {remaining} of {length} bytes left to send")
            remaining -= len(chunk)
            yield chunk
    except Exception:
        logger.warning(f"Aborting stream window start={start} length={length}", exc_info=True)
        raise
    finally:
        await source.close()
