"""Request resolution: client path and Range header to a request context."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import unquote

from stream_video.api.errors import BadRequest
from stream_video.api.errors import NotFound
from stream_video.reader.types import RequestContext
from stream_video.reader.types import RequestedRange
from stream_video.storage import FileSystemMediaStore
from stream_video.storage import PathOutsideRootError


logger = logging.getLogger(__name__)

PARENT_DIR_TOKEN = "../"


def sanitize_relative_path(raw_path: str) -> str:
    """Decode a client path and strip traversal segments.

    Removal of "../" is a single pass: a token produced by the removal itself
    survives (e.g. "..././" becomes "../"). FileSystemMediaStore.locate still
    confines the final path to the storage root.
    """
    decoded = unquote(raw_path)
    stripped = decoded.replace(PARENT_DIR_TOKEN, "")
    return "/" + stripped.strip("./")


def _is_decimal(value: str) -> bool:
    return value.isascii() and value.isdigit()


def parse_range_header(range_header: Optional[str]) -> RequestedRange:
    """Parse ``bytes=<start>-<end>`` into a RequestedRange.

    An empty end is kept as None; a non-numeric one is rejected.
    """
    if not range_header or "bytes=" not in range_header:
        raise BadRequest(f"Missing or malformed Range header: {range_header!r}")

    byte_range = range_header.split("=", 1)[1].strip()
    start_s, sep, end_s = byte_range.partition("-")
    start_s = start_s.strip()
    end_s = end_s.strip()

    if not sep or not _is_decimal(start_s):
        raise BadRequest(f"Invalid range start: {range_header!r}")
    if end_s and not _is_decimal(end_s):
        raise BadRequest(f"Invalid range end: {range_header!r}")

    return RequestedRange(start=int(start_s), end=int(end_s) if end_s else None)


async def resolve(
    store: FileSystemMediaStore,
    raw_path: str,
    range_header: Optional[str],
    user_agent: Optional[str] = None,
) -> RequestContext:
    """Resolve the requested file and range.

    Raises:
        BadRequest: missing or malformed Range header
        NotFound: the path does not name a regular file inside the storage root
    """
    requested = parse_range_header(range_header)
    relative_path = sanitize_relative_path(raw_path)

    try:
        path = store.locate(relative_path)
    except PathOutsideRootError as e:
        logger.warning(f"Rejected path escaping storage root: {raw_path!r}")
        raise NotFound(str(e)) from e

    if not await store.is_file(path):
        raise NotFound(f"No such file: {relative_path}")

    try:
        descriptor = await store.probe(relative_path, path)
    except OSError as e:
        raise NotFound(f"File vanished while probing: {relative_path}") from e

    logger.debug(
        f"Resolved {relative_path} size={descriptor.size} mime={descriptor.mime_type} "
        f"range={requested.start}-{'' if requested.end is None else requested.end}"
    )
    return RequestContext(file=descriptor, requested=requested, user_agent=user_agent or "")
