from __future__ import annotations

from typing import AbstractSet

from stream_video.api.errors import RangeNotSatisfiable
from stream_video.api.errors import UnsupportedMediaType
from stream_video.reader.types import RequestContext


def validate(ctx: RequestContext, allowed_mime_types: AbstractSet[str]) -> None:
    """Reject files that must not be served and starts past the end of file.

    The requested end is not checked; the planner clamps it.
    """
    descriptor = ctx.file
    if descriptor.mime_type not in allowed_mime_types:
        raise UnsupportedMediaType(f"{descriptor.relative_path} has unsupported type {descriptor.mime_type}")

    if ctx.requested.start >= descriptor.size:
        raise RangeNotSatisfiable(
            f"Range start {ctx.requested.start} beyond size {descriptor.size} of {descriptor.relative_path}"
        )
