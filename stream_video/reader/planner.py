"""Pure planning logic for chunked delivery.

No IO; deterministic mapping from file metadata, the requested range and the
client classification to the byte window and headers of one response.
"""

from __future__ import annotations

import time
from datetime import datetime
from datetime import timezone
from typing import Optional
from typing import Protocol

from stream_video.reader.types import DeliveryPlan
from stream_video.reader.types import RequestContext
from stream_video.reader.user_agent import UserAgentClassifier


HTTP_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S GMT"

# Browsers probe with "bytes=0-" or "bytes=0-1" before playback starts
PROBE_RANGE_END = 1


class DeliverySettings(Protocol):
    cache_duration_seconds: int
    first_chunk_size: int
    chunk_size: int


def http_date(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(HTTP_DATE_FORMAT)


def build_base_headers(ctx: RequestContext, cache_duration_seconds: int, now: float) -> dict[str, str]:
    descriptor = ctx.file
    return {
        "Content-Type": descriptor.mime_type,
        "Cache-Control": f"max-age={cache_duration_seconds}, public",
        "Expires": http_date(now + cache_duration_seconds),
        "Last-Modified": http_date(descriptor.modified_at),
        "Accept-Ranges": f"0-{descriptor.size - 1}",
    }


def is_probe_request(ctx: RequestContext) -> bool:
    requested = ctx.requested
    return requested.start == 0 and (requested.end_unspecified or requested.end == PROBE_RANGE_END)


def plan_delivery(
    ctx: RequestContext,
    settings: DeliverySettings,
    classifier: UserAgentClassifier,
    now: Optional[float] = None,
) -> DeliveryPlan:
    """Compute the byte window and headers for one response.

    Args:
        ctx: Validated request context (start < size)
        settings: Cache duration and chunk sizes
        classifier: Decides whether the client needs a full 200 on its probe request
        now: Clock value for Expires; defaults to the current time

    Returns:
        DeliveryPlan with inclusive stream_from/stream_till, never past size - 1.
    """
    size = ctx.file.size
    stream_from = ctx.requested.start
    headers = build_base_headers(ctx, settings.cache_duration_seconds, time.time() if now is None else now)

    quantum = settings.first_chunk_size if stream_from == 0 else settings.chunk_size

    if is_probe_request(ctx):
        if classifier.is_legacy_browser(ctx.user_agent):
            # Whole file as a plain 200; these clients stall on a 206 here
            headers["Content-Length"] = str(size)
            return DeliveryPlan(stream_from=0, stream_till=size - 1, is_partial=False, headers=headers)
        stream_till = min(quantum, size) - 1
    else:
        stream_till = min(stream_from + quantum - 1, size - 1)

    plan = DeliveryPlan(stream_from=stream_from, stream_till=stream_till, is_partial=True, headers=headers)
    headers["Content-Length"] = str(plan.content_length)
    headers["Content-Range"] = f"bytes {stream_from}-{stream_till}/{size}"
    return plan
