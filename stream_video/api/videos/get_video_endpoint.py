from __future__ import annotations

import logging
from typing import AsyncGenerator
from typing import Optional

from fastapi import Request
from fastapi import Response
from fastapi.responses import StreamingResponse
from opentelemetry import trace
from starlette.background import BackgroundTask

from stream_video.config import Config
from stream_video.reader import planner
from stream_video.reader import resolver
from stream_video.reader import validator
from stream_video.reader.streamer import open_source
from stream_video.reader.streamer import stream_window
from stream_video.reader.types import DeliveryPlan
from stream_video.reader.types import RequestContext
from stream_video.reader.user_agent import UserAgentClassifier
from stream_video.storage import FileSystemMediaStore
from stream_video.utils import transfer_timer


logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class StreamPipeline:
    """Resolve, validate, plan and stream one ranged request.

    Holds only immutable collaborators; all per-request state lives in the
    RequestContext and DeliveryPlan values passed between stages.
    """

    def __init__(self, config: Config, store: FileSystemMediaStore, classifier: UserAgentClassifier) -> None:
        self.config = config
        self.store = store
        self.classifier = classifier

    async def prepare(
        self,
        raw_path: str,
        range_header: Optional[str],
        user_agent: Optional[str],
        now: Optional[float] = None,
    ) -> tuple[RequestContext, DeliveryPlan]:
        """Run the resolver, validator and planner stages.

        Raises:
            StreamError: any terminal error detected by a stage
        """
        with tracer.start_as_current_span("stream.resolve", attributes={"stream.raw_path": raw_path}) as span:
            ctx = await resolver.resolve(self.store, raw_path, range_header, user_agent)
            span.set_attribute("stream.size_bytes", ctx.file.size)
            span.set_attribute("stream.mime_type", ctx.file.mime_type)

        with tracer.start_as_current_span("stream.validate"):
            validator.validate(ctx, self.config.allowed_mime_types)

        with tracer.start_as_current_span("stream.plan") as span:
            plan = planner.plan_delivery(ctx, self.config, self.classifier, now=now)
            span.set_attribute("stream.status_code", plan.status_code)
            span.set_attribute("stream.content_length", plan.content_length)

        return ctx, plan

    async def respond(
        self,
        raw_path: str,
        range_header: Optional[str],
        user_agent: Optional[str],
    ) -> Response:
        ctx, plan = await self.prepare(raw_path, range_header, user_agent)

        # Opened before the StreamingResponse exists so a failure can still become a 500
        source = await open_source(ctx.file.absolute_path)

        logger.info(
            f"Streaming {ctx.file.relative_path} status={plan.status_code} "
            f"bytes={plan.stream_from}-{plan.stream_till}/{ctx.file.size}"
        )
        return StreamingResponse(
            self._body(ctx, plan, source),
            status_code=plan.status_code,
            headers=plan.headers,
            media_type=ctx.file.mime_type,
            # Covers a disconnect before the body iterator ever starts
            background=BackgroundTask(source.close),
        )

    async def _body(self, ctx: RequestContext, plan: DeliveryPlan, source: object) -> AsyncGenerator[bytes, None]:
        async with transfer_timer(
            "stream_window",
            plan.content_length,
            log_threshold_ms=1000.0,
            extra={"file": ctx.file.name, "from": plan.stream_from, "status": plan.status_code},
        ) as stats:
            async for chunk in stream_window(
                source,
                plan.stream_from,
                plan.content_length,
                buffer_size=self.config.read_buffer_size,
            ):
                stats.bytes_sent += len(chunk)
                yield chunk


async def handle_get_video(relative_path: str, request: Request) -> Response:
    """Isolated GET video endpoint handler."""
    pipeline: StreamPipeline = request.app.state.pipeline
    range_header = request.headers.get("range")
    user_agent = request.headers.get("user-agent")
    logger.debug(f"GET start {relative_path} range={range_header!r}")
    return await pipeline.respond(relative_path, range_header, user_agent)
