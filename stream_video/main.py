"""Main application module for the stream_video service."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi import Response
from fastapi.responses import JSONResponse

from stream_video.api.errors import StreamError
from stream_video.api.errors import stream_error_handler
from stream_video.api.middlewares.ray_id import ray_id_middleware
from stream_video.api.videos.get_video_endpoint import StreamPipeline
from stream_video.api.videos.router import router as videos_router
from stream_video.config import Config
from stream_video.config import get_config
from stream_video.logging_config import setup_loki_logging
from stream_video.reader.user_agent import RegexUserAgentClassifier
from stream_video.storage import FileSystemMediaStore


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """FastAPI application lifespan handler."""
    config: Config = app.state.config
    logger.info(
        f"Serving media from {config.storage_root} "
        f"first_chunk={config.first_chunk_size} chunk={config.chunk_size} "
        f"mime_types={sorted(config.allowed_mime_types)}"
    )
    yield
    logger.info("stream_video shut down")


def build_pipeline(config: Config) -> StreamPipeline:
    store = FileSystemMediaStore(config.storage_root)
    classifier = RegexUserAgentClassifier(config.legacy_browser_pattern)
    return StreamPipeline(config, store, classifier)


def factory(config: Optional[Config] = None) -> FastAPI:
    """Factory function to create and configure the FastAPI application."""
    load_dotenv()
    config = config or get_config()
    setup_loki_logging(config, "stream-video")

    app = FastAPI(
        title="Stream Video",
        description="Chunked byte-range delivery of media files",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
        debug=config.debug,
        default_response_class=Response,
    )
    app.state.config = config
    app.state.pipeline = build_pipeline(config)

    app.add_exception_handler(StreamError, stream_error_handler)

    # Registered last so it runs first
    app.middleware("http")(ray_id_middleware)

    @app.get("/robots.txt", include_in_schema=False)
    async def robots_txt() -> Response:
        """Serve robots.txt to prevent crawler indexing."""
        return Response(content="User-agent: *\nDisallow: /", media_type="text/plain")

    @app.get("/health", include_in_schema=False, response_class=JSONResponse)
    async def health() -> JSONResponse:
        """Health check endpoint for monitoring."""
        return JSONResponse(content={"status": "healthy"})

    app.include_router(videos_router, prefix="")

    return app


app = factory()


if __name__ == "__main__":
    import uvicorn

    cfg: Config = app.state.config
    uvicorn.run("stream_video.main:app", host=cfg.host, port=cfg.port, reload=cfg.debug, access_log=True)
