"""Terminal errors of the streaming pipeline and their HTTP responses."""

from fastapi import Request
from fastapi import Response


class StreamError(Exception):
    """Base class for errors that terminate a streaming request.

    Every subclass maps to one HTTP status; responses carry no body.
    """

    code = "StreamError"
    status_code = 500

    def __init__(self, message: str = ""):
        self.message = message or f"Stream error: {self.code}"
        super().__init__(self.message)


class BadRequest(StreamError):
    code = "BadRequest"
    status_code = 400


class NotFound(StreamError):
    code = "NotFound"
    status_code = 404


class UnsupportedMediaType(StreamError):
    # Reported as a plain 400, not 415
    code = "UnsupportedMediaType"
    status_code = 400


class RangeNotSatisfiable(StreamError):
    code = "RangeNotSatisfiable"
    status_code = 416


class InternalError(StreamError):
    code = "InternalError"
    status_code = 500


def stream_error_response(error: StreamError) -> Response:
    """Build the empty-bodied response committed for a terminal error."""
    return Response(status_code=error.status_code, headers={"Content-Length": "0"})


async def stream_error_handler(request: Request, exc: Exception) -> Response:
    if not isinstance(exc, StreamError):
        raise exc
    logger = getattr(request.state, "logger", None)
    if logger is not None:
        logger.info(f"Request rejected code={exc.code} status={exc.status_code} reason={exc.message}")
    return stream_error_response(exc)
