from typing import Awaitable
from typing import Callable

from fastapi import Request
from fastapi import Response

from stream_video.services.ray_id_service import generate_ray_id
from stream_video.services.ray_id_service import get_logger_with_ray_id
from stream_video.services.ray_id_service import ray_id_context


RAY_ID_HEADER = "X-Stream-Ray-ID"


async def ray_id_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Tag the request with a fresh ray id.

    The id goes into the logging contextvar, onto request.state together with
    a logger bound to the request path and Range header, and back to the client
    in the X-Stream-Ray-ID header. Error responses carry it too.

    Registered last in main.py so it runs first.
    """
    ray_id = generate_ray_id()
    ray_id_context.set(ray_id)
    request.state.ray_id = ray_id
    request.state.logger = get_logger_with_ray_id(
        "stream_video.request",
        ray_id,
        path=request.url.path,
        range=request.headers.get("range", ""),
    )

    response = await call_next(request)
    response.headers[RAY_ID_HEADER] = ray_id
    return response
