from __future__ import annotations

from fastapi import APIRouter
from fastapi import Request
from fastapi import Response

from stream_video.api.videos.get_video_endpoint import handle_get_video


router = APIRouter(tags=["videos"])


@router.get("/videos/{relative_path:path}")
async def get_video(relative_path: str, request: Request) -> Response:
    return await handle_get_video(relative_path, request)
