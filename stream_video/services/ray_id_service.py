"""Per-request correlation ids for log lines and response headers."""

import contextvars
import logging
import uuid
from typing import Any
from typing import MutableMapping
from typing import Optional


NO_RAY_ID = "no-ray-id"

ray_id_context: contextvars.ContextVar[str] = contextvars.ContextVar("ray_id", default=NO_RAY_ID)


def generate_ray_id() -> str:
    """Return a 16 character lowercase hex id, e.g. "a1b2c3d4e5f67890"."""
    return uuid.uuid4().hex[:16]


class RayIDLoggerAdapter(logging.LoggerAdapter):
    """Attach the ray id and fixed request fields (path, range) to every record.

    Fields passed per call in ``extra`` win over the bound ones.
    """

    def __init__(self, logger: logging.Logger, ray_id: Optional[str] = None, **fields: Any):
        super().__init__(logger, {**fields, "ray_id": ray_id or NO_RAY_ID})

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger_with_ray_id(name: str, ray_id: Optional[str] = None, **fields: Any) -> RayIDLoggerAdapter:
    return RayIDLoggerAdapter(logging.getLogger(name), ray_id, **fields)
