from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Optional


@dataclass(frozen=True)
class RequestedRange:
    start: int
    # None means the client left the end open ("bytes=500-")
    end: Optional[int] = None

    @property
    def end_unspecified(self) -> bool:
        return self.end is None


@dataclass(frozen=True)
class FileDescriptor:
    relative_path: str
    absolute_path: str
    name: str
    mime_type: str
    modified_at: float
    size: int


@dataclass(frozen=True)
class RequestContext:
    """Per-request state handed from the resolver to the later stages."""

    file: FileDescriptor
    requested: RequestedRange
    user_agent: str = ""


@dataclass(frozen=True)
class DeliveryPlan:
    stream_from: int
    # Inclusive
    stream_till: int
    is_partial: bool
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def content_length(self) -> int:
        return self.stream_till - self.stream_from + 1

    @property
    def status_code(self) -> int:
        return 206 if self.is_partial else 200
