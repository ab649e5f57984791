"""Transfer timing for streamed response bodies."""

from __future__ import annotations

import dataclasses
import logging
import time
from contextlib import asynccontextmanager
from typing import Any
from typing import AsyncGenerator


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class TransferStats:
    planned_bytes: int
    bytes_sent: int = 0
    started: float = dataclasses.field(default_factory=time.perf_counter)
    duration_ms: float = 0.0

    @property
    def complete(self) -> bool:
        return self.bytes_sent >= self.planned_bytes

    @property
    def mib_per_second(self) -> float:
        if self.duration_ms <= 0:
            return 0.0
        return (self.bytes_sent / (1024 * 1024)) / (self.duration_ms / 1000.0)


@asynccontextmanager
async def transfer_timer(
    operation: str,
    planned_bytes: int,
    *,
    log_threshold_ms: float = 0.0,
    extra: dict[str, Any] | None = None,
) -> AsyncGenerator[TransferStats, None]:
    """Time a body transfer and log its throughput on exit.

    The caller adds to ``bytes_sent`` as chunks go out. A transfer that ends
    short (client gone, read error) is always logged, whatever its duration.

    Example:
        async with transfer_timer("stream_window", 4096, extra={"file": name}) as stats:
            async for chunk in stream_window(source, 0, 4096):
                stats.bytes_sent += len(chunk)
                yield chunk
        # Logs: "TIMING stream_window duration_ms=42.30 bytes=4096/4096 mib_s=0.09 file=clip.mp4"
    """
    stats = TransferStats(planned_bytes=planned_bytes)
    try:
        yield stats
    finally:
        stats.duration_ms = (time.perf_counter() - stats.started) * 1000.0
        if not stats.complete or stats.duration_ms >= log_threshold_ms:
            extra_str = " ".join(f"{k}={v}" for k, v in (extra or {}).items())
            level = logging.INFO if stats.complete else logging.WARNING
            logger.log(
                level,
                f"TIMING {operation} duration_ms={stats.duration_ms:.2f} "
                f"bytes={stats.bytes_sent}/{stats.planned_bytes} mib_s={stats.mib_per_second:.2f} {extra_str}".strip(),
            )
