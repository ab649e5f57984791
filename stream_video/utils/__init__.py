"""Utility modules and functions for stream_video."""

from stream_video.utils.timing import TransferStats  # noqa: F401
from stream_video.utils.timing import transfer_timer  # noqa: F401
from stream_video.utils_core import env  # noqa: F401
from stream_video.utils_core import parse_bool  # noqa: F401
from stream_video.utils_core import parse_csv_set  # noqa: F401


__all__ = [
    "env",
    "parse_bool",
    "parse_csv_set",
    "TransferStats",
    "transfer_timer",
]
