import dataclasses
import os

import dotenv

from stream_video.utils import env
from stream_video.utils import parse_bool
from stream_video.utils import parse_csv_set


dotenv.load_dotenv()


# Desktop Safari (Version/10 and later) refuses a 206 answer to its first probe request.
# Pattern from https://regex101.com/r/gRLirS/1
SAFARI_BROWSER_PATTERN = r"(\s|^)AppleWebKit/[\d\.]+\s+\(.+\)\s+Version/(1[0-9]|[2-9][0-9]|\d{3,})(\.|$|\s)"


@dataclasses.dataclass(frozen=True)
class Config:
    """Application configuration settings."""

    # Storage, kept outside any publicly served document root
    storage_root: str = env("STREAM_STORAGE_ROOT:/var/www/videos")
    allowed_mime_types: frozenset[str] = env(
        "STREAM_ALLOWED_MIME_TYPES:video/mp4,video/quicktime,video/webm", convert=parse_csv_set
    )

    # Delivery policy
    cache_duration_seconds: int = env("STREAM_CACHE_DURATION_SECONDS:604800", convert=int)  # 7 days
    first_chunk_size: int = env("STREAM_FIRST_CHUNK_SIZE:131072", convert=int)  # 128 KiB
    chunk_size: int = env("STREAM_CHUNK_SIZE:4194304", convert=int)  # 4 MiB
    # Size of each read while copying a window to the client
    read_buffer_size: int = env("STREAM_READ_BUFFER_SIZE:65536", convert=int)
    legacy_browser_pattern: str = env("STREAM_LEGACY_BROWSER_PATTERN:" + SAFARI_BROWSER_PATTERN)

    # Logging
    log_level: str = env("LOG_LEVEL:INFO")
    loki_url: str = env("LOKI_URL:", convert=str)
    loki_enabled: bool = env("LOKI_ENABLED:false", convert=parse_bool)

    # Server Configuration
    host: str = env("HOST:0.0.0.0")
    port: int = env("PORT:8000", convert=int)
    environment: str = env("ENVIRONMENT:development")
    debug: bool = env("DEBUG:false", convert=parse_bool)


def get_config(**overrides: object) -> Config:
    """Get application configuration.

    Keyword overrides take precedence over the environment.
    """
    cfg = Config(**overrides)  # type: ignore[arg-type]

    if not cfg.storage_root or not cfg.storage_root.strip():
        raise ValueError("STREAM_STORAGE_ROOT is required but not set or empty")
    object.__setattr__(cfg, "storage_root", os.path.realpath(os.path.expanduser(cfg.storage_root.strip())))

    if isinstance(cfg.allowed_mime_types, str):
        object.__setattr__(cfg, "allowed_mime_types", parse_csv_set(cfg.allowed_mime_types))
    else:
        object.__setattr__(cfg, "allowed_mime_types", frozenset(cfg.allowed_mime_types))
    if not cfg.allowed_mime_types:
        raise ValueError("STREAM_ALLOWED_MIME_TYPES must list at least one MIME type")

    for name in ("first_chunk_size", "chunk_size", "read_buffer_size"):
        if int(getattr(cfg, name)) <= 0:
            raise ValueError(f"{name} must be positive, got {getattr(cfg, name)}")
    if cfg.cache_duration_seconds < 0:
        raise ValueError(f"cache_duration_seconds must not be negative, got {cfg.cache_duration_seconds}")

    return cfg
