import logging
import os
import sys
from typing import Protocol

from loki_logger_handler.loki_logger_handler import LokiLoggerHandler

from stream_video.services.ray_id_service import ray_id_context


LOG_FORMAT = "%(asctime)s - [%(ray_id)s] - %(name)s - %(levelname)s - %(message)s"


class LoggingConfig(Protocol):
    log_level: str
    loki_enabled: bool
    loki_url: str
    environment: str


class RayIDFilter(logging.Filter):
    """Fill in ray_id from the contextvar when a record has none, so LOG_FORMAT always renders."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "ray_id"):
            record.ray_id = ray_id_context.get()
        return True


def build_loki_handler(config: LoggingConfig, service_name: str) -> logging.Handler:
    return LokiLoggerHandler(
        url=config.loki_url,
        labels={
            "service": service_name,
            "environment": config.environment,
            "host": os.getenv("HOSTNAME", "unknown"),
        },
        timeout=10,
        compressed=True,
    )


def setup_loki_logging(config: LoggingConfig, service_name: str) -> logging.Logger:
    """Configure root logging: stdout always, Loki when enabled and a URL is set.

    Calling it again (one app per test) leaves the first configuration in place.

    Returns:
        The service logger
    """
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if config.loki_enabled and config.loki_url:
        handlers.append(build_loki_handler(config, service_name))

    ray_id_filter = RayIDFilter()
    for handler in handlers:
        handler.addFilter(ray_id_filter)

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)

    service_logger = logging.getLogger(service_name)
    if config.loki_enabled and not config.loki_url:
        service_logger.warning("LOKI_ENABLED is set but LOKI_URL is empty; logging to stdout only")
    return service_logger
