from __future__ import annotations

import logging as py_logging
from typing import Optional

import structlog

from owm_exporter.config import LoggingConfig

SERVICE_NAME = "owm-exporter"

_configured = False


def setup_logging(config: Optional[LoggingConfig] = None, *, force: bool = False) -> None:
    """Configure structlog once; ``force`` re-applies a config loaded later (CLI)."""
    global _configured
    if _configured and not force:
        return

    config = config or LoggingConfig()
    level = getattr(py_logging, str(config.level).upper(), py_logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer() if config.json else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=SERVICE_NAME)

    py_logging.basicConfig(level=level, format="%(message)s", force=force)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        py_logging.getLogger(name).setLevel(level)
    _configured = True


def get_logger(name: str = __name__):
    if not _configured:
        setup_logging()
    return structlog.get_logger(name)
