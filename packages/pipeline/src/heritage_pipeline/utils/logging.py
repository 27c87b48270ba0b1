"""
utils/logging.py — structlog setup shared by the sync pipeline, CLI and API.

Events are snake_case (city_sync_start, batch_failed, pagination_cap_reached)
with context bound per call site: city, dataset_id, source_name, table.
JSON output keeps CJK text unescaped so 台北市 stays searchable in log storage.

configure_logging() is called by the CLI (with explicit overrides), by
create_app(), and by pipelines.unclaimed_lands.run(). The first call wins;
later calls without arguments leave the existing setup alone, so a run
started from the CLI keeps the CLI's --log-level / --log-format.

Usage:
    from heritage_pipeline.utils.logging import configure_logging, get_logger

    configure_logging()
    log = get_logger(__name__, pipeline="unclaimed_lands")
    log.bind(city="嘉義縣").info("records_prepared", normalized=812)
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from heritage_shared.config import settings

_active: tuple[str, str] | None = None


def _level_number(name: str) -> int:
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(
    log_level: str | None = None,
    log_format: str | None = None,
) -> None:
    """
    Install the structlog processor chain.

    Args:
        log_level:  "DEBUG", "INFO", ... (default settings.log_level).
        log_format: "json" or "console" (default settings.log_format).
    """
    global _active

    explicit = log_level is not None or log_format is not None
    if _active is not None and not explicit:
        return

    level = (log_level or settings.log_level).upper()
    fmt = (log_format or settings.log_format).lower()
    if _active == (level, fmt):
        return

    # httpx logs every request at INFO through stdlib logging
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=_level_number(level))
    logging.getLogger("httpx").setLevel(max(_level_number(level), logging.WARNING))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _renderer(fmt),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    _active = (level, fmt)


def get_logger(name: str, **context: Any) -> structlog.typing.FilteringBoundLogger:
    """
    Logger named after the module, with optional initial context.

    The context is held by the lazy proxy rather than bound, so module-level
    loggers pick up configure_logging() even when created at import time.
    """
    return structlog.get_logger(name, **context)
