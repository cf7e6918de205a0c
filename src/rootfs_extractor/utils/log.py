"""Logging setup and the periodic handler flush task."""

import asyncio
import logging

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
FLUSH_INTERVAL = 1.0


def setup_logging(level: int = logging.INFO, fmt: str = LOG_FORMAT) -> None:
    """Configure root logging to stderr, replacing any earlier setup."""
    logging.basicConfig(level=level, format=fmt, force=True)


def flush_log_handlers() -> None:
    """Flush every handler attached to the root logger."""
    for handler in logging.getLogger().handlers:
        handler.flush()


async def periodic_flush(interval: float = FLUSH_INTERVAL) -> None:
    """Flush log handlers every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        flush_log_handlers()


def start_periodic_flush(interval: float = FLUSH_INTERVAL) -> asyncio.Task:
    """Schedule :func:`periodic_flush` as a background task on the running loop."""
    return asyncio.ensure_future(periodic_flush(interval))
