"""
Logging for pagekit.

structlog events are handed to the standard library and rendered by one root handler,
so pagekit's own events and foreign records (playwright, asyncio) share a format.
The handler looks up sys.stderr on every write: test runners and CliRunner swap and
close that stream, and a handler holding an old one would fail on the next event.

Helpers log under `interaction(...)`, which binds the helper name and locator to every
event emitted inside it (polling, stale retries, driver warnings).
"""

from __future__ import annotations

import logging
import sys
from typing import ContextManager

import structlog

from .settings import Settings, settings as default_settings

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


class _StderrHandler(logging.StreamHandler):
    """StreamHandler bound to the current sys.stderr rather than the one at setup."""

    @property
    def stream(self):  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, _value) -> None:
        pass


def configure_logging(cfg: Settings | None = None) -> None:
    """Configure structlog and the root handler. Safe to call more than once."""
    cfg = cfg or default_settings
    log_level = getattr(logging, cfg.log_level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_SHARED_PROCESSORS,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor = (
        # pretty print while debugging, JSON otherwise
        structlog.dev.ConsoleRenderer() if cfg.debug else structlog.processors.JSONRenderer()
    )
    handler = _StderrHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=_SHARED_PROCESSORS,
        )
    )

    root = logging.getLogger()
    for old in [h for h in root.handlers if isinstance(h, _StderrHandler)]:
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger named after the calling module."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


def interaction(action: str, locator: str | None) -> ContextManager[None]:
    """Bind `helper` and `locator` to every event logged inside the block."""
    return structlog.contextvars.bound_contextvars(helper=action, locator=locator)
