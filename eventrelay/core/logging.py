"""Logging for eventrelay.

All modules log through the shared ``logger`` defined here:

    from eventrelay.core.logging import logger

    logger.info(f"Dispatcher built transport '{backend}'")

    job_logger = logger.with_context(job="identify", actor_id=actor_id)
    job_logger.warning("Actor not found")

Context fields are appended to every message as ``key=value`` pairs so they
stay readable in plain-text handlers and can be parsed by log shippers.
"""

import logging
import sys
from typing import Any, MutableMapping, Optional

LOGGER_NAME = "eventrelay"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter carrying a fixed set of context fields and an optional prefix."""

    def __init__(
        self,
        base_logger: logging.Logger,
        extra: Optional[dict] = None,
        prefix: str = "",
    ) -> None:
        """Wrap ``base_logger`` with context ``extra`` and message ``prefix``."""
        super().__init__(base_logger, dict(extra or {}))
        self.prefix = prefix

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        """Prefix the message and append context fields."""
        message = f"{self.prefix}{msg}"
        if self.extra:
            fields = " ".join(f"{key}={value}" for key, value in self.extra.items())
            message = f"{message} [{fields}]"
        return message, kwargs

    def with_context(self, **fields: Any) -> "ContextualLogger":
        """Return a new logger with ``fields`` merged into the context."""
        return ContextualLogger(self.logger, {**self.extra, **fields}, self.prefix)

    def with_prefix(self, prefix: str) -> "ContextualLogger":
        """Return a new logger that prepends ``prefix`` to every message."""
        return ContextualLogger(self.logger, self.extra, prefix)


def configure_logging(level: str = "INFO", attach_handler: bool = False) -> None:
    """Set the package log level. Safe to call repeatedly.

    Records propagate to the host's handlers by default. With
    ``attach_handler`` the package logger gets its own stderr handler and
    stops propagating, so each line is written once.
    """
    base = logging.getLogger(LOGGER_NAME)
    base.setLevel(level.upper())
    if not attach_handler:
        return
    base.propagate = False
    if not any(getattr(h, "_eventrelay", False) for h in base.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._eventrelay = True  # type: ignore[attr-defined]
        base.addHandler(handler)


logger = ContextualLogger(logging.getLogger(LOGGER_NAME))
