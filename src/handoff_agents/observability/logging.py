"""Logger setup for the ``handoff_agents`` namespace."""

from __future__ import annotations

import json
import logging
import re
from datetime import UTC, datetime
from typing import Any

from handoff_agents.config.logging_config import LoggingConfig

ROOT_LOGGER_NAME = "handoff_agents"

_SENSITIVE_PATTERNS = [
    re.compile(r"(sk-[A-Za-z0-9_\-]{8,})"),
    re.compile(r"((?:api[_-]?key|token|secret|password)\s*[=:]\s*)([^\s,'\"]+)", re.IGNORECASE),
]

# Attributes present on every LogRecord; anything else came from ``extra=``.
_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class SensitiveDataFilter(logging.Filter):
    """Mask API keys and secrets in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def _redact(text: str) -> str:
    text = _SENSITIVE_PATTERNS[0].sub("[REDACTED]", text)
    return _SENSITIVE_PATTERNS[1].sub(lambda m: f"{m.group(1)}[REDACTED]", text)


class StructuredFormatter(logging.Formatter):
    """Render each record as a single JSON object.

    Fields passed through ``extra=`` (for example ``sub_agent_id``) are
    included next to the standard ``timestamp``/``level``/``logger``/``message``
    keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Configure the ``handoff_agents`` logger.

    Replaces any handler previously installed by this function, so calling
    it again with a new config is safe.

    Args:
        config: Logging configuration. Defaults to ``LoggingConfig()``.

    Returns:
        The configured package logger.
    """
    config = config or LoggingConfig()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(config.level)

    for handler in list(logger.handlers):
        if getattr(handler, "_handoff_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._handoff_handler = True  # type: ignore[attr-defined]
    if config.structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(config.format))
    if config.redact_sensitive:
        handler.addFilter(SensitiveDataFilter())

    logger.addHandler(handler)
    return logger
