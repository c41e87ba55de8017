"""Logging configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class LoggingConfig(BaseModel):
    """Configuration for the framework's loggers.

    Attributes:
        level: Log level applied to the ``handoff_agents`` logger.
        structured: Emit one JSON object per record instead of plain text.
        format: Format string used when ``structured`` is False.
        redact_sensitive: Mask API keys and tokens in log messages.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    structured: bool = Field(
        default=False,
        description="Use JSON structured logging",
    )
    format: str = Field(
        default="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        description="Log format string for plain output",
    )
    redact_sensitive: bool = Field(
        default=True,
        description="Redact API keys and secrets from log output",
    )
