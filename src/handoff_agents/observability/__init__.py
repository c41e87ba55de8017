"""Logging utilities.

Exports:
- setup_logging: Configure the package logger from a ``LoggingConfig``
- StructuredFormatter: JSON log formatter
- SensitiveDataFilter: Redacts API keys and secrets
"""

from handoff_agents.observability.logging import (
    SensitiveDataFilter,
    StructuredFormatter,
    setup_logging,
)

__all__ = [
    "SensitiveDataFilter",
    "StructuredFormatter",
    "setup_logging",
]
