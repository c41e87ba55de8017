"""Error handling."""

from handoff_agents.errors.exceptions import (
    AgentError,
    ConfigurationError,
    OperationAbortedError,
)

__all__ = [
    "AgentError",
    "ConfigurationError",
    "OperationAbortedError",
]
