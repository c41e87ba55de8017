"""Custom exception hierarchy for the delegation framework."""

from __future__ import annotations

from typing import Any, ClassVar


class AgentError(Exception):
    """Base exception for all framework errors.

    All custom exceptions in this framework inherit from this class,
    allowing for easy catching of all agent-related errors.

    Attributes:
        message: Human-readable error message.
        cause: Original exception that caused this error.
        details: Additional error context as key-value pairs.

    Details can be accessed as attributes (e.g., error.config_key).
    """

    # Map attribute names to default values when not in details
    _defaults: ClassVar[dict[str, Any]] = {}

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
        **details: Any,
    ) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
            cause: Original exception that caused this error.
            **details: Additional error context.
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details

    def __getattr__(self, name: str) -> Any:
        """Access details as attributes."""
        if name in ("details", "message", "cause"):
            raise AttributeError(name)
        if name in self.details:
            return self.details[name]
        if name in self._defaults:
            return self._defaults[name]
        raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

    def __str__(self) -> str:
        """Return string representation."""
        if self.cause:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


class ConfigurationError(AgentError):
    """Error in framework configuration.

    Raised when settings are invalid, a config file cannot be read, or a
    worker target is assembled from incompatible pieces.

    Attributes from details: config_key, expected, actual.
    """


class OperationAbortedError(AgentError):
    """A running operation was aborted through its abort signal.

    Raised by workers when the parent operation context's ``abort_signal``
    is set while a generation is in flight.

    Attributes from details: worker_name.
    """
