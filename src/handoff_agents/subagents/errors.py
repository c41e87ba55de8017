"""Subagent subsystem exceptions."""

from __future__ import annotations


class SubagentError(Exception):
    """Base exception for all subagent-related errors.

    All custom exceptions in the subagents subsystem inherit from this class,
    allowing callers to catch all subagent errors with a single handler.

    Attributes:
        message: Human-readable error message.
    """

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{type(self).__name__}({self.message!r})"


class DelegationValidationError(SubagentError):
    """Raised when delegate-tool input is rejected before any worker runs.

    Attributes:
        available: Names of the registered workers, when relevant.
    """

    def __init__(self, message: str, available: list[str] | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error message.
            available: Names of the registered workers, when relevant.
        """
        self.available = list(available) if available is not None else None
        super().__init__(message)

    def __reduce__(self) -> tuple:
        """Support pickling with custom constructor arguments."""
        return (type(self), (self.message, self.available))


class SubagentNotFoundError(SubagentError):
    """Raised when a worker id or name is not registered.

    Attributes:
        worker_name: Id or name that was looked up.
        available: Registered worker names, if known.
    """

    def __init__(
        self,
        worker_name: str,
        available: list[str] | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            worker_name: Id or name that was looked up.
            available: Registered worker names, if known.
        """
        self.worker_name = worker_name
        self.available = list(available) if available is not None else None
        available_str = ""
        if self.available is not None:
            available_str = f" Available agents: {', '.join(self.available)}"
        super().__init__(f"Sub-agent '{worker_name}' not found.{available_str}")

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{type(self).__name__}(worker_name={self.worker_name!r}, available={self.available!r})"
        )

    def __reduce__(self) -> tuple:
        """Support pickling with custom constructor arguments."""
        return (type(self), (self.worker_name, self.available))


class SubagentSchemaError(SubagentError):
    """Raised when an object generation method is used without a schema.

    Attributes:
        name: Name of the worker.
        method: The generation method that needed a schema.
    """

    def __init__(self, name: str, method: str) -> None:
        """Initialize the error.

        Args:
            name: Name of the worker.
            method: The generation method that needed a schema.
        """
        self.name = name
        self.method = method
        super().__init__(f"Schema is required for method '{method}' on sub-agent '{name}'")

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"{type(self).__name__}(name={self.name!r}, method={self.method!r})"

    def __reduce__(self) -> tuple:
        """Support pickling with custom constructor arguments."""
        return (type(self), (self.name, self.method))
