"""Subagent data models and configuration."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from handoff_agents.errors.exceptions import ConfigurationError
from handoff_agents.tokens.tracker import TokenUsage
from handoff_agents.workers.base import Message, Worker
from handoff_agents.workers.events import EventSink

DYNAMIC_INSTRUCTIONS_PLACEHOLDER = "Dynamic instructions"


class DelegationMethod(Enum):
    """Generation method used when a task is delegated to a worker.

    Attributes:
        DEFAULT_STREAM: Used for bare workers; behaves as ``STREAM_TEXT``.
        STREAM_TEXT: Stream text and relay events to the event sink.
        GENERATE_TEXT: Single blocking text generation.
        STREAM_OBJECT: Stream partial objects, keep the last one.
        GENERATE_OBJECT: Single blocking structured generation.
    """

    DEFAULT_STREAM = "default_stream"
    STREAM_TEXT = "stream_text"
    GENERATE_TEXT = "generate_text"
    STREAM_OBJECT = "stream_object"
    GENERATE_OBJECT = "generate_object"

    @property
    def requires_schema(self) -> bool:
        return self in (DelegationMethod.STREAM_OBJECT, DelegationMethod.GENERATE_OBJECT)


class DelegationStatus(str, Enum):
    """Outcome of a single delegation."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class WorkerConfig:
    """A worker paired with an explicit generation method.

    Attributes:
        worker: The worker to delegate to.
        method: Generation method to call.
        schema: Output type for object methods (e.g. a pydantic model).
        options: Provider options merged over the delegation defaults.
    """

    worker: Worker
    method: DelegationMethod = DelegationMethod.STREAM_TEXT
    schema: type[Any] | None = None
    options: Mapping[str, Any] | None = None


# A delegation target is either a bare worker or a configured one.
WorkerTarget = Worker | WorkerConfig


def create_subagent(
    worker: Worker,
    method: DelegationMethod | str = DelegationMethod.STREAM_TEXT,
    *,
    schema: type[Any] | None = None,
    options: Mapping[str, Any] | None = None,
) -> WorkerConfig:
    """Create a worker target with a specific generation method.

    Example::

        create_subagent(writer, "generate_object", schema=Outline)

    Args:
        worker: The worker to delegate to.
        method: Generation method, as an enum member or its value.
        schema: Output type, needed for object methods.
        options: Provider options for this worker.

    Returns:
        A ``WorkerConfig`` usable wherever a worker target is accepted.

    Raises:
        ConfigurationError: If ``method`` is not a known delegation method.
    """
    try:
        resolved_method = DelegationMethod(method)
    except ValueError as e:
        raise ConfigurationError(
            f"Unknown delegation method: {method!r}",
            cause=e,
            config_key="method",
            expected=[m.value for m in DelegationMethod],
            actual=method,
        ) from e

    return WorkerConfig(
        worker=worker,
        method=resolved_method,
        schema=schema,
        options=options,
    )


@dataclass(frozen=True)
class WorkerDescriptor:
    """Normalized delegation target.

    Identity fields are read from the live worker on every access, so a
    worker whose instructions change between calls is always described
    accurately.

    Attributes:
        worker: The live worker.
        method: Generation method to call.
        schema: Output type for object methods.
        options: Provider options for this worker.
    """

    worker: Worker
    method: DelegationMethod = DelegationMethod.DEFAULT_STREAM
    schema: type[Any] | None = None
    options: Mapping[str, Any] | None = None

    @property
    def worker_id(self) -> str:
        return self.worker.id

    @property
    def worker_name(self) -> str:
        return self.worker.name

    @property
    def instructions(self) -> Any:
        return getattr(self.worker, "instructions", None)

    @property
    def purpose(self) -> str:
        """Explicit purpose, else string instructions, else a placeholder."""
        purpose = getattr(self.worker, "purpose", None)
        if purpose:
            return purpose
        if isinstance(self.instructions, str):
            return self.instructions
        return DYNAMIC_INSTRUCTIONS_PLACEHOLDER


@dataclass
class OperationContext:
    """Context of the supervisor operation that triggered a delegation.

    Attributes:
        operation_id: Id of the parent operation.
        user_id: User the operation runs for.
        conversation_id: Conversation of the parent operation.
        abort_signal: Set to ask workers to stop generating.
        logger: Logger used for delegation errors instead of the module logger.
    """

    operation_id: str | None = None
    user_id: str | None = None
    conversation_id: str | None = None
    abort_signal: asyncio.Event | None = None
    logger: logging.Logger | None = None


@dataclass
class DelegationRequest:
    """One delegation attempt against one resolved worker.

    Attributes:
        task: The task text.
        target: Resolved target worker.
        source_agent: The agent handing the task off, if any.
        conversation_id: Correlation id shared across a fan-out batch.
        shared_context: Messages prepended before the task message.
        context: Free-form context serialized into the task message.
        user_id: User the delegation runs for.
        parent_agent_id: Id of the delegating agent when no source agent is given.
        parent_history_entry_id: History entry of the parent operation.
        parent_operation_context: The parent's operation context.
        max_steps: Step budget passed to the worker.
        event_sink: Receives relabelled stream events.
    """

    task: str
    target: WorkerDescriptor
    source_agent: Any = None
    conversation_id: str | None = None
    shared_context: list[Message] = field(default_factory=list)
    context: Mapping[Any, Any] | None = None
    user_id: str | None = None
    parent_agent_id: str | None = None
    parent_history_entry_id: str | None = None
    parent_operation_context: OperationContext | None = None
    max_steps: int | None = None
    event_sink: EventSink | None = None


@dataclass
class DelegationResult:
    """Result of a single delegation.

    ``messages`` always holds exactly two entries: the task message sent to
    the worker, then the worker's response (or a synthetic error message).

    Attributes:
        result: Final text, serialized object, or error description.
        conversation_id: Correlation id of the batch.
        messages: ``[task_message, response_message]``.
        status: ``success`` or ``error``.
        error: The failure, set exactly when ``status`` is ``error``.
        usage: Token usage reported by the worker, when available.
        sub_agent_name: Name of the worker that handled the task.
    """

    result: str
    conversation_id: str
    messages: list[Message]
    status: DelegationStatus = DelegationStatus.SUCCESS
    error: BaseException | str | None = None
    usage: TokenUsage | None = None
    sub_agent_name: str = ""

    @property
    def success(self) -> bool:
        return self.status is DelegationStatus.SUCCESS


class SupervisorConfig(BaseModel):
    """Customization of the supervisor system prompt.

    Attributes:
        system_message: Replaces the whole template when set.
        include_agents_memory: Append the ``<agents_memory>`` block.
        custom_guidelines: Extra guidelines appended after the built-in ones.
            Ignored when ``system_message`` is set.
    """

    model_config = ConfigDict(frozen=True)

    system_message: str | None = Field(
        default=None,
        description="Complete replacement for the supervisor template",
    )
    include_agents_memory: bool = Field(
        default=True,
        description="Whether to append the agents memory section",
    )
    custom_guidelines: tuple[str, ...] = Field(
        default=(),
        description="Guidelines appended after the built-in ones",
    )
