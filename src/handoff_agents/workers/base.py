"""Generation provider contract consumed by the delegation core.

A worker is anything that exposes an identity (``id``, ``name``,
``purpose``, ``instructions``) and the four generation coroutines below.
``PydanticAIWorker`` is the bundled implementation; tests and integrations
may supply their own.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Callable
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from handoff_agents.workers.events import StreamEvent

Message = dict[str, Any]


@dataclass
class TextResult:
    """Result of ``generate_text``."""

    text: str
    usage: Any = None


@dataclass
class ObjectResult:
    """Result of ``generate_object``."""

    object: Any
    usage: Any = None


@dataclass
class StreamTextResult:
    """Handle returned by ``stream_text``.

    Attributes:
        full_stream: Events of the run, to be consumed exactly once.
    """

    full_stream: AsyncIterable[StreamEvent]


@dataclass
class StreamObjectResult:
    """Handle returned by ``stream_object``.

    Attributes:
        object_stream: Successive partial objects; the last one is complete.
    """

    object_stream: AsyncIterable[Any]


@runtime_checkable
class Worker(Protocol):
    """A delegation target.

    Attributes:
        id: Stable identity.
        name: Human-readable name used for lookup by the delegate tool.
        purpose: Short description for the supervisor prompt.
        instructions: System instructions, or a callable producing them.
    """

    id: str
    name: str
    purpose: str | None
    instructions: str | Callable[..., Any] | None

    async def generate_text(self, messages: list[Message], **options: Any) -> TextResult: ...

    async def stream_text(self, messages: list[Message], **options: Any) -> StreamTextResult: ...

    async def generate_object(
        self, messages: list[Message], schema: type[Any], **options: Any
    ) -> ObjectResult: ...

    async def stream_object(
        self, messages: list[Message], schema: type[Any], **options: Any
    ) -> StreamObjectResult: ...
