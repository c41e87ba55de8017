"""Stream event types produced by workers and relayed to event sinks."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from handoff_agents.config.delegation import StreamEventType


@dataclass(frozen=True)
class StreamEvent:
    """A single event from a worker's full stream.

    The ``payload`` carries the type-specific fields:

    - ``text-delta`` / ``reasoning``: ``text``
    - ``source``: ``source`` (provider-specific citation data)
    - ``tool-call``: ``tool_call_id``, ``tool_name``, ``args``
    - ``tool-result``: ``tool_call_id``, ``tool_name``, ``result``
    - ``error``: ``error``
    - ``finish``: ``finish_reason``, ``usage``

    Attributes:
        type: Event discriminator.
        payload: Type-specific fields.
    """

    type: StreamEventType
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        """Text carried by ``text-delta`` and ``reasoning`` events."""
        return self.payload.get("text") or ""

    @classmethod
    def text_delta(cls, text: str) -> StreamEvent:
        return cls("text-delta", {"text": text})

    @classmethod
    def reasoning(cls, text: str) -> StreamEvent:
        return cls("reasoning", {"text": text})

    @classmethod
    def source(cls, source: Any) -> StreamEvent:
        return cls("source", {"source": source})

    @classmethod
    def tool_call(cls, tool_call_id: str, tool_name: str, args: Any) -> StreamEvent:
        return cls(
            "tool-call",
            {"tool_call_id": tool_call_id, "tool_name": tool_name, "args": args},
        )

    @classmethod
    def tool_result(cls, tool_call_id: str, tool_name: str, result: Any) -> StreamEvent:
        return cls(
            "tool-result",
            {"tool_call_id": tool_call_id, "tool_name": tool_name, "result": result},
        )

    @classmethod
    def error(cls, error: Any) -> StreamEvent:
        return cls("error", {"error": error})

    @classmethod
    def finish(cls, finish_reason: str = "stop", usage: Any = None) -> StreamEvent:
        return cls("finish", {"finish_reason": finish_reason, "usage": usage})


@dataclass(frozen=True)
class SubAgentStreamEvent:
    """A worker stream event relabelled for the supervisor's event sink.

    Attributes:
        type: Original event type.
        payload: Original type-specific fields.
        sub_agent_id: Id of the worker that produced the event.
        sub_agent_name: Name of the worker that produced the event.
        timestamp: ISO-8601 UTC time the event was relayed, in milliseconds.
    """

    type: StreamEventType
    payload: dict[str, Any]
    sub_agent_id: str
    sub_agent_name: str
    timestamp: str

    @classmethod
    def from_event(
        cls,
        event: StreamEvent,
        *,
        sub_agent_id: str,
        sub_agent_name: str,
    ) -> SubAgentStreamEvent:
        return cls(
            type=event.type,
            payload=dict(event.payload),
            sub_agent_id=sub_agent_id,
            sub_agent_name=sub_agent_name,
            timestamp=_now_iso(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Flatten into a JSON-ready dict with camelCase tag keys."""
        return {
            "type": self.type,
            **self.payload,
            "subAgentId": self.sub_agent_id,
            "subAgentName": self.sub_agent_name,
            "timestamp": self.timestamp,
        }


EventSink = Callable[[SubAgentStreamEvent], Awaitable[None]]


def _now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
