"""Delegation behaviour configuration."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

StreamEventType = Literal[
    "text-delta",
    "reasoning",
    "source",
    "tool-call",
    "tool-result",
    "error",
    "finish",
]

DEFAULT_FORWARDED_EVENT_TYPES: tuple[StreamEventType, ...] = (
    "text-delta",
    "reasoning",
    "source",
    "tool-call",
    "tool-result",
    "error",
)


class DelegationConfig(BaseModel):
    """Configuration for how tasks are handed off to workers.

    Attributes:
        task_message_role: Role of the outbound task message.
        forwarded_event_types: Stream event types relayed to the event sink.
            ``finish`` is never relayed even if listed.
        steps_per_worker: Step budget per registered worker used when no
            explicit ``max_steps`` is given.
    """

    task_message_role: Literal["user", "system"] = Field(
        default="user",
        description="Role of the task message sent to a worker",
    )
    forwarded_event_types: list[StreamEventType] = Field(
        default_factory=lambda: list(DEFAULT_FORWARDED_EVENT_TYPES),
        description="Stream event types forwarded to the event sink",
    )
    steps_per_worker: int = Field(
        default=10,
        gt=0,
        description="Default step budget per registered worker",
    )
