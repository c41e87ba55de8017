"""Generation provider contract and the bundled pydantic-ai worker.

Classes:
    Worker: Protocol every delegation target implements.
    PydanticAIWorker: Worker backed by a ``pydantic_ai.Agent``.
    StreamEvent: One event of a worker's full stream.
    SubAgentStreamEvent: A stream event relabelled for the supervisor.
"""

from handoff_agents.workers.base import (
    Message,
    ObjectResult,
    StreamObjectResult,
    StreamTextResult,
    TextResult,
    Worker,
)
from handoff_agents.workers.events import EventSink, StreamEvent, SubAgentStreamEvent
from handoff_agents.workers.messages import dicts_to_model_messages, split_prompt
from handoff_agents.workers.pydantic_worker import PydanticAIWorker, convert_event

__all__ = [
    "EventSink",
    "Message",
    "ObjectResult",
    "PydanticAIWorker",
    "StreamEvent",
    "StreamObjectResult",
    "StreamTextResult",
    "SubAgentStreamEvent",
    "TextResult",
    "Worker",
    "convert_event",
    "dicts_to_model_messages",
    "split_prompt",
]
