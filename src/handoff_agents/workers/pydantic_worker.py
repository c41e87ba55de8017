"""Worker implementation backed by a ``pydantic_ai.Agent``.

Maps the four generation methods onto pydantic-ai runs and translates
pydantic-ai stream events into ``StreamEvent`` instances.
"""

from __future__ import annotations

import asyncio
import inspect
import uuid
from collections.abc import AsyncIterator, Callable
from typing import Any

from pydantic_ai import Agent as PydanticAgent
from pydantic_ai import AgentRunResultEvent
from pydantic_ai.messages import (
    FunctionToolCallEvent,
    FunctionToolResultEvent,
    PartDeltaEvent,
    PartStartEvent,
    RetryPromptPart,
    TextPart,
    TextPartDelta,
    ThinkingPart,
    ThinkingPartDelta,
)
from pydantic_ai.usage import UsageLimits

from handoff_agents.errors.exceptions import OperationAbortedError
from handoff_agents.workers.base import (
    Message,
    ObjectResult,
    StreamObjectResult,
    StreamTextResult,
    TextResult,
)
from handoff_agents.workers.events import StreamEvent
from handoff_agents.workers.messages import split_prompt

# Provider options understood as model settings when passed flat.
_MODEL_SETTING_KEYS = ("temperature", "max_tokens", "top_p", "seed", "timeout")


class PydanticAIWorker:
    """A delegation target running on a pydantic-ai agent.

    Example::

        from pydantic_ai import Agent

        researcher = PydanticAIWorker(
            Agent("openai:gpt-4o", instructions="You research topics."),
            name="researcher",
            purpose="Finds and summarizes sources",
        )

    Args:
        agent: The pydantic-ai agent that performs generation.
        name: Name the supervisor uses to address this worker.
        purpose: Short description used in the supervisor prompt.
        instructions: Instructions text, or a callable for dynamic instructions.
            Only used for prompt composition; the agent keeps its own.
        id: Stable id. A random UUID when omitted.
        on_handoff: Optional hook called with ``agent=`` and ``source=``
            before a delegated task starts. May be sync or async.
    """

    def __init__(
        self,
        agent: PydanticAgent[Any, Any],
        *,
        name: str,
        purpose: str | None = None,
        instructions: str | Callable[..., Any] | None = None,
        id: str | None = None,
        on_handoff: Callable[..., Any] | None = None,
    ) -> None:
        self.agent = agent
        self.id = id or str(uuid.uuid4())
        self.name = name
        self.purpose = purpose
        self.instructions = instructions
        self._on_handoff = on_handoff

    def __repr__(self) -> str:
        return f"PydanticAIWorker(id={self.id!r}, name={self.name!r})"

    async def on_handoff(self, *, agent: Any, source: Any) -> None:
        """Run the configured handoff hook, if any."""
        if self._on_handoff is None:
            return
        outcome = self._on_handoff(agent=agent, source=source)
        if inspect.isawaitable(outcome):
            await outcome

    # ------------------------------------------------------------------
    # Generation methods
    # ------------------------------------------------------------------

    async def generate_text(self, messages: list[Message], **options: Any) -> TextResult:
        prompt, history = split_prompt(messages)
        result = await self.agent.run(
            prompt,
            message_history=history,
            output_type=str,
            **self._build_kwargs(options),
        )
        return TextResult(text=str(result.output), usage=result.usage)

    async def stream_text(self, messages: list[Message], **options: Any) -> StreamTextResult:
        return StreamTextResult(full_stream=self._iter_events(messages, options))

    async def generate_object(
        self, messages: list[Message], schema: type[Any], **options: Any
    ) -> ObjectResult:
        prompt, history = split_prompt(messages)
        result = await self.agent.run(
            prompt,
            message_history=history,
            output_type=schema,
            **self._build_kwargs(options),
        )
        return ObjectResult(object=result.output, usage=result.usage)

    async def stream_object(
        self, messages: list[Message], schema: type[Any], **options: Any
    ) -> StreamObjectResult:
        return StreamObjectResult(object_stream=self._iter_objects(messages, schema, options))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_kwargs(self, options: dict[str, Any]) -> dict[str, Any]:
        """Translate provider options into ``Agent.run`` keyword arguments."""
        kwargs: dict[str, Any] = {}

        max_steps = options.get("max_steps")
        if max_steps is not None and max_steps > 0:
            kwargs["usage_limits"] = UsageLimits(request_limit=max_steps)

        model_settings = dict(options.get("model_settings") or {})
        for key in _MODEL_SETTING_KEYS:
            if options.get(key) is not None:
                model_settings[key] = options[key]
        if model_settings:
            kwargs["model_settings"] = model_settings

        if "deps" in options:
            kwargs["deps"] = options["deps"]
        return kwargs

    def _check_abort(self, abort_signal: asyncio.Event | None) -> None:
        if abort_signal is not None and abort_signal.is_set():
            raise OperationAbortedError(
                f"Operation aborted while '{self.name}' was generating",
                worker_name=self.name,
            )

    async def _iter_events(
        self, messages: list[Message], options: dict[str, Any]
    ) -> AsyncIterator[StreamEvent]:
        abort_signal = options.get("abort_signal")
        self._check_abort(abort_signal)
        prompt, history = split_prompt(messages)

        async with self.agent.run_stream_events(
            prompt,
            message_history=history,
            output_type=str,
            **self._build_kwargs(options),
        ) as stream:
            async for event in stream:
                self._check_abort(abort_signal)
                converted = convert_event(event)
                if converted is not None:
                    yield converted

    async def _iter_objects(
        self, messages: list[Message], schema: type[Any], options: dict[str, Any]
    ) -> AsyncIterator[Any]:
        abort_signal = options.get("abort_signal")
        self._check_abort(abort_signal)
        prompt, history = split_prompt(messages)

        async with self.agent.run_stream(
            prompt,
            message_history=history,
            output_type=schema,
            **self._build_kwargs(options),
        ) as result:
            async for partial in result.stream_output():
                self._check_abort(abort_signal)
                yield partial


def convert_event(event: Any) -> StreamEvent | None:
    """Translate one pydantic-ai stream event into a ``StreamEvent``.

    Returns ``None`` for events with no counterpart (e.g. tool-call deltas,
    which are reported once complete through ``FunctionToolCallEvent``).
    """
    if isinstance(event, PartStartEvent):
        if isinstance(event.part, TextPart) and event.part.content:
            return StreamEvent.text_delta(event.part.content)
        if isinstance(event.part, ThinkingPart) and event.part.content:
            return StreamEvent.reasoning(event.part.content)
        return None

    if isinstance(event, PartDeltaEvent):
        if isinstance(event.delta, TextPartDelta) and event.delta.content_delta:
            return StreamEvent.text_delta(event.delta.content_delta)
        if isinstance(event.delta, ThinkingPartDelta) and event.delta.content_delta:
            return StreamEvent.reasoning(event.delta.content_delta)
        return None

    if isinstance(event, FunctionToolCallEvent):
        return StreamEvent.tool_call(
            event.part.tool_call_id,
            event.part.tool_name,
            event.part.args,
        )

    if isinstance(event, FunctionToolResultEvent):
        part = event.result
        if isinstance(part, RetryPromptPart):
            return StreamEvent.error(part.model_response())
        return StreamEvent.tool_result(part.tool_call_id, part.tool_name, part.content)

    if isinstance(event, AgentRunResultEvent):
        return StreamEvent.finish("stop", event.result.usage)

    return None
