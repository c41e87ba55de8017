"""Tests for the pydantic-ai backed worker."""

from __future__ import annotations

import asyncio
import warnings
from typing import Any

import pytest
from pydantic import BaseModel
from pydantic_ai import Agent
from pydantic_ai.messages import (
    FunctionToolCallEvent,
    PartDeltaEvent,
    PartStartEvent,
    TextPart,
    TextPartDelta,
    ThinkingPartDelta,
    ToolCallPart,
)
from pydantic_ai.models.test import TestModel

from handoff_agents.errors import OperationAbortedError
from handoff_agents.subagents.config import DelegationRequest, create_subagent
from handoff_agents.subagents.delegation import handoff_task
from handoff_agents.subagents.resolver import resolve_target
from handoff_agents.tokens import TokenUsage
from handoff_agents.workers import PydanticAIWorker, StreamEvent, Worker, convert_event


class Outline(BaseModel):
    title: str


USER_MESSAGES = [{"role": "user", "content": "Say hello"}]


class TestPydanticAIWorker:
    """Tests for PydanticAIWorker generation methods."""

    def test_satisfies_worker_protocol(self, pydantic_worker: PydanticAIWorker) -> None:
        assert isinstance(pydantic_worker, Worker)
        assert pydantic_worker.id == "echo-1"
        assert repr(pydantic_worker) == "PydanticAIWorker(id='echo-1', name='echo')"

    def test_generated_id(self, test_model: TestModel) -> None:
        worker = PydanticAIWorker(Agent(test_model), name="w")
        assert worker.id

    async def test_generate_text(self, pydantic_worker: PydanticAIWorker) -> None:
        result = await pydantic_worker.generate_text(USER_MESSAGES, conversation_id="c")

        assert result.text == "hello from worker"
        assert TokenUsage.from_usage(result.usage).request_count == 1

    async def test_generate_text_with_history(
        self, pydantic_worker: PydanticAIWorker, sample_messages: list[dict[str, Any]]
    ) -> None:
        result = await pydantic_worker.generate_text(sample_messages)
        assert result.text == "hello from worker"

    async def test_stream_text(self, pydantic_worker: PydanticAIWorker) -> None:
        response = await pydantic_worker.stream_text(USER_MESSAGES)

        events = [event async for event in response.full_stream]

        text = "".join(event.text for event in events if event.type == "text-delta")
        assert text == "hello from worker"
        assert events[-1].type == "finish"
        assert events[-1].payload["usage"] is not None

    async def test_generate_object(self, test_model: TestModel) -> None:
        worker = PydanticAIWorker(Agent(test_model), name="planner")

        result = await worker.generate_object(USER_MESSAGES, Outline)

        assert isinstance(result.object, Outline)

    async def test_stream_object(self, test_model: TestModel) -> None:
        worker = PydanticAIWorker(Agent(test_model), name="planner")

        response = await worker.stream_object(USER_MESSAGES, Outline)
        partials = [partial async for partial in response.object_stream]

        assert partials
        assert isinstance(partials[-1], Outline)

    async def test_abort_signal_stops_stream(self, pydantic_worker: PydanticAIWorker) -> None:
        abort_signal = asyncio.Event()
        abort_signal.set()

        response = await pydantic_worker.stream_text(USER_MESSAGES, abort_signal=abort_signal)

        with pytest.raises(OperationAbortedError) as exc_info:
            async for _ in response.full_stream:
                pass
        assert exc_info.value.worker_name == "echo"

    async def test_no_deprecated_api_use(self, pydantic_worker: PydanticAIWorker) -> None:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            await pydantic_worker.generate_text(USER_MESSAGES)
            response = await pydantic_worker.stream_text(USER_MESSAGES)
            events = [event async for event in response.full_stream]

        assert events[-1].type == "finish"
        assert not [w for w in caught if w.filename.endswith("pydantic_worker.py")]

    async def test_handoff_hook(self, test_model: TestModel) -> None:
        calls: list[Any] = []

        async def hook(*, agent: Any, source: Any) -> None:
            calls.append((agent.name, source))

        worker = PydanticAIWorker(Agent(test_model), name="w", on_handoff=hook)

        await worker.on_handoff(agent=worker, source="sup")

        assert calls == [("w", "sup")]

    async def test_handoff_hook_optional(self, pydantic_worker: PydanticAIWorker) -> None:
        await pydantic_worker.on_handoff(agent=pydantic_worker, source="sup")


class TestBuildKwargs:
    """Tests for provider option translation."""

    def test_max_steps_becomes_usage_limits(self, pydantic_worker: PydanticAIWorker) -> None:
        kwargs = pydantic_worker._build_kwargs({"max_steps": 3})
        assert kwargs["usage_limits"].request_limit == 3

    @pytest.mark.parametrize("max_steps", [None, 0, -2])
    def test_non_positive_max_steps_ignored(
        self, pydantic_worker: PydanticAIWorker, max_steps: Any
    ) -> None:
        assert "usage_limits" not in pydantic_worker._build_kwargs({"max_steps": max_steps})

    def test_model_settings_merged(self, pydantic_worker: PydanticAIWorker) -> None:
        kwargs = pydantic_worker._build_kwargs(
            {"model_settings": {"top_p": 0.9}, "temperature": 0.2, "conversation_id": "c"}
        )
        assert kwargs == {"model_settings": {"top_p": 0.9, "temperature": 0.2}}

    def test_deps_passed_through(self, pydantic_worker: PydanticAIWorker) -> None:
        assert pydantic_worker._build_kwargs({"deps": {"db": 1}})["deps"] == {"db": 1}


class TestConvertEvent:
    """Tests for pydantic-ai stream event conversion."""

    def test_text_part_start(self) -> None:
        event = convert_event(PartStartEvent(index=0, part=TextPart(content="Hel")))
        assert event == StreamEvent.text_delta("Hel")

    def test_empty_text_part_start_dropped(self) -> None:
        assert convert_event(PartStartEvent(index=0, part=TextPart(content=""))) is None

    def test_text_delta(self) -> None:
        event = convert_event(PartDeltaEvent(index=0, delta=TextPartDelta(content_delta="lo")))
        assert event == StreamEvent.text_delta("lo")

    def test_thinking_delta(self) -> None:
        event = convert_event(
            PartDeltaEvent(index=0, delta=ThinkingPartDelta(content_delta="hmm"))
        )
        assert event == StreamEvent.reasoning("hmm")

    def test_tool_call(self) -> None:
        part = ToolCallPart(tool_name="search", args={"q": "x"}, tool_call_id="c1")

        event = convert_event(FunctionToolCallEvent(part=part))

        assert event == StreamEvent.tool_call("c1", "search", {"q": "x"})

    def test_unknown_event(self) -> None:
        assert convert_event(object()) is None


class TestDelegationThroughPydanticAI:
    """End-to-end delegation with a TestModel-backed worker."""

    async def test_default_stream(self, pydantic_worker: PydanticAIWorker) -> None:
        received: list[str] = []

        async def sink(event: Any) -> None:
            received.append(event.type)

        result = await handoff_task(
            DelegationRequest(
                task="Say hello", target=resolve_target(pydantic_worker), event_sink=sink
            )
        )

        assert result.success
        assert result.result == "hello from worker"
        assert result.usage is not None
        assert "text-delta" in received
        assert "finish" not in received

    async def test_generate_object(self, test_model: TestModel) -> None:
        worker = PydanticAIWorker(Agent(test_model), name="planner")
        target = create_subagent(worker, "generate_object", schema=Outline)

        result = await handoff_task(DelegationRequest(task="Plan", target=resolve_target(target)))

        assert result.success
        assert Outline.model_validate_json(result.result)
