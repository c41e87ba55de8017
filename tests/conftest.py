"""Shared test fixtures and configuration for handoff-agents tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest
from pydantic_ai import Agent, models
from pydantic_ai.models.test import TestModel

from handoff_agents.workers import (
    ObjectResult,
    PydanticAIWorker,
    StreamEvent,
    StreamObjectResult,
    StreamTextResult,
    TextResult,
)

# Block all real model requests globally for safety
models.ALLOW_MODEL_REQUESTS = False


class FakeWorker:
    """Scripted worker that records every call it receives.

    Args:
        name: Worker name, also used as id unless ``id`` is given.
        events: Events yielded by ``stream_text``. Defaults to one text
            delta with ``text`` followed by a finish event.
        text: Text returned by ``generate_text``.
        obj: Object returned by ``generate_object``.
        partials: Objects yielded by ``stream_object``.
        usage: Usage reported by generate calls and the default finish event.
        error: Raised as soon as any generation method is called.
        stream_error: Raised while iterating a stream, after all events.
        delay: Seconds to sleep before each generation or stream item.
        on_handoff: Optional handoff hook.
    """

    def __init__(
        self,
        name: str,
        *,
        id: str | None = None,
        purpose: str | None = None,
        instructions: Any = None,
        events: list[StreamEvent] | None = None,
        text: str = "done",
        obj: Any = None,
        partials: list[Any] | None = None,
        usage: Any = None,
        error: Exception | None = None,
        stream_error: Exception | None = None,
        delay: float = 0.0,
        on_handoff: Callable[..., Any] | None = None,
    ) -> None:
        self.id = id or name
        self.name = name
        self.purpose = purpose
        self.instructions = instructions
        self.text = text
        self.events = (
            events
            if events is not None
            else [StreamEvent.text_delta(text), StreamEvent.finish("stop", usage)]
        )
        self.obj = obj
        self.partials = partials or []
        self.usage = usage
        self.error = error
        self.stream_error = stream_error
        self.delay = delay
        self.on_handoff = on_handoff
        self.calls: list[dict[str, Any]] = []
        self.pulled = 0

    def _record(self, method: str, messages: list[dict[str, Any]], options: dict[str, Any]) -> None:
        self.calls.append({"method": method, "messages": list(messages), "options": options})
        if self.error is not None:
            raise self.error

    async def generate_text(self, messages: list[dict[str, Any]], **options: Any) -> TextResult:
        self._record("generate_text", messages, options)
        await asyncio.sleep(self.delay)
        return TextResult(text=self.text, usage=self.usage)

    async def stream_text(
        self, messages: list[dict[str, Any]], **options: Any
    ) -> StreamTextResult:
        self._record("stream_text", messages, options)
        return StreamTextResult(full_stream=self._events())

    async def generate_object(
        self, messages: list[dict[str, Any]], schema: type[Any], **options: Any
    ) -> ObjectResult:
        self._record("generate_object", messages, options)
        await asyncio.sleep(self.delay)
        return ObjectResult(object=self.obj, usage=self.usage)

    async def stream_object(
        self, messages: list[dict[str, Any]], schema: type[Any], **options: Any
    ) -> StreamObjectResult:
        self._record("stream_object", messages, options)
        return StreamObjectResult(object_stream=self._partials())

    async def _events(self) -> AsyncIterator[StreamEvent]:
        for event in self.events:
            await asyncio.sleep(self.delay)
            self.pulled += 1
            yield event
        if self.stream_error is not None:
            raise self.stream_error

    async def _partials(self) -> AsyncIterator[Any]:
        for partial in self.partials:
            await asyncio.sleep(self.delay)
            yield partial


@pytest.fixture
def make_worker() -> type[FakeWorker]:
    """Factory fixture to create scripted workers.

    Usage:
        def test_something(make_worker):
            worker = make_worker("writer", text="draft")
    """
    return FakeWorker


@pytest.fixture
def test_model() -> TestModel:
    """Provide a TestModel for deterministic testing."""
    return TestModel()


@pytest.fixture
def pydantic_worker() -> PydanticAIWorker:
    """A PydanticAIWorker whose agent answers with a fixed text."""
    agent = Agent(TestModel(custom_output_text="hello from worker"))
    return PydanticAIWorker(agent, name="echo", purpose="Echoes things", id="echo-1")


@pytest.fixture
def sample_messages() -> list[dict[str, Any]]:
    """Provide sample role/content message history."""
    return [
        {"role": "system", "content": "You are terse."},
        {"role": "user", "content": "Hello, can you help me?"},
        {"role": "assistant", "content": "Of course! What do you need help with?"},
        {"role": "user", "content": "Summarize the report."},
    ]
