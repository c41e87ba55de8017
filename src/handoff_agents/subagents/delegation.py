"""Task handoff to one worker and fan-out to several.

``handoff_task`` runs one ``DelegationRequest`` against one worker and
always returns a ``DelegationResult``: generation failures, hook failures
and event sink failures are captured in the result instead of raised.
``handoff_to_multiple`` runs one request per target concurrently under a
shared conversation id and returns the results in target order.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import time
import uuid
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel

from handoff_agents.config.delegation import DEFAULT_FORWARDED_EVENT_TYPES
from handoff_agents.subagents.config import (
    DelegationMethod,
    DelegationRequest,
    DelegationResult,
    DelegationStatus,
    WorkerDescriptor,
    WorkerTarget,
)
from handoff_agents.subagents.errors import SubagentError, SubagentSchemaError
from handoff_agents.subagents.resolver import resolve_target
from handoff_agents.tokens.tracker import TokenUsage
from handoff_agents.workers.base import Message, StreamTextResult
from handoff_agents.workers.events import SubAgentStreamEvent

logger = logging.getLogger(__name__)


def _serialize(value: Any, indent: int | None = None) -> str:
    """Serialize a generated object or context mapping to JSON text."""
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json")
    return json.dumps(value, indent=indent, default=str)


def _usage_or_none(usage: Any) -> TokenUsage | None:
    if usage is None:
        return None
    return TokenUsage.from_usage(usage)


def _build_task_content(
    task: str,
    context: Mapping[Any, Any] | None,
    *,
    source_name: str,
    target_name: str,
) -> str:
    """Build the task text, prefixed with a handoff line when context is given.

    Args:
        task: The raw task.
        context: Free-form context; keys are stringified for serialization.
        source_name: Name of the delegating agent.
        target_name: Name of the receiving worker.

    Returns:
        The bare task when ``context`` is empty, otherwise the attributed task
        followed by the serialized context.
    """
    if not context:
        return task
    context_obj = {str(key): value for key, value in context.items()}
    return (
        f"Task handed off from {source_name} to {target_name}:\n"
        f"{task}\n\nContext: {_serialize(context_obj, indent=2)}"
    )


async def _run_handoff_hook(descriptor: WorkerDescriptor, source_agent: Any) -> None:
    hook = getattr(descriptor.worker, "on_handoff", None)
    if hook is None:
        return
    outcome = hook(agent=descriptor.worker, source=source_agent)
    if inspect.isawaitable(outcome):
        await outcome


def _build_provider_options(request: DelegationRequest, conversation_id: str) -> dict[str, Any]:
    """Assemble the options passed to every generation method."""
    operation_context = request.parent_operation_context
    source_id = getattr(request.source_agent, "id", None)

    options: dict[str, Any] = {
        "conversation_id": conversation_id,
        "user_id": request.user_id,
        "parent_agent_id": source_id or request.parent_agent_id,
        "parent_history_entry_id": request.parent_history_entry_id,
        "parent_operation_context": operation_context,
        "context": dict(request.context) if request.context else None,
        "abort_signal": operation_context.abort_signal if operation_context else None,
        "max_steps": request.max_steps,
    }
    if request.target.options:
        options.update(request.target.options)
    return options


async def _consume_text_stream(
    response: StreamTextResult,
    request: DelegationRequest,
    forwarded_event_types: Iterable[str],
) -> tuple[str, TokenUsage | None]:
    """Walk a text stream once, relaying events and collecting text.

    Each relayed event is awaited at the sink before the next one is pulled
    from the stream. ``finish`` events are never relayed.
    """
    descriptor = request.target
    forwarded = set(forwarded_event_types) - {"finish"}
    chunks: list[str] = []
    usage: TokenUsage | None = None

    async for event in response.full_stream:
        if event.type == "text-delta":
            chunks.append(event.text)
        elif event.type == "finish":
            usage = _usage_or_none(event.payload.get("usage"))

        if request.event_sink is not None and event.type in forwarded:
            await request.event_sink(
                SubAgentStreamEvent.from_event(
                    event,
                    sub_agent_id=descriptor.worker_id,
                    sub_agent_name=descriptor.worker_name,
                )
            )

    return "".join(chunks), usage


async def _dispatch(
    request: DelegationRequest,
    messages: list[Message],
    options: dict[str, Any],
    forwarded_event_types: Iterable[str],
) -> tuple[str, TokenUsage | None]:
    """Call the generation method selected by the descriptor."""
    descriptor = request.target
    worker = descriptor.worker
    method = descriptor.method

    if method.requires_schema and descriptor.schema is None:
        raise SubagentSchemaError(descriptor.worker_name, method.value)

    if method in (DelegationMethod.DEFAULT_STREAM, DelegationMethod.STREAM_TEXT):
        stream = await worker.stream_text(messages, **options)
        return await _consume_text_stream(stream, request, forwarded_event_types)

    if method is DelegationMethod.GENERATE_TEXT:
        text_result = await worker.generate_text(messages, **options)
        return text_result.text, _usage_or_none(text_result.usage)

    if method is DelegationMethod.STREAM_OBJECT:
        object_stream = await worker.stream_object(messages, descriptor.schema, **options)
        last_object: Any = None
        async for partial in object_stream.object_stream:
            last_object = partial
        return _serialize(last_object), None

    if method is DelegationMethod.GENERATE_OBJECT:
        object_result = await worker.generate_object(messages, descriptor.schema, **options)
        return _serialize(object_result.object), _usage_or_none(object_result.usage)

    raise SubagentError(f"Unknown delegation method: {method!r}")


async def handoff_task(
    request: DelegationRequest,
    *,
    owner_name: str = "",
    task_message_role: str = "user",
    forwarded_event_types: Iterable[str] = DEFAULT_FORWARDED_EVENT_TYPES,
) -> DelegationResult:
    """Delegate one task to one worker.

    Runs the target's ``on_handoff`` hook (when a source agent is given),
    sends the shared context plus the task message to the worker using the
    descriptor's method, and reduces any stream into the final result.

    All errors, including those raised by the hook or the event sink, are
    captured in the returned result rather than raised.

    Args:
        request: The delegation to perform.
        owner_name: Name of the supervisor, used in the handoff line when no
            source agent is given.
        task_message_role: Role of the task message (``user`` or ``system``).
        forwarded_event_types: Stream event types relayed to the event sink.

    Returns:
        DelegationResult with exactly two messages.
    """
    descriptor = request.target
    target_name = descriptor.worker_name
    conversation_id = request.conversation_id or str(uuid.uuid4())
    task_message: Message = {"role": task_message_role, "content": request.task}

    start = time.monotonic()
    try:
        if request.source_agent is not None:
            await _run_handoff_hook(descriptor, request.source_agent)

        source_name = getattr(request.source_agent, "name", None) or owner_name
        task_message = {
            "role": task_message_role,
            "content": _build_task_content(
                request.task,
                request.context,
                source_name=source_name,
                target_name=target_name,
            ),
        }
        messages = [*(request.shared_context or []), task_message]
        options = _build_provider_options(request, conversation_id)

        logger.debug(
            "Delegating task to '%s' with method %s", target_name, descriptor.method.value
        )
        result_text, usage = await _dispatch(request, messages, options, forwarded_event_types)
    except Exception as exc:
        operation_context = request.parent_operation_context
        error_logger = (
            operation_context.logger
            if operation_context is not None and operation_context.logger is not None
            else logger
        )
        error_logger.error(
            "Error in handoff_task to %s",
            target_name,
            exc_info=exc,
            extra={"sub_agent_id": descriptor.worker_id, "sub_agent_name": target_name},
        )

        error_message = str(exc)
        return DelegationResult(
            result=f"Error in delegating task to {target_name}: {error_message}",
            conversation_id=conversation_id,
            messages=[
                task_message,
                {
                    "role": "assistant",
                    "content": f"Error occurred during task handoff: {error_message}",
                },
            ],
            status=DelegationStatus.ERROR,
            error=exc,
            sub_agent_name=target_name,
        )

    logger.debug(
        "Sub-agent '%s' finished in %.3fs", target_name, time.monotonic() - start
    )
    return DelegationResult(
        result=result_text,
        conversation_id=conversation_id,
        messages=[task_message, {"role": "assistant", "content": result_text}],
        status=DelegationStatus.SUCCESS,
        usage=usage,
        sub_agent_name=target_name,
    )


async def handoff_to_multiple(
    task: str,
    targets: Sequence[WorkerTarget | WorkerDescriptor],
    *,
    conversation_id: str | None = None,
    owner_name: str = "",
    task_message_role: str = "user",
    forwarded_event_types: Iterable[str] = DEFAULT_FORWARDED_EVENT_TYPES,
    **request_fields: Any,
) -> list[DelegationResult]:
    """Delegate the same task to several workers concurrently.

    One conversation id is assigned to the whole batch before any worker
    starts. Each branch captures its own failures, so one failing worker
    never affects the others. The call returns once every branch finished.

    Args:
        task: The task to delegate.
        targets: Workers, worker configs or descriptors.
        conversation_id: Shared correlation id; generated when omitted.
        owner_name: Name of the supervisor.
        task_message_role: Role of the task message.
        forwarded_event_types: Stream event types relayed to the event sink.
        **request_fields: Remaining ``DelegationRequest`` fields
            (``source_agent``, ``context``, ``event_sink``, ``max_steps``...).

    Returns:
        One DelegationResult per target, in target order.
    """
    batch_conversation_id = conversation_id or str(uuid.uuid4())
    forwarded = tuple(forwarded_event_types)

    requests = [
        DelegationRequest(
            task=task,
            target=resolve_target(target),
            conversation_id=batch_conversation_id,
            **request_fields,
        )
        for target in targets
    ]

    results = await asyncio.gather(
        *(
            handoff_task(
                request,
                owner_name=owner_name,
                task_message_role=task_message_role,
                forwarded_event_types=forwarded,
            )
            for request in requests
        )
    )
    return list(results)
