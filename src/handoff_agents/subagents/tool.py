"""The ``delegate_task`` tool exposed to a supervisor's language model.

The tool never raises: validation failures and unexpected errors are
returned as ``{"error": ..., "status": "error"}`` so the calling model can
reason about them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_ai import Tool

from handoff_agents.subagents.config import OperationContext, WorkerDescriptor
from handoff_agents.subagents.errors import DelegationValidationError
from handoff_agents.workers.events import EventSink

if TYPE_CHECKING:
    from handoff_agents.subagents.manager import SubagentManager

logger = logging.getLogger(__name__)

DELEGATE_TOOL_NAME = "delegate_task"
DELEGATE_TOOL_DESCRIPTION = "Delegate a task to one or more specialized agents"


class DelegateTaskParams(BaseModel):
    """Input schema of the ``delegate_task`` tool."""

    model_config = ConfigDict(populate_by_name=True)

    task: str = Field(description="The task to delegate")
    target_agents: list[str] = Field(
        alias="targetAgents",
        description="List of agent names to delegate the task to",
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Additional context for the task",
    )


class DelegateTool:
    """Callable ``delegate_task`` action bound to a ``SubagentManager``.

    Created through ``SubagentManager.create_delegate_tool``. Resolves worker
    names, fans the task out and reshapes the results for the model.

    Args:
        manager: Manager owning the workers.
        source_agent: The supervisor agent delegating the task.
        current_history_entry_id: History entry of the running operation.
        operation_context: The supervisor's operation context.
        max_steps: Step budget forwarded to each worker.
        conversation_id: Correlation id for the batch; generated when omitted.
        user_id: User the delegation runs for.
        event_sink: Receives relabelled worker stream events.
    """

    name = DELEGATE_TOOL_NAME
    description = DELEGATE_TOOL_DESCRIPTION
    parameters = DelegateTaskParams

    def __init__(
        self,
        manager: SubagentManager,
        *,
        source_agent: Any = None,
        current_history_entry_id: str | None = None,
        operation_context: OperationContext | None = None,
        max_steps: int | None = None,
        conversation_id: str | None = None,
        user_id: str | None = None,
        event_sink: EventSink | None = None,
    ) -> None:
        self._manager = manager
        self.source_agent = source_agent
        self.current_history_entry_id = current_history_entry_id
        self.operation_context = operation_context
        self.max_steps = max_steps
        self.conversation_id = conversation_id
        self.user_id = user_id
        self.event_sink = event_sink

    def __repr__(self) -> str:
        return f"DelegateTool(name={self.name!r}, workers={len(self._manager)})"

    @property
    def _logger(self) -> logging.Logger:
        if self.operation_context is not None and self.operation_context.logger is not None:
            return self.operation_context.logger
        return logger

    def _resolve_names(self, names: list[str]) -> list[WorkerDescriptor]:
        """Map worker names to descriptors, dropping unknown names."""
        descriptors = self._manager.get_descriptors()
        available = ", ".join(d.worker_name for d in descriptors)

        resolved: list[WorkerDescriptor] = []
        for name in names:
            match = next((d for d in descriptors if d.worker_name == name), None)
            if match is None:
                self._logger.warning('Agent "%s" not found. Available agents: %s', name, available)
                continue
            resolved.append(match)

        if not resolved:
            raise DelegationValidationError(
                f"No valid target agents found. Available agents: {available}",
                available=[d.worker_name for d in descriptors],
            )
        return resolved

    async def execute(
        self,
        task: str,
        target_agents: list[str] | None,
        context: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]] | dict[str, Any]:
        """Delegate ``task`` to the named workers.

        Args:
            task: The task to delegate. Must not be blank.
            target_agents: Names of the workers to involve, at least one.
            context: Additional free-form context for the workers.

        Returns:
            One ``{agentName, response, conversationId, status, error}`` dict
            per resolved worker, or ``{error, status: "error"}`` on failure.
        """
        try:
            if not isinstance(task, str) or not task.strip():
                raise DelegationValidationError("Task cannot be empty")

            if not isinstance(target_agents, (list, tuple)) or len(target_agents) == 0:
                raise DelegationValidationError("At least one target agent must be specified")

            descriptors = self._resolve_names(list(target_agents))
            source_id = getattr(self.source_agent, "id", None)

            results = await self._manager.handoff_to_multiple(
                task,
                descriptors,
                context=dict(context or {}),
                source_agent=self.source_agent,
                parent_agent_id=source_id,
                conversation_id=self.conversation_id,
                user_id=self.user_id,
                parent_history_entry_id=self.current_history_entry_id,
                parent_operation_context=self.operation_context,
                max_steps=self.max_steps,
                event_sink=self.event_sink,
            )

            return [
                {
                    "agentName": descriptor.worker_name,
                    "response": result.result,
                    "conversationId": result.conversation_id,
                    "status": result.status.value,
                    "error": str(result.error) if result.error is not None else None,
                }
                for descriptor, result in zip(descriptors, results, strict=True)
            ]
        except Exception as exc:
            self._logger.error("Error in delegate_task tool execution: %s", exc)
            return {"error": f"Failed to delegate task: {exc}", "status": "error"}

    async def __call__(self, **arguments: Any) -> list[dict[str, Any]] | dict[str, Any]:
        """Execute from raw tool-call arguments (``targetAgents`` or ``target_agents``)."""
        try:
            params = DelegateTaskParams.model_validate(arguments)
        except ValidationError as exc:
            self._logger.error("Invalid delegate_task arguments: %s", exc)
            return {"error": f"Failed to delegate task: {exc}", "status": "error"}
        return await self.execute(params.task, params.target_agents, params.context)

    def as_pydantic_ai_tool(self) -> Tool[Any]:
        """Wrap this action as a ``pydantic_ai.Tool`` for a supervisor agent.

        The model sees the ``DelegateTaskParams`` schema by alias, so the
        arguments are ``task``, ``targetAgents`` and ``context``.

        Returns:
            A tool named ``delegate_task`` that calls this action.
        """

        async def delegate_task(**arguments: Any) -> list[dict[str, Any]] | dict[str, Any]:
            return await self(**arguments)

        return Tool.from_schema(
            delegate_task,
            name=self.name,
            description=self.description,
            json_schema=DelegateTaskParams.model_json_schema(by_alias=True),
        )
