"""Top-level SubagentManager facade for the subagents subsystem.

Owns a supervisor's worker list and composes the resolver, the delegation
functions, the delegate tool and the prompt composer behind one API. Parent
to child edges are mirrored into an injected ``AgentRegistry``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from handoff_agents.config.delegation import DelegationConfig
from handoff_agents.config.settings import HandoffSettings
from handoff_agents.registry.agent_registry import AgentRegistry
from handoff_agents.subagents.config import (
    DelegationRequest,
    DelegationResult,
    OperationContext,
    SupervisorConfig,
    WorkerDescriptor,
    WorkerTarget,
)
from handoff_agents.subagents.delegation import handoff_task, handoff_to_multiple
from handoff_agents.subagents.errors import SubagentNotFoundError
from handoff_agents.subagents.prompts import compose_supervisor_prompt
from handoff_agents.subagents.resolver import resolve_target
from handoff_agents.subagents.tool import DelegateTool
from handoff_agents.tokens.tracker import TokenUsage, UsageTracker
from handoff_agents.workers.base import Message
from handoff_agents.workers.events import EventSink

logger = logging.getLogger(__name__)


class SubagentManager:
    """Facade for the subagent subsystem.

    Holds the supervisor's worker targets and provides delegation to one or
    several of them, the ``delegate_task`` tool, and the supervisor prompt.

    Example::

        manager = SubagentManager("supervisor", [researcher, writer])
        results = await manager.handoff_to_multiple("Draft a summary", manager.get_sub_agents())
        prompt = manager.generate_supervisor_system_message("Help the user.")

    Worker list mutation is synchronous and meant to be done by the owning
    supervisor outside of in-flight delegations.

    Args:
        owner_name: Name of the supervisor that owns this manager.
        sub_agents: Initial worker targets.
        owner_id: Registry id of the supervisor. Defaults to ``owner_name``.
        registry: Registry that mirrors parent/child edges. A private one is
            created when omitted.
        supervisor_config: Prompt customization.
        settings: Delegation settings. Defaults to ``HandoffSettings()``.
    """

    def __init__(
        self,
        owner_name: str,
        sub_agents: Iterable[WorkerTarget] | None = None,
        *,
        owner_id: str | None = None,
        registry: AgentRegistry | None = None,
        supervisor_config: SupervisorConfig | None = None,
        settings: HandoffSettings | None = None,
    ) -> None:
        self.owner_name = owner_name
        self.owner_id = owner_id or owner_name
        self.registry = registry if registry is not None else AgentRegistry()
        self.supervisor_config = supervisor_config
        self._settings = settings or HandoffSettings()
        self._sub_agents: list[WorkerTarget] = []
        self._usage_tracker = UsageTracker()

        for target in sub_agents or []:
            self.add_sub_agent(target)

    @property
    def delegation_config(self) -> DelegationConfig:
        return self._settings.delegation

    # ------------------------------------------------------------------
    # Worker management
    # ------------------------------------------------------------------

    def add_sub_agent(self, target: WorkerTarget) -> None:
        """Add a worker target and register the parent/child edge.

        Args:
            target: A bare worker or a ``WorkerConfig``.
        """
        self._sub_agents.append(target)
        worker_id = resolve_target(target).worker_id
        self.registry.register_sub_agent(self.owner_id, worker_id)
        logger.debug("Added sub-agent '%s' to '%s'", worker_id, self.owner_name)

    def remove_sub_agent(self, worker_id: str) -> None:
        """Remove every target whose worker has ``worker_id``.

        Removing an unknown id only drops the (absent) registry edge.

        Args:
            worker_id: Id of the worker to remove.
        """
        self.registry.unregister_sub_agent(self.owner_id, worker_id)
        self._sub_agents = [
            target for target in self._sub_agents if resolve_target(target).worker_id != worker_id
        ]
        logger.debug("Removed sub-agent '%s' from '%s'", worker_id, self.owner_name)

    def unregister_all_sub_agents(self) -> None:
        """Drop every registry edge owned by this manager, e.g. on teardown."""
        for target in self._sub_agents:
            self.registry.unregister_sub_agent(self.owner_id, resolve_target(target).worker_id)

    def get_sub_agents(self) -> list[WorkerTarget]:
        """Return the registered worker targets in registration order."""
        return list(self._sub_agents)

    def get_descriptors(self) -> list[WorkerDescriptor]:
        """Return freshly resolved descriptors for every worker target."""
        return [resolve_target(target) for target in self._sub_agents]

    def get_sub_agent(self, name: str) -> WorkerDescriptor:
        """Return the descriptor of the worker called ``name``.

        Raises:
            SubagentNotFoundError: If no worker has that name.
        """
        descriptors = self.get_descriptors()
        for descriptor in descriptors:
            if descriptor.worker_name == name:
                return descriptor
        raise SubagentNotFoundError(name, available=[d.worker_name for d in descriptors])

    def has_sub_agents(self) -> bool:
        return len(self._sub_agents) > 0

    def calculate_max_steps(self, agent_max_steps: int | None = None) -> int:
        """Step budget for a supervisor run.

        An explicit value always wins, including zero or negative values.
        Otherwise the budget scales with the number of workers.

        Args:
            agent_max_steps: Explicit step budget.

        Returns:
            The step budget.
        """
        if agent_max_steps is not None:
            return agent_max_steps
        per_worker = self.delegation_config.steps_per_worker
        count = len(self._sub_agents)
        return per_worker * count if count > 0 else per_worker

    def get_sub_agent_details(self) -> list[dict[str, Any]]:
        """Describe each worker for API exposure.

        Returns:
            One dict per worker with ``id``, ``name``, ``purpose``,
            ``instructions`` and, for configured targets, ``method_config``.
        """
        details: list[dict[str, Any]] = []
        for target in self._sub_agents:
            descriptor = resolve_target(target)
            instructions = descriptor.instructions
            entry: dict[str, Any] = {
                "id": descriptor.worker_id,
                "name": descriptor.worker_name,
                "purpose": descriptor.purpose,
                "instructions": instructions if isinstance(instructions, str) else None,
            }
            if target is not descriptor.worker:
                entry["method_config"] = {
                    "method": descriptor.method.value,
                    "schema": "defined" if descriptor.schema is not None else None,
                    "options": list(descriptor.options) if descriptor.options else None,
                }
            details.append(entry)
        return details

    # ------------------------------------------------------------------
    # Prompt
    # ------------------------------------------------------------------

    def generate_supervisor_system_message(
        self,
        base_instructions: str,
        agents_memory: str | None = "",
        config: SupervisorConfig | None = None,
    ) -> str:
        """Compose the supervisor system prompt for the current workers.

        Args:
            base_instructions: The supervisor's own instructions.
            agents_memory: Formatted memory of previous agent interactions.
            config: Prompt customization; defaults to the manager's config.

        Returns:
            The composed system prompt.
        """
        return compose_supervisor_prompt(
            base_instructions,
            self._sub_agents,
            agents_memory,
            config or self.supervisor_config,
        )

    # ------------------------------------------------------------------
    # Delegation
    # ------------------------------------------------------------------

    async def handoff_task(
        self,
        task: str,
        target: WorkerTarget | WorkerDescriptor,
        *,
        source_agent: Any = None,
        conversation_id: str | None = None,
        shared_context: list[Message] | None = None,
        context: dict[Any, Any] | None = None,
        user_id: str | None = None,
        parent_agent_id: str | None = None,
        parent_history_entry_id: str | None = None,
        parent_operation_context: OperationContext | None = None,
        max_steps: int | None = None,
        event_sink: EventSink | None = None,
    ) -> DelegationResult:
        """Delegate a task to one worker.

        Never raises for worker failures; see ``DelegationResult.status``.
        """
        request = DelegationRequest(
            task=task,
            target=resolve_target(target),
            source_agent=source_agent,
            conversation_id=conversation_id,
            shared_context=list(shared_context or []),
            context=context,
            user_id=user_id,
            parent_agent_id=parent_agent_id,
            parent_history_entry_id=parent_history_entry_id,
            parent_operation_context=parent_operation_context,
            max_steps=max_steps,
            event_sink=event_sink,
        )
        result = await handoff_task(
            request,
            owner_name=self.owner_name,
            task_message_role=self.delegation_config.task_message_role,
            forwarded_event_types=self.delegation_config.forwarded_event_types,
        )
        self._aggregate_usage(result)
        return result

    async def handoff_to_multiple(
        self,
        task: str,
        targets: Sequence[WorkerTarget | WorkerDescriptor],
        *,
        conversation_id: str | None = None,
        shared_context: list[Message] | None = None,
        **kwargs: Any,
    ) -> list[DelegationResult]:
        """Delegate a task to several workers concurrently.

        All results share one conversation id and come back in target order.

        Args:
            task: The task to delegate.
            targets: Worker targets or descriptors.
            conversation_id: Shared correlation id; generated when omitted.
            shared_context: Messages prepended before the task message.
            **kwargs: Remaining request fields (``source_agent``, ``context``,
                ``event_sink``, ``max_steps``, ``user_id``, ``parent_*``).

        Returns:
            One DelegationResult per target.
        """
        results = await handoff_to_multiple(
            task,
            targets,
            conversation_id=conversation_id,
            owner_name=self.owner_name,
            task_message_role=self.delegation_config.task_message_role,
            forwarded_event_types=self.delegation_config.forwarded_event_types,
            shared_context=list(shared_context or []),
            **kwargs,
        )
        for result in results:
            self._aggregate_usage(result)
        return results

    def create_delegate_tool(
        self,
        *,
        source_agent: Any = None,
        current_history_entry_id: str | None = None,
        operation_context: OperationContext | None = None,
        max_steps: int | None = None,
        conversation_id: str | None = None,
        user_id: str | None = None,
        event_sink: EventSink | None = None,
    ) -> DelegateTool:
        """Create the ``delegate_task`` tool bound to this manager."""
        return DelegateTool(
            self,
            source_agent=source_agent,
            current_history_entry_id=current_history_entry_id,
            operation_context=operation_context,
            max_steps=max_steps,
            conversation_id=conversation_id,
            user_id=user_id,
            event_sink=event_sink,
        )

    # ------------------------------------------------------------------
    # Tracking
    # ------------------------------------------------------------------

    def get_usage_breakdown(self) -> dict[str, TokenUsage]:
        """Get per-worker token usage from all delegations through this manager."""
        return self._usage_tracker.get_subagent_usage()

    def _aggregate_usage(self, result: DelegationResult) -> None:
        if result.usage is not None:
            self._usage_tracker.record_subagent_usage(result.sub_agent_name, result.usage)

    # ------------------------------------------------------------------
    # Dunder methods
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        """Return a string representation of the manager."""
        return f"SubagentManager(owner={self.owner_name!r}, sub_agents={len(self._sub_agents)})"

    def __len__(self) -> int:
        """Return the number of registered workers."""
        return len(self._sub_agents)
