"""A pydantic-ai agent that supervises workers through ``delegate_task``."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from typing import TYPE_CHECKING

from pydantic_ai import Agent as PydanticAgent
from pydantic_ai.models import Model
from pydantic_ai.usage import UsageLimits

from handoff_agents.config.settings import HandoffSettings
from handoff_agents.registry.agent_registry import AgentRegistry
from handoff_agents.subagents.config import OperationContext, SupervisorConfig, WorkerTarget
from handoff_agents.subagents.manager import SubagentManager
from handoff_agents.workers.events import EventSink

if TYPE_CHECKING:
    from pydantic_ai import AgentRunResult

logger = logging.getLogger(__name__)


class Supervisor:
    """Supervisor agent coordinating a set of workers.

    Each ``run`` composes the supervisor system prompt from the current
    workers and memory, builds a fresh ``delegate_task`` tool bound to the
    run's operation context, and runs a pydantic-ai agent with it.

    Example::

        supervisor = Supervisor(
            "openai:gpt-4o",
            name="coordinator",
            instructions="Answer the user's travel questions.",
            sub_agents=[flights, hotels],
        )
        result = await supervisor.run("Plan a weekend in Lisbon")
        print(result.output)

    Args:
        model: Model name or pydantic-ai ``Model`` for the supervisor.
        name: Supervisor name, used in handoff attribution.
        instructions: The supervisor's base instructions.
        sub_agents: Initial worker targets.
        id: Stable id; a random UUID when omitted.
        max_steps: Explicit step budget; scaled by worker count when omitted.
        supervisor_config: Prompt customization.
        settings: Delegation settings.
        registry: Registry mirroring parent/child edges.
    """

    def __init__(
        self,
        model: Model | str,
        *,
        name: str,
        instructions: str = "",
        sub_agents: Iterable[WorkerTarget] | None = None,
        id: str | None = None,
        max_steps: int | None = None,
        supervisor_config: SupervisorConfig | None = None,
        settings: HandoffSettings | None = None,
        registry: AgentRegistry | None = None,
    ) -> None:
        self.model = model
        self.id = id or str(uuid.uuid4())
        self.name = name
        self.instructions = instructions
        self.max_steps = max_steps
        self.subagents = SubagentManager(
            name,
            sub_agents,
            owner_id=self.id,
            registry=registry,
            supervisor_config=supervisor_config,
            settings=settings,
        )

    def __repr__(self) -> str:
        return f"Supervisor(name={self.name!r}, sub_agents={len(self.subagents)})"

    def get_system_prompt(self, agents_memory: str | None = "") -> str:
        return self.subagents.generate_supervisor_system_message(self.instructions, agents_memory)

    def build_agent(
        self,
        *,
        agents_memory: str | None = "",
        operation_context: OperationContext | None = None,
        event_sink: EventSink | None = None,
        conversation_id: str | None = None,
        user_id: str | None = None,
    ) -> PydanticAgent[None, str]:
        """Build the pydantic-ai agent for one supervisor run.

        The ``delegate_task`` tool is only attached when workers are present.
        """
        tools = []
        if self.subagents.has_sub_agents():
            delegate_tool = self.subagents.create_delegate_tool(
                source_agent=self,
                current_history_entry_id=(
                    operation_context.operation_id if operation_context else None
                ),
                operation_context=operation_context,
                max_steps=self.max_steps,
                conversation_id=conversation_id,
                user_id=user_id,
                event_sink=event_sink,
            )
            tools.append(delegate_tool.as_pydantic_ai_tool())

        return PydanticAgent(
            self.model,
            instructions=self.get_system_prompt(agents_memory),
            tools=tools,
            name=self.name,
        )

    async def run(
        self,
        prompt: str,
        *,
        agents_memory: str | None = "",
        operation_context: OperationContext | None = None,
        event_sink: EventSink | None = None,
        conversation_id: str | None = None,
        user_id: str | None = None,
    ) -> AgentRunResult[str]:
        """Run the supervisor on a user prompt.

        Args:
            prompt: The user's message.
            agents_memory: Formatted memory of previous agent interactions.
            operation_context: Context shared with delegated workers.
            event_sink: Receives worker stream events during delegation.
            conversation_id: Correlation id for delegated batches.
            user_id: User the run is for.

        Returns:
            The pydantic-ai run result.
        """
        operation_context = operation_context or OperationContext(
            operation_id=str(uuid.uuid4()),
            user_id=user_id,
            conversation_id=conversation_id,
        )
        agent = self.build_agent(
            agents_memory=agents_memory,
            operation_context=operation_context,
            event_sink=event_sink,
            conversation_id=conversation_id,
            user_id=user_id,
        )
        request_limit = self.subagents.calculate_max_steps(self.max_steps)
        logger.debug("Running supervisor '%s' with request limit %d", self.name, request_limit)
        return await agent.run(
            prompt,
            usage_limits=UsageLimits(request_limit=request_limit) if request_limit > 0 else None,
        )

    def close(self) -> None:
        """Drop this supervisor's registry edges."""
        self.subagents.unregister_all_sub_agents()
