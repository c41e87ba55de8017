"""
Handoff Agents - Supervisor/worker task delegation built on pydantic-ai.

Quick Start:
    >>> from pydantic_ai import Agent
    >>> from handoff_agents import PydanticAIWorker, Supervisor
    >>> researcher = PydanticAIWorker(
    ...     Agent("openai:gpt-4o", instructions="You research topics."),
    ...     name="researcher",
    ...     purpose="Finds and summarizes sources",
    ... )
    >>> supervisor = Supervisor("openai:gpt-4o", name="coordinator", sub_agents=[researcher])
    >>> result = await supervisor.run("What changed in Python 3.13?")

Direct Delegation:
    >>> from handoff_agents import SubagentManager, create_subagent
    >>> manager = SubagentManager("coordinator", [researcher])
    >>> manager.add_sub_agent(create_subagent(writer, "generate_object", schema=Outline))
    >>> results = await manager.handoff_to_multiple("Outline a talk", manager.get_sub_agents())

With Settings:
    >>> from handoff_agents import HandoffSettings, setup_logging
    >>> settings = HandoffSettings()  # Loads from env, .env, config.toml
    >>> setup_logging(settings.logging)

Key Features:
    - Concurrent fan-out with per-worker failure isolation
    - Stream event relay tagged with the producing worker
    - A ``delegate_task`` tool for the supervisor's model
    - Supervisor system prompt composition
"""

from importlib.metadata import PackageNotFoundError, version

from handoff_agents.config import DelegationConfig, HandoffSettings, LoggingConfig
from handoff_agents.errors import AgentError, ConfigurationError, OperationAbortedError
from handoff_agents.observability import setup_logging
from handoff_agents.registry import AgentRegistry
from handoff_agents.subagents import (
    DelegateTool,
    DelegationMethod,
    DelegationResult,
    DelegationStatus,
    OperationContext,
    SubagentError,
    SubagentManager,
    SupervisorConfig,
    WorkerConfig,
    create_subagent,
)
from handoff_agents.supervisor import Supervisor
from handoff_agents.tokens import TokenUsage, UsageTracker
from handoff_agents.workers import (
    PydanticAIWorker,
    StreamEvent,
    SubAgentStreamEvent,
    Worker,
)

try:
    __version__ = version("handoff-agents")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    # Core
    "Supervisor",
    "SubagentManager",
    "DelegateTool",
    "create_subagent",
    # Workers
    "PydanticAIWorker",
    "Worker",
    "WorkerConfig",
    "StreamEvent",
    "SubAgentStreamEvent",
    # Delegation
    "DelegationMethod",
    "DelegationResult",
    "DelegationStatus",
    "OperationContext",
    "SupervisorConfig",
    # Config
    "HandoffSettings",
    "DelegationConfig",
    "LoggingConfig",
    "setup_logging",
    # Registry and tracking
    "AgentRegistry",
    "TokenUsage",
    "UsageTracker",
    # Errors
    "AgentError",
    "ConfigurationError",
    "OperationAbortedError",
    "SubagentError",
]
