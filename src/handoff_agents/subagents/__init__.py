"""Subagents subsystem for task delegation.

Lets a supervisor hand a task to one or more workers, relay their stream
events upward, and expose the whole coordination as a ``delegate_task``
tool. The ``SubagentManager`` facade composes all components behind a
single API.

Quick Start:
    >>> from handoff_agents.subagents import SubagentManager, create_subagent
    >>> manager = SubagentManager("supervisor", [researcher])
    >>> manager.add_sub_agent(create_subagent(writer, "generate_text"))
    >>> results = await manager.handoff_to_multiple("Summarize", manager.get_sub_agents())

Classes:
    SubagentManager: Top-level facade for the subagents subsystem.
    WorkerConfig: A worker paired with an explicit generation method.
    WorkerDescriptor: Normalized delegation target.
    DelegationRequest: One delegation attempt.
    DelegationResult: Result of one delegation.
    DelegateTool: The ``delegate_task`` tool.
    SupervisorConfig: Supervisor prompt customization.

Exceptions:
    SubagentError: Base exception for all subagent-related errors.
    DelegationValidationError: Delegate tool input was rejected.
    SubagentNotFoundError: Referenced worker was not found.
    SubagentSchemaError: Object method used without a schema.
"""

from __future__ import annotations

from handoff_agents.subagents.config import (
    DelegationMethod,
    DelegationRequest,
    DelegationResult,
    DelegationStatus,
    OperationContext,
    SupervisorConfig,
    WorkerConfig,
    WorkerDescriptor,
    WorkerTarget,
    create_subagent,
)
from handoff_agents.subagents.delegation import handoff_task, handoff_to_multiple
from handoff_agents.subagents.errors import (
    DelegationValidationError,
    SubagentError,
    SubagentNotFoundError,
    SubagentSchemaError,
)
from handoff_agents.subagents.manager import SubagentManager
from handoff_agents.subagents.prompts import DEFAULT_GUIDELINES, compose_supervisor_prompt
from handoff_agents.subagents.resolver import (
    get_worker_id,
    get_worker_name,
    get_worker_purpose,
    resolve_target,
)
from handoff_agents.subagents.tool import DelegateTaskParams, DelegateTool

__all__ = [
    "DEFAULT_GUIDELINES",
    "DelegateTaskParams",
    "DelegateTool",
    "DelegationMethod",
    "DelegationRequest",
    "DelegationResult",
    "DelegationStatus",
    "DelegationValidationError",
    "OperationContext",
    "SubagentError",
    "SubagentManager",
    "SubagentNotFoundError",
    "SubagentSchemaError",
    "SupervisorConfig",
    "WorkerConfig",
    "WorkerDescriptor",
    "WorkerTarget",
    "compose_supervisor_prompt",
    "create_subagent",
    "get_worker_id",
    "get_worker_name",
    "get_worker_purpose",
    "handoff_task",
    "handoff_to_multiple",
    "resolve_target",
]
