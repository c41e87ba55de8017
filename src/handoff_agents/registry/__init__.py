"""Agent relationship registry."""

from handoff_agents.registry.agent_registry import AgentRegistry

__all__ = ["AgentRegistry"]
