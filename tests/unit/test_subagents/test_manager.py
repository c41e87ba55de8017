"""Tests for the SubagentManager facade."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import BaseModel

from handoff_agents.config import DelegationConfig, HandoffSettings
from handoff_agents.registry import AgentRegistry
from handoff_agents.subagents.config import SupervisorConfig, create_subagent
from handoff_agents.subagents.errors import SubagentNotFoundError
from handoff_agents.subagents.manager import SubagentManager
from handoff_agents.subagents.tool import DelegateTool


class Outline(BaseModel):
    title: str


@pytest.fixture
def registry() -> AgentRegistry:
    return AgentRegistry()


class TestWorkerManagement:
    """Tests for adding, removing and looking up workers."""

    def test_initial_workers_registered(self, make_worker: Any, registry: AgentRegistry) -> None:
        manager = SubagentManager(
            "coordinator",
            [make_worker("a"), make_worker("b")],
            owner_id="sup-1",
            registry=registry,
        )

        assert len(manager) == 2
        assert registry.get_sub_agent_ids("sup-1") == ["a", "b"]
        assert registry.get_parent_agent_ids("a") == ["sup-1"]

    def test_owner_id_defaults_to_name(self, make_worker: Any, registry: AgentRegistry) -> None:
        SubagentManager("coordinator", [make_worker("a")], registry=registry)
        assert registry.get_parent_agent_ids("a") == ["coordinator"]

    def test_add_configured_target(self, make_worker: Any, registry: AgentRegistry) -> None:
        manager = SubagentManager("coordinator", registry=registry)
        worker = make_worker("a")

        manager.add_sub_agent(create_subagent(worker, "generate_text"))

        assert manager.has_sub_agents()
        assert registry.get_sub_agent_ids("coordinator") == ["a"]

    def test_remove_sub_agent(self, make_worker: Any, registry: AgentRegistry) -> None:
        manager = SubagentManager(
            "coordinator", [make_worker("a"), make_worker("b")], registry=registry
        )

        manager.remove_sub_agent("a")

        assert [d.worker_name for d in manager.get_descriptors()] == ["b"]
        assert registry.get_parent_agent_ids("a") == []
        assert registry.get_sub_agent_ids("coordinator") == ["b"]

    def test_remove_unknown_is_noop(self, make_worker: Any) -> None:
        manager = SubagentManager("coordinator", [make_worker("a")])
        manager.remove_sub_agent("ghost")
        assert len(manager) == 1

    def test_unregister_all(self, make_worker: Any, registry: AgentRegistry) -> None:
        manager = SubagentManager(
            "coordinator", [make_worker("a"), make_worker("b")], registry=registry
        )

        manager.unregister_all_sub_agents()

        assert len(registry) == 0
        assert len(manager) == 2

    def test_get_sub_agents_returns_copy(self, make_worker: Any) -> None:
        manager = SubagentManager("coordinator", [make_worker("a")])

        manager.get_sub_agents().clear()

        assert len(manager) == 1

    def test_get_sub_agent(self, make_worker: Any) -> None:
        writer = make_worker("writer")
        manager = SubagentManager("coordinator", [make_worker("researcher"), writer])

        assert manager.get_sub_agent("writer").worker is writer

    def test_get_sub_agent_not_found(self, make_worker: Any) -> None:
        manager = SubagentManager("coordinator", [make_worker("researcher"), make_worker("writer")])

        with pytest.raises(SubagentNotFoundError) as exc_info:
            manager.get_sub_agent("ghost")

        assert str(exc_info.value) == (
            "Sub-agent 'ghost' not found. Available agents: researcher, writer"
        )
        assert exc_info.value.available == ["researcher", "writer"]

    def test_empty_manager(self) -> None:
        manager = SubagentManager("coordinator")

        assert not manager.has_sub_agents()
        assert manager.get_sub_agents() == []
        assert repr(manager) == "SubagentManager(owner='coordinator', sub_agents=0)"


class TestCalculateMaxSteps:
    """Tests for calculate_max_steps."""

    def test_no_workers(self) -> None:
        assert SubagentManager("coordinator").calculate_max_steps() == 10

    def test_scales_with_workers(self, make_worker: Any) -> None:
        manager = SubagentManager("coordinator", [make_worker("a"), make_worker("b")])
        assert manager.calculate_max_steps() == 20

    @pytest.mark.parametrize("explicit", [5, 0, -1])
    def test_explicit_value_wins(self, make_worker: Any, explicit: int) -> None:
        manager = SubagentManager("coordinator", [make_worker("a"), make_worker("b")])
        assert manager.calculate_max_steps(explicit) == explicit

    def test_steps_per_worker_from_settings(self, make_worker: Any) -> None:
        settings = HandoffSettings(delegation=DelegationConfig(steps_per_worker=3))
        manager = SubagentManager(
            "coordinator", [make_worker("a"), make_worker("b")], settings=settings
        )

        assert manager.calculate_max_steps() == 6


class TestSubAgentDetails:
    """Tests for get_sub_agent_details."""

    def test_bare_worker(self, make_worker: Any) -> None:
        manager = SubagentManager(
            "coordinator", [make_worker("writer", purpose="Writes", instructions="Be brief.")]
        )

        assert manager.get_sub_agent_details() == [
            {"id": "writer", "name": "writer", "purpose": "Writes", "instructions": "Be brief."}
        ]

    def test_configured_worker(self, make_worker: Any) -> None:
        target = create_subagent(
            make_worker("planner", instructions=lambda ctx: "dynamic"),
            "generate_object",
            schema=Outline,
            options={"temperature": 0.1},
        )
        manager = SubagentManager("coordinator", [target])

        [details] = manager.get_sub_agent_details()

        assert details["purpose"] == "Dynamic instructions"
        assert details["instructions"] is None
        assert details["method_config"] == {
            "method": "generate_object",
            "schema": "defined",
            "options": ["temperature"],
        }

    def test_configured_worker_without_schema(self, make_worker: Any) -> None:
        manager = SubagentManager("coordinator", [create_subagent(make_worker("a"))])

        [details] = manager.get_sub_agent_details()

        assert details["method_config"] == {"method": "stream_text", "schema": None, "options": None}


class TestSupervisorPrompt:
    """Tests for generate_supervisor_system_message."""

    def test_uses_manager_config(self, make_worker: Any) -> None:
        manager = SubagentManager(
            "coordinator",
            [make_worker("a")],
            supervisor_config=SupervisorConfig(system_message="Route.", include_agents_memory=False),
        )

        assert manager.generate_supervisor_system_message("Be helpful.") == "Route."

    def test_explicit_config_overrides(self, make_worker: Any) -> None:
        manager = SubagentManager(
            "coordinator",
            [make_worker("a")],
            supervisor_config=SupervisorConfig(system_message="Route."),
        )

        prompt = manager.generate_supervisor_system_message(
            "Be helpful.", "mem", SupervisorConfig(include_agents_memory=False)
        )

        assert prompt.startswith("You are a supervisor agent")
        assert "<agents_memory>\n" not in prompt

    def test_no_workers(self) -> None:
        manager = SubagentManager("coordinator")
        assert manager.generate_supervisor_system_message("Be helpful.") == "Be helpful."


class TestDelegation:
    """Tests for delegation through the manager."""

    async def test_handoff_task(self, make_worker: Any) -> None:
        worker = make_worker("writer", text="draft")
        manager = SubagentManager("coordinator", [worker])

        result = await manager.handoff_task("Write", worker, context={"k": "v"})

        assert result.success
        assert result.result == "draft"
        assert result.messages[0]["content"].startswith(
            "Task handed off from coordinator to writer:"
        )

    async def test_task_message_role_from_settings(self, make_worker: Any) -> None:
        worker = make_worker("writer")
        settings = HandoffSettings(delegation=DelegationConfig(task_message_role="system"))
        manager = SubagentManager("coordinator", [worker], settings=settings)

        results = await manager.handoff_to_multiple("Write", manager.get_sub_agents())

        assert results[0].messages[0]["role"] == "system"

    async def test_shared_context_forwarded(self, make_worker: Any) -> None:
        worker = make_worker("writer")
        manager = SubagentManager("coordinator", [worker])
        shared = [{"role": "assistant", "content": "Earlier"}]

        await manager.handoff_to_multiple("Write", [worker], shared_context=shared)

        assert worker.calls[0]["messages"][0] == {"role": "assistant", "content": "Earlier"}

    async def test_usage_breakdown(self, make_worker: Any) -> None:
        usage = {"input_tokens": 10, "output_tokens": 5}
        a = make_worker("a", usage=usage)
        b = make_worker("b", usage=usage)
        manager = SubagentManager("coordinator", [a, b])

        await manager.handoff_to_multiple("Task", [a, b])
        await manager.handoff_task("Task", a)

        breakdown = manager.get_usage_breakdown()
        assert breakdown["a"].prompt_tokens == 20
        assert breakdown["a"].request_count == 2
        assert breakdown["b"].total_tokens == 15

    async def test_failed_delegation_records_no_usage(self, make_worker: Any) -> None:
        worker = make_worker("a", error=RuntimeError("down"))
        manager = SubagentManager("coordinator", [worker])

        await manager.handoff_task("Task", worker)

        assert manager.get_usage_breakdown() == {}

    def test_create_delegate_tool(self, make_worker: Any) -> None:
        manager = SubagentManager("coordinator", [make_worker("a")])

        tool = manager.create_delegate_tool(max_steps=3)

        assert isinstance(tool, DelegateTool)
        assert tool.max_steps == 3
        assert repr(tool) == "DelegateTool(name='delegate_task', workers=1)"
