#!/usr/bin/env python3
"""Direct fan-out with mixed delegation methods.

This example demonstrates:
- Delegating one task to several workers without a supervisor model
- Structured output through create_subagent(..., "generate_object")
- Per-worker failure isolation in the returned results

Prerequisites:
- Set OPENAI_API_KEY environment variable
"""

import asyncio
import os

from pydantic import BaseModel
from pydantic_ai import Agent

from handoff_agents import PydanticAIWorker, SubagentManager, create_subagent


class TripOutline(BaseModel):
    destination: str
    days: list[str]


async def main():
    if not os.environ.get("OPENAI_API_KEY"):
        print("Please set OPENAI_API_KEY environment variable")
        return

    planner = PydanticAIWorker(
        Agent("openai:gpt-4o-mini", instructions="You plan trips."),
        name="planner",
        purpose="Builds day-by-day itineraries",
    )
    critic = PydanticAIWorker(
        Agent("openai:gpt-4o-mini", instructions="You point out travel pitfalls."),
        name="critic",
        purpose="Reviews plans for problems",
    )

    manager = SubagentManager(
        "trip-desk",
        [
            create_subagent(planner, "generate_object", schema=TripOutline),
            create_subagent(critic, "generate_text", options={"temperature": 0.2}),
        ],
    )

    results = await manager.handoff_to_multiple(
        "Plan a three day trip",
        manager.get_sub_agents(),
        context={"city": "Lisbon", "budget": "moderate"},
    )

    for result in results:
        print(f"--- {result.sub_agent_name} ({result.status.value}) ---")
        print(result.result)
    print(f"Conversation: {results[0].conversation_id}")


if __name__ == "__main__":
    asyncio.run(main())
