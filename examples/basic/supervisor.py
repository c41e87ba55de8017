#!/usr/bin/env python3
"""Supervisor agent example.

This example demonstrates:
- Wrapping pydantic-ai agents as workers
- Running a supervisor that delegates through the delegate_task tool
- Watching worker stream events as they arrive

Prerequisites:
- Set OPENAI_API_KEY environment variable
"""

import asyncio
import os

from pydantic_ai import Agent

from handoff_agents import HandoffSettings, PydanticAIWorker, Supervisor, setup_logging


async def print_event(event):
    """Event sink: print text as each worker produces it."""
    if event.type == "text-delta":
        print(f"[{event.sub_agent_name}] {event.payload['text']}", end="", flush=True)
    elif event.type == "tool-call":
        print(f"\n[{event.sub_agent_name}] calling {event.payload['tool_name']}")


async def main():
    if not os.environ.get("OPENAI_API_KEY"):
        print("Please set OPENAI_API_KEY environment variable")
        return

    settings = HandoffSettings()  # Loads from env, .env, config.toml
    setup_logging(settings.logging)

    researcher = PydanticAIWorker(
        Agent("openai:gpt-4o-mini", instructions="You research facts. Be precise."),
        name="researcher",
        purpose="Looks up facts and figures",
    )
    writer = PydanticAIWorker(
        Agent("openai:gpt-4o-mini", instructions="You write short, friendly prose."),
        name="writer",
        purpose="Turns notes into readable text",
    )

    supervisor = Supervisor(
        "openai:gpt-4o-mini",
        name="coordinator",
        instructions="Answer the user's questions using your agents.",
        sub_agents=[researcher, writer],
        settings=settings,
    )

    result = await supervisor.run(
        "Write two sentences about the tallest mountain in Europe.",
        event_sink=print_event,
    )
    print(f"\n\nAnswer: {result.output}")

    # Token usage per worker
    for name, usage in supervisor.subagents.get_usage_breakdown().items():
        print(f"{name}: {usage.total_tokens} tokens")

    supervisor.close()


if __name__ == "__main__":
    asyncio.run(main())
