"""Token usage tracking."""

from handoff_agents.tokens.tracker import TokenUsage, UsageTracker

__all__ = [
    "TokenUsage",
    "UsageTracker",
]
