"""Token usage tracking for delegated tasks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class TokenUsage:
    """Aggregate token usage statistics.

    Attributes:
        prompt_tokens: Total prompt tokens.
        completion_tokens: Total completion tokens.
        total_tokens: Total tokens.
        request_count: Number of requests.
    """

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    request_count: int = 0

    @classmethod
    def from_usage(cls, usage: Any) -> TokenUsage:
        """Build from a provider usage object.

        Accepts pydantic-ai ``RunUsage`` (``input_tokens``/``output_tokens``),
        the older ``request_tokens``/``response_tokens`` names, or a mapping
        with any of those keys. Returns an empty usage when nothing can be
        read.

        Args:
            usage: Usage reported by a worker.

        Returns:
            TokenUsage with extracted token counts.
        """
        if usage is None:
            return cls()
        if isinstance(usage, TokenUsage):
            return cls(**vars(usage))

        def read(*names: str) -> int:
            for name in names:
                value = usage.get(name) if isinstance(usage, dict) else getattr(usage, name, None)
                if isinstance(value, int) and value:
                    return value
            return 0

        prompt_tokens = read("input_tokens", "request_tokens", "prompt_tokens")
        completion_tokens = read("output_tokens", "response_tokens", "completion_tokens")
        total_tokens = read("total_tokens") or (prompt_tokens + completion_tokens)
        requests = read("requests", "request_count") or 1
        return cls(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
            request_count=requests,
        )

    def add(self, other: TokenUsage) -> None:
        """Accumulate another usage into this one in place."""
        self.prompt_tokens += other.prompt_tokens
        self.completion_tokens += other.completion_tokens
        self.total_tokens += other.total_tokens
        self.request_count += other.request_count


class UsageTracker:
    """Track token usage across delegations, broken down per worker."""

    def __init__(self) -> None:
        self._totals = TokenUsage()
        self._subagent_totals: dict[str, TokenUsage] = {}

    def record_subagent_usage(self, name: str, usage: TokenUsage) -> None:
        """Record token usage from a worker delegation.

        Args:
            name: The worker name (key in the per-worker breakdown).
            usage: The ``TokenUsage`` to aggregate.
        """
        self._totals.add(usage)
        self._subagent_totals.setdefault(name, TokenUsage()).add(usage)

    def get_total_usage(self) -> TokenUsage:
        """Get total usage across all workers."""
        return self._totals

    def get_subagent_usage(self) -> dict[str, TokenUsage]:
        """Get token usage broken down by worker name."""
        return dict(self._subagent_totals)

    def reset(self) -> None:
        """Clear all recorded usage."""
        self._totals = TokenUsage()
        self._subagent_totals.clear()
