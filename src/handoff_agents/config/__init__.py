"""Configuration system for handoff-agents.

Main exports:
- HandoffSettings: Root configuration class
- DelegationConfig: Task handoff behaviour
- LoggingConfig: Logging configuration
"""

from handoff_agents.config.delegation import (
    DEFAULT_FORWARDED_EVENT_TYPES,
    DelegationConfig,
    StreamEventType,
)
from handoff_agents.config.logging_config import LoggingConfig
from handoff_agents.config.settings import HandoffSettings

__all__ = [
    "DEFAULT_FORWARDED_EVENT_TYPES",
    "DelegationConfig",
    "HandoffSettings",
    "LoggingConfig",
    "StreamEventType",
]
