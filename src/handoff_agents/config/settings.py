"""Root settings for handoff-agents.

Values are read, highest priority first, from init arguments, environment
variables (``HANDOFF_`` prefix, ``__`` for nesting), a ``.env`` file, and a
``config.toml`` file in the working directory.

Example::

    HANDOFF_DELEGATION__TASK_MESSAGE_ROLE=system
    HANDOFF_LOGGING__LEVEL=DEBUG
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from handoff_agents.config.delegation import DelegationConfig
from handoff_agents.config.logging_config import LoggingConfig


class HandoffSettings(BaseSettings):
    """Root configuration.

    Attributes:
        delegation: Task handoff behaviour.
        logging: Logger setup.
    """

    model_config = SettingsConfigDict(
        env_prefix="HANDOFF_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        toml_file="config.toml",
        extra="ignore",
    )

    delegation: DelegationConfig = Field(default_factory=DelegationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Add the TOML file as the lowest-priority source."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )
