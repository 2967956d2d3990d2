"""
Configuration - Defaults for building a motherboard.

Configuration is passed in explicitly; nothing is read from the
environment or from files.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hubnet.board import Motherboard
from hubnet.observability import WarningChannel, configure_logging


class BoardConfig(BaseModel):
    """
    Configuration for a motherboard and its warning channel.
    """

    record_traffic: bool = Field(
        default=False,
        description="Keep a log of routed unicast and broadcast traffic"
    )

    traffic_limit: int = Field(
        default=1000,
        gt=0,
        description="Maximum retained traffic records (oldest dropped)"
    )

    warning_history: int = Field(
        default=100,
        gt=0,
        description="Maximum retained warning events on the channel"
    )

    setup_logging: bool = Field(
        default=False,
        description="Install a handler on the 'hubnet' logger when building"
    )

    log_level: str = Field(
        default="WARNING",
        description="Level for the 'hubnet' logger when setup_logging is set"
    )

    json_logs: bool = Field(
        default=False,
        description="Use the JSON formatter instead of the readable one"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("log_level")
    @classmethod
    def log_level_must_exist(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level


def create_motherboard(config: BoardConfig | None = None, **overrides) -> Motherboard:
    """
    Factory for a motherboard with its own warning channel.

    Keyword overrides replace individual config fields.
    """
    if config is None:
        config = BoardConfig(**overrides)
    elif overrides:
        config = BoardConfig(**{**config.model_dump(), **overrides})

    if config.setup_logging:
        configure_logging(level=config.log_level, json_format=config.json_logs)

    return Motherboard(
        warnings=WarningChannel(history_limit=config.warning_history),
        record_traffic=config.record_traffic,
        traffic_limit=config.traffic_limit,
    )
