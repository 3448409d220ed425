# Copyright (c) 2023-2025, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ("CollectionSettings", "settings")

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class CollectionSettings(BaseSettings, frozen=True):
    """Package defaults with environment variable support.

    Every setting can be overridden through a ``COLLECTIONKIT_`` prefixed
    environment variable or an entry in one of the ``.env`` files.
    """

    model_config = SettingsConfigDict(
        env_prefix="COLLECTIONKIT_",
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    DEFAULT_OVERRIDE: bool = Field(
        False,
        description="Whether new collections overwrite elements on duplicate keys",
    )
    DEFAULT_LISTENING: bool = Field(
        True, description="Whether new collections start with events enabled"
    )
    SORT_DELAY: float = Field(
        0.01,
        ge=0,
        description="Seconds a deferred sort waits before running",
    )
    LOG_LEVEL: str = Field(
        "WARNING", description="Level of the package logger"
    )

    @field_validator("LOG_LEVEL", mode="before")
    def _validate_log_level(cls, value: Any) -> str:
        level = str(value).upper()
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"Invalid log level <{value}>, must be one of {_LOG_LEVELS}"
            )
        return level


settings = CollectionSettings()
