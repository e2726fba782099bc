"""Runtime settings read from ``TICTACTOE_*`` environment variables."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from .ai import STRATEGIES

ENV_PREFIX = "TICTACTOE_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Server and default-strategy configuration."""

    host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to")
    port: int = Field(default=8000, ge=1, le=65535, description="Port uvicorn listens on")
    log_level: str = Field(default="INFO", description="Root logging level")
    x_strategy: str = Field(default="minimax", description="Default strategy for X")
    o_strategy: str = Field(default="random", description="Default strategy for O")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"Unsupported log level {value!r}. Choose one of {', '.join(LOG_LEVELS)}."
            )
        return level

    @field_validator("x_strategy", "o_strategy", mode="before")
    @classmethod
    def ensure_known_strategy(cls, value: str) -> str:
        name = str(value).strip().lower()
        if name not in STRATEGIES:
            raise ValueError(
                f"Unknown strategy {value!r}. Choose one of {', '.join(STRATEGIES)}."
            )
        return name

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging once, at the level from the settings."""
    if getattr(setup_logging, "_configured", False):
        return
    settings = settings or get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level), format=LOG_FORMAT)
    setup_logging._configured = True  # type: ignore[attr-defined]
