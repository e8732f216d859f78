"""
Gammon - Engine Settings

Loads search and logging configuration from GAMMON_* environment variables.

Environment:
- GAMMON_TIME_BUDGET_MS: search time per decision (default 1000)
- GAMMON_MAX_SEARCH_DEPTH: iterative deepening limit (default 64)
- GAMMON_SIGNIFICANCE_MARGIN: early-stop margin (default 0.03)
- GAMMON_LOG_LEVEL: logging level name (default WARNING)
- GAMMON_SEED: seed for dice, unset for a random game
"""

from __future__ import annotations
from functools import lru_cache
from typing import Optional
import logging
import os

from pydantic import BaseModel, Field, field_validator


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class EngineSettings(BaseModel):
    """Settings for the search engine and the command line."""
    time_budget_ms: int = Field(1000, ge=0)
    max_search_depth: int = Field(64, ge=1)
    significance_margin: float = Field(0.03, ge=0.0)
    log_level: str = "WARNING"
    seed: Optional[int] = None

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def from_env(cls) -> EngineSettings:
        """Read GAMMON_* variables; unset ones keep their defaults."""
        values = {
            "time_budget_ms": os.getenv("GAMMON_TIME_BUDGET_MS"),
            "max_search_depth": os.getenv("GAMMON_MAX_SEARCH_DEPTH"),
            "significance_margin": os.getenv("GAMMON_SIGNIFICANCE_MARGIN"),
            "log_level": os.getenv("GAMMON_LOG_LEVEL"),
            "seed": os.getenv("GAMMON_SEED"),
        }
        return cls(**{k: v for k, v in values.items() if v not in (None, "")})


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Cached singleton settings instance."""
    return EngineSettings.from_env()


def configure_logging(level: str | int = "WARNING") -> None:
    """Send gammon's log records to stderr at the given level."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("gammon").setLevel(level)
