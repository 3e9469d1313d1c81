# Runtime settings for the key source (logging, rotation policy).
from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta

_LOG_LEVEL_ENV = "AZKV_LOG_LEVEL"
_LOG_JSON_ENV = "AZKV_LOG_JSON"


def _default_level() -> str:
    return os.getenv(_LOG_LEVEL_ENV, "INFO").upper()


def _default_json() -> bool:
    return os.getenv(_LOG_JSON_ENV, "1").lower() not in {"0", "false", "no"}


@dataclass(frozen=True)
class LoggingConfig:
    level: str = field(default_factory=_default_level)
    json: bool = field(default_factory=_default_json)


@dataclass(frozen=True)
class RotationConfig:
    """Age after which a data key should be rotated (six 30-day months)"""

    max_age_days: int = 30 * 6

    @property
    def max_age(self) -> timedelta:
        return timedelta(days=self.max_age_days)


@dataclass(frozen=True)
class AppConfig:
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    rotation: RotationConfig = field(default_factory=RotationConfig)


CONFIG = AppConfig()

__all__ = ["AppConfig", "CONFIG", "LoggingConfig", "RotationConfig"]
