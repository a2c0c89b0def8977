"""
Runtime settings read from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_MAX_EXEC_STEPS = 10_000


def _positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw) if raw else default
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    log_level: str = DEFAULT_LOG_LEVEL
    log_max_len: int = 0
    max_exec_steps: int = DEFAULT_MAX_EXEC_STEPS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        try:
            log_max_len = max(0, int(env.get("LOGICGRAPH_LOG_MAX_LEN", "0") or 0))
        except ValueError:
            log_max_len = 0
        return cls(
            log_level=(env.get("LOGICGRAPH_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
            log_max_len=log_max_len,
            max_exec_steps=_positive_int(
                env.get("LOGICGRAPH_MAX_EXEC_STEPS"), DEFAULT_MAX_EXEC_STEPS
            ),
        )


def get_settings() -> Settings:
    return Settings.from_env()
