"""Lifecycle and worker configuration.

Pure configuration data. Defaults are the production values; from_env()
overrides them from SWAPBOOK_* environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import final

ENV_PREFIX = "SWAPBOOK_"


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _env_str(env: Mapping[str, str], name: str, default: str) -> str:
    raw = env.get(f"{ENV_PREFIX}{name}")
    return raw.strip() if raw is not None and raw.strip() else default


@final
@dataclass(frozen=True, slots=True)
class LifecycleConfig:
    """Business constants of the trade lifecycle."""

    trade_id_base: int = 10000
    max_trade_date_age_days: int = 30

    def __post_init__(self) -> None:
        if self.trade_id_base < 1:
            raise TypeError(f"trade_id_base must be >= 1, got {self.trade_id_base}")
        if self.max_trade_date_age_days < 0:
            raise TypeError(
                f"max_trade_date_age_days must be >= 0, got {self.max_trade_date_age_days}"
            )

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> LifecycleConfig:
        env = os.environ if env is None else env
        return LifecycleConfig(
            trade_id_base=_env_int(env, "TRADE_ID_BASE", 10000),
            max_trade_date_age_days=_env_int(env, "MAX_TRADE_DATE_AGE_DAYS", 30),
        )


@final
@dataclass(frozen=True, slots=True)
class TemporalWorkerConfig:
    """Where the lifecycle worker connects and which queue it serves."""

    target_host: str = "localhost:7233"
    namespace: str = "default"
    task_queue: str = "swapbook-trade-lifecycle"

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> TemporalWorkerConfig:
        env = os.environ if env is None else env
        return TemporalWorkerConfig(
            target_host=_env_str(env, "TEMPORAL_HOST", "localhost:7233"),
            namespace=_env_str(env, "TEMPORAL_NAMESPACE", "default"),
            task_queue=_env_str(env, "TASK_QUEUE", "swapbook-trade-lifecycle"),
        )
