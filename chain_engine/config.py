"""chain_engine.config

Engine configuration passed from UI.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "CHAIN_CLICKER_"


@dataclass(frozen=True)
class EngineConfig:
    tick_ms: int = 1000
    storage_key: str = "units"
    save_path: str = ".chain_clicker/storage.json"
    max_catchup: int = 5
    log_level: str = "INFO"

    @property
    def tick_seconds(self) -> float:
        return self.tick_ms / 1000.0


def _int_env(env: Mapping[str, str], name: str, default: int, minimum: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        val = int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None
    if val < minimum:
        raise ValueError(f"{ENV_PREFIX}{name} must be >= {minimum}, got {val}")
    return val


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """Build an EngineConfig from CHAIN_CLICKER_* variables (defaults otherwise)."""
    env = os.environ if environ is None else environ
    base = EngineConfig()

    level = (env.get(ENV_PREFIX + "LOG_LEVEL") or base.log_level).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{ENV_PREFIX}LOG_LEVEL is not a logging level: {level!r}")

    return EngineConfig(
        tick_ms=_int_env(env, "TICK_MS", base.tick_ms, minimum=1),
        storage_key=(env.get(ENV_PREFIX + "STORAGE_KEY") or base.storage_key).strip(),
        save_path=(env.get(ENV_PREFIX + "SAVE_PATH") or base.save_path).strip(),
        max_catchup=_int_env(env, "MAX_CATCHUP", base.max_catchup, minimum=1),
        log_level=level,
    )


def configure_logging(config: EngineConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
