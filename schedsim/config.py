from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError
from .schedulers import DEFAULT_MAX_STEPS, DEFAULT_TIME_QUANTUM

ENV_PREFIX = "SCHEDSIM_"


@dataclass
class Settings:
    log_level: str = "WARNING"
    step_delay: float = 0.3  # seconds between interactive steps
    max_steps: int = DEFAULT_MAX_STEPS
    time_quantum: int = DEFAULT_TIME_QUANTUM
    random_seed: Optional[int] = None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Read SCHEDSIM_* environment variables on top of the defaults.
    """
    env = os.environ if environ is None else environ
    settings = Settings()

    level = env.get(ENV_PREFIX + "LOG_LEVEL")
    if level:
        settings.log_level = level.strip().upper()

    delay = env.get(ENV_PREFIX + "STEP_DELAY")
    if delay:
        settings.step_delay = _parse(delay, float, "STEP_DELAY")
        if settings.step_delay < 0:
            raise ConfigError("SCHEDSIM_STEP_DELAY must be >= 0")

    max_steps = env.get(ENV_PREFIX + "MAX_STEPS")
    if max_steps:
        settings.max_steps = _parse(max_steps, int, "MAX_STEPS")
        if settings.max_steps <= 0:
            raise ConfigError("SCHEDSIM_MAX_STEPS must be positive")

    quantum = env.get(ENV_PREFIX + "TIME_QUANTUM")
    if quantum:
        settings.time_quantum = _parse(quantum, int, "TIME_QUANTUM")
        if settings.time_quantum <= 0:
            raise ConfigError("SCHEDSIM_TIME_QUANTUM must be positive")

    seed = env.get(ENV_PREFIX + "RANDOM_SEED")
    if seed:
        settings.random_seed = _parse(seed, int, "RANDOM_SEED")

    return settings


def _parse(raw: str, kind, name: str):
    try:
        return kind(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{ENV_PREFIX}{name} has an invalid value: {raw!r}") from exc
