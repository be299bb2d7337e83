"""Default mechanic parameters and configuration file helpers."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Final, Optional

from .models import SimulationConfig

DEFAULT_BASE_DROP_RATE: Final[float] = 0.001
DEFAULT_COUNTER_MULTIPLIER: Final[float] = 0.000002
DEFAULT_MAX_COUNTER_VALUE: Final[int] = 1000
DEFAULT_STEPS_PER_STRATEGY: Final[int] = 10_000_000_000

# Safety cap for the greedy search; it has no termination proof beyond the sentinel.
DEFAULT_MAX_ROUNDS: Final[int] = 1000

CONFIG_FIELDS: Final[dict[str, type]] = {
    "base_drop_rate": float,
    "counter_multiplier": float,
    "max_counter_value": int,
    "steps_per_strategy": int,
}

DEFAULT_CONFIG_VALUES: Final[dict[str, float | int]] = {
    "base_drop_rate": DEFAULT_BASE_DROP_RATE,
    "counter_multiplier": DEFAULT_COUNTER_MULTIPLIER,
    "max_counter_value": DEFAULT_MAX_COUNTER_VALUE,
    "steps_per_strategy": DEFAULT_STEPS_PER_STRATEGY,
}


def default_config() -> SimulationConfig:
    """Return the configuration used when nothing is overridden."""

    return SimulationConfig(**DEFAULT_CONFIG_VALUES)


def parse_config_overrides(raw_data: Mapping[object, object]) -> dict[str, float | int]:
    """Coerce JSON-compatible overrides into typed config values.

    Unknown keys and values that cannot be converted are skipped.
    """

    overrides: dict[str, float | int] = {}
    for key, value in raw_data.items():
        if not isinstance(key, str) or key not in CONFIG_FIELDS:
            continue
        caster = CONFIG_FIELDS[key]
        try:
            overrides[key] = caster(value)
        except (TypeError, ValueError):
            continue
    return overrides


def build_config(
    overrides: Optional[Mapping[str, Optional[float | int]]] = None,
    base: Optional[Mapping[str, float | int]] = None,
) -> SimulationConfig:
    """Merge ``overrides`` over ``base`` (defaults when omitted), ignoring ``None`` values."""

    values = dict(DEFAULT_CONFIG_VALUES if base is None else base)
    if overrides:
        for key, value in overrides.items():
            if value is not None and key in CONFIG_FIELDS:
                values[key] = value
    return SimulationConfig(**values)


def load_config_values(path: str | Path) -> dict[str, float | int]:
    """Read a JSON config file and return defaults updated with its values.

    Raises
    ------
    ValueError
        If the file cannot be read or does not hold a JSON object.
    """

    config_path = Path(path)
    try:
        raw_data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Cannot read config file {config_path!s}: {exc}") from exc

    if not isinstance(raw_data, Mapping):
        raise ValueError(f"Config file {config_path!s} must contain a JSON object.")

    values = dict(DEFAULT_CONFIG_VALUES)
    values.update(parse_config_overrides(raw_data))
    return values


def load_config_file(path: str | Path) -> SimulationConfig:
    """Return the ``SimulationConfig`` described by a JSON file."""

    return SimulationConfig(**load_config_values(path))
