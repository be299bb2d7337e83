"""Monte Carlo kill simulation for a single counter strategy."""

from __future__ import annotations

from typing import Final, Optional, Protocol

import numpy as np

from .models import SimulationConfig
from .strategy import Strategy

ROLL_BLOCK_SIZE: Final[int] = 1 << 16


class UniformSource(Protocol):
    """Anything that can hand out blocks of uniform ``[0, 1)`` draws."""

    def random(self, size: int) -> np.ndarray: ...


def simulate(
    config: SimulationConfig,
    strategy: Strategy,
    rng: Optional[UniformSource] = None,
) -> int:
    """Simulate ``config.steps_per_strategy`` kills and return the number of drops.

    Parameters
    ----------
    config:
        Drop mechanic parameters.
    strategy:
        Rule deciding, from the counter value before each kill, whether the
        counter boost applies.
    rng:
        Source of uniform draws owned by this call. A fresh generator seeded
        from OS entropy is used when omitted.

    Notes
    -----
    The drop chance is never clamped: a negative chance never drops and a
    chance of 1.0 or more always drops. Pity drops do not consume a draw.
    """

    if rng is None:
        rng = np.random.default_rng()

    decide = strategy.decide
    base_drop_rate = config.base_drop_rate
    counter_multiplier = config.counter_multiplier
    max_counter_value = config.max_counter_value

    counter = 0
    drops = 0
    rolls: list[float] = []
    cursor = 0
    for _ in range(config.steps_per_strategy):
        counter_active = decide(counter)

        counter += 1
        if counter >= max_counter_value:
            # pity drop
            drops += 1
            counter = 0
            continue

        if counter_active:
            drop_chance = base_drop_rate + counter_multiplier * counter
        else:
            drop_chance = base_drop_rate

        if cursor >= len(rolls):
            rolls = rng.random(ROLL_BLOCK_SIZE).tolist()
            cursor = 0
        roll = rolls[cursor]
        cursor += 1

        if roll < drop_chance:
            drops += 1
            if counter_active:
                counter = 0

    return drops
