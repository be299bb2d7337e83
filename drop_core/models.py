"""Dataclasses shared across simulation, evaluation and search modules."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SimulationConfig:
    """Drop mechanic parameters shared by every simulation of a sweep.

    Parameters
    ----------
    base_drop_rate:
        Unconditional per-kill drop probability.
    counter_multiplier:
        Extra drop probability per counter unit while the counter is active.
    max_counter_value:
        Pity ceiling; reaching it forces a drop and resets the counter.
    steps_per_strategy:
        Number of simulated kills per strategy evaluation.
    """

    base_drop_rate: float
    counter_multiplier: float
    max_counter_value: int
    steps_per_strategy: int

    def __post_init__(self) -> None:
        if self.max_counter_value < 0:
            raise ValueError("max_counter_value must be non-negative.")
        if self.steps_per_strategy < 0:
            raise ValueError("steps_per_strategy must be non-negative.")

    @property
    def num_strategies(self) -> int:
        """Return the number of candidates in a full sweep (``0..=max_counter_value``)."""

        return self.max_counter_value + 1


@dataclass(frozen=True)
class StrategyResult:
    """Drop count produced by the candidate at ``index`` of a sweep."""

    index: int
    drops: int
    steps: int

    @property
    def drop_rate(self) -> float:
        """Return drops per simulated kill (0.0 when nothing was simulated)."""

        return self.drops / self.steps if self.steps > 0 else 0.0


@dataclass
class SearchOutcome:
    """Final state of a greedy threshold search."""

    thresholds: list[int]
    results: list[StrategyResult]
    rounds: int
    converged: bool
