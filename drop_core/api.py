"""High-level entry points used by the CLI, the UI and other callers."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from time import perf_counter
from typing import Optional

from .config import DEFAULT_MAX_ROUNDS
from .evaluator import ProgressFn, sweep_inverse_thresholds
from .models import SimulationConfig, StrategyResult
from .optimizer import RoundCallback, optimize_thresholds
from .strategy import XorInverseThresholds, xor_inverse

logger = logging.getLogger(__name__)


def first_best(results: Sequence[StrategyResult]) -> StrategyResult:
    """Return the earliest result with the highest drop count.

    Raises
    ------
    ValueError
        If ``results`` is empty.
    """

    if not results:
        raise ValueError("Cannot pick a best strategy from an empty result vector.")
    best = results[0]
    for result in results[1:]:
        if result.drops > best.drops:
            best = result
    return best


@dataclass
class YieldCurveResult:
    """Bundle returned by the single-sweep mode."""

    config: SimulationConfig
    results: list[StrategyResult]
    best: StrategyResult
    compute_seconds: float


@dataclass
class ThresholdSearchResult:
    """Bundle returned by the greedy search mode."""

    config: SimulationConfig
    thresholds: list[int]
    results: list[StrategyResult]
    rounds: int
    converged: bool
    compute_seconds: float

    @property
    def strategy(self) -> XorInverseThresholds:
        """Return the committed multi-threshold strategy."""

        return xor_inverse(self.thresholds)


def compute_yield_curve(
    config: SimulationConfig,
    workers: Optional[int] = None,
    progress: Optional[ProgressFn] = None,
) -> YieldCurveResult:
    """Sweep ``counter < i`` for every ``i`` in ``0..=max_counter_value``.

    Parameters
    ----------
    config:
        Drop mechanic parameters.
    workers:
        Process pool size (defaults to the CPU count).
    progress:
        Optional ``(completed, total)`` callback.
    """

    logger.info(
        "Sweeping %d strategies with %d kills each", config.num_strategies, config.steps_per_strategy
    )
    compute_start = perf_counter()
    results = sweep_inverse_thresholds(config, workers=workers, progress=progress)
    compute_seconds = perf_counter() - compute_start

    best = first_best(results)
    logger.info(
        "Sweep finished in %.2fs; strategy %d yielded %d drops",
        compute_seconds,
        best.index,
        best.drops,
    )
    return YieldCurveResult(
        config=config,
        results=results,
        best=best,
        compute_seconds=compute_seconds,
    )


def search_thresholds(
    config: SimulationConfig,
    max_rounds: Optional[int] = DEFAULT_MAX_ROUNDS,
    workers: Optional[int] = None,
    progress: Optional[ProgressFn] = None,
    on_round: Optional[RoundCallback] = None,
) -> ThresholdSearchResult:
    """Run the greedy threshold search and time it.

    Returns
    -------
    ThresholdSearchResult
        The committed thresholds together with the last round's result vector.
        Those results score that round's candidates; they are not a fresh
        simulation of the committed strategy.
    """

    logger.info(
        "Starting threshold search over %d trial values with %d kills each",
        config.num_strategies,
        config.steps_per_strategy,
    )
    compute_start = perf_counter()
    outcome = optimize_thresholds(
        config,
        max_rounds=max_rounds,
        workers=workers,
        progress=progress,
        on_round=on_round,
    )
    compute_seconds = perf_counter() - compute_start

    return ThresholdSearchResult(
        config=config,
        thresholds=outcome.thresholds,
        results=outcome.results,
        rounds=outcome.rounds,
        converged=outcome.converged,
        compute_seconds=compute_seconds,
    )
