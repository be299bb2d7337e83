"""Parallel evaluation of a generation of candidate strategies."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from itertools import count
from time import perf_counter
from typing import Optional

import numpy as np

from .models import SimulationConfig, StrategyResult
from .simulation import UniformSource, simulate
from .strategy import InverseThreshold, Strategy

logger = logging.getLogger(__name__)

SimulateFn = Callable[[SimulationConfig, Strategy, UniformSource], int]
ProgressFn = Callable[[int, int], None]


def _run_candidate(
    simulate_fn: SimulateFn,
    config: SimulationConfig,
    strategy: Strategy,
    seed: np.random.SeedSequence,
) -> int:
    """Worker entry point: build a private generator and simulate one candidate."""

    rng = np.random.default_rng(seed)
    return simulate_fn(config, strategy, rng)


def resolve_workers(workers: Optional[int]) -> int:
    """Return the pool size to use, defaulting to the machine's CPU count."""

    if workers is None:
        return os.cpu_count() or 1
    if workers < 1:
        raise ValueError("workers must be at least 1.")
    return workers


def evaluate_strategies(
    config: SimulationConfig,
    candidates: Sequence[Strategy],
    *,
    workers: Optional[int] = None,
    progress: Optional[ProgressFn] = None,
    simulate_fn: SimulateFn = simulate,
) -> list[StrategyResult]:
    """Simulate every candidate independently and return index-ordered results.

    Parameters
    ----------
    config:
        Drop mechanic parameters shared by all candidates.
    candidates:
        Strategies to evaluate; slot ``i`` of the result belongs to ``candidates[i]``.
    workers:
        Process pool size. ``1`` runs the candidates serially in this process,
        which also allows ``simulate_fn`` to be a closure.
    progress:
        Optional callback receiving ``(completed, total)`` after each candidate.
    simulate_fn:
        Simulation routine; must be picklable when ``workers`` is above 1.

    Raises
    ------
    ValueError
        If ``candidates`` is empty.
    """

    total = len(candidates)
    if total < 1:
        raise ValueError("At least one candidate strategy is required.")

    pool_size = min(resolve_workers(workers), total)
    # fresh entropy per sweep; every candidate gets its own child stream
    seeds = np.random.SeedSequence().spawn(total)
    drops: list[Optional[int]] = [None] * total
    completed = count(1)

    logger.debug("Evaluating %d candidates on %d worker(s)", total, pool_size)
    sweep_start = perf_counter()

    if pool_size == 1:
        for index, strategy in enumerate(candidates):
            drops[index] = _run_candidate(simulate_fn, config, strategy, seeds[index])
            finished = next(completed)
            if progress is not None:
                progress(finished, total)
    else:
        with ProcessPoolExecutor(max_workers=pool_size) as executor:
            futures = {
                executor.submit(_run_candidate, simulate_fn, config, strategy, seeds[index]): index
                for index, strategy in enumerate(candidates)
            }
            for future in as_completed(futures):
                drops[futures[future]] = future.result()
                finished = next(completed)
                if progress is not None:
                    progress(finished, total)

    logger.debug("Sweep of %d candidates finished in %.2fs", total, perf_counter() - sweep_start)
    return [
        StrategyResult(index=index, drops=int(value), steps=config.steps_per_strategy)
        for index, value in enumerate(drops)
    ]


def inverse_threshold_candidates(max_counter_value: int) -> list[InverseThreshold]:
    """Return ``InverseThreshold(i)`` for every ``i`` in ``0..=max_counter_value``."""

    return [InverseThreshold(index) for index in range(max_counter_value + 1)]


def sweep_inverse_thresholds(
    config: SimulationConfig,
    *,
    workers: Optional[int] = None,
    progress: Optional[ProgressFn] = None,
    simulate_fn: SimulateFn = simulate,
) -> list[StrategyResult]:
    """Evaluate the single-threshold family ``counter < i`` across the full counter range."""

    return evaluate_strategies(
        config,
        inverse_threshold_candidates(config.max_counter_value),
        workers=workers,
        progress=progress,
        simulate_fn=simulate_fn,
    )
