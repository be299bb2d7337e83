"""Greedy search over multi-threshold counter strategies."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Optional

from .config import DEFAULT_MAX_ROUNDS
from .evaluator import ProgressFn, evaluate_strategies
from .models import SearchOutcome, SimulationConfig, StrategyResult
from .strategy import Strategy, XorInverseThresholds, xor_inverse

logger = logging.getLogger(__name__)

EvaluateFn = Callable[[SimulationConfig, Sequence[Strategy]], list[StrategyResult]]
RoundCallback = Callable[[int, int, StrategyResult], None]


def select_best(values: Sequence[int]) -> int:
    """Return the index of the maximum value, preferring the last one on ties.

    Raises
    ------
    ValueError
        If ``values`` is empty.
    """

    if not values:
        raise ValueError("Cannot select from an empty result vector.")
    best_index = 0
    best_value = values[0]
    for index, value in enumerate(values):
        if value >= best_value:
            best_index = index
            best_value = value
    return best_index


def toggle_threshold(thresholds: set[int], index: int) -> None:
    """Insert ``index`` into ``thresholds`` if absent, otherwise remove it."""

    if index in thresholds:
        thresholds.remove(index)
    else:
        thresholds.add(index)


def build_candidates(
    thresholds: Iterable[int], max_counter_value: int
) -> list[XorInverseThresholds]:
    """Return one candidate per trial value ``t`` in ``0..=max_counter_value``.

    Each candidate is the current threshold list with ``t`` appended. When ``t``
    is already present the duplicate cancels it under the parity rule, so the
    candidate scores the set that toggling ``t`` would produce.
    """

    committed = sorted(thresholds)
    return [xor_inverse([*committed, trial]) for trial in range(max_counter_value + 1)]


class ThresholdOptimizer:
    """Greedy toggle-one-threshold search driven by repeated parallel sweeps."""

    def __init__(
        self,
        config: SimulationConfig,
        evaluate: Optional[EvaluateFn] = None,
        max_rounds: Optional[int] = DEFAULT_MAX_ROUNDS,
        on_round: Optional[RoundCallback] = None,
    ) -> None:
        """Initialise the search state.

        Parameters
        ----------
        config:
            Drop mechanic parameters used for every sweep.
        evaluate:
            Sweep routine mapping candidates to index-aligned results. Defaults
            to :func:`evaluate_strategies` with the pool's default size.
        max_rounds:
            Safety cap on the number of rounds; ``None`` removes the cap.
        on_round:
            Optional callback receiving ``(round, best_index, best_result)``.
        """

        if max_rounds is not None and max_rounds < 1:
            raise ValueError("max_rounds must be at least 1 when set.")
        self.config = config
        self._evaluate = evaluate or evaluate_strategies
        self.max_rounds = max_rounds
        self._on_round = on_round
        self.thresholds: set[int] = set()
        self.round = 0

    @property
    def sentinel(self) -> int:
        """Return the candidate index whose selection ends the search."""

        return self.config.max_counter_value

    def candidates(self) -> list[XorInverseThresholds]:
        """Return this round's candidate strategies."""

        return build_candidates(self.thresholds, self.config.max_counter_value)

    def step(self) -> tuple[int, list[StrategyResult]]:
        """Run one round and return the selected index and the round's results.

        The threshold set is toggled unless the sentinel was selected.
        """

        results = self._evaluate(self.config, self.candidates())
        best = select_best([result.drops for result in results])
        self.round += 1
        logger.info(
            "Round %d: best trial threshold %d with %d drops (%d thresholds committed)",
            self.round,
            best,
            results[best].drops,
            len(self.thresholds),
        )
        if self._on_round is not None:
            self._on_round(self.round, best, results[best])
        if best != self.sentinel:
            toggle_threshold(self.thresholds, best)
        return best, results

    def run(self) -> SearchOutcome:
        """Iterate rounds until the sentinel wins or the round cap is reached."""

        while True:
            best, results = self.step()
            if best == self.sentinel:
                logger.info(
                    "Search converged after %d round(s) with thresholds %s",
                    self.round,
                    sorted(self.thresholds),
                )
                return SearchOutcome(
                    thresholds=sorted(self.thresholds),
                    results=results,
                    rounds=self.round,
                    converged=True,
                )
            if self.max_rounds is not None and self.round >= self.max_rounds:
                logger.warning(
                    "Search stopped without converging after %d round(s)", self.round
                )
                return SearchOutcome(
                    thresholds=sorted(self.thresholds),
                    results=results,
                    rounds=self.round,
                    converged=False,
                )


def optimize_thresholds(
    config: SimulationConfig,
    *,
    max_rounds: Optional[int] = DEFAULT_MAX_ROUNDS,
    workers: Optional[int] = None,
    progress: Optional[ProgressFn] = None,
    on_round: Optional[RoundCallback] = None,
) -> SearchOutcome:
    """Run the greedy search using the process-pool evaluator."""

    def evaluate(cfg: SimulationConfig, candidates: Sequence[Strategy]) -> list[StrategyResult]:
        return evaluate_strategies(cfg, candidates, workers=workers, progress=progress)

    optimizer = ThresholdOptimizer(
        config, evaluate=evaluate, max_rounds=max_rounds, on_round=on_round
    )
    return optimizer.run()
