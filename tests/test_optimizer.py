import pytest

from drop_core.evaluator import evaluate_strategies
from drop_core.models import SimulationConfig, StrategyResult
from drop_core.optimizer import (
    ThresholdOptimizer,
    build_candidates,
    select_best,
    toggle_threshold,
)
from drop_core.strategy import xor_inverse


@pytest.fixture
def small_config():
    return SimulationConfig(
        base_drop_rate=0.001,
        counter_multiplier=0.0,
        max_counter_value=5,
        steps_per_strategy=100,
    )


def scripted_evaluator(peaks):
    """Return an evaluate function whose round ``n`` peaks at ``peaks[n]``."""

    calls = []

    def evaluate(config, candidates):
        calls.append(list(candidates))
        peak = peaks[min(len(calls) - 1, len(peaks) - 1)]
        return [
            StrategyResult(index=index, drops=100 if index == peak else 50, steps=config.steps_per_strategy)
            for index in range(len(candidates))
        ]

    evaluate.calls = calls
    return evaluate


def test_select_best_prefers_last_maximum():
    assert select_best([5, 5, 3]) == 1
    assert select_best([1, 9, 2, 9, 0]) == 3
    assert select_best([7]) == 0


def test_select_best_rejects_empty():
    with pytest.raises(ValueError):
        select_best([])


def test_toggle_twice_restores_set():
    thresholds = {2, 8}
    toggle_threshold(thresholds, 5)
    assert thresholds == {2, 5, 8}
    toggle_threshold(thresholds, 5)
    assert thresholds == {2, 8}
    toggle_threshold(thresholds, 2)
    toggle_threshold(thresholds, 2)
    assert thresholds == {2, 8}


def test_candidates_append_trial_value():
    candidates = build_candidates({4, 1}, 3)
    assert [candidate.values for candidate in candidates] == [
        (1, 4, 0),
        (1, 4, 1),
        (1, 4, 2),
        (1, 4, 3),
    ]


def test_candidate_for_committed_threshold_matches_toggle():
    committed = {3, 7}
    candidate = build_candidates(committed, 10)[3]
    toggled = set(committed)
    toggle_threshold(toggled, 3)
    assert list(candidate.dump(10)) == list(xor_inverse(sorted(toggled)).dump(10))


def test_flat_objective_converges_immediately(small_config):
    def flat(config, strategy, rng):
        return 42

    def evaluate(config, candidates):
        return evaluate_strategies(config, candidates, workers=1, simulate_fn=flat)

    outcome = ThresholdOptimizer(small_config, evaluate=evaluate).run()
    assert outcome.converged is True
    assert outcome.rounds == 1
    assert outcome.thresholds == []
    assert [result.drops for result in outcome.results] == [42] * 6


def test_search_commits_thresholds_until_sentinel(small_config):
    evaluate = scripted_evaluator([2, 4, 5])
    rounds = []
    optimizer = ThresholdOptimizer(
        small_config,
        evaluate=evaluate,
        on_round=lambda number, best, result: rounds.append((number, best, result.drops)),
    )
    outcome = optimizer.run()

    assert outcome.converged is True
    assert outcome.rounds == 3
    assert outcome.thresholds == [2, 4]
    assert rounds == [(1, 2, 100), (2, 4, 100), (3, 5, 100)]
    # round two trials are built on top of the first committed threshold
    assert evaluate.calls[1][0].values == (2, 0)
    assert evaluate.calls[2][5].values == (2, 4, 5)
    # the returned results belong to the last round
    assert outcome.results[5].drops == 100


def test_reselecting_threshold_removes_it(small_config):
    evaluate = scripted_evaluator([1, 3, 1, 5])
    outcome = ThresholdOptimizer(small_config, evaluate=evaluate).run()
    assert outcome.converged is True
    assert outcome.thresholds == [3]
    assert outcome.rounds == 4


def test_round_cap_reports_non_convergence(small_config):
    evaluate = scripted_evaluator([0])
    optimizer = ThresholdOptimizer(small_config, evaluate=evaluate, max_rounds=5)
    outcome = optimizer.run()
    assert outcome.converged is False
    assert outcome.rounds == 5
    # toggled in, out, in, out, in
    assert outcome.thresholds == [0]


def test_round_cap_must_be_positive(small_config):
    with pytest.raises(ValueError):
        ThresholdOptimizer(small_config, max_rounds=0)


def test_sentinel_is_max_counter_value(small_config):
    assert ThresholdOptimizer(small_config).sentinel == 5
