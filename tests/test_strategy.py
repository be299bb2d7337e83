import pytest

from drop_core.strategy import (
    InverseThreshold,
    Threshold,
    XorInverseThresholds,
    XorThresholds,
    active_ranges,
    xor_inverse,
)


def test_threshold_decision_table():
    strategy = Threshold(5)
    assert strategy.decide(3) is False
    assert strategy.decide(5) is False
    assert strategy.decide(6) is True


def test_inverse_threshold_decision_table():
    strategy = InverseThreshold(5)
    assert strategy.decide(4) is True
    assert strategy.decide(5) is False
    assert InverseThreshold(0).decide(0) is False


def test_xor_thresholds_counts_values_above_counter():
    # 5 < 3 is false, 5 < 7 is true: one match, odd parity
    assert XorThresholds((3, 7)).decide(5) is False
    # no matches above 8: even parity
    assert XorThresholds((3, 7)).decide(8) is True
    # both above 1: even parity
    assert XorThresholds((3, 7)).decide(1) is True


def test_xor_inverse_thresholds_counts_values_below_counter():
    strategy = XorInverseThresholds((3, 7))
    assert strategy.decide(2) is True
    assert strategy.decide(3) is True
    assert strategy.decide(4) is False
    assert strategy.decide(7) is False
    assert strategy.decide(8) is True


def test_empty_xor_inverse_is_always_active():
    strategy = XorInverseThresholds(())
    assert all(active for _, active in strategy.dump(10))


def test_duplicate_threshold_cancels_out():
    with_duplicate = XorInverseThresholds((4, 9, 4))
    without = XorInverseThresholds((9,))
    assert list(with_duplicate.dump(12)) == list(without.dump(12))


def test_dump_is_restartable_and_inclusive():
    strategy = Threshold(1)
    first = list(strategy.dump(3))
    second = list(strategy.dump(3))
    assert first == second == [(0, False), (1, False), (2, True), (3, True)]


@pytest.mark.parametrize(
    "strategy",
    [Threshold(2), InverseThreshold(2), XorThresholds((1, 4)), XorInverseThresholds((1, 4))],
)
def test_decide_is_pure(strategy):
    before = [strategy.decide(counter) for counter in range(6)]
    after = [strategy.decide(counter) for counter in range(6)]
    assert before == after


def test_active_ranges_summarises_spans():
    assert active_ranges(xor_inverse([2, 5]), 8) == [(0, 2), (6, 8)]
    assert active_ranges(InverseThreshold(0), 4) == []
    assert active_ranges(xor_inverse([]), 3) == [(0, 3)]


def test_strategies_are_hashable_values():
    assert xor_inverse([1, 2]) == XorInverseThresholds((1, 2))
    assert len({Threshold(1), Threshold(1), InverseThreshold(1)}) == 2
