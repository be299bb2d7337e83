import numpy as np
import pytest

from drop_core.models import SimulationConfig
from drop_core.simulation import simulate
from drop_core.strategy import InverseThreshold, Threshold, XorInverseThresholds


class ZeroRolls:
    """Uniform source whose every draw is the minimum value."""

    def random(self, size):
        return np.zeros(size)


class RecordingStrategy:
    """Strategy stub remembering the counter values it was asked about."""

    def __init__(self, active):
        self.active = active
        self.seen = []

    def decide(self, counter):
        self.seen.append(counter)
        return self.active


def make_config(base=0.001, multiplier=0.000002, max_counter=1000, steps=10_000):
    return SimulationConfig(
        base_drop_rate=base,
        counter_multiplier=multiplier,
        max_counter_value=max_counter,
        steps_per_strategy=steps,
    )


@pytest.mark.parametrize(
    "max_counter, steps, expected",
    [(3, 9, 3), (3, 10, 3), (3, 11, 3), (3, 12, 4), (1, 5, 5), (5, 4, 0)],
)
def test_pity_only_drop_counts(max_counter, steps, expected):
    config = make_config(base=0.0, multiplier=0.0, max_counter=max_counter, steps=steps)
    assert simulate(config, InverseThreshold(max_counter)) == expected


def test_zero_rolls_drop_every_step():
    config = make_config(base=0.01, max_counter=50, steps=500)
    for strategy in (Threshold(10), InverseThreshold(10), XorInverseThresholds((3, 20))):
        assert simulate(config, strategy, rng=ZeroRolls()) == 500


def test_drop_count_is_bounded():
    config = make_config(base=0.05, multiplier=0.01, max_counter=40, steps=5_000)
    rng = np.random.default_rng()
    for strategy in (Threshold(5), InverseThreshold(30), XorInverseThresholds(())):
        drops = simulate(config, strategy, rng=rng)
        assert 0 <= drops <= config.steps_per_strategy


def test_zero_steps_yield_zero_drops():
    config = make_config(steps=0)
    assert simulate(config, Threshold(0)) == 0


def test_negative_drop_chance_only_pity_drops():
    config = make_config(base=-1.0, multiplier=0.0, max_counter=4, steps=8)
    assert simulate(config, XorInverseThresholds(()), rng=ZeroRolls()) == 2


def test_chance_above_one_always_drops():
    config = make_config(base=1.5, multiplier=0.0, max_counter=100, steps=50)
    assert simulate(config, Threshold(0)) == 50


def test_inactive_random_drop_keeps_counter():
    config = make_config(base=1.0, multiplier=0.0, max_counter=4, steps=6)
    strategy = RecordingStrategy(active=False)
    assert simulate(config, strategy) == 6
    # counter only resets through pity when inactive
    assert strategy.seen == [0, 1, 2, 3, 0, 1]


def test_active_random_drop_resets_counter():
    config = make_config(base=1.0, multiplier=0.0, max_counter=4, steps=6)
    strategy = RecordingStrategy(active=True)
    assert simulate(config, strategy) == 6
    assert strategy.seen == [0] * 6


def test_counter_boost_only_applies_while_active():
    # base chance zero; boost 0.5 per counter unit makes counter 2 a certain drop
    config = make_config(base=0.0, multiplier=0.5, max_counter=10, steps=20)

    class ThreeQuarterRolls:
        def random(self, size):
            return np.full(size, 0.75)

    assert simulate(config, InverseThreshold(0), rng=ThreeQuarterRolls()) == 2
    assert simulate(config, XorInverseThresholds(()), rng=ThreeQuarterRolls()) == 10


def test_config_rejects_negative_integers():
    with pytest.raises(ValueError):
        make_config(max_counter=-1)
    with pytest.raises(ValueError):
        make_config(steps=-5)
