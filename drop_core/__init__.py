"""Monte Carlo drop simulation and greedy strategy search for pity-counter mechanics."""

from .api import (
    ThresholdSearchResult,
    YieldCurveResult,
    compute_yield_curve,
    first_best,
    search_thresholds,
)
from .config import (
    DEFAULT_BASE_DROP_RATE,
    DEFAULT_CONFIG_VALUES,
    DEFAULT_COUNTER_MULTIPLIER,
    DEFAULT_MAX_COUNTER_VALUE,
    DEFAULT_MAX_ROUNDS,
    DEFAULT_STEPS_PER_STRATEGY,
    build_config,
    default_config,
    load_config_file,
    load_config_values,
)
from .evaluator import evaluate_strategies, sweep_inverse_thresholds
from .models import SearchOutcome, SimulationConfig, StrategyResult
from .optimizer import (
    ThresholdOptimizer,
    build_candidates,
    optimize_thresholds,
    select_best,
    toggle_threshold,
)
from .results import (
    read_results,
    read_thresholds,
    results_to_frame,
    write_results,
    write_thresholds,
)
from .simulation import simulate
from .strategy import (
    InverseThreshold,
    Strategy,
    Threshold,
    XorInverseThresholds,
    XorThresholds,
    active_ranges,
    xor_inverse,
)

__all__ = [
    "DEFAULT_BASE_DROP_RATE",
    "DEFAULT_CONFIG_VALUES",
    "DEFAULT_COUNTER_MULTIPLIER",
    "DEFAULT_MAX_COUNTER_VALUE",
    "DEFAULT_MAX_ROUNDS",
    "DEFAULT_STEPS_PER_STRATEGY",
    "InverseThreshold",
    "SearchOutcome",
    "SimulationConfig",
    "Strategy",
    "StrategyResult",
    "Threshold",
    "ThresholdOptimizer",
    "ThresholdSearchResult",
    "XorInverseThresholds",
    "XorThresholds",
    "YieldCurveResult",
    "active_ranges",
    "build_candidates",
    "build_config",
    "compute_yield_curve",
    "default_config",
    "evaluate_strategies",
    "first_best",
    "load_config_file",
    "load_config_values",
    "optimize_thresholds",
    "read_results",
    "read_thresholds",
    "results_to_frame",
    "search_thresholds",
    "select_best",
    "simulate",
    "sweep_inverse_thresholds",
    "toggle_threshold",
    "write_results",
    "write_thresholds",
    "xor_inverse",
]
