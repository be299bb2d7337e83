"""Command-line front-end for yield sweeps, threshold searches and plots."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Optional

from .api import compute_yield_curve, search_thresholds
from .config import DEFAULT_CONFIG_VALUES, DEFAULT_MAX_ROUNDS, build_config, load_config_values
from .models import SimulationConfig, StrategyResult
from .results import write_results, write_thresholds
from .strategy import active_ranges, xor_inverse

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
# kills per sweep above which a run is measured in hours
LONG_SWEEP_KILLS = 1_000_000_000


def print_progress(completed: int, total: int) -> None:
    """Overwrite the current console line with the sweep progress."""

    print(f"\rfinished {completed}/{total}", end="", flush=True)
    if completed == total:
        print()


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the mechanic and execution flags shared by the simulation commands."""

    parser.add_argument(
        "-b",
        "--base-drop-rate",
        type=float,
        default=None,
        help=f"Baseline per-kill drop chance (default: {DEFAULT_CONFIG_VALUES['base_drop_rate']}).",
    )
    parser.add_argument(
        "-c",
        "--counter-multiplier",
        type=float,
        default=None,
        help=(
            "Extra drop chance per counter unit while the counter is active "
            f"(default: {DEFAULT_CONFIG_VALUES['counter_multiplier']})."
        ),
    )
    parser.add_argument(
        "-m",
        "--max-counter-value",
        type=int,
        default=None,
        help=f"Pity ceiling (default: {DEFAULT_CONFIG_VALUES['max_counter_value']}).",
    )
    parser.add_argument(
        "-s",
        "--sim-steps-per-strategy",
        type=int,
        default=None,
        help=(
            f"Kills simulated per strategy (default: {DEFAULT_CONFIG_VALUES['steps_per_strategy']}). "
            "Each kill is one interpreted loop step, so the default runs for days over a full "
            "sweep; use a few million for interactive runs."
        ),
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with config values; command-line flags take precedence.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker processes per sweep (default: CPU count).",
    )
    parser.add_argument(
        "-o",
        "--out",
        type=Path,
        default=None,
        help="Write index,drop_count,drop_rate rows to this CSV file.",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress the per-strategy listing and progress line.",
    )


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Simulate pity-counter drop strategies and search for the best one."
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity (default: %(default)s).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sweep_parser = subparsers.add_parser(
        "sweep", help="Evaluate 'counter < i' for every i in 0..=max_counter_value."
    )
    add_config_arguments(sweep_parser)

    search_parser = subparsers.add_parser(
        "search", help="Greedily toggle thresholds until no trial value improves the yield."
    )
    add_config_arguments(search_parser)
    search_parser.add_argument(
        "--max-rounds",
        type=int,
        default=DEFAULT_MAX_ROUNDS,
        help="Stop after this many rounds; 0 removes the cap (default: %(default)s).",
    )
    search_parser.add_argument(
        "--thresholds-out",
        type=Path,
        default=None,
        help="Write the discovered thresholds to this JSON file.",
    )

    plot_parser = subparsers.add_parser("plot", help="Scatter plot one or more result files.")
    plot_parser.add_argument("files", nargs="+", type=Path, help="CSV files written with --out.")
    plot_parser.add_argument("--title", default=None, help="Chart title.")
    plot_parser.add_argument(
        "--save",
        type=Path,
        default=None,
        help="Save the chart to this image file instead of opening a window.",
    )
    return parser.parse_args(list(argv) if argv is not None else None)


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Merge defaults, the optional config file and command-line flags."""

    base = load_config_values(args.config) if args.config is not None else None
    config = build_config(
        {
            "base_drop_rate": args.base_drop_rate,
            "counter_multiplier": args.counter_multiplier,
            "max_counter_value": args.max_counter_value,
            "steps_per_strategy": args.sim_steps_per_strategy,
        },
        base=base,
    )
    logger.debug("Resolved %s", config)
    sweep_kills = config.steps_per_strategy * config.num_strategies
    if sweep_kills > LONG_SWEEP_KILLS:
        logger.warning(
            "Each sweep simulates %d kills; lower --sim-steps-per-strategy for a quicker run",
            sweep_kills,
        )
    return config


def print_results(results: list[StrategyResult]) -> None:
    print("Simulation results:")
    for result in results:
        print(f"strategy {result.index}: {result.drops} drops, {result.drop_rate} drops per kill")


def run_sweep(args: argparse.Namespace) -> int:
    config = config_from_args(args)
    progress = None if args.quiet else print_progress
    curve = compute_yield_curve(config, workers=args.workers, progress=progress)

    if not args.quiet:
        print_results(curve.results)
    print(
        f"Strategy with the most drops was {curve.best.index}, with {curve.best.drops} drops"
    )

    if args.out is not None:
        write_results(curve.results, args.out)
        print(f"Results written to {args.out}")
    return 0


def run_search(args: argparse.Namespace) -> int:
    if args.max_rounds < 0:
        raise ValueError("--max-rounds must be 0 (no cap) or a positive round count.")
    config = config_from_args(args)
    progress = None if args.quiet else print_progress
    max_rounds: Optional[int] = args.max_rounds if args.max_rounds > 0 else None

    def report_round(round_number: int, best_index: int, best: StrategyResult) -> None:
        print(f"round {round_number}: best trial {best_index}, {best.drops} drops ({best.drop_rate} per kill)")

    search = search_thresholds(
        config,
        max_rounds=max_rounds,
        workers=args.workers,
        progress=progress,
        on_round=report_round,
    )

    if not args.quiet:
        print_results(search.results)
    print(f"Thresholds: {search.thresholds}")
    spans = active_ranges(xor_inverse(search.thresholds), config.max_counter_value)
    print("Counter active for: " + (", ".join(f"{lo}-{hi}" for lo, hi in spans) or "never"))
    if search.converged:
        print(f"Search converged after {search.rounds} round(s) in {search.compute_seconds:.1f}s")
    else:
        print(f"Search stopped without converging after {search.rounds} round(s)")

    if args.out is not None:
        write_results(search.results, args.out)
        print(f"Last round results written to {args.out}")
    if args.thresholds_out is not None:
        write_thresholds(search.thresholds, args.thresholds_out)
        print(f"Thresholds written to {args.thresholds_out}")
    return 0 if search.converged else 1


def run_plot(args: argparse.Namespace) -> int:
    from .plotting import plot_result_files, save_result_plot

    if args.save is not None:
        output = save_result_plot(args.files, args.save, title=args.title)
        print(f"Chart written to {output}")
        return 0

    import matplotlib.pyplot as plt

    plot_result_files(args.files, title=args.title)
    plt.show()
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    try:
        if args.command == "sweep":
            return run_sweep(args)
        if args.command == "search":
            return run_search(args)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from exc
    return run_plot(args)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
