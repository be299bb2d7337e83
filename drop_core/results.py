"""Reading and writing sweep result files."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Final

import pandas as pd

from .models import StrategyResult

RESULT_COLUMNS: Final[list[str]] = ["index", "drop_count", "drop_rate"]


def results_to_frame(results: Sequence[StrategyResult]) -> pd.DataFrame:
    """Return the result vector as a frame with ``RESULT_COLUMNS``."""

    return pd.DataFrame(
        {
            "index": [result.index for result in results],
            "drop_count": [result.drops for result in results],
            "drop_rate": [result.drop_rate for result in results],
        },
        columns=RESULT_COLUMNS,
    )


def write_results(results: Sequence[StrategyResult], path: str | Path) -> Path:
    """Write ``index,drop_count,drop_rate`` rows without a header line.

    I/O failures propagate to the caller; no partial-file cleanup is attempted.
    """

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    results_to_frame(results).to_csv(output_path, header=False, index=False)
    return output_path


def read_results(path: str | Path) -> pd.DataFrame:
    """Load a result file written by :func:`write_results`."""

    return pd.read_csv(Path(path), header=None, names=RESULT_COLUMNS)


def write_thresholds(thresholds: Iterable[int], path: str | Path) -> Path:
    """Persist a discovered threshold set as a sorted JSON list."""

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    serializable = sorted(int(value) for value in thresholds)
    output_path.write_text(json.dumps(serializable, indent=2), encoding="utf-8")
    return output_path


def read_thresholds(path: str | Path) -> list[int]:
    """Load a threshold list saved by :func:`write_thresholds`.

    Raises
    ------
    ValueError
        If the file does not contain a JSON list of integers.
    """

    raw_data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw_data, list):
        raise ValueError("Threshold file must contain a JSON list.")
    try:
        return sorted(int(value) for value in raw_data)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Threshold file holds a non-integer entry: {exc}") from exc
