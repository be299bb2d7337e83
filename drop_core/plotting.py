"""Scatter charts of drop rate per strategy from saved result files."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Final, Optional

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from .results import read_results

PALETTE: Final[list[str]] = ["#1F77B4", "#FF7F0E", "#2CA02C", "#D62728", "#9467BD", "#8C564B"]


def plot_result_files(
    paths: Sequence[str | Path],
    title: Optional[str] = None,
) -> Figure:
    """Return a figure with one scatter series per result file."""

    fig, ax = plt.subplots(figsize=(12, 6))
    for position, path in enumerate(paths):
        frame = read_results(path)
        ax.scatter(
            frame["index"],
            frame["drop_rate"],
            s=6,
            color=PALETTE[position % len(PALETTE)],
            label=Path(path).stem,
        )
    ax.set_xlabel("Strategy index")
    ax.set_ylabel("Drops per kill")
    ax.set_title(title or "Drop rate by strategy")
    ax.grid(True, alpha=0.3)
    if len(paths) > 1:
        ax.legend()
    fig.tight_layout()
    return fig


def save_result_plot(
    paths: Sequence[str | Path],
    save_path: str | Path,
    title: Optional[str] = None,
) -> Path:
    """Render ``paths`` and write the chart image to ``save_path``."""

    output_path = Path(save_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = plot_result_files(paths, title=title)
    fig.savefig(output_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return output_path
