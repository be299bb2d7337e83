"""Streamlit front-end for the drop strategy calculator."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Final, Optional

import altair as alt
import pandas as pd
import streamlit as st

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from drop_core import (
    DEFAULT_BASE_DROP_RATE,
    DEFAULT_COUNTER_MULTIPLIER,
    DEFAULT_MAX_COUNTER_VALUE,
    DEFAULT_MAX_ROUNDS,
    SimulationConfig,
    ThresholdSearchResult,
    YieldCurveResult,
    active_ranges,
    compute_yield_curve,
    results_to_frame,
    search_thresholds,
)

MODE_CURVE: Final[str] = "Yield curve (counter < i)"
MODE_SEARCH: Final[str] = "Greedy threshold search"
# interactive default; the CLI uses DEFAULT_STEPS_PER_STRATEGY
UI_DEFAULT_STEPS: Final[int] = 200_000


def ensure_session_state_defaults() -> None:
    """Populate Streamlit session state with expected default entries."""

    st.session_state.setdefault("base_drop_rate_input", DEFAULT_BASE_DROP_RATE)
    st.session_state.setdefault("counter_multiplier_input", DEFAULT_COUNTER_MULTIPLIER)
    st.session_state.setdefault("max_counter_value_input", DEFAULT_MAX_COUNTER_VALUE)
    st.session_state.setdefault("steps_input", UI_DEFAULT_STEPS)
    st.session_state.setdefault("max_rounds_input", DEFAULT_MAX_ROUNDS)
    st.session_state.setdefault("mode_input", MODE_CURVE)
    st.session_state.setdefault("run_result", None)
    st.session_state.setdefault("run_error", None)


def build_config_from_inputs() -> SimulationConfig:
    """Return the config described by the current widget values."""

    return SimulationConfig(
        base_drop_rate=float(st.session_state.base_drop_rate_input),
        counter_multiplier=float(st.session_state.counter_multiplier_input),
        max_counter_value=int(st.session_state.max_counter_value_input),
        steps_per_strategy=int(st.session_state.steps_input),
    )


def render_config_inputs() -> bool:
    """Render the mechanic inputs and return True when the run button is pressed."""

    with st.container(border=True):
        st.markdown("**Drop mechanic**")
        left, right = st.columns(2)
        left.number_input("Base drop rate", key="base_drop_rate_input", format="%g", step=0.0001)
        right.number_input(
            "Counter multiplier", key="counter_multiplier_input", format="%g", step=0.000001
        )
        left.number_input("Pity ceiling", key="max_counter_value_input", min_value=1, step=1)
        right.number_input(
            "Kills per strategy", key="steps_input", min_value=0, step=10_000
        )
        st.radio("Mode", options=[MODE_CURVE, MODE_SEARCH], key="mode_input", horizontal=True)
        if st.session_state.mode_input == MODE_SEARCH:
            st.number_input("Round limit", key="max_rounds_input", min_value=1, step=1)
        return st.button("Run simulation", type="primary")


def run_simulation() -> None:
    """Execute the selected mode and store the outcome in session state."""

    st.session_state.run_error = None
    st.session_state.run_result = None
    progress_bar = st.progress(0.0, text="Starting…")

    def report(completed: int, total: int) -> None:
        progress_bar.progress(completed / total, text=f"finished {completed}/{total}")

    try:
        config = build_config_from_inputs()
        if st.session_state.mode_input == MODE_SEARCH:
            result: YieldCurveResult | ThresholdSearchResult = search_thresholds(
                config,
                max_rounds=int(st.session_state.max_rounds_input),
                progress=report,
            )
        else:
            result = compute_yield_curve(config, progress=report)
        st.session_state.run_result = result
    except Exception as exc:  # broad to surface any numerical issues to the user
        st.session_state.run_error = str(exc)
    finally:
        progress_bar.empty()


def render_yield_chart(frame: pd.DataFrame, highlight: Optional[int] = None) -> None:
    """Draw drop rate against strategy index, optionally marking one index."""

    base = alt.Chart(frame).mark_circle(size=18).encode(
        x=alt.X("index:Q", title="Strategy index"),
        y=alt.Y("drop_rate:Q", title="Drops per kill", scale=alt.Scale(zero=False)),
        tooltip=[
            alt.Tooltip("index:Q", title="Index"),
            alt.Tooltip("drop_count:Q", title="Drops"),
            alt.Tooltip("drop_rate:Q", title="Rate", format=".6f"),
        ],
    )
    chart = base
    if highlight is not None:
        marker = alt.Chart(frame[frame["index"] == highlight]).mark_circle(
            size=90, color="#D62728"
        ).encode(x="index:Q", y="drop_rate:Q")
        chart = base + marker
    st.altair_chart(chart, use_container_width=True)


def render_result(result: YieldCurveResult | ThresholdSearchResult) -> None:
    """Render metrics, chart and download button for a finished run."""

    frame = results_to_frame(result.results)
    with st.container(border=True):
        if isinstance(result, ThresholdSearchResult):
            st.markdown("**Search result**")
            col1, col2, col3 = st.columns(3)
            col1.metric("Thresholds", len(result.thresholds))
            col2.metric("Rounds", result.rounds)
            col3.metric("Converged", "yes" if result.converged else "no")
            st.code(str(result.thresholds))
            spans = active_ranges(result.strategy, result.config.max_counter_value)
            st.caption(
                "Counter active for: "
                + (", ".join(f"{lo}–{hi}" for lo, hi in spans) or "never")
            )
            st.caption("Chart shows the last round's trial candidates.")
            highlight = None
        else:
            st.markdown("**Yield curve**")
            col1, col2 = st.columns(2)
            col1.metric("Best strategy", f"counter < {result.best.index}")
            col2.metric("Drops per kill", f"{result.best.drop_rate:.6f}")
            highlight = result.best.index
        st.caption(f"Computed in {result.compute_seconds:.2f} s")
        render_yield_chart(frame, highlight)
        st.download_button(
            "Download CSV",
            data=frame.to_csv(header=False, index=False),
            file_name="drop_results.csv",
            mime="text/csv",
        )


def main() -> None:
    """Entry point used by Streamlit."""

    st.set_page_config(page_title="Drop Strategy Calculator", layout="centered")
    ensure_session_state_defaults()
    st.title("Drop Strategy Calculator")

    if render_config_inputs():
        run_simulation()

    if st.session_state.run_error:
        st.error(f"Simulation failed: {st.session_state.run_error}")
    elif st.session_state.run_result is not None:
        render_result(st.session_state.run_result)


if __name__ == "__main__":
    main()
