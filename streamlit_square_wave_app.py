"""Streamlit lab that builds a square wave from its odd harmonics."""

from __future__ import annotations

import logging
import time
from typing import Tuple

import numpy as np
import streamlit as st

from animation import WaveformTransition
from lab_config import FRAME_INTERVAL_S, FUNDAMENTAL_HZ, HARMONIC_RANGE, CanvasGeometry, configure_logging
from plotting import square_wave_figure
from signal_math import (
    fundamental_wave,
    gibbs_overshoot,
    ideal_square_wave,
    normalize_harmonic_count,
    odd_harmonics,
    rms_error,
    square_wave_partial_sum,
)

logger = logging.getLogger(__name__)

GEOMETRY = CanvasGeometry()
LAST_POINTS_KEY = "last_waveform_points"


def harmonic_controls() -> Tuple[int, bool]:
    with st.sidebar:
        st.title("Fourier Synthesizer")
        st.write("A square wave is the sum of its odd harmonics, each weighted by 1/n.")
        requested = st.slider(
            "Highest harmonic n",
            min_value=HARMONIC_RANGE[0],
            max_value=HARMONIC_RANGE[1],
            value=1,
            step=1,
            key="harmonics_range",
            help="Even values are rounded down to the previous odd harmonic.",
        )
        count = normalize_harmonic_count(requested)
        if count != requested:
            st.caption(f"Rounded {requested} down to {count}: a square wave has no even harmonics.")
        animate = st.checkbox(
            "Animate transitions",
            value=True,
            key="animate_transitions",
            help="Morph from the previous waveform over 60 frames instead of jumping.",
        )
    return count, animate


def harmonics_info(count: int) -> None:
    st.markdown(
        f"Fundamental Frequency: {FUNDAMENTAL_HZ:.0f} Hz (fixed for demonstration)  \n"
        f"Displaying odd harmonics from n = 1 to {count}"
    )


def convergence_metrics(target: np.ndarray, count: int) -> None:
    ideal = ideal_square_wave(GEOMETRY.samples)
    cols = st.columns(3)
    cols[0].metric("Odd terms summed", f"{len(odd_harmonics(count))}")
    cols[1].metric("Gibbs overshoot", f"{gibbs_overshoot(target) * 100:.1f} %")
    cols[2].metric("RMS error vs. ideal", f"{rms_error(target, ideal):.3f}")
    st.caption("The RMS error keeps falling as terms are added, but the overshoot near each edge settles at about 9 % of the jump (18 % of the plateau).")


def draw_wave(count: int, animate: bool) -> np.ndarray:
    samples = GEOMETRY.samples
    target = square_wave_partial_sum(count, samples)
    fundamental = fundamental_wave(samples)
    transition = WaveformTransition.from_previous(st.session_state.get(LAST_POINTS_KEY), target)

    placeholder = st.empty()
    if animate and not np.array_equal(transition.start, transition.target):
        # A rerun from a new slider value stops this loop; only finished targets are remembered.
        for idx, frame in enumerate(transition.frames()):
            placeholder.plotly_chart(
                square_wave_figure(frame, fundamental, GEOMETRY, count),
                use_container_width=False,
                key=f"square_wave_frame_{idx}",
            )
            time.sleep(FRAME_INTERVAL_S)
    else:
        placeholder.plotly_chart(square_wave_figure(target, fundamental, GEOMETRY, count), use_container_width=False)

    st.session_state[LAST_POINTS_KEY] = target.copy()
    return target


def main() -> None:
    configure_logging()
    st.set_page_config(page_title="Fourier Series: Square Wave", layout="wide")
    st.title("Fourier Series Square-Wave Synthesizer")

    count, animate = harmonic_controls()
    harmonics_info(count)
    logger.debug("Drawing square wave with harmonics up to n=%d", count)
    target = draw_wave(count, animate)
    convergence_metrics(target, count)


if __name__ == "__main__":
    main()
