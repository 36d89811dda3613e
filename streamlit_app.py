"""Interactive Streamlit lab for amplitude modulation (DSB and SSB)."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import streamlit as st
from streamlit_plotly_events import plotly_events

from lab_config import (
    CARRIER_AMPLITUDE_RANGE,
    CARRIER_COLOR,
    CARRIER_FREQUENCY_RANGE,
    MESSAGE_AMPLITUDE_RANGE,
    MESSAGE_COLOR,
    MESSAGE_FREQUENCY_RANGE,
    MODULATED_COLOR,
    MODULATION_TYPES,
    SIDEBANDS,
    WAVEFORMS,
    ModulationSettings,
    configure_logging,
)
from plotting import cro_figure, spectrum_figure, waveform_figure
from signal_math import ModulatedSignals, dft_deviation, generate_signals, hilbert_deviation

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------
WAVEFORM_LABELS: Dict[str, str] = {"sine": "Sine", "triangle": "Triangle", "square": "Square"}
MODULATION_LABELS: Dict[str, str] = {
    "dsb": "DSB-AM (double sideband, full carrier)",
    "ssb": "SSB-AM (single sideband, Hilbert method)",
}
SIDEBAND_LABELS: Dict[str, str] = {"usb": "Upper sideband", "lsb": "Lower sideband"}

SPECTRUM_HOVER_KEY = "spectrum_hover"
LAST_EVENT_KEY = "spectrum_last_event"


# ---------------------------------------------------------------------------
# Sidebar controls
# ---------------------------------------------------------------------------
def message_controls(defaults: ModulationSettings) -> Dict:
    st.subheader("Message signal m(t)")
    amplitude = st.slider(
        "Message amplitude",
        min_value=MESSAGE_AMPLITUDE_RANGE[0],
        max_value=MESSAGE_AMPLITUDE_RANGE[1],
        value=defaults.message_amplitude,
        step=0.1,
        key="msg_amp",
        help="Peak value of the information signal before modulation.",
    )
    st.caption("A larger message swings the envelope harder. Past the carrier amplitude, DSB overmodulates.")
    frequency = st.slider(
        "Message frequency (Hz)",
        min_value=MESSAGE_FREQUENCY_RANGE[0],
        max_value=MESSAGE_FREQUENCY_RANGE[1],
        value=defaults.message_frequency,
        step=1.0,
        key="msg_freq",
        help="Sets how far the sidebands sit from the carrier in the spectrum.",
    )
    st.caption("Sidebands appear at f_c ± f_m, so this slider moves them away from the carrier.")
    waveform = st.selectbox(
        "Message waveform",
        list(WAVEFORMS),
        format_func=WAVEFORM_LABELS.get,
        key="msg_waveform",
        help="Triangle and square messages carry odd harmonics, so their sidebands form a comb.",
    )
    return dict(message_amplitude=amplitude, message_frequency=frequency, message_waveform=waveform)


def carrier_controls(defaults: ModulationSettings) -> Dict:
    st.subheader("Carrier c(t)")
    amplitude = st.slider(
        "Carrier amplitude",
        min_value=CARRIER_AMPLITUDE_RANGE[0],
        max_value=CARRIER_AMPLITUDE_RANGE[1],
        value=defaults.carrier_amplitude,
        step=0.1,
        key="car_amp",
        help="The DC offset A_c added to the message in DSB-AM.",
    )
    frequency = st.slider(
        "Carrier frequency (Hz)",
        min_value=CARRIER_FREQUENCY_RANGE[0],
        max_value=CARRIER_FREQUENCY_RANGE[1],
        value=defaults.carrier_frequency,
        step=1.0,
        key="car_freq",
        help="Keep this well below the 500 Hz Nyquist limit of the 1 kHz sample clock.",
    )
    st.caption("The carrier sets the centre of the modulated spectrum.")
    return dict(carrier_amplitude=amplitude, carrier_frequency=frequency)


def modulation_controls() -> Dict:
    st.subheader("Modulation")
    modulation_type = st.selectbox(
        "Modulation type",
        list(MODULATION_TYPES),
        format_func=MODULATION_LABELS.get,
        key="mod_type",
    )
    sideband = st.radio(
        "SSB sideband",
        list(SIDEBANDS),
        format_func=SIDEBAND_LABELS.get,
        horizontal=True,
        key="ssb_type",
        disabled=modulation_type != "ssb",
        help="SSB keeps only one copy of the message spectrum, halving the bandwidth.",
    )
    st.caption("SSB is built as m(t)cos(ω_c t) ∓ m̂(t)sin(ω_c t), where m̂ is the Hilbert transform of m.")
    return dict(modulation_type=modulation_type, sideband=sideband)


def sidebar_controls() -> ModulationSettings:
    defaults = ModulationSettings()
    with st.sidebar:
        st.title("Modulation Controls")
        st.write("Every change recomputes the message, carrier and modulated signals from scratch.")
        values = {}
        values.update(message_controls(defaults))
        st.divider()
        values.update(carrier_controls(defaults))
        st.divider()
        values.update(modulation_controls())
    return ModulationSettings(**values)


# ---------------------------------------------------------------------------
# Tab renderers
# ---------------------------------------------------------------------------
def summary_metrics(settings: ModulationSettings) -> None:
    lower, upper = settings.sideband_frequencies
    cols = st.columns(3)
    index = settings.modulation_index
    cols[0].metric("Modulation index μ", "∞" if index == float("inf") else f"{index:.2f}")
    cols[1].metric("Lower sideband (Hz)", f"{lower:.1f}")
    cols[2].metric("Upper sideband (Hz)", f"{upper:.1f}")
    if settings.modulation_type == "dsb" and index > 1:
        st.warning("μ > 1: the envelope crosses zero and an envelope detector can no longer recover m(t).")


def time_domain_tab(signals: ModulatedSignals) -> None:
    st.info("**Purpose**: Compare the message, the carrier and their product in the time domain.")
    st.plotly_chart(waveform_figure(signals.message, MESSAGE_COLOR, "Message signal", signals.time), use_container_width=True)
    st.plotly_chart(waveform_figure(signals.carrier, CARRIER_COLOR, "Carrier signal", signals.time), use_container_width=True)
    st.plotly_chart(
        waveform_figure(signals.modulated, MODULATED_COLOR, "Modulated signal", signals.time), use_container_width=True
    )
    st.caption("Each trace is scaled to its own peak so shapes stay comparable while you move the sliders.")


def cro_tab(signals: ModulatedSignals) -> None:
    st.info("**Purpose**: Feed the message to X and the modulated wave to Y, as on an oscilloscope in X-Y mode.")
    st.plotly_chart(cro_figure(signals.message, signals.modulated), use_container_width=True)
    st.caption("With DSB and a sine message the trace forms the classic trapezoid. Its slanted edges show μ.")


def fresh_hover(events: List[Dict], last_event: Optional[Dict]) -> Optional[float]:
    """Frequency of the newest hover event, or None when it was already handled.

    The component resends its last event on every rerun, so an event equal
    to ``last_event`` is stale.
    """
    if not events or "x" not in events[-1]:
        return None
    if events[-1] == last_event:
        return None
    return float(events[-1]["x"])


def clear_spectrum_marker() -> None:
    st.session_state.pop(SPECTRUM_HOVER_KEY, None)


def spectrum_tab(signals: ModulatedSignals) -> None:
    st.info("**Purpose**: Inspect which frequencies the modulated signal occupies, using a direct 1024-point DFT.")
    highlight = st.session_state.get(SPECTRUM_HOVER_KEY)
    events = plotly_events(spectrum_figure(signals.modulated, highlight), hover_event=True, key="spectrum_plot")
    hovered = fresh_hover(events, st.session_state.get(LAST_EVENT_KEY))
    if hovered is not None:
        st.session_state[LAST_EVENT_KEY] = events[-1]
        st.session_state[SPECTRUM_HOVER_KEY] = hovered
        # Redraw now so the marker lands on the point just hovered.
        st.rerun()
    st.caption("Hover a peak to mark it. DSB shows the carrier and both sidebands. SSB keeps one side only.")
    if highlight is not None:
        st.write(f"Marked frequency: **{highlight:.1f} Hz**")
        st.button("Clear marker", key="clear_spectrum_hover", on_click=clear_spectrum_marker)

    with st.expander("Check the direct DFT against scipy"):
        cols = st.columns(2)
        cols[0].metric("max |DFT − FFT|", f"{dft_deviation(signals.modulated):.2e}")
        cols[1].metric("max |Hilbert − scipy|", f"{hilbert_deviation(signals.message):.2e}")
        st.caption("The O(N²) sum and the FFT compute the same coefficients. Only the running time differs.")


# ---------------------------------------------------------------------------
# Main app
# ---------------------------------------------------------------------------
def main() -> None:
    configure_logging()
    st.set_page_config(page_title="Amplitude Modulation Lab", layout="wide")
    st.title("Amplitude Modulation Lab")

    try:
        settings = sidebar_controls().sanitized()
    except ValueError as exc:
        logger.warning("Rejected settings: %s", exc)
        st.error(str(exc))
        st.stop()

    signals = generate_signals(settings)
    summary_metrics(settings)

    tabs = st.tabs(["Time Domain", "CRO (X-Y)", "Spectrum"])
    with tabs[0]:
        time_domain_tab(signals)
    with tabs[1]:
        cro_tab(signals)
    with tabs[2]:
        spectrum_tab(signals)


if __name__ == "__main__":
    main()
