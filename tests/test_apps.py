from pathlib import Path

import numpy as np
from streamlit.testing.v1 import AppTest

from lab_config import CanvasGeometry
from signal_math import square_wave_partial_sum
from streamlit_app import fresh_hover
from streamlit_square_wave_app import LAST_POINTS_KEY

ROOT = Path(__file__).resolve().parents[1]
SQUARE_WAVE_APP = str(ROOT / "streamlit_square_wave_app.py")
MODULATION_APP = str(ROOT / "streamlit_app.py")


def _modulation_lab_with_bad_carrier():
    import streamlit_app
    from lab_config import ModulationSettings

    original = streamlit_app.sidebar_controls
    streamlit_app.sidebar_controls = lambda: ModulationSettings(carrier_frequency=0.0)
    try:
        streamlit_app.main()
    finally:
        streamlit_app.sidebar_controls = original


def test_square_wave_app_remembers_finished_target() -> None:
    samples = CanvasGeometry().samples
    at = AppTest.from_file(SQUARE_WAVE_APP, default_timeout=30).run()
    assert not at.exception
    np.testing.assert_allclose(at.session_state[LAST_POINTS_KEY], square_wave_partial_sum(1, samples))

    at.slider(key="harmonics_range").set_value(8).run()
    assert not at.exception
    np.testing.assert_allclose(at.session_state[LAST_POINTS_KEY], square_wave_partial_sum(7, samples))
    assert any("Rounded 8 down to 7" in caption.value for caption in at.caption)
    assert any("from n = 1 to 7" in block.value for block in at.markdown)


def test_square_wave_app_without_animation_jumps_to_target() -> None:
    samples = CanvasGeometry().samples
    at = AppTest.from_file(SQUARE_WAVE_APP, default_timeout=30).run()
    at.checkbox(key="animate_transitions").uncheck()
    at.slider(key="harmonics_range").set_value(21).run()
    assert not at.exception
    np.testing.assert_allclose(at.session_state[LAST_POINTS_KEY], square_wave_partial_sum(21, samples))
    assert [metric.value for metric in at.metric][0] == "11"


def test_modulation_app_renders_metrics() -> None:
    at = AppTest.from_file(MODULATION_APP, default_timeout=30).run()
    assert not at.exception
    labels = [metric.label for metric in at.metric]
    assert "Modulation index μ" in labels
    assert "Upper sideband (Hz)" in labels
    assert at.metric[0].value == "1.00"
    assert not at.warning


def test_modulation_app_warns_on_overmodulation_and_switches_to_ssb() -> None:
    at = AppTest.from_file(MODULATION_APP, default_timeout=30).run()
    at.slider(key="msg_amp").set_value(2.0).run()
    assert not at.exception
    assert at.warning

    at.selectbox(key="mod_type").set_value("ssb").run()
    assert not at.exception
    assert not at.warning


def test_modulation_app_stops_on_invalid_settings() -> None:
    at = AppTest.from_function(_modulation_lab_with_bad_carrier, default_timeout=30).run()
    assert not at.exception
    assert "carrier frequency must be > 0" in at.error[0].value
    assert not at.metric
    assert not at.tabs


def test_fresh_hover_ignores_resent_events() -> None:
    event = {"x": 102.5, "y": 0.9, "curveNumber": 0, "pointNumber": 105}
    assert fresh_hover([], None) is None
    assert fresh_hover([event], None) == 102.5
    assert fresh_hover([event], dict(event)) is None
    assert fresh_hover([{"curveNumber": 0}], None) is None
