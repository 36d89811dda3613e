import numpy as np
import pytest

from lab_config import BACKGROUND_INNER, DFT_SIZE, CanvasGeometry
from plotting import cro_figure, glow_traces, spectrum_figure, square_wave_figure, waveform_figure
from signal_math import fundamental_wave, square_wave_partial_sum, time_vector


def test_waveform_figure_is_peak_normalized() -> None:
    t = time_vector()
    fig = waveform_figure(3.0 * np.sin(2 * np.pi * 5 * t), "blue", "Message signal", t)
    trace = fig.data[0]
    assert np.max(np.abs(trace.y)) == pytest.approx(1.0)
    assert trace.line.color == "blue"
    assert fig.layout.title.text == "Message signal"


def test_waveform_figure_handles_silence() -> None:
    fig = waveform_figure(np.zeros(10), "red", "Carrier signal")
    np.testing.assert_array_equal(fig.data[0].y, np.zeros(10))


def test_spectrum_figure_spans_half_the_transform() -> None:
    t = time_vector()
    fig = spectrum_figure(np.cos(2 * np.pi * 100 * t), highlight_freq=100.0)
    trace = fig.data[0]
    assert len(trace.x) == DFT_SIZE // 2
    assert max(trace.y) == pytest.approx(1.0)
    assert len(fig.layout.shapes) == 1


def test_cro_figure_locks_aspect_ratio() -> None:
    t = time_vector()
    fig = cro_figure(2 * np.sin(2 * np.pi * 5 * t), 0.5 * np.cos(2 * np.pi * 5 * t))
    assert fig.layout.yaxis.scaleanchor == "x"
    assert np.max(np.abs(fig.data[0].x)) == pytest.approx(1.0)
    assert np.max(np.abs(fig.data[0].y)) == pytest.approx(1.0)


def test_glow_traces_widen_and_hide_from_legend() -> None:
    traces = glow_traces([0, 1], [0, 1], "#0ffefb", width=4, layers=3)
    widths = [trace.line.width for trace in traces]
    assert widths == sorted(widths, reverse=True)
    assert all(trace.showlegend is False for trace in traces)


def test_square_wave_figure_layout() -> None:
    geometry = CanvasGeometry()
    points = square_wave_partial_sum(7, geometry.samples)
    fig = square_wave_figure(points, fundamental_wave(geometry.samples), geometry, 7)

    names = {trace.name for trace in fig.data if trace.name}
    assert "Blue Glow: Sum of Odd Harmonics" in names
    assert "Light Cyan: Fundamental (n=1)" in names
    assert fig.layout.plot_bgcolor == BACKGROUND_INNER
    assert fig.layout.width == geometry.width
    assert fig.layout.annotations[0].text == "odd harmonics n = 1 … 7"
    fundamental_trace = next(trace for trace in fig.data if trace.name == "Light Cyan: Fundamental (n=1)")
    assert fundamental_trace.line.width == 2

    tick_text = list(fig.layout.xaxis.ticktext)
    assert tick_text[0] == "0 ms"
    assert len(tick_text) == geometry.samples // geometry.grid_step_x + 1
    assert fig.layout.yaxis.range == (-2.0, 2.0)
