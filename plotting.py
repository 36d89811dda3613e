"""Plotly figure builders that paint sample arrays like an oscilloscope screen."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np
import plotly.graph_objects as go

from lab_config import (
    AXIS_GLOW,
    AXIS_TITLE_COLOR,
    BACKGROUND_INNER,
    BACKGROUND_OUTER,
    CRO_COLOR,
    FONT_FAMILY,
    FUNDAMENTAL_COLOR,
    GRID_COLOR,
    LABEL_COLOR,
    LEGEND_COLOR,
    SAMPLE_PERIOD,
    SPECTRUM_COLOR,
    WAVE_GLOW,
    WAVE_GRADIENT,
    CanvasGeometry,
)
from signal_math import magnitude_spectrum, normalize

PLOT_MARGIN = dict(l=40, r=20, t=35, b=40)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------
def glow_traces(
    x: Sequence[float],
    y: Sequence[float],
    color: str,
    width: float,
    layers: int = 4,
) -> List[go.Scatter]:
    """Stack wide translucent strokes under a line to fake a canvas shadow blur."""
    traces = []
    for layer in range(layers, 0, -1):
        traces.append(
            go.Scatter(
                x=x,
                y=y,
                mode="lines",
                line=dict(color=color, width=width + 4 * layer),
                opacity=0.08 + 0.04 * (layers - layer),
                hoverinfo="skip",
                showlegend=False,
            )
        )
    return traces


def _glow_line_shapes(x0: float, y0: float, x1: float, y1: float, color: str, width: float) -> List[dict]:
    shapes = []
    for spread, opacity in ((10, 0.12), (6, 0.25), (0, 1.0)):
        shapes.append(
            dict(
                type="line",
                x0=x0,
                y0=y0,
                x1=x1,
                y1=y1,
                line=dict(color=color, width=width + spread),
                opacity=opacity,
                layer="below" if spread else "above",
            )
        )
    return shapes


# ---------------------------------------------------------------------------
# Modulation lab plots
# ---------------------------------------------------------------------------
def waveform_figure(
    signal: Sequence[float],
    color: str,
    title: str,
    t: Sequence[float] | None = None,
) -> go.Figure:
    scaled = normalize(signal)
    if t is None:
        t = np.arange(len(scaled)) * SAMPLE_PERIOD
    fig = go.Figure(go.Scatter(x=t, y=scaled, mode="lines", name=title, line=dict(color=color, width=2)))
    fig.update_layout(
        title=title,
        xaxis_title="Time (s)",
        yaxis_title="Normalized amplitude",
        yaxis_range=[-1.05, 1.05],
        height=260,
        margin=PLOT_MARGIN,
        showlegend=False,
    )
    return fig


def spectrum_figure(signal: Sequence[float], highlight_freq: float | None = None) -> go.Figure:
    freqs, magnitude = magnitude_spectrum(signal)
    fig = go.Figure(
        go.Scatter(x=freqs, y=magnitude, mode="lines", name="|S(f)|", line=dict(color=SPECTRUM_COLOR, width=2))
    )
    if highlight_freq is not None:
        fig.add_vline(x=highlight_freq, line=dict(color="#d62728", width=2, dash="dot"))
    fig.update_layout(
        title="Spectrum of the modulated signal",
        xaxis_title="Frequency (Hz)",
        yaxis_title="Normalized magnitude",
        yaxis_range=[0, 1.05],
        height=320,
        margin=PLOT_MARGIN,
        hovermode="x",
        showlegend=False,
    )
    return fig


def cro_figure(signal_x: Sequence[float], signal_y: Sequence[float]) -> go.Figure:
    """X-Y display: message on the horizontal plates, modulated signal on the vertical."""
    x = normalize(signal_x)
    y = normalize(signal_y)
    fig = go.Figure(go.Scatter(x=x, y=y, mode="lines", name="CRO", line=dict(color=CRO_COLOR, width=2)))
    fig.update_layout(
        title="CRO (X-Y mode)",
        xaxis_title="Message (X)",
        yaxis_title="Modulated (Y)",
        xaxis_range=[-1.05, 1.05],
        yaxis_range=[-1.05, 1.05],
        height=360,
        margin=PLOT_MARGIN,
        showlegend=False,
    )
    fig.update_yaxes(scaleanchor="x", scaleratio=1)
    return fig


# ---------------------------------------------------------------------------
# Square-wave synthesizer plot
# ---------------------------------------------------------------------------
def _time_ticks(geometry: CanvasGeometry):
    count = geometry.samples // geometry.grid_step_x
    vals = [i * geometry.grid_step_seconds for i in range(count + 1)]
    return vals, [f"{v * 1000:.0f} ms" for v in vals]


def _amplitude_ticks(geometry: CanvasGeometry, half_range: float):
    count = int(half_range // geometry.grid_step_amplitude)
    vals = [i * geometry.grid_step_amplitude for i in range(-count, count + 1)]
    return vals, [f"{v:.1f}" for v in vals]


def square_wave_figure(
    points: Sequence[float],
    fundamental: Sequence[float],
    geometry: CanvasGeometry,
    harmonic_count: int,
) -> go.Figure:
    """Dark scope screen with the fundamental and the glowing odd-harmonic sum."""
    points = np.asarray(points, dtype=float)
    t = np.arange(points.size) / geometry.samples
    half_range = (geometry.height - geometry.top - geometry.bottom) / 2 / geometry.amplitude_scale

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=t,
            y=fundamental,
            mode="lines",
            name="Light Cyan: Fundamental (n=1)",
            line=dict(color=FUNDAMENTAL_COLOR, width=2),
            hoverinfo="skip",
        )
    )
    for trace in glow_traces(t, points, WAVE_GLOW, width=4):
        fig.add_trace(trace)
    fig.add_trace(
        go.Scatter(
            x=t,
            y=points,
            mode="lines",
            name="Blue Glow: Sum of Odd Harmonics",
            line=dict(color=WAVE_GRADIENT[1], width=4),
        )
    )
    fig.add_trace(
        go.Scatter(
            x=t,
            y=points,
            mode="markers",
            marker=dict(
                size=4,
                color=t,
                colorscale=[[0.0, WAVE_GRADIENT[0]], [0.5, WAVE_GRADIENT[1]], [1.0, WAVE_GRADIENT[2]]],
                showscale=False,
            ),
            hoverinfo="skip",
            showlegend=False,
        )
    )

    shapes = _glow_line_shapes(0, 0, 1, 0, AXIS_GLOW, 3) + _glow_line_shapes(0, -half_range, 0, half_range, AXIS_GLOW, 3)
    for shape in shapes:
        fig.add_shape(**shape)
    fig.add_annotation(
        text=f"odd harmonics n = 1 … {int(harmonic_count)}",
        xref="paper",
        yref="paper",
        x=0.01,
        y=0.99,
        xanchor="left",
        yanchor="top",
        showarrow=False,
        font=dict(color=LEGEND_COLOR, family=FONT_FAMILY, size=13),
    )

    x_vals, x_text = _time_ticks(geometry)
    y_vals, y_text = _amplitude_ticks(geometry, half_range)
    axis_common = dict(
        showgrid=True,
        gridcolor=GRID_COLOR,
        gridwidth=1,
        zeroline=False,
        tickfont=dict(color=LABEL_COLOR, family=FONT_FAMILY, size=12),
        title_font=dict(color=AXIS_TITLE_COLOR, family=FONT_FAMILY, size=12),
    )
    fig.update_xaxes(title_text="Time →", range=[0, 1], tickvals=x_vals, ticktext=x_text, **axis_common)
    fig.update_yaxes(title_text="Amplitude", range=[-half_range, half_range], tickvals=y_vals, ticktext=y_text, **axis_common)
    fig.update_layout(
        width=geometry.width,
        height=geometry.height,
        margin=dict(l=geometry.left, r=geometry.right, t=geometry.top, b=geometry.bottom),
        paper_bgcolor=BACKGROUND_OUTER,
        plot_bgcolor=BACKGROUND_INNER,
        legend=dict(
            x=1.0,
            y=1.0,
            xanchor="right",
            yanchor="top",
            bgcolor="rgba(0, 0, 0, 0)",
            font=dict(color=LEGEND_COLOR, family=FONT_FAMILY, size=15),
        ),
    )
    return fig
