"""Shared constants, settings, and logging setup for the signal labs."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Tuple


# ---------------------------------------------------------------------------
# Sampling constants
# ---------------------------------------------------------------------------
SAMPLE_COUNT = 1000
SAMPLE_RATE = 1000.0
SAMPLE_PERIOD = 1.0 / SAMPLE_RATE
DFT_SIZE = 1024

FUNDAMENTAL_HZ = 1.0
TRANSITION_FRAMES = 60
FRAME_INTERVAL_S = 1.0 / 60.0

WAVEFORMS: Tuple[str, ...] = ("sine", "triangle", "square")
MODULATION_TYPES: Tuple[str, ...] = ("dsb", "ssb")
SIDEBANDS: Tuple[str, ...] = ("usb", "lsb")

MESSAGE_AMPLITUDE_RANGE = (0.0, 5.0)
MESSAGE_FREQUENCY_RANGE = (1.0, 50.0)
CARRIER_AMPLITUDE_RANGE = (0.0, 5.0)
CARRIER_FREQUENCY_RANGE = (10.0, 250.0)
HARMONIC_RANGE = (1, 51)

LOG_LEVEL_ENV = "SIGNAL_LAB_LOG_LEVEL"


# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------
BACKGROUND_INNER = "#111a1f"
BACKGROUND_OUTER = "#000000"
GRID_COLOR = "#244e57"
LABEL_COLOR = "#448899"
AXIS_GLOW = "#23fff1"
AXIS_TITLE_COLOR = "#2afff9"
WAVE_GRADIENT = ("#00ffd5", "#00bfff", "#00f0ff")
WAVE_GLOW = "#0ffefb"
WAVE_LEGEND = "#00ffff"
FUNDAMENTAL_COLOR = "rgba(97, 218, 251, 0.25)"
LEGEND_COLOR = "#16d9e3"
FONT_FAMILY = "Roboto Mono, monospace"

MESSAGE_COLOR = "blue"
CARRIER_COLOR = "red"
MODULATED_COLOR = "green"
SPECTRUM_COLOR = "green"
CRO_COLOR = "purple"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CanvasGeometry:
    """Pixel layout of the square-wave plot, mirroring a fixed-size canvas."""

    width: int = 800
    height: int = 420
    left: int = 50
    right: int = 30
    top: int = 20
    bottom: int = 50
    grid_step_x: int = 60
    grid_step_y: int = 40

    @property
    def samples(self) -> int:
        return self.width - self.left - self.right

    @property
    def amplitude_scale(self) -> float:
        """Pixels per unit amplitude."""
        return (self.height - self.top - self.bottom) / 4

    @property
    def grid_step_seconds(self) -> float:
        return self.grid_step_x / self.samples

    @property
    def grid_step_amplitude(self) -> float:
        return self.grid_step_y / self.amplitude_scale


def _clamp(value: float, bounds: Tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, float(value)))


@dataclass
class ModulationSettings:
    """Every control of the modulation lab in one place."""

    message_amplitude: float = 1.0
    message_frequency: float = 5.0
    message_waveform: str = "sine"
    carrier_amplitude: float = 1.0
    carrier_frequency: float = 50.0
    modulation_type: str = "dsb"
    sideband: str = "usb"

    def sanitized(self) -> ModulationSettings:
        """Return a copy clamped to the slider limits.

        Raises ``ValueError`` for names the lab does not know and for
        frequencies that are not positive.
        """
        if self.message_waveform not in WAVEFORMS:
            raise ValueError(f"Unsupported message waveform: {self.message_waveform}")
        if self.modulation_type not in MODULATION_TYPES:
            raise ValueError(f"Unsupported modulation type: {self.modulation_type}")
        if self.sideband not in SIDEBANDS:
            raise ValueError(f"Unsupported sideband: {self.sideband}")
        for label, freq in (("message", self.message_frequency), ("carrier", self.carrier_frequency)):
            if freq <= 0:
                raise ValueError(f"The {label} frequency must be > 0, got {freq}")
        return replace(
            self,
            message_amplitude=_clamp(self.message_amplitude, MESSAGE_AMPLITUDE_RANGE),
            message_frequency=_clamp(self.message_frequency, MESSAGE_FREQUENCY_RANGE),
            carrier_amplitude=_clamp(self.carrier_amplitude, CARRIER_AMPLITUDE_RANGE),
            carrier_frequency=_clamp(self.carrier_frequency, CARRIER_FREQUENCY_RANGE),
        )

    @property
    def modulation_index(self) -> float:
        if self.carrier_amplitude == 0:
            return float("inf")
        return self.message_amplitude / self.carrier_amplitude

    @property
    def sideband_frequencies(self) -> Tuple[float, float]:
        return (
            self.carrier_frequency - self.message_frequency,
            self.carrier_frequency + self.message_frequency,
        )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
def configure_logging(level: str | int | None = None) -> int:
    """Configure root logging once and return the effective level."""
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)
    return level
