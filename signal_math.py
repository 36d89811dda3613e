"""Numeric core of the signal labs: generators, a direct DFT, Hilbert, AM/SSB."""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Tuple

import numpy as np
from numpy.typing import ArrayLike
from scipy.fft import fft
from scipy.signal import hilbert as analytic_signal

from lab_config import (
    DFT_SIZE,
    FUNDAMENTAL_HZ,
    SAMPLE_COUNT,
    SAMPLE_PERIOD,
    SAMPLE_RATE,
    ModulationSettings,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Waveform generators
# ---------------------------------------------------------------------------
def time_vector(count: int = SAMPLE_COUNT, period: float = SAMPLE_PERIOD) -> np.ndarray:
    return np.arange(count) * period


def _check_frequency(freq: float) -> None:
    if freq <= 0:
        raise ValueError(f"freq must be > 0, got {freq}")


def _phase_in_period(freq: float, t: ArrayLike) -> np.ndarray:
    _check_frequency(freq)
    period = 1.0 / freq
    return np.mod(np.asarray(t, dtype=float), period) / period


def generate_sine(amp: float, freq: float, t: ArrayLike, phase: float = 0.0) -> np.ndarray:
    _check_frequency(freq)
    return amp * np.sin(2 * np.pi * freq * np.asarray(t, dtype=float) + phase)


def generate_triangle(amp: float, freq: float, t: ArrayLike) -> np.ndarray:
    """Triangle starting at zero, peaking at a quarter period."""
    pos = _phase_in_period(freq, t)
    val = np.where(pos < 0.25, pos * 4, np.where(pos < 0.75, 2 - pos * 4, -4 + pos * 4))
    return amp * val


def generate_square(amp: float, freq: float, t: ArrayLike) -> np.ndarray:
    pos = _phase_in_period(freq, t)
    return np.where(pos < 0.5, amp, -amp).astype(float)


def generate_waveform(name: str, amp: float, freq: float, t: ArrayLike) -> np.ndarray:
    if name == "triangle":
        return generate_triangle(amp, freq, t)
    if name == "square":
        return generate_square(amp, freq, t)
    return generate_sine(amp, freq, t)


# ---------------------------------------------------------------------------
# Direct discrete Fourier transform
# ---------------------------------------------------------------------------
class DFT:
    """Textbook O(N^2) transform holding paired real/imaginary coefficients.

    ``forward`` fills ``real``/``imag`` from a real input; ``inverse``
    replaces ``real`` with the reconstructed samples and clears ``imag``.
    """

    def __init__(self, size: int = DFT_SIZE, sample_rate: float = SAMPLE_RATE) -> None:
        if size <= 0:
            raise ValueError(f"size must be > 0, got {size}")
        self.size = int(size)
        self.sample_rate = float(sample_rate)
        self.real = np.zeros(self.size)
        self.imag = np.zeros(self.size)

    def _angles(self, sign: float) -> np.ndarray:
        idx = np.arange(self.size)
        return sign * 2 * np.pi * (np.outer(idx, idx) % self.size) / self.size

    def forward(self, samples: ArrayLike) -> None:
        x = np.asarray(samples, dtype=float)
        if x.size > self.size:
            raise ValueError(f"input has {x.size} samples but the transform size is {self.size}")
        padded = np.zeros(self.size)
        padded[: x.size] = x
        angle = self._angles(-1.0)
        self.real = np.cos(angle) @ padded
        self.imag = np.sin(angle) @ padded

    def inverse(self) -> None:
        angle = self._angles(1.0)
        output = (np.cos(angle) @ self.real - np.sin(angle) @ self.imag) / self.size
        self.real = output
        self.imag = np.zeros(self.size)

    def magnitudes(self) -> np.ndarray:
        half = self.size // 2
        return np.sqrt(self.real[:half] ** 2 + self.imag[:half] ** 2)

    def bin_frequencies(self) -> np.ndarray:
        return np.arange(self.size // 2) * self.sample_rate / self.size


def hilbert_transform(signal: ArrayLike, size: int = DFT_SIZE) -> np.ndarray:
    """Approximate the Hilbert transform by rotating DFT bins by -j*sgn(f)."""
    x = np.asarray(signal, dtype=float)
    dft = DFT(size)
    dft.forward(x)

    half = size // 2
    real, imag = dft.real.copy(), dft.imag.copy()
    # Positive bins times -j, negative bins times +j.
    dft.real[1:half] = imag[1:half]
    dft.imag[1:half] = -real[1:half]
    dft.real[half + 1 :] = -imag[half + 1 :]
    dft.imag[half + 1 :] = real[half + 1 :]
    dft.real[0] = dft.imag[0] = 0.0
    if size % 2 == 0:
        dft.real[half] = dft.imag[half] = 0.0
    else:
        dft.real[half] = imag[half]
        dft.imag[half] = -real[half]

    dft.inverse()
    return dft.real[: x.size]


# ---------------------------------------------------------------------------
# Scaling and spectra
# ---------------------------------------------------------------------------
def peak_scale(signal: ArrayLike) -> float:
    """Largest absolute sample, or 1 for an all-zero signal."""
    arr = np.asarray(signal, dtype=float)
    peak = float(np.max(np.abs(arr))) if arr.size else 0.0
    return peak or 1.0


def normalize(signal: ArrayLike) -> np.ndarray:
    arr = np.asarray(signal, dtype=float)
    return arr / peak_scale(arr)


def magnitude_spectrum(
    signal: ArrayLike,
    size: int = DFT_SIZE,
    sample_rate: float = SAMPLE_RATE,
) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(freqs, magnitude)`` for the lower half of the DFT, peak scaled to 1."""
    dft = DFT(size, sample_rate)
    dft.forward(signal)
    return dft.bin_frequencies(), normalize(dft.magnitudes())


def dft_deviation(signal: ArrayLike, size: int = DFT_SIZE) -> float:
    """Largest coefficient difference between the direct DFT and scipy's FFT."""
    x = np.asarray(signal, dtype=float)
    dft = DFT(size)
    dft.forward(x)
    reference = fft(x, n=size)
    return float(np.max(np.abs((dft.real + 1j * dft.imag) - reference)))


def hilbert_deviation(signal: ArrayLike, size: int = DFT_SIZE) -> float:
    """Largest sample difference between ``hilbert_transform`` and scipy's analytic signal."""
    x = np.asarray(signal, dtype=float)
    padded = np.zeros(size)
    padded[: x.size] = x
    reference = np.imag(analytic_signal(padded))[: x.size]
    return float(np.max(np.abs(hilbert_transform(x, size) - reference)))


# ---------------------------------------------------------------------------
# Amplitude modulation
# ---------------------------------------------------------------------------
class ModulatedSignals(NamedTuple):
    time: np.ndarray
    message: np.ndarray
    carrier: np.ndarray
    modulated: np.ndarray


def dsb_modulate(message: np.ndarray, t: np.ndarray, carrier_amp: float, carrier_freq: float) -> np.ndarray:
    """s(t) = [A_c + m(t)] cos(2 pi f_c t)"""
    return (carrier_amp + message) * np.cos(2 * np.pi * carrier_freq * t)


def ssb_modulate(
    message: np.ndarray,
    hilbert: np.ndarray,
    t: np.ndarray,
    carrier_freq: float,
    sideband: str = "usb",
) -> np.ndarray:
    cos_c = np.cos(2 * np.pi * carrier_freq * t)
    sin_c = np.sin(2 * np.pi * carrier_freq * t)
    if sideband == "lsb":
        return message * cos_c + hilbert * sin_c
    if sideband == "usb":
        return message * cos_c - hilbert * sin_c
    raise ValueError(f"Unsupported sideband: {sideband}")


def generate_signals(settings: ModulationSettings, t: np.ndarray | None = None) -> ModulatedSignals:
    if t is None:
        t = time_vector()
    message = generate_waveform(settings.message_waveform, settings.message_amplitude, settings.message_frequency, t)
    carrier = generate_sine(settings.carrier_amplitude, settings.carrier_frequency, t)

    if settings.modulation_type == "dsb":
        modulated = dsb_modulate(message, t, settings.carrier_amplitude, settings.carrier_frequency)
    else:
        hilbert = hilbert_transform(message, size=max(DFT_SIZE, t.size))
        modulated = ssb_modulate(message, hilbert, t, settings.carrier_frequency, settings.sideband)

    logger.debug(
        "Recomputed %s signals (%s message %.1f Hz, carrier %.1f Hz)",
        settings.modulation_type,
        settings.message_waveform,
        settings.message_frequency,
        settings.carrier_frequency,
    )
    return ModulatedSignals(t, message, carrier, modulated)


# ---------------------------------------------------------------------------
# Fourier series of a square wave
# ---------------------------------------------------------------------------
def normalize_harmonic_count(count: int) -> int:
    """Only odd harmonics exist in a square wave, so even counts round down."""
    count = int(count)
    if count % 2 == 0:
        count -= 1
    return max(1, count)


def odd_harmonics(count: int) -> List[int]:
    return list(range(1, int(count) + 1, 2))


def _unit_grid(samples: int) -> np.ndarray:
    return np.arange(samples + 1) / samples


def square_wave_partial_sum(count: int, samples: int, f0: float = FUNDAMENTAL_HZ) -> np.ndarray:
    """(4/pi) * sum over odd n <= count of sin(2 pi f0 n t) / n, over one unit of time."""
    t = _unit_grid(samples)
    y = np.zeros_like(t)
    for n in odd_harmonics(count):
        y += np.sin(2 * np.pi * f0 * n * t) / n
    return y * 4 / np.pi


def fundamental_wave(samples: int, f0: float = FUNDAMENTAL_HZ) -> np.ndarray:
    return np.sin(2 * np.pi * f0 * _unit_grid(samples))


def ideal_square_wave(samples: int, f0: float = FUNDAMENTAL_HZ) -> np.ndarray:
    return np.sign(np.sin(2 * np.pi * f0 * _unit_grid(samples)))


def rms_error(a: ArrayLike, b: ArrayLike) -> float:
    diff = np.asarray(a, dtype=float) - np.asarray(b, dtype=float)
    return float(np.sqrt(np.mean(diff**2)))


def gibbs_overshoot(partial_sum: ArrayLike) -> float:
    """How far the partial sum rises above the square wave's +1 plateau."""
    return float(np.max(partial_sum)) - 1.0
