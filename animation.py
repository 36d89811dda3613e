"""Frame-by-frame interpolation between two sampled waveforms."""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

import numpy as np

from lab_config import TRANSITION_FRAMES

logger = logging.getLogger(__name__)


class WaveformTransition:
    """Linear morph from ``start`` to ``target`` over a fixed number of frames."""

    def __init__(self, start: Sequence[float], target: Sequence[float], frames: int = TRANSITION_FRAMES) -> None:
        self.start = np.asarray(start, dtype=float)
        self.target = np.asarray(target, dtype=float)
        if self.start.shape != self.target.shape:
            raise ValueError(f"start and target shapes differ: {self.start.shape} vs {self.target.shape}")
        if frames <= 0:
            raise ValueError(f"frames must be > 0, got {frames}")
        self.total_frames = int(frames)
        self.frame = 0

    @classmethod
    def from_previous(
        cls,
        previous: Sequence[float] | None,
        target: Sequence[float],
        frames: int = TRANSITION_FRAMES,
    ) -> WaveformTransition:
        """Resume from the last finished waveform when it still fits the grid."""
        target = np.asarray(target, dtype=float)
        if previous is not None and len(previous) == len(target):
            start = np.asarray(previous, dtype=float)
        else:
            start = target.copy()
        return cls(start, target, frames)

    @property
    def progress(self) -> float:
        return min(self.frame / self.total_frames, 1.0)

    @property
    def done(self) -> bool:
        return self.frame >= self.total_frames

    def current(self) -> np.ndarray:
        return self.start + (self.target - self.start) * self.progress

    def step(self) -> np.ndarray:
        if not self.done:
            self.frame += 1
        return self.current()

    def frames(self) -> Iterator[np.ndarray]:
        logger.debug("Starting %d-frame transition", self.total_frames - self.frame)
        while not self.done:
            yield self.step()
        logger.debug("Transition finished")
