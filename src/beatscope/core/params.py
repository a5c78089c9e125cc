"""
Tunable analysis constants.

The moving-average span, threshold ratio, confirmation window and tempo
folding range are empirical choices; they live here so callers analysing
unusual material can adjust them without touching the algorithms.
"""

import math
from dataclasses import dataclass


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always going up."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class AnalysisParams:
    """Peak detection and tempo estimation parameters."""

    average_window_sec: float = 1.0   # trailing moving-average span
    threshold_ratio: float = 1.3      # candidate must exceed average * ratio
    peak_window_sec: float = 0.5      # local-maximum half-width
    min_peaks: int = 4                # fewer peaks -> no tempo estimate
    max_pair_span: int = 8            # following peaks paired with each peak
    min_bpm: float = 60.0
    max_bpm: float = 200.0

    def __post_init__(self):
        if not self.average_window_sec > 0:
            raise ValueError(f"average_window_sec must be > 0, got {self.average_window_sec}")
        if not self.threshold_ratio > 0:
            raise ValueError(f"threshold_ratio must be > 0, got {self.threshold_ratio}")
        if not self.peak_window_sec > 0:
            raise ValueError(f"peak_window_sec must be > 0, got {self.peak_window_sec}")
        if self.min_peaks < 2:
            raise ValueError(f"min_peaks must be >= 2, got {self.min_peaks}")
        if self.max_pair_span < 1:
            raise ValueError(f"max_pair_span must be >= 1, got {self.max_pair_span}")
        if not 0 < self.min_bpm < self.max_bpm:
            raise ValueError(
                f"BPM range must satisfy 0 < min_bpm < max_bpm, "
                f"got ({self.min_bpm}, {self.max_bpm})"
            )
        # Folding halves/doubles, so the range has to span an octave.
        if self.max_bpm < 2 * self.min_bpm:
            raise ValueError(
                f"max_bpm must be at least twice min_bpm, "
                f"got ({self.min_bpm}, {self.max_bpm})"
            )

    def average_window(self, fps: float) -> int:
        """Moving-average length in frames."""
        return max(1, round_half_up(fps * self.average_window_sec))

    def peak_window(self, fps: float) -> int:
        """Local-maximum half-width in frames."""
        return max(1, round_half_up(fps * self.peak_window_sec))
