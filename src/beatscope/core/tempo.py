"""
Histogram-voting tempo estimation.

Every peak is paired with the next few peaks; each interval votes for
a BPM folded into one octave.  Voting across many pairs tolerates
missed and spurious peaks, and the folding absorbs half/double tempo
errors.  A single tempo is reported for the whole track.
"""

from collections import Counter
from typing import Optional

import numpy as np

from beatscope.core.params import AnalysisParams, round_half_up


class TempoEstimator:
    """Estimates a single BPM from peak times."""

    def __init__(self, params: Optional[AnalysisParams] = None):
        self.params = params or AnalysisParams()

    def fold_bpm(self, bpm: float) -> float:
        """Double or halve ``bpm`` until it lies in the folding range."""
        while bpm < self.params.min_bpm:
            bpm *= 2.0
        while bpm > self.params.max_bpm:
            bpm /= 2.0
        return bpm

    def vote(self, peaks: np.ndarray) -> Counter:
        """
        Build the folded-BPM histogram.

        Args:
            peaks: Ascending peak times in seconds.

        Returns:
            Counter of integer BPM -> votes, keys in first-seen order.
        """
        peaks = np.asarray(peaks, dtype=np.float64)
        span = self.params.max_pair_span
        histogram: Counter = Counter()

        for i in range(len(peaks)):
            for j in range(i + 1, min(i + span + 1, len(peaks))):
                interval = peaks[j] - peaks[i]
                if interval <= 0:
                    continue
                bpm = self.fold_bpm(60.0 / interval)
                histogram[round_half_up(bpm)] += 1

        return histogram

    def estimate(self, peaks: np.ndarray) -> Optional[float]:
        """
        Estimate tempo.

        Args:
            peaks: Ascending peak times in seconds.

        Returns:
            The most voted BPM, or None with too few peaks.  Ties go to
            the candidate seen first.
        """
        if len(peaks) < self.params.min_peaks:
            return None

        histogram = self.vote(peaks)
        if not histogram:
            return None

        # most_common keeps first-seen order among equal counts
        bpm, _ = histogram.most_common(1)[0]
        return float(bpm)
