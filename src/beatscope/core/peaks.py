"""
Adaptive peak detection on a normalized loudness curve.

A frame is reported when it rises clearly above the recent average
loudness and is also the largest value in its neighbourhood.  The
average adapts to loud and quiet sections, and the neighbourhood check
suppresses clusters of small maxima without a fixed refractory period.
This is a best-effort beat finder: some true beats are missed and some
passages yield nothing at all.
"""

from typing import Optional

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from beatscope.core.params import AnalysisParams


class PeakDetector:
    """
    Finds rhythmic peaks in an intensity curve sampled at ``fps``.

    Args:
        fps: Frame rate the curve was built at.
        params: Window and threshold settings.
    """

    def __init__(self, fps: float, params: Optional[AnalysisParams] = None):
        if not fps > 0:
            raise ValueError(f"fps must be > 0, got {fps}")
        self.fps = fps
        self.params = params or AnalysisParams()

    @staticmethod
    def moving_average(curve: np.ndarray, window: int) -> np.ndarray:
        """
        Trailing mean over the last ``window`` frames, current included.

        Near the start fewer frames are available and the divisor
        shrinks to match.
        """
        n = len(curve)
        if n == 0:
            return np.zeros(0, dtype=np.float64)

        cumulative = np.concatenate(([0.0], np.cumsum(curve, dtype=np.float64)))
        idx = np.arange(n)
        start = np.maximum(0, idx + 1 - window)
        sums = cumulative[idx + 1] - cumulative[start]
        return sums / np.minimum(idx + 1, window)

    def confirmed_mask(self, curve: np.ndarray) -> np.ndarray:
        """
        Boolean mask of frames that pass both the threshold and the
        local-maximum test.
        """
        curve = np.asarray(curve, dtype=np.float64)
        n = len(curve)
        if n == 0:
            return np.zeros(0, dtype=bool)

        average = self.moving_average(curve, self.params.average_window(self.fps))
        candidates = curve > average * self.params.threshold_ratio

        half = self.params.peak_window(self.fps)
        padded = np.concatenate((np.full(half, -np.inf), curve, np.full(half, -np.inf)))
        windows = sliding_window_view(padded, 2 * half + 1)
        # Nothing larger anywhere in the window, and no equal value
        # before it: a plateau reports only its first frame.
        is_max = curve >= windows.max(axis=1)
        first_of_ties = curve > windows[:, :half].max(axis=1)

        return candidates & is_max & first_of_ties

    def detect(self, curve: np.ndarray) -> np.ndarray:
        """
        Detect peaks.

        Args:
            curve: Normalized intensity curve, one value per frame.

        Returns:
            Strictly increasing peak times in seconds (``frame / fps``).
        """
        frames = np.flatnonzero(self.confirmed_mask(curve))
        return frames / float(self.fps)
