"""
Beat/tempo analysis pipeline.

Orchestrates the full flow: downmix -> frame RMS -> normalize ->
peak detection -> tempo estimation, producing an :class:`AnalysisResult`
for rendering and gameplay code to consume.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from beatscope.core.energy import FrameEnergyExtractor
from beatscope.core.normalizer import SignalNormalizer
from beatscope.core.params import AnalysisParams, round_half_up
from beatscope.core.peaks import PeakDetector
from beatscope.core.tempo import TempoEstimator
from beatscope.core.waveform import Downmixer, Waveform

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class AnalysisResult:
    """Loudness curve, peaks and tempo of one waveform."""

    sample_rate: float
    duration: float
    intensities: np.ndarray  # normalized [0,1], one value per frame
    frame_size: int          # samples per frame
    peaks: np.ndarray        # seconds, strictly increasing
    bpm: Optional[float]
    fps: float

    def __post_init__(self):
        # Lock views so the caller's own arrays stay writeable.
        for name in ("intensities", "peaks"):
            view = np.asarray(getattr(self, name)).view()
            view.flags.writeable = False
            object.__setattr__(self, name, view)

    @property
    def n_frames(self) -> int:
        return len(self.intensities)

    @property
    def has_tempo(self) -> bool:
        return self.bpm is not None

    @property
    def frame_times(self) -> np.ndarray:
        """Start time of each frame in seconds."""
        return np.arange(self.n_frames) / float(self.fps)

    @property
    def peak_frames(self) -> np.ndarray:
        """Frame index of each peak."""
        return np.array(
            [round_half_up(t * self.fps) for t in self.peaks], dtype=np.int64
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain-Python view of the result."""
        return {
            "sample_rate": self.sample_rate,
            "duration": self.duration,
            "fps": self.fps,
            "frame_size": self.frame_size,
            "intensities": self.intensities.tolist(),
            "peaks": self.peaks.tolist(),
            "bpm": self.bpm,
        }


class AnalysisPipeline:
    """
    Runs the complete beat/tempo analysis.

    The pipeline holds only configuration, so one instance can analyse
    any number of waveforms, from any number of threads.
    """

    def __init__(self, fps: float = 60, params: Optional[AnalysisParams] = None):
        """
        Initialize the pipeline.

        Args:
            fps: Analysis frame rate (frames per second of audio).
            params: Peak/tempo tuning; defaults to :class:`AnalysisParams`.
        """
        if not (math.isfinite(fps) and fps > 0):
            raise ValueError(f"fps must be a positive number, got {fps}")

        self.fps = fps
        self.params = params or AnalysisParams()
        self.extractor = FrameEnergyExtractor()
        self.normalizer = SignalNormalizer()
        self.detector = PeakDetector(fps, self.params)
        self.estimator = TempoEstimator(self.params)

    def analyze(self, waveform: Waveform) -> AnalysisResult:
        """
        Analyze a waveform.

        Args:
            waveform: Decoded audio.

        Returns:
            AnalysisResult, always complete for valid input.
        """
        mono = Downmixer.to_mono(waveform)
        frame_size = self.extractor.compute_frame_size(waveform.sample_rate, self.fps)
        logger.debug(
            "Analyzing %.2fs (%d ch @ %gHz), frame_size=%d",
            waveform.duration, waveform.channel_count, waveform.sample_rate, frame_size,
        )

        rms = self.extractor.extract(mono, frame_size)
        intensities = self.normalizer.normalize(rms)
        peaks = self.detector.detect(intensities)
        # A frame size rounded down puts the last frame start past the end
        # of the audio; clamping can collapse trailing peaks into one.
        peaks = np.unique(np.minimum(peaks, waveform.duration))
        bpm = self.estimator.estimate(peaks)

        logger.debug(
            "%d frames, %d peaks, bpm=%s", len(intensities), len(peaks), bpm
        )

        return AnalysisResult(
            sample_rate=waveform.sample_rate,
            duration=waveform.duration,
            intensities=intensities,
            frame_size=frame_size,
            peaks=peaks,
            bpm=bpm,
            fps=float(self.fps),
        )


def analyze(
    waveform: Waveform,
    fps: float = 60,
    params: Optional[AnalysisParams] = None,
) -> AnalysisResult:
    """Analyze ``waveform`` at ``fps`` frames per second."""
    return AnalysisPipeline(fps=fps, params=params).analyze(waveform)
