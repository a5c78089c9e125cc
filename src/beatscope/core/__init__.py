"""Core beat analysis modules."""

from beatscope.core.energy import FrameEnergyExtractor
from beatscope.core.normalizer import SignalNormalizer
from beatscope.core.params import AnalysisParams
from beatscope.core.peaks import PeakDetector
from beatscope.core.tempo import TempoEstimator
from beatscope.core.waveform import Downmixer, Waveform

__all__ = [
    "AnalysisParams",
    "Downmixer",
    "FrameEnergyExtractor",
    "PeakDetector",
    "SignalNormalizer",
    "TempoEstimator",
    "Waveform",
]
