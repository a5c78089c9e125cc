"""Beat and tempo analysis of decoded audio."""

from beatscope.core.params import AnalysisParams
from beatscope.core.waveform import Downmixer, Waveform
from beatscope.pipeline import AnalysisPipeline, AnalysisResult, analyze
from beatscope.io.exporter import ResultExporter
from beatscope.playback import BeatFrame, ConsumerState, PlaybackTracker

__version__ = "0.1.0"
__all__ = [
    "AnalysisParams",
    "AnalysisPipeline",
    "AnalysisResult",
    "BeatFrame",
    "ConsumerState",
    "Downmixer",
    "PlaybackTracker",
    "ResultExporter",
    "Waveform",
    "analyze",
]
