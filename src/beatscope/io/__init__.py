"""Audio loading and result export."""

from beatscope.io.exporter import ResultExporter
from beatscope.io.loader import load_waveform

__all__ = ["ResultExporter", "load_waveform"]
