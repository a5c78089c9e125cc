"""
Result serialization module.

Exports an :class:`AnalysisResult` as a per-frame JSON manifest or a
NumPy archive for rendering engines and gameplay code.
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np

from beatscope.pipeline import AnalysisResult


@dataclass
class ManifestMetadata:
    """Metadata header for the beat manifest."""

    sample_rate: float
    duration: float
    fps: float
    frame_size: int
    n_frames: int
    n_peaks: int
    bpm: Optional[float]
    schema_version: str = "1.0"


class ResultExporter:
    """
    Exports analysis results to JSON manifest format.

    Each frame carries its time, normalized intensity and whether a
    peak was detected on it.
    """

    def __init__(self, precision: int = 4):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for floating point values.
        """
        self.precision = precision

    def _round(self, value: float) -> float:
        """Round to configured precision."""
        return round(float(value), self.precision)

    def build_metadata(self, result: AnalysisResult) -> ManifestMetadata:
        return ManifestMetadata(
            sample_rate=result.sample_rate,
            duration=self._round(result.duration),
            fps=result.fps,
            frame_size=result.frame_size,
            n_frames=result.n_frames,
            n_peaks=len(result.peaks),
            bpm=result.bpm,
        )

    def build_manifest(self, result: AnalysisResult) -> dict[str, Any]:
        """
        Build the complete manifest dictionary.

        Args:
            result: Analysis output.

        Returns:
            Dictionary with ``metadata``, ``peaks`` and ``frames``.
        """
        peak_frames = set(result.peak_frames.tolist())
        frame_times = result.frame_times

        frames = [
            {
                "frame_index": i,
                "time": self._round(frame_times[i]),
                "intensity": self._round(result.intensities[i]),
                "is_peak": i in peak_frames,
            }
            for i in range(result.n_frames)
        ]

        return {
            "metadata": asdict(self.build_metadata(result)),
            "peaks": [self._round(t) for t in result.peaks],
            "frames": frames,
        }

    def export_json(
        self,
        result: AnalysisResult,
        output_path: Union[str, Path],
        indent: int = 2,
    ) -> Path:
        """
        Export manifest to JSON file.

        Args:
            result: Analysis output.
            output_path: Path for output JSON file.
            indent: JSON indentation level.

        Returns:
            Path to written file.
        """
        manifest = self.build_manifest(result)
        output_path = Path(output_path)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(manifest, f, indent=indent)

        return output_path

    def export_numpy(
        self,
        result: AnalysisResult,
        output_path: Union[str, Path],
    ) -> Path:
        """
        Export the result as a NumPy .npz archive for faster loading.

        A missing tempo is stored as NaN.
        """
        output_path = Path(output_path)

        np.savez_compressed(
            output_path,
            intensities=result.intensities,
            peaks=result.peaks,
            frame_times=result.frame_times,
            sample_rate=np.array([result.sample_rate]),
            duration=np.array([result.duration]),
            fps=np.array([result.fps]),
            frame_size=np.array([result.frame_size]),
            bpm=np.array([np.nan if result.bpm is None else result.bpm]),
        )

        return output_path

    def to_dict(self, result: AnalysisResult) -> dict[str, Any]:
        """Return manifest as dictionary (for in-memory use)."""
        return self.build_manifest(result)
