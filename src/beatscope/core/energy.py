"""
Frame energy extraction.

Splits a mono signal into fixed-size, non-overlapping frames and
measures the RMS loudness of each one.
"""

import numpy as np

from beatscope.core.params import round_half_up


class FrameEnergyExtractor:
    """
    Computes one RMS value per frame of a mono signal.

    Frames are laid end to end from the first sample; the last frame
    keeps whatever samples remain and is averaged over its own length.
    """

    @staticmethod
    def compute_frame_size(sample_rate: float, fps: float) -> int:
        """
        Calculate the frame size that yields ``fps`` frames per second.

        Args:
            sample_rate: Sample rate in Hz.
            fps: Target frames per second.

        Returns:
            Samples per frame, never less than 1.
        """
        return max(1, round_half_up(sample_rate / fps))

    @staticmethod
    def frame_count(n_samples: int, frame_size: int) -> int:
        """Number of frames covering ``n_samples`` (ceiling division)."""
        return -(-n_samples // frame_size)

    def extract(self, mono: np.ndarray, frame_size: int) -> np.ndarray:
        """
        Compute per-frame RMS.

        Args:
            mono: 1-D sample array.
            frame_size: Samples per frame (>= 1).

        Returns:
            float64 array of length ``ceil(len(mono) / frame_size)``.
        """
        if frame_size < 1:
            raise ValueError(f"frame_size must be >= 1, got {frame_size}")

        n_samples = len(mono)
        n_frames = self.frame_count(n_samples, frame_size)
        if n_frames == 0:
            return np.zeros(0, dtype=np.float64)

        # Zero-pad the tail so every frame reshapes to full width; padding
        # adds nothing to the sum and the divisor uses the real count.
        squared = np.zeros(n_frames * frame_size, dtype=np.float64)
        squared[:n_samples] = np.square(np.asarray(mono, dtype=np.float64))
        sums = squared.reshape(n_frames, frame_size).sum(axis=1)

        counts = np.full(n_frames, frame_size, dtype=np.float64)
        counts[-1] = n_samples - (n_frames - 1) * frame_size

        return np.sqrt(sums / counts)
