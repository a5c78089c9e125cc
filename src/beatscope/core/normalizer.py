"""Peak normalization of non-negative feature curves."""

import numpy as np


class SignalNormalizer:
    """Scales a non-negative curve into [0.0, 1.0] by its maximum."""

    @staticmethod
    def normalize(values: np.ndarray) -> np.ndarray:
        """
        Divide every element by the curve's maximum.

        Args:
            values: Non-negative values.

        Returns:
            Same-length float64 array in [0.0, 1.0]; all zeros when the
            input is empty or silent.
        """
        values = np.asarray(values, dtype=np.float64)
        if values.size == 0:
            return np.zeros(0, dtype=np.float64)

        peak = float(np.max(values))
        if peak <= 0.0:
            return np.zeros_like(values)

        return values / peak
