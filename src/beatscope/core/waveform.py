"""
Waveform container and mono downmixing.

A :class:`Waveform` is the decoded audio handed to the analysis by
whatever acquired it (file decoder, recorder, test fixture).  The
:class:`Downmixer` collapses it into the single sample stream the
rest of the pipeline works on.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np


@dataclass(frozen=True, init=False, eq=False)
class Waveform:
    """Multi-channel audio, shape ``(channel_count, length)``, float32."""

    channels: np.ndarray
    sample_rate: float

    def __init__(
        self,
        channels: Union[np.ndarray, Sequence[Sequence[float]]],
        sample_rate: float,
    ):
        """
        Build and validate a waveform.

        Args:
            channels: One sample sequence per channel, or a 1-D array
                      for mono audio.  The samples are copied.
            sample_rate: Samples per second.

        Raises:
            ValueError: If the sample rate is not positive, there are no
                        channels, or the channels differ in length.
        """
        if not (math.isfinite(sample_rate) and sample_rate > 0):
            raise ValueError(f"sample_rate must be a positive number, got {sample_rate}")

        if isinstance(channels, np.ndarray):
            data = np.array(channels, dtype=np.float32)
        else:
            rows = [np.asarray(ch, dtype=np.float32) for ch in channels]
            if not rows:
                raise ValueError("waveform needs at least one channel")
            if any(row.ndim != 1 for row in rows):
                raise ValueError("each channel must be a 1-D sample sequence")
            lengths = {len(row) for row in rows}
            if len(lengths) > 1:
                raise ValueError(f"channels must have equal length, got lengths {sorted(lengths)}")
            data = np.stack(rows)

        if data.ndim == 1:
            data = data[np.newaxis, :]
        if data.ndim != 2:
            raise ValueError(f"channels must be 1-D or 2-D, got {data.ndim} dimensions")
        if data.shape[0] < 1:
            raise ValueError("waveform needs at least one channel")

        data.flags.writeable = False

        object.__setattr__(self, "channels", data)
        object.__setattr__(self, "sample_rate", float(sample_rate))

    @property
    def channel_count(self) -> int:
        return self.channels.shape[0]

    @property
    def length(self) -> int:
        """Samples per channel."""
        return self.channels.shape[1]

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.length / self.sample_rate


class Downmixer:
    """Collapses multi-channel audio into a mono signal."""

    @staticmethod
    def to_mono(waveform: Union[Waveform, np.ndarray]) -> np.ndarray:
        """
        Average all channels into one sample stream.

        Args:
            waveform: A Waveform, or a raw ``(channels, samples)`` array.

        Returns:
            Read-only 1-D array with one value per sample index.  A
            single-channel input is returned as a view of that channel.
        """
        data = waveform.channels if isinstance(waveform, Waveform) else np.asarray(waveform)
        if data.ndim == 1:
            data = data[np.newaxis, :]

        if data.shape[0] == 1:
            mono = data[0].view()
        elif data.shape[0] == 0:
            mono = np.zeros(data.shape[1], dtype=np.float64)
        else:
            mono = data.mean(axis=0, dtype=np.float64)

        mono.flags.writeable = False
        return mono
