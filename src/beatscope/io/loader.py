"""
Audio file decoding.

Turns an audio file into a :class:`Waveform`.  Channels are kept
separate so the analysis does its own downmix.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import librosa

from beatscope.core.waveform import Waveform

logger = logging.getLogger(__name__)


def load_waveform(
    audio_path: Union[str, Path],
    sr: Optional[int] = None,
    max_duration: Optional[float] = None,
) -> Waveform:
    """
    Load audio from file.

    Args:
        audio_path: Path to audio file (wav, mp3, flac).
        sr: Target sample rate. None preserves the file's rate.
        max_duration: Only decode this many seconds (None for all).

    Returns:
        Waveform with every channel of the file.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    audio_path = Path(audio_path)
    if not audio_path.exists():
        raise FileNotFoundError(f"Audio file not found: {audio_path}")

    y, sr_out = librosa.load(audio_path, sr=sr, mono=False, duration=max_duration)
    waveform = Waveform(y, sr_out)

    logger.info(
        "Loaded %s: %d ch, %gHz, %.2fs",
        audio_path.name, waveform.channel_count, waveform.sample_rate, waveform.duration,
    )
    return waveform
