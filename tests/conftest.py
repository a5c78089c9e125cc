"""Shared synthetic-signal fixtures."""

import numpy as np
import pytest

from beatscope.core.waveform import Waveform

TEST_SR = 44100
TEST_FPS = 60


def make_click_track(
    sr: int = TEST_SR,
    n_bursts: int = 30,
    interval: float = 2.0,
    offset: float = 0.5,
    noise: float = 0.0,
    tail: float = 2.5,
    seed: int = 0,
) -> np.ndarray:
    """
    Mono float32 signal with short 1 kHz bursts at ``offset + k * interval``.

    Each burst is 10 ms long, so at 44.1 kHz / 60 fps it sits inside a
    single analysis frame.
    """
    n = int(round((offset + (n_bursts - 1) * interval + tail) * sr))
    rng = np.random.default_rng(seed)
    y = rng.normal(0.0, noise, n) if noise > 0 else np.zeros(n)

    burst_len = int(0.01 * sr)
    burst = 0.8 * np.sin(2 * np.pi * 1000.0 * np.arange(burst_len) / sr)
    for k in range(n_bursts):
        start = int(round((offset + k * interval) * sr))
        y[start:start + burst_len] += burst

    return y.astype(np.float32)


@pytest.fixture
def click_factory():
    return make_click_track


@pytest.fixture
def click_track():
    """30 bursts, 2.0 s apart, starting at 0.5 s, over a faint noise floor."""
    return Waveform(make_click_track(noise=0.01), TEST_SR)


@pytest.fixture
def click_times():
    return 0.5 + 2.0 * np.arange(30)


@pytest.fixture
def silence():
    return Waveform(np.zeros(TEST_SR * 3, dtype=np.float32), TEST_SR)


@pytest.fixture
def opposite_stereo():
    """Left +1.0, right -1.0: cancels to silence when downmixed."""
    n = 4096
    return Waveform([np.ones(n), -np.ones(n)], TEST_SR)


@pytest.fixture
def noise_signal():
    rng = np.random.default_rng(42)
    return Waveform(rng.uniform(-0.5, 0.5, 10001).astype(np.float32), 22050)
