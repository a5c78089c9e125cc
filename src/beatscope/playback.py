"""
Playback-side consumption of an analysis result.

Gameplay and rendering code follows the song clock and asks, tick by
tick, what the analysis says about "now".  Each consumer implements
the :class:`BeatConsumer` capability set; the analysis itself knows
nothing about them and only hands over the plain result record.

Input devices, drawing surfaces and the audio clock all stay with the
caller and arrive as arguments to ``update`` and ``render``.
"""

from __future__ import annotations

import bisect
import enum
import math
from dataclasses import dataclass
from typing import Optional, Protocol

import numpy as np

from beatscope.pipeline import AnalysisResult


class ConsumerState(enum.Enum):
    """Lifecycle of a consumer."""

    FINISHED = "finished"        # not initialized, or ran past the end
    INITIALIZED = "initialized"
    PLAYING = "playing"


class BeatConsumer(Protocol):
    """Anything driven by an analysis result over playback time."""

    state: ConsumerState

    def init(self, result: AnalysisResult) -> None: ...

    def update(self, timestamp: float, delta_time: float) -> object: ...

    def render(self, canvas: np.ndarray) -> None: ...


@dataclass
class BeatFrame:
    """
    Snapshot of the analysis at one playback instant.

    Optional fields are None when the analysis has nothing to say
    (no tempo, no peak yet, no peak left).
    """

    time_sec: float = 0.0
    frame_index: int = 0
    intensity: float = 0.0

    # Rhythm
    is_beat: bool = False
    beats_crossed: int = 0
    beat_position: Optional[float] = None
    bpm: Optional[float] = None
    next_peak_sec: Optional[float] = None


class PlaybackTracker:
    """
    Follows playback time over an :class:`AnalysisResult`.

    Parameters
    ----------
    pixels_per_second:
        Horizontal scroll speed of the rendered trace.
    trace_height:
        Fraction of the canvas height the intensity trace may use.
    """

    def __init__(self, pixels_per_second: float = 360.0, trace_height: float = 0.35):
        self.pixels_per_second = pixels_per_second
        self.trace_height = trace_height

        self.state = ConsumerState.FINISHED
        self.result: Optional[AnalysisResult] = None
        self._peaks: list[float] = []
        self._next_peak: int = 0
        self._last_time: Optional[float] = None
        self._last_peak_time: Optional[float] = None

    def init(self, result: AnalysisResult) -> None:
        self.result = result
        self._peaks = result.peaks.tolist()
        self._next_peak = 0
        self._last_time = None
        self._last_peak_time = None
        self.state = ConsumerState.INITIALIZED

    @property
    def now(self) -> float:
        return self._last_time or 0.0

    def _frame_at(self, timestamp: float) -> int:
        n = self.result.n_frames
        if n == 0:
            return 0
        return min(n - 1, max(0, int(math.floor(timestamp * self.result.fps))))

    def update(self, timestamp: float, delta_time: float = 0.0) -> BeatFrame:
        """
        Advance to ``timestamp`` seconds of playback.

        Args:
            timestamp: Current playback position in seconds.
            delta_time: Seconds since the previous tick (informational).

        Returns:
            BeatFrame for ``timestamp``.
        """
        if self.result is None:
            raise RuntimeError("PlaybackTracker.update() called before init()")

        timestamp = max(0.0, timestamp)
        if self._last_time is not None and timestamp < self._last_time:
            # Seek backwards: re-sync the cursor to the new position.
            self._next_peak = bisect.bisect_left(self._peaks, timestamp)
            self._last_peak_time = self._peaks[self._next_peak - 1] if self._next_peak else None
            self._last_time = timestamp
            if self.state == ConsumerState.FINISHED and timestamp < self.result.duration:
                self.state = ConsumerState.PLAYING

        if self.state == ConsumerState.INITIALIZED:
            self.state = ConsumerState.PLAYING

        # Peaks in (previous, timestamp]; the very first tick also takes 0.
        start = self._next_peak
        end = bisect.bisect_right(self._peaks, timestamp)
        crossed = max(0, end - start)
        if crossed:
            self._last_peak_time = self._peaks[end - 1]
            self._next_peak = end
        self._last_time = timestamp

        frame_index = self._frame_at(timestamp)
        intensity = float(self.result.intensities[frame_index]) if self.result.n_frames else 0.0

        beat_position = None
        bpm = self.result.bpm
        if bpm is not None and self._last_peak_time is not None:
            seconds_per_beat = 60.0 / bpm
            beat_position = ((timestamp - self._last_peak_time) / seconds_per_beat) % 1.0

        next_peak = self._peaks[self._next_peak] if self._next_peak < len(self._peaks) else None

        if timestamp >= self.result.duration:
            self.state = ConsumerState.FINISHED

        return BeatFrame(
            time_sec=timestamp,
            frame_index=frame_index,
            intensity=intensity,
            is_beat=crossed > 0,
            beats_crossed=crossed,
            beat_position=beat_position,
            bpm=bpm,
            next_peak_sec=next_peak,
        )

    def render(self, canvas: np.ndarray) -> None:
        """
        Draw a scrolling view of the analysis into ``canvas``.

        The intensity trace runs left to right through the current time
        at the horizontal centre; peaks in view are drawn as full-height
        columns at half brightness.

        Args:
            canvas: 2-D float array (height, width), modified in place.
        """
        if self.result is None:
            return

        height, width = canvas.shape[:2]
        center_x = width // 2
        mid_y = height // 2
        now = self.now

        start_t = now - center_x / self.pixels_per_second
        end_t = now + (width - center_x) / self.pixels_per_second

        lo = bisect.bisect_left(self._peaks, start_t)
        hi = bisect.bisect_right(self._peaks, end_t)
        for t in self._peaks[lo:hi]:
            x = int(round(center_x + (t - now) * self.pixels_per_second))
            if 0 <= x < width:
                canvas[:, x] = np.maximum(canvas[:, x], 0.5)

        if self.result.n_frames == 0:
            return

        xs = np.arange(width)
        times = now + (xs - center_x) / self.pixels_per_second
        frames = np.floor(times * self.result.fps).astype(np.int64)
        visible = (frames >= 0) & (frames < self.result.n_frames)

        amp = self.result.intensities[frames[visible]] * height * self.trace_height
        ys = np.clip(np.round(mid_y - amp).astype(np.int64), 0, height - 1)
        canvas[ys, xs[visible]] = 1.0
