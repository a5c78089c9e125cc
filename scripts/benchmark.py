"""
Beatscope analysis benchmark + determinism check.

Usage:
    python scripts/benchmark.py [--quick]

Modes:
    default  — 5-minute stereo click tracks, 3 warm-up + 5 timed runs
    --quick  — 30-second click tracks, 1 warm-up + 3 timed runs

Output: timing table per sample rate, plus the detected peak count and
BPM, and whether two runs on the same input produced identical output.
"""

import argparse
import os
import sys
import time
from typing import List

import numpy as np

# Make sure the installed package is on the path when run from repo root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from beatscope import AnalysisPipeline, Waveform

_SEP = "─" * 72


def _hdr(title: str) -> None:
    print(f"\n{_SEP}")
    print(f"  {title}")
    print(_SEP)


def _timeit(fn, *args, warmup: int = 2, runs: int = 5, **kwargs) -> List[float]:
    """Run fn(*args, **kwargs), discard warmup iterations, return timed samples."""
    for _ in range(warmup):
        fn(*args, **kwargs)
    times = []
    for _ in range(runs):
        t0 = time.perf_counter()
        fn(*args, **kwargs)
        times.append(time.perf_counter() - t0)
    return times


def _stats(times: List[float]) -> str:
    arr = np.array(times)
    return f"mean={arr.mean()*1000:.1f} ms  min={arr.min()*1000:.1f} ms  max={arr.max()*1000:.1f} ms"


def click_track(sr: int, seconds: float, bpm: float = 120.0) -> Waveform:
    """Stereo noise floor with 10 ms 1 kHz bursts on every beat."""
    rng = np.random.default_rng(0)
    n = int(sr * seconds)
    y = rng.normal(0.0, 0.01, n)
    burst_len = int(0.01 * sr)
    burst = 0.8 * np.sin(2 * np.pi * 1000.0 * np.arange(burst_len) / sr)
    for t in np.arange(0.5, seconds - 0.05, 60.0 / bpm):
        start = int(t * sr)
        y[start:start + burst_len] += burst
    return Waveform([y, y * 0.5], sr)


def _identical(a, b) -> bool:
    return (
        np.array_equal(a.intensities, b.intensities)
        and np.array_equal(a.peaks, b.peaks)
        and a.bpm == b.bpm
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="Beatscope analysis benchmark")
    parser.add_argument(
        "--quick",
        action="store_true",
        help="Use 30 s tracks instead of 5 min for fast CI runs",
    )
    parser.add_argument(
        "--fps",
        type=float,
        default=60,
        help="Analysis frame rate (default: 60)",
    )
    args = parser.parse_args()

    seconds = 30.0 if args.quick else 300.0
    warmup, runs = (1, 3) if args.quick else (3, 5)
    pipeline = AnalysisPipeline(fps=args.fps)

    _hdr(f"Timing — {seconds:g} s stereo click track @ 120 BPM, fps={args.fps:g}")
    for sr in (22050, 44100, 48000):
        waveform = click_track(sr, seconds)
        times = _timeit(pipeline.analyze, waveform, warmup=warmup, runs=runs)
        result = pipeline.analyze(waveform)
        print(
            f"  sr={sr:>5}  {_stats(times)}  "
            f"peaks={len(result.peaks)}  bpm={result.bpm}"
        )

    _hdr("Determinism")
    waveform = click_track(44100, seconds)
    ok = _identical(pipeline.analyze(waveform), pipeline.analyze(waveform))
    print(f"  repeated analysis identical: {'yes' if ok else 'NO'}")
    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
