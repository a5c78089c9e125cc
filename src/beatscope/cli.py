"""
Command-line beat analysis.

Decodes an audio file, runs the analysis and prints a summary,
optionally exporting the full result.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from beatscope.io.exporter import ResultExporter
from beatscope.io.loader import load_waveform
from beatscope.pipeline import AnalysisPipeline, AnalysisResult


def format_summary(result: AnalysisResult) -> str:
    bpm = f"{result.bpm:.0f}" if result.bpm is not None else "n/a"
    return "\n".join([
        f"sample rate: {result.sample_rate:g} Hz",
        f"duration:    {result.duration:.2f} s",
        f"frame size:  {result.frame_size} samples @ {result.fps:g} fps",
        f"frames:      {result.n_frames}",
        f"peaks:       {len(result.peaks)}",
        f"bpm:         {bpm}",
    ])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="beatscope",
        description="Detect beat peaks and estimate tempo of an audio file",
    )

    parser.add_argument(
        "audio",
        type=Path,
        help="Input audio file (wav, mp3, flac)",
    )

    parser.add_argument(
        "-f", "--fps",
        type=float,
        default=60,
        help="Analysis frames per second (default: 60)",
    )

    parser.add_argument(
        "--sr",
        type=int,
        default=None,
        help="Resample to this rate before analysis (default: native)",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the JSON manifest here",
    )

    parser.add_argument(
        "--npz",
        type=Path,
        default=None,
        help="Write a NumPy .npz archive here",
    )

    parser.add_argument(
        "--precision",
        type=int,
        default=4,
        help="Decimal places in the JSON manifest (default: 4)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Debug logging",
    )

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.audio.exists():
        print(f"Error: Audio file not found: {args.audio}", file=sys.stderr)
        return 1

    if args.fps <= 0:
        print(f"Error: --fps must be positive, got {args.fps}", file=sys.stderr)
        return 1

    waveform = load_waveform(args.audio, sr=args.sr)
    result = AnalysisPipeline(fps=args.fps).analyze(waveform)

    print(format_summary(result))

    exporter = ResultExporter(precision=args.precision)
    if args.output is not None:
        path = exporter.export_json(result, args.output)
        print(f"manifest:    {path}")
    if args.npz is not None:
        path = exporter.export_numpy(result, args.npz)
        print(f"archive:     {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
