#!/usr/bin/env python3
"""
Score renderer tool with fingerprinting and an optional render trace.

Usage:
    python tools/render.py <score.json> <output_basename> [options]

Writes <output_basename>.wav, plus <output_basename>.mp3 (or other formats) on request.
Without a score path nothing is rendered.

Options:
    --mp3                 Also write an MP3 (same as --format mp3)
    --format <fmt>        Extra compressed format: mp3, ogg, flac (repeatable)
    --seed <int>          Fixed noise seed for kick/snare (default: random)
    --lenient             Substitute a default tone for unknown waveform kinds
    --debug               Save <output_basename>.render.json with the render trace
    --verbose             Debug logging
"""
import sys
import os
import argparse
import logging

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tools.render_core import render_score
from scoresynth.errors import ScoreSynthError
from scoresynth.export.compressed import FORMATS
from scoresynth.score.loader import load_score

logger = logging.getLogger("scoresynth.render")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a score to WAV (and MP3/OGG/FLAC)")
    parser.add_argument("score_json", nargs="?", help="Score JSON file")
    parser.add_argument("output", nargs="?", help="Output path without extension")
    parser.add_argument("--mp3", action="store_true", help="Also write an MP3")
    parser.add_argument("--format", dest="formats", action="append", default=[],
                        choices=sorted(FORMATS), help="Extra compressed format (repeatable)")
    parser.add_argument("--seed", type=int, default=None, help="Fixed noise seed (default: random)")
    parser.add_argument("--lenient", action="store_true",
                        help="Substitute a default tone for unknown waveform kinds")
    parser.add_argument("--debug", action="store_true", help="Save render.json with render trace")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if not args.score_json:
        logger.info("No score given, nothing to render")
        return 0
    if not args.output:
        parser.error("output basename is required")

    formats = ["wav"]
    if args.mp3:
        formats.append("mp3")
    for fmt in args.formats:
        if fmt not in formats:
            formats.append(fmt)

    try:
        score = load_score(args.score_json, strict=not args.lenient)
        print(f"Running {score.name}")
        audio, debug_info = render_score(
            score,
            args.output,
            formats=formats,
            seed=args.seed,
            strict=not args.lenient,
            debug=args.debug,
            script_name="render.py",
        )
    except (ScoreSynthError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    fp = debug_info["fingerprint"]
    print(f"\n=== Render Complete ===")
    print(f"Score: {score.name} ({len(score.channels)} channels)")
    for path in debug_info["outputs"]:
        print(f"Output: {path}")
    print(f"Seed: {debug_info['seed']}")
    print(f"Duration: {fp['duration_s']:.3f} s")
    print(f"Fingerprint SHA256: {fp['sha256'][:16]}...")
    print(f"Peak: {fp['peak']:.4f}, RMS: {fp['rms']:.4f}")
    if args.debug:
        print(f"Debug JSON: {debug_info['debug_json']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
