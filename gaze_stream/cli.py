# gaze_stream/cli.py
from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from .config import (
    BufferConstants,
    ClassificationConstants,
    DetectorConstants,
    SpeedConstants,
)
from .config_builder import ConfigBuilder
from .io import ConsoleReporter, events_to_frame, write_tsv
from .io.pipeline import ReplayPipeline


def build_arg_parser() -> argparse.ArgumentParser:
    """
    CLI parser for replaying a recorded reading session.

    Only parsing and option descriptions, no processing logic.
    """
    parser = argparse.ArgumentParser(
        description=(
            "Replay a recorded gaze stream (timestamp_ms, x, y and optional "
            "movement_state/line/paragraph/word columns) through the streaming "
            "processor and report line-advance events and reading speed."
        ),
    )
    parser.add_argument("--input", required=True, help="Input TSV with the recorded gaze samples.")
    parser.add_argument("--output", help="Optional TSV path for the processed samples.")
    parser.add_argument("--events-output", help="Optional TSV path for the fired line-advance events.")

    # Line geometry
    parser.add_argument("--layout", help="TSV with 'line' and 'word_count' columns.")
    parser.add_argument(
        "--words-per-line",
        type=int,
        default=None,
        help="Uniform word count for every line (ignored when --layout is given).",
    )
    parser.add_argument(
        "--max-lines",
        type=int,
        default=200,
        help="Number of lines covered by --words-per-line (default: 200).",
    )

    # Buffer
    parser.add_argument("--capacity", type=int, default=BufferConstants.MAX_CAPACITY, help="Sample buffer capacity.")
    parser.add_argument(
        "--diagnostic-interval",
        type=int,
        default=BufferConstants.DIAGNOSTIC_INTERVAL,
        help="Samples between diagnostic log lines (0 disables them).",
    )

    # Classification
    parser.add_argument(
        "--fallback-threshold",
        type=float,
        default=ClassificationConstants.FALLBACK_VELOCITY_THRESHOLD,
        help="Speed (position/ms) separating fixations from saccades when no movement state is recorded.",
    )
    parser.add_argument(
        "--no-fallback-classification",
        action="store_true",
        help="Keep samples without movement state as Unknown.",
    )

    # Detector
    parser.add_argument(
        "--valley-threshold",
        type=float,
        default=DetectorConstants.VALLEY_VELOCITY_THRESHOLD,
        help="Velocity valley depth (position/ms, negative).",
    )
    parser.add_argument("--cascade-window-ms", type=float, default=DetectorConstants.CASCADE_WINDOW_MS)
    parser.add_argument("--refractory-ms", type=float, default=DetectorConstants.REFRACTORY_MS)
    parser.add_argument("--pending-timeout-ms", type=float, default=DetectorConstants.PENDING_TIMEOUT_MS)

    # Speed
    parser.add_argument("--max-scan-samples", type=int, default=SpeedConstants.MAX_SCAN_SAMPLES)
    parser.add_argument("--min-line-duration-ms", type=float, default=SpeedConstants.MIN_LINE_DURATION_MS)

    parser.add_argument(
        "--no-paragraph-reset",
        action="store_true",
        help="Do not start a new content unit when the paragraph column changes.",
    )
    parser.add_argument("--quiet", action="store_true", help="Only print the summary.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    config = ConfigBuilder.build_stream_config(args)
    line_words = ConfigBuilder.build_line_words(args)

    pipeline = ReplayPipeline(
        config,
        line_words=line_words,
        reset_on_paragraph=not args.no_paragraph_reset,
    )
    pipeline.register_observer(ConsoleReporter(verbose=not args.quiet))
    result = pipeline.run_file(args.input)

    print(
        "[Replay] "
        f"samples={len(result.samples)}  "
        f"line_events={len(result.events)}  "
        f"offline_line_count={result.line_count}  "
        f"wpm={result.wpm}"
    )

    if args.output is not None:
        write_tsv(result.samples, args.output)
    if args.events_output is not None:
        write_tsv(events_to_frame(result.events), args.events_output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
