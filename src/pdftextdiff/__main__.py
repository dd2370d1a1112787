"""Command line interface for pdftextdiff."""
from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import Iterable, Optional

from . import __version__, config
from .compare import compare_files
from .errors import DecodeError, EngineUnavailable
from .extraction import load_engine
from .presets import DiffParams, get_preset
from .progress import ProgressEvent, ProgressTracker
from .report import REPORT_FILENAME, write_json_report, write_text_report

logger = logging.getLogger("pdftextdiff")

EXIT_FAILED = 1
EXIT_USAGE = 2
EXIT_ENGINE_UNAVAILABLE = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pdftextdiff",
        description="List the text found in the latest PDF but not in the outdated one.",
    )
    parser.add_argument("--latest", required=True, help="Path to the most recent PDF")
    parser.add_argument("--outdated", required=True, help="Path to the older PDF")
    parser.add_argument("--output", default=REPORT_FILENAME, help="Text report path")
    parser.add_argument("--json", help="Optional JSON report path")
    parser.add_argument("--preset", default=config.PRESET, help="Preset name (strict|balanced|loose)")
    parser.add_argument("--threshold", type=float, help="Override similarity threshold (0-1)")
    parser.add_argument("--max-lines", type=int, help="Lines per page before exact matching")
    parser.add_argument("--max-line-length", type=int, help="Line length before exact matching")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def _override_params(preset_params: DiffParams, args: argparse.Namespace) -> DiffParams:
    overrides = {}
    for field_name, arg_name in (
        ("similarity_threshold", "threshold"),
        ("max_lines_per_page", "max_lines"),
        ("max_line_length", "max_line_length"),
    ):
        value = getattr(args, arg_name)
        if value is not None:
            overrides[field_name] = value
    return preset_params.copy(**overrides)


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        preset = get_preset(args.preset)
    except KeyError as exc:
        parser.error(str(exc.args[0]))
        return EXIT_USAGE

    try:
        params = _override_params(preset.params, args)
    except ValueError as exc:
        parser.error(str(exc))
        return EXIT_USAGE

    try:
        load_engine()
    except EngineUnavailable as exc:
        logger.error("PDF engine failed to load: %s", exc)
        print("PDF engine failed to load. Install PyMuPDF and try again.", file=sys.stderr)
        return EXIT_ENGINE_UNAVAILABLE

    tracker = ProgressTracker()
    started = time.perf_counter()

    def on_progress(key: str, event: ProgressEvent) -> None:
        tracker.update(key, event)
        level = logging.INFO if event.phase == "pages" else logging.DEBUG
        logger.log(
            level,
            "%s PDF: %s (%d%%, ETA %s)",
            key.capitalize(),
            tracker.describe(key),
            event.percent,
            tracker.eta(time.perf_counter() - started),
        )

    try:
        result = compare_files(args.latest, args.outdated, params=params, on_progress=on_progress)
    except (DecodeError, OSError) as exc:
        logger.error("Comparison failed: %s", exc)
        print("We couldn't process those PDFs. Please try different files.", file=sys.stderr)
        return EXIT_FAILED

    report_path = write_text_report(result.records, args.output)
    if args.json:
        write_json_report(result.records, args.json)

    print(f"{result.status}. Report written to {report_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
