"""Options and helpers shared by the generation commands."""

from __future__ import annotations

import argparse
import logging
from typing import TYPE_CHECKING

from ...core import duration
from ...core.base import ConfigurationError, ProcessingResult
from ...core.display import human_size
from ...core.ffmpeg import FFmpegProcessor
from ...core.workers import default_concurrency

if TYPE_CHECKING:
    from ...config import StickerToolkitConfig

LOG = logging.getLogger(__name__)


def timecode(value: str) -> float:
    """Argparse type for ``[[HH:]MM:]SS[.frac]`` timecodes."""
    try:
        return duration.parse(value)
    except ConfigurationError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def positive_int(value: str) -> int:
    """Argparse type for counts that must be at least one."""
    try:
        number = int(value)
    except ValueError as e:
        msg = f"`{value}` is not an integer"
        raise argparse.ArgumentTypeError(msg) from e
    if number < 1:
        msg = f"must be a positive number, got {number}"
        raise argparse.ArgumentTypeError(msg)
    return number


def add_encoding_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the options every generation command understands."""
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite existing output files without asking",
    )
    parser.add_argument("--publisher", help="Publisher metadata to embed into the output files")
    parser.add_argument(
        "--begin",
        "--ss",
        type=timecode,
        help="Start of the input fragment to convert, [[HH:]MM:]SS[.frac]",
    )
    parser.add_argument(
        "--end",
        "--to",
        type=timecode,
        help="End of the input fragment to convert, [[HH:]MM:]SS[.frac]",
    )
    parser.add_argument(
        "--filter",
        help="Custom ffmpeg video filter applied before scaling into the bounding box",
    )
    parser.add_argument(
        "--concurrency",
        "-j",
        type=positive_int,
        help="Maximum number of files generated at the same time (default: number of CPUs)",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Don't show the progress bar",
    )


def build_encoder(config: StickerToolkitConfig) -> FFmpegProcessor:
    """Create the ffmpeg encoder from the configuration and check that it's installed."""
    encoder = FFmpegProcessor(
        binary=config.encoder.binary,
        loglevel=config.encoder.loglevel,
        timeout=config.encoder.timeout,
    )
    encoder.check_availability()
    return encoder


def worker_count(args: argparse.Namespace, config: StickerToolkitConfig) -> int:
    """Pick the worker count: `--concurrency`, then the config, then the number of CPUs."""
    if args.concurrency is not None:
        return args.concurrency
    if config.global_.default_workers is not None:
        return config.global_.default_workers
    return default_concurrency(" Pass --concurrency to override.")


def log_results(results: list[ProcessingResult]) -> None:
    """Summarize the generated files."""
    for result in results:
        LOG.info(
            "%s %s: CRF %s, %s -> %s",
            result.pack_kind,
            result.source_file.name,
            result.crf,
            human_size(result.new_size or 0),
            result.output_file,
        )
    LOG.info("Generated %d files", len(results))
