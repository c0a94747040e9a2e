"""Batch generation of pack entries."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ...core.base import OperationCancelled, ProcessingError
from ...pack import BatchContext, PackKind
from .common import add_encoding_arguments, build_encoder, log_results, worker_count

if TYPE_CHECKING:
    import argparse

    from ...config import StickerToolkitConfig

LOG = logging.getLogger(__name__)

EXIT_CANCELLED = 130


class PackCommands:
    """Handler of the ``pack`` command."""

    def __init__(self, config: StickerToolkitConfig) -> None:
        """Initialize pack commands handler."""
        self.config = config

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add pack arguments to parser."""
        parser.add_argument(
            "--input",
            "-i",
            dest="inputs",
            action="append",
            type=Path,
            required=True,
            help="Input file or directory of files, can be repeated",
        )
        parser.add_argument(
            "--output",
            "-o",
            type=Path,
            help="Directory for the output files (default: next to each input)",
        )
        parser.add_argument("--emoji", action="store_true", help="Generate emoji")
        parser.add_argument("--sticker", action="store_true", help="Generate stickers")
        add_encoding_arguments(parser)

    @staticmethod
    def pack_kinds(args: argparse.Namespace) -> list[PackKind]:
        kinds = []
        if args.emoji:
            kinds.append(PackKind.EMOJI)
        if args.sticker:
            kinds.append(PackKind.STICKER)
        return kinds

    def handle_command(self, args: argparse.Namespace, ffmpeg_args: list[str]) -> int:
        """Handle pack command execution."""
        try:
            context = BatchContext.create(
                self.pack_kinds(args),
                args.inputs,
                output=args.output,
                begin=args.begin,
                end=args.end,
                filter=args.filter,
                ffmpeg_args=ffmpeg_args,
                encoder=build_encoder(self.config),
                concurrency=worker_count(args, self.config),
                overwrite=args.overwrite,
                publisher=args.publisher,
                listing_concurrency=self.config.listing.concurrency,
                progress=not args.no_progress,
            )
            results = context.run()
        except OperationCancelled as e:
            LOG.error("Cancelled: %s", e)
            return EXIT_CANCELLED
        except ProcessingError as e:
            LOG.error("Exiting with an error...\n%s", e)
            return 1

        log_results(results)
        return 0
