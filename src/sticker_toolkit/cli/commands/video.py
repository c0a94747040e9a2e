"""Single-file generation of an emoji and a sticker."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ...config.constants import SINGLE_OUTPUT_TEMPLATE
from ...core.base import ConfigurationError, OperationCancelled, ProcessingError
from ...pack import BatchContext, PackKind
from .common import add_encoding_arguments, build_encoder, log_results, worker_count
from .pack import EXIT_CANCELLED

if TYPE_CHECKING:
    import argparse

    from ...config import StickerToolkitConfig

LOG = logging.getLogger(__name__)


class VideoCommands:
    """
    Handler of the ``video`` command.

    The output files are put into the directory of the input file with the
    names ``emoji.webm`` and ``sticker.webm``.
    """

    def __init__(self, config: StickerToolkitConfig) -> None:
        """Initialize video commands handler."""
        self.config = config

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add video arguments to parser."""
        parser.add_argument(
            "--input",
            "-i",
            type=Path,
            required=True,
            help="Path to the input file to convert into a sticker and emoji",
        )
        parser.add_argument("--no-emoji", action="store_true", help="Don't generate an emoji")
        parser.add_argument("--no-sticker", action="store_true", help="Don't generate a sticker")
        add_encoding_arguments(parser)

    @staticmethod
    def pack_kinds(args: argparse.Namespace) -> list[PackKind]:
        kinds = []
        if not args.no_emoji:
            kinds.append(PackKind.EMOJI)
        if not args.no_sticker:
            kinds.append(PackKind.STICKER)
        return kinds

    def handle_command(self, args: argparse.Namespace, ffmpeg_args: list[str]) -> int:
        """Handle video command execution."""
        try:
            if not args.input.is_file():
                msg = f"Input must be an existing file, but got `{args.input}`"
                raise ConfigurationError(msg, file_path=args.input)

            context = BatchContext.create(
                self.pack_kinds(args),
                [args.input],
                begin=args.begin,
                end=args.end,
                filter=args.filter,
                ffmpeg_args=ffmpeg_args,
                encoder=build_encoder(self.config),
                concurrency=worker_count(args, self.config),
                overwrite=args.overwrite,
                publisher=args.publisher,
                name_template=SINGLE_OUTPUT_TEMPLATE,
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
