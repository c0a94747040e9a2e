"""Main CLI interface for the sticker toolkit."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from ..config import StickerToolkitConfig, get_config
from ..config.constants import LOG_LEVEL_ENV_VAR, VERBOSE_LOGGING_THRESHOLD
from .commands import PackCommands, VideoCommands

LOG = logging.getLogger(__name__)

EXIT_INTERRUPTED = 130


def split_ffmpeg_args(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split the command line at the first ``--``, everything after it goes to ffmpeg."""
    if "--" not in argv:
        return argv, []
    separator = argv.index("--")
    return argv[:separator], argv[separator + 1 :]


class StickerToolkitCLI:
    """Main CLI interface."""

    def __init__(self, config: StickerToolkitConfig | None = None) -> None:
        self.config = config if config is not None else get_config()
        self.pack_commands = PackCommands(self.config)
        self.video_commands = VideoCommands(self.config)

    def setup_logging(self, verbosity: int) -> None:
        """Setup logging based on verbosity level, the config and the environment."""
        if verbosity:
            level = logging.DEBUG
        else:
            level_name = os.environ.get(LOG_LEVEL_ENV_VAR, self.config.global_.log_level).upper()
            level = logging.getLevelName(level_name)
            if not isinstance(level, int):
                level = logging.INFO

        log_format = (
            "%(levelname)s: %(name)s: %(message)s"
            if verbosity >= VERBOSE_LOGGING_THRESHOLD
            else "%(levelname)s: %(message)s"
        )

        logging.basicConfig(level=level, format=log_format, handlers=[logging.StreamHandler(sys.stderr)], force=True)

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the argument parser."""
        parser = argparse.ArgumentParser(
            prog="sticker-toolkit",
            description="Generate Telegram emoji and stickers from videos using ffmpeg",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Emoji and sticker next to the input file
  sticker-toolkit video -i clip.mp4

  # Emoji for every file in a directory, trimmed to the first 3 seconds
  sticker-toolkit pack -i clips/ -o out/ --emoji --end 3

  # Pass extra arguments to ffmpeg after `--`
  sticker-toolkit pack -i clip.mp4 --sticker -- -r 30
            """,
        )

        # Global options
        parser.add_argument(
            "-v",
            "--verbose",
            action="count",
            default=0,
            help="Increase verbosity (-v for debug, -vv to also show logger names)",
        )

        parser.add_argument("--config", type=Path, help="Path to configuration file")

        subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

        pack_parser = subparsers.add_parser(
            "pack",
            help="Generate pack entries for many files, named {stem}-{kind}.webm",
        )
        self.pack_commands.add_arguments(pack_parser)

        video_parser = subparsers.add_parser(
            "video",
            help="Generate emoji.webm and sticker.webm next to a single input file",
        )
        self.video_commands.add_arguments(video_parser)

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        argv, ffmpeg_args = split_ffmpeg_args(list(sys.argv[1:] if args is None else args))

        parser = self.build_parser()
        parsed_args = parser.parse_args(argv)

        # Update config if custom config provided
        if parsed_args.config is not None:
            self.config = StickerToolkitConfig.load_from_file(parsed_args.config)
            self.pack_commands.config = self.config
            self.video_commands.config = self.config

        self.setup_logging(parsed_args.verbose)

        try:
            if parsed_args.command == "pack":
                return self.pack_commands.handle_command(parsed_args, ffmpeg_args)
            if parsed_args.command == "video":
                return self.video_commands.handle_command(parsed_args, ffmpeg_args)
            parser.error(f"Unknown command: {parsed_args.command}")

        except KeyboardInterrupt:
            LOG.info("Operation cancelled by user")
            return EXIT_INTERRUPTED

        return 0


def main() -> int:
    """Entry point for the CLI."""
    cli = StickerToolkitCLI()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
