"""CLI module for the sticker toolkit."""

from .commands import PackCommands, VideoCommands
from .main import StickerToolkitCLI

__all__ = [
    "PackCommands",
    "StickerToolkitCLI",
    "VideoCommands",
]
