"""CLI command modules."""

from .pack import PackCommands
from .video import VideoCommands

__all__ = ["PackCommands", "VideoCommands"]
