"""Configuration management for the sticker toolkit."""

from __future__ import annotations

from .constants import *  # noqa: F403
from .settings import EncoderConfig, GlobalConfig, ListingConfig, StickerToolkitConfig, get_config

__all__ = [
    "EncoderConfig",
    "GlobalConfig",
    "ListingConfig",
    "StickerToolkitConfig",
    "get_config",
]
