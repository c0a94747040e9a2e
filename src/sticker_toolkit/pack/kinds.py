"""Pack entry kinds and their Telegram limits."""

from __future__ import annotations

from enum import Enum

from ..config.constants import EMOJI_BOUNDING_BOX, MAX_EMOJI_BYTES, MAX_STICKER_BYTES, STICKER_BOUNDING_BOX


class PackKind(Enum):
    """Kind of entry in a Telegram pack."""

    EMOJI = "emoji"
    STICKER = "sticker"

    def __str__(self) -> str:
        return self.value

    @property
    def max_bytes(self) -> int:
        """Hard limit on the size of the generated file."""
        if self is PackKind.EMOJI:
            return MAX_EMOJI_BYTES
        return MAX_STICKER_BYTES

    @property
    def bounding_box(self) -> int:
        """Maximum width and height of the output."""
        if self is PackKind.EMOJI:
            return EMOJI_BOUNDING_BOX
        return STICKER_BOUNDING_BOX

    @property
    def must_be_square(self) -> bool:
        """Telegram supports rectangle stickers, but not emojis."""
        return self is PackKind.EMOJI
