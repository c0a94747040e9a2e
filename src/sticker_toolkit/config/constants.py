"""
System constants that should never change.

These are encoder and platform limits, not user preferences.
User-configurable values should go in config.yaml instead.
"""

import os

KIB = 1024

# Telegram limits for animated pack entries
MAX_EMOJI_BYTES = 64 * KIB
MAX_STICKER_BYTES = 256 * KIB

EMOJI_BOUNDING_BOX = 100
STICKER_BOUNDING_BOX = 512

# Max value of CRF for libvpx-vp9, see https://trac.ffmpeg.org/wiki/Encode/VP9
MAX_CRF = 63

ENCODED_BY = "sticker-toolkit"

NULL_OUTPUT = "NUL" if os.name == "nt" else "/dev/null"

DEFAULT_LISTING_CONCURRENCY = 10
DEFAULT_OUTPUT_TEMPLATE = "{stem}-{kind}.webm"
SINGLE_OUTPUT_TEMPLATE = "{kind}.webm"

VERBOSE_LOGGING_THRESHOLD = 2
LOG_LEVEL_ENV_VAR = "STICKER_TOOLKIT_LOG"
