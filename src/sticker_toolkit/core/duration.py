"""Parsing of ``[[HH:]MM:]SS[.frac]`` timecodes."""

from __future__ import annotations

from .base import ConfigurationError

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * 60


def _parse_uint(segment: str, timecode: str) -> int:
    if not segment.isdigit():
        msg = f"Invalid timecode `{timecode}`: `{segment}` is not a non-negative integer"
        raise ConfigurationError(msg)
    return int(segment)


def _parse_seconds(segment: str, timecode: str) -> float:
    try:
        seconds = float(segment)
    except ValueError as e:
        msg = f"Invalid timecode `{timecode}`: `{segment}` is not a number"
        raise ConfigurationError(msg) from e

    if seconds < 0:
        msg = f"Invalid timecode `{timecode}`: negative duration is not allowed"
        raise ConfigurationError(msg)
    if seconds != seconds or seconds == float("inf"):
        msg = f"Invalid timecode `{timecode}`: seconds must be finite"
        raise ConfigurationError(msg)
    return seconds


def parse(timecode: str) -> float:
    """
    Parse a timecode into seconds.

    Accepts ``SS[.frac]``, ``MM:SS[.frac]`` and ``HH:MM:SS[.frac]``.

    Raises:
        ConfigurationError: if the timecode is malformed or negative

    """
    segments = timecode.strip().split(":")

    if len(segments) == 1:
        return _parse_seconds(segments[0], timecode)
    if len(segments) == 2:  # noqa: PLR2004
        minutes, seconds = segments
        return _parse_uint(minutes, timecode) * SECONDS_PER_MINUTE + _parse_seconds(seconds, timecode)
    if len(segments) == 3:  # noqa: PLR2004
        hours, minutes, seconds = segments
        return (
            _parse_uint(hours, timecode) * SECONDS_PER_HOUR
            + _parse_uint(minutes, timecode) * SECONDS_PER_MINUTE
            + _parse_seconds(seconds, timecode)
        )

    msg = f"Unknown timecode format `{timecode}`, expected [[HH:]MM:]SS[.frac]"
    raise ConfigurationError(msg)


def format_seconds(seconds: float) -> str:
    """Render seconds the way ffmpeg's ``-ss``/``-to`` accept them."""
    # Fixed point, ffmpeg rejects scientific notation like `1e-05`
    return f"{seconds:.6f}".rstrip("0").rstrip(".")
