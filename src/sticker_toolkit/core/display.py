"""Human-readable rendering of sizes and durations for log messages."""

from __future__ import annotations

import time

from tqdm import tqdm


def human_size(num_bytes: int) -> str:
    """Format a byte count with binary prefixes, e.g. ``64.0kB`` for 65536."""
    return tqdm.format_sizeof(num_bytes, suffix="B", divisor=1024)


def elapsed(start: float) -> str:
    """Format the time passed since ``start`` (a ``time.monotonic()`` value)."""
    seconds = time.monotonic() - start
    if seconds < 60:
        return f"{seconds:.2f}s"
    return tqdm.format_interval(seconds)
