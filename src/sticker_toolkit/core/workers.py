"""Worker count detection for the batch thread pool."""

from __future__ import annotations

import logging

import psutil

LOG = logging.getLogger(__name__)

FALLBACK_WORKERS = 1


def default_concurrency(err_suffix: str = "") -> int:
    """
    Get the number of jobs to run in parallel when none was configured.

    Uses the number of logical CPUs reported by psutil. Falls back to a single
    worker with a warning when it can't be determined.

    Args:
        err_suffix: Extra text appended to the fallback warning

    Returns:
        Positive number of workers

    """
    try:
        logical_cores = psutil.cpu_count(logical=True)
    except (OSError, AttributeError, ValueError) as e:
        LOG.warning(
            "Failed to query the system's available parallelism: %s. Falling back to the default value of %d.%s",
            e,
            FALLBACK_WORKERS,
            err_suffix,
        )
        return FALLBACK_WORKERS

    if not logical_cores:
        LOG.warning(
            "Failed to query the system's available parallelism. Falling back to the default value of %d.%s",
            FALLBACK_WORKERS,
            err_suffix,
        )
        return FALLBACK_WORKERS

    return logical_cores


def resolve_concurrency(configured_workers: int | None) -> int:
    """Validate an explicit worker count or detect one."""
    if configured_workers is None:
        return default_concurrency()
    if configured_workers < 1:
        msg = f"Concurrency must be a positive number, got {configured_workers}"
        raise ValueError(msg)
    return configured_workers
