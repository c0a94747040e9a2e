"""Two-pass VP9 webm encoding with caching of the best fitting trial."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..config.constants import NULL_OUTPUT
from ..core import display

if TYPE_CHECKING:
    import threading
    from collections.abc import Sequence
    from pathlib import Path

    from ..core.ffmpeg import Encoder

LOG = logging.getLogger(__name__)

PASS_LOG_FILE_NAME = "ffmpeg2pass"
OUTPUT_FILE_NAME = "output.webm"


@dataclass
class Trial:
    """Outcome of encoding with one CRF value."""

    crf: int
    size: int
    fits: bool
    elapsed: float = 0.0


@dataclass
class TwoPassContext:
    """
    Runs ffmpeg with two passes using VP9 encoding for webm.

    ``temp_dir`` is the private scratch directory of the owning job. The pass
    log and the trial outputs live there; the owner removes it.
    """

    prefix_args: Sequence[str]
    encoder: Encoder
    max_bytes: int
    temp_dir: Path
    cancel_event: threading.Event | None = None
    logger: logging.Logger | logging.LoggerAdapter = LOG

    # The best CRF found so far that fits into `max_bytes`, with its output
    cached_best: tuple[int, bytes] | None = field(default=None, init=False)
    trials: list[Trial] = field(default_factory=list, init=False)

    @property
    def last_trial(self) -> Trial | None:
        return self.trials[-1] if self.trials else None

    def _make_args(self, trailing_args: Sequence[str]) -> list[str]:
        return [*self.prefix_args, *trailing_args]

    def run(self, crf: int) -> bytes:
        """Encode with the given CRF and return the produced bytes."""
        if self.cached_best is not None:
            cached_crf, cached_output = self.cached_best
            if cached_crf == crf:
                self.logger.debug("Using cached output for CRF %d (%s)", crf, display.human_size(len(cached_output)))
                return cached_output

        crf_str = str(crf)
        start = time.monotonic()

        # First pass only gathers statistics into the pass log
        self.encoder.run(
            self._make_args(["-crf", crf_str, "-pass", "1", "-f", "null", NULL_OUTPUT]),
            cancel_event=self.cancel_event,
        )

        # Second pass reads the statistics and produces the trial output
        output = self.encoder.run_with_output_file(
            self._make_args(["-crf", crf_str, "-pass", "2"]),
            self.temp_dir / OUTPUT_FILE_NAME,
            cancel_event=self.cancel_event,
        )

        duration = time.monotonic() - start
        fits = len(output) <= self.max_bytes

        if fits and (self.cached_best is None or crf < self.cached_best[0]):
            self.cached_best = (crf, output)

        self.trials.append(Trial(crf=crf, size=len(output), fits=fits, elapsed=duration))

        checkbox = "✅" if fits else "❌"
        self.logger.info(
            "%s CRF %d generated %s in %s",
            checkbox,
            crf,
            display.human_size(len(output)),
            display.elapsed(start),
        )

        return output
