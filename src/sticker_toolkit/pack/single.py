"""Generation of a single pack entry from a single input file."""

from __future__ import annotations

import logging
import math
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..config.constants import ENCODED_BY, MAX_CRF
from ..core import display
from ..core.base import InfeasibleBudgetError, ProcessingResult, ProcessingStatus
from ..core.duration import format_seconds
from ..core.file_manager import write_output
from .two_pass import PASS_LOG_FILE_NAME, TwoPassContext

if TYPE_CHECKING:
    import threading
    from collections.abc import MutableMapping

    from ..core.ffmpeg import Encoder
    from ..core.file_manager import InputFile
    from .kinds import PackKind

LOG = logging.getLogger(__name__)

# Binary search over [0, MAX_CRF] needs log2(N) steps plus one, because it
# looks for the boundary where the output starts to fit
MAX_SEARCH_STEPS = math.ceil(math.log2(MAX_CRF + 1)) + 1


@dataclass(frozen=True)
class EncodeOptions:
    """Read-only options shared by every job of a batch."""

    encoder: Encoder
    begin: float | None = None
    end: float | None = None
    filter: str | None = None
    ffmpeg_args: tuple[str, ...] = ()
    publisher: str | None = None
    cancel_event: threading.Event | None = None


class JobLogger(logging.LoggerAdapter):
    """Prefixes messages with the job they belong to."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['job']}] {msg}", kwargs


def _optional_named_arg(name: str, value: str | None) -> list[str]:
    return [name, value] if value is not None else []


@dataclass
class SingleTargetJob:
    """One input file encoded into one kind of pack entry."""

    options: EncodeOptions
    pack_kind: PackKind
    input: InputFile
    output: Path
    task_id: int | None = None

    def __post_init__(self) -> None:
        """Build the job's logger."""
        label = f"{self.pack_kind} {self.input.path.name}"
        if self.task_id is not None:
            label = f"task {self.task_id} {label}"
        self.logger = JobLogger(LOG, {"job": label})

    def video_filter(self) -> str:
        """Compose the user filter with scaling into the bounding box and optional square padding."""
        max_side = self.pack_kind.bounding_box

        # Fit into the bounding box keeping the aspect ratio, see https://superuser.com/a/547406
        scale = (
            f"scale="
            f"iw * min({max_side} / iw\\, {max_side} / ih):"
            f"ih * min({max_side} / iw\\, {max_side} / ih):"
            f"flags=lanczos"
        )

        filters = []
        if self.options.filter:
            filters.append(self.options.filter)
        filters.append(scale)
        if self.pack_kind.must_be_square:
            # Center on a transparent square canvas
            filters.append(f"pad={max_side}:{max_side}:-1:-1:color=0x00000000")

        return ",".join(filters)

    def prefix_args(self, pass_log_file: Path) -> list[str]:
        """Arguments shared by both passes of every trial."""
        options = self.options

        publisher = f"publisher={options.publisher}" if options.publisher is not None else None
        begin = format_seconds(options.begin) if options.begin is not None else None
        end = format_seconds(options.end) if options.end is not None else None

        return [
            "-y",
            "-i",
            str(self.input.path),
            *_optional_named_arg("-ss", begin),
            *_optional_named_arg("-to", end),
            *_optional_named_arg("-metadata", publisher),
            "-metadata",
            f"encoded_by={ENCODED_BY}",
            "-fps_mode",
            "passthrough",
            "-vcodec",
            "libvpx-vp9",
            # Constant quality 2-pass is invoked by setting -b:v to zero
            # and specifying a quality level using the -crf switch
            "-b:v",
            "0",
            # Audio streams must be removed from the output
            "-an",
            "-filter:v",
            self.video_filter(),
            "-passlogfile",
            str(pass_log_file),
            *options.ffmpeg_args,
        ]

    def two_pass_context(self, temp_dir: Path) -> TwoPassContext:
        """Create the search engine for this job, working inside ``temp_dir``."""
        return TwoPassContext(
            prefix_args=self.prefix_args(temp_dir / PASS_LOG_FILE_NAME),
            encoder=self.options.encoder,
            max_bytes=self.pack_kind.max_bytes,
            temp_dir=temp_dir,
            cancel_event=self.options.cancel_event,
            logger=self.logger,
        )

    def generate_bytes(self) -> tuple[int, bytes]:
        """Find the lowest CRF whose output fits into the budget and return it with the output."""
        start = time.monotonic()
        max_bytes = self.pack_kind.max_bytes

        self.logger.info("🚀 Trying to find best CRF to fit into %s", display.human_size(max_bytes))

        with tempfile.TemporaryDirectory(prefix="sticker-toolkit-") as temp_dir:
            two_pass = self.two_pass_context(Path(temp_dir))

            low, high = 0, MAX_CRF
            step = 0

            while True:
                mid = (low + high) // 2
                self.logger.debug(
                    "Bounds min=%d max=%d, progress %.1f%%", low, high, step / MAX_SEARCH_STEPS * 100
                )
                step += 1

                output = two_pass.run(mid)

                # Repeat until the range shrinks to a single value
                if low == high:
                    break

                if len(output) <= max_bytes:
                    # `mid` fits, so it stays in the range as a candidate
                    high = mid
                else:
                    # `mid` can't possibly fit, look to the right of it
                    low = mid + 1

        crf = mid

        if len(output) > max_bytes:
            msg = (
                f"The output can't possibly fit into the limit of {display.human_size(max_bytes)}. "
                f"The minimum generated file size with CRF {crf} is {display.human_size(len(output))}"
            )
            self.logger.debug("%s", msg)
            raise InfeasibleBudgetError(
                msg,
                max_bytes=max_bytes,
                achieved_size=len(output),
                crf=crf,
                file_path=self.input.path,
            )

        self.logger.info(
            "🎉 Found a fitting CRF %d, which generates %s in %s",
            crf,
            display.human_size(len(output)),
            display.elapsed(start),
        )
        return crf, output

    def generate_file(self) -> ProcessingResult:
        """Run the search and save the winning output."""
        start = time.monotonic()

        crf, output = self.generate_bytes()
        write_output(self.output, output)

        self.logger.info("🔥 Saved output at %s", self.output)

        return ProcessingResult(
            source_file=self.input.path,
            status=ProcessingStatus.SUCCESS,
            pack_kind=str(self.pack_kind),
            message=f"CRF {crf}, {display.human_size(len(output))}",
            output_file=self.output,
            crf=crf,
            new_size=len(output),
            processing_time=time.monotonic() - start,
        )
