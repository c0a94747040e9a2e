"""Concurrent generation of pack entries for many input files."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from ..config.constants import DEFAULT_LISTING_CONCURRENCY, DEFAULT_OUTPUT_TEMPLATE
from ..core.base import ConfigurationError, OperationCancelled, ProcessingResult
from ..core.ffmpeg import FFmpegProcessor
from ..core.file_manager import (
    InputFile,
    list_input_files,
    validate_duplicate_input_names,
    validate_output_files_overwriting,
)
from ..core.workers import resolve_concurrency
from .single import EncodeOptions, SingleTargetJob

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence
    from concurrent.futures import Future
    from typing import TextIO

    from ..core.ffmpeg import Encoder
    from .kinds import PackKind

LOG = logging.getLogger(__name__)


@dataclass
class BatchContext:
    """Everything needed to turn a set of inputs into pack entries."""

    pack_kinds: tuple[PackKind, ...]
    inputs: tuple[Path, ...]
    options: EncodeOptions
    concurrency: int
    output: Path | None = None
    overwrite: bool = False
    name_template: str = DEFAULT_OUTPUT_TEMPLATE
    listing_concurrency: int = DEFAULT_LISTING_CONCURRENCY
    progress: bool = True

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        pack_kinds: Iterable[PackKind],
        inputs: Iterable[Path],
        *,
        output: Path | None = None,
        begin: float | None = None,
        end: float | None = None,
        filter: str | None = None,  # noqa: A002
        ffmpeg_args: Sequence[str] = (),
        encoder: Encoder | None = None,
        concurrency: int | None = None,
        overwrite: bool = False,
        publisher: str | None = None,
        name_template: str = DEFAULT_OUTPUT_TEMPLATE,
        listing_concurrency: int = DEFAULT_LISTING_CONCURRENCY,
        progress: bool = True,
    ) -> BatchContext:
        """
        Validate the options and build a batch context.

        Raises:
            ConfigurationError: if the pack kinds are missing or repeated, or the
                trim window is invalid

        """
        pack_kinds = tuple(pack_kinds)

        if not pack_kinds:
            msg = "No pack kinds were specified"
            raise ConfigurationError(msg)

        if len(set(pack_kinds)) != len(pack_kinds):
            kinds = ", ".join(str(kind) for kind in pack_kinds)
            msg = f"Duplicate pack kinds found, but they must be unique: [{kinds}]"
            raise ConfigurationError(msg)

        _validate_trim_window(begin, end)

        try:
            concurrency = resolve_concurrency(concurrency)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        options = EncodeOptions(
            encoder=encoder if encoder is not None else FFmpegProcessor(),
            begin=begin,
            end=end,
            filter=filter,
            ffmpeg_args=tuple(ffmpeg_args),
            publisher=publisher,
            cancel_event=threading.Event(),
        )

        return cls(
            pack_kinds=pack_kinds,
            inputs=tuple(Path(path) for path in inputs),
            options=options,
            concurrency=concurrency,
            output=output,
            overwrite=overwrite,
            name_template=name_template,
            listing_concurrency=listing_concurrency,
            progress=progress,
        )

    def out_file(self, pack_kind: PackKind, input_file: InputFile) -> Path:
        """Compute where the entry of the given kind for the given input goes."""
        out_dir = self.output if self.output is not None else input_file.path.parent

        return out_dir / self.name_template.format(stem=input_file.stem, kind=pack_kind)

    def input_files(self) -> list[InputFile]:
        """Expand the input paths into files."""
        return list_input_files(self.inputs, max_workers=self.listing_concurrency)

    def plan_jobs(self, input_files: Sequence[InputFile]) -> list[SingleTargetJob]:
        """Create one job per pack kind and input file."""
        jobs = []
        for pack_kind in self.pack_kinds:
            for input_file in input_files:
                jobs.append(
                    SingleTargetJob(
                        options=self.options,
                        pack_kind=pack_kind,
                        input=input_file,
                        output=self.out_file(pack_kind, input_file),
                        task_id=len(jobs) + 1,
                    )
                )
        return jobs

    def run(self, stdin: TextIO | None = None) -> list[ProcessingResult]:
        """
        Generate every planned pack entry.

        Raises:
            ConfigurationError: on invalid inputs, before anything is encoded
            ConfirmationError: if overwriting existing outputs wasn't confirmed
            OperationCancelled: if interrupted
            ProcessingError: the first error of a failed job

        """
        input_files = self.input_files()

        validate_duplicate_input_names(input_files)

        jobs = self.plan_jobs(input_files)

        if self.output is not None and not self.output.is_dir():
            msg = f"Output directory does not exist: {self.output}"
            raise ConfigurationError(msg, file_path=self.output)

        validate_output_files_overwriting((job.output for job in jobs), overwrite=self.overwrite, stdin=stdin)

        if not jobs:
            LOG.warning("No input files found, nothing to do")
            return []

        LOG.info("Generating %d pack entries with %d workers", len(jobs), self.concurrency)

        with logging_redirect_tqdm():
            return self._execute(jobs)

    def _execute(self, jobs: list[SingleTargetJob]) -> list[ProcessingResult]:
        """
        Run the jobs on a bounded pool, stopping everything at the first failure.

        Jobs are handed to the pool only when a worker is free, so once a job
        fails or the user interrupts, none of the remaining jobs ever starts.
        """
        cancel_event = self.options.cancel_event
        results: list[ProcessingResult] = []
        queue = iter(jobs)
        in_flight: dict[Future[ProcessingResult], SingleTargetJob] = {}

        progress_bar = tqdm(
            total=len(jobs),
            desc="Generating pack entries",
            unit="file",
            bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}, {rate_fmt}]",
            disable=not self.progress,
        )

        executor = ThreadPoolExecutor(max_workers=self.concurrency, thread_name_prefix="pack-job")

        def submit_next() -> None:
            job = next(queue, None)
            if job is not None:
                in_flight[executor.submit(job.generate_file)] = job

        try:
            for _ in range(self.concurrency):
                submit_next()

            while in_flight:
                done, _ = wait(in_flight, return_when=FIRST_COMPLETED)

                # Failures are handled before any success can submit another job
                failed = next((future for future in done if future.exception() is not None), None)
                if failed is not None:
                    job = in_flight.pop(failed)
                    error = failed.exception()
                    LOG.error("Failed to generate %s for %s: %s", job.pack_kind, job.input, error)
                    self._abort(queue, cancel_event)
                    executor.shutdown(wait=True)
                    self._log_discarded_errors(in_flight)
                    raise error

                for future in done:
                    in_flight.pop(future)
                    result = future.result()
                    results.append(result)
                    progress_bar.set_description(f"✓ Completed {result.source_file.name}")
                    progress_bar.update(1)
                    submit_next()

        except KeyboardInterrupt as e:
            LOG.warning("Interrupted, stopping running encoders...")
            self._abort(queue, cancel_event)
            msg = "Operation cancelled by user"
            raise OperationCancelled(msg, cause=e) from e
        finally:
            executor.shutdown(wait=True)
            progress_bar.close()

        LOG.info("Generated %d pack entries", len(results))
        return results

    @staticmethod
    def _abort(queue: Iterator[SingleTargetJob], cancel_event: threading.Event | None) -> None:
        """Drop the jobs that haven't started and terminate the encoders of the running ones."""
        if cancel_event is not None:
            cancel_event.set()

        dropped = sum(1 for _ in queue)
        if dropped:
            LOG.info("Dropped %d pending jobs", dropped)

    @staticmethod
    def _log_discarded_errors(in_flight: dict[Future[ProcessingResult], SingleTargetJob]) -> None:
        for future, job in in_flight.items():
            error = future.exception()
            if error is not None and not isinstance(error, OperationCancelled):
                LOG.debug("Discarding a later error of %s for %s: %s", job.pack_kind, job.input, error)


def _validate_trim_window(begin: float | None, end: float | None) -> None:
    if begin is not None and begin < 0:
        msg = f"Begin of the trim window must not be negative, got {begin}"
        raise ConfigurationError(msg)
    if end is not None and end < 0:
        msg = f"End of the trim window must not be negative, got {end}"
        raise ConfigurationError(msg)
    if begin is not None and end is not None and end <= begin:
        msg = f"End of the trim window ({end}) must be greater than its begin ({begin})"
        raise ConfigurationError(msg)
