"""FFmpeg integration: the encoder interface and its process implementation."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

from .base import OperationCancelled, ProcessingError

if TYPE_CHECKING:
    import threading
    from collections.abc import Sequence

LOG = logging.getLogger(__name__)

# Grace period between SIGTERM and SIGKILL for a cancelled process
TERMINATE_GRACE_PERIOD = 5.0


class FFmpegError(ProcessingError):
    """FFmpeg-specific error."""

    def __init__(
        self,
        message: str,
        *,
        command: list[str] | None = None,
        return_code: int | None = None,
        stderr: str | None = None,
        file_path: Path | None = None,
    ) -> None:
        """Initialize FFmpeg error with detailed context."""
        super().__init__(message, file_path=file_path)
        self.command = command
        self.return_code = return_code
        self.stderr = stderr


class Encoder(ABC):
    """Something that can run an encoding pass and hand back the produced bytes."""

    @abstractmethod
    def run(self, args: Sequence[str], *, cancel_event: threading.Event | None = None) -> bytes:
        """Run the encoder and return whatever it wrote to stdout."""

    def run_with_output_file(
        self,
        args: Sequence[str],
        output_file: Path,
        *,
        cancel_event: threading.Event | None = None,
    ) -> bytes:
        """
        Run the encoder with ``output_file`` appended and return the file's contents.

        Writing to a real file instead of a pipe matters for webm: the piped
        output isn't animated inside Telegram text messages and has no preview
        on Telegram Desktop.
        """
        self.run([*args, str(output_file)], cancel_event=cancel_event)
        try:
            return Path(output_file).read_bytes()
        except OSError as e:
            msg = f"Encoder finished without producing a readable output file `{output_file}`: {e}"
            raise FFmpegError(msg, command=[*args, str(output_file)], file_path=Path(output_file)) from e


class FFmpegProcessor(Encoder):
    """Encoder that spawns ``ffmpeg`` processes."""

    def __init__(
        self,
        binary: str = "ffmpeg",
        loglevel: str = "warning",
        timeout: float | None = None,
        poll_interval: float = 0.2,
    ) -> None:
        self.binary = binary
        self.loglevel = loglevel
        self.timeout = timeout
        self.poll_interval = poll_interval

    def check_availability(self) -> None:
        """Check if the FFmpeg binary is available."""
        if not shutil.which(self.binary):
            error_msg = f"Missing FFmpeg executable: {self.binary}"
            LOG.error(error_msg)
            raise FFmpegError(error_msg)

    def build_command(self, args: Sequence[str]) -> list[str]:
        """Prefix the encoder arguments with the binary and the default options."""
        return [self.binary, "-loglevel", self.loglevel, *args]

    def run(self, args: Sequence[str], *, cancel_event: threading.Event | None = None) -> bytes:
        """Run FFmpeg with proper error handling and cooperative cancellation."""
        command = self.build_command(args)

        if cancel_event is not None and cancel_event.is_set():
            msg = f"{self.binary} process was cancelled before it started"
            raise OperationCancelled(msg)

        LOG.debug("%s", shlex.join(command))

        try:
            process = subprocess.Popen(  # noqa: S603
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            msg = f"Failed to start {self.binary}: {e}"
            raise FFmpegError(msg, command=command) from e

        stdout, stderr = self._communicate(process, command, cancel_event)

        if process.returncode != 0:
            self._handle_ffmpeg_error(process.returncode, stderr, command)

        return stdout

    def _communicate(
        self,
        process: subprocess.Popen,
        command: list[str],
        cancel_event: threading.Event | None,
    ) -> tuple[bytes, bytes]:
        """Wait for the process while watching the cancel event and the timeout."""
        start_time = time.monotonic()

        while True:
            try:
                return process.communicate(timeout=self.poll_interval)
            except subprocess.TimeoutExpired:
                pass

            if cancel_event is not None and cancel_event.is_set():
                self._terminate(process)
                msg = f"{self.binary} process was cancelled"
                raise OperationCancelled(msg)

            if self.timeout is not None and time.monotonic() - start_time >= self.timeout:
                self._terminate(process)
                msg = f"FFmpeg command timed out after {self.timeout}s"
                raise FFmpegError(msg, command=command)

    def _terminate(self, process: subprocess.Popen) -> None:
        """Terminate the process, escalating to kill if it doesn't exit in time."""
        LOG.debug("Terminating %s process %d", self.binary, process.pid)
        process.terminate()
        try:
            process.communicate(timeout=TERMINATE_GRACE_PERIOD)
        except subprocess.TimeoutExpired:
            LOG.warning("%s process %d didn't exit after SIGTERM, killing it", self.binary, process.pid)
            process.kill()
            process.communicate()

    def _handle_ffmpeg_error(self, return_code: int, stderr: bytes, command: list[str]) -> None:
        """Raise an FFmpegError describing the failed invocation."""
        stderr_text = stderr.decode("utf-8", errors="replace").strip() if stderr else ""
        error_msg = f"FFmpeg failed with return code {return_code}"
        if stderr_text:
            error_msg += f": {stderr_text}"

        raise FFmpegError(
            error_msg,
            command=command,
            return_code=return_code,
            stderr=stderr_text,
        )
