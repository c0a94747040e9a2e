"""Shared fixtures: a fake encoder whose output size is a function of the CRF."""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from sticker_toolkit.core.base import OperationCancelled
from sticker_toolkit.core.ffmpeg import Encoder, FFmpegError
from sticker_toolkit.pack import PackKind

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


class MockEncoder(Encoder):
    """Records every invocation and returns ``size_of_crf(crf)`` zero bytes."""

    def __init__(
        self,
        size_of_crf: Callable[[int], int],
        delay: float = 0.0,
        fail_if: Callable[[list[str]], bool] | None = None,
    ) -> None:
        self.size_of_crf = size_of_crf
        self.delay = delay
        self.fail_if = fail_if
        self.calls: list[list[str]] = []
        self.cancelled: list[list[str]] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    @staticmethod
    def crf_of(args: Sequence[str]) -> int:
        return int(args[list(args).index("-crf") + 1])

    @staticmethod
    def pass_of(args: Sequence[str]) -> str:
        return args[list(args).index("-pass") + 1]

    @property
    def second_pass_calls(self) -> list[list[str]]:
        with self._lock:
            return [args for args in self.calls if self.pass_of(args) == "2"]

    @property
    def crfs(self) -> list[int]:
        """CRF values in the order the trials were encoded."""
        return [self.crf_of(args) for args in self.second_pass_calls]

    def run(self, args: Sequence[str], *, cancel_event: threading.Event | None = None) -> bytes:
        if cancel_event is not None and cancel_event.is_set():
            msg = "mock encoder was cancelled"
            raise OperationCancelled(msg)

        args = list(args)
        with self._lock:
            self.calls.append(args)
            self.active += 1
            self.max_active = max(self.max_active, self.active)

        try:
            if self.fail_if is not None and self.fail_if(args):
                msg = "FFmpeg failed with return code 1: mock failure"
                raise FFmpegError(msg, command=args, return_code=1, stderr="mock failure")
            if self.delay:
                # A set event stands for the process being terminated mid-encode
                if cancel_event is not None and cancel_event.wait(self.delay):
                    with self._lock:
                        self.cancelled.append(args)
                    msg = "mock encoder was terminated"
                    raise OperationCancelled(msg)
                if cancel_event is None:
                    time.sleep(self.delay)
            return b"\0" * self.size_of_crf(self.crf_of(args))
        finally:
            with self._lock:
                self.active -= 1

    def run_with_output_file(
        self,
        args: Sequence[str],
        output_file: Path,
        *,
        cancel_event: threading.Event | None = None,
    ) -> bytes:
        output = self.run([*args, str(output_file)], cancel_event=cancel_event)
        Path(output_file).write_bytes(output)
        return Path(output_file).read_bytes()

    @classmethod
    def with_best_crf(cls, best_crf: int, pack_kind: PackKind = PackKind.EMOJI, **kwargs) -> MockEncoder:
        """Output fits the budget exactly at ``best_crf`` and grows by a byte per lower CRF."""
        max_bytes = pack_kind.max_bytes
        return cls(lambda crf: max_bytes + best_crf - crf, **kwargs)


@pytest.fixture
def make_encoder() -> Callable[..., MockEncoder]:
    """Factory of encoders with a given best CRF."""
    return MockEncoder.with_best_crf


@pytest.fixture
def encoder() -> MockEncoder:
    """Encoder that fits both budgets at CRF 20."""
    return MockEncoder(lambda crf: 1000 + (63 - crf) * 100 if crf >= 20 else 10 * 1024 * 1024)


@pytest.fixture
def input_dir(tmp_path: Path) -> Path:
    """Directory with three dummy clips."""
    d = tmp_path / "clips"
    d.mkdir()
    for name in ("cat.mp4", "dog.mov", "fox.webm"):
        (d / name).write_bytes(b"dummy video content")
    return d
