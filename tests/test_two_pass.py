"""Tests of a single two-pass trial and its cache."""

import logging
import threading
from pathlib import Path

import pytest

from sticker_toolkit.core.base import OperationCancelled
from sticker_toolkit.pack import TwoPassContext

from .conftest import MockEncoder

MAX_BYTES = 1000


@pytest.fixture
def encoder() -> MockEncoder:
    """Output fits into MAX_BYTES from CRF 30 upwards."""
    return MockEncoder(lambda crf: MAX_BYTES + 30 - crf)


def make_context(encoder: MockEncoder, tmp_path: Path, **kwargs) -> TwoPassContext:
    return TwoPassContext(
        prefix_args=["-i", "in.mp4"],
        encoder=encoder,
        max_bytes=MAX_BYTES,
        temp_dir=tmp_path,
        **kwargs,
    )


def test_run_records_trials(encoder: MockEncoder, tmp_path: Path) -> None:
    context = make_context(encoder, tmp_path)

    assert context.last_trial is None

    assert len(context.run(20)) == MAX_BYTES + 10
    assert len(context.run(40)) == MAX_BYTES - 10

    assert [(t.crf, t.size, t.fits) for t in context.trials] == [
        (20, MAX_BYTES + 10, False),
        (40, MAX_BYTES - 10, True),
    ]
    assert context.last_trial == context.trials[-1]
    assert context.cached_best == (40, b"\0" * (MAX_BYTES - 10))


def test_cached_output_is_reused(encoder: MockEncoder, tmp_path: Path) -> None:
    context = make_context(encoder, tmp_path)

    first = context.run(35)
    calls = len(encoder.calls)
    second = context.run(35)

    assert second == first
    assert len(encoder.calls) == calls
    assert len(context.trials) == 1


def test_cache_keeps_lowest_fitting_crf(encoder: MockEncoder, tmp_path: Path) -> None:
    context = make_context(encoder, tmp_path)

    context.run(40)
    context.run(30)
    context.run(50)
    context.run(10)

    assert context.cached_best is not None
    assert context.cached_best[0] == 30


def test_failing_trials_are_not_cached(encoder: MockEncoder, tmp_path: Path) -> None:
    context = make_context(encoder, tmp_path)

    context.run(5)
    context.run(5)

    assert context.cached_best is None
    assert encoder.crfs == [5, 5]


def test_output_goes_to_scratch_directory(encoder: MockEncoder, tmp_path: Path) -> None:
    context = make_context(encoder, tmp_path)

    context.run(30)

    first_pass, second_pass = encoder.calls
    assert first_pass[:2] == ["-i", "in.mp4"]
    assert first_pass[2:8] == ["-crf", "30", "-pass", "1", "-f", "null"]
    assert second_pass == ["-i", "in.mp4", "-crf", "30", "-pass", "2", str(tmp_path / "output.webm")]
    assert (tmp_path / "output.webm").stat().st_size == MAX_BYTES


def test_cancelled_event_stops_encoding(encoder: MockEncoder, tmp_path: Path) -> None:
    cancel_event = threading.Event()
    cancel_event.set()
    context = make_context(encoder, tmp_path, cancel_event=cancel_event)

    with pytest.raises(OperationCancelled):
        context.run(30)

    assert encoder.calls == []
    assert context.trials == []


def test_trial_is_logged(encoder: MockEncoder, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    context = make_context(encoder, tmp_path)

    with caplog.at_level(logging.INFO, logger="sticker_toolkit"):
        context.run(10)
        context.run(50)

    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("❌ CRF 10 generated") for message in messages)
    assert any(message.startswith("✅ CRF 50 generated") for message in messages)
