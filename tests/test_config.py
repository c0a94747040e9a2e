"""Tests of the YAML configuration and worker count detection."""

from pathlib import Path
from unittest.mock import patch

import pytest

from sticker_toolkit.config import StickerToolkitConfig
from sticker_toolkit.config.constants import DEFAULT_LISTING_CONCURRENCY
from sticker_toolkit.core.workers import default_concurrency, resolve_concurrency


def test_defaults() -> None:
    config = StickerToolkitConfig()

    assert config.encoder.binary == "ffmpeg"
    assert config.encoder.loglevel == "warning"
    assert config.encoder.timeout is None
    assert config.listing.concurrency == DEFAULT_LISTING_CONCURRENCY
    assert config.global_.default_workers is None
    assert config.global_.log_level == "INFO"


def test_load_from_file(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        """
global:
  default_workers: 3
  log_level: debug
encoder:
  binary: /opt/ffmpeg/bin/ffmpeg
  loglevel: error
  timeout: 600
listing:
  concurrency: 4
""",
        encoding="utf-8",
    )

    config = StickerToolkitConfig.load_from_file(config_file)

    assert config.global_.default_workers == 3
    assert config.global_.log_level == "DEBUG"
    assert config.encoder.binary == "/opt/ffmpeg/bin/ffmpeg"
    assert config.encoder.loglevel == "error"
    assert config.encoder.timeout == 600.0
    assert config.listing.concurrency == 4


def test_partial_file_keeps_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("encoder:\n  loglevel: info\n", encoding="utf-8")

    config = StickerToolkitConfig.load_from_file(config_file)

    assert config.encoder.loglevel == "info"
    assert config.encoder.binary == "ffmpeg"
    assert config.listing.concurrency == DEFAULT_LISTING_CONCURRENCY


def test_invalid_values_fall_back(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("global:\n  default_workers: 0\nlisting:\n  concurrency: -2\n", encoding="utf-8")

    config = StickerToolkitConfig.load_from_file(config_file)

    assert config.global_.default_workers is None
    assert config.listing.concurrency == DEFAULT_LISTING_CONCURRENCY
    assert "Invalid listing concurrency -2" in caplog.text


@pytest.mark.parametrize("contents", ["encoder: [", "- just\n- a list\n", "listing:\n  concurrency: many\n"])
def test_malformed_file_uses_defaults(tmp_path: Path, caplog: pytest.LogCaptureFixture, contents: str) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(contents, encoding="utf-8")

    config = StickerToolkitConfig.load_from_file(config_file)

    assert config == StickerToolkitConfig()
    assert "Failed to load config from" in caplog.text


def test_missing_file_uses_defaults(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    config = StickerToolkitConfig.load_from_file(tmp_path / "missing.yaml")

    assert config == StickerToolkitConfig()
    assert "Failed to load config from" in caplog.text


@patch("sticker_toolkit.core.workers.psutil.cpu_count", return_value=8)
def test_default_concurrency(mock_cpu_count) -> None:
    assert default_concurrency() == 8
    mock_cpu_count.assert_called_once_with(logical=True)


@patch("sticker_toolkit.core.workers.psutil.cpu_count", return_value=None)
def test_default_concurrency_fallback(mock_cpu_count, caplog: pytest.LogCaptureFixture) -> None:
    assert default_concurrency(" Pass --concurrency to override.") == 1
    assert "Falling back to the default value of 1. Pass --concurrency to override." in caplog.text


def test_resolve_concurrency() -> None:
    assert resolve_concurrency(5) == 5
    with pytest.raises(ValueError, match="must be a positive number"):
        resolve_concurrency(0)
