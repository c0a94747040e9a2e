"""Configuration management for the sticker toolkit."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .constants import DEFAULT_LISTING_CONCURRENCY

LOG = logging.getLogger(__name__)


# Configuration singleton
class _ConfigSingleton:
    """Configuration singleton holder."""

    _instance: StickerToolkitConfig | None = None

    @classmethod
    def get_instance(cls) -> StickerToolkitConfig:
        """Get the configuration instance."""
        if cls._instance is None:
            config_path = Path.cwd() / "config.yaml"
            if config_path.exists():
                cls._instance = StickerToolkitConfig.load_from_file(config_path)
            else:
                cls._instance = StickerToolkitConfig()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the configuration instance."""
        cls._instance = None


_config_singleton = _ConfigSingleton()


@dataclass
class EncoderConfig:
    """Settings of the ffmpeg process encoder."""

    binary: str = "ffmpeg"
    loglevel: str = "warning"
    timeout: float | None = None


@dataclass
class ListingConfig:
    """Input discovery settings."""

    concurrency: int = DEFAULT_LISTING_CONCURRENCY


@dataclass
class GlobalConfig:
    """Global settings."""

    default_workers: int | None = None
    log_level: str = "INFO"


@dataclass
class StickerToolkitConfig:
    """Main configuration class."""

    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    listing: ListingConfig = field(default_factory=ListingConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> StickerToolkitConfig:
        """Load configuration from YAML file."""
        try:
            with config_path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)

            return cls._from_dict(data or {})
        except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
            LOG.warning("Failed to load config from %s: %s", config_path, e)
            return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> StickerToolkitConfig:
        """Create config from dictionary."""
        if not isinstance(data, dict):
            msg = f"Expected a mapping at the top level of the config, got {type(data).__name__}"
            raise TypeError(msg)

        return cls(
            encoder=cls._parse_encoder_config(data.get("encoder") or {}),
            listing=cls._parse_listing_config(data.get("listing") or {}),
            global_=cls._parse_global_config(data.get("global") or {}),
        )

    @classmethod
    def _parse_encoder_config(cls, encoder_data: dict[str, Any]) -> EncoderConfig:
        """Parse encoder configuration."""
        timeout = encoder_data.get("timeout")
        return EncoderConfig(
            binary=str(encoder_data.get("binary", "ffmpeg")),
            loglevel=str(encoder_data.get("loglevel", "warning")),
            timeout=float(timeout) if timeout is not None else None,
        )

    @classmethod
    def _parse_listing_config(cls, listing_data: dict[str, Any]) -> ListingConfig:
        """Parse input listing configuration."""
        concurrency = int(listing_data.get("concurrency", DEFAULT_LISTING_CONCURRENCY))
        if concurrency < 1:
            LOG.warning(
                "Invalid listing concurrency %d. Using %d.",
                concurrency,
                DEFAULT_LISTING_CONCURRENCY,
            )
            concurrency = DEFAULT_LISTING_CONCURRENCY
        return ListingConfig(concurrency=concurrency)

    @classmethod
    def _parse_global_config(cls, global_data: dict[str, Any]) -> GlobalConfig:
        """Parse global configuration."""
        default_workers = global_data.get("default_workers")
        if default_workers is not None:
            default_workers = int(default_workers)
            if default_workers < 1:
                LOG.warning("Invalid default_workers %d. Using available parallelism.", default_workers)
                default_workers = None

        return GlobalConfig(
            default_workers=default_workers,
            log_level=str(global_data.get("log_level", "INFO")).upper(),
        )


def get_config() -> StickerToolkitConfig:
    """Get the global configuration instance."""
    return _config_singleton.get_instance()
