"""Sticker Toolkit - Telegram emoji and sticker generation from videos."""

from __future__ import annotations

__version__ = "0.1.0"
__description__ = "Generate size-constrained Telegram emoji and stickers from videos"

# Public API exports
from .config import StickerToolkitConfig, get_config
from .core import (
    ConfigurationError,
    ConfirmationError,
    Encoder,
    FFmpegError,
    FFmpegProcessor,
    InfeasibleBudgetError,
    OperationCancelled,
    ProcessingError,
    ProcessingResult,
    ProcessingStatus,
)
from .pack import BatchContext, EncodeOptions, PackKind, SingleTargetJob, TwoPassContext

__all__ = [
    # Configuration
    "StickerToolkitConfig",
    "get_config",
    # Pack generation
    "BatchContext",
    "EncodeOptions",
    "PackKind",
    "SingleTargetJob",
    "TwoPassContext",
    # Encoders
    "Encoder",
    "FFmpegProcessor",
    # Results
    "ProcessingResult",
    "ProcessingStatus",
    # Exceptions
    "ConfigurationError",
    "ConfirmationError",
    "FFmpegError",
    "InfeasibleBudgetError",
    "OperationCancelled",
    "ProcessingError",
]
