"""Core abstractions and utilities for the sticker toolkit."""

from .base import (
    ConfigurationError,
    ConfirmationError,
    InfeasibleBudgetError,
    OperationCancelled,
    ProcessingError,
    ProcessingResult,
    ProcessingStatus,
)
from .confirm import read_confirmation
from .ffmpeg import Encoder, FFmpegError, FFmpegProcessor
from .file_manager import (
    InputFile,
    files,
    list_input_files,
    validate_duplicate_input_names,
    validate_output_files_overwriting,
    write_output,
)
from .workers import default_concurrency

__all__ = [
    "ConfigurationError",
    "ConfirmationError",
    "Encoder",
    "FFmpegError",
    "FFmpegProcessor",
    "InfeasibleBudgetError",
    "InputFile",
    "OperationCancelled",
    "ProcessingError",
    "ProcessingResult",
    "ProcessingStatus",
    "default_concurrency",
    "files",
    "list_input_files",
    "read_confirmation",
    "validate_duplicate_input_names",
    "validate_output_files_overwriting",
    "write_output",
]
