"""Base result types and the exception hierarchy."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

LOG = logging.getLogger(__name__)


class ProcessingStatus(Enum):
    """Status of a finished pack entry job, failures are raised instead."""

    SUCCESS = "success"


@dataclass
class ProcessingResult:
    """Result of generating one pack entry."""

    source_file: Path
    status: ProcessingStatus
    pack_kind: str
    message: str = ""
    output_file: Path | None = None
    crf: int | None = None
    new_size: int | None = None
    processing_time: float = 0.0


class ProcessingError(Exception):
    """Base exception for pack generation errors."""

    def __init__(
        self,
        message: str,
        file_path: Path | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.cause = cause


class ConfigurationError(ProcessingError):
    """Invalid options or inputs, detected before any encoding starts."""


class ConfirmationError(ProcessingError):
    """The user didn't confirm a destructive operation."""


class OperationCancelled(ProcessingError):
    """The operation was interrupted before it could finish."""


class InfeasibleBudgetError(ProcessingError):
    """Even the strongest compression doesn't fit into the byte budget."""

    def __init__(
        self,
        message: str,
        *,
        max_bytes: int,
        achieved_size: int,
        crf: int,
        file_path: Path | None = None,
    ) -> None:
        super().__init__(message, file_path=file_path)
        self.max_bytes = max_bytes
        self.achieved_size = achieved_size
        self.crf = crf
