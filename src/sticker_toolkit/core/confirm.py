"""Interactive confirmation of destructive operations."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from .base import ConfirmationError

if TYPE_CHECKING:
    from typing import TextIO

LOG = logging.getLogger(__name__)

CONFIRMATION_TOKEN = "yes"


def read_confirmation(message: str, *, auto_confirm: bool, stdin: TextIO | None = None) -> None:
    """
    Ask the user to confirm an operation by typing ``yes``.

    Args:
        message: What is about to happen
        auto_confirm: Skip the prompt, the operation was authorized up front
        stdin: Stream to read the answer from, ``sys.stdin`` by default

    Raises:
        ConfirmationError: if the answer isn't exactly ``yes`` or input ended

    """
    if auto_confirm:
        return

    LOG.warning("%s Only `%s` will be accepted to confirm", message, CONFIRMATION_TOKEN)

    stream = stdin if stdin is not None else sys.stdin
    try:
        line = stream.readline()
    except OSError as e:
        msg = "Failed to read confirmation from stdin"
        raise ConfirmationError(msg, cause=e) from e

    if not line:
        msg = "Reached end-of-file (EOF) while reading confirmation from stdin"
        raise ConfirmationError(msg)

    if line.strip() != CONFIRMATION_TOKEN:
        msg = f"Confirmation response was not `{CONFIRMATION_TOKEN}`"
        raise ConfirmationError(msg)
