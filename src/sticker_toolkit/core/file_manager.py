"""Input discovery, output naming checks and atomic output writes."""

from __future__ import annotations

import logging
import os
import tempfile
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from ..config.constants import DEFAULT_LISTING_CONCURRENCY
from .base import ConfigurationError, ProcessingError
from .confirm import read_confirmation

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import TextIO

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class InputFile:
    """A path that is guaranteed to have a non-empty file stem."""

    path: Path

    def __post_init__(self) -> None:
        """Reject paths that can't name an output."""
        if not self.path.name or not self.path.stem:
            msg = f"Input must have a file name, but got `{self.path}`"
            raise ConfigurationError(msg, file_path=self.path)

    @property
    def stem(self) -> str:
        return self.path.stem

    def __str__(self) -> str:
        return str(self.path)


def files(path: Path) -> list[Path]:
    """
    Return the path itself if it's a file, or its immediate entries if it's a directory.

    Directory entries are sorted to keep the job order stable across runs.
    """
    try:
        if not path.is_dir():
            if not path.exists():
                msg = f"Input path does not exist: {path}"
                raise ConfigurationError(msg, file_path=path)
            return [path]

        return sorted(path.iterdir())
    except OSError as e:
        msg = f"Failed to list input path `{path}`: {e}"
        raise ConfigurationError(msg, file_path=path, cause=e) from e


def list_input_files(paths: Iterable[Path], max_workers: int = DEFAULT_LISTING_CONCURRENCY) -> list[InputFile]:
    """Expand files and directories into a flat list of input files, in input order."""
    paths = list(paths)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        listed = list(executor.map(files, paths))

    inputs = [InputFile(file_path) for entries in listed for file_path in entries]
    LOG.debug("Found %d input files in %d paths", len(inputs), len(paths))
    return inputs


def validate_duplicate_input_names(inputs: Iterable[InputFile]) -> None:
    """
    Ensure no two inputs share a stem, since outputs are named after it.

    Raises:
        ConfigurationError: listing every colliding group, sorted by stem

    """
    groups: dict[str, list[InputFile]] = defaultdict(list)
    for input_file in inputs:
        groups[input_file.stem].append(input_file)

    duplicates = sorted(
        ((stem, paths) for stem, paths in groups.items() if len(paths) >= 2),  # noqa: PLR2004
        key=lambda item: item[0],
    )

    if not duplicates:
        return

    lines = [
        f"- {stem} ({len(paths)} files): [{', '.join(str(path) for path in paths)}]" for stem, paths in duplicates
    ]
    msg = "The following input files have the same name, but they must be unique.\n" + "\n".join(lines)
    raise ConfigurationError(msg)


def validate_output_files_overwriting(
    paths: Iterable[Path],
    *,
    overwrite: bool,
    stdin: TextIO | None = None,
) -> None:
    """Ask for confirmation if any of the output files already exist."""
    existing_files = []
    for path in paths:
        try:
            if path.exists():
                existing_files.append(path)
        except OSError as e:
            msg = f"Failed to check if the output file exists: `{path}`"
            raise ProcessingError(msg, file_path=path, cause=e) from e

    if not existing_files:
        return

    listing = "\n".join(f"- {path}" for path in existing_files)
    message = f"The following output files already exist.\n{listing}\nOverwrite them?"

    read_confirmation(message, auto_confirm=overwrite, stdin=stdin)


def write_output(path: Path, data: bytes) -> None:
    """Write the output through a temporary sibling so the final name never holds a partial file."""
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(temp_path, path)
    except OSError as e:
        temp_path.unlink(missing_ok=True)
        msg = f"Failed to write output file: {e}"
        raise ProcessingError(msg, file_path=path, cause=e) from e

    LOG.debug("Wrote %d bytes to %s", len(data), path)
