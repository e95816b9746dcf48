"""Output destinations.

Resolves a destination designator into a writable text stream. The stdout
sentinel maps to the injected stdout stream and skips every check; a
concrete path gets its parent directories created, is protected against
overwriting unless forced, and is then opened (truncated) for writing.

Files are written as UTF-8 with newline translation disabled, so rendered
output reaches the disk byte for byte.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

from csvplate.config import OUTPUT_ENCODING, STDIO_SENTINEL
from csvplate.exceptions import DestinationExistsError, DestinationUnavailableError

logger = logging.getLogger(__name__)


def ensure_parent_dirs(destination: str) -> None:
    """Create all missing ancestor directories of ``destination``.

    Raises
    ------
    DestinationUnavailableError
        If a directory cannot be created.
    """
    try:
        Path(destination).parent.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise DestinationUnavailableError(
            f"create directories: {error}", context={"destination": destination}
        ) from error


def check_not_exists(destination: str) -> None:
    """Fail if something already exists at ``destination``.

    Raises
    ------
    DestinationExistsError
        If the path exists (file, directory or anything else).
    DestinationUnavailableError
        If the path cannot be inspected for a reason other than "not found".
    """
    try:
        os.stat(destination)
    except FileNotFoundError:
        return
    except OSError as error:
        raise DestinationUnavailableError(
            f"inspect output file {destination}: {error}",
            context={"destination": destination},
        ) from error
    raise DestinationExistsError(
        f"output file {destination} already exists (use --force to overwrite)",
        context={"destination": destination},
    )


def open_destination(destination: str, *, force: bool, stdout: TextIO) -> TextIO:
    """Return a stream ready for writing to ``destination``.

    Parameters
    ----------
    destination : str
        File path, or ``"-"`` for standard output.
    force : bool
        Permit truncating an existing file.
    stdout : TextIO
        Stream returned for the ``"-"`` sentinel.

    Returns
    -------
    TextIO
        ``stdout`` itself, or a newly opened file the caller must close.

    Raises
    ------
    DestinationExistsError
        If the file exists and ``force`` is False.
    DestinationUnavailableError
        If directories cannot be created, the path cannot be inspected, or
        the file cannot be opened.
    """
    if destination == STDIO_SENTINEL:
        return stdout
    ensure_parent_dirs(destination)
    if not force:
        check_not_exists(destination)
    try:
        return open(destination, "w", encoding=OUTPUT_ENCODING, newline="")
    except OSError as error:
        raise DestinationUnavailableError(
            f"create output file: {error}", context={"destination": destination}
        ) from error


def close_destination(stream: TextIO, stdout: TextIO) -> None:
    """Close a stream from :func:`open_destination`; stdout is only flushed.

    Buffered output reaches the disk here, so a full disk or a lost device
    usually surfaces on this call rather than on ``write``.

    Raises
    ------
    DestinationUnavailableError
        If flushing or closing the stream fails.
    """
    try:
        if stream is stdout:
            stream.flush()
        else:
            stream.close()
    except OSError as error:
        raise DestinationUnavailableError(f"write output: {error}") from error


@contextmanager
def destination_stream(destination: str, *, force: bool, stdout: TextIO) -> Iterator[TextIO]:
    """Context manager around :func:`open_destination` and :func:`close_destination`."""
    stream = open_destination(destination, force=force, stdout=stdout)
    try:
        yield stream
    finally:
        close_destination(stream, stdout)
        logger.debug("Released %s", destination)
