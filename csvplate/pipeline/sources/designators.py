"""Source designators and content resolution.

A designator is a single command-line string that may name a file, the
stdin sentinel, or, when no such file exists, carry the content itself.
This module resolves that ambiguity once, while the run settings are being
built, into a tagged ``Designator`` value, and later reads the designated
content and normalizes its encoding to text.

Boundaries
----------
- Only inputs are resolved here (the CSV source and the content template).
  The output-path template is always literal text and never passes through
  this module.
- Decoding accepts UTF-8 (and BOM-marked UTF-16/32) directly and falls back
  to ``charset-normalizer`` detection among the Western code pages.
"""

from __future__ import annotations

import codecs
import errno
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO

from charset_normalizer import from_bytes

from csvplate.config import (
    FALLBACK_ENCODING,
    LEGACY_FALLBACK_ENCODING,
    STDIO_SENTINEL,
    UTF8_BOM,
    WESTERN_ENCODINGS,
)
from csvplate.exceptions import SourceUnavailableError

logger = logging.getLogger(__name__)

# UTF-32 marks first: the UTF-32-LE mark starts with the UTF-16-LE one
_UNICODE_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


class DesignatorKind(Enum):
    """How a designator string is interpreted."""

    PATH = "path"
    STDIN = "stdin"
    LITERAL = "literal"


@dataclass(frozen=True)
class Designator:
    """A resolved input designator.

    Attributes
    ----------
    kind : DesignatorKind
        Whether ``value`` names a file, the stdin stream or literal content.
    value : str
        The raw designator string as supplied on the command line.
    """

    kind: DesignatorKind
    value: str

    @property
    def is_stdin(self) -> bool:
        return self.kind is DesignatorKind.STDIN

    def describe(self) -> str:
        """Return a short label for logs and error messages."""
        if self.kind is DesignatorKind.PATH:
            return self.value
        if self.kind is DesignatorKind.STDIN:
            return "<stdin>"
        return "<literal>"


def _cannot_name_a_file(error: OSError) -> bool:
    return isinstance(error, FileNotFoundError) or error.errno == errno.ENAMETOOLONG


def resolve_designator(value: str) -> Designator:
    """Classify a designator string as a path, stdin or literal content.

    Parameters
    ----------
    value : str
        The raw designator. ``""`` and ``"-"`` denote stdin.

    Returns
    -------
    Designator
        ``PATH`` when a filesystem entry exists at ``value``, ``LITERAL``
        when nothing exists there (or ``value`` cannot be a file name at
        all), ``STDIN`` for the sentinel.

    Raises
    ------
    SourceUnavailableError
        If inspecting the path fails for any reason other than "does not
        exist" (e.g. permission denied on a parent directory).

    Examples
    --------
    >>> resolve_designator("-").kind
    <DesignatorKind.STDIN: 'stdin'>
    >>> resolve_designator("name,age\\nAda,36").kind
    <DesignatorKind.LITERAL: 'literal'>
    """
    if value in ("", STDIO_SENTINEL):
        return Designator(DesignatorKind.STDIN, STDIO_SENTINEL)
    try:
        os.stat(value)
    except ValueError:
        # embedded NUL byte: never a valid file name
        return Designator(DesignatorKind.LITERAL, value)
    except OSError as error:
        if _cannot_name_a_file(error):
            return Designator(DesignatorKind.LITERAL, value)
        raise SourceUnavailableError(
            f"open file: {error}", context={"designator": value}
        ) from error
    return Designator(DesignatorKind.PATH, value)


def decode_content(data: bytes) -> str:
    """Decode raw bytes into text, guessing the encoding when needed.

    Parameters
    ----------
    data : bytes
        Raw content as read from a file or stdin.

    Returns
    -------
    str
        Decoded text. A leading UTF-8 byte order mark is removed.

    Notes
    -----
    Valid UTF-8 is decoded directly, and UTF-16/32 input is recognized by
    its byte order mark. Anything else is handed to ``charset_normalizer``,
    restricted to the Western single-byte code pages; if none of them fits,
    the bytes are decoded as cp1252 with replacement characters.

    Examples
    --------
    >>> decode_content("café".encode("utf-8"))
    'café'
    >>> decode_content(b"\\xef\\xbb\\xbfa,b")
    'a,b'
    >>> decode_content("René,Liège".encode("latin-1"))
    'René,Liège'
    """
    if data.startswith(UTF8_BOM):
        data = data[len(UTF8_BOM):]
    for bom, encoding in _UNICODE_BOMS:
        if data.startswith(bom):
            return data.decode(encoding, errors="replace")
    try:
        return data.decode(FALLBACK_ENCODING)
    except UnicodeDecodeError:
        pass
    best = from_bytes(data, cp_isolation=list(WESTERN_ENCODINGS)).best()
    if best is None:
        logger.debug("Encoding detection failed; decoding as %s", LEGACY_FALLBACK_ENCODING)
        return data.decode(LEGACY_FALLBACK_ENCODING, errors="replace")
    logger.debug("Detected source encoding %s", best.encoding)
    return str(best)


def read_content(designator: Designator, stdin: BinaryIO) -> str:
    """Return the decoded text a designator refers to.

    Parameters
    ----------
    designator : Designator
        A value produced by :func:`resolve_designator`.
    stdin : BinaryIO
        Binary stream read to exhaustion for ``STDIN`` designators.

    Returns
    -------
    str
        The content as text.

    Raises
    ------
    SourceUnavailableError
        If the designated file cannot be opened or read.
    """
    if designator.kind is DesignatorKind.LITERAL:
        return designator.value
    if designator.kind is DesignatorKind.STDIN:
        try:
            data = stdin.read()
        except OSError as error:
            raise SourceUnavailableError(f"read content: {error}") from error
        return decode_content(data)
    try:
        with open(designator.value, "rb") as fh:
            data = fh.read()
    except OSError as error:
        raise SourceUnavailableError(
            f"open file: {error}", context={"path": designator.value}
        ) from error
    return decode_content(data)
