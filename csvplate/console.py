"""User-facing console lines.

Progress lines (destinations written) go to the output stream; per-row
failures and fatal errors go to the error stream. Both are Rich consoles
bound to the streams handed in by the caller, so tests can capture them
with plain ``io.StringIO`` objects. Markup, highlighting, emoji replacement
and wrapping are disabled: paths and messages are printed verbatim.
"""

from __future__ import annotations

from typing import TextIO

from rich.console import Console

from csvplate.config import PROGRAM_NAME


def _plain_console(stream: TextIO) -> Console:
    return Console(file=stream, markup=False, highlight=False, emoji=False, soft_wrap=True)


class ConsoleReporter:
    """Writes progress, per-row failure and fatal error lines.

    Parameters
    ----------
    stdout : TextIO
        Stream receiving progress lines.
    stderr : TextIO
        Stream receiving failure and error lines.

    Examples
    --------
    >>> import io
    >>> out, err = io.StringIO(), io.StringIO()
    >>> reporter = ConsoleReporter(out, err)
    >>> reporter.progress("out/ada.txt")
    >>> out.getvalue()
    'out/ada.txt\\n'
    """

    def __init__(self, stdout: TextIO, stderr: TextIO) -> None:
        self._out = _plain_console(stdout)
        self._err = _plain_console(stderr)

    def progress(self, line: str) -> None:
        self._out.print(line)

    def row_failure(self, destination: str, message: str) -> None:
        self._err.print(f"  {destination}: {message}", style="yellow")

    def fatal(self, message: str) -> None:
        self._err.print(f"{PROGRAM_NAME}: {message}", style="bold red")
