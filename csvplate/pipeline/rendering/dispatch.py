"""Render mode selection from the output designator.

The decision is purely syntactic: an output designator containing the
template expression marker selects per-row mode, anything else is a single
destination. The designator is not compiled here, so a malformed
expression in an output path surfaces later as a compile error instead of
silently falling back to single-file mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from csvplate.config import STDIO_SENTINEL, TEMPLATE_EXPRESSION_MARKER


class RenderMode(Enum):
    SINGLE = "single"
    PER_ROW = "per_row"


@dataclass(frozen=True)
class Dispatch:
    """The chosen mode and the destination or output-path template text."""

    mode: RenderMode
    target: str


def decide_mode(out: str) -> Dispatch:
    """Decide between single-file and per-row rendering.

    Examples
    --------
    >>> decide_mode("")
    Dispatch(mode=<RenderMode.SINGLE: 'single'>, target='-')
    >>> decide_mode("out/{{ name }}.txt").mode
    <RenderMode.PER_ROW: 'per_row'>
    >>> decide_mode("out/all.txt").target
    'out/all.txt'
    """
    if not out:
        return Dispatch(RenderMode.SINGLE, STDIO_SENTINEL)
    if TEMPLATE_EXPRESSION_MARKER in out:
        return Dispatch(RenderMode.PER_ROW, out)
    return Dispatch(RenderMode.SINGLE, out)
