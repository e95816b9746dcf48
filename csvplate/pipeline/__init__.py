"""Rendering pipeline package.

Re-exports the public API of the two subpackages so callers (the CLI,
tests, notebooks) can import from ``csvplate.pipeline`` without reaching
into submodules:

- ``sources``: designator resolution, decoding and CSV loading.
- ``rendering``: templates, mode dispatch, output sink, renderers and the
  run orchestration.

Examples
--------
>>> from csvplate.pipeline import build_settings, run, StandardStreams
>>> settings = build_settings(csv="data.csv", template="tpl.txt", out="out/{{ id }}.txt")  # doctest: +SKIP
>>> run(settings, StandardStreams.from_process())  # doctest: +SKIP
"""

from .rendering import (
    RenderMode,
    RenderReport,
    RunSettings,
    StandardStreams,
    build_settings,
    decide_mode,
    run,
)
from .sources import Designator, DesignatorKind, LoadedTable, load_table, read_content, resolve_designator

__all__ = [
    "Designator",
    "DesignatorKind",
    "LoadedTable",
    "RenderMode",
    "RenderReport",
    "RunSettings",
    "StandardStreams",
    "build_settings",
    "decide_mode",
    "load_table",
    "read_content",
    "resolve_designator",
    "run",
]
