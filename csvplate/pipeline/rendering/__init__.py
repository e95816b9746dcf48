"""Output side of the pipeline.

Template environment and helpers (``templating``), mode selection
(``dispatch``), destinations (``sink``), the single-file and per-row
renderers (``processor``) and the run orchestration (``runner``).
"""

from .dispatch import Dispatch, RenderMode, decide_mode
from .processor import RenderReport, RowFailure, render_per_row, render_single
from .runner import (
    EnvDefaults,
    RunSettings,
    StandardStreams,
    build_settings,
    load_env_defaults,
    run,
)
from .sink import destination_stream, open_destination
from .templating import build_environment, compile_template

__all__ = [
    "Dispatch",
    "EnvDefaults",
    "RenderMode",
    "RenderReport",
    "RowFailure",
    "RunSettings",
    "StandardStreams",
    "build_environment",
    "build_settings",
    "compile_template",
    "decide_mode",
    "destination_stream",
    "load_env_defaults",
    "open_destination",
    "render_per_row",
    "render_single",
    "run",
]
