"""Run orchestration for csvplate.

This module is the boundary between the command-line layer and the
rendering pipeline. It validates raw option values into ``RunSettings``
(resolving input designators once, up front), and ``run`` executes one full
render: load the CSV, compile the templates, pick the mode and hand off to
the matching renderer.

``run`` never exits the process and never touches ``sys`` streams directly;
stdin, stdout and stderr come in through ``StandardStreams``. Every failure
is raised as an ``AppError`` subclass for the caller to report.

Examples
--------
>>> import io
>>> streams = StandardStreams(io.BytesIO(), io.StringIO(), io.StringIO())
>>> settings = build_settings(csv="name\\nAda\\n", template="{{ rows | length }}")
>>> report = run(settings, streams)
>>> streams.stdout.getvalue()
'1'
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, TextIO

from dotenv import dotenv_values

from csvplate.config import (
    CONTENT_TEMPLATE_NAME,
    DEFAULT_COUNTER_KEY,
    DEFAULT_CSV_SEPARATOR,
    DEFAULT_LOG_LEVEL,
    DOTENV_FILENAME,
    ENV_COUNTER,
    ENV_CSV_SEP,
    ENV_LOG_LEVEL,
    ENV_LOG_LEVEL_FALLBACK,
    ENV_STRICT,
    FORBIDDEN_CSV_SEPARATORS,
    OUTPUT_NAME_TEMPLATE_NAME,
    TRUTHY_ENV_VALUES,
)
from csvplate.console import ConsoleReporter
from csvplate.exceptions import ConfigurationError
from csvplate.pipeline.rendering.dispatch import RenderMode, decide_mode
from csvplate.pipeline.rendering.processor import RenderReport, render_per_row, render_single
from csvplate.pipeline.rendering.templating import build_environment, compile_template
from csvplate.pipeline.sources.data_loader import load_table
from csvplate.pipeline.sources.designators import Designator, read_content, resolve_designator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StandardStreams:
    """The process streams a run reads from and writes to."""

    stdin: BinaryIO
    stdout: TextIO
    stderr: TextIO

    @classmethod
    def from_process(cls) -> "StandardStreams":
        return cls(sys.stdin.buffer, sys.stdout, sys.stderr)


@dataclass(frozen=True)
class EnvDefaults:
    """Option defaults taken from the environment and an optional ``.env`` file."""

    counter: str = DEFAULT_COUNTER_KEY
    csv_sep: str = DEFAULT_CSV_SEPARATOR
    strict: bool = False
    log_level: str = DEFAULT_LOG_LEVEL


def load_env_defaults(
    environ: Mapping[str, str] | None = None, env_dir: Path | None = None
) -> EnvDefaults:
    """Read option defaults from the environment.

    Values from a ``.env`` file in ``env_dir`` (the working directory by
    default) are used only where the real environment has no value.

    Parameters
    ----------
    environ : Mapping[str, str] | None, optional
        Environment to read; defaults to ``os.environ``.
    env_dir : Path | None, optional
        Directory searched for the ``.env`` file.

    Returns
    -------
    EnvDefaults
        Defaults for ``--counter``, ``--csv-sep``, ``--strict`` and
        ``--log-level``.
    """
    env_path = (env_dir if env_dir is not None else Path.cwd()) / DOTENV_FILENAME
    values: dict[str, str] = {}
    if env_path.is_file():
        values.update({k: v for k, v in dotenv_values(env_path).items() if v is not None})
    values.update(os.environ if environ is None else environ)

    defaults = EnvDefaults()
    strict_raw = values.get(ENV_STRICT, "")
    return EnvDefaults(
        counter=values.get(ENV_COUNTER) or defaults.counter,
        csv_sep=values.get(ENV_CSV_SEP) or defaults.csv_sep,
        strict=strict_raw.strip().lower() in TRUTHY_ENV_VALUES,
        log_level=values.get(ENV_LOG_LEVEL)
        or values.get(ENV_LOG_LEVEL_FALLBACK)
        or defaults.log_level,
    )


@dataclass(frozen=True)
class RunSettings:
    """Validated configuration for one run.

    Attributes
    ----------
    csv : Designator
        CSV source.
    template : Designator
        Content template source.
    out : str
        Output destination or output-path template; ``""`` means stdout.
    counter : str
        Name of the synthetic row counter field.
    no_header : bool
        Synthesize ``C1..Cn`` instead of consuming a header row.
    force : bool
        Permit overwriting existing files.
    csv_sep : str
        Single-character field separator.
    strict : bool
        Fail on undefined template variables.
    """

    csv: Designator
    template: Designator
    out: str = ""
    counter: str = DEFAULT_COUNTER_KEY
    no_header: bool = False
    force: bool = False
    csv_sep: str = DEFAULT_CSV_SEPARATOR
    strict: bool = False


def validate_separator(csv_sep: str) -> str:
    """Return ``csv_sep`` if it is a usable single-character separator.

    Raises
    ------
    ConfigurationError
        If it is not exactly one character, or is a quote, CR or LF.
    """
    if len(csv_sep) != 1:
        raise ConfigurationError(
            "--csv-sep must be a single character", context={"csv_sep": csv_sep}
        )
    if csv_sep in FORBIDDEN_CSV_SEPARATORS:
        raise ConfigurationError(
            f"--csv-sep cannot be {csv_sep!r}", context={"csv_sep": csv_sep}
        )
    return csv_sep


def build_settings(
    *,
    csv: str = "",
    template: str = "",
    out: str = "",
    counter: str = DEFAULT_COUNTER_KEY,
    no_header: bool = False,
    force: bool = False,
    csv_sep: str = DEFAULT_CSV_SEPARATOR,
    strict: bool = False,
) -> RunSettings:
    """Validate raw option values into ``RunSettings``.

    Raises
    ------
    ConfigurationError
        If the separator is invalid, or both inputs would read stdin.
    SourceUnavailableError
        If an input path exists but cannot be inspected.
    """
    validate_separator(csv_sep)
    csv_designator = resolve_designator(csv)
    template_designator = resolve_designator(template)
    if csv_designator.is_stdin and template_designator.is_stdin:
        raise ConfigurationError("one of --csv or --template is required")
    return RunSettings(
        csv=csv_designator,
        template=template_designator,
        out=out,
        counter=counter,
        no_header=no_header,
        force=force,
        csv_sep=csv_sep,
        strict=strict,
    )


def run(settings: RunSettings, streams: StandardStreams) -> RenderReport:
    """Execute one render described by ``settings``.

    Parameters
    ----------
    settings : RunSettings
        Validated configuration from :func:`build_settings`.
    streams : StandardStreams
        Streams for stdin input, rendered stdout output and console lines.

    Returns
    -------
    RenderReport
        Destinations written (and, for per-row runs, none skipped).

    Raises
    ------
    csvplate.exceptions.AppError
        Any source, template, destination or partial write error.
    """
    reporter = ConsoleReporter(streams.stdout, streams.stderr)
    env = build_environment(strict=settings.strict)

    logger.info("Reading CSV from %s", settings.csv.describe())
    table = load_table(
        read_content(settings.csv, streams.stdin),
        separator=settings.csv_sep,
        no_header=settings.no_header,
        counter_key=settings.counter,
    )

    logger.info("Reading template from %s", settings.template.describe())
    content_template = compile_template(
        env, read_content(settings.template, streams.stdin), CONTENT_TEMPLATE_NAME
    )

    dispatch = decide_mode(settings.out)
    logger.info("Render mode: %s (%s)", dispatch.mode.value, dispatch.target)
    if dispatch.mode is RenderMode.PER_ROW:
        name_template = compile_template(env, dispatch.target, OUTPUT_NAME_TEMPLATE_NAME)
        return render_per_row(
            name_template,
            content_template,
            table.records,
            force=settings.force,
            stdout=streams.stdout,
            reporter=reporter,
        )
    return render_single(
        content_template,
        table,
        dispatch.target,
        force=settings.force,
        stdout=streams.stdout,
        reporter=reporter,
    )
