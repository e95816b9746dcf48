"""Single-file and per-row rendering.

Takes compiled templates and loaded records and writes the rendered output
through the output sink. In single-file mode the content template runs once
with the whole record list as context. In per-row mode the output-path
template and the content template both run once per record, producing one
independent file per row.

Per-row failure policy: a destination that cannot be acquired (it already
exists without ``--force``, or cannot be created) is reported, counted and
skipped, and the run carries on with the next row. Errors while rendering
the output name or the content abort the whole run. Files written before an
abort stay on disk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, TextIO

from jinja2 import Template

from csvplate.config import (
    PER_ROW_RECORD_KEY,
    SINGLE_HEADERS_KEY,
    SINGLE_ROWS_KEY,
    STDIO_SENTINEL,
)
from csvplate.console import ConsoleReporter
from csvplate.exceptions import DestinationError, PartialWriteError, TemplateRenderError
from csvplate.pipeline.rendering.dispatch import RenderMode
from csvplate.pipeline.rendering.sink import close_destination, destination_stream, open_destination
from csvplate.pipeline.rendering.templating import render_to_stream, render_to_string
from csvplate.pipeline.sources.data_loader import LoadedTable, Record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowFailure:
    """A row whose destination could not be acquired."""

    row: int
    destination: str
    error: DestinationError


@dataclass
class RenderReport:
    """Outcome of one render run.

    Attributes
    ----------
    mode : RenderMode
        The mode that produced this report.
    written : list[str]
        Destinations written, in order.
    failures : list[RowFailure]
        Rows skipped because their destination could not be acquired.
    """

    mode: RenderMode
    written: list[str] = field(default_factory=list)
    failures: list[RowFailure] = field(default_factory=list)


def build_single_context(table: LoadedTable) -> dict[str, Any]:
    """Context for single-file mode: all records as ``rows``, the header as ``headers``."""
    return {SINGLE_ROWS_KEY: table.records, SINGLE_HEADERS_KEY: table.header}


def build_row_context(record: Record) -> dict[str, Any]:
    """Context for per-row mode.

    Every field is a top-level variable and the record itself is available
    as ``row`` (for names that are not identifiers). A CSV column named
    ``row`` takes precedence over the alias.

    Examples
    --------
    >>> build_row_context({"first name": "Ada", "_index_": "1"})["row"]["first name"]
    'Ada'
    """
    return {PER_ROW_RECORD_KEY: record, **record}


def render_single(
    template: Template,
    table: LoadedTable,
    destination: str,
    *,
    force: bool,
    stdout: TextIO,
    reporter: ConsoleReporter,
) -> RenderReport:
    """Render ``template`` once against every record and write one output.

    Parameters
    ----------
    template : Template
        Compiled content template.
    table : LoadedTable
        All loaded records and the header.
    destination : str
        Output path, or ``"-"`` for stdout.
    force : bool
        Permit overwriting an existing file.
    stdout : TextIO
        Stream used for the ``"-"`` destination.
    reporter : ConsoleReporter
        Receives the confirmation line.

    Returns
    -------
    RenderReport
        Report listing the single destination written.

    Raises
    ------
    DestinationError
        If the destination cannot be acquired (fatal in this mode).
    TemplateRenderError
        If the template fails while rendering. A partially written file is
        left in place.
    """
    report = RenderReport(mode=RenderMode.SINGLE)
    with destination_stream(destination, force=force, stdout=stdout) as stream:
        render_to_stream(template, build_single_context(table), stream)
    report.written.append(destination)
    logger.info("Rendered %d records into %s", len(table), destination)
    if destination != STDIO_SENTINEL:
        reporter.progress(f"result saved in {destination}")
    return report


def render_output_name(name_template: Template, record: Record, row: int) -> str:
    """Render the output-path template for one record.

    Raises
    ------
    TemplateRenderError
        If rendering fails or produces an empty name.
    """
    try:
        name = render_to_string(name_template, build_row_context(record))
    except TemplateRenderError as error:
        raise TemplateRenderError(
            f"render output name for row {row}: {error.message}", context={"row": row}
        ) from error
    if not name:
        raise TemplateRenderError(
            f"rendered output name for row {row} is empty", context={"row": row}
        )
    return name


def render_per_row(
    name_template: Template,
    content_template: Template,
    records: list[Record],
    *,
    force: bool,
    stdout: TextIO,
    reporter: ConsoleReporter,
) -> RenderReport:
    """Render one output per record.

    Parameters
    ----------
    name_template : Template
        Compiled output-path template.
    content_template : Template
        Compiled content template.
    records : list[Record]
        Records in source order.
    force : bool
        Permit overwriting existing files.
    stdout : TextIO
        Stream used when a rendered name is ``"-"``.
    reporter : ConsoleReporter
        Receives one progress line per written file and one failure line per
        skipped row.

    Returns
    -------
    RenderReport
        Written destinations in row order. Zero records is a no-op.

    Raises
    ------
    TemplateRenderError
        If an output name or a content render fails (aborts remaining rows).
    PartialWriteError
        After all rows, if any destination could not be acquired.
    """
    report = RenderReport(mode=RenderMode.PER_ROW)
    for row, record in enumerate(records, start=1):
        destination = render_output_name(name_template, record, row)
        try:
            stream = open_destination(destination, force=force, stdout=stdout)
        except DestinationError as error:
            logger.warning("Row %d skipped: %s", row, error.message)
            reporter.row_failure(destination, error.message)
            report.failures.append(RowFailure(row, destination, error))
            continue
        try:
            render_to_stream(content_template, build_row_context(record), stream)
        except TemplateRenderError as error:
            raise TemplateRenderError(
                f"render template for {destination}: {error.message}",
                context={"row": row, "destination": destination},
            ) from error
        finally:
            close_destination(stream, stdout)
        report.written.append(destination)
        reporter.progress(destination)

    logger.info(
        "Per-row render finished: %d written, %d skipped",
        len(report.written),
        len(report.failures),
    )
    if report.failures:
        raise PartialWriteError(
            len(report.failures), len(records), context={"written": list(report.written)}
        )
    return report
