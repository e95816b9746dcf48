"""Command-line entry point for csvplate.

This module is a thin orchestration layer: it parses arguments, configures
logging, validates the options into ``RunSettings`` and delegates the work
to :func:`csvplate.pipeline.rendering.runner.run`. Every fatal error is
reported once on stderr as ``csvplate: <message>`` and mapped to exit code
1; success maps to 0.

Usage
-----
csvplate [-n] [-f] -i data.csv -t template.txt [-o output.txt]

Examples
--------
>>> from csvplate.cli import main
>>> main(["--version"])  # doctest: +SKIP
csvplate 0.1.0
0
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn

from csvplate import __version__
from csvplate.config import ENV_DISABLE_FILE_LOGS, LOG_FORMAT, PROGRAM_NAME
from csvplate.console import ConsoleReporter
from csvplate.exceptions import AppError, ConfigurationError
from csvplate.pipeline.rendering.runner import (
    EnvDefaults,
    StandardStreams,
    build_settings,
    load_env_defaults,
    run,
)

logger = logging.getLogger(__name__)

DESCRIPTION = f"{PROGRAM_NAME} (version: {__version__}): a CSV templated file generator"

EPILOG = """\
Mode of operation:
  If the output file name contains template expressions ({{...}}), one file per row
  will be created, else a single file will be created with all rows.
  In single file mode, the template sees `rows` (the list of all rows) and
  `headers` (the column names).
  In per-row mode, every field of the current row is a template variable, and
  the whole row is also available as `row` (e.g. row["first name"]).
  The first line of the CSV is assumed to be the header line and will be used as field names,
  except if the --noheader flag is set in which case the fields will be named C1, C2, ...
  The field name specified with --counter will contain the row number (starting at 1).
  If --csv or --template is omitted or empty, stdin is used.
  If --out is omitted or empty, stdout is used in single file mode.
  If the output file already exists, an error is returned unless --force is set.
  If --csv or --template is not an existing file, it is treated as the actual content.
  Jinja2 filters are available in the templates, plus snakecase, kebabcase,
  camelcase, pascalcase, squash, dateformat and now().

Examples:
  csvplate --csv data.csv --template template.txt --out output.txt
  csvplate -f -i data.csv -t template.txt -o "output_{{ Name }}.txt"
  csvplate -i data.csv --csv-sep ';' -t template.txt
  cat data.csv | csvplate -n -t template.txt
"""


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise ConfigurationError(message)


def build_parser(defaults: EnvDefaults | None = None) -> argparse.ArgumentParser:
    """Build the argument parser, with defaults taken from ``defaults``.

    Parameters
    ----------
    defaults : EnvDefaults | None
        Environment-derived defaults; built-in defaults when ``None``.

    Returns
    -------
    argparse.ArgumentParser
        Parser for the csvplate options, in display order.
    """
    defaults = defaults or EnvDefaults()
    parser = _ArgumentParser(
        prog=PROGRAM_NAME,
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("-h", "--help", action="store_true", help="Show this help message and exit")
    parser.add_argument(
        "-i", "--csv", default="", help="Path to input CSV file, or the CSV content itself"
    )
    parser.add_argument(
        "-t",
        "--template",
        default="",
        help="Path to template file, or the template content itself",
    )
    parser.add_argument(
        "-o", "--out", default="", help="Output file path (may include template expressions)"
    )
    parser.add_argument(
        "-c",
        "--counter",
        default=defaults.counter,
        help="The field name to use for the row counter (default: %(default)s)",
    )
    parser.add_argument(
        "-n", "--noheader", action="store_true", help="Treat CSV as having no header row"
    )
    parser.add_argument(
        "-f", "--force", action="store_true", help="Overwrite existing output files"
    )
    parser.add_argument(
        "--csv-sep",
        default=defaults.csv_sep,
        help="CSV field separator (default: %(default)r)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=defaults.strict,
        help="Fail on undefined template variables instead of rendering them empty",
    )
    parser.add_argument(
        "--log-level",
        default=defaults.log_level,
        help="Diagnostic logging level (DEBUG, INFO, WARNING, ERROR; default: %(default)s)",
    )
    parser.add_argument(
        "--log-file", type=Path, default=None, help="Also write diagnostic logs to this file"
    )
    parser.add_argument("--version", action="store_true", help="Show the program version and exit")
    return parser


def configure_logging(log_level: str = "WARNING", log_file: Path | None = None) -> None:
    """Configure diagnostic logging for a csvplate run.

    Replaces all root handlers with a stderr ``StreamHandler`` and, when
    ``log_file`` is given and ``DISABLE_FILE_LOGS`` is unset, a
    ``FileHandler`` appending to it. Unknown level names fall back to
    WARNING.

    Parameters
    ----------
    log_level : str, optional
        Level name, e.g. ``"INFO"``.
    log_file : Path | None, optional
        Optional log file; parent directories are created.

    Raises
    ------
    ConfigurationError
        If the log file cannot be opened.
    """
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None and not os.environ.get(ENV_DISABLE_FILE_LOGS):
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.insert(0, logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as error:
            raise ConfigurationError(f"open log file: {error}") from error
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def main(argv: list[str] | None = None, streams: StandardStreams | None = None) -> int:
    """Run csvplate with ``argv`` and return the process exit code.

    Parameters
    ----------
    argv : list[str] | None
        Arguments without the program name; ``sys.argv[1:]`` when ``None``.
    streams : StandardStreams | None
        Streams to use; the process streams when ``None``.

    Returns
    -------
    int
        0 on success (including help, version and no-argument usage), 1 on
        any fatal error.
    """
    argv = sys.argv[1:] if argv is None else argv
    streams = streams or StandardStreams.from_process()
    reporter = ConsoleReporter(streams.stdout, streams.stderr)
    try:
        parser = build_parser(load_env_defaults())
        if not argv:
            parser.print_help(streams.stdout)
            return 0
        args = parser.parse_args(argv)
        if args.help:
            parser.print_help(streams.stdout)
            return 0
        if args.version:
            streams.stdout.write(f"{PROGRAM_NAME} {__version__}\n")
            return 0
        configure_logging(args.log_level, args.log_file)
        settings = build_settings(
            csv=args.csv,
            template=args.template,
            out=args.out,
            counter=args.counter,
            no_header=args.noheader,
            force=args.force,
            csv_sep=args.csv_sep,
            strict=args.strict,
        )
        run(settings, streams)
    except AppError as error:
        logger.debug("Run failed: %s", error.to_dict())
        reporter.fatal(error.message)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
