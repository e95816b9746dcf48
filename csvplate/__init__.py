"""csvplate package.

This module is the root of csvplate, a small command-line tool that turns a
CSV file and a Jinja2 template into one or many rendered text files. If the
output designator itself contains a template expression, one file is
written per CSV row; otherwise a single file is rendered from all rows.

Package Structure
-----------------
- `pipeline/sources/`:
    Designator resolution (file, stdin or literal content), encoding
    normalization and the CSV-to-records loader.
- `pipeline/rendering/`:
    Jinja2 environment and helper library, mode dispatch, output sink,
    the single-file and per-row renderers, and the run orchestration.
- `cli.py`: Command-line parsing, logging configuration and exit codes.
- `console.py`: User-facing progress and error lines (Rich).
- `config.py`: All configuration constants, as UPPER_SNAKE_CASE.
- `exceptions.py`: Project-specific exception classes.

Examples
--------
>>> import csvplate
>>> csvplate.__version__  # doctest: +SKIP
'0.1.0'

"""

__version__ = "0.1.0"
