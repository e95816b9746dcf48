"""Global configuration constants for csvplate.

Defines sentinels, defaults, encodings and logging settings used across the
loader, the renderers and the command-line layer.
"""

from __future__ import annotations

# Program identity
PROGRAM_NAME: str = "csvplate"

# Designators
STDIO_SENTINEL: str = "-"
TEMPLATE_EXPRESSION_MARKER: str = "{{"

# CSV / record defaults
DEFAULT_COUNTER_KEY: str = "_index_"
DEFAULT_CSV_SEPARATOR: str = ","
NO_HEADER_FIELD_FORMAT: str = "C{index}"
FORBIDDEN_CSV_SEPARATORS: frozenset[str] = frozenset({'"', "\r", "\n"})

# Encodings
UTF8_BOM: bytes = b"\xef\xbb\xbf"
FALLBACK_ENCODING: str = "utf-8"
OUTPUT_ENCODING: str = "utf-8"
# Code pages tried, in order, for input that is not UTF-8
WESTERN_ENCODINGS: tuple[str, ...] = ("cp1252", "latin_1", "iso8859_15")
LEGACY_FALLBACK_ENCODING: str = "cp1252"

# Template names used in error messages and logs
CONTENT_TEMPLATE_NAME: str = "content"
OUTPUT_NAME_TEMPLATE_NAME: str = "output"

# Per-mode template context keys
SINGLE_ROWS_KEY: str = "rows"
SINGLE_HEADERS_KEY: str = "headers"
PER_ROW_RECORD_KEY: str = "row"

# Environment overrides (loaded from the process environment or a .env file)
DOTENV_FILENAME: str = ".env"
ENV_COUNTER: str = "CSVPLATE_COUNTER"
ENV_CSV_SEP: str = "CSVPLATE_CSV_SEP"
ENV_STRICT: str = "CSVPLATE_STRICT"
ENV_LOG_LEVEL: str = "CSVPLATE_LOG_LEVEL"
ENV_LOG_LEVEL_FALLBACK: str = "LOG_LEVEL"
ENV_DISABLE_FILE_LOGS: str = "DISABLE_FILE_LOGS"
TRUTHY_ENV_VALUES: frozenset[str] = frozenset({"1", "true", "yes", "on"})

# Logging
DEFAULT_LOG_LEVEL: str = "WARNING"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
