"""Input side of the pipeline: designators, decoding and CSV loading."""

from .data_loader import LoadedTable, Record, build_header, build_record, load_table, parse_rows
from .designators import Designator, DesignatorKind, decode_content, read_content, resolve_designator

__all__ = [
    "Designator",
    "DesignatorKind",
    "LoadedTable",
    "Record",
    "build_header",
    "build_record",
    "decode_content",
    "load_table",
    "parse_rows",
    "read_content",
    "resolve_designator",
]
