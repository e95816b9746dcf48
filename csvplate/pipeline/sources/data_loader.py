"""CSV loading for the renderers.

This module turns decoded delimited text into an ordered list of records,
one ``dict[str, str]`` per data row, keyed by the header names plus the
configured counter key. The whole source is parsed in one batch.

Column-count mismatches are tolerated on purpose: short rows are padded with
empty strings and extra trailing values are dropped, so templates only ever
have to deal with missing values as ``""``.
"""

from __future__ import annotations

import csv
import io
import logging
import sys
from dataclasses import dataclass, field

from csvplate.config import DEFAULT_COUNTER_KEY, DEFAULT_CSV_SEPARATOR, NO_HEADER_FIELD_FORMAT
from csvplate.exceptions import EmptySourceError, MalformedInputError

logger = logging.getLogger(__name__)

Record = dict[str, str]


@dataclass
class LoadedTable:
    """Result of loading one CSV source.

    Attributes
    ----------
    header : list[str]
        Field names applied to every record, in column order.
    records : list[Record]
        One mapping per emitted data row, in source order.
    """

    header: list[str]
    records: list[Record] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)


def _lift_field_size_limit() -> None:
    """Remove the ``csv`` module's per-field size cap.

    ``sys.maxsize`` overflows the C long on some platforms, so the limit is
    halved until it is accepted.
    """
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            return
        except OverflowError:
            limit //= 2


def parse_rows(text: str, separator: str = DEFAULT_CSV_SEPARATOR) -> list[list[str]]:
    """Parse delimited text into rows, dropping rows with zero columns.

    Parameters
    ----------
    text : str
        Decoded CSV content.
    separator : str
        Single-character field separator.

    Returns
    -------
    list[list[str]]
        Non-blank rows in source order.

    Raises
    ------
    MalformedInputError
        If the text is not valid delimited syntax (e.g. an unterminated
        quoted field).

    Examples
    --------
    >>> parse_rows('a;b\\n\\n"x;y";z\\n', ";")
    [['a', 'b'], ['x;y', 'z']]
    """
    _lift_field_size_limit()
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=separator, strict=True)
    try:
        return [row for row in reader if row]
    except csv.Error as error:
        raise MalformedInputError(
            f"read csv: line {reader.line_num}: {error}",
            context={"line": reader.line_num},
        ) from error


def build_header(first_row: list[str], no_header: bool) -> list[str]:
    """Return the field names for a table whose first row is ``first_row``.

    Examples
    --------
    >>> build_header(["x", "y", "z"], no_header=True)
    ['C1', 'C2', 'C3']
    >>> build_header(["name", "age"], no_header=False)
    ['name', 'age']
    """
    if no_header:
        return [NO_HEADER_FIELD_FORMAT.format(index=i) for i in range(1, len(first_row) + 1)]
    return list(first_row)


def build_record(header: list[str], row: list[str], counter_key: str, ordinal: int) -> Record:
    """Zip one data row onto the header and stamp the counter field.

    Missing trailing values become ``""`` and surplus values are ignored.
    The counter is written last, so a header column with the same name as
    ``counter_key`` is overwritten.

    Examples
    --------
    >>> build_record(["a", "b"], ["1"], "_index_", 3)
    {'a': '1', 'b': '', '_index_': '3'}
    """
    record: Record = {
        name: row[i] if i < len(row) else "" for i, name in enumerate(header)
    }
    record[counter_key] = str(ordinal)
    return record


def load_table(
    text: str,
    *,
    separator: str = DEFAULT_CSV_SEPARATOR,
    no_header: bool = False,
    counter_key: str = DEFAULT_COUNTER_KEY,
) -> LoadedTable:
    """Load CSV text into a header and an ordered list of records.

    Parameters
    ----------
    text : str
        Decoded CSV content.
    separator : str, optional
        Field separator. Defaults to a comma.
    no_header : bool, optional
        When True the first row is data and field names are synthesized as
        ``C1..Cn`` from its column count.
    counter_key : str, optional
        Name of the synthetic 1-based row counter field.

    Returns
    -------
    LoadedTable
        The resolved header and the records. A source holding only a header
        row yields zero records.

    Raises
    ------
    EmptySourceError
        If the source contains no rows at all.
    MalformedInputError
        If the delimited syntax is invalid.

    Examples
    --------
    >>> table = load_table("name,age\\nAda,36\\nAlan\\n")
    >>> table.header
    ['name', 'age']
    >>> table.records[1]
    {'name': 'Alan', 'age': '', '_index_': '2'}
    """
    rows = parse_rows(text, separator)
    if not rows:
        raise EmptySourceError()

    header = build_header(rows[0], no_header)
    data_rows = rows if no_header else rows[1:]
    records = [
        build_record(header, row, counter_key, ordinal)
        for ordinal, row in enumerate(data_rows, start=1)
    ]
    if counter_key in header:
        logger.debug("Counter key %r shadows a CSV column of the same name", counter_key)
    logger.info("Loaded %d records with %d fields", len(records), len(header))
    return LoadedTable(header=header, records=records)
