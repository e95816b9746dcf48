"""Tests for the CSV loader.

Covers header handling, the permissive padding/truncation policy, blank
row skipping with contiguous counters, counter-key collisions, custom
separators and the empty/malformed source errors.
"""

import pytest

from csvplate.exceptions import EmptySourceError, MalformedInputError
from csvplate.pipeline.sources.data_loader import build_record, load_table, parse_rows


def test_header_row_becomes_field_names() -> None:
    table = load_table("name,age\nAda,36\nAlan,41\n")
    assert table.header == ["name", "age"]
    assert len(table) == 2
    assert table.records == [
        {"name": "Ada", "age": "36", "_index_": "1"},
        {"name": "Alan", "age": "41", "_index_": "2"},
    ]
    assert list(table.records[0]) == ["name", "age", "_index_"]


def test_every_record_has_header_keys_plus_counter() -> None:
    table = load_table("a,b,c\n1,2,3\n4\n5,6,7,8,9\n")
    for record in table.records:
        assert set(record) == {"a", "b", "c", "_index_"}


def test_short_rows_padded_and_long_rows_truncated() -> None:
    table = load_table("a,b,c\n1\n1,2,3,4,5\n")
    assert table.records[0] == {"a": "1", "b": "", "c": "", "_index_": "1"}
    assert table.records[1] == {"a": "1", "b": "2", "c": "3", "_index_": "2"}


def test_blank_rows_skipped_and_counter_contiguous() -> None:
    table = load_table("name\n\nAda\n\n\nAlan\n\nGrace\n")
    assert [r["name"] for r in table.records] == ["Ada", "Alan", "Grace"]
    assert [r["_index_"] for r in table.records] == ["1", "2", "3"]


def test_noheader_synthesizes_column_names() -> None:
    table = load_table("x,y,z\n1,2\n", no_header=True)
    assert table.header == ["C1", "C2", "C3"]
    assert table.records[0] == {"C1": "x", "C2": "y", "C3": "z", "_index_": "1"}
    assert table.records[1] == {"C1": "1", "C2": "2", "C3": "", "_index_": "2"}


def test_noheader_uses_first_nonblank_row_width() -> None:
    table = load_table("\n\na;b\nc;d;e\n", separator=";", no_header=True)
    assert table.header == ["C1", "C2"]
    assert table.records[1] == {"C1": "c", "C2": "d", "_index_": "2"}


def test_custom_counter_key_and_collision_overwrites_column() -> None:
    table = load_table("id,name\n7,Ada\n", counter_key="n")
    assert table.records[0]["n"] == "1"

    collided = load_table("id,name\n7,Ada\n9,Alan\n", counter_key="id")
    assert [r["id"] for r in collided.records] == ["1", "2"]
    assert list(collided.records[0]) == ["id", "name"]


def test_semicolon_separator_and_quoted_fields() -> None:
    table = load_table('nom;ville\n"Dupont; Jean";"Paris\nCedex"\n', separator=";")
    assert table.records[0]["nom"] == "Dupont; Jean"
    assert table.records[0]["ville"] == "Paris\nCedex"


def test_values_are_never_type_converted() -> None:
    table = load_table("n,flag\n007,true\n")
    assert table.records[0] == {"n": "007", "flag": "true", "_index_": "1"}


def test_header_only_source_has_no_records() -> None:
    table = load_table("name,age\n")
    assert table.header == ["name", "age"]
    assert table.records == []


@pytest.mark.parametrize("text", ["", "\n", "\r\n\r\n"])
def test_empty_source_raises(text: str) -> None:
    with pytest.raises(EmptySourceError) as excinfo:
        load_table(text)
    assert "empty" in excinfo.value.message


def test_unbalanced_quote_is_malformed() -> None:
    with pytest.raises(MalformedInputError) as excinfo:
        load_table('name,age\n"Ada,36\n')
    assert excinfo.value.code == "MALFORMED_INPUT"


def test_parse_rows_handles_crlf() -> None:
    assert parse_rows("a,b\r\nc,d\r\n") == [["a", "b"], ["c", "d"]]


def test_build_record_counter_is_written_last() -> None:
    record = build_record(["a", "_index_"], ["x", "y"], "_index_", 5)
    assert record == {"a": "x", "_index_": "5"}


def test_very_large_field_is_not_malformed() -> None:
    bio = "x" * 200_000
    table = load_table("name,bio\nAda," + bio + "\n")
    assert table.records[0]["bio"] == bio


def test_very_large_quoted_field_with_separators() -> None:
    notes = ("a,b;" * 60_000) + "\nend"
    table = load_table('name,notes\nAda,"' + notes + '"\n')
    assert table.records[0]["notes"] == notes
