"""Unit tests for designator resolution and content decoding.

Covers the stdin sentinel, existing paths, the missing-file-as-literal
fallback, unreadable sources and the encoding normalization rules.
"""

import io
from pathlib import Path

import pytest

from csvplate.exceptions import SourceUnavailableError
from csvplate.pipeline.sources import designators as dsg
from csvplate.pipeline.sources.designators import (
    Designator,
    DesignatorKind,
    decode_content,
    read_content,
    resolve_designator,
)


@pytest.mark.parametrize("value", ["", "-"])
def test_empty_and_dash_mean_stdin(value: str) -> None:
    designator = resolve_designator(value)
    assert designator.kind is DesignatorKind.STDIN
    assert designator.is_stdin
    assert designator.describe() == "<stdin>"


def test_existing_file_is_a_path(tmp_path: Path) -> None:
    p = tmp_path / "data.csv"
    p.write_text("a,b\n", encoding="utf-8")
    designator = resolve_designator(str(p))
    assert designator == Designator(DesignatorKind.PATH, str(p))
    assert designator.describe() == str(p)


def test_missing_file_is_literal_content(tmp_path: Path) -> None:
    body = "Hello {{ name }}!\n"
    designator = resolve_designator(body)
    assert designator.kind is DesignatorKind.LITERAL
    assert read_content(designator, io.BytesIO()) == body

    missing = str(tmp_path / "nope.txt")
    assert resolve_designator(missing).kind is DesignatorKind.LITERAL


def test_overlong_and_nul_values_are_literal() -> None:
    assert resolve_designator("x" * 5000).kind is DesignatorKind.LITERAL
    assert resolve_designator("a\0b").kind is DesignatorKind.LITERAL


def test_stat_failure_other_than_missing_is_fatal(monkeypatch) -> None:
    def deny(path, *a, **k):
        raise PermissionError(13, "Permission denied", path)

    monkeypatch.setattr(dsg.os, "stat", deny)
    with pytest.raises(SourceUnavailableError) as excinfo:
        resolve_designator("/secret/data.csv")
    assert "Permission denied" in excinfo.value.message


def test_read_content_from_path_and_stdin(tmp_path: Path) -> None:
    p = tmp_path / "tpl.txt"
    p.write_bytes(b"\xef\xbb\xbfline\r\n")
    assert read_content(resolve_designator(str(p)), io.BytesIO()) == "line\r\n"

    stdin = io.BytesIO("from stdin ✓".encode("utf-8"))
    assert read_content(resolve_designator("-"), stdin) == "from stdin ✓"


def test_read_content_directory_is_unavailable(tmp_path: Path) -> None:
    designator = resolve_designator(str(tmp_path))
    assert designator.kind is DesignatorKind.PATH
    with pytest.raises(SourceUnavailableError):
        read_content(designator, io.BytesIO())


def test_decode_utf8_passthrough_and_bom() -> None:
    assert decode_content(b"") == ""
    assert decode_content("Åsa,Örebro".encode("utf-8")) == "Åsa,Örebro"
    assert decode_content(b"\xef\xbb\xbfname") == "name"


def test_decode_western_single_byte_text() -> None:
    text = (
        "Prénom;Nom;Ville;Commentaire\n"
        "Élodie;Lefèvre;Québec;Très bien, déjà payé\n"
        "Jérôme;Bérénice;Orléans;À côté de la fenêtre, près du château\n"
        "Hélène;Garçon;Besançon;Leçon terminée, réunion à l'été prochain\n"
    )
    assert decode_content(text.encode("cp1252")) == text


def test_decode_falls_back_to_cp1252_when_detection_fails(monkeypatch) -> None:
    class _NoMatch:
        def best(self):
            return None

    monkeypatch.setattr(dsg, "from_bytes", lambda data, **kwargs: _NoMatch())
    assert decode_content(b"ok \xff") == "ok ÿ"


def test_decode_uses_detected_encoding(monkeypatch) -> None:
    class _Match:
        encoding = "latin_1"

        def __str__(self) -> str:
            return "decoded"

    class _Matches:
        def best(self):
            return _Match()

    monkeypatch.setattr(dsg, "from_bytes", lambda data, **kwargs: _Matches())
    assert decode_content(b"caf\xe9") == "decoded"


@pytest.mark.parametrize(
    "text",
    ["René,Liège", "name\nJosé\n", "ville;pays\nQuébec;Canada\n", "Größe,Maß\n1,2\n"],
)
@pytest.mark.parametrize("encoding", ["latin-1", "cp1252"])
def test_decode_short_western_rows(text: str, encoding: str) -> None:
    assert decode_content(text.encode(encoding)) == text


def test_decode_cp1252_specific_characters() -> None:
    text = "item;price\nCafé crème;3€\n"
    assert decode_content(text.encode("cp1252")) == text


def test_detection_is_limited_to_western_code_pages(monkeypatch) -> None:
    seen = {}

    class _NoMatch:
        def best(self):
            return None

    def fake_from_bytes(data, **kwargs):
        seen.update(kwargs)
        return _NoMatch()

    monkeypatch.setattr(dsg, "from_bytes", fake_from_bytes)
    decode_content("Liège".encode("latin-1"))
    assert "cp1252" in seen["cp_isolation"]
    assert "cp1250" not in seen["cp_isolation"]


@pytest.mark.parametrize("encoding", ["utf-16", "utf-32"])
def test_decode_bom_marked_utf16_and_utf32(encoding: str) -> None:
    text = "name,city\nAda,Liège\n"
    assert decode_content(text.encode(encoding)) == text
