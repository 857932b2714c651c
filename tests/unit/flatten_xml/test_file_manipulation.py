from __future__ import annotations

import os
from pathlib import Path

import pytest

from flatten_xml.config import BINARY_SNIFF_BYTES, FileType
from flatten_xml.exceptions import FileReadError
from flatten_xml.file_manipulation import (
    display_path,
    is_regular_file,
    read_file_record,
    relpath,
    sniff_encoding,
)


@pytest.mark.unit
def test_relpath_strips_current_directory_prefix(tmp_path: Path) -> None:
    assert relpath("./src/app.py", tmp_path) == "src/app.py"
    assert relpath(".//./src/app.py", tmp_path) == "src/app.py"
    assert relpath("src/app.py", tmp_path) == "src/app.py"


@pytest.mark.unit
def test_relpath_relativizes_absolute_paths_under_root(tmp_path: Path) -> None:
    inside = tmp_path / "src" / "app.py"
    outside = Path("/elsewhere/app.py")

    assert relpath(str(inside), tmp_path) == "src/app.py"
    assert relpath(str(outside), tmp_path) == "/elsewhere/app.py"


@pytest.mark.unit
def test_display_path_replaces_undecodable_bytes() -> None:
    name = os.fsdecode(b"caf\xe9.txt")

    assert display_path(name) == "caf�.txt"
    assert display_path("plain.txt") == "plain.txt"


@pytest.mark.unit
def test_is_regular_file(tmp_path: Path) -> None:
    f = tmp_path / "a.txt"
    f.write_text("a", encoding="utf-8")

    assert is_regular_file(str(f))
    assert not is_regular_file(str(tmp_path))
    with pytest.raises(OSError):  # noqa: PT011
        is_regular_file(str(tmp_path / "missing"))


@pytest.mark.unit
def test_read_text_file(tmp_path: Path) -> None:
    f = tmp_path / "a.txt"
    f.write_text("hello", encoding="utf-8")

    rec = read_file_record(str(f))

    assert rec.file_type is FileType.TEXT
    assert rec.content == "hello"
    assert rec.path == str(f)


@pytest.mark.unit
def test_read_binary_file_keeps_no_content(tmp_path: Path) -> None:
    f = tmp_path / "b.bin"
    f.write_bytes(b"\x00\x01\x02")

    rec = read_file_record(str(f))

    assert rec.is_binary
    assert rec.content is None


@pytest.mark.unit
def test_zero_byte_after_prefix_stays_text(tmp_path: Path) -> None:
    f = tmp_path / "late.dat"
    f.write_bytes(b"a" * BINARY_SNIFF_BYTES + b"\x00tail")

    rec = read_file_record(str(f))

    assert rec.file_type is FileType.TEXT
    assert rec.content is not None
    assert len(rec.content) == BINARY_SNIFF_BYTES + 5
    assert rec.content.endswith("\x00tail")


@pytest.mark.unit
def test_zero_byte_at_end_of_prefix_is_binary(tmp_path: Path) -> None:
    f = tmp_path / "edge.dat"
    f.write_bytes(b"a" * (BINARY_SNIFF_BYTES - 1) + b"\x00")

    assert read_file_record(str(f)).is_binary


@pytest.mark.unit
def test_invalid_utf8_is_replaced(tmp_path: Path) -> None:
    f = tmp_path / "latin1.txt"
    f.write_bytes(b"caf\xe9 au lait")

    assert read_file_record(str(f)).content == "caf� au lait"


@pytest.mark.unit
def test_multibyte_sequence_split_across_prefix_boundary(tmp_path: Path) -> None:
    f = tmp_path / "split.txt"
    f.write_bytes(b"a" * (BINARY_SNIFF_BYTES - 1) + "é".encode())

    assert read_file_record(str(f)).content == "a" * (BINARY_SNIFF_BYTES - 1) + "é"


@pytest.mark.unit
def test_byte_order_marks(tmp_path: Path) -> None:
    utf8 = tmp_path / "bom8.txt"
    utf8.write_bytes(b"\xef\xbb\xbfhello")
    utf16 = tmp_path / "bom16.txt"
    utf16.write_bytes("日本語".encode("utf-16"))

    assert sniff_encoding(utf16.read_bytes()) == "utf-16"
    assert read_file_record(str(utf8)).content == "hello"
    assert read_file_record(str(utf16)).content == "日本語"


@pytest.mark.unit
def test_missing_file_is_a_read_error(tmp_path: Path) -> None:
    with pytest.raises(FileReadError) as exc_info:
        read_file_record(str(tmp_path / "gone.txt"))

    assert exc_info.value.path.endswith("gone.txt")
    assert "gone.txt" in str(exc_info.value)
