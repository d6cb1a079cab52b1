"""Resolution tests: named lookups, magic sniffing, sorted and single-entry modes."""

from __future__ import annotations

import io
import logging
import struct

import pytest

from avarc.archive_table import ArchiveTable
from avarc.byteio import read_from_bytes
from avarc.errors import EntryNotFoundError
from avarc.filelists import FileListEntry
from avarc.jenkins import hash_string
from avarc.packed_archive import (
    detect_file_extension,
    find_entry,
    read_archive,
    read_entry,
    read_from_file_lists,
    read_packed_archive,
    read_sorted,
)


# ── Helpers ─────────────────────────────────────────────────────────────────


def _build(files: list[tuple[int, bytes]]) -> tuple[bytes, bytes]:
    """Return ``(tab, arc)`` bytes for ``(name_hash, contents)`` pairs."""
    tab = b"TAB\x00" + struct.pack("<HHI", 2, 1, 0x800)
    arc = b""
    for name_hash, contents in files:
        tab += struct.pack("<III", name_hash, len(arc), len(contents))
        arc += contents
    return tab, arc


def _write_archive(game_dir, arc_name: str, files: list[tuple[int, bytes]]) -> None:
    tab, arc = _build(files)
    base = game_dir / arc_name
    base.parent.mkdir(parents=True, exist_ok=True)
    base.with_suffix(".tab").write_bytes(tab)
    base.with_suffix(".arc").write_bytes(arc)


DDS = b"\x20\x53\x44\x44" + b"\x00" * 60
INTRO = "ui/intro.gfx"
INTRO_HASH = 2386027578


# ── Magic sniffing ──────────────────────────────────────────────────────────


@pytest.mark.parametrize("guess, extension", [
    (b"\x20\x53\x44\x44\x7c\x00\x00\x00", "dds"),
    (b"ADF \x01\x00\x00\x00", "adf"),
    (b"CPTR", "rtpc"),
    (b"\x57\xe0\xe0\x57", "ban"),
    (b"5BSF\x01", "fsb5"),
    (b"\x00\x00\x00\x30\x00\x00\x00\x0e", "btc"),
    (b"DNBR\x00\x00\x00\x05rest", "rbn"),
    (b"DSBR\x00\x00\x00\x05", "rbs"),
    (b"\x01\x04\x00", "bin"),
    (b"\x01\x04\x00\x00\x00\x00\x00\x00", "bin"),
    (b"", "null"),
    (b"\x01\x04", "unknown"),
    (b"text file", "unknown"),
])
def test_detect_file_extension(guess, extension):
    assert detect_file_extension(guess) == extension


def test_eight_byte_magic_needs_eight_bytes():
    assert detect_file_extension(b"DNBR\x00\x00\x00") == "unknown"


# ── Hash-map mode ───────────────────────────────────────────────────────────


def test_named_and_unknown_entries():
    tab, arc = _build([(INTRO_HASH, b"gfx data"), (42, DDS), (7, b""), (9, b"plain")])
    table = read_from_bytes(ArchiveTable, tab)
    entries = read_packed_archive(io.BytesIO(arc), table, {INTRO_HASH: INTRO})

    assert [e.name for e in entries] == [
        INTRO,
        "__UNKNOWN/dds/42.dds",
        "__UNKNOWN/null/7.null",
        "__UNKNOWN/unknown/9.unknown",
    ]
    assert entries[0].contents == b"gfx data"
    assert entries[1].contents == DDS
    assert entries[2].contents == b""


def test_sniff_reads_at_entry_offset():
    tab, arc = _build([(1, b"\x01\x02\x03\x04" * 20), (2, b"\x01\x04\x00rest")])
    table = read_from_bytes(ArchiveTable, tab)
    entries = read_packed_archive(io.BytesIO(arc), table, {})
    assert entries[1].name == "__UNKNOWN/bin/2.bin"
    assert entries[1].contents == b"\x01\x04\x00rest"


def test_unknown_hash_uses_decimal():
    tab, arc = _build([(0xFFFFFFFF, DDS)])
    table = read_from_bytes(ArchiveTable, tab)
    (entry,) = read_packed_archive(io.BytesIO(arc), table, {})
    assert entry.name == "__UNKNOWN/dds/4294967295.dds"


def test_short_payload_returns_available_bytes(caplog):
    tab = b"TAB\x00" + struct.pack("<HHI", 2, 1, 0x800) + struct.pack("<III", 5, 0, 100)
    table = read_from_bytes(ArchiveTable, tab)
    with caplog.at_level(logging.WARNING, logger="avarc"):
        (entry,) = read_packed_archive(io.BytesIO(b"\x01\x04\x00abc"), table, {})
    assert entry.name == "__UNKNOWN/bin/5.bin"
    assert entry.contents == b"\x01\x04\x00abc"
    assert "read 6 of 100 bytes" in caplog.text


def test_read_archive_from_paths(tmp_path):
    _write_archive(tmp_path, "game0", [(INTRO_HASH, b"x")])
    entries = read_archive(tmp_path / "game0.tab", tmp_path / "game0.arc", {INTRO_HASH: INTRO})
    assert [(e.name, e.contents) for e in entries] == [(INTRO, b"x")]


# ── Sorted-list mode ────────────────────────────────────────────────────────


def test_sorted_mode_skips_unnamed():
    names = ["textures/a.ddsc", "textures/b.ddsc", "models/c.modelc"]
    files = [(hash_string(n), n.encode()) for n in names] + [(12345, DDS)]
    tab, arc = _build(files)
    table = read_from_bytes(ArchiveTable, tab)
    file_list = [FileListEntry(n, hash_string(n)) for n in reversed(names)]
    file_list.append(FileListEntry("not/in/archive", hash_string("not/in/archive")))

    entries = read_sorted(io.BytesIO(arc), table, file_list)
    assert [e.name for e in entries] == names
    assert [e.contents for e in entries] == [n.encode() for n in names]


def test_sorted_mode_empty_list():
    tab, arc = _build([(1, b"a")])
    table = read_from_bytes(ArchiveTable, tab)
    assert read_sorted(io.BytesIO(arc), table, []) == []


def test_read_from_file_lists(tmp_path):
    _write_archive(tmp_path, "archives_win64/game0", [(INTRO_HASH, b"intro"), (5, b"?")])
    _write_archive(tmp_path, "archives_win64/game1", [(hash_string("a/b"), b"ab")])
    file_lists = {
        "archives_win64/game0": [FileListEntry(INTRO, INTRO_HASH, "archives_win64/game0")],
        "archives_win64/game1": [FileListEntry("a/b", hash_string("a/b"), "archives_win64/game1")],
    }
    entries = read_from_file_lists(file_lists, tmp_path)
    assert [(e.name, e.contents) for e in entries] == [(INTRO, b"intro"), ("a/b", b"ab")]


# ── Single-entry mode ───────────────────────────────────────────────────────


def test_read_entry(tmp_path):
    _write_archive(tmp_path, "archives_win64/game0", [(9, b"nine"), (INTRO_HASH, b"intro"), (1, b"")])
    entry = read_entry(FileListEntry(INTRO, INTRO_HASH, "archives_win64/game0"), tmp_path)
    assert entry.name == INTRO
    assert entry.contents == b"intro"


def test_read_entry_not_found(tmp_path):
    _write_archive(tmp_path, "game0", [(9, b"nine")])
    with pytest.raises(EntryNotFoundError, match="not found"):
        read_entry(FileListEntry(INTRO, INTRO_HASH, "game0"), tmp_path)


def test_find_entry_hashes_name():
    tab, _ = _build([(3, b"abc"), (INTRO_HASH, b"zz")])
    table = read_from_bytes(ArchiveTable, tab)
    entry = find_entry(table, INTRO)
    assert (entry.offset, entry.size) == (3, 2)
