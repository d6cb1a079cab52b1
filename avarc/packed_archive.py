"""Resolve table entries against a name index and read their payloads.

Three access modes:

* :func:`read_packed_archive` — hash -> name mapping; unknown hashes are
  named from a magic-byte sniff (``__UNKNOWN/<ext>/<hash>.<ext>``).
* :func:`read_sorted` — list of file list entries, binary-searched by
  hash; table entries without a name are skipped.
* :func:`read_entry` — one named entry, located without materializing
  the blob.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import BinaryIO, Mapping, Sequence

import numpy as np

from .archive_table import ArchiveTable, TableEntry
from .byteio import read_from_path
from .errors import EntryNotFoundError
from .filelists import FileListEntry, FileLists
from .format import (
    BIN_PREFIX,
    MAGIC_4_EXTENSIONS,
    MAGIC_8_EXTENSIONS,
    SNIFF_LENGTH,
    UNKNOWN_DIR,
)
from .jenkins import hash_string

logger = logging.getLogger("avarc")

TABLE_SUFFIX = ".tab"
BLOB_SUFFIX = ".arc"


@dataclass(frozen=True)
class PackedArchiveEntry:
    name: str
    contents: bytes


# ── Magic sniffing ──────────────────────────────────────────────────────────


def detect_file_extension(guess: bytes) -> str:
    """Guess an extension from the first bytes of a payload."""
    if not guess:
        return "null"

    if len(guess) >= 4:
        magic = int.from_bytes(guess[:4], "big")
        if magic in MAGIC_4_EXTENSIONS:
            return MAGIC_4_EXTENSIONS[magic]

    if len(guess) >= 8:
        magic = int.from_bytes(guess[:8], "big")
        if magic in MAGIC_8_EXTENSIONS:
            return MAGIC_8_EXTENSIONS[magic]

    if guess[:3] == BIN_PREFIX:
        return "bin"

    return "unknown"


def unknown_name(name_hash: int, extension: str) -> str:
    return f"{UNKNOWN_DIR}/{extension}/{name_hash}.{extension}"


def _sniff(stream: BinaryIO, entry: TableEntry) -> str:
    stream.seek(entry.offset)
    guess = stream.read(min(SNIFF_LENGTH, entry.size))
    return detect_file_extension(guess)


def _read_contents(stream: BinaryIO, entry: TableEntry) -> bytes:
    stream.seek(entry.offset)
    contents = stream.read(entry.size)
    if len(contents) < entry.size:
        logger.warning(
            "entry 0x%08x: read %d of %d bytes at offset %d",
            entry.name_hash, len(contents), entry.size, entry.offset,
        )
    return contents


# ── Resolution ──────────────────────────────────────────────────────────────


def read_packed_archive(
    stream: BinaryIO,
    table: ArchiveTable,
    names: Mapping[int, str],
) -> list[PackedArchiveEntry]:
    """Read every entry of *table* from the blob *stream*, in table order."""
    entries = []
    for entry in table.entries:
        name = names.get(entry.name_hash)
        if name is None:
            extension = _sniff(stream, entry)
            name = unknown_name(entry.name_hash, extension)
            logger.debug("unresolved hash %d sniffed as %s", entry.name_hash, extension)
        entries.append(PackedArchiveEntry(name=name, contents=_read_contents(stream, entry)))
    return entries


def read_sorted(
    stream: BinaryIO,
    table: ArchiveTable,
    file_list: Sequence[FileListEntry],
) -> list[PackedArchiveEntry]:
    """Read the entries of *table* named in *file_list*, skipping the rest."""
    ordered = sorted(file_list, key=lambda e: e.name_hash)
    hashes = np.fromiter((e.name_hash for e in ordered), dtype=np.uint32, count=len(ordered))

    entries = []
    skipped = 0
    for entry in table.entries:
        pos = int(np.searchsorted(hashes, np.uint32(entry.name_hash)))
        if pos == len(hashes) or int(hashes[pos]) != entry.name_hash:
            skipped += 1
            continue
        entries.append(
            PackedArchiveEntry(name=ordered[pos].name, contents=_read_contents(stream, entry))
        )
    if skipped:
        logger.debug("skipped %d entries without a name", skipped)
    return entries


def read_archive(
    table_path: str | os.PathLike,
    blob_path: str | os.PathLike,
    names: Mapping[int, str],
) -> list[PackedArchiveEntry]:
    table = read_from_path(ArchiveTable, table_path)
    with open(blob_path, "rb") as blob:
        return read_packed_archive(blob, table, names)


def archive_paths(arc_name: str, game_dir: str | os.PathLike) -> tuple[str, str]:
    """``(table, blob)`` paths for an archive id below *game_dir*."""
    base = os.path.join(os.fspath(game_dir), arc_name)
    return base + TABLE_SUFFIX, base + BLOB_SUFFIX


def read_from_file_lists(
    file_lists: FileLists,
    game_dir: str | os.PathLike,
) -> list[PackedArchiveEntry]:
    """Resolve every archive in *file_lists*, one independent pass each."""
    entries = []
    for arc_name, file_list in file_lists.items():
        table_path, blob_path = archive_paths(arc_name, game_dir)
        table = read_from_path(ArchiveTable, table_path)
        with open(blob_path, "rb") as blob:
            resolved = read_sorted(blob, table, file_list)
        logger.info("%s: %d of %d entries resolved", arc_name, len(resolved), len(table))
        entries.extend(resolved)
    return entries


def find_entry(table: ArchiveTable, name: str) -> TableEntry:
    """Binary-search *table* for the hash of *name*."""
    try:
        return table.find(hash_string(name))
    except EntryNotFoundError:
        raise EntryNotFoundError(f"archive table entry not found: {name!r}") from None


def read_entry(
    file_list_entry: FileListEntry,
    game_dir: str | os.PathLike,
) -> PackedArchiveEntry:
    """Read a single named entry from ``<game_dir>/<arc_name>.tab/.arc``."""
    table_path, blob_path = archive_paths(file_list_entry.arc_name, game_dir)
    table = read_from_path(ArchiveTable, table_path)
    entry = find_entry(table, file_list_entry.name)
    with open(blob_path, "rb") as blob:
        contents = _read_contents(blob, entry)
    return PackedArchiveEntry(name=file_list_entry.name, contents=contents)
