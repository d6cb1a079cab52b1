"""Table archive (``.tab``) reader.

A ``.tab`` file indexes the blob stored in the matching ``.arc`` file::

    magic[4]  unknown_04(u16)=2  unknown_06(u16)=1  alignment(u32)=0x800
    { name_hash(u32) offset(u32) size(u32) } ...   until < 12 bytes remain

Any trailing remainder shorter than one record is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import BinaryIO

import numpy as np

from .byteio import read_bytes, read_u16, read_u32, stream_length, to_size, validate_signature
from .errors import EntryNotFoundError, FormatError
from .format import (
    TABLE_ALIGNMENT,
    TABLE_RECORD_SIZE,
    TABLE_SIGNATURE,
    TABLE_UNKNOWN_04,
    TABLE_UNKNOWN_06,
)


def record_dtype(le: bool) -> np.dtype:
    """Structured dtype for one 12-byte record in the given byte order."""
    u4 = "<u4" if le else ">u4"
    return np.dtype([("name_hash", u4), ("offset", u4), ("size", u4)])


assert record_dtype(True).itemsize == TABLE_RECORD_SIZE


@dataclass(frozen=True)
class TableEntry:
    """Location of one asset inside the blob."""

    name_hash: int
    offset: int
    size: int


@dataclass(frozen=True)
class ArchiveTable:
    """Parsed ``.tab`` file; entries keep their on-disk order."""

    le: bool
    alignment: int
    entries: tuple[TableEntry, ...]

    @classmethod
    def read(cls, stream: BinaryIO) -> ArchiveTable:
        le = validate_signature(stream, TABLE_SIGNATURE)

        unknown_04 = read_u16(stream, le)
        unknown_06 = read_u16(stream, le)
        if unknown_04 != TABLE_UNKNOWN_04 or unknown_06 != TABLE_UNKNOWN_06:
            raise FormatError(
                f"unknown header fields did not match: "
                f"({unknown_04}, {unknown_06}) != "
                f"({TABLE_UNKNOWN_04}, {TABLE_UNKNOWN_06})"
            )

        alignment = read_u32(stream, le)
        if alignment != TABLE_ALIGNMENT:
            raise FormatError(
                f"alignment did not match: 0x{alignment:x} != 0x{TABLE_ALIGNMENT:x}"
            )

        remaining = stream_length(stream) - stream.tell()
        count = max(remaining, 0) // TABLE_RECORD_SIZE
        raw = read_bytes(stream, count * TABLE_RECORD_SIZE)
        records = np.frombuffer(raw, dtype=record_dtype(le))

        entries = tuple(
            TableEntry(
                name_hash=name_hash,
                offset=to_size(offset, "offset"),
                size=to_size(size, "size"),
            )
            for name_hash, offset, size in records.tolist()
        )
        return cls(le=le, alignment=alignment, entries=entries)

    # ── Sorted lookup ────────────────────────────────────────────────────

    @cached_property
    def _order(self) -> np.ndarray:
        return np.argsort(self.hashes(), kind="stable")

    @cached_property
    def _sorted_hashes(self) -> np.ndarray:
        return self.hashes()[self._order]

    def hashes(self) -> np.ndarray:
        """Name hashes as a ``uint32`` array, in on-disk order."""
        return np.fromiter(
            (e.name_hash for e in self.entries), dtype=np.uint32, count=len(self.entries)
        )

    def sorted_entries(self) -> list[TableEntry]:
        """Entries ordered by name hash (stable for duplicate hashes)."""
        return [self.entries[i] for i in self._order.tolist()]

    def find(self, name_hash: int) -> TableEntry:
        """Binary-search the entry carrying *name_hash*."""
        if not 0 <= name_hash <= 0xFFFFFFFF:
            raise EntryNotFoundError(f"archive table entry {name_hash} not found")
        pos = int(np.searchsorted(self._sorted_hashes, np.uint32(name_hash)))
        if pos < len(self._sorted_hashes) and int(self._sorted_hashes[pos]) == name_hash:
            return self.entries[int(self._order[pos])]
        raise EntryNotFoundError(f"archive table entry 0x{name_hash:08x} not found")

    def __len__(self) -> int:
        return len(self.entries)
