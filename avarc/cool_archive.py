"""Chunked compression container (AAF) reader.

Header (48 B)::

    magic[4] version(u32)=1 comment[28] total_uncompressed_size(u32)
    block_size(u32) block_count(u32)

Each block starts with ``compressed_size(u32) uncompressed_size(u32)
next_offset(u32) magic[4]``.  The zlib stream is inflated starting at the
block's *own* header offset, not after it, and the cursor then moves to
``header_offset + next_offset``.
"""

from __future__ import annotations

import os
import zlib
from dataclasses import dataclass
from typing import BinaryIO

from .byteio import read_bytes, read_u32, to_size, validate_signature
from .errors import DecompressionError, FormatError, SizeOverflowError, TruncatedError
from .format import (
    COOL_CHUNK_SIGNATURE,
    COOL_COMMENT,
    COOL_SIGNATURE,
    COOL_VERSION,
    DECODE_BLOCK,
    MAX_CHUNK_COUNT,
    MAX_CHUNK_ULEN,
)


@dataclass(frozen=True)
class CoolArchiveChunk:
    data_offset: int
    compressed_size: int
    uncompressed_size: int
    contents: bytes


@dataclass(frozen=True)
class CoolArchive:
    le: bool
    total_uncompressed_size: int
    block_size: int
    chunks: tuple[CoolArchiveChunk, ...]

    @classmethod
    def read(cls, stream: BinaryIO) -> CoolArchive:
        le = validate_signature(stream, COOL_SIGNATURE)

        version = read_u32(stream, le)
        if version != COOL_VERSION:
            raise FormatError(f"version did not match: {version} != {COOL_VERSION}")

        comment = read_bytes(stream, len(COOL_COMMENT))
        if comment != COOL_COMMENT:
            raise FormatError(f"comment did not match: {comment!r}")

        total_uncompressed_size = read_u32(stream, le)
        block_size = read_u32(stream, le)
        block_count = read_u32(stream, le)
        if block_count > MAX_CHUNK_COUNT:
            raise SizeOverflowError(
                f"block_count {block_count} exceeds safety cap "
                f"({MAX_CHUNK_COUNT}); refusing to parse"
            )

        chunks = []
        for index in range(block_count):
            chunks.append(_read_chunk(stream, le, index))

        return cls(
            le=le,
            total_uncompressed_size=total_uncompressed_size,
            block_size=block_size,
            chunks=tuple(chunks),
        )

    def decompress(self) -> bytes:
        """Concatenated contents of every chunk."""
        return b"".join(chunk.contents for chunk in self.chunks)


def _read_chunk(stream: BinaryIO, le: bool, index: int) -> CoolArchiveChunk:
    data_offset = stream.tell()

    compressed_size = read_u32(stream, le)
    uncompressed_size = read_u32(stream, le)
    next_offset = read_u32(stream, le)
    magic = read_bytes(stream, len(COOL_CHUNK_SIGNATURE))
    if magic != COOL_CHUNK_SIGNATURE:
        raise FormatError(f"chunk {index} signature did not match: {magic!r}")

    size = to_size(uncompressed_size, "uncompressed_size")
    if size > MAX_CHUNK_ULEN:
        raise SizeOverflowError(
            f"chunk {index} uncompressed_size {size} exceeds safety cap "
            f"({MAX_CHUNK_ULEN}); refusing to decompress"
        )

    stream.seek(data_offset)
    contents = _inflate(stream, size)
    if len(contents) != size:
        raise TruncatedError(
            f"chunk {index} inflated to {len(contents)} bytes, expected {size}"
        )

    stream.seek(data_offset + next_offset, os.SEEK_SET)
    return CoolArchiveChunk(
        data_offset=data_offset,
        compressed_size=compressed_size,
        uncompressed_size=uncompressed_size,
        contents=contents,
    )


def _inflate(stream: BinaryIO, size: int) -> bytes:
    """Inflate a zlib stream from the cursor, producing at most *size* bytes."""
    decoder = zlib.decompressobj()
    out = bytearray()
    try:
        while len(out) < size and not decoder.eof:
            data = decoder.unconsumed_tail or stream.read(DECODE_BLOCK)
            if not data:
                break
            out += decoder.decompress(data, size - len(out))
    except zlib.error as exc:
        raise DecompressionError(f"zlib stream is invalid: {exc}") from exc
    return bytes(out)
