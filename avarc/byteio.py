"""Endian-aware scalar I/O over seekable binary streams.

Every multi-byte helper takes an ``le`` flag: ``True`` for little-endian,
``False`` for big-endian.  The flag for a stream comes from
:func:`validate_signature`, which accepts the expected signature in either
byte order.

Codecs implement a single required operation, ``read(stream)`` (and
``write(stream)`` where writing is supported).  Path and buffer access is
layered on top by the free helpers at the bottom of this module::

    table = read_from_path(ArchiveTable, "archives_win64/game0.tab")
    texture = read_from_bytes(Texture, payload)
"""

from __future__ import annotations

import io
import os
import struct
import sys
from typing import BinaryIO, Protocol, TypeVar

from .errors import (
    FormatError,
    ShortReadError,
    ShortWriteError,
    SignatureError,
    SizeOverflowError,
)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


# ── Required capabilities ───────────────────────────────────────────────────


class Readable(Protocol[T_co]):
    def read(self, stream: BinaryIO) -> T_co: ...


class Writable(Protocol):
    def write(self, stream: BinaryIO) -> None: ...


# ── Stream helpers ──────────────────────────────────────────────────────────


def stream_length(stream: BinaryIO) -> int:
    """Return the total length of *stream* without moving its cursor."""
    position = stream.tell()
    end = stream.seek(0, os.SEEK_END)
    stream.seek(position)
    return end


def to_size(value: int, name: str = "value") -> int:
    """Check that an on-disk size/offset is addressable on this host."""
    if value < 0 or value > sys.maxsize:
        raise SizeOverflowError(f"{name} {value} is not addressable on this host")
    return value


# ── Reads ───────────────────────────────────────────────────────────────────


def read_bytes(stream: BinaryIO, length: int) -> bytes:
    """Read exactly *length* bytes."""
    data = stream.read(length)
    if len(data) < length:
        raise ShortReadError(
            f"expected {length} bytes, got {len(data)} "
            f"(stream offset {stream.tell()})"
        )
    return data


def _unpack(stream: BinaryIO, code: str, le: bool) -> int:
    fmt = ("<" if le else ">") + code
    return struct.unpack(fmt, read_bytes(stream, struct.calcsize(fmt)))[0]


def read_u8(stream: BinaryIO) -> int:
    return read_bytes(stream, 1)[0]


def read_s8(stream: BinaryIO) -> int:
    return _unpack(stream, "b", True)


def read_b8(stream: BinaryIO) -> bool:
    return read_u8(stream) > 0


def read_u16(stream: BinaryIO, le: bool) -> int:
    return _unpack(stream, "H", le)


def read_s16(stream: BinaryIO, le: bool) -> int:
    return _unpack(stream, "h", le)


def read_u32(stream: BinaryIO, le: bool) -> int:
    return _unpack(stream, "I", le)


def read_s32(stream: BinaryIO, le: bool) -> int:
    return _unpack(stream, "i", le)


def read_string(stream: BinaryIO, length: int) -> str:
    raw = read_bytes(stream, length)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise FormatError(f"invalid UTF-8 string: {exc}") from exc


def validate_signature(stream: BinaryIO, signature: bytes) -> bool:
    """Read ``len(signature)`` bytes and return the stream's byte order.

    ``True`` when the bytes match *signature* as given (little-endian
    files), ``False`` when they match it reversed (big-endian files).
    """
    magic = read_bytes(stream, len(signature))
    if magic == signature:
        return True
    if magic[::-1] == signature:
        return False
    raise SignatureError(
        f"bad signature: {magic!r} (expected {signature!r} in either byte order)"
    )


# ── Writes ──────────────────────────────────────────────────────────────────


def write_bytes(stream: BinaryIO, data: bytes) -> None:
    """Write all of *data*."""
    written = stream.write(data)
    if written is not None and written < len(data):
        raise ShortWriteError(f"wrote {written} of {len(data)} bytes")


def _pack(stream: BinaryIO, code: str, value: int, le: bool) -> None:
    try:
        raw = struct.pack(("<" if le else ">") + code, value)
    except struct.error as exc:
        raise FormatError(f"cannot encode {value!r} as {code!r}: {exc}") from exc
    write_bytes(stream, raw)


def write_u8(stream: BinaryIO, value: int) -> None:
    _pack(stream, "B", value, True)


def write_s8(stream: BinaryIO, value: int) -> None:
    _pack(stream, "b", value, True)


def write_b8(stream: BinaryIO, value: bool) -> None:
    write_u8(stream, 1 if value else 0)


def write_u16(stream: BinaryIO, value: int, le: bool) -> None:
    _pack(stream, "H", value, le)


def write_s16(stream: BinaryIO, value: int, le: bool) -> None:
    _pack(stream, "h", value, le)


def write_u32(stream: BinaryIO, value: int, le: bool) -> None:
    _pack(stream, "I", value, le)


def write_s32(stream: BinaryIO, value: int, le: bool) -> None:
    _pack(stream, "i", value, le)


def write_signature(stream: BinaryIO, signature: bytes, le: bool) -> None:
    write_bytes(stream, signature if le else signature[::-1])


# ── Path / buffer access ────────────────────────────────────────────────────


def read_from_path(codec: Readable[T], path: str | os.PathLike) -> T:
    with open(path, "rb") as f:
        return codec.read(f)


def read_from_bytes(codec: Readable[T], data: bytes) -> T:
    return codec.read(io.BytesIO(data))


def write_to_path(obj: Writable, path: str | os.PathLike) -> None:
    with open(path, "wb") as f:
        obj.write(f)


def write_to_bytes(obj: Writable) -> bytes:
    buf = io.BytesIO()
    obj.write(buf)
    return buf.getvalue()
