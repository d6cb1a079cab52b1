"""Texture container (AVTX) reader and writer.

The header is followed by exactly eight element descriptors.  Each element
(one mip level or page) stores its payload at an absolute offset, so
elements are read and written by seeking away from the descriptor and
restoring the cursor afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from .byteio import (
    read_b8,
    read_bytes,
    read_u16,
    read_u32,
    read_u8,
    to_size,
    validate_signature,
    write_b8,
    write_bytes,
    write_signature,
    write_u16,
    write_u32,
    write_u8,
)
from .errors import FormatError, ShortReadError
from .format import (
    TEXTURE_ELEMENT_COUNT,
    TEXTURE_FLAGS_MASK,
    TEXTURE_RESERVED_ALLOWED,
    TEXTURE_RESERVED_COUNT,
    TEXTURE_SIGNATURE,
    TEXTURE_VERSION,
)


# ── TextureElement ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TextureElement:
    offset: int
    size: int
    unknown_8: int = 0
    unknown_a: int = 0
    is_external: bool = False
    contents: bytes = b""

    @classmethod
    def read(cls, stream: BinaryIO, le: bool) -> TextureElement:
        """Read a descriptor and its payload; the cursor ends after the descriptor."""
        offset = read_u32(stream, le)
        size = read_u32(stream, le)
        unknown_8 = read_u16(stream, le)
        unknown_a = read_u8(stream)
        is_external = read_b8(stream)

        contents = b""
        if size > 0:
            safe_size = to_size(size, "element size")
            position = stream.tell()
            stream.seek(offset)
            contents = stream.read(safe_size)
            if len(contents) < safe_size:
                raise ShortReadError(
                    f"could not read texture contents: got {len(contents)} of "
                    f"{safe_size} bytes at offset {offset}"
                )
            stream.seek(position)

        return cls(
            offset=offset,
            size=size,
            unknown_8=unknown_8,
            unknown_a=unknown_a,
            is_external=is_external,
            contents=contents,
        )

    def check_contents(self) -> None:
        if self.size > 0 and len(self.contents) < self.size:
            raise FormatError(
                f"element holds {len(self.contents)} bytes, declares {self.size}"
            )

    def write(self, stream: BinaryIO, le: bool) -> None:
        """Write the descriptor, then scatter the payload to ``offset``."""
        self.check_contents()
        write_u32(stream, self.offset, le)
        write_u32(stream, self.size, le)
        write_u16(stream, self.unknown_8, le)
        write_u8(stream, self.unknown_a)
        write_b8(stream, self.is_external)

        if self.size > 0:
            position = stream.tell()
            stream.seek(self.offset)
            write_bytes(stream, self.contents[: self.size])
            stream.seek(position)


# ── Texture ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Texture:
    le: bool
    unknown_06: int
    dimension: int
    format: int
    width: int
    height: int
    depth: int
    flags: int
    mip_count: int
    header_mip_count: int
    reserved: tuple[int, ...]
    unknown_1c: int
    elements: tuple[TextureElement, ...]

    @classmethod
    def read(cls, stream: BinaryIO) -> Texture:
        le = validate_signature(stream, TEXTURE_SIGNATURE)

        version = read_u16(stream, le)
        if version != TEXTURE_VERSION:
            raise FormatError(f"file version did not match: {version}")

        unknown_06 = read_u8(stream)
        dimension = read_u8(stream)
        format = read_u32(stream, le)
        width = read_u16(stream, le)
        height = read_u16(stream, le)
        depth = read_u16(stream, le)
        flags = read_u16(stream, le)
        mip_count = read_u8(stream)
        header_mip_count = read_u8(stream)
        reserved = tuple(read_bytes(stream, TEXTURE_RESERVED_COUNT))
        unknown_1c = read_u32(stream, le)

        elements = tuple(
            TextureElement.read(stream, le) for _ in range(TEXTURE_ELEMENT_COUNT)
        )

        # Checked only once every element has been read.
        validate_header(flags, reserved)

        return cls(
            le=le,
            unknown_06=unknown_06,
            dimension=dimension,
            format=format,
            width=width,
            height=height,
            depth=depth,
            flags=flags,
            mip_count=mip_count,
            header_mip_count=header_mip_count,
            reserved=reserved,
            unknown_1c=unknown_1c,
            elements=elements,
        )

    def write(self, stream: BinaryIO) -> None:
        if len(self.elements) != TEXTURE_ELEMENT_COUNT:
            raise FormatError(
                f"texture needs exactly {TEXTURE_ELEMENT_COUNT} elements, "
                f"got {len(self.elements)}"
            )
        validate_header(self.flags, self.reserved)
        for element in self.elements:
            element.check_contents()

        le = self.le
        write_signature(stream, TEXTURE_SIGNATURE, le)
        write_u16(stream, TEXTURE_VERSION, le)
        write_u8(stream, self.unknown_06)
        write_u8(stream, self.dimension)
        write_u32(stream, self.format, le)
        write_u16(stream, self.width, le)
        write_u16(stream, self.height, le)
        write_u16(stream, self.depth, le)
        write_u16(stream, self.flags, le)
        write_u8(stream, self.mip_count)
        write_u8(stream, self.header_mip_count)
        write_bytes(stream, bytes(self.reserved))
        write_u32(stream, self.unknown_1c, le)

        for element in self.elements:
            element.write(stream, le)


def validate_header(flags: int, reserved: tuple[int, ...]) -> None:
    """Reject flag bits and reserved bytes outside their known values."""
    if flags != 0 and flags & ~TEXTURE_FLAGS_MASK:
        raise FormatError(f"flags did not match: 0x{flags:04x}")

    if len(reserved) != TEXTURE_RESERVED_COUNT:
        raise FormatError(
            f"expected {TEXTURE_RESERVED_COUNT} reserved bytes, got {len(reserved)}"
        )
    for index, (value, allowed) in enumerate(zip(reserved, TEXTURE_RESERVED_ALLOWED)):
        if value not in allowed:
            raise FormatError(
                f"unknown bits did not match: reserved byte 0x{0x16 + index:02x} "
                f"is {value}, expected one of {sorted(allowed)}"
            )
