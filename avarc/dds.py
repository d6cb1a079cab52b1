"""Wrap one texture element in a DDS container.

Only the container is produced; texel data is copied verbatim from the
element, so the output is valid only for block-compressed or raw formats
the DDS reader understands.
"""

from __future__ import annotations

import struct
from typing import BinaryIO

from .byteio import write_bytes
from .errors import FormatError
from .format import DDS_MAGIC
from .texture import Texture

DDS_HEADER_SIZE = 124
DDS_PIXEL_FORMAT_SIZE = 32

# DDSD_CAPS | DDSD_HEIGHT | DDSD_WIDTH | DDSD_PIXELFORMAT, DDSD_MIPMAPCOUNT
DDSD_TEXTURE = 0x00001007
DDSD_MIPMAPCOUNT = 0x00020000
DDSCAPS_LEGACY = 0x8   # written by the original exporter

DDPF_FOURCC = 0x4
DDPF_RGBA = 0x41

DX10_FOURCC = b"DX10"
DX10_DIMENSION_TEXTURE2D = 3

# size flags fourcc rgb_bit_count r g b a
PIXEL_FORMAT_FMT = "<II4sIIIII"
HEADER_FMT = "<IIIIIII44s32sIIIII"
DX10_FMT = "<IIIII"

assert struct.calcsize(PIXEL_FORMAT_FMT) == DDS_PIXEL_FORMAT_SIZE
assert struct.calcsize(HEADER_FMT) == DDS_HEADER_SIZE


def _fourcc(code: bytes) -> bytes:
    return struct.pack(PIXEL_FORMAT_FMT, DDS_PIXEL_FORMAT_SIZE, DDPF_FOURCC, code, 0, 0, 0, 0, 0)


# DXGI format id -> DDS_PIXELFORMAT
PIXEL_FORMATS: dict[int, bytes] = {
    71: _fourcc(b"DXT1"),   # BC1_UNORM
    74: _fourcc(b"DXT3"),   # BC2_UNORM
    77: _fourcc(b"DXT5"),   # BC3_UNORM
    87: struct.pack(        # B8G8R8A8_UNORM
        PIXEL_FORMAT_FMT, DDS_PIXEL_FORMAT_SIZE, DDPF_RGBA, b"\x00" * 4, 32,
        0x00FF0000, 0x0000FF00, 0x000000FF, 0xFF000000,
    ),
}

# R8_UNORM, BC5_UNORM, BC7_UNORM need the DX10 extension header.
DX10_FORMATS = frozenset({61, 83, 98})


def pixel_format(texture_format: int) -> bytes:
    if texture_format in PIXEL_FORMATS:
        return PIXEL_FORMATS[texture_format]
    if texture_format in DX10_FORMATS:
        return _fourcc(DX10_FOURCC)
    raise FormatError(f"unrecognized texture format: {texture_format}")


def write_dds(stream: BinaryIO, texture: Texture, element_index: int = 0) -> None:
    if not 0 <= element_index < len(texture.elements):
        raise FormatError(f"texture has no element {element_index}")
    element = texture.elements[element_index]
    pf = pixel_format(texture.format)

    header = struct.pack(
        HEADER_FMT,
        DDS_HEADER_SIZE,
        DDSD_TEXTURE | DDSD_MIPMAPCOUNT,
        texture.height,
        texture.width,
        0,                      # pitch_or_linear_size
        0,                      # depth
        texture.mip_count,
        b"\x00" * 44,
        pf,
        DDSCAPS_LEGACY,
        0, 0, 0, 0,             # caps2 caps3 caps4 reserved2
    )
    write_bytes(stream, DDS_MAGIC)
    write_bytes(stream, header)
    if texture.format in DX10_FORMATS:
        write_bytes(
            stream,
            struct.pack(DX10_FMT, texture.format, DX10_DIMENSION_TEXTURE2D, 0, 1, 0),
        )
    write_bytes(stream, element.contents)
