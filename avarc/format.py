"""Signatures, fixed header values, lookup tables and safety limits."""

from types import MappingProxyType

# ── Signatures (as stored by little-endian files) ──────────────────────────

TABLE_SIGNATURE = b"TAB\x00"
COOL_SIGNATURE = b"AAF\x00"            # 0x00464141
COOL_CHUNK_SIGNATURE = b"EWAM"         # 0x4D415745
TEXTURE_SIGNATURE = b"AVTX"            # 0x58545641
DDS_MAGIC = b"DDS "

# ── Table archive (.tab) ───────────────────────────────────────────────────

TABLE_UNKNOWN_04 = 2
TABLE_UNKNOWN_06 = 1
TABLE_ALIGNMENT = 0x800
TABLE_HEADER_SIZE = 12
TABLE_RECORD_SIZE = 12     # name_hash(u32) offset(u32) size(u32)

# ── Chunked compression container (AAF) ────────────────────────────────────

COOL_VERSION = 1
COOL_COMMENT = b"AVALANCHEARCHIVEFORMATISCOOL"
COOL_HEADER_SIZE = 48
COOL_CHUNK_HEADER_SIZE = 16

assert len(COOL_COMMENT) == 28

# ── Texture container (AVTX) ───────────────────────────────────────────────
#
# Header (32 B):
#   magic[4] version(u16) unknown_06(u8) dimension(u8) format(u32)
#   width(u16) height(u16) depth(u16) flags(u16)
#   mip_count(u8) header_mip_count(u8) reserved[6] unknown_1c(u32)
# followed by 8 element descriptors (12 B each):
#   offset(u32) size(u32) unknown_8(u16) unknown_a(u8) is_external(u8)

TEXTURE_VERSION = 1
TEXTURE_HEADER_SIZE = 32
TEXTURE_ELEMENT_COUNT = 8
TEXTURE_ELEMENT_SIZE = 12
TEXTURE_FLAGS_MASK = 0x01 | 0x08 | 0x40
TEXTURE_RESERVED_COUNT = 6

# Allowed values for the reserved header bytes at 0x16..0x1b.
TEXTURE_RESERVED_ALLOWED = (
    frozenset({0, 1, 2}),
    frozenset({0}),
    frozenset({0, 1, 2, 3, 4}),
    frozenset({0}),
    frozenset({0}),
    frozenset({0}),
)

assert len(TEXTURE_RESERVED_ALLOWED) == TEXTURE_RESERVED_COUNT

# ── Magic sniffing (big-endian) ────────────────────────────────────────────

MAGIC_4_EXTENSIONS = MappingProxyType({
    0x20534444: "dds",
    0x41444620: "adf",
    0x43505452: "rtpc",
    0x57E0E057: "ban",
    0x35425346: "fsb5",
})

MAGIC_8_EXTENSIONS = MappingProxyType({
    0x000000300000000E: "btc",
    0x444E425200000005: "rbn",
    0x4453425200000005: "rbs",
})

BIN_PREFIX = b"\x01\x04\x00"
UNKNOWN_DIR = "__UNKNOWN"

# ── Configuration ──────────────────────────────────────────────────────────

SNIFF_LENGTH = 32
DECODE_BLOCK = 64 * 1024
MAX_CHUNK_COUNT = 1_000_000            # reject > 1M AAF blocks
MAX_CHUNK_ULEN = 512 * 1024 * 1024     # 512 MB per inflated block
