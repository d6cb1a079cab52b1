"""Bob Jenkins' lookup3 ``hashlittle`` as used for asset name hashes.

Every asset is addressed by the 32-bit hash of its logical path, e.g.::

    >>> hash_string("ui/intro.gfx")
    2386027578

Changing anything here invalidates every name index built from it.
"""

from __future__ import annotations

MASK32 = 0xFFFFFFFF
INITIAL = 0xDEADBEEF


def _rot(value: int, count: int) -> int:
    return ((value << count) | (value >> (32 - count))) & MASK32


def hash_bytes(data: bytes, seed: int = 0) -> int:
    """Return the 32-bit hash of *data* mixed with *seed*."""
    length = len(data)
    a = b = c = (INITIAL + length + seed) & MASK32

    i = 0
    # Strict comparison: a final full block of 12 goes through the tail.
    while i + 12 < length:
        a = (a + int.from_bytes(data[i : i + 4], "little")) & MASK32
        b = (b + int.from_bytes(data[i + 4 : i + 8], "little")) & MASK32
        c = (c + int.from_bytes(data[i + 8 : i + 12], "little")) & MASK32
        i += 12

        a = (a - c) & MASK32
        a ^= _rot(c, 4)
        c = (c + b) & MASK32
        b = (b - a) & MASK32
        b ^= _rot(a, 6)
        a = (a + c) & MASK32
        c = (c - b) & MASK32
        c ^= _rot(b, 8)
        b = (b + a) & MASK32
        a = (a - c) & MASK32
        a ^= _rot(c, 16)
        c = (c + b) & MASK32
        b = (b - a) & MASK32
        b ^= _rot(a, 19)
        a = (a + c) & MASK32
        c = (c - b) & MASK32
        c ^= _rot(b, 4)
        b = (b + a) & MASK32

    words = [a, b, c]
    for k, byte in enumerate(data[i:]):
        words[k // 4] = (words[k // 4] + (byte << (8 * (k % 4)))) & MASK32
    a, b, c = words

    c ^= b
    c = (c - _rot(b, 14)) & MASK32
    a ^= c
    a = (a - _rot(c, 11)) & MASK32
    b ^= a
    b = (b - _rot(a, 25)) & MASK32
    c ^= b
    c = (c - _rot(b, 16)) & MASK32
    a ^= c
    a = (a - _rot(c, 4)) & MASK32
    b ^= a
    b = (b - _rot(a, 14)) & MASK32
    c ^= b
    c = (c - _rot(b, 24)) & MASK32

    return c


def hash_string(name: str) -> int:
    """Hash the UTF-8 bytes of *name* with seed 0. No normalization."""
    return hash_bytes(name.encode("utf-8"))
