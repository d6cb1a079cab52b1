"""Extraction manifest: name, size and BLAKE3-256 digest per extracted file."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from typing import Iterable

import blake3
import msgpack

from .errors import FormatError
from .packed_archive import PackedArchiveEntry

MANIFEST_NAME = "manifest.msgpack"
MANIFEST_VERSION = 1


@dataclass(frozen=True)
class ManifestRecord:
    name: str
    size: int
    blake3: str


def build_manifest(entries: Iterable[PackedArchiveEntry]) -> list[ManifestRecord]:
    return [
        ManifestRecord(
            name=e.name,
            size=len(e.contents),
            blake3=blake3.blake3(e.contents).hexdigest(),
        )
        for e in entries
    ]


def write_manifest(path: str | os.PathLike, records: Iterable[ManifestRecord]) -> None:
    payload = {
        "version": MANIFEST_VERSION,
        "files": [asdict(r) for r in records],
    }
    with open(path, "wb") as f:
        f.write(msgpack.packb(payload, use_bin_type=True))


def read_manifest(path: str | os.PathLike) -> list[ManifestRecord]:
    with open(path, "rb") as f:
        payload = msgpack.unpackb(f.read(), raw=False)
    if not isinstance(payload, dict) or payload.get("version") != MANIFEST_VERSION:
        raise FormatError(f"unsupported manifest: {path}")
    return [ManifestRecord(**r) for r in payload["files"]]


def verify_manifest(path: str | os.PathLike, root: str | os.PathLike) -> list[str]:
    """Re-digest every file listed in the manifest; return error descriptions."""
    errors: list[str] = []
    for record in read_manifest(path):
        file_path = os.path.join(os.fspath(root), record.name)
        if not os.path.isfile(file_path):
            errors.append(f"{record.name}: missing")
            continue
        with open(file_path, "rb") as f:
            data = f.read()
        if len(data) != record.size:
            errors.append(f"{record.name}: size {len(data)} != {record.size}")
            continue
        actual = blake3.blake3(data).hexdigest()
        if actual != record.blake3:
            errors.append(
                f"{record.name}: BLAKE3 mismatch "
                f"(expected {record.blake3}, got {actual})"
            )
    return errors
