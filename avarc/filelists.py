"""Name indexes: ``*.filelist`` files mapping archive ids to asset names.

A file list is plain text, one logical asset path per line.  Blank lines
and lines starting with ``;`` are ignored.  The archive id is the list's
path relative to the root, without extension (``archives_win64/game0``).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import msgpack

from .errors import FormatError
from .jenkins import hash_string

logger = logging.getLogger("avarc")

FILELIST_SUFFIX = ".filelist"
CACHE_VERSION = 1


@dataclass(frozen=True)
class FileListEntry:
    name: str
    name_hash: int
    arc_name: str = ""


FileLists = dict[str, list[FileListEntry]]
NameFilter = Callable[[str], bool]


def parse_file_list(
    text: str,
    arc_name: str = "",
    predicate: NameFilter | None = None,
) -> list[FileListEntry]:
    entries = []
    for line in text.split("\n"):
        name = line.strip()
        if not name or name.startswith(";"):
            continue
        if predicate is not None and not predicate(name):
            continue
        entries.append(FileListEntry(name=name, name_hash=hash_string(name), arc_name=arc_name))
    return entries


def load_file_lists(
    root: str | os.PathLike,
    predicate: NameFilter | None = None,
) -> FileLists:
    """Load every ``*.filelist`` below *root*, keyed by archive id.

    Lists left empty after filtering are dropped.
    """
    root = Path(root)
    file_lists: FileLists = {}
    for path in sorted(root.rglob("*" + FILELIST_SUFFIX)):
        arc_name = path.relative_to(root).with_suffix("").as_posix()
        entries = parse_file_list(path.read_text(encoding="utf-8"), arc_name, predicate)
        if not entries:
            continue
        file_lists[arc_name] = entries
        logger.debug("loaded %d names for %s", len(entries), arc_name)
    logger.info(
        "loaded %d file lists (%d names)",
        len(file_lists), sum(len(v) for v in file_lists.values()),
    )
    return file_lists


def name_map(file_lists: FileLists) -> dict[int, str]:
    """Flatten *file_lists* into a hash -> name mapping (first name wins)."""
    names: dict[int, str] = {}
    for entries in file_lists.values():
        for entry in entries:
            names.setdefault(entry.name_hash, entry.name)
    return names


# ── msgpack cache ───────────────────────────────────────────────────────────


def save_cache(path: str | os.PathLike, file_lists: FileLists) -> None:
    payload = {
        "version": CACHE_VERSION,
        "lists": {
            arc: [[e.name, e.name_hash] for e in entries]
            for arc, entries in file_lists.items()
        },
    }
    with open(path, "wb") as f:
        f.write(msgpack.packb(payload, use_bin_type=True))


def load_cache(path: str | os.PathLike) -> FileLists:
    with open(path, "rb") as f:
        payload = msgpack.unpackb(f.read(), raw=False)
    if not isinstance(payload, dict) or payload.get("version") != CACHE_VERSION:
        raise FormatError(f"unsupported file list cache: {path}")
    return {
        arc: [FileListEntry(name=name, name_hash=name_hash, arc_name=arc) for name, name_hash in rows]
        for arc, rows in payload["lists"].items()
    }
