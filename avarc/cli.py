"""avarc CLI – hash names, inspect containers, extract and verify archives."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from . import __version__
from .archive_table import ArchiveTable
from .byteio import read_from_path
from .cool_archive import CoolArchive
from .dds import write_dds
from .errors import ArchiveError
from .filelists import load_file_lists, name_map
from .format import COOL_SIGNATURE, TABLE_SIGNATURE, TEXTURE_SIGNATURE
from .jenkins import hash_string
from .manifest import MANIFEST_NAME, build_manifest, verify_manifest, write_manifest
from .packed_archive import PackedArchiveEntry, archive_paths, read_archive, read_sorted
from .texture import Texture

logger = logging.getLogger("avarc")

GAME_DIR_ENV = "AVARC_GAME_DIR"


# ── Terminal UI (colors when TTY, Unicode tables) ───────────────────────────

def _color_enabled() -> bool:
    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False
    return os.environ.get("NO_COLOR", "").strip() == ""

_COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "green": "\033[32m",
    "red": "\033[31m",
    "cyan": "\033[36m",
    "bold": "\033[1m",
}

def _c(name: str, text: str) -> str:
    if not _color_enabled() or name not in _COLORS:
        return text
    return f"{_COLORS[name]}{text}{_COLORS['reset']}"

def _section(title: str) -> str:
    return _c("cyan", f"\n  ◆ {title}")

def _ok(msg: str) -> str:
    return _c("green", "✓ ") + msg

def _fail(msg: str) -> str:
    return _c("red", "✗ ") + msg

def _table(headers: list[str], rows: list[list[str]]) -> list[str]:
    """Return lines for a UTF-8 box table. Column widths from content."""
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    lines = ["╭" + "┬".join("─" * (w + 2) for w in widths) + "╮"]
    lines.append("│" + "│".join(f" {h.ljust(w)} " for h, w in zip(headers, widths)) + "│")
    lines.append("├" + "┼".join("─" * (w + 2) for w in widths) + "┤")
    for row in rows:
        lines.append("│" + "│".join(f" {c.ljust(w)} " for c, w in zip(row, widths)) + "│")
    lines.append("╰" + "┴".join("─" * (w + 2) for w in widths) + "╯")
    return lines

def _print_table(headers: list[str], rows: list[list[str]]) -> None:
    for line in _table(headers, rows):
        print("    " + line)

def _byte_order(le: bool) -> str:
    return "little-endian" if le else "big-endian"


# ── hash ────────────────────────────────────────────────────────────────────


def cmd_hash(args: argparse.Namespace) -> int:
    for name in args.names:
        value = hash_string(name)
        print(f"{value:>10}  0x{value:08x}  {name}")
    return 0


# ── inspect ─────────────────────────────────────────────────────────────────


def detect_kind(path: str) -> str | None:
    with open(path, "rb") as f:
        magic = f.read(4)
    for kind, signature in (
        ("table", TABLE_SIGNATURE),
        ("cool", COOL_SIGNATURE),
        ("texture", TEXTURE_SIGNATURE),
    ):
        if magic in (signature, signature[::-1]):
            return kind
    return None


def _inspect_table(path: str) -> None:
    table = read_from_path(ArchiveTable, path)
    print(_section("Table archive"))
    print(f"    Order     {_byte_order(table.le)}")
    print(f"    Alignment 0x{table.alignment:x}")
    print(f"    Entries   {len(table)}")
    rows = [
        [f"0x{e.name_hash:08x}", str(e.offset), str(e.size)]
        for e in table.entries
    ]
    _print_table(["Hash", "Offset", "Size"], rows)


def _inspect_cool(path: str) -> None:
    archive = read_from_path(CoolArchive, path)
    print(_section("Compressed archive"))
    print(f"    Order      {_byte_order(archive.le)}")
    print(f"    Total size {archive.total_uncompressed_size:,}")
    print(f"    Block size {archive.block_size:,}")
    rows = [
        [str(i), str(c.data_offset), str(c.compressed_size), str(c.uncompressed_size)]
        for i, c in enumerate(archive.chunks)
    ]
    _print_table(["#", "Offset", "Len", "ULen"], rows)


def _inspect_texture(path: str) -> None:
    texture = read_from_path(Texture, path)
    print(_section("Texture"))
    print(f"    Order   {_byte_order(texture.le)}")
    print(f"    Format  {texture.format}")
    print(f"    Size    {texture.width}x{texture.height}x{texture.depth}")
    print(f"    Mips    {texture.mip_count} ({texture.header_mip_count} in header)")
    print(f"    Flags   0x{texture.flags:04x}")
    rows = [
        [str(i), str(e.offset), str(e.size), "yes" if e.is_external else ""]
        for i, e in enumerate(texture.elements)
    ]
    _print_table(["#", "Offset", "Size", "External"], rows)


def cmd_inspect(args: argparse.Namespace) -> int:
    kind = detect_kind(args.file)
    print(_c("bold", "\n  avarc  ") + _c("dim", args.file))
    if kind is None:
        print(_fail("unrecognized signature"))
        return 1
    {"table": _inspect_table, "cool": _inspect_cool, "texture": _inspect_texture}[kind](args.file)
    return 0


# ── extract ─────────────────────────────────────────────────────────────────


def _entry_path(out_dir: str, name: str) -> str:
    root = os.path.realpath(out_dir)
    path = os.path.realpath(os.path.join(root, name))
    if path == root or os.path.commonpath([root, path]) != root:
        raise ArchiveError(f"entry name escapes output directory: {name!r}")
    return path


def _write_entries(out_dir: str, entries: list[PackedArchiveEntry]) -> None:
    # Every path is checked before anything is written.
    paths = [_entry_path(out_dir, entry.name) for entry in entries]
    for entry, path in zip(entries, paths):
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(entry.contents)
        logger.debug("%s (%d bytes)", entry.name, len(entry.contents))


def _finish_extract(out_dir: str, entries: list[PackedArchiveEntry]) -> None:
    os.makedirs(out_dir, exist_ok=True)
    write_manifest(os.path.join(out_dir, MANIFEST_NAME), build_manifest(entries))
    print(_ok(f"Extracted {len(entries):,} files → {out_dir}"))


def cmd_extract(args: argparse.Namespace) -> int:
    names = name_map(load_file_lists(args.filelists)) if args.filelists else {}
    entries = read_archive(args.table, args.blob, names)
    _write_entries(args.output, entries)
    _finish_extract(args.output, entries)
    return 0


def cmd_extract_lists(args: argparse.Namespace) -> int:
    game_dir = args.game_dir or os.environ.get(GAME_DIR_ENV)
    if not game_dir:
        print(_fail(f"no game directory (pass --game-dir or set {GAME_DIR_ENV})"))
        return 2

    file_lists = load_file_lists(args.filelists)
    extracted: list[PackedArchiveEntry] = []
    failures = 0
    for arc_name, file_list in file_lists.items():
        table_path, blob_path = archive_paths(arc_name, game_dir)
        try:
            table = read_from_path(ArchiveTable, table_path)
            with open(blob_path, "rb") as blob:
                entries = read_sorted(blob, table, file_list)
        except (ArchiveError, OSError) as exc:
            failures += 1
            logger.error("%s: %s", arc_name, exc)
            continue
        logger.info("%s: %d entries", arc_name, len(entries))
        _write_entries(args.output, entries)
        extracted.extend(entries)

    _finish_extract(args.output, extracted)
    if failures:
        print(_fail(f"{failures} archive(s) failed"))
        return 1
    return 0


# ── to-dds ──────────────────────────────────────────────────────────────────


def cmd_to_dds(args: argparse.Namespace) -> int:
    texture = read_from_path(Texture, args.texture)
    with open(args.output, "wb") as f:
        write_dds(f, texture, args.element)
    print(_ok(f"{args.texture} → {args.output}"))
    return 0


# ── verify ──────────────────────────────────────────────────────────────────


def cmd_verify(args: argparse.Namespace) -> int:
    errors = verify_manifest(os.path.join(args.directory, MANIFEST_NAME), args.directory)
    if errors:
        for err in errors:
            print("  " + _fail(err))
        return 1
    print(_ok("All files match the manifest"))
    return 0


# ── Entry point ─────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="avarc", description="Avalanche archive toolkit"
    )
    parser.add_argument(
        "--version", action="version", version=f"avarc {__version__}"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("hash", help="Hash asset names")
    p.add_argument("names", nargs="+")

    p = sub.add_parser("inspect", help="Inspect a .tab, AAF or AVTX file", aliases=["info"])
    p.add_argument("file")

    p = sub.add_parser("extract", help="Extract a .tab/.arc pair")
    p.add_argument("table")
    p.add_argument("blob")
    p.add_argument("output")
    p.add_argument("--filelists", help="directory of *.filelist name indexes")

    p = sub.add_parser("extract-lists", help="Extract every archive named by file lists")
    p.add_argument("filelists", help="directory of *.filelist name indexes")
    p.add_argument("output")
    p.add_argument("--game-dir", help=f"game directory (default: ${GAME_DIR_ENV})")

    p = sub.add_parser("to-dds", help="Wrap a texture element in a DDS file")
    p.add_argument("texture")
    p.add_argument("output")
    p.add_argument("--element", type=int, default=0)

    p = sub.add_parser("verify", help="Verify extracted files against manifest.msgpack")
    p.add_argument("directory")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    cmds = {
        "hash": cmd_hash,
        "inspect": cmd_inspect,
        "info": cmd_inspect,  # alias
        "extract": cmd_extract,
        "extract-lists": cmd_extract_lists,
        "to-dds": cmd_to_dds,
        "verify": cmd_verify,
    }
    fn = cmds.get(args.command)
    if fn is None:
        parser.print_help()
        return 1
    try:
        return fn(args)
    except ArchiveError as exc:
        print(_fail(str(exc)))
        return 1


if __name__ == "__main__":
    sys.exit(main())
