"""avarc – readers for Avalanche engine table, AAF and AVTX containers."""

__version__ = "0.1.0"

from .archive_table import ArchiveTable, TableEntry
from .byteio import read_from_bytes, read_from_path, write_to_bytes, write_to_path
from .cool_archive import CoolArchive, CoolArchiveChunk
from .errors import (
    ArchiveError,
    DecompressionError,
    EntryNotFoundError,
    FormatError,
    ShortReadError,
    ShortWriteError,
    SignatureError,
    SizeOverflowError,
    TruncatedError,
)
from .filelists import FileListEntry, load_file_lists, parse_file_list
from .jenkins import hash_bytes, hash_string
from .packed_archive import (
    PackedArchiveEntry,
    detect_file_extension,
    read_archive,
    read_entry,
    read_from_file_lists,
    read_packed_archive,
    read_sorted,
)
from .texture import Texture, TextureElement

__all__ = [
    "__version__",
    "hash_bytes", "hash_string",
    "ArchiveTable", "TableEntry",
    "CoolArchive", "CoolArchiveChunk",
    "Texture", "TextureElement",
    "PackedArchiveEntry", "detect_file_extension",
    "read_packed_archive", "read_sorted", "read_archive",
    "read_entry", "read_from_file_lists",
    "FileListEntry", "load_file_lists", "parse_file_list",
    "read_from_bytes", "read_from_path", "write_to_bytes", "write_to_path",
    "ArchiveError", "SignatureError", "FormatError", "ShortReadError",
    "ShortWriteError", "SizeOverflowError", "DecompressionError",
    "TruncatedError", "EntryNotFoundError",
]
