"""Exception hierarchy shared by every avarc codec."""


class ArchiveError(Exception):
    """Base exception for container format / parse errors."""


class SignatureError(ArchiveError):
    """Signature matched in neither byte order."""


class FormatError(ArchiveError):
    """A fixed field (version, reserved bits, comment, ...) is out of range."""


class ShortReadError(ArchiveError):
    """Fewer bytes were available than the field requires."""


class ShortWriteError(ArchiveError):
    """Fewer bytes were written than requested."""


class SizeOverflowError(ArchiveError):
    """On-disk size or offset exceeds host addressing or a safety cap."""


class DecompressionError(ArchiveError):
    """A compressed chunk could not be inflated."""


class TruncatedError(DecompressionError):
    """A compressed chunk inflated to fewer bytes than it declares."""


class EntryNotFoundError(ArchiveError):
    """No table entry carries the requested name hash."""
