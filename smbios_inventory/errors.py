"""Fatal decode failures.

Only conditions that abort a whole stage live here. Truncated records,
unknown structure types and short data blocks degrade the output instead
of raising.
"""


class SMBIOSDecodeError(ValueError):
    """Base class for entry-point, checksum and acquisition failures."""


class AnchorNotFound(SMBIOSDecodeError):
    """Neither `_SM_` nor `_SM3_` is present at the start of the buffer."""


class InvalidEntryLength(SMBIOSDecodeError):
    """Entry point length byte is zero or points past the buffer."""


class ChecksumFailure(SMBIOSDecodeError):
    """Buffer failed the byte-sum check."""


class SourceUnavailable(SMBIOSDecodeError):
    """Raw entry point or table bytes could not be acquired."""
