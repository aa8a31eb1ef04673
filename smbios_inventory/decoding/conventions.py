"""Field decoding helpers shared by every structure decoder.

Every read is length-guarded: a field whose last byte lies past the end of
the formatted area decodes to its default (0, "" or []), so structures
written against an older DSP0134 revision decode as far as they go.
"""

import struct
from typing import List, Optional, Sequence, Tuple

from smbios_inventory.discovery.table_walker import RawRecord

# Static code tables are tuples of (code or mask, label) pairs
CodeTable = Tuple[Tuple[int, str], ...]

UNKNOWN_SENTINEL = 0x8000

_INT_FORMATS = {
    1: "<B",
    2: "<H",
    4: "<I",
    8: "<Q",
}


def has_field(record: RawRecord, offset: int, width: int = 1) -> bool:
    """True when bytes ``offset .. offset+width-1`` are inside the data block."""
    return len(record.data) > offset + width - 1


def read_int(record: RawRecord, offset: int, width: int = 1, default: int = 0) -> int:
    """Read a little-endian unsigned integer of 1, 2, 4 or 8 bytes."""
    if not has_field(record, offset, width):
        return default
    return struct.unpack_from(_INT_FORMATS[width], record.data, offset)[0]


def byte(record: RawRecord, offset: int, default: int = 0) -> int:
    return read_int(record, offset, 1, default)


def word(record: RawRecord, offset: int, default: int = 0) -> int:
    return read_int(record, offset, 2, default)


def dword(record: RawRecord, offset: int, default: int = 0) -> int:
    return read_int(record, offset, 4, default)


def qword(record: RawRecord, offset: int, default: int = 0) -> int:
    return read_int(record, offset, 8, default)


def read_bytes(record: RawRecord, offset: int, size: int) -> bytes:
    """Return a fixed-size slice, or b"" when it does not fit."""
    if not has_field(record, offset, size):
        return b""
    return record.data[offset:offset + size]


def resolve_string(record: RawRecord, index: int, default: str = "") -> str:
    """Resolve a 1-based string number; 0 and out-of-range give ``default``."""
    if index < 1 or index > len(record.strings):
        return default
    return record.strings[index - 1].strip()


def string_at(record: RawRecord, offset: int) -> str:
    """Resolve the string whose number is stored at ``offset``."""
    if not has_field(record, offset):
        return ""
    return resolve_string(record, record.data[offset])


def lookup(table: CodeTable, code: Optional[int]) -> str:
    """Exact-match lookup; the first entry wins for duplicated codes."""
    if code is None:
        return ""
    for key, label in table:
        if key == code:
            return label
    return ""


def flags(table: CodeTable, mask: int) -> List[str]:
    """Labels of every table entry whose mask bits are set, in table order."""
    return [label for bit, label in table if bit & mask]


def first_flag(table: CodeTable, mask: int) -> str:
    """Label of the first table entry whose mask bits are set."""
    for bit, label in table:
        if bit & mask:
            return label
    return ""


def join(labels: Sequence[str], separator: str = ", ") -> str:
    return separator.join(labels)


def enum_at(record: RawRecord, offset: int, table: CodeTable, bitmask: int = 0xFF) -> str:
    """Look up the byte at ``offset`` (optionally masked) in ``table``."""
    if not has_field(record, offset):
        return ""
    return lookup(table, record.data[offset] & bitmask)


def flags_at(record: RawRecord, offset: int, table: CodeTable, width: int = 1) -> List[str]:
    """Expand the ``width``-byte bit field at ``offset`` into labels."""
    if not has_field(record, offset, width):
        return []
    return flags(table, read_int(record, offset, width))


def sentinel(value: int, unknown: int = UNKNOWN_SENTINEL, replacement=0):
    """Map a reserved 'unknown' bit pattern to ``replacement``."""
    return replacement if value == unknown else value


def scaled(value: int, divisor: float, unknown: int = UNKNOWN_SENTINEL):
    """Scale a probe reading, decoding the 'unknown' sentinel to 0."""
    if value == unknown:
        return 0
    return value / divisor
