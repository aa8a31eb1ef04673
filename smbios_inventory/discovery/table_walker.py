"""SMBIOS structure table walker.

Each structure is a 4-byte header, the rest of the formatted area and an
unformatted string set terminated by a double null (DSP0134 section 6.1).
"""

import struct
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

HEADER_SIZE = 4
STRING_SET_TERMINATOR = b"\x00\x00"


@dataclass(frozen=True)
class RawRecord:
    """One structure as found in the table."""
    type: int
    length: int
    handle: int
    data: bytes
    strings: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_buffer(cls, buf: bytes, offset: int) -> Tuple[Optional["RawRecord"], int]:
        """Parse the structure starting at ``offset``.

        Returns:
            (record, next_offset). The record is None when the header or
            the formatted area cannot be read completely; next_offset is
            then the buffer length.
        """
        remaining = len(buf) - offset
        if remaining < HEADER_SIZE:
            if remaining > 0:
                logger.debug(f"{remaining} trailing byte(s) at 0x{offset:x}, too short for a header")
            return None, len(buf)

        rec_type = buf[offset]
        length = buf[offset + 1]
        handle = struct.unpack_from("<H", buf, offset + 2)[0]

        if length < HEADER_SIZE:
            logger.warning(
                f"Structure type {rec_type} handle 0x{handle:04x} at 0x{offset:x} "
                f"declares length {length}, stopping walk"
            )
            return None, len(buf)

        if remaining < length:
            logger.warning(
                f"Truncated structure type {rec_type} handle 0x{handle:04x} at 0x{offset:x}: "
                f"length {length}, only {remaining} bytes left"
            )
            return None, len(buf)

        data = bytes(buf[offset:offset + length])
        strings, next_offset = split_strings(buf, offset + length)
        return cls(type=rec_type, length=length, handle=handle, data=data, strings=strings), next_offset


def split_strings(buf: bytes, offset: int) -> Tuple[Tuple[str, ...], int]:
    """Split the string set that starts at ``offset``.

    Returns the strings and the offset just past the double-null
    terminator. Running off the end of the buffer ends the set, and the
    partial string is kept.
    """
    end = buf.find(STRING_SET_TERMINATOR, offset)
    if end < 0:
        raw = bytes(buf[offset:]).rstrip(b"\x00")
        next_offset = len(buf)
    else:
        raw = bytes(buf[offset:end])
        next_offset = end + len(STRING_SET_TERMINATOR)

    if not raw:
        return (), next_offset

    strings = tuple(s.decode("utf-8", errors="replace") for s in raw.split(b"\x00"))
    return strings, next_offset


class TableWalker:
    """Walk a raw structure table into RawRecords."""

    @staticmethod
    def walk(table: bytes) -> List[RawRecord]:
        """Return every complete structure in ``table``, in table order.

        The walk ends at the end of the buffer or at the first structure
        that cannot be read completely. The entry point structure count is
        never consulted.
        """
        table = bytes(table)
        records: List[RawRecord] = []
        offset = 0

        while offset < len(table):
            record, offset = RawRecord.from_buffer(table, offset)
            if record is None:
                break
            records.append(record)

        logger.debug(f"Walked {len(records)} structure(s) from {len(table)} bytes")
        return records
