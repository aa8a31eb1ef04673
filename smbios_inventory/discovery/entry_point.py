"""SMBIOS entry point parsing and byte-sum validation.

Supports the 32-bit (`_SM_`) and 64-bit (`_SM3_`) entry point structures
per DSP0134 section 5.2.
"""

import struct
import logging
from dataclasses import dataclass
from typing import Optional

from smbios_inventory.errors import AnchorNotFound, InvalidEntryLength, ChecksumFailure

logger = logging.getLogger(__name__)

ANCHOR_32 = b"_SM_"
ANCHOR_64 = b"_SM3_"

# Offset of the entry point length byte, per anchor form
LENGTH_OFFSETS = {
    "_SM_": 0x05,
    "_SM3_": 0x06,
}


def _read(data: bytes, fmt: str, offset: int) -> int:
    """Unpack a little-endian field, or 0 when it lies past the buffer."""
    if offset + struct.calcsize(fmt) > len(data):
        return 0
    return struct.unpack_from(fmt, data, offset)[0]


class ChecksumValidator:
    """Byte-sum check shared by the entry point and table buffers."""

    @staticmethod
    def byte_sum(data: bytes) -> int:
        return sum(data)

    @staticmethod
    def is_valid(data: bytes, strict: bool = False) -> bool:
        """Return True when the buffer passes the sum check.

        The default mode treats a buffer as valid when its byte sum is
        non-zero. ``strict`` applies the DSP0134 rule instead: the sum of
        all bytes modulo 256 must be zero. Empty buffers never pass.
        """
        if not data:
            return False
        total = ChecksumValidator.byte_sum(data)
        if strict:
            return (total & 0xFF) == 0
        return total != 0

    @staticmethod
    def validate(data: bytes, what: str = "buffer", strict: bool = False) -> None:
        """Raise ChecksumFailure if ``data`` fails the sum check."""
        if not ChecksumValidator.is_valid(data, strict=strict):
            logger.warning(f"{what} checksum failed (sum=0x{sum(data):x}, strict={strict})")
            raise ChecksumFailure(f"{what} checksum error")


@dataclass(frozen=True)
class EntryPoint:
    """Parsed SMBIOS entry point.

    Legacy (`_SM_`) entries carry the structure table length and count;
    `_SM3_` entries only advertise a maximum table size, so the table
    walker never relies on either.
    """
    anchor: str
    length: int
    major_version: int
    minor_version: int
    revision: int
    max_structure_size: Optional[int] = None
    table_length: Optional[int] = None
    number_of_structures: Optional[int] = None
    table_address: Optional[int] = None
    docrev: Optional[int] = None
    table_max_size: Optional[int] = None

    @property
    def version(self) -> str:
        if self.docrev is not None:
            return f"{self.major_version}.{self.minor_version}.{self.docrev}"
        return f"{self.major_version}.{self.minor_version}"

    @classmethod
    def from_bytes(cls, data: bytes) -> "EntryPoint":
        """Parse an entry point buffer.

        Args:
            data: Raw entry point bytes, anchor at offset 0.

        Returns:
            Populated EntryPoint.

        Raises:
            AnchorNotFound: Neither anchor literal is present.
            InvalidEntryLength: Length byte is zero, missing or exceeds the buffer.
        """
        data = bytes(data)
        if data[:4] == ANCHOR_32:
            anchor = "_SM_"
        elif data[:5] == ANCHOR_64:
            anchor = "_SM3_"
        else:
            raise AnchorNotFound(f"Entry point anchor not found (got {data[:5]!r})")

        length_offset = LENGTH_OFFSETS[anchor]
        if length_offset >= len(data):
            raise InvalidEntryLength(f"Entry point too short for length byte: {len(data)} bytes")

        length = data[length_offset]
        if not length or length > len(data):
            raise InvalidEntryLength(
                f"Entry point length error: declared {length}, buffer {len(data)} bytes"
            )

        if anchor == "_SM_":
            entry = cls(
                anchor=anchor,
                length=length,
                major_version=_read(data, "<B", 0x06),
                minor_version=_read(data, "<B", 0x07),
                max_structure_size=_read(data, "<H", 0x08),
                revision=_read(data, "<B", 0x0A),
                table_length=_read(data, "<H", 0x16),
                table_address=_read(data, "<I", 0x18),
                number_of_structures=_read(data, "<H", 0x1C),
            )
        else:
            entry = cls(
                anchor=anchor,
                length=length,
                major_version=_read(data, "<B", 0x07),
                minor_version=_read(data, "<B", 0x08),
                docrev=_read(data, "<B", 0x09),
                revision=_read(data, "<B", 0x0A),
                table_max_size=_read(data, "<I", 0x0C),
                table_address=_read(data, "<Q", 0x10),
            )

        logger.debug(f"Entry point {entry.anchor} SMBIOS {entry.version}, length {entry.length}")
        return entry

    def to_dict(self) -> dict:
        out = {
            "anchor": self.anchor,
            "length": self.length,
            "major_version": self.major_version,
            "minor_version": self.minor_version,
            "revision": self.revision,
        }
        if self.anchor == "_SM_":
            out["max_structure_size"] = self.max_structure_size
            out["table_length"] = self.table_length
            out["number_of_structures"] = self.number_of_structures
        else:
            out["docrev"] = self.docrev
            out["table_max_size"] = self.table_max_size
        out["table_address"] = f"0x{self.table_address:08x}"
        return out
