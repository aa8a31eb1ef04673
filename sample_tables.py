"""Byte builders for hand-made SMBIOS entry points and structure tables."""

import struct
from typing import Sequence

from smbios_inventory.discovery.table_walker import RawRecord


def with_checksum(buf: bytearray, offset: int) -> bytes:
    """Set the byte at ``offset`` so the buffer sums to 0 mod 256."""
    buf[offset] = 0
    buf[offset] = (-sum(buf)) & 0xFF
    return bytes(buf)


def entry_point_32(major=2, minor=8, max_structure_size=0x80, table_length=0x100,
                   table_address=0x000F0000, count=3, length=0x1F) -> bytes:
    """Legacy `_SM_` entry point (31 bytes)."""
    buf = bytearray(0x1F)
    buf[0:4] = b"_SM_"
    buf[0x05] = length
    buf[0x06] = major
    buf[0x07] = minor
    struct.pack_into("<H", buf, 0x08, max_structure_size)
    buf[0x0A] = 0
    buf[0x10:0x15] = b"_DMI_"
    struct.pack_into("<H", buf, 0x16, table_length)
    struct.pack_into("<I", buf, 0x18, table_address)
    struct.pack_into("<H", buf, 0x1C, count)
    buf[0x1E] = (major << 4) | minor
    return with_checksum(buf, 0x04)


def entry_point_64(major=3, minor=4, docrev=0, table_max_size=0x2000,
                   table_address=0x7A6B5000, length=0x18) -> bytes:
    """`_SM3_` entry point (24 bytes)."""
    buf = bytearray(0x18)
    buf[0:5] = b"_SM3_"
    buf[0x06] = length
    buf[0x07] = major
    buf[0x08] = minor
    buf[0x09] = docrev
    buf[0x0A] = 1
    struct.pack_into("<I", buf, 0x0C, table_max_size)
    struct.pack_into("<Q", buf, 0x10, table_address)
    return with_checksum(buf, 0x05)


def string_set(strings: Sequence[str]) -> bytes:
    if not strings:
        return b"\x00\x00"
    return b"\x00".join(s.encode("utf-8") for s in strings) + b"\x00\x00"


def structure(type_code: int, handle: int, body: bytes = b"", strings: Sequence[str] = ()) -> bytes:
    """One structure: header, ``body`` (offset 0x04 onward) and its string set."""
    header = struct.pack("<BBH", type_code, 4 + len(body), handle)
    return header + bytes(body) + string_set(strings)


def raw_record(type_code: int, body: bytes = b"", strings: Sequence[str] = (), handle: int = 0x0100) -> RawRecord:
    """A RawRecord as the walker would produce it."""
    data = struct.pack("<BBH", type_code, 4 + len(body), handle) + bytes(body)
    return RawRecord(type=type_code, length=len(data), handle=handle, data=data, strings=tuple(strings))


def system_information_body() -> bytes:
    """Type 1 formatted area after the header (0x04..0x1A)."""
    body = bytearray(0x1B - 4)
    body[0x04 - 4] = 1   # manufacturer
    body[0x05 - 4] = 2   # product name
    body[0x06 - 4] = 0   # version
    body[0x07 - 4] = 0   # serial number
    body[0x08 - 4:0x18 - 4] = bytes(range(16))
    body[0x18 - 4] = 0x06  # wakeup: power switch
    return bytes(body)


def bios_body() -> bytes:
    """Type 0 formatted area after the header (0x04..0x17)."""
    body = bytearray(0x18 - 4)
    body[0x04 - 4] = 1      # vendor
    body[0x05 - 4] = 2      # version
    struct.pack_into("<H", body, 0x06 - 4, 0xE000)
    body[0x08 - 4] = 3      # release date
    body[0x09 - 4] = 0x0F   # 1 MB ROM
    struct.pack_into("<Q", body, 0x0A - 4, 0x80 | 0x800)  # PCI, flash upgradeable
    body[0x12 - 4] = 0x01   # ACPI
    body[0x14 - 4] = 5
    body[0x15 - 4] = 17
    return bytes(body)


def sample_table() -> bytes:
    """BIOS, system and baseboard structures followed by an end-of-table marker."""
    return b"".join([
        structure(0, 0x0000, bios_body(), ["Acme BIOS", "1.2.3", "01/02/2024"]),
        structure(1, 0x0001, system_information_body(), ["Acme", "ModelX"]),
        structure(2, 0x0002, bytes([1, 2, 0, 0, 0, 0x09, 0, 0x10, 0x00, 0x0A]), ["Acme", "Board-7"]),
        structure(127, 0xFEFF),
    ])
