#!/usr/bin/env python3
"""Test entry point parsing and checksum validation."""

import pytest

from sample_tables import entry_point_32, entry_point_64
from smbios_inventory.discovery.entry_point import ChecksumValidator, EntryPoint
from smbios_inventory.errors import AnchorNotFound, ChecksumFailure, InvalidEntryLength


def test_legacy_entry_point():
    """Test `_SM_` entry point parsing."""
    print("Testing legacy entry point parsing...")

    ep = EntryPoint.from_bytes(entry_point_32(major=2, minor=8, table_length=0x100, count=3))
    assert ep.anchor == "_SM_", "Anchor mismatch"
    assert ep.length == 0x1F, "Length mismatch"
    assert ep.major_version == 2, "Major version mismatch"
    assert ep.minor_version == 8, "Minor version mismatch"
    assert ep.max_structure_size == 0x80, "Max structure size mismatch"
    assert ep.table_length == 0x100, "Table length mismatch"
    assert ep.number_of_structures == 3, "Structure count mismatch"
    assert ep.table_address == 0x000F0000, "Table address mismatch"
    assert ep.docrev is None, "Legacy entry has no docrev"
    assert ep.version == "2.8", "Version string mismatch"
    print("  ✓ Legacy entry point parsing works")


def test_64bit_entry_point():
    """Test `_SM3_` entry point parsing."""
    print("\nTesting 64-bit entry point parsing...")

    ep = EntryPoint.from_bytes(entry_point_64(major=3, minor=4, docrev=0))
    assert ep.anchor == "_SM3_", "Anchor mismatch"
    assert ep.length == 0x18, "Length mismatch"
    assert ep.major_version == 3, "Major version mismatch"
    assert ep.minor_version == 4, "Minor version mismatch"
    assert ep.revision == 1, "Revision mismatch"
    assert ep.table_max_size == 0x2000, "Table max size mismatch"
    assert ep.table_address == 0x7A6B5000, "Table address mismatch"
    assert ep.table_length is None, "Legacy-only field should be None"
    assert ep.number_of_structures is None, "Legacy-only field should be None"
    assert ep.version == "3.4.0", "Version string mismatch"

    out = ep.to_dict()
    assert out["table_address"] == "0x7a6b5000", "Address formatting mismatch"
    assert "number_of_structures" not in out, "64-bit dict should omit legacy fields"
    print("  ✓ 64-bit entry point parsing works")


def test_missing_anchor():
    """Test that buffers without an anchor are rejected."""
    print("\nTesting missing anchor...")

    for data in (b"", b"_SM", b"_DMI_" + bytes(26), bytes(31), b"_sm_" + bytes(27)):
        with pytest.raises(AnchorNotFound):
            EntryPoint.from_bytes(data)
    print("  ✓ Missing anchors raise AnchorNotFound")


def test_invalid_length():
    """Test zero, oversized and unreadable length bytes."""
    print("\nTesting invalid entry lengths...")

    with pytest.raises(InvalidEntryLength):
        EntryPoint.from_bytes(entry_point_32(length=0))
    with pytest.raises(InvalidEntryLength):
        EntryPoint.from_bytes(entry_point_32(length=0x40))
    with pytest.raises(InvalidEntryLength):
        EntryPoint.from_bytes(entry_point_64(length=0xFF))
    # Anchor present, length byte past the end
    with pytest.raises(InvalidEntryLength):
        EntryPoint.from_bytes(b"_SM3_\x00")
    print("  ✓ Invalid lengths raise InvalidEntryLength")


def test_truncated_fields_read_as_zero():
    """Test that a short but valid-length buffer parses with zeroed fields."""
    print("\nTesting short entry point buffer...")

    data = b"_SM_" + bytes([0x00, 0x08, 0x02, 0x07])
    ep = EntryPoint.from_bytes(data)
    assert ep.major_version == 2, "Major version mismatch"
    assert ep.minor_version == 7, "Minor version mismatch"
    assert ep.table_length == 0, "Missing field should read as 0"
    assert ep.number_of_structures == 0, "Missing field should read as 0"
    print("  ✓ Short buffer parses with defaults")


def test_checksum_polarity():
    """Default mode: valid when the byte sum is non-zero."""
    print("\nTesting checksum polarity...")

    assert ChecksumValidator.is_valid(b"\x01"), "Non-zero sum should pass"
    assert ChecksumValidator.is_valid(b"\x80\x80"), "Sum 0x100 is non-zero and should pass"
    assert not ChecksumValidator.is_valid(bytes(16)), "All-zero buffer should fail"
    assert not ChecksumValidator.is_valid(b""), "Empty buffer should fail"
    print("  ✓ Non-zero sum polarity works")


def test_checksum_strict_mode():
    """Strict mode: valid when the byte sum is 0 mod 256."""
    print("\nTesting strict checksum...")

    good = entry_point_64()
    assert ChecksumValidator.is_valid(good, strict=True), "Checksummed entry should pass"
    assert ChecksumValidator.is_valid(good), "Checksummed entry should also pass the default probe"

    bad = bytearray(good)
    bad[0x05] ^= 0xFF
    assert not ChecksumValidator.is_valid(bytes(bad), strict=True), "Corrupted entry should fail"
    assert not ChecksumValidator.is_valid(b"", strict=True), "Empty buffer should fail"

    with pytest.raises(ChecksumFailure, match="Entry point checksum error"):
        ChecksumValidator.validate(bytes(bad), what="Entry point", strict=True)
    print("  ✓ Strict checksum works")


if __name__ == "__main__":
    test_legacy_entry_point()
    test_64bit_entry_point()
    test_missing_anchor()
    test_invalid_length()
    test_truncated_fields_read_as_zero()
    test_checksum_polarity()
    test_checksum_strict_mode()
    print("\n✅ All entry point tests passed!")
