#!/usr/bin/env python3
"""Test the shared field decoding helpers."""

from sample_tables import raw_record
from smbios_inventory.decoding.conventions import (
    byte, dword, enum_at, first_flag, flags, flags_at, has_field, join, lookup, qword,
    read_bytes, resolve_string, scaled, sentinel, string_at, word,
)

FLAGS = (
    (0x04, "third"),
    (0x01, "first"),
    (0x02, "second"),
)

DUPLICATES = (
    (0x01, "One"),
    (0x0D, "Corrected error"),
    (0x0D, "Uncorrectable error"),
)


def test_string_references():
    """Test 1-based string lookup."""
    print("Testing string references...")

    record = raw_record(1, bytes([1, 2, 0, 9]), ["  Acme  ", "ModelX"])
    assert resolve_string(record, 1) == "Acme", "Strings should be trimmed"
    assert resolve_string(record, 2) == "ModelX", "Second string mismatch"
    assert resolve_string(record, 0) == "", "Index 0 means not specified"
    assert resolve_string(record, 3) == "", "Out-of-range index should be empty"
    assert resolve_string(record, 0, default="Unknown") == "Unknown", "Default not used"

    assert string_at(record, 0x04) == "Acme", "string_at mismatch"
    assert string_at(record, 0x06) == "", "Zero index should be empty"
    assert string_at(record, 0x07) == "", "Index past the string list should be empty"
    assert string_at(record, 0x20) == "", "Offset past the data block should be empty"
    print("  ✓ String references work")


def test_little_endian_reads():
    """Test guarded little-endian integer reads."""
    print("\nTesting integer reads...")

    body = bytes([0x11, 0x22, 0x33, 0x44, 0x55, 0x66, 0x77, 0x88])
    record = raw_record(3, body)
    assert byte(record, 0x04) == 0x11, "Byte mismatch"
    assert word(record, 0x04) == 0x2211, "Word mismatch"
    assert dword(record, 0x04) == 0x44332211, "Dword mismatch"
    assert qword(record, 0x04) == 0x8877665544332211, "Qword mismatch"

    assert has_field(record, 0x0B), "Last byte should be readable"
    assert not has_field(record, 0x0B, 2), "Word at the last byte should not fit"
    assert word(record, 0x0B) == 0, "Partial word should default to 0"
    assert dword(record, 0x0A, default=7) == 7, "Custom default not used"
    assert read_bytes(record, 0x08, 4) == bytes([0x55, 0x66, 0x77, 0x88]), "Slice mismatch"
    assert read_bytes(record, 0x08, 5) == b"", "Slice past the end should be empty"
    print("  ✓ Integer reads work")


def test_bit_flags_follow_table_order():
    """Matching labels come out in table order, not bit order."""
    print("\nTesting bit flags...")

    assert flags(FLAGS, 0x07) == ["third", "first", "second"], "Table order not kept"
    assert flags(FLAGS, 0x03) == ["first", "second"], "Subset mismatch"
    assert flags(FLAGS, 0) == [], "No bits, no labels"
    assert join(flags(FLAGS, 0x05)) == "third, first", "Join mismatch"
    assert join(["a", "b"], ",") == "a,b", "Custom separator mismatch"
    assert first_flag(FLAGS, 0x03) == "first", "First match mismatch"
    assert first_flag(FLAGS, 0x08) == "", "No match should be empty"

    record = raw_record(0, bytes([0x06, 0x01]))
    assert flags_at(record, 0x04, FLAGS) == ["third", "second"], "Byte flags mismatch"
    assert flags_at(record, 0x04, FLAGS, width=2) == ["third", "second"], "Word flags mismatch"
    assert flags_at(record, 0x05, FLAGS, width=2) == [], "Short field gives no flags"
    print("  ✓ Bit flags work")


def test_enum_lookup():
    """Exact-match lookup, first entry wins."""
    print("\nTesting enum lookup...")

    assert lookup(DUPLICATES, 0x0D) == "Corrected error", "First duplicate should win"
    assert lookup(DUPLICATES, 0x02) == "", "Unknown code should be empty"
    assert lookup(DUPLICATES, None) == "", "None should be empty"

    record = raw_record(3, bytes([0x81]))
    assert enum_at(record, 0x04, DUPLICATES) == "", "Unmasked 0x81 has no label"
    assert enum_at(record, 0x04, DUPLICATES, bitmask=0x7F) == "One", "Masked lookup mismatch"
    assert enum_at(record, 0x05, DUPLICATES) == "", "Short field should be empty"
    print("  ✓ Enum lookup works")


def test_sentinels():
    """0x8000 decodes to 0."""
    print("\nTesting sentinel values...")

    assert sentinel(0x8000) == 0, "Sentinel should decode to 0"
    assert sentinel(1200) == 1200, "Normal values pass through"
    assert scaled(0x8000, 1000.0) == 0, "Scaled sentinel should be 0"
    assert scaled(12000, 1000.0) == 12.0, "Scaling mismatch"
    print("  ✓ Sentinels work")


if __name__ == "__main__":
    test_string_references()
    test_little_endian_reads()
    test_bit_flags_follow_table_order()
    test_enum_lookup()
    test_sentinels()
    print("\n✅ All convention tests passed!")
