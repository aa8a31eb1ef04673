#!/usr/bin/env python3
"""Test structure table walking and string set splitting."""

import random
import struct

from sample_tables import sample_table, structure, system_information_body
from smbios_inventory.discovery.table_walker import RawRecord, TableWalker, split_strings


def test_single_record():
    """Test a single type 1 record followed by its string set."""
    print("Testing single record walk...")

    table = structure(1, 0x0001, system_information_body(), ["Acme", "ModelX"])
    assert table[1] == 0x1B, "Helper should build a 0x1B-byte formatted area"
    assert table.endswith(b"Acme\x00ModelX\x00\x00"), "String set layout mismatch"

    records = TableWalker.walk(table)
    assert len(records) == 1, f"Expected 1 record, got {len(records)}"
    record = records[0]
    assert record.type == 1, "Type mismatch"
    assert record.length == 0x1B, "Length mismatch"
    assert record.handle == 0x0001, "Handle mismatch"
    assert len(record.data) == 0x1B, "Data block should include the header"
    assert record.strings == ("Acme", "ModelX"), f"Strings mismatch: {record.strings}"
    print("  ✓ Single record walk works")


def test_multiple_records():
    """Test walking consecutive records, including one without strings."""
    print("\nTesting multi-record walk...")

    records = TableWalker.walk(sample_table())
    assert [r.type for r in records] == [0, 1, 2, 127], "Type order mismatch"
    assert [r.handle for r in records] == [0x0000, 0x0001, 0x0002, 0xFEFF], "Handle mismatch"
    assert records[0].strings == ("Acme BIOS", "1.2.3", "01/02/2024"), "BIOS strings mismatch"
    assert records[3].strings == (), "Empty string set should give no strings"
    print("  ✓ Multi-record walk works")


def test_truncated_last_record():
    """A record declaring more bytes than remain ends the walk without error."""
    print("\nTesting truncated last record...")

    table = structure(1, 0x0001, system_information_body(), ["Acme", "ModelX"])
    tail = struct.pack("<BBH", 4, 50, 0x0002) + bytes(6)
    records = TableWalker.walk(table + tail)
    assert len(records) == 1, "Only the complete record should be returned"
    assert records[0].type == 1, "Type mismatch"
    print("  ✓ Truncated record stops the walk")


def test_short_tail_and_bad_length():
    """Fewer than 4 trailing bytes, or a length below 4, end the walk."""
    print("\nTesting short tail and bad length...")

    table = structure(127, 0x0010)
    assert len(TableWalker.walk(table + b"\x01\x04")) == 1, "Short tail should be ignored"

    bad = struct.pack("<BBH", 1, 2, 0x0011) + bytes(8)
    assert len(TableWalker.walk(table + bad + table)) == 1, "Length < 4 should stop the walk"
    assert TableWalker.walk(b"") == [], "Empty table gives no records"
    print("  ✓ Short tail and bad length handled")


def test_string_set_exhaustion():
    """Running off the end keeps the partial string."""
    print("\nTesting string set without terminator...")

    header = struct.pack("<BBH", 11, 5, 0x0020) + b"\x02"
    records = TableWalker.walk(header + b"First\x00Partial")
    assert len(records) == 1, "Record should still be emitted"
    assert records[0].strings == ("First", "Partial"), f"Strings mismatch: {records[0].strings}"

    strings, next_offset = split_strings(b"One\x00", 0)
    assert strings == ("One",), "Single null at the end should close the string"
    assert next_offset == 4, "Offset should be the end of the buffer"
    print("  ✓ Partial strings kept")


def test_invalid_utf8_is_replaced():
    """Undecodable bytes never raise."""
    print("\nTesting invalid UTF-8 in strings...")

    strings, _ = split_strings(b"Bad\xff\xfeName\x00\x00", 0)
    assert len(strings) == 1, "Expected one string"
    assert strings[0].startswith("Bad") and strings[0].endswith("Name"), "Valid parts should survive"
    assert "�" in strings[0], "Invalid bytes should become replacement characters"
    print("  ✓ Invalid UTF-8 replaced")


def test_random_truncation_never_raises():
    """Every prefix of a valid table walks without error."""
    print("\nTesting random truncations...")

    table = sample_table()
    full = TableWalker.walk(table)
    rng = random.Random(1234)
    cuts = sorted(set(rng.randrange(0, len(table) + 1) for _ in range(200)) | {0, len(table)})

    for cut in cuts:
        records = TableWalker.walk(table[:cut])
        assert len(records) <= len(full), f"Too many records at cut {cut}"
        for record in records:
            assert isinstance(record, RawRecord), "Walker should only yield RawRecords"
            assert len(record.data) == record.length, f"Data length mismatch at cut {cut}"
            assert record.length >= 4, "Record length below header size"
    print(f"  ✓ {len(cuts)} truncations walked cleanly")


def test_walk_ignores_structure_count():
    """The walk is bounded by the buffer only."""
    print("\nTesting buffer-bounded walk...")

    table = b"".join(structure(127, h) for h in range(10))
    assert len(TableWalker.walk(table)) == 10, "All structures should be walked"
    print("  ✓ Walk bounded by buffer")


if __name__ == "__main__":
    test_single_record()
    test_multiple_records()
    test_truncated_last_record()
    test_short_tail_and_bad_length()
    test_string_set_exhaustion()
    test_invalid_utf8_is_replaced()
    test_random_truncation_never_raises()
    test_walk_ignores_structure_count()
    print("\n✅ All table walker tests passed!")
