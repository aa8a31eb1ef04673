"""BIOS, system, baseboard and chassis structures (types 0-3, 11-13)."""

import uuid
from typing import Any, Dict

from smbios_inventory.discovery.table_walker import RawRecord
from smbios_inventory.decoding.conventions import (
    CodeTable, byte, dword, enum_at, flags_at, has_field, join, read_bytes, string_at,
)

# Type 0, BIOS Characteristics (DWORD at 0x0A)
BIOS_CHARACTERISTICS: CodeTable = (
    (0x1, "Reserved"),
    (0x2, "Reserved"),
    (0x4, "Unknown"),
    (0x8, "BIOS Characteristics are not supported"),
    (0x10, "ISA is supported"),
    (0x20, "MCA is supported"),
    (0x40, "EISA is supported"),
    (0x80, "PCI is supported"),
    (0x100, "PC card (PCMCIA) is supported"),
    (0x200, "Plug and Play is supported"),
    (0x400, "APM is supported"),
    (0x800, "BIOS is upgradeable (Flash)"),
    (0x1000, "BIOS shadowing is allowed"),
    (0x2000, "VL-VESA is supported"),
    (0x4000, "ESCD support is available"),
    (0x8000, "Boot from CD is supported"),
    (0x10000, "Selectable boot is supported"),
    (0x20000, "BIOS ROM is socketed (e.g. PLCC or SOP socket)"),
    (0x40000, "Boot from PC card (PCMCIA) is supported"),
    (0x80000, "EDD specification is supported"),
    (0x100000, "Int 13h-Japanese floppy for NEC 9800 1.2 MB (3.5”, 1K bytes/sector, 360 RPM) is supported"),
    (0x200000, "Int 13h-Japanese floppy for Toshiba 1.2 MB (3.5”, 360 RPM) is supported"),
    (0x400000, "Int 13h-5.25” / 360 KB floppy services are supported"),
    (0x800000, "Int 13h-5.25” /1.2 MB floppy services are supported"),
    (0x1000000, "Int 13h-3.5” / 720 KB floppy services are supported"),
    (0x2000000, "Int 13h-3.5” / 2.88 MB floppy services are supported"),
    (0x4000000, "Int 5h print screen Service is supported"),
    (0x8000000, "Int 9h 8042 keyboard services are supported"),
    (0x10000000, "Int 14h serial services are supported"),
    (0x20000000, "Int 17h printer services are supported"),
    (0x40000000, "Int 10h CGA/Mono Video Services are supported"),
    (0x80000000, "NEC PC-98"),
)

# Type 0, BIOS Characteristics Extension Byte 1 (0x12)
BIOS_EXT_CHARACTERISTICS: CodeTable = (
    (0x01, "ACPI is supported"),
    (0x02, "USB Legacy is supported"),
    (0x04, "AGP is supported"),
    (0x08, "I2O boot is supported"),
    (0x10, "LS-120 SuperDisk boot is supported"),
    (0x20, "ATAPI ZIP drive boot is supported"),
    (0x40, "1394 boot is supported"),
    (0x80, "Smart battery is supported"),
)

WAKEUP_TYPES: CodeTable = (
    (0x00, "Reserved"),
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "APM Timer"),
    (0x04, "Modem Ring"),
    (0x05, "LAN Remote"),
    (0x06, "Power Switch"),
    (0x07, "PCI PME#"),
    (0x08, "AC Power Restored"),
)

BASEBOARD_FEATURES: CodeTable = (
    (0x01, "Hosting board"),
    (0x02, "Daughter required"),
    (0x04, "Removable"),
    (0x08, "Replaceable"),
    (0x10, "Hot swappable"),
)

BOARD_TYPES: CodeTable = (
    (0x01, "Unknown"),
    (0x02, "Other"),
    (0x03, "Server Blade"),
    (0x04, "Connectivity Switch"),
    (0x05, "System Management Module"),
    (0x06, "Processor Module"),
    (0x07, "I/O Module"),
    (0x08, "Memory Module"),
    (0x09, "Daughter board"),
    (0x0A, "Motherboard"),
    (0x0B, "Processor/Memory Module"),
    (0x0C, "Processor/IO Module"),
    (0x0D, "Interconnect board"),
)

CHASSIS_TYPES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "Desktop"),
    (0x04, "Low Profile Desktop"),
    (0x05, "Pizza Box"),
    (0x06, "Mini Tower"),
    (0x07, "Tower"),
    (0x08, "Portable"),
    (0x09, "Laptop"),
    (0x0A, "Notebook"),
    (0x0B, "Hand Held"),
    (0x0C, "Docking Station"),
    (0x0D, "All in One"),
    (0x0E, "Sub Notebook"),
    (0x0F, "Space-saving"),
    (0x10, "Lunch Box"),
    (0x11, "Main Server Chassis"),
    (0x12, "Expansion Chassis"),
    (0x13, " SubChassis"),
    (0x14, "Bus Expansion Chassis"),
    (0x15, "Peripheral Chassis"),
    (0x16, "RAID Chassis"),
    (0x17, "Rack Mount Chassis"),
    (0x18, "Sealed-case PC"),
    (0x19, "Multi-system chassis"),
    (0x1A, "Compact PCI"),
    (0x1B, "Advanced TCA"),
    (0x1C, "Blade"),
    (0x1D, "Blade Enclosure"),
    (0x1E, "Tablet"),
    (0x1F, "Convertible"),
    (0x20, "Detachable"),
    (0x21, "IoT Gateway"),
    (0x22, "Embedded PC"),
    (0x23, "Mini PC"),
    (0x24, "Stick PC"),
)

CHASSIS_STATES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "Safe"),
    (0x04, "Warning"),
    (0x05, "Critical"),
    (0x06, "Non-recoverable"),
)

SECURITY_STATUSES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "None"),
    (0x04, "External interface locked out"),
    (0x05, "External interface enabled"),
)


def decode_bios_information(record: RawRecord) -> Dict[str, Any]:
    """Decode BIOS Information (Type 0)."""
    rom_size = byte(record, 0x09) + 1 if has_field(record, 0x09) else 0

    bios_release = ""
    if has_field(record, 0x15):
        bios_release = f"{record.data[0x14]}.{record.data[0x15]}"

    return {
        "object_type": "bios_information",
        "vendor": string_at(record, 0x04),
        "version": string_at(record, 0x05),
        "release_date": string_at(record, 0x08),
        # ROM size is stored as 64K * (n + 1)
        "rom_size": rom_size * 1024 * 64,
        "characteristics": join(flags_at(record, 0x0A, BIOS_CHARACTERISTICS, width=4)),
        "ext_characteristics": join(flags_at(record, 0x12, BIOS_EXT_CHARACTERISTICS)),
        "bios_release": bios_release,
    }


def format_uuid(raw: bytes) -> str:
    """Format the 16-byte system UUID in the byte order it is stored."""
    if len(raw) != 16:
        return ""
    return str(uuid.UUID(bytes=raw))


def decode_system_information(record: RawRecord) -> Dict[str, Any]:
    """Decode System Information (Type 1)."""
    return {
        "object_type": "system_information",
        "manufacturer": string_at(record, 0x04),
        "product_name": string_at(record, 0x05),
        "version": string_at(record, 0x06),
        "serial_number": string_at(record, 0x07),
        "uuid": format_uuid(read_bytes(record, 0x08, 16)),
        "wakeup_type": enum_at(record, 0x18, WAKEUP_TYPES),
        "sku_number": string_at(record, 0x19),
        "family": string_at(record, 0x1A),
    }


def decode_baseboard_information(record: RawRecord) -> Dict[str, Any]:
    """Decode Baseboard (or Module) Information (Type 2)."""
    return {
        "object_type": "baseboard_information",
        "manufacturer": string_at(record, 0x04),
        "product": string_at(record, 0x05),
        "version": string_at(record, 0x06),
        "serial_number": string_at(record, 0x07),
        "feature": join(flags_at(record, 0x09, BASEBOARD_FEATURES)),
        "asset_tag": string_at(record, 0x08),
        "chassis_location": string_at(record, 0x0A),
        "board_type": enum_at(record, 0x0D, BOARD_TYPES),
    }


def decode_chassis_information(record: RawRecord) -> Dict[str, Any]:
    """Decode System Enclosure or Chassis (Type 3)."""
    # Bit 7 of the type byte is the chassis lock flag
    return {
        "object_type": "chassis_information",
        "manufacturer": string_at(record, 0x04),
        "chassis_type": enum_at(record, 0x05, CHASSIS_TYPES, bitmask=0x7F),
        "version": string_at(record, 0x06),
        "serial_number": string_at(record, 0x07),
        "asset_tag": string_at(record, 0x08),
        "bootup_state": enum_at(record, 0x09, CHASSIS_STATES),
        "power_supply_state": enum_at(record, 0x0A, CHASSIS_STATES),
        "thermal_state": enum_at(record, 0x0B, CHASSIS_STATES),
        "security_status": enum_at(record, 0x0C, SECURITY_STATUSES),
        "oem_defined": dword(record, 0x0D),
        "sku_number": string_at(record, chassis_sku_offset(record)),
        "height": byte(record, 0x11),
    }


def chassis_sku_offset(record: RawRecord) -> int:
    """SKU number follows the variable-length contained elements block.

    Offset is 0x15 + n * m, with n the element count (0x13) and m the
    element record length (0x14).
    """
    count = byte(record, 0x13)
    size = byte(record, 0x14)
    return 0x15 + count * size


def decode_oem_strings(record: RawRecord) -> Dict[str, Any]:
    """Decode OEM Strings (Type 11)."""
    return {
        "object_type": "oem_strings",
        "oem_strings": list(record.strings),
    }


def decode_system_configuration_options(record: RawRecord) -> Dict[str, Any]:
    """Decode System Configuration Options (Type 12)."""
    return {
        "object_type": "system_configuration_options",
        "system_configuration_options": list(record.strings),
    }


def decode_bios_language_information(record: RawRecord) -> Dict[str, Any]:
    """Decode BIOS Language Information (Type 13)."""
    current = string_at(record, 0x15)
    return {
        "object_type": "bios_language_information",
        "installable_languages": list(record.strings),
        "current_language": current,
    }


DECODERS = {
    0: decode_bios_information,
    1: decode_system_information,
    2: decode_baseboard_information,
    3: decode_chassis_information,
    11: decode_oem_strings,
    12: decode_system_configuration_options,
    13: decode_bios_language_information,
}
