"""Memory structures (types 5, 6, 16, 17, 18)."""

from typing import Any, Dict

from smbios_inventory.discovery.table_walker import RawRecord
from smbios_inventory.decoding.conventions import (
    CodeTable, byte, dword, enum_at, flags_at, has_field, join, qword, string_at, word,
)

# Type 5 (obsolete)
ERROR_DETECTING_METHODS: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "None"),
    (0x04, "8-bit Parity"),
    (0x05, "32-bit ECC"),
    (0x06, "64-bit ECC"),
    (0x07, "128-bit ECC"),
    (0x08, "CRC"),
)

ERROR_CORRECTING_CAPABILITIES: CodeTable = (
    (0x00, "Other"),
    (0x01, "Unknown"),
    (0x02, "None"),
    (0x03, "Single-Bit Error Correcting"),
    (0x04, "Double-Bit Error Correcting"),
    (0x05, "Error Scrubbing"),
)

INTERLEAVES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "One-Way Interleave"),
    (0x04, "Two-Way Interleave"),
    (0x05, "Four-Way Interleave"),
    (0x06, "Eight-Way Interleave"),
    (0x07, "Sixteen-Way Interleave"),
)

# Type 6 (obsolete)
MODULE_MEMORY_TYPES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x04, "Standard"),
    (0x08, "Fast Page Mode"),
    (0x10, "EDO"),
    (0x20, "Parity"),
    (0x40, "ECC"),
    (0x80, "SIMM"),
    (0x100, "DIMM"),
    (0x200, "Burst EDO"),
    (0x400, "SDRAM"),
)

# Type 16
ARRAY_LOCATIONS: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "System board or motherboard"),
    (0x04, "ISA add-on card"),
    (0x05, "EISA add-on card"),
    (0x06, "PCI add-on card"),
    (0x07, "MCA add-on card"),
    (0x08, "PCMCIA add-on card"),
    (0x09, "Proprietary add-on card"),
    (0x0A, "NuBus"),
    (0xA0, "PC-98/C20 add-on card"),
    (0xA1, "PC-98/C24 add-on card"),
    (0xA2, "PC-98/E add-on card"),
    (0xA3, "PC-98/Local bus add-on card"),
    (0xA4, "CXL add-on card"),
)

ARRAY_USES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "System memory"),
    (0x04, "Video memory"),
    (0x05, "Flash memory"),
    (0x06, "Non-volatile RAM"),
    (0x07, "Cache memory"),
)

ARRAY_ERROR_CORRECTION: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "None"),
    (0x04, "Parity"),
    (0x05, "Single-bit ECC"),
    (0x06, "Multi-bit ECC"),
    (0x07, "CRC"),
)

# Type 17
FORM_FACTORS: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "SIMM"),
    (0x04, "SIP"),
    (0x05, "Chip"),
    (0x06, "DIP"),
    (0x07, "ZIP"),
    (0x08, "Property Card"),
    (0x09, "DIMM"),
    (0x0A, "TSOP"),
    (0x0B, "Row of chips"),
    (0x0C, "RIMM"),
    (0x0D, "SODIMM"),
    (0x0E, "SRIMM"),
    (0x0F, "FB-DIMM"),
    (0x10, "Die"),
)

DEVICE_MEMORY_TYPES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "DRAM"),
    (0x04, "EDRAM"),
    (0x05, "VRAM"),
    (0x06, "SRAM"),
    (0x07, "RAM"),
    (0x08, "ROM"),
    (0x09, "FLASH"),
    (0x0A, "EEPROM"),
    (0x0B, "FEPROM"),
    (0x0C, "EPROM"),
    (0x0D, "CDRAM"),
    (0x0E, "3DRAM"),
    (0x0F, "SDRAM"),
    (0x10, "SGRAM"),
    (0x11, "RDRAM"),
    (0x12, "DDR"),
    (0x13, "DDR2"),
    (0x14, "DDR2 FB-DIMM"),
    (0x18, "DDR3"),
    (0x19, "FBD2"),
    (0x1A, "DDR4"),
    (0x1B, "LPDDR"),
    (0x1C, "LPDDR2"),
    (0x1D, "LPDDR3"),
    (0x1E, "LPDDR4"),
    (0x1F, "Logical non-volatile device"),
    (0x20, "HBM"),
    (0x21, "HBM2"),
    (0x22, "DDR5"),
    (0x23, "LPDDR5"),
    (0x24, "HBM3"),
)

TYPE_DETAILS: CodeTable = (
    (0x00, "Reserved"),
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x04, "Fast-paged"),
    (0x08, "Static colunm"),
    (0x10, "Pseudo static"),
    (0x20, "RAMBUS"),
    (0x40, "Synchronous"),
    (0x80, "CMOS"),
    (0x100, "EDO"),
    (0x200, "Window DRAM"),
    (0x400, "Cache DRAM"),
    (0x800, "Non-volatile"),
    (0x1000, "Buffered"),
    (0x2000, "Unbuffered"),
    (0x4000, "LRDIMM"),
)

MEMORY_TECHNOLOGIES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "DRAM"),
    (0x04, "NVDIMM-N"),
    (0x05, "NVDIMM-F"),
    (0x06, "NVDIMM-P"),
    (0x07, "Intel Optane"),
)

OPERATING_MODE_CAPABILITIES: CodeTable = (
    (0x01, "Reserved"),
    (0x02, "Other"),
    (0x04, "Unknown"),
    (0x08, "Volatile memory"),
    (0x10, "Byte-accessible persistent memory"),
    (0x20, "Block-accessible persistent memory"),
)

# Type 18; 0x0D is listed twice and the first label wins
MEMORY_ERROR_TYPES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "OK"),
    (0x04, "Bad read"),
    (0x05, "Parity error"),
    (0x06, "Single-bit error"),
    (0x07, "Double-bit error"),
    (0x08, "Multi-bit error"),
    (0x09, "Nibble error"),
    (0x0A, "Checksum error"),
    (0x0B, "CRC error"),
    (0x0C, "Corrected single-bit error"),
    (0x0D, "Corrected error"),
    (0x0D, "Uncorrectable error"),
)

ERROR_GRANULARITIES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "Device level"),
    (0x04, "Memory partition level"),
)

ERROR_OPERATIONS: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "Read"),
    (0x04, "Write"),
    (0x05, "Partial write"),
)

# Module size codes meaning "not determinable", "not enabled", "not installed"
MODULE_SIZE_UNAVAILABLE = (0x7D, 0x7E, 0x7F)

MB = 1024 * 1024


def decode_memory_controller_information(record: RawRecord) -> Dict[str, Any]:
    """Decode Memory Controller Information (Type 5, obsolete)."""
    return {
        "object_type": "memory_controller_information",
        "error_detecting_method": enum_at(record, 0x04, ERROR_DETECTING_METHODS),
        "error_correcting_capability": join(flags_at(record, 0x05, ERROR_CORRECTING_CAPABILITIES)),
        "supported_interleave": enum_at(record, 0x06, INTERLEAVES),
        "current_interleave": enum_at(record, 0x07, INTERLEAVES),
    }


def module_size(key: int) -> int:
    """Installed/enabled size in bytes: 2**n MB in bits 0-6.

    Bit 7 marks a double-bank connection and does not affect the size.
    """
    key &= 0x7F
    if key in MODULE_SIZE_UNAVAILABLE:
        return 0
    return (2 ** key) * MB


def decode_memory_module_information(record: RawRecord) -> Dict[str, Any]:
    """Decode Memory Module Information (Type 6, obsolete)."""
    return {
        "object_type": "memory_module_information",
        "socket_designation": string_at(record, 0x04),
        "bank_connections": byte(record, 0x05),
        "current_speed": f"{byte(record, 0x06)} ns",
        "current_memory_type": join(flags_at(record, 0x07, MODULE_MEMORY_TYPES, width=2)),
        "installed_size": module_size(byte(record, 0x09)) if has_field(record, 0x09) else 0,
        "enabled_size": module_size(byte(record, 0x0A)) if has_field(record, 0x0A) else 0,
    }


def decode_physical_memory_array(record: RawRecord) -> Dict[str, Any]:
    """Decode Physical Memory Array (Type 16).

    maximum_capacity is in KB; 0x80000000 means the size is held in
    extended_maximum_capacity (bytes, SMBIOS 2.7+).
    """
    return {
        "object_type": "physical_memory_array",
        "location": enum_at(record, 0x04, ARRAY_LOCATIONS),
        "use": enum_at(record, 0x05, ARRAY_USES),
        "memory_error_correction": enum_at(record, 0x06, ARRAY_ERROR_CORRECTION),
        "maximum_capacity": dword(record, 0x07),
        "number_of_memory_devices": word(record, 0x0D),
        "extended_maximum_capacity": qword(record, 0x0F),
    }


def device_size(key: int) -> int:
    """Size in bytes; bit 15 set means the value is in KB, clear in MB."""
    granularity = 1024 if key & 0x8000 else MB
    return (key & 0x7FFF) * granularity


def millivolts(record: RawRecord, offset: int) -> float:
    if not has_field(record, offset, 2):
        return 0.0
    return word(record, offset) / 1000.0


def decode_memory_device(record: RawRecord) -> Dict[str, Any]:
    """Decode Memory Device (Type 17)."""
    return {
        "object_type": "memory_device",
        "total_width": word(record, 0x08),
        "data_width": word(record, 0x0A),
        "size": device_size(word(record, 0x0C)),
        "form_factor": enum_at(record, 0x0E, FORM_FACTORS),
        "device_set": byte(record, 0x0F),
        "device": string_at(record, 0x10),
        "bank": string_at(record, 0x11),
        "memory_type": enum_at(record, 0x12, DEVICE_MEMORY_TYPES),
        "type_detail": join(flags_at(record, 0x13, TYPE_DETAILS, width=2)),
        "speed": word(record, 0x15),
        "manufacturer": string_at(record, 0x17),
        "serial_number": string_at(record, 0x18),
        "asset_tag": string_at(record, 0x19),
        "part_number": string_at(record, 0x1A),
        "extended_size": dword(record, 0x1C),
        "configured_speed": word(record, 0x20),
        "minimum_voltage": millivolts(record, 0x22),
        "maximum_voltage": millivolts(record, 0x24),
        "configured_voltage": millivolts(record, 0x26),
        "memory_technology": enum_at(record, 0x28, MEMORY_TECHNOLOGIES),
        "memory_operating_mode_capability": join(flags_at(record, 0x29, OPERATING_MODE_CAPABILITIES, width=2)),
        "firmware_version": string_at(record, 0x2B),
        "module_manufacturer_id": word(record, 0x2C),
        "module_product_id": word(record, 0x2E),
    }


def decode_memory_error_information(record: RawRecord) -> Dict[str, Any]:
    """Decode 32-Bit Memory Error Information (Type 18)."""
    return {
        "object_type": "memory_error_information",
        "error_type": enum_at(record, 0x04, MEMORY_ERROR_TYPES),
        "error_granularity": enum_at(record, 0x05, ERROR_GRANULARITIES),
        "error_operation": enum_at(record, 0x06, ERROR_OPERATIONS),
    }


DECODERS = {
    5: decode_memory_controller_information,
    6: decode_memory_module_information,
    16: decode_physical_memory_array,
    17: decode_memory_device,
    18: decode_memory_error_information,
}
