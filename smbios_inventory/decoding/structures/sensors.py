"""Input, power, probe and management structures (types 21, 22, 26-29, 34).

Probe and cooling device readings use 0x8000 for "unknown", which decodes
to 0. Location (or device type) lives in bits 0-4 of the shared byte and
status in bits 5-7.
"""

from typing import Any, Dict

from smbios_inventory.discovery.table_walker import RawRecord
from smbios_inventory.decoding.conventions import (
    CodeTable, byte, dword, enum_at, has_field, lookup, scaled, sentinel, string_at, word,
)

POINTING_DEVICE_TYPES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "Mouse"),
    (0x04, "Track Ball"),
    (0x05, "Track Point"),
    (0x06, "Glide Point"),
    (0x07, "Touch Pad"),
    (0x08, "Touch Screen"),
    (0x09, "Optical Sensor"),
)

POINTING_DEVICE_INTERFACES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "Serial"),
    (0x04, "PS/2"),
    (0x05, "Infrared"),
    (0x06, "HP-HIL"),
    (0x07, "Bus mouse"),
    (0x08, "ADB (Apple Desktop Bus)"),
    (0xA0, "Bus mouse DB-9"),
    (0xA1, "Bus mouse micro-DIN"),
    (0xA2, "USB"),
    (0xA3, "I2C"),
    (0xA4, "SPI"),
)

BATTERY_CHEMISTRIES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "Lead Acid"),
    (0x04, "Nickel Cadmium"),
    (0x05, "Nickel metal hydride"),
    (0x06, "Lithium-ion"),
    (0x07, "Zinc air"),
    (0x08, "Lithium Polymer"),
)

PROBE_STATUSES: CodeTable = (
    (0x20, "Other"),
    (0x40, "Unknown"),
    (0x60, "Ok"),
    (0x80, "Non-critical"),
    (0xA0, "Critical"),
    (0xC0, "Non-recoverable"),
)

COOLING_DEVICE_STATUSES: CodeTable = (
    (0x20, "Other"),
    (0x40, "Unknown"),
    (0x60, "OK"),
    (0x80, "Non-critical"),
    (0xA0, "Critical"),
    (0xC0, "Non-recoverable"),
)

VOLTAGE_PROBE_LOCATIONS: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "Processor"),
    (0x04, "Disk"),
    (0x05, "Peripheral Bay"),
    (0x06, "System Management Module"),
    (0x07, "Motherboard"),
    (0x08, "Memory Module"),
    (0x09, "Processor Module"),
    (0x0A, "Power Unit"),
    (0x0B, "Add-in Card"),
)

TEMPERATURE_PROBE_LOCATIONS: CodeTable = VOLTAGE_PROBE_LOCATIONS + (
    (0x0C, "Front Panel Board"),
    (0x0D, "Back Panel Board"),
    (0x0E, "Power System Board"),
    (0x0F, "Drive Back Plane"),
)

COOLING_DEVICE_TYPES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "Fan"),
    (0x04, "Centrifugal Blower"),
    (0x05, "Chip Fan"),
    (0x06, "Cabinet Fan"),
    (0x07, "Power Supply Fan"),
    (0x08, "Heat Pipe"),
    (0x09, "Integrated Refrigeration"),
    (0x10, "Active Cooling"),
    (0x11, "Passive Cooling"),
)

MANAGEMENT_DEVICE_TYPES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "National Semiconductor LM75"),
    (0x04, "National Semiconductor LM78"),
    (0x05, "National Semiconductor LM79"),
    (0x06, "National Semiconductor LM80"),
    (0x07, "National Semiconductor LM81"),
    (0x08, "Analog Devices ADM9240"),
    (0x09, "Dallas Semiconductor DS1780"),
    (0x0A, "Maxim 1617"),
    (0x0B, "Genesys GL518SM"),
    (0x0C, "Winbond W83781D"),
    (0x0D, "Holtek HT82H791"),
)

MANAGEMENT_ADDRESS_TYPES: CodeTable = (
    (0x01, "Other"),
    (0x02, "Unknown"),
    (0x03, "I/O Port"),
    (0x04, "Memory"),
    (0x05, "SM Bus"),
)

LOCATION_MASK = 0x1F
STATUS_MASK = 0xE0

# Offsets of the probe readings shared by types 26, 28 and 29
PROBE_READINGS = (
    ("maximum_value", 0x06),
    ("minimum_value", 0x08),
    ("resolution", 0x0A),
    ("tolerance", 0x0C),
    ("accuracy", 0x0E),
    ("nominal_value", 0x14),
)


def decode_builtin_pointing_device(record: RawRecord) -> Dict[str, Any]:
    """Decode Built-in Pointing Device (Type 21)."""
    return {
        "object_type": "builtin_pointing_device",
        "device_type": enum_at(record, 0x04, POINTING_DEVICE_TYPES),
        "interface": enum_at(record, 0x05, POINTING_DEVICE_INTERFACES),
        "number_of_buttons": byte(record, 0x06),
    }


def decode_portable_battery(record: RawRecord) -> Dict[str, Any]:
    """Decode Portable Battery (Type 22)."""
    return {
        "object_type": "portable_battery",
        "location": string_at(record, 0x04),
        "manufacturer": string_at(record, 0x05),
        "manufacture_date": string_at(record, 0x06),
        "serial_number": string_at(record, 0x07),
        "device_name": string_at(record, 0x08),
        "device_chemistry": enum_at(record, 0x09, BATTERY_CHEMISTRIES),
        "sdbs_device_chemistry": string_at(record, 0x14),
    }


def decode_probe(record: RawRecord, object_type: str, locations: CodeTable) -> Dict[str, Any]:
    """Shared layout of the voltage, temperature and current probes."""
    location_known = has_field(record, 0x05)
    key = byte(record, 0x05)

    out = {
        "object_type": object_type,
        "description": string_at(record, 0x04),
        "location": lookup(locations, key & LOCATION_MASK) if location_known else "",
        "status": lookup(PROBE_STATUSES, key & STATUS_MASK) if location_known else "",
    }
    for name, offset in PROBE_READINGS:
        out[name] = scaled(word(record, offset), 1000.0) if has_field(record, offset, 2) else 0
    return out


def decode_voltage_probe(record: RawRecord) -> Dict[str, Any]:
    """Decode Voltage Probe (Type 26), readings in volts."""
    return decode_probe(record, "voltage_probe", VOLTAGE_PROBE_LOCATIONS)


def decode_temperature_probe(record: RawRecord) -> Dict[str, Any]:
    """Decode Temperature Probe (Type 28)."""
    return decode_probe(record, "temperature_probe", TEMPERATURE_PROBE_LOCATIONS)


def decode_electrical_current_probe(record: RawRecord) -> Dict[str, Any]:
    """Decode Electrical Current Probe (Type 29), readings in amps."""
    return decode_probe(record, "electrical_current_probe", VOLTAGE_PROBE_LOCATIONS)


def decode_cooling_device(record: RawRecord) -> Dict[str, Any]:
    """Decode Cooling Device (Type 27)."""
    type_known = has_field(record, 0x06)
    key = byte(record, 0x06)
    return {
        "object_type": "cooling_device",
        "temperature_probe_handle": word(record, 0x04),
        "device_type": lookup(COOLING_DEVICE_TYPES, key & LOCATION_MASK) if type_known else "",
        "device_status": lookup(COOLING_DEVICE_STATUSES, key & STATUS_MASK) if type_known else "",
        "cooling_unit_group": byte(record, 0x07),
        "nominal_speed": sentinel(word(record, 0x0C)),
        "description": string_at(record, 0x0E),
    }


def decode_management_device_information(record: RawRecord) -> Dict[str, Any]:
    """Decode Management Device (Type 34)."""
    return {
        "object_type": "management_device_information",
        "description": string_at(record, 0x04),
        "type": enum_at(record, 0x05, MANAGEMENT_DEVICE_TYPES),
        "address": dword(record, 0x06),
        "address_type": enum_at(record, 0x0A, MANAGEMENT_ADDRESS_TYPES),
    }


DECODERS = {
    21: decode_builtin_pointing_device,
    22: decode_portable_battery,
    26: decode_voltage_probe,
    27: decode_cooling_device,
    28: decode_temperature_probe,
    29: decode_electrical_current_probe,
    34: decode_management_device_information,
}
