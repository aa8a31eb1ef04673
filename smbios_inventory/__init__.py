"""Decode firmware SMBIOS/DMI tables into inventory records."""

from smbios_inventory.discovery import TableSource
from smbios_inventory.session import DecodeResult, DecodeSession, DecoderSettings, decode_buffers

__all__ = ["TableSource", "DecodeResult", "DecodeSession", "DecoderSettings", "decode_buffers"]
