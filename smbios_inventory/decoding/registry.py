"""Structure type → decoder dispatch."""

import logging
from typing import Any, Callable, Dict, Optional

from smbios_inventory.discovery.table_walker import RawRecord
from smbios_inventory.decoding.structures import connectors, memory, platform, processor, sensors

logger = logging.getLogger(__name__)

Decoder = Callable[[RawRecord], Dict[str, Any]]

# Recognised but intentionally not decoded: memory channel (37), IPMI device
# (38), additional information (40), management controller host interface (42)
RESERVED_TYPES = (37, 38, 40, 42)


class StructureDecoderRegistry:
    """Registry of per-type structure decoders."""

    def __init__(self):
        """Initialize decoder registry."""
        self.decoders: Dict[int, Decoder] = {}
        self._register_default_decoders()

    def _register_default_decoders(self) -> None:
        """Register the decoders shipped with each structures module."""
        for module in (platform, processor, memory, connectors, sensors):
            for type_code, decoder in module.DECODERS.items():
                self.register(type_code, decoder)

    def register(self, type_code: int, decoder: Decoder) -> None:
        """
        Register (or replace) the decoder for a structure type.

        Args:
            type_code: SMBIOS structure type.
            decoder: Callable taking a RawRecord and returning its fields.
        """
        if type_code in RESERVED_TYPES:
            raise ValueError(f"Structure type {type_code} is reserved and cannot be decoded")
        self.decoders[type_code] = decoder

    def is_registered(self, type_code: int) -> bool:
        return type_code in self.decoders

    def decode(self, record: RawRecord, selector: Optional[int] = None) -> Dict[str, Any]:
        """
        Decode a record with the decoder chosen by ``selector``.

        Args:
            record: Walked structure.
            selector: Type code used to pick the decoder. Defaults to the
                record's own type.

        Returns:
            Decoded fields with ``type`` and ``handle`` added, or an empty
            dict for reserved and unregistered types.
        """
        type_code = record.type if selector is None else selector
        if type_code in RESERVED_TYPES:
            logger.debug(f"Skipping reserved structure type {type_code} (handle 0x{record.handle:04x})")
            return {}

        decoder = self.decoders.get(type_code)
        if decoder is None:
            logger.debug(f"No decoder for structure type {type_code} (handle 0x{record.handle:04x})")
            return {}

        fields = decoder(record)
        if fields:
            fields["type"] = record.type
            fields["handle"] = record.handle
        return fields
