"""Structure decoding: field conventions, per-type decoders and dispatch."""

from smbios_inventory.decoding.registry import RESERVED_TYPES, StructureDecoderRegistry
from smbios_inventory.decoding.associations import AssociationResolver

__all__ = ["RESERVED_TYPES", "StructureDecoderRegistry", "AssociationResolver"]
