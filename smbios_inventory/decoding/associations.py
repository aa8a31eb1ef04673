"""Group Associations (type 14) post-pass."""

import logging
from typing import Any, Dict, List, Sequence, Tuple

from smbios_inventory.discovery.table_walker import RawRecord
from smbios_inventory.decoding.conventions import byte, resolve_string
from smbios_inventory.decoding.registry import StructureDecoderRegistry

logger = logging.getLogger(__name__)

GROUP_ASSOCIATIONS_TYPE = 14
HEADER_SIZE = 0x04
GROUP_ENTRY_SIZE = 3

DecodedRecord = Tuple[str, Dict[str, Any]]


class AssociationResolver:
    """Re-decode the records each group association points at.

    Every 3-byte entry after the header is (group name string, item type,
    item handle). Each walked record whose type equals the item type is
    decoded again and appended to the output; duplicates of the main pass
    are kept.

    The decoder is selected with the entry's item *handle* byte rather than
    the item type, so a match only produces output when that handle byte
    happens to be a registered type code.
    """

    def __init__(self, registry: StructureDecoderRegistry):
        self.registry = registry

    def resolve(self, association: RawRecord, records: Sequence[RawRecord]) -> List[DecodedRecord]:
        """
        Resolve one type-14 record against the walked records.

        Args:
            association: The group associations record.
            records: Every record walked from the table, in table order.

        Returns:
            (object_type, fields) pairs for each re-decoded match.
        """
        data = association.data
        if len(data) < HEADER_SIZE + GROUP_ENTRY_SIZE:
            logger.debug(f"Group association 0x{association.handle:04x} has no entries")
            return []

        out: List[DecodedRecord] = []
        offset = HEADER_SIZE
        # A 7-byte record holds exactly one entry and is resolved
        while offset + GROUP_ENTRY_SIZE <= len(data):
            group_name = resolve_string(association, byte(association, offset), default="Unknown")
            item_type = byte(association, offset + 1)
            item_handle = byte(association, offset + 2)
            logger.debug(
                f"Group '{group_name}': item type {item_type}, handle byte 0x{item_handle:02x} "
                f"used as decoder selector"
            )

            for record in records:
                if record.type != item_type:
                    continue
                fields = self.registry.decode(record, selector=item_handle)
                if fields.get("object_type"):
                    out.append((fields["object_type"], fields))
            offset += GROUP_ENTRY_SIZE
        return out

    def resolve_all(self, records: Sequence[RawRecord]) -> List[DecodedRecord]:
        """Resolve every type-14 record, in table order."""
        out: List[DecodedRecord] = []
        for record in records:
            if record.type == GROUP_ASSOCIATIONS_TYPE:
                out.extend(self.resolve(record, records))
        return out
