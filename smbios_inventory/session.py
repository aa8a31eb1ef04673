"""One decode pass over an entry point and structure table.

EntryPoint → checksum → TableWalker → registry (per record) → group
associations. All state lives on the session, so decoding the same buffers
twice yields identical results.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from smbios_inventory.decoding.associations import AssociationResolver
from smbios_inventory.decoding.registry import StructureDecoderRegistry
from smbios_inventory.discovery import TableSource
from smbios_inventory.discovery.entry_point import ChecksumValidator, EntryPoint
from smbios_inventory.discovery.table_walker import RawRecord, TableWalker
from smbios_inventory.errors import ChecksumFailure, SMBIOSDecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecoderSettings:
    """Decode behaviour switches (see the [decoding] config section)."""
    strict_checksum: bool = False
    validate_table_checksum: bool = True
    resolve_associations: bool = True


@dataclass
class DecodeResult:
    """Outcome of a DecodeSession."""
    records: List[Tuple[str, Dict[str, Any]]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    entry_point: Optional[EntryPoint] = None
    raw_records: List[RawRecord] = field(default_factory=list)
    version: Optional[str] = None

    @property
    def error(self) -> Optional[str]:
        """First fatal failure, reported only when nothing was decoded."""
        if self.records or not self.errors:
            return None
        return self.errors[0]

    @property
    def reduced_confidence(self) -> bool:
        """True when the table was decoded without entry point metadata."""
        return self.version is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "entry_point": self.entry_point.to_dict() if self.entry_point else None,
            "records": [fields for _, fields in self.records],
            "errors": list(self.errors),
        }


class DecodeSession:
    """Decode context for one pair of buffers.

    Usage:
        with DecodeSession(TableSource.from_sysfs()) as session:
            result = session.run()
    """

    def __init__(self, source: TableSource, settings: Optional[DecoderSettings] = None,
                 registry: Optional[StructureDecoderRegistry] = None):
        self.source = source
        self.settings = settings or DecoderSettings()
        self.registry = registry or StructureDecoderRegistry()
        self.result: Optional[DecodeResult] = None

    def __enter__(self) -> "DecodeSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        # session.result stays readable after the block; errors propagate
        return False

    def run(self) -> DecodeResult:
        """
        Run the full pipeline.

        Entry point failures are recorded and the table is still walked.
        A table checksum failure ends the session with no records.

        Returns:
            DecodeResult for this session.
        """
        result = DecodeResult()
        self.result = result

        result.entry_point = self._decode_entry_point(result)
        if result.entry_point is not None:
            result.version = result.entry_point.version
        else:
            result.version = self.source.version

        # The structure table carries no checksum byte, so it only gets the non-zero probe
        table = self.source.table
        if self.settings.validate_table_checksum:
            try:
                ChecksumValidator.validate(table, what="Table")
            except ChecksumFailure as e:
                result.errors.append(str(e))
                return result

        result.raw_records = TableWalker.walk(table)

        for record in result.raw_records:
            fields = self.registry.decode(record)
            if fields.get("object_type"):
                result.records.append((fields["object_type"], fields))

        if self.settings.resolve_associations:
            resolver = AssociationResolver(self.registry)
            result.records.extend(resolver.resolve_all(result.raw_records))

        logger.info(
            f"Decoded {len(result.records)} record(s) from {len(result.raw_records)} structure(s)"
        )
        return result

    def _decode_entry_point(self, result: DecodeResult) -> Optional[EntryPoint]:
        entry = self.source.entry_point
        if entry is None:
            logger.debug(f"No entry point buffer for {self.source.origin} source, using header version")
            return None

        try:
            ChecksumValidator.validate(entry, what="Entry point", strict=self.settings.strict_checksum)
            return EntryPoint.from_bytes(entry)
        except SMBIOSDecodeError as e:
            result.errors.append(str(e))
            logger.warning(f"{e}; decoding table without version metadata")
            return None


def decode_buffers(table: bytes, entry_point: Optional[bytes] = None,
                   settings: Optional[DecoderSettings] = None) -> DecodeResult:
    """Decode in-memory buffers in a fresh session."""
    source = TableSource(table=bytes(table), entry_point=None if entry_point is None else bytes(entry_point))
    with DecodeSession(source, settings) as session:
        return session.run()
