"""Raw SMBIOS buffer acquisition."""

import struct
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from smbios_inventory.errors import SourceUnavailable

logger = logging.getLogger(__name__)

SYSFS_ENTRY_POINT = Path("/sys/firmware/dmi/tables/smbios_entry_point")
SYSFS_TABLE = Path("/sys/firmware/dmi/tables/DMI")

# RawSMBIOSData header: Used20CallingMethod, major, minor, DMI revision, length
RSMB_HEADER = "<BBBBI"
RSMB_HEADER_SIZE = struct.calcsize(RSMB_HEADER)


@dataclass(frozen=True)
class TableSource:
    """The two input buffers of one decode.

    ``entry_point`` is None for firmware-table blobs, which carry the
    version in their own header instead.
    """
    table: bytes
    entry_point: Optional[bytes] = None
    major_version: Optional[int] = None
    minor_version: Optional[int] = None
    dmi_revision: Optional[int] = None
    origin: str = "memory"

    @classmethod
    def from_sysfs(cls, entry_path: Union[str, Path] = SYSFS_ENTRY_POINT,
                   table_path: Union[str, Path] = SYSFS_TABLE) -> "TableSource":
        """Read the Linux sysfs exports (readable by root only)."""
        source = cls.from_files(entry_path, table_path)
        return cls(table=source.table, entry_point=source.entry_point, origin="sysfs")

    @classmethod
    def from_files(cls, entry_path: Union[str, Path], table_path: Union[str, Path]) -> "TableSource":
        """
        Read an entry point and a structure table dumped to files.

        Args:
            entry_path: Entry point file.
            table_path: Structure table file.

        Returns:
            TableSource holding both buffers.

        Raises:
            SourceUnavailable: Either file cannot be read.
        """
        entry_point = _read_file(Path(entry_path))
        table = _read_file(Path(table_path))
        logger.info(f"Read entry point ({len(entry_point)} bytes) and table ({len(table)} bytes)")
        return cls(table=table, entry_point=entry_point, origin="files")

    @classmethod
    def from_raw_smbios_data(cls, blob: bytes) -> "TableSource":
        """
        Parse a firmware table blob as returned for the 'RSMB' provider.

        Args:
            blob: Header (4 version bytes, LE32 table length) then the table.

        Returns:
            TableSource with the version from the header and no entry point.

        Raises:
            SourceUnavailable: Blob is shorter than its header.
        """
        blob = bytes(blob)
        if len(blob) < RSMB_HEADER_SIZE:
            raise SourceUnavailable(f"Firmware table blob too short: {len(blob)} bytes")

        _, major, minor, dmi_revision, length = struct.unpack_from(RSMB_HEADER, blob, 0)
        table = blob[RSMB_HEADER_SIZE:RSMB_HEADER_SIZE + length]
        if len(table) < length:
            logger.warning(f"Firmware table blob declares {length} bytes, holds {len(table)}")

        return cls(
            table=table,
            major_version=major,
            minor_version=minor,
            dmi_revision=dmi_revision,
            origin="rsmb",
        )

    @classmethod
    def from_rsmb_file(cls, path: Union[str, Path]) -> "TableSource":
        """Read a saved firmware table blob."""
        return cls.from_raw_smbios_data(_read_file(Path(path)))

    @property
    def version(self) -> Optional[str]:
        if self.major_version is None:
            return None
        return f"{self.major_version}.{self.minor_version}"


def _read_file(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise SourceUnavailable(f"Cannot read {path}: {e}") from e
