"""Save file header record."""

from dataclasses import dataclass

from tui_kanban.core.constants import SAVE_MAGIC, SCHEMA_VERSION
from tui_kanban.core.errors import CorruptFile

MAGIC_SIZE = 4
VERSION_SIZE = 4
HEADER_SIZE = MAGIC_SIZE + VERSION_SIZE


@dataclass(frozen=True)
class SaveHeader:
    """
    Fixed-size prefix of every save file.

    Layout (8 bytes):
        0..4   magic, always b"TKBN"
        4..8   schema version, unsigned 32-bit little-endian

    The payload follows immediately and is interpreted according to
    the schema version.
    """
    schema_version: int = SCHEMA_VERSION
    magic: bytes = SAVE_MAGIC

    @classmethod
    def from_bytes(cls, data: bytes) -> "SaveHeader":
        """Parse the header at the start of data."""
        if len(data) < HEADER_SIZE:
            raise CorruptFile(f"File is too short to be a save file ({len(data)} bytes)")
        magic = bytes(data[0:MAGIC_SIZE])
        if magic != SAVE_MAGIC:
            raise CorruptFile(f"Not a save file (magic {magic!r})")
        version = int.from_bytes(data[MAGIC_SIZE:HEADER_SIZE], 'little')
        return cls(schema_version=version, magic=magic)

    def to_bytes(self) -> bytes:
        """Serialize this header to its 8-byte form."""
        return self.magic + self.schema_version.to_bytes(VERSION_SIZE, 'little')

    @property
    def is_current(self) -> bool:
        return self.schema_version == SCHEMA_VERSION
