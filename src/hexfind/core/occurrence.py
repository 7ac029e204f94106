from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from hexfind.core.endian import NATIVE_ENDIAN, Endian


class DecodeType(Enum):
    """How the bytes of an occurrence are rendered for display."""

    ASCII = "ascii"
    UTF16 = "utf16"
    BINARY = "binary"
    UNSIGNED = "unsigned"
    SIGNED = "signed"
    FLOAT = "float"
    DOUBLE = "double"


@dataclass(frozen=True, order=True)
class Region:
    """Half-open byte range [start, start + size)."""

    start: int
    size: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("region start must be >= 0")
        if self.size <= 0:
            raise ValueError("region size must be > 0")

    @property
    def end(self) -> int:
        return self.start + self.size

    def contains(self, other: Region) -> bool:
        return self.start <= other.start and other.end <= self.end

    def overlaps(self, start: int, end: int) -> bool:
        return self.start < end and start < self.end


@dataclass
class Occurrence:
    region: Region
    decode_type: DecodeType = DecodeType.BINARY
    endian: Endian = NATIVE_ENDIAN
    selected: bool = field(default=False, compare=False)

    @property
    def start(self) -> int:
        return self.region.start

    @property
    def size(self) -> int:
        return self.region.size

    @property
    def end(self) -> int:
        return self.region.end
