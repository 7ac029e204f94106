"""Search specifications: one frozen settings dataclass per search mode."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from hexfind.core.endian import Endian


class SearchMode(Enum):
    STRINGS = "strings"
    SEQUENCE = "sequence"
    REGEX = "regex"
    BINARY_PATTERN = "binary_pattern"
    VALUE = "value"


class StringType(Enum):
    """Encoding of string-like runs."""

    ASCII = "ascii"
    UTF16LE = "utf16le"
    UTF16BE = "utf16be"
    ASCII_UTF16LE = "ascii+utf16le"
    ASCII_UTF16BE = "ascii+utf16be"

    @property
    def is_composite(self) -> bool:
        return self in (StringType.ASCII_UTF16LE, StringType.ASCII_UTF16BE)


class ValueType(Enum):
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    F32 = "f32"
    F64 = "f64"

    @property
    def width(self) -> int:
        """Size in bytes."""
        return int(self.value[1:]) // 8

    @property
    def is_float(self) -> bool:
        return self.value.startswith("f")

    @property
    def is_signed(self) -> bool:
        return self.value.startswith("i")


@dataclass(frozen=True)
class StringsSettings:
    min_length: int = 5
    null_termination: bool = False
    encoding: StringType = StringType.ASCII
    lower_case: bool = True
    upper_case: bool = True
    numbers: bool = True
    underscores: bool = True
    symbols: bool = True
    spaces: bool = True
    line_feeds: bool = False

    mode = SearchMode.STRINGS


@dataclass(frozen=True)
class SequenceSettings:
    sequence: str = ""

    mode = SearchMode.SEQUENCE


@dataclass(frozen=True)
class RegexSettings:
    pattern: str = ""
    full_match: bool = False
    min_length: int = 5
    null_termination: bool = False
    encoding: StringType = StringType.ASCII

    mode = SearchMode.REGEX


@dataclass(frozen=True)
class BinaryPatternSettings:
    pattern: str = ""
    alignment: int = 1

    mode = SearchMode.BINARY_PATTERN


@dataclass(frozen=True)
class ValueSettings:
    type: ValueType = ValueType.U8
    input_min: str = ""
    input_max: str = ""  # empty means "same as input_min"
    endian: Endian = "little"
    aligned: bool = False

    mode = SearchMode.VALUE


SearchSpecification = Union[
    StringsSettings,
    SequenceSettings,
    RegexSettings,
    BinaryPatternSettings,
    ValueSettings,
]
