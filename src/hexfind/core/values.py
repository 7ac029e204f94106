from __future__ import annotations

import math
import re
from collections.abc import Iterator
from dataclasses import dataclass

from hexfind.core.endian import decode_float32, decode_float64, decode_int, round_float32
from hexfind.core.io import DataReader, DataSource
from hexfind.core.occurrence import DecodeType, Occurrence, Region
from hexfind.core.settings import ValueSettings, ValueType
from hexfind.core.task import Task

# Halfway between FLT_MAX and 2**128; anything below rounds to a finite float32
FLT_ROUNDING_LIMIT = 3.4028235677973366e38
DBL_MAX = 1.7976931348623157e308

_INT_RE = re.compile(r"([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class NumericLiteral:
    """Result of parsing a min/max literal for a value search."""

    valid: bool
    value: int | float = 0
    size: int = 0


INVALID = NumericLiteral(False)


def _parse_int(text: str) -> int | None:
    m = _INT_RE.fullmatch(text)
    if m is None:
        return None
    sign, digits = m.groups()
    if digits[:2].lower() == "0x":
        value = int(digits[2:], 16)
    elif len(digits) > 1 and digits[0] == "0":
        value = int(digits[1:], 8)
    else:
        value = int(digits, 10)
    return -value if sign == "-" else value


def _int_bounds(value_type: ValueType) -> tuple[int, int]:
    bits = value_type.width * 8
    if value_type.is_signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def parse_numeric_value(text: str, value_type: ValueType) -> NumericLiteral:
    """Parse a literal for `value_type`.

    Integers accept an optional sign and 0x (hex) or leading-0 (octal)
    prefixes; floats use plain decimal notation. The whole literal must be
    consumed and the value must be representable in the target type.
    """
    text = text.lstrip()
    if not text:
        return INVALID

    if value_type.is_float:
        if _FLOAT_RE.fullmatch(text) is None:
            return INVALID
        value = float(text)
        if math.isnan(value):
            return INVALID
        if value_type is ValueType.F32:
            if not abs(value) < FLT_ROUNDING_LIMIT:
                return INVALID
            value = round_float32(value)
        elif not abs(value) <= DBL_MAX:
            return INVALID
        return NumericLiteral(True, value, value_type.width)

    number = _parse_int(text)
    if number is None:
        return INVALID
    low, high = _int_bounds(value_type)
    if not low <= number <= high:
        return INVALID
    return NumericLiteral(True, number, value_type.width)


def parse_value_range(settings: ValueSettings) -> tuple[NumericLiteral, NumericLiteral]:
    """Parse min and max; an empty max means a point search on min."""
    input_max = settings.input_max if settings.input_max.strip() else settings.input_min
    return (
        parse_numeric_value(settings.input_min, settings.type),
        parse_numeric_value(input_max, settings.type),
    )


def validate_value_settings(settings: ValueSettings) -> list[str]:
    lo, hi = parse_value_range(settings)
    problems = []
    if not lo.valid:
        problems.append(f"invalid {settings.type.value} minimum: {settings.input_min!r}")
    if not hi.valid:
        problems.append(f"invalid {settings.type.value} maximum: {settings.input_max!r}")
    if lo.valid and hi.valid and lo.size != hi.size:
        problems.append("minimum and maximum have different sizes")
    return problems


def decode_type_for(value_type: ValueType) -> DecodeType:
    if value_type is ValueType.F32:
        return DecodeType.FLOAT
    if value_type is ValueType.F64:
        return DecodeType.DOUBLE
    if value_type.is_signed:
        return DecodeType.SIGNED
    return DecodeType.UNSIGNED


def _decode(data: bytes, settings: ValueSettings) -> int | float:
    if settings.type is ValueType.F32:
        return decode_float32(data, settings.endian)
    if settings.type is ValueType.F64:
        return decode_float64(data, settings.endian)
    return decode_int(data, settings.endian, signed=settings.type.is_signed)


def iter_values(
    task: Task, source: DataSource, region: Region, settings: ValueSettings
) -> Iterator[Occurrence]:
    """Yield every position whose value lies in [min, max] (inclusive)."""
    lo, hi = parse_value_range(settings)
    if not lo.valid or not hi.valid or lo.size != hi.size:
        return

    size = lo.size
    advance = size if settings.aligned else 1
    decode_type = decode_type_for(settings.type)

    reader = DataReader(source)
    reader.seek(region.start)
    reader.set_end_address(region.end)
    end = reader.end_address

    for address in range(region.start, end, advance):
        task.update(address - region.start)
        if address + size > end:
            break
        data = reader.peek(address, size)
        if len(data) != size:
            break
        value = _decode(data, settings)
        if lo.value <= value <= hi.value:
            yield Occurrence(Region(address, size), decode_type, settings.endian)


def search_values(
    task: Task, source: DataSource, region: Region, settings: ValueSettings
) -> list[Occurrence]:
    return list(iter_values(task, source, region, settings))
