from __future__ import annotations

import math
import struct

from hexfind.core.codecs import encode_byte_string
from hexfind.core.endian import decode_float32, decode_float64, decode_int, sign_extend
from hexfind.core.io import DataSource
from hexfind.core.occurrence import DecodeType, Occurrence

DEFAULT_MAX_BYTES = 1024
TRUNCATION_MARKER = "..."


def format_float32(value: float) -> str:
    """Shortest text that reads back as the same single-precision value."""
    if math.isnan(value) or math.isinf(value):
        return str(value)
    for digits in range(1, 10):
        text = f"{value:.{digits}g}"
        try:
            packed = struct.pack("<f", float(text))
        except OverflowError:
            # rounded past FLT_MAX
            continue
        if packed == struct.pack("<f", value):
            return text
    return repr(value)


def _format_int(data: bytes, occurrence: Occurrence, signed: bool) -> str:
    if not data or len(data) > 8:
        return ""
    value = decode_int(data, occurrence.endian, signed=False)
    if signed:
        value = sign_extend(value, len(data) * 8)
    return str(value)


def _format_float(data: bytes, occurrence: Occurrence, width: int) -> str:
    if len(data) > width:
        return ""
    # Missing high-order bytes read as zero
    if occurrence.endian == "little":
        data = data.ljust(width, b"\x00")
    else:
        data = data.rjust(width, b"\x00")
    if width == 4:
        return format_float32(decode_float32(data, occurrence.endian))
    return repr(decode_float64(data, occurrence.endian))


def render_bytes(data: bytes, occurrence: Occurrence) -> str:
    """Render already-read bytes of `occurrence` according to its decode type."""
    kind = occurrence.decode_type
    if kind in (DecodeType.BINARY, DecodeType.ASCII):
        return encode_byte_string(data)
    if kind is DecodeType.UTF16:
        first = 0 if occurrence.endian == "little" else 1
        return encode_byte_string(data[first::2])
    if kind is DecodeType.UNSIGNED:
        return _format_int(data, occurrence, signed=False)
    if kind is DecodeType.SIGNED:
        return _format_int(data, occurrence, signed=True)
    if kind is DecodeType.FLOAT:
        return _format_float(data, occurrence, 4)
    if kind is DecodeType.DOUBLE:
        return _format_float(data, occurrence, 8)
    return encode_byte_string(data)


def decode_value(
    source: DataSource, occurrence: Occurrence, max_bytes: int = DEFAULT_MAX_BYTES
) -> str:
    """Display string for `occurrence`, truncated to `max_bytes` bytes of input."""
    data = source.read(occurrence.start, min(occurrence.size, max_bytes))
    result = render_bytes(data, occurrence)
    if occurrence.size > max_bytes:
        result += TRUNCATION_MARKER
    return result
