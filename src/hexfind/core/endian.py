"""Endianness support for hexfind: types, normalization, and decoding."""

from __future__ import annotations

import struct
import sys
from typing import Literal

# Type alias for endianness
Endian = Literal["little", "big"]

NATIVE_ENDIAN: Endian = "little" if sys.byteorder == "little" else "big"


def normalize_endian(value: str | None) -> Endian | None:
    """Normalize an endian value from a search file or command line.

    Args:
        value: 'little'/'big' (case-insensitive), 'le'/'be', or None

    Returns:
        Normalized Endian value, or None if input was None

    Raises:
        ValueError: If value is not a recognized byte order
    """
    if value is None:
        return None

    value_lower = value.lower()
    if value_lower in ("le", "little"):
        return "little"
    if value_lower in ("be", "big"):
        return "big"
    raise ValueError(f"Invalid endian '{value}'. Expected 'little' or 'big'.")


def sign_extend(value: int, bits: int) -> int:
    """Interpret the low `bits` bits of `value` as a two's complement number."""
    if bits <= 0:
        return 0
    value &= (1 << bits) - 1
    if value & (1 << (bits - 1)):
        value -= 1 << bits
    return value


def decode_int(data: bytes, endian: Endian, signed: bool) -> int:
    """Decode integer from bytes with specified endianness.

    Args:
        data: Bytes to decode
        endian: Byte order ('little' or 'big')
        signed: Whether the integer is signed

    Returns:
        Decoded integer value
    """
    return int.from_bytes(data, byteorder=endian, signed=signed)


def decode_float32(data: bytes, endian: Endian) -> float:
    """Decode 32-bit float from bytes with specified endianness.

    Args:
        data: 4 bytes to decode
        endian: Byte order ('little' or 'big')

    Returns:
        Decoded float value
    """
    format_char = "<f" if endian == "little" else ">f"
    return struct.unpack(format_char, data)[0]


def decode_float64(data: bytes, endian: Endian) -> float:
    """Decode 64-bit float (double) from bytes with specified endianness.

    Args:
        data: 8 bytes to decode
        endian: Byte order ('little' or 'big')

    Returns:
        Decoded double value
    """
    format_char = "<d" if endian == "little" else ">d"
    return struct.unpack(format_char, data)[0]


def round_float32(value: float) -> float:
    """Round a Python float to the nearest single-precision value."""
    return struct.unpack("<f", struct.pack("<f", value))[0]
