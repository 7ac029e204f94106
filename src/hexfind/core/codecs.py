"""Literal codecs: escaped byte strings and hex strings."""

from __future__ import annotations

_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "f": 0x0C,
    "n": 0x0A,
    "r": 0x0D,
    "t": 0x09,
    "v": 0x0B,
    "\\": 0x5C,
}

_REVERSE_ESCAPES = {v: k for k, v in _ESCAPES.items()}

_HEX_DIGITS = "0123456789abcdefABCDEF"


def decode_byte_string(text: str) -> bytes:
    """Decode a C-style escaped string into bytes.

    Supports \\a \\b \\f \\n \\r \\t \\v \\\\ and \\xHH. Characters outside
    the escape syntax are encoded as UTF-8. A malformed escape makes the
    whole literal decode to b"".
    """
    result = bytearray()
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        i += 1
        if c != "\\":
            result += c.encode("utf-8")
            continue
        if i >= n:
            # Trailing lone backslash is dropped
            break
        esc = text[i]
        i += 1
        if esc in _ESCAPES:
            result.append(_ESCAPES[esc])
        elif esc == "x":
            digits = text[i : i + 2]
            if len(digits) != 2 or any(d not in _HEX_DIGITS for d in digits):
                return b""
            result.append(int(digits, 16))
            i += 2
        else:
            return b""
    return bytes(result)


def encode_byte_string(data: bytes) -> str:
    """Render bytes as printable text, escaping everything else."""
    out: list[str] = []
    for b in data:
        if b in _REVERSE_ESCAPES:
            out.append("\\" + _REVERSE_ESCAPES[b])
        elif 0x20 <= b <= 0x7E:
            out.append(chr(b))
        else:
            out.append(f"\\x{b:02X}")
    return "".join(out)


def parse_hex_string(text: str) -> bytes:
    """Parse a hex string such as "DE AD be ef" or "0xDEADBEEF" into bytes.

    Returns b"" when the string is not valid hex.
    """
    clean = "".join(text.split())
    if clean[:2].lower() == "0x":
        clean = clean[2:]
    if not clean or len(clean) % 2 or any(c not in _HEX_DIGITS for c in clean):
        return b""
    return bytes.fromhex(clean)
