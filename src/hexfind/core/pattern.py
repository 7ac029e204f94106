"""Masked binary patterns such as ``DE AD ?? EF`` or ``4D 5A ?0 "PE"``."""

from __future__ import annotations

from dataclasses import dataclass

_HEX = "0123456789abcdefABCDEF"


@dataclass(frozen=True)
class ByteMask:
    """One pattern position: a byte matches when ``byte & mask == value``."""

    value: int
    mask: int

    def matches(self, byte: int) -> bool:
        return (byte & self.mask) == self.value


class BinaryPattern:
    """Parsed masked pattern.

    Syntax: pairs of hex digits (whitespace between pairs optional), ``?`` as
    a nibble wildcard, and double-quoted ASCII text taken literally. Any other
    character makes the pattern invalid.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._masks: list[ByteMask] = []
        self._valid = False
        self._parse(text)

    def _parse(self, text: str) -> None:
        masks: list[ByteMask] = []
        i = 0
        n = len(text)
        while i < n:
            c = text[i]
            if c.isspace():
                i += 1
                continue
            if c == '"':
                close = text.find('"', i + 1)
                if close == -1:
                    return
                literal = text[i + 1 : close]
                try:
                    raw = literal.encode("ascii")
                except UnicodeEncodeError:
                    return
                masks.extend(ByteMask(b, 0xFF) for b in raw)
                i = close + 1
                continue
            pair = text[i : i + 2]
            if len(pair) != 2:
                return
            value = 0
            mask = 0
            for nibble in pair:
                value <<= 4
                mask <<= 4
                if nibble == "?":
                    continue
                if nibble not in _HEX:
                    return
                value |= int(nibble, 16)
                mask |= 0xF
            masks.append(ByteMask(value, mask))
            i += 2

        self._masks = masks
        self._valid = bool(masks)

    @property
    def text(self) -> str:
        return self._text

    @property
    def is_valid(self) -> bool:
        return self._valid

    @property
    def size(self) -> int:
        return len(self._masks)

    @property
    def masks(self) -> tuple[ByteMask, ...]:
        return tuple(self._masks)

    def matches_byte(self, byte: int, index: int) -> bool:
        """True when `byte` satisfies the mask at position `index`."""
        if not 0 <= index < len(self._masks):
            return False
        return self._masks[index].matches(byte)

    def matches(self, data: bytes) -> bool:
        """True when `data` is exactly one pattern-length window that matches."""
        if len(data) != len(self._masks):
            return False
        return all(m.matches(b) for m, b in zip(self._masks, data))

    def __len__(self) -> int:
        return len(self._masks)

    def __repr__(self) -> str:
        return f"BinaryPattern({self._text!r})"
