from __future__ import annotations

import pytest

from hexfind.core.pattern import BinaryPattern


def test_wildcard_pattern() -> None:
    p = BinaryPattern("DE AD ?? EF")
    assert p.is_valid
    assert p.size == 4
    assert p.matches_byte(0xDE, 0)
    assert not p.matches_byte(0xDF, 0)
    assert p.matches_byte(0x00, 2) and p.matches_byte(0xFF, 2)
    assert not p.matches_byte(0xEF, 4)  # out of range


def test_nibble_wildcards() -> None:
    p = BinaryPattern("A? ?F")
    assert p.matches(b"\xa0\x0f")
    assert p.matches(b"\xaf\xff")
    assert not p.matches(b"\xb0\x0f")
    assert not p.matches(b"\xa0\x0e")


def test_contiguous_hex_and_string_literal() -> None:
    p = BinaryPattern('4D5A "PE"')
    assert p.is_valid
    assert p.matches(b"MZPE")
    assert not p.matches(b"MZPE!")  # wrong length


@pytest.mark.parametrize("text", ["", "   ", "DE A", "XY", '"open', "DEé"])
def test_invalid_patterns(text: str) -> None:
    p = BinaryPattern(text)
    assert not p.is_valid
