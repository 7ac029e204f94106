from __future__ import annotations

from hexfind.core.io import BytesSource
from hexfind.core.occurrence import DecodeType, Region
from hexfind.core.regex import compile_pattern, search_regex, window_settings
from hexfind.core.settings import RegexSettings, StringType
from hexfind.core.task import Task


def regex_hits(data: bytes, **kwargs) -> list[tuple[int, int]]:
    found = search_regex(Task(), BytesSource(data), Region(0, len(data)), RegexSettings(**kwargs))
    return [(o.start, o.size) for o in found]


def test_search_mode_matches_inside_window() -> None:
    data = b"\x00\x01user=admin\x00\xffpassword\x00"
    assert regex_hits(data, pattern=r"adm[a-z]+", min_length=4) == [(2, 10)]


def test_full_match_requires_whole_window() -> None:
    data = b"\x00version 1.2.3\x00v9\x00"
    assert regex_hits(data, pattern=r"\d+\.\d+", min_length=2) == [(1, 13)]
    assert regex_hits(data, pattern=r"\d+\.\d+", full_match=True, min_length=2) == []
    assert regex_hits(data, pattern=r"version [\d.]+", full_match=True, min_length=2) == [(1, 13)]


def test_no_match_across_window_boundary() -> None:
    # "abc" and "def" are separated by a byte that is not string-like
    data = b"abc\x01def"
    assert regex_hits(data, pattern="abc.def", min_length=1) == []
    assert regex_hits(data, pattern="cd", min_length=1) == []
    assert regex_hits(data, pattern="def", min_length=1) == [(4, 3)]


def test_window_decode_type_is_carried_through() -> None:
    data = b"\xff" + "secret".encode("utf-16-le") + b"\xff"
    found = search_regex(
        Task(), BytesSource(data), Region(0, len(data)),
        RegexSettings(pattern="s\x00e", min_length=4, encoding=StringType.UTF16LE),
    )
    assert len(found) == 1
    assert found[0].decode_type is DecodeType.UTF16
    assert found[0].endian == "little"


def test_windows_use_every_character_class() -> None:
    ws = window_settings(RegexSettings(pattern="x", min_length=3, null_termination=True))
    assert ws.min_length == 3 and ws.null_termination
    assert all([ws.lower_case, ws.upper_case, ws.numbers, ws.underscores,
                ws.symbols, ws.spaces, ws.line_feeds])


def test_compile_pattern() -> None:
    assert compile_pattern("") is None
    assert compile_pattern("(unclosed") is None
    assert compile_pattern("a+") is not None
