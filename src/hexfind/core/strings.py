from __future__ import annotations

from collections.abc import Iterator
from dataclasses import replace

from hexfind.core.endian import NATIVE_ENDIAN
from hexfind.core.io import DataReader, DataSource
from hexfind.core.occurrence import DecodeType, Occurrence, Region
from hexfind.core.settings import StringsSettings, StringType
from hexfind.core.task import Task

LOWER = frozenset(range(ord("a"), ord("z") + 1))
UPPER = frozenset(range(ord("A"), ord("Z") + 1))
DIGITS = frozenset(range(ord("0"), ord("9") + 1))
# C-locale isspace() minus CR/LF
SPACES = frozenset(b" \t\v\f")
LINE_FEEDS = frozenset(b"\r\n")
UNDERSCORE = frozenset(b"_")
# C-locale ispunct(): printable, not alphanumeric, not space
SYMBOLS = frozenset(
    c for c in range(0x21, 0x7F) if c not in LOWER and c not in UPPER and c not in DIGITS
)


def char_table(settings: StringsSettings) -> bytes:
    """256-entry lookup: 1 where the byte belongs to an enabled character class."""
    valid: set[int] = set()
    if settings.lower_case:
        valid |= LOWER
    if settings.upper_case:
        valid |= UPPER
    if settings.numbers:
        valid |= DIGITS
    if settings.spaces:
        valid |= SPACES
    if settings.underscores:
        valid |= UNDERSCORE
    if settings.symbols:
        valid |= SYMBOLS
    if settings.line_feeds:
        valid |= LINE_FEEDS
    return bytes(1 if b in valid else 0 for b in range(256))


def _with_encoding(settings: StringsSettings, encoding: StringType) -> StringsSettings:
    return replace(settings, encoding=encoding)


def iter_strings(
    task: Task, source: DataSource, region: Region, settings: StringsSettings
) -> Iterator[Occurrence]:
    """Yield every maximal run of valid characters at least `min_length` long.

    Composite encodings scan the region as ASCII first, then as UTF-16; both
    result sets are kept, overlaps included.
    """
    if settings.encoding is StringType.ASCII_UTF16LE:
        yield from iter_strings(task, source, region, _with_encoding(settings, StringType.ASCII))
        yield from iter_strings(task, source, region, _with_encoding(settings, StringType.UTF16LE))
        return
    if settings.encoding is StringType.ASCII_UTF16BE:
        yield from iter_strings(task, source, region, _with_encoding(settings, StringType.ASCII))
        yield from iter_strings(task, source, region, _with_encoding(settings, StringType.UTF16BE))
        return

    if settings.encoding is StringType.UTF16LE:
        decode_type, endian, zero_parity = DecodeType.UTF16, "little", 1
    elif settings.encoding is StringType.UTF16BE:
        decode_type, endian, zero_parity = DecodeType.UTF16, "big", 0
    else:
        decode_type, endian, zero_parity = DecodeType.ASCII, NATIVE_ENDIAN, None

    reader = DataReader(source)
    reader.seek(region.start)
    reader.set_end_address(region.end)
    end = reader.end_address

    table = char_table(settings)
    min_length = max(1, settings.min_length)

    counted = 0
    run_start = region.start
    progress = 0
    for byte, _address in reader:
        if zero_parity is not None and counted % 2 == zero_parity:
            valid = byte == 0x00
        else:
            valid = bool(table[byte])

        task.update(progress)

        if valid:
            counted += 1
        if not valid or run_start + counted == end:
            if counted >= min_length and (not settings.null_termination or byte == 0x00):
                yield Occurrence(Region(run_start, counted), decode_type, endian)
            run_start += counted + 1
            counted = 0
            progress = run_start - region.start


def search_strings(
    task: Task, source: DataSource, region: Region, settings: StringsSettings
) -> list[Occurrence]:
    return list(iter_strings(task, source, region, settings))
