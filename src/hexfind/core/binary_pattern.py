from __future__ import annotations

from collections.abc import Iterator

from hexfind.core.endian import NATIVE_ENDIAN
from hexfind.core.io import DataReader, DataSource
from hexfind.core.occurrence import DecodeType, Occurrence, Region
from hexfind.core.pattern import BinaryPattern
from hexfind.core.settings import BinaryPatternSettings
from hexfind.core.task import Task


def _iter_unaligned(
    task: Task, reader: DataReader, region: Region, pattern: BinaryPattern
) -> Iterator[Occurrence]:
    # Naive matcher: on a mismatch the partial match restarts one byte after
    # where it began. Full matches resume at match start + 1.
    size = pattern.size
    end = reader.end_address
    matched = 0
    address = region.start
    while address < end:
        byte = reader.byte_at(address)
        if byte is None:
            break

        task.update(address - region.start)
        if pattern.matches_byte(byte, matched):
            matched += 1
            if matched == size:
                match_start = address - (size - 1)
                yield Occurrence(Region(match_start, size), DecodeType.BINARY, NATIVE_ENDIAN)
                address = match_start + 1
                matched = 0
                continue
        else:
            address -= matched
            matched = 0
        address += 1


def _iter_aligned(
    task: Task, reader: DataReader, region: Region, pattern: BinaryPattern, alignment: int
) -> Iterator[Occurrence]:
    size = pattern.size
    end = reader.end_address
    for address in range(region.start, end, alignment):
        task.update(address - region.start)
        if address + size > end:
            break
        window = reader.peek(address, size)
        if pattern.matches(window):
            yield Occurrence(Region(address, size), DecodeType.BINARY, NATIVE_ENDIAN)


def iter_binary_pattern(
    task: Task, source: DataSource, region: Region, settings: BinaryPatternSettings
) -> Iterator[Occurrence]:
    """Yield matches of a masked pattern.

    Alignment 1 reports overlapping matches; larger alignments test
    independent windows at each aligned offset only.
    """
    pattern = BinaryPattern(settings.pattern)
    if not pattern.is_valid or settings.alignment < 1:
        return

    reader = DataReader(source)
    reader.seek(region.start)
    reader.set_end_address(region.end)

    if settings.alignment == 1:
        yield from _iter_unaligned(task, reader, region, pattern)
    else:
        yield from _iter_aligned(task, reader, region, pattern, settings.alignment)


def search_binary_pattern(
    task: Task, source: DataSource, region: Region, settings: BinaryPatternSettings
) -> list[Occurrence]:
    return list(iter_binary_pattern(task, source, region, settings))
