from __future__ import annotations

from collections.abc import Iterator

from hexfind.core.codecs import decode_byte_string
from hexfind.core.endian import NATIVE_ENDIAN
from hexfind.core.io import DataReader, DataSource
from hexfind.core.occurrence import DecodeType, Occurrence, Region
from hexfind.core.settings import SequenceSettings
from hexfind.core.task import Task

CHUNK_SIZE = 64 * 1024


def find_bytes(reader: DataReader, needle: bytes, start: int) -> int | None:
    """Find `needle` at or after `start`, entirely before the reader's end address.

    Chunked scan without loading the whole source. Consecutive chunks overlap
    by len(needle)-1 bytes to catch boundary matches.
    """
    if start < 0:
        start = 0
    end = reader.end_address
    if not needle or start + len(needle) > end:
        return None

    chunk_size = max(CHUNK_SIZE, len(needle))
    overlap = len(needle) - 1
    pos = start
    while pos < end:
        data = reader.read(pos, chunk_size)
        idx = data.find(needle)
        if idx != -1:
            return pos + idx
        if pos + len(data) >= end:
            break
        pos = pos + len(data) - overlap
    return None


def iter_sequence(
    task: Task, source: DataSource, region: Region, settings: SequenceSettings
) -> Iterator[Occurrence]:
    """Yield every match of the literal, overlapping matches included."""
    needle = decode_byte_string(settings.sequence)
    if not needle:
        return

    reader = DataReader(source)
    reader.seek(region.start)
    reader.set_end_address(region.end)

    progress = 0
    address = region.start
    while True:
        task.update(progress)

        found = find_bytes(reader, needle, address)
        if found is None:
            break

        yield Occurrence(Region(found, len(needle)), DecodeType.BINARY, NATIVE_ENDIAN)
        address = found + 1
        reader.seek(address)
        progress = found - region.start


def search_sequence(
    task: Task, source: DataSource, region: Region, settings: SequenceSettings
) -> list[Occurrence]:
    return list(iter_sequence(task, source, region, settings))
