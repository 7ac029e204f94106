from __future__ import annotations

from pathlib import Path

from hexfind.core.endian import NATIVE_ENDIAN
from hexfind.core.io import BytesSource, DataReader, FileSource
from hexfind.core.occurrence import DecodeType, Region
from hexfind.core.search import find_bytes, search_sequence
from hexfind.core.settings import SequenceSettings
from hexfind.core.task import Task


def test_overlapping_matches() -> None:
    src = BytesSource(b"AAA")
    hits = search_sequence(Task(), src, Region(0, 3), SequenceSettings("AA"))
    assert [(o.start, o.size) for o in hits] == [(0, 2), (1, 2)]
    assert all(o.decode_type is DecodeType.BINARY for o in hits)
    assert all(o.endian == NATIVE_ENDIAN for o in hits)


def test_escaped_literal(tmp_path: Path) -> None:
    data = bytearray(b"hello world\x00\x01\x02DEADBEEFtrail\x00\x01\x02")
    p = tmp_path / "data.bin"
    p.write_bytes(data)
    with FileSource(str(p)) as src:
        hits = search_sequence(Task(), src, Region(0, src.size), SequenceSettings("\\x00\\x01\\x02"))
    assert [o.start for o in hits] == [11, 27]


def test_empty_literal_is_a_no_op() -> None:
    src = BytesSource(b"anything")
    assert search_sequence(Task(), src, Region(0, 8), SequenceSettings("")) == []
    assert search_sequence(Task(), src, Region(0, 8), SequenceSettings("\\xZZ")) == []


def test_match_must_end_inside_region() -> None:
    src = BytesSource(b"xxABCxxABC")
    hits = search_sequence(Task(), src, Region(0, 9), SequenceSettings("ABC"))
    assert [o.start for o in hits] == [2]
    hits = search_sequence(Task(), src, Region(3, 7), SequenceSettings("ABC"))
    assert [o.start for o in hits] == [7]


def test_find_bytes_across_chunk_boundary(tmp_path: Path) -> None:
    chunk = 64 * 1024
    buf = bytearray(b"A" * (chunk + 10))
    needle = b"XYZW"
    start = chunk - 2
    buf[start : start + len(needle)] = needle
    p = tmp_path / "boundary.bin"
    p.write_bytes(buf)
    with FileSource(str(p)) as src:
        reader = DataReader(src)
        assert find_bytes(reader, needle, 0) == start
        assert find_bytes(reader, needle, start + 1) is None
        hits = search_sequence(Task(), src, Region(0, src.size), SequenceSettings("XYZW"))
        assert [o.start for o in hits] == [start]


def test_progress_tracks_last_match() -> None:
    task = Task("seq", 10)
    search_sequence(task, BytesSource(b"....ab..ab"), Region(0, 10), SequenceSettings("ab"))
    assert task.progress == 8
