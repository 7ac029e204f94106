from __future__ import annotations

import pytest

from hexfind.core.collection import OccurrenceCollection
from hexfind.core.occurrence import DecodeType, Occurrence, Region


def mkocc(start: int, size: int, kind: DecodeType = DecodeType.BINARY) -> Occurrence:
    return Occurrence(Region(start, size), kind, "little")


def populated() -> OccurrenceCollection:
    c = OccurrenceCollection()
    c.publish([mkocc(10, 4), mkocc(0, 8), mkocc(4, 2), mkocc(4, 2, DecodeType.UTF16)])
    return c


def test_region_invariants() -> None:
    with pytest.raises(ValueError):
        Region(0, 0)
    with pytest.raises(ValueError):
        Region(-1, 4)
    r = Region(4, 4)
    assert r.end == 8
    assert r.contains(Region(5, 3)) and not r.contains(Region(5, 4))
    assert r.overlaps(7, 9) and not r.overlaps(8, 9)


def test_publish_copies_working_list() -> None:
    c = populated()
    assert c.working == c.found
    assert c.working[0] is not c.found[0]
    c.working[0].selected = True
    assert not c.found[0].selected
    assert len(c) == 4


def test_overlapping_query() -> None:
    c = populated()
    assert [o.start for o in c.overlapping(5, 6)] == [0, 4, 4]
    assert [o.start for o in c.overlapping(8, 10)] == []
    assert [o.start for o in c.overlapping(13, 100)] == [10]
    assert c.overlapping(5, 5) == []
    assert c.highlight(11)
    assert not c.highlight(9)
    assert c.highlight(8, 3)


def test_duplicate_regions_are_indexed_separately() -> None:
    c = OccurrenceCollection()
    c.publish([mkocc(0, 2), mkocc(0, 2)])
    assert len(c.overlapping(0, 1)) == 2


def test_clear_resets_everything() -> None:
    c = populated()
    c.clear()
    assert c.found == [] and c.working == []
    assert not c.highlight(0, 100)


def test_sort_working() -> None:
    c = populated()
    c.sort_working("offset")
    assert [o.start for o in c.working] == [0, 4, 4, 10]
    c.sort_working("size", descending=True)
    assert [o.size for o in c.working] == [8, 4, 2, 2]
    c.sort_working("value", value_of=lambda o: f"{o.start:03d}", descending=True)
    assert [o.start for o in c.working][0] == 10
    with pytest.raises(ValueError):
        c.sort_working("value")
    # found list order is untouched
    assert [o.start for o in c.found] == [10, 0, 4, 4]


def test_selection() -> None:
    c = populated()
    c.select_all()
    assert len(c.selected()) == 4
    region = c.select_only(2)
    assert region == c.working[2].region
    assert c.selected() == [c.working[2]]
    assert c.toggle(0) is True
    assert c.toggle(0) is False
    c.clear_selection()
    assert c.selected() == []


def test_restore_working_after_edits() -> None:
    c = populated()
    del c.working[1:]
    c.restore_working()
    assert c.working == c.found
