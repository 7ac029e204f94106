from __future__ import annotations

import threading

import pytest

from hexfind.core.collection import OccurrenceCollection
from hexfind.core.decode import decode_value
from hexfind.core.filtering import FilterEngine, contains_ignore_case, filter_in_place
from hexfind.core.io import BytesSource
from hexfind.core.occurrence import DecodeType, Occurrence, Region
from hexfind.core.task import Task, TaskInterrupted

WORDS = [b"alpha", b"Beta", b"gamma", b"ALPHABET", b"delta", b"alphanumeric"]


def build() -> tuple[BytesSource, OccurrenceCollection]:
    data = b""
    occurrences = []
    for word in WORDS:
        occurrences.append(Occurrence(Region(len(data), len(word)), DecodeType.ASCII, "little"))
        data += word + b"\x00"
    c = OccurrenceCollection()
    c.publish(occurrences)
    return BytesSource(data), c


def values(src: BytesSource, items: list[Occurrence]) -> list[str]:
    return [decode_value(src, o) for o in items]


def test_contains_ignore_case() -> None:
    assert contains_ignore_case("ALPHABET", "pha")
    assert not contains_ignore_case("beta", "x")


def test_filter_in_place_keeps_order() -> None:
    items = list(range(10))
    removed = filter_in_place(Task(), items, lambda x: x % 3 == 0)  # type: ignore[arg-type]
    assert removed == 6
    assert items == [0, 3, 6, 9]


def test_interrupted_filter_keeps_unevaluated_items() -> None:
    items = list(range(10))
    task = Task()

    def keep(x: int) -> bool:
        if x == 4:
            task.interrupt()
        return x % 2 == 0

    with pytest.raises(TaskInterrupted):
        filter_in_place(task, items, keep)  # type: ignore[arg-type]
    # 0..4 evaluated (odd ones dropped), 5..9 never evaluated and kept
    assert items == [0, 2, 4, 5, 6, 7, 8, 9]


def test_filter_engine_narrows_working_only() -> None:
    src, c = build()
    engine = FilterEngine(c, lambda o: decode_value(src, o))
    handle = engine.set_filter("alpha")
    assert handle is not None
    handle.wait()
    assert values(src, c.working) == ["alpha", "ALPHABET", "alphanumeric"]
    assert len(c.found) == len(WORDS)


def test_filter_twice_is_idempotent() -> None:
    src, c = build()
    engine = FilterEngine(c, lambda o: decode_value(src, o))
    engine.set_filter("et").wait()  # type: ignore[union-attr]
    once = list(c.working)
    # same text again, applied to the already-filtered list
    engine.set_filter("et").wait()  # type: ignore[union-attr]
    assert c.working == once


def test_longer_filter_narrows_further_shorter_filter_widens() -> None:
    src, c = build()
    engine = FilterEngine(c, lambda o: decode_value(src, o))
    engine.set_filter("al").wait()  # type: ignore[union-attr]
    assert values(src, c.working) == ["alpha", "ALPHABET", "alphanumeric"]
    engine.set_filter("alphan").wait()  # type: ignore[union-attr]
    assert values(src, c.working) == ["alphanumeric"]
    engine.set_filter("ta").wait()  # type: ignore[union-attr]
    assert values(src, c.working) == ["Beta", "delta"]
    assert engine.set_filter("") is None
    assert c.working == c.found


def test_new_filter_interrupts_running_one() -> None:
    src, c = build()
    gate = threading.Event()
    started = threading.Event()

    def slow_value(o: Occurrence) -> str:
        started.set()
        gate.wait(5)
        return decode_value(src, o)

    engine = FilterEngine(c, slow_value)
    first = engine.set_filter("a")
    assert first is not None
    assert started.wait(5)
    first.interrupt()
    gate.set()
    assert first.wait(5)
    assert first.was_interrupted

    # working list is consistent: a subset of found, in order, no duplicates
    assert len(set(map(id, c.working))) == len(c.working)
    assert all(o in c.found for o in c.working)

    engine.reset()
    assert c.working == c.found


def test_edited_filter_of_same_length_widens_first() -> None:
    src, c = build()
    engine = FilterEngine(c, lambda o: decode_value(src, o))
    engine.set_filter("ga").wait()  # type: ignore[union-attr]
    assert values(src, c.working) == ["gamma"]
    engine.set_filter("ha").wait()  # type: ignore[union-attr]
    assert values(src, c.working) == ["alpha", "ALPHABET", "alphanumeric"]
