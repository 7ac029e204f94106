"""Search results: found list, working list, and an overlap index."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Literal

from intervaltree import IntervalTree

from hexfind.core.occurrence import Occurrence, Region

SortKey = Literal["offset", "size", "value"]


def _copy(occurrences: Iterable[Occurrence]) -> list[Occurrence]:
    return [replace(o) for o in occurrences]


class OccurrenceCollection:
    """Results of the last completed search for one document.

    - `found`: every occurrence of the last search, in scanner order.
    - `working`: display copy of `found`; sorted, filtered, and selected.
    - the overlap index maps address ranges back to `found` entries.

    `lock` must be held by anything mutating `working`.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._found: list[Occurrence] = []
        self._working: list[Occurrence] = []
        self._tree = IntervalTree()

    @property
    def found(self) -> list[Occurrence]:
        return self._found

    @property
    def working(self) -> list[Occurrence]:
        return self._working

    def __len__(self) -> int:
        return len(self._found)

    def clear(self) -> None:
        """Drop all results (also used as "reset")."""
        with self.lock:
            self._found = []
            self._working = []
            self._tree = IntervalTree()

    def publish(self, occurrences: Iterable[Occurrence]) -> None:
        """Replace the results with a finished search's occurrences."""
        found = list(occurrences)
        tree = IntervalTree()
        for index, occurrence in enumerate(found):
            tree.addi(occurrence.start, occurrence.end, index)
        with self.lock:
            self._found = found
            self._working = _copy(found)
            self._tree = tree

    def restore_working(self) -> None:
        """Make the working list a fresh copy of the found list."""
        with self.lock:
            self._working[:] = _copy(self._found)

    # Overlap queries

    def overlapping(self, start: int, end: int) -> list[Occurrence]:
        """Occurrences intersecting [start, end), ordered by address."""
        if end <= start:
            return []
        hits = sorted(self._tree.overlap(start, end), key=lambda iv: (iv.begin, iv.data))
        return [self._found[iv.data] for iv in hits]

    def highlight(self, address: int, size: int = 1) -> bool:
        return size > 0 and self._tree.overlaps(address, address + size)

    # Working-list edits

    def sort_working(
        self,
        key: SortKey = "offset",
        *,
        descending: bool = False,
        value_of: Callable[[Occurrence], str] | None = None,
    ) -> None:
        """Sort the working list by offset, size, or decoded value."""
        if key == "offset":
            sort_key: Callable[[Occurrence], object] = lambda o: o.start
        elif key == "size":
            sort_key = lambda o: o.size
        elif key == "value":
            if value_of is None:
                raise ValueError("sorting by value needs a value_of callable")
            sort_key = value_of
        else:
            raise ValueError(f"unknown sort key: {key!r}")
        with self.lock:
            self._working.sort(key=sort_key, reverse=descending)

    def select_all(self) -> None:
        with self.lock:
            for occurrence in self._working:
                occurrence.selected = True

    def clear_selection(self) -> None:
        with self.lock:
            for occurrence in self._working:
                occurrence.selected = False

    def select_only(self, index: int) -> Region:
        """Select exactly one working-list entry and return its region."""
        with self.lock:
            target = self._working[index]
            for occurrence in self._working:
                occurrence.selected = False
            target.selected = True
            return target.region

    def toggle(self, index: int) -> bool:
        with self.lock:
            target = self._working[index]
            target.selected = not target.selected
            return target.selected

    def selected(self) -> list[Occurrence]:
        with self.lock:
            return [o for o in self._working if o.selected]
