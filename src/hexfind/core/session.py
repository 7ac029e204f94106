"""One find session per open document.

The session owns the document's results and the tasks that mutate them:

    session = FindSession(FileSource(path))
    handle = session.run_search(StringsSettings(min_length=4))
    handle.wait()
    session.set_filter("http")
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from hexfind.core.collection import OccurrenceCollection, SortKey
from hexfind.core.decode import DEFAULT_MAX_BYTES, decode_value
from hexfind.core.filtering import FilterEngine
from hexfind.core.io import DataSource
from hexfind.core.occurrence import Occurrence, Region
from hexfind.core.scan import InvalidSearchSpecification, iter_scanner, validate
from hexfind.core.settings import SearchSpecification
from hexfind.core.task import Task, TaskHandle, TaskRunner

logger = logging.getLogger(__name__)

TOOLTIP_MAX_BYTES = 256


class FindSession:
    def __init__(
        self,
        source: DataSource,
        *,
        name: str = "",
        runner: TaskRunner | None = None,
    ) -> None:
        self.source = source
        self.name = name
        self.results = OccurrenceCollection()
        self._runner = runner or TaskRunner()
        self._search_task: TaskHandle | None = None
        self.last_specification: SearchSpecification | None = None
        self.filter = FilterEngine(self.results, self.value_of, self._runner)

    # Tasks

    @property
    def search_task(self) -> TaskHandle | None:
        return self._search_task

    def is_searching(self) -> bool:
        return self._search_task is not None and self._search_task.is_running()

    def is_busy(self) -> bool:
        return self.is_searching() or self.filter.is_running()

    def cancel_search(self) -> None:
        if self._search_task is not None:
            self._search_task.interrupt()

    def wait(self, timeout: float | None = None) -> bool:
        """Wait for the running search and filter tasks to stop."""
        ok = True
        if self._search_task is not None:
            ok = self._search_task.wait(timeout) and ok
        if self.filter.task is not None:
            ok = self.filter.task.wait(timeout) and ok
        return ok

    def default_region(self) -> Region | None:
        if self.source.size == 0:
            return None
        return Region(0, self.source.size)

    def run_search(
        self, spec: SearchSpecification, region: Region | None = None
    ) -> TaskHandle:
        """Validate `spec` and start a background search over `region`.

        Raises InvalidSearchSpecification before any task is created. Results
        are published when the task stops; an interrupted search publishes
        what it found up to that point.
        """
        problems = validate(spec)
        if problems:
            raise InvalidSearchSpecification(problems)

        if self._search_task is not None:
            self._search_task.interrupt()
            self._search_task.wait()
        self.filter.stop()
        self.filter.text = ""

        self.results.clear()
        self.last_specification = spec

        target = region if region is not None else self.default_region()
        results = self.results
        source = self.source

        def work(task: Task) -> int:
            found: list[Occurrence] = []
            try:
                if target is not None:
                    for occurrence in iter_scanner(spec, source, target, task):
                        found.append(occurrence)
            finally:
                results.publish(found)
                logger.info("%s search published %d occurrences", spec.mode.value, len(found))
            return len(found)

        total = target.size if target is not None else 0
        self._search_task = self._runner.create_task("Searching", total, work)
        return self._search_task

    def reset(self) -> None:
        """Stop all tasks and drop every result."""
        self.cancel_search()
        self.filter.stop()
        self.filter.text = ""
        if self._search_task is not None:
            self._search_task.wait()
        self.results.clear()

    # Filtering and working-list edits

    def set_filter(self, text: str) -> TaskHandle | None:
        """Filter the working list; waits for a running search to publish first."""
        if self._search_task is not None:
            self._search_task.wait()
        return self.filter.set_filter(text)

    def reset_filter(self) -> None:
        self.filter.reset()

    def sort(self, key: SortKey = "offset", *, descending: bool = False) -> None:
        self.results.sort_working(key, descending=descending, value_of=self.value_of)

    def select_all(self) -> bool:
        """Select every working-list entry; refused while a task is running."""
        if self.is_busy():
            return False
        self.results.select_all()
        return True

    # Display

    def value_of(self, occurrence: Occurrence, max_bytes: int = DEFAULT_MAX_BYTES) -> str:
        return decode_value(self.source, occurrence, max_bytes)

    def highlight(self, address: int, size: int = 1) -> bool:
        if self.is_searching():
            return False
        return self.results.highlight(address, size)

    def tooltip(
        self, address: int, size: int = 1, max_bytes: int = TOOLTIP_MAX_BYTES
    ) -> list[tuple[Occurrence, str]]:
        """Decoded occurrences under [address, address + size)."""
        if self.is_searching():
            return []
        return [
            (o, self.value_of(o, max_bytes))
            for o in self.results.overlapping(address, address + size)
        ]

    def __iter__(self) -> Iterator[Occurrence]:
        return iter(self.results.working)

    def __len__(self) -> int:
        return len(self.results)
