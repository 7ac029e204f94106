"""Incremental, cancellable filtering of the working list."""

from __future__ import annotations

import logging
from collections.abc import Callable

from hexfind.core.collection import OccurrenceCollection
from hexfind.core.occurrence import Occurrence
from hexfind.core.task import Task, TaskHandle, TaskRunner

logger = logging.getLogger(__name__)


def contains_ignore_case(haystack: str, needle: str) -> bool:
    return needle.casefold() in haystack.casefold()


def filter_in_place(
    task: Task,
    items: list[Occurrence],
    keep: Callable[[Occurrence], bool],
) -> int:
    """Remove every element for which `keep` is False, compacting `items` in place.

    If the task is interrupted, elements not yet evaluated are kept, so the
    list never loses or duplicates an entry. Returns the number removed.
    """
    write = 0
    read = 0
    try:
        for read, occurrence in enumerate(items):
            task.update(read)
            if keep(occurrence):
                items[write] = occurrence
                write += 1
        read = len(items)
    finally:
        removed = read - write
        if removed:
            # items[read:] were never evaluated and stay in the list
            del items[write:read]
    return removed


class FilterEngine:
    """Narrows a collection's working list by a live substring filter.

    At most one filter task runs at a time; a new filter interrupts and waits
    for the previous one before touching the working list.
    """

    def __init__(
        self,
        collection: OccurrenceCollection,
        value_of: Callable[[Occurrence], str],
        runner: TaskRunner | None = None,
    ) -> None:
        self._collection = collection
        self._value_of = value_of
        self._runner = runner or TaskRunner()
        self._task: TaskHandle | None = None
        self.text = ""

    @property
    def task(self) -> TaskHandle | None:
        return self._task

    def is_running(self) -> bool:
        return self._task is not None and self._task.is_running()

    def stop(self) -> None:
        """Interrupt the running filter task, if any, and wait for it."""
        if self._task is not None:
            self._task.interrupt()
            self._task.wait()

    def set_filter(self, text: str) -> TaskHandle | None:
        """Apply a new filter text.

        Text that does not extend the previous filter can match entries
        already removed, so the working list is first restored from the found
        list. Empty text starts no task.
        """
        self.stop()

        previous = self.text
        self.text = text
        if not text.startswith(previous):
            self._collection.restore_working()

        if not text:
            self._task = None
            return None

        collection = self._collection
        value_of = self._value_of

        def keep(occurrence: Occurrence) -> bool:
            return contains_ignore_case(value_of(occurrence), text)

        def work(task: Task) -> int:
            with collection.lock:
                removed = filter_in_place(task, collection.working, keep)
            logger.debug("filter %r removed %d occurrences", text, removed)
            return removed

        self._task = self._runner.create_task("Filtering", len(collection.working), work)
        return self._task

    def reset(self) -> None:
        """Stop filtering and restore the working list from the found list."""
        self.stop()
        self.text = ""
        self._task = None
        self._collection.restore_working()
