"""Background tasks with progress reporting and cooperative interruption.

A work function receives a `Task` and calls `task.update(...)` from its loop.
`update` records progress and raises `TaskInterrupted` once `interrupt()` has
been requested, so the loop body is the only cancellation point.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class TaskInterrupted(Exception):
    """Raised inside a work function when its task has been interrupted."""


class Task:
    """Progress counter plus interruption flag handed to a work function."""

    def __init__(self, label: str = "", total: int = 0) -> None:
        self.label = label
        self.total = max(0, int(total))
        self._progress = 0
        self._interrupt = threading.Event()

    @property
    def progress(self) -> int:
        return self._progress

    @property
    def interrupted(self) -> bool:
        return self._interrupt.is_set()

    def interrupt(self) -> None:
        self._interrupt.set()

    def update(self, progress: int | None = None) -> None:
        """Report progress (increment by one when omitted) and check for interruption.

        Progress never moves backwards.
        """
        if progress is None:
            self._progress += 1
        elif progress > self._progress:
            self._progress = int(progress)
        if self._interrupt.is_set():
            raise TaskInterrupted(self.label)


WorkFn = Callable[[Task], Any]


class TaskHandle:
    """Caller-side view of a task running on a worker thread."""

    def __init__(self, task: Task, work_fn: WorkFn) -> None:
        self._task = task
        self._work_fn = work_fn
        self._done = threading.Event()
        self.result: Any = None
        self.error: BaseException | None = None
        self.was_interrupted = False
        self._thread = threading.Thread(target=self._run, name=f"task:{task.label}", daemon=True)

    def _run(self) -> None:
        logger.debug("task %r started (total=%d)", self._task.label, self._task.total)
        try:
            self.result = self._work_fn(self._task)
        except TaskInterrupted:
            self.was_interrupted = True
            logger.debug("task %r interrupted at %d", self._task.label, self._task.progress)
        except Exception as e:
            self.error = e
            logger.exception("task %r failed", self._task.label)
        else:
            logger.debug("task %r finished", self._task.label)
        finally:
            self._done.set()

    def start(self) -> TaskHandle:
        self._thread.start()
        return self

    @property
    def label(self) -> str:
        return self._task.label

    @property
    def progress(self) -> int:
        return self._task.progress

    @property
    def total(self) -> int:
        return self._task.total

    def is_running(self) -> bool:
        return self._thread.is_alive() and not self._done.is_set()

    def interrupt(self) -> None:
        self._task.interrupt()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the task has stopped. Returns False on timeout."""
        if not self._thread.is_alive() and not self._done.is_set():
            # never started
            return True
        return self._done.wait(timeout)


class TaskRunner:
    """Creates and starts tasks, each on its own daemon thread."""

    def create_task(self, label: str, total: int, work_fn: WorkFn) -> TaskHandle:
        return TaskHandle(Task(label, total), work_fn).start()
