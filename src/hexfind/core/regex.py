"""Regular expression search confined to string-like windows."""

from __future__ import annotations

import re
from collections.abc import Iterator

from hexfind.core.io import DataSource
from hexfind.core.occurrence import Occurrence, Region
from hexfind.core.settings import RegexSettings, StringsSettings
from hexfind.core.strings import iter_strings
from hexfind.core.task import Task


def compile_pattern(pattern: str) -> re.Pattern[bytes] | None:
    """Compile `pattern` for matching raw bytes; None when empty or invalid."""
    if not pattern:
        return None
    try:
        return re.compile(pattern.encode("utf-8"))
    except re.error:
        return None


def window_settings(settings: RegexSettings) -> StringsSettings:
    """Strings settings used to carve candidate windows: every class enabled."""
    return StringsSettings(
        min_length=settings.min_length,
        null_termination=settings.null_termination,
        encoding=settings.encoding,
        lower_case=True,
        upper_case=True,
        numbers=True,
        underscores=True,
        symbols=True,
        spaces=True,
        line_feeds=True,
    )


def iter_regex(
    task: Task, source: DataSource, region: Region, settings: RegexSettings
) -> Iterator[Occurrence]:
    """Yield the string windows whose raw bytes satisfy the expression.

    A match can never span two windows or reach into bytes that are not
    string-like.
    """
    regex = compile_pattern(settings.pattern)
    if regex is None:
        return

    windows = list(iter_strings(task, source, region, window_settings(settings)))
    for occurrence in windows:
        data = source.read(occurrence.start, occurrence.size)

        task.update()

        if settings.full_match:
            if regex.fullmatch(data):
                yield occurrence
        elif regex.search(data):
            yield occurrence


def search_regex(
    task: Task, source: DataSource, region: Region, settings: RegexSettings
) -> list[Occurrence]:
    return list(iter_regex(task, source, region, settings))
