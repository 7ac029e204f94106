"""Five-mode dispatch: specification + source + region -> occurrences."""

from __future__ import annotations

from collections.abc import Callable, Iterator

from hexfind.core.binary_pattern import iter_binary_pattern
from hexfind.core.io import DataSource
from hexfind.core.occurrence import Occurrence, Region
from hexfind.core.pattern import BinaryPattern
from hexfind.core.regex import compile_pattern, iter_regex
from hexfind.core.search import iter_sequence
from hexfind.core.settings import (
    BinaryPatternSettings,
    RegexSettings,
    SearchMode,
    SearchSpecification,
    SequenceSettings,
    StringsSettings,
    ValueSettings,
)
from hexfind.core.strings import iter_strings
from hexfind.core.task import Task
from hexfind.core.values import iter_values, validate_value_settings


class InvalidSearchSpecification(ValueError):
    """Raised when a search is requested with a specification that fails validation."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("; ".join(problems) or "invalid search specification")
        self.problems = problems


ScannerFn = Callable[[Task, DataSource, Region, SearchSpecification], Iterator[Occurrence]]

SCANNERS: dict[SearchMode, ScannerFn] = {
    SearchMode.STRINGS: iter_strings,  # type: ignore[dict-item]
    SearchMode.SEQUENCE: iter_sequence,  # type: ignore[dict-item]
    SearchMode.REGEX: iter_regex,  # type: ignore[dict-item]
    SearchMode.BINARY_PATTERN: iter_binary_pattern,  # type: ignore[dict-item]
    SearchMode.VALUE: iter_values,  # type: ignore[dict-item]
}


def validate(spec: SearchSpecification) -> list[str]:
    """Return the reasons `spec` cannot be searched (empty when valid)."""
    if isinstance(spec, StringsSettings):
        return [] if spec.min_length >= 1 else ["minimum length must be >= 1"]
    if isinstance(spec, SequenceSettings):
        # An empty or undecodable literal is a no-op search, not an error
        return []
    if isinstance(spec, RegexSettings):
        problems = []
        if compile_pattern(spec.pattern) is None:
            problems.append(f"invalid regular expression: {spec.pattern!r}")
        if spec.min_length < 1:
            problems.append("minimum length must be >= 1")
        return problems
    if isinstance(spec, BinaryPatternSettings):
        problems = []
        if not BinaryPattern(spec.pattern).is_valid:
            problems.append(f"invalid binary pattern: {spec.pattern!r}")
        if spec.alignment < 1:
            problems.append("alignment must be >= 1")
        return problems
    if isinstance(spec, ValueSettings):
        if not spec.input_min:
            return ["value is empty"]
        return validate_value_settings(spec)
    return [f"unsupported search specification: {type(spec).__name__}"]


def is_valid(spec: SearchSpecification) -> bool:
    return not validate(spec)


def iter_scanner(
    spec: SearchSpecification, source: DataSource, region: Region, task: Task
) -> Iterator[Occurrence]:
    problems = validate(spec)
    if problems:
        raise InvalidSearchSpecification(problems)
    return SCANNERS[spec.mode](task, source, region, spec)


def run_scanner(
    spec: SearchSpecification,
    source: DataSource,
    region: Region | None = None,
    task: Task | None = None,
) -> list[Occurrence]:
    """Run the scanner selected by `spec` to completion and return its results.

    `region` defaults to the whole source. Without a `task`, the scan runs
    uninterruptibly on the calling thread.
    """
    if region is None:
        if source.size == 0:
            return []
        region = Region(0, source.size)
    if task is None:
        task = Task("search", region.size)
    return list(iter_scanner(spec, source, region, task))
