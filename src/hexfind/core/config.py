"""Load search specifications from YAML.

Example::

    mode: value
    region: {start: 0x100, size: 4096}
    type: u32
    min: "0x10"
    max: "0x20"
    endian: big
    aligned: true
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from hexfind.core.endian import normalize_endian
from hexfind.core.occurrence import Region
from hexfind.core.settings import (
    BinaryPatternSettings,
    RegexSettings,
    SearchMode,
    SearchSpecification,
    SequenceSettings,
    StringsSettings,
    StringType,
    ValueSettings,
    ValueType,
)


class ConfigError(ValueError):
    """Raised when a search file cannot be turned into a specification."""


@dataclass(frozen=True)
class SearchRequest:
    spec: SearchSpecification
    region: Region | None = None


_SETTINGS = {
    SearchMode.STRINGS: StringsSettings,
    SearchMode.SEQUENCE: SequenceSettings,
    SearchMode.REGEX: RegexSettings,
    SearchMode.BINARY_PATTERN: BinaryPatternSettings,
    SearchMode.VALUE: ValueSettings,
}

# YAML key -> dataclass field, where they differ
_ALIASES = {"min": "input_min", "max": "input_max"}


def _enum(enum_cls: type, value: Any, key: str):  # type: ignore[no-untyped-def]
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        choices = ", ".join(e.value for e in enum_cls)
        raise ConfigError(f"invalid {key} '{value}'. Expected one of: {choices}") from None


def _coerce(name: str, value: Any) -> Any:
    if name == "encoding":
        return _enum(StringType, value, name)
    if name == "type":
        return _enum(ValueType, value, name)
    if name == "endian":
        try:
            return normalize_endian(str(value))
        except ValueError as e:
            raise ConfigError(str(e)) from None
    if name in ("input_min", "input_max", "sequence", "pattern"):
        # YAML turns bare 250 into an int; the scanners want the literal text
        return "" if value is None else str(value)
    return value


def _parse_region(data: Any) -> Region | None:
    if data is None:
        return None
    if not isinstance(data, dict) or "start" not in data or "size" not in data:
        raise ConfigError("region must be a mapping with 'start' and 'size'")
    try:
        return Region(int(data["start"]), int(data["size"]))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid region: {e}") from None


def parse_search(data: dict[str, Any]) -> SearchRequest:
    """Build a SearchRequest from an already-loaded mapping."""
    if not isinstance(data, dict):
        raise ConfigError("search file must contain a mapping")
    data = dict(data)

    mode = _enum(SearchMode, data.pop("mode", None), "mode")
    region = _parse_region(data.pop("region", None))

    settings_cls = _SETTINGS[mode]
    allowed = {f.name for f in fields(settings_cls)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = _ALIASES.get(key, key)
        if name not in allowed:
            raise ConfigError(f"unknown key '{key}' for {mode.value} search")
        kwargs[name] = _coerce(name, value)

    try:
        spec = settings_cls(**kwargs)
    except TypeError as e:
        raise ConfigError(str(e)) from None
    return SearchRequest(spec, region)


def load_search(text: str) -> SearchRequest:
    """Parse YAML text describing one search."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAML parse error: {e}") from None
    return parse_search(data)


def load_search_file(path: str | Path) -> SearchRequest:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from None
    return load_search(text)
