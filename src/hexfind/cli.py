from __future__ import annotations

import argparse
import logging
import os
import sys

from rich.console import Console
from rich.table import Table

from hexfind.core.codecs import encode_byte_string, parse_hex_string
from hexfind.core.config import ConfigError, SearchRequest, load_search_file
from hexfind.core.endian import normalize_endian
from hexfind.core.io import FileSource
from hexfind.core.occurrence import Region
from hexfind.core.scan import InvalidSearchSpecification
from hexfind.core.session import FindSession
from hexfind.core.settings import (
    BinaryPatternSettings,
    RegexSettings,
    SequenceSettings,
    StringsSettings,
    StringType,
    ValueSettings,
    ValueType,
)

logger = logging.getLogger("hexfind")


def _int(text: str) -> int:
    return int(text, 0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hexfind", description="Search a binary file")
    parser.add_argument("path", help="Path to binary file")

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--strings", action="store_true", help="find string-like runs")
    mode.add_argument("--sequence", metavar="LIT", help="escaped byte string, e.g. 'MZ\\x90'")
    mode.add_argument("--hex", metavar="HEX", help="hex byte sequence, e.g. 'DE AD BE EF'")
    mode.add_argument("--regex", metavar="PAT", help="regex applied within string runs")
    mode.add_argument("--pattern", metavar="PAT", help="masked pattern, e.g. 'DE AD ?? EF'")
    mode.add_argument("--value", metavar="MIN[:MAX]", help="numeric value or range")
    mode.add_argument("--spec", metavar="FILE", help="YAML search file")

    parser.add_argument("--min-length", type=int, default=5)
    parser.add_argument("--null-term", action="store_true", help="strings must end in 0x00")
    parser.add_argument(
        "--encoding", default="ascii", choices=[t.value for t in StringType]
    )
    parser.add_argument("--full-match", action="store_true")
    parser.add_argument("--alignment", type=int, default=1)
    parser.add_argument("--type", default="u32", choices=[t.value for t in ValueType])
    parser.add_argument("--endian", default="little", help="little|big")
    parser.add_argument("--unaligned", action="store_true", help="value search at every byte")
    parser.add_argument("--start", type=_int, default=None, help="region start (0x allowed)")
    parser.add_argument("--size", type=_int, default=None, help="region size (0x allowed)")
    parser.add_argument("--filter", default="", help="keep results whose value contains TEXT")
    parser.add_argument("--limit", type=int, default=100, help="rows to print (0 = all)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def request_from_args(args: argparse.Namespace, file_size: int) -> SearchRequest:
    if args.spec:
        request = load_search_file(args.spec)
    else:
        encoding = StringType(args.encoding)
        if args.strings:
            spec = StringsSettings(
                min_length=args.min_length,
                null_termination=args.null_term,
                encoding=encoding,
            )
        elif args.sequence is not None:
            spec = SequenceSettings(args.sequence)
        elif args.hex is not None:
            raw = parse_hex_string(args.hex)
            if not raw:
                raise ValueError(f"invalid hex sequence: {args.hex!r}")
            spec = SequenceSettings(encode_byte_string(raw))
        elif args.regex is not None:
            spec = RegexSettings(
                pattern=args.regex,
                full_match=args.full_match,
                min_length=args.min_length,
                null_termination=args.null_term,
                encoding=encoding,
            )
        elif args.pattern is not None:
            spec = BinaryPatternSettings(args.pattern, args.alignment)
        else:
            lo, _, hi = args.value.partition(":")
            spec = ValueSettings(
                type=ValueType(args.type),
                input_min=lo,
                input_max=hi,
                endian=normalize_endian(args.endian) or "little",
                aligned=not args.unaligned,
            )
        request = SearchRequest(spec)

    if args.start is not None or args.size is not None:
        start = args.start or 0
        size = args.size if args.size is not None else file_size - start
        request = SearchRequest(request.spec, Region(start, size))
    return request


def render(session: FindSession, console: Console, limit: int) -> None:
    table = Table(title=f"{len(session.results.working)} of {len(session)} occurrences")
    table.add_column("Offset", justify="right", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Value", overflow="fold")
    rows = session.results.working if limit <= 0 else session.results.working[:limit]
    for occurrence in rows:
        table.add_row(
            f"0x{occurrence.start:08X}",
            str(occurrence.size),
            session.value_of(occurrence, 256),
        )
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not os.path.exists(args.path):
        print(f"hexfind: file not found: {args.path}", file=sys.stderr)
        return 2

    with FileSource(args.path) as source:
        try:
            request = request_from_args(args, source.size)
        except (ConfigError, ValueError) as e:
            print(f"hexfind: {e}", file=sys.stderr)
            return 2

        session = FindSession(source, name=args.path)
        try:
            handle = session.run_search(request.spec, request.region)
        except InvalidSearchSpecification as e:
            print(f"hexfind: invalid search: {e}", file=sys.stderr)
            return 2

        try:
            handle.wait()
        except KeyboardInterrupt:
            logger.warning("interrupted, showing partial results")
            session.cancel_search()
            handle.wait()
        if handle.error is not None:
            print(f"hexfind: search failed: {handle.error}", file=sys.stderr)
            return 2

        if args.filter:
            session.set_filter(args.filter)
            session.wait()

        render(session, Console(), args.limit)
        return 0 if session.results.working else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
