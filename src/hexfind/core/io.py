from __future__ import annotations

import mmap
import os
import threading
from collections.abc import Iterator
from typing import Protocol, runtime_checkable


class InvalidOffset(ValueError):
    """Raised when an invalid (e.g., negative) offset or length is provided."""


@runtime_checkable
class DataSource(Protocol):
    """Byte-addressable object that can be searched.

    `read` must clamp at the source bounds and never raise for reads past the end.
    """

    @property
    def size(self) -> int: ...

    def read(self, offset: int, length: int) -> bytes: ...


def _check_range(offset: int, length: int) -> None:
    if offset < 0:
        raise InvalidOffset("offset must be >= 0")
    if length < 0:
        raise InvalidOffset("length must be >= 0")


class BytesSource:
    """In-memory data source, mainly for small buffers and tests."""

    def __init__(self, data: bytes | bytearray = b"") -> None:
        self._data = bytearray(data)

    @property
    def size(self) -> int:
        return len(self._data)

    def read(self, offset: int, length: int) -> bytes:
        _check_range(offset, length)
        return bytes(self._data[offset : offset + length])

    def write(self, offset: int, data: bytes) -> None:
        """Overwrite bytes in place; writes past the end are truncated."""
        _check_range(offset, len(data))
        if offset >= len(self._data):
            return
        end = min(len(self._data), offset + len(data))
        self._data[offset:end] = data[: end - offset]


class FileSource:
    """Read-only data source over a file on disk.

    Reads go through a memory map when the platform allows one, otherwise
    through positioned reads on the open handle. Searches read from a worker
    thread while display code reads from the caller, so handle reads are
    serialized.
    """

    def __init__(self, path: str, *, use_mmap: bool = True) -> None:
        if not os.path.isfile(path):
            raise FileNotFoundError(f"File not found: {path}")
        self._path = path
        self._fh = open(path, "rb")  # noqa: SIM115
        self._size = os.fstat(self._fh.fileno()).st_size
        self._lock = threading.Lock()
        self._map: mmap.mmap | None = None
        if use_mmap and self._size > 0:
            try:
                self._map = mmap.mmap(self._fh.fileno(), 0, access=mmap.ACCESS_READ)
            except (OSError, ValueError):
                self._map = None

    def close(self) -> None:
        if self._map is not None:
            self._map.close()
            self._map = None
        self._fh.close()

    def __enter__(self) -> FileSource:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def size(self) -> int:
        return self._size

    @property
    def path(self) -> str:
        return self._path

    def read(self, offset: int, length: int) -> bytes:
        """Up to `length` bytes at `offset`; short at end of file."""
        _check_range(offset, length)
        end = min(self._size, offset + length)
        if end <= offset:
            return b""
        if self._map is not None:
            return self._map[offset:end]
        with self._lock:
            self._fh.seek(offset)
            return self._fh.read(end - offset)


class DataReader:
    """Cursor over a data source bounded by an end address.

    Iterating yields `(byte, address)` pairs from the current position up to
    (excluding) the end address. Reads go through a chunk window so that
    byte-at-a-time scanners and short backtracking stay cheap.
    """

    CHUNK_SIZE = 64 * 1024

    def __init__(self, source: DataSource, *, chunk_size: int | None = None) -> None:
        self._source = source
        self._chunk_size = int(chunk_size or self.CHUNK_SIZE)
        self._position = 0
        self._end = source.size
        self._window = b""
        self._window_start = 0

    @property
    def source(self) -> DataSource:
        return self._source

    @property
    def position(self) -> int:
        return self._position

    @property
    def end_address(self) -> int:
        return self._end

    def seek(self, address: int) -> None:
        if address < 0:
            raise InvalidOffset("address must be >= 0")
        self._position = address

    def set_end_address(self, address: int) -> None:
        """Bound the reader; the end is clamped to the source size."""
        if address < 0:
            raise InvalidOffset("address must be >= 0")
        self._end = min(address, self._source.size)

    def read(self, address: int, length: int) -> bytes:
        """Read up to `length` bytes at `address`, clamped to the end address."""
        if address >= self._end:
            return b""
        return self._source.read(address, min(length, self._end - address))

    def byte_at(self, address: int) -> int | None:
        """Return the byte at `address`, or None outside [0, end)."""
        if address < 0 or address >= self._end:
            return None
        within = address - self._window_start
        if within < 0 or within >= len(self._window):
            self._window = self.read(address, self._chunk_size)
            self._window_start = address
            within = 0
            if not self._window:
                return None
        return self._window[within]

    def peek(self, address: int, length: int) -> bytes:
        """Like `read`, but served from the chunk window when possible."""
        within = address - self._window_start
        if 0 <= within and within + length <= len(self._window):
            return self._window[within : within + length]
        if address < 0 or address >= self._end:
            return b""
        self._window = self.read(address, max(length, self._chunk_size))
        self._window_start = address
        return self._window[:length]

    def __iter__(self) -> Iterator[tuple[int, int]]:
        address = self._position
        while address < self._end:
            chunk = self.read(address, self._chunk_size)
            if not chunk:
                break
            for byte in chunk:
                yield byte, address
                address += 1
