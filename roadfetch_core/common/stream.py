"""RoadFetch Streams - Binary Encoding for Fetched Hits.

Integers are written as variable-length unsigned ints, 7 bits per byte
with the high bit marking continuation. Strings are a vint byte length
followed by UTF-8 bytes. Booleans are one byte, 0 or 1.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import io
import struct

from roadfetch_core.exceptions import StreamCorruptedError

_FLOAT = struct.Struct(">f")


class StreamOutput:
    """Writes encoded values to an in-memory buffer."""

    def __init__(self):
        self._buffer = io.BytesIO()

    def write_byte(self, value: int) -> None:
        self._buffer.write(bytes((value & 0xFF,)))

    def write_vint(self, value: int) -> None:
        """Write a non-negative int in 7-bit groups, low group first."""
        if value < 0:
            raise ValueError(f"vint must be non-negative, got {value}")
        while value > 0x7F:
            self.write_byte((value & 0x7F) | 0x80)
            value >>= 7
        self.write_byte(value)

    def write_boolean(self, value: bool) -> None:
        self.write_byte(1 if value else 0)

    def write_float(self, value: float) -> None:
        self._buffer.write(_FLOAT.pack(value))

    def write_string(self, value: str) -> None:
        data = value.encode("utf-8")
        self.write_vint(len(data))
        self._buffer.write(data)

    def getvalue(self) -> bytes:
        """All bytes written so far."""
        return self._buffer.getvalue()


class StreamInput:
    """Reads values written by StreamOutput."""

    def __init__(self, data: bytes):
        self._buffer = io.BytesIO(data)

    def _read(self, size: int) -> bytes:
        data = self._buffer.read(size)
        if len(data) != size:
            raise StreamCorruptedError(f"Expected {size} bytes, got {len(data)}")
        return data

    def read_byte(self) -> int:
        return self._read(1)[0]

    def read_vint(self) -> int:
        value = 0
        shift = 0
        while True:
            b = self.read_byte()
            value |= (b & 0x7F) << shift
            if not b & 0x80:
                return value
            shift += 7
            if shift > 63:
                raise StreamCorruptedError("vint is too long")

    def read_boolean(self) -> bool:
        b = self.read_byte()
        if b not in (0, 1):
            raise StreamCorruptedError(f"Invalid boolean byte {b}")
        return b == 1

    def read_float(self) -> float:
        return _FLOAT.unpack(self._read(_FLOAT.size))[0]

    def read_string(self) -> str:
        data = self._read(self.read_vint())
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise StreamCorruptedError(f"Invalid UTF-8 string: {e}") from e

    def remaining(self) -> int:
        """Bytes not read yet."""
        position = self._buffer.tell()
        end = self._buffer.seek(0, io.SEEK_END)
        self._buffer.seek(position)
        return end - position


__all__ = [
    "StreamOutput",
    "StreamInput",
]
