#!/usr/bin/env python3
"""
Little/big-endian cursor over an in-memory byte buffer.

FIT declares byte order per message definition, so every multi-byte read
takes its own ``little_endian`` flag instead of the reader holding one.
"""
import struct
from typing import Union

from .interface import OutOfBounds


BytesLike = Union[bytes, bytearray, memoryview]


class BinaryReader:
    """Bounds-checked sequential reader over a fixed-length buffer"""

    def __init__(self, buffer: BytesLike):
        view = memoryview(buffer)
        self._buffer = view if view.format == 'B' else view.cast('B')
        self._length = len(self._buffer)
        self._offset = 0

    def __len__(self) -> int:
        return self._length

    def tell(self) -> int:
        """Current absolute cursor position"""
        return self._offset

    def seek(self, offset: int):
        """Move the cursor to an absolute position"""
        if offset < 0 or offset > self._length:
            raise OutOfBounds(f"Seek to {offset} outside buffer of {self._length} bytes")
        self._offset = offset

    def remaining(self) -> int:
        """Bytes left between the cursor and the end of the buffer"""
        return self._length - self._offset

    def _take(self, size: int) -> memoryview:
        if size < 0:
            raise OutOfBounds(f"Negative read size {size}")
        end = self._offset + size
        if end > self._length:
            raise OutOfBounds(
                f"Read of {size} bytes at offset {self._offset} exceeds buffer of {self._length} bytes"
            )
        chunk = self._buffer[self._offset:end]
        self._offset = end
        return chunk

    def _unpack(self, fmt: str, size: int, little_endian: bool):
        order = '<' if little_endian else '>'
        return struct.unpack(order + fmt, self._take(size))[0]

    def peek_uint8(self) -> int:
        """Read one byte without advancing the cursor"""
        if self._offset >= self._length:
            raise OutOfBounds(f"Peek at offset {self._offset} exceeds buffer of {self._length} bytes")
        return self._buffer[self._offset]

    def read_uint8(self) -> int:
        return self._take(1)[0]

    def read_int8(self) -> int:
        return self._unpack('b', 1, True)

    def read_uint16(self, little_endian: bool = True) -> int:
        return self._unpack('H', 2, little_endian)

    def read_int16(self, little_endian: bool = True) -> int:
        return self._unpack('h', 2, little_endian)

    def read_uint32(self, little_endian: bool = True) -> int:
        return self._unpack('I', 4, little_endian)

    def read_int32(self, little_endian: bool = True) -> int:
        return self._unpack('i', 4, little_endian)

    def read_uint64(self, little_endian: bool = True) -> int:
        return self._unpack('Q', 8, little_endian)

    def read_int64(self, little_endian: bool = True) -> int:
        return self._unpack('q', 8, little_endian)

    def read_float32(self, little_endian: bool = True) -> float:
        return self._unpack('f', 4, little_endian)

    def read_float64(self, little_endian: bool = True) -> float:
        return self._unpack('d', 8, little_endian)

    def read_bytes(self, size: int) -> bytes:
        return bytes(self._take(size))

    def read_string(self, size: int, encoding: str = 'utf-8') -> str:
        """
        Read a fixed-width string field.

        FIT strings are null-terminated inside their declared width; anything
        after the first NUL is padding.
        """
        raw = bytes(self._take(size))
        return raw.split(b'\x00', 1)[0].decode(encoding, errors='replace')
