"""
Wire encoding primitives.

Canonical little-endian encoding for the field types the review store
persists: bool (1 byte), u8, u32 and string (u32 byte length + UTF-8).
"""

import struct
from typing import List

from src.models.errors import CodecError

_U32 = struct.Struct("<I")


class WireWriter:
    """Accumulates encoded fields in order."""

    def __init__(self):
        self._parts: List[bytes] = []

    def write_bool(self, value: bool) -> "WireWriter":
        self._parts.append(b"\x01" if value else b"\x00")
        return self

    def write_u8(self, value: int) -> "WireWriter":
        if not 0 <= value <= 0xFF:
            raise CodecError(f"Value {value} does not fit in u8")
        self._parts.append(bytes((value,)))
        return self

    def write_u32(self, value: int) -> "WireWriter":
        if not 0 <= value <= 0xFFFFFFFF:
            raise CodecError(f"Value {value} does not fit in u32")
        self._parts.append(_U32.pack(value))
        return self

    def write_string(self, value: str) -> "WireWriter":
        encoded = value.encode("utf-8")
        self.write_u32(len(encoded))
        self._parts.append(encoded)
        return self

    def getvalue(self) -> bytes:
        return b"".join(self._parts)


class WireReader:
    """
    Reads encoded fields from a buffer, front to back.

    Raises CodecError when a field runs past the end of the buffer or
    holds a value its type cannot represent.
    """

    def __init__(self, data: bytes, offset: int = 0):
        self._data = bytes(data)
        self._offset = offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def _take(self, size: int) -> bytes:
        if size > self.remaining:
            raise CodecError(
                f"Unexpected end of data: need {size} bytes at offset {self._offset}, "
                f"{self.remaining} left"
            )
        chunk = self._data[self._offset:self._offset + size]
        self._offset += size
        return chunk

    def read_bool(self) -> bool:
        value = self._take(1)[0]
        if value > 1:
            raise CodecError(f"Invalid bool byte {value} at offset {self._offset - 1}")
        return value == 1

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u32(self) -> int:
        return _U32.unpack(self._take(4))[0]

    def read_string(self) -> str:
        length = self.read_u32()
        raw = self._take(length)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CodecError(f"Invalid UTF-8 string: {e}") from e
