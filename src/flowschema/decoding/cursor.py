"""Bounds-checked big-endian reader over a byte buffer.

Every decoder in this package reads through a ByteCursor so that
underruns surface as NotEnoughDataError rather than struct.error
or silently short slices.
"""

import struct

from flowschema.common.exceptions import NotEnoughDataError

_U16 = struct.Struct("!H")
_U32 = struct.Struct("!I")
_U64 = struct.Struct("!Q")


class ByteCursor:
    """Sequential reader over an immutable byte buffer.

    A failed read raises NotEnoughDataError and leaves the position
    where it was.
    """

    __slots__ = ("_data", "_position")

    def __init__(self, data: bytes, position: int = 0) -> None:
        self._data = bytes(data)
        if not 0 <= position <= len(self._data):
            raise ValueError(f"position {position} outside buffer of {len(self._data)} bytes")
        self._position = position

    @property
    def position(self) -> int:
        return self._position

    @property
    def remaining(self) -> int:
        return len(self._data) - self._position

    @property
    def at_end(self) -> bool:
        return self._position >= len(self._data)

    def _require(self, size: int) -> int:
        remaining = self.remaining
        if size > remaining:
            raise NotEnoughDataError(expected=size, actual=remaining)
        return self._position

    def u8(self) -> int:
        start = self._require(1)
        self._position = start + 1
        return self._data[start]

    def u16(self) -> int:
        start = self._require(2)
        self._position = start + 2
        return _U16.unpack_from(self._data, start)[0]

    def u32(self) -> int:
        start = self._require(4)
        self._position = start + 4
        return _U32.unpack_from(self._data, start)[0]

    def u64(self) -> int:
        start = self._require(8)
        self._position = start + 8
        return _U64.unpack_from(self._data, start)[0]

    def read_bytes(self, size: int) -> bytes:
        """Read exactly ``size`` bytes."""
        if size < 0:
            raise ValueError(f"negative read size {size}")
        start = self._require(size)
        self._position = start + size
        return self._data[start:start + size]

    def skip(self, size: int) -> None:
        """Advance past ``size`` bytes without returning them."""
        if size < 0:
            raise ValueError(f"negative skip size {size}")
        self._position = self._require(size) + size

    def rest(self) -> bytes:
        """Consume and return everything left in the buffer."""
        start = self._position
        self._position = len(self._data)
        return self._data[start:]

    def __repr__(self) -> str:
        return f"ByteCursor(position={self._position}, remaining={self.remaining})"
