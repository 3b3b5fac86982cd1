"""Unit tests for ByteCursor."""

import pytest

from flowschema.common.exceptions import NotEnoughDataError
from flowschema.decoding.cursor import ByteCursor


@pytest.mark.unit
class TestByteCursor:
    """Test cases for ByteCursor."""

    def test_reads_big_endian(self):
        """Test integers are read in network byte order."""
        cursor = ByteCursor(bytes.fromhex("01" "0203" "04050607" "08090a0b0c0d0e0f"))

        assert cursor.u8() == 0x01
        assert cursor.u16() == 0x0203
        assert cursor.u32() == 0x04050607
        assert cursor.u64() == 0x08090A0B0C0D0E0F
        assert cursor.at_end

    def test_position_advances(self):
        """Test each read advances the position by its width."""
        cursor = ByteCursor(b"\x00" * 10)

        cursor.u16()
        assert cursor.position == 2
        assert cursor.remaining == 8

        cursor.read_bytes(3)
        cursor.skip(1)
        assert cursor.position == 6
        assert cursor.remaining == 4

    def test_read_bytes(self):
        """Test fixed-length byte reads."""
        cursor = ByteCursor(b"abcdef")

        assert cursor.read_bytes(0) == b""
        assert cursor.read_bytes(4) == b"abcd"
        assert cursor.rest() == b"ef"
        assert cursor.at_end

    @pytest.mark.parametrize(
        ("method", "size"),
        [("u8", 1), ("u16", 2), ("u32", 4), ("u64", 8)],
    )
    def test_underrun_raises(self, method: str, size: int):
        """Test short reads raise NotEnoughDataError."""
        cursor = ByteCursor(b"\x00" * (size - 1))

        with pytest.raises(NotEnoughDataError) as exc_info:
            getattr(cursor, method)()

        assert exc_info.value.expected == size
        assert exc_info.value.actual == size - 1

    def test_failed_read_does_not_consume(self):
        """Test the position is unchanged after a failed read."""
        cursor = ByteCursor(b"\x01\x02\x03")
        cursor.u8()

        with pytest.raises(NotEnoughDataError):
            cursor.u32()
        with pytest.raises(NotEnoughDataError):
            cursor.read_bytes(3)
        with pytest.raises(NotEnoughDataError):
            cursor.skip(5)

        assert cursor.position == 1
        assert cursor.u16() == 0x0203

    def test_negative_sizes_rejected(self):
        """Test negative read sizes are programming errors."""
        cursor = ByteCursor(b"\x00\x00")

        with pytest.raises(ValueError):
            cursor.read_bytes(-1)
        with pytest.raises(ValueError):
            cursor.skip(-1)

    def test_start_position(self):
        """Test a cursor can start mid-buffer."""
        cursor = ByteCursor(b"\x00\x00\x12\x34", position=2)

        assert cursor.u16() == 0x1234

        with pytest.raises(ValueError):
            ByteCursor(b"\x00", position=2)
