from typing import Protocol, Union

from bitmask import BOOL_WIDTH, mask

BytesLike = Union[bytes, bytearray, memoryview]


class BitDataError(Exception):
    """Base class for errors raised while reading packed bit data."""


class BitCountTooBigError(BitDataError, ValueError):
    """A read asked for more bits than its container holds.

    :ivar bit_count: Requested number of bits.
    :type bit_count: int
    :ivar width: Width of the addressed container.
    :type width: int
    """

    def __init__(self, bit_count: int, width: int):
        super().__init__(
            f"Bit count too big: {bit_count} (container width {width})"
        )
        self.bit_count = bit_count
        self.width = width


class UnexpectedEndOfDataError(BitDataError, EOFError):
    """A read needed a byte past the end of the data.

    :ivar bit_count: Requested number of bits.
    :type bit_count: int
    :ivar position: Bit cursor at the start of the failed read.
    :type position: int
    """

    def __init__(self, bit_count: int, position: int):
        super().__init__(
            f"Unexpected end of data reading {bit_count} bits at bit {position}"
        )
        self.bit_count = bit_count
        self.position = position


def _check_bit_count(bit_count: int) -> None:
    if bit_count < 0:
        raise ValueError(f"Negative bit count: {bit_count}")


class BitWriter:
    """Bit-packing writer.

    Values are appended LSB-first starting at the current bit cursor, with
    no alignment to byte boundaries. Unused high bits of the last byte are
    always zero.

    :ivar buffer: Bytes written so far; the last one may be partial.
    :type buffer: bytearray
    :ivar bits_written: Bit cursor, number of bits written so far.
    :type bits_written: int
    """

    def __init__(self):
        """Initialize an empty bit writer.

        :returns: None
        :rtype: None
        """
        self.buffer = bytearray()
        self.bits_written = 0

    def __len__(self) -> int:
        return len(self.buffer)

    def __bytes__(self) -> bytes:
        return bytes(self.buffer)

    def _write(self, value: int, bit_count: int, width: int) -> None:
        """Append the low ``bit_count`` bits of ``value``.

        ``value`` is truncated to the ``width``-bit container first, so a
        ``bit_count`` above ``width`` pads the extra high bits with zeros.

        :param value: Integer to write.
        :type value: int
        :param bit_count: Number of bits to write.
        :type bit_count: int
        :param width: Container width in bits.
        :type width: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``bit_count`` is negative.
        """
        _check_bit_count(bit_count)
        if bit_count == 0:
            return

        value &= mask(min(bit_count, width), width)

        idx, ofs = divmod(self.bits_written, 8)
        bits_remain = bit_count

        if ofs > 0:
            self.buffer[idx] |= (value << ofs) & 0xFF
            value >>= 8 - ofs
            bits_remain -= 8 - ofs

        while bits_remain > 0:
            self.buffer.append(value & 0xFF)
            value >>= 8
            bits_remain -= 8

        self.bits_written += bit_count

    def write_bool(self, value: bool) -> None:
        """Write a single bit, ``1`` for a truthy ``value``.

        :param value: Flag to write.
        :type value: bool
        :returns: None
        :rtype: None
        """
        self._write(1 if value else 0, BOOL_WIDTH, 8)

    def write8(self, value: int, bit_count: int) -> None:
        """Write the low ``bit_count`` (0-8) bits of an 8-bit ``value``."""
        self._write(value, bit_count, 8)

    def write16(self, value: int, bit_count: int) -> None:
        """Write the low ``bit_count`` (0-16) bits of a 16-bit ``value``."""
        self._write(value, bit_count, 16)

    def write32(self, value: int, bit_count: int) -> None:
        """Write the low ``bit_count`` (0-32) bits of a 32-bit ``value``."""
        self._write(value, bit_count, 32)

    def write64(self, value: int, bit_count: int) -> None:
        """Write the low ``bit_count`` (0-64) bits of a 64-bit ``value``."""
        self._write(value, bit_count, 64)

    def bit_data(self) -> bytes:
        """Return the bytes written so far.

        Safe to call mid-write: the snapshot is not affected by later writes.

        :returns: Packed data, ``ceil(bits_written / 8)`` bytes long.
        :rtype: bytes
        """
        return bytes(self.buffer)


class SupportsBitRead(Protocol):
    """Read operations shared by :class:`BitReader` and the sticky reader."""

    def skip(self, bit_count: int) -> None: ...

    def read_bool(self) -> bool: ...

    def read8(self, bit_count: int) -> int: ...

    def read16(self, bit_count: int) -> int: ...

    def read32(self, bit_count: int) -> int: ...

    def read64(self, bit_count: int) -> int: ...


class BitReader:
    """Bit-unpacking reader.

    Reads values in the order and widths they were written by
    :class:`BitWriter`. Every failing read raises and leaves the cursor
    where it was.

    :ivar data: Packed data; borrowed, never modified.
    :type data: bytes | bytearray | memoryview
    :ivar bits_read: Bit cursor, number of bits consumed so far.
    :type bits_read: int
    """

    def __init__(self, data: BytesLike):
        """Create a bit reader over ``data``.

        :param data: Source data to read from.
        :type data: bytes | bytearray | memoryview
        :returns: None
        :rtype: None
        """
        self.data = data
        self.bits_read = 0

    @property
    def bits_remaining(self) -> int:
        """Number of bits left before the end of the data (never negative)."""
        return max(len(self.data) * 8 - self.bits_read, 0)

    def skip(self, bit_count: int) -> None:
        """Advance the cursor by ``bit_count`` bits without reading.

        The cursor may move past the end of the data; the next read then
        raises :class:`UnexpectedEndOfDataError`.

        :param bit_count: Number of bits to skip.
        :type bit_count: int
        :returns: None
        :rtype: None
        """
        _check_bit_count(bit_count)
        self.bits_read += bit_count

    def _read(self, bit_count: int, width: int) -> int:
        """Read ``bit_count`` bits into a ``width``-bit container.

        :param bit_count: Number of bits to read.
        :type bit_count: int
        :param width: Container width in bits.
        :type width: int
        :returns: The value, assembled least-significant chunk first.
        :rtype: int
        :raises BitCountTooBigError: If ``bit_count`` exceeds ``width``.
        :raises UnexpectedEndOfDataError: If the data ends before
            ``bit_count`` bits could be read.
        """
        _check_bit_count(bit_count)
        if bit_count > width:
            raise BitCountTooBigError(bit_count, width)
        if bit_count == 0:
            return 0

        idx, ofs = divmod(self.bits_read, 8)
        size = len(self.data)
        value = 0
        bits_done = 0

        if ofs > 0:
            if idx >= size:
                raise UnexpectedEndOfDataError(bit_count, self.bits_read)
            value = self.data[idx] >> ofs
            bits_done = 8 - ofs
            idx += 1

        while bits_done < bit_count:
            if idx >= size:
                raise UnexpectedEndOfDataError(bit_count, self.bits_read)
            value |= self.data[idx] << bits_done
            bits_done += 8
            idx += 1

        self.bits_read += bit_count
        return value & mask(bit_count, width)

    def read_bool(self) -> bool:
        """Read a single bit.

        :returns: ``True`` if the bit is set.
        :rtype: bool
        :raises UnexpectedEndOfDataError: If no bit is left.
        """
        return self._read(BOOL_WIDTH, 8) != 0

    def read8(self, bit_count: int) -> int:
        """Read ``bit_count`` (0-8) bits."""
        return self._read(bit_count, 8)

    def read16(self, bit_count: int) -> int:
        """Read ``bit_count`` (0-16) bits."""
        return self._read(bit_count, 16)

    def read32(self, bit_count: int) -> int:
        """Read ``bit_count`` (0-32) bits."""
        return self._read(bit_count, 32)

    def read64(self, bit_count: int) -> int:
        """Read ``bit_count`` (0-64) bits."""
        return self._read(bit_count, 64)
