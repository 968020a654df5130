from typing import Callable, Optional, TypeVar, Union

from bitops import BitDataError, BitReader, BytesLike

T = TypeVar("T")


class StickyBitReader:
    """Bit reader that records the first error instead of raising it.

    Lets a decoder issue a whole sequence of reads unconditionally and check
    for failure once at the end. After the first failure every read returns
    the zero value (``0`` or ``False``) without touching the data, so the
    cursor stops advancing.

    :ivar reader: Wrapped reader doing the actual bit arithmetic.
    :type reader: BitReader
    """

    def __init__(self, source: Union[BitReader, BytesLike]):
        """Create a sticky reader over ``source``.

        :param source: Data to read from, or a reader to wrap; a wrapped
            reader continues from its current cursor.
        :type source: BitReader | bytes | bytearray | memoryview
        :returns: None
        :rtype: None
        """
        if isinstance(source, BitReader):
            self.reader = source
        else:
            self.reader = BitReader(source)
        self._error: Optional[BitDataError] = None

    @property
    def error(self) -> Optional[BitDataError]:
        """First error encountered, or ``None`` if all reads succeeded."""
        return self._error

    @property
    def bits_read(self) -> int:
        return self.reader.bits_read

    def check(self) -> None:
        """Raise the recorded error, if any.

        :returns: None
        :rtype: None
        :raises BitDataError: The first error encountered by a read.
        """
        if self._error is not None:
            raise self._error

    def _guard(self, read: Callable[[], T], default: T) -> T:
        if self._error is not None:
            return default
        try:
            return read()
        except BitDataError as e:
            self._error = e
            return default

    def skip(self, bit_count: int) -> None:
        """Advance the cursor, even after an error."""
        self.reader.skip(bit_count)

    def read_bool(self) -> bool:
        return self._guard(self.reader.read_bool, False)

    def read8(self, bit_count: int) -> int:
        return self._guard(lambda: self.reader.read8(bit_count), 0)

    def read16(self, bit_count: int) -> int:
        return self._guard(lambda: self.reader.read16(bit_count), 0)

    def read32(self, bit_count: int) -> int:
        return self._guard(lambda: self.reader.read32(bit_count), 0)

    def read64(self, bit_count: int) -> int:
        return self._guard(lambda: self.reader.read64(bit_count), 0)
