"""Forward-only reader over an owned byte buffer.

Every read is bounds-checked: asking for more bytes than remain raises
FormatError instead of returning a short slice. A chunk that claims a length
past the end of the buffer therefore fails fast rather than producing garbage.
"""

import struct

from idokep_reader.core.errors import FormatError


class ByteCursor:
    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def _check(self, n: int) -> None:
        if n < 0:
            raise FormatError(f'negative length {n} at offset {self._pos}')
        if n > self.remaining:
            raise FormatError(f'unexpected end of data: need {n} bytes at offset {self._pos}, {self.remaining} left')

    def read_exact(self, n: int) -> bytes:
        """Return the next n bytes and advance past them."""
        self._check(n)
        chunk = self._data[self._pos : self._pos + n]
        self._pos += n
        return chunk

    def skip(self, n: int) -> None:
        self._check(n)
        self._pos += n

    def read_uint32_be(self) -> int:
        return struct.unpack('>I', self.read_exact(4))[0]

    def read_byte(self) -> int:
        return self.read_exact(1)[0]
