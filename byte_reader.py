"""
Big-endian cursor over an immutable byte buffer
"""

import struct
from gdl90_errors import FormatError


class ByteReader:
    """Sequential reader that names the field on every short read"""

    def __init__(self, data: bytes):
        self.data = bytes(data)
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def _unpack(self, fmt: str, size: int, field: str):
        try:
            value = struct.unpack_from(fmt, self.data, self.offset)[0]
        except struct.error:
            raise FormatError(field, f"need {size} bytes at offset {self.offset}, "
                                     f"only {self.remaining} left") from None
        self.offset += size
        return value

    def read_u8(self, field: str) -> int:
        return self._unpack('>B', 1, field)

    def read_u16(self, field: str) -> int:
        return self._unpack('>H', 2, field)

    def read_u16le(self, field: str) -> int:
        return self._unpack('<H', 2, field)

    def read_i16(self, field: str) -> int:
        return self._unpack('>h', 2, field)

    def read_u32(self, field: str) -> int:
        return self._unpack('>I', 4, field)

    def read_u24(self, field: str) -> int:
        """Read a 24-bit unsigned big-endian integer"""
        raw = self.read_bytes(3, field)
        return (raw[0] << 16) | (raw[1] << 8) | raw[2]

    def read_i24(self, field: str) -> int:
        """Read a 24-bit two's-complement big-endian integer"""
        value = self.read_u24(field)
        if value & 0x800000:
            value -= 0x1000000
        return value

    def read_bytes(self, count: int, field: str) -> bytes:
        if count < 0 or count > self.remaining:
            raise FormatError(field, f"need {count} bytes at offset {self.offset}, "
                                     f"only {self.remaining} left")
        chunk = self.data[self.offset:self.offset + count]
        self.offset += count
        return chunk

    def read_rest(self) -> bytes:
        chunk = self.data[self.offset:]
        self.offset = len(self.data)
        return chunk
