"""
Sequential reader over fixed-layout binary records
"""

import struct

from core.errors import FormatError


class ByteReader:
    """Read fields in order from a bytes buffer, tracking the offset"""

    def __init__(self, data: bytes, record: str = "record"):
        self.data = bytes(data)
        self.offset = 0
        self.record = record

    def take(self, n: int) -> bytes:
        end = self.offset + n
        if end > len(self.data):
            raise FormatError(
                f"{self.record} truncated: wanted {n} bytes at offset {self.offset}, "
                f"only {len(self.data) - self.offset} left"
            )
        chunk = self.data[self.offset:end]
        self.offset = end
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def unpack(self, fmt: str):
        return struct.unpack(fmt, self.take(struct.calcsize(fmt)))

    def expect(self, magic: bytes, what: str) -> bytes:
        chunk = self.take(len(magic))
        if chunk != magic:
            raise FormatError(f"bad {what} header at offset {self.offset - len(magic)}: {chunk!r}")
        return chunk

    def remaining(self) -> int:
        return len(self.data) - self.offset

    def finish(self):
        if self.remaining():
            raise FormatError(f"{self.record} has {self.remaining()} unexpected trailing bytes")


def check_size(data: bytes, expected: int, record: str):
    if len(data) != expected:
        raise FormatError(f"{record} must be {expected:,} bytes, got {len(data):,}")


__all__ = ['ByteReader', 'check_size']
