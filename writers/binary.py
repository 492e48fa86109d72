"""
Helpers for building fixed-layout binary records
"""

from core.errors import FormatError


def put(data: bytearray, value: bytes, size: int, what: str):
    """Append a fixed-length field, refusing anything of the wrong length"""
    if len(value) != size:
        raise FormatError(f"{what} must be {size} bytes, got {len(value)}")
    data.extend(value)


def put_u8(data: bytearray, value: int, what: str):
    if not 0 <= value <= 255:
        raise FormatError(f"{what} out of range for a byte: {value}")
    data.append(value)


def check_count(items, count: int, what: str):
    if len(items) != count:
        raise FormatError(f"{what} must have {count} entries, got {len(items)}")


__all__ = ['put', 'put_u8', 'check_count']
