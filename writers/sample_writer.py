"""
SampleAttributes → .ot file writer

Big-endian fields, checksum recomputed on every write.
"""

import logging
import struct
from pathlib import Path

from core.errors import FormatError
from core.sample_attributes import SampleAttributes, SAMPLE_ATTRIBUTES_SIZE, MAX_SLICES
from parsers.sample_parser import sample_attributes_checksum
from .binary import put, put_u8, check_count

logger = logging.getLogger(__name__)


class SampleAttributesWriter:
    """Write .ot sample attribute files"""

    def encode(self, attributes: SampleAttributes) -> bytes:
        data = bytearray()
        put(data, attributes.header, 16, "sample attributes header")
        put(data, attributes.blank, 7, "sample attributes blank bytes")

        try:
            data.extend(struct.pack(
                '>5I',
                attributes.tempo,
                attributes.trim_len,
                attributes.loop_len,
                int(attributes.stretch),
                int(attributes.loop_mode),
            ))
            data.extend(struct.pack('>H', attributes.gain))
            put_u8(data, int(attributes.quantization), "trig quantization")
            data.extend(struct.pack(
                '>3I', attributes.trim_start, attributes.trim_end, attributes.loop_start,
            ))

            check_count(attributes.slices, MAX_SLICES, "slices")
            for s in attributes.slices:
                data.extend(struct.pack('>3I', s.trim_start, s.trim_end, s.loop_start))

            if attributes.slices_len > MAX_SLICES:
                raise FormatError(f"slice count {attributes.slices_len} exceeds {MAX_SLICES}")
            data.extend(struct.pack('>I', attributes.slices_len))
        except struct.error as e:
            raise FormatError(f"sample attribute value out of range: {e}") from e

        # checksum placeholder
        data.extend(b'\x00\x00')
        checksum = sample_attributes_checksum(data)
        struct.pack_into('>H', data, len(data) - 2, checksum)

        if len(data) != SAMPLE_ATTRIBUTES_SIZE:
            raise FormatError(f"encoded sample attributes are {len(data)} bytes, expected {SAMPLE_ATTRIBUTES_SIZE}")
        return bytes(data)

    def write(self, attributes: SampleAttributes, filepath):
        data = self.encode(attributes)
        Path(filepath).write_bytes(data)
        logger.debug(f"Written {len(data):,} bytes to {filepath}")


def encode_sample_attributes(attributes: SampleAttributes) -> bytes:
    return SampleAttributesWriter().encode(attributes)


def write_sample_attributes_file(attributes: SampleAttributes, filepath):
    """Convenience function to write a .ot file"""
    writer = SampleAttributesWriter()
    writer.write(attributes, filepath)


__all__ = [
    "SampleAttributesWriter",
    "encode_sample_attributes",
    "write_sample_attributes_file",
]
