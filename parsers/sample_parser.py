"""
Sample attributes parser (.ot files)

All multi-byte fields are big-endian on disk.
"""

import logging
from pathlib import Path

from core.errors import FormatError
from core.options import TimestretchMode, LoopMode, TrigQuantization
from core.sample_attributes import (
    SampleAttributes, Slice, SAMPLE_ATTRIBUTES_HEADER, SAMPLE_ATTRIBUTES_SIZE, MAX_SLICES,
)
from .binary import ByteReader, check_size

logger = logging.getLogger(__name__)


def sample_attributes_checksum(data: bytes) -> int:
    """Sum of every byte between the header and the checksum, wrapped to 16 bits"""
    return sum(data[16:-2]) % 0x10000


class SampleAttributesParser:
    """Parse .ot sample attribute files"""

    def parse(self, data: bytes) -> SampleAttributes:
        check_size(data, SAMPLE_ATTRIBUTES_SIZE, "sample attributes")
        reader = ByteReader(data, "sample attributes")

        header = reader.expect(SAMPLE_ATTRIBUTES_HEADER, "sample attributes")
        blank = reader.take(7)
        tempo, trim_len, loop_len, stretch, loop_mode = reader.unpack('>5I')
        (gain,) = reader.unpack('>H')
        quantization = reader.u8()
        trim_start, trim_end, loop_start = reader.unpack('>3I')
        slices = [Slice(*reader.unpack('>3I')) for _ in range(MAX_SLICES)]
        (slices_len,) = reader.unpack('>I')
        (checksum,) = reader.unpack('>H')
        reader.finish()

        try:
            attributes = SampleAttributes(
                tempo=tempo,
                trim_len=trim_len,
                loop_len=loop_len,
                stretch=TimestretchMode(stretch),
                loop_mode=LoopMode(loop_mode),
                gain=gain,
                quantization=TrigQuantization(quantization),
                trim_start=trim_start,
                trim_end=trim_end,
                loop_start=loop_start,
                slices=slices,
                slices_len=slices_len,
                header=header,
                blank=blank,
                checksum=checksum,
            )
        except ValueError as e:
            raise FormatError(f"invalid sample attribute option: {e}") from e

        if slices_len > MAX_SLICES:
            raise FormatError(f"slice count {slices_len} exceeds {MAX_SLICES}")

        expected = sample_attributes_checksum(data)
        if checksum != expected:
            logger.warning("Sample attributes checksum mismatch: stored=%d computed=%d", checksum, expected)

        return attributes

    def parse_file(self, filepath) -> SampleAttributes:
        path = Path(filepath)
        logger.debug(f"Reading sample attributes: {path}")
        try:
            return self.parse(path.read_bytes())
        except FormatError as e:
            raise FormatError(str(e), str(path)) from e


def parse_sample_attributes_file(filepath) -> SampleAttributes:
    """Convenience function to parse a .ot file"""
    parser = SampleAttributesParser()
    return parser.parse_file(filepath)


__all__ = [
    "SampleAttributesParser",
    "parse_sample_attributes_file",
    "sample_attributes_checksum",
]
