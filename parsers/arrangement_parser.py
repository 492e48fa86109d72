"""
Arrangement file parser (arr01.work - arr08.work)
"""

import logging
from pathlib import Path

from core.arrangement import (
    Arrangement, ArrangementBlock, PatternRow, LoopOrJumpOrHaltRow, ReminderRow, EmptyRow,
    ARRANGEMENT_SIZE, N_ROWS, ROW_SIZE, MAX_REPETITIONS, MAX_LOOP_COUNT, MAX_REMINDER_LEN,
)
from core.errors import FormatError
from .binary import ByteReader, check_size

logger = logging.getLogger(__name__)

ROW_PATTERN = 0
ROW_LOOP = 1
ROW_REMINDER = 2


def decode_reminder(raw: bytes) -> str:
    """Printable ASCII up to the first non printable byte, upper-cased"""
    chars = []
    for b in raw[:MAX_REMINDER_LEN]:
        if b < 32 or b > 126:
            break
        chars.append(chr(b))
    return ''.join(chars).upper()


class ArrangementParser:
    """Parse Octatrack arrangement files"""

    def parse(self, data: bytes) -> Arrangement:
        check_size(data, ARRANGEMENT_SIZE, "arrangement")
        reader = ByteReader(data, "arrangement")

        header = reader.take(22)
        if header[8:16] != b'DPS1ARRA':
            raise FormatError(f"not an arrangement file (header {header[:16]!r})")

        arrangement = Arrangement(
            header=header,
            unknown_1=reader.take(2),
            current=self._read_block(reader),
            unknown_2=reader.take(2),
            saved=self._read_block(reader),
            active_flags=reader.take(8),
            checksum=reader.take(2),
        )
        reader.finish()
        return arrangement

    def parse_file(self, filepath) -> Arrangement:
        path = Path(filepath)
        logger.debug(f"Reading arrangement: {path}")
        try:
            return self.parse(path.read_bytes())
        except FormatError as e:
            raise FormatError(str(e), str(path)) from e

    def _read_block(self, reader: ByteReader) -> ArrangementBlock:
        name = reader.take(15)
        unknown_1 = reader.take(2)
        n_rows = reader.u8()
        rows = []
        for index in range(N_ROWS):
            raw = reader.take(ROW_SIZE)
            if index >= n_rows:
                rows.append(EmptyRow())
            else:
                rows.append(self._decode_row(raw, index))

        first_empty = next((i for i, r in enumerate(rows) if isinstance(r, EmptyRow)), None)
        if first_empty is not None and first_empty != n_rows:
            raise FormatError(f"first empty row is {first_empty}, but block declares {n_rows} rows")

        return ArrangementBlock(name=name, unknown_1=unknown_1, n_rows=n_rows, rows=rows)

    def _decode_row(self, raw: bytes, index: int):
        row_type, data = raw[0], raw[1:]

        if row_type == ROW_PATTERN:
            repetitions = data[1]
            if repetitions > MAX_REPETITIONS:
                raise FormatError(f"row {index}: too many repetitions ({repetitions} > {MAX_REPETITIONS})")
            return PatternRow(
                pattern_id=data[0],
                repetitions=repetitions,
                mute_mask=data[3],
                tempo_1=data[5],
                tempo_2=data[6],
                scene_a=data[7],
                scene_b=data[8],
                offset=data[10],
                length=data[12],
                midi_transpose=list(data[13:21]),
            )

        if row_type == ROW_LOOP:
            loop_count = data[0]
            if loop_count > MAX_LOOP_COUNT:
                raise FormatError(f"row {index}: loop count {loop_count} exceeds {MAX_LOOP_COUNT}")
            return LoopOrJumpOrHaltRow(loop_count=loop_count, row_target=data[1])

        if row_type == ROW_REMINDER:
            return ReminderRow(text=decode_reminder(data))

        raise FormatError(f"row {index}: invalid row type {row_type}")


def parse_arrangement_file(filepath) -> Arrangement:
    """Convenience function to parse an arrangement file"""
    parser = ArrangementParser()
    return parser.parse_file(filepath)


__all__ = ["ArrangementParser", "parse_arrangement_file", "decode_reminder"]
