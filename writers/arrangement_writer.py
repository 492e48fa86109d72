"""
Arrangement → arrangement file writer
"""

import logging
from pathlib import Path

from core.arrangement import (
    Arrangement, ArrangementBlock, PatternRow, LoopOrJumpOrHaltRow, ReminderRow, EmptyRow,
    ARRANGEMENT_SIZE, N_ROWS, ROW_SIZE, MAX_REPETITIONS, MAX_LOOP_COUNT, MAX_SCENE_ID,
    MAX_REMINDER_LEN,
)
from core.errors import FormatError
from .binary import put, put_u8, check_count

logger = logging.getLogger(__name__)

NO_SCENE = 255


class ArrangementWriter:
    """Write Octatrack arrangement files"""

    def encode(self, arrangement: Arrangement) -> bytes:
        data = bytearray()
        put(data, arrangement.header, 22, "arrangement header")
        put(data, arrangement.unknown_1, 2, "arrangement unknown_1")
        self._write_block(data, arrangement.current, "current")
        put(data, arrangement.unknown_2, 2, "arrangement unknown_2")
        self._write_block(data, arrangement.saved, "saved")
        put(data, arrangement.active_flags, 8, "arrangement active flags")
        put(data, arrangement.checksum, 2, "arrangement checksum")

        if len(data) != ARRANGEMENT_SIZE:
            raise FormatError(f"encoded arrangement is {len(data)} bytes, expected {ARRANGEMENT_SIZE}")
        return bytes(data)

    def write(self, arrangement: Arrangement, filepath):
        data = self.encode(arrangement)
        Path(filepath).write_bytes(data)
        logger.debug(f"Written {len(data):,} bytes to {filepath}")

    def _write_block(self, data: bytearray, block: ArrangementBlock, which: str):
        check_count(block.rows, N_ROWS, f"{which} arrangement rows")

        first_empty = next((i for i, r in enumerate(block.rows) if isinstance(r, EmptyRow)), None)
        if first_empty is None:
            # n_rows is a single byte; a full arrangement cannot be stored
            raise FormatError(f"{which} arrangement has no empty row, at most {N_ROWS - 1} rows can be stored")
        if first_empty != block.n_rows:
            raise FormatError(
                f"{which} arrangement: first empty row is {first_empty}, but n_rows is {block.n_rows}"
            )
        trailing = [i for i, r in enumerate(block.rows[first_empty:], first_empty) if not isinstance(r, EmptyRow)]
        if trailing:
            raise FormatError(f"{which} arrangement has rows after the first empty row: {trailing[:5]}")

        put(data, block.name, 15, "arrangement name")
        put(data, block.unknown_1, 2, "arrangement block unknown_1")
        put_u8(data, block.n_rows, "arrangement row count")
        for index, row in enumerate(block.rows):
            encoded = self._encode_row(row, index)
            put(data, encoded, ROW_SIZE, f"row {index}")

    def _encode_row(self, row, index: int) -> bytes:
        if isinstance(row, PatternRow):
            if row.repetitions > MAX_REPETITIONS:
                raise FormatError(f"row {index}: repetitions cannot exceed {MAX_REPETITIONS}")
            for name in ('scene_a', 'scene_b'):
                scene = getattr(row, name)
                if scene != NO_SCENE and scene > MAX_SCENE_ID:
                    raise FormatError(f"row {index}: {name} cannot exceed {MAX_SCENE_ID}")
            check_count(row.midi_transpose, 8, f"row {index} MIDI transposes")
            out = bytearray()
            for value, what in [
                (0, "row type"),
                (row.pattern_id, "pattern id"),
                (row.repetitions, "repetitions"),
                (0, "unused"),
                (row.mute_mask, "mute mask"),
                (0, "unused"),
                (row.tempo_1, "tempo_1"),
                (row.tempo_2, "tempo_2"),
                (row.scene_a, "scene_a"),
                (row.scene_b, "scene_b"),
                (0, "unused"),
                (row.offset, "offset"),
                (0, "unused"),
                (row.length, "length"),
            ]:
                put_u8(out, value, f"row {index} {what}")
            for value in row.midi_transpose:
                put_u8(out, value, f"row {index} MIDI transpose")
            return bytes(out)

        if isinstance(row, LoopOrJumpOrHaltRow):
            if row.loop_count > MAX_LOOP_COUNT:
                raise FormatError(f"row {index}: loop count cannot exceed {MAX_LOOP_COUNT}")
            out = bytearray([1])
            put_u8(out, row.loop_count, f"row {index} loop count")
            put_u8(out, row.row_target, f"row {index} row target")
            return bytes(out) + bytes(19)

        if isinstance(row, ReminderRow):
            text = row.text
            if len(text) > MAX_REMINDER_LEN:
                raise FormatError(f"row {index}: reminder longer than {MAX_REMINDER_LEN} characters: {text!r}")
            if any(not 32 <= ord(c) <= 126 for c in text):
                raise FormatError(f"row {index}: reminder must be printable ASCII: {text!r}")
            raw = text.encode('ascii')
            return bytes([2]) + raw + bytes(MAX_REMINDER_LEN - len(raw)) + bytes(6)

        if isinstance(row, EmptyRow):
            return bytes(ROW_SIZE)

        raise FormatError(f"row {index}: unknown row type {type(row).__name__}")


def encode_arrangement(arrangement: Arrangement) -> bytes:
    return ArrangementWriter().encode(arrangement)


def write_arrangement_file(arrangement: Arrangement, filepath):
    """Convenience function to write an arrangement file"""
    writer = ArrangementWriter()
    writer.write(arrangement, filepath)


__all__ = ["ArrangementWriter", "encode_arrangement", "write_arrangement_file"]
