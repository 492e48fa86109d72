"""
Arrangement data model

Arrangement files (arr01.work - arr08.work) hold two copies of a 256-row
arrangement: the current state and the last saved one. Each row is one of
four variants and always takes 22 bytes on disk.
"""

from dataclasses import dataclass, field
from typing import List, Union

ARRANGEMENT_HEADER = bytes([
    70, 79, 82, 77, 0, 0, 0, 0, 68, 80, 83, 49, 65, 82, 82, 65, 0, 0, 0, 0, 0, 6,
])
ARRANGEMENT_DEFAULT_NAME = b'OCTATOOLS-ARR  '
ARRANGEMENT_SIZE = 11336
N_ROWS = 256
ROW_SIZE = 22

MAX_REPETITIONS = 63
MAX_LOOP_COUNT = 100
MAX_SCENE_ID = 15
MAX_REMINDER_LEN = 15


@dataclass
class PatternRow:
    pattern_id: int = 0
    repetitions: int = 0
    mute_mask: int = 0
    tempo_1: int = 0
    tempo_2: int = 0
    scene_a: int = 0
    scene_b: int = 0
    offset: int = 0
    length: int = 0
    midi_transpose: List[int] = field(default_factory=lambda: [0] * 8)


@dataclass
class LoopOrJumpOrHaltRow:
    """Loops, jumps and halts all loop to a target row"""
    loop_count: int = 0
    row_target: int = 0


@dataclass
class ReminderRow:
    text: str = ""


@dataclass
class EmptyRow:
    pass


ArrangeRow = Union[PatternRow, LoopOrJumpOrHaltRow, ReminderRow, EmptyRow]


def _empty_rows() -> List[ArrangeRow]:
    return [EmptyRow() for _ in range(N_ROWS)]


@dataclass
class ArrangementBlock:
    name: bytes = ARRANGEMENT_DEFAULT_NAME
    unknown_1: bytes = bytes(2)
    n_rows: int = 0
    rows: List[ArrangeRow] = field(default_factory=_empty_rows)

    @property
    def name_str(self) -> str:
        return self.name.rstrip(b'\x00 ').decode('ascii', errors='replace')

    def active_rows(self) -> List[ArrangeRow]:
        return self.rows[:self.n_rows]

    def is_default(self) -> bool:
        # the device reuses names from other projects for new arrangements
        return (
            self.unknown_1 == bytes(2)
            and self.n_rows == 0
            and all(isinstance(r, EmptyRow) for r in self.rows)
        )


@dataclass
class Arrangement:
    header: bytes = ARRANGEMENT_HEADER
    unknown_1: bytes = bytes(2)
    current: ArrangementBlock = field(default_factory=ArrangementBlock)
    unknown_2: bytes = bytes(2)
    saved: ArrangementBlock = field(default_factory=ArrangementBlock)
    active_flags: bytes = bytes(8)
    checksum: bytes = bytes(2)

    def check_header(self) -> bool:
        return self.header == ARRANGEMENT_HEADER

    def is_default(self) -> bool:
        return (
            self.current.is_default()
            and self.saved.is_default()
            and self.unknown_1 == bytes(2)
            and self.unknown_2 == bytes(2)
        )


__all__ = [
    'ARRANGEMENT_HEADER',
    'ARRANGEMENT_SIZE',
    'N_ROWS',
    'ROW_SIZE',
    'PatternRow',
    'LoopOrJumpOrHaltRow',
    'ReminderRow',
    'EmptyRow',
    'ArrangeRow',
    'ArrangementBlock',
    'Arrangement',
]
