"""
Project sample slots

A project maps slot ids to audio files plus their playback settings.
Slot ids are 1-indexed on disk; everything inside the slot reconciliation
code works zero-indexed and converts only at the file boundary.
"""

from dataclasses import dataclass, replace
from typing import Iterable, List

from .errors import InsufficientFreeSlots
from .options import SlotType, TimestretchMode, LoopMode, TrigQuantization

# sentinel for "no slot assigned" in parameter locks
NO_SLOT = 255

# static / flex slots, zero-indexed
MAX_SLOT_ID = 127
# recorder buffers, zero-indexed (129-136 on disk)
RECORDER_SLOT_IDS = range(128, 136)


@dataclass
class SampleSlot:
    """One sample slot entry from a project file"""
    sample_type: SlotType
    slot_id: int
    path: str = ""
    trim_bars_x100: int = 0
    timestretch_mode: TimestretchMode = TimestretchMode.NORMAL
    loop_mode: LoopMode = LoopMode.OFF
    trig_quantization: TrigQuantization = TrigQuantization.DIRECT
    gain: int = 24  # relative, 48 is added on disk
    bpm: int = 120

    @property
    def key(self) -> tuple:
        """Allocation identity"""
        return (self.sample_type, self.slot_id)

    def is_recorder(self) -> bool:
        return self.sample_type == SlotType.RECORDER

    def with_id(self, slot_id: int) -> 'SampleSlot':
        return replace(self, slot_id=slot_id)


def dedup_key(slot: SampleSlot) -> tuple:
    """Every field except slot_id"""
    return (
        slot.sample_type,
        slot.path,
        slot.trim_bars_x100,
        slot.trig_quantization,
        slot.timestretch_mode,
        slot.loop_mode,
        slot.gain,
        slot.bpm,
    )


def equal_for_dedup(a: SampleSlot, b: SampleSlot) -> bool:
    return dedup_key(a) == dedup_key(b)


def to_zero_indexed(slots: Iterable[SampleSlot]) -> List[SampleSlot]:
    return [slot.with_id(slot.slot_id - 1) for slot in slots]


def to_one_indexed(slots: Iterable[SampleSlot]) -> List[SampleSlot]:
    return [slot.with_id(slot.slot_id + 1) for slot in slots]


def slot_ids(slots: Iterable[SampleSlot], sample_type: SlotType) -> List[int]:
    return [slot.slot_id for slot in slots if slot.sample_type == sample_type]


def free_slot_ids(slots: Iterable[SampleSlot], sample_type: SlotType) -> List[int]:
    """
    Unused ids 0-126 for a slot type, as a pool.

    The list is ascending, so ``pool.pop()`` hands out the highest
    remaining id first.
    """
    used = set(slot_ids(slots, sample_type))
    return [i for i in range(MAX_SLOT_ID) if i not in used]


def find_last_empty_slot(slots: Iterable[SampleSlot], sample_type: SlotType) -> int:
    """Greatest unused zero-indexed id for a slot type"""
    used = set(slot_ids(slots, sample_type))
    for slot_id in reversed(range(MAX_SLOT_ID + 1)):
        if slot_id not in used:
            return slot_id
    raise InsufficientFreeSlots(sample_type, 1, 0)


def find_settings_match(candidate: SampleSlot, slots: Iterable[SampleSlot]):
    """First slot (by ascending id) with the same settings as candidate, or None"""
    matches = [s for s in slots if equal_for_dedup(s, candidate)]
    if not matches:
        return None
    return min(matches, key=lambda s: s.slot_id)


def default_recorder_slots() -> List[SampleSlot]:
    """Recorder buffer slots of a fresh project, 1-indexed"""
    return [
        SampleSlot(sample_type=SlotType.RECORDER, slot_id=slot_id + 1)
        for slot_id in RECORDER_SLOT_IDS
    ]


__all__ = [
    'NO_SLOT',
    'MAX_SLOT_ID',
    'RECORDER_SLOT_IDS',
    'SampleSlot',
    'dedup_key',
    'equal_for_dedup',
    'to_zero_indexed',
    'to_one_indexed',
    'slot_ids',
    'free_slot_ids',
    'find_last_empty_slot',
    'find_settings_match',
    'default_recorder_slots',
]
