"""
Sample slot reference scanning

Finds every place a bank points at a project sample slot: the static and
flex slot overrides of each pattern parameter lock, and the static and flex
machine slot assignments of each part's audio tracks.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List, Set, Tuple

from core.bank import Bank, Part, Pattern
from core.options import SlotType
from core.slots import MAX_SLOT_ID, SampleSlot

logger = logging.getLogger(__name__)

SLOT_FIELDS = (
    (SlotType.STATIC, 'static_slot_id'),
    (SlotType.FLEX, 'flex_slot_id'),
)

# listing order of slot types
TYPE_ORDER = {SlotType.STATIC: 0, SlotType.FLEX: 1, SlotType.RECORDER: 2}


class ReferenceKind(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class SlotReference:
    """A (type, id) pair referenced from bank data. kind is not part of identity."""
    sample_type: SlotType
    slot_id: int
    kind: ReferenceKind = field(default=ReferenceKind.ACTIVE, compare=False)

    @property
    def key(self) -> tuple:
        return (self.sample_type, self.slot_id)

    @property
    def is_active(self) -> bool:
        return self.kind == ReferenceKind.ACTIVE


def _classify(sample_type: SlotType, slot_id: int, existing: Set[tuple]) -> SlotReference:
    kind = ReferenceKind.ACTIVE if (sample_type, slot_id) in existing else ReferenceKind.INACTIVE
    return SlotReference(sample_type, slot_id, kind)


def pattern_slot_fields(patterns: Iterable[Pattern]) -> Iterator[Tuple[object, str, SlotType]]:
    """(plock, attribute name, slot type) for every slot field of every parameter lock"""
    for pattern in patterns:
        for track in pattern.audio_tracks:
            for plock in track.plocks:
                for sample_type, attribute in SLOT_FIELDS:
                    yield plock, attribute, sample_type


def part_slot_fields(parts: Iterable[Part]) -> Iterator[Tuple[object, str, SlotType]]:
    """(machine slot, attribute name, slot type) for every audio track of every part"""
    for part in parts:
        for machine_slot in part.machine_slots:
            for sample_type, attribute in SLOT_FIELDS:
                yield machine_slot, attribute, sample_type


def bank_slot_fields(bank: Bank) -> Iterator[Tuple[object, str, SlotType]]:
    """Every live slot field of a bank: pattern plocks plus the unsaved parts"""
    yield from pattern_slot_fields(bank.patterns)
    yield from part_slot_fields(bank.parts_unsaved)


def scan_patterns(slots: Iterable[SampleSlot], patterns: Iterable[Pattern]) -> Set[SlotReference]:
    """References from parameter locks, skipping unset locks (id above 127)"""
    existing = {slot.key for slot in slots}
    refs = set()
    for plock, attribute, sample_type in pattern_slot_fields(patterns):
        slot_id = getattr(plock, attribute)
        if slot_id > MAX_SLOT_ID:
            continue
        refs.add(_classify(sample_type, slot_id, existing))
    return refs


def scan_parts(slots: Iterable[SampleSlot], parts: Iterable[Part]) -> Set[SlotReference]:
    """References from machine slot assignments. Default assignments count too."""
    existing = {slot.key for slot in slots}
    refs = set()
    for machine_slot, attribute, sample_type in part_slot_fields(parts):
        refs.add(_classify(sample_type, getattr(machine_slot, attribute), existing))
    return refs


def scan_bank(slots: Iterable[SampleSlot], bank: Bank) -> Set[SlotReference]:
    """
    All slot references of a bank

    Args:
        slots: Project slots, zero-indexed
        bank: Bank to scan. Saved parts are not live and are ignored.

    Returns:
        Set of references keyed by (type, id)
    """
    slots = list(slots)
    refs = scan_patterns(slots, bank.patterns) | scan_parts(slots, bank.parts_unsaved)
    logger.debug(
        "Scanned bank: %d references (%d active)",
        len(refs), sum(1 for r in refs if r.is_active),
    )
    return refs


def sorted_references(refs: Iterable[SlotReference]) -> List[SlotReference]:
    """Stable listing order: static before flex, then by id"""
    return sorted(refs, key=lambda r: (TYPE_ORDER[r.sample_type], r.slot_id))


__all__ = [
    'ReferenceKind',
    'SlotReference',
    'SLOT_FIELDS',
    'TYPE_ORDER',
    'pattern_slot_fields',
    'part_slot_fields',
    'bank_slot_fields',
    'scan_patterns',
    'scan_parts',
    'scan_bank',
    'sorted_references',
]
