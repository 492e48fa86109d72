"""
Sample slot deduplication

Collapses slots that differ only by id into one canonical slot (the lowest
id) and points bank references at the survivor.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from core.bank import Bank
from core.options import SlotType
from core.slots import SampleSlot, dedup_key
from .scanner import bank_slot_fields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotReassignment:
    sample_type: SlotType
    old_id: int
    new_id: int


def dedup_slots(slots: Iterable[SampleSlot]) -> Tuple[List[SampleSlot], List[SlotReassignment]]:
    """
    Remove duplicate slots

    Args:
        slots: Slot list, any indexing (ids are only compared)

    Returns:
        (deduplicated slots in their original order, reassignments for the
        dropped slots). Recorder buffers are never merged.
    """
    slots = list(slots)
    canonical: Dict[tuple, SampleSlot] = {}
    for slot in sorted(slots, key=lambda s: s.slot_id):
        if slot.is_recorder():
            continue
        canonical.setdefault(dedup_key(slot), slot)

    kept = []
    reassignments = []
    for slot in slots:
        if slot.is_recorder():
            kept.append(slot)
            continue
        survivor = canonical[dedup_key(slot)]
        if survivor is slot:
            kept.append(slot)
        else:
            reassignments.append(SlotReassignment(slot.sample_type, slot.slot_id, survivor.slot_id))

    if reassignments:
        logger.info(f"Merged {len(reassignments)} duplicate sample slot(s)")
    return kept, reassignments


def rewrite_slot_ids(bank: Bank, mapping: Dict[tuple, int]) -> int:
    """
    Rewrite bank slot fields in place

    Each field is looked up once against its original value, so a field that
    has been rewritten is never rewritten again.

    Args:
        bank: Bank to modify
        mapping: {(slot type, old id): new id}

    Returns:
        Number of fields changed
    """
    changed = 0
    for record, attribute, sample_type in bank_slot_fields(bank):
        new_id = mapping.get((sample_type, getattr(record, attribute)))
        if new_id is not None:
            setattr(record, attribute, new_id)
            changed += 1
    return changed


def apply_reassignments(reassignments: Iterable[SlotReassignment], bank: Bank) -> int:
    mapping = {(r.sample_type, r.old_id): r.new_id for r in reassignments}
    if not mapping:
        return 0
    changed = rewrite_slot_ids(bank, mapping)
    logger.debug(f"Reassigned {changed} bank slot field(s)")
    return changed


__all__ = ['SlotReassignment', 'dedup_slots', 'rewrite_slot_ids', 'apply_reassignments']
