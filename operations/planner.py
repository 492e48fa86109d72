"""
Bank copy planning

Works out how the sample slots a source bank uses map onto a destination
project: which references can point at an equivalent slot that already
exists, which need a new slot (and a file copy), and where references to
slots that never existed should go.

Everything here runs in memory on zero-indexed slot ids. The caller gets
back one-indexed slots ready to be written.
"""

import copy
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path, PureWindowsPath
from typing import Dict, List

from core.bank import Bank
from core.errors import InsufficientFreeSlots, MissingSourceAudioFile
from core.options import SlotType
from core.project import Project
from core.slots import (
    SampleSlot,
    to_zero_indexed,
    to_one_indexed,
    free_slot_ids,
    find_last_empty_slot,
    find_settings_match,
)
from .dedup import dedup_slots, apply_reassignments, rewrite_slot_ids
from .scanner import SlotReference, ReferenceKind, scan_bank, sorted_references

logger = logging.getLogger(__name__)

ALLOCATED_TYPES = (SlotType.STATIC, SlotType.FLEX)


class OperationKind(Enum):
    REUSE_SLOT = "reuse"
    NEW_SLOT = "new"


@dataclass
class SampleSlotOperation:
    """Rewrite of one source slot reference to a destination slot (zero-indexed)"""
    src_slot: SampleSlot
    dest_slot: SampleSlot
    op_kind: OperationKind
    reference_kind: ReferenceKind = ReferenceKind.ACTIVE

    @property
    def key(self) -> tuple:
        return self.src_slot.key


@dataclass
class FileTransfer:
    """
    Audio file to copy, plus its .ot sidecar if there is one

    Paths are relative to the source and destination project directories.
    """
    src_audio: Path
    dest_audio: Path

    @property
    def src_attributes(self) -> Path:
        return self.src_audio.with_suffix('.ot')

    @property
    def dest_attributes(self) -> Path:
        return self.dest_audio.with_suffix('.ot')


@dataclass
class TransplantPlan:
    new_dest_slots: List[SampleSlot]
    new_dest_bank: Bank
    transfers: List[FileTransfer] = field(default_factory=list)
    operations: List[SampleSlotOperation] = field(default_factory=list)

    def new_slots(self) -> List[SampleSlotOperation]:
        return [op for op in self.operations if op.op_kind == OperationKind.NEW_SLOT]

    def apply_to(self, project: Project) -> Project:
        """Destination project with the planned slot list"""
        return replace(project, slots=list(self.new_dest_slots))


def file_name(path: str) -> str:
    """Last component of a slot path, whichever separator the device used"""
    return PureWindowsPath(path).name


def slot_audio_path(slot: SampleSlot) -> Path:
    """Slot path as stored in the project, relative to the project directory"""
    return Path(slot.path.replace('\\', '/'))


def source_audio_path(project_dir, slot: SampleSlot) -> Path:
    return Path(project_dir) / slot_audio_path(slot)


def find_missing_source_audio(src_project_dir, src_project: Project, src_bank: Bank) -> List[Path]:
    """Audio files of active slots used by the bank that are not on disk"""
    slots = to_zero_indexed(src_project.slots)
    by_key = {slot.key: slot for slot in slots}
    missing = []
    for ref in sorted_references(scan_bank(slots, src_bank)):
        if not ref.is_active:
            continue
        path = source_audio_path(src_project_dir, by_key[ref.key])
        if not path.is_file():
            missing.append(path)
    return missing


def _descending(operations: List[SampleSlotOperation]) -> List[SampleSlotOperation]:
    return sorted(operations, key=lambda op: op.src_slot.slot_id, reverse=True)


def order_operations(operations: List[SampleSlotOperation]) -> List[SampleSlotOperation]:
    """
    Rewrite order: inactive remaps, then reuses, then new slots, each pass
    from the highest source id down
    """
    inactive = [op for op in operations if op.reference_kind == ReferenceKind.INACTIVE]
    reuse = [op for op in operations
             if op.reference_kind == ReferenceKind.ACTIVE and op.op_kind == OperationKind.REUSE_SLOT]
    insert = [op for op in operations if op.op_kind == OperationKind.NEW_SLOT]
    return _descending(inactive) + _descending(reuse) + _descending(insert)


def apply_slot_operations(operations: List[SampleSlotOperation], bank: Bank) -> int:
    """
    Point bank references at their destination slots, in place

    Operations are applied in the order given. The first operation for a
    source slot wins, and every field is rewritten at most once.
    """
    mapping: Dict[tuple, int] = {}
    for op in operations:
        mapping.setdefault(op.key, op.dest_slot.slot_id)
    return rewrite_slot_ids(bank, mapping)


def plan_bank_copy(src_project_dir, src_project: Project, src_bank: Bank,
                   dest_project: Project) -> TransplantPlan:
    """
    Plan copying a bank into another project

    Args:
        src_project_dir: Directory of the source project, for audio paths
        src_project: Source project (one-indexed slots, as parsed)
        src_bank: Bank to copy. Not modified.
        dest_project: Destination project (one-indexed slots, as parsed)

    Returns:
        TransplantPlan with one-indexed destination slots, the rewritten bank
        and the files that need copying

    Raises:
        MissingSourceAudioFile: An active slot's audio file is not on disk
        InsufficientFreeSlots: Destination cannot hold the new slots
    """
    missing = find_missing_source_audio(src_project_dir, src_project, src_bank)
    if missing:
        raise MissingSourceAudioFile(missing)

    src_slots, reassignments = dedup_slots(to_zero_indexed(src_project.slots))
    bank = copy.deepcopy(src_bank)
    apply_reassignments(reassignments, bank)
    dest_slots = to_zero_indexed(dest_project.slots)

    # one always-empty id per type receives references to slots that never existed
    sinks = {t: find_last_empty_slot(dest_slots, t) for t in ALLOCATED_TYPES}
    pools = {
        t: [i for i in free_slot_ids(dest_slots, t) if i != sinks[t]]
        for t in ALLOCATED_TYPES
    }
    logger.debug(
        "Destination sinks: static=%d flex=%d, free: static=%d flex=%d",
        sinks[SlotType.STATIC], sinks[SlotType.FLEX],
        len(pools[SlotType.STATIC]), len(pools[SlotType.FLEX]),
    )

    by_key = {slot.key: slot for slot in src_slots}
    inactive: List[SlotReference] = []
    reuse = []
    insert = {t: [] for t in ALLOCATED_TYPES}
    for ref in scan_bank(src_slots, bank):
        if not ref.is_active:
            inactive.append(ref)
            continue
        src_slot = by_key[ref.key]
        candidates = [d for d in dest_slots if d.sample_type == src_slot.sample_type]
        match = find_settings_match(src_slot, candidates)
        if match is not None:
            reuse.append((src_slot, match))
        else:
            insert[src_slot.sample_type].append(src_slot)

    for sample_type in ALLOCATED_TYPES:
        required = len(insert[sample_type])
        available = len(pools[sample_type])
        if required > available:
            raise InsufficientFreeSlots(sample_type, required, available)

    operations = []
    for ref in inactive:
        operations.append(SampleSlotOperation(
            src_slot=SampleSlot(sample_type=ref.sample_type, slot_id=ref.slot_id),
            dest_slot=SampleSlot(sample_type=ref.sample_type, slot_id=sinks[ref.sample_type]),
            op_kind=OperationKind.REUSE_SLOT,
            reference_kind=ReferenceKind.INACTIVE,
        ))
    for src_slot, match in reuse:
        operations.append(SampleSlotOperation(src_slot, match, OperationKind.REUSE_SLOT))
    for sample_type in ALLOCATED_TYPES:
        for src_slot in sorted(insert[sample_type], key=lambda s: s.slot_id, reverse=True):
            new_slot = replace(src_slot, slot_id=pools[sample_type].pop(), path=file_name(src_slot.path))
            operations.append(SampleSlotOperation(src_slot, new_slot, OperationKind.NEW_SLOT))

    operations = order_operations(operations)
    changed = apply_slot_operations(operations, bank)

    inserted = [op for op in operations if op.op_kind == OperationKind.NEW_SLOT]
    new_dest_slots = dest_slots + [
        op.dest_slot for sample_type in ALLOCATED_TYPES
        for op in inserted if op.dest_slot.sample_type == sample_type
    ]
    transfers = [
        FileTransfer(
            src_audio=slot_audio_path(op.src_slot),
            dest_audio=Path(op.dest_slot.path),
        )
        for op in inserted
    ]

    logger.info(
        "Planned bank copy: %d new slot(s), %d reused, %d inactive remapped, %d field(s) rewritten",
        len(inserted), len(reuse), len(inactive), changed,
    )
    return TransplantPlan(
        new_dest_slots=to_one_indexed(new_dest_slots),
        new_dest_bank=bank,
        transfers=transfers,
        operations=operations,
    )


__all__ = [
    'OperationKind',
    'SampleSlotOperation',
    'FileTransfer',
    'TransplantPlan',
    'file_name',
    'slot_audio_path',
    'source_audio_path',
    'find_missing_source_audio',
    'order_operations',
    'apply_slot_operations',
    'plan_bank_copy',
]
