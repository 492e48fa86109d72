"""
Read-only views of project slots and bank references
"""

import logging
from typing import List

from core.slots import SampleSlot, to_zero_indexed
from parsers.bank_parser import parse_bank_file
from .scanner import TYPE_ORDER, SlotReference, scan_bank, sorted_references
from .transplant import bank_file, load_project

logger = logging.getLogger(__name__)


def list_project_slots(project_dir) -> List[SampleSlot]:
    """Project slots (one-indexed) sorted by type, then id"""
    project = load_project(project_dir, check_version=False)
    return sorted(project.slots, key=lambda s: (TYPE_ORDER[s.sample_type], s.slot_id))


def list_bank_references(project_dir, bank_id: int, exclude_inactive: bool = False) -> List[SlotReference]:
    """
    Slot references of one bank, zero-indexed

    Args:
        project_dir: Project directory
        bank_id: Bank, 1-16
        exclude_inactive: Leave out references to slots the project does not have
    """
    path = bank_file(project_dir, bank_id)
    project = load_project(project_dir, check_version=False)
    refs = scan_bank(to_zero_indexed(project.slots), parse_bank_file(path))
    if exclude_inactive:
        refs = {r for r in refs if r.is_active}
    return sorted_references(refs)


__all__ = ['list_project_slots', 'list_bank_references']
