"""
Operations module
Slot reference scanning, deduplication, bank copy planning and execution
"""

from .scanner import ReferenceKind, SlotReference, scan_patterns, scan_parts, scan_bank
from .dedup import SlotReassignment, dedup_slots, apply_reassignments
from .planner import (
    OperationKind,
    SampleSlotOperation,
    FileTransfer,
    TransplantPlan,
    plan_bank_copy,
    find_missing_source_audio,
)
from .transfer import TransferReport, transfer_files
from .transplant import BankCopyResult, copy_bank, backup_file
from .batch import copy_banks_from_config
from .listing import list_project_slots, list_bank_references
from .maintenance import (
    MaintenanceResult,
    dedup_project,
    purge_project,
    consolidate_to_audio_pool,
    consolidate_to_project_pool,
    purge_project_pool,
)
from .attributes import create_default_attributes
from .create import create_project

__all__ = [
    'ReferenceKind',
    'SlotReference',
    'scan_patterns',
    'scan_parts',
    'scan_bank',
    'SlotReassignment',
    'dedup_slots',
    'apply_reassignments',
    'OperationKind',
    'SampleSlotOperation',
    'FileTransfer',
    'TransplantPlan',
    'plan_bank_copy',
    'find_missing_source_audio',
    'TransferReport',
    'transfer_files',
    'BankCopyResult',
    'copy_bank',
    'backup_file',
    'copy_banks_from_config',
    'list_project_slots',
    'list_bank_references',
    'MaintenanceResult',
    'dedup_project',
    'purge_project',
    'consolidate_to_audio_pool',
    'consolidate_to_project_pool',
    'purge_project_pool',
    'create_default_attributes',
    'create_project',
]
