"""
Bank copy between projects

Runs the whole copy as one pipeline: validate, back up, plan, transfer
files, then write the destination project and bank. Any error before the
final writes leaves the destination project and bank files untouched, and
no backups are taken until every validation has passed.
"""

import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from core.errors import InvalidBankOrPatternIndex, MissingSourceAudioFile, DestinationModified
from core.project import Project
from parsers.bank_parser import parse_bank_file
from parsers.project_parser import parse_project_file
from writers.bank_writer import write_bank_file
from writers.project_writer import write_project_file
from .planner import TransplantPlan, plan_bank_copy, find_missing_source_audio
from .transfer import TransferReport, transfer_files

logger = logging.getLogger(__name__)

PROJECT_FILE_NAME = "project.work"
N_BANKS = 16
BACKUP_MARKER = "_octatool_"


def validate_index(kind: str, index) -> int:
    """1-16 bank or pattern number"""
    if isinstance(index, bool) or not isinstance(index, int) or not 1 <= index <= N_BANKS:
        raise InvalidBankOrPatternIndex(kind, index)
    return index


def project_file(project_dir) -> Path:
    return Path(project_dir) / PROJECT_FILE_NAME


def bank_file(project_dir, bank_id: int) -> Path:
    validate_index("bank", bank_id)
    return Path(project_dir) / f"bank{bank_id:02d}.work"


def backup_file(path, timestamp: Optional[datetime] = None) -> Path:
    """
    Copy a file to a timestamped sibling, e.g. bank01.work_octatool_20240101T120000Z

    Returns:
        Path of the backup
    """
    path = Path(path)
    timestamp = timestamp or datetime.now(timezone.utc)
    backup = path.with_name(f"{path.name}{BACKUP_MARKER}{timestamp.strftime('%Y%m%dT%H%M%S%fZ')}")
    shutil.copy2(path, backup)
    logger.info(f"  Backup: {backup.name}")
    return backup


def load_project(project_dir, check_version: bool = True) -> Project:
    path = project_file(project_dir)
    project = parse_project_file(path)
    if check_version:
        project.check_os_version(str(path))
    return project


@dataclass
class BankCopyResult:
    plan: TransplantPlan
    transfers: TransferReport
    backups: List[Path] = field(default_factory=list)


def copy_bank(src_project_dir, src_bank_id: int, dest_project_dir, dest_bank_id: int,
              force: bool = False) -> BankCopyResult:
    """
    Copy a bank from one project into another

    Args:
        src_project_dir: Source project directory
        src_bank_id: Source bank, 1-16
        dest_project_dir: Destination project directory
        dest_bank_id: Destination bank, 1-16
        force: Overwrite the destination bank even if it has been edited

    Returns:
        BankCopyResult with the plan, the transfer report and backup paths

    Raises:
        InvalidBankOrPatternIndex, VersionMismatch, DestinationModified,
        MissingSourceAudioFile, InsufficientFreeSlots, FormatError
    """
    src_project_dir = Path(src_project_dir)
    dest_project_dir = Path(dest_project_dir)

    # Validate
    logger.info(f"Step 1/5: Validating bank {src_bank_id} -> bank {dest_bank_id}...")
    src_bank_path = bank_file(src_project_dir, src_bank_id)
    dest_bank_path = bank_file(dest_project_dir, dest_bank_id)
    dest_project_path = project_file(dest_project_dir)

    src_project = load_project(src_project_dir)
    src_bank = parse_bank_file(src_bank_path)
    dest_project = load_project(dest_project_dir)

    dest_bank = parse_bank_file(dest_bank_path)
    if not force and not dest_bank.is_default():
        raise DestinationModified(str(dest_bank_path))

    missing = find_missing_source_audio(src_project_dir, src_project, src_bank)
    if missing:
        raise MissingSourceAudioFile(missing)

    # Backup
    logger.info("Step 2/5: Backing up destination files...")
    timestamp = datetime.now(timezone.utc)
    backups = [
        backup_file(dest_project_path, timestamp),
        backup_file(dest_bank_path, timestamp),
    ]

    # Plan
    logger.info("Step 3/5: Planning sample slots...")
    plan = plan_bank_copy(src_project_dir, src_project, src_bank, dest_project)

    # Transfer
    logger.info("Step 4/5: Copying sample files...")
    report = transfer_files(plan.transfers, src_project_dir, dest_project_dir)

    # Commit
    logger.info("Step 5/5: Writing destination project and bank...")
    write_project_file(plan.apply_to(dest_project), dest_project_path)
    write_bank_file(plan.new_dest_bank, dest_bank_path)

    logger.info(f"✓ Copied bank {src_bank_id} of {src_project_dir} to bank {dest_bank_id} of {dest_project_dir}")
    return BankCopyResult(plan=plan, transfers=report, backups=backups)


__all__ = [
    'PROJECT_FILE_NAME',
    'N_BANKS',
    'validate_index',
    'project_file',
    'bank_file',
    'backup_file',
    'load_project',
    'BankCopyResult',
    'copy_bank',
]
