"""
Project-wide slot maintenance: merging duplicate slots, dropping unused ones
and gathering sample files into one place
"""

import filecmp
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List

from core.bank import Bank
from core.errors import FileConflict, MissingSourceAudioFile
from core.slots import SampleSlot, to_zero_indexed, to_one_indexed
from parsers.bank_parser import parse_bank_file
from writers.bank_writer import write_bank_file
from writers.project_writer import write_project_file
from .dedup import SlotReassignment, dedup_slots, apply_reassignments
from .planner import file_name, source_audio_path
from .scanner import part_slot_fields, scan_bank, scan_parts
from .transfer import copy_atomic
from .transplant import N_BANKS, bank_file, project_file, load_project, backup_file

logger = logging.getLogger(__name__)

AUDIO_POOL_DIR = "AUDIO"
AUDIO_SUFFIXES = ('.wav', '.aif', '.aiff')


@dataclass
class MaintenanceResult:
    removed: List[SampleSlot] = field(default_factory=list)
    reassignments: List[SlotReassignment] = field(default_factory=list)
    banks_written: List[Path] = field(default_factory=list)
    backups: List[Path] = field(default_factory=list)
    relocated: List[SampleSlot] = field(default_factory=list)
    copied: List[Path] = field(default_factory=list)
    deleted: List[Path] = field(default_factory=list)
def _existing_banks(project_dir) -> Dict[Path, Bank]:
    banks = {}
    for bank_id in range(1, N_BANKS + 1):
        path = bank_file(project_dir, bank_id)
        if path.exists():
            banks[path] = parse_bank_file(path)
    return banks


def dedup_project(project_dir) -> MaintenanceResult:
    """
    Merge duplicate slots of a project and rewrite every bank to match

    Saved parts are rewritten as well, so reloading a part never points at a
    slot that was merged away.
    """
    project_dir = Path(project_dir)
    project = load_project(project_dir)
    banks = _existing_banks(project_dir)

    slots, reassignments = dedup_slots(to_zero_indexed(project.slots))
    result = MaintenanceResult(reassignments=reassignments)
    if not reassignments:
        logger.info("✓ No duplicate slots")
        return result

    timestamp = datetime.now(timezone.utc)
    project_path = project_file(project_dir)
    result.backups.append(backup_file(project_path, timestamp))

    mapping = {(r.sample_type, r.old_id): r.new_id for r in reassignments}
    for path, bank in banks.items():
        changed = apply_reassignments(reassignments, bank)
        for record, attribute, sample_type in part_slot_fields(bank.parts_saved):
            new_id = mapping.get((sample_type, getattr(record, attribute)))
            if new_id is not None:
                setattr(record, attribute, new_id)
                changed += 1
        if changed:
            result.backups.append(backup_file(path, timestamp))
            write_bank_file(bank, path)
            result.banks_written.append(path)

    kept_keys = {s.key for s in slots}
    result.removed = [s for s in to_zero_indexed(project.slots) if s.key not in kept_keys]
    write_project_file(replace(project, slots=to_one_indexed(slots)), project_path)
    logger.info(f"✓ Merged {len(reassignments)} slot(s), rewrote {len(result.banks_written)} bank(s)")
    return result


def purge_project(project_dir) -> MaintenanceResult:
    """
    Drop slots no bank refers to

    Pattern locks, unsaved and saved parts of all banks count as uses.
    Recorder buffers are always kept.
    """
    project_dir = Path(project_dir)
    project = load_project(project_dir)
    slots = to_zero_indexed(project.slots)

    used = set()
    for bank in _existing_banks(project_dir).values():
        refs = scan_bank(slots, bank) | scan_parts(slots, bank.parts_saved)
        used.update(r.key for r in refs if r.is_active)

    kept = [s for s in slots if s.is_recorder() or s.key in used]
    result = MaintenanceResult(removed=[s for s in slots if not (s.is_recorder() or s.key in used)])
    if not result.removed:
        logger.info("✓ No unused slots")
        return result

    project_path = project_file(project_dir)
    result.backups.append(backup_file(project_path))
    write_project_file(replace(project, slots=to_one_indexed(kept)), project_path)
    logger.info(f"✓ Removed {len(result.removed)} unused slot(s)")
    return result


def audio_pool_dir(project_dir) -> Path:
    """AUDIO directory of the Set the project lives in"""
    return Path(project_dir).resolve().parent / AUDIO_POOL_DIR


def _slots_with_audio(project) -> List[SampleSlot]:
    return [s for s in project.slots if s.path]


def _same_file(a: Path, b: Path) -> bool:
    return a.resolve() == b.resolve() or filecmp.cmp(a, b, shallow=False)


def _copy_into(src: Path, dest: Path, result: MaintenanceResult):
    if dest.exists():
        if not _same_file(src, dest):
            raise FileConflict(str(dest))
        return
    dest.parent.mkdir(parents=True, exist_ok=True)
    copy_atomic(src, dest)
    logger.info(f"  Copied {src.name} -> {dest}")
    result.copied.append(dest)


def _consolidate(project_dir, target_dir: Path, stored_path: Callable[[str], str]) -> MaintenanceResult:
    project_dir = Path(project_dir)
    project = load_project(project_dir)
    slots = _slots_with_audio(project)

    missing = [p for p in (source_audio_path(project_dir, s) for s in slots) if not p.is_file()]
    if missing:
        raise MissingSourceAudioFile(missing)

    # nothing is copied if any two different files would share a name
    claimed: Dict[str, Path] = {}
    for slot in slots:
        src = source_audio_path(project_dir, slot)
        name = file_name(slot.path)
        dest = target_dir / name
        if name in claimed and not _same_file(claimed[name], src):
            raise FileConflict(str(dest))
        if dest.exists() and not _same_file(src, dest):
            raise FileConflict(str(dest))
        claimed.setdefault(name, src)

    result = MaintenanceResult()
    new_paths = {}
    for slot in slots:
        src = source_audio_path(project_dir, slot)
        name = file_name(slot.path)
        dest = target_dir / name
        _copy_into(src, dest, result)
        if src.with_suffix('.ot').is_file():
            _copy_into(src.with_suffix('.ot'), dest.with_suffix('.ot'), result)
        if slot.path != stored_path(name):
            new_paths[slot.key] = stored_path(name)

    if not new_paths:
        logger.info(f"✓ All slots already point at {target_dir}")
        return result

    new_slots = [replace(s, path=new_paths[s.key]) if s.key in new_paths else s for s in project.slots]
    result.relocated = [s for s in new_slots if s.key in new_paths]
    project_path = project_file(project_dir)
    result.backups.append(backup_file(project_path))
    write_project_file(replace(project, slots=new_slots), project_path)
    logger.info(f"✓ Moved {len(result.relocated)} slot(s) to {target_dir}, copied {len(result.copied)} file(s)")
    return result


def consolidate_to_audio_pool(project_dir) -> MaintenanceResult:
    """
    Copy every slot's sample into the Set's AUDIO directory

    Slot paths are rewritten to ../AUDIO/<file name>. The original files are
    left where they were. Raises FileConflict rather than overwrite a
    different file of the same name.
    """
    return _consolidate(project_dir, audio_pool_dir(project_dir), lambda name: f"../{AUDIO_POOL_DIR}/{name}")


def consolidate_to_project_pool(project_dir) -> MaintenanceResult:
    """Copy every slot's sample into the project directory itself"""
    return _consolidate(project_dir, Path(project_dir), lambda name: name)


def purge_project_pool(project_dir) -> MaintenanceResult:
    """
    Delete audio files under the project directory that no slot points at

    Their .ot files are deleted with them. Hidden files and directories are
    skipped. The Set audio pool is never touched: it is expected to hold
    samples no project has loaded.
    """
    project_dir = Path(project_dir)
    project = load_project(project_dir)
    in_use = {source_audio_path(project_dir, s).resolve() for s in _slots_with_audio(project)}

    result = MaintenanceResult()
    for path in sorted(project_dir.rglob('*')):
        if path.suffix.lower() not in AUDIO_SUFFIXES or not path.is_file():
            continue
        if any(part.startswith('.') for part in path.relative_to(project_dir).parts):
            continue
        if path.resolve() in in_use:
            continue
        path.unlink()
        result.deleted.append(path)
        attributes = path.with_suffix('.ot')
        if attributes.is_file():
            attributes.unlink()
            result.deleted.append(attributes)
        logger.info(f"  Deleted {path.name}")

    logger.info(f"✓ Deleted {len(result.deleted)} unused file(s) from {project_dir}")
    return result


__all__ = [
    'AUDIO_POOL_DIR',
    'MaintenanceResult',
    'dedup_project',
    'purge_project',
    'audio_pool_dir',
    'consolidate_to_audio_pool',
    'consolidate_to_project_pool',
    'purge_project_pool',
]
