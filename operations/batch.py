"""
Batch bank copies from a YAML config

Example config:

    bank_copies:
      - src:
          project: SET/SRC
          bank_id: 1
        dest:
          project: SET/DEST
          bank_id: 5
        force: false

Relative project paths resolve against the config file's directory.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

import yaml

from core.errors import ConfigError
from .transplant import BankCopyResult, copy_bank, validate_index

logger = logging.getLogger(__name__)


@dataclass
class BankLocation:
    project: Path
    bank_id: int


@dataclass
class BankCopyConfig:
    src: BankLocation
    dest: BankLocation
    force: bool = False


def _location(entry: dict, name: str, index: int, base: Path) -> BankLocation:
    value = entry.get(name)
    if not isinstance(value, dict):
        raise ConfigError(f"bank_copies[{index}].{name} must be a mapping with 'project' and 'bank_id'")
    project = value.get("project")
    if not isinstance(project, str) or not project:
        raise ConfigError(f"bank_copies[{index}].{name}.project must be a path string")
    bank_id = validate_index("bank", value.get("bank_id"))
    return BankLocation(project=base / project, bank_id=bank_id)


def load_batch_config(filepath) -> List[BankCopyConfig]:
    path = Path(filepath)
    try:
        data = yaml.safe_load(path.read_text(encoding='utf-8'))
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML: {e}") from e

    entries = data.get("bank_copies") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ConfigError(f"{path}: expected a 'bank_copies' list")

    base = path.parent
    copies = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigError(f"bank_copies[{index}] must be a mapping")
        force = entry.get("force", False)
        if not isinstance(force, bool):
            raise ConfigError(f"bank_copies[{index}].force must be true or false")
        copies.append(BankCopyConfig(
            src=_location(entry, "src", index, base),
            dest=_location(entry, "dest", index, base),
            force=force,
        ))
    return copies


def copy_banks_from_config(filepath) -> List[BankCopyResult]:
    """
    Run every bank copy in a config file, in order

    Stops at the first failure. Copies that already finished stay in place.
    """
    copies = load_batch_config(filepath)
    logger.info(f"Batch: {len(copies)} bank copies from {filepath}")
    results = []
    for number, entry in enumerate(copies, 1):
        logger.info(f"[{number}/{len(copies)}] {entry.src.project} bank {entry.src.bank_id} "
                    f"-> {entry.dest.project} bank {entry.dest.bank_id}")
        results.append(copy_bank(
            entry.src.project, entry.src.bank_id,
            entry.dest.project, entry.dest.bank_id,
            force=entry.force,
        ))
    logger.info(f"✓ Batch complete: {len(results)} bank(s) copied")
    return results


__all__ = ['BankLocation', 'BankCopyConfig', 'load_batch_config', 'copy_banks_from_config']
