"""
Fresh project directories in the device's factory state
"""

import logging
from pathlib import Path

from core.arrangement import Arrangement
from core.bank import Bank
from core.project import Project
from writers.arrangement_writer import write_arrangement_file
from writers.bank_writer import write_bank_file
from writers.project_writer import write_project_file
from .transplant import N_BANKS, bank_file, project_file

logger = logging.getLogger(__name__)

N_ARRANGEMENTS = 8


def arrangement_file(project_dir, arrangement_id: int) -> Path:
    return Path(project_dir) / f"arr{arrangement_id:02d}.work"


def create_project(project_dir, overwrite: bool = False) -> Path:
    """
    Write project.work, 16 default banks and 8 default arrangements

    Raises:
        FileExistsError: project.work exists and overwrite is False
    """
    project_dir = Path(project_dir)
    if project_file(project_dir).exists() and not overwrite:
        raise FileExistsError(f"{project_file(project_dir)} already exists")
    project_dir.mkdir(parents=True, exist_ok=True)

    write_project_file(Project.default(), project_file(project_dir))
    for bank_id in range(1, N_BANKS + 1):
        write_bank_file(Bank(), bank_file(project_dir, bank_id))
    for arrangement_id in range(1, N_ARRANGEMENTS + 1):
        write_arrangement_file(Arrangement(), arrangement_file(project_dir, arrangement_id))

    logger.info(f"✓ Created project: {project_dir}")
    return project_dir


__all__ = ['N_ARRANGEMENTS', 'arrangement_file', 'create_project']
