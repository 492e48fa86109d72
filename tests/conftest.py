"""Shared factories for octatool tests"""

from pathlib import Path

import pytest

from core.bank import Bank
from core.options import SlotType
from core.project import Project
from core.slots import SampleSlot, default_recorder_slots
from writers.bank_writer import write_bank_file
from writers.project_writer import write_project_file


def make_slot(sample_type=SlotType.STATIC, slot_id=1, path="kick.wav", **kwargs) -> SampleSlot:
    return SampleSlot(sample_type=sample_type, slot_id=slot_id, path=path, **kwargs)


def make_project(slots=()) -> Project:
    """Default project with the given one-indexed slots plus recorder buffers"""
    return Project(slots=list(slots) + default_recorder_slots())


def lock_slot(bank: Bank, sample_type: SlotType, slot_id: int, pattern=0, track=0, step=0) -> Bank:
    """Set a parameter lock slot override (zero-indexed id)"""
    plock = bank.patterns[pattern].audio_tracks[track].plocks[step]
    if sample_type == SlotType.STATIC:
        plock.static_slot_id = slot_id
    else:
        plock.flex_slot_id = slot_id
    return bank


def assign_machine(bank: Bank, track: int, static=None, flex=None, part=0) -> Bank:
    """Set an unsaved part's machine slot assignment (zero-indexed ids)"""
    machine_slot = bank.parts_unsaved[part].machine_slots[track]
    if static is not None:
        machine_slot.static_slot_id = static
    if flex is not None:
        machine_slot.flex_slot_id = flex
    return bank


def write_project_dir(directory: Path, project: Project, banks=None, audio=()) -> Path:
    """
    Lay out a project directory

    Args:
        directory: Project directory to create
        project: Project to write as project.work
        banks: {bank id: Bank}; every other bank is written in default state
        audio: Relative audio paths to create with dummy content
    """
    directory.mkdir(parents=True, exist_ok=True)
    write_project_file(project, directory / "project.work")
    banks = banks or {}
    for bank_id in range(1, 17):
        write_bank_file(banks.get(bank_id, Bank()), directory / f"bank{bank_id:02d}.work")
    for relative in audio:
        path = directory / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"RIFF" + relative.encode())
    return directory


@pytest.fixture
def bank():
    return Bank()


@pytest.fixture
def project_dirs(tmp_path):
    """(source dir, destination dir) paths, not yet created"""
    return tmp_path / "SET" / "SRC", tmp_path / "SET" / "DEST"
