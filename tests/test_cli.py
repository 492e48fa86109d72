"""
Command line tests
"""

import pytest

from core.bank import Bank
from core.options import SlotType
from parsers.bank_parser import parse_bank_file

import octatool
from conftest import make_slot, make_project, assign_machine, write_project_dir


@pytest.fixture
def projects(project_dirs):
    src_dir, dest_dir = project_dirs
    write_project_dir(
        src_dir,
        make_project([make_slot(SlotType.FLEX, 1, "loop.wav")]),
        banks={1: assign_machine(Bank(), track=0, flex=0)},
        audio=["loop.wav"],
    )
    write_project_dir(dest_dir, make_project())
    return src_dir, dest_dir


def test_copy_bank(projects, capsys):
    src_dir, dest_dir = projects
    code = octatool.main(["copy-bank", str(src_dir), "1", str(dest_dir), "2"])
    assert code == 0
    assert "SUCCESS" in capsys.readouterr().out
    assert parse_bank_file(dest_dir / "bank02.work").parts_unsaved[0].machine_slots[0].flex_slot_id == 126
    assert (dest_dir / "loop.wav").exists()


def test_copy_bank_modified_destination(projects, capsys):
    src_dir, dest_dir = projects
    assert octatool.main(["copy-bank", str(src_dir), "1", str(dest_dir), "2"]) == 0
    assert octatool.main(["copy-bank", str(src_dir), "1", str(dest_dir), "2"]) == 1
    assert "FAILED" in capsys.readouterr().out
    assert octatool.main(["copy-bank", "--force", str(src_dir), "1", str(dest_dir), "2"]) == 0


def test_invalid_bank(projects):
    src_dir, dest_dir = projects
    assert octatool.main(["copy-bank", str(src_dir), "17", str(dest_dir), "2"]) == 1


def test_list_commands(projects, capsys):
    src_dir, _ = projects
    assert octatool.main(["list-slots", str(src_dir)]) == 0
    assert "loop.wav" in capsys.readouterr().out

    assert octatool.main(["list-refs", str(src_dir), "1", "--exclude-inactive"]) == 0
    out = capsys.readouterr().out
    assert "FLEX" in out
    assert "1 reference(s)" in out


def test_new_project(tmp_path):
    assert octatool.main(["new", "project", str(tmp_path / "P")]) == 0
    assert (tmp_path / "P" / "bank01.work").exists()


def test_no_command(capsys):
    assert octatool.main([]) == 1


def test_missing_project_is_an_error(tmp_path):
    assert octatool.main(["list-slots", str(tmp_path / "nowhere")]) == 1


def test_consolidate_and_purge_pool(projects, capsys):
    src_dir, _ = projects
    (src_dir / "stray.wav").write_bytes(b"RIFF")

    assert octatool.main(["consolidate", str(src_dir)]) == 0
    assert (src_dir.parent / "AUDIO" / "loop.wav").exists()
    assert "Slots moved: 1" in capsys.readouterr().out

    assert octatool.main(["purge-pool", str(src_dir)]) == 0
    assert "Files deleted: 2" in capsys.readouterr().out
    assert not (src_dir / "stray.wav").exists()
    assert not (src_dir / "loop.wav").exists()
