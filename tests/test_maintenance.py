"""
Listing, dedup/purge, default file creation tests
"""

import numpy as np
import pytest
import soundfile as sf

from core.bank import Bank
from core.errors import FileConflict, MissingSourceAudioFile
from core.options import SlotType
from operations.attributes import create_default_attributes
from operations.create import create_project
from operations.listing import list_project_slots, list_bank_references
from operations.maintenance import (
    dedup_project,
    purge_project,
    consolidate_to_audio_pool,
    consolidate_to_project_pool,
    purge_project_pool,
)
from operations.scanner import ReferenceKind
from parsers.arrangement_parser import parse_arrangement_file
from parsers.bank_parser import parse_bank_file
from parsers.project_parser import parse_project_file
from parsers.sample_parser import parse_sample_attributes_file

from conftest import make_slot, make_project, lock_slot, write_project_dir


def static_ids(project_dir):
    project = parse_project_file(project_dir / "project.work")
    return [s.slot_id for s in project.slots if s.sample_type == SlotType.STATIC]


class TestListing:

    def test_slots_sorted(self, tmp_path):
        project = make_project([
            make_slot(SlotType.FLEX, 3, "b.wav"),
            make_slot(SlotType.STATIC, 9, "a.wav"),
            make_slot(SlotType.STATIC, 2, "c.wav"),
        ])
        write_project_dir(tmp_path, project)
        slots = list_project_slots(tmp_path)
        assert [(s.sample_type, s.slot_id) for s in slots[:3]] == [
            (SlotType.STATIC, 2), (SlotType.STATIC, 9), (SlotType.FLEX, 3),
        ]
        assert all(s.is_recorder() for s in slots[3:])

    def test_bank_references(self, tmp_path):
        bank = lock_slot(Bank(), SlotType.STATIC, 30)
        write_project_dir(tmp_path, make_project([make_slot(SlotType.STATIC, 31, "a.wav")]), banks={2: bank})

        refs = list_bank_references(tmp_path, 2)
        assert len(refs) == 17
        assert refs[0].sample_type == SlotType.STATIC

        active = list_bank_references(tmp_path, 2, exclude_inactive=True)
        assert [(r.sample_type, r.slot_id, r.kind) for r in active] == [
            (SlotType.STATIC, 30, ReferenceKind.ACTIVE),
        ]


class TestMaintenance:

    def test_dedup_project(self, tmp_path):
        bank = lock_slot(Bank(), SlotType.STATIC, 10)
        bank.parts_saved[1].machine_slots[2].static_slot_id = 10
        project = make_project([
            make_slot(SlotType.STATIC, 10, "a.wav"),
            make_slot(SlotType.STATIC, 11, "a.wav"),
        ])
        write_project_dir(tmp_path, project, banks={2: bank})

        result = dedup_project(tmp_path)

        assert static_ids(tmp_path) == [10]
        assert [p.name for p in result.banks_written] == ["bank02.work"]
        written = parse_bank_file(tmp_path / "bank02.work")
        assert written.patterns[0].audio_tracks[0].plocks[0].static_slot_id == 9
        assert written.parts_saved[1].machine_slots[2].static_slot_id == 9
        assert len(result.backups) == 2

    def test_dedup_nothing_to_do(self, tmp_path):
        write_project_dir(tmp_path, make_project([make_slot(SlotType.STATIC, 10, "a.wav")]))
        before = (tmp_path / "project.work").read_bytes()
        result = dedup_project(tmp_path)
        assert result.reassignments == []
        assert result.backups == []
        assert (tmp_path / "project.work").read_bytes() == before

    def test_purge_project(self, tmp_path):
        bank = lock_slot(Bank(), SlotType.STATIC, 19)
        bank.parts_saved[0].machine_slots[0].flex_slot_id = 39
        project = make_project([
            make_slot(SlotType.STATIC, 20, "used.wav"),
            make_slot(SlotType.STATIC, 50, "unused.wav"),
            make_slot(SlotType.FLEX, 40, "saved.wav"),
        ])
        write_project_dir(tmp_path, project, banks={6: bank})

        result = purge_project(tmp_path)

        assert [s.path for s in result.removed] == ["unused.wav"]
        slots = parse_project_file(tmp_path / "project.work").slots
        assert [s.path for s in slots if not s.is_recorder()] == ["used.wav", "saved.wav"]
        assert sum(1 for s in slots if s.is_recorder()) == 8


@pytest.fixture
def scattered_project(tmp_path):
    """Project with one sample under the project directory and one in the Set pool"""
    project_dir = tmp_path / "SET" / "PROJ"
    project = make_project([
        make_slot(SlotType.STATIC, 1, "drums/kick.wav"),
        make_slot(SlotType.FLEX, 1, "../AUDIO/snare.wav"),
    ])
    write_project_dir(project_dir, project, audio=["drums/kick.wav", "drums/kick.ot", "../AUDIO/snare.wav"])
    return project_dir


def slot_paths(project_dir):
    project = parse_project_file(project_dir / "project.work")
    return {s.key: s.path for s in project.slots if not s.is_recorder()}


class TestConsolidate:

    def test_to_audio_pool(self, scattered_project):
        pool = scattered_project.parent / "AUDIO"

        result = consolidate_to_audio_pool(scattered_project)

        assert (pool / "kick.wav").read_bytes() == (scattered_project / "drums" / "kick.wav").read_bytes()
        assert (pool / "kick.ot").exists()
        assert slot_paths(scattered_project) == {
            (SlotType.STATIC, 1): "../AUDIO/kick.wav",
            (SlotType.FLEX, 1): "../AUDIO/snare.wav",
        }
        assert [s.path for s in result.relocated] == ["../AUDIO/kick.wav"]
        assert len(result.backups) == 1

    def test_to_project_pool(self, scattered_project):
        result = consolidate_to_project_pool(scattered_project)

        assert (scattered_project / "kick.wav").exists()
        assert (scattered_project / "kick.ot").exists()
        assert (scattered_project / "snare.wav").exists()
        assert slot_paths(scattered_project) == {
            (SlotType.STATIC, 1): "kick.wav",
            (SlotType.FLEX, 1): "snare.wav",
        }
        assert len(result.copied) == 3

    def test_second_run_changes_nothing(self, scattered_project):
        consolidate_to_project_pool(scattered_project)
        before = (scattered_project / "project.work").read_bytes()

        result = consolidate_to_project_pool(scattered_project)

        assert result.copied == []
        assert result.relocated == []
        assert (scattered_project / "project.work").read_bytes() == before

    def test_name_clash_rejected(self, scattered_project):
        pool = scattered_project.parent / "AUDIO"
        (pool / "kick.wav").write_bytes(b"another kick")
        before = (scattered_project / "project.work").read_bytes()

        with pytest.raises(FileConflict):
            consolidate_to_audio_pool(scattered_project)

        assert (pool / "kick.wav").read_bytes() == b"another kick"
        assert (scattered_project / "project.work").read_bytes() == before

    def test_missing_sample_rejected(self, scattered_project):
        (scattered_project / "drums" / "kick.wav").unlink()
        with pytest.raises(MissingSourceAudioFile):
            consolidate_to_project_pool(scattered_project)
        assert not (scattered_project / "snare.wav").exists()

    def test_purge_project_pool(self, scattered_project):
        (scattered_project / "old.wav").write_bytes(b"RIFF")
        (scattered_project / "old.ot").write_bytes(b"OT")
        (scattered_project / "notes.txt").write_text("keep")
        hidden = scattered_project / ".trash"
        hidden.mkdir()
        (hidden / "gone.wav").write_bytes(b"RIFF")

        result = purge_project_pool(scattered_project)

        assert sorted(p.name for p in result.deleted) == ["old.ot", "old.wav"]
        assert (scattered_project / "drums" / "kick.wav").exists()
        assert (scattered_project / "drums" / "kick.ot").exists()
        assert (scattered_project / "notes.txt").exists()
        assert (hidden / "gone.wav").exists()
        assert (scattered_project.parent / "AUDIO" / "snare.wav").exists()


class TestCreate:

    def test_new_project(self, tmp_path):
        project_dir = create_project(tmp_path / "NEW")

        assert parse_project_file(project_dir / "project.work").metadata.os_release == "1.40B"
        assert parse_bank_file(project_dir / "bank16.work").is_default()
        assert parse_arrangement_file(project_dir / "arr08.work").is_default()
        assert len(list(project_dir.iterdir())) == 1 + 16 + 8

    def test_existing_project_kept(self, tmp_path):
        create_project(tmp_path)
        with pytest.raises(FileExistsError):
            create_project(tmp_path)

    def test_default_attributes(self, tmp_path):
        wav = tmp_path / "loop.wav"
        sf.write(str(wav), np.zeros(88200), 44100)

        ot_path = create_default_attributes(wav, bpm=120.0)

        assert ot_path == tmp_path / "loop.ot"
        attributes = parse_sample_attributes_file(ot_path)
        assert attributes.trim_end == 88200
        assert attributes.trim_len == 100
        assert attributes.loop_len == 100
        assert attributes.gain_db == 0.0

        with pytest.raises(FileExistsError):
            create_default_attributes(wav)
