"""
Bank copy planning tests
"""

from pathlib import Path

import pytest

from core.bank import Bank
from core.errors import InsufficientFreeSlots, MissingSourceAudioFile
from core.options import SlotType, LoopMode
from core.slots import to_one_indexed
from operations.planner import (
    OperationKind,
    FileTransfer,
    plan_bank_copy,
    find_missing_source_audio,
    file_name,
    source_audio_path,
)
from operations.scanner import ReferenceKind

from conftest import make_slot, make_project, lock_slot, assign_machine


@pytest.fixture
def src_dir(tmp_path):
    path = tmp_path / "SET" / "SRC"
    path.mkdir(parents=True)
    return path


def plan_copy(src_dir, src_project, src_bank, dest_project):
    """Plan with the audio of every source slot present on disk"""
    for slot in src_project.slots:
        if slot.sample_type != SlotType.RECORDER:
            audio = source_audio_path(src_dir, slot)
            audio.parent.mkdir(parents=True, exist_ok=True)
            audio.write_bytes(b"RIFF")
    return plan_bank_copy(src_dir, src_project, src_bank, dest_project)


def point_all_tracks(bank: Bank, static: int, flex: int) -> Bank:
    for part in range(4):
        for track in range(8):
            assign_machine(bank, track, static=static, flex=flex, part=part)
    return bank


def filled_project(sample_type, used_zero_ids, paths=None):
    """Project whose slots of one type occupy the given zero-indexed ids"""
    paths = paths or {}
    slots = [make_slot(sample_type, i, paths.get(i, f"fill{i}.wav")) for i in used_zero_ids]
    return make_project(to_one_indexed(slots))


def machine(bank, part=0, track=0):
    return bank.parts_unsaved[part].machine_slots[track]


def test_reuse_and_inactive_remap(src_dir):
    src_project = make_project([make_slot(SlotType.STATIC, 4, "../AUDIO/x.wav")])
    src_bank = point_all_tracks(Bank(), static=3, flex=9)

    static_used = [i for i in range(128) if i not in (41, 127)]
    flex_used = [i for i in range(128) if i not in (12, 127)]
    dest_slots = to_one_indexed(
        [make_slot(SlotType.STATIC, i, "../AUDIO/x.wav" if i == 40 else f"s{i}.wav") for i in static_used]
        + [make_slot(SlotType.FLEX, i, f"f{i}.wav") for i in flex_used]
    )
    dest_project = make_project(dest_slots)

    plan = plan_copy(src_dir, src_project, src_bank, dest_project)

    assert machine(plan.new_dest_bank).static_slot_id == 40
    assert machine(plan.new_dest_bank).flex_slot_id == 127
    assert plan.transfers == []
    assert plan.new_dest_slots == dest_project.slots
    assert {op.op_kind for op in plan.operations} == {OperationKind.REUSE_SLOT}


def test_insufficient_free_slots(src_dir):
    src_project = make_project([make_slot(SlotType.STATIC, 1, "../AUDIO/kick.wav")])
    src_bank = point_all_tracks(Bank(), static=0, flex=0)
    dest_project = filled_project(SlotType.STATIC, range(127))

    with pytest.raises(InsufficientFreeSlots) as excinfo:
        plan_copy(src_dir, src_project, src_bank, dest_project)

    assert excinfo.value.sample_type == SlotType.STATIC
    assert excinfo.value.required == 1
    assert excinfo.value.available == 0
    assert src_bank == point_all_tracks(Bank(), static=0, flex=0)


def test_new_slot_inserted(src_dir):
    src_project = make_project([make_slot(SlotType.STATIC, 1, "../AUDIO/kick.wav", loop_mode=LoopMode.NORMAL)])
    src_bank = assign_machine(Bank(), track=0, static=0)
    dest_project = make_project()

    plan = plan_copy(src_dir, src_project, src_bank, dest_project)

    new = plan.new_slots()
    assert len(new) == 1
    assert new[0].dest_slot.slot_id == 126
    assert new[0].dest_slot.path == "kick.wav"
    assert new[0].dest_slot.loop_mode == LoopMode.NORMAL

    inserted = [s for s in plan.new_dest_slots if s.sample_type == SlotType.STATIC]
    assert [(s.slot_id, s.path) for s in inserted] == [(127, "kick.wav")]

    assert machine(plan.new_dest_bank).static_slot_id == 126
    # default assignments of the other tracks go to the static sink
    assert machine(plan.new_dest_bank, track=1).static_slot_id == 127
    assert machine(plan.new_dest_bank, track=1).flex_slot_id == 127

    assert plan.transfers == [FileTransfer(Path("../AUDIO/kick.wav"), Path("kick.wav"))]
    assert plan.transfers[0].dest_attributes == Path("kick.ot")


def test_source_bank_not_modified(src_dir):
    src_project = make_project([make_slot(SlotType.STATIC, 1, "a.wav")])
    src_bank = assign_machine(Bank(), track=0, static=0)
    plan_copy(src_dir, src_project, src_bank, make_project())
    assert machine(src_bank).static_slot_id == 0


def test_plocks_rewritten(src_dir):
    src_project = make_project([make_slot(SlotType.FLEX, 21, "loop.wav")])
    src_bank = lock_slot(Bank(), SlotType.FLEX, 20, pattern=7, track=2, step=40)
    plan = plan_copy(src_dir, src_project, src_bank, make_project())

    assert plan.new_dest_bank.patterns[7].audio_tracks[2].plocks[40].flex_slot_id == 126
    assert plan.new_dest_bank.patterns[0].audio_tracks[0].plocks[0].flex_slot_id == 255


def test_duplicate_source_slots_copied_once(src_dir):
    src_project = make_project([
        make_slot(SlotType.STATIC, 1, "hat.wav"),
        make_slot(SlotType.STATIC, 2, "hat.wav"),
    ])
    src_bank = assign_machine(Bank(), track=0, static=0)
    assign_machine(src_bank, track=1, static=1)

    plan = plan_copy(src_dir, src_project, src_bank, make_project())

    assert len(plan.transfers) == 1
    assert machine(plan.new_dest_bank, track=0).static_slot_id == 126
    assert machine(plan.new_dest_bank, track=1).static_slot_id == 126


def test_settings_match_requires_same_type(src_dir):
    src_project = make_project([make_slot(SlotType.FLEX, 1, "pad.wav")])
    src_bank = assign_machine(Bank(), track=0, flex=0)
    dest_project = make_project([make_slot(SlotType.STATIC, 5, "pad.wav")])

    plan = plan_copy(src_dir, src_project, src_bank, dest_project)

    assert [op.dest_slot.sample_type for op in plan.new_slots()] == [SlotType.FLEX]


def test_no_slot_id_collisions(src_dir):
    src_project = make_project(
        [make_slot(SlotType.STATIC, i + 1, f"s{i}.wav") for i in range(8)]
        + [make_slot(SlotType.FLEX, i + 1, f"f{i}.wav") for i in range(8)]
    )
    src_bank = Bank()
    dest_project = filled_project(SlotType.STATIC, range(0, 100, 3))

    plan = plan_copy(src_dir, src_project, src_bank, dest_project)

    keys = [s.key for s in plan.new_dest_slots]
    assert len(keys) == len(set(keys))
    assert len(plan.new_slots()) == 16


def test_operations_ordered(src_dir):
    src_project = make_project([
        make_slot(SlotType.STATIC, 2, "a.wav"),
        make_slot(SlotType.STATIC, 5, "b.wav"),
        make_slot(SlotType.STATIC, 7, "c.wav"),
    ])
    src_bank = Bank()
    dest_project = make_project([make_slot(SlotType.STATIC, 60, "c.wav")])

    plan = plan_copy(src_dir, src_project, src_bank, dest_project)

    passes = []
    for op in plan.operations:
        group = "inactive" if op.reference_kind == ReferenceKind.INACTIVE else op.op_kind.value
        if not passes or passes[-1][0] != group:
            passes.append((group, []))
        passes[-1][1].append(op.src_slot.slot_id)

    assert [group for group, _ in passes] == ["inactive", "reuse", "new"]
    for _, ids in passes:
        assert ids == sorted(ids, reverse=True)


def test_find_missing_source_audio(tmp_path):
    (tmp_path / "here.wav").write_bytes(b"RIFF")
    src_project = make_project([
        make_slot(SlotType.STATIC, 1, "here.wav"),
        make_slot(SlotType.STATIC, 2, "gone.wav"),
        make_slot(SlotType.STATIC, 50, "unused.wav"),
    ])
    missing = find_missing_source_audio(tmp_path, src_project, Bank())
    assert missing == [tmp_path / "gone.wav"]


def test_file_name_handles_both_separators():
    assert file_name("../AUDIO/drums/kick.wav") == "kick.wav"
    assert file_name("..\\AUDIO\\kick.wav") == "kick.wav"


def test_missing_source_audio_rejected(src_dir):
    src_project = make_project([make_slot(SlotType.STATIC, 1, "../AUDIO/kick.wav")])
    src_bank = assign_machine(Bank(), track=0, static=0)

    with pytest.raises(MissingSourceAudioFile) as excinfo:
        plan_bank_copy(src_dir, src_project, src_bank, make_project())

    assert excinfo.value.paths == [src_dir / "../AUDIO/kick.wav"]


def test_transfer_paths_relative_to_projects(src_dir):
    src_project = make_project([make_slot(SlotType.FLEX, 1, "..\\AUDIO\\pad.wav")])
    src_bank = assign_machine(Bank(), track=0, flex=0)

    plan = plan_copy(src_dir, src_project, src_bank, make_project())

    assert plan.transfers == [FileTransfer(Path("../AUDIO/pad.wav"), Path("pad.wav"))]
    assert not plan.transfers[0].src_audio.is_absolute()
