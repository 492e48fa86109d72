"""
Slot deduplication tests
"""

from core.options import SlotType
from core.slots import equal_for_dedup, default_recorder_slots, to_zero_indexed
from operations.dedup import SlotReassignment, dedup_slots, apply_reassignments

from conftest import make_slot, lock_slot, assign_machine


def test_no_duplicates_left():
    slots = [
        make_slot(slot_id=5, path="a.wav"),
        make_slot(slot_id=2, path="a.wav"),
        make_slot(slot_id=9, path="b.wav"),
        make_slot(SlotType.FLEX, 2, "a.wav"),
        make_slot(slot_id=7, path="b.wav"),
    ]
    deduped, reassignments = dedup_slots(slots)

    for i, a in enumerate(deduped):
        for b in deduped[i + 1:]:
            assert not equal_for_dedup(a, b)

    kept = {s.key for s in deduped}
    for r in reassignments:
        assert (r.sample_type, r.new_id) in kept

    assert set(reassignments) == {
        SlotReassignment(SlotType.STATIC, 5, 2),
        SlotReassignment(SlotType.STATIC, 9, 7),
    }


def test_original_order_kept():
    slots = [make_slot(slot_id=5, path="a.wav"), make_slot(slot_id=8, path="c.wav"), make_slot(slot_id=1, path="a.wav")]
    deduped, _ = dedup_slots(slots)
    assert [s.slot_id for s in deduped] == [8, 1]


def test_recorder_buffers_never_merged():
    recorders = to_zero_indexed(default_recorder_slots())
    deduped, reassignments = dedup_slots(recorders)
    assert deduped == recorders
    assert reassignments == []


def test_apply_reassignments(bank):
    lock_slot(bank, SlotType.STATIC, 5, step=1)
    lock_slot(bank, SlotType.FLEX, 5, step=2)
    assign_machine(bank, track=3, static=5)
    bank.parts_saved[0].machine_slots[3].static_slot_id = 5

    changed = apply_reassignments([SlotReassignment(SlotType.STATIC, 5, 2)], bank)

    plocks = bank.patterns[0].audio_tracks[0].plocks
    # track 5 of every unsaved part defaults to static slot 5
    assert changed == 6
    assert plocks[1].static_slot_id == 2
    assert plocks[2].flex_slot_id == 5
    assert bank.parts_unsaved[0].machine_slots[3].static_slot_id == 2
    assert bank.parts_saved[0].machine_slots[3].static_slot_id == 5


def test_chained_ids_rewritten_once(bank):
    assign_machine(bank, track=0, static=3)
    assign_machine(bank, track=1, static=2)
    apply_reassignments([
        SlotReassignment(SlotType.STATIC, 3, 2),
        SlotReassignment(SlotType.STATIC, 2, 1),
    ], bank)
    assert bank.parts_unsaved[0].machine_slots[0].static_slot_id == 2
    assert bank.parts_unsaved[0].machine_slots[1].static_slot_id == 1
