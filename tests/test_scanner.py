"""
Slot reference scanning tests
"""

from core.options import SlotType
from operations.scanner import (
    TYPE_ORDER, ReferenceKind, SlotReference, scan_bank, scan_patterns, scan_parts, sorted_references,
)

from conftest import make_slot, lock_slot, assign_machine


def test_default_bank_references_track_slots(bank):
    refs = scan_bank([], bank)
    assert {r.key for r in refs} == {
        (t, i) for t in (SlotType.STATIC, SlotType.FLEX) for i in range(8)
    }
    assert all(r.kind == ReferenceKind.INACTIVE for r in refs)


def test_unset_plocks_ignored(bank):
    assert scan_patterns([], bank.patterns) == set()


def test_plock_references(bank):
    lock_slot(bank, SlotType.STATIC, 20, pattern=4, step=10)
    lock_slot(bank, SlotType.FLEX, 21, pattern=9, track=3)
    slots = [make_slot(SlotType.STATIC, 20)]
    refs = {r.key: r for r in scan_patterns(slots, bank.patterns)}
    assert refs[(SlotType.STATIC, 20)].kind == ReferenceKind.ACTIVE
    assert refs[(SlotType.FLEX, 21)].kind == ReferenceKind.INACTIVE


def test_references_collapse(bank):
    for step in range(64):
        lock_slot(bank, SlotType.STATIC, 30, step=step)
    assign_machine(bank, track=0, static=30)
    refs = [r for r in scan_bank([], bank) if r.slot_id == 30]
    assert refs == [SlotReference(SlotType.STATIC, 30)]


def test_kind_not_part_of_identity():
    assert SlotReference(SlotType.FLEX, 1, ReferenceKind.ACTIVE) == SlotReference(
        SlotType.FLEX, 1, ReferenceKind.INACTIVE
    )


def test_saved_parts_ignored(bank):
    bank.parts_saved[0].machine_slots[0].static_slot_id = 99
    assert (SlotType.STATIC, 99) not in {r.key for r in scan_bank([], bank)}
    assert (SlotType.STATIC, 99) in {r.key for r in scan_parts([], bank.parts_saved)}


def test_sorted_references_follow_type_order():
    refs = {
        SlotReference(SlotType.FLEX, 0),
        SlotReference(SlotType.STATIC, 5),
        SlotReference(SlotType.RECORDER, 128),
        SlotReference(SlotType.STATIC, 2),
    }
    ordered = sorted_references(refs)
    assert [(r.sample_type, r.slot_id) for r in ordered] == [
        (SlotType.STATIC, 2), (SlotType.STATIC, 5), (SlotType.FLEX, 0), (SlotType.RECORDER, 128),
    ]
    assert set(TYPE_ORDER) == set(SlotType)
