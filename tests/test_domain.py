from __future__ import annotations

import pytest

from interview_sim.domain import Participant, ParticipantPool, Slot, SlotCalendar, workload, workloads
from interview_sim.preprocess.calendar import build_calendar, group_bands

from helpers import make_pool


def test_slot_predicates() -> None:
    s = Slot(sequence=0)
    assert s.empty and not s.in_use and not s.full(2)
    s.applicant = 4
    assert s.in_use and not s.full(2)
    s.reviewers = [1, 2]
    assert s.full(2)
    assert not s.full(3)


def test_reviewers_alone_do_not_make_a_slot_full() -> None:
    s = Slot(sequence=0, reviewers=[1, 2])
    assert not s.full(2)


def test_participant_responded_follows_availability() -> None:
    assert not Participant("Applicant", 0).responded
    p = Participant("Reviewer", 3, frozenset({1, 2}))
    assert p.responded
    assert p.available_for(2) and not p.available_for(0)
    assert str(p) == "Reviewer #3"


def test_with_availability_replaces_record() -> None:
    pool = ParticipantPool.empty(2, 1)
    before = pool.applicants[1]
    pool.with_availability("Applicant", 1, [5, 6])
    assert pool.applicants[1].availability == frozenset({5, 6})
    assert before.availability == frozenset()
    assert pool.responsive_applicants() == [1]
    assert pool.responsive_reviewers() == []


def test_band_helpers() -> None:
    cal = build_calendar(5, concurrency_factor=2, required_reviewers=1)
    assert [cal.band_of(t) for t in range(5)] == [0, 0, 1, 1, 2]
    assert [s.sequence for s in cal.band_slots(1)] == [2, 3]
    assert [s.sequence for s in cal.band_slots(2)] == [4]
    cal.slots[3].reviewers.append(7)
    assert cal.reviewer_in_band(7, 1)
    assert not cal.reviewer_in_band(7, 0)


def test_group_bands() -> None:
    cal = build_calendar(6, concurrency_factor=3)
    assert group_bands(cal.slots, 3) == {0: [0, 1, 2], 1: [3, 4, 5]}
    assert group_bands(cal.slots, 1) == {i: [i] for i in range(6)}
    with pytest.raises(ValueError):
        group_bands(cal.slots, 0)


def test_calendar_rejects_out_of_order_slots() -> None:
    with pytest.raises(ValueError):
        SlotCalendar(slots=[Slot(sequence=1), Slot(sequence=0)])


def test_assignment_pairs_and_lookup() -> None:
    cal = build_calendar(3, required_reviewers=2)
    cal.slots[0].applicant = 2
    cal.slots[0].reviewers = [0, 1]
    cal.slots[2].applicant = 0
    assert cal.assignment_pairs() == {
        (0, "Applicant", 2), (0, "Reviewer", 0), (0, "Reviewer", 1), (2, "Applicant", 0),
    }
    assert cal.booked_applicants() == {0, 2}
    assert cal.slot_of_applicant(0).sequence == 2
    assert cal.slot_of_applicant(1) is None
    assert [s.sequence for s in cal.open_slots()] == [1]
    assert [s.sequence for s in cal.in_use_slots()] == [0, 2]


def test_workload_counts_slots_per_reviewer() -> None:
    cal = build_calendar(4)
    cal.slots[0].reviewers = [0, 1]
    cal.slots[1].reviewers = [0]
    cal.slots[3].reviewers = [0, 2]
    assert workload(0, cal.slots) == 3
    assert workload(1, cal.slots) == 1
    assert workload(5, cal.slots) == 0
    assert workloads([0, 1, 2, 3], cal.slots) == {0: 3, 1: 1, 2: 1, 3: 0}


def test_pool_labels() -> None:
    pool = make_pool([[0]], [[1], [2]])
    assert pool.label("Applicant", 0) == "Applicant #0"
    assert pool.label("Reviewer", 1) == "Reviewer #1"
