"""Small builders shared by the test modules."""

from __future__ import annotations

import random
from typing import Iterable

from interview_sim.domain import ParticipantPool
from interview_sim.preprocess.calendar import build_calendar


def make_pool(applicant_slots: Iterable[Iterable[int]], reviewer_slots: Iterable[Iterable[int]]) -> ParticipantPool:
    applicant_slots = [list(s) for s in applicant_slots]
    reviewer_slots = [list(s) for s in reviewer_slots]
    pool = ParticipantPool.empty(len(applicant_slots), len(reviewer_slots))
    for i, slots in enumerate(applicant_slots):
        pool.with_availability("Applicant", i, slots)
    for i, slots in enumerate(reviewer_slots):
        pool.with_availability("Reviewer", i, slots)
    return pool


def random_pool(rng: random.Random, *, applicants: int, reviewers: int, slots: int,
                applicant_picks: int, reviewer_picks: int) -> ParticipantPool:
    return make_pool(
        [rng.sample(range(slots), applicant_picks) for _ in range(applicants)],
        [rng.sample(range(slots), reviewer_picks) for _ in range(reviewers)],
    )


def make_calendar(num_slots: int, concurrency_factor: int = 1, required: int = 2):
    return build_calendar(num_slots, concurrency_factor, required)
