from __future__ import annotations
import logging
import random
from typing import FrozenSet, List
from ..config import SimulationSettings
from ..domain import ParticipantKind, ParticipantPool

logger = logging.getLogger(__name__)

# Offsets from the requested pick count, one entry per equally likely outcome.
# Most people pick exactly what they're asked to; some under- or over-pick.
CHOOSE_COUNT_OFFSETS: tuple[int, ...] = (-2, -1) + (0,) * 12 + (1, 1, 2, 2, 3)

def randomized_choose_count(ask: int, rng: random.Random, num_timeslots: int | None = None) -> int:
    n = ask + rng.choice(CHOOSE_COUNT_OFFSETS)
    n = max(0, n)
    if num_timeslots is not None:
        n = min(n, num_timeslots)
    return n

def populate_availability(pick_target: int, num_timeslots: int, rng: random.Random,
                          noisy: bool = True) -> FrozenSet[int]:
    """Sample the slots one participant says they can make."""
    count = randomized_choose_count(pick_target, rng, num_timeslots) if noisy else min(pick_target, num_timeslots)
    return frozenset(rng.sample(range(num_timeslots), count))

def responds(rate: float, rng: random.Random) -> bool:
    return rng.random() < rate

def _gate_and_populate(pool: ParticipantPool, kind: ParticipantKind, indices: List[int],
                       cfg: SimulationSettings, rng: random.Random) -> int:
    answered = 0
    for i in indices:
        if not responds(cfg.response_rate(kind), rng):
            continue
        slots = populate_availability(cfg.choose_count(kind), cfg.num_timeslots, rng, cfg.noisy_choose_count)
        pool.with_availability(kind, i, slots)
        if slots:
            answered += 1
    return answered

def build_pool(cfg: SimulationSettings, rng: random.Random) -> ParticipantPool:
    pool = ParticipantPool.empty(cfg.num_applicants, cfg.num_reviewers)
    apps = _gate_and_populate(pool, "Applicant", list(range(cfg.num_applicants)), cfg, rng)
    revs = _gate_and_populate(pool, "Reviewer", list(range(cfg.num_reviewers)), cfg, rng)
    logger.debug("Availability collected | applicants=%s/%s | reviewers=%s/%s",
                 apps, cfg.num_applicants, revs, cfg.num_reviewers)
    return pool

def reask_non_responders(pool: ParticipantPool, cfg: SimulationSettings, rng: random.Random) -> int:
    """Send the availability request again to everyone who hasn't answered yet."""
    answered = 0
    for kind in ("Applicant", "Reviewer"):
        silent = [p.sequence for p in pool.members(kind) if not p.responded]
        answered += _gate_and_populate(pool, kind, silent, cfg, rng)
    logger.debug("Follow-up availability request | newly_responsive=%s", answered)
    return answered
