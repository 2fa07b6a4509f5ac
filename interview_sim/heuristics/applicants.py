from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import AbstractSet, List, Optional, Tuple
from ..domain import ParticipantPool, Slot, SlotCalendar

logger = logging.getLogger(__name__)

DEFAULT_DISPLACEMENT_DEPTH = 10

@dataclass(frozen=True)
class Placement:
    applicant: int
    placed: bool                    # did `applicant` end up with a slot
    stranded: Optional[int]         # whoever the chain left without a slot, if anyone
    max_depth: int
    evictions: int


def assign_applicants(pool: ParticipantPool, calendar: SlotCalendar, rng: random.Random) -> int:
    """
    Greedy pass: visit slots in random order and give each open slot a
    not-yet-booked applicant who said they can make it.

    - The pick is uniform among eligible applicants, so low indices are not favoured.
    - Slots nobody can make stay empty; that's a normal outcome.
    Returns the number of slots filled.
    """
    order = list(calendar.slots)
    rng.shuffle(order)
    booked = calendar.booked_applicants()
    filled = 0
    for slot in order:
        if slot.in_use:
            continue
        candidates = [a.sequence for a in pool.applicants
                      if a.sequence not in booked and a.available_for(slot.sequence)]
        if not candidates:
            continue
        pick = rng.choice(candidates)
        slot.applicant = pick
        booked.add(pick)
        filled += 1
    return filled


def _slots_for(pool: ParticipantPool, calendar: SlotCalendar, applicant: int) -> List[Slot]:
    n = len(calendar)
    return [calendar.slots[t] for t in sorted(pool.applicants[applicant].availability) if 0 <= t < n]


def book_applicant(pool: ParticipantPool, calendar: SlotCalendar, applicant: int, rng: random.Random,
                   max_depth: int = DEFAULT_DISPLACEMENT_DEPTH,
                   evictable: Optional[AbstractSet[int]] = None) -> Placement:
    """
    Place one applicant, bumping someone else if every slot they can make is taken.

    The chain runs on an explicit stack of (applicant, depth):
      a. an empty slot in their availability -> book it, done;
      b. depth budget left -> take a random slot from their availability,
         evict its occupant, install this applicant, continue with the evictee at depth+1;
      c. budget spent -> that applicant stays unbooked.
    When `evictable` is given only those applicants may be bumped.
    There is no cycle detection: a chain can bounce the same people back and forth
    until the depth budget runs out.
    """
    pending: List[Tuple[int, int]] = [(applicant, 0)]
    deepest = 0
    evictions = 0
    stranded: Optional[int] = None

    while pending:
        current, depth = pending.pop()
        deepest = max(deepest, depth)
        options = _slots_for(pool, calendar, current)

        free = [s for s in options if s.empty]
        if free:
            rng.choice(free).applicant = current
            continue

        if depth >= max_depth:
            stranded = current
            continue

        if evictable is not None:
            options = [s for s in options if s.applicant in evictable]
        if not options:
            stranded = current
            continue

        target = rng.choice(options)
        evicted = target.applicant
        target.applicant = current
        evictions += 1
        pending.append((evicted, depth + 1))

    placed = calendar.slot_of_applicant(applicant) is not None
    return Placement(applicant=applicant, placed=placed, stranded=stranded,
                     max_depth=deepest, evictions=evictions)


def repair_applicants(pool: ParticipantPool, calendar: SlotCalendar, rng: random.Random,
                      max_depth: int = DEFAULT_DISPLACEMENT_DEPTH,
                      evictable: Optional[AbstractSet[int]] = None) -> List[Placement]:
    """Run a displacement chain for every responsive applicant the greedy pass left out."""
    booked = calendar.booked_applicants()
    waiting = [a for a in pool.responsive_applicants() if a not in booked]
    rng.shuffle(waiting)

    placements: List[Placement] = []
    for a in waiting:
        p = book_applicant(pool, calendar, a, rng, max_depth=max_depth, evictable=evictable)
        if p.stranded is not None:
            logger.debug("Displacement chain gave up | applicant=%s | stranded=%s | depth=%s | evictions=%s",
                         a, p.stranded, p.max_depth, p.evictions)
        placements.append(p)
    return placements
