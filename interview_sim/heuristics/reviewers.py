from __future__ import annotations
import logging
import math
import random
from typing import List, Set, Tuple
from ..domain import ParticipantPool, Slot, SlotCalendar, workloads

logger = logging.getLogger(__name__)

DEFAULT_BALANCE_ROUNDS = 10

ReviewerPair = Tuple[int, int]   # (slot id, reviewer index)


def eligible_reviewers(pool: ParticipantPool, calendar: SlotCalendar, slot: Slot) -> List[int]:
    """Reviewers who can make this slot and aren't sitting anywhere else in its band."""
    band = calendar.band_of(slot.sequence)
    return [r.sequence for r in pool.reviewers
            if r.available_for(slot.sequence) and not calendar.reviewer_in_band(r.sequence, band)]


def assign_reviewers(pool: ParticipantPool, calendar: SlotCalendar, rng: random.Random) -> Set[ReviewerPair]:
    """
    Fill the empty reviewer seats of every booked slot.

    Seats are filled one draw at a time and eligibility is recomputed per draw,
    since each pick changes who is still free in that band. A slot that runs out
    of eligible reviewers stays short. Returns the (slot, reviewer) pairs added.
    """
    required = calendar.required_reviewers
    todo = [s for s in calendar.slots if s.in_use and len(s.reviewers) < required]
    rng.shuffle(todo)

    added: Set[ReviewerPair] = set()
    for slot in todo:
        needed = required - len(slot.reviewers)
        for _ in range(needed):
            eligible = eligible_reviewers(pool, calendar, slot)
            if not eligible:
                break
            pick = rng.choice(eligible)
            slot.reviewers.append(pick)
            added.add((slot.sequence, pick))
    return added


def balance_workload(pool: ParticipantPool, calendar: SlotCalendar, added: Set[ReviewerPair],
                     rng: random.Random, rounds: int = DEFAULT_BALANCE_ROUNDS) -> int:
    """
    Move seats from overloaded reviewers to lighter ones.

    Each round recomputes loads and ceil(mean) over responsive reviewers. Every
    reviewer above that ceiling offers each seat it got in this run (pairs in
    `added`) to a random eligible reviewer whose live load is strictly lower
    than its own. Loads are updated as swaps happen. Seats outside
    `added` are never moved. `added` is updated in place to track the swaps.

    The round count is fixed; residual imbalance after the last round is expected.
    Returns the number of swaps made.
    """
    responsive = pool.responsive_reviewers()
    if not responsive:
        return 0

    swaps = 0
    for rnd in range(rounds):
        loads = workloads(responsive, calendar.slots)
        mean = sum(loads.values()) / len(loads)
        ceiling = math.ceil(mean)

        overloaded = [r for r in responsive if loads[r] > ceiling]
        rng.shuffle(overloaded)
        round_swaps = 0
        for r in overloaded:
            seats = sorted(t for (t, who) in added if who == r)
            rng.shuffle(seats)
            for t in seats:
                slot = calendar.slots[t]
                candidates = [c for c in eligible_reviewers(pool, calendar, slot)
                              if c != r and loads.get(c, 0) < loads[r]]
                if not candidates:
                    continue
                c = rng.choice(candidates)
                slot.reviewers[slot.reviewers.index(r)] = c
                loads[r] -= 1
                loads[c] = loads.get(c, 0) + 1
                added.discard((t, r))
                added.add((t, c))
                round_swaps += 1

        logger.debug("Workload balance round | round=%s | mean=%.3f | ceiling=%s | overloaded=%s | swaps=%s",
                     rnd, mean, ceiling, len(overloaded), round_swaps)
        swaps += round_swaps
    return swaps
