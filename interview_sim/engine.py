from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Set

from .config import SimulationSettings
from .domain import AssignmentPair, ParticipantPool, Slot, SlotCalendar, workloads
from .heuristics.applicants import Placement, assign_applicants, repair_applicants
from .heuristics.reviewers import ReviewerPair, assign_reviewers, balance_workload
from .invariants import check_invariants

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BookingResult:
    """What a completed run did. Runs that break an invariant raise instead of returning."""

    placements: List[Placement] = field(default_factory=list)
    added_reviewer_pairs: FrozenSet[ReviewerPair] = frozenset()
    unbooked_applicants: List[int] = field(default_factory=list)
    workloads: Dict[int, int] = field(default_factory=dict)
    swaps: int = 0


class BookingEngine:
    """Greedy booking with displacement repair and reviewer load balancing.

    One engine call mutates the calendar in place through three passes:
    applicants (greedy, then displacement repair), then reviewers (assign,
    then balance). The calendar is checked afterwards and an
    InvariantViolationError aborts the run.
    """

    def __init__(self, settings: Optional[SimulationSettings] = None, rng: Optional[random.Random] = None):
        self.settings = settings or SimulationSettings()
        self.rng = rng or random.Random(self.settings.random_seed)

    @property
    def restricted(self) -> bool:
        return self.settings.eviction_policy == "unbooked_only"

    # Individual passes, exposed so callers can run part of the pipeline on a prepared calendar.

    def assign_applicants(self, pool: ParticipantPool, calendar: SlotCalendar) -> int:
        return assign_applicants(pool, calendar, self.rng)

    def repair_applicants(self, pool: ParticipantPool, calendar: SlotCalendar) -> List[Placement]:
        evictable: Optional[Set[int]] = None
        if self.restricted:
            booked = calendar.booked_applicants()
            evictable = {a for a in pool.responsive_applicants() if a not in booked}
        return repair_applicants(pool, calendar, self.rng,
                                 max_depth=self.settings.displacement_depth, evictable=evictable)

    def assign_reviewers(self, pool: ParticipantPool, calendar: SlotCalendar) -> Set[ReviewerPair]:
        return assign_reviewers(pool, calendar, self.rng)

    def balance_workload(self, pool: ParticipantPool, calendar: SlotCalendar, added: Set[ReviewerPair]) -> int:
        return balance_workload(pool, calendar, added, self.rng, rounds=self.settings.balance_rounds)

    def run(self, pool: ParticipantPool, calendar: SlotCalendar) -> BookingResult:
        run_start = calendar.assignment_pairs()

        filled = self.assign_applicants(pool, calendar)
        pre_repair = calendar.assignment_pairs()
        placements = self.repair_applicants(pool, calendar)
        added = self.assign_reviewers(pool, calendar)
        swaps = self.balance_workload(pool, calendar, added)

        # Under "any" eviction, greedy bookings from this run may be bumped; only earlier runs are protected
        protected: Set[AssignmentPair] = pre_repair if self.restricted else run_start
        check_invariants(pool, calendar, protected)

        booked = calendar.booked_applicants()
        unbooked = [a for a in pool.responsive_applicants() if a not in booked]
        loads = workloads(pool.responsive_reviewers(), calendar.slots)
        logger.debug(
            "Booking run finished | greedy_filled=%s | repaired=%s | unbooked=%s | reviewer_seats_added=%s | swaps=%s",
            filled, sum(1 for p in placements if p.placed), len(unbooked), len(added), swaps,
        )
        return BookingResult(
            placements=placements,
            added_reviewer_pairs=frozenset(added),
            unbooked_applicants=unbooked,
            workloads=loads,
            swaps=swaps,
        )


def run(participants: ParticipantPool, slots: List[Slot], concurrency_factor: int,
        required_reviewers_per_slot: int, settings: Optional[SimulationSettings] = None,
        seed: Optional[int] = None) -> BookingResult:
    """Book `slots` in place and return the BookingResult.

    A run that leaves the calendar illegal does not return: the
    InvariantViolationError naming the offending slot and participant
    propagates to the caller.
    """
    calendar = SlotCalendar(slots=slots, concurrency_factor=concurrency_factor,
                            required_reviewers=required_reviewers_per_slot)
    cfg = settings or SimulationSettings()
    rng = random.Random(cfg.random_seed if seed is None else int(seed))
    return BookingEngine(cfg, rng).run(participants, calendar)
