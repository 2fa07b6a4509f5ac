from __future__ import annotations
from collections import defaultdict
from typing import Dict, Iterable, List, Set
from .domain import AssignmentPair, ParticipantPool, SlotCalendar
from .errors import InvariantViolationError


def find_violations(pool: ParticipantPool, calendar: SlotCalendar,
                    protected: Iterable[AssignmentPair] = ()) -> List[InvariantViolationError]:
    """Every structural problem in the calendar, in slot order; empty when the state is legal."""
    out: List[InvariantViolationError] = []
    seen_applicant: Dict[int, int] = {}
    band_seats: Dict[tuple[int, int], List[int]] = defaultdict(list)

    for s in calendar.slots:
        t = s.sequence
        if s.applicant is not None:
            who = pool.label("Applicant", s.applicant)
            if not pool.applicants[s.applicant].available_for(t):
                out.append(InvariantViolationError(t, who, "applicant is not available for this slot"))
            if s.applicant in seen_applicant:
                out.append(InvariantViolationError(
                    t, who, f"applicant is also booked in slot {seen_applicant[s.applicant]}"))
            else:
                seen_applicant[s.applicant] = t

        if len(s.reviewers) > calendar.required_reviewers:
            out.append(InvariantViolationError(
                t, None, f"{len(s.reviewers)} reviewers exceeds required {calendar.required_reviewers}"))
        counted: Set[int] = set()
        for r in s.reviewers:
            who = pool.label("Reviewer", r)
            if r in counted:
                out.append(InvariantViolationError(t, who, "reviewer appears twice in the same slot"))
                continue
            counted.add(r)
            if not pool.reviewers[r].available_for(t):
                out.append(InvariantViolationError(t, who, "reviewer is not available for this slot"))
            band_seats[(calendar.band_of(t), r)].append(t)

    for (band, r), seats in sorted(band_seats.items()):
        if len(seats) > 1:
            out.append(InvariantViolationError(
                seats[1], pool.label("Reviewer", r),
                f"reviewer double-booked in band {band} (slots {seats})"))

    current = calendar.assignment_pairs()
    for t, kind, idx in sorted(set(protected) - current):
        out.append(InvariantViolationError(
            t, pool.label(kind, idx), "previously committed booking was dropped"))
    return out


def check_invariants(pool: ParticipantPool, calendar: SlotCalendar,
                     protected: Iterable[AssignmentPair] = ()) -> None:
    """Raise on the first violation; a violating run must not be counted."""
    violations = find_violations(pool, calendar, protected)
    if violations:
        raise violations[0]
