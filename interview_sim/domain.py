from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Literal, Optional, Set, Tuple

ParticipantKind = Literal["Applicant", "Reviewer"]
# (slot id, role, participant index)
AssignmentPair = Tuple[int, ParticipantKind, int]

@dataclass
class Slot:
    sequence: int
    applicant: Optional[int] = None             # index into ParticipantPool.applicants
    reviewers: List[int] = field(default_factory=list)

    @property
    def in_use(self) -> bool:
        return self.applicant is not None

    @property
    def empty(self) -> bool:
        return not self.in_use

    def full(self, required: int) -> bool:
        return self.in_use and len(self.reviewers) == required

    def __str__(self) -> str:
        return f"Slot #{self.sequence} (applicant={self.applicant}, reviewers={self.reviewers})"

@dataclass(frozen=True)
class Participant:
    kind: ParticipantKind
    sequence: int
    availability: FrozenSet[int] = frozenset()

    @property
    def responded(self) -> bool:
        return len(self.availability) > 0

    def available_for(self, slot_id: int) -> bool:
        return slot_id in self.availability

    def __str__(self) -> str:
        return f"{self.kind} #{self.sequence}"

@dataclass
class ParticipantPool:
    applicants: List[Participant]
    reviewers: List[Participant]

    @classmethod
    def empty(cls, num_applicants: int, num_reviewers: int) -> "ParticipantPool":
        return cls(
            applicants=[Participant("Applicant", i) for i in range(num_applicants)],
            reviewers=[Participant("Reviewer", i) for i in range(num_reviewers)],
        )

    def members(self, kind: ParticipantKind) -> List[Participant]:
        return self.applicants if kind == "Applicant" else self.reviewers

    def with_availability(self, kind: ParticipantKind, index: int, slots: Iterable[int]) -> None:
        # Availability is read-only during booking; replace the record, never mutate it
        people = self.members(kind)
        people[index] = replace(people[index], availability=frozenset(slots))

    def responsive_applicants(self) -> List[int]:
        return [a.sequence for a in self.applicants if a.responded]

    def responsive_reviewers(self) -> List[int]:
        return [r.sequence for r in self.reviewers if r.responded]

    def label(self, kind: ParticipantKind, index: int) -> str:
        return str(self.members(kind)[index])

@dataclass
class SlotCalendar:
    slots: List[Slot]
    concurrency_factor: int = 1
    required_reviewers: int = 2

    def __post_init__(self):
        if self.concurrency_factor < 1:
            raise ValueError("concurrency_factor must be >= 1")
        for i, s in enumerate(self.slots):
            if s.sequence != i:
                raise ValueError(f"Slot at position {i} has sequence {s.sequence}")

    def __len__(self) -> int:
        return len(self.slots)

    def band_of(self, slot_id: int) -> int:
        return slot_id // self.concurrency_factor

    def band_slots(self, band: int) -> List[Slot]:
        lo = band * self.concurrency_factor
        return self.slots[lo:lo + self.concurrency_factor]

    def open_slots(self) -> List[Slot]:
        return [s for s in self.slots if s.empty]

    def in_use_slots(self) -> List[Slot]:
        return [s for s in self.slots if s.in_use]

    def booked_applicants(self) -> Set[int]:
        return {s.applicant for s in self.slots if s.applicant is not None}

    def slot_of_applicant(self, applicant: int) -> Optional[Slot]:
        return next((s for s in self.slots if s.applicant == applicant), None)

    def reviewer_in_band(self, reviewer: int, band: int) -> bool:
        return any(reviewer in s.reviewers for s in self.band_slots(band))

    def is_full(self, slot: Slot) -> bool:
        return slot.full(self.required_reviewers)

    def assignment_pairs(self) -> Set[AssignmentPair]:
        pairs: Set[AssignmentPair] = set()
        for s in self.slots:
            if s.applicant is not None:
                pairs.add((s.sequence, "Applicant", s.applicant))
            for r in s.reviewers:
                pairs.add((s.sequence, "Reviewer", r))
        return pairs


def workload(reviewer: int, slots: Iterable[Slot]) -> int:
    """Number of slots the reviewer sits in."""
    return sum(1 for s in slots if reviewer in s.reviewers)


def workloads(reviewers: Iterable[int], slots: Iterable[Slot]) -> Dict[int, int]:
    slots = list(slots)
    counts = {r: 0 for r in reviewers}
    for s in slots:
        for r in s.reviewers:
            if r in counts:
                counts[r] += 1
    return counts
