from __future__ import annotations
from typing import Dict, Iterable, List
from ..domain import Slot, SlotCalendar

def build_calendar(num_timeslots: int, concurrency_factor: int = 1, required_reviewers: int = 2) -> SlotCalendar:
    slots = [Slot(sequence=i) for i in range(num_timeslots)]
    return SlotCalendar(slots=slots, concurrency_factor=concurrency_factor, required_reviewers=required_reviewers)

def group_bands(slots: Iterable[Slot], concurrency_factor: int = 1) -> Dict[int, List[int]]:
    """Slots that share a band happen at the same time."""
    if concurrency_factor < 1:
        raise ValueError("concurrency_factor must be >= 1")
    bands: Dict[int, List[int]] = {}
    for s in slots:
        bands.setdefault(s.sequence // concurrency_factor, []).append(s.sequence)
    for band in bands:
        bands[band].sort()
    return bands
