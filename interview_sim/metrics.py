from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Dict
import numpy as np
from .domain import ParticipantPool, SlotCalendar, workloads

@dataclass(frozen=True)
class RunMetrics:
    responsive_applicants: int
    booked_applicants: int
    pct_applicants_booked: float
    slots_in_use: int
    slots_full: int
    pct_slots_full: float
    responsive_reviewers: int
    workload_mean: float
    workload_std: float
    workload_min: int
    workload_max: int

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def workload_array(pool: ParticipantPool, calendar: SlotCalendar) -> np.ndarray:
    loads = workloads(pool.responsive_reviewers(), calendar.slots)
    return np.array(list(loads.values()), dtype=float)


def workload_std(pool: ParticipantPool, calendar: SlotCalendar) -> float:
    arr = workload_array(pool, calendar)
    return float(arr.std()) if arr.size else 0.0


def collect_metrics(pool: ParticipantPool, calendar: SlotCalendar) -> RunMetrics:
    responsive = pool.responsive_applicants()
    booked = len(calendar.booked_applicants())
    in_use = calendar.in_use_slots()
    full = sum(1 for s in in_use if calendar.is_full(s))
    loads = workload_array(pool, calendar)

    return RunMetrics(
        responsive_applicants=len(responsive),
        booked_applicants=booked,
        pct_applicants_booked=(booked / len(responsive)) if responsive else 0.0,
        slots_in_use=len(in_use),
        slots_full=full,
        pct_slots_full=(full / len(in_use)) if in_use else 0.0,
        responsive_reviewers=int(loads.size),
        workload_mean=float(loads.mean()) if loads.size else 0.0,
        workload_std=float(loads.std()) if loads.size else 0.0,
        workload_min=int(loads.min()) if loads.size else 0,
        workload_max=int(loads.max()) if loads.size else 0,
    )
