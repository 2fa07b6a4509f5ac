"""Monte Carlo driver: repeat the booking pipeline and average the outcome.

Each repetition builds its own pool and calendar from a seeded RNG, so
repetitions share no state and can run in separate processes.
"""

from __future__ import annotations

import logging
import random
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from functools import partial
from typing import Dict, List, Optional
from uuid import uuid4

import pandas as pd

from .config import SimulationSettings, check_feasibility
from .engine import BookingEngine
from .errors import InvariantViolationError
from .metrics import RunMetrics, collect_metrics
from .preprocess.availability import build_pool, reask_non_responders
from .preprocess.calendar import build_calendar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepetitionOutcome:
    seed: int
    metrics: Optional[RunMetrics] = None
    error: Optional[str] = None
    booking_runs: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SimulationSummary:
    settings: SimulationSettings
    runs: pd.DataFrame
    means: Dict[str, float] = field(default_factory=dict)
    failures: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return int(self.runs["ok"].sum()) if not self.runs.empty else 0


def run_repetition(cfg: SimulationSettings, seed: int) -> RepetitionOutcome:
    rng = random.Random(seed)
    pool = build_pool(cfg, rng)
    calendar = build_calendar(cfg.num_timeslots, cfg.concurrency_factor, cfg.reviewers_per_interview)
    engine = BookingEngine(cfg, rng)

    booking_runs = 0
    try:
        engine.run(pool, calendar)
        booking_runs += 1
        for _ in range(cfg.followup_rounds):
            reask_non_responders(pool, cfg, rng)
            engine.run(pool, calendar)
            booking_runs += 1
    except InvariantViolationError as e:
        logger.error("Repetition aborted | seed=%s | booking_run=%s | %s", seed, booking_runs, e)
        return RepetitionOutcome(seed=seed, error=str(e), booking_runs=booking_runs)

    return RepetitionOutcome(seed=seed, metrics=collect_metrics(pool, calendar), booking_runs=booking_runs)


def _outcomes_frame(outcomes: List[RepetitionOutcome]) -> pd.DataFrame:
    rows = []
    for o in outcomes:
        row = {"seed": o.seed, "ok": o.ok, "booking_runs": o.booking_runs, "error": o.error or ""}
        if o.metrics is not None:
            row.update(o.metrics.to_dict())
        rows.append(row)
    return pd.DataFrame(rows)


def simulate(cfg: SimulationSettings) -> SimulationSummary:
    check_feasibility(cfg)

    run_id = str(uuid4())
    seeds = [cfg.random_seed + i for i in range(cfg.repetitions)]
    logger.info(
        "Simulation started | run_id=%s | repetitions=%s | applicants=%s | reviewers=%s | slots=%s | workers=%s",
        run_id, cfg.repetitions, cfg.num_applicants, cfg.num_reviewers, cfg.num_timeslots, cfg.workers,
    )

    if cfg.workers > 1:
        with ProcessPoolExecutor(max_workers=cfg.workers) as ex:
            outcomes = list(ex.map(partial(run_repetition, cfg), seeds))
    else:
        outcomes = [run_repetition(cfg, s) for s in seeds]

    runs = _outcomes_frame(outcomes)
    failures = [f"seed={o.seed}: {o.error}" for o in outcomes if not o.ok]

    means: Dict[str, float] = {}
    ok_runs = runs[runs["ok"]] if not runs.empty else runs
    if not ok_runs.empty:
        metric_cols = [c for c in RunMetrics.__dataclass_fields__ if c in ok_runs.columns]
        means = {c: float(v) for c, v in ok_runs[metric_cols].mean().items()}

    logger.info(
        "Simulation completed | run_id=%s | ok=%s | failed=%s | pct_applicants_booked=%.4f | pct_slots_full=%.4f",
        run_id, len(outcomes) - len(failures), len(failures),
        means.get("pct_applicants_booked", 0.0), means.get("pct_slots_full", 0.0),
    )
    return SimulationSummary(settings=cfg, runs=runs, means=means, failures=failures)
