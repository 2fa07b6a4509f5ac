from __future__ import annotations

import pandas as pd
import pytest

from interview_sim.config import SimulationSettings
from interview_sim.engine import BookingEngine
from interview_sim.errors import InfeasibleConfigError, InvariantViolationError
from interview_sim.simulate import run_repetition, simulate


def _small_settings(**overrides) -> SimulationSettings:
    defaults = {
        "num_applicants": 12,
        "num_timeslots": 16,
        "num_reviewers": 8,
        "reviewer_choose_count": 5,
        "repetitions": 6,
        "random_seed": 7,
    }
    defaults.update(overrides)
    return SimulationSettings(**defaults)


def test_simulate_produces_one_row_per_repetition() -> None:
    summary = simulate(_small_settings())
    assert len(summary.runs) == 6
    assert summary.failures == []
    assert summary.succeeded == 6
    assert list(summary.runs["seed"]) == [7, 8, 9, 10, 11, 12]
    for key in ("pct_applicants_booked", "pct_slots_full"):
        assert 0.0 <= summary.means[key] <= 1.0


def test_simulate_is_deterministic_for_same_settings() -> None:
    cfg = _small_settings(concurrency_factor=2)
    first = simulate(cfg)
    second = simulate(cfg)
    pd.testing.assert_frame_equal(first.runs, second.runs)
    assert first.means == second.means


def test_parallel_repetitions_match_sequential() -> None:
    sequential = simulate(_small_settings())
    parallel = simulate(_small_settings(workers=2))
    pd.testing.assert_frame_equal(sequential.runs, parallel.runs)


def test_infeasible_settings_abort_before_running() -> None:
    with pytest.raises(InfeasibleConfigError):
        simulate(_small_settings(num_applicants=20))


def test_followup_rounds_rerun_booking() -> None:
    outcome = run_repetition(_small_settings(followup_rounds=2, applicant_response_rate=0.5), seed=3)
    assert outcome.ok
    assert outcome.booking_runs == 3


def test_followups_do_not_reduce_bookings() -> None:
    base = simulate(_small_settings(applicant_response_rate=0.5, repetitions=10))
    more = simulate(_small_settings(applicant_response_rate=0.5, repetitions=10, followup_rounds=1))
    assert more.succeeded == 10
    assert (more.runs["booked_applicants"] >= base.runs["booked_applicants"]).all()
    assert more.means["booked_applicants"] >= base.means["booked_applicants"]


def test_invariant_violation_fails_only_that_repetition(monkeypatch) -> None:
    real_run = BookingEngine.run
    calls = []

    def _fail_second(self, pool, calendar):
        calls.append(1)
        if len(calls) == 2:
            raise InvariantViolationError(0, "Applicant #0", "previously committed booking was dropped")
        return real_run(self, pool, calendar)

    monkeypatch.setattr(BookingEngine, "run", _fail_second)
    summary = simulate(_small_settings(repetitions=3))
    assert summary.succeeded == 2
    assert len(summary.failures) == 1
    assert summary.failures[0].startswith("seed=8:")
    assert "slot=0" in summary.failures[0]
    assert "Applicant #0" in summary.failures[0]
    assert list(summary.runs["ok"]) == [True, False, True]
    assert 0.0 <= summary.means["pct_applicants_booked"] <= 1.0
