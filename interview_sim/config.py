from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field

from .errors import InfeasibleConfigError

class SimulationSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Population
    num_applicants: int = Field(70, ge=0)
    num_timeslots: int = Field(80, ge=1)
    num_reviewers: int = Field(30, ge=0)
    reviewers_per_interview: int = Field(2, ge=1)

    # Availability request
    applicant_choose_count: int = Field(2, ge=1)
    reviewer_choose_count: int = Field(5, ge=1)
    applicant_response_rate: float = Field(0.90, ge=0.0, le=1.0)
    reviewer_response_rate: float = Field(0.90, ge=0.0, le=1.0)
    noisy_choose_count: bool = True             # people don't always pick what they're asked to

    # Calendar
    concurrency_factor: int = Field(1, ge=1)    # slots per band (simultaneous interviews)

    # Booking heuristics
    displacement_depth: int = Field(10, ge=0)
    balance_rounds: int = Field(10, ge=0)
    eviction_policy: str = Field("unbooked_only", pattern="^(unbooked_only|any)$")
    followup_rounds: int = Field(0, ge=0)       # re-ask non-responders, rebook on the same calendar

    # Monte Carlo controls
    repetitions: int = Field(100, ge=1)
    random_seed: int = Field(0, ge=0)
    workers: int = Field(1, ge=1)               # >1 = repetitions in a process pool

    def choose_count(self, kind: str) -> int:
        return self.applicant_choose_count if kind == "Applicant" else self.reviewer_choose_count

    def response_rate(self, kind: str) -> float:
        return self.applicant_response_rate if kind == "Applicant" else self.reviewer_response_rate


def check_feasibility(cfg: SimulationSettings) -> None:
    """Reject configurations that cannot possibly staff every interview.

    Runs once, before the first repetition; an infeasible configuration
    aborts the whole simulation.
    """
    if cfg.num_applicants > cfg.num_timeslots:
        raise InfeasibleConfigError("Not enough timeslots for all applicants to be interviewed.")
    if cfg.reviewers_per_interview > cfg.num_reviewers:
        raise InfeasibleConfigError(
            f"reviewers_per_interview={cfg.reviewers_per_interview} exceeds num_reviewers={cfg.num_reviewers}"
        )
    if cfg.num_reviewers * cfg.reviewer_choose_count < cfg.reviewers_per_interview * cfg.num_applicants:
        raise InfeasibleConfigError("Not enough reviewers to staff all the interviews.")
