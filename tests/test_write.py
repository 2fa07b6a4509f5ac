from __future__ import annotations

import pandas as pd

from interview_sim.config import SimulationSettings
from interview_sim.io.write import fmt_percent, format_summary, make_assignment_csv, make_excel_report
from interview_sim.simulate import simulate

from helpers import make_calendar, make_pool


def _summary():
    cfg = SimulationSettings(num_applicants=10, num_timeslots=12, num_reviewers=6,
                             reviewer_choose_count=5, repetitions=3)
    return simulate(cfg)


def test_fmt_percent() -> None:
    assert fmt_percent(0.5) == "50.00%"
    assert fmt_percent(2 / 3) == "66.67%"
    assert fmt_percent(0) == "0.00%"


def test_assignment_csv_lists_every_seat() -> None:
    pool = make_pool([[0], [1]], [[0, 1], [0]])
    cal = make_calendar(3, required=2)
    cal.slots[0].applicant = 0
    cal.slots[0].reviewers = [0, 1]
    cal.slots[1].applicant = 1
    text = make_assignment_csv(pool, cal)
    lines = text.strip().splitlines()
    assert lines[0] == "slot_id,role,participant"
    assert lines[1:] == [
        "0,Applicant,Applicant #0",
        "0,Reviewer,Reviewer #0",
        "0,Reviewer,Reviewer #1",
        "1,Applicant,Applicant #1",
    ]


def test_format_summary_headlines() -> None:
    text = format_summary(_summary())
    assert "Repetitions: 3 (3 ok, 0 failed)" in text
    assert "% of responsive applicants booked:" in text
    assert "% of slots with enough reviewers:" in text


def test_excel_report_sheets(tmp_path) -> None:
    path = make_excel_report(_summary(), path=str(tmp_path / "out" / "report.xlsx"))
    xls = pd.ExcelFile(path)
    assert xls.sheet_names == ["Runs", "Summary", "Failures"]
    runs = pd.read_excel(xls, "Runs")
    assert len(runs) == 3
    summary = pd.read_excel(xls, "Summary")
    assert "mean_pct_applicants_booked" in set(summary["Key"])
