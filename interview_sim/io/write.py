from __future__ import annotations
import os
import csv
from io import StringIO
from typing import List
import pandas as pd
from ..domain import ParticipantPool, SlotCalendar
from ..simulate import SimulationSummary

def fmt_percent(num: float) -> str:
    return f"{num * 100:.2f}%"

def make_assignment_csv(pool: ParticipantPool, calendar: SlotCalendar) -> str:
    out = StringIO()
    w = csv.writer(out)
    w.writerow(["slot_id", "role", "participant"])
    for s in calendar.slots:
        if s.applicant is not None:
            w.writerow([s.sequence, "Applicant", pool.label("Applicant", s.applicant)])
        for r in s.reviewers:
            w.writerow([s.sequence, "Reviewer", pool.label("Reviewer", r)])
    return out.getvalue()

def format_summary(summary: SimulationSummary) -> str:
    m = summary.means
    cfg = summary.settings
    lines: List[str] = [
        f"Repetitions: {cfg.repetitions} ({summary.succeeded} ok, {len(summary.failures)} failed)",
    ]
    if m:
        lines += [
            f"% of responsive applicants booked: {fmt_percent(m['pct_applicants_booked'])}",
            f"% of slots with enough reviewers: {fmt_percent(m['pct_slots_full'])}",
            f"Reviewer workload: mean {m['workload_mean']:.2f}, std {m['workload_std']:.2f}, "
            f"max {m['workload_max']:.2f}",
        ]
    for f in summary.failures[:5]:
        lines.append(f"FAILED {f}")
    if len(summary.failures) > 5:
        lines.append(f"... and {len(summary.failures) - 5} more failures")
    return "\n".join(lines)

def make_excel_report(summary: SimulationSummary, *, path: str) -> str:
    # 1) Runs (one row per repetition)
    df_runs = summary.runs

    # 2) Summary (settings + averaged metrics)
    rows = [{"Key": k, "Value": v} for k, v in summary.settings.model_dump().items()]
    rows += [{"Key": f"mean_{k}", "Value": v} for k, v in summary.means.items()]
    df_summary = pd.DataFrame(rows)

    # 3) Failures
    df_fail = pd.DataFrame({"Failure": summary.failures})

    dirpath = os.path.dirname(path)
    if dirpath:
        os.makedirs(dirpath, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df_runs.to_excel(writer, sheet_name="Runs", index=False)
        df_summary.to_excel(writer, sheet_name="Summary", index=False)
        df_fail.to_excel(writer, sheet_name="Failures", index=False)
    return path
