from __future__ import annotations
import random
from datetime import datetime
import pandas as pd
import streamlit as st
import altair as alt
from pydantic import ValidationError

from interview_sim.config import SimulationSettings
from interview_sim.engine import BookingEngine
from interview_sim.errors import InfeasibleConfigError, InvariantViolationError
from interview_sim.io.write import format_summary, make_assignment_csv, make_excel_report
from interview_sim.preprocess.availability import build_pool
from interview_sim.preprocess.calendar import build_calendar
from interview_sim.simulate import simulate

# ---------------------------
# Utilities
# ---------------------------
def _mark_dirty():
    """Mark results as stale due to a setting change."""
    st.session_state["needs_rerun"] = True

st.title("Interview booking simulation")

# ---------------------------
# Sidebar
# ---------------------------
with st.sidebar:
    with st.expander("Population", expanded=True):
        num_applicants = st.number_input("Applicants", 0, 2000, 70, key="num_applicants", on_change=_mark_dirty)
        num_timeslots = st.number_input("Timeslots", 1, 2000, 80, key="num_timeslots", on_change=_mark_dirty)
        num_reviewers = st.number_input("Reviewers", 0, 1000, 30, key="num_reviewers", on_change=_mark_dirty)
        reviewers_per_interview = st.number_input("Reviewers per interview", 1, 5, 2, key="rpi", on_change=_mark_dirty)
        concurrency_factor = st.number_input("Simultaneous slots (per band)", 1, 20, 1, key="cf", on_change=_mark_dirty)

    with st.expander("Availability request", expanded=False):
        applicant_choose = st.number_input("Applicant picks", 1, 20, 2, key="app_choose", on_change=_mark_dirty)
        reviewer_choose = st.number_input("Reviewer picks", 1, 50, 5, key="rev_choose", on_change=_mark_dirty)
        applicant_rate = st.slider("Applicant response rate", 0.0, 1.0, 0.90, 0.01, key="app_rate", on_change=_mark_dirty)
        reviewer_rate = st.slider("Reviewer response rate", 0.0, 1.0, 0.90, 0.01, key="rev_rate", on_change=_mark_dirty)
        noisy = st.checkbox("People don't always pick the number asked", True, key="noisy", on_change=_mark_dirty)
        followup_rounds = st.number_input("Follow-up requests", 0, 5, 0, key="followups", on_change=_mark_dirty)

    with st.expander("Heuristic", expanded=False):
        displacement_depth = st.number_input("Displacement depth", 0, 50, 10, key="depth", on_change=_mark_dirty)
        balance_rounds = st.number_input("Balance rounds", 0, 50, 10, key="rounds", on_change=_mark_dirty)
        eviction_policy = st.selectbox("Eviction policy", ["unbooked_only", "any"], index=0, key="evict", on_change=_mark_dirty)

    repetitions = st.number_input("Repetitions", 1, 5000, 100, key="reps", on_change=_mark_dirty)
    random_seed = st.number_input("Random seed", 0, 2**31 - 1, 0, key="seed", on_change=_mark_dirty)
    workers = st.number_input("Worker processes", 1, 32, 1, key="workers", on_change=_mark_dirty)

try:
    cfg = SimulationSettings(
        num_applicants=int(num_applicants),
        num_timeslots=int(num_timeslots),
        num_reviewers=int(num_reviewers),
        reviewers_per_interview=int(reviewers_per_interview),
        applicant_choose_count=int(applicant_choose),
        reviewer_choose_count=int(reviewer_choose),
        applicant_response_rate=float(applicant_rate),
        reviewer_response_rate=float(reviewer_rate),
        noisy_choose_count=bool(noisy),
        concurrency_factor=int(concurrency_factor),
        displacement_depth=int(displacement_depth),
        balance_rounds=int(balance_rounds),
        eviction_policy=eviction_policy,
        followup_rounds=int(followup_rounds),
        repetitions=int(repetitions),
        random_seed=int(random_seed),
        workers=int(workers),
    )
except ValidationError as e:
    st.error(f"Invalid settings: {e}")
    st.stop()

# ---------------------------
# Run
# ---------------------------
run_clicked = st.button("Run simulation", type="primary")

if run_clicked:
    try:
        with st.spinner(f"Running {cfg.repetitions} repetitions…"):
            summary = simulate(cfg)
    except InfeasibleConfigError as e:
        st.error(str(e))
        st.stop()
    st.session_state["last_summary"] = summary
    st.session_state["last_ts"] = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    st.session_state["needs_rerun"] = False

if st.session_state.get("needs_rerun") and st.session_state.get("last_summary") and not run_clicked:
    st.warning("Settings changed since the last run. Results below are stale — click **Run simulation** to refresh.")

summary = st.session_state.get("last_summary")
if summary is None:
    st.info("Click **Run simulation** to produce results.")
    st.stop()

st.subheader("Results")
m = summary.means
c1, c2, c3, c4 = st.columns(4)
with c1:
    st.metric("Applicants booked", f"{m.get('pct_applicants_booked', 0.0) * 100:.1f}%")
with c2:
    st.metric("Slots fully staffed", f"{m.get('pct_slots_full', 0.0) * 100:.1f}%")
with c3:
    st.metric("Workload std", f"{m.get('workload_std', 0.0):.2f}")
with c4:
    st.metric("Failed repetitions", len(summary.failures))

st.code(format_summary(summary), language="text")

excel_path = "simulation_report.xlsx"
try:
    out_path = make_excel_report(summary, path=excel_path)
    with open(out_path, "rb") as fh:
        excel_bytes = fh.read()
    st.download_button(
        "⬇️ Download Excel Report (.xlsx)",
        excel_bytes,
        file_name="simulation_report.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        key=f"dl_xlsx_{st.session_state.get('last_ts', '')}",
    )
except OSError as e:
    st.error(f"Failed to prepare Excel report: {e}")

# ---------------------------
# Per-repetition charts
# ---------------------------
ok_runs = summary.runs[summary.runs["ok"]]
if not ok_runs.empty:
    df_plot = pd.DataFrame({
        "Seed": ok_runs["seed"],
        "Applicants booked (%)": ok_runs["pct_applicants_booked"] * 100,
        "Slots full (%)": ok_runs["pct_slots_full"] * 100,
        "Workload std": ok_runs["workload_std"],
    })
    coverage = df_plot.melt(id_vars=["Seed"], value_vars=["Applicants booked (%)", "Slots full (%)"],
                            var_name="Metric", value_name="Percent")
    st.altair_chart(
        alt.Chart(coverage).mark_bar(opacity=0.6).encode(
            x=alt.X("Percent:Q", bin=alt.Bin(maxbins=30), title="% per repetition"),
            y=alt.Y("count():Q", stack=None, title="Repetitions"),
            color="Metric:N",
        ).properties(width="container", height=240)
    )
    st.altair_chart(
        alt.Chart(df_plot).mark_bar().encode(
            x=alt.X("Workload std:Q", bin=alt.Bin(maxbins=30)),
            y=alt.Y("count():Q", title="Repetitions"),
        ).properties(width="container", height=200)
    )

with st.expander("Show run table"):
    st.dataframe(summary.runs, width="stretch")

# ---------------------------
# One sample calendar
# ---------------------------
with st.expander("Sample calendar (first seed)"):
    cfg_run = summary.settings
    rng = random.Random(cfg_run.random_seed)
    pool = build_pool(cfg_run, rng)
    calendar = build_calendar(cfg_run.num_timeslots, cfg_run.concurrency_factor, cfg_run.reviewers_per_interview)
    try:
        BookingEngine(cfg_run, rng).run(pool, calendar)
    except InvariantViolationError as e:
        st.error(str(e))
    else:
        st.dataframe(pd.DataFrame([
            {"Slot": s.sequence, "Band": calendar.band_of(s.sequence),
             "Applicant": "" if s.applicant is None else pool.label("Applicant", s.applicant),
             "Reviewers": ", ".join(pool.label("Reviewer", r) for r in s.reviewers),
             "Full": calendar.is_full(s)}
            for s in calendar.slots
        ]), width="stretch")
        st.download_button("⬇️ Download assignments (.csv)", make_assignment_csv(pool, calendar),
                           file_name="assignments.csv", mime="text/csv")
