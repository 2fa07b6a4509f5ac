import streamlit as st

st.title("🏠 Home")

has_results = "last_summary" in st.session_state

if has_results:
    st.success("Results from your last simulation are still loaded.")
else:
    st.info("No simulation has been run in this session yet.")

st.subheader("What this does")
st.write(
    "Simulates sending an availability request to applicants and reviewers, "
    "booking interviews with a greedy-with-displacement heuristic, and measuring "
    "how many applicants get a slot and how many interviews get a full reviewer pair."
)

if st.button("Open simulator →", type="primary"):
    st.switch_page("pages/01_Simulator.py")
