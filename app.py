# app.py  — Home
import streamlit as st

from interview_sim.logger import configure_logging

configure_logging()

st.set_page_config(page_title="Interview Booking Simulator")

home = st.Page("pages/00_Home.py", title="Home")
simulator = st.Page("pages/01_Simulator.py", title="Run Simulation")

nav = st.navigation([home, simulator])  # shows in the sidebar by default
nav.run()
