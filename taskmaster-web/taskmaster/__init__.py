"""TaskMaster: retail missions, team roster and shift schedules for Streamlit."""
