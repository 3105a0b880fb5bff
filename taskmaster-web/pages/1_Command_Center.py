import html

import pandas as pd
import streamlit as st

from taskmaster.ai import insights
from taskmaster.charts import status_donut, workload_bar
from taskmaster.filters import completion_rate
from taskmaster.insight_log import get_insight_call_stats, get_insight_calls
from taskmaster.models import TaskStatus
from taskmaster.session import get_store, render_sidebar, require_manager, show_banner
from taskmaster.theme import kpi_html, set_theme

set_theme(page_title="Command Center", page_icon="📈")
user = require_manager()
render_sidebar(user)
show_banner()

store = get_store()
tasks = list(store.tasks)
users = list(store.users)

head_l, head_r = st.columns([3, 1])
with head_l:
    st.title("📈 Manager Command Center")
with head_r:
    refresh = st.button("🧠 Refresh Insights", use_container_width=True, disabled=st.session_state.get("tm_insights_pending", False))

# Insights are regenerated whenever the mission list changes or on manual refresh
snapshot = tuple((t.id, t.status.value, t.assigned_to_id, t.due_date) for t in tasks)
if refresh or st.session_state.get("tm_insights_snapshot") != snapshot:
    st.session_state.tm_insights_pending = True
    with st.spinner("Analyzing team performance..."):
        st.session_state.tm_insights = insights.dashboard_insights(tasks, users, user_id=user.id)
    st.session_state.tm_insights_snapshot = snapshot
    st.session_state.tm_insights_pending = False

st.subheader("AI Strategic Analysis")
text = st.session_state.get("tm_insights")
if text:
    st.markdown(f"<div class='tm-insights'>{html.escape(text)}</div>", unsafe_allow_html=True)
else:
    st.caption("No data available for analysis.")

c1, c2 = st.columns(2)
with c1:
    st.plotly_chart(status_donut(tasks), use_container_width=True)
with c2:
    st.plotly_chart(workload_bar(tasks, users), use_container_width=True)

pending = sum(1 for t in tasks if t.status != TaskStatus.COMPLETED)
k1, k2, k3 = st.columns(3)
with k1:
    st.markdown(kpi_html("Total Tasks", len(tasks)), unsafe_allow_html=True)
with k2:
    st.markdown(kpi_html("Completion Rate", f"{completion_rate(tasks)}%"), unsafe_allow_html=True)
with k3:
    st.markdown(kpi_html("Pending Urgent", pending), unsafe_allow_html=True)

with st.expander("AI activity (last 7 days)", expanded=False):
    stats = get_insight_call_stats()
    m1, m2, m3 = st.columns(3)
    m1.metric("Requests", stats["total_calls"])
    m2.metric("Answered", stats["successful_calls"])
    m3.metric("Success rate", f"{stats['success_rate']}%")
    recent = get_insight_calls(limit=20)
    if recent:
        df = pd.DataFrame(recent)[["started_at", "kind", "model", "success", "duration_ms", "error_type"]]
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.caption("No assistant requests logged yet.")
