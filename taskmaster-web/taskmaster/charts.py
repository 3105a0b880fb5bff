"""Plotly figures for the Command Center."""
from __future__ import annotations

from typing import Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from taskmaster.filters import status_counts, workload_by_employee
from taskmaster.models import STATUS_LABELS, Task, User

STATUS_COLORS = ["#3b82f6", "#10b981", "#f59e0b"]


def tasks_to_df(tasks: Sequence[Task]) -> pd.DataFrame:
    if not tasks:
        return pd.DataFrame(columns=["id", "title", "assigned_to_id", "status", "due_date", "xp_reward", "manager_verified"])
    df = pd.DataFrame([t.to_dict() for t in tasks])
    df["due_date"] = pd.to_datetime(df["due_date"], errors="coerce").dt.date
    return df


def status_donut(tasks: Sequence[Task]) -> go.Figure:
    counts = status_counts(tasks)
    fig = go.Figure(
        data=go.Pie(
            labels=[STATUS_LABELS[s] for s in counts],
            values=list(counts.values()),
            hole=0.6,
            marker=dict(colors=STATUS_COLORS),
            sort=False,
        )
    )
    fig.update_layout(title="Task Distribution", margin=dict(t=50, b=10, l=10, r=10), height=320)
    return fig


def workload_bar(tasks: Sequence[Task], users: Sequence[User]) -> go.Figure:
    rows = workload_by_employee(tasks, users)
    df = pd.DataFrame(rows, columns=["name", "completed", "pending"])
    long_df = df.melt(id_vars="name", value_vars=["completed", "pending"], var_name="state", value_name="missions")
    fig = px.bar(
        long_df,
        x="name",
        y="missions",
        color="state",
        barmode="stack",
        title="Team Workload",
        color_discrete_map={"completed": "#10b981", "pending": "#3b82f6"},
    )
    fig.update_layout(margin=dict(t=50, b=10, l=10, r=10), height=320, legend_title_text="")
    return fig
