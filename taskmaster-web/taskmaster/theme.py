import html
import os
from functools import lru_cache

import streamlit as st

from taskmaster.models import STATUS_LABELS, Task, TaskStatus

CSS_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "assets", "custom_theme.css")


@lru_cache(maxsize=1)
def _load_css(path: str = CSS_PATH) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def set_theme(page_title: str = "TaskMaster", page_icon: str = "🛒", layout: str = "wide"):
    """Page config plus the TaskMaster stylesheet; call first on every page."""
    try:
        st.set_page_config(page_title=page_title, page_icon=page_icon, layout=layout, initial_sidebar_state="expanded")
    except Exception:
        # already configured for this run
        pass
    try:
        st.markdown(f"<style>{_load_css()}</style>", unsafe_allow_html=True)
    except FileNotFoundError:
        st.error(f"Theme file not found at {CSS_PATH}.")


def column_header_html(status: TaskStatus, count: int) -> str:
    return f'<div class="tm-col-header tm-status-{status.value}">{STATUS_LABELS[status]} · {count}</div>'


def task_card_html(task: Task, assignee_name: str = "") -> str:
    """Kanban card markup; pass ``assignee_name`` to show who owns the mission."""
    title = html.escape(task.title)
    meta = [f"Due {html.escape(task.due_date)}"]
    if assignee_name:
        meta.append(html.escape(assignee_name.split(" ")[0]))
    verified = '<div class="tm-verified">✔ Manager verified</div>' if task.manager_verified else ""
    return (
        f'<div class="tm-card"><div class="tm-xp-badge">{task.xp_reward} XP</div>'
        f'<div class="tm-card-title">{title}</div>'
        f'<div class="tm-card-meta">{" · ".join(meta)}</div>{verified}</div>'
    )


def kpi_html(label: str, value: object) -> str:
    return (
        f'<div class="tm-kpi"><div class="tm-kpi-label">{html.escape(label)}</div>'
        f'<div class="tm-kpi-value">{html.escape(str(value))}</div></div>'
    )
