from datetime import date

import streamlit as st

from taskmaster.ai import insights
from taskmaster.charts import tasks_to_df
from taskmaster.errors import TaskMasterError
from taskmaster.filters import ALL, bucket_by_status, task_history_for
from taskmaster.models import STATUS_LABELS, Task, TaskStatus
from taskmaster.session import flash, get_store, render_sidebar, require_login, show_banner
from taskmaster.theme import column_header_html, set_theme, task_card_html

set_theme(page_title="Missions", page_icon="✅")
user = require_login()
render_sidebar(user)
show_banner()

store = get_store()
is_manager = user.is_manager
names = {u.id: u.name for u in store.users}
employees = store.employees()


def _run(action, *args, **kwargs):
    """Call a store operation and report domain errors inline."""
    try:
        return action(*args, **kwargs), None
    except TaskMasterError as exc:
        return None, str(exc)


@st.dialog("Mission details", width="large")
def task_dialog(task_id: str):
    task = store.get_task(task_id)
    if task.image_url:
        st.image(task.image_url, use_container_width=True)
    st.markdown(f"### {task.title}")
    st.caption(
        f"{STATUS_LABELS[task.status]} · Due {task.due_date} · {task.xp_reward} XP · "
        f"Assigned to {names.get(task.assigned_to_id, 'Unknown')}"
        + (f" by {task.assigned_by}" if task.assigned_by else "")
    )
    st.markdown("**Description**")
    st.write(task.description or "—")
    st.markdown("**Instructions**")
    st.info(task.instructions or "Standard operating procedure applies.")

    b1, b2 = st.columns(2)
    if task.status == TaskStatus.TODO:
        if b1.button("▶ Start Mission", use_container_width=True):
            _, err = _run(store.start_task, task.id)
            if err:
                st.error(err)
            else:
                st.rerun()
    if task.status != TaskStatus.COMPLETED:
        if b2.button("✅ Mark Completed", use_container_width=True, type="primary"):
            earned, err = _run(store.complete_task, task.id)
            if err:
                st.error(err)
            else:
                if earned:
                    flash(f"Mission complete! +{earned} XP for {names.get(task.assigned_to_id, 'the team')}")
                st.rerun()

    if not is_manager:
        return

    if task.status == TaskStatus.COMPLETED:
        verified = st.toggle("Manager verified", value=task.manager_verified, key=f"verify-{task.id}")
        if verified != task.manager_verified:
            _, err = _run(store.set_verified, task.id, verified)
            if err:
                st.error(err)
            else:
                st.rerun()

    with st.expander("✏️ Edit mission"):
        with st.form(f"edit-{task.id}"):
            title = st.text_input("Title", value=task.title)
            description = st.text_area("Description", value=task.description)
            instructions = st.text_area("Instructions", value=task.instructions or "")
            emp_ids = [e.id for e in employees] or [task.assigned_to_id]
            assignee = st.selectbox(
                "Assign to",
                emp_ids,
                index=emp_ids.index(task.assigned_to_id) if task.assigned_to_id in emp_ids else 0,
                format_func=lambda uid: names.get(uid, uid),
            )
            due = st.date_input("Due date", value=date.fromisoformat(task.due_date))
            xp = st.number_input("XP reward", min_value=0, max_value=1000, step=10, value=int(task.xp_reward))
            if st.form_submit_button("Save changes"):
                _, err = _run(
                    store.edit_task,
                    task.id,
                    title=title,
                    description=description,
                    instructions=instructions,
                    assigned_to_id=assignee,
                    due_date=due.isoformat(),
                    xp_reward=int(xp),
                )
                if err:
                    st.error(err)
                else:
                    flash("Mission updated")
                    st.rerun()

    with st.expander("🗑️ Delete mission"):
        confirm = st.checkbox("Yes, delete this mission", key=f"confirm-del-{task.id}")
        if st.button("Delete", disabled=not confirm, key=f"del-{task.id}"):
            _, err = _run(store.delete_task, task.id)
            if err:
                st.error(err)
            else:
                flash("Mission deleted")
                st.rerun()


def render_create_form():
    if not employees:
        st.caption("Add an employee before creating missions.")
        return
    with st.form("tm-create-task", clear_on_submit=True):
        title = st.text_input("Mission title", placeholder="e.g., Clean Produce Section")
        description = st.text_area("Description", height=80)
        c1, c2, c3 = st.columns(3)
        assignee = c1.selectbox("Assign to", [e.id for e in employees], format_func=lambda uid: names[uid])
        due = c2.date_input("Due date", value=date.fromisoformat(store.today()))
        xp = c3.number_input("XP reward", min_value=10, max_value=1000, step=10, value=store.config.default_xp_reward)
        if st.form_submit_button("Create Mission", type="primary"):
            if not title.strip() or not description.strip():
                st.error("Title and description are required")
                return
            _, err = _run(store.add_task, title, description, assignee, due.isoformat(), int(xp))
            if err:
                st.error(err)
            else:
                flash(f"Mission '{title.strip()}' created")
                st.rerun()


def render_library():
    """Standard task library: quick daily assignment plus AI suggestions."""
    st.caption(f"{len(store.standard_tasks)} standard tasks")
    if not employees:
        return
    lc1, lc2 = st.columns([2, 1])
    with lc1:
        target = st.selectbox("Employee", [e.id for e in employees], format_func=lambda uid: names[uid], key="lib-emp")
    with lc2:
        st.write("")
        if st.button("✨ Suggest for today", use_container_width=True):
            with st.spinner("Picking missions..."):
                st.session_state.tm_suggestions = insights.suggest_tasks(
                    names[target],
                    task_history_for(store.tasks, target),
                    list(store.standard_tasks),
                    user_id=user.id,
                )
    picks = st.multiselect(
        "Titles to assign",
        list(store.standard_tasks),
        default=[p for p in st.session_state.get("tm_suggestions", []) if p in store.standard_tasks],
        key="lib-picks",
    )
    if st.button("Assign selected for today", disabled=not picks):
        for title in picks:
            _run(store.add_task, title.title(), "Standard daily task.", target)
        st.session_state.pop("tm_suggestions", None)
        flash(f"Assigned {len(picks)} mission(s) to {names[target]}")
        st.rerun()

    with st.form("lib-add", clear_on_submit=True):
        new_title = st.text_input("Add a standard task")
        if st.form_submit_button("Add to library"):
            added, err = _run(store.add_standard_task, new_title)
            if err:
                st.error(err)
            elif added:
                flash(f"Added '{new_title.strip().upper()}' to the library")
                st.rerun()
            else:
                st.info("That task is already in the library.")


st.title("✅ Missions")

filter_kwargs = {}
if is_manager:
    with st.expander("➕ Create mission", expanded=False):
        render_create_form()
    with st.expander("📚 Standard task library", expanded=False):
        render_library()

    f1, f2, f3 = st.columns(3)
    assignee_filter = f1.selectbox(
        "Assignee", [ALL] + [e.id for e in employees], format_func=lambda uid: "All" if uid == ALL else names[uid]
    )
    status_filter = f2.selectbox(
        "Status", [ALL] + [s.value for s in TaskStatus],
        format_func=lambda s: "All" if s == ALL else STATUS_LABELS[TaskStatus(s)],
    )
    date_filter = f3.date_input("Due date", value=None)
    filter_kwargs = {
        "assignee_id": assignee_filter,
        "status": status_filter,
        "due_date": date_filter.isoformat() if date_filter else "",
    }
else:
    st.caption("Focus mode: your open missions, plus anything you finished today.")

visible = store.visible_tasks(**filter_kwargs)
view = st.radio("View", ["Board", "List"], horizontal=True, label_visibility="collapsed")

if not visible:
    st.info("No missions to show.")
elif view == "Board":
    columns = bucket_by_status(visible)
    board = st.columns(len(columns))
    for col, (status, col_tasks) in zip(board, columns.items()):
        with col:
            st.markdown(column_header_html(status, len(col_tasks)), unsafe_allow_html=True)
            for t in col_tasks:
                st.markdown(task_card_html(t, names.get(t.assigned_to_id, "") if is_manager else ""), unsafe_allow_html=True)
                if st.button("Open", key=f"open-{t.id}", use_container_width=True):
                    task_dialog(t.id)
else:
    df = tasks_to_df(visible)
    df["assignee"] = df["assigned_to_id"].map(names)
    st.dataframe(
        df[["title", "assignee", "status", "due_date", "xp_reward", "manager_verified"]],
        use_container_width=True,
        hide_index=True,
    )
    choice = st.selectbox("Open mission", [t.id for t in visible], format_func=lambda tid: store.get_task(tid).title)
    if st.button("Open details"):
        task_dialog(choice)
