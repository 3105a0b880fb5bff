import streamlit as st

from taskmaster.ai import insights
from taskmaster.errors import TaskMasterError
from taskmaster.gamification import leaderboard, level_progress, xp_to_next_level
from taskmaster.models import TaskStatus, User
from taskmaster.session import flash, get_store, render_sidebar, require_login, show_banner
from taskmaster.theme import set_theme

set_theme(page_title="Team Roster", page_icon="🛡️")
current = require_login()
render_sidebar(current)
show_banner()

store = get_store()
xp_step = store.config.xp_per_level

st.title("🛡️ Team Roster")


@st.dialog("Reset password")
def reset_password_dialog(member: User):
    st.write(f"Set a new password for **{member.name}** ({member.username}).")
    new_pw = st.text_input("New password", type="password", key=f"reset-pw-{member.id}")
    if st.button("Save password", key=f"reset-save-{member.id}"):
        try:
            store.reset_password(member.username, new_pw)
        except TaskMasterError as exc:
            st.error(str(exc))
        else:
            flash(f"Password updated for {member.name}")
            st.rerun()


def render_profile(member: User) -> None:
    """Private notes and coaching tools (managers only)."""
    completed = sum(1 for t in store.tasks if t.assigned_to_id == member.id and t.status == TaskStatus.COMPLETED)
    st.markdown("**Private notes**")
    if not member.private_notes:
        st.caption("No notes yet.")
    for note in member.private_notes:
        edited = f" · edited by {note.last_edited_by}" if note.last_edited_by else ""
        st.markdown(f"- {note.text}  \n  <span style='color:#6b7b8f;font-size:.8rem'>{note.author} · {note.date}{edited}</span>", unsafe_allow_html=True)
        with st.popover("Edit", use_container_width=False):
            text = st.text_area("Note", value=note.text, key=f"edit-note-{note.id}")
            if st.button("Save", key=f"save-note-{note.id}"):
                try:
                    store.edit_note(member.id, note.id, text)
                except TaskMasterError as exc:
                    st.error(str(exc))
                else:
                    st.rerun()

    with st.form(f"add-note-{member.id}", clear_on_submit=True):
        text = st.text_area("Add a note", placeholder="What went well, what to work on…")
        if st.form_submit_button("Add note"):
            try:
                store.add_note(member.id, text)
            except TaskMasterError as exc:
                st.error(str(exc))
            else:
                st.rerun()

    script_key = f"tm-feedback-{member.id}"
    if st.button("✨ Generate feedback script", key=f"gen-{member.id}"):
        with st.spinner("Drafting feedback script..."):
            st.session_state[script_key] = insights.feedback_script(
                member.name, member.private_notes, completed, user_id=current.id
            )
    if st.session_state.get(script_key):
        st.markdown(st.session_state[script_key])

    if st.button("🔑 Reset password", key=f"reset-{member.id}"):
        reset_password_dialog(member)


cols = st.columns(3)
for i, member in enumerate(store.users):
    done = sum(1 for t in store.tasks if t.assigned_to_id == member.id and t.status == TaskStatus.COMPLETED)
    with cols[i % 3]:
        with st.container(border=True):
            top_l, top_r = st.columns([1, 2])
            with top_l:
                if member.avatar:
                    st.image(member.avatar, width=72)
            with top_r:
                star = " ⭐" if member.is_manager else ""
                st.markdown(f"### {member.name}{star}")
                st.caption(f"✉️ {member.email}")
            a, b, c = st.columns(3)
            a.metric("Level", member.level)
            b.metric("Total XP", member.xp)
            c.metric("Missions", done)
            st.progress(int(level_progress(member.xp, xp_step)), text=f"{xp_to_next_level(member.xp, xp_step)} XP to next level")
            if current.is_manager and not member.is_manager:
                with st.expander("View Profile Details"):
                    render_profile(member)

st.subheader("🏆 Leaderboard")
board = leaderboard(store.users)
if board:
    st.table([{"Rank": n, "Name": u.name, "Level": u.level, "XP": u.xp} for n, u in enumerate(board, start=1)])
else:
    st.caption("No employees yet.")
