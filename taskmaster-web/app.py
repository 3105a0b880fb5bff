import streamlit as st

from taskmaster.errors import TaskMasterError
from taskmaster.models import Role
from taskmaster.seed import DEFAULT_MANAGER_USERNAME, DEFAULT_PASSWORD
from taskmaster.session import flash, get_store, render_sidebar, show_banner
from taskmaster.theme import set_theme

set_theme(page_title="TaskMaster", page_icon="🛒")

store = get_store()
user = store.current_user

if user is not None:
    render_sidebar(user)
    show_banner()
    st.title(f"Welcome back, {user.first_name}")
    st.caption(f"Signed in as {user.username} · {user.role.value}")
    if user.is_manager:
        st.page_link("pages/1_Command_Center.py", label="Command Center", icon="📈")
    st.page_link("pages/2_Team_Roster.py", label="Team Roster", icon="🛡️")
    st.page_link("pages/3_Missions.py", label="Missions", icon="✅")
    st.page_link("pages/4_Shift_Schedule.py", label="Shift Schedule", icon="📅")
    st.stop()

st.markdown("<h1 style='text-align:center;'>TaskMaster</h1>", unsafe_allow_html=True)
st.markdown("<p style='text-align:center;color:#51658a;'>Retail missions, team roster and shift schedules in one place.</p>", unsafe_allow_html=True)

_, mid, _ = st.columns([1, 1.4, 1])
with mid:
    mode = st.radio("Mode", ["Sign In", "Register Access"], horizontal=True, label_visibility="collapsed")
    suffix = store.config.username_suffix

    if mode == "Sign In":
        with st.form("tm-login"):
            username = st.text_input("Username", placeholder=f"e.g. lamec{suffix}")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign In", use_container_width=True)
        if submitted:
            try:
                signed_in = store.login(username, password)
            except TaskMasterError as exc:
                st.error(str(exc))
            else:
                flash(f"Signed in as {signed_in.name}")
                target = "pages/1_Command_Center.py" if signed_in.is_manager else "pages/3_Missions.py"
                st.switch_page(target)
    else:
        with st.form("tm-signup"):
            name = st.text_input("Full Name", placeholder="e.g. Jason")
            username = st.text_input("Username", placeholder=f"e.g. jason{suffix}")
            password = st.text_input("Password", type="password")
            role_label = st.radio("Role", ["Employee", "Manager"], horizontal=True)
            submitted = st.form_submit_button("Create Account", use_container_width=True)
        if submitted:
            role = Role.MANAGER if role_label == "Manager" else Role.EMPLOYEE
            try:
                created = store.signup(name, username, password, role)
            except TaskMasterError as exc:
                st.error(str(exc))
            else:
                flash(f"Welcome aboard, {created.first_name}!")
                target = "pages/1_Command_Center.py" if created.is_manager else "pages/3_Missions.py"
                st.switch_page(target)

    st.markdown(
        f"<div class='tm-hint'>Default Manager: {DEFAULT_MANAGER_USERNAME} | Default Password: {DEFAULT_PASSWORD}</div>",
        unsafe_allow_html=True,
    )
