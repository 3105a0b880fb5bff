import streamlit as st

from taskmaster.errors import TaskMasterError
from taskmaster.session import flash, get_store, render_sidebar, require_login, show_banner
from taskmaster.theme import set_theme

set_theme(page_title="Shift Schedule", page_icon="📅")
user = require_login()
render_sidebar(user)
show_banner()

store = get_store()
names = {u.id: u.name for u in store.users}

st.title("📅 Shift Schedule")

if user.is_manager:
    # Only the file name is kept; the uploaded bytes are discarded.
    upload = st.file_uploader("Upload New Schedule", type=["pdf", "xlsx", "xls", "png", "jpg", "jpeg"], key="tm-shift-upload")
    if upload is not None and st.button("Publish schedule", type="primary"):
        try:
            shift = store.upload_shift(upload.name)
        except TaskMasterError as exc:
            st.error(str(exc))
        else:
            flash(f"Published {shift.file_name}")
            st.rerun()

if not store.shifts:
    st.info("No shift schedules uploaded yet.")
else:
    for shift in store.shifts:
        with st.container(border=True):
            left, right = st.columns([4, 1])
            with left:
                st.markdown(f"**📄 {shift.title}**")
                st.caption(f"Uploaded on {shift.date} by {names.get(shift.uploaded_by, 'Unknown')}")
                st.caption(shift.file_name)
            with right:
                st.link_button("View", shift.file_url, use_container_width=True)
