"""Streamlit glue shared by app.py and every page."""
from __future__ import annotations

import time
from typing import Optional

import streamlit as st

from taskmaster.app_config import AppConfig
from taskmaster.gamification import level_progress, xp_to_next_level
from taskmaster.models import User
from taskmaster.store import TaskStore

STORE_KEY = "tm_store"
BANNER_KEY = "tm_banner"


def get_store() -> TaskStore:
    if STORE_KEY not in st.session_state:
        st.session_state[STORE_KEY] = TaskStore.from_seed(config=AppConfig.from_env())
    return st.session_state[STORE_KEY]


def require_login() -> User:
    """Return the signed-in user or send the visitor back to the sign-in page."""
    user = get_store().current_user
    if user is None:
        st.warning("Please sign in first.")
        st.page_link("app.py", label="Go to sign in", icon="🔐")
        st.stop()
    return user


def require_manager() -> User:
    user = require_login()
    if not user.is_manager:
        st.info("This page is only available to managers.")
        st.stop()
    return user


def flash(message: str) -> None:
    """Queue a success banner for the next render."""
    st.session_state[BANNER_KEY] = (message, time.time())


def show_banner() -> None:
    raw = st.session_state.get(BANNER_KEY)
    if not raw:
        return
    message, at = raw
    seconds = get_store().config.banner_seconds
    if time.time() - at > seconds:
        st.session_state.pop(BANNER_KEY, None)
        return
    st.success(message)


def render_sidebar(user: Optional[User] = None) -> None:
    store = get_store()
    user = user or store.current_user
    if user is None:
        return
    xp_step = store.config.xp_per_level
    with st.sidebar:
        cols = st.columns([1, 3])
        with cols[0]:
            if user.avatar:
                st.image(user.avatar, width=48)
        with cols[1]:
            st.markdown(f"**{user.name}**")
            st.caption(f"Lvl {user.level} • {user.xp} XP • {user.role.value}")
        if not user.is_manager:
            st.progress(int(level_progress(user.xp, xp_step)), text=f"{xp_to_next_level(user.xp, xp_step)} XP to next level")
        if st.button("Sign Out", key="tm-sign-out", use_container_width=True):
            store.logout()
            st.switch_page("app.py")
