"""Sign-in, registration and password reset against the in-memory roster.

Passwords are kept and compared in plaintext; this is a demo roster, not an
identity provider.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence, Tuple

from taskmaster.app_config import AppConfig
from taskmaster.errors import AuthError, NotFoundError, ValidationError
from taskmaster.models import Role, User, new_id

INVALID_CREDENTIALS = "Invalid credentials. Check username (name{suffix}) and password."


def find_by_username(users: Sequence[User], username: str) -> Optional[User]:
    wanted = (username or "").strip().lower()
    for u in users:
        if u.username.lower() == wanted:
            return u
    return None


def check_credentials(users: Sequence[User], username: str, password: str) -> Optional[User]:
    user = find_by_username(users, username)
    if user is not None and user.password is not None and user.password == password:
        return user
    return None


def login(users: Sequence[User], username: str, password: str, config: Optional[AppConfig] = None) -> User:
    cfg = config or AppConfig.default()
    user = check_credentials(users, username, password)
    if user is None:
        raise AuthError(INVALID_CREDENTIALS.format(suffix=cfg.username_suffix))
    return user


def signup(
    users: Sequence[User],
    name: str,
    username: str,
    password: str,
    role: Role = Role.EMPLOYEE,
    config: Optional[AppConfig] = None,
) -> User:
    """Build a new level-1 user; the caller appends it and logs it in."""
    cfg = config or AppConfig.default()
    name = (name or "").strip()
    username = (username or "").strip()
    if not name or not username or not password:
        raise AuthError("Please fill all fields")
    if not username.endswith(cfg.username_suffix):
        raise AuthError(f"Username must end with {cfg.username_suffix}")
    if find_by_username(users, username) is not None:
        raise AuthError("That username is already taken")
    return User(
        id=new_id(),
        name=name,
        username=username,
        email=f"{username}@{cfg.email_domain}",
        password=password,
        role=Role(role),
        avatar=cfg.avatar_for(name),
        level=1,
        xp=0,
    )


def reset_password(users: Sequence[User], username: str, new_password: str) -> Tuple[User, ...]:
    if not new_password:
        raise ValidationError("New password cannot be empty")
    user = find_by_username(users, username)
    if user is None:
        raise NotFoundError(f"No user named {username!r}")
    updated = replace(user, password=new_password)
    return tuple(updated if u.id == user.id else u for u in users)

