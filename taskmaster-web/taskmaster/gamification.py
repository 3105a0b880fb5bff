"""XP and level bookkeeping for employees.

Levels follow XP: after an award the stored level becomes
``max(level, xp // xp_per_level + 1)``. Seeded levels higher than the XP
implies are kept as-is.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List

from taskmaster.models import Role, User

XP_PER_LEVEL = 1000


def derived_level(xp: int, xp_per_level: int = XP_PER_LEVEL) -> int:
    return max(0, int(xp)) // xp_per_level + 1


def award_xp(user: User, amount: int, *, xp_per_level: int = XP_PER_LEVEL) -> User:
    """Return a copy of ``user`` with ``amount`` XP added."""
    if amount < 0:
        raise ValueError("XP awards cannot be negative")
    if amount == 0:
        return user
    xp = user.xp + amount
    level = max(user.level, derived_level(xp, xp_per_level))
    return replace(user, xp=xp, level=level)


def level_progress(xp: int, xp_per_level: int = XP_PER_LEVEL) -> float:
    """Percentage (0-100) of the way through the current level."""
    return (xp % xp_per_level) * 100.0 / xp_per_level


def xp_to_next_level(xp: int, xp_per_level: int = XP_PER_LEVEL) -> int:
    return xp_per_level - (xp % xp_per_level)


def leaderboard(users: Iterable[User]) -> List[User]:
    employees = [u for u in users if u.role == Role.EMPLOYEE]
    # sorted() is stable, so equal XP keeps roster order
    return sorted(employees, key=lambda u: u.xp, reverse=True)
