"""Environment readers shared by the config dataclasses.

Blank values count as unset everywhere.
"""
from __future__ import annotations

import os
from typing import Optional

_TRUE = frozenset({"1", "true", "yes", "y", "on"})
_FALSE = frozenset({"0", "false", "no", "n", "off"})


def _raw(name: str) -> Optional[str]:
    value = (os.environ.get(name) or "").strip()
    return value or None


def env_str(name: str, default: str) -> str:
    value = _raw(name)
    return default if value is None else value


def env_optional_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = _raw(name)
    return default if value is None else value


def env_first(*names: str, default: Optional[str] = None) -> Optional[str]:
    """Return the first set value among several aliases, in order."""
    for name in names:
        value = _raw(name)
        if value is not None:
            return value
    return default


def env_bool(name: str, default: bool) -> bool:
    value = _raw(name)
    if value is None:
        return default
    value = value.lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return default


def env_int(name: str, default: int, *, minimum: Optional[int] = None) -> int:
    value = _raw(name)
    try:
        number = default if value is None else int(value)
    except ValueError:
        number = default
    if minimum is not None:
        number = max(minimum, number)
    return number
