"""Insight log - a record of every request made to the text-generation service.

This package provides:
- Database model for storing insight calls
- Repository functions for writing and querying them
- SQLite by default, any SQLAlchemy URL via env
"""

from .repo import (
    init_db,
    log_insight_call,
    get_insight_calls,
    get_insight_call_stats,
    cleanup_old_logs,
)

__all__ = [
    "init_db",
    "log_insight_call",
    "get_insight_calls",
    "get_insight_call_stats",
    "cleanup_old_logs",
]
