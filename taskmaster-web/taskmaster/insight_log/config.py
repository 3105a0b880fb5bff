"""Insight log database configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from taskmaster.config_utils import env_bool, env_int, env_optional_str


def _repo_root() -> str:
    """Get the app root directory (the folder holding app.py)."""
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@dataclass(frozen=True)
class InsightLogConfig:
    """Configuration for the AI call log.

    Environment variables:
    - INSIGHT_LOG_DATABASE_URL: log-specific database URL
    - DATABASE_URL: shared database URL
    - INSIGHT_LOG_RETENTION_DAYS: Number of days to keep entries (default: 30)
    - INSIGHT_LOG_ENABLED: Enable/disable logging (default: true)

    Without a URL the log goes to SQLite at data/insight_log.db.
    """

    database_url: str
    retention_days: int
    enabled: bool

    @classmethod
    def from_env(cls) -> "InsightLogConfig":
        database_url = env_optional_str("INSIGHT_LOG_DATABASE_URL")
        if not database_url:
            database_url = env_optional_str("DATABASE_URL")
        if not database_url:
            data_dir = os.path.join(_repo_root(), "data")
            os.makedirs(data_dir, exist_ok=True)
            database_url = f"sqlite:///{os.path.join(data_dir, 'insight_log.db')}"

        return cls(
            database_url=database_url,
            retention_days=env_int("INSIGHT_LOG_RETENTION_DAYS", 30),
            enabled=env_bool("INSIGHT_LOG_ENABLED", True),
        )


# Global config instance
_config: Optional[InsightLogConfig] = None


def get_config() -> InsightLogConfig:
    """Get the insight log configuration (cached)."""
    global _config
    if _config is None:
        _config = InsightLogConfig.from_env()
    return _config


def reset_config() -> None:
    """Forget the cached configuration so the next call re-reads the env."""
    global _config
    _config = None
