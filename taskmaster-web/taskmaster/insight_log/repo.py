"""Insight log repository functions."""

from __future__ import annotations

import json
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Set

from sqlalchemy import Integer, cast, desc, func
from sqlalchemy.exc import SQLAlchemyError

from .config import get_config
from .db import get_engine, session_scope
from .models import Base, InsightCall, utcnow

_initialized: Set[str] = set()

# A missing or read-only database location surfaces as OSError
_LOG_ERRORS = (SQLAlchemyError, OSError)

SENSITIVE_KEYS = {
    "password", "token", "secret", "key", "credential", "auth", "authorization", "api_key", "apikey",
}


def init_db(database_url: Optional[str] = None) -> None:
    """Create the log tables if they don't exist. Safe to call multiple times."""
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)
    _initialized.add(str(engine.url))


def _ensure_db(database_url: Optional[str]) -> None:
    engine = get_engine(database_url)
    if str(engine.url) not in _initialized:
        init_db(database_url)


def _redact_sensitive(data: Dict[str, Any]) -> Dict[str, Any]:
    redacted = {}
    for k, v in data.items():
        key_lower = k.lower()
        if any(sens in key_lower for sens in SENSITIVE_KEYS):
            redacted[k] = "***REDACTED***"
        elif isinstance(v, dict):
            redacted[k] = _redact_sensitive(v)
        else:
            redacted[k] = v
    return redacted


def log_insight_call(
    kind: str,
    *,
    model: Optional[str] = None,
    prompt_chars: Optional[int] = None,
    context: Optional[Dict[str, Any]] = None,
    success: bool = False,
    used_fallback: bool = False,
    response_preview: Optional[str] = None,
    error_message: Optional[str] = None,
    error_type: Optional[str] = None,
    started_at: Optional[datetime] = None,
    finished_at: Optional[datetime] = None,
    duration_ms: Optional[float] = None,
    user_id: Optional[str] = None,
    database_url: Optional[str] = None,
) -> Optional[str]:
    """Record one text-generation request.

    Returns:
        The ID of the created log entry, or None if logging is disabled or failed.
    """
    try:
        if not get_config().enabled:
            return None
        _ensure_db(database_url)

        context_json = None
        if context:
            context_json = json.dumps(_redact_sensitive(context), default=str)[:4000]

        if response_preview and len(response_preview) > 2000:
            response_preview = response_preview[:2000] + "...[truncated]"

        entry = InsightCall(
            kind=kind,
            model=model,
            prompt_chars=prompt_chars,
            context_json=context_json,
            success=success,
            used_fallback=used_fallback,
            response_preview=response_preview,
            error_message=error_message[:2000] if error_message else None,
            error_type=error_type,
            started_at=started_at or utcnow(),
            finished_at=finished_at,
            duration_ms=duration_ms,
            user_id=user_id,
        )

        with session_scope(database_url) as session:
            session.add(entry)
        return entry.id

    except _LOG_ERRORS:
        # Logging should never break the main application
        return None


def get_insight_calls(
    kind: Optional[str] = None,
    success: Optional[bool] = None,
    since: Optional[datetime] = None,
    limit: int = 50,
    database_url: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Most recent log entries first."""
    try:
        _ensure_db(database_url)
        with session_scope(database_url) as session:
            query = session.query(InsightCall)
            if kind:
                query = query.filter(InsightCall.kind == kind)
            if success is not None:
                query = query.filter(InsightCall.success == success)
            if since:
                query = query.filter(InsightCall.started_at >= since)
            rows = query.order_by(desc(InsightCall.started_at)).limit(limit).all()
            return [row.to_dict() for row in rows]

    except _LOG_ERRORS:
        return []


def get_insight_call_stats(
    since: Optional[datetime] = None,
    database_url: Optional[str] = None,
) -> Dict[str, Any]:
    """Totals per request kind since ``since`` (default: last 7 days)."""
    if since is None:
        since = utcnow() - timedelta(days=7)

    empty = {"total_calls": 0, "successful_calls": 0, "failed_calls": 0, "success_rate": 0, "by_kind": []}

    try:
        _ensure_db(database_url)
        with session_scope(database_url) as session:
            rows = (
                session.query(
                    InsightCall.kind,
                    func.count(InsightCall.id).label("total_calls"),
                    func.sum(cast(InsightCall.success, Integer)).label("successful_calls"),
                    func.avg(InsightCall.duration_ms).label("avg_duration_ms"),
                )
                .filter(InsightCall.started_at >= since)
                .group_by(InsightCall.kind)
                .all()
            )

        by_kind = []
        total = 0
        successful = 0
        for row in rows:
            calls = row.total_calls or 0
            ok = int(row.successful_calls or 0)
            total += calls
            successful += ok
            by_kind.append({
                "kind": row.kind,
                "total_calls": calls,
                "successful_calls": ok,
                "avg_duration_ms": round(row.avg_duration_ms, 2) if row.avg_duration_ms else None,
            })

        if total == 0:
            return empty
        return {
            "total_calls": total,
            "successful_calls": successful,
            "failed_calls": total - successful,
            "success_rate": round(successful / total * 100, 2),
            "by_kind": sorted(by_kind, key=lambda x: x["total_calls"], reverse=True),
        }

    except _LOG_ERRORS:
        return empty


def cleanup_old_logs(
    retention_days: Optional[int] = None,
    database_url: Optional[str] = None,
) -> int:
    """Delete entries older than the retention period; returns the number removed."""
    try:
        if retention_days is None:
            retention_days = get_config().retention_days
        cutoff = utcnow() - timedelta(days=retention_days)
        _ensure_db(database_url)
        with session_scope(database_url) as session:
            return (
                session.query(InsightCall)
                .filter(InsightCall.created_at < cutoff)
                .delete(synchronize_session=False)
            )

    except _LOG_ERRORS:
        return 0
