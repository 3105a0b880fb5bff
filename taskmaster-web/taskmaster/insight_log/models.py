"""Insight log database models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, Boolean, Integer, Float, DateTime, Index
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _generate_id() -> str:
    return str(uuid.uuid4())


class InsightCall(Base):
    """One request to the text-generation service.

    Rows are written whether the call succeeded or fell back, so the
    dashboard can show how often the assistant is actually answering.
    """

    __tablename__ = "insight_calls"

    id = Column(String(36), primary_key=True, default=_generate_id)

    # dashboard_insights | task_suggestions | feedback_script
    kind = Column(String(64), nullable=False, index=True)
    model = Column(String(128), nullable=True)

    prompt_chars = Column(Integer, nullable=True)
    context_json = Column(Text, nullable=True)  # small JSON summary of inputs, sensitive keys redacted

    success = Column(Boolean, nullable=False, default=False, index=True)
    used_fallback = Column(Boolean, nullable=False, default=False)
    response_preview = Column(Text, nullable=True)
    error_message = Column(Text, nullable=True)
    error_type = Column(String(128), nullable=True)

    started_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    finished_at = Column(DateTime, nullable=True)
    duration_ms = Column(Float, nullable=True)

    user_id = Column(String(64), nullable=True, index=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_insight_calls_kind_started", "kind", "started_at"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "model": self.model,
            "prompt_chars": self.prompt_chars,
            "context_json": self.context_json,
            "success": self.success,
            "used_fallback": self.used_fallback,
            "response_preview": self.response_preview,
            "error_message": self.error_message,
            "error_type": self.error_type,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "duration_ms": self.duration_ms,
            "user_id": self.user_id,
        }
