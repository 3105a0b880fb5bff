"""Assistant requests: dashboard insights, mission suggestions, feedback scripts.

Each request is a single stateless chat completion. Service errors stop
here: they are printed, written to the insight log and replaced by a
fallback, so callers always get something they can render.
"""
from __future__ import annotations

import asyncio
import random
import re
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.messages import HumanMessage
from langchain_ollama.chat_models import ChatOllama

from taskmaster.ai import prompts
from taskmaster.ai.insights_config import InsightConfig
from taskmaster.insight_log import log_insight_call
from taskmaster.insight_log.models import utcnow
from taskmaster.models import Note, Task, User

INSIGHTS_FALLBACK = (
    "Unable to generate insights at this time. Please check your network connection or API key."
)
FEEDBACK_FALLBACK = (
    "Unable to generate a feedback script right now. Open with something they did well this week, "
    "talk through one specific area to improve, and agree on a next step together."
)
SUGGESTION_COUNT = 3

KIND_INSIGHTS = "dashboard_insights"
KIND_SUGGESTIONS = "task_suggestions"
KIND_FEEDBACK = "feedback_script"


def _llm_for(model: str, base_url: str, temperature: float, api_key: Optional[str]) -> ChatOllama:
    """Build a client for a single request.

    ChatOllama's HTTP client is bound to the event loop it first runs on and
    each sync wrapper below runs a new loop.
    """
    client_kwargs: Dict[str, Any] = {}
    if api_key:
        client_kwargs["headers"] = {"Authorization": f"Bearer {api_key}"}
    return ChatOllama(
        model=model,
        base_url=base_url,
        temperature=temperature,
        client_kwargs=client_kwargs,
    )


def _text_of(message: Any) -> str:
    content = getattr(message, "content", message)
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, dict):
                parts.append(str(part.get("text", "")))
            else:
                parts.append(str(part))
        content = "".join(parts)
    return str(content or "").strip()


def _record(kind: str, **fields: Any) -> None:
    """Write one insight log row; a broken log never reaches the caller."""
    try:
        log_insight_call(kind, **fields)
    except Exception as exc:  # noqa: BLE001
        print(f"Could not record insight request '{kind}': {exc!r}")


async def _ask(
    kind: str,
    prompt: str,
    *,
    config: Optional[InsightConfig] = None,
    context: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None,
) -> Optional[str]:
    """Send one prompt; return the reply text or None when a fallback is needed."""
    cfg = config or InsightConfig.from_env()
    if not cfg.enabled:
        return None

    started_at = utcnow()
    text: Optional[str] = None
    error: Optional[BaseException] = None
    try:
        llm = _llm_for(cfg.model, cfg.base_url, float(cfg.temperature), cfg.api_key)
        reply = await llm.ainvoke([HumanMessage(content=prompt)])
        text = _text_of(reply)
        if not text:
            raise ValueError("empty response from model")
    except Exception as exc:  # noqa: BLE001
        error = exc
        text = None
        print(f"Insight request '{kind}' failed: {exc!r}. Using fallback.")

    finished_at = utcnow()
    _record(
        kind,
        model=cfg.model,
        prompt_chars=len(prompt),
        context=context,
        success=error is None,
        used_fallback=error is not None,
        response_preview=text,
        error_message=str(error) if error is not None else None,
        error_type=type(error).__name__ if error is not None else None,
        started_at=started_at,
        finished_at=finished_at,
        duration_ms=(finished_at - started_at).total_seconds() * 1000,
        user_id=user_id,
    )
    return text


# ---------------- dashboard insights ----------------

async def adashboard_insights(
    tasks: Sequence[Task],
    users: Sequence[User],
    *,
    config: Optional[InsightConfig] = None,
    user_id: Optional[str] = None,
) -> str:
    prompt = prompts.build_insights_prompt(tasks, users)
    text = await _ask(
        KIND_INSIGHTS,
        prompt,
        config=config,
        context={"tasks": len(tasks), "users": len(users)},
        user_id=user_id,
    )
    return text or INSIGHTS_FALLBACK


def dashboard_insights(tasks: Sequence[Task], users: Sequence[User], **kwargs: Any) -> str:
    return asyncio.run(adashboard_insights(tasks, users, **kwargs))


# ---------------- task suggestions ----------------

_SPLIT_RE = re.compile(r"[,\n;]+")
_MARKER_RE = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")


def parse_suggestions(reply: str, vocabulary: Sequence[str], limit: int = SUGGESTION_COUNT) -> List[str]:
    """Keep only titles that exist in ``vocabulary``, in canonical spelling.

    Matching ignores case and surrounding punctuation; duplicates are dropped.
    """
    canonical = {" ".join(v.split()).upper(): v for v in vocabulary}
    picked: List[str] = []
    for raw in _SPLIT_RE.split(reply or ""):
        cleaned = _MARKER_RE.sub("", raw).strip(" \t.\"'`")
        key = " ".join(cleaned.split()).upper()
        title = canonical.get(key)
        if title and title not in picked:
            picked.append(title)
        if len(picked) >= limit:
            break
    return picked


def fallback_suggestions(vocabulary: Sequence[str], rng: Optional[random.Random] = None) -> List[str]:
    pool = list(vocabulary)
    return (rng or random).sample(pool, min(SUGGESTION_COUNT, len(pool)))


async def asuggest_tasks(
    employee_name: str,
    history: Sequence[str],
    vocabulary: Sequence[str],
    *,
    config: Optional[InsightConfig] = None,
    user_id: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> List[str]:
    if not vocabulary:
        return []
    prompt = prompts.build_suggestions_prompt(employee_name, history, vocabulary, SUGGESTION_COUNT)
    text = await _ask(
        KIND_SUGGESTIONS,
        prompt,
        config=config,
        context={"employee": employee_name, "history": len(history), "vocabulary": len(vocabulary)},
        user_id=user_id,
    )
    picked = parse_suggestions(text or "", vocabulary)
    return picked or fallback_suggestions(vocabulary, rng)


def suggest_tasks(employee_name: str, history: Sequence[str], vocabulary: Sequence[str], **kwargs: Any) -> List[str]:
    return asyncio.run(asuggest_tasks(employee_name, history, vocabulary, **kwargs))


# ---------------- feedback scripts ----------------

async def afeedback_script(
    employee_name: str,
    notes: Sequence[Note],
    completed_count: int,
    *,
    config: Optional[InsightConfig] = None,
    user_id: Optional[str] = None,
) -> str:
    prompt = prompts.build_feedback_prompt(employee_name, notes, completed_count)
    text = await _ask(
        KIND_FEEDBACK,
        prompt,
        config=config,
        context={"employee": employee_name, "notes": len(notes), "completed": completed_count},
        user_id=user_id,
    )
    return text or FEEDBACK_FALLBACK


def feedback_script(employee_name: str, notes: Sequence[Note], completed_count: int, **kwargs: Any) -> str:
    return asyncio.run(afeedback_script(employee_name, notes, completed_count, **kwargs))
