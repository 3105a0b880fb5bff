"""Prompt builders for the three assistant requests.

Kept free of I/O so the exact wording can be checked in tests.
"""
from __future__ import annotations

from typing import Iterable, Sequence

from taskmaster.models import Note, Task, User

INSIGHTS_PROMPT = """\
You are an AI assistant for a retail manager. Analyze the following task data and provide 3 key insights \
regarding team performance, potential bottlenecks, and suggestions for improving Grocery/Retail KPIs \
(like efficiency, shelf availability, customer experience).

Keep it concise and professional.

Data:
{task_summary}
"""

SUGGESTIONS_PROMPT = """\
You help a grocery store manager plan today's missions for {employee_name}.

Missions this employee has done before:
{history}

Standard task list (choose ONLY from these exact titles):
{vocabulary}

Reply with up to {limit} titles from the standard task list, separated by commas, and nothing else.
"""

FEEDBACK_PROMPT = """\
You are a retail team coach. Write a short feedback script a manager can use in a one-on-one with \
{employee_name}, who has completed {completed_count} missions.

Manager's private coaching notes:
{notes}

Structure the script in four labelled parts:
1. Opening - set a positive tone.
2. Strengths - recognise specific wins.
3. Growth Areas - one or two concrete, kind improvements.
4. Closing - agree next steps and encourage.
"""


def summarize_tasks(tasks: Iterable[Task], users: Sequence[User]) -> str:
    names = {u.id: u.name for u in users}
    lines = [
        f"- {t.title} ({t.status.value}): Assigned to {names.get(t.assigned_to_id, 'Unknown')}, Due: {t.due_date}"
        for t in tasks
    ]
    return "\n".join(lines) or "- (no missions yet)"


def build_insights_prompt(tasks: Iterable[Task], users: Sequence[User]) -> str:
    return INSIGHTS_PROMPT.format(task_summary=summarize_tasks(tasks, users))


def build_suggestions_prompt(employee_name: str, history: Sequence[str], vocabulary: Sequence[str], limit: int = 3) -> str:
    return SUGGESTIONS_PROMPT.format(
        employee_name=employee_name,
        history="\n".join(f"- {h}" for h in history) or "- (none yet)",
        vocabulary=", ".join(vocabulary),
        limit=limit,
    )


def build_feedback_prompt(employee_name: str, notes: Sequence[Note], completed_count: int) -> str:
    note_lines = "\n".join(f"- {n.date}: {n.text}" for n in notes) or "- (no notes recorded)"
    return FEEDBACK_PROMPT.format(employee_name=employee_name, completed_count=completed_count, notes=note_lines)
