"""Read-only projections of the task list for each role.

Nothing in here mutates its input and every filter keeps insertion order.
"""
from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from taskmaster.models import Role, Task, TaskStatus, User

ALL = "ALL"


def _today_str(today: Optional[object]) -> str:
    if today is None:
        return date.today().isoformat()
    if isinstance(today, date):
        return today.isoformat()
    return str(today)


def manager_view(
    tasks: Iterable[Task],
    assignee_id: Optional[str] = ALL,
    status: Optional[object] = ALL,
    due_date: Optional[str] = "",
) -> List[Task]:
    """AND-combine the optional assignee, status and exact due-date filters."""
    result = list(tasks)
    if assignee_id and assignee_id != ALL:
        result = [t for t in result if t.assigned_to_id == assignee_id]
    if status and status != ALL:
        wanted = TaskStatus(status)
        result = [t for t in result if t.status == wanted]
    if due_date:
        result = [t for t in result if t.due_date == due_date]
    return result


def employee_view(tasks: Iterable[Task], user: User, today: Optional[object] = None) -> List[Task]:
    """Focus mode: own missions, hiding completed ones not due today."""
    today_s = _today_str(today)
    return [
        t for t in tasks
        if t.assigned_to_id == user.id
        and not (t.status == TaskStatus.COMPLETED and t.due_date != today_s)
    ]


def visible_tasks(
    tasks: Iterable[Task],
    user: User,
    today: Optional[object] = None,
    *,
    assignee_id: Optional[str] = ALL,
    status: Optional[object] = ALL,
    due_date: Optional[str] = "",
) -> List[Task]:
    if user.role == Role.MANAGER:
        return manager_view(tasks, assignee_id=assignee_id, status=status, due_date=due_date)
    return employee_view(tasks, user, today)


def bucket_by_status(tasks: Iterable[Task]) -> Dict[TaskStatus, List[Task]]:
    columns: Dict[TaskStatus, List[Task]] = {s: [] for s in TaskStatus}
    for t in tasks:
        columns[t.status].append(t)
    return columns


def status_counts(tasks: Iterable[Task]) -> Dict[TaskStatus, int]:
    return {s: len(ts) for s, ts in bucket_by_status(tasks).items()}


def completion_rate(tasks: Sequence[Task]) -> int:
    """Whole-number percentage of completed tasks (0 for an empty list)."""
    if not tasks:
        return 0
    done = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
    return round(done * 100 / len(tasks))


def workload_by_employee(tasks: Sequence[Task], users: Iterable[User]) -> List[Dict[str, object]]:
    rows = []
    for u in users:
        if u.role == Role.MANAGER:
            continue
        mine = [t for t in tasks if t.assigned_to_id == u.id]
        completed = sum(1 for t in mine if t.status == TaskStatus.COMPLETED)
        rows.append({"name": u.first_name, "completed": completed, "pending": len(mine) - completed})
    return rows


def task_history_for(tasks: Iterable[Task], user_id: str) -> List[str]:
    return [t.title for t in tasks if t.assigned_to_id == user_id]


# ---------------- Standard task library ----------------

def _norm(title: str) -> str:
    return " ".join(str(title or "").split()).upper()


def is_standard_title(titles: Iterable[str], title: str) -> bool:
    key = _norm(title)
    return any(_norm(t) == key for t in titles)


def add_standard_title(titles: Sequence[str], title: str) -> Tuple[str, ...]:
    """Append ``title`` (upper-cased) unless an equivalent entry exists."""
    key = _norm(title)
    if not key or is_standard_title(titles, key):
        return tuple(titles)
    return tuple(titles) + (key,)
