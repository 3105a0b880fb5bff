"""Mission lifecycle: TODO -> IN_PROGRESS -> COMPLETED.

These functions are the only code that changes ``Task.status`` or
``Task.manager_verified``. Each takes the stored record and returns the new
one; the store writes it back.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional, Tuple

from taskmaster.errors import PermissionDenied, TaskEditError, TransitionError, ValidationError
from taskmaster.models import Role, Task, TaskStatus, User

EDITABLE_FIELDS = frozenset(
    {"title", "description", "assigned_to_id", "due_date", "xp_reward", "instructions", "image_url"}
)
LOCKED_FIELDS = frozenset({"status", "manager_verified"})


def require_manager(actor: Optional[User]) -> None:
    if actor is None or actor.role != Role.MANAGER:
        raise PermissionDenied("Only managers can do that")


def require_actor(actor: Optional[User], task: Task) -> None:
    """Managers may act on any mission; employees only on their own."""
    if actor is None:
        raise PermissionDenied("Please sign in first")
    if actor.role != Role.MANAGER and task.assigned_to_id != actor.id:
        raise PermissionDenied("You can only update your own missions")


def start_task(task: Task) -> Task:
    if task.status != TaskStatus.TODO:
        raise TransitionError(f"Cannot start a mission that is {task.status.value}")
    return replace(task, status=TaskStatus.IN_PROGRESS)


def complete_task(task: Task, assignee: Optional[User]) -> Tuple[Task, int]:
    """Move ``task`` to COMPLETED and report the XP its assignee earns.

    Re-completing an already completed mission returns it unchanged with a
    zero delta, so a resubmitted form never pays out twice. Managers and
    unknown assignees earn nothing.
    """
    if task.status == TaskStatus.COMPLETED:
        return task, 0
    done = replace(task, status=TaskStatus.COMPLETED)
    if assignee is None or assignee.role != Role.EMPLOYEE:
        return done, 0
    return done, int(task.xp_reward)


def set_verified(task: Task, verified: bool, actor: Optional[User]) -> Task:
    require_manager(actor)
    if verified and task.status != TaskStatus.COMPLETED:
        raise TransitionError("Only completed missions can be verified")
    return replace(task, manager_verified=bool(verified))


def edit_task(task: Task, actor: Optional[User], **changes: Any) -> Task:
    """Overwrite descriptive fields on ``task`` (manager only)."""
    require_manager(actor)
    locked = LOCKED_FIELDS.intersection(changes)
    if locked:
        raise TaskEditError(f"Use the mission actions to change {', '.join(sorted(locked))}")
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise TaskEditError(f"Unknown task fields: {', '.join(sorted(unknown))}")
    if "title" in changes and not str(changes["title"] or "").strip():
        raise ValidationError("Title is required")
    if "xp_reward" in changes:
        changes["xp_reward"] = int(changes["xp_reward"])
        if changes["xp_reward"] < 0:
            raise ValidationError("XP reward cannot be negative")
    return replace(task, **changes)
