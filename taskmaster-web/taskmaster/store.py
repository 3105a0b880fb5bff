"""Session-scoped state container for TaskMaster.

One ``TaskStore`` lives in ``st.session_state`` per browser session. It owns
the roster, the missions, the shift uploads and the standard task library.
Every mutation builds new records and swaps in a new tuple, so anything a
page captured before the change keeps seeing the old snapshot.

The signed-in user is stored by id and always resolved from the roster,
which keeps XP shown in the sidebar in step with the Team page.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any, Callable, Iterable, List, Optional, Tuple

from taskmaster import auth, filters, gamification, lifecycle
from taskmaster.app_config import AppConfig
from taskmaster.errors import NotFoundError, TaskEditError, ValidationError
from taskmaster.models import Note, Role, Shift, Task, TaskStatus, User, new_id
from taskmaster.seed import STANDARD_TASKS, seed_shifts, seed_tasks, seed_users


class TaskStore:
    def __init__(
        self,
        users: Iterable[User] = (),
        tasks: Iterable[Task] = (),
        shifts: Iterable[Shift] = (),
        standard_tasks: Iterable[str] = (),
        *,
        config: Optional[AppConfig] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.config = config or AppConfig.default()
        self._clock = clock
        self._users: Tuple[User, ...] = tuple(users)
        self._tasks: Tuple[Task, ...] = tuple(tasks)
        self._shifts: Tuple[Shift, ...] = tuple(shifts)
        self._standard_tasks: Tuple[str, ...] = tuple(standard_tasks)
        self._current_user_id: Optional[str] = None

    @classmethod
    def from_seed(cls, *, config: Optional[AppConfig] = None, clock: Callable[[], date] = date.today) -> "TaskStore":
        return cls(
            seed_users(),
            seed_tasks(clock()),
            seed_shifts(),
            STANDARD_TASKS,
            config=config,
            clock=clock,
        )

    # ---------------- snapshots ----------------

    @property
    def users(self) -> Tuple[User, ...]:
        return self._users

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return self._tasks

    @property
    def shifts(self) -> Tuple[Shift, ...]:
        return self._shifts

    @property
    def standard_tasks(self) -> Tuple[str, ...]:
        return self._standard_tasks

    def today(self) -> str:
        return self._clock().isoformat()

    def employees(self) -> List[User]:
        return [u for u in self._users if u.role == Role.EMPLOYEE]

    def get_user(self, user_id: str) -> User:
        for u in self._users:
            if u.id == user_id:
                return u
        raise NotFoundError(f"Unknown user {user_id!r}")

    def find_user(self, user_id: Optional[str]) -> Optional[User]:
        for u in self._users:
            if u.id == user_id:
                return u
        return None

    def get_task(self, task_id: str) -> Task:
        for t in self._tasks:
            if t.id == task_id:
                return t
        raise NotFoundError(f"Unknown task {task_id!r}")

    # ---------------- session ----------------

    @property
    def current_user(self) -> Optional[User]:
        return self.find_user(self._current_user_id)

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def login(self, username: str, password: str) -> User:
        """Sign in; on failure the current user is left untouched."""
        user = auth.login(self._users, username, password, self.config)
        self._current_user_id = user.id
        return user

    def signup(self, name: str, username: str, password: str, role: Role = Role.EMPLOYEE) -> User:
        user = auth.signup(self._users, name, username, password, role, self.config)
        self._users = self._users + (user,)
        self._current_user_id = user.id
        return user

    def logout(self) -> None:
        self._current_user_id = None

    def reset_password(self, username: str, new_password: str) -> None:
        lifecycle.require_manager(self.current_user)
        self._users = auth.reset_password(self._users, username, new_password)

    # ---------------- users & notes ----------------

    def update_user(self, user: User) -> User:
        self.get_user(user.id)
        self._users = tuple(user if u.id == user.id else u for u in self._users)
        return user

    def add_note(self, user_id: str, text: str) -> Note:
        author = self.current_user
        lifecycle.require_manager(author)
        text = (text or "").strip()
        if not text:
            raise ValidationError("Note text is required")
        user = self.get_user(user_id)
        note = Note(id=new_id(), text=text, author=author.name, date=self.today())
        self.update_user(replace(user, private_notes=user.private_notes + (note,)))
        return note

    def edit_note(self, user_id: str, note_id: str, text: str) -> Note:
        editor = self.current_user
        lifecycle.require_manager(editor)
        text = (text or "").strip()
        if not text:
            raise ValidationError("Note text is required")
        user = self.get_user(user_id)
        edited: Optional[Note] = None
        notes = []
        for n in user.private_notes:
            if n.id == note_id:
                edited = replace(n, text=text, last_edited_by=editor.name)
                notes.append(edited)
            else:
                notes.append(n)
        if edited is None:
            raise NotFoundError(f"Unknown note {note_id!r}")
        self.update_user(replace(user, private_notes=tuple(notes)))
        return edited

    # ---------------- missions ----------------

    def add_task(
        self,
        title: str,
        description: str,
        assigned_to_id: str,
        due_date: Optional[str] = None,
        xp_reward: Optional[int] = None,
        instructions: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> Task:
        actor = self.current_user
        lifecycle.require_manager(actor)
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required")
        self.get_user(assigned_to_id)
        reward = self.config.default_xp_reward if xp_reward is None else int(xp_reward)
        if reward < 0:
            raise ValidationError("XP reward cannot be negative")
        task = Task(
            id=new_id(),
            title=title,
            description=(description or "").strip(),
            assigned_to_id=assigned_to_id,
            status=TaskStatus.TODO,
            due_date=due_date or self.today(),
            xp_reward=reward,
            instructions=instructions or "Standard operating procedure applies.",
            image_url=image_url,
            assigned_by=actor.name,
        )
        self._tasks = self._tasks + (task,)
        return task

    def _replace_task(self, task: Task) -> Task:
        self.get_task(task.id)
        self._tasks = tuple(task if t.id == task.id else t for t in self._tasks)
        return task

    def update_task(self, task: Task) -> Task:
        """Replace the stored record with the same id (full substitution, manager only).

        Status and verification must match the stored record; they only move
        through the lifecycle operations below.
        """
        lifecycle.require_manager(self.current_user)
        stored = self.get_task(task.id)
        changed = sorted(f for f in lifecycle.LOCKED_FIELDS if getattr(task, f) != getattr(stored, f))
        if changed:
            raise TaskEditError(f"Use the mission actions to change {', '.join(changed)}")
        if not (task.title or "").strip():
            raise ValidationError("Title is required")
        self.get_user(task.assigned_to_id)
        return self._replace_task(task)

    def edit_task(self, task_id: str, **changes: Any) -> Task:
        task = lifecycle.edit_task(self.get_task(task_id), self.current_user, **changes)
        if "assigned_to_id" in changes:
            self.get_user(task.assigned_to_id)
        return self._replace_task(task)

    def start_task(self, task_id: str) -> Task:
        task = self.get_task(task_id)
        lifecycle.require_actor(self.current_user, task)
        return self._replace_task(lifecycle.start_task(task))

    def complete_task(self, task_id: str) -> int:
        """Mark a mission completed and credit its assignee; returns XP awarded."""
        task = self.get_task(task_id)
        lifecycle.require_actor(self.current_user, task)
        assignee = self.find_user(task.assigned_to_id)
        done, xp_delta = lifecycle.complete_task(task, assignee)
        self._replace_task(done)
        if xp_delta and assignee is not None:
            self.update_user(gamification.award_xp(assignee, xp_delta, xp_per_level=self.config.xp_per_level))
        return xp_delta

    def set_verified(self, task_id: str, verified: bool) -> Task:
        return self._replace_task(lifecycle.set_verified(self.get_task(task_id), verified, self.current_user))

    def delete_task(self, task_id: str) -> None:
        lifecycle.require_manager(self.current_user)
        self.get_task(task_id)
        self._tasks = tuple(t for t in self._tasks if t.id != task_id)

    def visible_tasks(self, **manager_filters: Any) -> List[Task]:
        user = self.current_user
        if user is None:
            return []
        return filters.visible_tasks(self._tasks, user, self.today(), **manager_filters)

    # ---------------- standard library ----------------

    def add_standard_task(self, title: str) -> bool:
        """Add a title to the library; returns False when it was already there."""
        lifecycle.require_manager(self.current_user)
        before = len(self._standard_tasks)
        self._standard_tasks = filters.add_standard_title(self._standard_tasks, title)
        return len(self._standard_tasks) > before

    # ---------------- shifts ----------------

    def upload_shift(self, file_name: str) -> Shift:
        actor = self.current_user
        lifecycle.require_manager(actor)
        file_name = (file_name or "").strip()
        if not file_name:
            raise ValidationError("Choose a file to upload")
        today = self.today()
        shift = Shift(
            id=new_id(),
            title=f"Schedule {today}",
            date=today,
            file_name=file_name,
            uploaded_by=actor.id,
        )
        self._shifts = (shift,) + self._shifts
        return shift
