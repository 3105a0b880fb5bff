"""Domain records for TaskMaster.

All records are frozen dataclasses. Updates go through ``dataclasses.replace``
and the store swaps the whole record by id, so views never observe a
half-edited object.
"""
from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class Role(str, Enum):
    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


STATUS_LABELS = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.COMPLETED: "Completed",
}


def new_id() -> str:
    return uuid.uuid4().hex[:9]


@dataclass(frozen=True)
class Note:
    id: str
    text: str
    author: str
    date: str
    last_edited_by: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class User:
    id: str
    name: str
    username: str
    email: str
    role: Role
    password: Optional[str] = None
    avatar: Optional[str] = None
    level: int = 1
    xp: int = 0
    private_notes: Tuple[Note, ...] = field(default_factory=tuple)

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0] if self.name else ""

    def to_dict(self, *, include_password: bool = False) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "email": self.email,
            "role": self.role.value,
            "avatar": self.avatar,
            "level": self.level,
            "xp": self.xp,
            "private_notes": [n.to_dict() for n in self.private_notes],
        }
        if include_password:
            data["password"] = self.password
        return data


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    description: str
    assigned_to_id: str
    due_date: str
    status: TaskStatus = TaskStatus.TODO
    xp_reward: int = 0
    image_url: Optional[str] = None
    instructions: Optional[str] = None
    manager_verified: bool = False
    assigned_by: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass(frozen=True)
class Shift:
    id: str
    title: str
    date: str
    file_name: str
    uploaded_by: str
    file_url: str = "#"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
