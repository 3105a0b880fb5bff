from datetime import date

import pytest

from taskmaster.app_config import AppConfig
from taskmaster.insight_log.config import reset_config
from taskmaster.insight_log.db import dispose_engines
from taskmaster.models import Role, Task, TaskStatus, User
from taskmaster.store import TaskStore

TODAY = date(2024, 3, 15)


@pytest.fixture(autouse=True)
def insight_log_db(tmp_path, monkeypatch):
    """Point the insight log at a throwaway SQLite file for every test."""
    url = f"sqlite:///{tmp_path / 'insight_log.db'}"
    monkeypatch.setenv("INSIGHT_LOG_DATABASE_URL", url)
    monkeypatch.setenv("INSIGHT_LOG_ENABLED", "true")
    reset_config()
    yield url
    dispose_engines()
    reset_config()


@pytest.fixture
def seeded_store():
    return TaskStore.from_seed(config=AppConfig.default(), clock=lambda: TODAY)


@pytest.fixture
def manager_store(seeded_store):
    seeded_store.login("lamec.zehrs", "grocery")
    return seeded_store


def make_user(uid, role=Role.EMPLOYEE, xp=0, level=1, name=None):
    name = name or f"User {uid}"
    return User(
        id=uid,
        name=name,
        username=f"{uid}.zehrs",
        email=f"{uid}.zehrs@store.com",
        password="pw",
        role=role,
        level=level,
        xp=xp,
    )


def make_task(tid, assignee, status=TaskStatus.TODO, due="2024-03-15", xp=50):
    return Task(
        id=tid,
        title=f"Task {tid}",
        description="desc",
        assigned_to_id=assignee,
        status=status,
        due_date=due,
        xp_reward=xp,
    )
