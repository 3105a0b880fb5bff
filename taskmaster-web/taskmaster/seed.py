"""Default roster, missions, schedules and standard task titles.

Every new session starts from these; nothing is persisted between sessions.
"""
from __future__ import annotations

from datetime import date
from typing import Optional, Tuple

from taskmaster.models import Note, Role, Shift, Task, TaskStatus, User

DEFAULT_PASSWORD = "grocery"
DEFAULT_MANAGER_USERNAME = "lamec.zehrs"

STANDARD_TASKS: Tuple[str, ...] = (
    "RESTOCK AISLE",
    "FACE PRODUCE DISPLAY",
    "CHECK DAIRY TEMPERATURES",
    "CLEAN CHECKOUT LANES",
    "INVENTORY AUDIT",
    "ROTATE BAKERY STOCK",
    "RECOVER FRONT END",
    "PRICE CHANGE UPDATES",
    "CART CORRAL ROUND-UP",
    "FREEZER DOOR WIPE-DOWN",
)


def seed_users() -> Tuple[User, ...]:
    return (
        User(
            id="u1",
            name="Lamec Zehrs",
            username=DEFAULT_MANAGER_USERNAME,
            email="lamec.zehrs@store.com",
            password=DEFAULT_PASSWORD,
            role=Role.MANAGER,
            avatar="https://picsum.photos/200/200?random=1",
            level=10,
            xp=5000,
        ),
        User(
            id="u2",
            name="John Doe",
            username="john.zehrs",
            email="john.zehrs@store.com",
            password=DEFAULT_PASSWORD,
            role=Role.EMPLOYEE,
            avatar="https://picsum.photos/200/200?random=2",
            level=3,
            xp=1200,
            private_notes=(
                Note(
                    id="n1",
                    text="Great attitude with customers at the front end.",
                    author="Lamec Zehrs",
                    date="2023-10-28",
                ),
            ),
        ),
        User(
            id="u3",
            name="Jane Smith",
            username="jane.zehrs",
            email="jane.zehrs@store.com",
            password=DEFAULT_PASSWORD,
            role=Role.EMPLOYEE,
            avatar="https://picsum.photos/200/200?random=3",
            level=5,
            xp=2400,
        ),
    )


def seed_tasks(today: Optional[date] = None) -> Tuple[Task, ...]:
    today_s = (today or date.today()).isoformat()
    return (
        Task(
            id="t1",
            title="Restock Aisle 4",
            description="The pasta section is running low. Please restock from inventory.",
            assigned_to_id="u2",
            status=TaskStatus.TODO,
            image_url="https://picsum.photos/600/400?random=10",
            instructions="1. Check inventory level. 2. Bring boxes to aisle. 3. Stock using FIFO method.",
            due_date=today_s,
            xp_reward=50,
            assigned_by="Lamec Zehrs",
        ),
        Task(
            id="t2",
            title="Checkout Counter Setup",
            description="Ensure all POS systems are updated and receipt paper is full.",
            assigned_to_id="u2",
            status=TaskStatus.IN_PROGRESS,
            image_url="https://picsum.photos/600/400?random=11",
            instructions="Verify connection, clean screen, refill paper.",
            due_date=today_s,
            xp_reward=30,
            assigned_by="Lamec Zehrs",
        ),
        Task(
            id="t3",
            title="Inventory Audit",
            description="Count stock for the dairy section.",
            assigned_to_id="u3",
            status=TaskStatus.COMPLETED,
            image_url="https://picsum.photos/600/400?random=12",
            instructions="Use the scanner to log all items in the dairy fridge.",
            due_date="2023-10-29",
            xp_reward=100,
            assigned_by="Lamec Zehrs",
        ),
    )


def seed_shifts() -> Tuple[Shift, ...]:
    return (
        Shift(
            id="s1",
            title="November Week 1 Schedule",
            date="2023-11-01",
            file_name="schedule_nov_w1.pdf",
            uploaded_by="u1",
        ),
    )
