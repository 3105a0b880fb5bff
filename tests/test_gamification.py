import pytest

from conftest import make_user
from taskmaster.gamification import (
    award_xp,
    derived_level,
    leaderboard,
    level_progress,
    xp_to_next_level,
)
from taskmaster.models import Role


def test_award_xp_adds_amount():
    user = make_user('e1', xp=100)
    updated = award_xp(user, 50)
    assert updated.xp == 150
    assert user.xp == 100


def test_award_zero_returns_same_record():
    user = make_user('e1', xp=100)
    assert award_xp(user, 0) is user


def test_award_negative_rejected():
    with pytest.raises(ValueError):
        award_xp(make_user('e1'), -5)


def test_level_follows_xp():
    user = make_user('e1', xp=950, level=1)
    assert award_xp(user, 100).level == 2


def test_level_never_drops_below_stored_value():
    user = make_user('m1', xp=5000, level=10)
    assert award_xp(user, 10).level == 10


def test_derived_level():
    assert derived_level(0) == 1
    assert derived_level(999) == 1
    assert derived_level(1000) == 2
    assert derived_level(2400, xp_per_level=500) == 5


def test_progress_helpers():
    assert level_progress(1200) == 20.0
    assert xp_to_next_level(1200) == 800
    assert xp_to_next_level(2000) == 1000
    assert level_progress(0) == 0.0


def test_leaderboard_orders_employees_by_xp():
    users = [
        make_user('m1', role=Role.MANAGER, xp=9000),
        make_user('a', xp=300),
        make_user('b', xp=800),
        make_user('c', xp=300),
    ]
    assert [u.id for u in leaderboard(users)] == ['b', 'a', 'c']
