from dataclasses import replace

import pytest

from conftest import TODAY, make_task, make_user
from taskmaster.app_config import AppConfig
from taskmaster.errors import (
    AuthError,
    NotFoundError,
    PermissionDenied,
    TaskEditError,
    TransitionError,
    ValidationError,
)
from taskmaster.models import Role, TaskStatus
from taskmaster.store import TaskStore


def make_store(users, tasks):
    store = TaskStore(
        [make_user('m1', role=Role.MANAGER)] + list(users),
        tasks,
        config=AppConfig.default(),
        clock=lambda: TODAY,
    )
    store.login('m1.zehrs', 'pw')
    return store


def test_completing_awards_xp_once():
    store = make_store([make_user('e1', xp=100)], [make_task('t1', 'e1', xp=50)])

    assert store.complete_task('t1') == 50
    assert store.get_task('t1').status == TaskStatus.COMPLETED
    assert store.get_user('e1').xp == 150

    assert store.complete_task('t1') == 0
    assert store.get_user('e1').xp == 150


def test_completing_from_in_progress_awards_xp():
    store = make_store([make_user('e1')], [make_task('t1', 'e1', status=TaskStatus.IN_PROGRESS, xp=30)])
    store.complete_task('t1')
    assert store.get_user('e1').xp == 30


def test_completion_levels_up_assignee():
    store = make_store([make_user('e1', xp=990)], [make_task('t1', 'e1', xp=20)])
    store.complete_task('t1')
    user = store.get_user('e1')
    assert (user.xp, user.level) == (1010, 2)


def test_current_user_sees_awarded_xp():
    store = make_store([make_user('e1', xp=100)], [make_task('t1', 'e1', xp=50)])
    store.logout()
    store.login('e1.zehrs', 'pw')
    store.complete_task('t1')
    assert store.current_user.xp == 150


def test_seeded_store_contents(seeded_store):
    assert [u.username for u in seeded_store.users] == ['lamec.zehrs', 'john.zehrs', 'jane.zehrs']
    assert [t.id for t in seeded_store.tasks] == ['t1', 't2', 't3']
    assert seeded_store.get_task('t1').due_date == TODAY.isoformat()
    assert seeded_store.current_user is None
    assert not seeded_store.is_authenticated


def test_login_sets_exact_roster_record(seeded_store):
    user = seeded_store.login('lamec.zehrs', 'grocery')
    assert user is seeded_store.users[0]
    assert seeded_store.current_user == user


def test_failed_login_keeps_current_user(manager_store):
    before = manager_store.current_user
    with pytest.raises(AuthError):
        manager_store.login('john.zehrs', 'wrongpass')
    assert manager_store.current_user == before


def test_signup_appends_and_signs_in(seeded_store):
    user = seeded_store.signup('Jason Lee', 'jason.zehrs', 'pw')
    assert seeded_store.users[-1] == user
    assert seeded_store.current_user == user
    with pytest.raises(AuthError):
        seeded_store.signup('Jason Again', 'jason.zehrs', 'pw')
    assert len(seeded_store.users) == 4


def test_logout(manager_store):
    manager_store.logout()
    assert manager_store.current_user is None
    assert manager_store.visible_tasks() == []


def test_add_task_defaults(manager_store):
    task = manager_store.add_task('  Face Aisle 7 ', 'Bring product forward', 'u3')
    assert task.title == 'Face Aisle 7'
    assert task.status == TaskStatus.TODO
    assert task.due_date == TODAY.isoformat()
    assert task.xp_reward == AppConfig.DEFAULT_XP_REWARD
    assert task.instructions == 'Standard operating procedure applies.'
    assert task.assigned_by == 'Lamec Zehrs'
    assert manager_store.tasks[-1] == task


def test_add_task_validation(manager_store):
    with pytest.raises(ValidationError):
        manager_store.add_task('', 'desc', 'u2')
    with pytest.raises(NotFoundError):
        manager_store.add_task('Title', 'desc', 'nobody')
    with pytest.raises(ValidationError):
        manager_store.add_task('Title', 'desc', 'u2', xp_reward=-10)


def test_employee_cannot_manage(seeded_store):
    seeded_store.login('john.zehrs', 'grocery')
    with pytest.raises(PermissionDenied):
        seeded_store.add_task('Title', 'desc', 'u2')
    with pytest.raises(PermissionDenied):
        seeded_store.delete_task('t1')
    with pytest.raises(PermissionDenied):
        seeded_store.upload_shift('week.pdf')
    with pytest.raises(PermissionDenied):
        seeded_store.add_note('u3', 'note')
    with pytest.raises(PermissionDenied):
        seeded_store.reset_password('jane.zehrs', 'x')
    with pytest.raises(PermissionDenied):
        seeded_store.add_standard_task('NEW')


def test_employee_can_start_and_complete_own_task(seeded_store):
    seeded_store.login('john.zehrs', 'grocery')
    seeded_store.start_task('t1')
    assert seeded_store.get_task('t1').status == TaskStatus.IN_PROGRESS
    with pytest.raises(TransitionError):
        seeded_store.start_task('t1')
    assert seeded_store.complete_task('t1') == 50
    assert seeded_store.current_user.xp == 1250


def test_edit_task_cannot_change_status(manager_store):
    with pytest.raises(TaskEditError):
        manager_store.edit_task('t1', status=TaskStatus.COMPLETED)
    assert manager_store.get_task('t1').status == TaskStatus.TODO


def test_edit_task_validates_assignee(manager_store):
    with pytest.raises(NotFoundError):
        manager_store.edit_task('t1', assigned_to_id='ghost')
    assert manager_store.get_task('t1').assigned_to_id == 'u2'
    manager_store.edit_task('t1', assigned_to_id='u3', title='Restock Aisle 5')
    task = manager_store.get_task('t1')
    assert (task.assigned_to_id, task.title) == ('u3', 'Restock Aisle 5')


def test_verify_and_delete(manager_store):
    assert manager_store.set_verified('t3', True).manager_verified
    with pytest.raises(TransitionError):
        manager_store.set_verified('t1', True)
    manager_store.delete_task('t2')
    assert [t.id for t in manager_store.tasks] == ['t1', 't3']
    with pytest.raises(NotFoundError):
        manager_store.delete_task('t2')


def test_snapshots_are_not_mutated(manager_store):
    before = manager_store.tasks
    manager_store.start_task('t1')
    assert before[0].status == TaskStatus.TODO
    assert manager_store.tasks[0].status == TaskStatus.IN_PROGRESS


def test_notes(manager_store):
    note = manager_store.add_note('u3', '  Strong closer  ')
    assert note.text == 'Strong closer'
    assert note.author == 'Lamec Zehrs'
    assert note.date == TODAY.isoformat()
    assert manager_store.get_user('u3').private_notes == (note,)

    edited = manager_store.edit_note('u2', 'n1', 'Updated text')
    assert edited.last_edited_by == 'Lamec Zehrs'
    assert edited.author == 'Lamec Zehrs'
    assert manager_store.get_user('u2').private_notes[0].text == 'Updated text'

    with pytest.raises(ValidationError):
        manager_store.add_note('u3', '   ')
    with pytest.raises(NotFoundError):
        manager_store.edit_note('u2', 'missing', 'x')


def test_reset_password(manager_store):
    manager_store.reset_password('jane.zehrs', 'fresh')
    manager_store.logout()
    assert manager_store.login('jane.zehrs', 'fresh').id == 'u3'


def test_upload_shift_prepends(manager_store):
    shift = manager_store.upload_shift('week12.pdf')
    assert manager_store.shifts[0] == shift
    assert shift.title == f'Schedule {TODAY.isoformat()}'
    assert shift.uploaded_by == 'u1'
    assert len(manager_store.shifts) == 2
    with pytest.raises(ValidationError):
        manager_store.upload_shift('  ')


def test_add_standard_task(manager_store):
    count = len(manager_store.standard_tasks)
    assert manager_store.add_standard_task('bale cardboard') is True
    assert manager_store.standard_tasks[-1] == 'BALE CARDBOARD'
    assert manager_store.add_standard_task('Restock Aisle') is False
    assert len(manager_store.standard_tasks) == count + 1


def test_visible_tasks_per_role(seeded_store):
    seeded_store.login('jane.zehrs', 'grocery')
    # t3 was completed on an earlier day
    assert seeded_store.visible_tasks() == []
    seeded_store.logout()
    seeded_store.login('lamec.zehrs', 'grocery')
    assert [t.id for t in seeded_store.visible_tasks(assignee_id='u2', status='IN_PROGRESS')] == ['t2']


def test_update_task_cannot_change_status_or_verification(manager_store):
    task = manager_store.get_task('t1')
    with pytest.raises(TaskEditError):
        manager_store.update_task(replace(task, manager_verified=True))
    with pytest.raises(TaskEditError):
        manager_store.update_task(replace(task, status=TaskStatus.COMPLETED))
    stored = manager_store.get_task('t1')
    assert (stored.status, stored.manager_verified) == (TaskStatus.TODO, False)
    assert manager_store.get_user('u2').xp == 1200


def test_update_task_replaces_descriptive_fields(manager_store):
    task = replace(manager_store.get_task('t1'), title='Restock Aisle 9', xp_reward=80)
    assert manager_store.update_task(task) == task
    assert manager_store.get_task('t1').title == 'Restock Aisle 9'
    with pytest.raises(NotFoundError):
        manager_store.update_task(replace(task, assigned_to_id='ghost'))


def test_update_task_requires_manager(seeded_store):
    seeded_store.login('john.zehrs', 'grocery')
    with pytest.raises(PermissionDenied):
        seeded_store.update_task(replace(seeded_store.get_task('t1'), title='Mine now'))


def test_signed_out_user_cannot_move_missions(seeded_store):
    with pytest.raises(PermissionDenied):
        seeded_store.complete_task('t1')
    with pytest.raises(PermissionDenied):
        seeded_store.start_task('t1')
    assert seeded_store.get_task('t1').status == TaskStatus.TODO
    assert seeded_store.get_user('u2').xp == 1200


def test_employee_cannot_move_colleague_missions(seeded_store):
    seeded_store.login('jane.zehrs', 'grocery')
    with pytest.raises(PermissionDenied):
        seeded_store.complete_task('t1')
    with pytest.raises(PermissionDenied):
        seeded_store.start_task('t1')
    assert seeded_store.get_task('t1').status == TaskStatus.TODO
    assert seeded_store.get_user('u2').xp == 1200
