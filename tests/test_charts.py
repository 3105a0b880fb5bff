from conftest import make_task, make_user
from taskmaster import charts
from taskmaster.models import Role, TaskStatus


def test_tasks_to_df_empty_has_columns():
    df = charts.tasks_to_df([])
    assert df.empty
    assert 'assigned_to_id' in df.columns


def test_status_donut_counts():
    tasks = [make_task('t1', 'e1'), make_task('t2', 'e1', status=TaskStatus.COMPLETED)]
    fig = charts.status_donut(tasks)
    assert list(fig.data[0].labels) == ['To Do', 'In Progress', 'Completed']
    assert list(fig.data[0].values) == [1, 0, 1]


def test_workload_bar_has_one_trace_per_state():
    users = [make_user('m1', role=Role.MANAGER), make_user('e1', name='Ann Lee')]
    fig = charts.workload_bar([make_task('t1', 'e1')], users)
    assert sorted(trace.name for trace in fig.data) == ['completed', 'pending']
