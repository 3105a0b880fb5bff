from dataclasses import replace

from conftest import make_task
from taskmaster import theme
from taskmaster.models import TaskStatus


def test_set_theme():
    try:
        theme.set_theme(page_title='Missions')
    except Exception as e:
        assert False, f'set_theme raised an exception: {e}'


def test_task_card_escapes_title():
    task = replace(make_task('t1', 'e1'), title='<b>Aisle</b>')
    card = theme.task_card_html(task, 'John Doe')
    assert '&lt;b&gt;Aisle&lt;/b&gt;' in card
    assert 'John' in card and 'Doe' not in card
    assert '50 XP' in card


def test_column_header():
    assert 'In Progress · 2' in theme.column_header_html(TaskStatus.IN_PROGRESS, 2)
