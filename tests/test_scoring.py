from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from agency_dashboard.models.choices import Priority
from agency_dashboard.schemas.profile import TaskBreakdown
from agency_dashboard.services.analysis import completion_rate, rank_employees
from agency_dashboard.services.tasks import can_delete, can_modify, can_view, points_for_priority, stamp_lifecycle


def _employee(user_id, name, points=0, department="Web"):
    return SimpleNamespace(
        id=user_id,
        name=name,
        phone=None,
        department=department,
        role="employee",
        completed_tasks=0,
        points=points,
        streak=0,
        last_login=None,
        profile_picture="",
        created_at=None,
        is_admin=False,
    )


@pytest.mark.parametrize("priority, expected", [
    (Priority.HIGH, 30),
    (Priority.MEDIUM, 20),
    (Priority.LOW, 10),
    ("High", 30),
    ("Medium", 20),
    ("Low", 10),
    ("Urgent", 10),
    (None, 10),
])
def test_points_for_priority(priority, expected):
    assert points_for_priority(priority) == expected


def test_stamp_lifecycle_sets_timestamps_once():
    first = datetime(2024, 1, 1, tzinfo=timezone.utc)
    later = first + timedelta(days=3)
    task = SimpleNamespace(status="In Progress", started_at=None, completed_at=None)

    stamp_lifecycle(task, now=first)
    assert task.started_at == first
    assert task.completed_at is None

    task.status = "Pending"
    stamp_lifecycle(task, now=later)
    task.status = "In Progress"
    stamp_lifecycle(task, now=later)
    assert task.started_at == first

    task.status = "Completed"
    stamp_lifecycle(task, now=later)
    assert task.completed_at == later
    stamp_lifecycle(task, now=later + timedelta(days=1))
    assert task.completed_at == later


def test_pending_task_gets_no_timestamps():
    task = SimpleNamespace(status="Pending", started_at=None, completed_at=None)
    stamp_lifecycle(task)
    assert task.started_at is None and task.completed_at is None


def test_ownership_rules():
    admin = SimpleNamespace(id=1, department="Admin", is_admin=True)
    assigner = _employee(2, "Bob", department="SEO")
    assignee = _employee(3, "Alice", department="Web")
    colleague = _employee(4, "Carol", department="Web")
    outsider = _employee(5, "Dan", department="HR")
    task = SimpleNamespace(department="Web", assigned_by_id=2, assigned_to_id=3)

    assert can_modify(admin, task) and can_delete(admin, task)
    assert can_modify(assignee, task) and not can_delete(assignee, task)
    assert can_delete(assigner, task) and not can_modify(assigner, task)
    assert not can_modify(colleague, task) and not can_delete(colleague, task)

    assert can_view(colleague, task)
    assert can_view(assignee, task)
    assert not can_view(outsider, task)


def test_rank_employees_orders_by_points():
    a, b, c = _employee(1, "A"), _employee(2, "B"), _employee(3, "C")
    board = rank_employees([a, b, c], {1: (2, 50), 2: (3, 80), 3: (1, 20)})
    assert [e.name for e in board] == ["B", "A", "C"]
    assert [e.points for e in board] == [80, 50, 20]
    assert [e.completed_tasks for e in board] == [3, 2, 1]


def test_rank_employees_defaults_missing_to_zero_and_keeps_tie_order():
    employees = [_employee(1, "A", points=999), _employee(2, "B"), _employee(3, "C")]
    board = rank_employees(employees, {3: (1, 10)})
    assert [e.name for e in board] == ["C", "A", "B"]
    # stored totals are replaced by the window totals
    assert board[1].points == 0


def test_completion_rate():
    assert completion_rate(TaskBreakdown()) == 0
    assert completion_rate(TaskBreakdown(total=3, completed=1)) == 33.3
    assert completion_rate(TaskBreakdown(total=4, completed=4)) == 100.0
