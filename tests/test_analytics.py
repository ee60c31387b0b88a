from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from rollup.core.analytics import compute_activity_feed, compute_analytics
from rollup.core.schema import Project, Task, User
from rollup.core.settings import EngineSettings

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _board():
    projects = [
        Project(id="p1", name="Website", status="active", due_date=NOW - timedelta(days=1)),
        Project(id="p2", name="Docs", status="completed", due_date=NOW - timedelta(days=10)),
        Project(id="p3", name="Ideas", status="planning"),
    ]
    tasks = [
        Task(id="t1", project_id="p1", assigned_to="u1", status="completed",
             completed_at=NOW - timedelta(days=2), due_date=NOW - timedelta(days=3),
             estimated_hours=Decimal("4"), actual_hours=Decimal("5")),
        Task(id="t2", project_id="p1", assigned_to="u1", status="in-progress",
             due_date=NOW - timedelta(hours=1), estimated_hours=Decimal("2")),
        Task(id="t3", project_id="p1", assigned_to="u2", status="todo",
             due_date=NOW + timedelta(days=2)),
        Task(id="t4", project_id="p2", assigned_to="u2", status="completed",
             completed_at=NOW - timedelta(days=11)),
    ]
    users = [
        User(id="u1", name="Ada", last_active=NOW - timedelta(days=1)),
        User(id="u2", name="Grace", last_active=NOW - timedelta(days=8)),
        User(id="u3", name="Linus"),
    ]
    return projects, tasks, users


def test_empty_inputs_yield_zeroed_bundle():
    bundle = compute_analytics([], [], [], NOW)

    assert bundle.projects == []
    assert bundle.users == []
    assert bundle.project_totals.total == 0
    assert bundle.project_totals.completion_rate == 0.0
    assert bundle.task_totals.total == 0
    assert bundle.task_totals.completion_rate == 0.0
    assert bundle.user_totals.total == 0
    assert bundle.user_totals.active == 0


def test_project_without_tasks_has_zero_progress():
    bundle = compute_analytics([Project(id="solo", status="active")], [], [], NOW)

    stats = bundle.projects[0]
    assert stats.task_count == 0
    assert stats.progress == 0.0
    assert stats.is_overdue is False


def test_project_statistics():
    projects, tasks, users = _board()

    bundle = compute_analytics(projects, tasks, users, NOW)
    by_id = {stats.project_id: stats for stats in bundle.projects}

    website = by_id["p1"]
    assert website.task_count == 3
    assert website.completed_count == 1
    assert website.progress == pytest.approx(100 / 3)
    assert website.estimated_hours == Decimal("6")
    assert website.actual_hours == Decimal("5")
    assert website.assigned_user_ids == ["u1", "u2"]
    assert website.is_overdue is True

    assert by_id["p2"].progress == 100.0
    assert by_id["p2"].is_overdue is False
    assert by_id["p3"].is_overdue is False


def test_user_statistics():
    projects, tasks, users = _board()

    bundle = compute_analytics(projects, tasks, users, NOW)
    by_id = {stats.user_id: stats for stats in bundle.users}

    assert by_id["u1"].assigned_task_count == 2
    assert by_id["u1"].completed_count == 1
    assert by_id["u1"].completion_rate == 50.0
    assert by_id["u1"].overdue_count == 1
    assert by_id["u1"].workload == 1
    assert by_id["u1"].project_ids == ["p1"]

    assert by_id["u2"].project_ids == ["p1", "p2"]
    assert by_id["u2"].overdue_count == 0

    assert by_id["u3"].assigned_task_count == 0
    assert by_id["u3"].completion_rate == 0.0


def test_rollups():
    projects, tasks, users = _board()

    bundle = compute_analytics(projects, tasks, users, NOW)

    assert bundle.project_totals.total == 3
    assert bundle.project_totals.active == 1
    assert bundle.project_totals.completed == 1
    assert bundle.project_totals.overdue == 1
    assert bundle.project_totals.completion_rate == pytest.approx(100 / 3)

    assert bundle.task_totals.total == 4
    assert bundle.task_totals.completed == 2
    assert bundle.task_totals.pending == 1
    assert bundle.task_totals.in_progress == 1
    assert bundle.task_totals.overdue == 1
    assert bundle.task_totals.completion_rate == 50.0

    assert bundle.user_totals.total == 3
    assert bundle.user_totals.active == 1


def test_activity_window_is_strict():
    users = [
        User(id="edge", last_active=NOW - timedelta(days=7)),
        User(id="inside", last_active=NOW - timedelta(days=7) + timedelta(seconds=1)),
    ]

    bundle = compute_analytics([], [], users, NOW)

    assert bundle.user_totals.active == 1


def test_naive_timestamps_compare_as_utc():
    project = Project(id="p", status="active", due_date=datetime(2024, 6, 1, 11, 0))

    bundle = compute_analytics([project], [], [], NOW)

    assert bundle.projects[0].is_overdue is True


def _strip_time_dependent(dump: dict) -> dict:
    for project in dump["projects"]:
        project.pop("is_overdue")
    for user in dump["users"]:
        user.pop("overdue_count")
    dump["project_totals"].pop("overdue")
    dump["task_totals"].pop("overdue")
    dump["user_totals"].pop("active")
    return dump


def test_varying_now_only_changes_overdue_and_activity():
    projects, tasks, users = _board()
    earlier = NOW - timedelta(days=30)

    current = compute_analytics(projects, tasks, users, NOW)
    past = compute_analytics(projects, tasks, users, earlier)

    assert current.project_totals.overdue != past.project_totals.overdue
    assert current.user_totals.active != past.user_totals.active
    assert _strip_time_dependent(current.model_dump()) == _strip_time_dependent(past.model_dump())


def test_inputs_are_not_modified():
    projects, tasks, users = _board()
    snapshot = [entity.model_dump() for entity in (*projects, *tasks, *users)]

    compute_analytics(projects, tasks, users, NOW)
    compute_activity_feed(tasks, NOW)

    assert [entity.model_dump() for entity in (*projects, *tasks, *users)] == snapshot


def test_activity_feed():
    tasks = [
        Task(id="old", created_at=NOW - timedelta(days=9)),
        Task(id="new", created_at=NOW - timedelta(hours=2), due_date=NOW + timedelta(days=6)),
        Task(id="mid", created_at=NOW - timedelta(days=3), due_date=NOW + timedelta(days=1)),
        Task(id="done", status="completed", completed_at=NOW, due_date=NOW + timedelta(days=1)),
        Task(id="late", due_date=NOW - timedelta(days=1)),
        Task(id="far", due_date=NOW + timedelta(days=8)),
    ]

    feed = compute_activity_feed(tasks, NOW)

    assert [task.id for task in feed.recent_tasks] == ["new", "mid"]
    assert [task.id for task in feed.upcoming_deadlines] == ["mid", "new"]


def test_activity_feed_respects_limit():
    tasks = [Task(id=f"t{index}", created_at=NOW - timedelta(minutes=index)) for index in range(5)]

    feed = compute_activity_feed(tasks, NOW, EngineSettings(recent_task_limit=2))

    assert [task.id for task in feed.recent_tasks] == ["t0", "t1"]


def test_percentages_are_not_rounded():
    project = Project(id="p", name="Thirds", status="active")
    tasks = [
        Task(id="t1", project_id="p", assigned_to="u", status="completed"),
        Task(id="t2", project_id="p", assigned_to="u", status="completed"),
        Task(id="t3", project_id="p", assigned_to="u", status="todo"),
    ]
    user = User(id="u", name="Una")

    bundle = compute_analytics([project], tasks, [user], NOW)

    assert bundle.projects[0].progress == pytest.approx(200 / 3)
    assert bundle.projects[0].progress != 66.67
    assert bundle.users[0].completion_rate == pytest.approx(200 / 3)
    assert bundle.task_totals.completion_rate == pytest.approx(200 / 3)
