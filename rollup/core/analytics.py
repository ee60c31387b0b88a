"""Project, task and user rollups derived from a board snapshot."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Sequence

from rollup.core.ordering import unique_in_order
from rollup.core.schema import (
    ActivityFeed,
    AnalyticsBundle,
    Project,
    ProjectRollup,
    ProjectStatistics,
    Task,
    TaskRollup,
    User,
    UserRollup,
    UserStatistics,
)
from rollup.core.settings import EngineSettings, get_settings


def _as_utc(value: datetime) -> datetime:
    # naive timestamps are treated as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _rate(part: int, whole: int) -> float:
    if whole == 0:
        return 0.0
    return part / whole * 100


def _is_past_due(due_date: datetime | None, now: datetime) -> bool:
    if due_date is None:
        return False
    return _as_utc(due_date) < now


def _task_overdue(task: Task, now: datetime) -> bool:
    return not task.is_completed and _is_past_due(task.due_date, now)


def _project_overdue(project: Project, now: datetime) -> bool:
    return project.status != "completed" and _is_past_due(project.due_date, now)


def _project_statistics(project: Project, tasks: Sequence[Task], now: datetime) -> ProjectStatistics:
    project_tasks = [task for task in tasks if task.project_id == project.id]
    completed = sum(1 for task in project_tasks if task.is_completed)
    return ProjectStatistics(
        project_id=project.id,
        name=project.name,
        status=project.status,
        task_count=len(project_tasks),
        completed_count=completed,
        progress=_rate(completed, len(project_tasks)),
        estimated_hours=sum((task.estimated_hours or Decimal("0") for task in project_tasks), Decimal("0")),
        actual_hours=sum((task.actual_hours or Decimal("0") for task in project_tasks), Decimal("0")),
        assigned_user_ids=unique_in_order(task.assigned_to for task in project_tasks),
        is_overdue=_project_overdue(project, now),
    )


def _user_statistics(user: User, tasks: Sequence[Task], now: datetime) -> UserStatistics:
    user_tasks = [task for task in tasks if task.assigned_to == user.id]
    completed = sum(1 for task in user_tasks if task.is_completed)
    return UserStatistics(
        user_id=user.id,
        name=user.name,
        assigned_task_count=len(user_tasks),
        completed_count=completed,
        completion_rate=_rate(completed, len(user_tasks)),
        overdue_count=sum(1 for task in user_tasks if _task_overdue(task, now)),
        workload=len(user_tasks) - completed,
        project_ids=unique_in_order(task.project_id for task in user_tasks),
    )


def compute_analytics(
    projects: Sequence[Project],
    tasks: Sequence[Task],
    users: Sequence[User],
    now: datetime,
    settings: EngineSettings | None = None,
) -> AnalyticsBundle:
    """Build per-project, per-user and aggregate statistics.

    ``now`` is passed in rather than read from the clock; it only influences
    the overdue flags and the active-user count.
    """

    settings = settings or get_settings()
    now = _as_utc(now)
    active_since = now - timedelta(days=settings.active_user_window_days)

    completed_projects = sum(1 for project in projects if project.status == "completed")
    project_totals = ProjectRollup(
        total=len(projects),
        active=sum(1 for project in projects if project.status == "active"),
        completed=completed_projects,
        overdue=sum(1 for project in projects if _project_overdue(project, now)),
        completion_rate=_rate(completed_projects, len(projects)),
    )

    completed_tasks = sum(1 for task in tasks if task.is_completed)
    task_totals = TaskRollup(
        total=len(tasks),
        completed=completed_tasks,
        pending=sum(1 for task in tasks if task.status == "todo"),
        in_progress=sum(1 for task in tasks if task.status == "in-progress"),
        overdue=sum(1 for task in tasks if _task_overdue(task, now)),
        completion_rate=_rate(completed_tasks, len(tasks)),
    )

    user_totals = UserRollup(
        total=len(users),
        active=sum(
            1 for user in users if user.last_active is not None and _as_utc(user.last_active) > active_since
        ),
    )

    return AnalyticsBundle(
        projects=[_project_statistics(project, tasks, now) for project in projects],
        users=[_user_statistics(user, tasks, now) for user in users],
        project_totals=project_totals,
        task_totals=task_totals,
        user_totals=user_totals,
    )


def compute_activity_feed(
    tasks: Sequence[Task],
    now: datetime,
    settings: EngineSettings | None = None,
) -> ActivityFeed:
    """Recently created tasks and deadlines falling inside the activity window."""

    settings = settings or get_settings()
    now = _as_utc(now)
    window = timedelta(days=settings.activity_window_days)

    recent = [task for task in tasks if task.created_at is not None and _as_utc(task.created_at) > now - window]
    recent.sort(key=lambda task: _as_utc(task.created_at), reverse=True)

    upcoming = [
        task
        for task in tasks
        if not task.is_completed and task.due_date is not None and now <= _as_utc(task.due_date) <= now + window
    ]
    upcoming.sort(key=lambda task: _as_utc(task.due_date))

    return ActivityFeed(
        recent_tasks=recent[: settings.recent_task_limit],
        upcoming_deadlines=upcoming,
    )
