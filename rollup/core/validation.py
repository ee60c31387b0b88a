from __future__ import annotations

from typing import Iterable, Sequence

from rollup.core.schema import Project, Task, User


class ValidationError(Exception):
    """Raised when domain validation fails."""


def _check_unique(kind: str, ids: Iterable[str]) -> None:
    seen: set[str] = set()
    for entity_id in ids:
        if entity_id in seen:
            raise ValidationError(f"duplicate {kind} id: {entity_id}")
        seen.add(entity_id)


def validate_task(task: Task) -> None:
    if task.completed_at is not None and not task.is_completed:
        raise ValidationError(f"task {task.id} has completed_at but status {task.status}")


def validate_board(projects: Sequence[Project], tasks: Sequence[Task], users: Sequence[User]) -> None:
    _check_unique("project", (project.id for project in projects))
    _check_unique("task", (task.id for task in tasks))
    _check_unique("user", (user.id for user in users))

    project_ids = {project.id for project in projects}
    user_ids = {user.id for user in users}
    for task in tasks:
        validate_task(task)
        if task.project_id is not None and task.project_id not in project_ids:
            raise ValidationError(f"task {task.id} references unknown project {task.project_id}")
        if task.assigned_to is not None and task.assigned_to not in user_ids:
            raise ValidationError(f"task {task.id} references unknown user {task.assigned_to}")
