from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Literal

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import FileResponse
from pydantic import BaseModel, ValidationError

from rollup.application import get_snapshot_service
from rollup.core.exports import export_path
from rollup.core.schema import Project, Task, User
from rollup.core.validation import ValidationError as DomainValidationError
from rollup.exporters.analytics_csv import export_project_statistics, export_user_statistics

router = APIRouter(prefix="/boards", tags=["boards"])
logger = logging.getLogger(__name__)


def _now(value: datetime | None) -> datetime:
    return value or datetime.now(timezone.utc)


def _parse(model: type[BaseModel], payload: dict[str, Any]) -> Any:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc


def _add(board_id: str, entity: Any, add) -> dict:
    try:
        add(board_id, entity)
    except DomainValidationError as exc:
        logger.warning("board %s rejected %s: %s", board_id, entity.id, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return entity.model_dump(mode="json")


@router.get("")
async def list_boards() -> dict:
    service = get_snapshot_service()
    return {"items": service.list_boards()}


@router.get("/{board_id}")
async def get_board(board_id: str) -> dict:
    service = get_snapshot_service()
    board = service.board_snapshot(board_id)
    return {
        "board_id": board.board_id,
        "projects": [project.model_dump(mode="json") for project in board.projects],
        "tasks": [task.model_dump(mode="json") for task in board.tasks],
        "users": [user.model_dump(mode="json") for user in board.users],
    }


@router.post("/{board_id}/projects")
async def add_project(board_id: str, payload: dict) -> dict:
    service = get_snapshot_service()
    return _add(board_id, _parse(Project, payload), service.add_project)


@router.post("/{board_id}/users")
async def add_user(board_id: str, payload: dict) -> dict:
    service = get_snapshot_service()
    return _add(board_id, _parse(User, payload), service.add_user)


@router.post("/{board_id}/tasks")
async def add_task(board_id: str, payload: dict) -> dict:
    service = get_snapshot_service()
    return _add(board_id, _parse(Task, payload), service.add_task)


class StatusChange(BaseModel):
    status: Literal["todo", "in-progress", "review", "completed"]
    at: datetime | None = None


@router.patch("/{board_id}/tasks/{task_id}")
async def update_task_status(board_id: str, task_id: str, payload: dict) -> dict:
    change = _parse(StatusChange, payload)
    service = get_snapshot_service()
    try:
        task = service.update_task_status(board_id, task_id, change.status, _now(change.at))
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="task not found") from exc
    return task.model_dump(mode="json")


@router.delete("/{board_id}/tasks/{task_id}")
async def delete_task(board_id: str, task_id: str) -> dict:
    service = get_snapshot_service()
    try:
        service.delete_task(board_id, task_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="task not found") from exc
    return {"deleted": task_id}


@router.get("/{board_id}/analytics")
async def get_analytics(board_id: str, now: datetime | None = Query(default=None)) -> dict:
    service = get_snapshot_service()
    return service.board_analytics(board_id, _now(now)).model_dump(mode="json")


@router.get("/{board_id}/activity")
async def get_activity(board_id: str, now: datetime | None = Query(default=None)) -> dict:
    service = get_snapshot_service()
    return service.board_activity(board_id, _now(now)).model_dump(mode="json")


@router.get("/{board_id}/export")
async def export_board(
    board_id: str,
    table: Literal["projects", "users"] = Query(default="projects"),
    now: datetime | None = Query(default=None),
) -> FileResponse:
    service = get_snapshot_service()
    bundle = service.board_analytics(board_id, _now(now))
    target = export_path("boards", board_id, table)
    if table == "projects":
        path = export_project_statistics(target, bundle)
    else:
        path = export_user_statistics(target, bundle)
    return FileResponse(path, media_type="text/csv", filename=path.name)
