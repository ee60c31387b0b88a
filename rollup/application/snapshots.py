"""Application service layer for carts and analytics boards."""
from __future__ import annotations

import logging
from datetime import datetime
from threading import RLock

from rollup.core.analytics import compute_activity_feed, compute_analytics
from rollup.core.cart import compute_cart_summary
from rollup.core.schema import (
    ActivityFeed,
    AnalyticsBundle,
    CartSummary,
    Item,
    Project,
    ShippingMethod,
    Task,
    TaskStatus,
    User,
)
from rollup.core.settings import get_settings
from rollup.core.validation import validate_board, validate_task
from rollup.domain import BoardState
from rollup.infrastructure import InMemorySnapshotRepository, SnapshotRepository

logger = logging.getLogger(__name__)


class SnapshotService:
    """Coordinates updates to source entities and derives views on read.

    Updates never modify a stored entity: collections are rebuilt and entities
    are copied with ``model_copy``. Derived bundles are recomputed on every
    call and are not stored anywhere.
    """

    def __init__(self, repository: SnapshotRepository) -> None:
        self._repository = repository
        self._write_lock = RLock()

    # ------------------------------------------------------------------
    # carts
    # ------------------------------------------------------------------
    def list_items(self, cart_id: str) -> list[Item]:
        return list(self._repository.get_cart(cart_id).items)

    def add_item(self, cart_id: str, item: Item) -> list[Item]:
        with self._write_lock:
            items = self._repository.get_cart(cart_id).items
            existing = next((current for current in items if current.id == item.id), None)
            if existing is None:
                updated = items + (item,)
            else:
                updated = tuple(
                    current.model_copy(update={"quantity": current.quantity + item.quantity})
                    if current.id == item.id
                    else current
                    for current in items
                )
            self._repository.replace_items(cart_id, updated)
        logger.debug("cart %s: added %s x%d", cart_id, item.id, item.quantity)
        return list(updated)

    def remove_item(self, cart_id: str, item_id: str) -> list[Item]:
        with self._write_lock:
            items = self._repository.get_cart(cart_id).items
            if not any(item.id == item_id for item in items):
                raise KeyError(item_id)
            updated = tuple(item for item in items if item.id != item_id)
            self._repository.replace_items(cart_id, updated)
        logger.debug("cart %s: removed %s", cart_id, item_id)
        return list(updated)

    def update_quantity(self, cart_id: str, item_id: str, quantity: int) -> list[Item]:
        if quantity <= 0:
            return self.remove_item(cart_id, item_id)
        with self._write_lock:
            items = self._repository.get_cart(cart_id).items
            if not any(item.id == item_id for item in items):
                raise KeyError(item_id)
            updated = tuple(
                item.model_copy(update={"quantity": quantity}) if item.id == item_id else item for item in items
            )
            self._repository.replace_items(cart_id, updated)
        return list(updated)

    def clear_cart(self, cart_id: str) -> None:
        with self._write_lock:
            self._repository.replace_items(cart_id, ())
        logger.info("cart %s cleared", cart_id)

    def cart_summary(
        self,
        cart_id: str,
        coupon_code: str = "",
        shipping_method: ShippingMethod | str = ShippingMethod.STANDARD,
    ) -> CartSummary:
        items = self._repository.get_cart(cart_id).items
        return compute_cart_summary(items, coupon_code, shipping_method, get_settings())

    def list_carts(self) -> list[str]:
        return self._repository.list_carts()

    # ------------------------------------------------------------------
    # boards
    # ------------------------------------------------------------------
    def board_snapshot(self, board_id: str) -> BoardState:
        return self._repository.get_board(board_id)

    def add_project(self, board_id: str, project: Project) -> Project:
        with self._write_lock:
            board = self._repository.get_board(board_id)
            projects = board.projects + (project,)
            validate_board(projects, board.tasks, board.users)
            self._repository.replace_board(board_id, projects=projects)
        logger.info("board %s: project %s added", board_id, project.id)
        return project

    def add_user(self, board_id: str, user: User) -> User:
        with self._write_lock:
            board = self._repository.get_board(board_id)
            users = board.users + (user,)
            validate_board(board.projects, board.tasks, users)
            self._repository.replace_board(board_id, users=users)
        logger.info("board %s: user %s added", board_id, user.id)
        return user

    def add_task(self, board_id: str, task: Task) -> Task:
        with self._write_lock:
            board = self._repository.get_board(board_id)
            tasks = board.tasks + (task,)
            validate_board(board.projects, tasks, board.users)
            self._repository.replace_board(board_id, tasks=tasks)
        logger.info("board %s: task %s added", board_id, task.id)
        return task

    def update_task_status(self, board_id: str, task_id: str, status: TaskStatus, at: datetime) -> Task:
        """Move a task to ``status``; ``completed_at`` follows the completion state."""

        with self._write_lock:
            board = self._repository.get_board(board_id)
            current = next((task for task in board.tasks if task.id == task_id), None)
            if current is None:
                raise KeyError(task_id)
            changed = current.model_copy(
                update={"status": status, "completed_at": at if status == "completed" else None}
            )
            validate_task(changed)
            tasks = tuple(changed if task.id == task_id else task for task in board.tasks)
            self._repository.replace_board(board_id, tasks=tasks)
        logger.info("board %s: task %s moved to %s", board_id, task_id, status)
        return changed

    def delete_task(self, board_id: str, task_id: str) -> None:
        with self._write_lock:
            board = self._repository.get_board(board_id)
            if not any(task.id == task_id for task in board.tasks):
                raise KeyError(task_id)
            tasks = tuple(task for task in board.tasks if task.id != task_id)
            self._repository.replace_board(board_id, tasks=tasks)
        logger.info("board %s: task %s deleted", board_id, task_id)

    def board_analytics(self, board_id: str, now: datetime) -> AnalyticsBundle:
        board = self._repository.get_board(board_id)
        return compute_analytics(board.projects, board.tasks, board.users, now, get_settings())

    def board_activity(self, board_id: str, now: datetime) -> ActivityFeed:
        board = self._repository.get_board(board_id)
        return compute_activity_feed(board.tasks, now, get_settings())

    def list_boards(self) -> list[str]:
        return self._repository.list_boards()

    # ------------------------------------------------------------------
    # testing helpers
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self._repository.reset()


_repository = InMemorySnapshotRepository()
_service = SnapshotService(_repository)


def get_snapshot_service() -> SnapshotService:
    """Return the singleton snapshot service for the process."""

    return _service


def reset_snapshot_state() -> None:
    """Reset the in-memory store (used in tests)."""

    _service.reset()
