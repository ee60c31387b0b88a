"""Infrastructure layer for source-entity storage."""
from __future__ import annotations

from threading import Lock
from typing import Protocol

from rollup.core.schema import Item, Project, Task, User
from rollup.domain import BoardState, CartState


class SnapshotRepository(Protocol):
    """Storage contract for cart and board snapshots."""

    def get_cart(self, cart_id: str) -> CartState: ...

    def replace_items(self, cart_id: str, items: tuple[Item, ...]) -> None: ...

    def list_carts(self) -> list[str]: ...

    def get_board(self, board_id: str) -> BoardState: ...

    def replace_board(
        self,
        board_id: str,
        *,
        projects: tuple[Project, ...] | None = None,
        tasks: tuple[Task, ...] | None = None,
        users: tuple[User, ...] | None = None,
    ) -> None: ...

    def list_boards(self) -> list[str]: ...

    def reset(self) -> None: ...


class InMemorySnapshotRepository:
    """Simple in-memory repository for fast iteration and tests."""

    def __init__(self) -> None:
        self._carts: dict[str, CartState] = {}
        self._boards: dict[str, BoardState] = {}
        self._lock = Lock()

    # ------------------------------------------------------------------
    # carts
    # ------------------------------------------------------------------
    def get_cart(self, cart_id: str) -> CartState:
        cart = self._carts.get(cart_id)
        if cart is None:
            return CartState(cart_id=cart_id)
        return CartState(cart_id=cart.cart_id, items=cart.items)

    def replace_items(self, cart_id: str, items: tuple[Item, ...]) -> None:
        with self._lock:
            self._carts[cart_id] = CartState(cart_id=cart_id, items=tuple(items))

    def list_carts(self) -> list[str]:
        return sorted(self._carts)

    # ------------------------------------------------------------------
    # boards
    # ------------------------------------------------------------------
    def get_board(self, board_id: str) -> BoardState:
        board = self._boards.get(board_id)
        if board is None:
            return BoardState(board_id=board_id)
        return BoardState(
            board_id=board.board_id,
            projects=board.projects,
            tasks=board.tasks,
            users=board.users,
        )

    def replace_board(
        self,
        board_id: str,
        *,
        projects: tuple[Project, ...] | None = None,
        tasks: tuple[Task, ...] | None = None,
        users: tuple[User, ...] | None = None,
    ) -> None:
        with self._lock:
            current = self._boards.get(board_id) or BoardState(board_id=board_id)
            self._boards[board_id] = BoardState(
                board_id=board_id,
                projects=tuple(projects) if projects is not None else current.projects,
                tasks=tuple(tasks) if tasks is not None else current.tasks,
                users=tuple(users) if users is not None else current.users,
            )

    def list_boards(self) -> list[str]:
        return sorted(self._boards)

    def reset(self) -> None:
        with self._lock:
            self._carts.clear()
            self._boards.clear()
