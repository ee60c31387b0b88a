"""Domain containers for caller-owned source entities."""
from __future__ import annotations

from dataclasses import dataclass

from rollup.core.schema import Item, Project, Task, User


@dataclass(slots=True)
class CartState:
    """Items currently held in a single cart.

    ``items`` is a tuple and is replaced wholesale on every update.
    """

    cart_id: str
    items: tuple[Item, ...] = ()


@dataclass(slots=True)
class BoardState:
    """Projects, tasks and users tracked together for analytics."""

    board_id: str
    projects: tuple[Project, ...] = ()
    tasks: tuple[Task, ...] = ()
    users: tuple[User, ...] = ()
