"""Domain layer definitions."""

from .snapshots import BoardState, CartState

__all__ = [
    "BoardState",
    "CartState",
]
