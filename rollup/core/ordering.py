from __future__ import annotations

from typing import Iterable


def unique_in_order(values: Iterable[str | None]) -> list[str]:
    """Distinct non-empty values, keeping the first occurrence of each."""

    seen: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen
