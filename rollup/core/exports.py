from __future__ import annotations

import os
import re
from pathlib import Path

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def _base_root() -> Path:
    env_root = os.getenv("ROLLUP_EXPORT_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path(__file__).resolve().parents[2] / "exports"


def safe_component(value: str) -> str:
    """Turn an identifier into a single path component."""

    cleaned = _UNSAFE.sub("_", value).strip("._")
    return cleaned or "default"


def ensure_export_root(scope: str) -> Path:
    """Ensure the export folder for ``scope`` (``carts`` or ``boards``) exists."""

    root = _base_root() / scope
    root.mkdir(parents=True, exist_ok=True)
    return root


def export_path(scope: str, owner_id: str, name: str) -> Path:
    root = ensure_export_root(scope)
    return root / f"{safe_component(owner_id)}-{name}.csv"
