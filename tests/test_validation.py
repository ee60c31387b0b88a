from __future__ import annotations

import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pydantic
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from rollup.core.schema import Item, Project, Task, User
from rollup.core.settings import DEFAULT_RULES_PATH, EngineSettings, get_settings, load_settings, reset_settings
from rollup.core.validation import ValidationError, validate_board


@pytest.fixture(autouse=True)
def clear_settings():
    reset_settings()
    yield
    reset_settings()


def test_schema_rejects_negative_values():
    with pytest.raises(pydantic.ValidationError):
        Item(id="a", price=Decimal("-1"))
    with pytest.raises(pydantic.ValidationError):
        Item(id="a", price=Decimal("1"), quantity=0)


def test_entities_are_frozen():
    item = Item(id="a", price=Decimal("1"))
    with pytest.raises(pydantic.ValidationError):
        item.quantity = 3


def test_unknown_fields_are_rejected():
    with pytest.raises(pydantic.ValidationError, match="completed"):
        Task(id="t", completed=True)
    with pytest.raises(pydantic.ValidationError):
        Item(id="a", price=Decimal("1"), qty=2)


def test_board_references_must_resolve():
    projects = [Project(id="p1")]
    users = [User(id="u1")]

    validate_board(projects, [Task(id="t1", project_id="p1", assigned_to="u1")], users)

    with pytest.raises(ValidationError, match="unknown project"):
        validate_board(projects, [Task(id="t1", project_id="p9")], users)
    with pytest.raises(ValidationError, match="unknown user"):
        validate_board(projects, [Task(id="t1", assigned_to="u9")], users)
    with pytest.raises(ValidationError, match="duplicate project id"):
        validate_board(projects + projects, [], users)


def test_completed_at_requires_completed_status():
    task = Task(id="t1", status="review", completed_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
    with pytest.raises(ValidationError, match="completed_at"):
        validate_board([], [task], [])


def test_bundled_rules_match_defaults():
    assert load_settings(DEFAULT_RULES_PATH) == EngineSettings()


def test_missing_rules_file_falls_back(tmp_path):
    assert load_settings(tmp_path / "absent.yaml") == EngineSettings()


def test_rules_path_from_environment(tmp_path, monkeypatch):
    rules = tmp_path / "rules.yaml"
    rules.write_text(
        "tax_rate: '0.2'\ncoupons:\n  HALF:\n    kind: percent\n    value: 50\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("ROLLUP_RULES_PATH", str(rules))

    settings = get_settings()

    assert settings.tax_rate == Decimal("0.2")
    assert list(settings.coupons) == ["HALF"]
    assert settings.weight_limit == Decimal("50")
    assert get_settings() is settings
