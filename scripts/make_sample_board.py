#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path


def build_board(now: datetime, users: int) -> dict:
    user_rows = [
        {"id": f"user-{index}", "name": f"User {index}", "last_active": (now - timedelta(days=index * 3)).isoformat()}
        for index in range(1, users + 1)
    ]
    projects = [
        {"id": "proj-site", "name": "Website refresh", "status": "active", "due_date": (now + timedelta(days=14)).isoformat()},
        {"id": "proj-api", "name": "Public API", "status": "planning", "due_date": (now - timedelta(days=2)).isoformat()},
    ]
    tasks = []
    for index in range(users * 2):
        assignee = user_rows[index % users]["id"]
        done = index % 3 == 0
        tasks.append(
            {
                "id": f"task-{index + 1}",
                "title": f"Task {index + 1}",
                "project_id": projects[index % 2]["id"],
                "assigned_to": assignee,
                "status": "completed" if done else "todo",
                "created_at": (now - timedelta(days=index)).isoformat(),
                "completed_at": now.isoformat() if done else None,
                "due_date": (now + timedelta(days=index - 2)).isoformat(),
                "estimated_hours": 4,
            }
        )
    return {"projects": projects, "tasks": tasks, "users": user_rows}


def main() -> None:
    parser = argparse.ArgumentParser(description="Write a sample analytics board as JSON")
    parser.add_argument("--output", required=True, help="output file path (.json)")
    parser.add_argument("--users", type=int, default=3, help="number of users on the board")
    args = parser.parse_args()
    if args.users < 1:
        parser.error("--users must be at least 1")

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    board = build_board(datetime.now(timezone.utc), args.users)
    output.write_text(json.dumps(board, indent=2), encoding="utf-8")

    print(f"sample board written: {output}")


if __name__ == "__main__":
    main()
