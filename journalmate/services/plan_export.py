"""
SQL seed export for community plans.

Produces a file that can be pasted into a production database: the community
user, every featured plan, its tasks and the plan/task links, all wrapped in a
single transaction. Every insert carries an ON CONFLICT clause so running the
file twice leaves the database unchanged apart from refreshed counters.
"""

import json
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

ACTIVITY_COLUMNS = [
    "id", "user_id", "title", "description", "category",
    "start_date", "end_date", "plan_summary",
    "is_public", "share_token", "tags",
    "view_count", "like_count", "trending_score", "featured_in_community",
    "creator_name", "status", "completed_at", "archived",
    "copied_from_share_token", "budget", "budget_breakdown", "budget_buffer",
    "created_at", "updated_at",
]

TASK_COLUMNS = [
    "id", "user_id", "goal_id", "title", "description", "category",
    "priority", "completed", "completed_at", "due_date", "time_estimate",
    "cost", "cost_notes", "archived", "skipped", "created_at",
]

LINK_COLUMNS = ["id", "activity_id", "task_id", "order"]

# Counters keep moving in production; the rest of a plan is fixed once published
ACTIVITY_REFRESH = ["view_count", "like_count", "trending_score", "updated_at"]


def escape_sql(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return f"'{value.isoformat()}'"
    if isinstance(value, (dict, list)):
        return "'" + json.dumps(value).replace("'", "''") + "'"
    return "'" + str(value).replace("'", "''") + "'"


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return "NULL"
    return f"'{value.isoformat()}'"


def _quote_column(name: str) -> str:
    # "order" is reserved
    return f'"{name}"' if name == "order" else name


def _insert(table: str, columns: List[str], row: Dict[str, Any], conflict: str) -> str:
    cols = ", ".join(_quote_column(c) for c in columns)
    values = ",\n  ".join(escape_sql(row.get(c)) for c in columns)
    return f"INSERT INTO {table} ({cols}) VALUES (\n  {values}\n)\n{conflict};\n"


def _row(obj: Any, columns: List[str]) -> Dict[str, Any]:
    return {c: getattr(obj, c, None) for c in columns}


def build_export_sql(
    activities: Sequence[Any],
    tasks_by_activity: Dict[str, List[Tuple[Any, Any]]],
    community_user_id: str,
    generated_at: datetime,
) -> str:
    """
    `tasks_by_activity` maps an activity id to (task, link) pairs, the link
    being the ActivityTask row that orders the task inside the plan.
    Ownership of every exported row moves to the community user.
    """
    parts = [
        "-- Community Plans Export\n",
        f"-- Generated: {generated_at.isoformat()}\n",
        f"-- Total Plans: {len(activities)}\n",
        "--\n",
        "-- Run this file against the target database; it is safe to run more than once.\n",
        "\n",
        "BEGIN;\n\n",
        "-- Community user\n",
        _insert(
            "users",
            ["id", "username", "email", "first_name", "last_name"],
            {
                "id": community_user_id,
                "username": "community",
                "email": "community@journalmate.demo",
                "first_name": "Community",
                "last_name": "Creator",
            },
            "ON CONFLICT (id) DO NOTHING",
        ),
    ]

    refresh = ",\n  ".join(f"{c} = EXCLUDED.{c}" for c in ACTIVITY_REFRESH)
    for activity in activities:
        pairs = tasks_by_activity.get(activity.id, [])
        parts.append(f"\n-- Activity: {activity.title}\n")
        parts.append(f"-- Category: {activity.category} | Tasks: {len(pairs)}\n")

        row = _row(activity, ACTIVITY_COLUMNS)
        row["user_id"] = community_user_id
        for counter in ("view_count", "like_count", "trending_score"):
            row[counter] = row[counter] or 0
        parts.append(_insert("activities", ACTIVITY_COLUMNS, row, f"ON CONFLICT (id) DO UPDATE SET\n  {refresh}"))

        for task, link in pairs:
            task_row = _row(task, TASK_COLUMNS)
            task_row["user_id"] = community_user_id
            task_row["goal_id"] = None  # goals are private to their owner
            parts.append(_insert("tasks", TASK_COLUMNS, task_row, "ON CONFLICT (id) DO NOTHING"))
            parts.append(_insert(
                "activity_tasks",
                LINK_COLUMNS,
                {"id": link.id, "activity_id": activity.id, "task_id": task.id, "order": link.order or 0},
                "ON CONFLICT (activity_id, task_id) DO NOTHING",
            ))

    parts.append("\nCOMMIT;\n")
    return "".join(parts)
