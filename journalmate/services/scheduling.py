import logging
import re
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from journalmate.models.task import Task
from journalmate.models.notification import NotificationPreferences, TaskReminder
from journalmate.models.scheduling import SchedulingSuggestion
from journalmate.utils.timeutils import as_utc, hhmm_to_minutes, minutes_to_hhmm, user_zone, utc_now

logger = logging.getLogger(__name__)

DEFAULT_ESTIMATE = "30 min"
PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}

MAX_PRIORITY_TASKS = 6
SHORT_TASK_MINUTES = 30


def estimate_minutes(time_estimate: Optional[str]) -> int:
    """'2 hours' -> 120, '45 min' -> 45, anything unparseable -> 30."""
    text = (time_estimate or DEFAULT_ESTIMATE).strip().lower()
    if "hour" in text:
        match = re.match(r"^\s*(\d+(?:\.\d+)?)", text)
        if match:
            return int(float(match.group(1)) * 60)
        return 30
    match = re.match(r"^\s*(\d+)", text)
    if match and int(match.group(1)) > 0:
        return int(match.group(1))
    return 30


def _suggested(task: Task, start: int, reason: str) -> dict:
    return {
        "task_id": task.id,
        "title": task.title,
        "priority": task.priority,
        "estimated_time": task.time_estimate or DEFAULT_ESTIMATE,
        "suggested_start_time": minutes_to_hhmm(start),
        "reason": reason,
    }


def priority_based_schedule(tasks: Sequence[Task]) -> dict:
    """High priority first from 09:00, 15 minute buffers, nothing after 18:00."""
    ordered = sorted(tasks, key=lambda t: PRIORITY_ORDER.get(t.priority, 1), reverse=True)

    clock = hhmm_to_minutes("09:00")
    suggested = []
    for task in ordered[:MAX_PRIORITY_TASKS]:
        suggested.append(_suggested(task, clock, f"{task.priority} priority task - tackle important work early"))
        clock += estimate_minutes(task.time_estimate) + 15
        if clock > hhmm_to_minutes("18:00"):
            break

    return {
        "suggested_tasks": suggested,
        "score": min(95, 70 + len(suggested) * 5),
    }


def time_optimized_schedule(tasks: Sequence[Task]) -> dict:
    """Quick wins from 10:00, lunch break, then focus blocks for long tasks."""
    short_tasks = [t for t in tasks if estimate_minutes(t.time_estimate) <= SHORT_TASK_MINUTES]
    long_tasks = [t for t in tasks if estimate_minutes(t.time_estimate) > SHORT_TASK_MINUTES]

    clock = hhmm_to_minutes("10:00")
    suggested = []
    for task in short_tasks[:3]:
        suggested.append(_suggested(task, clock, "Quick wins to build momentum"))
        clock += estimate_minutes(task.time_estimate) + 10

    if clock < hhmm_to_minutes("12:00"):
        clock = hhmm_to_minutes("13:00")

    for task in long_tasks[:2]:
        if clock > hhmm_to_minutes("17:00"):
            break
        suggested.append(_suggested(task, clock, "Focus time for complex tasks"))
        clock += estimate_minutes(task.time_estimate) + 20

    return {
        "suggested_tasks": suggested,
        "score": min(90, 60 + len(suggested) * 8),
    }


async def generate_scheduling_suggestions(
    db: AsyncSession, user_id: str, target_date: date
) -> List[SchedulingSuggestion]:
    result = await db.execute(
        select(Task)
        .where(Task.user_id == user_id)
        .where(Task.completed.is_(False))
        .where(Task.archived.is_(False))
        .order_by(Task.created_at)
    )
    pending = result.scalars().all()
    if not pending:
        return []

    suggestions = []
    for suggestion_type, schedule in (
        ("priority_based", priority_based_schedule(pending)),
        ("daily", time_optimized_schedule(pending)),
    ):
        if not schedule["suggested_tasks"]:
            continue
        suggestion = SchedulingSuggestion(
            user_id=user_id,
            suggestion_type=suggestion_type,
            target_date=target_date,
            suggested_tasks=schedule["suggested_tasks"],
            score=schedule["score"],
        )
        db.add(suggestion)
        suggestions.append(suggestion)

    await db.commit()
    for suggestion in suggestions:
        await db.refresh(suggestion)

    logger.info("Generated %d scheduling suggestions for user %s on %s", len(suggestions), user_id, target_date)
    return suggestions


def reminder_times(
    suggestion: SchedulingSuggestion,
    lead_time: int,
    tz_name: Optional[str],
    now: Optional[datetime] = None,
) -> List[tuple]:
    """(suggested task, reminder datetime) for every slot whose reminder is still in the future."""
    now = now or utc_now()
    zone = user_zone(tz_name)
    planned = []
    for item in suggestion.suggested_tasks or []:
        start = hhmm_to_minutes(item["suggested_start_time"])
        starts_at = datetime.combine(suggestion.target_date, datetime.min.time(), tzinfo=zone) + timedelta(minutes=start)
        remind_at = starts_at - timedelta(minutes=lead_time)
        if remind_at > now:
            planned.append((item, remind_at))
    return planned


async def create_reminders_from_schedule(
    db: AsyncSession, suggestion: SchedulingSuggestion, user_id: str, tz_name: Optional[str] = None
) -> int:
    """Adds reminders to the session without committing, so the caller can commit them with the acceptance."""
    result = await db.execute(
        select(NotificationPreferences).where(NotificationPreferences.user_id == user_id)
    )
    preferences = result.scalar_one_or_none()
    lead_time = preferences.reminder_lead_time if preferences and preferences.reminder_lead_time is not None else 30

    # Tasks deleted since the schedule was generated get no reminder
    task_ids = [item["task_id"] for item in suggestion.suggested_tasks or []]
    existing = await db.execute(
        select(Task.id).where(Task.user_id == user_id).where(Task.id.in_(task_ids))
    )
    live = set(existing.scalars().all())

    created = 0
    for item, remind_at in reminder_times(suggestion, lead_time, tz_name):
        if item["task_id"] not in live:
            continue
        db.add(TaskReminder(
            user_id=user_id,
            task_id=item["task_id"],
            reminder_type="custom",
            scheduled_at=as_utc(remind_at),
            title=f"Upcoming: {item['title']}",
            message=f'Your task "{item["title"]}" is scheduled to start in {lead_time} minutes.',
        ))
        created += 1
    return created
