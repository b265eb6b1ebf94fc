import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from journalmate.models.task import Task
from journalmate.models.progress import ProgressStats
from journalmate.utils.timeutils import local_date, local_today

logger = logging.getLogger(__name__)


def _completed_on(task: Task, day: date, tz_name: Optional[str]) -> bool:
    return bool(task.completed and task.completed_at and local_date(task.completed_at, tz_name) == day)


def category_breakdown(tasks: Sequence[Task]) -> List[dict]:
    """Completed/total per category, in first-seen order."""
    categories: Dict[str, dict] = {}
    for task in tasks:
        entry = categories.setdefault(task.category, {"name": task.category, "completed": 0, "total": 0})
        entry["total"] += 1
        if task.completed:
            entry["completed"] += 1
    return list(categories.values())


def streak_days(tasks: Sequence[Task], today: date, tz_name: Optional[str]) -> int:
    """Consecutive days with at least one completion, ending today (or yesterday if nothing is done yet today)."""
    days = {local_date(t.completed_at, tz_name) for t in tasks if t.completed and t.completed_at}
    cursor = today if today in days else today - timedelta(days=1)
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def summarize_progress(tasks: Sequence[Task], today: date, tz_name: Optional[str] = None) -> dict:
    """
    Today's numbers count open tasks plus those finished today; tasks completed
    on earlier days no longer belong to today's list.
    """
    completed = [t for t in tasks if t.completed]
    completed_today = sum(1 for t in completed if _completed_on(t, today, tz_name))
    total_today = sum(1 for t in tasks if not t.completed or _completed_on(t, today, tz_name))
    streak = streak_days(tasks, today, tz_name)
    completion_rate = round(len(completed) / len(tasks) * 100) if tasks else 0

    achievements = []
    if completed_today:
        achievements.append(f"{completed_today}-task day")
    if streak:
        achievements.append(f"{streak}-day streak")
    if completion_rate >= 80 and len(tasks) >= 5:
        achievements.append("Goal crusher")

    return {
        "completed_today": completed_today,
        "total_today": total_today,
        "streak_days": streak,
        "total_completed": len(completed),
        "completion_rate": completion_rate,
        "categories": category_breakdown(tasks),
        "recent_achievements": achievements,
    }


async def get_active_tasks(db: AsyncSession, user_id: str) -> Sequence[Task]:
    result = await db.execute(
        select(Task)
        .where(Task.user_id == user_id)
        .where(Task.archived.is_(False))
    )
    return result.scalars().all()


async def recompute_progress_stats(
    db: AsyncSession, user_id: str, tz_name: Optional[str] = None, day: Optional[date] = None
) -> ProgressStats:
    """Upsert the per-day rollup for `day` (default: the user's today) and commit."""
    day = day or local_today(tz_name)
    tasks = await get_active_tasks(db, user_id)
    todays = [t for t in tasks if not t.completed or _completed_on(t, day, tz_name)]

    result = await db.execute(
        select(ProgressStats)
        .where(ProgressStats.user_id == user_id)
        .where(ProgressStats.date == day)
    )
    stats = result.scalar_one_or_none()
    if stats is None:
        stats = ProgressStats(user_id=user_id, date=day)
        db.add(stats)

    stats.completed_count = sum(1 for t in todays if t.completed)
    stats.total_count = len(todays)
    stats.categories = category_breakdown(todays)
    await db.commit()
    await db.refresh(stats)
    logger.debug("Progress for %s on %s: %d/%d", user_id, day, stats.completed_count, stats.total_count)
    return stats


async def get_progress_history(db: AsyncSession, user_id: str, days: int) -> Sequence[ProgressStats]:
    result = await db.execute(
        select(ProgressStats)
        .where(ProgressStats.user_id == user_id)
        .order_by(ProgressStats.date.desc())
        .limit(days)
    )
    return result.scalars().all()
