# journalmate/scripts/export_community_plans.py
"""
Export featured community plans as an idempotent SQL seed file.

    DATABASE_URL=postgresql://... python -m journalmate.scripts.export_community_plans

Writes EXPORT_OUTPUT_PATH (default community-plans-export.sql).
"""
import asyncio
import logging
import sys
from pathlib import Path
from sqlalchemy import select
from journalmate.config import settings
from journalmate.database import AsyncSessionLocal, engine
from journalmate.models.activity import Activity, ActivityTask
from journalmate.models.task import Task
from journalmate.services.plan_export import build_export_sql
from journalmate.utils.timeutils import utc_now

logger = logging.getLogger("journalmate.export")


async def load_featured_plans(db):
    result = await db.execute(
        select(Activity)
        .where(Activity.featured_in_community.is_(True))
        .where(Activity.is_public.is_(True))
        .order_by(Activity.trending_score.desc(), Activity.created_at)
    )
    activities = result.scalars().all()

    tasks_by_activity = {}
    for activity in activities:
        rows = await db.execute(
            select(Task, ActivityTask)
            .join(ActivityTask, ActivityTask.task_id == Task.id)
            .where(ActivityTask.activity_id == activity.id)
            .order_by(ActivityTask.order)
        )
        tasks_by_activity[activity.id] = [(task, link) for task, link in rows.fetchall()]
    return activities, tasks_by_activity


async def export_community_plans(output_path: str = None) -> int:
    """Returns the number of plans written. Nothing is written when none are featured."""
    output_path = output_path or settings.EXPORT_OUTPUT_PATH
    async with AsyncSessionLocal() as db:
        activities, tasks_by_activity = await load_featured_plans(db)

    if not activities:
        logger.info("No featured community plans to export")
        return 0

    sql = build_export_sql(activities, tasks_by_activity, settings.COMMUNITY_USER_ID, utc_now())
    Path(output_path).write_text(sql, encoding="utf-8")

    task_total = sum(len(pairs) for pairs in tasks_by_activity.values())
    logger.info("Exported %d plans with %d tasks to %s", len(activities), task_total, output_path)
    return len(activities)


async def main() -> int:
    try:
        await export_community_plans()
    except Exception:
        logger.exception("Community plan export failed")
        return 1
    finally:
        await engine.dispose()
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(levelname)s %(name)s: %(message)s")
    sys.exit(asyncio.run(main()))
