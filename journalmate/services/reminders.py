import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy import select
from journalmate.models.notification import NotificationPreferences, TaskReminder
from journalmate.models.user import User
from journalmate.utils.timeutils import hhmm_to_minutes, user_zone, utc_now

logger = logging.getLogger(__name__)


def in_quiet_hours(preferences: Optional[NotificationPreferences], moment: datetime, tz_name: Optional[str] = None) -> bool:
    """Quiet hours may wrap midnight (22:00 → 08:00). Equal start and end means none."""
    if preferences is None or not preferences.quiet_hours_start or not preferences.quiet_hours_end:
        return False
    start = hhmm_to_minutes(preferences.quiet_hours_start)
    end = hhmm_to_minutes(preferences.quiet_hours_end)
    if start == end:
        return False

    local = moment.astimezone(user_zone(tz_name))
    now_minutes = local.hour * 60 + local.minute
    if start < end:
        return start <= now_minutes < end
    return now_minutes >= start or now_minutes < end


def reminders_enabled(preferences: Optional[NotificationPreferences]) -> bool:
    return preferences is None or bool(preferences.enable_task_reminders)


async def get_due_reminders(db: AsyncSession, now: datetime, user_id: Optional[str] = None) -> Sequence[TaskReminder]:
    query = (
        select(TaskReminder)
        .where(TaskReminder.is_sent.is_(False))
        .where(TaskReminder.scheduled_at <= now)
    )
    if user_id is not None:
        query = query.where(TaskReminder.user_id == user_id)
    result = await db.execute(query.order_by(TaskReminder.scheduled_at))
    return result.scalars().all()


async def mark_reminder_sent(db: AsyncSession, reminder: TaskReminder, now: Optional[datetime] = None) -> TaskReminder:
    reminder.is_sent = True
    reminder.sent_at = now or utc_now()
    db.add(reminder)
    await db.commit()
    await db.refresh(reminder)
    return reminder


async def _deliverable(db: AsyncSession, reminders: Sequence[TaskReminder], now: datetime) -> List[TaskReminder]:
    """Drop reminders whose owner has reminders off or is inside quiet hours; they stay pending."""
    user_ids = sorted({r.user_id for r in reminders})
    if not user_ids:
        return []

    prefs_rows = await db.execute(
        select(NotificationPreferences).where(NotificationPreferences.user_id.in_(user_ids))
    )
    prefs: Dict[str, NotificationPreferences] = {p.user_id: p for p in prefs_rows.scalars()}
    tz_rows = await db.execute(select(User.id, User.timezone).where(User.id.in_(user_ids)))
    zones = {row[0]: row[1] for row in tz_rows.fetchall()}

    ready = []
    for reminder in reminders:
        preferences = prefs.get(reminder.user_id)
        if not reminders_enabled(preferences):
            continue
        if in_quiet_hours(preferences, now, zones.get(reminder.user_id)):
            continue
        ready.append(reminder)
    return ready


async def get_pending_for_user(db: AsyncSession, user_id: str, now: Optional[datetime] = None) -> List[TaskReminder]:
    now = now or utc_now()
    due = await get_due_reminders(db, now, user_id=user_id)
    return await _deliverable(db, due, now)


class Notifier:
    """Delivery channel for reminders. The default one only writes to the log."""

    async def send(self, reminder: TaskReminder) -> None:
        logger.info("Reminder for user %s: %s - %s", reminder.user_id, reminder.title, reminder.message or "")


class ReminderProcessor:
    def __init__(
        self,
        session_factory: async_sessionmaker,
        notifier: Optional[Notifier] = None,
        interval_seconds: int = 300,
    ):
        self.session_factory = session_factory
        self.notifier = notifier or Notifier()
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def process_once(self, now: Optional[datetime] = None) -> int:
        """One pass over due reminders. Returns how many were delivered."""
        if self._lock.locked():
            logger.debug("Reminder pass already running, skipping")
            return 0

        async with self._lock:
            now = now or utc_now()
            sent = 0
            async with self.session_factory() as db:
                due = await get_due_reminders(db, now)
                for reminder in await _deliverable(db, due, now):
                    try:
                        await self.notifier.send(reminder)
                    except Exception:
                        logger.exception("Failed to deliver reminder %s", reminder.id)
                        continue
                    await mark_reminder_sent(db, reminder, now)
                    sent += 1
            if sent:
                logger.info("Delivered %d reminders", sent)
            return sent

    async def _run(self) -> None:
        while True:
            try:
                await self.process_once()
            except Exception:
                logger.exception("Reminder processing error")
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self._task is not None:
            logger.info("Reminder processor already running")
            return
        logger.info("Starting reminder processor (%s second intervals)", self.interval_seconds)
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Reminder processor stopped")
