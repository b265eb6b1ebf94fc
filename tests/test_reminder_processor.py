"""Tests for the background ReminderProcessor."""

import asyncio
from datetime import timedelta

from sqlalchemy import select

from journalmate.database import AsyncSessionLocal
from journalmate.models.notification import NotificationPreferences, TaskReminder
from journalmate.models.task import Task
from journalmate.models.user import User
from journalmate.services.reminders import Notifier, ReminderProcessor
from journalmate.utils.timeutils import utc_now


class RecordingNotifier(Notifier):
    def __init__(self, fail_titles=()):
        self.sent = []
        self.fail_titles = set(fail_titles)

    async def send(self, reminder):
        if reminder.title in self.fail_titles:
            raise RuntimeError("push service down")
        self.sent.append(reminder.title)


async def _seed(db, *, quiet=("00:00", "00:00"), enabled=True, reminders=()):
    user = User(username="alice", timezone="UTC")
    db.add(user)
    await db.flush()
    task = Task(user_id=user.id, title="Run", category="fitness", priority="medium")
    db.add(task)
    db.add(NotificationPreferences(
        user_id=user.id, quiet_hours_start=quiet[0], quiet_hours_end=quiet[1], enable_task_reminders=enabled,
    ))
    await db.flush()
    for title, offset in reminders:
        db.add(TaskReminder(
            task_id=task.id, user_id=user.id, reminder_type="custom",
            scheduled_at=utc_now() + offset, title=title,
        ))
    await db.commit()
    return user


async def _sent_titles(db):
    result = await db.execute(select(TaskReminder.title).where(TaskReminder.is_sent.is_(True)))
    return sorted(row[0] for row in result.fetchall())


class TestReminderProcessor:
    async def test_delivers_due_reminders_only(self, db_session):
        await _seed(db_session, reminders=[("Due", timedelta(minutes=-5)), ("Later", timedelta(hours=1))])
        notifier = RecordingNotifier()
        processor = ReminderProcessor(AsyncSessionLocal, notifier=notifier)

        assert await processor.process_once() == 1
        assert notifier.sent == ["Due"]
        async with AsyncSessionLocal() as db:
            assert await _sent_titles(db) == ["Due"]

        # nothing left on the next pass
        assert await processor.process_once() == 0

    async def test_failed_delivery_does_not_stop_the_pass(self, db_session):
        await _seed(db_session, reminders=[("Broken", timedelta(minutes=-2)), ("Fine", timedelta(minutes=-1))])
        notifier = RecordingNotifier(fail_titles={"Broken"})
        processor = ReminderProcessor(AsyncSessionLocal, notifier=notifier)

        assert await processor.process_once() == 1
        async with AsyncSessionLocal() as db:
            assert await _sent_titles(db) == ["Fine"]

    async def test_quiet_hours_keep_reminders_pending(self, db_session):
        # a two hour quiet window around now
        now = utc_now()
        start = (now - timedelta(hours=1)).strftime("%H:%M")
        end = (now + timedelta(hours=1)).strftime("%H:%M")
        await _seed(db_session, quiet=(start, end), reminders=[("Hushed", timedelta(minutes=-1))])

        processor = ReminderProcessor(AsyncSessionLocal, notifier=RecordingNotifier())
        assert await processor.process_once(now=now) == 0
        async with AsyncSessionLocal() as db:
            assert await _sent_titles(db) == []

    async def test_disabled_reminders_skipped(self, db_session):
        await _seed(db_session, enabled=False, reminders=[("Muted", timedelta(minutes=-1))])
        processor = ReminderProcessor(AsyncSessionLocal, notifier=RecordingNotifier())
        assert await processor.process_once() == 0

    async def test_start_and_stop(self):
        calls = []

        class CountingProcessor(ReminderProcessor):
            async def process_once(self, now=None):
                calls.append(now)
                return 0

        processor = CountingProcessor(AsyncSessionLocal, interval_seconds=3600)
        processor.start()
        await asyncio.sleep(0.01)
        assert calls == [None]
        assert processor._task is not None
        await processor.stop()
        assert processor._task is None

    async def test_pass_is_not_reentered(self, db_session):
        await _seed(db_session, reminders=[("Due", timedelta(minutes=-5))])
        entered = asyncio.Event()
        release = asyncio.Event()

        class BlockingNotifier(Notifier):
            async def send(self, reminder):
                entered.set()
                await release.wait()

        processor = ReminderProcessor(AsyncSessionLocal, notifier=BlockingNotifier())
        first = asyncio.create_task(processor.process_once())
        await asyncio.wait_for(entered.wait(), timeout=5)

        assert await processor.process_once() == 0

        release.set()
        assert await asyncio.wait_for(first, timeout=5) == 1
