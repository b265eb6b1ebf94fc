"""Tests for notification preferences, reminders and quiet hours."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from journalmate.models.notification import NotificationPreferences, TaskReminder
from journalmate.routers.notification import get_or_create_preferences
from journalmate.services.reminders import in_quiet_hours, reminders_enabled
from journalmate.utils.timeutils import utc_now


def _prefs(start="22:00", end="08:00", enabled=True):
    return SimpleNamespace(quiet_hours_start=start, quiet_hours_end=end, enable_task_reminders=enabled)


def _utc(hour, minute=0):
    return datetime(2025, 3, 10, hour, minute, tzinfo=timezone.utc)


class TestQuietHours:
    def test_wraps_midnight(self):
        prefs = _prefs("22:00", "08:00")
        assert in_quiet_hours(prefs, _utc(23)) is True
        assert in_quiet_hours(prefs, _utc(3)) is True
        assert in_quiet_hours(prefs, _utc(8)) is False
        assert in_quiet_hours(prefs, _utc(12)) is False

    def test_same_day_window(self):
        prefs = _prefs("13:00", "14:30")
        assert in_quiet_hours(prefs, _utc(13, 15)) is True
        assert in_quiet_hours(prefs, _utc(14, 30)) is False

    def test_equal_start_and_end_means_none(self):
        assert in_quiet_hours(_prefs("00:00", "00:00"), _utc(0)) is False

    def test_no_preferences(self):
        assert in_quiet_hours(None, _utc(23)) is False
        assert reminders_enabled(None) is True

    def test_user_timezone(self):
        # 21:00 UTC is 06:00 next day in Tokyo, inside 22:00-08:00
        assert in_quiet_hours(_prefs(), _utc(21), "Asia/Tokyo") is True
        assert in_quiet_hours(_prefs(), _utc(21)) is False


class TestPreferences:
    async def test_defaults_created_on_read(self, client, auth):
        body = (await client.get("/notifications/preferences", headers=auth)).json()
        assert body["reminder_lead_time"] == 30
        assert body["quiet_hours_start"] == "22:00"
        assert body["quiet_hours_end"] == "08:00"
        assert body["enable_daily_planning"] is False

    async def test_update(self, client, auth):
        resp = await client.patch(
            "/notifications/preferences", headers=auth,
            json={"reminder_lead_time": 15, "quiet_hours_start": "23:30"},
        )
        assert resp.status_code == 200
        assert resp.json()["reminder_lead_time"] == 15
        assert resp.json()["quiet_hours_start"] == "23:30"

    async def test_invalid_values(self, client, auth):
        assert (await client.patch(
            "/notifications/preferences", headers=auth, json={"quiet_hours_start": "25:00"}
        )).status_code == 422
        assert (await client.patch(
            "/notifications/preferences", headers=auth, json={"reminder_lead_time": 2000}
        )).status_code == 422


class TestReminders:
    async def _task_id(self, client, headers):
        resp = await client.post("/tasks", headers=headers, json={"title": "Call mom", "category": "social"})
        return resp.json()["id"]

    async def test_create_list_delete(self, client, auth):
        task_id = await self._task_id(client, auth)
        when = (utc_now() + timedelta(hours=2)).isoformat()
        resp = await client.post("/notifications/reminders", headers=auth, json={"task_id": task_id, "scheduled_at": when})
        assert resp.status_code == 201
        reminder = resp.json()
        assert reminder["title"] == "Reminder: Call mom"
        assert reminder["reminder_type"] == "custom"

        assert len((await client.get("/notifications/reminders", headers=auth)).json()) == 1
        assert (await client.delete(f"/notifications/reminders/{reminder['id']}", headers=auth)).status_code == 200
        assert (await client.get("/notifications/reminders", headers=auth)).json() == []

    async def test_past_reminder_rejected(self, client, auth):
        task_id = await self._task_id(client, auth)
        when = (utc_now() - timedelta(minutes=5)).isoformat()
        resp = await client.post("/notifications/reminders", headers=auth, json={"task_id": task_id, "scheduled_at": when})
        assert resp.status_code == 400

    async def test_reminder_for_foreign_task(self, client, register):
        _, alice = await register("alice")
        _, bob = await register("bob")
        task_id = await self._task_id(client, alice)
        when = (utc_now() + timedelta(hours=1)).isoformat()
        resp = await client.post("/notifications/reminders", headers=bob, json={"task_id": task_id, "scheduled_at": when})
        assert resp.status_code == 404

    async def test_pending_and_mark_sent(self, client, register, db_session):
        user, headers = await register("alice")
        task_id = await self._task_id(client, headers)
        await client.patch(
            "/notifications/preferences", headers=headers,
            json={"quiet_hours_start": "00:00", "quiet_hours_end": "00:00"},
        )

        due = TaskReminder(
            task_id=task_id, user_id=user["id"], reminder_type="custom",
            scheduled_at=utc_now() - timedelta(minutes=1), title="Due now",
        )
        later = TaskReminder(
            task_id=task_id, user_id=user["id"], reminder_type="custom",
            scheduled_at=utc_now() + timedelta(hours=3), title="Later",
        )
        db_session.add_all([due, later])
        await db_session.commit()

        pending = (await client.get("/notifications/reminders/pending", headers=headers)).json()
        assert [r["title"] for r in pending] == ["Due now"]

        sent = await client.patch(f"/notifications/reminders/{pending[0]['id']}/sent", headers=headers)
        assert sent.json()["is_sent"] is True
        assert sent.json()["sent_at"] is not None
        assert (await client.get("/notifications/reminders/pending", headers=headers)).json() == []

    async def test_pending_respects_disabled_reminders(self, client, register, db_session):
        user, headers = await register("alice")
        task_id = await self._task_id(client, headers)
        await client.patch(
            "/notifications/preferences", headers=headers,
            json={"enable_task_reminders": False, "quiet_hours_start": "00:00", "quiet_hours_end": "00:00"},
        )
        db_session.add(TaskReminder(
            task_id=task_id, user_id=user["id"], reminder_type="custom",
            scheduled_at=utc_now() - timedelta(minutes=1), title="Muted",
        ))
        await db_session.commit()

        assert (await client.get("/notifications/reminders/pending", headers=headers)).json() == []


class TestPreferencesCreation:
    async def test_concurrent_create_returns_existing_row(self, register, db_session, commit_first):
        user, _ = await register("alice")
        commit_first(db_session, NotificationPreferences(user_id=user["id"], quiet_hours_start="23:30"))

        preferences = await get_or_create_preferences(db_session, user["id"])
        assert preferences.quiet_hours_start == "23:30"
