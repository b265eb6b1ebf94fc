"""Tests for journalmate.services.scheduling heuristics and the /scheduling routes."""

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from journalmate.services.scheduling import (
    estimate_minutes,
    priority_based_schedule,
    reminder_times,
    time_optimized_schedule,
)
from journalmate.utils.timeutils import utc_now


def _task(title, priority="medium", estimate=None):
    return SimpleNamespace(id=f"id-{title}", title=title, priority=priority, time_estimate=estimate)


def _starts(schedule):
    return [(s["title"], s["suggested_start_time"]) for s in schedule["suggested_tasks"]]


class TestEstimateMinutes:
    @pytest.mark.parametrize("text,expected", [
        ("2 hours", 120),
        ("1.5 hours", 90),
        ("45 min", 45),
        (None, 30),
        ("soon", 30),
        ("0 min", 30),
    ])
    def test_parse(self, text, expected):
        assert estimate_minutes(text) == expected


class TestPriorityBasedSchedule:
    def test_high_priority_first_with_buffers(self):
        tasks = [_task("A", "high", "1 hour"), _task("B", "low", "30 min"), _task("C", "medium", "2 hours")]
        schedule = priority_based_schedule(tasks)
        assert _starts(schedule) == [("A", "09:00"), ("C", "10:15"), ("B", "12:30")]
        assert schedule["score"] == 85

    def test_stops_after_six_pm(self):
        tasks = [_task(f"T{i}", estimate="3 hours") for i in range(6)]
        schedule = priority_based_schedule(tasks)
        assert [s for _, s in _starts(schedule)] == ["09:00", "12:15", "15:30"]

    def test_at_most_six_tasks_and_score_cap(self):
        tasks = [_task(f"T{i}", estimate="5 min") for i in range(10)]
        schedule = priority_based_schedule(tasks)
        assert len(schedule["suggested_tasks"]) == 6
        assert schedule["score"] == 95


class TestTimeOptimizedSchedule:
    def test_quick_wins_then_focus_blocks(self):
        tasks = [
            _task("S1", estimate="15 min"),
            _task("L1", estimate="2 hours"),
            _task("S2", estimate="20 min"),
            _task("L2", estimate="90 min"),
            _task("L3", estimate="1 hour"),
        ]
        schedule = time_optimized_schedule(tasks)
        assert _starts(schedule) == [("S1", "10:00"), ("S2", "10:25"), ("L1", "13:00"), ("L2", "15:20")]
        assert schedule["score"] == 90

    def test_only_long_tasks(self):
        schedule = time_optimized_schedule([_task("L", estimate="1 hour")])
        assert _starts(schedule) == [("L", "13:00")]
        assert schedule["score"] == 68


class TestReminderTimes:
    def _suggestion(self):
        return SimpleNamespace(
            target_date=date(2025, 3, 10),
            suggested_tasks=[
                {"task_id": "a", "title": "A", "suggested_start_time": "09:00"},
                {"task_id": "b", "title": "B", "suggested_start_time": "13:00"},
            ],
        )

    def test_only_future_reminders(self):
        now = datetime(2025, 3, 10, 10, 0, tzinfo=timezone.utc)
        planned = reminder_times(self._suggestion(), 30, None, now=now)
        assert len(planned) == 1
        item, remind_at = planned[0]
        assert item["task_id"] == "b"
        assert remind_at == datetime(2025, 3, 10, 12, 30, tzinfo=timezone.utc)

    def test_slots_are_in_user_timezone(self):
        # 13:00 in Tokyo is 04:00 UTC, long before 10:00 UTC
        now = datetime(2025, 3, 10, 10, 0, tzinfo=timezone.utc)
        assert reminder_times(self._suggestion(), 30, "Asia/Tokyo", now=now) == []


class TestSchedulingRoutes:
    async def _seed(self, client, headers):
        for title, priority, estimate in (("Report", "high", "2 hours"), ("Email", "low", "15 min")):
            await client.post(
                "/tasks", headers=headers,
                json={"title": title, "category": "career", "priority": priority, "time_estimate": estimate},
            )

    async def test_generate_and_list(self, client, auth):
        await self._seed(client, auth)
        target = (utc_now() + timedelta(days=2)).date().isoformat()

        resp = await client.post("/scheduling/generate", headers=auth, json={"target_date": target})
        assert resp.status_code == 200
        suggestions = resp.json()["suggestions"]
        assert {s["suggestion_type"] for s in suggestions} == {"priority_based", "daily"}

        listed = (await client.get("/scheduling/suggestions", params={"date": target}, headers=auth)).json()
        assert [s["score"] for s in listed] == sorted((s["score"] for s in listed), reverse=True)

    async def test_generate_without_tasks(self, client, auth):
        resp = await client.post("/scheduling/generate", headers=auth, json={"target_date": "2030-01-01"})
        assert resp.json()["suggestions"] == []

    async def test_accept_creates_reminders(self, client, auth):
        await self._seed(client, auth)
        target = (utc_now() + timedelta(days=2)).date().isoformat()
        suggestions = (await client.post("/scheduling/generate", headers=auth, json={"target_date": target})).json()
        priority = next(s for s in suggestions["suggestions"] if s["suggestion_type"] == "priority_based")

        resp = await client.post(f"/scheduling/suggestions/{priority['id']}/accept", headers=auth)
        assert resp.status_code == 200
        body = resp.json()
        assert body["suggestion"]["accepted"] is True
        assert body["reminders_created"] == 2

        reminders = (await client.get("/notifications/reminders", headers=auth)).json()
        assert len(reminders) == 2
        assert all(r["title"].startswith("Upcoming: ") for r in reminders)

        again = await client.post(f"/scheduling/suggestions/{priority['id']}/accept", headers=auth)
        assert again.status_code == 400

    async def test_accept_skips_deleted_tasks(self, client, auth):
        await self._seed(client, auth)
        target = (utc_now() + timedelta(days=2)).date().isoformat()
        suggestions = (await client.post("/scheduling/generate", headers=auth, json={"target_date": target})).json()
        priority = next(s for s in suggestions["suggestions"] if s["suggestion_type"] == "priority_based")

        tasks = (await client.get("/tasks", headers=auth)).json()["tasks"]
        email = next(t for t in tasks if t["title"] == "Email")
        assert (await client.delete(f"/tasks/{email['id']}", headers=auth)).status_code == 200

        resp = await client.post(f"/scheduling/suggestions/{priority['id']}/accept", headers=auth)
        assert resp.status_code == 200
        assert resp.json()["reminders_created"] == 1

        reminders = (await client.get("/notifications/reminders", headers=auth)).json()
        assert len(reminders) == 1
        assert all(r["task_id"] != email["id"] for r in reminders)

    async def test_accept_past_day_creates_no_reminders(self, client, auth):
        await self._seed(client, auth)
        suggestions = (await client.post(
            "/scheduling/generate", headers=auth, json={"target_date": "2020-01-01"}
        )).json()["suggestions"]
        resp = await client.post(f"/scheduling/suggestions/{suggestions[0]['id']}/accept", headers=auth)
        assert resp.json()["reminders_created"] == 0

    async def test_delete(self, client, auth):
        await self._seed(client, auth)
        suggestions = (await client.post(
            "/scheduling/generate", headers=auth, json={"target_date": "2030-01-01"}
        )).json()["suggestions"]
        sid = suggestions[0]["id"]
        assert (await client.delete(f"/scheduling/suggestions/{sid}", headers=auth)).status_code == 200
        assert (await client.delete(f"/scheduling/suggestions/{sid}", headers=auth)).status_code == 404
