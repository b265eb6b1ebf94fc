"""Tests for journalmate.services.progress and the /progress routes."""

from datetime import date, datetime, timezone
from types import SimpleNamespace

from journalmate.services.progress import category_breakdown, streak_days, summarize_progress


def _task(category="fitness", completed_at=None):
    return SimpleNamespace(category=category, completed=completed_at is not None, completed_at=completed_at)


def _at(day, hour=12):
    return datetime(2025, 3, day, hour, tzinfo=timezone.utc)


TODAY = date(2025, 3, 10)


class TestStreakDays:
    def test_counts_back_from_today(self):
        tasks = [_task(completed_at=_at(10)), _task(completed_at=_at(9)), _task(completed_at=_at(8))]
        assert streak_days(tasks, TODAY, None) == 3

    def test_gap_breaks_streak(self):
        tasks = [_task(completed_at=_at(10)), _task(completed_at=_at(8))]
        assert streak_days(tasks, TODAY, None) == 1

    def test_nothing_today_counts_from_yesterday(self):
        tasks = [_task(completed_at=_at(9)), _task(completed_at=_at(8))]
        assert streak_days(tasks, TODAY, None) == 2

    def test_no_completions(self):
        assert streak_days([_task()], TODAY, None) == 0

    def test_uses_user_timezone(self):
        # 23:30 UTC on the 9th is already the 10th in Tokyo
        tasks = [_task(completed_at=datetime(2025, 3, 9, 23, 30, tzinfo=timezone.utc))]
        assert streak_days(tasks, TODAY, "Asia/Tokyo") == 1


class TestSummarizeProgress:
    def test_empty(self):
        summary = summarize_progress([], TODAY)
        assert summary["completion_rate"] == 0
        assert summary["total_today"] == 0
        assert summary["recent_achievements"] == []

    def test_today_counts_open_and_finished_today(self):
        tasks = [
            _task(completed_at=_at(10)),
            _task(completed_at=_at(3)),   # done earlier, not part of today
            _task(),
        ]
        summary = summarize_progress(tasks, TODAY)
        assert summary["completed_today"] == 1
        assert summary["total_today"] == 2
        assert summary["total_completed"] == 2
        assert summary["completion_rate"] == 67

    def test_goal_crusher(self):
        tasks = [_task(completed_at=_at(10)) for _ in range(4)] + [_task()]
        summary = summarize_progress(tasks, TODAY)
        assert "Goal crusher" in summary["recent_achievements"]
        assert "4-task day" in summary["recent_achievements"]

    def test_category_breakdown_order(self):
        tasks = [_task("fitness", _at(10)), _task("career"), _task("fitness")]
        assert category_breakdown(tasks) == [
            {"name": "fitness", "completed": 1, "total": 2},
            {"name": "career", "completed": 0, "total": 1},
        ]


class TestProgressRoutes:
    async def test_dashboard(self, client, auth):
        created = []
        for title in ("Run", "Lift", "Stretch"):
            resp = await client.post("/tasks", headers=auth, json={"title": title, "category": "fitness"})
            created.append(resp.json())
        await client.post(f"/tasks/{created[0]['id']}/complete", headers=auth)

        body = (await client.get("/progress", headers=auth)).json()
        assert body["completed_today"] == 1
        assert body["total_today"] == 3
        assert body["streak_days"] == 1
        assert body["categories"] == [{"name": "fitness", "completed": 1, "total": 3}]

    async def test_stats_are_recomputed_on_task_writes(self, client, auth):
        task = (await client.post("/tasks", headers=auth, json={"title": "Run", "category": "fitness"})).json()
        await client.post(f"/tasks/{task['id']}/complete", headers=auth)

        stats = (await client.get("/progress/stats", params={"days": 7}, headers=auth)).json()
        assert len(stats) == 1
        assert stats[0]["completed_count"] == 1
        assert stats[0]["total_count"] == 1
