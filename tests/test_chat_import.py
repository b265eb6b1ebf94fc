"""Tests for journalmate.services.chat_import and POST /chat/import."""

from journalmate.services.chat_import import categorize, extract_action_items, extract_goals, process_chat_history

HISTORY = [
    {"role": "user", "content": "I want to run a marathon next spring. Help me build a training plan."},
    {"role": "assistant", "content": (
        "Here's how to start:\n"
        "1. Run three times a week\n"
        "2. **Buy proper running shoes**\n"
        "- Schedule a long run every Sunday\n"
        "Good luck!"
    )},
]


class TestExtraction:
    def test_goals_from_user_messages(self):
        assert extract_goals(HISTORY) == ["Run a marathon next spring", "Build a training plan"]

    def test_action_items_from_assistant_lists(self):
        assert extract_action_items(HISTORY) == [
            "Run three times a week",
            "Buy proper running shoes",
            "Schedule a long run every Sunday",
        ]

    def test_assistant_goals_are_ignored(self):
        history = [{"role": "assistant", "content": "I want to help you."}]
        assert extract_goals(history) == []

    def test_duplicates_collapse(self):
        history = [{"role": "assistant", "content": "- Drink water\n- drink water"}]
        assert extract_action_items(history) == ["Drink water"]


class TestCategorize:
    def test_keywords(self):
        assert categorize("Book a flight and hotel") == "travel"
        assert categorize("Update my resume") == "career"

    def test_default_personal(self):
        assert categorize("Clean the garage") == "personal"


class TestProcessChatHistory:
    def test_priorities_and_categories(self):
        result = process_chat_history(HISTORY)
        tasks = result["tasks"]
        assert [t["priority"] for t in tasks] == ["high", "high", "medium"]
        assert all(t["category"] == "fitness" for t in tasks)

    def test_falls_back_to_goals(self):
        result = process_chat_history([{"role": "user", "content": "My goal is to save money for a trip."}])
        assert [t["title"] for t in result["tasks"]] == ["Save money for a trip"]

    def test_nothing_found(self):
        result = process_chat_history([{"role": "user", "content": "hello"}])
        assert result == {"extracted_goals": [], "tasks": []}


class TestChatImportRoutes:
    async def test_import_creates_tasks(self, client, auth):
        resp = await client.post(
            "/chat/import", headers=auth,
            json={"source": "chatgpt", "conversation_title": "Marathon", "chat_history": HISTORY},
        )
        assert resp.status_code == 201, resp.text
        body = resp.json()
        assert len(body["tasks"]) == 3
        assert body["chat_import"]["processed_at"] is not None
        assert body["extracted_goals"][0] == "Run a marathon next spring"

        tasks = (await client.get("/tasks", headers=auth)).json()
        assert tasks["total_tasks"] == 3

        imports = (await client.get("/chat/imports", headers=auth)).json()
        assert len(imports) == 1
        detail = await client.get(f"/chat/imports/{imports[0]['id']}", headers=auth)
        assert detail.json()["conversation_title"] == "Marathon"

    async def test_empty_history_rejected(self, client, auth):
        resp = await client.post("/chat/import", headers=auth, json={"source": "claude", "chat_history": []})
        assert resp.status_code == 400

    async def test_unknown_source_rejected(self, client, auth):
        resp = await client.post("/chat/import", headers=auth, json={"source": "bard", "chat_history": HISTORY})
        assert resp.status_code == 422

    async def test_other_users_import_hidden(self, client, register):
        _, alice = await register("alice")
        _, bob = await register("bob")
        body = (await client.post("/chat/import", headers=alice, json={"source": "manual", "chat_history": HISTORY})).json()
        resp = await client.get(f"/chat/imports/{body['chat_import']['id']}", headers=bob)
        assert resp.status_code == 404
