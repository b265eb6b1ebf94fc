"""
Turns an imported AI conversation into goals and accountability tasks.

Goals come from what the user says they want ("I want to run a marathon"),
tasks from the action items the assistant lists back (bullets or numbered
lines). Both are plain text heuristics; no model is called.
"""

import re
from typing import Iterable, List

GOAL_PATTERNS = [
    re.compile(r"\b(?:i want to|i'd like to|i would like to|i need to|i plan to|i'm going to|i am going to|i hope to)\s+([^.!?\n]+)", re.IGNORECASE),
    re.compile(r"\bmy (?:goal|plan|aim) is to\s+([^.!?\n]+)", re.IGNORECASE),
    re.compile(r"\bhelp me (?:to\s+)?([^.!?\n]+)", re.IGNORECASE),
]

LIST_ITEM = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(.+?)\s*$")

CATEGORY_KEYWORDS = {
    "fitness": ["run", "marathon", "gym", "workout", "exercise", "yoga", "lift", "swim", "cycle", "steps", "train"],
    "health": ["sleep", "diet", "eat", "water", "meditat", "doctor", "weight", "health", "stress"],
    "travel": ["trip", "travel", "flight", "hotel", "visit", "itinerary", "vacation", "pack", "passport"],
    "career": ["job", "resume", "interview", "career", "promotion", "linkedin", "portfolio", "network", "client"],
    "learning": ["learn", "study", "course", "read", "book", "practice", "language", "class", "exam"],
    "finance": ["budget", "save", "saving", "invest", "debt", "money", "expense", "bill"],
    "social": ["friend", "family", "call", "date", "party", "community", "volunteer"],
}

MAX_GOALS = 10
MAX_TASKS = 10


def _clean(text: str) -> str:
    text = re.sub(r"[*_`#]+", "", text)      # markdown emphasis
    text = re.sub(r"\s+", " ", text).strip(" :;,-")
    return text[:1].upper() + text[1:] if text else text


def _unique(items: Iterable[str], limit: int) -> List[str]:
    seen, result = set(), []
    for item in items:
        key = item.lower()
        if item and key not in seen:
            seen.add(key)
            result.append(item)
        if len(result) >= limit:
            break
    return result


def extract_goals(chat_history: List[dict]) -> List[str]:
    found = []
    for message in chat_history:
        if message.get("role") != "user":
            continue
        for pattern in GOAL_PATTERNS:
            for match in pattern.finditer(message.get("content", "")):
                goal = _clean(match.group(1))
                if len(goal) >= 3:
                    found.append(goal)
    return _unique(found, MAX_GOALS)


def extract_action_items(chat_history: List[dict]) -> List[str]:
    found = []
    for message in chat_history:
        if message.get("role") != "assistant":
            continue
        for line in message.get("content", "").splitlines():
            match = LIST_ITEM.match(line)
            if match:
                item = _clean(match.group(1))
                if len(item) >= 3:
                    found.append(item[:200])
    return _unique(found, MAX_TASKS)


def categorize(text: str) -> str:
    lowered = text.lower()
    best, best_hits = "personal", 0
    for category, keywords in CATEGORY_KEYWORDS.items():
        hits = sum(1 for keyword in keywords if keyword in lowered)
        if hits > best_hits:
            best, best_hits = category, hits
    return best


def process_chat_history(chat_history: List[dict]) -> dict:
    goals = extract_goals(chat_history)
    items = extract_action_items(chat_history) or goals
    # items that say nothing about their area inherit it from the stated goals
    fallback = categorize(" ".join(goals))

    tasks = []
    for index, item in enumerate(items):
        category = categorize(item)
        tasks.append({
            "title": item,
            "category": fallback if category == "personal" else category,
            "priority": "high" if index < 2 else "medium",
        })
    return {"extracted_goals": goals, "tasks": tasks}
