"""
quests.py — Pick the active quests for a calendar date from Quest.json.

All picks are lookups keyed by the date, so the same day always yields the
same quests. The only write is the daily quest's current/lastUpdate fields.
"""

import json
import logging
import os
from datetime import date

logger = logging.getLogger(__name__)

DEFAULT_DAILY_QUESTS = [
    "Organizing Code Sanctuary",
    "Debugging the Ancient Scripts",
    "Merging Parallel Dimensions",
    "Refactoring the Legacy Temple",
    "Optimizing the Data Streams",
    "Testing the Battle Scenarios",
    "Documenting the Wisdom Scrolls",
]
DEFAULT_WEEKLY_QUEST = "API Version Management"
DEFAULT_MONTHLY_QUEST = "Legacy Code Migration Marathon"
DEFAULT_SEASONAL_QUEST = "The Great System Renewal"
DEFAULT_YEARLY_QUEST = "The Grand Architecture Evolution"


def season_for_month(month: int) -> str:
    if 3 <= month <= 5:
        return "Spring"
    if 6 <= month <= 8:
        return "Summer"
    if 9 <= month <= 11:
        return "Fall"
    return "Winter"


def load_quests(path: str) -> dict:
    """Read the quest definitions; a missing or unreadable file yields {}."""
    if not os.path.exists(path):
        logger.info(f"No quest file at {path}, using default quests")
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning(f"Could not read quest file {path}: {exc}")
        return {}
    return data if isinstance(data, dict) else {}


def daily_quest(quests: dict, day: date) -> str:
    pool = (quests.get("daily") or {}).get("quests") or DEFAULT_DAILY_QUESTS
    return pool[day.toordinal() % len(pool)]


def weekly_quest(quests: dict, day: date) -> str:
    special = (quests.get("weekly") or {}).get("special_quests") or []
    if not special:
        return DEFAULT_WEEKLY_QUEST
    return special[day.isocalendar()[1] % len(special)]


def monthly_quest(quests: dict, day: date) -> str:
    month_name = day.strftime("%B")
    for raid in (quests.get("monthly") or {}).get("boss_raids") or []:
        if raid.get("month") == month_name:
            return raid.get("raid", DEFAULT_MONTHLY_QUEST)
    return DEFAULT_MONTHLY_QUEST


def seasonal_quest(quests: dict, day: date) -> str:
    season = season_for_month(day.month)
    for epic in (quests.get("seasonal") or {}).get("epic_quests") or []:
        if epic.get("season") == season:
            return epic.get("quest", DEFAULT_SEASONAL_QUEST)
    return DEFAULT_SEASONAL_QUEST


def yearly_quest(quests: dict) -> str:
    legendary = (quests.get("yearly") or {}).get("legendary_quest") or {}
    return legendary.get("name") or DEFAULT_YEARLY_QUEST


def pick_quests(path: str, day: date | None = None) -> dict:
    """
    Resolve every cadence for `day` and record the daily pick in the quest file.

    Returns:
        {"daily", "weekly", "monthly", "seasonal", "yearly"} → quest text
    """
    day = day or date.today()
    quests = load_quests(path)

    picked = {
        "daily":    daily_quest(quests, day),
        "weekly":   weekly_quest(quests, day),
        "monthly":  monthly_quest(quests, day),
        "seasonal": seasonal_quest(quests, day),
        "yearly":   yearly_quest(quests),
    }

    if quests:
        _record_daily(path, quests, picked["daily"], day)
    return picked


def _record_daily(path: str, quests: dict, current: str, day: date) -> None:
    daily = quests.setdefault("daily", {})
    if daily.get("lastUpdate") == day.isoformat() and daily.get("current") == current:
        return
    daily["current"] = current
    daily["lastUpdate"] = day.isoformat()
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(quests, f, indent=2, ensure_ascii=False)
    except OSError as exc:
        logger.warning(f"Could not update daily quest in {path}: {exc}")
