"""
stats.py — Deterministic battle stats and rank from a pool snapshot.

Input:  Pool
Output: stats dict with level, six battle stats, rank points and rank

Pure arithmetic, no I/O.
"""

import logging
import math
from datetime import datetime

from config import (
    DEFAULT_LANGUAGE_ICON,
    LANGUAGE_ICONS,
    RANK_ICONS,
    RANK_NAMES,
    RANK_THRESHOLDS,
    TOP_LANGUAGES_LIMIT,
    TOP_RANK,
)
from core.models import Pool

logger = logging.getLogger(__name__)


def derive_stats(pool: Pool, current_year: int | None = None) -> dict:
    """
    Compute the guild card stats for a pool.

    Returns:
        {
            "level", "attack", "defense", "health", "mana", "accuracy", "speed",
            "rank_points", "rank", "rank_icon", "rank_name",
            "years", "language_count",
        }
    """
    current_year = current_year or datetime.now().year
    years = current_year - pool.account_creation_year
    language_count = len(pool.language_stats) or 1

    commits = pool.total_commits
    issues  = pool.total_solved_issues
    repos   = pool.total_repos
    bonus_accuracy = pool.creator_bonus_accuracy
    bonus_speed    = pool.creator_bonus_speed

    level = math.floor(
        years * 2 +
        commits * 0.08 +
        (repos / language_count) * 1.5
    )

    attack   = math.floor(commits * 0.8 + issues * 2 + bonus_accuracy * 0.1)
    defense  = math.floor(commits * 0.7 + repos * 5 + bonus_accuracy * 0.15)
    health   = math.floor(commits * 1.2 + repos * 8 + years * 50)
    mana     = math.floor(language_count * 25 + pool.total_speed_points * 2 + bonus_speed * 0.1)
    accuracy = math.floor(issues * 25 + commits * 0.3 + bonus_accuracy * 0.5)
    speed    = math.floor(pool.total_speed_points * 2 + commits * 0.2 + bonus_speed * 0.5)

    rank_points = math.floor(
        attack   * 1.25 +
        defense  * 1.25 +
        health   * 1 +
        mana     * 1 +
        accuracy * 1.5 +
        speed    * 1.25
    )
    rank = rank_for_points(rank_points)

    logger.info(f"🎯 Level {level}, rank {rank} ({rank_points} rank points)")

    return {
        "level":          level,
        "attack":         attack,
        "defense":        defense,
        "health":         health,
        "mana":           mana,
        "accuracy":       accuracy,
        "speed":          speed,
        "rank_points":    rank_points,
        "rank":           rank,
        "rank_icon":      RANK_ICONS.get(rank, RANK_ICONS["G"]),
        "rank_name":      RANK_NAMES.get(rank, RANK_NAMES["G"]),
        "years":          years,
        "language_count": language_count,
    }


def rank_for_points(rank_points: int) -> str:
    for upper_bound, rank in RANK_THRESHOLDS:
        if rank_points <= upper_bound:
            return rank
    return TOP_RANK


def top_languages(pool: Pool, limit: int = TOP_LANGUAGES_LIMIT) -> list[tuple[str, int, str]]:
    """(language, commits, icon) sorted by commit count, highest first."""
    ranked = sorted(pool.language_stats.items(), key=lambda item: item[1], reverse=True)[:limit]
    return [
        (language, commits, LANGUAGE_ICONS.get(language, DEFAULT_LANGUAGE_ICON))
        for language, commits in ranked
    ]
