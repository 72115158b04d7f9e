"""
activity.py — Per-repository activity signals.

  - Speed points from how quickly closed issues were closed
  - Language stats from commits (one count per language per commit)
  - Creator bonuses for original (non-fork) repositories
  - A repository's full aggregate, computed fresh from the API

Every value here is a contribution to be added to the pool; nothing in this
module touches the pool itself.
"""

import logging
import math
import time
from datetime import datetime

from config import (
    COMMIT_DETAIL_DELAY,
    GITHUB_PER_PAGE,
    LANGUAGE_SCAN_MAX_COMMITS,
    LANGUAGE_SCAN_MAX_PAGES,
    MAINTENANCE_WINDOW_DAYS,
    SPEED_POINTS_MAX_DAYS,
)
from core.languages import languages_for_files
from core.models import RepoAggregate, RepoSnapshot
from utils.utils import days_between, parse_github_date, safe_divide, utc_now

logger = logging.getLogger(__name__)


# ─── Speed Points ─────────────────────────────────────────────────────────────

def speed_points_for_days(days_to_close: int) -> int:
    """10 points for ≤3 days, one point less per extra 3 days, 0 beyond 30."""
    if days_to_close > SPEED_POINTS_MAX_DAYS:
        return 0
    if days_to_close <= 3:
        return 10
    return 10 - math.ceil((days_to_close - 3) / 3)


def speed_points_for_issue(issue: dict) -> int:
    created = parse_github_date(issue.get("created_at"))
    closed = parse_github_date(issue.get("closed_at"))
    if created is None or closed is None:
        return 0
    return speed_points_for_days(math.floor(days_between(created, closed)))


def speed_points_for_issues(issues: list[dict]) -> int:
    return sum(speed_points_for_issue(issue) for issue in issues)


def calculate_speed_points(client, repo_url: str, username: str) -> int:
    """Speed points for a repository's closed issues. Never raises: failures count as 0."""
    try:
        issues = client.fetch_closed_issues(repo_url, username)
    except Exception as exc:
        logger.warning(f"Speed points unavailable for {repo_url}: {exc}")
        return 0
    return speed_points_for_issues(issues)


# ─── Language Stats From Commits ──────────────────────────────────────────────

def language_stats_from_commits(
    client,
    repo_url: str,
    username: str,
    commit_count: int,
    since: str | None = None,
) -> dict[str, int]:
    """
    Count, per language, how many of the author's commits touched it.

    Scans at most min(commit_count, LANGUAGE_SCAN_MAX_COMMITS) commits over at
    most LANGUAGE_SCAN_MAX_PAGES pages, in the order the API returns them.
    A commit touching five PHP files adds 1 to PHP.
    """
    language_commits: dict[str, int] = {}
    max_analyze = min(commit_count, LANGUAGE_SCAN_MAX_COMMITS)
    analyzed = 0
    page = 1

    while page <= LANGUAGE_SCAN_MAX_PAGES and analyzed < max_analyze:
        try:
            commits = client.fetch_commits(repo_url, username, since=since, page=page, per_page=GITHUB_PER_PAGE)
        except Exception as exc:
            logger.warning(f"Error fetching commits for language analysis of {repo_url}: {exc}")
            break

        if not commits:
            break

        for commit in commits:
            if analyzed >= max_analyze:
                break
            try:
                detail = client.fetch_commit(commit["url"])
                files = [f.get("filename", "") for f in detail.get("files") or []]
                for language in languages_for_files(files):
                    language_commits[language] = language_commits.get(language, 0) + 1
                analyzed += 1
                time.sleep(COMMIT_DETAIL_DELAY)
            except Exception as exc:
                logger.warning(f"Error analyzing commit {commit.get('sha', '?')}: {exc}")
                continue

        if len(commits) < GITHUB_PER_PAGE:
            break
        page += 1

    since_note = f" since {since}" if since else ""
    logger.info(f"📊 Analyzed {analyzed} commits{since_note}, found languages: {sorted(language_commits)}")
    return language_commits


# ─── Creator Bonus ────────────────────────────────────────────────────────────

def creator_bonus(repo: RepoSnapshot, commit_count: int, now: datetime | None = None) -> tuple[float, float]:
    """
    Return (accuracy_bonus, speed_bonus) for an original repository.
    Each term is capped independently.
    """
    now = now or utc_now()

    repo_quality   = min(50, repo.size / 20)
    community      = min(30, repo.stars * 2)
    impact         = min(20, repo.forks * 5)
    consistency    = min(25, commit_count / 5)
    accuracy = repo_quality + community + impact + consistency

    age_months     = max(1, days_between(repo.created_at, now) / 30)
    velocity       = min(40, safe_divide(commit_count, age_months) * 10)
    updated_recently = (
        repo.updated_at is not None
        and days_between(repo.updated_at, now) < MAINTENANCE_WINDOW_DAYS
    )
    maintenance    = 20 if updated_recently else 0
    completion     = min(30, 30 if repo.size > 100 else repo.size / 3.33)
    speed = velocity + maintenance + completion

    return accuracy, speed


# ─── Fresh Repository Aggregate ───────────────────────────────────────────────

def compute_repo_aggregate(client, repo: RepoSnapshot, username: str) -> RepoAggregate:
    """Full-history contribution of one repository. Raises on fetch failures."""
    commits = client.fetch_all_commits(repo.url, username)
    closed_issues = client.fetch_closed_issues(repo.url, username)
    speed_points = calculate_speed_points(client, repo.url, username)

    logger.info(f"🔍 Analyzing {min(len(commits), LANGUAGE_SCAN_MAX_COMMITS)} commits of {repo.name} for language detection...")
    languages = language_stats_from_commits(client, repo.url, username, len(commits))

    return RepoAggregate(
        commits=len(commits),
        solved_issues=len(closed_issues),
        speed_points=speed_points,
        languages=languages,
    )
