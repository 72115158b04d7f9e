"""
pool_updater.py — Fold the activity since the last update into an initialized pool.

Only repositories pushed on/after the last update date are queried. Whatever
the delta turns out to be, no counter and no language ends below the value it
had when the run started.
"""

import logging
from dataclasses import dataclass, field

from core.activity import language_stats_from_commits
from core.models import Pool, RepoSnapshot
from utils.utils import start_of_day_utc, today_iso

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Baseline:
    """Pool values captured before an update; the floor nothing may drop below."""
    commits:      int
    issues:       int
    speed_points: int
    languages:    dict[str, int]

    @classmethod
    def of(cls, pool: Pool) -> "Baseline":
        return cls(
            commits=pool.total_commits,
            issues=pool.total_solved_issues,
            speed_points=pool.total_speed_points,
            languages=dict(pool.language_stats),
        )


@dataclass
class ActivityDelta:
    commits:      int = 0
    issues:       int = 0
    speed_points: int = 0
    languages:    dict[str, int] = field(default_factory=dict)

    def add_languages(self, languages: dict[str, int]) -> None:
        for language, commits in languages.items():
            self.languages[language] = self.languages.get(language, 0) + commits


def active_repos(repos: list[RepoSnapshot], since: str) -> list[RepoSnapshot]:
    """Repositories pushed at or after midnight UTC of `since`."""
    boundary = start_of_day_utc(since)
    return [r for r in repos if r.pushed_at is not None and r.pushed_at >= boundary]


def collect_delta(client, repos: list[RepoSnapshot], username: str, since: str) -> ActivityDelta:
    """
    Commits, closed issues and commit languages since `since` across `repos`.

    A repository whose fetches fail contributes nothing; its partial figures
    are discarded.
    """
    delta = ActivityDelta()

    for repo in repos:
        pushed = repo.pushed_at.isoformat() if repo.pushed_at else "never"
        logger.info(f"🔄 Checking active repo: {repo.name} (last pushed: {pushed})")
        try:
            repo_delta = _repo_delta(client, repo, username, since)
        except Exception as exc:
            logger.warning(f"Error checking activity for {repo.name}: {exc}")
            continue

        delta.commits += repo_delta.commits
        delta.issues += repo_delta.issues
        delta.add_languages(repo_delta.languages)

    return delta


def _repo_delta(client, repo: RepoSnapshot, username: str, since: str) -> ActivityDelta:
    repo_delta = ActivityDelta()

    new_commits = client.fetch_all_commits(repo.url, username, since=since)
    if new_commits:
        repo_delta.commits = len(new_commits)
        logger.info(f"📝 {repo.name}: {len(new_commits)} new commits since last update")
        repo_delta.languages = language_stats_from_commits(
            client, repo.url, username, len(new_commits), since=since
        )

    new_issues = client.fetch_closed_issues(repo.url, username, since=since)
    repo_delta.issues = len(new_issues)
    if new_issues:
        logger.info(f"🎯 {repo.name}: {len(new_issues)} new issues closed since last update")

    return repo_delta


def merge_delta(pool: Pool, baseline: Baseline, delta: ActivityDelta) -> None:
    """Apply `delta` to `pool`, never letting a counter fall below `baseline`."""
    pool.total_commits = max(baseline.commits + delta.commits, pool.total_commits)
    pool.total_solved_issues = max(baseline.issues + delta.issues, pool.total_solved_issues)
    pool.total_speed_points = max(baseline.speed_points + delta.speed_points, pool.total_speed_points)

    for language, commits in delta.languages.items():
        current = pool.language_stats.get(language, 0)
        pool.language_stats[language] = max(current + commits, baseline.languages.get(language, 0))

    for language, baseline_value in baseline.languages.items():
        pool.language_stats[language] = max(pool.language_stats.get(language, 0), baseline_value)


def update_pool(pool: Pool, client, username: str, today: str | None = None) -> Pool:
    """Add the activity since `pool.last_update_date` to an initialized pool."""
    today = today or today_iso()

    if pool.last_update_date == today:
        logger.info("✅ Pool already updated today, skipping...")
        return pool

    logger.info(f"📈 Adding new activity to pool (last update: {pool.last_update_date})...")
    baseline = Baseline.of(pool)

    since = pool.last_update_date or today
    logger.info(f"🔍 Checking repositories updated since: {since}")

    all_repos = client.fetch_repos(sort="pushed", direction="desc")
    active = active_repos(all_repos, since)
    logger.info(
        f"🎯 Rate Limit Optimization: Checking {len(active)} active repos "
        f"out of {len(all_repos)} total repos"
    )

    if not active:
        logger.info("📭 No repositories have been updated since last pool update")
        pool.last_update_date = today
        return pool

    delta = collect_delta(client, active, username, since)
    merge_delta(pool, baseline, delta)

    # Recounted from scratch each run: fork status can change.
    pool.total_repos = len(all_repos)
    pool.original_repos_count = sum(1 for r in all_repos if not r.fork)
    for repo in all_repos:
        if repo.full_name not in pool.processed_repos:
            logger.info(f"🆕 New repository detected: {repo.name}")
            pool.processed_repos.add(repo.full_name)

    pool.last_update_date = today

    logger.info(f"📈 Activity since last update: {delta.commits} commits, {delta.issues} issues")
    logger.info(
        f"📊 Updated totals: {pool.total_commits} commits (was {baseline.commits}), "
        f"{pool.total_solved_issues} issues (was {baseline.issues})"
    )
    logger.info(f"⚡ API Calls Saved: {len(all_repos) - len(active)} repos skipped")
    return pool
