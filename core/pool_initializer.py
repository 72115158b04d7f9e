"""
pool_initializer.py — One-time full-history aggregation into a fresh pool.

Input:  an uninitialized Pool, a GitHub client, and optionally a RepoCache
Output: the same Pool, populated and marked initialized

Each repository's contribution is computed completely before it is added, so a
repository that fails halfway contributes nothing.
"""

import logging
from datetime import datetime

from core.activity import compute_repo_aggregate, creator_bonus
from core.cache import RepoCache
from core.models import Pool, RepoAggregate, RepoSnapshot
from utils.utils import parse_github_date, today_iso, utc_now

logger = logging.getLogger(__name__)


def initialize_pool(
    pool: Pool,
    client,
    username: str,
    repo_cache: RepoCache | None = None,
    today: str | None = None,
    now: datetime | None = None,
) -> Pool:
    """
    Populate `pool` from the account's full history. No-op if already initialized.

    Cached aggregates are reused when `repo_cache` has an entry for a
    repository's full name; freshly computed aggregates are written back to it.
    """
    if pool.initialized:
        logger.info("⚠️  Pool already initialized, skipping...")
        return pool

    today = today or today_iso()
    now = now or utc_now()
    logger.info("🚀 Initializing pool with all current data...")

    user = client.fetch_user(username)
    created = parse_github_date(user.get("created_at"))
    if created is not None:
        pool.account_creation_year = created.year

    repos = client.fetch_repos()
    logger.info(f"📁 Processing {len(repos)} repositories for initial pool...")

    for repo in repos:
        try:
            aggregate = _repo_aggregate(client, repo, username, repo_cache)
        except Exception as exc:
            logger.warning(f"Error processing {repo.name}: {exc}")
            continue
        _add_repo(pool, repo, aggregate, now)

    pool.total_repos = len(repos)
    pool.initialized = True
    pool.last_update_date = today

    logger.info("✅ Pool initialization complete!")
    logger.info(
        f"📊 Initial Stats: {pool.total_commits} commits, "
        f"{pool.total_solved_issues} issues, {pool.total_speed_points} speed points"
    )
    return pool


def _repo_aggregate(client, repo: RepoSnapshot, username: str, repo_cache: RepoCache | None) -> RepoAggregate:
    cached = repo_cache.get(repo.full_name) if repo_cache is not None else None
    if cached is not None:
        logger.info(f"📋 Using cached data for {repo.name}")
        return cached

    logger.info(f"🔄 Processing fresh data for {repo.name}")
    aggregate = compute_repo_aggregate(client, repo, username)
    if repo_cache is not None:
        repo_cache.put(repo.full_name, aggregate)
    return aggregate


def _add_repo(pool: Pool, repo: RepoSnapshot, aggregate: RepoAggregate, now: datetime) -> None:
    pool.total_commits += aggregate.commits
    pool.total_solved_issues += aggregate.solved_issues
    pool.total_speed_points += aggregate.speed_points
    pool.add_languages(aggregate.languages)

    if not repo.fork:
        pool.original_repos_count += 1
        pool.total_stars += repo.stars
        pool.total_forks += repo.forks
        accuracy, speed = creator_bonus(repo, aggregate.commits, now)
        pool.creator_bonus_accuracy += accuracy
        pool.creator_bonus_speed += speed

    pool.processed_repos.add(repo.full_name)
