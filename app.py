"""
app.py — Guild Card: pool-based developer stats README.
Command-line entry point.

Flow:
  1. Load .env + build the run configuration (token is mandatory)
  2. Load the pool
  3. Initialize it once, or fold in the activity since the last update
  4. Save the pool
  5. Derive stats → pick quests → write README
"""

import argparse
import logging
import sys
from dataclasses import asdict
from datetime import date

import requests
from dotenv import load_dotenv

from config import ConfigError, RunConfig, load_run_config
from core.cache import RepoCache
from core.github_client import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubClient,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from core.pool_initializer import initialize_pool
from core.pool_store import PoolStoreError, load_pool, save_pool
from core.pool_updater import update_pool
from core.quests import pick_quests
from core.stats import derive_stats, top_languages
from ui.readme import render_readme, write_readme
from utils.utils import today_iso

logger = logging.getLogger(__name__)


# ─── Main pipeline ────────────────────────────────────────────────────────────
def run(config: RunConfig, client=None, today: str | None = None, render: bool = True) -> dict:
    """
    Full pipeline: load → initialize/update → save → stats → README.
    Returns {"pool", "stats"}. Raises PoolStoreError if the pool file is unreadable.
    """
    client = client or GitHubClient(token=config.token)

    pool = load_pool(config.pool_file)

    if not pool.initialized:
        repo_cache = RepoCache.load(config.repo_cache_file, legacy_path=config.legacy_cache_file)
        pool = initialize_pool(pool, client, config.username, repo_cache=repo_cache, today=today)
        repo_cache.save()
    else:
        pool = update_pool(pool, client, config.username, today=today)

    save_pool(pool, config.pool_file)

    stats = derive_stats(pool)

    if render:
        day = date.fromisoformat(today or today_iso())
        quests = pick_quests(config.quest_file, day)
        profile = asdict(config)
        profile.pop("token")
        content = render_readme(profile, stats, top_languages(pool), quests)
        write_readme(config.readme_file, content)

    return {"pool": pool, "stats": stats}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="guild-card",
        description="Update the pool of lifetime GitHub stats and render the guild card README.",
    )
    parser.add_argument("--username", help="GitHub login (default: $GITHUB_USERNAME)")
    parser.add_argument("--pool", dest="pool_file", help="Pool file (default: pool.json)")
    parser.add_argument("--cache", dest="repo_cache_file", help="Repository cache file (joblib)")
    parser.add_argument("--quests", dest="quest_file", help="Quest definitions file")
    parser.add_argument("--readme", dest="readme_file", help="README output file")
    parser.add_argument("--skip-readme", action="store_true", help="Update the pool only")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    load_dotenv()

    try:
        config = load_run_config(
            username=args.username,
            pool_file=args.pool_file,
            repo_cache_file=args.repo_cache_file,
            quest_file=args.quest_file,
            readme_file=args.readme_file,
        )
        client = GitHubClient(token=config.token)
    except (ConfigError, GitHubAuthError) as exc:
        logger.error(f"❌ {exc}")
        return 1

    logger.info(f"🔄 Starting pool-based stats processing for {config.username}...")
    try:
        result = run(config, client=client, render=not args.skip_readme)
    except PoolStoreError as exc:
        logger.error(f"❌ {exc}")
        return 1
    except (GitHubAuthError, GitHubAPIError, GitHubNotFoundError, GitHubRateLimitError, requests.RequestException) as exc:
        logger.error(f"❌ Error in pool stats processing: {exc}")
        return 1
    except OSError as exc:
        logger.error(f"❌ Could not write output: {exc}")
        return 1

    logger.info(f"🎯 Current Level: {result['stats']['level']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
