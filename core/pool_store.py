"""
pool_store.py — Load and save the persisted pool (pool.json).

processedRepos is a list on disk and a set in memory; the conversion happens
here and only here.
"""

import json
import logging
import os
import stat
import tempfile

from core.models import POOL_FIELD_KEYS, Pool

logger = logging.getLogger(__name__)

DEFAULT_FILE_MODE = 0o644


class PoolStoreError(Exception):
    """Raised when an existing pool file cannot be read."""


def pool_to_dict(pool: Pool) -> dict:
    data = {}
    for attr, key in POOL_FIELD_KEYS.items():
        value = getattr(pool, attr)
        if attr == "processed_repos":
            value = sorted(value)
        elif attr == "language_stats":
            value = dict(value)
        data[key] = value
    return data


def _as_flag(value) -> bool:
    if not isinstance(value, (bool, int)):
        raise TypeError(f"expected a boolean, got {type(value).__name__}")
    return bool(value)


def _as_date(value) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a YYYY-MM-DD string, got {type(value).__name__}")
    return value


def _as_language_stats(value) -> dict:
    if not isinstance(value, dict):
        raise TypeError(f"expected an object, got {type(value).__name__}")
    return {str(lang): int(count) for lang, count in value.items()}


def _as_processed_repos(value) -> set:
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {type(value).__name__}")
    if not all(isinstance(name, str) for name in value):
        raise TypeError("expected a list of repository names")
    return set(value)


# Converter for every on-disk value.
_FIELD_TYPES = {
    "initialized":            _as_flag,
    "last_update_date":       _as_date,
    "total_commits":          int,
    "total_solved_issues":    int,
    "total_speed_points":     int,
    "total_repos":            int,
    "original_repos_count":   int,
    "total_stars":            int,
    "total_forks":            int,
    "language_stats":         _as_language_stats,
    "account_creation_year":  int,
    "creator_bonus_accuracy": float,
    "creator_bonus_speed":    float,
    "processed_repos":        _as_processed_repos,
}


def pool_from_dict(data: dict) -> Pool:
    """
    Build a Pool from its on-disk form; absent keys keep their fresh defaults.

    Numeric strings such as "5" are coerced. Anything that cannot be read as
    the field's type raises ValueError naming the key.
    """
    pool = Pool()
    for attr, key in POOL_FIELD_KEYS.items():
        if key not in data or data[key] is None:
            continue
        try:
            value = _FIELD_TYPES[attr](data[key])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{key}: {exc}") from exc
        setattr(pool, attr, value)
    return pool


def load_pool(path: str) -> Pool:
    """
    Load the pool from `path`, or return a fresh one if the file does not exist.

    Raises PoolStoreError if the file exists but is unreadable or holds wrongly
    typed values, so a corrupt pool is never silently replaced by a fresh
    initialization.
    """
    if not os.path.exists(path):
        logger.info("🆕 No pool file found, creating a new pool (first time setup)")
        return Pool()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise PoolStoreError(f"Could not read pool file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise PoolStoreError(f"Pool file {path} does not contain a JSON object")

    try:
        pool = pool_from_dict(data)
    except ValueError as exc:
        raise PoolStoreError(f"Invalid value in pool file {path}: {exc}") from exc

    logger.info(f"📊 Loaded existing pool data from {path}")
    return pool


def save_pool(pool: Pool, path: str) -> bool:
    """
    Write the pool atomically. Returns False (and logs) on failure.

    An existing file keeps its permissions; a new one is created 0644.
    """
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        mode = stat.S_IMODE(os.stat(path).st_mode) if os.path.exists(path) else DEFAULT_FILE_MODE
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".pool-", suffix=".json")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(pool_to_dict(pool), f, indent=2, ensure_ascii=False)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except OSError as exc:
        logger.error(f"Error saving pool to {path}: {exc}")
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        return False

    logger.info(f"💾 Pool data saved to {path}")
    return True
