"""
cache.py — Per-repository aggregate cache used by the pool initializer.

Two sources, same entry shape ({commits, solvedIssues, speedPoints, languages}):
  1. Disk:   joblib file written by previous initializations
  2. Legacy: read-only github_cache.json ({"repos": {full_name: entry}})

Cache problems are never fatal: a cache that cannot be read is treated as empty.

Usage:
    from core.cache import RepoCache
    cache = RepoCache.load(".cache/guild_card/repos.joblib", legacy_path="github_cache.json")
"""

import json
import logging
import os
import time

import joblib

from core.models import RepoAggregate

logger = logging.getLogger(__name__)


class RepoCache:
    """Mapping of repository full name → RepoAggregate."""

    def __init__(self, entries: dict[str, RepoAggregate] | None = None, path: str | None = None):
        self._entries = dict(entries or {})
        self.path = path

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, full_name: str) -> bool:
        return full_name in self._entries

    def get(self, full_name: str) -> RepoAggregate | None:
        return self._entries.get(full_name)

    def put(self, full_name: str, aggregate: RepoAggregate) -> None:
        self._entries[full_name] = aggregate

    # ── Loading ───────────────────────────────────────────────────────────────

    @classmethod
    def load(cls, path: str | None, legacy_path: str | None = None) -> "RepoCache":
        """
        Load the joblib cache at `path`, then add legacy JSON entries that the
        joblib cache does not already hold.
        """
        entries = _read_joblib_entries(path) if path else {}
        if legacy_path:
            for full_name, aggregate in _read_json_entries(legacy_path).items():
                entries.setdefault(full_name, aggregate)
        if entries:
            logger.info(f"📊 Loaded {len(entries)} cached repositories for a better baseline")
        return cls(entries, path=path)

    # ── Saving ────────────────────────────────────────────────────────────────

    def save(self) -> bool:
        """Write the cache to its joblib file. Returns True on success."""
        if not self.path:
            return False
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            payload = {
                "repos": {name: agg.to_dict() for name, agg in self._entries.items()},
                "_cached_at": time.time(),
            }
            joblib.dump(payload, self.path)
            logger.info(f"Repo cache written: {len(self._entries)} repositories")
            return True
        except Exception as exc:
            logger.warning(f"Repo cache write error: {exc}")
            return False


def _entries_from_payload(repos: dict) -> dict[str, RepoAggregate]:
    entries = {}
    for full_name, raw in repos.items():
        try:
            entries[full_name] = RepoAggregate.from_dict(raw)
        except (TypeError, ValueError, AttributeError) as exc:
            logger.warning(f"Skipping malformed cache entry {full_name}: {exc}")
    return entries


def _read_joblib_entries(path: str) -> dict[str, RepoAggregate]:
    if not os.path.exists(path):
        return {}
    try:
        payload = joblib.load(path)
        return _entries_from_payload(payload.get("repos", {}))
    except Exception as exc:
        logger.warning(f"Repo cache read error for {path}: {exc}")
        return {}


def _read_json_entries(path: str) -> dict[str, RepoAggregate]:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            payload = json.load(f)
        return _entries_from_payload(payload.get("repos", {}))
    except (OSError, ValueError, AttributeError) as exc:
        logger.warning(f"⚠️  Could not load legacy cache {path}, starting fresh: {exc}")
        return {}
