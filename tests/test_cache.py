"""
tests/test_cache.py — Unit tests for the per-repository aggregate cache.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json

from core.cache import RepoCache
from core.models import RepoAggregate


LEGACY_CACHE = {
    "repos": {
        "testuser/site": {"commits": 40, "solvedIssues": 3, "speedPoints": 27, "languages": {"PHP": 12}},
        "testuser/tool": {"commits": 8, "languages": {"Python": 5}},
    }
}


class TestRepoCache:
    def test_missing_files_give_empty_cache(self, tmp_path):
        cache = RepoCache.load(str(tmp_path / "repos.joblib"), legacy_path=str(tmp_path / "legacy.json"))
        assert len(cache) == 0
        assert cache.get("testuser/site") is None

    def test_reads_legacy_json(self, tmp_path):
        legacy = tmp_path / "github_cache.json"
        legacy.write_text(json.dumps(LEGACY_CACHE))
        cache = RepoCache.load(None, legacy_path=str(legacy))
        site = cache.get("testuser/site")
        assert site == RepoAggregate(commits=40, solved_issues=3, speed_points=27, languages={"PHP": 12})
        tool = cache.get("testuser/tool")
        assert tool.solved_issues == 0
        assert tool.speed_points == 0

    def test_corrupt_legacy_json_is_ignored(self, tmp_path):
        legacy = tmp_path / "github_cache.json"
        legacy.write_text("{{{")
        cache = RepoCache.load(None, legacy_path=str(legacy))
        assert len(cache) == 0

    def test_save_and_reload_joblib(self, tmp_path):
        path = str(tmp_path / "cache" / "repos.joblib")
        cache = RepoCache(path=path)
        cache.put("testuser/site", RepoAggregate(commits=7, languages={"CSS": 2}))
        assert cache.save() is True

        reloaded = RepoCache.load(path)
        assert "testuser/site" in reloaded
        assert reloaded.get("testuser/site").languages == {"CSS": 2}

    def test_joblib_entries_win_over_legacy(self, tmp_path):
        path = str(tmp_path / "repos.joblib")
        cache = RepoCache(path=path)
        cache.put("testuser/site", RepoAggregate(commits=99))
        cache.save()

        legacy = tmp_path / "github_cache.json"
        legacy.write_text(json.dumps(LEGACY_CACHE))
        merged = RepoCache.load(path, legacy_path=str(legacy))
        assert merged.get("testuser/site").commits == 99
        assert merged.get("testuser/tool").commits == 8

    def test_save_without_path_is_noop(self):
        assert RepoCache().save() is False
