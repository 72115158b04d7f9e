"""
tests/test_pool_updater.py — Unit tests for the incremental pool update.

Covers the no-regression floor, the active-repo filter and same-day idempotency.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from core.models import Pool
from core.pool_updater import (
    ActivityDelta,
    Baseline,
    active_repos,
    merge_delta,
    update_pool,
)
from fakes import FakeGitHubClient, make_commit, make_issue, make_repo

LAST_UPDATE = "2026-10-15"
TODAY = "2026-10-17"


# ─── Fixtures ─────────────────────────────────────────────────────────────────

def make_pool(**overrides) -> Pool:
    """Return an initialized pool with optional overrides."""
    base = dict(
        initialized=True,
        last_update_date=LAST_UPDATE,
        total_commits=100,
        total_solved_issues=10,
        total_speed_points=50,
        total_repos=3,
        original_repos_count=2,
        total_stars=12,
        total_forks=3,
        language_stats={"JavaScript": 40, "PHP": 10},
        account_creation_year=2019,
        creator_bonus_accuracy=300.0,
        creator_bonus_speed=150.0,
        processed_repos={"testuser/active", "testuser/stale", "testuser/fork"},
    )
    base.update(overrides)
    return Pool(**base)


ACTIVE = make_repo("active", pushed_at="2026-10-16T09:30:00Z")
STALE = make_repo("stale", pushed_at="2026-10-14T23:59:59Z")
FORK = make_repo("fork", fork=True, pushed_at="2026-01-01T00:00:00Z")


def counters(pool: Pool) -> dict:
    return {
        "commits": pool.total_commits,
        "issues": pool.total_solved_issues,
        "speed": pool.total_speed_points,
        "languages": dict(pool.language_stats),
    }


# ─── Active repo filter ───────────────────────────────────────────────────────

class TestActiveRepos:
    def test_boundary_is_inclusive_midnight_utc(self):
        at_midnight = make_repo("midnight", pushed_at="2026-10-15T00:00:00Z")
        just_before = make_repo("before", pushed_at="2026-10-14T23:59:59Z")
        assert active_repos([at_midnight, just_before], LAST_UPDATE) == [at_midnight]

    def test_never_pushed_is_inactive(self):
        assert active_repos([make_repo("empty", pushed_at=None)], LAST_UPDATE) == []

    def test_three_of_ten_active(self):
        fresh = [make_repo(f"fresh-{i}", pushed_at="2026-10-16T00:00:00Z") for i in range(3)]
        old = [make_repo(f"old-{i}", pushed_at="2025-01-01T00:00:00Z") for i in range(7)]
        client = FakeGitHubClient(repos=old + fresh)
        update_pool(make_pool(), client, "testuser", today=TODAY)
        fetched = set(client.calls_for("fetch_all_commits"))
        assert fetched == {r.url for r in fresh}
        assert set(client.calls_for("fetch_closed_issues")) == {r.url for r in fresh}


# ─── Merge policy ─────────────────────────────────────────────────────────────

class TestMergeDelta:
    def test_zero_delta_leaves_pool_unchanged(self):
        pool = Pool(total_commits=5, language_stats={"JS": 5})
        merge_delta(pool, Baseline.of(pool), ActivityDelta())
        assert pool.total_commits == 5
        assert pool.language_stats == {"JS": 5}

    def test_adds_delta(self):
        pool = make_pool()
        merge_delta(pool, Baseline.of(pool), ActivityDelta(commits=7, issues=2, languages={"PHP": 3, "Go": 1}))
        assert pool.total_commits == 107
        assert pool.total_solved_issues == 12
        assert pool.language_stats == {"JavaScript": 40, "PHP": 13, "Go": 1}

    def test_baseline_language_floor_when_absent_from_delta(self):
        pool = make_pool()
        baseline = Baseline.of(pool)
        pool.language_stats["PHP"] = 0          # simulate a regression mid-run
        merge_delta(pool, baseline, ActivityDelta(languages={"JavaScript": 2}))
        assert pool.language_stats["PHP"] == 10
        assert pool.language_stats["JavaScript"] == 42

    def test_scalar_never_below_current(self):
        pool = make_pool()
        baseline = Baseline(commits=90, issues=5, speed_points=40, languages={})
        merge_delta(pool, baseline, ActivityDelta(commits=3))
        assert pool.total_commits == 100
        assert pool.total_solved_issues == 10
        assert pool.total_speed_points == 50


# ─── update_pool ──────────────────────────────────────────────────────────────

class TestUpdatePool:
    def build_client(self, **overrides) -> FakeGitHubClient:
        new_commit = make_commit(ACTIVE, "n1", date="2026-10-16T10:00:00Z")
        second = make_commit(ACTIVE, "n2", date="2026-10-16T11:00:00Z")
        old_commit = make_commit(ACTIVE, "o1", date="2026-09-01T10:00:00Z")
        data = {
            "repos": [STALE, ACTIVE, FORK],
            "commits": {ACTIVE.url: [second, new_commit, old_commit]},
            "files": {
                new_commit["url"]: ["a.ts", "b.ts", "c.ts"],
                second["url"]: ["view.blade.php"],
                old_commit["url"]: ["ancient.rb"],
            },
            "issues": {ACTIVE.url: [
                make_issue("2026-10-10T00:00:00Z", "2026-10-16T00:00:00Z"),
                make_issue("2026-08-01T00:00:00Z", "2026-08-02T00:00:00Z"),
            ]},
        }
        data.update(overrides)
        return FakeGitHubClient(**data)

    def test_adds_activity_since_last_update(self):
        pool = update_pool(make_pool(), self.build_client(), "testuser", today=TODAY)
        assert pool.total_commits == 102
        assert pool.total_solved_issues == 11
        assert pool.language_stats == {"JavaScript": 40, "PHP": 10, "TypeScript": 1, "Blade": 1}
        assert pool.last_update_date == TODAY

    def test_speed_points_not_changed_by_delta(self):
        pool = update_pool(make_pool(), self.build_client(), "testuser", today=TODAY)
        assert pool.total_speed_points == 50

    def test_stale_repo_not_queried(self):
        client = self.build_client()
        update_pool(make_pool(), client, "testuser", today=TODAY)
        assert client.calls_for("fetch_all_commits") == [ACTIVE.url]

    def test_same_day_is_idempotent(self):
        client = self.build_client()
        pool = make_pool(last_update_date=TODAY)
        before = counters(pool)
        result = update_pool(pool, client, "testuser", today=TODAY)
        assert client.calls == []
        assert counters(result) == before

    def test_second_call_same_day_fetches_nothing(self):
        client = self.build_client()
        pool = update_pool(make_pool(), client, "testuser", today=TODAY)
        calls = len(client.calls)
        after_first = counters(pool)
        update_pool(pool, client, "testuser", today=TODAY)
        assert len(client.calls) == calls
        assert counters(pool) == after_first

    def test_no_active_repos_advances_date_only(self):
        client = self.build_client(repos=[STALE, FORK])
        pool = make_pool(total_repos=99, original_repos_count=42)
        before = counters(pool)
        update_pool(pool, client, "testuser", today=TODAY)
        assert pool.last_update_date == TODAY
        assert counters(pool) == before
        assert pool.total_repos == 99
        assert pool.original_repos_count == 42
        assert client.calls_for("fetch_all_commits") == []

    def test_repo_failure_contributes_zero(self):
        other = make_repo("other", pushed_at="2026-10-16T00:00:00Z")
        client = self.build_client(
            repos=[STALE, ACTIVE, FORK, other],
            commits={other.url: [make_commit(other, "x", date="2026-10-16T01:00:00Z")]},
            failing={ACTIVE.url},
        )
        pool = update_pool(make_pool(), client, "testuser", today=TODAY)
        assert pool.total_commits == 101
        assert pool.language_stats == {"JavaScript": 40, "PHP": 10}
        assert pool.last_update_date == TODAY

    def test_all_repos_failing_never_regresses(self):
        client = self.build_client(failing={ACTIVE.url})
        pool = make_pool()
        before = counters(pool)
        update_pool(pool, client, "testuser", today=TODAY)
        assert counters(pool) == before

    def test_repo_counts_recomputed_from_full_list(self):
        pool = update_pool(make_pool(total_repos=1, original_repos_count=9),
                           self.build_client(), "testuser", today=TODAY)
        assert pool.total_repos == 3
        assert pool.original_repos_count == 2

    def test_new_repositories_recorded(self):
        brand_new = make_repo("brand-new", pushed_at="2026-10-16T00:00:00Z")
        client = self.build_client(repos=[STALE, ACTIVE, FORK, brand_new])
        pool = update_pool(make_pool(), client, "testuser", today=TODAY)
        assert brand_new.full_name in pool.processed_repos
        assert {"testuser/active", "testuser/stale", "testuser/fork"} <= pool.processed_repos

    def test_creator_figures_untouched(self):
        pool = update_pool(make_pool(), self.build_client(), "testuser", today=TODAY)
        assert pool.total_stars == 12
        assert pool.total_forks == 3
        assert pool.creator_bonus_accuracy == 300.0
        assert pool.account_creation_year == 2019

    def test_missing_last_update_uses_today(self):
        client = self.build_client()
        pool = update_pool(make_pool(last_update_date=None), client, "testuser", today=TODAY)
        # nothing was pushed on/after today's midnight
        assert client.calls_for("fetch_all_commits") == []
        assert pool.last_update_date == TODAY


class TestNoRegressionAcrossRuns:
    @pytest.mark.parametrize("failing", [set(), {ACTIVE.url}])
    def test_counters_non_decreasing_over_several_days(self, failing):
        commit = make_commit(ACTIVE, "d1", date="2026-10-16T10:00:00Z")
        client = FakeGitHubClient(
            repos=[ACTIVE, STALE],
            commits={ACTIVE.url: [commit]},
            files={commit["url"]: ["x.vue"]},
            failing=failing,
        )
        pool = make_pool()
        history = [counters(pool)]
        for day in ("2026-10-16", "2026-10-17", "2026-10-18", "2026-10-19"):
            update_pool(pool, client, "testuser", today=day)
            history.append(counters(pool))

        for before, after in zip(history, history[1:]):
            assert after["commits"] >= before["commits"]
            assert after["issues"] >= before["issues"]
            assert after["speed"] >= before["speed"]
            for language, value in before["languages"].items():
                assert after["languages"][language] >= value
