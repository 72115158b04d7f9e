"""
models.py — Domain objects: the persisted Pool, repository snapshots, per-repo aggregates.

Field names are ours (snake_case). The camelCase names used in pool.json and in
the repository cache are mapped at the load/save boundaries, nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Pool:
    """
    The single persisted aggregate of lifetime stats for one account.

    Every counter only ever grows; processed_repos only ever gains members.
    """
    initialized:            bool = False
    last_update_date:       str | None = None
    total_commits:          int = 0
    total_solved_issues:    int = 0
    total_speed_points:     int = 0
    total_repos:            int = 0
    original_repos_count:   int = 0
    total_stars:            int = 0
    total_forks:            int = 0
    language_stats:         dict[str, int] = field(default_factory=dict)
    account_creation_year:  int = field(default_factory=lambda: datetime.now().year)
    creator_bonus_accuracy: float = 0.0
    creator_bonus_speed:    float = 0.0
    processed_repos:        set[str] = field(default_factory=set)

    def add_languages(self, languages: dict[str, int]) -> None:
        for language, commits in languages.items():
            self.language_stats[language] = self.language_stats.get(language, 0) + commits


# On-disk key for every Pool field, in file order.
POOL_FIELD_KEYS = {
    "initialized":            "initialized",
    "last_update_date":       "lastUpdateDate",
    "total_commits":          "totalCommits",
    "total_solved_issues":    "totalSolvedIssues",
    "total_speed_points":     "totalSpeedPoints",
    "language_stats":         "languageStats",
    "total_repos":            "totalRepos",
    "account_creation_year":  "accountCreationYear",
    "original_repos_count":   "originalReposCount",
    "total_stars":            "totalStars",
    "total_forks":            "totalForks",
    "creator_bonus_accuracy": "creatorBonusAccuracy",
    "creator_bonus_speed":    "creatorBonusSpeed",
    "processed_repos":        "processedRepos",
}


@dataclass(frozen=True)
class RepoSnapshot:
    """One repository as listed by the API, consumed once per run."""
    full_name:  str
    name:       str
    url:        str
    fork:       bool
    size:       int
    stars:      int
    forks:      int
    created_at: datetime | None
    pushed_at:  datetime | None
    updated_at: datetime | None


@dataclass
class RepoAggregate:
    """A single repository's contribution to the pool; also a repo-cache entry."""
    commits:       int = 0
    solved_issues: int = 0
    speed_points:  int = 0
    languages:     dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "commits":      self.commits,
            "solvedIssues": self.solved_issues,
            "speedPoints":  self.speed_points,
            "languages":    dict(self.languages),
        }

    @classmethod
    def from_dict(cls, data: dict) -> RepoAggregate:
        return cls(
            commits=int(data.get("commits") or 0),
            solved_issues=int(data.get("solvedIssues") or 0),
            speed_points=int(data.get("speedPoints") or 0),
            languages={k: int(v) for k, v in (data.get("languages") or {}).items()},
        )
