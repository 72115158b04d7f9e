"""
github_client.py — All GitHub REST API interactions.

Responsibilities:
  - Authenticate requests (a bearer token is mandatory)
  - Fetch the user, repositories, commits, commit details and closed issues
  - Handle pagination
  - Retry transient failures (timeouts, connection errors, rate limits, 5xx)
  - Raise typed exceptions for clean error handling upstream
"""

import logging

import requests

from config import (
    GITHUB_API_BASE,
    GITHUB_API_VERSION,
    GITHUB_COMMITS_MAX_PAGES,
    GITHUB_ISSUES_MAX_PAGES,
    GITHUB_PER_PAGE,
    GITHUB_REPOS_MAX_PAGES,
    GITHUB_REQUEST_TIMEOUT,
)
from core.models import RepoSnapshot
from utils.utils import parse_github_date, retry, since_param

logger = logging.getLogger(__name__)


# ─── Custom Exceptions ────────────────────────────────────────────────────────

class GitHubNotFoundError(Exception):
    """Raised when the requested resource does not exist (404)."""


class GitHubRateLimitError(Exception):
    """Raised when the GitHub API rate limit is exceeded (403/429)."""
    def __init__(self, reset_timestamp: int | None = None):
        self.reset_timestamp = reset_timestamp
        super().__init__("GitHub API rate limit exceeded.")


class GitHubAuthError(Exception):
    """Raised when the token is missing or invalid (401)."""


class GitHubAPIError(Exception):
    """Generic GitHub API error for unexpected status codes."""


class GitHubServerError(GitHubAPIError):
    """Raised on 5xx responses; treated as transient."""


TRANSIENT_ERRORS = (
    requests.Timeout,
    requests.ConnectionError,
    GitHubRateLimitError,
    GitHubServerError,
)


# ─── Client ──────────────────────────────────────────────────────────────────

class GitHubClient:
    """
    Thin wrapper around the GitHub REST API v3.

    Usage:
        client = GitHubClient(token="ghp_...")
        repos = client.fetch_repos(sort="pushed", direction="desc")
    """

    def __init__(self, token: str | None, session: requests.Session | None = None):
        if not token:
            raise GitHubAuthError("A GitHub token is required.")
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "Authorization": f"Bearer {token}",
        })

    # ── Internal request helper ───────────────────────────────────────────────

    @retry(exceptions=TRANSIENT_ERRORS)
    def _get(self, path: str, params: dict | None = None) -> requests.Response:
        """
        Make a GET request to the GitHub API.
        `path` is either an API path ("/user/repos") or an absolute URL taken
        from a previous payload. Raises typed exceptions for known error codes.
        """
        url = path if path.startswith("http") else f"{GITHUB_API_BASE}{path}"
        response = self.session.get(url, params=params, timeout=GITHUB_REQUEST_TIMEOUT)

        if response.status_code == 200:
            return response
        elif response.status_code == 404:
            raise GitHubNotFoundError(f"Not found: {url}")
        elif response.status_code == 401:
            raise GitHubAuthError("Invalid or expired GitHub token.")
        elif response.status_code in (403, 429):
            reset_ts = response.headers.get("X-RateLimit-Reset")
            raise GitHubRateLimitError(
                reset_timestamp=int(reset_ts) if reset_ts else None
            )
        elif response.status_code >= 500:
            raise GitHubServerError(
                f"GitHub API returned {response.status_code} for {url}"
            )
        else:
            raise GitHubAPIError(
                f"GitHub API returned {response.status_code} for {url}"
            )

    def _get_json(self, path: str, params: dict | None = None) -> dict | list:
        return self._get(path, params).json()

    def _get_pages(self, path: str, params: dict, max_pages: int) -> list[dict]:
        """Collect items page by page until a short or empty page, or `max_pages`."""
        items: list[dict] = []
        for page in range(1, max_pages + 1):
            page_items = self._get_json(path, params={**params, "per_page": GITHUB_PER_PAGE, "page": page})
            if not page_items:
                break
            items.extend(page_items)
            if len(page_items) < GITHUB_PER_PAGE:
                break
        return items

    # ── Anti-corruption layer ─────────────────────────────────────────────────

    @staticmethod
    def _parse_repo(raw: dict) -> RepoSnapshot:
        return RepoSnapshot(
            full_name  = raw["full_name"],
            name       = raw.get("name") or raw["full_name"].split("/")[-1],
            url        = raw["url"],
            fork       = bool(raw.get("fork")),
            size       = raw.get("size") or 0,
            stars      = raw.get("stargazers_count") or 0,
            forks      = raw.get("forks_count") or 0,
            created_at = parse_github_date(raw.get("created_at")),
            pushed_at  = parse_github_date(raw.get("pushed_at")),
            updated_at = parse_github_date(raw.get("updated_at")),
        )

    # ── Public fetch methods ──────────────────────────────────────────────────

    def fetch_user(self, username: str) -> dict:
        """Fetch the public user profile."""
        logger.info(f"Fetching profile for: {username}")
        return self._get_json(f"/users/{username}")

    def fetch_repos(self, sort: str | None = None, direction: str | None = None) -> list[RepoSnapshot]:
        """Fetch every repository the token's user can see (owned, collaborator, org)."""
        params = {"type": "all"}
        if sort:
            params["sort"] = sort
        if direction:
            params["direction"] = direction
        raw_repos = self._get_pages("/user/repos", params, GITHUB_REPOS_MAX_PAGES)
        logger.info(f"Fetched {len(raw_repos)} repositories")
        return [self._parse_repo(r) for r in raw_repos]

    def fetch_commits(
        self,
        repo_url: str,
        author: str,
        since: str | None = None,
        page: int = 1,
        per_page: int = GITHUB_PER_PAGE,
    ) -> list[dict]:
        """Fetch one page of commits by `author`, optionally on/after the `since` date."""
        params = {"author": author, "per_page": per_page, "page": page}
        if since:
            params["since"] = since_param(since)
        return self._get_json(f"{repo_url}/commits", params=params)

    def fetch_all_commits(
        self,
        repo_url: str,
        author: str,
        since: str | None = None,
        max_pages: int = GITHUB_COMMITS_MAX_PAGES,
    ) -> list[dict]:
        """Fetch the author's commit history, page by page."""
        params = {"author": author}
        if since:
            params["since"] = since_param(since)
        return self._get_pages(f"{repo_url}/commits", params, max_pages)

    def fetch_commit(self, commit_url: str) -> dict:
        """Fetch a single commit's details, including its changed `files`."""
        return self._get_json(commit_url)

    def fetch_closed_issues(self, repo_url: str, creator: str, since: str | None = None) -> list[dict]:
        """Fetch closed issues opened by `creator`, optionally updated on/after `since`."""
        params = {"state": "closed", "creator": creator}
        if since:
            params["since"] = since_param(since)
        return self._get_pages(f"{repo_url}/issues", params, GITHUB_ISSUES_MAX_PAGES)
