"""
config.py — Central configuration: constants, scan limits, language tables, rank tables.
"""

import os
import re
from dataclasses import dataclass

# ─── GitHub API ───────────────────────────────────────────────────────────────
GITHUB_API_BASE = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_REQUEST_TIMEOUT = 30    # seconds, per call
GITHUB_PER_PAGE = 100
GITHUB_REPOS_MAX_PAGES = 10    # 10 × 100 = 1000 repos max
GITHUB_ISSUES_MAX_PAGES = 10
GITHUB_COMMITS_MAX_PAGES = 20  # full history scan ceiling per repo

# ─── Retry ───────────────────────────────────────────────────────────────────
RETRY_MAX_ATTEMPTS = 3
RETRY_DELAY = 1.0              # seconds; delay before retry N+1 is N × RETRY_DELAY

# ─── Commit language scan ────────────────────────────────────────────────────
LANGUAGE_SCAN_MAX_COMMITS = 50
LANGUAGE_SCAN_MAX_PAGES = 3
COMMIT_DETAIL_DELAY = 0.1      # seconds between commit-detail fetches

# ─── Speed points ────────────────────────────────────────────────────────────
SPEED_POINTS_MAX_DAYS = 30     # issues closed later than this earn nothing

# ─── Creator bonus ───────────────────────────────────────────────────────────
MAINTENANCE_WINDOW_DAYS = 90

# ─── Files ───────────────────────────────────────────────────────────────────
POOL_FILE = "pool.json"
REPO_CACHE_FILE = ".cache/guild_card/repos.joblib"
LEGACY_CACHE_FILE = "github_cache.json"   # read-only, optional
QUEST_FILE = "Quest.json"
README_FILE = "README.md"

# ─── Language tables ─────────────────────────────────────────────────────────
# Order matters: the first language whose extension list matches wins.
LANGUAGE_EXTENSIONS = {
    "JavaScript":  [".js", ".jsx", ".mjs", ".cjs"],
    "TypeScript":  [".ts", ".tsx"],
    "PHP":         [".php"],
    "Blade":       [".blade.php"],
    "CSS":         [".css"],
    "SCSS":        [".scss", ".sass"],
    "HTML":        [".html", ".htm"],
    "Vue":         [".vue"],
    "Dart":        [".dart"],
    "Python":      [".py"],
    "Java":        [".java"],
    "C++":         [".cpp", ".cc", ".cxx", ".hpp", ".h"],
    "C":           [".c", ".h"],
    "C#":          [".cs"],
    "Ruby":        [".rb"],
    "Go":          [".go"],
    "Rust":        [".rs"],
    "Swift":       [".swift"],
    "Kotlin":      [".kt", ".kts"],
    "Objective-C": [".m", ".mm", ".h"],
    "Batchfile":   [".bat", ".cmd"],
    "Shell":       [".sh", ".bash", ".zsh"],
    "VBA":         [".vba", ".bas"],
    "CMake":       [".cmake", "cmakelists.txt"],
    "Hack":        [".hack", ".hh", ".hck"],
    "Ren'Py":      [".rpy"],
    "ShaderLab":   [".shader"],
    "HLSL":        [".hlsl", ".fx"],
}

# Checked before the extension table, in order.
LANGUAGE_SPECIAL_CASES = [
    (".blade.php", "Blade"),
    ("cmakelists.txt", "CMake"),
]

LANGUAGE_ICONS = {
    "JavaScript": "📜",
    "CSS": "🎨",
    "HTML": "🌐",
    "PHP": "🐘",
    "Ren'Py": "📚",
    "Blade": "🧷",
    "Dart": "🎯",
    "Batchfile": "🗂️",
    "Python": "🐍",
    "Java": "☕",
    "SCSS": "🎨",
    "C++": "➕",
    "Hack": "🧬",
    "C#": "🎯",
    "VBA": "📊",
    "C": "🎯",
    "CMake": "🧱",
    "Ruby": "💎",
    "Swift": "📱",
    "Objective-C": "🍎",
    "Kotlin": "🔰",
    "TypeScript": "🔷",
    "Vue": "💚",
    "Go": "🐹",
    "Rust": "🦀",
    "Shell": "🐚",
    "R": "🧪",
    "Scala": "⚡",
    "Perl": "🌟",
}
DEFAULT_LANGUAGE_ICON = "📄"
TOP_LANGUAGES_LIMIT = 25

# ─── Rank Thresholds (upper bound inclusive) ─────────────────────────────────
RANK_THRESHOLDS = [
    (1200,   "G"),
    (3600,   "F"),
    (8400,   "E"),
    (14400,  "D"),
    (24000,  "C"),
    (42000,  "B"),
    (72000,  "A"),
    (120000, "S"),
]
TOP_RANK = "X"   # anything above the last threshold

RANK_ICONS = {
    "G": "🔰", "F": "🥉", "E": "🥈", "D": "🥇", "C": "🥈",
    "B": "🥇", "A": "💎", "S": "👑", "X": "⭐",
}
RANK_NAMES = {
    "G": "Novice", "F": "Bronze", "E": "Silver", "D": "Gold", "C": "Silver",
    "B": "Gold", "A": "Platinum", "S": "Legend", "X": "Mythic",
}

# ─── Profile defaults (README header) ────────────────────────────────────────
DEFAULT_PROFILE_CLASS = "Full-Stack Developer"
DEFAULT_PROFILE_GUILD = "Independent Guild"
DEFAULT_AVATAR_PATH = "./assets/profile.png"

# ─── Username Validation ──────────────────────────────────────────────────────
GITHUB_USERNAME_REGEX = r"^[a-zA-Z0-9\-]{1,39}$"


# ─── Run configuration ───────────────────────────────────────────────────────

class ConfigError(Exception):
    """Raised when the run configuration is incomplete or invalid."""


@dataclass(frozen=True)
class RunConfig:
    """Everything one run needs, passed explicitly into the pipeline."""
    username: str
    token: str
    pool_file: str = POOL_FILE
    repo_cache_file: str = REPO_CACHE_FILE
    legacy_cache_file: str = LEGACY_CACHE_FILE
    quest_file: str = QUEST_FILE
    readme_file: str = README_FILE
    display_name: str = ""
    profile_class: str = DEFAULT_PROFILE_CLASS
    guild: str = DEFAULT_PROFILE_GUILD
    avatar_path: str = DEFAULT_AVATAR_PATH


def load_run_config(env: dict | None = None, **overrides) -> RunConfig:
    """
    Build a RunConfig from environment variables.

    `overrides` (e.g. CLI flags) win over the environment when not None.
    Raises ConfigError when the username or token is missing.
    """
    env = os.environ if env is None else env
    overrides = {k: v for k, v in overrides.items() if v is not None}

    username = overrides.pop("username", None) or env.get("GITHUB_USERNAME", "")
    username = username.strip()
    if not username:
        raise ConfigError("GITHUB_USERNAME is not set.")
    if not re.match(GITHUB_USERNAME_REGEX, username):
        raise ConfigError(f"Invalid GitHub username: {username!r}")

    token = env.get("PERSONAL_GITHUB_TOKEN") or env.get("GITHUB_TOKEN") or ""
    if not token.strip():
        raise ConfigError("PERSONAL_GITHUB_TOKEN is not set in environment variables.")

    values = {
        "pool_file":       env.get("POOL_FILE", POOL_FILE),
        "repo_cache_file": env.get("REPO_CACHE_FILE", REPO_CACHE_FILE),
        "legacy_cache_file": env.get("LEGACY_CACHE_FILE", LEGACY_CACHE_FILE),
        "quest_file":      env.get("QUEST_FILE", QUEST_FILE),
        "readme_file":     env.get("README_FILE", README_FILE),
        "display_name":    env.get("PROFILE_NAME", username),
        "profile_class":   env.get("PROFILE_CLASS", DEFAULT_PROFILE_CLASS),
        "guild":           env.get("PROFILE_GUILD", DEFAULT_PROFILE_GUILD),
        "avatar_path":     env.get("PROFILE_AVATAR", DEFAULT_AVATAR_PATH),
    }
    values.update(overrides)
    return RunConfig(username=username, token=token.strip(), **values)
