"""
ui/readme.py — Render the guild card README from derived stats.
"""

import logging

logger = logging.getLogger(__name__)


def render_profile_header(profile: dict, stats: dict) -> str:
    return f"""<div align="center">

# 🎮 Developer Guild Card

<img src="{profile['avatar_path']}" width="150" height="150" style="border-radius: 50%"/>

![](https://komarev.com/ghpvc/?username={profile['username']}&style=flat)
</div>

##  📌 Basic Info
### 👤 Name : {profile['display_name']}
### 🎖️ Class : {profile['profile_class']}
### 🎪 Guild : {profile['guild']}
### {stats['rank_icon']} Rank : {stats['rank']} ({stats['rank_name']})
### ⭐ Level : {stats['level']}"""


def render_battle_stats(stats: dict) -> str:
    return f"""## 📊 Battle Stats

### ⚔️ Attack Power  : {stats['attack']}
### 🛡️ Defense Power : {stats['defense']}
### ❤️ Health Point  : {stats['health']}
### 🔮 Mana Point    : {stats['mana']}
### 🎯 Accuracy      : {stats['accuracy']}
### ⚡ Speed         : {stats['speed']}"""


def render_skills(languages: list[tuple[str, int, str]]) -> str:
    lines = [f"### {icon} {language} : {commits}" for language, commits, icon in languages]
    return "## 💻 Programming Skills\n\n" + "\n".join(lines)


def render_quests(quests: dict) -> str:
    return f"""## 📜 Active Quests

### 🌅 Daily Quest

#### Current Quest: {quests['daily']}

### 📅 Weekly Quest
#### Current Mission: {quests['weekly']}

### 🌙 Monthly Raid
#### {quests['monthly']}

### 🌠 Seasonal Epic
#### {quests['seasonal']}

### 👑 Yearly Legend
#### {quests['yearly']}"""


def render_readme(profile: dict, stats: dict, languages: list[tuple[str, int, str]], quests: dict) -> str:
    """
    Assemble the full guild card.

    `profile` keys: username, display_name, profile_class, guild, avatar_path.
    """
    sections = [
        render_profile_header(profile, stats),
        render_battle_stats(stats),
        render_skills(languages),
        render_quests(quests),
        """<div align="center">
  This profile auto update based on time by github workflow set by the user.
</div>""",
    ]
    return "\n\n---\n".join(sections) + "\n"


def write_readme(path: str, content: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    logger.info(f"✅ README updated: {path}")
