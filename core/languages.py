"""
languages.py — Map a changed file path to a language tag.

Special-case substrings are checked first, then the extension table in its
declared order; the first match wins (".h" is C++ because C++ comes first).
"""

from collections.abc import Iterable

from config import LANGUAGE_EXTENSIONS, LANGUAGE_SPECIAL_CASES


def language_for_file(file_path: str) -> str | None:
    """Return the language for a file path, or None when unrecognized."""
    file_name = file_path.lower()

    for pattern, language in LANGUAGE_SPECIAL_CASES:
        if pattern in file_name:
            return language

    for language, extensions in LANGUAGE_EXTENSIONS.items():
        for ext in extensions:
            if file_name.endswith(ext):
                return language

    return None


def languages_for_files(file_paths: Iterable[str]) -> set[str]:
    """Distinct languages touched by a set of changed files."""
    touched = set()
    for path in file_paths:
        language = language_for_file(path)
        if language:
            touched.add(language)
    return touched
