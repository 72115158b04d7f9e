"""
tests/test_languages.py — Unit tests for the commit language classifier.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from core.languages import language_for_file, languages_for_files


class TestLanguageForFile:
    @pytest.mark.parametrize("path, expected", [
        ("src/app.js", "JavaScript"),
        ("src/App.TSX", "TypeScript"),
        ("scripts/run.py", "Python"),
        ("styles/main.scss", "SCSS"),
        ("index.htm", "HTML"),
        ("lib/main.dart", "Dart"),
        ("build.bat", "Batchfile"),
        ("game/script.rpy", "Ren'Py"),
        ("Shaders/Water.shader", "ShaderLab"),
    ])
    def test_extension_table(self, path, expected):
        assert language_for_file(path) == expected

    def test_blade_beats_php(self):
        assert language_for_file("resources/views/home.blade.php") == "Blade"
        assert language_for_file("app/Http/Kernel.php") == "PHP"

    def test_cmakelists_special_case(self):
        assert language_for_file("CMakeLists.txt") == "CMake"
        assert language_for_file("sub/dir/CMakeLists.txt") == "CMake"
        assert language_for_file("cmake/toolchain.cmake") == "CMake"

    def test_shared_extension_resolves_by_table_order(self):
        # ".h" is listed under C++, C and Objective-C; C++ comes first.
        assert language_for_file("include/vector.h") == "C++"
        assert language_for_file("src/main.c") == "C"
        assert language_for_file("ios/AppDelegate.m") == "Objective-C"

    def test_case_insensitive(self):
        assert language_for_file("MAIN.PY") == "Python"

    def test_unrecognized(self):
        assert language_for_file("README.md") is None
        assert language_for_file("Makefile") is None
        assert language_for_file("") is None


class TestLanguagesForFiles:
    def test_deduplicates_within_commit(self):
        files = ["a.php", "b.php", "c.php", "d.php", "e.php"]
        assert languages_for_files(files) == {"PHP"}

    def test_mixed_and_unknown(self):
        files = ["a.js", "b.css", "notes.txt", "c.js"]
        assert languages_for_files(files) == {"JavaScript", "CSS"}

    def test_empty(self):
        assert languages_for_files([]) == set()
