"""Tests for language dispatch."""

import pytest

from code_pulse.metrics.languages import (
    GENERIC_DIALECT,
    PYTHON_DIALECT,
    LanguageFamily,
    canonical_language,
    language_from_identity,
    resolve_language,
)


class TestResolveLanguage:
    """Every tag maps to exactly one strategy family."""

    @pytest.mark.parametrize(
        "tag,grammar",
        [
            ("ts", "typescript"),
            ("typescript", "typescript"),
            ("tsx", "tsx"),
            ("js", "javascript"),
            ("jsx", "javascript"),
            ("JavaScript", "javascript"),
            (".ts", "typescript"),
        ],
    )
    def test_structured_tags(self, tag, grammar):
        strategy = resolve_language(tag)
        assert strategy.family is LanguageFamily.STRUCTURED_TREE
        assert strategy.grammar == grammar

    @pytest.mark.parametrize("tag", ["py", "python", "PY"])
    def test_python_is_pattern_based(self, tag):
        strategy = resolve_language(tag)
        assert strategy.family is LanguageFamily.PATTERN_BASED
        assert strategy.dialect is PYTHON_DIALECT

    @pytest.mark.parametrize("tag", ["go", "", "unknown", "c++"])
    def test_unknown_is_fallback(self, tag):
        strategy = resolve_language(tag)
        assert strategy.family is LanguageFamily.FALLBACK
        assert strategy.dialect is GENERIC_DIALECT


class TestLanguageFromIdentity:
    """Language tags come from file extensions."""

    def test_extension_lowercased(self):
        assert language_from_identity("/src/App.TS") == "ts"

    def test_no_extension(self):
        assert language_from_identity("/src/Makefile") == ""

    def test_dotfile_has_no_extension(self):
        assert language_from_identity("/home/user/.bashrc") == ""

    def test_windows_separators(self):
        assert language_from_identity("C:\\work\\main.py") == "py"

    def test_dot_in_directory_ignored(self):
        assert language_from_identity("/a.b/readme") == ""


class TestCanonicalLanguage:
    def test_aliases(self):
        assert canonical_language("ts") == "typescript"
        assert canonical_language("JSX") == "javascript"
        assert canonical_language("py") == "python"

    def test_unknown_passes_through(self):
        assert canonical_language("Go") == "go"
