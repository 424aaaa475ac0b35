"""Language dispatch: maps a language tag to an analysis strategy.

Every tag resolves to exactly one LanguageFamily:

    STRUCTURED_TREE  parsed with a tree-sitter grammar and walked node by node
    PATTERN_BASED    scanned line by line with a dialect of keyword patterns
    FALLBACK         scanned with the language-agnostic keyword set

Adding a language:
  1. Structured: add the tag to STRUCTURED_GRAMMARS (grammar must be known to
     treesitter_parser).
  2. Pattern-based: add a PatternDialect and register its tags in DIALECTS.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Optional


class LanguageFamily(Enum):
    """Analysis strategy family for a language tag."""

    STRUCTURED_TREE = "structured_tree"
    PATTERN_BASED = "pattern_based"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class PatternDialect:
    """Line-oriented complexity heuristics for one language.

    Attributes:
        name: Dialect name
        comment_prefixes: Lines starting with one of these (after strip) are skipped
        branch_patterns: Each pattern adds 1 when it matches a line
        logical_operator_pattern: Every match in a line adds 1
        complexity_cap: Upper bound on cyclomatic complexity (None = uncapped)
    """

    name: str
    comment_prefixes: tuple[str, ...]
    branch_patterns: tuple[str, ...]
    logical_operator_pattern: str
    complexity_cap: Optional[int] = None

    @cached_property
    def _compiled_branches(self) -> tuple[re.Pattern[str], ...]:
        return tuple(re.compile(p) for p in self.branch_patterns)

    @cached_property
    def _compiled_logical(self) -> re.Pattern[str]:
        return re.compile(self.logical_operator_pattern)

    def is_skipped(self, stripped_line: str) -> bool:
        """True for blank lines and comment lines."""
        return not stripped_line or stripped_line.startswith(self.comment_prefixes)

    def line_complexity(self, stripped_line: str) -> int:
        """Complexity contributed by a single non-comment line."""
        score = sum(1 for pattern in self._compiled_branches if pattern.search(stripped_line))
        score += len(self._compiled_logical.findall(stripped_line))
        return score


@dataclass(frozen=True)
class LanguageStrategy:
    """Resolved dispatch target for a language tag.

    Attributes:
        tag: Normalized (lower-case) language tag
        family: Strategy family
        grammar: tree-sitter grammar name (STRUCTURED_TREE only)
        dialect: Line heuristics (PATTERN_BASED and FALLBACK)
    """

    tag: str
    family: LanguageFamily
    grammar: Optional[str] = None
    dialect: Optional[PatternDialect] = None


# ── Dialects ───────────────────────────────────────────────────────

PYTHON_DIALECT = PatternDialect(
    name="python",
    comment_prefixes=("#",),
    branch_patterns=(
        r"\bdef\s+",
        r"\b(?:if|elif|for|while|except)\b",
        r"\breturn\s+.*\s+if\s+.*\s+else\s+",
    ),
    logical_operator_pattern=r"\s+(?:and|or)\s+",
)

RUBY_DIALECT = PatternDialect(
    name="ruby",
    comment_prefixes=("#",),
    branch_patterns=(
        r"\bdef\s+",
        r"\b(?:if|elsif|unless|while|until|for|when|rescue)\b",
        r"\?\s*[^:]+\s:\s",
    ),
    logical_operator_pattern=r"&&|\|\||\band\b|\bor\b",
)

GENERIC_DIALECT = PatternDialect(
    name="generic",
    comment_prefixes=("//", "#"),
    branch_patterns=(r"\b(?:if|else|switch|case|for|while|do|try|catch|except)\b",),
    logical_operator_pattern=r"&&|\|\||\band\b|\bor\b",
    complexity_cap=50,
)


# ── Tag registry ───────────────────────────────────────────────────

STRUCTURED_GRAMMARS: dict[str, str] = {
    "typescript": "typescript",
    "ts": "typescript",
    "tsx": "tsx",
    "javascript": "javascript",
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
}

DIALECTS: dict[str, PatternDialect] = {
    "python": PYTHON_DIALECT,
    "py": PYTHON_DIALECT,
    "ruby": RUBY_DIALECT,
    "rb": RUBY_DIALECT,
}


def resolve_language(tag: str) -> LanguageStrategy:
    """Resolve a language tag (name or file extension) to its strategy.

    Tags are case-insensitive; a leading dot is ignored so ``".ts"`` and
    ``"ts"`` resolve alike. Unknown tags resolve to FALLBACK.
    """
    normalized = (tag or "").strip().lower().lstrip(".")

    grammar = STRUCTURED_GRAMMARS.get(normalized)
    if grammar is not None:
        return LanguageStrategy(normalized, LanguageFamily.STRUCTURED_TREE, grammar=grammar)

    dialect = DIALECTS.get(normalized)
    if dialect is not None:
        return LanguageStrategy(normalized, LanguageFamily.PATTERN_BASED, dialect=dialect)

    return LanguageStrategy(normalized, LanguageFamily.FALLBACK, dialect=GENERIC_DIALECT)


def language_from_identity(identity: str) -> str:
    """Language tag of a file identity: its lower-case extension without the dot."""
    name = identity.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in name.lstrip("."):
        return ""
    return name.rsplit(".", 1)[-1].lower()


CANONICAL_NAMES: dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
    "py": "python",
    "rb": "ruby",
}


def canonical_language(tag: str) -> str:
    """Language name for a tag, e.g. ``"ts"`` -> ``"typescript"``."""
    normalized = (tag or "").strip().lower().lstrip(".")
    return CANONICAL_NAMES.get(normalized, normalized)
