"""Tree-sitter parser wrapper.

Provides a unified interface for tree-sitter parsing of the grammars the
structured analyzer understands (JavaScript, TypeScript, TSX).

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "typescript")
"""

from __future__ import annotations

from typing import Any, Callable

import tree_sitter
import tree_sitter_javascript
import tree_sitter_typescript

from ..exceptions import ParsingError
from ..logging_config import get_logger

logger = get_logger(__name__)

# Grammar name -> function returning the raw language capsule
_GRAMMAR_LOADERS: dict[str, Callable[[], Any]] = {
    "javascript": tree_sitter_javascript.language,
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}


class TreeSitterParser:
    """Wrapper around tree-sitter for multi-grammar parsing.

    Parsers are created lazily on first use of a grammar and reused after.
    """

    def __init__(self) -> None:
        self._parsers: dict[str, tree_sitter.Parser] = {}

    def _get_parser(self, grammar: str) -> tree_sitter.Parser:
        parser = self._parsers.get(grammar)
        if parser is not None:
            return parser

        loader = _GRAMMAR_LOADERS.get(grammar)
        if loader is None:
            raise ParsingError(grammar, "no tree-sitter grammar available")

        try:
            # tree-sitter >= 0.23 returns PyCapsule; wrap in Language()
            language = tree_sitter.Language(loader())
            parser = tree_sitter.Parser(language)
        except (ValueError, TypeError) as e:
            raise ParsingError(grammar, f"grammar failed to load: {e}") from e
        self._parsers[grammar] = parser
        logger.debug(f"Loaded tree-sitter grammar: {grammar}")
        return parser

    def parse(self, code: bytes, grammar: str) -> tree_sitter.Tree:
        """Parse code and return syntax tree.

        Args:
            code: Source code as bytes
            grammar: Grammar name (e.g., "typescript")

        Returns:
            Parsed tree. Syntax errors are represented as ERROR nodes in the
            tree, not raised.

        Raises:
            ParsingError: If the grammar is unknown or the parser fails
        """
        parser = self._get_parser(grammar)
        try:
            return parser.parse(code)
        except (ValueError, RuntimeError) as e:
            raise ParsingError(grammar, str(e)) from e
