"""Complexity analysis engine with language-specific strategies.

Strategy is chosen from the language tag:

    1. STRUCTURED_TREE  tree-sitter walk (TypeScript / JavaScript family)
    2. PATTERN_BASED    line heuristics for a known dialect (Python, Ruby)
    3. FALLBACK         language-agnostic line heuristics

Structured analysis that fails for any reason degrades to the fallback, so
``analyze`` always returns a valid ComplexityMetrics value.

Example:
    >>> analyzer = ComplexityAnalyzer()
    >>> analyzer.analyze("if (a && b) { run(); }", "ts").cyclomatic_complexity
    3
"""

from __future__ import annotations

from typing import Optional

from ..exceptions import AnalysisError
from ..logging_config import get_logger
from .languages import LanguageFamily, LanguageStrategy, resolve_language
from .models import ComplexityMetrics
from .patterns import fallback_metrics, pattern_metrics, quick_metrics
from .scoring import count_lines
from .structured import metrics_from_counts, walk_tree
from .treesitter_parser import TreeSitterParser

logger = get_logger(__name__)

DEFAULT_TRAVERSAL_BUDGET = 200_000


class ComplexityAnalyzer:
    """Computes ComplexityMetrics for source text in any language.

    Args:
        max_traversal_nodes: Node budget for a single syntax-tree walk. Trees
            larger than this are analyzed with the fallback heuristics.
        parser: Optional shared TreeSitterParser
    """

    def __init__(
        self,
        max_traversal_nodes: int = DEFAULT_TRAVERSAL_BUDGET,
        parser: Optional[TreeSitterParser] = None,
    ) -> None:
        self.max_traversal_nodes = max_traversal_nodes
        self._parser = parser or TreeSitterParser()

    def analyze(self, source: str, language: str) -> ComplexityMetrics:
        """Full analysis using the strategy for ``language``.

        Never raises: internal failures degrade to the fallback heuristics.
        """
        strategy = resolve_language(language)
        try:
            return self._dispatch(source, strategy)
        except AnalysisError as e:
            logger.warning(f"Structured analysis failed for '{strategy.tag}', using fallback: {e}")
        except Exception:
            logger.exception(f"Unexpected error analyzing '{strategy.tag}' source, using fallback")
        return fallback_metrics(source)

    def quick_analyze(self, source: str, language: str) -> ComplexityMetrics:
        """Line-count estimate for large files or in-progress edits.

        Cost is linear in the line count regardless of language.
        """
        return quick_metrics(source)

    def _dispatch(self, source: str, strategy: LanguageStrategy) -> ComplexityMetrics:
        if strategy.family is LanguageFamily.STRUCTURED_TREE:
            return self._analyze_structured(source, strategy)
        if strategy.family is LanguageFamily.PATTERN_BASED:
            assert strategy.dialect is not None
            return pattern_metrics(source, strategy.dialect)
        if strategy.family is LanguageFamily.FALLBACK:
            return fallback_metrics(source)
        raise AnalysisError(f"Unhandled language family: {strategy.family}")

    def _analyze_structured(self, source: str, strategy: LanguageStrategy) -> ComplexityMetrics:
        assert strategy.grammar is not None
        code_bytes = source.encode("utf-8", errors="replace")
        tree = self._parser.parse(code_bytes, strategy.grammar)
        counts = walk_tree(tree.root_node, strategy.tag, self.max_traversal_nodes)
        logger.debug(
            f"Walked {counts.nodes_visited} nodes ({strategy.grammar}): "
            f"cc={counts.cyclomatic_complexity}"
        )
        return metrics_from_counts(counts, count_lines(source))
