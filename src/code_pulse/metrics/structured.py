"""Syntax-tree based complexity analysis.

Walks a tree-sitter tree iteratively (explicit work stack, so deeply nested
or minified input cannot exhaust the interpreter stack) and collects:

    - cyclomatic complexity: 1 + branches + short-circuit operators
    - Halstead operator counts: distinct (n1) and total (N1) binary operators
    - Halstead operand counts: distinct identifier names (n2) and total
      identifiers + literals (N2)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from ..exceptions import TraversalBudgetExceeded
from .models import ComplexityMetrics, HalsteadMetrics
from .scoring import clamp

# Each occurrence adds one independent path
BRANCH_NODE_TYPES = frozenset(
    {
        "if_statement",
        "switch_statement",
        "switch_case",
        "for_statement",
        "for_in_statement",  # also covers for...of
        "while_statement",
        "do_statement",
        "catch_clause",
        "ternary_expression",
    }
)

# Short-circuit operators are implicit branches
SHORT_CIRCUIT_OPERATORS = frozenset({"&&", "||", "??"})

IDENTIFIER_NODE_TYPES = frozenset(
    {
        "identifier",
        "property_identifier",
        "shorthand_property_identifier",
        "shorthand_property_identifier_pattern",
        "private_property_identifier",
        "type_identifier",
    }
)

LITERAL_NODE_TYPES = frozenset({"string", "number", "true", "false"})

MAX_STRUCTURED_COMPLEXITY = 100


@dataclass
class TreeCounts:
    """Raw counts gathered from one syntax tree."""

    cyclomatic_complexity: int = 1
    operators: set[str] = field(default_factory=set)
    operator_total: int = 0
    operands: set[str] = field(default_factory=set)
    operand_total: int = 0
    nodes_visited: int = 0


def walk_tree(root: Any, language: str, budget: int) -> TreeCounts:
    """Collect complexity counts from a syntax tree.

    Args:
        root: Root node of a tree-sitter tree
        language: Language tag (for error reporting)
        budget: Maximum number of nodes to visit

    Raises:
        TraversalBudgetExceeded: If the tree has more than ``budget`` nodes
    """
    counts = TreeCounts()
    stack = [root]

    while stack:
        node = stack.pop()
        counts.nodes_visited += 1
        if counts.nodes_visited > budget:
            raise TraversalBudgetExceeded(language, budget)

        node_type = node.type
        if node_type in BRANCH_NODE_TYPES:
            counts.cyclomatic_complexity += 1
        elif node_type == "binary_expression":
            operator = node.child_by_field_name("operator")
            if operator is not None:
                # Anonymous token nodes are typed by their own text
                op_text = operator.type
                if op_text in SHORT_CIRCUIT_OPERATORS:
                    counts.cyclomatic_complexity += 1
                counts.operators.add(op_text)
                counts.operator_total += 1
        elif node_type in IDENTIFIER_NODE_TYPES:
            counts.operands.add(_node_text(node))
            counts.operand_total += 1
        elif node_type in LITERAL_NODE_TYPES:
            counts.operand_total += 1
            # Literal internals (string fragments, escapes) are not operands
            continue

        stack.extend(node.children)

    return counts


def _node_text(node: Any) -> str:
    text = node.text
    if text is None:
        return ""
    return text.decode("utf-8", errors="replace")


def metrics_from_counts(counts: TreeCounts, line_count: int) -> ComplexityMetrics:
    """Turn raw tree counts into ComplexityMetrics.

    Floors of 1 on every Halstead count keep empty or trivial input away from
    division by zero and log of zero.
    """
    cyclomatic = min(counts.cyclomatic_complexity, MAX_STRUCTURED_COMPLEXITY)

    n1 = len(counts.operators) or 1
    n2 = len(counts.operands) or 1
    total_operators = counts.operator_total or 1
    total_operands = counts.operand_total or 1

    volume = (total_operators + total_operands) * math.log2(n1 + n2)
    difficulty = (n1 / 2) * (total_operands / n2)
    effort = difficulty * volume

    lines = max(line_count, 1)
    # n1 + n2 >= 2, so volume is never zero
    maintainability = clamp(
        0.0,
        100.0,
        171 - 5.2 * math.log(volume) - 0.23 * cyclomatic - 16.2 * math.log(lines),
    )

    return ComplexityMetrics(
        cyclomatic_complexity=cyclomatic,
        maintainability_index=maintainability,
        halstead=HalsteadMetrics(difficulty=difficulty, volume=volume, effort=effort),
    )
