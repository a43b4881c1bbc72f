"""O(log n) detection: halving loops, binary search and tree descent."""

from typing import List, Optional

from bigo_mcp.constants import DetectorThresholds
from bigo_mcp.models.complexity import AnalysisContext, Notation

from ..syntax import (
    SyntaxNode,
    call_name,
    enclosing_loops,
    field,
    identifiers_in,
    is_binary_search_loop,
    is_division_by_two,
    is_halving_loop,
    is_scaling_loop,
    is_tree_descent_loop,
    midpoint_assignments,
    node_text,
    positional_arguments,
    walk,
)
from ..vocabulary import HEAP_OPERATIONS, LOG_FUNCTIONS, LOGARITHMIC_TERMS
from .base import (
    Evidence,
    TimeComplexityDetector,
    calls,
    is_in_loop,
    loops,
    max_depth,
    range_limit,
    scaling_loops,
    self_calls,
)


class LogarithmicDetector(TimeComplexityDetector):
    notation = Notation.LOGARITHMIC
    key = "logarithmic"
    min_confidence = DetectorThresholds.LOGARITHMIC

    def collect(self, context: AnalysisContext, evidence: Evidence) -> Optional[Notation]:
        record = context.record
        depth = max_depth(context)
        limit = range_limit(context)
        recursive = self_calls(record)
        while_loops = [loop for loop in loops(record) if loop.type == "while_statement"]

        if any(is_binary_search_loop(loop, depth) for loop in while_loops):
            evidence.add("binary_search", 95, "Narrows a search interval around its midpoint")
        elif recursive and self._recursive_binary_search(recursive, context):
            evidence.add("recursive_binary_search", 90, "Recurses into one half around the midpoint")

        if any(is_tree_descent_loop(loop, depth) for loop in while_loops) \
                or self._descends_one_subtree(recursive, depth):
            evidence.add("tree_descent", 90, "Follows a single root-to-leaf path")

        halving = [
            loop
            for loop in while_loops
            if is_halving_loop(loop, depth)
            and not any(is_scaling_loop(outer, limit, depth) for outer in enclosing_loops(loop, record.node))
        ]
        if halving:
            evidence.add("divide_by_two_loop", 85, "Loop variable is divided or multiplied by a constant")

        if len(recursive) == 1 and self._halves_argument(recursive[0], depth):
            evidence.add("halving_recursion", 70, "Single recursive call on half of the input")

        heap_calls = [c for c in calls(record) if call_name(c) in HEAP_OPERATIONS and call_name(c) != "heapify"]
        if heap_calls and not any(is_in_loop(c, record) for c in heap_calls):
            evidence.add("heap_operation", 80, "Single push or pop on a binary heap")

        if any(self._logs_input(c, depth) for c in calls(record)):
            evidence.add("math_log", 90, "Computes a logarithm of the input size")

        if record.has_keyword(*LOGARITHMIC_TERMS):
            evidence.add("logarithmic_keywords", 25, "Binary search vocabulary")

        if scaling_loops(context) or record.comprehension_count:
            evidence.exclude("linear_scan", 50, "Also visits every element of the input")
        return None

    def _recursive_binary_search(self, recursive: List[SyntaxNode], context: AnalysisContext) -> bool:
        depth = max_depth(context)
        midpoints = {name for name, _ in midpoint_assignments(context.record.node, depth)}
        if not midpoints:
            return False
        for call in recursive:
            if not any(identifiers_in(argument, depth) & midpoints for argument in positional_arguments(call)):
                return False
        return _exclusive_calls(recursive)

    def _descends_one_subtree(self, recursive: List[SyntaxNode], depth: int) -> bool:
        """``return search(node.left, key)`` / ``return search(node.right, key)``."""
        if not recursive:
            return False
        for call in recursive:
            branches = [
                node_text(field(node, "attribute"))
                for argument in positional_arguments(call)
                for node in walk(argument, depth)
                if node.type == "attribute"
            ]
            if not {"left", "right"} & set(branches):
                return False
        return _exclusive_calls(recursive)

    def _halves_argument(self, call: SyntaxNode, depth: int) -> bool:
        return any(
            is_division_by_two(node)
            for argument in positional_arguments(call)
            for node in walk(argument, depth)
        )

    def _logs_input(self, call: SyntaxNode, depth: int) -> bool:
        if call_name(call) not in LOG_FUNCTIONS:
            return False
        arguments = positional_arguments(call)
        if not arguments:
            return False
        argument = arguments[0]
        if argument.type == "identifier":
            return True
        return argument.type == "call" and call_name(argument) == "len"


def _exclusive_calls(recursive: List[SyntaxNode]) -> bool:
    """At most one of the calls runs per invocation.

    Each call must be returned from its own statement or sit in its own
    branch of an if/elif/else.
    """
    seen = set()
    for call in recursive:
        statement = call.parent
        while statement is not None and not statement.type.endswith("_statement"):
            statement = statement.parent
        if statement is None:
            return False
        if statement.type == "return_statement":
            key = statement.start_byte
        else:
            block = statement.parent
            if block is None or block.parent is None \
                    or block.parent.type not in ("if_statement", "elif_clause", "else_clause"):
                return False
            key = block.start_byte
        if key in seen:
            return False
        seen.add(key)
    return True
