"""O(n) detection: one pass over the input."""

from typing import Optional

from bigo_mcp.constants import DetectorThresholds
from bigo_mcp.models.complexity import AnalysisContext, Notation

from ..syntax import (
    COMPREHENSION_TYPES,
    SyntaxNode,
    comprehension_clauses,
    field,
    is_constant_iterable,
    is_division_by_two,
    positional_arguments,
    walk,
)
from ..vocabulary import LINEAR_TERMS
from .base import (
    Evidence,
    TimeComplexityDetector,
    has_memoization,
    is_tree_recursion,
    linear_builtin_calls,
    max_depth,
    range_limit,
    scaling_loops,
    self_calls,
)


class LinearDetector(TimeComplexityDetector):
    notation = Notation.LINEAR
    key = "linear"
    min_confidence = DetectorThresholds.LINEAR

    def collect(self, context: AnalysisContext, evidence: Evidence) -> Optional[Notation]:
        record = context.record
        depth = max_depth(context)
        scaling = scaling_loops(context)
        recursive = self_calls(record)
        tree_walk = len(recursive) >= 2 and is_tree_recursion(record, depth)
        memoized = bool(recursive) and has_memoization(context)

        if record.effective_loop_depth == 1:
            if record.max_loop_depth >= 2:
                evidence.add("constant_inner_loop", 75, "Nested loop with a fixed-size inner range")
            elif len(scaling) == 1:
                evidence.add("single_loop", 70, "Single pass over the input")
            elif len(scaling) > 1:
                evidence.add("sequential_loops", 65, "Several consecutive passes over the input")

        if linear_builtin_calls(record):
            evidence.add("linear_builtin", 75, "Built-in call that visits every element")

        if any(self._scales(node, context) for node in record.nodes_of_type(*COMPREHENSION_TYPES)):
            evidence.add("comprehension", 70, "Comprehension over the input")

        if len(recursive) == 1 and not self._halves(recursive[0], depth):
            evidence.add("single_recursion", 65, "One recursive call per element")
        elif tree_walk:
            evidence.add("tree_traversal", 70, "Visits every node of a tree once")
        elif memoized:
            evidence.add("memoized_recursion", 75, "Memoized recursion solves each subproblem once")

        if record.has_keyword(*LINEAR_TERMS):
            evidence.add("linear_keywords", 20, "Traversal vocabulary")

        if record.effective_loop_depth >= 2:
            evidence.exclude("nested_loops", 30, "Loops nest over the input")
        if len(recursive) > 1 and not (tree_walk or memoized):
            evidence.exclude("branching_recursion", 30, "Recursion branches more than once per call")
        return None

    def _scales(self, comprehension: SyntaxNode, context: AnalysisContext) -> bool:
        return any(
            not is_constant_iterable(field(clause, "right"), range_limit(context))
            for clause in comprehension_clauses(comprehension)
        )

    def _halves(self, call: SyntaxNode, depth: int) -> bool:
        return any(
            is_division_by_two(node)
            for argument in positional_arguments(call)
            for node in walk(argument, depth)
        )
