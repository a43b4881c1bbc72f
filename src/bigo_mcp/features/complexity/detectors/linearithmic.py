"""O(n log n) detection: comparison sorts and logarithmic work per element."""

from typing import Optional

from bigo_mcp.constants import DetectorThresholds
from bigo_mcp.models.complexity import AnalysisContext, Notation

from ..syntax import (
    SyntaxNode,
    call_name,
    enclosing_loops,
    is_logarithmic_loop,
    is_method_call,
    is_scaling_loop,
    midpoint_assignments,
    walk,
)
from ..vocabulary import BISECT_CALLS, HEAP_OPERATIONS, LINEARITHMIC_TERMS, MERGE_HELPERS, SORT_CALLS
from .base import (
    Evidence,
    TimeComplexityDetector,
    call_names,
    calls,
    has_base_case,
    is_in_loop,
    loops,
    max_depth,
    range_limit,
    self_calls,
)


class LinearithmicDetector(TimeComplexityDetector):
    notation = Notation.LINEARITHMIC
    key = "linearithmic"
    min_confidence = DetectorThresholds.LINEARITHMIC

    def collect(self, context: AnalysisContext, evidence: Evidence) -> Optional[Notation]:
        record = context.record
        depth = max_depth(context)
        names = call_names(record)
        recursive = self_calls(record)

        if len(recursive) >= 2 and midpoint_assignments(record.node, depth) \
                and self._merges(context) and has_base_case(record, depth):
            evidence.add("merge_sort", 95, "Splits at the midpoint, recurses on both halves and merges")
        elif len(recursive) >= 2 and record.has_keyword("pivot", "partition", "quicksort"):
            evidence.add("quicksort", 85, "Partitions around a pivot and recurses on both sides")

        if self._sorts(context):
            evidence.add("builtin_sort", 90, "Calls the built-in O(n log n) sort")

        if any(call_name(c) in HEAP_OPERATIONS and is_in_loop(c, record) for c in calls(record)):
            evidence.add("heap_operations_in_loop", 80, "A heap operation per element")

        if self._searches_per_element(context):
            evidence.add("binary_search_in_loop", 70, "A logarithmic search inside a loop over the input")

        if record.has_keyword(*LINEARITHMIC_TERMS) or ("heapify" in names and "heappop" in names):
            evidence.add("linearithmic_keywords", 30, "Sorting algorithm vocabulary")
        return None

    def _merges(self, context: AnalysisContext) -> bool:
        """A merge step: a merge helper call or a loop that appends into a result."""
        record = context.record
        if call_names(record) & MERGE_HELPERS:
            return True
        for loop in loops(record):
            for node in walk(loop, max_depth(context)):
                if node.type == "call" and is_method_call(node) and call_name(node) in ("append", "extend"):
                    return True
        return False

    def _sorts(self, context: AnalysisContext) -> bool:
        for call in calls(context.record):
            name = call_name(call)
            # sorted(xs) or xs.sort()
            if name in SORT_CALLS and is_method_call(call) == (name == "sort"):
                return True
        return False

    def _searches_per_element(self, context: AnalysisContext) -> bool:
        record = context.record
        depth = max_depth(context)
        limit = range_limit(context)
        for loop in loops(record):
            if loop.type == "while_statement" and is_logarithmic_loop(loop, depth):
                if any(is_scaling_loop(outer, limit, depth) for outer in enclosing_loops(loop, record.node)):
                    return True
        for call in calls(record):
            if call_name(call) in BISECT_CALLS and self._in_scaling_loop(call, context):
                return True
        return False

    def _in_scaling_loop(self, node: SyntaxNode, context: AnalysisContext) -> bool:
        return any(
            is_scaling_loop(loop, range_limit(context), max_depth(context))
            for loop in enclosing_loops(node, context.record.node)
        ) or is_in_loop(node, context.record) and context.record.comprehension_count > 0
