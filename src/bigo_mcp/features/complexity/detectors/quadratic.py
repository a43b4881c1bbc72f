"""O(n²) detection: two scaling loop levels and linear work per iteration."""

from typing import List, Optional, Set

from bigo_mcp.constants import DetectorThresholds
from bigo_mcp.models.complexity import AnalysisContext, Notation

from ..syntax import (
    SyntaxNode,
    call_name,
    enclosing_loops,
    field,
    identifiers_in,
    is_method_call,
    is_scaling_loop,
    loop_target_names,
    node_text,
    subscript_depth,
)
from ..vocabulary import MATRIX_TERMS, QUADRATIC_TERMS, SWAP_SORT_TERMS
from .base import Evidence, TimeComplexityDetector, calls, max_depth, range_limit, scaling_loops

# List methods that shift or scan the whole list on every call.
SCANNING_METHODS = frozenset({"count", "index", "remove", "insert"})


class QuadraticDetector(TimeComplexityDetector):
    notation = Notation.QUADRATIC
    key = "quadratic"
    min_confidence = DetectorThresholds.QUADRATIC

    def collect(self, context: AnalysisContext, evidence: Evidence) -> Optional[Notation]:
        record = context.record
        depth = max_depth(context)
        scaling = scaling_loops(context)
        nested = [loop for loop in scaling if self._scaling_ancestors(loop, context)]

        if record.effective_loop_depth >= 2:
            evidence.add("nested_loops", 70, "Two nested loops over the input")
            if any(self._depends_on_outer(loop, context) for loop in nested):
                evidence.add("dependent_inner_loop", 15, "Inner loop range depends on the outer loop variable")
            if self._writes_grid(nested, record.nodes_of_type("assignment", "augmented_assignment")):
                evidence.add("matrix_traversal", 30, "Visits every cell of a two-dimensional structure")
            if record.has_keyword(*SWAP_SORT_TERMS) or self._swaps(record.nodes_of_type("assignment")):
                evidence.add("swap_sort", 30, "Exchange-based sort")
            if record.has_keyword(*QUADRATIC_TERMS):
                evidence.add("all_pairs", 35, "Compares every pair of elements")

        if scaling and self._scans_in_loop(context):
            evidence.add("linear_call_in_loop", 70, "Scans a list once per loop iteration")

        if record.has_keyword(*QUADRATIC_TERMS, *MATRIX_TERMS):
            evidence.add("quadratic_keywords", 20, "Pair/matrix vocabulary")

        if record.max_loop_depth >= 2 and record.effective_loop_depth < 2:
            evidence.exclude("constant_inner_loop", 40, "Only one nested level scales with the input")
        return None

    def _scaling_ancestors(self, loop: SyntaxNode, context: AnalysisContext) -> List[SyntaxNode]:
        return [
            outer
            for outer in enclosing_loops(loop, context.record.node)
            if is_scaling_loop(outer, range_limit(context), max_depth(context))
        ]

    def _depends_on_outer(self, loop: SyntaxNode, context: AnalysisContext) -> bool:
        """``for j in range(i + 1, n)`` inside ``for i in ...``."""
        if loop.type != "for_statement":
            return False
        depth = max_depth(context)
        outer_names: Set[str] = set()
        for outer in self._scaling_ancestors(loop, context):
            if outer.type == "for_statement":
                outer_names |= loop_target_names(outer, depth)
        iterable = field(loop, "right")
        return iterable is not None and bool(identifiers_in(iterable, depth) & outer_names)

    def _writes_grid(self, nested: List[SyntaxNode], assignments: List[SyntaxNode]) -> bool:
        if not nested:
            return False
        return any(subscript_depth(field(node, "left")) >= 2 for node in assignments if field(node, "left") is not None)

    def _swaps(self, assignments: List[SyntaxNode]) -> bool:
        for node in assignments:
            left = field(node, "left")
            right = field(node, "right")
            if left is None or right is None or left.type != "pattern_list":
                continue
            targets = sorted(node_text(c) for c in left.children if c.type == "subscript")
            values = sorted(node_text(c) for c in right.children if c.type == "subscript")
            if len(targets) == 2 and targets == values:
                return True
        return False

    def _scans_in_loop(self, context: AnalysisContext) -> bool:
        record = context.record
        for call in calls(record):
            if call_name(call) not in SCANNING_METHODS or not is_method_call(call):
                continue
            enclosing = [
                loop
                for loop in enclosing_loops(call, record.node)
                if is_scaling_loop(loop, range_limit(context), max_depth(context))
            ]
            if not enclosing:
                continue
            # Methods on the loop element itself (a string per line) do not rescan the input
            owner = node_text(field(field(call, "function"), "object"))
            element_names: Set[str] = set()
            for loop in enclosing:
                if loop.type == "for_statement":
                    element_names |= loop_target_names(loop, max_depth(context))
            if owner not in element_names:
                return True
        return False
