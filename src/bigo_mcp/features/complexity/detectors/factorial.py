"""O(n!) detection: permutation enumeration and arrangement backtracking.

Also reports O(k^n) when the recursion branches a fixed number of ways
per level (sudoku digits, graph colours).
"""

from typing import List, Optional, Set

from bigo_mcp.constants import DetectorThresholds
from bigo_mcp.models.complexity import AnalysisContext, Notation

from ..syntax import (
    SyntaxNode,
    call_name,
    field,
    is_constant_iterable,
    is_method_call,
    is_scaling_loop,
    node_text,
    positional_arguments,
    walk,
)
from ..vocabulary import (
    COMBINATION_TERMS,
    FACTORIAL_TERMS,
    K_WAY_TERMS,
    ROUTE_TERMS,
    SAFETY_CHECK_PREFIXES,
    TSP_TERMS,
)
from .base import (
    Evidence,
    TimeComplexityDetector,
    advances_start_index,
    call_names,
    has_memoization,
    has_visited_guard,
    max_depth,
    range_limit,
    recursive_loops,
)

# Names that read as the branching factor in ``range(k)``.
BRANCHING_FACTOR_NAMES = ("k", "m", "colors", "num_colors", "colours", "choices", "base", "digits")


class FactorialDetector(TimeComplexityDetector):
    notation = Notation.FACTORIAL
    key = "factorial"
    min_confidence = DetectorThresholds.FACTORIAL

    def collect(self, context: AnalysisContext, evidence: Evidence) -> Optional[Notation]:
        record = context.record
        depth = max_depth(context)
        names = call_names(record)
        enumerates_permutations = "permutations" in names

        if not (record.recursive_call_count or enumerates_permutations
                or record.has_keyword(*FACTORIAL_TERMS, *K_WAY_TERMS)):
            return None

        if enumerates_permutations:
            evidence.add("itertools_permutations", 90, "Enumerates every ordering with permutations()")

        looped = recursive_loops(record, depth)

        k_way = [loop for loop in looped if self._is_k_way_loop(loop, context) and _undoes_choice(loop, depth)]
        k_way_terms = bool(record.recursive_call_count) and record.has_keyword(*K_WAY_TERMS)
        if k_way or k_way_terms:
            if k_way:
                evidence.add("k_way_branching", 80, "Recursion tries a fixed set of choices per level")
            if k_way_terms:
                evidence.add("k_way_keywords", 85 if not k_way else 10, "Sudoku/colouring style k-way search")
            self._apply_exclusions(context, evidence)
            return Notation.EXPONENTIAL_K

        scaling = [loop for loop in looped if is_scaling_loop(loop, range_limit(context), depth)]
        combination_style = advances_start_index(record, depth) or record.has_keyword(*COMBINATION_TERMS)

        if scaling and not combination_style:
            if record.has_keyword("permutation", "permute", "arrangement") or self._builds_remaining(scaling, depth):
                evidence.add("permutation_generation", 95, "Recursion over every remaining element (permutations)")
            elif self._places_and_undoes(scaling, depth, names):
                evidence.add("n_queens_backtracking", 90, "Board assignment and undo around a safety check")
            elif any(_appends_then_pops(loop, depth) for loop in scaling):
                evidence.add("arrangement_backtracking", 85, "Choose, recurse and unchoose over all positions")
            evidence.add("loop_with_recursion", 40, "Self-recursive call inside a loop")

        if self._looks_like_tsp(context):
            evidence.add("traveling_salesman", 85, "Brute-force route enumeration (travelling salesman)")

        if record.has_keyword(*FACTORIAL_TERMS):
            evidence.add("factorial_keywords", 30, "Permutation/arrangement vocabulary")

        self._apply_exclusions(context, evidence)
        return None

    def _apply_exclusions(self, context: AnalysisContext, evidence: Evidence) -> None:
        if has_memoization(context):
            evidence.exclude("memoization", 50, "Memoized recursion does not enumerate every branch")
        if has_visited_guard(context.record, max_depth(context)):
            evidence.exclude("visited_guard", 40, "Permanently marked visited set (graph traversal)")

    def _is_k_way_loop(self, loop: SyntaxNode, context: AnalysisContext) -> bool:
        if loop.type != "for_statement":
            return False
        iterable = field(loop, "right")
        if is_constant_iterable(iterable, range_limit(context)):
            return True
        if iterable is None or iterable.type != "call" or call_name(iterable) != "range" or is_method_call(iterable):
            return False
        arguments = positional_arguments(iterable)
        if not arguments:
            return False
        bound = arguments[0] if len(arguments) == 1 else arguments[1]
        if bound.type == "binary_operator":
            bound = field(bound, "left")
        return bound is not None and node_text(bound) in BRANCHING_FACTOR_NAMES

    def _builds_remaining(self, scaling: List[SyntaxNode], depth: int) -> bool:
        """``arr[:i] + arr[i+1:]`` or an in-place swap inside the recursive loop."""
        for loop in scaling:
            for node in walk(loop, depth):
                if node.type == "binary_operator" and node_text(field(node, "operator")) == "+":
                    if _is_slice(field(node, "left")) and _is_slice(field(node, "right")):
                        return True
                if node.type == "assignment" and _is_swap(node):
                    return True
        return False

    def _places_and_undoes(self, scaling: List[SyntaxNode], depth: int, names: Set[str]) -> bool:
        if not any(name.startswith(SAFETY_CHECK_PREFIXES) for name in names):
            return False
        return any(_undoes_choice(loop, depth) for loop in scaling)

    def _looks_like_tsp(self, context: AnalysisContext) -> bool:
        record = context.record
        explores = bool(record.recursive_call_count) or any(
            notation.rank >= Notation.EXPONENTIAL.rank for notation in context.child_complexities.values()
        )
        if not explores:
            return False
        if record.has_keyword(*TSP_TERMS):
            return True
        return bool(context.global_keywords & TSP_TERMS) and len(record.keywords & ROUTE_TERMS) >= 2


def _is_slice(node: Optional[SyntaxNode]) -> bool:
    if node is None or node.type != "subscript":
        return False
    index = field(node, "subscript")
    return index is not None and index.type == "slice"


def _is_swap(node: SyntaxNode) -> bool:
    """``a[i], a[j] = a[j], a[i]``."""
    left = field(node, "left")
    right = field(node, "right")
    if left is None or right is None:
        return False
    if left.type not in ("pattern_list", "tuple_pattern") or right.type not in ("expression_list", "tuple"):
        return False
    targets = [node_text(c) for c in left.children if c.type == "subscript"]
    values = [node_text(c) for c in right.children if c.type == "subscript"]
    return len(targets) == 2 and sorted(targets) == sorted(values)


def _appends_then_pops(loop: SyntaxNode, depth: int) -> bool:
    methods = [call_name(n) for n in walk(loop, depth) if n.type == "call" and is_method_call(n)]
    if "append" not in methods:
        return False
    return "pop" in methods[methods.index("append") + 1:]


def _undoes_choice(loop: SyntaxNode, depth: int) -> bool:
    """The loop writes a choice and takes it back: ``board[r] = c`` ... ``board[r] = -1``."""
    if _appends_then_pops(loop, depth):
        return True
    written = [
        node_text(field(node, "left"))
        for node in walk(loop, depth)
        if node.type == "assignment" and field(node, "left") is not None and field(node, "left").type == "subscript"
    ]
    return len(written) != len(set(written))
