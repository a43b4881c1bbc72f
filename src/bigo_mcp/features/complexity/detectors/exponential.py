"""O(2^n) detection: branching recursion and subset enumeration."""

from typing import List, Optional

from bigo_mcp.constants import DetectorThresholds
from bigo_mcp.models.complexity import AnalysisContext, Notation

from ..syntax import (
    SyntaxNode,
    binary_operator,
    call_name,
    callee_name,
    field,
    integer_value,
    is_method_call,
    midpoint_assignments,
    node_text,
    positional_arguments,
)
from ..vocabulary import (
    COMBINATION_TERMS,
    EXHAUSTIVE_TERMS,
    EXPONENTIAL_TERMS,
    HANOI_TERMS,
    MERGE_HELPERS,
    SORTING_TERMS,
    identifier_terms,
)
from .base import (
    Evidence,
    TimeComplexityDetector,
    call_names,
    calls,
    has_base_case,
    has_memoization,
    has_visited_guard,
    is_in_loop,
    is_tree_recursion,
    max_depth,
    self_calls,
)

FIBONACCI_NAMES = frozenset({"fibonacci", "fib"})


class ExponentialDetector(TimeComplexityDetector):
    notation = Notation.EXPONENTIAL
    key = "exponential"
    min_confidence = DetectorThresholds.EXPONENTIAL

    def collect(self, context: AnalysisContext, evidence: Evidence) -> Optional[Notation]:
        record = context.record
        depth = max_depth(context)
        recursive = self_calls(record)
        divides = self._divides_input(context)

        fibonacci_calls = recursive if len(recursive) >= 2 else self._fibonacci_calls(context)
        if len(fibonacci_calls) >= 2 and self._paired_calls(fibonacci_calls) \
                and has_base_case(record, depth) and self._decrements(fibonacci_calls):
            evidence.add("fibonacci_recursion", 95, "Two recursive calls on n-1 and n-2 per invocation")
        elif len(recursive) >= 2:
            paired = self._paired_calls(recursive)
            if paired and not divides:
                evidence.add("binary_recursion", 75, "Each call branches into two recursive calls")
            if record.has_keyword(*HANOI_TERMS) and has_base_case(record, depth):
                evidence.add("towers_of_hanoi", 90, "Towers of Hanoi move recursion")
            if self._include_exclude(recursive):
                evidence.add("include_exclude", 85, "Recursion both with and without the current element")

        if self._enumerates_subsets(context):
            evidence.add("subset_generation", 75, "Enumerates all 2^n subsets")
        elif record.recursive_call_count and record.has_keyword(*COMBINATION_TERMS) and "append" in call_names(record):
            evidence.add("subset_generation", 70, "Recursive subset construction")

        if record.has_keyword(*EXHAUSTIVE_TERMS) and (recursive or self._calls_exponential(context)):
            evidence.add("exhaustive_search", 80, "Brute-force search over every candidate")

        if recursive and self._chooses_and_unchooses(context):
            evidence.add("backtracking", 40, "Choose, recurse and unchoose")

        if record.has_keyword(*EXPONENTIAL_TERMS):
            evidence.add("exponential_keywords", 20, "Exponential algorithm vocabulary")

        if divides or record.has_keyword(*SORTING_TERMS):
            evidence.exclude("divide_and_conquer", 50, "Halves its input instead of branching on it")
        if len(recursive) >= 2 and is_tree_recursion(record, depth):
            evidence.exclude("tree_traversal", 50, "Each call descends into a distinct subtree")
        if recursive and has_memoization(context):
            evidence.exclude("memoization", 60, "Memoized recursion computes each state once")
        if has_visited_guard(record, depth):
            evidence.exclude("visited_guard", 40, "Visits each state once")
        return None

    def _fibonacci_calls(self, context: AnalysisContext) -> List[SyntaxNode]:
        """Calls to a fibonacci-named function, for wrappers that delegate the recursion."""
        return [
            c for c in calls(context.record)
            if identifier_terms(callee_name(c) or "", FIBONACCI_NAMES)
        ]

    def _paired_calls(self, recursive: List[SyntaxNode]) -> bool:
        """Two self calls combined in one expression, e.g. ``f(n-1) + f(n-2)``."""
        for call in recursive:
            parent = call.parent
            if parent is None or parent.type not in ("binary_operator", "boolean_operator"):
                continue
            siblings = [c for c in recursive if c != call and c.parent is not None and c.parent == parent]
            if siblings:
                return True
            # Three-way sums nest: f(n-1) + f(n-2) + f(n-3)
            grand = parent.parent
            if grand is not None and grand.type == parent.type and any(
                c.parent is not None and c.parent == grand for c in recursive
            ):
                return True
        return False

    def _decrements(self, recursive: List[SyntaxNode]) -> bool:
        """At least two calls shrink the input by a constant: ``n - 1``, ``n - 2``."""
        shrinking = 0
        for call in recursive:
            for argument in positional_arguments(call):
                if argument.type == "binary_operator" and binary_operator(argument) == "-" \
                        and integer_value(field(argument, "right")) is not None:
                    shrinking += 1
                    break
        return shrinking >= 2

    def _include_exclude(self, recursive: List[SyntaxNode]) -> bool:
        """Two calls in separate statements that both advance an index by one."""
        advancing = []
        for call in recursive:
            for argument in positional_arguments(call):
                if argument.type == "binary_operator" and binary_operator(argument) == "+" \
                        and node_text(field(argument, "right")) == "1":
                    advancing.append(call)
                    break
        statements = {_enclosing_statement(call).start_byte for call in advancing}
        return len(advancing) >= 2 and len(statements) >= 2

    def _divides_input(self, context: AnalysisContext) -> bool:
        record = context.record
        if not record.recursive_call_count:
            return False
        if midpoint_assignments(record.node, max_depth(context)):
            return True
        return bool(call_names(record) & MERGE_HELPERS)

    def _enumerates_subsets(self, context: AnalysisContext) -> bool:
        record = context.record
        for node in record.nodes_of_type("call"):
            name = call_name(node)
            if name == "range" and not is_method_call(node):
                arguments = positional_arguments(node)
                if arguments and _is_power_of_two(arguments[-1] if len(arguments) < 3 else arguments[1]):
                    return True
            elif name == "combinations" and is_in_loop(node, record):
                arguments = positional_arguments(node)
                if len(arguments) < 2 or integer_value(arguments[1]) is None:
                    return True
        return False

    def _calls_exponential(self, context: AnalysisContext) -> bool:
        return any(n.rank >= Notation.EXPONENTIAL.rank for n in context.child_complexities.values())

    def _chooses_and_unchooses(self, context: AnalysisContext) -> bool:
        ordered = []
        for call in calls(context.record):
            name = call_name(call)
            if name in ("append", "add", "pop", "remove", "discard") and is_method_call(call):
                ordered.append(name)
            elif name == context.record.function_name:
                ordered.append("recurse")
        for grow, shrink in (("append", "pop"), ("add", "remove"), ("add", "discard")):
            if grow in ordered and "recurse" in ordered[ordered.index(grow):] and shrink in ordered[ordered.index(grow):]:
                return True
        return False


def _is_power_of_two(node: SyntaxNode) -> bool:
    """``2 ** n``, ``1 << n`` or ``pow(2, n)``."""
    if node.type == "binary_operator":
        operator = binary_operator(node)
        left = integer_value(field(node, "left"))
        if operator == "**" and left == 2:
            return True
        if operator == "<<" and left == 1:
            return True
    if node.type == "call" and call_name(node) == "pow":
        arguments = positional_arguments(node)
        return len(arguments) == 2 and integer_value(arguments[0]) == 2
    return False


def _enclosing_statement(node: SyntaxNode) -> SyntaxNode:
    current = node
    while current.parent is not None and not current.type.endswith("_statement"):
        current = current.parent
    return current
