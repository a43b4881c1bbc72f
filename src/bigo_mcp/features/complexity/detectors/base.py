"""Detector base class and shared structural queries.

Detectors are stateless: one instance of each lives in the module-level
chain and is reused for every function of every run. All per-call state
is held in an ``Evidence`` accumulator local to ``detect``.
"""

from abc import ABC, abstractmethod
from typing import FrozenSet, List, Optional, Set

from bigo_mcp.models.complexity import AnalysisContext, ComplexityVerdict, FeatureRecord, Notation

from ..syntax import (
    COMPREHENSION_TYPES,
    LOOP_TYPES,
    SyntaxNode,
    assignment_targets,
    call_name,
    callee_name,
    enclosing_loops,
    field,
    identifiers_in,
    is_method_call,
    is_scaling_loop,
    loop_target_names,
    node_text,
    positional_arguments,
    walk,
)
from ..vocabulary import (
    CACHE_DECORATORS,
    ITERABLE_ARGUMENT_BUILTINS,
    LINEAR_BUILTINS,
    MEMO_TERMS,
    STACK_OPERATIONS,
    VISITED_TERMS,
    identifier_terms,
)


class Evidence:
    """Additive confidence with the patterns and reasons behind it."""

    def __init__(self) -> None:
        self.confidence = 0
        self.patterns: List[str] = []
        self.reasons: List[str] = []

    @property
    def matched(self) -> bool:
        return any(not p.startswith("excluded:") for p in self.patterns)

    def add(self, pattern: str, points: int, reason: str) -> None:
        self.confidence += points
        self.patterns.append(pattern)
        self.reasons.append(reason)

    def exclude(self, pattern: str, points: int, reason: str) -> None:
        self.confidence -= points
        self.patterns.append(f"excluded:{pattern}")
        self.reasons.append(reason)


class TimeComplexityDetector(ABC):
    """Scores one complexity class against a function's features."""

    notation: Notation
    key: str
    min_confidence: int

    def detect(self, context: AnalysisContext) -> Optional[ComplexityVerdict]:
        """Return a verdict if this class's evidence reaches its threshold."""
        evidence = Evidence()
        notation = self.collect(context, evidence) or self.notation
        threshold = context.threshold_for(self.key, self.min_confidence)
        if not evidence.matched or evidence.confidence < threshold:
            return None
        return ComplexityVerdict(
            notation=notation,
            confidence=evidence.confidence,
            matched_patterns=tuple(evidence.patterns),
            reasons=tuple(evidence.reasons),
        )

    @abstractmethod
    def collect(self, context: AnalysisContext, evidence: Evidence) -> Optional[Notation]:
        """Add sub-pattern points to evidence.

        Returns:
            A notation overriding the detector's own, or None
        """
        pass


def max_depth(context: AnalysisContext) -> int:
    return context.config.max_traversal_depth


def range_limit(context: AnalysisContext) -> int:
    return context.config.constant_range_limit


def calls(record: FeatureRecord) -> List[SyntaxNode]:
    return record.nodes_of_type("call")


def call_names(record: FeatureRecord) -> Set[str]:
    return {name for name in (call_name(c) for c in calls(record)) if name}


def self_calls(record: FeatureRecord) -> List[SyntaxNode]:
    return [c for c in calls(record) if callee_name(c) == record.function_name]


def self_calls_within(node: SyntaxNode, record: FeatureRecord, depth: int) -> List[SyntaxNode]:
    return [n for n in walk(node, depth) if n.type == "call" and callee_name(n) == record.function_name]


def loops(record: FeatureRecord) -> List[SyntaxNode]:
    return record.nodes_of_type(*LOOP_TYPES)


def recursive_loops(record: FeatureRecord, depth: int) -> List[SyntaxNode]:
    """Loops whose body or iterable contains a self-recursive call."""
    if not record.recursive_call_count:
        return []
    return [loop for loop in loops(record) if self_calls_within(loop, record, depth)]


def scaling_loops(context: AnalysisContext) -> List[SyntaxNode]:
    return [
        loop
        for loop in loops(context.record)
        if is_scaling_loop(loop, range_limit(context), max_depth(context))
    ]


def is_in_loop(node: SyntaxNode, record: FeatureRecord) -> bool:
    """True if node sits inside a loop or comprehension of the function."""
    current = node.parent
    while current is not None and current != record.node:
        if current.type in LOOP_TYPES or current.type in COMPREHENSION_TYPES:
            return True
        current = current.parent
    return False


def is_linear_builtin(call: SyntaxNode) -> bool:
    """A call that walks a whole collection, e.g. ``sum(xs)`` or ``xs.index(v)``."""
    name = call_name(call)
    if name in STACK_OPERATIONS or name not in LINEAR_BUILTINS:
        return False
    if is_method_call(call) and name not in ITERABLE_ARGUMENT_BUILTINS:
        return True
    arguments = positional_arguments(call)
    return len(arguments) == 1 and arguments[0].type not in ("integer", "string", "float")


def linear_builtin_calls(record: FeatureRecord) -> List[SyntaxNode]:
    return [c for c in calls(record) if is_linear_builtin(c)]


def has_base_case(record: FeatureRecord, depth: int) -> bool:
    """An ``if`` whose branch returns or raises without recursing."""
    for node in record.nodes_of_type("if_statement"):
        consequence = field(node, "consequence")
        if consequence is None:
            continue
        for exit_node in consequence.children:
            if exit_node.type not in ("return_statement", "raise_statement"):
                continue
            if not self_calls_within(exit_node, record, depth):
                return True
    return False


def advances_start_index(record: FeatureRecord, depth: int) -> bool:
    """Recursion passing ``i + 1`` where ``i`` is an enclosing loop variable.

    This is the shape of combination/subset enumeration, as opposed to
    permutation enumeration which restarts from the beginning.
    """
    for call in self_calls(record):
        loop_names: Set[str] = set()
        for loop in enclosing_loops(call, record.node):
            if loop.type == "for_statement":
                loop_names |= loop_target_names(loop, depth)
        if not loop_names:
            continue
        for argument in positional_arguments(call):
            if argument.type != "binary_operator" or node_text(field(argument, "operator")) != "+":
                continue
            left = field(argument, "left")
            if left is not None and node_text(left) in loop_names and node_text(field(argument, "right")) == "1":
                return True
    return False


def membership_containers(record: FeatureRecord, depth: int) -> Set[str]:
    """Names tested with ``in``/``not in`` inside the function."""
    names: Set[str] = set()
    for node in record.nodes_of_type("comparison_operator"):
        operators = [node_text(c) for c in node.children if not c.is_named]
        if not any(op.split()[-1] == "in" for op in operators if op):
            continue
        operands = [c for c in node.children if c.is_named]
        if operands:
            names |= identifiers_in(operands[-1], depth)
    return names


def subscript_assignment_owners(record: FeatureRecord) -> Set[str]:
    """Names written through ``name[key] = value``."""
    owners: Set[str] = set()
    for node in record.nodes_of_type("assignment"):
        left = field(node, "left")
        if left is not None and left.type == "subscript":
            owners.add(node_text(field(left, "value")))
    return owners


def _names_match(names: Set[str], vocabulary: FrozenSet[str]) -> bool:
    return any(identifier_terms(name, vocabulary) for name in names)


def has_memoization(context: AnalysisContext) -> bool:
    """Cached recursion: a cache decorator, or a memo table that is read and written."""
    record = context.record
    if set(record.decorators) & CACHE_DECORATORS:
        return True
    depth = max_depth(context)
    if _names_match(membership_containers(record, depth), MEMO_TERMS):
        return True
    # A module-level table written from inside the function
    return bool(context.global_keywords & MEMO_TERMS) and _names_match(
        subscript_assignment_owners(record), MEMO_TERMS
    )


def has_visited_guard(record: FeatureRecord, depth: int) -> bool:
    """A visited/seen collection that is checked and only ever grows.

    Backtracking unmarks what it visited, so a guard with a matching
    removal does not count.
    """
    if not _names_match(membership_containers(record, depth), VISITED_TERMS):
        return False
    for call in calls(record):
        if call_name(call) in ("remove", "discard", "pop") and is_method_call(call):
            owner = field(field(call, "function"), "object")
            if owner is not None and identifier_terms(node_text(owner), VISITED_TERMS):
                return False
    for node in record.nodes_of_type("assignment"):
        left = field(node, "left")
        if left is None or left.type != "subscript":
            continue
        if identifier_terms(node_text(field(left, "value")), VISITED_TERMS) \
                and node_text(field(node, "right")) in ("False", "0"):
            return False
    return True


def assigned_names(record: FeatureRecord) -> Set[str]:
    names: Set[str] = set()
    for node in record.nodes_of_type("assignment", "augmented_assignment"):
        names.update(assignment_targets(node))
    return names


TREE_LINKS = ("left", "right", "children", "next", "child")


def is_tree_recursion(record: FeatureRecord, depth: int) -> bool:
    """Every self call descends a link such as ``node.left`` or a child of ``node.children``."""
    recursive = self_calls(record)
    if not recursive:
        return False
    for call in recursive:
        followed = False
        for argument in positional_arguments(call):
            for node in walk(argument, depth):
                if node.type == "attribute" and node_text(field(node, "attribute")) in TREE_LINKS:
                    followed = True
        if not followed and not _iterates_children(call, record, depth):
            return False
    return True


def _iterates_children(call: SyntaxNode, record: FeatureRecord, depth: int) -> bool:
    """``for child in node.children: f(child)``."""
    for loop in enclosing_loops(call, record.node):
        if loop.type != "for_statement":
            continue
        iterable = field(loop, "right")
        if iterable is None or not identifiers_in(iterable, depth) & {"children", "neighbors", "neighbours"}:
            continue
        targets = loop_target_names(loop, depth)
        if any(identifiers_in(argument, depth) & targets for argument in positional_arguments(call)):
            return True
    return False
