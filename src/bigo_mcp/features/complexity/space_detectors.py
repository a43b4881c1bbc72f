"""Space complexity chain: linear, then constant as the fallback."""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from bigo_mcp.constants import SpaceDefaults
from bigo_mcp.models.complexity import (
    AnalysisContext,
    ComplexityVerdict,
    FeatureRecord,
    Notation,
    SpaceComplexity,
)

from .detectors.base import Evidence, is_in_loop, max_depth, self_calls
from .syntax import (
    SyntaxNode,
    binary_operator,
    call_name,
    enclosing_loops,
    field,
    integer_value,
    is_method_call,
    positional_arguments,
    walk,
)
from .vocabulary import (
    CONSTRUCTOR_KINDS,
    COPY_CALLS,
    GROWTH_CALLS,
    HEAP_OPERATIONS,
    LITERAL_KINDS,
    describe_space,
)


class SpaceComplexityDetector(ABC):
    notation: Notation

    @abstractmethod
    def detect(self, context: AnalysisContext) -> Optional[ComplexityVerdict]:
        pass


class LinearSpaceDetector(SpaceComplexityDetector):
    """Memory that grows with the input."""

    notation = Notation.LINEAR

    def detect(self, context: AnalysisContext) -> Optional[ComplexityVerdict]:
        record = context.record
        depth = max_depth(context)
        evidence = Evidence()
        points = SpaceDefaults.LINEAR_CONFIDENCE

        if any(len(enclosing_loops(node, record.node)) == 1 for node in _growth_sites(record)):
            evidence.add("accumulates_in_loop", points, "Grows a collection once per iteration")
        if record.comprehension_count:
            evidence.add("comprehension", points, "Builds a collection with a comprehension")
        if self._recursion_builds_collection(record, depth):
            evidence.add("recursive_collection", points, "Recursion builds a growing collection")
        if any(_is_input_sized_allocation(node) for node in record.nodes):
            evidence.add("input_sized_allocation", points, "Allocates a collection sized by the input")
        if any(_is_copy(node) for node in record.nodes):
            evidence.add("copies_input", points, "Copies a collection")

        if not evidence.matched:
            return None
        return ComplexityVerdict(
            notation=self.notation,
            confidence=SpaceDefaults.LINEAR_CONFIDENCE,
            matched_patterns=tuple(evidence.patterns),
            reasons=tuple(evidence.reasons),
        )

    def _recursion_builds_collection(self, record: FeatureRecord, depth: int) -> bool:
        recursive = self_calls(record)
        if not recursive:
            return False
        for call in recursive:
            for argument in positional_arguments(call):
                if argument.type in LITERAL_KINDS or _concatenates(argument):
                    return True
        for statement in record.nodes_of_type("return_statement"):
            for node in walk(statement, depth):
                if node.type in ("list", "list_comprehension") or _concatenates(node):
                    return True
        return False


class ConstantSpaceDetector(SpaceComplexityDetector):
    """Fallback: always accepts, with lower confidence when anything is allocated in a loop."""

    notation = Notation.CONSTANT

    def detect(self, context: AnalysisContext) -> Optional[ComplexityVerdict]:
        record = context.record
        allocates = bool(_growth_sites(record)) or any(
            node.type in LITERAL_KINDS and is_in_loop(node, record) for node in record.nodes
        )
        if allocates:
            return ComplexityVerdict(
                notation=self.notation,
                confidence=SpaceDefaults.CONSTANT_FALLBACK_CONFIDENCE,
                matched_patterns=("nested_allocation",),
                reasons=("Allocates inside loops without growing with the input",),
            )
        return ComplexityVerdict(
            notation=self.notation,
            confidence=SpaceDefaults.CONSTANT_CONFIDENCE,
            matched_patterns=("no_allocation",),
            reasons=("No input-proportional allocation",),
        )


SPACE_DETECTORS: Tuple[SpaceComplexityDetector, ...] = (LinearSpaceDetector(), ConstantSpaceDetector())


def analyze_space(context: AnalysisContext) -> SpaceComplexity:
    """Classify a function's space use and list the structures it creates."""
    for detector in SPACE_DETECTORS:
        verdict = detector.detect(context)
        if verdict is not None:
            break
    return SpaceComplexity(
        notation=verdict.notation,
        confidence=verdict.confidence,
        description=describe_space(verdict.notation),
        data_structures=data_structures(context.record),
    )


def default_space(message: str = "Error in analysis - defaulting to constant space") -> SpaceComplexity:
    return SpaceComplexity(
        notation=Notation.CONSTANT,
        confidence=SpaceDefaults.ERROR_CONFIDENCE,
        description=message,
    )


def data_structures(record: FeatureRecord) -> List[str]:
    """Kinds of collections created in the function body, sorted."""
    kinds = set()
    for node in record.nodes:
        if node.type in LITERAL_KINDS:
            kinds.add(LITERAL_KINDS[node.type])
        elif node.type == "call":
            name = call_name(node)
            if name in CONSTRUCTOR_KINDS and not is_method_call(node):
                kinds.add(CONSTRUCTOR_KINDS[name])
            elif name in HEAP_OPERATIONS:
                kinds.add("heap")
    return sorted(kinds)


def _growth_sites(record: FeatureRecord) -> List[SyntaxNode]:
    """Calls that add to a collection and writes through a subscript."""
    sites = [
        call
        for call in record.nodes_of_type("call")
        if call_name(call) in GROWTH_CALLS and (is_method_call(call) or call_name(call) == "heappush")
    ]
    for node in record.nodes_of_type("assignment"):
        left = field(node, "left")
        if left is not None and left.type == "subscript":
            sites.append(node)
    return [site for site in sites if enclosing_loops(site, record.node)]


def _concatenates(node: SyntaxNode) -> bool:
    """``path + [x]`` style growth."""
    if node.type != "binary_operator" or binary_operator(node) != "+":
        return False
    operands = (field(node, "left"), field(node, "right"))
    return any(o is not None and o.type in ("list", "tuple") for o in operands)


def _is_input_sized_allocation(node: SyntaxNode) -> bool:
    """``[0] * n`` or ``list(range(n))``."""
    if node.type == "binary_operator" and binary_operator(node) == "*":
        left = field(node, "left")
        right = field(node, "right")
        if left is not None and left.type == "list" and integer_value(right) is None:
            return True
    if node.type == "call" and call_name(node) == "list" and not is_method_call(node):
        arguments = positional_arguments(node)
        if len(arguments) == 1 and arguments[0].type == "call" and call_name(arguments[0]) == "range":
            return any(integer_value(a) is None for a in positional_arguments(arguments[0]))
    return False


def _is_copy(node: SyntaxNode) -> bool:
    """``arr[:]``, ``list(arr)``, ``sorted(arr)``, ``arr.copy()`` or ``copy.deepcopy(arr)``."""
    if node.type == "subscript":
        index = field(node, "subscript")
        return index is not None and index.type == "slice" and not [c for c in index.children if c.is_named]
    if node.type != "call":
        return False
    name = call_name(node)
    if name not in COPY_CALLS:
        return False
    if name in ("copy", "deepcopy"):
        return True
    arguments = positional_arguments(node)
    return not is_method_call(node) and len(arguments) == 1 and arguments[0].type in ("identifier", "attribute")
