"""Data models for Big-O complexity analysis."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Set, Tuple


class Notation(str, Enum):
    """Closed set of asymptotic classes, declared from best to worst."""

    CONSTANT = "O(1)"
    LOGARITHMIC = "O(log n)"
    LINEAR = "O(n)"
    LINEARITHMIC = "O(n log n)"
    QUADRATIC = "O(n²)"
    CUBIC = "O(n³)"
    EXPONENTIAL = "O(2^n)"
    EXPONENTIAL_K = "O(k^n)"
    FACTORIAL = "O(n!)"

    @property
    def rank(self) -> int:
        """Position in the total order, 0 for O(1)."""
        return _NOTATION_ORDER.index(self)

    def __str__(self) -> str:
        return self.value


_NOTATION_ORDER: Tuple[Notation, ...] = tuple(Notation)


def worst_notation(notations: Iterable[Notation], default: Notation = Notation.CONSTANT) -> Notation:
    """Return the most severe notation, or default for an empty iterable."""
    worst = default
    for notation in notations:
        if notation.rank > worst.rank:
            worst = notation
    return worst


class Rating(str, Enum):
    """Coarse performance rating derived from a notation."""

    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"
    BAD = "BAD"
    TERRIBLE = "TERRIBLE"


def clamp_confidence(value: int) -> int:
    return max(0, min(100, int(value)))


@dataclass(frozen=True)
class ComplexityVerdict:
    """Immutable classification produced by a detector."""

    notation: Notation
    confidence: int
    matched_patterns: Tuple[str, ...] = ()
    reasons: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", clamp_confidence(self.confidence))
        object.__setattr__(self, "matched_patterns", tuple(self.matched_patterns))
        object.__setattr__(self, "reasons", tuple(self.reasons))

    @property
    def description(self) -> str:
        return "; ".join(self.reasons)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "notation": self.notation.value,
            "confidence": self.confidence,
            "matched_patterns": list(self.matched_patterns),
            "reasons": list(self.reasons),
        }


@dataclass
class FeatureRecord:
    """Structural summary of one function, extracted once per analysis.

    ``parent`` and ``children`` are ids into the owning FeatureArena.
    Counts cover the function's own body only: bodies of nested function
    definitions are summarized by their own child records.
    """

    id: int
    function_name: str
    node: Any = field(repr=False, compare=False)
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    depth: int = 0
    for_loop_count: int = 0
    while_loop_count: int = 0
    comprehension_count: int = 0
    is_nested: bool = False
    max_loop_depth: int = 0
    effective_loop_depth: int = 0
    recursive_call_count: int = 0
    keywords: Set[str] = field(default_factory=set)
    decorators: List[str] = field(default_factory=list)
    statement_count: int = 0
    nodes: List[Any] = field(default_factory=list, repr=False, compare=False)
    time_notation: Optional[Notation] = None
    space_notation: Optional[Notation] = None
    confidence: int = 0

    @property
    def loop_count(self) -> int:
        return self.for_loop_count + self.while_loop_count

    def has_keyword(self, *terms: str) -> bool:
        """Return True if any of the given vocabulary terms was hit."""
        return any(term in self.keywords for term in terms)

    def nodes_of_type(self, *types: str) -> List[Any]:
        """Return this function's own nodes with one of the given types."""
        return [node for node in self.nodes if node.type in types]


class FeatureArena:
    """Owns every FeatureRecord of one analysis run, indexed by id."""

    def __init__(self) -> None:
        self._records: List[FeatureRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[FeatureRecord]:
        return iter(self._records)

    def create(self, function_name: str, node: Any, parent: Optional[int] = None) -> FeatureRecord:
        """Allocate a record and link it under parent when given."""
        depth = 0
        if parent is not None:
            depth = self._records[parent].depth + 1
        record = FeatureRecord(
            id=len(self._records),
            function_name=function_name,
            node=node,
            parent=parent,
            depth=depth,
        )
        self._records.append(record)
        if parent is not None:
            self._records[parent].children.append(record.id)
        return record

    def get(self, record_id: int) -> FeatureRecord:
        return self._records[record_id]

    def parent_of(self, record: FeatureRecord) -> Optional[FeatureRecord]:
        if record.parent is None:
            return None
        return self._records[record.parent]

    def children_of(self, record: FeatureRecord) -> List[FeatureRecord]:
        return [self._records[child] for child in record.children]

    def ancestors_of(self, record: FeatureRecord) -> List[FeatureRecord]:
        """Return ancestors nearest first."""
        ancestors = []
        current = self.parent_of(record)
        while current is not None:
            ancestors.append(current)
            current = self.parent_of(current)
        return ancestors

    def siblings_of(self, record: FeatureRecord) -> List[FeatureRecord]:
        parent = self.parent_of(record)
        if parent is None:
            return [r for r in self._records if r.parent is None and r.id != record.id]
        return [r for r in self.children_of(parent) if r.id != record.id]


@dataclass
class AnalysisContext:
    """Everything a detector may look at when classifying one function."""

    record: FeatureRecord
    config: Any
    ancestor_complexities: Dict[str, Notation] = field(default_factory=dict)
    sibling_complexities: Dict[str, Notation] = field(default_factory=dict)
    child_complexities: Dict[str, Notation] = field(default_factory=dict)
    global_keywords: Set[str] = field(default_factory=set)

    def threshold_for(self, key: str, default: int) -> int:
        return self.config.threshold_for(key, default)


@dataclass
class TimeComplexity:
    """Reported time complexity of a function."""

    notation: Notation
    confidence: int
    description: str
    rating: Rating

    def to_dict(self) -> Dict[str, Any]:
        return {
            "notation": self.notation.value,
            "confidence": self.confidence,
            "description": self.description,
            "rating": self.rating.value,
        }


@dataclass
class SpaceComplexity:
    """Reported space complexity of a function."""

    notation: Notation
    confidence: int
    description: str
    data_structures: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "notation": self.notation.value,
            "confidence": self.confidence,
            "description": self.description,
            "data_structures": list(self.data_structures),
        }


@dataclass
class MethodAnalysis:
    """Complete analysis result for one function."""

    name: str
    line_start: int
    line_end: int
    time_complexity: TimeComplexity
    space_complexity: SpaceComplexity
    explanation: str
    matched_patterns: List[str] = field(default_factory=list)
    parent_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "line_start": self.line_start,
            "line_end": self.line_end,
            "time_complexity": self.time_complexity.to_dict(),
            "space_complexity": self.space_complexity.to_dict(),
            "explanation": self.explanation,
            "matched_patterns": list(self.matched_patterns),
            "parent_name": self.parent_name,
        }


CallHierarchy = Dict[str, List[str]]


@dataclass(frozen=True)
class AnalysisEvent:
    """A decision taken while propagating complexities through the call graph."""

    kind: str
    function_name: str
    own_notation: Notation
    final_notation: Notation
    callee: Optional[str] = None
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "function": self.function_name,
            "own_notation": self.own_notation.value,
            "final_notation": self.final_notation.value,
            "callee": self.callee,
            "detail": self.detail,
        }


EventSink = Callable[[AnalysisEvent], None]


@dataclass
class AnalysisResult:
    """Result of analyzing one source unit."""

    methods: List[MethodAnalysis]
    call_hierarchy: CallHierarchy
    summary: TimeComplexity
    events: List[AnalysisEvent] = field(default_factory=list)
    file_path: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            "methods": [method.to_dict() for method in self.methods],
            "call_hierarchy": {name: list(callees) for name, callees in self.call_hierarchy.items()},
            "summary": self.summary.to_dict(),
            "events": [event.to_dict() for event in self.events],
        }
        if self.file_path is not None:
            result["file_path"] = self.file_path
        if self.error is not None:
            result["error"] = self.error
        return result
