"""Feature extraction: one function's syntax tree to a FeatureRecord."""

from typing import Dict, List, Optional

from bigo_mcp.constants import AnalysisDefaults
from bigo_mcp.core.exceptions import TraversalLimitError
from bigo_mcp.core.logging import get_logger
from bigo_mcp.models.complexity import FeatureArena, FeatureRecord
from bigo_mcp.models.config import AnalysisConfig

from .syntax import (
    COMPREHENSION_TYPES,
    FUNCTION_TYPES,
    LOOP_TYPES,
    SyntaxNode,
    comprehension_clauses,
    decorator_names,
    field,
    function_name,
    is_constant_iterable,
    is_scaling_loop,
    is_self_call,
    node_text,
    statement_nodes,
    walk,
)
from .vocabulary import identifier_terms, text_terms

logger = get_logger("complexity.extractor")


class FeatureExtractor:
    """Builds FeatureRecords into an arena, one per function definition.

    Each analysis dimension is a separate pass over the function's own
    nodes. Nested function definitions get child records of their own
    and are left out of the parent's counts.
    """

    def __init__(self, arena: FeatureArena, config: Optional[AnalysisConfig] = None) -> None:
        self.arena = arena
        self.config = config or AnalysisConfig()
        # Explanation per start_byte of each nested definition that hit the depth cap
        self.failures: Dict[int, str] = {}

    @property
    def max_depth(self) -> int:
        return self.config.max_traversal_depth

    def extract(self, node: SyntaxNode, name: str, parent: Optional[FeatureRecord] = None) -> FeatureRecord:
        """Extract the record for a function and, recursively, its nested functions.

        Args:
            node: function_definition node
            name: Function name
            parent: Record of the lexically enclosing function, if any

        Returns:
            The new record, already linked under parent

        Raises:
            TraversalLimitError: If the function is nested deeper than the cap
        """
        nodes = list(walk(node, self.max_depth))
        record = self.arena.create(name, node, parent.id if parent is not None else None)
        record.nodes = nodes
        record.decorators = decorator_names(node)

        self._count_loops(record)
        self._collect_keywords(record)
        self._measure_nesting(record)
        self._count_recursion(record)
        record.statement_count = len(statement_nodes(record.nodes))

        for nested in self._nested_functions(record):
            try:
                self.extract(nested, function_name(nested), record)
            except TraversalLimitError as e:
                logger.warning("nested_function_skipped", function=function_name(nested), error=str(e))
                self.failures[nested.start_byte] = AnalysisDefaults.TRAVERSAL_LIMIT_MESSAGE
        return record

    def _count_loops(self, record: FeatureRecord) -> None:
        for node in record.nodes:
            if node.type == "for_statement":
                record.for_loop_count += 1
            elif node.type == "while_statement":
                record.while_loop_count += 1
            elif node.type in COMPREHENSION_TYPES:
                record.comprehension_count += 1

    def _collect_keywords(self, record: FeatureRecord) -> None:
        for node in record.nodes:
            if node.type == "identifier":
                record.keywords.update(identifier_terms(node_text(node)))
            elif node.type in ("string", "comment"):
                record.keywords.update(text_terms(node_text(node)))

    def _measure_nesting(self, record: FeatureRecord) -> None:
        """Compute raw loop nesting and input-scaling loop nesting.

        Comprehension clauses count toward the scaling depth only.
        """
        limit = self.config.constant_range_limit
        raw_max = 0
        effective_max = 0
        stack = [(record.node, 0, 0, 0)]
        while stack:
            node, raw, effective, level = stack.pop()
            if level > self.max_depth:
                raise TraversalLimitError(self.max_depth, node.type)
            if node.type in LOOP_TYPES:
                raw += 1
                if is_scaling_loop(node, limit, self.max_depth):
                    effective += 1
            elif node.type in COMPREHENSION_TYPES:
                for clause in comprehension_clauses(node):
                    if not is_constant_iterable(field(clause, "right"), limit):
                        effective += 1
            raw_max = max(raw_max, raw)
            effective_max = max(effective_max, effective)
            for child in node.children:
                if child.type not in FUNCTION_TYPES:
                    stack.append((child, raw, effective, level + 1))

        record.max_loop_depth = raw_max
        record.effective_loop_depth = effective_max
        record.is_nested = raw_max > 1

    def _count_recursion(self, record: FeatureRecord) -> None:
        record.recursive_call_count = sum(
            1 for node in record.nodes if is_self_call(node, record.function_name)
        )

    def _nested_functions(self, record: FeatureRecord) -> List[SyntaxNode]:
        nested = [
            child
            for node in record.nodes
            for child in node.children
            if child.type in FUNCTION_TYPES
        ]
        return sorted(nested, key=lambda n: n.start_byte)
