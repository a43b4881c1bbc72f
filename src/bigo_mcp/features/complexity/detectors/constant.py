"""O(1) detection: straight-line code and direct access."""

from typing import Optional

from bigo_mcp.constants import AnalysisDefaults, DetectorThresholds
from bigo_mcp.models.complexity import AnalysisContext, Notation

from ..syntax import call_name, is_collection_subscript
from ..vocabulary import CONSTANT_TERMS
from .base import Evidence, TimeComplexityDetector, calls, linear_builtin_calls, scaling_loops


class ConstantDetector(TimeComplexityDetector):
    notation = Notation.CONSTANT
    key = "constant"
    min_confidence = DetectorThresholds.CONSTANT

    def collect(self, context: AnalysisContext, evidence: Evidence) -> Optional[Notation]:
        record = context.record
        builtins = linear_builtin_calls(record)

        if not scaling_loops(context) and not record.recursive_call_count and not record.comprehension_count:
            evidence.add("no_loops_or_recursion", 40, "No loops, comprehensions or recursion")

        if any(is_collection_subscript(n) for n in record.nodes_of_type("subscript")) \
                or any(call_name(c) == "get" for c in calls(record)):
            evidence.add("direct_access", 35, "Direct index or key access")

        if record.nodes_of_type("binary_operator", "augmented_assignment") and not builtins:
            evidence.add("arithmetic", 30, "Fixed number of arithmetic operations")

        if record.has_keyword(*CONSTANT_TERMS):
            evidence.add("constant_keywords", 25, "Hash/lookup vocabulary")

        if record.statement_count <= AnalysisDefaults.FIXED_STATEMENT_LIMIT:
            evidence.add("few_statements", 20, "Short straight-line body")

        if builtins:
            evidence.exclude("linear_builtin", 40, "Calls a built-in that visits every element")
        if scaling_loops(context) or record.recursive_call_count:
            evidence.exclude("iterates_input", 40, "Loops or recurses over the input")
        return None
