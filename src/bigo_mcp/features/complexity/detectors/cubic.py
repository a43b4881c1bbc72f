"""O(n³) detection: three scaling loop levels."""

from typing import Optional

from bigo_mcp.constants import DetectorThresholds
from bigo_mcp.models.complexity import AnalysisContext, Notation

from ..syntax import SyntaxNode, binary_operator, field, subscript_depth, walk
from ..vocabulary import CUBIC_TERMS, MATRIX_TERMS
from .base import Evidence, TimeComplexityDetector, max_depth


class CubicDetector(TimeComplexityDetector):
    notation = Notation.CUBIC
    key = "cubic"
    min_confidence = DetectorThresholds.CUBIC

    def collect(self, context: AnalysisContext, evidence: Evidence) -> Optional[Notation]:
        record = context.record
        depth = max_depth(context)

        if record.effective_loop_depth >= 3:
            if self._multiplies_matrices(record.node, depth):
                evidence.add("matrix_multiplication", 95, "Accumulates row-by-column products in three nested loops")
            else:
                evidence.add("triple_nested_loops", 90, "Three nested loops over the input")

        if any(subscript_depth(node) >= 3 for node in record.nodes_of_type("subscript")):
            evidence.add("three_dimensional_access", 30, "Indexes a three-dimensional structure")

        if record.has_keyword(*CUBIC_TERMS) or (record.effective_loop_depth >= 2 and record.has_keyword(*MATRIX_TERMS)):
            evidence.add("cubic_keywords", 20, "Triplet/matrix vocabulary")
        return None

    def _multiplies_matrices(self, scope: SyntaxNode, depth: int) -> bool:
        """``c[i][j] += a[i][k] * b[k][j]``."""
        for node in walk(scope, depth):
            if node.type not in ("assignment", "augmented_assignment"):
                continue
            left = field(node, "left")
            right = field(node, "right")
            if left is None or right is None or subscript_depth(left) < 2:
                continue
            for part in walk(right, depth):
                if part.type == "binary_operator" and binary_operator(part) == "*":
                    operands = (field(part, "left"), field(part, "right"))
                    if all(o is not None and o.type == "subscript" for o in operands):
                        return True
        return False
