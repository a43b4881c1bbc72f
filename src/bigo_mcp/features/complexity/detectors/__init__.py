"""Time complexity detector chain.

``TIME_DETECTORS`` is ordered from the worst class to the best. The
first detector whose confidence reaches its threshold decides.
"""

from typing import Tuple

from bigo_mcp.models.complexity import AnalysisContext, ComplexityVerdict, Notation

from .base import Evidence, TimeComplexityDetector
from .constant import ConstantDetector
from .cubic import CubicDetector
from .exponential import ExponentialDetector
from .factorial import FactorialDetector
from .linear import LinearDetector
from .linearithmic import LinearithmicDetector
from .logarithmic import LogarithmicDetector
from .quadratic import QuadraticDetector

TIME_DETECTORS: Tuple[TimeComplexityDetector, ...] = (
    FactorialDetector(),
    ExponentialDetector(),
    CubicDetector(),
    QuadraticDetector(),
    LinearithmicDetector(),
    LogarithmicDetector(),
    LinearDetector(),
    ConstantDetector(),
)


def run_time_chain(context: AnalysisContext) -> ComplexityVerdict:
    """Run the chain in priority order, falling back to O(1)."""
    for detector in TIME_DETECTORS:
        verdict = detector.detect(context)
        if verdict is not None:
            return verdict
    return ComplexityVerdict(
        notation=Notation.CONSTANT,
        confidence=context.config.default_confidence,
        matched_patterns=("default",),
        reasons=("No specific pattern detected",),
    )


__all__ = [
    "TIME_DETECTORS",
    "run_time_chain",
    "Evidence",
    "TimeComplexityDetector",
    "FactorialDetector",
    "ExponentialDetector",
    "CubicDetector",
    "QuadraticDetector",
    "LinearithmicDetector",
    "LogarithmicDetector",
    "LinearDetector",
    "ConstantDetector",
]
