"""
Big-O complexity analysis feature.

This module estimates asymptotic complexity for Python functions:
- Feature extraction from tree-sitter syntax trees
- Time complexity detector chain, worst class first
- Space complexity detectors
- Call graph construction and complexity propagation
- Parallel project analysis with notation and rating statistics
"""

from .analyzer import (
    FunctionAnalyzer,
    analyze_file,
    analyze_source,
)
from .call_graph import build_call_hierarchy
from .detectors import TIME_DETECTORS, run_time_chain
from .extractor import FeatureExtractor
from .propagation import ComplexityPropagator
from .space_detectors import SPACE_DETECTORS, analyze_space
from .tools import register_complexity_tools
from .vocabulary import parse_notation, rating_for

__all__ = [
    # Engine
    "FeatureExtractor",
    "TIME_DETECTORS",
    "run_time_chain",
    "SPACE_DETECTORS",
    "analyze_space",
    "FunctionAnalyzer",
    "analyze_source",
    "analyze_file",
    # Call graph
    "build_call_hierarchy",
    "ComplexityPropagator",
    # Vocabulary
    "parse_notation",
    "rating_for",
    # Tools
    "register_complexity_tools",
]
