"""Data models for the bigo MCP server."""

# Complexity models
from bigo_mcp.models.complexity import (
    AnalysisContext,
    AnalysisEvent,
    AnalysisResult,
    CallHierarchy,
    ComplexityVerdict,
    EventSink,
    FeatureArena,
    FeatureRecord,
    MethodAnalysis,
    Notation,
    Rating,
    SpaceComplexity,
    TimeComplexity,
    worst_notation,
)

# Config models
from bigo_mcp.models.config import (
    DETECTOR_KEYS,
    AnalysisConfig,
)

__all__ = [
    # Complexity
    "Notation",
    "Rating",
    "worst_notation",
    "ComplexityVerdict",
    "FeatureRecord",
    "FeatureArena",
    "AnalysisContext",
    "TimeComplexity",
    "SpaceComplexity",
    "MethodAnalysis",
    "CallHierarchy",
    "AnalysisEvent",
    "EventSink",
    "AnalysisResult",
    # Config
    "DETECTOR_KEYS",
    "AnalysisConfig",
]
