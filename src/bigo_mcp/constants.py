"""Shared constants across the bigo-mcp codebase.

This module centralizes detector thresholds, traversal limits and
other tunables so the engine and the tool layer agree on defaults.
"""
import os


class DetectorThresholds:
    """Minimum confidence each time detector needs before it accepts."""

    FACTORIAL = 70
    EXPONENTIAL = 70
    CUBIC = 70
    QUADRATIC = 70
    LINEARITHMIC = 70
    LOGARITHMIC = 70
    LINEAR = 60
    CONSTANT = 50


class AnalysisDefaults:
    """Defaults for a single analysis run."""

    # Verdict returned when no detector in the chain accepts
    CHAIN_DEFAULT_CONFIDENCE = 30

    # Whole-result default for empty or unparseable input
    RESULT_DEFAULT_CONFIDENCE = 50

    # Confidence of the safe default after a per-function failure
    FAILURE_CONFIDENCE = 20

    MAX_TRAVERSAL_DEPTH = 100
    MIN_TRAVERSAL_DEPTH = 10

    # range(k) with k at or below this counts as a constant-size loop
    CONSTANT_RANGE_LIMIT = 20

    # Statement count at or below which a body reads as fixed work
    FIXED_STATEMENT_LIMIT = 5

    MODULE_PSEUDO_FUNCTION = "<module>"

    TRAVERSAL_LIMIT_MESSAGE = "Traversal depth limit reached"


class SpaceDefaults:
    """Confidence values reported by the space detectors."""

    LINEAR_CONFIDENCE = 90
    CONSTANT_CONFIDENCE = 95
    CONSTANT_FALLBACK_CONFIDENCE = 60
    ERROR_CONFIDENCE = 50


class PropagationDefaults:
    """Call graph propagation settings."""

    CONFIDENCE_CAP = 85


class ParallelProcessing:
    """Parallel processing configuration."""

    DEFAULT_WORKERS = 4
    MAX_WORKERS = 16

    @staticmethod
    def get_optimal_workers(max_threads: int = 0) -> int:
        """Calculate optimal worker count based on CPU cores.

        Args:
            max_threads: Maximum threads to use (0 = auto-detect)

        Returns:
            Optimal number of worker threads (1 to MAX_WORKERS)
        """
        if max_threads > 0:
            return min(max_threads, ParallelProcessing.MAX_WORKERS)

        cpu_count = os.cpu_count() or 4
        return max(1, min(cpu_count - 1, ParallelProcessing.MAX_WORKERS))


class FilePatterns:
    """Common file patterns for analysis."""

    DEFAULT_INCLUDE = ["**/*.py"]

    DEFAULT_EXCLUDE = [
        "**/__pycache__/**",
        "**/venv/**",
        "**/.venv/**",
        "**/site-packages/**",
        "**/dist/**",
        "**/build/**",
        "**/.git/**",
        "**/.tox/**",
    ]

    PYTHON_EXTENSIONS = [".py"]


class ReportDefaults:
    """Limits for the project-level report."""

    WORST_FUNCTIONS_LIMIT = 10
