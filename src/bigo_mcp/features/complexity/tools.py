"""Big-O complexity analysis MCP tools."""

import os
import time
from typing import Any, Dict, List, Optional, Tuple

import sentry_sdk
from pydantic import Field

from ...constants import FilePatterns, ParallelProcessing
from ...core.exceptions import AnalysisError
from ...core.logging import get_logger
from ...models.complexity import AnalysisResult, Notation
from .analyzer import analyze_file, analyze_source
from .complexity_analyzer import ParallelComplexityAnalyzer
from .complexity_file_finder import ComplexityFileFinder
from .complexity_statistics import ComplexityStatisticsAggregator
from .vocabulary import parse_notation


def _validate_file_path(file_path: str) -> None:
    """Validate the file argument of analyze_file_complexity.

    Raises:
        AnalysisError: If the path is not an existing Python file
    """
    if not any(file_path.endswith(ext) for ext in FilePatterns.PYTHON_EXTENSIONS):
        raise AnalysisError(f"Only Python files can be analyzed, got: {file_path}")
    if not os.path.isfile(file_path):
        raise AnalysisError(f"File does not exist: {file_path}")


def _validate_max_threads(max_threads: int) -> int:
    if max_threads < 1:
        raise AnalysisError(f"max_threads must be at least 1, got {max_threads}")
    return ParallelProcessing.get_optimal_workers(max_threads)


def _find_files_to_analyze(
    project_folder: str,
    include_patterns: List[str],
    exclude_patterns: List[str],
    logger: Any
) -> List[str]:
    """Find files to analyze based on patterns.

    Args:
        project_folder: Project folder path
        include_patterns: Patterns to include
        exclude_patterns: Patterns to exclude
        logger: Logger instance

    Returns:
        Sorted list of Python files
    """
    file_finder = ComplexityFileFinder()
    files_to_analyze = file_finder.find_files(project_folder, include_patterns, exclude_patterns)

    logger.info(
        "files_found",
        project_folder=project_folder,
        file_count=len(files_to_analyze)
    )

    return files_to_analyze


def _analyze_files_parallel(
    files_to_analyze: List[str],
    min_notation: Notation,
    max_threads: int
) -> Tuple[List[AnalysisResult], List[Dict[str, Any]]]:
    """Analyze files in parallel.

    Returns:
        Tuple of (per-file results, functions at or above min_notation)
    """
    analyzer = ParallelComplexityAnalyzer()
    results = analyzer.analyze_files(files_to_analyze, max_threads)
    matching = analyzer.filter_functions_at_or_above(results, min_notation)
    return results, matching


def _handle_no_files_found(min_notation: Notation, execution_time: float) -> Dict[str, Any]:
    """Response for a project with nothing to analyze."""
    return {
        "summary": {
            "total_functions": 0,
            "total_files": 0,
            "analyzed_files": 0,
            "files_with_errors": 0,
            "notation_distribution": {notation.value: 0 for notation in Notation},
            "rating_distribution": {},
            "analysis_time_seconds": round(execution_time, 3),
        },
        "min_notation": min_notation.value,
        "functions": [],
        "worst_functions": [],
        "message": "No Python files found in project",
    }


def _result_response(result: AnalysisResult, execution_time: float) -> Dict[str, Any]:
    response = result.to_dict()
    response["analysis_time_seconds"] = round(execution_time, 3)
    return response


def analyze_code_complexity_tool(code: str) -> Dict[str, Any]:
    """
    Estimate the Big-O time and space complexity of every function in a code string.

    Each function is classified by a chain of pattern detectors ordered from
    worst (O(n!)) to best (O(1)); the first detector with enough confidence
    wins. Complexities then flow up the call graph, so a function calling an
    O(n) helper in constant time is reported as O(n).

    Args:
        code: Python source code

    Returns:
        Dictionary with methods, call_hierarchy, summary and propagation events

    Example usage:
        analyze_code_complexity_tool(code="def f(xs):\\n    return sum(xs)\\n")
    """
    logger = get_logger("tool.analyze_code_complexity")
    start_time = time.time()

    logger.info("tool_invoked", tool="analyze_code_complexity", code_length=len(code))

    try:
        result = analyze_source(code)
        execution_time = time.time() - start_time

        logger.info(
            "tool_completed",
            tool="analyze_code_complexity",
            execution_time_seconds=round(execution_time, 3),
            function_count=len(result.methods),
            worst=result.summary.notation.value,
            status="success"
        )

        return _result_response(result, execution_time)

    except Exception as e:
        execution_time = time.time() - start_time
        logger.error(
            "tool_failed",
            tool="analyze_code_complexity",
            execution_time_seconds=round(execution_time, 3),
            error=str(e)[:200],
            status="failed"
        )
        sentry_sdk.capture_exception(e, extras={
            "tool": "analyze_code_complexity",
            "code_length": len(code),
            "execution_time_seconds": round(execution_time, 3)
        })
        raise


def analyze_file_complexity_tool(file_path: str) -> Dict[str, Any]:
    """
    Estimate the Big-O time and space complexity of every function in a Python file.

    Args:
        file_path: Absolute path to a .py file

    Returns:
        Dictionary with methods, call_hierarchy, summary, events and file_path
    """
    logger = get_logger("tool.analyze_file_complexity")
    start_time = time.time()

    logger.info("tool_invoked", tool="analyze_file_complexity", file_path=file_path)

    try:
        _validate_file_path(file_path)
        result = analyze_file(file_path)
        execution_time = time.time() - start_time

        logger.info(
            "tool_completed",
            tool="analyze_file_complexity",
            execution_time_seconds=round(execution_time, 3),
            function_count=len(result.methods),
            worst=result.summary.notation.value,
            status="success"
        )

        return _result_response(result, execution_time)

    except Exception as e:
        execution_time = time.time() - start_time
        logger.error(
            "tool_failed",
            tool="analyze_file_complexity",
            execution_time_seconds=round(execution_time, 3),
            error=str(e)[:200],
            status="failed"
        )
        sentry_sdk.capture_exception(e, extras={
            "tool": "analyze_file_complexity",
            "file_path": file_path,
            "execution_time_seconds": round(execution_time, 3)
        })
        raise


def analyze_project_complexity_tool(
    project_folder: str,
    include_patterns: Optional[List[str]] = None,
    exclude_patterns: Optional[List[str]] = None,
    min_notation: str = "O(n²)",
    max_threads: int = 4
) -> Dict[str, Any]:
    """
    Estimate Big-O complexity for every function in a Python project.

    Files are analyzed in parallel. The response carries notation and rating
    distributions over all functions, the worst functions of the project and
    every function whose time complexity is at least min_notation.

    Args:
        project_folder: The absolute path to the project folder to analyze
        include_patterns: Glob patterns for files to include (e.g., ['src/**/*.py'])
        exclude_patterns: Glob patterns for files to exclude
        min_notation: Lowest time complexity to list, e.g. 'O(n)' or 'O(n^2)'
        max_threads: Number of parallel threads for analysis (default: 4)

    Returns:
        Dictionary with summary, functions, worst_functions and message

    Example usage:
        analyze_project_complexity_tool(project_folder="/path/to/project")
        analyze_project_complexity_tool(project_folder="/path/to/project", min_notation="O(2^n)")
    """
    if include_patterns is None:
        include_patterns = list(FilePatterns.DEFAULT_INCLUDE)
    if exclude_patterns is None:
        exclude_patterns = list(FilePatterns.DEFAULT_EXCLUDE)

    logger = get_logger("tool.analyze_project_complexity")
    start_time = time.time()

    logger.info(
        "tool_invoked",
        tool="analyze_project_complexity",
        project_folder=project_folder,
        min_notation=min_notation,
        max_threads=max_threads
    )

    try:
        threshold = parse_notation(min_notation)
        workers = _validate_max_threads(max_threads)

        files_to_analyze = _find_files_to_analyze(
            project_folder,
            include_patterns,
            exclude_patterns,
            logger
        )

        if not files_to_analyze:
            execution_time = time.time() - start_time
            return _handle_no_files_found(threshold, execution_time)

        results, matching = _analyze_files_parallel(files_to_analyze, threshold, workers)

        aggregator = ComplexityStatisticsAggregator()
        execution_time = time.time() - start_time
        summary = aggregator.calculate_summary(results, len(files_to_analyze), execution_time)
        worst = aggregator.worst_functions(results)

        logger.info(
            "tool_completed",
            tool="analyze_project_complexity",
            execution_time_seconds=round(execution_time, 3),
            total_functions=summary["total_functions"],
            matching_functions=len(matching),
            status="success"
        )

        return aggregator.format_response(summary, threshold, matching, worst)

    except Exception as e:
        execution_time = time.time() - start_time
        logger.error(
            "tool_failed",
            tool="analyze_project_complexity",
            execution_time_seconds=round(execution_time, 3),
            error=str(e)[:200],
            status="failed"
        )
        sentry_sdk.capture_exception(e, extras={
            "tool": "analyze_project_complexity",
            "project_folder": project_folder,
            "min_notation": min_notation,
            "execution_time_seconds": round(execution_time, 3)
        })
        raise


def register_complexity_tools(mcp: Any) -> None:
    """Register Big-O analysis tools with the MCP server.

    Args:
        mcp: FastMCP server instance
    """

    @mcp.tool()  # type: ignore[misc]
    def analyze_code_complexity(
        code: str = Field(description="Python source code to analyze")
    ) -> Dict[str, Any]:
        """Wrapper that calls the standalone analyze_code_complexity_tool function."""
        return analyze_code_complexity_tool(code=code)

    @mcp.tool()  # type: ignore[misc]
    def analyze_file_complexity(
        file_path: str = Field(description="The absolute path to the Python file to analyze")
    ) -> Dict[str, Any]:
        """Wrapper that calls the standalone analyze_file_complexity_tool function."""
        return analyze_file_complexity_tool(file_path=file_path)

    @mcp.tool()  # type: ignore[misc]
    def analyze_project_complexity(
        project_folder: str = Field(description="The absolute path to the project folder to analyze"),
        include_patterns: List[str] = Field(
            default_factory=lambda: list(FilePatterns.DEFAULT_INCLUDE),
            description="Glob patterns for files to include (e.g., ['src/**/*.py'])"
        ),
        exclude_patterns: List[str] = Field(
            default_factory=lambda: list(FilePatterns.DEFAULT_EXCLUDE),
            description="Glob patterns for files to exclude"
        ),
        min_notation: str = Field(
            default="O(n²)",
            description="Lowest time complexity to list, e.g. 'O(n)', 'O(n^2)', 'O(2^n)'"
        ),
        max_threads: int = Field(default=4, description="Number of parallel threads for analysis (default: 4)")
    ) -> Dict[str, Any]:
        """Wrapper that calls the standalone analyze_project_complexity_tool function."""
        return analyze_project_complexity_tool(
            project_folder=project_folder,
            include_patterns=include_patterns,
            exclude_patterns=exclude_patterns,
            min_notation=min_notation,
            max_threads=max_threads
        )
