"""Statistics aggregation and result formatting for project analysis.

This module calculates notation and rating distributions over all
analyzed functions and formats the final response.
"""

from typing import Any, Dict, List

from ...constants import ReportDefaults
from ...core.logging import get_logger
from ...models.complexity import AnalysisResult, MethodAnalysis, Notation, Rating


class ComplexityStatisticsAggregator:
    """Aggregates statistics and formats Big-O analysis results."""

    def __init__(self) -> None:
        """Initialize the statistics aggregator."""
        self.logger = get_logger("complexity.statistics")

    def calculate_summary(
        self,
        results: List[AnalysisResult],
        total_files: int,
        execution_time: float,
    ) -> Dict[str, Any]:
        """Calculate summary statistics from analysis results.

        Args:
            results: Per-file analysis results
            total_files: Number of files found
            execution_time: Analysis execution time in seconds

        Returns:
            Summary statistics dictionary
        """
        methods = [method for result in results for method in result.methods]

        notation_distribution = {notation.value: 0 for notation in Notation}
        rating_distribution = {rating.value: 0 for rating in Rating}
        for method in methods:
            notation_distribution[method.time_complexity.notation.value] += 1
            rating_distribution[method.time_complexity.rating.value] += 1

        summary = {
            "total_functions": len(methods),
            "total_files": total_files,
            "analyzed_files": len(results),
            "files_with_errors": sum(1 for r in results if r.error),
            "notation_distribution": notation_distribution,
            "rating_distribution": rating_distribution,
            "analysis_time_seconds": round(execution_time, 3),
        }

        self.logger.info(
            "summary_calculated",
            total_functions=summary["total_functions"],
            analyzed_files=summary["analyzed_files"],
        )
        return summary

    def worst_functions(
        self,
        results: List[AnalysisResult],
        limit: int = ReportDefaults.WORST_FUNCTIONS_LIMIT,
    ) -> List[Dict[str, Any]]:
        """Return the functions with the worst time complexity.

        Ties are broken by lower confidence last, then file and line.
        """
        ranked = [
            (result.file_path, method)
            for result in results
            for method in result.methods
        ]
        ranked.sort(key=lambda item: (
            -item[1].time_complexity.notation.rank,
            -item[1].time_complexity.confidence,
            item[0] or "",
            item[1].line_start,
        ))
        return [self._function_entry(file_path, method) for file_path, method in ranked[:limit]]

    def _function_entry(self, file_path: Any, method: MethodAnalysis) -> Dict[str, Any]:
        return {
            "name": method.name,
            "file": file_path,
            "lines": f"{method.line_start}-{method.line_end}",
            "time": method.time_complexity.notation.value,
            "space": method.space_complexity.notation.value,
            "confidence": method.time_complexity.confidence,
            "rating": method.time_complexity.rating.value,
        }

    def format_response(
        self,
        summary: Dict[str, Any],
        min_notation: Notation,
        matching_functions: List[Dict[str, Any]],
        worst_functions: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Format final analysis response.

        Args:
            summary: Summary statistics
            min_notation: Lowest notation reported in functions
            matching_functions: Functions at or above min_notation
            worst_functions: Worst functions across the project

        Returns:
            Formatted response dictionary
        """
        return {
            "summary": summary,
            "min_notation": min_notation.value,
            "functions": [
                {
                    "name": f["name"],
                    "file": f["file_path"],
                    "lines": f"{f['line_start']}-{f['line_end']}",
                    "time": f["time_complexity"]["notation"],
                    "space": f["space_complexity"]["notation"],
                    "confidence": f["time_complexity"]["confidence"],
                    "explanation": f["explanation"],
                }
                for f in matching_functions
            ],
            "worst_functions": worst_functions,
            "message": (
                f"Found {len(matching_functions)} function(s) at or above {min_notation.value} "
                f"out of {summary['total_functions']} total"
            ),
        }
