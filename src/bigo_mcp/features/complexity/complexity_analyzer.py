"""Parallel Big-O analysis execution.

This module analyzes many files in a thread pool and collects the
per-file results.
"""
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional

from ...core.exceptions import SourceReadError
from ...core.logging import get_logger
from ...models.complexity import AnalysisResult, Notation
from ...models.config import AnalysisConfig

from .analyzer import analyze_file


class ParallelComplexityAnalyzer:
    """Analyzes files in parallel for Big-O complexity."""

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        """Initialize the parallel analyzer."""
        self.logger = get_logger("complexity.parallel_analyzer")
        self.config = config

    def analyze_files(self, files: List[str], max_threads: int = 4) -> List[AnalysisResult]:
        """Analyze multiple files in parallel.

        Files that cannot be read are logged and skipped.

        Args:
            files: List of file paths to analyze
            max_threads: Number of parallel threads

        Returns:
            One result per analyzed file, sorted by file path
        """
        self.logger.info(
            "analyze_files_start",
            file_count=len(files),
            max_threads=max_threads
        )

        results: List[AnalysisResult] = []

        with ThreadPoolExecutor(max_workers=max(1, max_threads)) as executor:
            futures = {executor.submit(analyze_file, f, self.config): f for f in files}

            for future in as_completed(futures):
                file_path = futures[future]
                try:
                    results.append(future.result())
                except SourceReadError as e:
                    self.logger.warning("file_read_failed", file=file_path, error=str(e))
                except Exception as e:
                    self.logger.warning(
                        "file_analysis_failed",
                        file=file_path,
                        error=str(e)
                    )

        results.sort(key=lambda r: r.file_path or "")

        self.logger.info(
            "analyze_files_complete",
            analyzed_files=len(results),
            total_functions=sum(len(r.methods) for r in results)
        )

        return results

    def filter_functions_at_or_above(
        self,
        results: List[AnalysisResult],
        min_notation: Notation
    ) -> List[dict]:
        """Functions whose time complexity is at least min_notation.

        Args:
            results: Per-file analysis results
            min_notation: Lowest notation to report

        Returns:
            Function dicts with their file path, worst first
        """
        matching = [
            {"file_path": result.file_path, **method.to_dict()}
            for result in results
            for method in result.methods
            if method.time_complexity.notation.rank >= min_notation.rank
        ]

        matching.sort(key=lambda f: (-Notation(f["time_complexity"]["notation"]).rank, f["file_path"] or "",
                                     f["line_start"]))

        self.logger.info(
            "filter_complete",
            min_notation=min_notation.value,
            matching_count=len(matching)
        )

        return matching
