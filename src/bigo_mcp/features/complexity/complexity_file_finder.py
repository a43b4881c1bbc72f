"""File discovery and filtering for Big-O analysis.

This module finds the Python files of a project based on include/exclude
glob patterns.
"""
import glob
from pathlib import Path
from typing import List, Set

from ...constants import FilePatterns
from ...core.logging import get_logger


class ComplexityFileFinder:
    """Finds and filters Python files for complexity analysis."""

    def __init__(self) -> None:
        """Initialize the file finder."""
        self.logger = get_logger("complexity.file_finder")

    def find_files(
        self,
        project_folder: str,
        include_patterns: List[str],
        exclude_patterns: List[str]
    ) -> List[str]:
        """Find Python files to analyze.

        Args:
            project_folder: Project root folder
            include_patterns: Glob patterns for files to include
            exclude_patterns: Glob patterns for files to exclude

        Returns:
            Sorted list of file paths to analyze

        Raises:
            ValueError: If the project folder does not exist
        """
        self.logger.info(
            "find_files_start",
            project_folder=project_folder,
            include_count=len(include_patterns),
            exclude_count=len(exclude_patterns)
        )

        project_path = Path(project_folder)
        if not project_path.is_dir():
            raise ValueError(f"Project folder does not exist: {project_folder}")

        all_files = self._find_matching_files(project_path, include_patterns)
        files_to_analyze = self._filter_excluded_files(project_path, all_files, exclude_patterns)

        self.logger.info(
            "find_files_complete",
            total_found=len(all_files),
            after_exclusion=len(files_to_analyze)
        )

        return files_to_analyze

    def _find_matching_files(self, project_path: Path, include_patterns: List[str]) -> Set[str]:
        """Expand include patterns into the set of Python files they match."""
        all_files: Set[str] = set()

        for pattern in include_patterns:
            for glob_pattern in _python_globs(project_path, pattern):
                all_files.update(
                    file_path
                    for file_path in glob.glob(glob_pattern, recursive=True)
                    if Path(file_path).is_file()
                )

        return all_files

    def _filter_excluded_files(
        self,
        project_path: Path,
        all_files: Set[str],
        exclude_patterns: List[str]
    ) -> List[str]:
        """Drop files with a path component named by an exclusion pattern.

        ``**/venv/**`` excludes every file under a ``venv`` directory and
        ``**/test_*.py`` excludes files whose name matches ``test_*.py``.

        Args:
            project_path: Project root path, not itself subject to exclusion
            all_files: All files found
            exclude_patterns: Glob patterns to exclude

        Returns:
            Sorted list of files after applying exclusions
        """
        return sorted(
            file_path for file_path in all_files
            if not _is_excluded(Path(file_path).relative_to(project_path), exclude_patterns)
        )


def _python_globs(project_path: Path, pattern: str) -> List[str]:
    """Rooted glob patterns restricted to Python files.

    ``src`` becomes ``src/**/*.py`` and ``src/*`` becomes ``src/*.py``;
    a pattern already ending in a Python extension is kept as is.
    """
    rooted = str(project_path / pattern)
    globs = []
    for ext in FilePatterns.PYTHON_EXTENSIONS:
        if rooted.endswith(ext):
            globs.append(rooted)
        elif rooted.endswith("*"):
            globs.append(f"{rooted[:-1]}*{ext}")
        else:
            globs.append(f"{rooted}/**/*{ext}")
    return globs


def _is_excluded(relative_path: Path, exclude_patterns: List[str]) -> bool:
    for exclude_pattern in exclude_patterns:
        parts = [p for p in exclude_pattern.split("/") if p and p != "**"]
        if any(part in relative_path.parts or relative_path.match(part) for part in parts):
            return True
    return False
