"""Unit tests for project-level file discovery, parallel analysis and statistics."""

import os
from pathlib import Path

import pytest
from fixtures.algorithms import BUBBLE_SORT, FIBONACCI, SUM_LOOP

from bigo_mcp.constants import FilePatterns
from bigo_mcp.features.complexity.analyzer import analyze_source
from bigo_mcp.features.complexity.complexity_analyzer import ParallelComplexityAnalyzer
from bigo_mcp.features.complexity.complexity_file_finder import ComplexityFileFinder
from bigo_mcp.features.complexity.complexity_statistics import ComplexityStatisticsAggregator
from bigo_mcp.models.complexity import Notation


def write_file(path, content):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Path(path).write_text(content, encoding="utf-8")
    return str(path)


@pytest.fixture
def sample_project(temp_project_dir):
    """A project with sources, tests and a virtualenv."""
    root = Path(temp_project_dir)
    write_file(root / "src" / "sorting.py", BUBBLE_SORT)
    write_file(root / "src" / "totals.py", SUM_LOOP)
    write_file(root / "src" / "recursion.py", FIBONACCI)
    write_file(root / "tests" / "test_sorting.py", "def test_sort():\n    assert True\n")
    write_file(root / "venv" / "lib" / "vendored.py", SUM_LOOP)
    write_file(root / "README.md", "# sample\n")
    return temp_project_dir


class TestComplexityFileFinder:
    """Test ComplexityFileFinder."""

    def test_default_patterns(self, sample_project):
        """Python files outside excluded directories are found, sorted."""
        files = ComplexityFileFinder().find_files(
            sample_project, FilePatterns.DEFAULT_INCLUDE, FilePatterns.DEFAULT_EXCLUDE
        )
        names = [os.path.relpath(f, sample_project) for f in files]
        assert names == sorted(names)
        assert os.path.join("src", "sorting.py") in names
        assert os.path.join("tests", "test_sorting.py") in names
        assert not any(name.startswith("venv") for name in names)
        assert not any(name.endswith(".md") for name in names)

    def test_exclude_tests(self, sample_project):
        """Exclusion patterns match directory names and file names."""
        files = ComplexityFileFinder().find_files(
            sample_project, ["**/*.py"], FilePatterns.DEFAULT_EXCLUDE + ["**/tests/**"]
        )
        assert len(files) == 3
        assert all(os.sep + "tests" + os.sep not in f for f in files)

    def test_include_directory(self, sample_project):
        """A directory include pattern matches the Python files below it."""
        files = ComplexityFileFinder().find_files(sample_project, ["src"], [])
        assert len(files) == 3

    def test_missing_folder(self, temp_dir):
        """A missing project folder raises ValueError."""
        with pytest.raises(ValueError, match="does not exist"):
            ComplexityFileFinder().find_files(os.path.join(temp_dir, "nope"), ["**/*.py"], [])


class TestParallelComplexityAnalyzer:
    """Test ParallelComplexityAnalyzer."""

    def test_results_sorted_by_path(self, sample_project):
        """Results come back sorted by file path."""
        files = [
            os.path.join(sample_project, "src", "totals.py"),
            os.path.join(sample_project, "src", "sorting.py"),
        ]
        results = ParallelComplexityAnalyzer().analyze_files(files, max_threads=2)
        assert [r.file_path for r in results] == sorted(files)

    def test_unreadable_file_skipped(self, sample_project):
        """A missing file is logged and left out."""
        files = [
            os.path.join(sample_project, "src", "totals.py"),
            os.path.join(sample_project, "src", "missing.py"),
        ]
        results = ParallelComplexityAnalyzer().analyze_files(files)
        assert len(results) == 1

    def test_filter_at_or_above(self, sample_project):
        """Only functions at or above the threshold are kept, worst first."""
        analyzer = ParallelComplexityAnalyzer()
        files = [os.path.join(sample_project, "src", name) for name in ("sorting.py", "totals.py", "recursion.py")]
        results = analyzer.analyze_files(files)
        matching = analyzer.filter_functions_at_or_above(results, Notation.QUADRATIC)
        assert [f["name"] for f in matching] == ["fibonacci", "bubble_sort"]
        assert matching[0]["file_path"].endswith("recursion.py")


class TestComplexityStatisticsAggregator:
    """Test ComplexityStatisticsAggregator."""

    @pytest.fixture
    def results(self):
        return [
            analyze_source(BUBBLE_SORT, file_path="sorting.py"),
            analyze_source(SUM_LOOP, file_path="totals.py"),
            analyze_source("def broken(:\n", file_path="broken.py"),
        ]

    def test_summary(self, results):
        """Counts and distributions cover every function."""
        summary = ComplexityStatisticsAggregator().calculate_summary(results, total_files=4, execution_time=0.12345)
        assert summary["total_functions"] == 2
        assert summary["total_files"] == 4
        assert summary["analyzed_files"] == 3
        assert summary["files_with_errors"] == 1
        assert summary["notation_distribution"]["O(n²)"] == 1
        assert summary["notation_distribution"]["O(n)"] == 1
        assert summary["notation_distribution"]["O(n!)"] == 0
        assert summary["rating_distribution"]["POOR"] == 1
        assert summary["analysis_time_seconds"] == 0.123

    def test_worst_functions(self, results):
        """The worst function is listed first."""
        worst = ComplexityStatisticsAggregator().worst_functions(results, limit=1)
        assert worst == [{
            "name": "bubble_sort",
            "file": "sorting.py",
            "lines": worst[0]["lines"],
            "time": "O(n²)",
            "space": worst[0]["space"],
            "confidence": worst[0]["confidence"],
            "rating": "POOR",
        }]

    def test_format_response(self, results):
        """The response lists matching functions and a message."""
        aggregator = ComplexityStatisticsAggregator()
        summary = aggregator.calculate_summary(results, total_files=3, execution_time=0.5)
        matching = ParallelComplexityAnalyzer().filter_functions_at_or_above(results, Notation.QUADRATIC)
        response = aggregator.format_response(summary, Notation.QUADRATIC, matching, aggregator.worst_functions(results))
        assert response["min_notation"] == "O(n²)"
        assert [f["name"] for f in response["functions"]] == ["bubble_sort"]
        assert response["functions"][0]["file"] == "sorting.py"
        assert response["message"] == "Found 1 function(s) at or above O(n²) out of 2 total"
