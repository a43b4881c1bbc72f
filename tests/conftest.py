"""Shared pytest fixtures for the bigo-mcp test suite.

This module provides common fixtures used across the unit tests,
reducing duplication and standardizing test setup.
"""

import shutil
import sys
import tempfile
import textwrap
from pathlib import Path
from typing import Callable, Generator

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from bigo_mcp.core.config import set_analysis_config  # noqa: E402
from bigo_mcp.features.complexity.analyzer import analyze_source  # noqa: E402
from bigo_mcp.models.complexity import AnalysisResult, MethodAnalysis  # noqa: E402
from bigo_mcp.models.config import AnalysisConfig  # noqa: E402


# ============================================================================
# Configuration Isolation
# ============================================================================

@pytest.fixture(autouse=True)
def default_analysis_config() -> Generator[None, None, None]:
    """Reset the active analysis config around every test."""
    set_analysis_config(AnalysisConfig())
    yield
    set_analysis_config(AnalysisConfig())


# ============================================================================
# Temporary Directory Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for test isolation.

    Automatically cleaned up after test completion.

    Yields:
        str: Path to temporary directory
    """
    tmp = tempfile.mkdtemp()
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_project_dir(temp_dir) -> str:
    """Create a temporary project directory with standard structure.

    Args:
        temp_dir: Temporary directory fixture

    Returns:
        str: Path to project root
    """
    project = Path(temp_dir) / "project"
    project.mkdir()

    (project / "src").mkdir()
    (project / "tests").mkdir()

    return str(project)


# ============================================================================
# Analysis Helpers
# ============================================================================

@pytest.fixture
def analyze() -> Callable[[str], AnalysisResult]:
    """Analyze dedented source code with the default configuration."""

    def _analyze(code: str, config: AnalysisConfig = None) -> AnalysisResult:
        return analyze_source(textwrap.dedent(code), config=config)

    return _analyze


@pytest.fixture
def method_of(analyze) -> Callable[..., MethodAnalysis]:
    """Analyze code and return the result for one function.

    The first function in the code is returned when no name is given.
    """

    def _method_of(code: str, name: str = None, config: AnalysisConfig = None) -> MethodAnalysis:
        result = analyze(code, config)
        for method in result.methods:
            if name is None or method.name == name:
                return method
        raise AssertionError(f"No function named {name!r} in result")

    return _method_of


# ============================================================================
# Mock MCP Server Fixtures
# ============================================================================

@pytest.fixture
def mock_mcp_instance():
    """Provide a mock MCP server instance for testing tool registration.

    Returns:
        MockFastMCP: Mock MCP instance
    """

    class MockFastMCP:
        """Mock FastMCP instance for testing."""
        def __init__(self):
            self.tools = {}

        def tool(self):
            """Decorator for registering tools."""
            def decorator(func):
                self.tools[func.__name__] = func
                return func
            return decorator

    return MockFastMCP()
