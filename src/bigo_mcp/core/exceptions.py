"""Exception hierarchy for bigo-mcp."""
from typing import Optional


class BigOMCPError(Exception):
    """Base class for all bigo-mcp errors."""


class ConfigurationError(BigOMCPError):
    """Raised when an analysis config file is missing or invalid."""

    def __init__(self, config_path: str, message: str) -> None:
        self.config_path = config_path
        self.message = message
        super().__init__(f"Invalid configuration file '{config_path}': {message}")


class SourceReadError(BigOMCPError):
    """Raised when a source file cannot be read for analysis."""

    def __init__(self, file_path: str, message: str) -> None:
        self.file_path = file_path
        self.message = message
        super().__init__(f"Cannot read '{file_path}': {message}")


class TraversalLimitError(BigOMCPError):
    """Raised when a syntax tree walk goes deeper than the configured cap.

    The analyzer treats this as a soft limit: the function being analyzed
    falls back to the safe constant default.
    """

    def __init__(self, depth: int, node_type: Optional[str] = None) -> None:
        self.depth = depth
        self.node_type = node_type
        where = f" at '{node_type}'" if node_type else ""
        super().__init__(f"Traversal depth limit {depth} exceeded{where}")


class AnalysisError(BigOMCPError, ValueError):
    """Raised by the tool layer when an analysis request is invalid."""
