"""Core infrastructure for the bigo MCP server."""

from bigo_mcp.core.config import (
    CONFIG_PATH,
    get_analysis_config,
    parse_args_and_get_config,
    set_analysis_config,
    validate_config_file,
)
from bigo_mcp.core.exceptions import (
    AnalysisError,
    BigOMCPError,
    ConfigurationError,
    SourceReadError,
    TraversalLimitError,
)
from bigo_mcp.core.logging import (
    configure_logging,
    get_logger,
)
from bigo_mcp.core.sentry import (
    init_sentry,
)

__all__ = [
    # Exceptions
    "BigOMCPError",
    "ConfigurationError",
    "SourceReadError",
    "TraversalLimitError",
    "AnalysisError",
    # Logging
    "configure_logging",
    "get_logger",
    # Config
    "CONFIG_PATH",
    "validate_config_file",
    "parse_args_and_get_config",
    "get_analysis_config",
    "set_analysis_config",
    # Sentry
    "init_sentry",
]
