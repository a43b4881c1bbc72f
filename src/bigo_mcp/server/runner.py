"""MCP server entry point."""

from mcp.server.fastmcp import FastMCP

from bigo_mcp.core.config import parse_args_and_get_config
from bigo_mcp.core.sentry import init_sentry
from bigo_mcp.server.registry import register_all_tools

# Create FastMCP instance
mcp = FastMCP("bigo")


def run_mcp_server() -> None:
    """Run the MCP server.

    This function:
    1. Parses command-line arguments and loads bigo.yaml, if any
    2. Initializes Sentry error tracking (if configured)
    3. Registers the complexity tools
    4. Starts the MCP server with stdio transport
    """
    parse_args_and_get_config()  # Sets the active AnalysisConfig
    init_sentry()  # No-op unless SENTRY_DSN is set
    register_all_tools(mcp)
    mcp.run(transport="stdio")
