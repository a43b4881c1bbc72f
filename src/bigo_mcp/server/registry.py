"""Central tool registration for MCP server."""

from mcp.server.fastmcp import FastMCP

from bigo_mcp.features.complexity.tools import register_complexity_tools


def register_all_tools(mcp: FastMCP) -> None:
    """Register all MCP tools from all features.

    Complexity (3 tools): analyze_code_complexity, analyze_file_complexity,
    analyze_project_complexity
    """
    register_complexity_tools(mcp)
