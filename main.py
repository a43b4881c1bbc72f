"""bigo MCP Server - Entry point."""

from bigo_mcp.server.runner import run_mcp_server

if __name__ == "__main__":
    run_mcp_server()
