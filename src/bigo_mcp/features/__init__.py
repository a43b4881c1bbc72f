"""Feature modules for the bigo MCP server."""
