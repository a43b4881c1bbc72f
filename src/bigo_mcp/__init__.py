"""bigo-mcp: Big-O complexity estimation for Python code over MCP."""

__version__ = "0.1.0"
