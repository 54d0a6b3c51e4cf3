"""agent-mcp — run command-line AI agents as MCP tools."""

__version__ = "0.1.0"
