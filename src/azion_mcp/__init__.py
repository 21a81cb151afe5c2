"""MCP server exposing Azion HTTP events and network lists as tools."""

__version__ = "0.1.0"
