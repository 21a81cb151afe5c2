"""
Tool registry.

The fixed, ordered list of tools the MCP server advertises. Names must be
unique; a duplicate stops the import.
"""

from typing import Dict, Tuple

from azion_mcp.app.tooling import ToolDefinition
from azion_mcp.tools.http_events import QUERY_HTTP_EVENTS
from azion_mcp.tools.network_lists import (
    CREATE_NETWORK_LIST,
    GET_NETWORK_LIST,
    LIST_NETWORK_LISTS,
    UPDATE_NETWORK_LIST,
)


def build_registry(*tools: ToolDefinition) -> Tuple[Tuple[ToolDefinition, ...], Dict[str, ToolDefinition]]:
    """
    Index tools by name, keeping their order.

    Raises:
        ValueError: If two tools share a name.
    """
    by_name: Dict[str, ToolDefinition] = {}
    for tool in tools:
        if tool.name in by_name:
            raise ValueError(f"Duplicate tool name: {tool.name}")
        by_name[tool.name] = tool
    return tuple(tools), by_name


TOOLS, _BY_NAME = build_registry(
    QUERY_HTTP_EVENTS,
    LIST_NETWORK_LISTS,
    CREATE_NETWORK_LIST,
    GET_NETWORK_LIST,
    UPDATE_NETWORK_LIST,
)


def get_tool(name: str) -> ToolDefinition:
    """
    Look up a tool by name.

    Raises:
        KeyError: If no tool has that name.
    """
    return _BY_NAME[name]
