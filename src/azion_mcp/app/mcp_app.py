"""
MCP application instance.

Creates and exports the single FastMCP application object used by the
service. Every entry of the tool registry is registered on it as a
`RegistryTool`, which advertises the entry's own JSON Schema and hands the
call to `ToolDefinition.execute()`.

Note: HTTP concerns (API key, JSON-RPC error envelopes for bad methods and
crashes) are handled by the Starlette middleware in main.py.
"""

import logging
from typing import Any, Dict, Iterable

from fastmcp import FastMCP
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent

from azion_mcp.app.tooling import ToolDefinition
from azion_mcp.tools.registry import TOOLS, get_tool

logger = logging.getLogger(__name__)

SERVER_NAME = "azion-mcp"


class RegistryTool(Tool):
    """
    FastMCP tool backed by a registry entry.

    The argument schema comes from the entry's input model, so FastMCP does
    not derive one from a function signature.
    """

    @classmethod
    def from_definition(cls, definition: ToolDefinition) -> "RegistryTool":
        return cls(
            name=definition.name,
            description=definition.description,
            parameters=definition.input_schema,
        )

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        response = await get_tool(self.name).execute(arguments or {})
        return ToolResult(
            content=[TextContent(type="text", text=item["text"]) for item in response["content"]],
        )


def register_tools(app: FastMCP, definitions: Iterable[ToolDefinition]) -> FastMCP:
    """Register registry entries on a FastMCP app, keeping their order."""
    for definition in definitions:
        app.add_tool(RegistryTool.from_definition(definition))
        logger.debug(f"Registered tool {definition.name}")
    return app


# The shared FastMCP application instance.
mcp = register_tools(FastMCP(SERVER_NAME), TOOLS)
