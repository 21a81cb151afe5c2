"""
Tool definition core.

A `ToolDefinition` pairs a declared argument model with an async handler.
`run()` validates the arguments, resolves the Azion token, builds the HTTP
client and calls the handler, returning a tagged `ToolResult`. Only
`execute()` flattens that into the MCP text reply, so every failure below
the tool boundary reaches the caller as an ordinary reply.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

import httpx
from pydantic import BaseModel

from azion_mcp.app.azion_client import ApiResponse, AzionClient
from azion_mcp.app.config import MISSING_TOKEN_MESSAGE, Settings, get_settings
from azion_mcp.app.schemas import Invalid, input_schema, validate

logger = logging.getLogger(__name__)

ToolResponse = Dict[str, List[Dict[str, str]]]


class Outcome(str, Enum):
    OK = "ok"
    MISSING_CREDENTIAL = "missing_credential"
    INVALID_INPUT = "invalid_input"
    REQUEST_FAILED = "request_failed"
    UNEXPECTED_RESPONSE = "unexpected_response"


class MergeMode(str, Enum):
    """How update_network_list built the item set it sent."""
    REPLACED = "replaced"
    MERGED = "merged"
    # The pre-fetch of current items failed; only the new items were sent.
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ToolResult:
    outcome: Outcome
    text: str
    merge: Optional[MergeMode] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    def to_response(self) -> ToolResponse:
        return {"content": [{"type": "text", "text": self.text}]}


def success(text: str, merge: Optional[MergeMode] = None) -> ToolResult:
    return ToolResult(Outcome.OK, text, merge)


def request_failed(response: ApiResponse, graphql: bool = False) -> ToolResult:
    prefix = "Azion GraphQL request failed" if graphql else "Azion API request failed"
    return ToolResult(Outcome.REQUEST_FAILED, f"{prefix}: {response.error_message(graphql=graphql)}")


def unexpected_response(message: str) -> ToolResult:
    return ToolResult(
        Outcome.UNEXPECTED_RESPONSE,
        f"Unexpected response format from Azion API: {message}",
    )


def pretty(value: Any) -> str:
    """Indented JSON used in every tool reply."""
    return json.dumps(value, indent=2, ensure_ascii=False)


@dataclass(frozen=True)
class ToolRuntime:
    """
    Per-call dependencies of a tool.

    Attributes:
        settings:  Configuration resolved for this call.
        transport: Optional httpx transport handed to the Azion client.
    """
    settings: Settings
    transport: Optional[httpx.AsyncBaseTransport] = None

    @classmethod
    def from_env(cls) -> "ToolRuntime":
        return cls(settings=get_settings())

    def client(self) -> Optional[AzionClient]:
        """Azion client for this call, or None when no token is configured."""
        token = self.settings.api_token
        if token is None:
            return None
        return AzionClient(token, transport=self.transport)


Handler = Callable[[Any, AzionClient, Settings], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolDefinition:
    """
    One MCP tool.

    Attributes:
        name:        Unique, stable tool name.
        description: Usage documentation shown to the calling agent.
        input_model: Strict pydantic model of the accepted arguments.
        handler:     Coroutine doing the work once arguments and token are valid.
    """
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Handler

    @property
    def input_schema(self) -> Dict[str, Any]:
        return input_schema(self.input_model)

    async def run(
        self,
        args: Optional[Dict[str, Any]] = None,
        runtime: Optional[ToolRuntime] = None,
    ) -> ToolResult:
        """
        Validate the arguments, check the token and run the handler.

        Args:
            args:    Raw arguments from the MCP client.
            runtime: Settings and transport; resolved from the environment
                     when omitted.

        Returns:
            ToolResult: Tagged outcome with the reply text.
        """
        logger.info(f"Calling tool: {self.name} with {args}")

        checked = validate(self.input_model, args if args is not None else {})
        if isinstance(checked, Invalid):
            result = ToolResult(
                Outcome.INVALID_INPUT,
                f"Invalid arguments for {self.name}: {checked.message}",
            )
        else:
            runtime = runtime or ToolRuntime.from_env()
            client = runtime.client()
            if client is None:
                result = ToolResult(Outcome.MISSING_CREDENTIAL, MISSING_TOKEN_MESSAGE)
            else:
                result = await self.handler(checked.value, client, runtime.settings)

        if not result.ok:
            logger.warning(f"Tool {self.name} finished with {result.outcome.value}")
        return result

    async def execute(
        self,
        args: Optional[Dict[str, Any]] = None,
        runtime: Optional[ToolRuntime] = None,
    ) -> ToolResponse:
        """Run the tool and return the MCP text reply."""
        result = await self.run(args, runtime)
        return result.to_response()
