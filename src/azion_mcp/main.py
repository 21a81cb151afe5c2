"""
Entry point for the Azion MCP service.

Starts a Uvicorn HTTP server that serves the FastMCP application on /mcp.
Sessions are stateless: every POST gets a fresh MCP session that ends with
the response. Two Starlette middlewares sit in front of it:
  1. ApiKeyMiddleware, an optional shared-key check for callers outside
     the private networks.
  2. JsonRpcEnvelopeMiddleware, which answers non-POST requests with a
     JSON-RPC "Method not allowed." error and turns crashes into a
     JSON-RPC internal error.
"""

import logging
from typing import Any, Dict, Optional

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from azion_mcp.app.config import Settings, get_settings
from azion_mcp.app.mcp_app import mcp

logger = logging.getLogger(__name__)

MCP_PATH = "/mcp"

# Callers on loopback or RFC 1918 ranges (the compose network, the host)
# do not need the MCP API key.
_TRUSTED_PREFIXES = ("172.", "10.", "192.168.", "127.0.0.1")


def jsonrpc_error(code: int, message: str) -> Dict[str, Any]:
    """JSON-RPC 2.0 error envelope with no request id."""
    return {"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": None}


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """
    Guards the Azion tools with MCP_API_KEY.

    Private-network callers pass straight through. Anyone else has to send
    'Authorization: Bearer <MCP_API_KEY>' or gets a 401. Leaving the key
    empty turns the guard off.
    """

    def __init__(self, app, api_key: str = ""):
        super().__init__(app)
        self.api_key = api_key

    async def dispatch(self, request, call_next):
        if self.api_key:
            client_ip = request.client.host if request.client else ""
            if not client_ip.startswith(_TRUSTED_PREFIXES):
                auth = request.headers.get("authorization", "")
                if auth != f"Bearer {self.api_key}":
                    # -32001 sits in the JSON-RPC server-error range, so
                    # agents see a protocol error rather than a tool reply.
                    return JSONResponse(jsonrpc_error(-32001, "Unauthorized"), status_code=401)
        return await call_next(request)


class JsonRpcEnvelopeMiddleware(BaseHTTPMiddleware):
    """
    JSON-RPC errors for the /mcp route.

    Only POST carries MCP messages; other methods get a 405. An exception
    escaping the MCP handling is logged and answered with a 500.
    """

    async def dispatch(self, request, call_next):
        if request.url.path.rstrip("/") != MCP_PATH:
            return await call_next(request)

        if request.method != "POST":
            logger.info(f"Received {request.method} MCP request")
            return JSONResponse(jsonrpc_error(-32000, "Method not allowed."), status_code=405)

        try:
            return await call_next(request)
        except Exception:
            logger.exception("Error handling MCP request")
            return JSONResponse(jsonrpc_error(-32603, "Internal server error"), status_code=500)


def create_app(settings: Optional[Settings] = None) -> Starlette:
    """
    Build the ASGI application from FastMCP with both middlewares attached.

    Args:
        settings: Settings to use; loaded from the environment when omitted.

    Returns:
        Starlette: The application serving /mcp.
    """
    settings = settings or get_settings()
    return mcp.http_app(
        path=MCP_PATH,
        transport="http",
        stateless_http=True,
        json_response=True,
        middleware=[
            Middleware(ApiKeyMiddleware, api_key=settings.MCP_API_KEY),
            Middleware(JsonRpcEnvelopeMiddleware),
        ],
    )


def main() -> None:
    """
    Configure logging, build the app and start the Uvicorn server.
    """
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    if settings.api_token is None:
        logger.warning("AZION_API_TOKEN is not set; every tool call will report it as missing")

    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
