"""
Shared fixtures for the Azion MCP tests.

Upstream Azion APIs are replaced by an httpx.MockTransport that records
every request, so tests can assert on request bodies and on how many calls
were made.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from azion_mcp.app.config import Settings
from azion_mcp.app.tooling import ToolRuntime

GRAPHQL_PATH = "/events/graphql"
NETWORK_LISTS_PATH = "/workspace/api/network_lists"


def network_list(list_id: int = 48334, items: Optional[List[str]] = None, **overrides) -> Dict[str, Any]:
    """A network list as the Azion API returns it."""
    data = {
        "id": list_id,
        "name": "Blocked IPs",
        "type": "ip_cidr",
        "items": ["10.0.0.0/8"] if items is None else items,
        "last_editor": "ops@example.com",
        "last_modified": "2024-05-01T12:00:00Z",
        "active": True,
    }
    data.update(overrides)
    return data


class FakeAzion:
    """
    Scripted stand-in for the Azion APIs.

    Register replies with `reply()`; unregistered routes answer 404 with a
    JSON message.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], httpx.Response] = {}

    def reply(self, method: str, path: str, status: int = 200, json_body: Any = None, text: Optional[str] = None):
        if text is not None:
            response = httpx.Response(status, text=text)
        else:
            response = httpx.Response(status, json=json_body)
        self._routes[(method, path)] = response

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._routes.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(404, json={"message": "Not found."})
        return httpx.Response(
            response.status_code,
            content=response.content,
            headers=response.headers,
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings():
    return Settings(AZION_API_TOKEN="test-token", AZION_TOKEN=None, MCP_API_KEY="")


@pytest.fixture
def fake_azion():
    return FakeAzion()


@pytest.fixture
def runtime(settings, fake_azion):
    return ToolRuntime(settings=settings, transport=fake_azion.transport)


@pytest.fixture
def no_token_runtime(fake_azion):
    settings = Settings(AZION_API_TOKEN=None, AZION_TOKEN=None, MCP_API_KEY="")
    return ToolRuntime(settings=settings, transport=fake_azion.transport)
