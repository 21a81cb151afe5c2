import httpx
import pytest

from azion_mcp.app.azion_client import ApiResponse, AzionClient

URL = "https://edge-api.azion.net/workspace/api/network_lists"


@pytest.mark.unit
@pytest.mark.anyio
async def test_sends_token_and_accept_headers(fake_azion):
    fake_azion.reply("GET", "/workspace/api/network_lists", json_body={"count": 0, "results": []})
    client = AzionClient("secret", transport=fake_azion.transport)

    response = await client.request("GET", URL, params={"type": "ip_cidr"})

    assert response.ok
    assert response.payload == {"count": 0, "results": []}
    sent = fake_azion.requests[0]
    assert sent.headers["Authorization"] == "Token secret"
    assert sent.headers["Accept"] == "application/json"
    assert "Content-Type" not in sent.headers
    assert sent.url.params["type"] == "ip_cidr"


@pytest.mark.unit
@pytest.mark.anyio
async def test_body_is_sent_as_json(fake_azion):
    fake_azion.reply("POST", "/workspace/api/network_lists", status=201, json_body={"state": "executed"})
    client = AzionClient("secret", transport=fake_azion.transport)

    await client.request("POST", URL, body={"items": ["a"]})

    sent = fake_azion.requests[0]
    assert sent.headers["Content-Type"] == "application/json"
    assert fake_azion.body() == {"items": ["a"]}


@pytest.mark.unit
@pytest.mark.anyio
async def test_error_status_keeps_message(fake_azion):
    fake_azion.reply("GET", "/workspace/api/network_lists", status=403, json_body={"message": "Forbidden token"})
    client = AzionClient("secret", transport=fake_azion.transport)

    response = await client.request("GET", URL)

    assert not response.ok
    assert response.status == 403
    assert response.error_message() == "Forbidden token"


@pytest.mark.unit
@pytest.mark.anyio
async def test_invalid_json_becomes_synthetic_error(fake_azion):
    fake_azion.reply("GET", "/workspace/api/network_lists", status=502, text="<html>Bad gateway</html>")
    client = AzionClient("secret", transport=fake_azion.transport)

    response = await client.request("GET", URL)

    assert not response.ok
    assert response.parse_error
    assert response.error_message() == "Invalid JSON response from Azion API (HTTP 502)"


@pytest.mark.unit
@pytest.mark.anyio
async def test_transport_error_does_not_raise():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = AzionClient("secret", transport=httpx.MockTransport(refuse))

    response = await client.request("GET", URL)

    assert not response.ok
    assert response.status == 0
    assert "connection refused" in response.error_message()


@pytest.mark.unit
def test_graphql_errors_win_over_message():
    both = ApiResponse(
        ok=False,
        status=400,
        reason="Bad Request",
        payload={"message": "generic gateway text", "errors": [{"message": "bad range"}]},
    )
    assert both.error_message(graphql=True) == "bad range"
    assert both.error_message() == "generic gateway text"


@pytest.mark.unit
def test_rest_ignores_graphql_errors():
    graphql_only = ApiResponse(ok=False, status=400, reason="Bad Request", payload={"errors": [{"message": "bad range"}]})
    assert graphql_only.error_message(graphql=True) == "bad range"
    assert graphql_only.error_message() == "HTTP 400 Bad Request"


@pytest.mark.unit
def test_graphql_falls_back_to_client_message():
    unreadable = ApiResponse(
        ok=False,
        status=502,
        reason="Bad Gateway",
        payload={"message": "Invalid JSON response from Azion API (HTTP 502)"},
        parse_error="Expecting value",
    )
    assert unreadable.error_message(graphql=True) == "Invalid JSON response from Azion API (HTTP 502)"


@pytest.mark.unit
def test_error_message_fallbacks():
    empty = ApiResponse(ok=False, status=500, reason="Internal Server Error", payload={})
    assert empty.error_message() == "HTTP 500 Internal Server Error"

    listed = ApiResponse(ok=False, status=404, reason="Not Found", payload=[1, 2])
    assert listed.error_message() == "HTTP 404 Not Found"
