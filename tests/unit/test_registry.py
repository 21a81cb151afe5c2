import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from azion_mcp.app.mcp_app import mcp
from azion_mcp.app.config import Settings
from azion_mcp.app.tooling import Outcome, ToolRuntime
from azion_mcp.tools.registry import TOOLS, build_registry, get_tool

TOOL_ARGS = {
    "query_http_events": {},
    "list_network_lists": {},
    "create_network_list": {"name": "n", "type": "ip_cidr", "items": ["1.1.1.1"]},
    "get_network_list": {"networkListId": 1, "checkIp": "1.1.1.1"},
    "update_network_list": {"networkListId": 1, "newItems": ["1.1.1.1"]},
}


@pytest.mark.unit
def test_registry_order_and_names():
    assert [tool.name for tool in TOOLS] == [
        "query_http_events",
        "list_network_lists",
        "create_network_list",
        "get_network_list",
        "update_network_list",
    ]


@pytest.mark.unit
def test_get_tool_unknown_name():
    with pytest.raises(KeyError):
        get_tool("delete_network_list")


@pytest.mark.unit
def test_duplicate_names_are_rejected():
    tool = TOOLS[0]
    with pytest.raises(ValueError, match="Duplicate tool name"):
        build_registry(tool, tool)


@pytest.mark.unit
def test_schema_keys_match_declared_arguments():
    for tool in TOOLS:
        assert set(tool.input_schema["properties"]) == set(tool.input_model.model_fields)
        assert "Example question" in tool.description


@pytest.mark.unit
@pytest.mark.anyio
@pytest.mark.parametrize("name", list(TOOL_ARGS))
async def test_missing_token_never_touches_the_network(name, fake_azion, no_token_runtime):
    result = await get_tool(name).run(TOOL_ARGS[name], no_token_runtime)

    assert result.outcome is Outcome.MISSING_CREDENTIAL
    assert "Missing AZION_API_TOKEN" in result.text
    assert fake_azion.calls == 0


@pytest.mark.unit
@pytest.mark.anyio
async def test_fallback_token_name_is_used(fake_azion):
    fake_azion.reply("GET", "/workspace/api/network_lists", json_body={"count": 0, "results": []})
    runtime = ToolRuntime(
        settings=Settings(AZION_API_TOKEN="", AZION_TOKEN="legacy-token"),
        transport=fake_azion.transport,
    )

    result = await get_tool("list_network_lists").run({}, runtime)

    assert result.outcome is Outcome.OK
    assert fake_azion.requests[0].headers["Authorization"] == "Token legacy-token"


@pytest.mark.unit
@pytest.mark.anyio
async def test_execute_returns_text_content(fake_azion, no_token_runtime):
    response = await get_tool("list_network_lists").execute({}, no_token_runtime)

    assert list(response) == ["content"]
    assert response["content"][0]["type"] == "text"
    assert response["content"][0]["text"].startswith("Missing AZION_API_TOKEN")


@pytest.mark.unit
@pytest.mark.anyio
async def test_mcp_list_tools_advertises_registry():
    async with Client(mcp) as client:
        tools = await client.list_tools()

    assert [t.name for t in tools] == [tool.name for tool in TOOLS]
    get_network = next(t for t in tools if t.name == "get_network_list")
    assert set(get_network.inputSchema["properties"]) == {"networkListId", "checkIp"}
    assert get_network.inputSchema["required"] == ["networkListId"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_mcp_call_tool_returns_text(monkeypatch):
    monkeypatch.delenv("AZION_API_TOKEN", raising=False)
    monkeypatch.delenv("AZION_TOKEN", raising=False)

    async with Client(mcp) as client:
        result = await client.call_tool("list_network_lists", {})

    assert result.content[0].type == "text"
    assert "Missing AZION_API_TOKEN" in result.content[0].text


@pytest.mark.unit
@pytest.mark.anyio
async def test_mcp_call_tool_unknown_name():
    async with Client(mcp) as client:
        with pytest.raises(ToolError):
            await client.call_tool("nope", {})
