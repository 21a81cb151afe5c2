"""
Network list tools.

Provides MCP tools for Azion network lists (IP/CIDR, ASN and country
access-control lists):
  - list_network_lists: list every ip_cidr network list.
  - get_network_list: show one list, optionally checking an IP against it.
  - update_network_list: add items to a list, or replace all of them.
  - create_network_list: create a new list.

Every Azion payload is validated against its envelope before it is read.
"""

import logging
from typing import List, Optional

from azion_mcp.app.azion_client import AzionClient
from azion_mcp.app.config import Settings
from azion_mcp.app.schemas import (
    CreateNetworkListArgs,
    GetNetworkListArgs,
    Invalid,
    NetworkListResponse,
    NetworkListsResponse,
    NetworkListStateResponse,
    NoArgs,
    UpdateNetworkListArgs,
    validate,
)
from azion_mcp.app.tooling import (
    MergeMode,
    ToolDefinition,
    ToolResult,
    pretty,
    request_failed,
    success,
    unexpected_response,
)

logger = logging.getLogger(__name__)

AUTH_HELP = """
    Authorization:
        - Set AZION_API_TOKEN (or AZION_TOKEN) in your environment/.env
"""


def _item_url(settings: Settings, network_list_id: int) -> str:
    return f"{settings.AZION_NETWORK_LISTS_URL.rstrip('/')}/{network_list_id}"


def merge_items(existing: List[str], new_items: List[str]) -> List[str]:
    """Union of both lists without duplicates, existing items first."""
    return list(dict.fromkeys([*existing, *new_items]))


async def list_network_lists(args: NoArgs, client: AzionClient, settings: Settings) -> ToolResult:
    """List network lists. The type filter is always ip_cidr."""
    response = await client.request(
        "GET",
        settings.AZION_NETWORK_LISTS_URL,
        params={"type": "ip_cidr"},
    )
    if not response.ok:
        return request_failed(response)

    parsed = validate(NetworkListsResponse, response.payload)
    if isinstance(parsed, Invalid):
        return unexpected_response(parsed.message)

    results = [item.model_dump() for item in parsed.value.results]
    return success(f"Found {parsed.value.count} network lists.\n\n{pretty(results)}")


async def get_network_list(
    args: GetNetworkListArgs, client: AzionClient, settings: Settings
) -> ToolResult:
    """
    Retrieve one network list by ID.

    When `checkIp` is given, report whether that exact string is one of the
    list's items. The comparison is literal: an address inside a listed
    CIDR block does not count as present.
    """
    response = await client.request("GET", _item_url(settings, args.networkListId))
    if not response.ok:
        return request_failed(response)

    parsed = validate(NetworkListResponse, response.payload)
    if isinstance(parsed, Invalid):
        return unexpected_response(parsed.message)

    network_list = parsed.value.data
    ip_check = ""
    if args.checkIp:
        verdict = "is already present" if args.checkIp in network_list.items else "is NOT present"
        ip_check = f"\n\nIP Check: {args.checkIp} {verdict} in the network list."

    return success(
        f"Network List Details (ID: {network_list.id}):\n\n"
        f"{pretty(network_list.model_dump())}{ip_check}"
    )


async def _current_items(client: AzionClient, url: str) -> Optional[List[str]]:
    """
    Items currently stored in a network list, or None if they cannot be read.
    """
    response = await client.request("GET", url)
    if not response.ok:
        return None

    payload = response.payload
    data = payload.get("data") if isinstance(payload, dict) else None
    items = data.get("items") if isinstance(data, dict) else None
    if not isinstance(items, list) or not all(isinstance(i, str) for i in items):
        return None
    return items


async def update_network_list(
    args: UpdateNetworkListArgs, client: AzionClient, settings: Settings
) -> ToolResult:
    """
    Patch the items of a network list.

    With replaceAll the new items are sent as-is. Otherwise the current
    items are fetched first and merged with the new ones. If that fetch
    fails the new items are sent alone and the result is tagged FALLBACK.

    The GET and the PATCH are not atomic: a write made in between is lost.
    """
    url = _item_url(settings, args.networkListId)

    if args.replaceAll:
        final_items = list(args.newItems)
        merge = MergeMode.REPLACED
    else:
        existing = await _current_items(client, url)
        if existing is None:
            logger.warning(
                f"Could not read current items of network list {args.networkListId}; "
                "sending only the new items"
            )
            final_items = list(args.newItems)
            merge = MergeMode.FALLBACK
        else:
            final_items = merge_items(existing, args.newItems)
            merge = MergeMode.MERGED

    response = await client.request("PATCH", url, body={"items": final_items})
    if not response.ok:
        return request_failed(response)

    parsed = validate(NetworkListStateResponse, response.payload)
    if isinstance(parsed, Invalid):
        return unexpected_response(parsed.message)

    text = (
        f"Successfully updated network list (State: {parsed.value.state}).\n\n"
        f"{pretty(parsed.value.data.model_dump())}"
    )
    if merge is MergeMode.FALLBACK:
        text += (
            "\n\nNote: the current items could not be read, "
            "so the list was updated with the new items only."
        )
    return success(text, merge=merge)


async def create_network_list(
    args: CreateNetworkListArgs, client: AzionClient, settings: Settings
) -> ToolResult:
    """Create a network list. Items are sent exactly as given, duplicates included."""
    body = {
        "name": args.name,
        "type": args.type,
        "items": list(args.items),
        "active": args.active,
    }
    response = await client.request("POST", settings.AZION_NETWORK_LISTS_URL, body=body)
    if not response.ok:
        return request_failed(response)

    parsed = validate(NetworkListStateResponse, response.payload)
    if isinstance(parsed, Invalid):
        return unexpected_response(parsed.message)

    return success(f"Successfully created network list.\n\n{pretty(parsed.value.data.model_dump())}")


LIST_NETWORK_LISTS = ToolDefinition(
    name="list_network_lists",
    description=f"""Lists Azion Network Lists of type ip_cidr. Always filters by ip_cidr type.
{AUTH_HELP}
    Example question:
        "List all my IP CIDR network lists."
    """,
    input_model=NoArgs,
    handler=list_network_lists,
)

CREATE_NETWORK_LIST = ToolDefinition(
    name="create_network_list",
    description=f"""Creates an Azion Network List.
    Inputs:
        - name: The name of the network list.
        - type: The type of the network list (ip_cidr, asn, countries).
        - items: An array of items for the network list.
        - active (optional): Whether the network list is active. Defaults to true.
{AUTH_HELP}
    Example question:
        "Create a new network list named 'My IP Blocklist' of type 'ip_cidr'
        with the items '192.168.1.1/32' and '10.0.0.0/8'."
    """,
    input_model=CreateNetworkListArgs,
    handler=create_network_list,
)

GET_NETWORK_LIST = ToolDefinition(
    name="get_network_list",
    description=f"""Retrieves a specific Azion Network List by ID and optionally checks if an IP exists in it.
    The check is an exact string match; addresses covered by a CIDR item are not matched.
    Inputs:
        - networkListId: The ID of the network list to retrieve (e.g., 48334).
        - checkIp (optional): IP address to check if it exists in the network list items.
{AUTH_HELP}
    Example questions:
        "Get network list 48334"
        "Check if IP 192.168.1.100 exists in network list 48334"
    """,
    input_model=GetNetworkListArgs,
    handler=get_network_list,
)

UPDATE_NETWORK_LIST = ToolDefinition(
    name="update_network_list",
    description=f"""Updates an Azion Network List by adding new IP addresses or replacing all items.
    Inputs:
        - networkListId: The ID of the network list to update.
        - newItems: Array of new IP addresses/CIDR blocks to add.
        - replaceAll (optional): If true, replaces all items. If false (default), adds to existing items.
{AUTH_HELP}
    Example questions:
        "Add IP 192.168.1.200 to network list 48334"
        "Update network list 48334 with IPs ['10.0.0.1', '172.16.0.1']"
    """,
    input_model=UpdateNetworkListArgs,
    handler=update_network_list,
)
