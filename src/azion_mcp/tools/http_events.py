"""
HTTP events tool.

Exposes `query_http_events`, which asks the Azion Real-Time Events GraphQL
API for the HTTP requests served in a time window (newest first, at most
1000 rows) and returns them as indented JSON.
"""

from datetime import datetime, timedelta, timezone

from azion_mcp.app.azion_client import AzionClient
from azion_mcp.app.config import Settings
from azion_mcp.app.schemas import HttpEventsResponse, Invalid, QueryHttpEventsArgs, validate
from azion_mcp.app.tooling import (
    ToolDefinition,
    ToolResult,
    pretty,
    request_failed,
    success,
    unexpected_response,
)

DEFAULT_WINDOW = timedelta(minutes=5)

HTTP_EVENTS_QUERY = """
query httpEvents($tsRange_begin: DateTime!, $tsRange_end: DateTime!) {
  httpEvents(
    limit: 1000
    orderBy: [ts_DESC]
    filter: {
      tsRange: { begin: $tsRange_begin, end: $tsRange_end }
    }
  ) {
    ts
    configurationId
    host
    requestId
    httpUserAgent
    requestMethod
    status
    upstreamBytesSent
    upstreamCacheStatus
    sslProtocol
    wafLearning
    requestTime
    serverProtocol
    upstreamAddr
    httpReferer
    remoteAddress
    wafMatch
    wafScore
    wafBlock
    serverPort
    sslCipher
    serverAddr
    scheme
    geolocAsn
    geolocRegionName
    geolocCountryName
  }
}
"""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """Format as ISO 8601 UTC with milliseconds, e.g. 2024-05-01T12:00:00.000Z."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def query_http_events(
    args: QueryHttpEventsArgs, client: AzionClient, settings: Settings
) -> ToolResult:
    """
    Fetch HTTP events between `begin` and `end`.

    Missing bounds default to the last five minutes. The bounds are echoed
    verbatim in the reply header.
    """
    now = utcnow()
    begin = args.begin if args.begin is not None else to_iso(now - DEFAULT_WINDOW)
    end = args.end if args.end is not None else to_iso(now)

    response = await client.request(
        "POST",
        settings.AZION_EVENTS_GRAPHQL_URL,
        body={
            "query": HTTP_EVENTS_QUERY,
            "variables": {"tsRange_begin": begin, "tsRange_end": end},
        },
    )
    if not response.ok:
        return request_failed(response, graphql=True)

    parsed = validate(HttpEventsResponse, response.payload)
    if isinstance(parsed, Invalid):
        return unexpected_response(parsed.message)

    events = [event.model_dump(exclude_unset=True) for event in parsed.value.data.httpEvents]
    return success(f"HTTP Events from {begin} to {end}\n\nRaw data:\n{pretty(events)}")


QUERY_HTTP_EVENTS = ToolDefinition(
    name="query_http_events",
    description="""Queries Azion Real-Time Events GraphQL to list HTTP events in a given time range.
    Returns at most 1000 events, newest first. Narrow the range to see more.

    Inputs (all optional):
        - begin: ISO 8601 UTC start datetime (defaults to now-5min)
        - end: ISO 8601 UTC end datetime (defaults to now)

    Authorization:
        - Set AZION_API_TOKEN (or AZION_TOKEN) in your environment/.env

    Example question:
        "List the latest HTTP events for my application."
    """,
    input_model=QueryHttpEventsArgs,
    handler=query_http_events,
)
