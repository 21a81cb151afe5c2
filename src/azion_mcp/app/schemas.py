"""
Declared shapes for tool arguments and Azion API payloads.

Every shape is a strict pydantic model: values are never coerced ("5" is not
an int, a single object is not a list). The same `validate()` routine checks
both directions, tool arguments before a tool runs and upstream JSON before
any field of it is read, and reports a mismatch as data instead of raising.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Literal, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

NetworkListType = Literal["ip_cidr", "asn", "countries"]


class StrictModel(BaseModel):
    """Base for all shapes: strict types, unknown keys dropped."""
    model_config = ConfigDict(strict=True, extra="ignore")


# --- Tool arguments ---

class NoArgs(StrictModel):
    pass


class QueryHttpEventsArgs(StrictModel):
    begin: Optional[str] = Field(
        default=None,
        description="ISO 8601 UTC start datetime. Defaults to now-5min",
    )
    end: Optional[str] = Field(
        default=None,
        description="ISO 8601 UTC end datetime. Defaults to now",
    )


class GetNetworkListArgs(StrictModel):
    networkListId: int = Field(description="The ID of the network list to retrieve.")
    checkIp: Optional[str] = Field(
        default=None,
        description="Optional IP address to check if it exists in the network list items.",
    )


class UpdateNetworkListArgs(StrictModel):
    networkListId: int = Field(description="The ID of the network list to update.")
    newItems: List[str] = Field(
        description="Array of new IP addresses/CIDR blocks to add to the network list.",
    )
    replaceAll: bool = Field(
        default=False,
        description="If true, replaces all items. If false (default), adds to existing items.",
    )


class CreateNetworkListArgs(StrictModel):
    name: str = Field(description="The name of the network list.")
    type: NetworkListType = Field(description="The type of the network list.")
    items: List[str] = Field(description="The items of the network list.")
    active: bool = Field(
        default=True,
        description="Whether the network list is active. Defaults to true.",
    )


# --- Azion API payloads ---

Number = Union[int, float]


class HttpEvent(StrictModel):
    ts: str
    configurationId: Optional[str] = None
    host: Optional[str] = None
    requestId: Optional[str] = None
    httpUserAgent: Optional[str] = None
    requestMethod: Optional[str] = None
    status: Optional[Number] = None
    upstreamBytesSent: Optional[Number] = None
    upstreamCacheStatus: Optional[str] = None
    sslProtocol: Optional[str] = None
    wafLearning: Optional[str] = None
    requestTime: Optional[str] = None
    serverProtocol: Optional[str] = None
    upstreamAddr: Optional[str] = None
    httpReferer: Optional[str] = None
    remoteAddress: Optional[str] = None
    wafMatch: Optional[str] = None
    wafScore: Optional[str] = None
    wafBlock: Optional[str] = None
    serverPort: Optional[str] = None
    sslCipher: Optional[str] = None
    serverAddr: Optional[str] = None
    scheme: Optional[str] = None
    geolocAsn: Optional[str] = None
    geolocRegionName: Optional[str] = None
    geolocCountryName: Optional[str] = None


class HttpEventsData(StrictModel):
    httpEvents: List[HttpEvent]


class HttpEventsResponse(StrictModel):
    data: HttpEventsData


class NetworkListSummary(StrictModel):
    """A network list as returned by the collection endpoint (no items)."""
    id: int
    name: str
    type: str
    last_editor: str
    last_modified: str
    active: bool


class NetworkList(NetworkListSummary):
    # Upstream types are not narrowed to NetworkListType so that lists of
    # newer types still render.
    items: List[str]


class NetworkListsResponse(StrictModel):
    count: int
    results: List[NetworkListSummary]


class NetworkListResponse(StrictModel):
    data: NetworkList


class NetworkListStateResponse(StrictModel):
    state: str
    data: NetworkList


# --- Validation ---

@dataclass(frozen=True)
class Valid(Generic[ModelT]):
    value: ModelT


@dataclass(frozen=True)
class Invalid:
    message: str


Validation = Union[Valid[ModelT], Invalid]


def describe_errors(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one readable line."""
    parts = []
    for error in exc.errors(include_url=False):
        location = ".".join(str(p) for p in error["loc"]) or "<root>"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def validate(model: Type[ModelT], payload: Any) -> "Validation[ModelT]":
    """
    Check an arbitrary JSON value against a declared shape.

    Args:
        model:   The pydantic model describing the expected shape.
        payload: Untrusted data (tool arguments or a decoded response body).

    Returns:
        Valid(value) with the fully populated model, or Invalid(message)
        describing every mismatch found.
    """
    try:
        return Valid(model.model_validate(payload))
    except ValidationError as exc:
        return Invalid(describe_errors(exc))


def input_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """JSON Schema advertised to MCP clients for a tool's arguments."""
    schema = model.model_json_schema()
    schema.setdefault("properties", {})
    return schema
