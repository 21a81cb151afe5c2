"""
HTTP client for the Azion APIs.

Wraps httpx with the headers every Azion call needs and folds every kind of
failure into an `ApiResponse` value:
  - non-2xx statuses keep the decoded body so a `message` can be shown,
  - bodies that are not JSON become a synthetic error object,
  - connection errors and timeouts become a response with status 0.

Nothing is retried. A fresh `httpx.AsyncClient` is opened per request so
concurrent tool calls share no state.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    """
    Outcome of one Azion API call.

    Attributes:
        ok:          True for a 2xx status.
        status:      HTTP status code, or 0 when no response was received.
        reason:      HTTP reason phrase ("" when no response was received).
        payload:     Decoded JSON body, or a synthetic {"message": ...} object.
        parse_error: Set when the body could not be decoded as JSON.
    """
    ok: bool
    status: int
    reason: str
    payload: Any
    parse_error: Optional[str] = None

    def error_message(self, graphql: bool = False) -> str:
        """
        Best human-readable reason for a failed call.

        REST bodies are read for their `message` field. GraphQL bodies are
        read for the first `errors[].message`, then for a `message` set by
        this client when the body was unreadable. Without either, falls
        back to "HTTP <status> <reason>".

        Args:
            graphql: True for responses of the events GraphQL endpoint.
        """
        payload = self.payload
        if isinstance(payload, dict):
            if graphql:
                errors = payload.get("errors")
                if isinstance(errors, list) and errors and isinstance(errors[0], dict):
                    message = errors[0].get("message")
                    if isinstance(message, str) and message:
                        return message
            message = payload.get("message")
            if isinstance(message, str) and message:
                return message
        return f"HTTP {self.status} {self.reason}".rstrip()


class AzionClient:
    """Authenticated JSON client shared by all tools."""

    def __init__(self, token: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            token:     Azion personal token, sent as "Authorization: Token <token>".
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        self.token = token
        self.transport = transport

    def _headers(self, has_body: bool) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Authorization": f"Token {self.token}",
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, str]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        """
        Send one request and return its outcome without raising.

        Args:
            method: HTTP method (GET, POST, PATCH).
            url:    Absolute endpoint URL.
            params: Optional query-string parameters.
            body:   Optional JSON body.

        Returns:
            ApiResponse: The status and decoded body, or a synthetic error.
        """
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.request(
                    method,
                    url,
                    params=params,
                    headers=self._headers(body is not None),
                    json=body,
                )
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed before a response: {e!r}")
            return ApiResponse(
                ok=False,
                status=0,
                reason="",
                payload={"message": f"Could not reach Azion API: {type(e).__name__}: {e}"},
            )

        logger.debug(f"{method} {url} -> {response.status_code}")

        parse_error = None
        try:
            payload = response.json()
        except ValueError as e:
            parse_error = str(e)
            payload = {
                "message": f"Invalid JSON response from Azion API (HTTP {response.status_code})",
            }

        ok = response.is_success
        if not ok:
            logger.warning(f"{method} {url} returned HTTP {response.status_code}")

        return ApiResponse(
            ok=ok,
            status=response.status_code,
            reason=response.reason_phrase,
            payload=payload,
            parse_error=parse_error,
        )
