"""HTTP transport and authentication for generated clients.

The transport sends a query document and returns the ``data`` object of the
response. It performs exactly one HTTP request per call; retries and
backoff belong to the caller.
"""

import base64
import logging
from typing import Any, Optional, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel

from .errors import GraphQLError

logger = logging.getLogger(__name__)


@runtime_checkable
class Auth(Protocol):
    """Protocol for authentication handlers.

    Example:
        class OrgAuth:
            def __init__(self, token: str, org_id: str):
                self.token = token
                self.org_id = org_id

            def get_headers(self) -> dict[str, str]:
                return {"Authorization": f"Bearer {self.token}", "X-Org-ID": self.org_id}
    """

    def get_headers(self) -> dict[str, str]:
        """Return headers to include in requests."""
        ...


class BearerAuth:
    """``Authorization: Bearer <token>``"""

    def __init__(self, token: str):
        self.token = token

    def get_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class ApiKeyAuth:
    """API key sent in a custom header (``x-api-key`` by default)."""

    def __init__(self, api_key: str, header_name: str = "x-api-key"):
        self.api_key = api_key
        self.header_name = header_name

    def get_headers(self) -> dict[str, str]:
        return {self.header_name: self.api_key}


class BasicAuth:
    """HTTP basic authentication."""

    def __init__(self, username: str, password: str):
        self.username = username
        self.password = password

    def get_headers(self) -> dict[str, str]:
        credentials = base64.b64encode(f"{self.username}:{self.password}".encode()).decode()
        return {"Authorization": f"Basic {credentials}"}


class NoAuth:
    """No authentication headers."""

    def get_headers(self) -> dict[str, str]:
        return {}


class GraphQLPayload(BaseModel):
    """The JSON envelope of a GraphQL response."""
    data: Optional[dict[str, Any]] = None
    errors: Optional[list[dict[str, Any]]] = None


@runtime_checkable
class Transport(Protocol):
    """Sends one query document and returns the response ``data`` object."""

    async def execute(
        self,
        document: str,
        variables: Optional[dict[str, Any]] = None,
        operation_name: Optional[str] = None,
    ) -> dict[str, Any]:
        ...

    async def close(self) -> None:
        ...


class HTTPTransport:
    """GraphQL over HTTP POST using httpx.

    Examples:
        transport = HTTPTransport(url, auth=BearerAuth(token))
        transport = HTTPTransport(url, client=httpx.AsyncClient(transport=mock))
    """

    def __init__(
        self,
        url: str,
        auth: Optional[Auth] = None,
        *,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the transport.

        Args:
            url: GraphQL endpoint URL
            auth: Authentication handler; no headers are added when omitted
            timeout: Request timeout in seconds
            client: Pre-configured httpx client, closed by ``close()``
        """
        self.url = url
        self.timeout = timeout
        self._auth: Auth = auth if auth is not None else NoAuth()
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        headers.update(self._auth.get_headers())
        return headers

    async def execute(
        self,
        document: str,
        variables: Optional[dict[str, Any]] = None,
        operation_name: Optional[str] = None,
    ) -> dict[str, Any]:
        """Post a query document.

        Returns:
            The ``data`` portion of the response

        Raises:
            GraphQLError: If the response contains errors
            httpx.HTTPStatusError: If the server answers with an error status
        """
        payload: dict[str, Any] = {"query": document}
        if variables:
            payload["variables"] = variables
        if operation_name:
            payload["operationName"] = operation_name

        logger.debug("POST %s (%d bytes of query)", self.url, len(document))
        response = await self._get_client().post(self.url, json=payload, headers=self._headers())
        response.raise_for_status()

        result = GraphQLPayload.model_validate(response.json())
        if result.errors:
            messages = "; ".join(str(e.get("message", e)) for e in result.errors)
            raise GraphQLError(f"GraphQL errors: {messages}", result.errors)
        return result.data or {}

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
