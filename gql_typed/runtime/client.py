"""Client dispatch for generated query builders."""

import logging
from typing import Any, Optional, TypeVar

from .request import Request
from .response import Response
from .transport import Auth, HTTPTransport, Transport

logger = logging.getLogger(__name__)

_R = TypeVar("_R", bound=Response)


class Client:
    """Sends requests built with a generated module.

    Usage:
        async with Client.http("https://api.example.com/graphql", auth=BearerAuth(token)) as client:
            query = QuerySelection.empty().select(Query.hero, CharacterSelection.empty().select(Character.name))
            response = await client.send(query.request())
            print(response.hero.name)
    """

    def __init__(self, transport: Transport):
        self._transport = transport

    @classmethod
    def http(cls, url: str, auth: Optional[Auth] = None, *, timeout: float = 30.0) -> "Client":
        """Create a client on an HTTPTransport."""
        return cls(HTTPTransport(url, auth, timeout=timeout))

    async def send(self, request: Request[_R]) -> _R:
        """Send one request and wrap its data in the request's response type.

        One call is one round trip. The awaitable can be cancelled like any
        other; nothing here retries.
        """
        logger.debug("Sending %s query on %s", request.operation_name or "anonymous",
                     request.selection.type_name)
        data = await self._transport.execute(
            request.document, operation_name=request.operation_name
        )
        return request.response_type(data)

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
