"""Tests for the client, the HTTP transport and authentication handlers."""

import base64
import json

import httpx
import pytest

from gql_typed.runtime import (
    ApiKeyAuth,
    Auth,
    BasicAuth,
    BearerAuth,
    Client,
    GraphQLError,
    HTTPTransport,
    NoAuth,
    Transport,
)

URL = "https://swapi.example.com/graphql"


class RecordingHandler:
    """httpx mock handler that records requests and replays one response."""

    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.payload = payload if payload is not None else {"data": {}}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def body(self) -> dict:
        return json.loads(self.requests[-1].content)


class FakeTransport:
    """In-memory transport returning canned data."""

    def __init__(self, data):
        self.data = data
        self.documents: list[str] = []
        self.closed = False

    async def execute(self, document, variables=None, operation_name=None):
        self.documents.append(document)
        return self.data

    async def close(self):
        self.closed = True


def http_client(handler, auth=None) -> Client:
    mock = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Client(HTTPTransport(URL, auth, client=mock))


@pytest.fixture
def hero_request(starwars):
    query = starwars.QuerySelection.empty().select(
        starwars.Query.hero,
        starwars.CharacterSelection.empty().select(starwars.Character.name),
    )
    return query.request()


# =============================================================================
# Tests: Client over HTTP
# =============================================================================


class TestHTTPClient:
    """End-to-end requests against a mocked GraphQL endpoint."""

    @pytest.mark.asyncio
    async def test_send_returns_typed_response(self, starwars, hero_request):
        handler = RecordingHandler(payload={"data": {"hero": {"name": "Luke Skywalker"}}})
        async with http_client(handler) as client:
            response = await client.send(hero_request)

        assert isinstance(response, starwars.QueryResponse)
        assert response.hero.name == "Luke Skywalker"
        assert handler.body == {"query": hero_request.document}

    @pytest.mark.asyncio
    async def test_operation_name_is_sent(self, starwars):
        query = starwars.QuerySelection.empty().select(
            starwars.Query.film, starwars.FilmSelection.empty().select(starwars.Film.title)
        )
        handler = RecordingHandler(payload={"data": {"film": None}})
        async with http_client(handler) as client:
            response = await client.send(query.request("Film"))

        assert response.film is None
        assert handler.body["operationName"] == "Film"
        assert handler.body["query"].startswith("query Film {")

    @pytest.mark.asyncio
    async def test_headers(self, hero_request):
        """Auth headers are added to every request."""
        handler = RecordingHandler(payload={"data": {"hero": None}})
        async with http_client(handler, BearerAuth("secret")) as client:
            await client.send(hero_request)

        request = handler.requests[0]
        assert request.method == "POST"
        assert str(request.url) == URL
        assert request.headers["Authorization"] == "Bearer secret"
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_graphql_errors(self, hero_request):
        handler = RecordingHandler(payload={
            "data": None,
            "errors": [{"message": "hero is unavailable"}, {"message": "try later"}],
        })
        async with http_client(handler) as client:
            with pytest.raises(GraphQLError, match="hero is unavailable; try later") as exc_info:
                await client.send(hero_request)

        assert len(exc_info.value.errors) == 2

    @pytest.mark.asyncio
    async def test_http_error_status(self, hero_request):
        handler = RecordingHandler(status_code=500, payload={"message": "internal error"})
        async with http_client(handler) as client:
            with pytest.raises(httpx.HTTPStatusError):
                await client.send(hero_request)

    @pytest.mark.asyncio
    async def test_close_closes_http_client(self):
        mock = httpx.AsyncClient(transport=httpx.MockTransport(RecordingHandler()))
        transport = HTTPTransport(URL, client=mock)

        await transport.close()
        assert mock.is_closed

    def test_http_factory(self):
        client = Client.http(URL, auth=ApiKeyAuth("key"), timeout=5.0)
        assert isinstance(client._transport, HTTPTransport)
        assert client._transport.url == URL
        assert client._transport.timeout == 5.0


class TestCustomTransport:
    """Clients accept any object implementing the Transport protocol."""

    def test_protocol(self):
        assert isinstance(FakeTransport({}), Transport)
        assert isinstance(HTTPTransport(URL), Transport)

    @pytest.mark.asyncio
    async def test_send_and_close(self, starwars, hero_request):
        transport = FakeTransport({"hero": {"name": "R2-D2"}})
        async with Client(transport) as client:
            response = await client.send(hero_request)

        assert response.hero.name == "R2-D2"
        assert transport.documents == [hero_request.document]
        assert transport.closed


# =============================================================================
# Tests: Authentication
# =============================================================================


class TestAuth:
    """Tests for the authentication handlers."""

    def test_bearer(self):
        assert BearerAuth("abc").get_headers() == {"Authorization": "Bearer abc"}

    def test_api_key_default_header(self):
        """Test default x-api-key header."""
        assert ApiKeyAuth("k").get_headers() == {"x-api-key": "k"}

    def test_api_key_custom_header(self):
        assert ApiKeyAuth("k", header_name="x-auth-token").get_headers() == {"x-auth-token": "k"}

    def test_basic(self):
        expected = base64.b64encode(b"user@domain.com:p@ss:word!").decode()
        headers = BasicAuth("user@domain.com", "p@ss:word!").get_headers()
        assert headers == {"Authorization": f"Basic {expected}"}

    def test_no_auth(self):
        assert NoAuth().get_headers() == {}

    def test_protocol_compliance(self):
        for auth in (BearerAuth("t"), ApiKeyAuth("k"), BasicAuth("u", "p"), NoAuth()):
            assert isinstance(auth, Auth)

    def test_custom_auth(self):
        """Any object with get_headers() works as auth."""

        class OrgAuth:
            def get_headers(self):
                return {"X-Org-ID": "42"}

        transport = HTTPTransport(URL, OrgAuth())
        assert isinstance(OrgAuth(), Auth)
        assert transport._headers()["X-Org-ID"] == "42"
