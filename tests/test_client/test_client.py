"""
Tests for the GraphQL client.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from gql_fetch import (
    AiohttpTransport,
    Client,
    ClientConfig,
    FieldBuilder,
    RemoteQueryError,
    TransportConfig,
)


class TestClientConstruction:
    """Test client setup."""

    def test_default_headers(self, client):
        """JSON content headers are always present."""
        assert client.headers == {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def test_headers_merged_over_defaults(self, endpoint, transport):
        """Caller headers override and extend the defaults."""
        client = Client(
            endpoint,
            headers={"Accept": "application/graphql-response+json", "X-Api": "1"},
            transport=transport,
        )
        assert client.headers["Accept"] == "application/graphql-response+json"
        assert client.headers["Content-Type"] == "application/json"
        assert client.headers["X-Api"] == "1"

    def test_default_transport(self, endpoint):
        """An aiohttp transport is created when none is given."""
        client = Client(endpoint)
        assert isinstance(client.transport, AiohttpTransport)

    def test_from_config(self, endpoint):
        """Clients can be built from a ClientConfig."""
        config = ClientConfig(
            endpoint=endpoint,
            headers={"X-Api": "1"},
            transport=TransportConfig(timeout=5.0),
        )
        client = Client.from_config(config)

        assert client.url == endpoint
        assert client.headers == config.merged_headers()
        assert client.headers["X-Api"] == "1"
        assert isinstance(client.transport, AiohttpTransport)
        assert client.transport.config.timeout == 5.0

    def test_from_config_header_overrides(self, endpoint):
        """Configured headers override the JSON defaults."""
        config = ClientConfig(endpoint=endpoint, headers={"Accept": "text/plain"})
        client = Client.from_config(config)
        assert client.headers["Accept"] == "text/plain"
        assert client.headers["Content-Type"] == "application/json"

    def test_use_returns_self_and_appends(self, client):
        """use() chains and keeps registration order."""

        async def a(request, next):
            return await next()

        async def b(request, next):
            return await next()

        assert client.use(a).use(b) is client
        assert client.middleware == (a, b)

    def test_use_flattens_lists(self, client):
        """Lists and tuples of middleware register each member in order."""

        async def a(request, next):
            return await next()

        async def b(request, next):
            return await next()

        async def c(request, next):
            return await next()

        client.use([a, b], (c,))
        assert client.middleware == (a, b, c)

    def test_use_rejects_non_callables(self, client):
        """Only callables can be registered."""
        with pytest.raises(TypeError):
            client.use("not middleware")
        with pytest.raises(TypeError):
            client.use([lambda request, next: None, 5])
        assert client.middleware == ()


class TestClientRun:
    """Test running operations."""

    @pytest.mark.asyncio
    async def test_run_posts_query_and_variables(self, client, transport, endpoint):
        """run() sends the query and variables as JSON."""
        data = await client.run("query{user{name}}", {"id": 1})

        assert data == {"user": {"name": "Ada"}}
        assert len(transport.calls) == 1
        call = transport.calls[0]
        assert call["url"] == endpoint
        assert call["body"] == {"query": "query{user{name}}", "variables": {"id": 1}}
        assert call["headers"]["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_run_without_variables(self, client, transport):
        """Missing variables are sent as null."""
        await client.run("query{a}")
        assert transport.calls[0]["body"]["variables"] is None

    @pytest.mark.asyncio
    async def test_query_builds_operation(self, client, transport):
        """query() prefixes the built string with the query keyword."""
        get_user = client.query(
            {"$": {"id": "ID!"}, "user": FieldBuilder(args=["id"])(["name"])},
            name="GetUser",
        )
        await get_user({"id": "1"})

        body = transport.calls[0]["body"]
        assert body["query"] == "query GetUser($id:ID!){user(id:$id){name}}"
        assert body["variables"] == {"id": "1"}

    @pytest.mark.asyncio
    async def test_anonymous_query(self, client, transport):
        """Queries without a name omit it."""
        await client.query({"viewer": ["login"]})()
        assert transport.calls[0]["body"]["query"] == "query {viewer{login}}"

    @pytest.mark.asyncio
    async def test_mutate_builds_operation(self, client, transport):
        """mutate() prefixes the built string with the mutation keyword."""
        create = client.mutate(
            {"$": {"input": "UserInput!"}, "createUser": FieldBuilder(args=["input"])(["id"])},
            name="CreateUser",
        )
        await create({"input": {"name": "Ada"}})

        body = transport.calls[0]["body"]
        assert body["query"] == "mutation CreateUser($input:UserInput!){createUser(input:$input){id}}"

    @pytest.mark.asyncio
    async def test_bound_function_reusable(self, client, transport):
        """A built run function can be called many times."""
        get = client.query({"a": ""})
        await get()
        await get({"x": 1})
        assert [c["body"]["query"] for c in transport.calls] == ["query {a}", "query {a}"]

    @pytest.mark.asyncio
    async def test_middleware_order(self, client, transport):
        """Middleware registered via use(A, B) run A, B, then the transport."""
        log = []

        async def a(request, next):
            log.append("A")
            return await next()

        async def b(request, next):
            log.append("B")
            return await next()

        original_post = transport.post

        async def post(url, headers, body):
            log.append("transport")
            return await original_post(url, headers, body)

        transport.post = post
        client.use(a, b)

        await asyncio.gather(client.run("query{a}"), client.run("query{b}"))

        assert log == ["A", "B", "transport", "A", "B", "transport"]

    @pytest.mark.asyncio
    async def test_short_circuit_skips_transport(self, client, transport):
        """A middleware can answer without reaching the transport."""

        async def cache(request, next):
            return {"cached": True}

        client.use(cache)

        assert await client.run("query{a}") == {"cached": True}
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_request_headers_isolated(self, client, transport):
        """Middleware header changes never leak into client defaults."""

        async def auth(request, next):
            request.headers["Authorization"] = "Bearer secret"
            return await next()

        client.use(auth)
        await client.run("query{a}")

        assert transport.calls[0]["headers"]["Authorization"] == "Bearer secret"
        assert "Authorization" not in client.headers

    @pytest.mark.asyncio
    async def test_client_header_changes_apply_to_later_runs(self, client, transport):
        """The public headers mapping feeds every new request."""
        client.headers["X-Tenant"] = "acme"
        await client.run("query{a}")
        assert transport.calls[0]["headers"]["X-Tenant"] == "acme"

    @pytest.mark.asyncio
    async def test_late_registration_does_not_affect_in_flight_run(self, client, transport):
        """Middleware added during a run only apply to later runs."""
        log = []
        gate = asyncio.Event()

        async def late(request, next):
            log.append(("late", request.query))
            return await next()

        async def first(request, next):
            log.append(("first", request.query))
            await gate.wait()
            return await next()

        client.use(first)
        in_flight = asyncio.ensure_future(client.run("query{one}"))
        await asyncio.sleep(0)
        client.use(late)
        gate.set()
        await in_flight
        await client.run("query{two}")

        assert ("late", "query{one}") not in log
        assert ("late", "query{two}") in log

    @pytest.mark.asyncio
    async def test_remote_error_rejects(self, client, transport):
        """Transport errors surface from run()."""
        transport.error = RemoteQueryError("User not found")

        with pytest.raises(RemoteQueryError, match="User not found"):
            await client.run("query{user{name}}")

    @pytest.mark.asyncio
    async def test_middleware_error_propagates_verbatim(self, client, transport):
        """Middleware errors are not wrapped."""
        error = LookupError("no token")

        def broken(request, next):
            raise error

        client.use(broken)

        with pytest.raises(LookupError) as exc_info:
            await client.run("query{a}")
        assert exc_info.value is error
        assert transport.calls == []


class TestClientLifecycle:
    """Test transport ownership and closing."""

    @pytest.mark.asyncio
    async def test_injected_transport_not_closed(self, endpoint, transport):
        """Clients leave caller-owned transports open."""
        async with Client(endpoint, transport=transport):
            pass
        assert transport.closed is False

    @pytest.mark.asyncio
    async def test_owned_transport_closed(self, endpoint):
        """Clients close the transport they created."""
        client = Client(endpoint)
        client.transport.close = AsyncMock()

        async with client:
            pass

        client.transport.close.assert_awaited_once()
