"""
GraphQL client implementation.

This module provides the client that builds operation strings from schema
objects and runs them through the middleware chain to the transport.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from .config.models import DEFAULT_HEADERS, ClientConfig
from .middleware import DispatchChain, Middleware
from .query.builder import build_query_string
from .query.models import OperationType, Request
from .transport import AiohttpTransport, Transport

logger = logging.getLogger(__name__)

RunFunction = Callable[..., Awaitable[Any]]


class Client:
    """
    Lightweight GraphQL client with a middleware chain.

    Examples:
        Basic query:
        ```python
        async with Client("https://api.example.com/graphql") as client:
            get_user = client.query(
                {"$": {"id": "ID!"}, "user": FieldBuilder(args=["id"])(["name"])},
                name="GetUser",
            )
            data = await get_user({"id": "123"})
        ```

        With middleware:
        ```python
        async def auth(request, next):
            request.headers["Authorization"] = f"Bearer {token}"
            return await next()

        client.use(auth, TimeoutMiddleware(5.0))
        ```
    """

    def __init__(
        self,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        """
        Initialize client.

        Args:
            url: GraphQL endpoint URL
            headers: Default headers, merged over the JSON content headers
            transport: Terminal transport (defaults to an AiohttpTransport)
        """
        self.url = url
        self.headers: Dict[str, str] = dict(DEFAULT_HEADERS)
        if headers:
            self.headers.update(headers)

        self._owns_transport = transport is None
        self.transport: Transport = transport or AiohttpTransport()
        self._middleware: List[Middleware] = []

    @classmethod
    def from_config(
        cls, config: ClientConfig, transport: Optional[Transport] = None
    ) -> Client:
        """
        Create a client from a ClientConfig.

        Args:
            config: Client configuration
            transport: Terminal transport (defaults to an AiohttpTransport
                built from ``config.transport``)
        """
        client = cls(
            config.endpoint,
            headers=config.merged_headers(),
            transport=transport or AiohttpTransport(config.transport),
        )
        client._owns_transport = transport is None
        return client

    async def __aenter__(self) -> Client:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        _exc_type: Optional[type[BaseException]],
        _exc_val: Optional[BaseException],
        _exc_tb: Optional[Any],
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            close = getattr(self.transport, "close", None)
            if close is not None:
                await close()

    @property
    def middleware(self) -> tuple:
        """Registered middleware, in execution order."""
        return tuple(self._middleware)

    def use(self, *middleware: Middleware) -> Client:
        """
        Register middleware for outgoing requests.

        Middleware run in registration order on every later run. Lists and
        tuples of middleware are flattened one level, so ``use([a, b])`` is
        the same as ``use(a, b)``.

        Returns:
            Self for chaining

        Raises:
            TypeError: If any item is not callable
        """
        flattened: List[Middleware] = []
        for item in middleware:
            if isinstance(item, (list, tuple)):
                flattened.extend(item)
            else:
                flattened.append(item)

        for item in flattened:
            if not callable(item):
                raise TypeError(f"Middleware must be callable, got {type(item).__name__}")
        self._middleware.extend(flattened)
        return self

    def query(self, schema: Mapping[str, Any], name: Optional[str] = None) -> RunFunction:
        """
        Build a query and bind it to ``run``.

        Args:
            schema: Field selection with optional ``"$"`` variable declarations
            name: Optional operation name

        Returns:
            Coroutine function taking optional variables
        """
        return self._bind(OperationType.QUERY, schema, name)

    def mutate(self, schema: Mapping[str, Any], name: Optional[str] = None) -> RunFunction:
        """
        Build a mutation and bind it to ``run``.

        Args:
            schema: Field selection with optional ``"$"`` variable declarations
            name: Optional operation name

        Returns:
            Coroutine function taking optional variables
        """
        return self._bind(OperationType.MUTATION, schema, name)

    def _bind(
        self,
        operation_type: OperationType,
        schema: Mapping[str, Any],
        name: Optional[str],
    ) -> RunFunction:
        operation = operation_type.prefix(build_query_string(schema, name))
        logger.debug(f"Built {operation_type.value}: {operation}")
        return functools.partial(self.run, operation)

    def _create_request(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Request:
        return Request(
            url=self.url,
            headers=dict(self.headers),
            query=query,
            variables=variables,
        )

    async def _send(self, request: Request) -> Any:
        return await self.transport.post(request.url, request.headers, request.body())

    async def run(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Any:
        """
        Run a GraphQL operation with any given variables.

        Args:
            query: Complete operation string
            variables: Variable values

        Returns:
            The response ``data``, or the value of a short-circuiting
            middleware

        Raises:
            TransportError: If the request could not be completed
            RemoteQueryError: If the endpoint reported GraphQL errors
            Exception: Anything a middleware raised, unwrapped
        """
        request = self._create_request(query, variables)
        chain = DispatchChain(self._middleware, self._send)
        return await chain.dispatch(request)
