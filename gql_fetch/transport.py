"""
Terminal transport for gql_fetch.

This module provides the ``Transport`` protocol the dispatch chain ends in and
``AiohttpTransport``, the default implementation backed by a pooled aiohttp
session.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import aiohttp

from .config.models import TransportConfig
from .exceptions import ContentError, ErrorHandler, RemoteQueryError

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """
    Anything that can POST a serialized GraphQL payload.

    ``post`` returns the payload's ``data`` member, or raises a
    ``TransportError``/``RemoteQueryError``.
    """

    async def post(self, url: str, headers: Dict[str, str], body: str) -> Any:
        ...


def is_success_status(status: int) -> bool:
    """Statuses in the 200-399 range count as success."""
    return 200 <= status <= 399


def parse_response(
    status: int,
    response_text: str,
    url: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Any:
    """
    Turn a raw GraphQL HTTP response into its ``data`` member.

    Args:
        status: HTTP status code
        response_text: Response body
        url: Endpoint, for error context
        headers: Response headers, for error context

    Returns:
        The ``data`` member of the payload (may be None)

    Raises:
        HTTPError: If the status is outside the success range
        ContentError: If the body is not a JSON object
        RemoteQueryError: If the payload carries a non-empty ``errors`` array
    """
    if not is_success_status(status):
        raise ErrorHandler.handle_http_status_error(
            status,
            f"Received Non-OK status code from server: {status}",
            url,
            headers,
            response_text,
        )

    try:
        payload = json.loads(response_text)
    except json.JSONDecodeError as e:
        raise ContentError(
            f"Invalid JSON response: {response_text[:200]}",
            url=url,
            response_text=response_text,
        ) from e

    if not isinstance(payload, dict):
        raise ContentError(
            "Expected a JSON object response", url=url, response_text=response_text
        )

    errors = payload.get("errors")
    if errors:
        # A single error object is accepted in place of an array
        if isinstance(errors, dict):
            errors = [errors]
        if not isinstance(errors, list):
            raise ContentError(
                f"Expected 'errors' to be an array, got {type(errors).__name__}",
                url=url,
                response_text=response_text,
            )
        raise RemoteQueryError.from_errors(errors, url=url)

    return payload.get("data")


class AiohttpTransport:
    """
    HTTP transport for GraphQL requests built on aiohttp.

    The session is created lazily on the first request and reused for every
    request after that, including concurrent ones.

    Examples:
        ```python
        async with AiohttpTransport(TransportConfig(timeout=10)) as transport:
            data = await transport.post(url, headers, body)
        ```
    """

    def __init__(self, config: Optional[TransportConfig] = None) -> None:
        """
        Initialize transport.

        Args:
            config: Transport configuration
        """
        self.config = config or TransportConfig()
        self._session: Optional[aiohttp.ClientSession] = None
        self._lock = asyncio.Lock()

        self._request_count = 0
        self._error_count = 0

    async def __aenter__(self) -> AiohttpTransport:
        """Async context manager entry."""
        await self._get_session()
        return self

    async def __aexit__(
        self,
        _exc_type: Optional[type[BaseException]],
        _exc_val: Optional[BaseException],
        _exc_tb: Optional[Any],
    ) -> None:
        """Async context manager exit."""
        await self.close()

    @property
    def closed(self) -> bool:
        """Whether no session is currently open."""
        return self._session is None or self._session.closed

    async def _create_session(self) -> aiohttp.ClientSession:
        """Create HTTP session with connection pooling."""
        connector_kwargs: Dict[str, Any] = {}
        if not self.config.verify_ssl:
            connector_kwargs["ssl"] = False

        connector = aiohttp.TCPConnector(
            limit=self.config.max_connections,
            limit_per_host=self.config.max_connections_per_host,
            enable_cleanup_closed=True,
            **connector_kwargs,
        )

        timeout = aiohttp.ClientTimeout(
            total=self.config.timeout,
            connect=self.config.connect_timeout,
            sock_read=self.config.sock_read_timeout,
        )

        session = aiohttp.ClientSession(
            connector=connector,
            timeout=timeout,
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,  # Status codes are handled in parse_response
        )
        logger.debug("HTTP session created")
        return session

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            async with self._lock:
                if self._session is None or self._session.closed:
                    self._session = await self._create_session()
        return self._session

    async def post(self, url: str, headers: Dict[str, str], body: str) -> Any:
        """
        POST a serialized payload and return the response's ``data``.

        Args:
            url: GraphQL endpoint
            headers: Request headers
            body: JSON-encoded ``{"query", "variables"}`` payload

        Returns:
            The ``data`` member of the response payload

        Raises:
            TransportError: On connectivity failures, timeouts, bad status
                codes or unparseable bodies
            RemoteQueryError: If the response carries GraphQL errors
        """
        session = await self._get_session()
        start_time = time.time()
        self._request_count += 1

        try:
            async with session.post(url, data=body, headers=headers) as response:
                status = response.status
                response_headers = dict(response.headers)
                response_text = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._error_count += 1
            logger.warning(f"GraphQL request to {url} failed: {e!r}")
            raise ErrorHandler.handle_aiohttp_error(
                e, url=url, timeout_value=self.config.timeout
            ) from e

        response_time = time.time() - start_time
        logger.debug(
            f"POST {url} -> {status} in {response_time * 1000:.1f}ms "
            f"({len(response_text)} bytes)"
        )

        try:
            return parse_response(status, response_text, url, response_headers)
        except Exception:
            self._error_count += 1
            raise

    async def close(self) -> None:
        """Close the HTTP session. Safe to call multiple times."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug(
                f"HTTP session closed. Metrics: requests={self._request_count}, "
                f"errors={self._error_count}"
            )
        self._session = None

    def get_metrics(self) -> Dict[str, Any]:
        """
        Get transport metrics.

        Returns:
            Dictionary containing request and error counts
        """
        return {
            "request_count": self._request_count,
            "error_count": self._error_count,
            "error_rate": self._error_count / max(self._request_count, 1),
            "session_active": not self.closed,
        }
