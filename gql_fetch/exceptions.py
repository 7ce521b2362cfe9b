"""
Exception hierarchy for gql_fetch.

This module defines the errors a query run can end with and the helpers that
convert aiohttp failures and HTTP status codes into them.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Union

import aiohttp


DEFAULT_REMOTE_ERROR_MESSAGE = (
    "One or more errors occurred while attempting to process the request"
)


class GqlFetchError(Exception):
    """
    Base exception for all gql_fetch operations.

    Attributes:
        message: Human-readable error message
        url: Endpoint that caused the error (if applicable)
        details: Additional error details as keyword arguments
    """

    def __init__(self, message: str, url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message
        self.url = url
        self.details = kwargs


class TransportError(GqlFetchError):
    """
    Raised when the request could not be delivered or answered successfully.

    Covers connectivity problems, timeouts, non-success status codes and
    response bodies that are not valid JSON.
    """

    pass


class NetworkError(TransportError):
    """Raised for network-related errors."""

    pass


class ConnectionError(NetworkError):
    """Raised when a connection to the endpoint cannot be established."""

    pass


class TimeoutError(TransportError):
    """
    Raised when a request times out.

    Attributes:
        timeout_value: The timeout value that was exceeded (in seconds)
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout_value: Optional[float] = None,
    ) -> None:
        super().__init__(message, url)
        self.timeout_value = timeout_value


class ContentError(TransportError):
    """Raised when the response body cannot be parsed."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        response_text: Optional[str] = None,
    ) -> None:
        super().__init__(message, url)
        self.response_text = response_text


class HTTPError(TransportError):
    """Raised when the endpoint answers with a non-success status code."""

    def __init__(
        self,
        message: str,
        status_code: int,
        url: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        response_text: Optional[str] = None,
    ) -> None:
        super().__init__(message, url)
        self.status_code = status_code
        self.headers = headers or {}
        self.response_text = response_text


class RateLimitError(HTTPError):
    """Raised when rate limiting is encountered."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        retry_after: Optional[Union[int, float]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(message, 429, url, headers)
        self.retry_after = retry_after


class AuthenticationError(HTTPError):
    """Raised for authentication-related errors (401, 403)."""

    pass


class NotFoundError(HTTPError):
    """Raised when the endpoint is not found (404)."""

    pass


class ServerError(HTTPError):
    """Raised for server errors (5xx)."""

    pass


class RemoteQueryError(GqlFetchError):
    """
    Raised when the endpoint returns a non-empty ``errors`` collection.

    The message is taken from the first error; the full collection is kept
    on ``errors`` for callers that want the rest.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        super().__init__(message, url)
        self.errors = errors or []

    @classmethod
    def from_errors(
        cls, errors: List[Any], url: Optional[str] = None
    ) -> RemoteQueryError:
        """Build the exception from a GraphQL ``errors`` array."""
        first = errors[0] if errors else None
        message = None
        if isinstance(first, dict):
            message = first.get("message")
        return cls(message or DEFAULT_REMOTE_ERROR_MESSAGE, url=url, errors=list(errors))


class ErrorHandler:
    """
    Converts aiohttp exceptions and HTTP status codes into gql_fetch errors.
    """

    @staticmethod
    def handle_aiohttp_error(
        error: Exception, url: Optional[str] = None, timeout_value: Optional[float] = None
    ) -> TransportError:
        """
        Convert aiohttp exceptions to TransportError subclasses.

        Args:
            error: The original exception
            url: The endpoint that caused the error
            timeout_value: Configured timeout, reported on TimeoutError

        Returns:
            Appropriate TransportError subclass
        """
        if isinstance(error, asyncio.TimeoutError):
            return TimeoutError(
                f"Request timed out: {error}", url=url, timeout_value=timeout_value
            )

        elif isinstance(error, aiohttp.ClientConnectionError):
            return ConnectionError(f"Connection error: {error}", url=url)

        elif isinstance(error, aiohttp.ClientPayloadError):
            return ContentError(f"Payload error: {error}", url=url)

        elif isinstance(error, aiohttp.ClientResponseError):
            return ErrorHandler.handle_http_status_error(
                error.status, str(error), url, getattr(error, "headers", None)
            )

        else:
            return NetworkError(
                f"An error occurred while attempting to make a request to API: {error}",
                url=url,
            )

    @staticmethod
    def handle_http_status_error(
        status_code: int,
        message: str,
        url: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        response_text: Optional[str] = None,
    ) -> HTTPError:
        """
        Create appropriate HTTPError subclass based on status code.

        Args:
            status_code: HTTP status code
            message: Error message
            url: The endpoint that caused the error
            headers: Response headers
            response_text: Response body text

        Returns:
            Appropriate HTTPError subclass
        """
        if status_code == 401:
            return AuthenticationError(
                f"Authentication required: {message}",
                status_code,
                url,
                headers,
                response_text,
            )

        elif status_code == 403:
            return AuthenticationError(
                f"Access forbidden: {message}", status_code, url, headers, response_text
            )

        elif status_code == 404:
            return NotFoundError(
                f"Endpoint not found: {message}",
                status_code,
                url,
                headers,
                response_text,
            )

        elif status_code == 429:
            retry_after = None
            if headers:
                retry_after_header = headers.get("Retry-After") or headers.get(
                    "retry-after"
                )
                if retry_after_header:
                    try:
                        retry_after = float(retry_after_header)
                    except ValueError:
                        pass

            return RateLimitError(
                f"Rate limit exceeded: {message}", url, retry_after, headers
            )

        elif 500 <= status_code < 600:
            return ServerError(
                f"Server error: {message}", status_code, url, headers, response_text
            )

        else:
            return HTTPError(message, status_code, url, headers, response_text)
