"""
Lightweight GraphQL client with declarative query building.

This package compiles nested Python structures into compact GraphQL operation
strings and runs them through an ordered middleware chain to an aiohttp
transport.

Features:
- Field selection from plain dicts, lists, strings and callables
- Reusable aliased/argument-carrying fields via FieldBuilder
- Variable declarations hoisted into the operation header
- Ordered, snapshot-isolated async middleware with short-circuiting
- Structured error hierarchy for transport and remote query failures
"""

from .client import Client, RunFunction
from .config import ClientConfig, ConfigLoader, LoggingConfig, LogLevel, TransportConfig
from .exceptions import (
    AuthenticationError,
    ConnectionError,
    ContentError,
    ErrorHandler,
    GqlFetchError,
    HTTPError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RemoteQueryError,
    ServerError,
    TimeoutError,
    TransportError,
)
from .logging import setup_logging
from .middleware import (
    DispatchChain,
    HeaderMiddleware,
    LoggingMiddleware,
    Middleware,
    NextFunction,
    TimeoutMiddleware,
)
from .query import (
    FieldBuilder,
    FieldKind,
    OperationType,
    Request,
    build_query_string,
    classify_field,
    map_items,
    serialize_fields,
)
from .transport import AiohttpTransport, Transport, parse_response

__version__ = "1.0.0"

__all__ = [
    # Client
    "Client",
    "RunFunction",
    # Query building
    "FieldBuilder",
    "FieldKind",
    "OperationType",
    "Request",
    "build_query_string",
    "classify_field",
    "map_items",
    "serialize_fields",
    # Middleware
    "DispatchChain",
    "Middleware",
    "NextFunction",
    "HeaderMiddleware",
    "TimeoutMiddleware",
    "LoggingMiddleware",
    # Transport
    "Transport",
    "AiohttpTransport",
    "parse_response",
    # Configuration
    "ClientConfig",
    "TransportConfig",
    "LoggingConfig",
    "LogLevel",
    "ConfigLoader",
    "setup_logging",
    # Exceptions
    "GqlFetchError",
    "TransportError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    "ContentError",
    "HTTPError",
    "AuthenticationError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "RemoteQueryError",
    "ErrorHandler",
]
