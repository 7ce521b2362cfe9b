"""
Configuration management for gql_fetch.

This module provides configuration models and loading from environment
variables and JSON files.
"""

from .loader import ConfigLoader
from .models import (
    DEFAULT_HEADERS,
    ClientConfig,
    LoggingConfig,
    LogLevel,
    TransportConfig,
)

__all__ = [
    "ConfigLoader",
    "ClientConfig",
    "TransportConfig",
    "LoggingConfig",
    "LogLevel",
    "DEFAULT_HEADERS",
]
