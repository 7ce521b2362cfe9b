"""
Configuration models for gql_fetch.

This module defines all configuration data models with validation and defaults.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_HEADERS: Dict[str, str] = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Default logging level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format",
    )
    file_path: Optional[Path] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10 * 1024 * 1024, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, description="Number of backup log files")
    enable_console: bool = Field(default=True, description="Enable console logging")
    enable_file: bool = Field(default=False, description="Enable file logging")
    enable_structured: bool = Field(
        default=False, description="Enable structured JSON logging"
    )

    # Component-specific log levels
    component_levels: Dict[str, LogLevel] = Field(
        default_factory=dict, description="Per-component log levels"
    )


class TransportConfig(BaseModel):
    """Configuration for the aiohttp transport."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    timeout: float = Field(default=30.0, ge=1.0, description="Total request timeout in seconds")
    connect_timeout: float = Field(default=10.0, ge=1.0, description="Connection timeout")
    sock_read_timeout: float = Field(default=30.0, ge=1.0, description="Socket read timeout")
    max_connections: int = Field(default=100, ge=1, description="Maximum connections")
    max_connections_per_host: int = Field(default=30, ge=1, description="Max connections per host")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    user_agent: str = Field(default="gql-fetch/1.0", description="User-Agent header")


class ClientConfig(BaseModel):
    """Configuration for the query client."""

    model_config = ConfigDict(extra="forbid")

    endpoint: str = Field(description="GraphQL endpoint URL")
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Headers added to every request"
    )
    transport: TransportConfig = Field(default_factory=TransportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Require an http(s) endpoint."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Endpoint must be an http:// or https:// URL")
        return v

    def merged_headers(self) -> Dict[str, str]:
        """Default headers overridden by the configured ones."""
        headers = dict(DEFAULT_HEADERS)
        headers.update(self.headers)
        return headers
