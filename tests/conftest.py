"""
Shared test fixtures and configuration for the gql_fetch test suite.
"""

import json
from typing import Any, Dict, List, Optional

import pytest
import aioresponses

from gql_fetch import Client


ENDPOINT = "https://api.example.com/graphql"


class RecordingTransport:
    """Transport stand-in that records every post and replays a canned result."""

    def __init__(self, data: Any = None, error: Optional[Exception] = None) -> None:
        self.data = data
        self.error = error
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    async def post(self, url: str, headers: Dict[str, str], body: str) -> Any:
        self.calls.append({"url": url, "headers": dict(headers), "body": json.loads(body)})
        if self.error is not None:
            raise self.error
        return self.data

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def endpoint() -> str:
    """GraphQL endpoint used across tests."""
    return ENDPOINT


@pytest.fixture
def transport() -> RecordingTransport:
    """Recording transport answering with a small payload."""
    return RecordingTransport(data={"user": {"name": "Ada"}})


@pytest.fixture
def client(endpoint: str, transport: RecordingTransport) -> Client:
    """Client wired to the recording transport."""
    return Client(endpoint, transport=transport)


@pytest.fixture
def mock_aiohttp():
    """Mock aiohttp responses for testing."""
    with aioresponses.aioresponses() as m:
        yield m
