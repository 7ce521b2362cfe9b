"""
Query models and data structures.

This module defines the request object threaded through the middleware
chain and the operation types the client can emit.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class OperationType(str, Enum):
    """GraphQL operation types."""

    QUERY = "query"
    MUTATION = "mutation"

    def prefix(self, operation: str) -> str:
        """Prepend the operation keyword to a built operation string."""
        return f"{self.value} {operation}"


@dataclass
class Request:
    """
    A single outgoing GraphQL request.

    Built fresh for every run; ``headers`` is the caller's own copy, so
    middleware may change it freely.
    """

    url: str
    query: str
    headers: Dict[str, str] = field(default_factory=dict)
    variables: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON payload sent to the endpoint."""
        return {
            "query": self.query,
            "variables": self.variables,
        }

    def body(self) -> str:
        """Serialize the payload to a JSON string."""
        return json.dumps(self.to_dict())
