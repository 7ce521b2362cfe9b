"""
Query string construction for gql_fetch.

This module compiles nested field descriptors, aliases, arguments and
variable declarations into compact GraphQL operation strings.
"""

from .builder import (
    FieldBuilder,
    build_query_string,
    render_arguments,
    render_variables,
)
from .models import OperationType, Request
from .serializer import FieldKind, classify_field, map_items, serialize_fields

__all__ = [
    # Serializer
    "FieldKind",
    "classify_field",
    "map_items",
    "serialize_fields",
    # Builders
    "FieldBuilder",
    "build_query_string",
    "render_arguments",
    "render_variables",
    # Models
    "OperationType",
    "Request",
]
