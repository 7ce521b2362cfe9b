"""
Field descriptor serialization.

A field descriptor is a plain Python value describing which fields to select:

- ``str``: literal field text, emitted verbatim
- falsy values (``None``, ``False``, ``0``, ``""``, NaN): nothing
- ``list``/``tuple``: sibling fields, rendered as ``{a,b,c}``
- zero-argument callables: evaluated lazily and rendered recursively
- mappings: named child fields, rendered as ``{key<child>,...}``

Anything else renders as an empty string.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Callable, Mapping, Union

logger = logging.getLogger(__name__)

FieldDescriptor = Union[str, None, list, tuple, Callable[[], Any], Mapping[str, Any]]
KeyValueCombiner = Callable[[str, Any, int], str]


class FieldKind(str, Enum):
    """Shapes a field descriptor can take."""

    STRING = "string"
    EMPTY = "empty"
    SEQUENCE = "sequence"
    THUNK = "thunk"
    MAPPING = "mapping"
    UNSUPPORTED = "unsupported"


def map_items(mapping: Mapping[str, Any], combine: KeyValueCombiner) -> str:
    """
    Concatenate ``combine(key, value, index)`` over a mapping in insertion order.

    No separators are added here; combiners prefix their own ``,`` when
    ``index > 0``.
    """
    return "".join(
        combine(key, value, index) for index, (key, value) in enumerate(mapping.items())
    )


def _is_empty(value: Any) -> bool:
    if isinstance(value, float) and math.isnan(value):
        return True
    try:
        return not value
    except (TypeError, ValueError):
        # Objects with ambiguous truthiness are not "empty", just unsupported.
        return False


def classify_field(value: Any) -> FieldKind:
    """Resolve the shape of a field descriptor."""
    # Sequences win over falsiness: an empty list still renders as {}.
    if isinstance(value, (list, tuple)):
        return FieldKind.SEQUENCE
    if _is_empty(value):
        return FieldKind.EMPTY
    if isinstance(value, str):
        return FieldKind.STRING
    if isinstance(value, Mapping):
        return FieldKind.MAPPING
    if callable(value):
        return FieldKind.THUNK
    return FieldKind.UNSUPPORTED


def _render_entry(key: str, value: Any, index: int) -> str:
    prefix = ("," if index > 0 else "") + str(key)
    return prefix + serialize_fields(value)


def serialize_fields(fields: Any) -> str:
    """
    Render a field descriptor into its compact query text.

    Examples:
        >>> serialize_fields(["foo", "bar"])
        '{foo,bar}'
        >>> serialize_fields({"foo": "", "bar": {"baz": ["one", "two"]}})
        '{foo,bar{baz{one,two}}}'
        >>> serialize_fields({})
        ''
    """
    kind = classify_field(fields)

    if kind is FieldKind.SEQUENCE:
        rendered = (serialize_fields(item) for item in fields)
        return "{" + ",".join(item for item in rendered if item) + "}"

    if kind is FieldKind.EMPTY:
        return ""

    if kind is FieldKind.STRING:
        return fields

    if kind is FieldKind.THUNK:
        return serialize_fields(fields())

    if kind is FieldKind.MAPPING:
        body = map_items(fields, _render_entry)
        return "{" + body + "}" if body else ""

    logger.debug("Ignoring unsupported field descriptor of type %s", type(fields).__name__)
    return ""
