"""
Query string builders.

This module turns schema objects into compact operation strings and provides
``FieldBuilder`` for fields that carry an alias or arguments.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence, Union

from .serializer import map_items, serialize_fields

VARIABLES_KEY = "$"
BIND_VARIABLE = "$"

ArgumentSpec = Union[Sequence[str], Mapping[str, Any]]


def _format_argument_value(value: Any) -> str:
    """Format an inline argument value as GraphQL literal text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _render_argument(key: str, value: Any, index: int) -> str:
    prefix = ("," if index > 0 else "") + f"{key}:"
    if isinstance(value, str) and value == BIND_VARIABLE:
        return f"{prefix}${key}"
    return prefix + _format_argument_value(value)


def render_arguments(args: Optional[ArgumentSpec]) -> str:
    """
    Render an argument spec without the surrounding parentheses.

    A sequence of names binds each argument to the same-named variable; a
    mapping emits ``key:value`` pairs, with ``"$"`` standing for ``$key``.
    """
    if not args:
        return ""
    if isinstance(args, Mapping):
        return map_items(args, _render_argument)
    if isinstance(args, str):
        raise TypeError("Argument names must be given as a sequence, not a string")
    return ",".join(f"{name}:${name}" for name in args)


class FieldBuilder:
    """
    Reusable renderer for a field with an alias and/or arguments.

    The signature is computed once; calling the builder renders it followed
    by the serialized child fields.

    Examples:
        ```python
        user = FieldBuilder(alias="me", args=["id"])
        user(["name", "email"])     # ':me(id:$id){name,email}'

        search = FieldBuilder.with_args({"first": 10, "term": "$"})
        search({"nodes": ["id"]})   # '(first:10,term:$term){nodes{id}}'
        ```
    """

    def __init__(
        self, alias: Optional[str] = None, args: Optional[ArgumentSpec] = None
    ) -> None:
        """
        Initialize field builder.

        A non-string first argument is taken as the argument spec, so
        ``FieldBuilder(["id"])`` and ``FieldBuilder(args=["id"])`` agree.

        Args:
            alias: Field alias, rendered as ``:alias``
            args: Argument names or an argument mapping

        Raises:
            TypeError: If the alias is not a string and arguments are also given
        """
        if alias is not None and not isinstance(alias, str):
            if args is not None:
                raise TypeError(
                    f"Field alias must be a string, got {type(alias).__name__}"
                )
            alias, args = None, alias

        self.alias = alias
        self.args = args

        signature = f":{alias}" if alias else ""
        arg_string = render_arguments(args)
        if arg_string:
            signature += f"({arg_string})"
        self.signature = signature

    @classmethod
    def aliased(cls, alias: str, args: Optional[ArgumentSpec] = None) -> FieldBuilder:
        """Create a builder for an aliased field."""
        return cls(alias=alias, args=args)

    @classmethod
    def with_args(cls, args: ArgumentSpec) -> FieldBuilder:
        """Create a builder for an anonymous field with arguments only."""
        return cls(args=args)

    def render(self, fields: Any = None) -> str:
        """Render the signature followed by the given child fields."""
        return self.signature + serialize_fields(fields)

    def __call__(self, fields: Any = None) -> str:
        return self.render(fields)

    def __repr__(self) -> str:
        return f"FieldBuilder(signature={self.signature!r})"


def render_variables(variables: Mapping[str, str]) -> str:
    """Render variable declarations as ``($name:Type,...)``."""

    def declare(name: str, type_name: str, index: int) -> str:
        name = "$" + name.lstrip("$")
        return ("," if index > 0 else "") + f"{name}:{type_name}"

    declarations = map_items(variables, declare)
    return f"({declarations})" if declarations else ""


def build_query_string(schema: Mapping[str, Any], name: Optional[str] = None) -> str:
    """
    Build an operation string from a schema object.

    The reserved ``"$"`` key holds variable declarations (name to type); every
    other key is a selected field. The schema itself is not modified.

    Args:
        schema: Field selection plus optional variable declarations
        name: Optional operation name

    Returns:
        Operation string without the leading ``query``/``mutation`` keyword

    Examples:
        >>> build_query_string({"$": {"foo": "String"}, "bar": ""})
        '($foo:String){bar}'
        >>> build_query_string({"foo": ""}, name="Foo")
        'Foo{foo}'
    """
    variables: Dict[str, str] = dict(schema.get(VARIABLES_KEY) or {})
    fields = {key: value for key, value in schema.items() if key != VARIABLES_KEY}
    return f"{name or ''}{render_variables(variables)}{serialize_fields(fields)}"
