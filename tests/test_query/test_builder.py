"""
Tests for FieldBuilder and build_query_string.
"""

import pytest

from gql_fetch.query import (
    FieldBuilder,
    build_query_string,
    render_arguments,
    render_variables,
)


class TestFieldBuilder:
    """Test field signature rendering."""

    def test_alias_only(self):
        """An alias alone renders as :alias."""
        assert FieldBuilder("foo")() == ":foo"

    def test_argument_names(self):
        """A list of names binds each argument to its variable."""
        assert FieldBuilder(args=["foo", "bar"])() == "(foo:$foo,bar:$bar)"

    def test_argument_mapping(self):
        """A mapping renders key:value pairs."""
        assert FieldBuilder(args={"foo": "bar", "baz": 5})() == "(foo:bar,baz:5)"

    def test_argument_mapping_variable_shorthand(self):
        """The "$" value binds to the same-named variable."""
        assert FieldBuilder(args={"foo": "bar", "baz": "$"})() == "(foo:bar,baz:$baz)"

    def test_argument_literal_formatting(self):
        """Booleans and None render as GraphQL literals."""
        result = FieldBuilder(args={"a": True, "b": False, "c": None})()
        assert result == "(a:true,b:false,c:null)"

    def test_alias_with_arguments(self):
        """Alias and arguments combine into one signature."""
        assert FieldBuilder("test", ["foo", "bar"])() == ":test(foo:$foo,bar:$bar)"
        assert FieldBuilder("test", {"foo": "bar", "baz": 5})() == ":test(foo:bar,baz:5)"

    def test_with_children(self):
        """Child fields are serialized after the signature."""
        field = FieldBuilder("test", ["foo", "bar"])
        assert field(["one", "two", "three"]) == ":test(foo:$foo,bar:$bar){one,two,three}"

    def test_aliased_field_with_two_children(self):
        """Aliased field with argument names and two children."""
        assert FieldBuilder("test", ["foo", "bar"])(["one", "two"]) == (
            ":test(foo:$foo,bar:$bar){one,two}"
        )

    def test_empty_arguments_omit_parentheses(self):
        """Empty argument specs add nothing."""
        assert FieldBuilder("x", [])() == ":x"
        assert FieldBuilder("x", {})() == ":x"
        assert FieldBuilder()() == ""

    def test_reuse_is_idempotent(self):
        """Rendering the same builder twice yields identical strings."""
        field = FieldBuilder("me", {"id": "$"})
        children = {"name": "", "friends": ["id"]}
        assert field(children) == field(children)

    def test_reuse_with_different_children(self):
        """The cached signature is shared across renders."""
        field = FieldBuilder(args=["id"])
        assert field("{a}") == "(id:$id){a}"
        assert field(["b"]) == "(id:$id){b}"
        assert field.signature == "(id:$id)"

    def test_named_constructors(self):
        """aliased() and with_args() mirror the two call shapes."""
        assert FieldBuilder.aliased("me").render() == ":me"
        assert FieldBuilder.aliased("me", ["id"]).render() == ":me(id:$id)"
        assert FieldBuilder.with_args({"first": 10}).render(["id"]) == "(first:10){id}"

    def test_builder_as_schema_value(self):
        """Rendered builders slot into a schema mapping."""
        schema = {"user": FieldBuilder(args=["id"])(["name"])}
        assert build_query_string(schema) == "{user(id:$id){name}}"

    def test_positional_argument_names(self):
        """A positional list is taken as argument names, not an alias."""
        field = FieldBuilder(["foo", "bar"])
        assert field() == "(foo:$foo,bar:$bar)"
        assert field.alias is None

    def test_positional_argument_mapping(self):
        """A positional mapping is taken as the argument mapping."""
        assert FieldBuilder({"foo": "bar", "baz": 5})() == "(foo:bar,baz:5)"
        assert FieldBuilder(("id",))(["name"]) == "(id:$id){name}"

    def test_non_string_alias_with_arguments_rejected(self):
        """A non-string alias alongside arguments is an error."""
        with pytest.raises(TypeError):
            FieldBuilder(["foo"], ["bar"])
        with pytest.raises(TypeError):
            FieldBuilder(5, {"a": 1})

    def test_string_argument_names_rejected(self):
        """A bare string is not a sequence of argument names."""
        with pytest.raises(TypeError):
            render_arguments("id")


class TestRenderVariables:
    """Test variable declaration rendering."""

    def test_empty(self):
        """No declarations render nothing."""
        assert render_variables({}) == ""

    def test_declarations(self):
        """Declarations are comma-joined inside parentheses."""
        assert render_variables({"id": "ID!", "first": "Int"}) == "($id:ID!,$first:Int)"

    def test_leading_dollars_normalized(self):
        """Any number of leading $ collapses to exactly one."""
        assert render_variables({"$id": "ID!", "$$$n": "Int"}) == "($id:ID!,$n:Int)"


class TestBuildQueryString:
    """Test operation string assembly."""

    def test_unnamed(self):
        """Without a name only the field block is emitted."""
        assert build_query_string({"foo": ""}) == "{foo}"

    def test_named(self):
        """The name prefixes the field block."""
        assert build_query_string({"foo": ""}, name="Foo") == "Foo{foo}"

    def test_variable_declarations(self):
        """The reserved $ key becomes the variable block."""
        assert build_query_string({"$": {"foo": "String"}, "bar": ""}) == "($foo:String){bar}"

    def test_named_with_variables(self):
        """Name, variables and fields appear in that order."""
        schema = {"$": {"$$id": "ID!"}, "user": FieldBuilder(args=["id"])(["name"])}
        assert build_query_string(schema, "GetUser") == "GetUser($id:ID!){user(id:$id){name}}"

    def test_reserved_key_not_selected(self):
        """The $ key never appears in the field block."""
        result = build_query_string({"$": {}, "a": ""})
        assert result == "{a}"

    def test_schema_not_mutated(self):
        """Building leaves the caller's schema untouched."""
        schema = {"$": {"id": "ID!"}, "a": ""}
        build_query_string(schema)
        assert schema == {"$": {"id": "ID!"}, "a": ""}

    def test_empty_schema(self):
        """An empty schema builds an empty string."""
        assert build_query_string({}) == ""
        assert build_query_string({"$": {"id": "ID"}}) == "($id:ID)"
