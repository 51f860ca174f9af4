"""Tests for the node-name grammar."""

import pytest

from rsx_parser.shared import RsxSyntaxError
from rsx_parser.tokenization import TokenCursor, tokenize
from rsx_parser.tree.names import colon_name, dash_name, node_name, path_name
from rsx_parser.tree.node import NodeName, NodeNameKind


def cursor_for(source: str) -> TokenCursor:
    return TokenCursor.from_stream(tokenize(source))


class TestNodeName:
    """Name resolution across the three forms."""

    @pytest.mark.parametrize("source,kind,segments", [
        ("div", NodeNameKind.PATH, ("div",)),
        ("data-foo", NodeNameKind.DASH, ("data", "foo")),
        ("aria-described-by", NodeNameKind.DASH, ("aria", "described", "by")),
        ("on:click", NodeNameKind.COLON, ("on", "click")),
        ("some::path", NodeNameKind.PATH, ("some", "path")),
        ("type", NodeNameKind.PATH, ("type",)),
        ("self::Self", NodeNameKind.PATH, ("self", "Self")),
        ("crate::super::x", NodeNameKind.PATH, ("crate", "super", "x")),
    ])
    def test_name_forms(self, source, kind, segments):
        cursor = cursor_for(source)

        name = node_name(cursor)

        assert name.kind is kind
        assert name.segments == segments
        assert str(name) == source
        assert cursor.is_empty()

    def test_leading_path_separator(self):
        name = node_name(cursor_for("::a::b"))

        assert name == NodeName.path("a", "b", leading=True)
        assert str(name) == "::a::b"

    def test_name_stops_before_attribute_value(self):
        cursor = cursor_for('data-foo="x"')

        assert node_name(cursor) == NodeName.dash("data", "foo")
        assert cursor.peek().is_punct("=")

    def test_trailing_dash_is_consumed(self):
        cursor = cursor_for("data-foo-")

        name = node_name(cursor)

        assert name.trailing_separator is True
        assert str(name) == "data-foo-"
        assert cursor.is_empty()

    @pytest.mark.parametrize("source", ["a::", '"text"', "1", "-a", ""])
    def test_invalid_node_name(self, source):
        cursor = cursor_for(source)

        with pytest.raises(RsxSyntaxError, match="invalid node name"):
            node_name(cursor)

        assert cursor.index == 0


class TestNameRules:
    """Individual name forms fail without consuming."""

    def test_dash_requires_two_segments(self):
        cursor = cursor_for("div")

        with pytest.raises(RsxSyntaxError, match="expected punctuated node name"):
            dash_name(cursor)

        assert cursor.index == 0

    def test_colon_does_not_match_path_separator(self):
        cursor = cursor_for("some::path")

        with pytest.raises(RsxSyntaxError):
            colon_name(cursor)

        assert cursor.index == 0

    def test_path_rejects_trailing_separator(self):
        cursor = cursor_for("a::b::")

        with pytest.raises(RsxSyntaxError, match="expected path segment"):
            path_name(cursor)

        assert cursor.index == 0

    def test_path_requires_a_segment(self):
        with pytest.raises(RsxSyntaxError, match="expected path"):
            path_name(cursor_for("::"))
