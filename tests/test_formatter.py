#
# DebugEx - Formatter Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import enum

from collections import OrderedDict
from dataclasses import dataclass
from typing import NamedTuple

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from debug_ex.formatter import (
    DEFAULT_KEY_HEX,
    DEFAULT_VALUE_HEX,
    format_color,
    format_mapping,
    format_sequence,
    format_set,
    format_value,
)
from debug_ex.markup import Color, strip_markup


# Tests ----------------------------------------------------------------------------------------------------------------
@dataclass
class Point:
    x: int
    y: int


class Pair(NamedTuple):
    left: str
    right: str


class Suit(enum.Enum):
    HEARTS = 1
    SPADES = 2

    def __str__(self):
        return self.name


class Row(NamedTuple):
    name: str
    note: str


class Tagged:
    pass


class Base:
    pass


class LeftLeaf(Tagged, Base):
    pass


class RightLeaf(Base, Tagged):
    pass


class TestFormatSequence:
    def test_scalar_scenario(self):
        out = format_sequence([1, 2, 3])
        assert out == "Type at (int)\n[0] 1, \n[1] 2, \n[2] 3\n"

    @pytest.mark.parametrize(
        "values",
        [
            pytest.param([0.5], id="one"),
            pytest.param(list(range(7)), id="seven"),
            pytest.param(("a", "b"), id="tuple"),
        ],
    )
    def test_line_structure(self, values):
        """One header, one indexed line per element, one trailing break, no dangling comma."""
        out = format_sequence(values)
        lines = out.splitlines()
        assert len(lines) == 1 + len(values)
        assert lines[0].startswith("Type ")
        for index, line in enumerate(lines[1:]):
            assert line.startswith(f"[{index}] ")
        assert out.endswith("\n") and not out.endswith("\n\n")
        assert not lines[-1].endswith(",") and not lines[-1].endswith(", ")

    def test_without_line_breaks(self):
        assert format_sequence([1, 2, 3], newline=False) == "Type at (int)\n[0] 1, [1] 2, [2] 3\n"

    def test_empty_is_header_only(self):
        assert format_sequence([]) == "Type at (object)\n"

    def test_explicit_item_type(self):
        assert format_sequence([], item_type=Point).startswith("Type Struct at (")

    def test_heterogeneous_falls_back_to_common_base(self):
        assert format_sequence([True, 2]).startswith("Type at (int)\n")
        assert format_sequence([1, "a"]).startswith("Type at (object)\n")

    def test_records(self):
        out = format_sequence([Point(1, 2), Point(3, 4)])
        assert out == (
            f"Type Struct at ({__name__}.Point)\n"
            "[0]\n x : 1\n y : 2\n"
            "[1]\n x : 3\n y : 4\n"
        )

    def test_records_without_line_breaks(self):
        out = format_sequence([Pair("a", "b")], newline=False)
        assert out == f"Type Struct at ({__name__}.Pair)\n[0]\n left : a right : b\n"

    def test_enum_header(self):
        out = format_sequence([Suit.HEARTS, Suit.SPADES])
        assert out == f"Type Enum at ({__name__}.Suit)\n[0] HEARTS, \n[1] SPADES\n"

    def test_value_ending_in_line_break(self):
        assert format_sequence(["line\n"]) == "Type at (str)\n[0] line\n"
        assert format_sequence(["a", "b\n"], newline=False) == "Type at (str)\n[0] a, [1] b\n"

    def test_value_ending_in_separator_kept(self):
        assert format_sequence(["x, "]) == "Type at (str)\n[0] x, \n"

    def test_record_last_field_kept_verbatim(self):
        out = format_sequence([Row("a", "x, ")])
        assert out == f"Type Struct at ({__name__}.Row)\n[0]\n name : a\n note : x, \n"

    @pytest.mark.parametrize(
        "values",
        [
            pytest.param([LeftLeaf(), RightLeaf()], id="left_first"),
            pytest.param([RightLeaf(), LeftLeaf()], id="right_first"),
        ],
    )
    def test_common_base_is_deterministic(self, values):
        """With two candidate bases the header never depends on element order."""
        assert format_sequence(values).startswith(f"Type at ({__name__}.Tagged)\n")

    def test_none_is_programming_error(self):
        with pytest.raises(TypeError):
            format_sequence(None)


class TestFormatSet:
    def test_sorted_order(self):
        assert format_set({3, 1, 2}) == format_sequence([1, 2, 3])

    def test_unorderable_is_stable(self):
        values = {1, "a", 2.5}
        assert format_set(values) == format_set(set(values))
        assert format_set(values).startswith("Type at (object)\n")

    def test_frozenset_empty(self):
        assert format_set(frozenset()) == "Type at (object)\n"


class TestFormatMapping:
    def test_scenario(self):
        out = format_mapping({"a": 1, "b": 2})
        lines = strip_markup(out).split("\n")
        assert lines == [
            "Type(Key) at (str)",
            "Type(Value) at (int)",
            "Key: a | Value: 1, ",
            "Key: b | Value: 2",
            "",
        ]

    def test_color_spans(self):
        out = format_mapping({"a": 1}, key_color="#112233", value_color="#445566")
        assert out.splitlines() == [
            "Type(<color=#112233>Key</color>) at (str)",
            "Type(<color=#445566>Value</color>) at (int)",
            "<color=#112233>Key: a</color> | <color=#445566>Value: 1</color>",
        ]

    def test_default_colors(self):
        out = format_mapping({1: 2})
        assert f"<color={DEFAULT_KEY_HEX}>Key: 1</color>" in out
        assert f"<color={DEFAULT_VALUE_HEX}>Value: 2</color>" in out

    def test_iteration_order_kept(self):
        values = OrderedDict([("z", 1), ("a", 2), ("m", 3)])
        body = strip_markup(format_mapping(values)).splitlines()[2:]
        assert [line.split(" | ")[0] for line in body] == ["Key: z", "Key: a", "Key: m"]

    def test_line_count(self):
        values = {i: str(i) for i in range(5)}
        assert len(format_mapping(values).splitlines()) == 2 + 5

    def test_without_line_breaks(self):
        out = strip_markup(format_mapping({"a": 1, "b": 2}, newline=False))
        assert out.endswith("Key: a | Value: 1, Key: b | Value: 2\n")

    def test_value_ending_in_separator_kept(self):
        out = strip_markup(format_mapping({"a": "x, "}))
        assert out.endswith("Key: a | Value: x, \n")

    def test_empty_is_headers_only(self):
        out = strip_markup(format_mapping({}))
        assert out == "Type(Key) at (object)\nType(Value) at (object)\n"

    def test_invalid_color_propagates_as_markup(self):
        out = format_mapping({"a": 1}, key_color="not-a-color")
        assert "<color=#not-a-color>Key: a</color>" in out


class TestFormatColor:
    def test_rendering(self):
        assert format_color(Color(1, 0, 0)) == "#<color=#FF0000FF>FF0000FF</color>  Color(1, 0, 0, 1)"


class TestFormatValue:
    @pytest.mark.parametrize(
        "message, expected",
        [
            pytest.param([1, 2], format_sequence([1, 2]), id="list"),
            pytest.param((1, 2), format_sequence((1, 2)), id="tuple"),
            pytest.param({2, 1}, format_set({1, 2}), id="set"),
            pytest.param({"a": 1}, format_mapping({"a": 1}), id="dict"),
            pytest.param(Color(0, 0, 1), format_color(Color(0, 0, 1)), id="color"),
        ],
    )
    def test_routing(self, message, expected):
        assert format_value(message) == expected

    @pytest.mark.parametrize(
        "message",
        [
            pytest.param("text", id="str"),
            pytest.param(b"bytes", id="bytes"),
            pytest.param(42, id="int"),
            pytest.param(None, id="none"),
            pytest.param(Pair("a", "b"), id="record"),
        ],
    )
    def test_passthrough(self, message):
        assert format_value(message) is message

    def test_colors_forwarded(self):
        out = format_value({"a": 1}, key_color="#000001", value_color="#000002")
        assert "<color=#000001>Key: a</color>" in out
        assert "<color=#000002>Value: 1</color>" in out
