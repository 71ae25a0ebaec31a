#
# DebugEx - Classifier Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import enum

from dataclasses import dataclass
from typing import NamedTuple

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from debug_ex.classifier import (
    SupportsRecordFields,
    TypeKind,
    classify,
    describe_type,
    record_fields,
    trace_name,
)


# Tests ----------------------------------------------------------------------------------------------------------------
@dataclass
class Point:
    x: int
    y: int


class Pair(NamedTuple):
    left: str
    right: str


class Vector:
    """Record by capability rather than by declaration."""

    def __init__(self, dx, dy):
        self.dx, self.dy = dx, dy

    def __record_fields__(self):
        return [("dx", self.dx), ("dy", self.dy)]


class Mode(enum.Enum):
    ON = 1
    OFF = 2


class Priority(enum.IntEnum):
    LOW = 1
    HIGH = 2


class Outer:
    class Inner:
        pass


class TestClassify:
    @pytest.mark.parametrize(
        "tp, expected",
        [
            pytest.param(Point, TypeKind.RECORD, id="dataclass"),
            pytest.param(Pair, TypeKind.RECORD, id="namedtuple"),
            pytest.param(Vector, TypeKind.RECORD, id="capability"),
            pytest.param(Mode, TypeKind.ENUMERATED, id="enum"),
            pytest.param(Priority, TypeKind.ENUMERATED, id="intenum"),
            pytest.param(int, TypeKind.SCALAR, id="int"),
            pytest.param(float, TypeKind.SCALAR, id="float"),
            pytest.param(bool, TypeKind.SCALAR, id="bool"),
            pytest.param(str, TypeKind.SCALAR, id="str"),
            pytest.param(tuple, TypeKind.SCALAR, id="plain_tuple"),
            pytest.param(Outer, TypeKind.SCALAR, id="plain_class"),
        ],
    )
    def test_kind(self, tp, expected):
        assert classify(tp) is expected

    def test_capability_protocol(self):
        assert isinstance(Vector(1, 2), SupportsRecordFields)
        assert not isinstance(Point(1, 2), SupportsRecordFields)


class TestRecordFields:
    @pytest.mark.parametrize(
        "value, expected",
        [
            pytest.param(Point(1, 2), [("x", "1"), ("y", "2")], id="dataclass"),
            pytest.param(Pair("a", "b"), [("left", "a"), ("right", "b")], id="namedtuple"),
            pytest.param(Vector(0.5, -1), [("dx", "0.5"), ("dy", "-1")], id="capability"),
            pytest.param(42, [], id="scalar"),
        ],
    )
    def test_pairs(self, value, expected):
        assert record_fields(value) == expected

    def test_single_level(self):
        """Nested records are rendered with str(), not expanded."""

        @dataclass
        class Segment:
            start: Point
            end: Point

        fields = record_fields(Segment(Point(0, 0), Point(1, 1)))
        assert fields == [("start", "Point(x=0, y=0)"), ("end", "Point(x=1, y=1)")]


class TestTraceName:
    def test_builtin_scalar(self):
        assert trace_name(int) == "at (int)\n"

    def test_record_label(self):
        assert trace_name(Point) == f"Struct at ({__name__}.Point)\n"

    def test_enum_label(self):
        assert trace_name(Mode) == f"Enum at ({__name__}.Mode)\n"

    def test_nested_trail(self):
        assert trace_name(Outer.Inner) == f"at ({__name__}.Outer > Inner)\n"

    def test_locals_marker_dropped(self):
        def make():
            class Local:
                pass

            return Local

        descriptor = describe_type(make())
        assert "<locals>" not in descriptor.trail
        assert descriptor.trail[-1] == "Local"
        assert descriptor.kind is TypeKind.SCALAR

    def test_recomputed_each_call(self):
        assert describe_type(Point) == describe_type(Point)
        assert describe_type(Point) is not describe_type(Point)
