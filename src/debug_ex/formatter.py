# formatter.py
"""
Structured Value Formatter.

Renders sequences, sets, mappings and colors into annotated multi-line
strings suitable for a single log record. Each report starts with a header
naming the element type (see :func:`debug_ex.classifier.trace_name`) followed
by one index-annotated line per element.
"""

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 [Yanai Klugman/Kardome]

# =============================================================================
# Imports
# =============================================================================
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from collections.abc import Set as AbstractSet

from .classifier import TypeKind, classify, record_fields, trace_name
from .markup import Color, color_text

# =============================================================================
# Constants
# =============================================================================
DEFAULT_KEY_COLOR = Color(0.8, 0.023, 0.0, 1.0)
DEFAULT_VALUE_COLOR = Color(0.0, 0.119, 0.69, 1.0)
DEFAULT_KEY_HEX: str = f'#{DEFAULT_KEY_COLOR.hex_rgb}'
DEFAULT_VALUE_HEX: str = f'#{DEFAULT_VALUE_COLOR.hex_rgb}'

ITEM_SEPARATOR: str = ', '
TEXT_TYPES: tuple[type, ...] = (str, bytes, bytearray)


# =============================================================================
# Internal Helpers
# =============================================================================
def _common_type(values: Iterable[object]) -> type:
    """Nearest class shared by every value; ``object`` when empty."""
    types = sorted({type(v) for v in values}, key=lambda t: (t.__module__, t.__qualname__))
    if not types:
        return object
    if len(types) == 1:
        return types[0]
    first, *rest = types
    for candidate in first.__mro__:
        if all(issubclass(t, candidate) for t in rest):
            return candidate
    return object


def _finalize(body: str, cut: int) -> str:
    """Cut the body where the last element ended and close the report with one line break."""
    return body[:cut].rstrip('\n') + '\n'


def _set_order(values: AbstractSet[object]) -> list[object]:
    """Deterministic materialization: natural order if possible, else by repr."""
    try:
        return sorted(values)  # type: ignore[type-var]
    except TypeError:
        return sorted(values, key=repr)


# =============================================================================
# Public Formatters
# =============================================================================
def format_sequence(
    values: Sequence[object],
    *,
    newline: bool = True,
    item_type: type | None = None,
) -> str:
    """
    Render an ordered sequence as an index-annotated report.

    Parameters
    ----------
    values : Sequence
        Elements to render. Must not be None.
    newline : bool, optional
        Terminate each element (or each record field) with a line break
        (default: True).
    item_type : type | None, optional
        Declared element type for the header. Inferred from the elements
        when None.

    Returns
    -------
    str
        Header line plus one block per element, ending in exactly one line
        break. Empty input yields the header only.

    Examples
    --------
    >>> format_sequence([1, 2, 3])
    'Type at (int)\\n[0] 1, \\n[1] 2, \\n[2] 3\\n'
    """
    if values is None:
        raise TypeError('format_sequence() requires a sequence, got None')

    element_type = item_type if item_type is not None else _common_type(values)
    header = 'Type ' + trace_name(element_type)
    end = '\n' if newline else ''

    body = ''
    cut = 0  # end of the last element, before its separator and line break
    for index, value in enumerate(values):
        if classify(type(value)) is TypeKind.RECORD:
            body += f'[{index}]\n'
            cut = len(body)
            for name, text in record_fields(value):
                body += f' {name} : {text}'
                cut = len(body)
                body += end
        else:
            body += f'[{index}] {value}'
            cut = len(body)
            body += ITEM_SEPARATOR + end

    if not body:
        return header
    return header + _finalize(body, cut)


def format_set(
    values: AbstractSet[object],
    *,
    newline: bool = True,
    item_type: type | None = None,
) -> str:
    """Render a set by sorting it into a stable order and delegating to :func:`format_sequence`."""
    if values is None:
        raise TypeError('format_set() requires a set, got None')
    if item_type is None:
        item_type = _common_type(values)
    return format_sequence(_set_order(values), newline=newline, item_type=item_type)


def format_mapping(
    values: Mapping[object, object],
    *,
    newline: bool = True,
    key_type: type | None = None,
    value_type: type | None = None,
    key_color: Color | str = DEFAULT_KEY_HEX,
    value_color: Color | str = DEFAULT_VALUE_HEX,
) -> str:
    """
    Render a mapping with color-marked keys and values.

    Two header lines describe the key and value types; each entry becomes
    ``Key: k | Value: v`` with both halves wrapped in their marker color.
    Marker colors are used verbatim; malformed colors yield malformed markup.
    """
    if values is None:
        raise TypeError('format_mapping() requires a mapping, got None')

    resolved_key_type = key_type if key_type is not None else _common_type(values.keys())
    resolved_value_type = value_type if value_type is not None else _common_type(values.values())
    header = (
        f'Type({color_text("Key", key_color)}) {trace_name(resolved_key_type)}'
        f'Type({color_text("Value", value_color)}) {trace_name(resolved_value_type)}'
    )
    end = '\n' if newline else ''

    body = ''
    cut = 0
    for key, value in values.items():
        body += f'{color_text(f"Key: {key}", key_color)} | {color_text(f"Value: {value}", value_color)}'
        cut = len(body)
        body += ITEM_SEPARATOR + end

    if not body:
        return header
    return header + _finalize(body, cut)


def format_color(color: Color) -> str:
    """Hex code painted in its own color, followed by the decimal channels."""
    return f'#{color_text(color.hex_rgba, color)}  {color}'


def format_value(
    message: object,
    *,
    newline: bool = True,
    key_color: Color | str = DEFAULT_KEY_HEX,
    value_color: Color | str = DEFAULT_VALUE_HEX,
) -> object:
    """
    Route ``message`` to the matching formatter.

    Mappings, sets and non-text sequences become reports, colors become
    their hex/decimal rendering, and anything else is returned unchanged
    so the logging machinery can apply its own ``%`` formatting.
    """
    match message:
        case Color():
            return format_color(message)
        case _ if classify(type(message)) is TypeKind.RECORD:
            # A lone record (e.g. a NamedTuple) is a message, not a collection
            return message
        case Mapping():
            return format_mapping(message, newline=newline, key_color=key_color, value_color=value_color)
        case AbstractSet():
            return format_set(message, newline=newline)
        case str() | bytes() | bytearray():
            return message
        case Sequence():
            return format_sequence(message, newline=newline)
        case _:
            return message
