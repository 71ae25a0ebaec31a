# classifier.py
"""
Type classification and provenance tracing for the structured formatter.

A type is one of three kinds: a record (a composite value rendered field by
field), an enumeration, or a plain scalar rendered through ``str()``.
"""

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 [Yanai Klugman/Kardome]

# =============================================================================
# Imports
# =============================================================================
from __future__ import annotations

import dataclasses
import enum

from collections.abc import Iterable
from typing import NamedTuple, Protocol, runtime_checkable


# =============================================================================
# Types
# =============================================================================
class TypeKind(enum.Enum):
    """Classification of a runtime type."""

    RECORD = 'Struct'
    ENUMERATED = 'Enum'
    SCALAR = ''

    @property
    def label(self) -> str:
        """Header label used by :func:`trace_name` (empty for scalars)."""
        return self.value


@runtime_checkable
class SupportsRecordFields(Protocol):
    """
    Explicit capability for record-like values.

    Implementers return their fields as ``(name, value)`` pairs in display
    order. Values are converted with ``str()`` by the formatter.
    """

    def __record_fields__(self) -> Iterable[tuple[str, object]]: ...


class TypeDescriptor(NamedTuple):
    """Qualified-name trail (outer to inner) plus classification of a type."""

    trail: tuple[str, ...]
    kind: TypeKind


# =============================================================================
# Classification
# =============================================================================
def _is_namedtuple_type(tp: type) -> bool:
    return issubclass(tp, tuple) and isinstance(getattr(tp, '_fields', None), tuple)


def is_record_type(tp: type) -> bool:
    """True when values of ``tp`` should be rendered field by field."""
    if not isinstance(tp, type) or issubclass(tp, enum.Enum):
        return False
    # Protocol checks against a class look for the method on the class itself
    if callable(getattr(tp, '__record_fields__', None)):
        return True
    return dataclasses.is_dataclass(tp) or _is_namedtuple_type(tp)


def classify(tp: type) -> TypeKind:
    """
    Classify ``tp`` as RECORD, ENUMERATED or SCALAR.

    Enumerations are checked first so an ``IntEnum`` or a dataclass-backed
    enum never counts as a record.

    Examples
    --------
    >>> classify(int)
    <TypeKind.SCALAR: ''>
    >>> import enum
    >>> classify(enum.IntEnum('Mode', 'A B'))
    <TypeKind.ENUMERATED: 'Enum'>
    """
    if isinstance(tp, type) and issubclass(tp, enum.Enum):
        return TypeKind.ENUMERATED
    if is_record_type(tp):
        return TypeKind.RECORD
    return TypeKind.SCALAR


def record_fields(value: object) -> list[tuple[str, str]]:
    """
    Return the ``(name, text)`` field pairs of a record-like value.

    Sources are tried in order: the ``__record_fields__`` capability,
    declared dataclass fields, then NamedTuple fields. Only one level is
    expanded; nested records are rendered with ``str()``.
    """
    if isinstance(value, SupportsRecordFields):
        return [(str(name), str(field)) for name, field in value.__record_fields__()]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return [(f.name, str(getattr(value, f.name))) for f in dataclasses.fields(value)]
    if _is_namedtuple_type(type(value)):
        return [(name, str(getattr(value, name))) for name in type(value)._fields]  # type: ignore[attr-defined]
    return []


# =============================================================================
# Provenance
# =============================================================================
def describe_type(tp: type) -> TypeDescriptor:
    """Build the :class:`TypeDescriptor` for ``tp``; recomputed on every call."""
    qualname = getattr(tp, '__qualname__', None) or getattr(tp, '__name__', None) or repr(tp)
    segments = [part for part in qualname.split('.') if part != '<locals>']
    module = getattr(tp, '__module__', None)
    if module and module != 'builtins':
        segments[0] = f'{module}.{segments[0]}'
    return TypeDescriptor(trail=tuple(segments), kind=classify(tp))


def trace_name(tp: type) -> str:
    """
    One-line header naming ``tp`` and its nesting, newline terminated.

    Examples
    --------
    >>> trace_name(int)
    'at (int)\\n'
    """
    descriptor = describe_type(tp)
    label = descriptor.kind.label
    prefix = f'{label} ' if label else ''
    return f'{prefix}at ({" > ".join(descriptor.trail)})\n'
