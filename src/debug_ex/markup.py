# markup.py
"""
Inline rich-text tags: builders, stripping and console translation.

Two tag families are understood. Fixed tags (``<b>``, ``<i>``) have literal
open and close tokens. Attributed tags (``<color=...>``, ``<size=...>``) carry
a single attribute and end at the next ``>``. Tags are never parsed into a
tree; all processing is a linear scan-and-splice over the string.
"""

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 [Yanai Klugman/Kardome]

# =============================================================================
# Imports
# =============================================================================
from __future__ import annotations

import re

from dataclasses import dataclass

from rich.markup import escape

# =============================================================================
# Constants
# =============================================================================
ATTRIBUTED_TAGS: tuple[str, ...] = ('color', 'size')
FIXED_TAGS: tuple[str, ...] = ('b', 'i')

# Tokens recognised by to_rich_markup, in a single alternation
_CONSOLE_TAG_PATTERN = re.compile(
    r'<color=#?(?P<hex>[0-9A-Fa-f]{6})(?:[0-9A-Fa-f]{2})?>'
    r'|<size=[^>]*>'
    r'|<(?P<fixed>[bi])>'
    r'|</(?P<close>color|size|b|i)>',
)
_RICH_FIXED_STYLES: dict[str, str] = {'b': 'bold', 'i': 'italic'}


# =============================================================================
# Color Value
# =============================================================================
def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, float(value)))


@dataclass(frozen=True)
class Color:
    """
    RGBA color with channels in the unit interval.

    Attributes
    ----------
    r, g, b : float
        Red, green and blue channels (clamped to [0, 1]).
    a : float
        Alpha channel (default: 1.0).
    """

    r: float
    g: float
    b: float
    a: float = 1.0

    def __post_init__(self) -> None:
        for channel in ('r', 'g', 'b', 'a'):
            object.__setattr__(self, channel, _clamp01(getattr(self, channel)))

    @classmethod
    def from_hex(cls, code: str) -> Color:
        """
        Parse ``#RRGGBB`` or ``#RRGGBBAA`` (the ``#`` is optional).

        Raises
        ------
        ValueError
            If ``code`` is not 6 or 8 hex digits.
        """
        digits = code.strip().removeprefix('#')
        if len(digits) not in (6, 8):
            raise ValueError(f"Invalid hex color '{code}': expected 6 or 8 hex digits")
        try:
            channels = [int(digits[i : i + 2], 16) / 255 for i in range(0, len(digits), 2)]
        except ValueError as e:
            raise ValueError(f"Invalid hex color '{code}'") from e
        return cls(*channels)

    def _channel_bytes(self) -> tuple[int, int, int, int]:
        return tuple(round(c * 255) for c in (self.r, self.g, self.b, self.a))  # type: ignore[return-value]

    @property
    def hex_rgb(self) -> str:
        """Six uppercase hex digits, no ``#``."""
        r, g, b, _ = self._channel_bytes()
        return f'{r:02X}{g:02X}{b:02X}'

    @property
    def hex_rgba(self) -> str:
        """Eight uppercase hex digits, no ``#``."""
        r, g, b, a = self._channel_bytes()
        return f'{r:02X}{g:02X}{b:02X}{a:02X}'

    def __str__(self) -> str:
        return f'Color({self.r:g}, {self.g:g}, {self.b:g}, {self.a:g})'


# =============================================================================
# Tag Builders
# =============================================================================
def _color_attribute(color: Color | str) -> str:
    if isinstance(color, Color):
        return f'#{color.hex_rgba}'
    return color if color.startswith('#') else f'#{color}'


def color_text(text: object, color: Color | str) -> str:
    """Wrap ``text`` in a ``<color=#...>`` tag. Strings are used verbatim."""
    return f'<color={_color_attribute(color)}>{text}</color>'


def bold(text: object) -> str:
    return f'<b>{text}</b>'


def italic(text: object) -> str:
    return f'<i>{text}</i>'


def size(text: object, pixels: int) -> str:
    return f'<size={pixels}>{text}</size>'


# =============================================================================
# Stripping
# =============================================================================
def _remove_token(text: str, token: str) -> str:
    """Splice every occurrence of ``token`` out of ``text``."""
    position = 0
    while True:
        index = text.find(token, position)
        if index == -1:
            return text
        text = text[:index] + text[index + len(token) :]
        # A splice can join two halves into a new token just before ``index``
        position = max(0, index - len(token) + 1)


def _remove_attributed_tag(text: str, tag: str) -> str:
    """Remove ``<tag=...>`` openers, then every ``</tag>`` closer."""
    opener = f'<{tag}='
    position = 0
    while True:
        index = text.find(opener, position)
        if index == -1:
            break
        end = text.find('>', index + len(opener))
        if end == -1:
            # Unterminated opener: keep it and the rest of the text untouched
            break
        text = text[:index] + text[end + 1 :]
        position = max(0, index - len(opener) + 1)
    return _remove_token(text, f'</{tag}>')


def _remove_fixed_tag(text: str, tag: str) -> str:
    """Remove all ``<tag>`` openers first, then all ``</tag>`` closers."""
    text = _remove_token(text, f'<{tag}>')
    return _remove_token(text, f'</{tag}>')


def strip_markup(text: str) -> str:
    """
    Remove color, size, bold and italic tags, leaving plain text.

    Attributed tags are resolved before fixed tags. Improperly nested or
    unbalanced markup is removed on a best-effort basis; no well-formedness
    check is made.

    Examples
    --------
    >>> strip_markup('<color=#FF0000FF>hello</color> <b>world</b>')
    'hello world'
    """
    for tag in ATTRIBUTED_TAGS:
        text = _remove_attributed_tag(text, tag)
    for tag in FIXED_TAGS:
        text = _remove_fixed_tag(text, tag)
    return text


# =============================================================================
# Console Translation
# =============================================================================
def to_rich_markup(text: str) -> str:
    """
    Translate inline tags into Rich console markup.

    Colors keep their RGB part (Rich has no alpha), bold and italic map to
    Rich styles, and size tags are dropped. Everything else is escaped so
    brackets in logged values are printed literally.
    """
    parts: list[str] = []
    position = 0
    depth = 0  # Rich rejects a closing tag with nothing open
    for match in _CONSOLE_TAG_PATTERN.finditer(text):
        parts.append(escape(text[position : match.start()]))
        if match.group('hex'):
            parts.append(f'[#{match.group("hex").lower()}]')
            depth += 1
        elif match.group('fixed'):
            parts.append(f'[{_RICH_FIXED_STYLES[match.group("fixed")]}]')
            depth += 1
        elif match.group('close') not in (None, 'size') and depth:
            parts.append('[/]')
            depth -= 1
        position = match.end()
    parts.append(escape(text[position:]))
    return ''.join(parts)
