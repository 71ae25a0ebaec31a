# profile.py
"""Settings consumed by the structured formatter and the log recorder."""

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 [Yanai Klugman/Kardome]

# =============================================================================
# Imports
# =============================================================================
from __future__ import annotations

import logging

from dataclasses import dataclass, field
from pathlib import Path

from .formatter import DEFAULT_KEY_COLOR, DEFAULT_VALUE_COLOR
from .logger_internals import DEFAULT_APP_AUTHOR, DEFAULT_APP_NAME, _get_default_log_dir
from .markup import Color

_log = logging.getLogger(__name__)


# =============================================================================
# Profile
# =============================================================================
@dataclass
class DebugProfile:
    """
    Settings for dictionary marker colors and saved log recordings.

    Attributes
    ----------
    log_save_path : str | Path | None
        Directory for saved recordings. Relative paths resolve against
        ``base_dir``; the directory must already exist. None uses the
        platformdirs user log directory (created on demand) (default: None).
    save_stack_trace : bool
        Append a stack trace (or the call-site location) to each recorded
        entry (default: True).
    dictionary_key : Color | str
        Marker color for mapping keys; hex strings are accepted
        (default: Color(0.8, 0.023, 0.0)).
    dictionary_value : Color | str
        Marker color for mapping values; hex strings are accepted
        (default: Color(0.0, 0.119, 0.69)).
    app_name : str
        Application name for the platformdirs default (default: "DebugEx").
    app_author : str | None
        Application author for the platformdirs default (default: None).
    base_dir : str | Path | None
        Anchor for a relative ``log_save_path``. None means the current
        working directory (default: None).
    """

    log_save_path: str | Path | None = None
    save_stack_trace: bool = True
    dictionary_key: Color | str = DEFAULT_KEY_COLOR
    dictionary_value: Color | str = DEFAULT_VALUE_COLOR
    app_name: str = DEFAULT_APP_NAME
    app_author: str | None = DEFAULT_APP_AUTHOR
    base_dir: str | Path | None = None

    # Derived once from the configured colors; used verbatim in markup.
    dict_key_color: str = field(init=False, repr=False)
    dict_value_color: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Normalise colors and derive the hex marker strings."""
        self.dictionary_key = self._coerce_color('dictionary_key', DEFAULT_KEY_COLOR)
        self.dictionary_value = self._coerce_color('dictionary_value', DEFAULT_VALUE_COLOR)
        self.dict_key_color = f'#{self.dictionary_key.hex_rgb}'
        self.dict_value_color = f'#{self.dictionary_value.hex_rgb}'

    def _coerce_color(self, attr_name: str, default: Color) -> Color:
        """Accept a Color or hex string; warn and fall back on anything else."""
        value = getattr(self, attr_name)
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            try:
                return Color.from_hex(value)
            except ValueError as e:
                _log.warning(f'Invalid {attr_name} {value!r}: {e}. Using default #{default.hex_rgb}.')
                return default
        _log.warning(f'Invalid {attr_name} type {type(value).__name__}. Using default #{default.hex_rgb}.')
        return default

    def resolve_save_dir(self) -> Path:
        """
        Directory recordings are written to.

        Raises
        ------
        LoggerSetupError
            When the platformdirs default (and its CWD fallback) cannot be created.
        """
        if self.log_save_path is None:
            return _get_default_log_dir(self.app_name, self.app_author)
        path = Path(self.log_save_path).expanduser()
        if not path.is_absolute():
            base = Path(self.base_dir) if self.base_dir is not None else Path.cwd()
            path = base / path
        return path
