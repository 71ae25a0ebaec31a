# __init__.py
"""
DebugEx Logging Package.

Widens ordinary logging calls so messages may be sequences, mappings, sets
or colors, rendered into typed multi-line reports. Provides inline rich-text
tags (bold, italic, sized, colored) that render as Rich styles on the console
and are stripped from persisted logs.

Main entry points:
- setup_logging: Function to initialize and configure the logging system.
- LoggerConfig / DebugProfile: Dataclasses for logging and formatter settings.
- DebugLogger: The custom logger class (useful for type hints/isinstance).
- format_sequence / format_set / format_mapping / format_color: Formatters.
- color_text / bold / italic / size / strip_markup: Rich-text tag helpers.
- LogRecorder: Captures logs between start() and stop() and saves them.
"""

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 [Yanai Klugman/Kardome]

import importlib.metadata

# --- Public API Imports ---
from .classifier import SupportsRecordFields, TypeDescriptor, TypeKind, classify, describe_type, trace_name
from .formatter import format_color, format_mapping, format_sequence, format_set, format_value
from .logger import DebugLogger, LoggerConfig, setup_logging
from .logger_internals import ASSERT_LEVEL, LoggerSetupError
from .markup import Color, bold, color_text, italic, size, strip_markup, to_rich_markup
from .profile import DebugProfile
from .recorder import LogRecorder

# --- Versioning ---
# Falls back when the distribution is not installed (e.g., running from source)
try:
    __version__ = importlib.metadata.version('debug-ex')
except importlib.metadata.PackageNotFoundError:
    __version__ = '0.0.0'

__all__ = [
    'ASSERT_LEVEL',
    'Color',
    'DebugLogger',
    'DebugProfile',
    'LogRecorder',
    'LoggerConfig',
    'LoggerSetupError',
    'SupportsRecordFields',
    'TypeDescriptor',
    'TypeKind',
    '__version__',
    'bold',
    'classify',
    'color_text',
    'describe_type',
    'format_color',
    'format_mapping',
    'format_sequence',
    'format_set',
    'format_value',
    'italic',
    'setup_logging',
    'size',
    'strip_markup',
    'to_rich_markup',
    'trace_name',
]
