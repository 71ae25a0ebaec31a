# logger_internals.py
"""Internal constants, helpers, handlers, and types for the DebugLogger."""

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 [Yanai Klugman/Kardome]

# =============================================================================
# Imports
# =============================================================================
import logging
import os
import sys
import time

from contextlib import suppress
from pathlib import Path
from types import TracebackType
from typing import Any, TypeAlias, TypeVar, cast

import platformdirs

from loguru import logger as loguru_sink_handler
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.traceback import install as install_rich_tracebacks

from .markup import strip_markup, to_rich_markup

# =============================================================================
# Type Aliases
# =============================================================================
ExcInfoType: TypeAlias = tuple[type[BaseException], BaseException, TracebackType | None]
ExcInfoInput: TypeAlias = bool | BaseException | ExcInfoType | tuple[None, None, None] | None
ExtraData: TypeAlias = dict[str, object]

# TypeVar for configuring logger instance helper
TLogger = TypeVar('TLogger', bound=logging.Logger)


# =============================================================================
# Custom Exceptions
# =============================================================================
class LoggerSetupError(Exception):
    """Custom exception for critical errors during logger setup."""

    pass


# =============================================================================
# Constants
# =============================================================================
DEFAULT_CONSOLE_TIME_FORMAT: str = '[%X]'
DEFAULT_TEXT_LOG_FORMAT: str = (
    '{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}'
)
# Note: Default format does *not* include {extra}. Must be added manually if desired in text logs.
DEFAULT_FILE_TEXT_LOG_FORMAT: str = DEFAULT_TEXT_LOG_FORMAT + '\n{exception}'
DEFAULT_LOG_DIRECTORY_NAME: str = 'logs'  # Used only in CWD fallback path
DEFAULT_LOG_FILENAME_PREFIX: str = 'debug_ex_'
DEFAULT_APP_AUTHOR: str | None = None  # Omit the author directory level by default
DEFAULT_APP_NAME: str = 'DebugEx'

# --- Assertion Severity ---
# Sits between ERROR and CRITICAL, mirroring the host's "Assert" log type.
ASSERT_LEVEL: int = 45
ASSERT_LEVEL_NAME: str = 'ASSERT'

# --- Recording ---
RECORD_FILENAME_TIME_FORMAT: str = '%Y%m%d_%H%M'
RECORD_FILENAME_SUFFIX: str = '_editor.txt'


# =============================================================================
# Custom Levels
# =============================================================================
def register_assert_level() -> None:
    """Registers the ASSERT level with stdlib logging and Loguru (idempotent)."""
    logging.addLevelName(ASSERT_LEVEL, ASSERT_LEVEL_NAME)
    try:
        loguru_sink_handler.level(ASSERT_LEVEL_NAME)
    except ValueError:
        loguru_sink_handler.level(ASSERT_LEVEL_NAME, no=ASSERT_LEVEL, color='<magenta><bold>')


# =============================================================================
# Custom Filters, Formatters & Handlers
# =============================================================================
class SuppressConsoleFilter(logging.Filter):
    """Prevents records with 'suppress_console=True' extra data from RichHandler."""

    # Applied only when Rich Console is ON and Simple Tracebacks are OFF.
    def filter(self, record: logging.LogRecord) -> bool:
        """Filter out records if suppress_console is True in extra."""
        return not getattr(record, 'suppress_console', False)


class RichTextFormatter(logging.Formatter):
    """
    Formatter for RichHandler that turns inline tags into Rich markup.

    Only the message is translated; exception and stack text are escaped so
    bracketed content (e.g. ``[Errno 2]``) is never read as markup.
    """

    def formatMessage(self, record: logging.LogRecord) -> str:  # noqa: N802
        return to_rich_markup(super().formatMessage(record))

    def formatException(self, ei) -> str:  # noqa: N802
        return escape(super().formatException(ei))

    def formatStack(self, stack_info: str) -> str:  # noqa: N802
        return escape(super().formatStack(stack_info))


class LoguruInterceptHandler(logging.Handler):
    """Redirects ALL standard logging records to configured Loguru sinks, markup stripped."""

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record, intercepting it for Loguru."""
        try:
            level = loguru_sink_handler.level(record.levelname).name
        except ValueError:
            level = record.levelno  # Fallback to level number

        frame = logging.currentframe()
        depth = 2
        # Find the frame that originated the logging call
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        sink = loguru_sink_handler
        context = getattr(record, 'context', None)
        if context is not None:
            sink = sink.bind(context=repr(context))

        # Loguru handles the exception info automatically via its 'exception' opt
        sink.opt(depth=depth, exception=record.exc_info).log(
            level,
            strip_markup(record.getMessage()),
        )


# =============================================================================
# Setup Helper Functions
# =============================================================================
def _handle_raise(error: Exception, message: str) -> None:
    """Helper function to raise LoggerSetupError, satisfying Ruff's TRY301."""
    # Allows raising from an except block without violating TRY301.
    raise LoggerSetupError(message) from error


def _get_default_log_dir(app_name: str, app_author: str | None) -> Path:
    """
    Resolves (and creates) the default platform-specific log directory.

    Uses platformdirs' user log path, falling back to './logs' when the
    platform directory cannot be created or written.

    Raises
    ------
    LoggerSetupError
        If neither the platform directory nor the fallback is writable.
    """
    log_dir: Path | None = None
    setup_error: Exception | None = None

    # --- Try Platform-Specific Directory ---
    try:
        platform_log_dir: Path = Path(
            platformdirs.user_log_path(
                appname=app_name,
                appauthor=app_author,
            ),
        )
        platform_log_dir.mkdir(parents=True, exist_ok=True)
        if not os.access(str(platform_log_dir), os.W_OK):
            raise PermissionError(f'No write permission for platform log directory: {platform_log_dir}')
        log_dir = platform_log_dir
        logging.debug(f'Using platform default log directory: {log_dir}')

    except Exception as e:
        logging.warning(f'Failed to use platform log path: {e}. Falling back to CWD.')
        logging.debug('Platform path exception details:', exc_info=e)

        # --- Fallback to CWD/logs ---
        try:
            fallback_dir: Path = Path.cwd() / DEFAULT_LOG_DIRECTORY_NAME
            fallback_dir.mkdir(parents=True, exist_ok=True)
            if not os.access(str(fallback_dir), os.W_OK):
                raise PermissionError(f'No write permission for fallback directory: {fallback_dir}')
            log_dir = fallback_dir
            logging.warning(f'Using fallback log directory: {log_dir}')
        except Exception as fallback_e:
            logging.exception('Fallback log directory setup failed.', exc_info=fallback_e)
            setup_error = fallback_e

    if setup_error:
        _handle_raise(setup_error, 'Could not establish any writable default log directory.')

    if log_dir is None:
        raise RuntimeError('log_dir is none')
    return log_dir


def _get_default_log_file_path(app_name: str, app_author: str | None) -> Path:
    """Default rotating log file stem (no extension) inside the default log directory."""
    timestamp: str = time.strftime('%Y%m%d_%H%M%S')
    base_log_path: Path = _get_default_log_dir(app_name, app_author) / f'{DEFAULT_LOG_FILENAME_PREFIX}{timestamp}'
    logging.debug(f'Default log path stem determined: {base_log_path}')
    return base_log_path


def _configure_root_logger(
    logger_class: type[TLogger],
    min_level: int,
) -> TLogger:
    """Sets the global logger class and configures the root logger."""
    # Set the custom class globally BEFORE getting any logger instance
    logging.setLoggerClass(logger_class)

    root_logger = logging.getLogger()
    root_logger.setLevel(min_level)

    # Clear any *existing* handlers from root logger to prevent duplication
    # if setup_logging is called multiple times.
    if root_logger.hasHandlers():
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

    # Cast needed because getLogger() type hint is still logging.Logger
    return cast(TLogger, root_logger)


def _setup_rich_console_handler(
    console: Console,
    level: int,
    time_format: str,
    *,
    use_simple_tracebacks: bool,
) -> RichHandler:
    """Configures and returns the RichHandler with inline-tag translation."""
    use_rich_tb_internally = not use_simple_tracebacks
    console_handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=use_rich_tb_internally,
        tracebacks_show_locals=False,  # Controlled later via logger class attribute access
        markup=True,
        show_path=False,
        show_time=True,
        log_time_format=time_format,
        omit_repeated_times=False,
    )
    console_handler.setFormatter(RichTextFormatter('%(message)s'))
    # Prevents double printing when logger.exception manually prints rich TB.
    if use_rich_tb_internally:
        console_handler.addFilter(SuppressConsoleFilter())
    return console_handler


def _configure_loguru_console_sink(level: int, time_format: str) -> None:
    """Configures Loguru's default stderr sink (used when Rich is OFF)."""
    loguru_format = (
        f'<green>{{time:{time_format}}}</green> | '
        '<level>{level.name: <8}</level> | '
        '<cyan>{name}:{line:<4}</cyan> - '
        '<level>{message}</level>'
    )
    try:
        # Remove default sink (ID 0) before re-adding configured one
        with suppress(ValueError):
            loguru_sink_handler.remove(0)

        loguru_sink_handler.add(
            sys.stderr,
            level=level,
            format=loguru_format,
            colorize=True,
            enqueue=True,
            catch=True,
        )
    except Exception as e:
        # Use basic print as logger might not be fully setup
        print(f'ERROR: Failed Loguru console sink config: {e}', file=sys.stderr)


def _setup_loguru_file_sink(
    log_file_path: Path,
    level: int,
    file_format: str | None,
    rotation: str | int,
    retention: str | int,
    *,
    serialize: bool,
) -> None:
    """Configures the Loguru FILE sink."""
    setup_error: Exception | None = None
    err_msg = ''

    sink_kwargs: dict[str, Any] = {
        'sink': log_file_path,
        'level': level,
        'rotation': rotation,
        'retention': retention,
        'encoding': 'utf-8',
        'enqueue': True,
        'catch': True,
        'serialize': serialize,
    }
    # Only add 'format' kwarg if *not* serializing (JSON)
    if not serialize:
        sink_kwargs['format'] = file_format if file_format is not None else DEFAULT_FILE_TEXT_LOG_FORMAT

    try:
        loguru_sink_handler.add(**sink_kwargs)
    except Exception as e:
        err_msg = f"Failed to configure Loguru file sink: '{log_file_path}'"
        logging.exception(err_msg, exc_info=e)
        setup_error = e

    if setup_error:
        _handle_raise(setup_error, err_msg)


def _install_rich_traceback_hook(console: Console, *, show_locals: bool) -> None:
    """Installs the Rich traceback hook for uncaught exceptions."""
    install_rich_tracebacks(show_locals=show_locals, console=console, suppress=[])
