# logger.py
"""
Main DebugLogger implementation using LoggerConfig for setup.

Provides the user-facing logger class and setup function. Collections and
colors passed as messages are rendered by the structured formatter; plain
messages behave exactly as with the standard library.
"""

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 [Yanai Klugman/Kardome]

# =============================================================================
# Imports
# =============================================================================
from __future__ import annotations

import logging
import os
import sys

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from rich.console import Console
from rich.traceback import Traceback

# --- Internal Imports ---
from .formatter import DEFAULT_KEY_HEX, DEFAULT_VALUE_HEX, format_value
from .logger_internals import (
    ASSERT_LEVEL,
    DEFAULT_APP_AUTHOR,
    DEFAULT_APP_NAME,
    DEFAULT_CONSOLE_TIME_FORMAT,
    ExcInfoInput,
    # Types
    ExcInfoType,
    ExtraData,
    # Exceptions
    LoggerSetupError,
    LoguruInterceptHandler,
    _configure_loguru_console_sink,
    # Helpers
    _configure_root_logger,
    _get_default_log_file_path,
    _install_rich_traceback_hook,
    _setup_loguru_file_sink,
    _setup_rich_console_handler,
    loguru_sink_handler,
    register_assert_level,
)
from .profile import DebugProfile
from .recorder import LogRecorder

register_assert_level()


# =============================================================================
# Configuration
# =============================================================================
@dataclass
class LoggerConfig:
    """
    Configuration settings for the DebugLogger.

    Attributes
    ----------
    app_name : str
        Application name, used for default log path generation via platformdirs.
        (default: "DebugEx").
    app_author : str | None
        Application author, used for default log path generation via platformdirs.
        Set to None to omit author directory level. (default: None).
    console_level : int
        Minimum level for console output (default: logging.INFO).
    use_rich_console : bool
        If True, use RichHandler for console (inline tags rendered as Rich
        styles); otherwise, use Loguru's console sink (default: True).
    use_simple_tracebacks : bool
        If True, use basic Python traceback on console. If False (default),
        use enhanced traceback (Rich if Rich Console is ON, Loguru otherwise).
    console_time_format : str
        Time format string for console logs (default: '[%X]').
    show_locals_on_exception : bool
        Whether Rich tracebacks show local variables (default: False).
    log_file_path : str | Path | Literal[False] | None
        Path for the rotating log file. None auto-generates, False disables
        file logging (default: None).
    file_level : int
        Minimum level for file output (default: logging.DEBUG).
    log_file_format : str | None
        Loguru format string for text file logs (used if `serialize=False`).
        None uses internal default (default: None).
    log_file_rotation : str | int
        Loguru rotation setting (default: '10 MB').
    log_file_retention : str | int
        Loguru retention setting (default: '7 days').
    log_file_serialize : bool
        If True, logs to file in JSON format (default: True).
    profile : DebugProfile | None
        Marker colors and recording settings. Mapping messages and log
        recording are unavailable without one (default: None).
    """

    app_name: str = DEFAULT_APP_NAME
    app_author: str | None = DEFAULT_APP_AUTHOR
    # Console
    console_level: int = logging.INFO
    use_rich_console: bool = True
    use_simple_tracebacks: bool = False
    console_time_format: str = DEFAULT_CONSOLE_TIME_FORMAT
    show_locals_on_exception: bool = False
    # File
    log_file_path: str | Path | Literal[False] | None = None
    file_level: int = logging.DEBUG
    log_file_format: str | None = None
    log_file_rotation: str | int = '10 MB'
    log_file_retention: str | int = '7 days'
    log_file_serialize: bool = True
    # Formatter / recorder
    profile: DebugProfile | None = None

    def __post_init__(self):
        """Validate configuration settings after initialization."""
        self._validate_level('console_level', logging.INFO)
        self._validate_level('file_level', logging.DEBUG)

    def _validate_level(self, attr_name: str, default_level: int) -> None:
        """Helper to validate a logging level attribute; names are converted to ints."""
        level = getattr(self, attr_name)
        resolved: int | None = None

        if isinstance(level, str):
            candidate = logging.getLevelName(level.upper())
            if isinstance(candidate, int):
                resolved = candidate
        elif isinstance(level, int) and not isinstance(level, bool):
            resolved = level

        if resolved is None:
            logging.warning(
                f"Invalid {attr_name} '{level}'. "
                f'Using default {logging.getLevelName(default_level)}.',
            )
            resolved = default_level
        setattr(self, attr_name, resolved)


# --- Global Rich Console Instance ---
_rich_console = Console(stderr=True)


# =============================================================================
# Debug Logger Class
# =============================================================================
class DebugLogger(logging.Logger):
    """
    Logger whose messages may also be sequences, mappings, sets or colors.

    Collections are rendered into typed, index-annotated reports; colors are
    rendered as a hex code plus decimal channels. Every logging method also
    accepts ``context`` (stored as ``record.context``) and ``newline``
    (line break after each rendered element). Obtain instances via
    ``logging.getLogger(__name__)`` after calling ``setup_logging``.
    """

    # --- Class State Set by setup_logging ---
    # Assumes setup_logging is called once per process.
    _show_locals_in_traceback_cls: bool = False
    _use_rich_console_cls: bool = True
    _use_simple_tracebacks_cls: bool = False
    _profile_cls: DebugProfile | None = None
    _recorder_cls: LogRecorder | None = None

    # --- Profile ---
    @classmethod
    def use_profile(cls, profile: DebugProfile | None) -> None:
        """Set the profile shared by every DebugLogger (None clears it)."""
        cls._profile_cls = profile
        if cls._recorder_cls is not None and not cls._recorder_cls.is_recording:
            cls._recorder_cls = None

    @property
    def profile(self) -> DebugProfile | None:
        return DebugLogger._profile_cls

    # --- Internal Helpers ---
    def _print_rich_traceback(
        self: DebugLogger,
        exc_info: ExcInfoType,
        *,
        show_locals: bool,
    ) -> None:
        """Internal helper to format and print a Rich Traceback."""
        exc_type, exc_value, exc_traceback = exc_info
        rich_tb: Traceback = Traceback.from_exception(
            exc_type=exc_type,
            exc_value=exc_value,
            traceback=exc_traceback,
            show_locals=show_locals,
            word_wrap=True,
        )
        _rich_console.print(rich_tb)

    def _render(self: DebugLogger, msg: object, *, newline: bool = True) -> object:
        """Format ``msg`` with the active profile's marker colors (defaults without one)."""
        profile = DebugLogger._profile_cls
        return format_value(
            msg,
            newline=newline,
            key_color=profile.dict_key_color if profile else DEFAULT_KEY_HEX,
            value_color=profile.dict_value_color if profile else DEFAULT_VALUE_HEX,
        )

    def _log_value(
        self: DebugLogger,
        level: int,
        msg: object,
        args: tuple[object, ...],
        *,
        context: object = None,
        newline: bool = True,
        extra: ExtraData | None = None,
        exc_info: ExcInfoInput = None,
        stack_info: bool = False,
        stacklevel: int = 1,
    ) -> None:
        """Render ``msg`` through the structured formatter and log it."""
        if not self.isEnabledFor(level):
            return

        profile = DebugLogger._profile_cls
        if isinstance(msg, Mapping) and profile is None:
            # Marker colors come from the profile; abort rather than guess
            self._log(
                logging.ERROR,
                'DebugEx: no profile configured; cannot format mapping message.',
                (),
                stacklevel=stacklevel + 1,
            )
            return

        rendered = self._render(msg, newline=newline)
        log_extra = dict(extra) if extra else {}
        if context is not None:
            log_extra['context'] = context

        self._log(
            level,
            rendered,
            args,
            exc_info=exc_info,
            extra=log_extra or None,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )

    # Explicit per-level methods keep the standard signatures visible to type checkers.
    def debug(
        self: DebugLogger,
        msg: object,
        *args: object,
        context: object = None,
        newline: bool = True,
        extra: ExtraData | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        exc_info: ExcInfoInput = None,
    ) -> None:
        """Logs DEBUG message. Collections and colors are rendered; `context` is attached to the record."""
        self._log_value(
            logging.DEBUG,
            msg,
            args,
            context=context,
            newline=newline,
            extra=extra,
            exc_info=exc_info,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )

    def info(
        self: DebugLogger,
        msg: object,
        *args: object,
        context: object = None,
        newline: bool = True,
        extra: ExtraData | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        exc_info: ExcInfoInput = None,
    ) -> None:
        """Logs INFO message. Collections and colors are rendered; `context` is attached to the record."""
        self._log_value(
            logging.INFO,
            msg,
            args,
            context=context,
            newline=newline,
            extra=extra,
            exc_info=exc_info,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )

    def warning(
        self: DebugLogger,
        msg: object,
        *args: object,
        context: object = None,
        newline: bool = True,
        extra: ExtraData | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        exc_info: ExcInfoInput = None,
    ) -> None:
        """Logs WARNING message. Collections and colors are rendered; `context` is attached to the record."""
        self._log_value(
            logging.WARNING,
            msg,
            args,
            context=context,
            newline=newline,
            extra=extra,
            exc_info=exc_info,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )

    def error(
        self: DebugLogger,
        msg: object,
        *args: object,
        context: object = None,
        newline: bool = True,
        extra: ExtraData | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        exc_info: ExcInfoInput = None,
    ) -> None:
        """Logs ERROR message. Collections and colors are rendered; `context` is attached to the record."""
        self._log_value(
            logging.ERROR,
            msg,
            args,
            context=context,
            newline=newline,
            extra=extra,
            exc_info=exc_info,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )

    def assertion(
        self: DebugLogger,
        msg: object,
        *args: object,
        context: object = None,
        newline: bool = True,
        extra: ExtraData | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
    ) -> None:
        """Logs ASSERT message (between ERROR and CRITICAL)."""
        self._log_value(
            ASSERT_LEVEL,
            msg,
            args,
            context=context,
            newline=newline,
            extra=extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )

    def critical(
        self: DebugLogger,
        msg: object,
        *args: object,
        context: object = None,
        newline: bool = True,
        extra: ExtraData | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        exc_info: ExcInfoInput = None,
    ) -> None:
        """Logs CRITICAL message. Collections and colors are rendered; `context` is attached to the record."""
        self._log_value(
            logging.CRITICAL,
            msg,
            args,
            context=context,
            newline=newline,
            extra=extra,
            exc_info=exc_info,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )

    # --- Assertions ---
    def assert_that(
        self: DebugLogger,
        condition: object,
        msg: object = 'Assertion failed',
        *args: object,
        context: object = None,
        newline: bool = True,
        stacklevel: int = 1,
    ) -> bool:
        """
        Logs an ASSERT message when ``condition`` is falsy.

        Returns
        -------
        bool
            The truth value of ``condition``, so callers can branch on it.
        """
        if condition:
            return True
        self.assertion(msg, *args, context=context, newline=newline, stacklevel=stacklevel + 1)
        return False

    # --- str.format Variants ---
    def info_format(self: DebugLogger, template: str, *args: object, context: object = None) -> None:
        """Logs INFO using a ``str.format`` template, e.g. ``'{0} of {1}'``."""
        self.info(template.format(*args), context=context, stacklevel=2)

    def warning_format(self: DebugLogger, template: str, *args: object, context: object = None) -> None:
        """Logs WARNING using a ``str.format`` template."""
        self.warning(template.format(*args), context=context, stacklevel=2)

    def error_format(self: DebugLogger, template: str, *args: object, context: object = None) -> None:
        """Logs ERROR using a ``str.format`` template."""
        self.error(template.format(*args), context=context, stacklevel=2)

    def assert_format(
        self: DebugLogger,
        condition: object,
        template: str,
        *args: object,
        context: object = None,
    ) -> bool:
        """Logs ASSERT using a ``str.format`` template when ``condition`` is falsy."""
        if condition:
            return True
        self.assertion(template.format(*args), context=context, stacklevel=2)
        return False

    # --- Exceptions ---
    def exception(
        self: DebugLogger,
        msg: object,
        *args: object,
        exc_info: ExcInfoInput = True,
        context: object = None,
        extra: ExtraData | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        show_locals: bool | None = None,
    ) -> None:
        """
        Logs ERROR message including exception information. Supports formatting args.

        Console traceback format depends on config flags. File logs always include
        full traceback via Loguru.

        Parameters
        ----------
        msg : object
            Log message format string or object.
        *args : object
            Arguments merged into msg using string formatting.
        exc_info : ExcInfoInput, optional
            Exception info source (default: True).
        context : object, optional
            Object the message applies to; stored as ``record.context``.
        extra : ExtraData | None, optional
            Dictionary of extra data.
        stack_info : bool, optional
            Include stack info (default: False).
        stacklevel : int, optional
            Adjust stack frame level (default: 1).
        show_locals : bool | None, optional
            Overrides config `show_locals_on_exception` for console Rich TBs.
            If None (default), config setting is used. Ignored otherwise.
        """
        should_print_manual_rich_tb = (
            DebugLogger._use_rich_console_cls and not DebugLogger._use_simple_tracebacks_cls
        )

        # --- Determine Exception Info ---
        actual_exc_info: ExcInfoType | tuple[None, None, None] = (None, None, None)
        if exc_info is True:
            current_exc = sys.exc_info()
            actual_exc_info = current_exc if current_exc[0] else (None, None, None)  # type: ignore
        elif isinstance(exc_info, BaseException):
            actual_exc_info = (type(exc_info), exc_info, exc_info.__traceback__)  # type: ignore
        elif isinstance(exc_info, tuple):
            if len(exc_info) == 3 and (
                exc_info[0] is None
                or (isinstance(exc_info[0], type) and issubclass(exc_info[0], BaseException))
            ):
                actual_exc_info = exc_info  # type: ignore
            else:
                self.warning(f'Invalid tuple for exc_info: {exc_info}. Ignoring.')
        elif exc_info not in (False, None):
            self.warning(f'Invalid type for exc_info: {type(exc_info)}. Ignoring.')

        has_exception = actual_exc_info[0] is not None
        log_extra = extra.copy() if extra else {}
        if context is not None:
            log_extra['context'] = context

        # --- Suppress Console Handler (if needed) ---
        log_extra['suppress_console'] = has_exception and should_print_manual_rich_tb

        self._log(
            logging.ERROR,
            self._render(msg),
            args,
            exc_info=actual_exc_info if has_exception else None,
            extra=log_extra,
            stack_info=stack_info,
            stacklevel=stacklevel + 1,
        )

        # --- Manual Rich Traceback Print (if needed) ---
        if has_exception and should_print_manual_rich_tb:
            show_locals_final = (
                show_locals if show_locals is not None else DebugLogger._show_locals_in_traceback_cls
            )
            self._print_rich_traceback(actual_exc_info, show_locals=show_locals_final)  # type: ignore

    def log_exception(self: DebugLogger, error: BaseException, *, context: object = None) -> None:
        """Logs ``error`` with its own traceback, outside of an ``except`` block."""
        self.exception(
            str(error) or type(error).__name__,
            exc_info=error,
            context=context,
            stacklevel=2,
        )

    # --- Recording ---
    def record_start(self: DebugLogger) -> bool:
        """
        Start capturing every record that reaches the root logger.

        Returns False (after logging an error) when no profile is configured.
        """
        profile = DebugLogger._profile_cls
        if profile is None:
            self.error('DebugEx: no profile configured; log recording not started.')
            return False
        current = DebugLogger._recorder_cls
        if current is None or current.profile is not profile:
            if current is not None and current.is_recording:
                # Profile changed mid-recording: save what was captured under the old profile
                saved = current.stop()
                self.info(f'DebugEx: profile changed; previous recording saved to {saved}')
            DebugLogger._recorder_cls = LogRecorder(profile)
        return DebugLogger._recorder_cls.start()

    def record_stop(self: DebugLogger) -> Path | None:
        """Stop capturing and save the transcript; returns the file written, if any."""
        recorder = DebugLogger._recorder_cls
        if recorder is None:
            self.warning('DebugEx: log recording was not started; nothing to save.')
            return None
        return recorder.stop()


# =============================================================================
# Main Setup Function
# =============================================================================
def setup_logging(config: LoggerConfig | None = None) -> tuple[bool, Path | None]:
    """
    Initializes and configures the root logger based on LoggerConfig.

    Sets the global logger class to DebugLogger, so subsequent calls to
    `logging.getLogger(name)` will return configured DebugLogger instances,
    and activates ``config.profile``.

    Parameters
    ----------
    config : LoggerConfig | None
        The configuration object specifying logger settings. None uses defaults.

    Returns
    -------
    tuple[bool, Path | None]
        A tuple containing:
            - A boolean indicating if file logging was successfully enabled.
            - The actual Path object used for file logging, or None.

    Raises
    ------
    LoggerSetupError
        If critical errors occur during setup (e.g., directory permissions).
    """
    effective_config = config if config is not None else LoggerConfig()

    def _raise_critical(msg: str, exc: Exception, *, re_raise: bool = False) -> None:
        logging.critical(f'LOGGER SETUP FAILURE: {msg}', exc_info=exc)
        if re_raise:
            raise exc
        raise LoggerSetupError(msg) from exc

    actual_log_path: Path | None = None
    file_logging_enabled = False
    file_logging_error_reason: str | None = None
    root_logger: DebugLogger | None = None

    try:
        # --- Install Uncaught Exception Hook ---
        if effective_config.use_rich_console and not effective_config.use_simple_tracebacks:
            try:
                _install_rich_traceback_hook(
                    _rich_console,
                    show_locals=effective_config.show_locals_on_exception,
                )
            except Exception as hook_e:
                logging.warning(f'Failed to install Rich traceback hook: {hook_e}', exc_info=hook_e)

        # --- File Path Determination ---
        if effective_config.log_file_path is False:
            logging.debug('File logging explicitly disabled by config.')
            file_logging_error_reason = 'Explicitly disabled'

        elif effective_config.log_file_path is None:
            try:
                base_log_path = _get_default_log_file_path(
                    effective_config.app_name,
                    effective_config.app_author,
                )
                default_suffix = '.jsonl' if effective_config.log_file_serialize else '.log'
                actual_log_path = base_log_path.with_suffix(default_suffix)
                actual_log_path.parent.mkdir(parents=True, exist_ok=True)

            except LoggerSetupError as e_path:
                file_logging_error_reason = f'{e_path.args[0] if e_path.args else e_path}'
                logging.exception(f'Config Error: {file_logging_error_reason}. File logging disabled.')
            except Exception as e_path_unexp:
                file_logging_error_reason = 'Unexpected error generating default log path'
                logging.exception(
                    f'{file_logging_error_reason}. File logging disabled.', exc_info=e_path_unexp,
                )

        elif isinstance(effective_config.log_file_path, (str, Path)):
            user_path = Path(effective_config.log_file_path).resolve()
            try:
                user_path.parent.mkdir(parents=True, exist_ok=True)
                if not os.access(str(user_path.parent), os.W_OK):
                    raise PermissionError(f'No write permission for log directory: {user_path.parent}')
                actual_log_path = user_path
            except PermissionError as e_perm:
                file_logging_error_reason = f'Permission denied for log directory: {user_path.parent}'
                logging.exception(
                    f'Config Error: {file_logging_error_reason}. File logging disabled.', exc_info=e_perm,
                )
            except Exception as e_user_path:
                file_logging_error_reason = f"Error accessing specified log path '{user_path}'"
                logging.exception(
                    f'{file_logging_error_reason}. File logging disabled.', exc_info=e_user_path,
                )

        else:
            file_logging_error_reason = (
                f'Invalid log_file_path type: {type(effective_config.log_file_path)}.'
            )
            logging.error(f'Config Error: {file_logging_error_reason}. File logging disabled.')

        if file_logging_error_reason and actual_log_path is not None:
            actual_log_path = None

        # --- Determine Minimum Processing Level & Configure Root Logger ---
        min_level = effective_config.console_level
        if actual_log_path:
            min_level = min(min_level, effective_config.file_level)

        root_logger = _configure_root_logger(DebugLogger, min_level)

        # --- Set Class Variables on DebugLogger ---
        DebugLogger._show_locals_in_traceback_cls = effective_config.show_locals_on_exception
        DebugLogger._use_rich_console_cls = effective_config.use_rich_console
        DebugLogger._use_simple_tracebacks_cls = effective_config.use_simple_tracebacks
        DebugLogger.use_profile(effective_config.profile)

        # --- Setup Loguru Sinks & Interception ---
        loguru_sink_handler.remove()
        register_assert_level()
        if root_logger:
            root_logger.addHandler(LoguruInterceptHandler())
        else:
            _raise_critical(
                'Root logger configuration failed unexpectedly.', RuntimeError('Root logger is None'),
            )

        # --- Configure Console Output ---
        if effective_config.use_rich_console:
            rich_handler = _setup_rich_console_handler(
                _rich_console,
                effective_config.console_level,
                effective_config.console_time_format,
                use_simple_tracebacks=effective_config.use_simple_tracebacks,
            )
            rich_handler.tracebacks_show_locals = (
                effective_config.show_locals_on_exception and not effective_config.use_simple_tracebacks
            )
            if root_logger:
                root_logger.addHandler(rich_handler)
        else:
            _configure_loguru_console_sink(
                effective_config.console_level,
                effective_config.console_time_format,
            )

        # --- Configure File Sink (Via Loguru) ---
        if actual_log_path:
            try:
                _setup_loguru_file_sink(
                    log_file_path=actual_log_path,
                    level=effective_config.file_level,
                    file_format=effective_config.log_file_format,
                    rotation=effective_config.log_file_rotation,
                    retention=effective_config.log_file_retention,
                    serialize=effective_config.log_file_serialize,
                )
                file_logging_enabled = True
            except LoggerSetupError as e_sink:
                file_logging_error_reason = (
                    e_sink.args[0] if e_sink.args else 'Loguru file sink configuration failed'
                )
                logging.exception(f'{file_logging_error_reason}. File logging disabled.', exc_info=e_sink)
            except Exception as e_sink_unexp:
                file_logging_error_reason = 'Unexpected error setting up file sink'
                logging.exception(
                    f'{file_logging_error_reason}. File logging disabled.', exc_info=e_sink_unexp,
                )
            if not file_logging_enabled:
                actual_log_path = None

        # --- Final Summary Log ---
        status = 'ENABLED' if file_logging_enabled else 'DISABLED'
        level_name = logging.getLevelName(effective_config.file_level)
        path_info = (
            f'Path: {actual_log_path}'
            if actual_log_path
            else f'Reason: {file_logging_error_reason or "N/A"}'
        )
        console_type = 'Rich' if effective_config.use_rich_console else 'Loguru StdErr'
        profile_info = 'loaded' if effective_config.profile is not None else 'none'

        summary_log = logging.getLogger('debug_ex.setup')
        summary_log.info(
            f'Logging Setup: Console={console_type}@{logging.getLevelName(effective_config.console_level)} | '
            f'File={status}@{level_name} {path_info} | Profile={profile_info}',
        )

    # --- Critical Error Handling ---
    except LoggerSetupError as critical_error:
        _raise_critical(f'CRITICAL LOGGER SETUP FAILED: {critical_error}', critical_error, re_raise=True)
    except Exception as unexpected_error:
        _raise_critical('UNEXPECTED CRITICAL LOGGER SETUP ERROR', unexpected_error)
    else:
        return file_logging_enabled, actual_log_path
    return False, None
