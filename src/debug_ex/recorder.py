# recorder.py
"""
Log recording: capture every record between ``start`` and ``stop`` and save
the plain-text transcript to the profile's save directory.
"""

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 [Yanai Klugman/Kardome]

# =============================================================================
# Imports
# =============================================================================
from __future__ import annotations

import atexit
import logging
import os
import tempfile
import threading
import time
import traceback

from contextlib import suppress
from pathlib import Path

from .logger_internals import (
    ASSERT_LEVEL,
    RECORD_FILENAME_SUFFIX,
    RECORD_FILENAME_TIME_FORMAT,
    LoggerSetupError,
)
from .markup import strip_markup
from .profile import DebugProfile

_log = logging.getLogger(__name__)


# =============================================================================
# Severity Names
# =============================================================================
def severity_name(record: logging.LogRecord) -> str:
    """Host-style severity label for a record (Log, Warning, Error, Assert, Exception, Critical)."""
    if record.exc_info and record.exc_info[0] is not None:
        return 'Exception'
    if record.levelno >= logging.CRITICAL:
        return 'Critical'
    if record.levelno >= ASSERT_LEVEL:
        return 'Assert'
    if record.levelno >= logging.ERROR:
        return 'Error'
    if record.levelno >= logging.WARNING:
        return 'Warning'
    return 'Log'


def _stack_trace_text(record: logging.LogRecord) -> str:
    """Formatted exception, else stack_info, else the one-line call site."""
    if record.exc_info and record.exc_info[0] is not None:
        return ''.join(traceback.format_exception(*record.exc_info)).rstrip('\n')
    if record.stack_info:
        return record.stack_info.rstrip('\n')
    return f'File "{record.pathname}", line {record.lineno}, in {record.funcName}'


# =============================================================================
# Handler
# =============================================================================
class RecorderHandler(logging.Handler):
    """Forwards each record to its owning :class:`LogRecorder`."""

    def __init__(self, recorder: LogRecorder) -> None:
        super().__init__(level=logging.NOTSET)
        self._recorder = recorder

    def emit(self, record: logging.LogRecord) -> None:
        try:
            stack = _stack_trace_text(record) if self._recorder.profile.save_stack_trace else None
            self._recorder.append(severity_name(record), record.getMessage(), stack)
        except Exception:
            self.handleError(record)


# =============================================================================
# Recorder
# =============================================================================
class LogRecorder:
    """
    Accumulates log output between :meth:`start` and :meth:`stop`.

    The buffer is guarded by a lock because logging handlers may be called
    from any thread. Markup is kept in the buffer and stripped only when the
    transcript is written.

    Parameters
    ----------
    profile : DebugProfile | None
        Source of the save directory and stack-trace setting. Starting
        without a profile logs an error and does nothing.
    target : logging.Logger | None, optional
        Logger to capture from. Defaults to the root logger.

    Examples
    --------
    >>> recorder = LogRecorder(DebugProfile(log_save_path='Logs'))
    >>> recorder.start()  # doctest: +SKIP
    >>> logging.getLogger('game').warning('low health')  # doctest: +SKIP
    >>> recorder.stop()  # doctest: +SKIP
    PosixPath('.../Logs/20251019_1432_editor.txt')
    """

    def __init__(self, profile: DebugProfile | None, target: logging.Logger | None = None) -> None:
        self.profile = profile
        self.target = target if target is not None else logging.getLogger()
        self._buffer: list[str] = []
        self._lock = threading.Lock()
        self._handler: RecorderHandler | None = None

    @property
    def is_recording(self) -> bool:
        return self._handler is not None

    @property
    def text(self) -> str:
        """Current transcript, markup included."""
        with self._lock:
            return ''.join(self._buffer)

    def start(self) -> bool:
        """Attach to the target logger. Returns False when no profile is configured."""
        if self.profile is None:
            _log.error('DebugEx: no profile configured; log recording not started.')
            return False
        if self._handler is not None:
            return True

        _log.debug(f'Log recording started on logger {self.target.name!r}')
        self._handler = RecorderHandler(self)
        self.target.addHandler(self._handler)
        atexit.register(self.discard)
        return True

    def append(self, severity: str, message: str, stack_trace: str | None = None) -> None:
        """Add one ``[severity]`` block to the transcript."""
        block = f'[{severity}]\n{message}\n\n'
        if stack_trace is not None:
            block += f'{stack_trace}\n'
        with self._lock:
            self._buffer.append(block)

    def _detach(self) -> None:
        if self._handler is not None:
            self.target.removeHandler(self._handler)
            self._handler = None
        atexit.unregister(self.discard)

    def discard(self) -> None:
        """Stop recording without writing anything."""
        self._detach()
        with self._lock:
            self._buffer.clear()

    def stop(self) -> Path | None:
        """
        Detach and write the transcript, markup stripped.

        Returns
        -------
        Path | None
            The written file, or None when recording was not active, the
            save directory is missing, or the write failed. Failures are
            logged at error level.
        """
        if self._handler is None:
            _log.warning('DebugEx: log recording was not started; nothing to save.')
            return None
        self._detach()

        with self._lock:
            content = ''.join(self._buffer)
            self._buffer.clear()

        try:
            save_dir = self.profile.resolve_save_dir()  # type: ignore[union-attr]
        except LoggerSetupError as e:
            _log.error(f'DebugEx: could not resolve the log save directory: {e}')
            return None
        if not save_dir.is_dir():
            _log.error(f'DebugEx: log save directory does not exist: {save_dir}')
            return None

        file_path = save_dir / f'{time.strftime(RECORD_FILENAME_TIME_FORMAT)}{RECORD_FILENAME_SUFFIX}'
        try:
            _write_atomic(file_path, strip_markup(content))
        except OSError as e:
            _log.error(f"DebugEx: failed to write log file '{file_path}': {e}")
            return None

        _log.debug(f'Log recording saved to {file_path}')
        return file_path


def _write_atomic(path: Path, content: str) -> None:
    """Write ``content`` to a sibling temp file, then rename it over ``path``."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f'.{path.stem}.', suffix='.tmp')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as tmp_file:
            tmp_file.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        with suppress(OSError):
            os.unlink(tmp_name)
        raise
