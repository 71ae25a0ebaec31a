#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
import logging
import pathlib

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from debug_ex import DebugLogger, DebugProfile


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def reset_logger_state():
    """Restore DebugLogger class-level state between tests."""
    saved = (
        DebugLogger._profile_cls,
        DebugLogger._recorder_cls,
        DebugLogger._use_rich_console_cls,
        DebugLogger._use_simple_tracebacks_cls,
    )
    # Plain stdlib traceback handling keeps test output quiet
    DebugLogger._use_rich_console_cls = False
    yield
    if DebugLogger._recorder_cls is not None:
        DebugLogger._recorder_cls.discard()
    (
        DebugLogger._profile_cls,
        DebugLogger._recorder_cls,
        DebugLogger._use_rich_console_cls,
        DebugLogger._use_simple_tracebacks_cls,
    ) = saved


@pytest.fixture
def save_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """Existing directory for saved recordings."""
    path = tmp_path / "Logs"
    path.mkdir()
    return path


@pytest.fixture
def profile(save_dir: pathlib.Path) -> DebugProfile:
    """Profile writing recordings to a temporary directory."""
    return DebugProfile(log_save_path=save_dir)


@pytest.fixture
def debug_logger(caplog):
    """A standalone DebugLogger whose records are captured by caplog."""
    logger = DebugLogger("debug_ex.tests")
    logger.setLevel(logging.DEBUG)
    logger.addHandler(caplog.handler)
    yield logger
    logger.removeHandler(caplog.handler)
