# ./examples/demo.py
"""
Demonstration script for the debug_ex package.

Showcases various configurations and features like:
- Rendering lists, tuples, sets, dicts and records as typed reports.
- Colors logged as hex plus decimal channels.
- Inline tags (bold, italic, size, color) on the Rich and Loguru consoles.
- Assertions and str.format style variants.
- Recording a session to a plain-text file via DebugProfile.
"""

import enum
import logging
import sys
import traceback

from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, cast

# --- Assuming debug_ex is installed in the environment (.venv) ---
try:
    from debug_ex import (
        Color,
        DebugLogger,
        DebugProfile,
        LoggerConfig,
        LoggerSetupError,
        bold,
        color_text,
        italic,
        setup_logging,
        size,
    )
except ImportError:
    print("Error: debug_ex not found in the current environment.")
    print("Please ensure the package is installed in your virtual environment")
    print("(e.g., using 'uv pip install .' or 'uv pip install -e .')")
    sys.exit(1)


# ==================================================
# Sample Data
# ==================================================
@dataclass
class Enemy:
    name: str
    health: int


class Spawn(NamedTuple):
    x: float
    y: float


class Weapon(enum.Enum):
    SWORD = "sword"
    BOW = "bow"


def get_logger(name: str) -> DebugLogger:
    """Gets a logger instance and casts it for type checking custom methods."""
    return cast(DebugLogger, logging.getLogger(name))


# ==================================================
# Demo 1: Rich Console, Collections and Tags
# ==================================================
def demo_rich_collections(profile: DebugProfile):
    """Demonstrates collection rendering and inline tags on the Rich console."""
    print("\n" + "=" * 60)
    print(" Demo 1: Rich Console, Collections ".center(60, "="))
    print("=" * 60)

    config = LoggerConfig(
        app_name="DebugExDemo",
        console_level=logging.DEBUG,
        log_file_path=False,
        profile=profile,
    )
    try:
        setup_logging(config)
    except LoggerSetupError as e:
        print(f"CRITICAL SETUP FAILED for Demo 1: {e}", file=sys.stderr)
        traceback.print_exc()
        return

    log = get_logger("demo.collections")

    print("\n-> Sequences, sets and mappings:")
    log.info([1, 2, 3])
    log.info(("north", "south"), newline=False)
    log.info({3, 1, 2})
    log.info({"gold": 120, "wood": 40})

    print("\n-> Records and enums:")
    log.debug([Enemy("orc", 30), Enemy("troll", 90)])
    log.debug([Spawn(0.0, 1.5)], newline=False)
    log.debug([Weapon.SWORD, Weapon.BOW])

    print("\n-> Colors and inline tags:")
    log.info(Color(1.0, 0.5, 0.0))
    log.info(f"{bold('Bold')}, {italic('italic')} and {color_text('red', Color(1, 0, 0))} text")
    log.warning(f"{size('Large', 20)} warnings drop the size tag on the console")

    print("\n-> Context, assertions and format variants:")
    player = Enemy("player", 100)
    log.info("Attached context is stored on the record", context=player)
    log.assert_that(player.health > 200, "Player health below cap", context=player)
    log.info_format("Wave {0} of {1}", 3, 10)
    log.error_format("Missing asset '{0}'", "trees.png")

    try:
        _ = {"a": 1}["b"]
    except KeyError:
        log.exception("Lookup failed.")


# ==================================================
# Demo 2: Loguru Console and Recording
# ==================================================
def demo_loguru_recording(profile: DebugProfile):
    """Demonstrates the Loguru console and saving a recorded session."""
    print("\n" + "=" * 60)
    print(" Demo 2: Loguru Console, Recording ".center(60, "="))
    print("=" * 60)

    config = LoggerConfig(
        app_name="DebugExDemo",
        console_level=logging.INFO,
        use_rich_console=False,
        log_file_path="logs/demo_debug_ex.log",
        log_file_serialize=False,
        profile=profile,
    )
    try:
        file_enabled, log_path = setup_logging(config)
        print(f"  File logging enabled: {file_enabled}")
        if log_path:
            print(f"  Log file path: {log_path}")
    except (LoggerSetupError, OSError) as e:
        print(f"CRITICAL SETUP FAILED for Demo 2: {e}", file=sys.stderr)
        traceback.print_exc()
        return

    log = get_logger("demo.recording")

    log.record_start()
    log.info(f"{bold('Recorded')} messages are saved without tags")
    log.warning({"ammo": 0, "clips": 2})
    log.error([Spawn(1.0, 2.0)])
    saved = log.record_stop()
    print(f"\n  Recording saved to: {saved}")


# ==================================================
# Main Execution Logic
# ==================================================
if __name__ == "__main__":
    print("=" * 70)
    print(" DebugEx Demo Script ".center(70, "="))
    print("=" * 70)

    record_dir = Path("logs") / "recordings"
    record_dir.mkdir(parents=True, exist_ok=True)
    demo_profile = DebugProfile(log_save_path=record_dir, dictionary_key="#E0A000")

    demo_rich_collections(demo_profile)

    print("\n>>> Press Enter to continue to Demo 2 (Loguru Console, Recording)...")
    input()

    demo_loguru_recording(demo_profile)

    print("\n" + "=" * 70)
    print(" Demo Finished ".center(70, "="))
    print("=" * 70)
