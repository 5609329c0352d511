"""
Main entry point for the DirSyncer command line.

This module handles:
- Command line argument parsing
- Logging configuration
- Settings loading
- Plan rendering and confirmation
- Exit codes
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass, replace
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from dirsyncer import __version__
from dirsyncer.core.exceptions import MissingSourceFilesError
from dirsyncer.core.folder.sync import FolderSync
from dirsyncer.core.models import (
    ErrorOccurredEvent,
    FileSyncedEvent,
    SyncConfiguration,
    SyncMode,
    SyncPlan,
    SyncType,
)
from dirsyncer.services.settings import LOG_LEVELS, SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "dirsyncer"

EXIT_OK = 0
EXIT_DECLINED = 1
EXIT_FAILED = 2

if os.name == 'nt':
    LOGS_DIR = Path(os.environ.get('LOCALAPPDATA', os.path.expanduser('~'))) / 'DirSyncer' / 'logs'
else:
    LOGS_DIR = Path(os.environ.get('XDG_STATE_HOME', os.path.expanduser('~/.local/state'))) / 'dirsyncer' / 'logs'


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class CommandLineArgs:
    """Parsed command line arguments."""
    source: str
    target: str
    mode: Optional[SyncMode] = None
    verify: Optional[bool] = None
    auto_sync: bool = False
    config_file: Optional[str] = None
    log_level: Optional[str] = None
    debug: bool = False


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Log records go to stderr so they never mix with the plan listing
    printed on stdout.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(
            log_file,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)
        root_logger.setLevel(logging.DEBUG)

    return root_logger


# =============================================================================
# Command Line Parsing
# =============================================================================

def _parse_mode(value: str) -> SyncMode:
    try:
        return SyncMode.from_string(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def parse_arguments(args: Optional[List[str]] = None) -> CommandLineArgs:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Synchronize new and newer files between two directories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  one-way   Only files in SOURCE are synced to TARGET.
  dual      SOURCE and TARGET both act as source and target.

Examples:
  %(prog)s photos backup/photos              Review, confirm, then sync
  %(prog)s a b --mode dual --auto-sync       Exchange updates without asking
  %(prog)s src dst --verify                  Compare every copy byte for byte
        """
    )

    parser.add_argument(
        'source',
        help='The source directory that you want to sync'
    )
    parser.add_argument(
        'target',
        help='The target directory that you want to sync to'
    )

    parser.add_argument(
        '--mode',
        type=_parse_mode,
        default=None,
        metavar='{one-way,dual}',
        help='The sync mode to use (default: one-way)'
    )
    parser.add_argument(
        '--verify',
        action=argparse.BooleanOptionalAction,
        default=None,
        help='Verify each copied file against its source'
    )
    parser.add_argument(
        '-y', '--auto-sync',
        action='store_true',
        help='Sync without asking for confirmation'
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Settings file path'
    )

    # Logging
    parser.add_argument(
        '--log-level',
        choices=LOG_LEVELS,
        type=str.upper,
        default=None,
        help='Log level'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Also write a debug log file'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    parsed = parser.parse_args(args)

    return CommandLineArgs(
        source=parsed.source,
        target=parsed.target,
        mode=parsed.mode,
        verify=parsed.verify,
        auto_sync=parsed.auto_sync,
        config_file=parsed.config,
        log_level=parsed.log_level,
        debug=parsed.debug,
    )


def build_configuration(args: CommandLineArgs, settings_manager: SettingsManager) -> SyncConfiguration:
    """Merge command line flags over the loaded settings."""
    settings = settings_manager.settings
    config = settings.to_configuration(args.source, args.target)

    return replace(
        config,
        mode=args.mode or config.mode,
        verify_after_copy=config.verify_after_copy if args.verify is None else args.verify,
    )


# =============================================================================
# Plan Rendering
# =============================================================================

def _directory_tag(directory: str, config: SyncConfiguration) -> str:
    if directory == config.source_root:
        return "{A}"
    if directory == config.target_root:
        return "{B}"
    raise ValueError(
        f"The value of directory should be {config.source_root} or {config.target_root}."
    )


def print_plan(plan: SyncPlan, config: SyncConfiguration) -> None:
    """Print the roots, every planned action and the totals."""
    print(f"{{A}}: {config.source_root}")
    print(f"{{B}}: {config.target_root}")

    print("[")
    for i, action in enumerate(plan, start=1):
        kind = "copy" if action.kind == SyncType.COPY else "update"
        print(
            f"    [{i}] {_directory_tag(action.source_root, config)} > "
            f"{_directory_tag(action.target_root, config)} : {action.relative_path} ({kind})"
        )
    print("]")

    print(f"Copy: {plan.copy_count}    Update: {plan.update_count}")


def prompt_confirmation(read_input: Callable[[str], str] = input) -> bool:
    """Ask whether the plan should be applied."""
    try:
        answer = read_input("Do you want to apply these syncing actions?(y/n): ")
    except EOFError:
        return False
    return answer.strip().lower() == "y"


# =============================================================================
# Main Function
# =============================================================================

def run(
    args: CommandLineArgs,
    settings_manager: Optional[SettingsManager] = None,
    read_input: Callable[[str], str] = input
) -> int:
    """
    Plan, confirm and execute a synchronization.

    Returns:
        Exit code
    """
    if settings_manager is None:
        settings_manager = SettingsManager(Path(args.config_file) if args.config_file else None)
    config = build_configuration(args, settings_manager)

    sync = FolderSync(config)

    try:
        plan = sync.create_plan()
    except (FileNotFoundError, NotADirectoryError) as e:
        print(f"[Error] {e}", file=sys.stderr)
        return EXIT_FAILED

    print_plan(plan, config)
    print()

    if plan.is_empty:
        print("All files are already synced, nothing to be synced.")
        return EXIT_OK

    if not (args.auto_sync or prompt_confirmation(read_input)):
        print("Syncing actions are cancelled. No changes were made to the directories.")
        return EXIT_DECLINED

    def on_file_synced(event: FileSyncedEvent) -> None:
        print(f"[{event.index + 1}] {event.action.source_path} -> {event.action.target_path}")

    def on_error(event: ErrorOccurredEvent) -> None:
        print(f"[Error] {event.message}")

    sync.events.add_file_synced_listener(on_file_synced)
    sync.events.add_error_listener(on_error)

    print("[Syncing started]")
    try:
        result = sync.execute(plan)
    except MissingSourceFilesError as e:
        print(str(e))
        print("[Syncing interrupted]")
        return EXIT_FAILED

    print("[Syncing completed]")
    return EXIT_OK if result.success else EXIT_FAILED


def main(argv: Optional[List[str]] = None) -> int:
    """
    Application main entry point.

    Returns:
        Exit code (0 for success)
    """
    args = parse_arguments(argv)

    # Logging level: flag, then settings file, then INFO
    settings_manager = SettingsManager(Path(args.config_file) if args.config_file else None)
    level = args.log_level or settings_manager.settings.log_level
    log_file = LOGS_DIR / f"{APP_NAME}_{datetime.now():%Y%m%d}.log" if args.debug else None
    logger = setup_logging(level, log_file)
    logger.debug(f"Starting {APP_NAME} v{__version__}")

    try:
        return run(args, settings_manager)
    except KeyboardInterrupt:
        print("[Syncing interrupted]")
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
