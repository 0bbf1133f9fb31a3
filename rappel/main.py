"""
Main entry point for rappel.
Handles CLI arguments, logging setup, and application lifecycle.
"""

import asyncio
import signal
import sys
import argparse

from rappel.config.logging_config import setup_logging, detach_console
from rappel.config import settings
from rappel.core.coordinator import Coordinator
from rappel.reminder.errors import StoreError
from rappel.reminder.repository import ReminderRepository
from rappel.ui.terminal import TerminalUI

# Setup logging first
logger = setup_logging("rappel")


def parse_arguments(argv=None):
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="rappel - terminal reminder manager with desktop notifications"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--db",
        default=None,
        help=f"SQLite database path (default: {settings.DB_PATH})"
    )

    parser.add_argument(
        "--sync-interval",
        type=float,
        default=None,
        help=f"Seconds between store synchronizations (default: {settings.SYNC_INTERVAL_SECONDS:g})"
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="Print stored reminders and exit"
    )

    return parser.parse_args(argv)


def list_reminders(db_path: str = None) -> int:
    """
    Print stored reminders and exit.

    Returns:
        Process exit code
    """
    try:
        reminders = ReminderRepository(db_path).load_all()
    except StoreError as e:
        logger.error(f"Cannot read reminders: {e}")
        return 1

    if not reminders:
        print("No reminders stored.")
    for reminder in reminders:
        print(reminder)
    return 0


async def main(argv=None) -> int:
    """Main application entry point."""
    args = parse_arguments(argv)

    if args.debug:
        logger.setLevel("DEBUG")
        logger.info("Debug logging enabled")

    if args.list:
        return list_reminders(args.db)

    logger.info("=" * 60)
    logger.info("rappel")
    logger.info("=" * 60)

    coordinator = Coordinator(db_path=args.db, sync_interval=args.sync_interval)

    def signal_handler(sig, frame):
        """Handle shutdown signals."""
        logger.info(f"Received signal {sig}, shutting down...")
        coordinator.request_shutdown()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if not await coordinator.initialize():
        logger.error("Failed to initialize application")
        return 1

    # curses owns the terminal from here on; logs go to the file only
    detach_console("rappel")

    try:
        with TerminalUI() as ui:
            await coordinator.run(ui)

    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1

    finally:
        await coordinator.stop()

    logger.info("Application stopped")
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        exit_code = asyncio.run(main())
        sys.exit(exit_code)

    except Exception as e:
        logger.error(f"Fatal error in main: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
