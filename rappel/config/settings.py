"""
Configuration settings for the rappel terminal reminder manager.
All constants and configuration values centralized here.
"""

from enum import Enum
from pathlib import Path
import os

from dotenv import load_dotenv

# Environment overrides may come from a .env file in the working directory
load_dotenv()

# Project paths
RAPPEL_HOME = Path(os.getenv("RAPPEL_HOME", Path.home() / ".rappel")).expanduser()
DATA_DIR = RAPPEL_HOME / "data"
LOGS_DIR = RAPPEL_HOME / "logs"
DB_PATH = Path(os.getenv("RAPPEL_DB_PATH", DATA_DIR / "reminders.db")).expanduser()

# Ensure directories exist
DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

# Synchronization Configuration
SYNC_INTERVAL_SECONDS = float(os.getenv("RAPPEL_SYNC_INTERVAL", "10"))
SYNC_JOB_ID = "reconcile_store"

# Control Loop Configuration
UI_TICK_SECONDS = 0.25  # Upper bound on waiting for a key press
INPUT_POLL_INTERVAL = 0.02  # Sleep between curses polls inside a tick

# Date Formats
DATE_INPUT_FORMAT = "%H:%M %d/%m/%Y"  # What the user types in the Date field
DATE_INPUT_EXAMPLE = "13:54 31/12/1970"
LIST_DATE_FORMAT = "%d %B - %H:%M"
SYNC_TIME_FORMAT = "%X"

# Key Bindings (navigation mode)
KEY_DELETE = "x"
KEY_ADD = "a"
KEY_QUIT = "q"

# Scheduler Configuration
SCHEDULER_MISFIRE_GRACE_TIME = 300  # Seconds (5 minutes)
SCHEDULER_COALESCE = True  # Merge multiple pending executions
SCHEDULER_MAX_INSTANCES = 1  # Never overlap two runs of the same job

# Notification Configuration
NOTIFICATION_APP_NAME = "rappel"
NOTIFICATION_TIMEOUT = 10  # Seconds the desktop popup stays visible
NOTIFICATIONS_ENABLED = os.getenv("NOTIFICATIONS_ENABLED", "true").lower() == "true"

# System Configuration
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"


# Enums for type safety
class InputMode(Enum):
    """Controller modes."""
    NAVIGATION = "navigation"
    ADD = "add"


class InputField(Enum):
    """Fields of the add form, navigated cyclically."""
    TITLE = "title"
    BODY = "body"
    DATE = "date"

    def next(self) -> "InputField":
        """Field below this one, wrapping to the first."""
        order = _FIELD_ORDER
        return order[(order.index(self) + 1) % len(order)]

    def previous(self) -> "InputField":
        """Field above this one, wrapping to the last."""
        order = _FIELD_ORDER
        return order[(order.index(self) - 1) % len(order)]


_FIELD_ORDER = (InputField.TITLE, InputField.BODY, InputField.DATE)


class Key(Enum):
    """Logical keys that are not plain characters."""
    UP = "up"
    DOWN = "down"
    ENTER = "enter"
    ESCAPE = "escape"
    BACKSPACE = "backspace"


class KeyEventKind(Enum):
    """Press/release discriminator of a key event."""
    PRESS = "press"
    RELEASE = "release"
