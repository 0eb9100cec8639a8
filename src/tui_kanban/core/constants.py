"""Shared constants for the kanban engine."""

from datetime import datetime, timezone

APP_NAME = "tui-kanban"
APP_AUTHOR = "tui-kanban"

# Save file envelope
SAVE_MAGIC = b"TKBN"
SCHEMA_VERSION = 3
SAVE_FILE_NAME = "board.kanban"
KEYBINDINGS_FILE_NAME = "keybindings.json"

# Defaults for the configurable limits
DEFAULT_UNDO_LIMIT = 100
DEFAULT_ACTIVITY_LIMIT = 500
DEFAULT_AUTOSAVE_INTERVAL = 30.0  # seconds
DEFAULT_UPDATE_CHECK_URL = "https://pypi.org/pypi/tui-kanban/json"
DEFAULT_UPDATE_CHECK_TIMEOUT = 3.0  # seconds
DEFAULT_STATUS_DURATION = 5.0  # seconds

# Search tuning
DEFAULT_GRAM_SIZE = 3
DEFAULT_SEARCH_WARP = 2.0
DEFAULT_SEARCH_THRESHOLD = 0.25
DEFAULT_SEARCH_LIMIT = 10

# Names shown to the user when a field is empty
FIELD_NOT_SET = "Not Set"
DATE_FORMAT = "%Y-%m-%d"


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
