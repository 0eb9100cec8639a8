"""Runtime configuration with environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping

from platformdirs import PlatformDirs

from tui_kanban.core.constants import (
    APP_AUTHOR,
    APP_NAME,
    DEFAULT_ACTIVITY_LIMIT,
    DEFAULT_AUTOSAVE_INTERVAL,
    DEFAULT_GRAM_SIZE,
    DEFAULT_SEARCH_THRESHOLD,
    DEFAULT_STATUS_DURATION,
    DEFAULT_UNDO_LIMIT,
    DEFAULT_UPDATE_CHECK_TIMEOUT,
    DEFAULT_UPDATE_CHECK_URL,
    KEYBINDINGS_FILE_NAME,
    SAVE_FILE_NAME,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "TUI_KANBAN_"


def _dirs() -> PlatformDirs:
    return PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR)


def default_save_path() -> Path:
    return Path(_dirs().user_data_dir) / SAVE_FILE_NAME


def default_log_path() -> Path:
    return Path(_dirs().user_log_dir) / f"{APP_NAME}.log"


def default_keybindings_path() -> Path:
    return Path(_dirs().user_config_dir) / KEYBINDINGS_FILE_NAME


@dataclass(frozen=True)
class Config:
    """
    Everything the engine and its collaborators can be tuned with.

    Attributes:
        save_path: State file location
        undo_limit: Maximum number of undoable commands kept
        activity_limit: Maximum number of activity log entries kept
        autosave_interval: Seconds between autosaves of unsaved changes (0 disables)
        update_check_url: Where to ask for the latest version ("" disables)
        update_check_timeout: Seconds before the version check gives up
        search_gram_size: n-gram length used by fuzzy search
        search_threshold: Minimum score for a search hit
        status_duration: Seconds a status message stays visible
        log_path: Log file written while the UI owns the terminal
        log_level: Name of the package log level
        keybindings_path: JSON file of user key bindings
    """
    save_path: Path = field(default_factory=default_save_path)
    undo_limit: int = DEFAULT_UNDO_LIMIT
    activity_limit: int = DEFAULT_ACTIVITY_LIMIT
    autosave_interval: float = DEFAULT_AUTOSAVE_INTERVAL
    update_check_url: str = DEFAULT_UPDATE_CHECK_URL
    update_check_timeout: float = DEFAULT_UPDATE_CHECK_TIMEOUT
    search_gram_size: int = DEFAULT_GRAM_SIZE
    search_threshold: float = DEFAULT_SEARCH_THRESHOLD
    status_duration: float = DEFAULT_STATUS_DURATION
    log_path: Path = field(default_factory=default_log_path)
    log_level: str = "INFO"
    keybindings_path: Path = field(default_factory=default_keybindings_path)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """
        Build a config from TUI_KANBAN_* variables, e.g.
        TUI_KANBAN_SAVE_PATH or TUI_KANBAN_UNDO_LIMIT. Malformed values are
        logged and ignored.
        """
        environ = os.environ if environ is None else environ
        config = cls()
        overrides: dict[str, object] = {}
        for f in config.__dataclass_fields__.values():
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None or (raw == "" and f.name != "update_check_url"):
                continue
            current = getattr(config, f.name)
            try:
                if isinstance(current, Path):
                    overrides[f.name] = Path(raw).expanduser()
                elif isinstance(current, int):
                    overrides[f.name] = int(raw)
                elif isinstance(current, float):
                    overrides[f.name] = float(raw)
                else:
                    overrides[f.name] = raw.strip()
            except ValueError:
                logger.warning("Ignoring invalid %s%s=%r", ENV_PREFIX, f.name.upper(), raw)
        return replace(config, **overrides)

    def with_overrides(self, **changes: object) -> Config:
        """Copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @property
    def update_check_enabled(self) -> bool:
        return bool(self.update_check_url)
