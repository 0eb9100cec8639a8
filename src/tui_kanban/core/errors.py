"""Error taxonomy shared by every layer of the engine."""

from __future__ import annotations


class KanbanError(Exception):
    """Root of all recoverable engine errors."""


# -----------------------------------------------------------------------------
# Command layer
# -----------------------------------------------------------------------------

class CommandError(KanbanError):
    """A command was rejected; the state is unchanged."""


class NotFound(CommandError, LookupError):
    """A referenced id does not exist."""

    def __init__(self, kind: str, entity_id: object) -> None:
        super().__init__(f"{kind} {entity_id!r} not found")
        self.kind = kind
        self.entity_id = entity_id


class InvalidPosition(CommandError):
    """A position could not be interpreted as an index."""


class DuplicateName(CommandError):
    """A name that must be unique is already taken."""


class StaleUndo(CommandError):
    """An undo or redo step no longer applies to the current state."""


# -----------------------------------------------------------------------------
# Persistence
# -----------------------------------------------------------------------------

class PersistenceError(KanbanError):
    """Loading or saving the state file failed."""


class UnsupportedSchema(PersistenceError):
    """The file uses a schema version this program cannot read."""

    def __init__(self, version: int, supported: int) -> None:
        super().__init__(
            f"Save file schema v{version} is not supported (newest known: v{supported})"
        )
        self.version = version
        self.supported = supported


class CorruptFile(PersistenceError):
    """The file is not a save file or its payload cannot be decoded."""


class IoFailure(PersistenceError):
    """The operating system refused a read or write."""


# -----------------------------------------------------------------------------
# Network
# -----------------------------------------------------------------------------

class NetworkError(KanbanError):
    """The remote version check did not produce a result."""


class NetworkTimeout(NetworkError):
    """The version check exceeded its time budget."""


class NetworkUnavailable(NetworkError):
    """The version check could not reach the server; the check is skipped."""


# -----------------------------------------------------------------------------
# User configuration
# -----------------------------------------------------------------------------

class ConfigError(KanbanError):
    """A user configuration file cannot be used; defaults apply."""


class KeybindingConflict(ConfigError):
    """The same key is bound to more than one board action."""

    def __init__(self, overlaps: dict[str, list[str]]) -> None:
        keys = ", ".join(f"{key} ({', '.join(ids)})" for key, ids in overlaps.items())
        super().__init__(f"Overlapping key bindings: {keys}")
        self.overlaps = overlaps


# -----------------------------------------------------------------------------
# Programming errors
# -----------------------------------------------------------------------------

class InvariantViolation(AssertionError):
    """The data model broke one of its structural invariants."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("; ".join(problems))
        self.problems = problems
