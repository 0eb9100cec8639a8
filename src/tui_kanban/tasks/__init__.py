"""Background work: saving, loading and the update check."""

from tui_kanban.tasks.messages import TaskFailure, TaskKind, TaskResult, TaskSuccess
from tui_kanban.tasks.supervisor import TaskSupervisor
from tui_kanban.tasks.update_check import fetch_latest_version, is_newer

__all__ = [
    "TaskFailure",
    "TaskKind",
    "TaskResult",
    "TaskSuccess",
    "TaskSupervisor",
    "fetch_latest_version",
    "is_newer",
]
