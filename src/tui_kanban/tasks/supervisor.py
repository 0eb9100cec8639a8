"""Background task supervisor with a single-consumer completion channel."""

from __future__ import annotations

import dataclasses
import itertools
import logging
import queue
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from tui_kanban.core.errors import KanbanError
from tui_kanban.core.state import AppState
from tui_kanban.io.reader import load_state
from tui_kanban.io.writer import atomic_write_bytes
from tui_kanban.tasks.messages import TaskFailure, TaskKind, TaskResult, TaskSuccess
from tui_kanban.tasks.update_check import fetch_latest_version

logger = logging.getLogger(__name__)


@dataclass
class _InFlight:
    ticket: int
    future: Future
    coalesced: int = 0


def _write_save(path: Path, data: bytes) -> Path:
    atomic_write_bytes(path, data)
    return path


def _read_save(path: Path) -> AppState:
    return load_state(path)


class TaskSupervisor:
    """
    Runs file and network work off the main thread.

    Every submitted task produces exactly one TaskSuccess or TaskFailure
    on an internal queue. Worker threads only ever put onto that queue;
    the engine drains it with poll() on its own thread, and all
    bookkeeping of in-flight work happens inside poll(), so nothing here
    needs a lock.

    Tasks receive immutable inputs only (bytes, paths, strings). At most
    one SAVE and one LOAD run at a time: a save requested while another
    is running joins that task (its result reports the joined requests in
    `coalesced`), and a repeated load returns the running load's ticket.
    """

    EXCLUSIVE = (TaskKind.SAVE, TaskKind.LOAD)

    def __init__(self, executor: Executor | None = None, max_workers: int = 2) -> None:
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="tui-kanban-task",
        )
        self._completions: queue.Queue[TaskResult] = queue.Queue()
        self._in_flight: dict[TaskKind, _InFlight] = {}
        self._futures: dict[int, Future] = {}
        self._tickets = itertools.count(1)
        self._closed = False

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def submit_save(self, path: str | Path, data: bytes) -> int:
        """Write data to path atomically. Returns the task's ticket."""
        return self._submit(TaskKind.SAVE, _write_save, Path(path), bytes(data))

    def submit_load(self, path: str | Path) -> int:
        """Read and decode the save file at path."""
        return self._submit(TaskKind.LOAD, _read_save, Path(path))

    def submit_update_check(self, url: str, timeout: float) -> int:
        """Fetch the latest published version string."""
        return self._submit(TaskKind.UPDATE_CHECK, fetch_latest_version, url, timeout)

    def _submit(self, kind: TaskKind, fn: Callable[..., Any], *args: Any) -> int:
        if self._closed:
            raise RuntimeError("TaskSupervisor has been shut down")

        running = self._in_flight.get(kind)
        if running is not None:
            if kind is TaskKind.SAVE:
                running.coalesced += 1
                logger.debug("Save request coalesced into task %d", running.ticket)
            return running.ticket

        ticket = next(self._tickets)
        future = self._executor.submit(fn, *args)
        self._futures[ticket] = future
        if kind in self.EXCLUSIVE:
            self._in_flight[kind] = _InFlight(ticket, future)
        logger.debug("Started %s task %d", kind.name, ticket)
        future.add_done_callback(lambda f: self._deliver(ticket, kind, f))
        return ticket

    def _deliver(self, ticket: int, kind: TaskKind, future: Future) -> None:
        # Runs on the worker thread (or inline if already done)
        error = future.exception()
        if error is None:
            self._completions.put(TaskSuccess(ticket, kind, future.result()))
            return
        if not isinstance(error, KanbanError):
            logger.error("%s task %d crashed", kind.name, ticket, exc_info=error)
        self._completions.put(TaskFailure(ticket, kind, error))

    # -------------------------------------------------------------------------
    # Consumption (engine thread only)
    # -------------------------------------------------------------------------

    def pending(self, kind: TaskKind) -> int | None:
        """Ticket of the running SAVE or LOAD task, if any."""
        running = self._in_flight.get(kind)
        return running.ticket if running else None

    @property
    def busy(self) -> bool:
        return bool(self._futures)

    def poll(self) -> list[TaskResult]:
        """Drain every completion delivered so far, without blocking."""
        results: list[TaskResult] = []
        while True:
            try:
                result = self._completions.get_nowait()
            except queue.Empty:
                break
            results.append(self._settle(result))
        return results

    def _settle(self, result: TaskResult) -> TaskResult:
        self._futures.pop(result.ticket, None)
        running = self._in_flight.get(result.kind)
        if running is not None and running.ticket == result.ticket:
            del self._in_flight[result.kind]
            if running.coalesced:
                result = dataclasses.replace(result, coalesced=running.coalesced)
        return result

    def wait_idle(self, timeout: float | None = None) -> list[TaskResult]:
        """Block until running tasks finish (or timeout), then poll()."""
        futures = list(self._futures.values())
        if futures:
            wait(futures, timeout=timeout)
        results = self.poll()
        # A future reports done before its callback has queued the result
        while self._futures and all(f.done() for f in self._futures.values()):
            try:
                result = self._completions.get(timeout=1.0)
            except queue.Empty:
                break
            results.append(self._settle(result))
        return results

    def shutdown(self, wait_for_tasks: bool = True) -> None:
        self._closed = True
        self._executor.shutdown(wait=wait_for_tasks)
