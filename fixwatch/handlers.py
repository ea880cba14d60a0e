import os
import logging
import subprocess
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Union

import typer
from watchdog.events import FileSystemEvent, FileSystemEventHandler

from .commands import ToolInvocation, command_for, run_tool

DEFAULT_DELAY = 0.555


class ChangeKind(str, Enum):
    UPDATE = "update"
    REMOVE = "remove"


@dataclass(frozen=True)
class ChangeEvent:
    kind: ChangeKind
    path: Path


class LintFixHandler(FileSystemEventHandler):
    """Debounce file changes per path and run the matching fixer on a worker.

    watchdog delivers on its observer thread; each path gets a timer that is
    restarted by every new event, so a burst of writes ends up as a single
    dispatch carrying the latest event kind. Dispatches go to the executor,
    and a path already waiting there is not queued twice.
    """

    def __init__(
        self,
        executor: ThreadPoolExecutor,
        delay: float = DEFAULT_DELAY,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        super().__init__()
        self.executor = executor
        self.delay = delay
        self.runner = runner
        self._lock = threading.Lock()
        self._pending: Dict[Path, ChangeEvent] = {}
        self._timers: Dict[Path, threading.Timer] = {}
        self._queued: Dict[Path, ChangeEvent] = {}
        self._closed = False

    def notify(self, event: ChangeEvent) -> None:
        with self._lock:
            timer = self._timers.pop(event.path, None)
            if timer is not None:
                timer.cancel()
            self._pending[event.path] = event
            timer = threading.Timer(self.delay, self._fire)
            timer.args = (event.path, timer)
            timer.daemon = True
            self._timers[event.path] = timer
            timer.start()

    def _fire(self, path: Path, timer: threading.Timer) -> None:
        with self._lock:
            # a re-armed path belongs to its newer timer
            if self._timers.get(path) is not timer:
                return
            event = self._pending.pop(path, None)
            self._timers.pop(path, None)
        if event is not None:
            self.submit(event)

    def flush(self) -> None:
        """Dispatch every pending event now instead of waiting for its timer."""
        with self._lock:
            events = list(self._pending.values())
            for timer in self._timers.values():
                timer.cancel()
            self._pending.clear()
            self._timers.clear()
        for event in events:
            self.submit(event)

    def close(self) -> None:
        """Drop pending events and refuse new submissions; call before the executor shuts down."""
        with self._lock:
            self._closed = True
        self.cancel_pending()

    def cancel_pending(self) -> None:
        with self._lock:
            for timer in self._timers.values():
                timer.cancel()
            self._pending.clear()
            self._timers.clear()

    def submit(self, event: ChangeEvent) -> None:
        with self._lock:
            if self._closed:
                logging.debug(f"Handler closed, dropping event: {event.path}")
                return
            if event.path in self._queued:
                logging.debug(f"Already queued, keeping latest event: {event.path}")
                self._queued[event.path] = event
                return
            self._queued[event.path] = event
        self.executor.submit(self._task, event.path)

    def _task(self, path: Path) -> None:
        with self._lock:
            event = self._queued.pop(path, None)
        if event is None:
            return
        try:
            self.process(event)
        except Exception as e:
            logging.exception(f"Failed to process {path}: {e}")

    def process(self, event: ChangeEvent) -> List[ToolInvocation]:
        typer.secho(f"✚ File {event.path} changed", fg=typer.colors.YELLOW)
        invocations: List[ToolInvocation] = []

        if event.kind is ChangeKind.UPDATE:
            argv = command_for(event.path)
            if argv is not None:
                if argv[0] == "phpcbf":
                    typer.secho(
                        "Running PHPCBF to fix possible syntactical issues",
                        fg=typer.colors.MAGENTA,
                    )
                invocations.append(run_tool(argv, self.runner))
        elif event.kind is ChangeKind.REMOVE:
            # nothing to fix on delete
            pass

        typer.secho("✔ File Validated", fg=typer.colors.YELLOW)
        return invocations

    def _path(self, raw: Union[str, bytes]) -> Path:
        return Path(os.fsdecode(raw))

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self.notify(ChangeEvent(ChangeKind.UPDATE, self._path(event.src_path)))

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self.notify(ChangeEvent(ChangeKind.UPDATE, self._path(event.src_path)))

    def on_deleted(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self.notify(ChangeEvent(ChangeKind.REMOVE, self._path(event.src_path)))

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self.notify(ChangeEvent(ChangeKind.REMOVE, self._path(event.src_path)))
        dest = getattr(event, "dest_path", None)
        if dest:
            self.notify(ChangeEvent(ChangeKind.UPDATE, self._path(dest)))
