"""Polling source watcher with a debounced change callback.

Bursts of filesystem events (an editor writing several files) collapse
into one callback fired REBUILD_DEBOUNCE_MS after the last change.
"""
import logging
import os
import threading
from pathlib import Path
from typing import Callable, Iterable

from ..core.constants import REBUILD_DEBOUNCE_MS, WATCH_POLL_INTERVAL_S

logger = logging.getLogger("kalenuxer.watcher")


def scan(dirs: Iterable[str | os.PathLike]) -> dict[str, int]:
    """Map every file below dirs to its st_mtime_ns. Missing dirs are skipped."""
    snapshot: dict[str, int] = {}
    for d in dirs:
        root = Path(d)
        if not root.is_dir():
            continue
        for path in root.rglob("*"):
            try:
                if path.is_file():
                    snapshot[str(path)] = path.stat().st_mtime_ns
            except OSError:
                # Deleted between listing and stat; next scan reports it
                continue
    return snapshot


def diff(previous: dict[str, int], current: dict[str, int]) -> list[tuple[str, str]]:
    """Events between two snapshots as (event, path), event in add/change/unlink."""
    events = []
    for path, mtime in current.items():
        if path not in previous:
            events.append(("add", path))
        elif previous[path] != mtime:
            events.append(("change", path))
    for path in previous:
        if path not in current:
            events.append(("unlink", path))
    return sorted(events, key=lambda e: e[1])


class SourceWatcher:
    """Background thread polling dirs and calling on_change after a quiet period."""

    def __init__(
        self,
        dirs: Iterable[str | os.PathLike],
        on_change: Callable[[], None],
        interval: float = WATCH_POLL_INTERVAL_S,
        debounce_ms: int = REBUILD_DEBOUNCE_MS,
    ):
        self.dirs = [Path(d) for d in dirs]
        self.on_change = on_change
        self.interval = interval
        self.debounce_ms = debounce_ms
        self._snapshot: dict[str, int] = {}
        self._stop = threading.Event()
        self._timer: threading.Timer | None = None
        self._timer_lock = threading.Lock()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        # Initial contents are not reported
        self._snapshot = scan(self.dirs)
        self._thread = threading.Thread(target=self._run, name="kalenuxer-watcher", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        if self._thread is not None:
            self._thread.join(timeout=self.interval * 2)

    def poll(self) -> list[tuple[str, str]]:
        """Scan once, schedule a rebuild if anything changed and return the events."""
        current = scan(self.dirs)
        events = diff(self._snapshot, current)
        self._snapshot = current
        for event, path in events:
            logger.info("[DevServer] %s: %s. Scheduling rebuild...", event, path)
        if events:
            self.schedule()
        return events

    def schedule(self) -> None:
        """(Re)arm the debounce timer."""
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce_ms / 1000, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._timer_lock:
            self._timer = None
        try:
            self.on_change()
        except Exception:
            logger.exception("[DevServer] Rebuild failed")

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll()
