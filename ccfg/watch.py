"""Debounced filesystem change notifications for configuration locations.

Builds the set of paths worth observing from the scope layouts, installs one
``watchdog`` watch per path, and coalesces bursts of qualifying events into a
single pending notification.

Emitter threads that die (watchdog only logs their exceptions) are noticed
by a periodic health check: the watch is dropped, a rescan is requested so
the next ``rewatch`` reinstalls it, and the failure is surfaced through
``poll_error`` unless the watched path itself has gone away.
"""

from __future__ import annotations

import contextlib
import logging
import os
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Full, Queue

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .artifacts import ScopeLayout

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3
HEALTH_CHECK_SECONDS = 1.0


@dataclass(frozen=True)
class WatchPlan:
    """Paths to observe plus the targets whose changes are relevant.

    ``recursive`` holds declared directories, watched with their subtrees.
    An empty ``targets`` set makes every event relevant.
    """

    paths: tuple[Path, ...] = ()
    recursive: frozenset[Path] = frozenset()
    targets: frozenset[Path] = frozenset()

    @classmethod
    def from_paths(cls, paths: Iterable[Path]) -> "WatchPlan":
        return cls(paths=tuple(sorted({Path(path) for path in paths}, key=str)))

    def is_relevant(self, path: Path) -> bool:
        if not self.targets:
            return True
        if path in self.targets:
            return True
        if any(parent in self.recursive for parent in path.parents):
            return True
        # Moving or deleting an enclosing directory takes targets with it.
        return any(path in target.parents for target in self.targets)


def watch_plan(layouts: Iterable[ScopeLayout]) -> WatchPlan:
    """Compute what to observe for every registry entry of every active scope.

    Directory entries are watched directly. File entries are watched through
    their parent directory (creation/deletion) and, when the file exists, on
    the file itself (in-place modification).
    """
    paths: set[Path] = set()
    recursive: set[Path] = set()
    targets: set[Path] = set()
    for layout in layouts:
        for entry, path in layout.resolved():
            targets.add(path)
            if entry.is_dir:
                paths.add(path)
                recursive.add(path)
                continue
            paths.add(path.parent)
            if path.exists():
                paths.add(path)
    return WatchPlan(
        paths=tuple(sorted(paths, key=str)),
        recursive=frozenset(recursive),
        targets=frozenset(targets),
    )


def watch_paths(layouts: Iterable[ScopeLayout]) -> list[Path]:
    return list(watch_plan(layouts).paths)


class _EventForwarder(FileSystemEventHandler):
    """Hand raw watchdog events to the watcher's own loop thread."""

    def __init__(self, events: Queue) -> None:
        super().__init__()
        self._events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        self._events.put(event)


_CLOSE = object()


def _event_paths(event: FileSystemEvent) -> list[Path]:
    paths = [Path(os.fsdecode(event.src_path))]
    dest = getattr(event, "dest_path", "")
    if dest:
        paths.append(Path(os.fsdecode(dest)))
    return paths


def _file_signature(path: Path) -> tuple[int, int] | None:
    try:
        st = path.stat()
    except FileNotFoundError:
        return None
    return (st.st_mtime_ns, st.st_size)


class ChangeWatcher:
    """Observe paths and deliver coalesced change notifications.

    Notifications and errors each sit in a single-slot queue; offering into a
    full slot drops the new item. ``fileno()`` becomes readable whenever a
    slot is filled so callers can ``select`` on it next to other inputs.
    """

    def __init__(self, observer, plan: WatchPlan, debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS) -> None:
        self.debounce_seconds = debounce_seconds
        self._observer = observer
        self._plan = plan
        self._events: Queue = Queue()
        self._changes: Queue = Queue(maxsize=1)
        self._errors: Queue = Queue(maxsize=1)
        self._handler = _EventForwarder(self._events)
        self._watches: dict[Path, object] = {}
        self._watches_lock = threading.Lock()
        self._signatures: dict[Path, tuple[int, int] | None] = {}
        self._wake_r, self._wake_w = os.pipe()
        os.set_blocking(self._wake_r, False)
        os.set_blocking(self._wake_w, False)
        self._closed = False
        self._thread = threading.Thread(target=self._run, name="ccfg-watch", daemon=True)

    @classmethod
    def create(
        cls,
        plan: WatchPlan | Iterable[Path],
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> "ChangeWatcher | None":
        """Start watching ``plan``; return ``None`` if no watcher can run at all."""
        if not isinstance(plan, WatchPlan):
            plan = WatchPlan.from_paths(plan)
        try:
            watcher = cls(Observer(), plan, debounce_seconds)
        except OSError as exc:
            logger.warning("file watching unavailable: %s", exc)
            return None

        # Schedule after start: a failing emitter then drops only its own path.
        try:
            watcher._observer.start()
        except Exception as exc:
            logger.warning("file watching unavailable: %s", exc)
            watcher._release_pipe()
            return None
        watcher._schedule_all(plan)
        watcher._seed_signatures(plan)
        watcher._thread.start()
        return watcher

    @property
    def watched_paths(self) -> list[Path]:
        with self._watches_lock:
            return sorted(self._watches, key=str)

    def fileno(self) -> int:
        return self._wake_r

    def _schedule_one(self, path: Path, recursive: bool) -> None:
        if not path.exists():
            return
        try:
            self._watches[path] = self._observer.schedule(self._handler, str(path), recursive=recursive)
        except Exception as exc:
            logger.debug("skipping watch for %s: %s", path, exc)

    def _schedule_all(self, plan: WatchPlan) -> None:
        with self._watches_lock:
            for path in plan.paths:
                self._schedule_one(path, path in plan.recursive)

    def _seed_signatures(self, plan: WatchPlan) -> None:
        self._signatures = {}
        for path in plan.targets:
            if path.is_file():
                self._signatures[path] = _file_signature(path)

    def rewatch(self, plan: WatchPlan | Iterable[Path]) -> None:
        """Align installed watches with ``plan`` after a rescan."""
        if self._closed:
            return
        if not isinstance(plan, WatchPlan):
            plan = WatchPlan.from_paths(plan)
        wanted = set(plan.paths)
        with self._watches_lock:
            for path in [path for path in self._watches if path not in wanted]:
                watch = self._watches.pop(path)
                with contextlib.suppress(KeyError, OSError):
                    self._observer.unschedule(watch)
            for path in plan.paths:
                if path not in self._watches:
                    self._schedule_one(path, path in plan.recursive)
        self._events.put(plan)

    def _check_emitters(self) -> bool:
        """Drop watches whose emitter thread has stopped; return whether any had."""
        if self._closed:
            return False
        with self._watches_lock:
            alive = {emitter.watch for emitter in self._observer.emitters if emitter.is_alive()}
            stopped = [path for path, watch in self._watches.items() if watch not in alive]
            for path in stopped:
                watch = self._watches.pop(path)
                with contextlib.suppress(KeyError, OSError):
                    self._observer.unschedule(watch)
        for path in stopped:
            if path.exists():
                logger.warning("watch for %s stopped unexpectedly", path)
                self._offer(self._errors, OSError(f"watch stopped: {path}"))
            else:
                logger.debug("watch for %s ended with its path", path)
        return bool(stopped)

    def _wake(self) -> None:
        with contextlib.suppress(BlockingIOError):
            os.write(self._wake_w, b"\0")

    def _offer(self, slot: Queue, item: object) -> None:
        try:
            slot.put_nowait(item)
        except Full:
            return
        self._wake()

    def _drain_wake(self) -> None:
        while True:
            try:
                if not os.read(self._wake_r, 64):
                    return
            except (BlockingIOError, OSError):
                return

    def _qualifies(self, event: FileSystemEvent) -> bool:
        """Return whether ``event`` is a content-level change to a relevant path.

        Modified events only count when a file's mtime or size actually moved,
        which filters out attribute-only updates.
        """
        if not any(self._plan.is_relevant(path) for path in _event_paths(event)):
            return False
        if event.event_type in {EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MOVED}:
            return True
        if event.event_type != EVENT_TYPE_MODIFIED or event.is_directory:
            return False

        path = Path(os.fsdecode(event.src_path))
        signature = _file_signature(path)
        if signature is not None and self._signatures.get(path) == signature:
            return False
        self._signatures[path] = signature
        return True

    def _run(self) -> None:
        deadline: float | None = None
        while True:
            timeout = HEALTH_CHECK_SECONDS
            if deadline is not None:
                timeout = min(timeout, max(0.0, deadline - time.monotonic()))
            try:
                item = self._events.get(timeout=timeout)
            except Empty:
                if deadline is not None and time.monotonic() >= deadline:
                    deadline = None
                    self._offer(self._changes, True)
                if self._check_emitters():
                    deadline = time.monotonic() + self.debounce_seconds
                continue

            if item is _CLOSE:
                return
            if isinstance(item, WatchPlan):
                self._plan = item
                self._seed_signatures(item)
                continue

            try:
                qualifies = self._qualifies(item)
            except OSError as exc:
                self._offer(self._errors, exc)
                qualifies = True
            if qualifies:
                deadline = time.monotonic() + self.debounce_seconds

    def wait_for_change(self, timeout: float | None = None) -> bool:
        """Block until a notification is pending (or ``timeout`` passes) and consume it."""
        try:
            self._changes.get(timeout=timeout)
        except Empty:
            return False
        self._drain_wake()
        return True

    def poll_change(self) -> bool:
        self._drain_wake()
        try:
            self._changes.get_nowait()
        except Empty:
            return False
        return True

    def poll_error(self) -> Exception | None:
        try:
            return self._errors.get_nowait()
        except Empty:
            return None

    def _release_pipe(self) -> None:
        for fd in (self._wake_r, self._wake_w):
            with contextlib.suppress(OSError):
                os.close(fd)

    def close(self) -> None:
        """Stop the event loop and release the OS watch handles."""
        if self._closed:
            return
        self._closed = True
        self._events.put(_CLOSE)
        self._observer.stop()
        self._observer.join(timeout=2.0)
        self._thread.join(timeout=2.0)
        self._release_pipe()


__all__ = [
    "DEFAULT_DEBOUNCE_SECONDS",
    "HEALTH_CHECK_SECONDS",
    "WatchPlan",
    "watch_plan",
    "watch_paths",
    "ChangeWatcher",
]
