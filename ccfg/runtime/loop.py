"""Main interactive event loop for the terminal UI.

Waits on stdin and the change watcher together, dispatching one event per
iteration. Feature logic lives on ``BrowserSession``.
"""

from __future__ import annotations

import select
import shutil

from ..input import has_pending_input, read_key
from ..render import render_screen
from ..watch import ChangeWatcher
from .session import BrowserSession
from .terminal import TerminalController

RESIZE_POLL_SECONDS = 0.25


def _wait_ready(stdin_fd: int, watcher: ChangeWatcher | None, timeout: float) -> list[int]:
    if has_pending_input():
        return [stdin_fd]
    fds = [stdin_fd]
    if watcher is not None:
        fds.append(watcher.fileno())
    ready, _, _ = select.select(fds, [], [], timeout)
    return ready


def drain_watcher(session: BrowserSession, watcher: ChangeWatcher) -> None:
    """Apply any pending change notification and surface watcher errors."""
    if watcher.poll_change():
        session.handle_change()
    error = watcher.poll_error()
    if error is not None:
        session.handle_watch_error(error)


def run_main_loop(
    session: BrowserSession,
    terminal: TerminalController,
    stdin_fd: int,
) -> None:
    """Run the browser until a quit key is pressed.

    Each iteration syncs the layout with the terminal size, renders when
    dirty, then handles either one key or one change notification.
    """
    watcher = session.watcher
    with terminal.raw_mode():
        while True:
            term = shutil.get_terminal_size((80, 24))
            session.resize(term.columns, term.lines)

            if session.state.dirty:
                terminal.write(render_screen(session.screen_context()))
                session.state.dirty = False

            ready = _wait_ready(stdin_fd, watcher, RESIZE_POLL_SECONDS)
            if watcher is not None and watcher.fileno() in ready:
                drain_watcher(session, watcher)
                continue
            if stdin_fd not in ready:
                continue

            try:
                key = read_key(stdin_fd)
            except KeyboardInterrupt:
                continue
            if session.handle_key(key):
                break


__all__ = ["run_main_loop", "drain_watcher", "RESIZE_POLL_SECONDS"]
