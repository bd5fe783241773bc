"""Interactive browser bootstrap.

Performs the initial scan, starts the change watcher (degrading to manual
rescans when watching is unavailable), and hands off to the event loop.
"""

from __future__ import annotations

import logging
import sys
import time

from ..artifacts import Scanner
from ..config import AppConfig
from ..tree_model import TreeModel
from ..watch import ChangeWatcher, watch_plan
from .loop import run_main_loop
from .reload import ReloadCoordinator
from .session import BrowserSession, SessionState
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def start_watcher(scanner: Scanner, config: AppConfig) -> ChangeWatcher | None:
    watcher = ChangeWatcher.create(watch_plan(scanner.layouts()), config.debounce_seconds)
    if watcher is None:
        logger.info("running without file watching")
    return watcher


def build_session(
    scanner: Scanner,
    config: AppConfig,
    watcher: ChangeWatcher | None = None,
    no_color: bool = False,
) -> BrowserSession:
    """Scan once and assemble the session; ``ScanError`` propagates."""
    start = time.monotonic()
    result = scanner.scan()
    duration = time.monotonic() - start
    logger.debug("initial scan finished in %.3fs", duration)
    state = SessionState(tree=TreeModel.from_scan(result), result=result, scan_duration=duration)
    return BrowserSession(state, ReloadCoordinator(scanner), config, watcher=watcher, no_color=no_color)


def run_app(
    scanner: Scanner,
    config: AppConfig,
    no_color: bool = False,
    watch: bool = True,
) -> None:
    """Run the interactive browser until the user quits."""
    session = build_session(scanner, config, no_color=no_color)
    watcher = start_watcher(scanner, config) if watch else None
    session.watcher = watcher
    try:
        stdin_fd = sys.stdin.fileno()
        terminal = TerminalController(stdin_fd, sys.stdout.fileno())
        run_main_loop(session, terminal, stdin_fd)
    finally:
        if watcher is not None:
            watcher.close()


__all__ = ["run_app", "build_session", "start_watcher"]
