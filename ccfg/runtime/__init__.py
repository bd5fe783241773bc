"""Interactive runtime: bootstrap, event loop, and reload coordination."""

from __future__ import annotations

from .reload import ReloadCoordinator, ReloadOutcome


def run_app(*args, **kwargs):
    """Lazily import the app entrypoint so terminal modules load on demand."""
    from .app import run_app as _run_app

    return _run_app(*args, **kwargs)


__all__ = ["run_app", "ReloadCoordinator", "ReloadOutcome"]
