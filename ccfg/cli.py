"""Command-line front door for ccfg.

Parses CLI options, resolves the directory used for project detection, and
either prints a snapshot (tree or merged settings) or starts the interactive
browser.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .artifacts import ScanError, Scanner, merge_settings, render_merged
from .config import load_config
from .render import expand_all, format_tree_lines
from .runtime import run_app
from .tree_model import TreeModel


def configure_logging(log_file: str | None) -> None:
    """Attach a debug-level file handler; without one, logging stays silent."""
    if not log_file:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger("ccfg")
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def render_tree_text(scanner: Scanner, no_color: bool) -> str:
    """Scan once and return every row of the fully expanded tree."""
    tree = TreeModel.from_scan(scanner.scan())
    expand_all(tree)
    lines = format_tree_lines(tree.rows(), no_color=no_color)
    return "".join(f"{line}\n" for line in lines)


def render_merged_text(scanner: Scanner) -> str:
    return render_merged(merge_settings(scanner.scan()))


def main(default_path: Path | None = None, argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run ccfg.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is resolved lazily by the scanner.
    """
    parser = argparse.ArgumentParser(
        description="Browse layered Claude Code configuration (managed, user, project)."
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Directory used for project detection. Defaults to current directory.",
    )
    parser.add_argument("--print", dest="print_tree", action="store_true", help="Print the expanded tree and exit.")
    parser.add_argument("--merged", action="store_true", help="Print merged settings and exit.")
    parser.add_argument("--no-watch", action="store_true", help="Disable automatic rescans on file changes.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--style", default=None, help="Pygments style name for JSON previews.")
    parser.add_argument("--log-file", metavar="PATH", default=None, help="Write debug logs to PATH.")
    args = parser.parse_args(argv)

    configure_logging(args.log_file)

    work_dir: Path | None = default_path
    if args.path is not None:
        work_dir = Path(args.path)
    if work_dir is not None:
        if not work_dir.exists():
            raise SystemExit(f"Path not found: {work_dir}")
        if not work_dir.is_dir():
            raise SystemExit(f"Not a directory: {work_dir}")

    config = load_config()
    if args.style:
        config = replace(config, style=args.style)
    scanner = Scanner(work_dir)

    try:
        if args.print_tree:
            sys.stdout.write(render_tree_text(scanner, args.no_color))
            return
        if args.merged:
            sys.stdout.write(render_merged_text(scanner))
            return
        run_app(scanner, config, no_color=args.no_color, watch=not args.no_watch)
    except ScanError as exc:
        raise SystemExit(f"ccfg: {exc}") from exc


if __name__ == "__main__":
    main()
