"""CLI for notepile - view chapters of Markdown notes."""

import argparse
import json
import platform
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from . import __version__
from .core.document import wrap_document
from .core.engine import render_fragment
from .core.errors import NoteReadError, NotepileError
from .logging_config import configure_logging
from .runtime import build_runtime


def _version_string() -> str:
    return (
        f"notepile {__version__} "
        f"(python {platform.python_version()}, platform {platform.platform(terse=True)})"
    )


def cmd_view(args: argparse.Namespace, rt: Any) -> int:
    """Open the note viewer window."""
    try:
        from PySide6.QtWidgets import QApplication

        from .ui.main_window import MainWindow
    except ImportError as e:
        print(f"Error: Qt WebEngine is not available: {e}", file=sys.stderr)
        return 1

    app = QApplication.instance() or QApplication(sys.argv[:1])
    window = MainWindow(rt, watch=not args.no_watch)
    window.open(args.notebook, args.chapter)
    window.show()
    return app.exec()


def cmd_ls(args: argparse.Namespace, rt: Any) -> int:
    """List the notes of a chapter in display order."""
    if not rt.store.notes_dir(args.notebook, args.chapter).is_dir():
        print("No notes directory found for this chapter.", file=sys.stderr)
        return 1

    notes = rt.store.load_notes(
        args.notebook, args.chapter, descending=rt.config.viewer.descending
    )
    date_format = rt.config.viewer.date_format

    rows = []
    failed = 0
    for note in notes:
        if isinstance(note, NoteReadError):
            failed += 1
            rows.append({"file": Path(note.path).name, "error": note.reason})
            continue
        created = None
        if note.created_at is not None:
            created = datetime.fromtimestamp(note.created_at / 1000).strftime(date_format)
        rows.append({
            "file": Path(note.key).name,
            "title": note.display_title,
            "date": note.date,
            "people": note.people_list,
            "labels": note.label_list,
            "created": created,
        })

    if args.json:
        print(json.dumps(rows, indent=2))
    else:
        for row in rows:
            if "error" in row:
                print(f"{row['file']}\t(failed to read: {row['error']})")
            else:
                print(f"{row['file']}\t{row['date']}\t{row['title']}")

    return 1 if rows and failed == len(rows) else 0


def cmd_render(args: argparse.Namespace, rt: Any) -> int:
    """Print the HTML document a note would be loaded as."""
    note = rt.store.read_note(args.note)
    fragment = render_fragment(rt.renderer, note.body)
    print(wrap_document(fragment, note.base_url, args.width))
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="notepile", description="NotePile note viewer"
    )
    parser.add_argument("--version", action="version", version=_version_string())
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: search cwd/notepile.toml, storage/notepile.toml)",
    )
    parser.add_argument(
        "--storage",
        type=Path,
        default=None,
        help="Path to storage directory (overrides config)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only log warnings and errors"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log measurement details"
    )

    subparsers = parser.add_subparsers(dest="cmd", required=True)

    # view command
    parser_view = subparsers.add_parser("view", help="Open the note viewer")
    parser_view.add_argument("--notebook", default=None, help="Notebook to open")
    parser_view.add_argument("--chapter", default=None, help="Chapter to open")
    parser_view.add_argument(
        "--no-watch", action="store_true", help="Do not reload when note files change"
    )

    # ls command
    parser_ls = subparsers.add_parser("ls", help="List notes of a chapter")
    parser_ls.add_argument("--notebook", required=True)
    parser_ls.add_argument("--chapter", required=True)
    parser_ls.add_argument("--json", action="store_true", help="Machine-readable output")

    # render command
    parser_render = subparsers.add_parser("render", help="Print a note's wrapped HTML document")
    parser_render.add_argument("note", type=Path, help="Path to a note .json file")
    parser_render.add_argument("--width", type=int, default=None, help="Target layout width")

    args = parser.parse_args()
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        rt = build_runtime(storage_path=args.storage, config_path=args.config)
    except NotepileError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    handlers = {
        "view": cmd_view,
        "ls": cmd_ls,
        "render": cmd_render,
    }

    handler = handlers.get(args.cmd)
    if handler:
        try:
            exit_code = handler(args, rt)
            sys.exit(exit_code)
        except Exception as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        print(f"Unknown command: {args.cmd}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
