"""Note records stored as one JSON file each.

Layout: ``<storage>/<notebook>/<chapter>/notes/<name>.json`` with attachments
in ``notes/attachments``. Deleted notes are moved under ``<storage>/.garbage``.
"""

import json
import shutil
import time
from pathlib import Path
from typing import Any

from ..core.errors import NoteReadError
from ..core.model import NoteRecord

NOTES_DIRNAME = "notes"
GARBAGE_DIRNAME = ".garbage"


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _millis(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


class JsonNoteStore:
    def __init__(self, root: Path):
        self.root = Path(root)

    def _subdirs(self, path: Path) -> list[str]:
        if not path.is_dir():
            return []
        return sorted(
            p.name for p in path.iterdir() if p.is_dir() and not p.name.startswith(".")
        )

    def list_notebooks(self) -> list[str]:
        return self._subdirs(self.root)

    def list_chapters(self, notebook: str) -> list[str]:
        return self._subdirs(self.root / notebook)

    def notes_dir(self, notebook: str, chapter: str) -> Path:
        return self.root / notebook / chapter / NOTES_DIRNAME

    def note_files(self, notebook: str, chapter: str, descending: bool = True) -> list[Path]:
        notes_dir = self.notes_dir(notebook, chapter)
        if not notes_dir.is_dir():
            return []
        files = [
            p for p in notes_dir.iterdir()
            if p.is_file() and p.name.lower().endswith(".json")
        ]
        files.sort(key=lambda p: p.name, reverse=descending)
        return files

    def read_note(self, path: Path) -> NoteRecord:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise NoteReadError(path, str(e)) from e
        if not isinstance(data, dict):
            raise NoteReadError(path, "note file is not a JSON object")

        return NoteRecord(
            key=str(path),
            notebook=_text(data.get("notebook")),
            chapter=_text(data.get("chapter")),
            title=_text(data.get("title")),
            date=_text(data.get("date")),
            people=_text(data.get("people")),
            labels=_text(data.get("labels")),
            body=_text(data.get("content")),
            created_at=_millis(data.get("createdAt")),
            attachment_base=path.parent,
        )

    def load_notes(
        self, notebook: str, chapter: str, descending: bool = True
    ) -> list[NoteRecord | NoteReadError]:
        """
        Read every note of a chapter in display order.

        Unreadable files are returned as their NoteReadError so the caller
        can show them in place instead of dropping them.
        """
        out: list[NoteRecord | NoteReadError] = []
        for path in self.note_files(notebook, chapter, descending):
            try:
                out.append(self.read_note(path))
            except NoteReadError as e:
                out.append(e)
        return out

    def trash_note(self, path: Path, notebook: str, chapter: str) -> Path:
        """Move a note file into the storage's garbage folder."""
        path = Path(path)
        garbage = self.root / GARBAGE_DIRNAME / notebook / chapter / NOTES_DIRNAME
        garbage.mkdir(parents=True, exist_ok=True)
        target = garbage / path.name
        if target.exists():
            target = garbage / f"{path.stem}-{int(time.time() * 1000)}{path.suffix}"
        shutil.move(str(path), str(target))
        return target
