from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ports import NoteContainer, RenderSurface, Timer

NoteKey = str


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(frozen=True)
class NoteRecord:
    key: NoteKey  # note file path; stable for the duration of a render pass
    notebook: str = ""
    chapter: str = ""
    title: str = ""
    date: str = ""  # already formatted by whoever wrote the note
    people: str = ""  # comma separated
    labels: str = ""  # comma separated
    body: str = ""  # markup, opaque to the engine
    created_at: int | None = None  # epoch millis
    attachment_base: Path | None = None  # relative attachment links resolve here

    @property
    def display_title(self) -> str:
        if self.title:
            return self.title
        return Path(self.key).name

    @property
    def people_list(self) -> list[str]:
        return _split_csv(self.people)

    @property
    def label_list(self) -> list[str]:
        return _split_csv(self.labels)

    @property
    def base_url(self) -> str | None:
        if self.attachment_base is None:
            return None
        return Path(self.attachment_base).resolve().as_uri() + "/"


@dataclass
class RenderEntry:
    """Bookkeeping for one displayed note's render and measurement state."""

    note_key: NoteKey
    generation: int
    container: "NoteContainer"  # not owned
    header_height: int = 0
    surface: "RenderSurface | None" = None  # owned; released on invalidation
    last_width: int | None = None
    pending_height: float | None = None
    debounce_timer: "Timer | None" = None
    applied_height: int | None = None
    failed: bool = False


@dataclass(frozen=True)
class HeightSignal:
    note_key: NoteKey
    generation: int
    height: float
