import logging
from typing import Callable, Iterator

from .model import HeightSignal, NoteKey, RenderEntry
from .ports import NoteContainer

logger = logging.getLogger(__name__)


class RenderRegistry:
    """
    Live render entries keyed by note.

    Generations are issued per key and never go backwards for the lifetime of
    the registry, across clears included. A height signal is only current if a
    live entry exists for its key with exactly the signal's generation.
    """

    def __init__(
        self,
        release: Callable[[RenderEntry], None] | None = None,
        cancel: Callable[[RenderEntry], None] | None = None,
    ):
        self._entries: dict[NoteKey, RenderEntry] = {}
        self._generations: dict[NoteKey, int] = {}
        self._release = release
        self._cancel = cancel

    def create_entry(
        self, note_key: NoteKey, container: NoteContainer, header_height: int = 0
    ) -> RenderEntry:
        if note_key in self._entries:
            self.invalidate(note_key)
        generation = self._generations.get(note_key, 0) + 1
        self._generations[note_key] = generation
        entry = RenderEntry(
            note_key=note_key,
            generation=generation,
            container=container,
            header_height=header_height,
        )
        self._entries[note_key] = entry
        return entry

    def invalidate(self, note_key: NoteKey) -> RenderEntry | None:
        entry = self._entries.pop(note_key, None)
        if entry is None:
            return None

        # Bump first so anything arriving during teardown is already stale
        entry.generation += 1
        self._generations[note_key] = max(
            self._generations.get(note_key, 0), entry.generation
        )

        if self._cancel is not None:
            self._cancel(entry)

        if self._release is not None:
            self._release(entry)
        entry.surface = None
        logger.debug("invalidated %s (generation now %d)", note_key, entry.generation)
        return entry

    def clear_all(self) -> None:
        for key in list(self._entries):
            self.invalidate(key)

    def get(self, note_key: NoteKey) -> RenderEntry | None:
        return self._entries.get(note_key)

    def generation(self, note_key: NoteKey) -> int:
        """Last generation issued for a key (0 if never created)."""
        return self._generations.get(note_key, 0)

    def is_current(self, signal: HeightSignal) -> bool:
        entry = self._entries.get(signal.note_key)
        return entry is not None and entry.generation == signal.generation

    def entries(self) -> list[RenderEntry]:
        return list(self._entries.values())

    def __iter__(self) -> Iterator[RenderEntry]:
        return iter(self.entries())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, note_key: object) -> bool:
        return note_key in self._entries
