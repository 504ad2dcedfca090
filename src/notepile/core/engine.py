"""Render engine: populates the host with notes and reconciles their heights."""

import logging
from pathlib import Path
from typing import Iterable

from .document import plain_text_block, wrap_document
from .errors import NoteReadError
from .layout import LayoutApplier, LayoutPolicy
from .measure import parse_height_payload
from .model import HeightSignal, NoteKey, NoteRecord, RenderEntry
from .pool import SurfacePool
from .ports import LayoutHost, MarkupRenderer, Scheduler, SurfaceFactory
from .registry import RenderRegistry
from .resize import ResizeCoordinator

logger = logging.getLogger(__name__)


def render_fragment(renderer: MarkupRenderer, markup: str) -> str:
    """Render a note body, falling back to escaped plain text on failure."""
    try:
        return renderer.render(markup or "")
    except Exception:
        logger.warning("markup rendering failed, showing plain text", exc_info=True)
        return plain_text_block(markup)


class RenderEngine:
    """
    Owns the registry, the surface pool, the layout applier and the resize
    coordinator, and routes height reports between them.

    Must only be driven from the host layout thread.
    """

    def __init__(
        self,
        host: LayoutHost,
        surfaces: SurfaceFactory,
        scheduler: Scheduler,
        renderer: MarkupRenderer,
        policy: LayoutPolicy | None = None,
    ):
        self.host = host
        self.renderer = renderer
        self.policy = policy or LayoutPolicy()
        self.pool = SurfacePool(
            surfaces, scheduler, self.deliver, self.policy.fallback_delay_ms
        )
        self.applier = LayoutApplier(scheduler, host, self.policy)
        self.registry = RenderRegistry(release=self.pool.release, cancel=self.applier.cancel)
        self.resizer = ResizeCoordinator(self.registry, scheduler, host, self.policy)

    def available_width(self) -> int:
        return self.policy.available_width(self.host.viewport_width())

    def render_fragment(self, markup: str) -> str:
        return render_fragment(self.renderer, markup)

    def show_notes(self, notes: Iterable[NoteRecord | NoteReadError]) -> list[RenderEntry]:
        """
        Replace the displayed notes. Every previous entry is invalidated
        first; unreadable notes become a message in their list position.
        """
        self.registry.clear_all()
        self.host.clear()

        width = self.available_width()
        created = []
        for note in notes:
            if isinstance(note, NoteReadError):
                self.host.show_message(f"Failed to read note: {Path(note.path).name}")
                continue
            container = self.host.create_container(note)
            entry = self.registry.create_entry(note.key, container, container.header_height())
            document = wrap_document(self.render_fragment(note.body), note.base_url, width)
            self.pool.acquire_and_load(entry, document, width, note.base_url)
            created.append(entry)

        self.host.relayout()
        return created

    def show_message(self, message: str) -> None:
        self.registry.clear_all()
        self.host.clear()
        self.host.show_message(message)
        self.host.relayout()

    def deliver(self, note_key: NoteKey, generation: int, payload: str) -> None:
        """Sink for raw channel payloads from a surface."""
        height = parse_height_payload(payload)
        if height is None:
            return
        self.handle_signal(HeightSignal(note_key, generation, height))

    def handle_signal(self, signal: HeightSignal) -> bool:
        if not self.registry.is_current(signal):
            logger.debug(
                "dropping stale height for %s (generation %d)",
                signal.note_key, signal.generation,
            )
            return False
        if signal.height <= 0:
            return False
        entry = self.registry.get(signal.note_key)
        if entry is None or entry.surface is None:
            return False
        self.applier.submit(entry, signal.height)
        return True

    def viewport_resized(self) -> None:
        self.resizer.viewport_resized()

    def remove_note(self, note_key: NoteKey) -> None:
        self.registry.invalidate(note_key)

    def shutdown(self) -> None:
        self.resizer.cancel()
        self.registry.clear_all()
