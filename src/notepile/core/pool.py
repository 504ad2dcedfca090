import logging
from typing import Callable

from .errors import ScriptInjectionError
from .layout import FALLBACK_DELAY_MS
from .measure import MEASURE_SCRIPT, poll_heights
from .model import NoteKey, RenderEntry
from .ports import Scheduler, SurfaceFactory

logger = logging.getLogger(__name__)

Sink = Callable[[NoteKey, int, str], None]

LOAD_ERROR_MESSAGE = "Failed to render note."


class SurfacePool:
    """
    Creates, loads and releases the rendering surface owned by each entry.

    Every callback handed to a surface is tagged with the entry's generation
    at acquisition time; the sink decides whether the tag is still current.
    """

    def __init__(
        self,
        factory: SurfaceFactory,
        scheduler: Scheduler,
        sink: Sink,
        fallback_delay_ms: int = FALLBACK_DELAY_MS,
    ):
        self.factory = factory
        self.scheduler = scheduler
        self.sink = sink
        self.fallback_delay_ms = fallback_delay_ms

    def acquire_and_load(
        self,
        entry: RenderEntry,
        document: str,
        initial_width: int,
        base_url: str | None = None,
    ) -> None:
        if entry.surface is not None:
            self.release(entry)

        surface = self.factory.create(entry.container)
        surface.set_preferred_width(initial_width)
        entry.surface = surface
        entry.last_width = initial_width
        entry.failed = False

        generation = entry.generation
        done = False
        polling = False

        def current() -> bool:
            return entry.generation == generation and entry.surface is surface

        def emit(payload: str) -> None:
            self.sink(entry.note_key, generation, payload)

        def fall_back() -> None:
            nonlocal polling
            if polling or not current():
                return
            polling = True
            logger.warning(
                "measurement script injection failed for %s, polling instead",
                entry.note_key,
            )
            surface.set_message_handler(None)
            poll_heights(surface, emit, self.scheduler, self.fallback_delay_ms, current)

        def on_injected(ok: bool) -> None:
            if ok is not True:
                fall_back()

        def on_finished(ok: bool) -> None:
            nonlocal done
            if done or not current():
                return
            done = True
            if not ok:
                self._load_failed(entry)
                return

            entry.container.attach_surface(surface)
            surface.set_message_handler(emit)
            try:
                surface.inject_script(MEASURE_SCRIPT, on_injected)
            except ScriptInjectionError:
                fall_back()

        surface.load(document, base_url, on_finished)

    def _load_failed(self, entry: RenderEntry) -> None:
        logger.warning("document load failed for %s", entry.note_key)
        entry.failed = True
        self.release(entry)
        try:
            entry.container.show_error(LOAD_ERROR_MESSAGE)
        except Exception:
            logger.warning("could not show load error for %s", entry.note_key, exc_info=True)

    def release(self, entry: RenderEntry) -> None:
        surface = entry.surface
        if surface is None:
            return
        entry.surface = None
        try:
            surface.set_message_handler(None)
        finally:
            surface.dispose()
