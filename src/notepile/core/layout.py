"""Debounced application of measured heights to note containers."""

import logging
from dataclasses import dataclass

from .model import RenderEntry
from .ports import LayoutHost, Scheduler

logger = logging.getLogger(__name__)

# Quiet period before a note's last reported height is applied
DEBOUNCE_MS = 30
# Quiet period after the last viewport resize before remeasuring
RESIZE_DEBOUNCE_MS = 180
# Delay of the second height query when the measurement script could not be injected
FALLBACK_DELAY_MS = 100

MIN_HEIGHT = 80
MAX_HEIGHT = 4000
CONTENT_PADDING = 16
CHROME_PADDING = 16
MIN_WIDTH = 200
WIDTH_MARGIN = 32


@dataclass(frozen=True)
class LayoutPolicy:
    """Timing and sizing constants for measurement and layout."""
    debounce_ms: int = DEBOUNCE_MS
    resize_debounce_ms: int = RESIZE_DEBOUNCE_MS
    fallback_delay_ms: int = FALLBACK_DELAY_MS
    min_height: int = MIN_HEIGHT
    max_height: int = MAX_HEIGHT
    content_padding: int = CONTENT_PADDING
    chrome_padding: int = CHROME_PADDING
    min_width: int = MIN_WIDTH
    width_margin: int = WIDTH_MARGIN

    def surface_height(self, measured: float) -> int:
        return int(max(self.min_height, min(self.max_height, round(measured) + self.content_padding)))

    def total_height(self, surface_height: int, header_height: int) -> int:
        return surface_height + header_height + self.chrome_padding

    def available_width(self, viewport_width: int) -> int:
        return max(self.min_width, viewport_width - self.width_margin)


class LayoutApplier:
    """
    Coalesces bursts of height reports into one layout update per note.

    Each entry gets its own timer, so a slow note never delays another. The
    timer is restarted on every report; when it finally fires, the last
    pending height wins.
    """

    def __init__(self, scheduler: Scheduler, host: LayoutHost, policy: LayoutPolicy | None = None):
        self.scheduler = scheduler
        self.host = host
        self.policy = policy or LayoutPolicy()
        self.applied_count = 0

    def submit(self, entry: RenderEntry, height: float) -> None:
        entry.pending_height = height
        if entry.debounce_timer is None:
            generation = entry.generation
            entry.debounce_timer = self.scheduler.create_timer(
                self.policy.debounce_ms, lambda: self._fire(entry, generation)
            )
        entry.debounce_timer.start()

    def cancel(self, entry: RenderEntry) -> None:
        """Stop and free the entry's timer; its pending height is dropped."""
        timer, entry.debounce_timer = entry.debounce_timer, None
        entry.pending_height = None
        if timer is not None:
            timer.stop()
            timer.dispose()

    def _fire(self, entry: RenderEntry, generation: int) -> None:
        if entry.generation != generation:
            # invalidated while the timer was pending
            return
        height = entry.pending_height
        entry.pending_height = None
        if height is None or height <= 0:
            return
        self.apply(entry, height)

    def apply(self, entry: RenderEntry, height: float) -> bool:
        """Apply one height to an entry now. Returns True on success."""
        surface = entry.surface
        if surface is None:
            return False

        policy = self.policy
        surface_height = policy.surface_height(height)
        total = policy.total_height(surface_height, entry.header_height)
        width = policy.available_width(self.host.viewport_width())
        try:
            entry.container.apply_size(width, surface_height, total)
            surface.set_height(surface_height)
            self.host.relayout()
        except Exception:
            logger.warning("failed to apply height to %s", entry.note_key, exc_info=True)
            self._restore(entry, width)
            return False

        entry.applied_height = surface_height
        self.applied_count += 1
        logger.debug(
            "applied height note=%s height=%d total=%d width=%d",
            entry.note_key, surface_height, total, width,
        )
        return True

    def _restore(self, entry: RenderEntry, width: int) -> None:
        """Put container and surface back to the last applied height."""
        good = entry.applied_height
        surface = entry.surface
        if good is None or surface is None:
            return
        total = self.policy.total_height(good, entry.header_height)
        for step in (
            lambda: entry.container.apply_size(width, good, total),
            lambda: surface.set_height(good),
        ):
            try:
                step()
            except Exception:
                logger.debug("could not restore size of %s", entry.note_key, exc_info=True)
