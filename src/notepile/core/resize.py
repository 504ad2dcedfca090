import logging

from .layout import LayoutPolicy
from .measure import REMEASURE_SCRIPT
from .ports import LayoutHost, Scheduler, Timer
from .registry import RenderRegistry

logger = logging.getLogger(__name__)


class ResizeCoordinator:
    """
    Re-drives measurement for every live note after the viewport width
    settles. Surfaces are resized and asked to remeasure in place; nothing
    is reloaded.
    """

    def __init__(
        self,
        registry: RenderRegistry,
        scheduler: Scheduler,
        host: LayoutHost,
        policy: LayoutPolicy | None = None,
    ):
        self.registry = registry
        self.host = host
        self.policy = policy or LayoutPolicy()
        self._timer: Timer = scheduler.create_timer(
            self.policy.resize_debounce_ms, self.remeasure_all
        )
        self.passes = 0

    def viewport_resized(self) -> None:
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()

    def pending(self) -> bool:
        return self._timer.is_active()

    def remeasure_all(self, width: int | None = None) -> int:
        if width is None:
            width = self.policy.available_width(self.host.viewport_width())
        self.passes += 1

        count = 0
        for entry in self.registry.entries():
            surface = entry.surface
            if surface is None or entry.failed:
                continue
            if entry.last_width == width:
                continue
            try:
                surface.set_preferred_width(width)
                surface.run_script(REMEASURE_SCRIPT)
            except Exception:
                logger.warning("remeasure failed for %s", entry.note_key, exc_info=True)
                continue
            entry.last_width = width
            count += 1

        logger.debug("resize pass width=%d remeasured=%d", width, count)
        return count
