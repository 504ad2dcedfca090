from typing import Callable, Protocol

from .model import NoteRecord

LoadCallback = Callable[[bool], None]
MessageHandler = Callable[[str], None]
ResultCallback = Callable[[object], None]
InjectCallback = Callable[[bool], None]


class MarkupRenderer(Protocol):
    """
    Markup text -> HTML fragment. Pure; may raise on pathological input.
    """

    def render(self, markup: str) -> str:
        pass


class RenderSurface(Protocol):
    """
    One embedded document-rendering surface. Runs on its own execution
    context; every call here is fire-and-forget from the host's side.
    """

    def set_preferred_width(self, width: int) -> None:
        pass

    def set_height(self, height: int) -> None:
        pass

    def load(
        self, document: str, base_url: str | None, on_finished: LoadCallback
    ) -> None:
        pass

    def inject_script(self, script: str, on_result: InjectCallback) -> None:
        """
        Run the measurement script once after load. ``on_result(True)`` follows
        once it has run to completion, ``on_result(False)`` if it threw.
        Raises ScriptInjectionError if the script cannot be submitted at all.
        """
        pass

    def run_script(self, script: str) -> None:
        pass

    def evaluate(self, script: str, callback: ResultCallback) -> None:
        pass

    def set_message_handler(self, handler: MessageHandler | None) -> None:
        """Arm (or with None, disarm) the one-way message channel."""
        pass

    def dispose(self) -> None:
        pass


class SurfaceFactory(Protocol):
    def create(self, container: "NoteContainer") -> RenderSurface:
        pass


class Timer(Protocol):
    """Single-shot timer; start() on a running timer restarts it."""

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    def is_active(self) -> bool:
        pass

    def dispose(self) -> None:
        """Stop for good and free toolkit resources."""
        pass


class Scheduler(Protocol):
    """
    Host-thread timers. Callbacks always run on the host layout thread.
    """

    def create_timer(self, interval_ms: int, callback: Callable[[], None]) -> Timer:
        pass

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        pass


class NoteContainer(Protocol):
    """
    The host layout element for one note: header row plus content area.
    """

    def header_height(self) -> int:
        pass

    def attach_surface(self, surface: RenderSurface) -> None:
        pass

    def apply_size(self, width: int, surface_height: int, total_height: int) -> None:
        pass

    def show_error(self, message: str) -> None:
        pass


class LayoutHost(Protocol):
    """
    The scrollable list that owns every container.
    """

    def viewport_width(self) -> int:
        pass

    def create_container(self, note: NoteRecord) -> NoteContainer:
        pass

    def clear(self) -> None:
        pass

    def show_message(self, message: str) -> None:
        pass

    def relayout(self) -> None:
        pass
