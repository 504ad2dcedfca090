"""In-memory stand-ins for the toolkit side of the render engine."""

import json
import os
import subprocess
import sys
from pathlib import Path

from notepile.core.errors import ScriptInjectionError
from notepile.core.model import NoteRecord

SRC_DIR = Path(__file__).resolve().parent.parent / "src"


def run_cli(*args, cwd=None) -> subprocess.CompletedProcess:
    """Run ``python -m notepile.cli`` against the source tree."""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_DIR), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "notepile.cli", *map(str, args)],
        capture_output=True,
        text=True,
        cwd=cwd,
        env=env,
    )


def write_note(notes_dir: Path, name: str, **fields) -> Path:
    """Write one note record the way the editor saves them."""
    notes_dir.mkdir(parents=True, exist_ok=True)
    path = notes_dir / name
    path.write_text(json.dumps(fields), encoding="utf-8")
    return path


def note(key: str, body: str = "Hello", **kwargs) -> NoteRecord:
    return NoteRecord(key=key, body=body, **kwargs)


class FakeTimer:
    def __init__(self, scheduler: "ManualScheduler", interval_ms: int, callback):
        self.scheduler = scheduler
        self.interval_ms = interval_ms
        self.callback = callback
        self.deadline: int | None = None
        self.starts = 0
        self.disposed = False

    def start(self) -> None:
        self.deadline = self.scheduler.now + self.interval_ms
        self.starts += 1

    def stop(self) -> None:
        self.deadline = None

    def is_active(self) -> bool:
        return self.deadline is not None

    def dispose(self) -> None:
        self.deadline = None
        self.disposed = True


class ManualScheduler:
    """Virtual clock. Nothing fires until ``advance()`` is called."""

    def __init__(self):
        self.now = 0
        self.timers: list[FakeTimer] = []
        self._calls: list[tuple[int, int, object]] = []
        self._seq = 0

    def create_timer(self, interval_ms: int, callback) -> FakeTimer:
        timer = FakeTimer(self, interval_ms, callback)
        self.timers.append(timer)
        return timer

    def call_later(self, delay_ms: int, callback) -> None:
        self._seq += 1
        self._calls.append((self.now + delay_ms, self._seq, callback))

    def _next_due(self, until: int):
        best = None
        for timer in self.timers:
            if timer.deadline is not None and timer.deadline <= until:
                if best is None or timer.deadline < best[0]:
                    best = (timer.deadline, timer)
        for call in self._calls:
            if call[0] <= until and (best is None or call[0] < best[0]):
                best = (call[0], call)
        return best

    def advance(self, ms: int) -> None:
        target = self.now + ms
        while True:
            due = self._next_due(target)
            if due is None:
                break
            deadline, item = due
            self.now = deadline
            if isinstance(item, FakeTimer):
                item.deadline = None
                item.callback()
            else:
                self._calls.remove(item)
                item[2]()
        self.now = target

    def pending_calls(self) -> int:
        return len(self._calls)


class FakeSurface:
    """Records everything the engine asks of a surface."""

    def __init__(
        self,
        container=None,
        inject_fails: bool = False,
        height_result=None,
        inject_result=True,
        defer_inject: bool = False,
    ):
        self.container = container
        self.inject_fails = inject_fails
        self.inject_result = inject_result
        self.defer_inject = defer_inject
        self.inject_callback = None
        self.fail_set_height = False
        self.height_result = height_result
        self.widths: list[int] = []
        self.heights: list[int] = []
        self.document: str | None = None
        self.base_url: str | None = None
        self.on_finished = None
        self.injected: list[str] = []
        self.scripts: list[str] = []
        self.evaluations: list[str] = []
        self.handler = None
        self.disposed = False

    # RenderSurface

    def set_preferred_width(self, width: int) -> None:
        self.widths.append(width)

    def set_height(self, height: int) -> None:
        if self.fail_set_height:
            raise RuntimeError("view already deleted")
        self.heights.append(height)

    def load(self, document: str, base_url, on_finished) -> None:
        self.document = document
        self.base_url = base_url
        self.on_finished = on_finished

    def inject_script(self, script: str, on_result) -> None:
        if self.inject_fails:
            raise ScriptInjectionError("injection refused")
        self.injected.append(script)
        self.inject_callback = on_result
        if not self.defer_inject:
            on_result(self.inject_result is True)

    def run_script(self, script: str) -> None:
        self.scripts.append(script)

    def evaluate(self, script: str, callback) -> None:
        self.evaluations.append(script)
        callback(self.height_result)

    def set_message_handler(self, handler) -> None:
        self.handler = handler

    def dispose(self) -> None:
        self.disposed = True

    # Test drivers

    def finish_load(self, ok: bool = True) -> None:
        self.on_finished(ok)

    def emit(self, payload: str) -> bool:
        """Send a channel message; False if nobody is listening."""
        if self.handler is None:
            return False
        self.handler(payload)
        return True

    @property
    def width(self) -> int | None:
        return self.widths[-1] if self.widths else None


class FakeSurfaceFactory:
    def __init__(self, **surface_options):
        self.surface_options = surface_options
        self.created: list[FakeSurface] = []

    def create(self, container) -> FakeSurface:
        surface = FakeSurface(container, **self.surface_options)
        self.created.append(surface)
        return surface


class FakeContainer:
    def __init__(self, note_key: str, header: int = 24):
        self.note_key = note_key
        self.header = header
        self.surface = None
        self.sizes: list[tuple[int, int, int]] = []
        self.errors: list[str] = []
        self.fail_apply = False

    def header_height(self) -> int:
        return self.header

    def attach_surface(self, surface) -> None:
        self.surface = surface

    def apply_size(self, width: int, surface_height: int, total_height: int) -> None:
        if self.fail_apply:
            raise RuntimeError("container is gone")
        self.sizes.append((width, surface_height, total_height))

    def show_error(self, message: str) -> None:
        self.errors.append(message)


class FakeHost:
    def __init__(self, width: int = 800, header: int = 24):
        self.width = width
        self.header = header
        self.containers: dict[str, FakeContainer] = {}
        self.order: list[str] = []
        self.messages: list[str] = []
        self.clears = 0
        self.relayouts = 0

    def viewport_width(self) -> int:
        return self.width

    def create_container(self, note: NoteRecord) -> FakeContainer:
        container = FakeContainer(note.key, self.header)
        self.containers[note.key] = container
        self.order.append(note.key)
        return container

    def clear(self) -> None:
        self.clears += 1
        self.containers.clear()
        self.order.clear()
        self.messages.clear()

    def show_message(self, message: str) -> None:
        self.messages.append(message)

    def relayout(self) -> None:
        self.relayouts += 1


class EchoRenderer:
    """Wraps the body in a paragraph; raises on demand."""

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.calls = 0

    def render(self, markup: str) -> str:
        self.calls += 1
        if self.fail_on is not None and self.fail_on in markup:
            raise ValueError("renderer exploded")
        return f"<p>{markup}</p>"
