"""Chapter watcher - reload the viewer when note files change on disk."""

import logging
import threading
import time
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

BatchCallback = Callable[[set[str], set[str]], None]


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with debouncing.

    Events arrive on the observer thread; ``check_and_flush`` is meant to be
    polled from the GUI thread so the batch callback runs there.
    """

    def __init__(self, notes_dir: Path, on_batch: BatchCallback | None, debounce_ms: int = 150):
        super().__init__()
        self.notes_dir = notes_dir
        self.on_batch = on_batch
        self.debounce_ms = debounce_ms

        # Pending changes by note file name
        self.changed: set[str] = set()
        self.deleted: set[str] = set()
        self.last_event_time = 0.0
        self._lock = threading.Lock()

    def _should_skip(self, path: Path) -> bool:
        """Check if file should be skipped."""
        name = path.name

        # Hidden files
        if name.startswith("."):
            return True

        # Temp/swap files
        if name.endswith("~") or name.endswith(".swp") or name.endswith(".tmp"):
            return True

        # Only note records
        if not name.lower().endswith(".json"):
            return True

        return False

    def _note_name(self, src_path) -> str | None:
        path = Path(str(src_path))
        if self._should_skip(path):
            return None
        return path.name

    def _record(self, target: set[str], src_path) -> None:
        name = self._note_name(src_path)
        if name is None:
            return
        with self._lock:
            target.add(name)
            self.last_event_time = time.time()

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record(self.changed, event.src_path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record(self.changed, event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._record(self.deleted, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._record(self.deleted, event.src_path)
        dest = getattr(event, "dest_path", None)
        if dest and Path(str(dest)).parent == Path(str(event.src_path)).parent:
            self._record(self.changed, dest)

    def pending(self) -> bool:
        with self._lock:
            return bool(self.changed or self.deleted)

    def check_and_flush(self) -> bool:
        """Flush if the debounce period has elapsed. Returns True if flushed."""
        with self._lock:
            if not (self.changed or self.deleted):
                return False
            elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            return self.flush()
        return False

    def flush(self) -> bool:
        """Process accumulated events."""
        with self._lock:
            if not (self.changed or self.deleted):
                return False
            changed = set(self.changed)
            deleted = set(self.deleted)
            self.changed.clear()
            self.deleted.clear()

        logger.debug("notes changed: ~%d -%d", len(changed), len(deleted))
        if self.on_batch:
            self.on_batch(changed, deleted)
        return True


class ChapterWatcher:
    """
    Watches one chapter's notes directory at a time.

    ``watch()`` re-targets the observer; ``check_and_flush()`` must be called
    periodically by the owner's event loop.
    """

    def __init__(self, on_batch: BatchCallback, debounce_ms: int = 150):
        self.on_batch = on_batch
        self.debounce_ms = debounce_ms
        self.handler: DebounceHandler | None = None
        self._observer = None

    @property
    def watching(self) -> Path | None:
        return self.handler.notes_dir if self.handler is not None else None

    def watch(self, notes_dir: Path | None) -> bool:
        self.stop()
        if notes_dir is None or not notes_dir.is_dir():
            return False

        self.handler = DebounceHandler(notes_dir, self.on_batch, self.debounce_ms)
        observer = Observer()
        observer.schedule(self.handler, str(notes_dir), recursive=False)
        observer.start()
        self._observer = observer
        logger.info("watching %s (debounce: %dms)", notes_dir, self.debounce_ms)
        return True

    def check_and_flush(self) -> bool:
        if self.handler is None:
            return False
        return self.handler.check_and_flush()

    def stop(self) -> None:
        observer, self._observer = self._observer, None
        self.handler = None
        if observer is not None:
            observer.stop()
            observer.join()
