from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QComboBox, QHBoxLayout, QLabel, QMainWindow, QVBoxLayout, QWidget

from ..runtime import Runtime
from ..watch import ChapterWatcher
from .viewer_panel import NoteViewerPanel


class MainWindow(QMainWindow):
    """Notebook/chapter pickers above the note list."""

    def __init__(self, rt: Runtime, watch: bool = True):
        super().__init__()
        self.rt = rt
        self.setWindowTitle("NotePile")
        self.resize(900, 700)

        self.notebooks = QComboBox()
        self.chapters = QComboBox()
        pickers = QHBoxLayout()
        pickers.addWidget(QLabel("Notebook:"))
        pickers.addWidget(self.notebooks, 1)
        pickers.addWidget(QLabel("Chapter:"))
        pickers.addWidget(self.chapters, 1)

        viewer_config = rt.config.viewer
        self.viewer = NoteViewerPanel(
            rt.store,
            rt.renderer,
            policy=rt.policy,
            descending=viewer_config.descending,
            date_format=viewer_config.date_format,
        )

        central = QWidget()
        layout = QVBoxLayout(central)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.addLayout(pickers)
        layout.addWidget(self.viewer, 1)
        self.setCentralWidget(central)

        self.watcher: ChapterWatcher | None = None
        self._watch_timer: QTimer | None = None
        if watch and rt.config.watch.enabled:
            self.watcher = ChapterWatcher(
                lambda changed, deleted: self.viewer.reload(),
                debounce_ms=rt.config.watch.debounce_ms,
            )
            self._watch_timer = QTimer(self)
            self._watch_timer.setInterval(rt.config.watch.poll_ms)
            self._watch_timer.timeout.connect(self.watcher.check_and_flush)
            self._watch_timer.start()

        self.notebooks.currentTextChanged.connect(self._notebook_changed)
        self.chapters.currentTextChanged.connect(self._chapter_changed)

    def open(self, notebook: str | None = None, chapter: str | None = None) -> None:
        self.notebooks.blockSignals(True)
        self.notebooks.clear()
        self.notebooks.addItems(self.rt.store.list_notebooks())
        if notebook:
            self.notebooks.setCurrentText(notebook)
        self.notebooks.blockSignals(False)
        self._notebook_changed(self.notebooks.currentText(), chapter)

    def _notebook_changed(self, notebook: str, chapter: str | None = None) -> None:
        self.chapters.blockSignals(True)
        self.chapters.clear()
        if notebook:
            self.chapters.addItems(self.rt.store.list_chapters(notebook))
        if chapter:
            self.chapters.setCurrentText(chapter)
        self.chapters.blockSignals(False)
        self._chapter_changed(self.chapters.currentText())

    def _chapter_changed(self, chapter: str) -> None:
        notebook = self.notebooks.currentText() or None
        self.viewer.load_chapter(notebook, chapter or None)
        if self.watcher is not None:
            self.watcher.watch(self.viewer.notes_dir())

    def closeEvent(self, event):  # noqa: N802
        if self._watch_timer is not None:
            self._watch_timer.stop()
        if self.watcher is not None:
            self.watcher.stop()
        self.viewer.shutdown()
        super().closeEvent(event)
