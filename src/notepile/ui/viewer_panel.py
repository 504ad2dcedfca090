"""Scrollable list of rendered notes for one chapter."""

import logging
from pathlib import Path

from PySide6.QtCore import QEvent, Qt
from PySide6.QtWidgets import QLabel, QMessageBox, QScrollArea, QVBoxLayout, QWidget

from ..adapters.json_store import JsonNoteStore
from ..adapters.qt_scheduler import QtScheduler
from ..adapters.qt_surface import QtSurfaceFactory
from ..core.engine import RenderEngine
from ..core.layout import LayoutPolicy
from ..core.model import NoteRecord
from ..core.ports import MarkupRenderer
from .note_card import NoteCard

logger = logging.getLogger(__name__)


class NoteViewerPanel(QWidget):
    """
    Host side of the render engine: owns the scroll area and the note cards,
    and tells the engine when the viewport width changes.
    """

    def __init__(
        self,
        store: JsonNoteStore,
        renderer: MarkupRenderer,
        policy: LayoutPolicy | None = None,
        descending: bool = True,
        date_format: str = "%Y-%m-%d",
        parent: QWidget | None = None,
    ):
        super().__init__(parent)
        self.store = store
        self.descending = descending
        self.date_format = date_format
        self.notebook: str | None = None
        self.chapter: str | None = None

        self.list_widget = QWidget()
        self.list_layout = QVBoxLayout(self.list_widget)
        self.list_layout.setContentsMargins(8, 8, 8, 8)
        self.list_layout.setSpacing(8)
        self.list_layout.addStretch(1)

        self.scroll = QScrollArea(self)
        self.scroll.setWidgetResizable(True)
        self.scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.scroll.setWidget(self.list_widget)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.scroll)

        self.engine = RenderEngine(
            host=self,
            surfaces=QtSurfaceFactory(wheel_target=self.scroll.viewport),
            scheduler=QtScheduler(self),
            renderer=renderer,
            policy=policy,
        )

        self._last_viewport_width = -1
        self.scroll.viewport().installEventFilter(self)

    # Chapter population

    def notes_dir(self) -> Path | None:
        if self.notebook is None or self.chapter is None:
            return None
        return self.store.notes_dir(self.notebook, self.chapter)

    def load_chapter(self, notebook: str | None, chapter: str | None) -> None:
        self.notebook = notebook
        self.chapter = chapter
        self.reload()

    def reload(self) -> None:
        notes_dir = self.notes_dir()
        if notes_dir is None:
            self.engine.show_message("No notebook/chapter selected.")
            return
        if not notes_dir.is_dir():
            self.engine.show_message("No notes directory found for this chapter.")
            return

        notes = self.store.load_notes(self.notebook, self.chapter, self.descending)
        if not notes:
            self.engine.show_message("No notes found in this chapter.")
            return
        self.engine.show_notes(notes)

    def trash_note(self, note_key: str) -> None:
        choice = QMessageBox.question(
            self,
            "Delete Note",
            "Are you sure you want to delete this note?\n"
            "It will be moved to the storage's .garbage folder.",
        )
        if choice != QMessageBox.StandardButton.Yes:
            return
        try:
            self.store.trash_note(Path(note_key), self.notebook or "", self.chapter or "")
        except OSError as e:
            QMessageBox.critical(self, "Error", f"Failed to move note to .garbage: {e}")
            return
        logger.info("moved %s to garbage", note_key)
        self.reload()

    def shutdown(self) -> None:
        self.engine.shutdown()

    # LayoutHost

    def viewport_width(self) -> int:
        return self.scroll.viewport().width()

    def create_container(self, note: NoteRecord) -> NoteCard:
        card = NoteCard(note, self.date_format, self.list_widget)
        card.trash_requested.connect(self.trash_note)
        self.list_layout.insertWidget(self.list_layout.count() - 1, card)
        return card

    def clear(self) -> None:
        # keep the trailing stretch
        while self.list_layout.count() > 1:
            item = self.list_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.hide()
                widget.deleteLater()

    def show_message(self, message: str) -> None:
        label = QLabel(message, self.list_widget)
        label.setContentsMargins(6, 6, 6, 6)
        self.list_layout.insertWidget(self.list_layout.count() - 1, label)

    def relayout(self) -> None:
        self.list_layout.invalidate()
        self.list_widget.updateGeometry()

    # Qt

    def eventFilter(self, obj, event):  # noqa: N802
        if obj is self.scroll.viewport() and event.type() == QEvent.Type.Resize:
            width = event.size().width()
            if width != self._last_viewport_width:
                self._last_viewport_width = width
                self.engine.viewport_resized()
        return super().eventFilter(obj, event)
