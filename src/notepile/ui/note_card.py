from datetime import datetime

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import QFrame, QHBoxLayout, QLabel, QMenu, QSizePolicy, QVBoxLayout, QWidget

from ..core.model import NoteRecord
from ..core.ports import RenderSurface

PLACEHOLDER_HEIGHT = 60


class ElidedLabel(QLabel):
    """Single-line label that shortens its text with an ellipsis to fit."""

    def __init__(self, text: str = "", parent: QWidget | None = None):
        super().__init__(parent)
        self._full_text = text
        self.setMinimumWidth(10)
        self.setSizePolicy(QSizePolicy.Policy.Ignored, QSizePolicy.Policy.Preferred)
        self.setToolTip(text)
        self._update_elided()

    def resizeEvent(self, event):  # noqa: N802
        super().resizeEvent(event)
        self._update_elided()

    def _update_elided(self) -> None:
        width = max(0, self.width())
        elided = self.fontMetrics().elidedText(self._full_text, Qt.TextElideMode.ElideRight, width)
        super().setText(elided)


class NoteCard(QFrame):
    """
    One note in the list: a title/date header over the rendered body.

    Shows a placeholder until its surface reports a successful load, and a
    static message if the load fails.
    """

    trash_requested = Signal(str)

    def __init__(self, note: NoteRecord, date_format: str = "%Y-%m-%d", parent: QWidget | None = None):
        super().__init__(parent)
        self.note = note
        self.setObjectName("NoteCard")
        self.setFrameShape(QFrame.Shape.Box)
        self.setStyleSheet("#NoteCard { border: 1px solid lightgray; }")
        self.setSizePolicy(QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Fixed)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 4, 8, 4)
        layout.setSpacing(0)

        self.header = QWidget(self)
        header_layout = QHBoxLayout(self.header)
        header_layout.setContentsMargins(0, 0, 0, 0)
        header_layout.setSpacing(16)

        self.title_label = ElidedLabel(note.display_title, self.header)
        font = QFont(self.title_label.font())
        font.setBold(True)
        font.setPointSizeF(14)
        self.title_label.setFont(font)
        header_layout.addWidget(self.title_label, 1)

        self.date_label: QLabel | None = None
        if note.date:
            self.date_label = QLabel(note.date, self.header)
            self.date_label.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
            self.date_label.setStyleSheet("color: #444;")
            self.date_label.setToolTip(note.date)
            header_layout.addWidget(self.date_label, 0)

        layout.addWidget(self.header)

        self.content = QWidget(self)
        self.content_layout = QVBoxLayout(self.content)
        self.content_layout.setContentsMargins(0, 0, 0, 0)
        self.content_layout.setSpacing(0)
        self.placeholder: QLabel | None = QLabel("Rendering…", self.content)
        self.placeholder.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.placeholder.setMinimumHeight(PLACEHOLDER_HEIGHT)
        self.content_layout.addWidget(self.placeholder)
        layout.addWidget(self.content)

        self.view: QWidget | None = None
        self.setToolTip(self._tooltip(date_format))
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.customContextMenuRequested.connect(self._show_context_menu)

    def _tooltip(self, date_format: str) -> str:
        lines = []
        if self.note.people_list:
            lines.append("People: " + ", ".join(self.note.people_list))
        if self.note.label_list:
            lines.append("Labels: " + ", ".join(self.note.label_list))
        if self.note.created_at is not None:
            created = datetime.fromtimestamp(self.note.created_at / 1000)
            lines.append("Created: " + created.strftime(date_format))
        return "\n".join(lines)

    def _show_context_menu(self, pos) -> None:
        menu = QMenu(self)
        trash = menu.addAction("Move to trash")
        trash.triggered.connect(lambda: self.trash_requested.emit(self.note.key))
        menu.exec(self.mapToGlobal(pos))

    # NoteContainer

    def header_height(self) -> int:
        return self.header.sizeHint().height()

    def embed_view(self, view: QWidget) -> None:
        """Host a surface's view while it loads; it must be visible to lay out."""
        self.view = view
        view.setParent(self.content)
        view.setFixedHeight(1)
        self.content_layout.addWidget(view)

    def attach_surface(self, surface: RenderSurface) -> None:
        if self.placeholder is not None:
            self.content_layout.removeWidget(self.placeholder)
            self.placeholder.deleteLater()
            self.placeholder = None

    def apply_size(self, width: int, surface_height: int, total_height: int) -> None:
        self.setFixedHeight(total_height)
        self.updateGeometry()

    def show_error(self, message: str) -> None:
        while self.content_layout.count():
            item = self.content_layout.takeAt(0)
            widget = item.widget()
            if widget is not None and widget is not self.view:
                widget.deleteLater()
        self.placeholder = None
        self.view = None
        label = QLabel(message, self.content)
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        label.setMinimumHeight(PLACEHOLDER_HEIGHT)
        self.content_layout.addWidget(label)
        self.setMinimumHeight(0)
        self.setMaximumHeight(16777215)
