"""QtWebEngine implementation of the render surface port."""

import logging
import os
import tempfile
from typing import Callable

from PySide6.QtCore import QEvent, QObject, QSize, Qt, QUrl
from PySide6.QtGui import QColor
from PySide6.QtWebEngineCore import QWebEnginePage, QWebEngineSettings
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import QApplication, QWidget

from ..core.errors import ScriptInjectionError
from ..core.ports import (
    InjectCallback,
    LoadCallback,
    MessageHandler,
    RenderSurface,
    ResultCallback,
    SurfaceFactory,
)

logger = logging.getLogger(__name__)

# QWebEnginePage.setHtml refuses documents over 2 MB; larger ones go through a file
SET_HTML_LIMIT = 1_900_000


class ChannelPage(QWebEnginePage):
    """Page whose console output is the one-way channel back to the host."""

    def __init__(self, parent: QObject | None = None):
        super().__init__(parent)
        self.message_handler: MessageHandler | None = None

    def javaScriptConsoleMessage(self, level, message, line_number, source_id):  # noqa: N802
        handler = self.message_handler
        if handler is not None:
            handler(message)


class NoteWebView(QWebEngineView):
    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self.preferred_width = 600
        self.content_height = 1

    def sizeHint(self) -> QSize:  # noqa: N802
        return QSize(self.preferred_width, self.content_height)


class WheelForwarder(QObject):
    """Sends wheel events from an embedded view to the enclosing scroll area."""

    def __init__(self, target: Callable[[], QWidget | None], parent: QObject | None = None):
        super().__init__(parent)
        self._target = target

    def eventFilter(self, obj, event):  # noqa: N802
        if event.type() == QEvent.Type.Wheel:
            target = self._target()
            if target is not None:
                QApplication.sendEvent(target, event)
                return True
        return False


class QtRenderSurface(RenderSurface):
    def __init__(self, view: NoteWebView, wheel_forwarder: WheelForwarder | None = None):
        self.view = view
        self.page = ChannelPage(view)
        self.page.setBackgroundColor(QColor(Qt.GlobalColor.transparent))
        self.page.settings().setAttribute(QWebEngineSettings.WebAttribute.LocalContentCanAccessFileUrls, True)
        view.setPage(self.page)
        view.setContextMenuPolicy(Qt.ContextMenuPolicy.NoContextMenu)
        self._wheel_forwarder = wheel_forwarder
        self._on_finished: LoadCallback | None = None
        self._tmp_path: str | None = None
        self._connected = False
        self._disposed = False

    def set_preferred_width(self, width: int) -> None:
        self.view.preferred_width = int(width)
        self.view.updateGeometry()

    def set_height(self, height: int) -> None:
        self.view.content_height = int(height)
        self.view.setFixedHeight(int(height))

    def load(self, document: str, base_url: str | None, on_finished: LoadCallback) -> None:
        self._on_finished = on_finished
        self.view.loadFinished.connect(self._load_finished)
        self._connected = True
        base = QUrl(base_url) if base_url else QUrl()
        if len(document.encode("utf-8")) < SET_HTML_LIMIT:
            self.view.setHtml(document, base)
            return
        fd, self._tmp_path = tempfile.mkstemp(prefix="notepile-", suffix=".html")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(document)
        self.view.load(QUrl.fromLocalFile(self._tmp_path))

    def _load_finished(self, ok: bool) -> None:
        if self._disposed or self._on_finished is None:
            return
        if ok and self._wheel_forwarder is not None:
            proxy = self.view.focusProxy()
            if proxy is not None:
                proxy.installEventFilter(self._wheel_forwarder)
        self._on_finished(ok)

    def inject_script(self, script: str, on_result: InjectCallback) -> None:
        if self._disposed:
            raise ScriptInjectionError("surface already disposed")

        def finished(result) -> None:
            # a throwing script completes with undefined
            if not self._disposed:
                on_result(result is True)

        try:
            self.page.runJavaScript(script, 0, finished)
        except RuntimeError as e:
            raise ScriptInjectionError(str(e)) from e

    def run_script(self, script: str) -> None:
        if not self._disposed:
            self.page.runJavaScript(script)

    def evaluate(self, script: str, callback: ResultCallback) -> None:
        if not self._disposed:
            self.page.runJavaScript(script, 0, callback)

    def set_message_handler(self, handler: MessageHandler | None) -> None:
        self.page.message_handler = handler

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._on_finished = None
        self.page.message_handler = None
        if self._connected:
            self.view.loadFinished.disconnect(self._load_finished)
            self._connected = False
        self.view.stop()
        self.view.hide()
        self.view.deleteLater()
        if self._tmp_path is not None:
            try:
                os.unlink(self._tmp_path)
            except OSError:
                logger.debug("could not remove %s", self._tmp_path)
            self._tmp_path = None


class QtSurfaceFactory(SurfaceFactory):
    """
    Creates one web view per note inside the note's card.

    ``wheel_target`` returns the widget that should receive wheel events
    (normally the list's scroll area viewport).
    """

    def __init__(self, wheel_target: Callable[[], QWidget | None] | None = None):
        self._forwarder = WheelForwarder(wheel_target) if wheel_target is not None else None

    def create(self, container) -> QtRenderSurface:
        view = NoteWebView()
        container.embed_view(view)
        return QtRenderSurface(view, self._forwarder)
